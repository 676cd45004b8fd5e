"""Assessment Wizard Module.

Step and question configuration for the assessment wizard, plus the
decisions made over it:
- Question visibility and enablement from conditional logic
- Step completion checks
- Conditional step navigation (skip, require, suggest, block)
- The traversal path a user follows given their answers
"""

from wizard.models import (
    NavigationAction,
    NavigationRule,
    Question,
    QuestionOption,
    QuestionType,
    WizardConfig,
    WizardStep,
)
from wizard.visibility import (
    get_visible_questions,
    should_enable_question,
    should_show_question,
)
from wizard.navigation import (
    ConditionalNavigationEngine,
    StepNavigation,
    StepSuggestion,
)

__all__ = [
    "NavigationAction",
    "NavigationRule",
    "Question",
    "QuestionOption",
    "QuestionType",
    "WizardConfig",
    "WizardStep",
    "get_visible_questions",
    "should_enable_question",
    "should_show_question",
    "ConditionalNavigationEngine",
    "StepNavigation",
    "StepSuggestion",
]
