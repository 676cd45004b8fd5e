"""
Wizard configuration models.

Steps, questions and answer options for the assessment wizard, loaded once
from configuration (see ``config.config_loader``).
"""

from enum import Enum
from typing import Any, Dict, List, Optional, Union

from pydantic import Field, model_validator

from conditions.models import (
    Condition,
    ConfigModel,
    EnhancedConditionalLogic,
    StepConditionalLogic,
)


class QuestionType(str, Enum):
    """Types of wizard questions."""
    SINGLE_SELECT = "single_select"
    MULTI_SELECT = "multi_select"
    TEXT_INPUT = "text_input"
    NUMBER_INPUT = "number_input"
    SCALE_RATING = "scale_rating"
    YES_NO = "yes_no"
    PERCENTAGE = "percentage"
    CHECKBOX_GRID = "checkbox_grid"


SELECTION_TYPES = frozenset({
    QuestionType.SINGLE_SELECT,
    QuestionType.MULTI_SELECT,
    QuestionType.CHECKBOX_GRID,
})


class QuestionOption(ConfigModel):
    """A selectable option for select-type questions."""
    id: str
    label: str
    value: Union[str, int, float]
    description: Optional[str] = None
    weight: Optional[float] = Field(default=None, description="Scoring weight of this option")


class QuestionValidation(ConfigModel):
    """Declared answer bounds; ``min``/``max`` also drive linear scoring."""
    min: Optional[float] = None
    max: Optional[float] = None
    pattern: Optional[str] = None
    message: Optional[str] = None


class QuestionScoring(ConfigModel):
    """Scoring metadata declared on the question itself."""
    pillar: str
    weight: float = 1.0
    scoring_function: str = "linear"


class LegacyShowIf(ConfigModel):
    question_id: str
    value: Any = None


class LegacyConditionalLogic(ConfigModel):
    """Single-predicate visibility form used by older wizard configurations."""
    show_if: Optional[LegacyShowIf] = None


class Question(ConfigModel):
    """A single question in the wizard."""
    id: str
    step_id: Optional[str] = None
    type: QuestionType
    title: str = ""
    description: Optional[str] = None
    required: bool = False

    options: List[QuestionOption] = Field(default_factory=list)
    validation: Optional[QuestionValidation] = None
    scoring: Optional[QuestionScoring] = None

    conditional_logic: Optional[LegacyConditionalLogic] = None
    enhanced_conditional_logic: Optional[EnhancedConditionalLogic] = None

    def find_option(self, answer: Any) -> Optional[QuestionOption]:
        """Match an answer against option values or ids."""
        text = str(answer)
        for option in self.options:
            if str(option.value) == text or option.id == text:
                return option
        return None


class WizardStep(ConfigModel):
    """An ordered page of questions."""
    id: str
    title: str = ""
    description: str = ""
    order: int = Field(ge=1, description="1-based position in natural traversal order")
    questions: List[Question] = Field(default_factory=list)
    is_optional: bool = False
    estimated_time_minutes: Optional[int] = None
    conditional_logic: Optional[StepConditionalLogic] = None

    @model_validator(mode="before")
    @classmethod
    def _assign_step_ids(cls, data: Any) -> Any:
        """Questions nested under a step inherit its id."""
        if not isinstance(data, dict):
            return data
        step_id = data.get("id")
        questions = []
        for question in data.get("questions") or []:
            if isinstance(question, dict) and not (question.get("stepId") or question.get("step_id")):
                question = {**question, "stepId": step_id}
            questions.append(question)
        return {**data, "questions": questions}


class NavigationAction(str, Enum):
    """What a matching navigation rule does to the current step."""
    SKIP = "skip"
    REQUIRE = "require"
    SUGGEST = "suggest"
    BLOCK = "block"


class NavigationRule(ConfigModel):
    """Per-step navigation policy evaluated against the current answers."""
    condition: Condition
    action: str = Field(description="One of NavigationAction")
    target_step: Optional[str] = None
    message: Optional[str] = None


class WizardMetadata(ConfigModel):
    title: str = ""
    description: str = ""
    version: str = "1.0.0"
    estimated_time_minutes: Optional[int] = None


class WizardConfig(ConfigModel):
    """Complete wizard definition."""
    steps: List[WizardStep] = Field(default_factory=list)
    metadata: WizardMetadata = Field(default_factory=WizardMetadata)
    navigation_rules: Dict[str, List[NavigationRule]] = Field(
        default_factory=dict,
        description="Navigation rules keyed by step id, in evaluation order",
    )

    def ordered_steps(self) -> List[WizardStep]:
        return sorted(self.steps, key=lambda s: s.order)

    def get_step(self, step_id: str) -> Optional[WizardStep]:
        for step in self.steps:
            if step.id == step_id:
                return step
        return None

    def all_questions(self) -> List[Question]:
        return [q for step in self.ordered_steps() for q in step.questions]

    def question_index(self) -> Dict[str, Question]:
        return {q.id: q for q in self.all_questions()}

    def find_question(self, question_id: str) -> Optional[Question]:
        return self.question_index().get(question_id)
