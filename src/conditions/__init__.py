"""Conditional logic for the assessment wizard.

Rule trees that decide which questions and steps are shown, enabled,
skipped or blocking for a given set of answers.
"""

from conditions.models import (
    AnswerSet,
    AnswerValue,
    ComparisonOperator,
    ComparisonRule,
    Condition,
    ConditionalGroup,
    EnhancedConditionalLogic,
    LogicalOperator,
    StepConditionalLogic,
)
from conditions.evaluator import (
    evaluate_condition,
    evaluate_group,
    evaluate_rule,
    is_empty_answer,
    should_show_step,
    should_skip_step,
    to_number,
)

__all__ = [
    "AnswerSet",
    "AnswerValue",
    "ComparisonOperator",
    "ComparisonRule",
    "Condition",
    "ConditionalGroup",
    "EnhancedConditionalLogic",
    "LogicalOperator",
    "StepConditionalLogic",
    "evaluate_condition",
    "evaluate_group",
    "evaluate_rule",
    "is_empty_answer",
    "should_show_step",
    "should_skip_step",
    "to_number",
]
