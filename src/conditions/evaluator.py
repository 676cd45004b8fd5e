"""Condition Evaluator.

Evaluates comparison rules and boolean rule groups against an answer set.

Every visibility and navigation decision funnels through here, so the
operator semantics are fixed:

- String comparisons are case-insensitive unless ``case_sensitive`` is set.
- Numeric operators parse both sides as floats. Anything that does not parse
  becomes NaN, and NaN comparisons are always False.
- ``contains``/``not_contains`` test list membership for list answers and
  substring containment otherwise.
- ``in``/``not_in`` require the rule value to be a list.
- Unknown operators never match. They are logged, never raised.

All functions are pure; the answer set is never modified.
"""

from __future__ import annotations

import logging
import math
from typing import Any, Callable, Dict, Optional, Union

from conditions.models import (
    AnswerSet,
    ComparisonOperator,
    ComparisonRule,
    ConditionalGroup,
    LogicalOperator,
    StepConditionalLogic,
)

logger = logging.getLogger(__name__)


# =============================================================================
# ANSWER COERCION
# =============================================================================

def is_empty_answer(answer: Any) -> bool:
    """True for a missing answer, an empty string or an empty list."""
    if answer is None:
        return True
    if isinstance(answer, str):
        return answer == ""
    if isinstance(answer, (list, tuple)):
        return len(answer) == 0
    return False


def to_number(value: Any) -> float:
    """
    Coerce an answer to a float.

    Booleans become 1/0, numeric strings are parsed, and everything else
    (missing, empty, lists, free text) becomes NaN.
    """
    if isinstance(value, bool):
        return 1.0 if value else 0.0
    if isinstance(value, (int, float)):
        return float(value)
    if isinstance(value, str):
        text = value.strip()
        if not text:
            return math.nan
        try:
            return float(text)
        except ValueError:
            return math.nan
    return math.nan


def _normalize(value: Any, case_sensitive: bool) -> Any:
    if isinstance(value, str) and not case_sensitive:
        return value.lower()
    if isinstance(value, (list, tuple)):
        return [_normalize(item, case_sensitive) for item in value]
    return value


def _same(left: Any, right: Any) -> bool:
    """Strict equality: a boolean never equals a number or a string."""
    if isinstance(left, bool) != isinstance(right, bool):
        return False
    if isinstance(left, str) != isinstance(right, str):
        return False
    return left == right


def _as_text(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


# =============================================================================
# OPERATORS
# =============================================================================

def _equals(answer: Any, expected: Any, rule: ComparisonRule) -> bool:
    return _same(_normalize(answer, rule.case_sensitive), _normalize(expected, rule.case_sensitive))


def _contains(answer: Any, expected: Any, rule: ComparisonRule) -> bool:
    target = _normalize(expected, rule.case_sensitive)
    if isinstance(answer, (list, tuple)):
        return any(_same(_normalize(item, rule.case_sensitive), target) for item in answer)
    return _as_text(target) in _as_text(_normalize(answer, rule.case_sensitive))


def _in(answer: Any, expected: Any, rule: ComparisonRule) -> bool:
    if not isinstance(expected, (list, tuple)):
        return False
    normalized_answer = _normalize(answer, rule.case_sensitive)
    return any(_same(_normalize(option, rule.case_sensitive), normalized_answer) for option in expected)


def _numeric(compare: Callable[[float, float], bool]) -> Callable[[Any, Any, ComparisonRule], bool]:
    def _apply(answer: Any, expected: Any, rule: ComparisonRule) -> bool:
        return compare(to_number(answer), to_number(expected))
    return _apply


_OPERATORS: Dict[str, Callable[[Any, Any, ComparisonRule], bool]] = {
    ComparisonOperator.EQUALS.value: _equals,
    ComparisonOperator.NOT_EQUALS.value: lambda a, e, r: not _equals(a, e, r),
    ComparisonOperator.GREATER_THAN.value: _numeric(lambda a, e: a > e),
    ComparisonOperator.LESS_THAN.value: _numeric(lambda a, e: a < e),
    ComparisonOperator.GREATER_THAN_OR_EQUAL.value: _numeric(lambda a, e: a >= e),
    ComparisonOperator.LESS_THAN_OR_EQUAL.value: _numeric(lambda a, e: a <= e),
    ComparisonOperator.CONTAINS.value: _contains,
    ComparisonOperator.NOT_CONTAINS.value: lambda a, e, r: not _contains(a, e, r),
    ComparisonOperator.IN.value: _in,
    ComparisonOperator.NOT_IN.value: lambda a, e, r: not _in(a, e, r),
    ComparisonOperator.IS_EMPTY.value: lambda a, e, r: is_empty_answer(a),
    ComparisonOperator.IS_NOT_EMPTY.value: lambda a, e, r: not is_empty_answer(a),
}


def is_known_operator(operator: str) -> bool:
    """Whether ``operator`` is a supported comparison operator."""
    return operator in _OPERATORS


# =============================================================================
# EVALUATION
# =============================================================================

def evaluate_rule(rule: ComparisonRule, answers: AnswerSet) -> bool:
    """Evaluate a single comparison rule against the answer set."""
    apply = _OPERATORS.get(rule.operator)
    if apply is None:
        logger.warning(
            f"Unknown comparison operator '{rule.operator}' on question {rule.question_id}; "
            "treating condition as not met"
        )
        return False
    return apply(answers.get(rule.question_id), rule.value, rule)


def evaluate_group(group: ConditionalGroup, answers: AnswerSet) -> bool:
    """
    Evaluate a rule group recursively.

    All member rules and nested groups are evaluated, then combined with
    ``all()`` for 'and' or ``any()`` for 'or'. A group with no members is
    True so that an unconfigured condition never blocks the wizard.
    """
    results = [evaluate_rule(rule, answers) for rule in group.rules]
    results.extend(evaluate_group(nested, answers) for nested in group.groups)

    if not results:
        return True

    if group.operator == LogicalOperator.AND.value:
        return all(results)
    if group.operator == LogicalOperator.OR.value:
        return any(results)

    logger.warning(f"Unknown logical operator '{group.operator}'; treating group as not met")
    return False


def evaluate_condition(
    condition: Union[ComparisonRule, ConditionalGroup],
    answers: AnswerSet,
) -> bool:
    """Evaluate either variant of a condition."""
    if isinstance(condition, ComparisonRule):
        return evaluate_rule(condition, answers)
    return evaluate_group(condition, answers)


def should_skip_step(step_logic: Optional[StepConditionalLogic], answers: AnswerSet) -> bool:
    """True when the step's ``skip_if`` group is configured and met."""
    if step_logic is None or step_logic.skip_if is None:
        return False
    return evaluate_group(step_logic.skip_if, answers)


def should_show_step(step_logic: Optional[StepConditionalLogic], answers: AnswerSet) -> bool:
    """True unless the step's ``show_if`` group is configured and not met."""
    if step_logic is None or step_logic.show_if is None:
        return True
    return evaluate_group(step_logic.show_if, answers)
