"""Question Visibility Resolver.

Decides whether a question is shown and enabled for the current answers.

A question's visibility comes from exactly one rule variant:

- ``EnhancedGroupVisibility`` when the question declares enhanced
  ``show_if``/``hide_if`` groups. Hide takes precedence over show.
- ``LegacyEqualityVisibility`` for the older single-predicate form.
- No rule at all: always visible.

Hidden questions never count towards step completion or scoring.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, List, Optional, Union

from conditions.evaluator import evaluate_group, is_empty_answer
from conditions.models import AnswerSet, ConditionalGroup
from wizard.models import Question, QuestionType, WizardStep


@dataclass(frozen=True)
class EnhancedGroupVisibility:
    """Visibility from enhanced show/hide groups."""
    show_if: Optional[ConditionalGroup] = None
    hide_if: Optional[ConditionalGroup] = None


@dataclass(frozen=True)
class LegacyEqualityVisibility:
    """Visibility from the legacy ``showIf: {questionId, value}`` predicate."""
    question_id: str
    value: Any


VisibilityRule = Union[EnhancedGroupVisibility, LegacyEqualityVisibility]


def visibility_rule_for(question: Question) -> Optional[VisibilityRule]:
    """Pick the visibility variant for a question, enhanced over legacy."""
    enhanced = question.enhanced_conditional_logic
    if enhanced is not None and (enhanced.show_if is not None or enhanced.hide_if is not None):
        return EnhancedGroupVisibility(show_if=enhanced.show_if, hide_if=enhanced.hide_if)

    legacy = question.conditional_logic
    if legacy is not None and legacy.show_if is not None:
        return LegacyEqualityVisibility(
            question_id=legacy.show_if.question_id,
            value=legacy.show_if.value,
        )
    return None


def _legacy_matches(rule: LegacyEqualityVisibility, answers: AnswerSet) -> bool:
    answer = answers.get(rule.question_id)
    if isinstance(rule.value, (list, tuple)):
        if isinstance(answer, (list, tuple)):
            return any(v in answer for v in rule.value)
        return answer in rule.value
    return answer == rule.value


def resolve_visibility(rule: Optional[VisibilityRule], answers: AnswerSet) -> bool:
    """Evaluate a visibility rule; ``None`` means visible."""
    if rule is None:
        return True
    if isinstance(rule, EnhancedGroupVisibility):
        if rule.hide_if is not None and evaluate_group(rule.hide_if, answers):
            return False
        if rule.show_if is not None:
            return evaluate_group(rule.show_if, answers)
        return True
    return _legacy_matches(rule, answers)


def should_show_question(question: Question, answers: AnswerSet) -> bool:
    """Whether the question is currently visible."""
    return resolve_visibility(visibility_rule_for(question), answers)


def should_enable_question(question: Question, answers: AnswerSet) -> bool:
    """Whether the question is currently enabled; disable wins over enable."""
    logic = question.enhanced_conditional_logic
    if logic is None:
        return True
    if logic.disable_if is not None and evaluate_group(logic.disable_if, answers):
        return False
    if logic.enable_if is not None:
        return evaluate_group(logic.enable_if, answers)
    return True


def get_visible_questions(step: WizardStep, answers: AnswerSet) -> List[Question]:
    """Questions of ``step`` that are visible for the current answers."""
    return [q for q in step.questions if should_show_question(q, answers)]


def get_enabled_questions(step: WizardStep, answers: AnswerSet) -> List[Question]:
    """Visible questions of ``step`` that are also enabled."""
    return [q for q in get_visible_questions(step, answers) if should_enable_question(q, answers)]


def is_question_answered(question: Question, answers: AnswerSet) -> bool:
    """A required answer must be non-empty; multi-select needs one item."""
    answer = answers.get(question.id)
    if is_empty_answer(answer):
        return False
    if question.type == QuestionType.MULTI_SELECT and isinstance(answer, (list, tuple)):
        return len(answer) > 0
    return True


def get_applicable_required_questions(step: WizardStep, answers: AnswerSet) -> List[Question]:
    """Required questions of ``step`` that are visible right now."""
    return [q for q in get_visible_questions(step, answers) if q.required]


def get_unanswered_required_questions(step: WizardStep, answers: AnswerSet) -> List[Question]:
    """Visible required questions still lacking an answer."""
    return [
        q for q in get_applicable_required_questions(step, answers)
        if not is_question_answered(q, answers)
    ]
