"""Step Navigation Engine.

Applies navigation rules at step granularity and walks the wizard in the
order a user would actually traverse it.

Rules registered for a step are evaluated in registration order:

- ``skip``: the first matching skip rule chooses the next step (its target,
  or the next step in natural order) and records a skip message.
- ``block``: forbids moving forward, whatever the completion state.
- ``require``: forbids moving forward while the step is incomplete.
- ``suggest``: adds the target step to the suggestions.

Skip-target selection and block/require are independent: a later block or
require rule still overrides ``can_navigate_next`` after a skip matched.
Independently of rules, an incomplete step (a visible required question
without an answer) cannot be left forward.
"""

from __future__ import annotations

import logging
from dataclasses import asdict, dataclass, field
from typing import Any, Dict, Iterable, List, Optional

from conditions.evaluator import evaluate_condition
from conditions.models import AnswerSet
from wizard.models import NavigationAction, NavigationRule, WizardConfig, WizardStep
from wizard.visibility import get_unanswered_required_questions

logger = logging.getLogger(__name__)

DEFAULT_BLOCK_MESSAGE = "Cannot proceed to next step"
REQUIRE_MESSAGE = "Please complete all required fields"
INCOMPLETE_MESSAGE = "Please complete all required fields before continuing"

_PRIORITY_ORDER = {"high": 3, "medium": 2, "low": 1}


@dataclass
class StepNavigation:
    """Navigation decision for the current step."""
    can_navigate_next: bool = True
    can_navigate_previous: bool = True
    next_step_id: Optional[str] = None
    skip_message: Optional[str] = None
    block_message: Optional[str] = None
    suggested_steps: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class StepSuggestion:
    """A step worth visiting, with the reason it was suggested."""
    step: WizardStep
    reason: str
    priority: str = "medium"  # high, medium, low


class ConditionalNavigationEngine:
    """
    Evaluates per-step navigation rules.

    The rule registry is filled at startup and only read afterwards, so a
    single engine can serve many sessions.
    """

    def __init__(self, rules: Optional[Dict[str, List[NavigationRule]]] = None):
        self._navigation_rules: Dict[str, List[NavigationRule]] = {}
        for step_id, step_rules in (rules or {}).items():
            self.register_step_rules(step_id, step_rules)

    @classmethod
    def from_wizard(cls, wizard: WizardConfig) -> "ConditionalNavigationEngine":
        """Build an engine from the rules declared in a wizard config."""
        return cls(wizard.navigation_rules)

    def register_step_rules(self, step_id: str, rules: Iterable[NavigationRule]) -> None:
        """Register (replace) the navigation rules for a step."""
        self._navigation_rules[step_id] = list(rules)

    def get_step_rules(self, step_id: str) -> List[NavigationRule]:
        return list(self._navigation_rules.get(step_id, []))

    def evaluate_navigation(
        self,
        current_step: WizardStep,
        all_steps: List[WizardStep],
        answers: AnswerSet,
    ) -> StepNavigation:
        """Decide whether and where the user may move from ``current_step``."""
        navigation = StepNavigation(
            can_navigate_previous=self.get_previous_step(current_step, all_steps) is not None,
        )
        step_completed = self.is_step_completed(current_step, answers)

        for rule in self._navigation_rules.get(current_step.id, []):
            if not evaluate_condition(rule.condition, answers):
                continue

            if rule.action == NavigationAction.SKIP.value:
                if navigation.next_step_id is None:
                    target = rule.target_step
                    if target is None:
                        natural_next = self.get_next_step(current_step, all_steps)
                        target = natural_next.id if natural_next else None
                    navigation.next_step_id = target
                    navigation.skip_message = rule.message

            elif rule.action == NavigationAction.BLOCK.value:
                navigation.can_navigate_next = False
                navigation.block_message = rule.message or DEFAULT_BLOCK_MESSAGE

            elif rule.action == NavigationAction.REQUIRE.value:
                if not step_completed:
                    navigation.can_navigate_next = False
                    navigation.block_message = rule.message or REQUIRE_MESSAGE

            elif rule.action == NavigationAction.SUGGEST.value:
                if rule.target_step:
                    navigation.suggested_steps.append(rule.target_step)

            else:
                logger.warning(
                    f"Unknown navigation action '{rule.action}' on step {current_step.id}; rule ignored"
                )

        if not step_completed:
            navigation.can_navigate_next = False
            if navigation.block_message is None:
                navigation.block_message = INCOMPLETE_MESSAGE

        return navigation

    def is_step_completed(self, step: WizardStep, answers: AnswerSet) -> bool:
        """Every visible required question has a non-empty answer."""
        return not get_unanswered_required_questions(step, answers)

    def get_optimal_step_sequence(
        self,
        all_steps: List[WizardStep],
        answers: AnswerSet,
    ) -> List[WizardStep]:
        """
        Walk the wizard the way a user with these answers would.

        Starts at the step with order 1, follows skip targets, and otherwise
        moves to the next step in natural order. Stops when a
        step repeats or no next step exists.
        """
        steps_by_id = {step.id: step for step in all_steps}
        sequence: List[WizardStep] = []
        visited = set()

        current = next((step for step in all_steps if step.order == 1), None)
        while current is not None and current.id not in visited:
            visited.add(current.id)
            sequence.append(current)

            navigation = self.evaluate_navigation(current, all_steps, answers)
            if navigation.next_step_id:
                current = steps_by_id.get(navigation.next_step_id)
                if current is None:
                    logger.warning(f"Skip target '{navigation.next_step_id}' is not a known step")
            else:
                current = self.get_next_step(current, all_steps)

        return sequence

    def get_step_suggestions(
        self,
        current_answers: AnswerSet,
        all_steps: List[WizardStep],
    ) -> List[StepSuggestion]:
        """Steps that look relevant given the answers so far, most relevant first."""
        suggestions: List[StepSuggestion] = []

        for step in all_steps:
            navigation = self.evaluate_navigation(step, all_steps, current_answers)
            if navigation.suggested_steps:
                suggestions.append(StepSuggestion(
                    step=step,
                    reason="Based on your answers, this step may be particularly relevant",
                    priority="medium",
                ))

            answered_topics = [key.lower() for key in current_answers]
            related = [
                q for q in step.questions
                if any(topic in q.id or topic in q.title.lower() for topic in answered_topics)
            ]
            if related:
                suggestions.append(StepSuggestion(
                    step=step,
                    reason="Contains questions related to your current focus areas",
                    priority="low",
                ))

        return sorted(suggestions, key=lambda s: _PRIORITY_ORDER.get(s.priority, 0), reverse=True)

    @staticmethod
    def get_next_step(current_step: WizardStep, all_steps: List[WizardStep]) -> Optional[WizardStep]:
        """Next step in natural order."""
        ordered = sorted(all_steps, key=lambda s: s.order)
        for index, step in enumerate(ordered):
            if step.id == current_step.id:
                return ordered[index + 1] if index + 1 < len(ordered) else None
        return None

    @staticmethod
    def get_previous_step(current_step: WizardStep, all_steps: List[WizardStep]) -> Optional[WizardStep]:
        """Previous step in natural order."""
        ordered = sorted(all_steps, key=lambda s: s.order)
        for index, step in enumerate(ordered):
            if step.id == current_step.id:
                return ordered[index - 1] if index > 0 else None
        return None
