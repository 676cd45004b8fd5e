"""Pillar/Total Scoring Engine.

Aggregates question scores into weighted pillar scores and pillar scores
into a total score on the config's ``max_total_score`` scale.

Aggregation rules:
    pillar score      = sum(question_weight * question_score)
    pillar max score  = sum(question_weight * question_max_score)
    pillar percentage = pillar score / pillar max score * 100
    total             = sum(pillar_weight * pillar percentage / 100)
                        / sum(pillar_weight) * max_total_score

Configured questions that are unanswered score 0 but stay in the
denominator. Configured questions the wizard does not define, and questions
hidden by their conditional logic, are left out of both numerator and
denominator.

The engine owns its ScoringConfig by reference. ``update_config`` swaps the
reference and each calculation reads it once on entry, so a calculation
never mixes weights from two configs.
"""

from __future__ import annotations

import logging
from typing import AbstractSet, Dict, Iterable, List, Optional, Tuple

from conditions.evaluator import is_empty_answer
from conditions.models import AnswerSet, AnswerValue
from scoring.functions import compute_score, normalize_value
from scoring.models import (
    PillarScore,
    QuestionScoringConfig,
    ScoreResult,
    ScoringConfig,
    ScoringPreview,
    TotalScore,
)
from wizard.models import Question, WizardConfig
from wizard.visibility import is_question_answered, should_show_question

logger = logging.getLogger(__name__)

# Question weight above which an unanswered required question is "critical"
CRITICAL_QUESTION_WEIGHT = 0.3


def _round(value: float) -> float:
    return round(value, 2)


class ScoringEngine:
    """
    Scores answer sets against a ScoringConfig.

    Construct one per profile or per session; there is no module-level
    engine to reset between uses.
    """

    def __init__(
        self,
        config: ScoringConfig,
        wizard: Optional[WizardConfig] = None,
    ):
        """
        Initialize the scoring engine.

        Args:
            config: Scoring configuration to score against
            wizard: Wizard definition supplying question bounds, options and
                required flags. Without it, questions are scored with
                default bounds and no option weights.
        """
        self._config = config
        self._wizard = wizard
        self._questions: Dict[str, Question] = wizard.question_index() if wizard else {}

    @property
    def config(self) -> ScoringConfig:
        return self._config

    @property
    def wizard(self) -> Optional[WizardConfig]:
        return self._wizard

    def update_config(self, new_config: ScoringConfig) -> None:
        """Replace the scoring configuration (hot reload, profile switch)."""
        previous = self._config.version
        self._config = new_config
        logger.info(f"Scoring configuration updated from version {previous} to {new_config.version}")

    # -------------------------------------------------------------------------
    # Public API
    # -------------------------------------------------------------------------

    def calculate_question_score(
        self,
        question_id: str,
        value: AnswerValue,
        question: Optional[Question] = None,
    ) -> ScoreResult:
        """
        Score a single answer.

        The pillar comes from the question's own scoring metadata when that
        pillar configures the question, otherwise from the first pillar that
        does. An unconfigured question scores 0 with max score 0.
        """
        config = self._config
        question = question or self._questions.get(question_id)

        located = self._locate(config, question_id, question)
        if located is None:
            logger.warning(f"No scoring config found for question {question_id}; scoring 0")
            pillar = question.scoring.pillar if question is not None and question.scoring else ""
            return ScoreResult(
                question_id=question_id,
                raw_value=None if is_empty_answer(value) else value,
                pillar=pillar,
            )

        pillar_name, question_config = located
        return self._score_question(question_id, value, question, pillar_name, question_config)

    def calculate_pillar_score(self, pillar_name: str, answers: AnswerSet) -> PillarScore:
        """Weighted score of one pillar; unknown pillars score 0."""
        return self._pillar_score(self._config, pillar_name, answers, frozenset())

    def calculate_total_score(self, answers: AnswerSet) -> TotalScore:
        """Weighted total across every pillar of the config."""
        return self._total_score(self._config, answers, frozenset())

    def generate_scoring_preview(
        self,
        answers: AnswerSet,
        current_step_order: Optional[int] = None,
    ) -> ScoringPreview:
        """
        Current score plus the best score still reachable.

        The potential score assumes every visible, required, unanswered
        question in steps up to ``current_step_order`` (all steps when
        omitted) scores its maximum. Answered questions keep their score.

        Args:
            answers: Current answer set
            current_step_order: Order of the step the user is on

        Returns:
            ScoringPreview with current and potential scores and completion counts
        """
        config = self._config
        current = self._total_score(config, answers, frozenset())

        maxed = frozenset(q.id for q in self._open_required_questions(answers, current_step_order))
        potential = self._total_score(config, answers, maxed) if maxed else current

        question_ids = self._configured_question_ids(config)
        completed = sum(1 for qid in question_ids if not is_empty_answer(answers.get(qid)))
        total = len(question_ids)

        return ScoringPreview(
            current_score=current,
            potential_score=potential.total_score,
            progress_percentage=_round(completed / total * 100) if total else 0.0,
            completed_questions=completed,
            total_questions=total,
            missing_critical_questions=self._missing_critical_questions(config, answers),
        )

    # -------------------------------------------------------------------------
    # Aggregation
    # -------------------------------------------------------------------------

    def _locate(
        self,
        config: ScoringConfig,
        question_id: str,
        question: Optional[Question],
    ) -> Optional[Tuple[str, QuestionScoringConfig]]:
        if question is not None and question.scoring is not None:
            pillar = config.pillars.get(question.scoring.pillar)
            if pillar is not None and question_id in pillar.questions:
                return question.scoring.pillar, pillar.questions[question_id]
        return config.find_question_config(question_id)

    def _score_question(
        self,
        question_id: str,
        value: AnswerValue,
        question: Optional[Question],
        pillar_name: str,
        question_config: QuestionScoringConfig,
        at_maximum: bool = False,
    ) -> ScoreResult:
        if at_maximum:
            normalized = 1.0
            score = question_config.max_score
        else:
            normalized = normalize_value(value, question)
            score = compute_score(value, question_config, question)

        return ScoreResult(
            question_id=question_id,
            raw_value=None if is_empty_answer(value) else value,
            normalized_value=_round(normalized),
            score=_round(score),
            max_score=question_config.max_score,
            pillar=pillar_name,
        )

    def _pillar_score(
        self,
        config: ScoringConfig,
        pillar_name: str,
        answers: AnswerSet,
        maxed: AbstractSet[str],
    ) -> PillarScore:
        pillar_config = config.pillars.get(pillar_name)
        if pillar_config is None:
            logger.warning(f"Unknown pillar '{pillar_name}' for scoring config {config.version}")
            return PillarScore(pillar=pillar_name)

        question_scores: List[ScoreResult] = []
        weighted_score = 0.0
        weighted_max = 0.0

        for question_id, question_config in pillar_config.questions.items():
            question = self._questions.get(question_id)
            if question is None and self._wizard is not None:
                logger.warning(f"Question {question_id} not found in wizard config")
                continue
            if question is not None and not should_show_question(question, answers):
                continue

            result = self._score_question(
                question_id,
                answers.get(question_id),
                question,
                pillar_name,
                question_config,
                at_maximum=question_id in maxed,
            )
            question_scores.append(result)
            weighted_score += question_config.weight * result.score
            weighted_max += question_config.weight * question_config.max_score

        return PillarScore(
            pillar=pillar_name,
            score=_round(weighted_score),
            max_score=_round(weighted_max),
            percentage=_round(weighted_score / weighted_max * 100) if weighted_max > 0 else 0.0,
            question_scores=question_scores,
        )

    def _total_score(
        self,
        config: ScoringConfig,
        answers: AnswerSet,
        maxed: AbstractSet[str],
    ) -> TotalScore:
        pillar_scores: List[PillarScore] = []
        weighted_fraction = 0.0
        weight_total = 0.0

        for pillar_name, pillar_config in config.pillars.items():
            pillar_score = self._pillar_score(config, pillar_name, answers, maxed)
            pillar_scores.append(pillar_score)
            weighted_fraction += pillar_config.weight * pillar_score.percentage / 100
            weight_total += pillar_config.weight

        fraction = weighted_fraction / weight_total if weight_total > 0 else 0.0

        return TotalScore(
            total_score=_round(fraction * config.max_total_score),
            max_total_score=config.max_total_score,
            percentage=_round(fraction * 100),
            pillar_scores=pillar_scores,
            version=config.version,
        )

    # -------------------------------------------------------------------------
    # Preview helpers
    # -------------------------------------------------------------------------

    def _open_required_questions(
        self,
        answers: AnswerSet,
        current_step_order: Optional[int],
    ) -> Iterable[Question]:
        if self._wizard is None:
            return []
        return [
            question
            for step in self._wizard.ordered_steps()
            if current_step_order is None or step.order <= current_step_order
            for question in step.questions
            if question.required
            and should_show_question(question, answers)
            and not is_question_answered(question, answers)
        ]

    def _configured_question_ids(self, config: ScoringConfig) -> List[str]:
        if self._wizard is not None:
            return list(self._questions)
        return list(dict.fromkeys(config.configured_question_ids()))

    def _missing_critical_questions(self, config: ScoringConfig, answers: AnswerSet) -> List[str]:
        critical: List[str] = []
        for pillar_config in config.pillars.values():
            for question_id, question_config in pillar_config.questions.items():
                if question_config.weight <= CRITICAL_QUESTION_WEIGHT:
                    continue
                if not is_empty_answer(answers.get(question_id)):
                    continue
                question = self._questions.get(question_id)
                if (question is not None and question.required
                        and should_show_question(question, answers)
                        and question_id not in critical):
                    critical.append(question_id)
        return critical
