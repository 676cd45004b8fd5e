"""Scoring Function Library.

Pure numeric transforms from a raw answer to a score in ``[0, max_score]``.

Answers are first normalized to ``0..1`` according to the question type:
    - scale_rating / number_input: ``(v - min) / (max - min)`` with bounds
      from the question's validation block (1..10 when undeclared)
    - percentage: ``v / 100``
    - yes_no: 1 for yes/True, otherwise 0
    - single/multi select: matched option weight over the best weight

Missing, empty or non-numeric answers score 0. They still count in the
pillar denominator, so partial completion under-reports readiness rather
than over-reporting it.

Misconfigured questions (unknown function name, missing threshold or
exponential parameters) also score 0 and are logged, never raised.
"""

from __future__ import annotations

import logging
import math
from typing import Any, Optional, Tuple

from conditions.evaluator import is_empty_answer, to_number
from scoring.models import QuestionScoringConfig, ScoringFunction
from wizard.models import Question, QuestionType, SELECTION_TYPES

logger = logging.getLogger(__name__)

DEFAULT_MIN = 1.0
DEFAULT_MAX = 10.0


def _clamp(value: float, lower: float, upper: float) -> float:
    if math.isnan(value):
        return lower
    return max(lower, min(upper, value))


def _bounds(question: Optional[Question]) -> Tuple[float, float]:
    """Linear bounds declared on the question, 1..10 when missing."""
    if question is not None and question.type == QuestionType.PERCENTAGE:
        lower, upper = 0.0, 100.0
    else:
        lower, upper = DEFAULT_MIN, DEFAULT_MAX
    if question is not None and question.validation is not None:
        if question.validation.min is not None:
            lower = question.validation.min
        if question.validation.max is not None:
            upper = question.validation.max
    return lower, upper


def option_weight_ratio(value: Any, question: Optional[Question]) -> float:
    """
    Weight of the selected option(s) relative to the best achievable weight.

    Single answers are matched by option value or id and divided by the
    largest option weight. List answers sum the selected weights and divide
    by the sum of all option weights.
    """
    if question is None or not question.options:
        return 0.0

    weights = [option.weight or 0.0 for option in question.options]

    if isinstance(value, (list, tuple)):
        selected = 0.0
        for item in value:
            option = question.find_option(item)
            if option is not None:
                selected += option.weight or 0.0
        total = sum(weights)
        return _clamp(selected / total, 0.0, 1.0) if total > 0 else 0.0

    option = question.find_option(value)
    best = max(weights)
    if option is None or best <= 0:
        return 0.0
    return _clamp((option.weight or 0.0) / best, 0.0, 1.0)


def normalize_value(value: Any, question: Optional[Question]) -> float:
    """Normalize an answer to 0..1 according to its question type."""
    if is_empty_answer(value):
        return 0.0

    question_type = question.type if question is not None else None

    if question_type in SELECTION_TYPES:
        return option_weight_ratio(value, question)

    if question_type == QuestionType.YES_NO:
        if isinstance(value, bool):
            return 1.0 if value else 0.0
        return 1.0 if str(value).strip().lower() in ("yes", "true") else 0.0

    number = to_number(value)
    if math.isnan(number):
        return 0.0

    lower, upper = _bounds(question)
    if upper <= lower:
        return 0.0
    return _clamp((number - lower) / (upper - lower), 0.0, 1.0)


def linear_score(normalized: float, config: QuestionScoringConfig) -> float:
    """Directly proportional mapping."""
    return _clamp(normalized * config.max_score, 0.0, config.max_score)


def weighted_score(value: Any, question: Optional[Question], config: QuestionScoringConfig) -> float:
    """Option weight over the best option weight, scaled to max score."""
    if question is None:
        logger.warning("Weighted scoring needs the question's options; scoring 0")
        return 0.0
    return _clamp(option_weight_ratio(value, question) * config.max_score, 0.0, config.max_score)


def exponential_score(normalized: float, config: QuestionScoringConfig) -> float:
    """
    Reward high values disproportionately.

    ``base ** (n * multiplier) + offset`` divided by its value at n = 1,
    scaled to max score and capped.
    """
    params = config.exponential_config
    if params is None:
        logger.warning("Exponential scoring configured without exponential_config; scoring 0")
        return 0.0
    if params.base <= 0:
        logger.warning(f"Exponential base must be positive, got {params.base}; scoring 0")
        return 0.0

    try:
        raw = params.base ** (normalized * params.multiplier) + params.offset
        ceiling = params.base ** params.multiplier + params.offset
    except OverflowError:
        # Offset is negligible at this magnitude
        ratio = params.base ** ((normalized - 1.0) * params.multiplier)
        return _clamp(ratio * config.max_score, 0.0, config.max_score)

    if ceiling <= 0:
        logger.warning("Exponential ceiling is not positive; scoring 0")
        return 0.0
    return _clamp(raw / ceiling * config.max_score, 0.0, config.max_score)


def _threshold_input(value: Any) -> float:
    """List answers count their selections; everything else is parsed."""
    if isinstance(value, (list, tuple)):
        return float(len(value))
    return to_number(value)


def threshold_score(value: Any, config: QuestionScoringConfig) -> float:
    """Score of the first bucket, in declaration order, containing the value."""
    params = config.threshold_config
    if params is None or not params.thresholds:
        logger.warning("Threshold scoring configured without thresholds; scoring 0")
        return 0.0

    number = _threshold_input(value)
    if math.isnan(number):
        return 0.0

    for bucket in params.thresholds:
        if bucket.min <= number <= bucket.max:
            return _clamp(bucket.score, 0.0, config.max_score)
    return 0.0


def compute_score(
    value: Any,
    config: QuestionScoringConfig,
    question: Optional[Question] = None,
) -> float:
    """
    Score one answer with the function named in ``config``.

    Args:
        value: Raw answer value
        config: Scoring config of the question
        question: Question definition (bounds, options); optional for
            functions that do not need it

    Returns:
        Score in ``[0, config.max_score]``
    """
    if is_empty_answer(value) or config.max_score <= 0:
        return 0.0

    function = config.scoring_function
    if function == ScoringFunction.LINEAR.value:
        return linear_score(normalize_value(value, question), config)
    if function == ScoringFunction.WEIGHTED.value:
        return weighted_score(value, question, config)
    if function == ScoringFunction.EXPONENTIAL.value:
        return exponential_score(normalize_value(value, question), config)
    if function == ScoringFunction.THRESHOLD.value:
        return threshold_score(value, config)

    logger.warning(f"Unknown scoring function '{function}'; scoring 0")
    return 0.0
