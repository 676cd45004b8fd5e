"""Adaptive scoring for the assessment wizard.

Converts answers into weighted per-pillar and total readiness scores using
pluggable scoring functions (linear, exponential, threshold, weighted).
"""

from scoring.models import (
    PillarScore,
    QuestionScoringConfig,
    ScoreResult,
    ScoringConfig,
    ScoringFunction,
    ScoringPreview,
    TotalScore,
)
from scoring.functions import compute_score, normalize_value
from scoring.engine import ScoringEngine

__all__ = [
    "PillarScore",
    "QuestionScoringConfig",
    "ScoreResult",
    "ScoringConfig",
    "ScoringFunction",
    "ScoringPreview",
    "TotalScore",
    "compute_score",
    "normalize_value",
    "ScoringEngine",
]
