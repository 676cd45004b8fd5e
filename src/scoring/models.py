"""
Scoring configuration and result models.

A ScoringConfig is immutable: switching profiles (enterprise, startup, a
hot-reloaded custom file) means replacing the whole object. Weight sums are
a modeling convention; the engine accepts configs that do not add up to 1.0.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple

from pydantic import Field

from conditions.models import ConfigModel


class ScoringFunction(str, Enum):
    """Numeric transforms from an answer to a bounded score."""
    LINEAR = "linear"
    EXPONENTIAL = "exponential"
    THRESHOLD = "threshold"
    WEIGHTED = "weighted"


class ThresholdBucket(ConfigModel):
    min: float
    max: float
    score: float


class ThresholdConfig(ConfigModel):
    thresholds: List[ThresholdBucket] = Field(default_factory=list)


class ExponentialConfig(ConfigModel):
    base: float
    multiplier: float
    offset: float = 0.0


class QuestionScoringConfig(ConfigModel):
    """How one question contributes to its pillar."""
    weight: float = Field(description="Weight within the pillar")
    scoring_function: str = Field(description="One of ScoringFunction")
    max_score: float = Field(description="Upper bound of the question score")
    threshold_config: Optional[ThresholdConfig] = None
    exponential_config: Optional[ExponentialConfig] = None


class PillarScoringConfig(ConfigModel):
    weight: float = Field(description="Weight of the pillar within the total")
    questions: Dict[str, QuestionScoringConfig] = Field(default_factory=dict)


class ScoringConfig(ConfigModel):
    """Complete scoring configuration for one organization profile."""
    version: str
    max_total_score: float = 100.0
    pillars: Dict[str, PillarScoringConfig] = Field(default_factory=dict)

    def find_question_config(
        self, question_id: str
    ) -> Optional[Tuple[str, QuestionScoringConfig]]:
        """First pillar that configures ``question_id``, with its config."""
        for pillar_name, pillar in self.pillars.items():
            if question_id in pillar.questions:
                return pillar_name, pillar.questions[question_id]
        return None

    def configured_question_ids(self) -> List[str]:
        return [qid for pillar in self.pillars.values() for qid in pillar.questions]


# =============================================================================
# RESULTS
# =============================================================================

class ScoreResult(ConfigModel):
    """Score of a single question."""
    question_id: str
    raw_value: Any = None
    normalized_value: float = 0.0
    score: float = 0.0
    max_score: float = 0.0
    pillar: str = ""


class PillarScore(ConfigModel):
    pillar: str
    score: float = 0.0
    max_score: float = 0.0
    percentage: float = 0.0
    question_scores: List[ScoreResult] = Field(default_factory=list)


class TotalScore(ConfigModel):
    total_score: float = 0.0
    max_total_score: float = 0.0
    percentage: float = 0.0
    pillar_scores: List[PillarScore] = Field(default_factory=list)
    calculated_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    version: str = ""

    def get_pillar(self, pillar: str) -> Optional[PillarScore]:
        for pillar_score in self.pillar_scores:
            if pillar_score.pillar == pillar:
                return pillar_score
        return None


class ScoringPreview(ConfigModel):
    """Live score preview shown while the wizard is in progress."""
    current_score: TotalScore
    potential_score: float = 0.0
    progress_percentage: float = 0.0
    completed_questions: int = 0
    total_questions: int = 0
    missing_critical_questions: List[str] = Field(default_factory=list)
