"""
Scoring profiles.

Bundled scoring configs for different organization types, loaded from the
YAML files in ``config/scoring_profiles``:
- default:    balanced weighting
- enterprise: heavier security weighting, compliance scored by framework count
- startup:    heavier business weighting, exponential reward for AI adoption

Usage:
    from scoring.profiles import create_scoring_engine

    engine = create_scoring_engine(answers, wizard)
    total = engine.calculate_total_score(answers)
"""

from __future__ import annotations

import logging
from functools import lru_cache
from typing import Optional

from conditions.models import AnswerSet
from config.config_loader import load_scoring_config
from config.settings import get_settings
from scoring.engine import ScoringEngine
from scoring.models import ScoringConfig
from wizard.models import WizardConfig

logger = logging.getLogger(__name__)

DEFAULT_PROFILE = "default"
ENTERPRISE_PROFILE = "enterprise"
STARTUP_PROFILE = "startup"

PROFILES = (DEFAULT_PROFILE, ENTERPRISE_PROFILE, STARTUP_PROFILE)

# Industries scored with the enterprise profile regardless of size
REGULATED_INDUSTRIES = frozenset({"finance", "healthcare"})


@lru_cache(maxsize=None)
def get_profile(name: str) -> ScoringConfig:
    """Load a bundled scoring profile by name."""
    path = get_settings().scoring_profiles_dir / f"{name}.yaml"
    return load_scoring_config(path)


def get_default_config() -> ScoringConfig:
    return get_profile(DEFAULT_PROFILE)


def get_enterprise_config() -> ScoringConfig:
    return get_profile(ENTERPRISE_PROFILE)


def get_startup_config() -> ScoringConfig:
    return get_profile(STARTUP_PROFILE)


def select_profile(answers: AnswerSet) -> str:
    """
    Pick the profile name for an organization.

    Enterprises and regulated industries get the enterprise profile,
    startups the startup profile, everyone else the configured default.
    """
    company_size = answers.get("company_size")
    industry = answers.get("industry")

    if company_size == "enterprise" or industry in REGULATED_INDUSTRIES:
        return ENTERPRISE_PROFILE
    if company_size == "startup":
        return STARTUP_PROFILE
    return get_settings().default_profile


def select_scoring_config(answers: AnswerSet) -> ScoringConfig:
    """Scoring config matching the organization described by the answers."""
    return get_profile(select_profile(answers))


def create_scoring_engine(
    answers: Optional[AnswerSet] = None,
    wizard: Optional[WizardConfig] = None,
) -> ScoringEngine:
    """
    Build a scoring engine for one session.

    A custom scoring config named by the settings takes precedence over the
    bundled profiles.
    """
    custom_path = get_settings().scoring_config_path
    if custom_path is not None:
        config = load_scoring_config(custom_path)
    else:
        config = select_scoring_config(answers or {})
    logger.debug(f"Scoring engine created with config version {config.version}")
    return ScoringEngine(config, wizard)


def clear_profile_cache() -> None:
    """Clear the loaded profiles (useful for testing)."""
    get_profile.cache_clear()
