"""Pytest configuration and fixtures for the assessment test suite."""

from pathlib import Path

import pytest

from config.config_loader import load_wizard_config, parse_scoring_config
from scoring.engine import ScoringEngine
from wizard.models import WizardConfig

CONFIG_DIR = Path(__file__).parent.parent / "src" / "config"


@pytest.fixture
def assessment_wizard() -> WizardConfig:
    """The bundled AI readiness wizard."""
    return load_wizard_config(CONFIG_DIR / "wizards" / "assessment.yaml")


@pytest.fixture
def small_wizard() -> WizardConfig:
    """Three-step wizard with one conditional question per step."""
    return WizardConfig.model_validate({
        "steps": [
            {
                "id": "profile",
                "order": 1,
                "questions": [
                    {
                        "id": "team_size",
                        "type": "number_input",
                        "required": True,
                        "validation": {"min": 0, "max": 100},
                        "scoring": {"pillar": "people"},
                    },
                    {
                        "id": "has_data_team",
                        "type": "yes_no",
                        "required": True,
                        "scoring": {"pillar": "people"},
                    },
                    {
                        "id": "data_team_size",
                        "type": "number_input",
                        "required": True,
                        "validation": {"min": 0, "max": 20},
                        "enhancedConditionalLogic": {
                            "showIf": {
                                "operator": "and",
                                "rules": [{"questionId": "has_data_team", "operator": "equals", "value": "yes"}],
                            },
                        },
                        "scoring": {"pillar": "people"},
                    },
                ],
            },
            {
                "id": "platform",
                "order": 2,
                "questions": [
                    {
                        "id": "maturity",
                        "type": "scale_rating",
                        "required": True,
                        "validation": {"min": 1, "max": 10},
                        "scoring": {"pillar": "platform"},
                    },
                    {
                        "id": "hosting",
                        "type": "single_select",
                        "required": False,
                        "options": [
                            {"id": "on_premise", "label": "On premise", "value": "on_premise", "weight": 2},
                            {"id": "cloud", "label": "Cloud", "value": "cloud", "weight": 10},
                        ],
                        "scoring": {"pillar": "platform", "scoringFunction": "weighted"},
                    },
                ],
            },
            {
                "id": "operations",
                "order": 3,
                "questions": [
                    {"id": "on_call", "type": "yes_no", "required": False},
                ],
            },
        ],
    })


@pytest.fixture
def small_scoring_data() -> dict:
    """Scoring config matching ``small_wizard``, as plain data."""
    return {
        "version": "test-1",
        "maxTotalScore": 100,
        "pillars": {
            "people": {
                "weight": 0.5,
                "questions": {
                    "team_size": {"weight": 0.5, "scoringFunction": "linear", "maxScore": 10},
                    "data_team_size": {"weight": 0.5, "scoringFunction": "linear", "maxScore": 10},
                },
            },
            "platform": {
                "weight": 0.5,
                "questions": {
                    "maturity": {"weight": 0.6, "scoringFunction": "linear", "maxScore": 10},
                    "hosting": {"weight": 0.4, "scoringFunction": "weighted", "maxScore": 10},
                },
            },
        },
    }


@pytest.fixture
def small_scoring_config(small_scoring_data):
    return parse_scoring_config(small_scoring_data)


@pytest.fixture
def small_engine(small_scoring_config, small_wizard) -> ScoringEngine:
    return ScoringEngine(small_scoring_config, small_wizard)
