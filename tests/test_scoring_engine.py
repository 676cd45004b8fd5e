"""
Tests for the pillar/total scoring engine and scoring profiles.

These tests verify:
1. Question, pillar and total aggregation
2. Empty answers and unknown pillars/questions
3. The live scoring preview
4. Config replacement and profile selection
"""

import pytest

from config.config_loader import parse_scoring_config
from config.settings import get_settings
from scoring.engine import ScoringEngine
from scoring.profiles import (
    DEFAULT_PROFILE,
    ENTERPRISE_PROFILE,
    STARTUP_PROFILE,
    create_scoring_engine,
    get_default_config,
    get_enterprise_config,
    get_startup_config,
    select_profile,
    select_scoring_config,
)


def two_pillar_config():
    """Two equally weighted pillars with one question each."""
    return parse_scoring_config({
        "version": "two-pillar",
        "maxTotalScore": 100,
        "pillars": {
            "a": {"weight": 0.5, "questions": {"qa": {"weight": 1.0, "scoringFunction": "linear", "maxScore": 10}}},
            "b": {"weight": 0.5, "questions": {"qb": {"weight": 1.0, "scoringFunction": "linear", "maxScore": 10}}},
        },
    })


BEST_ANSWERS = {
    "company_size": "enterprise",
    "company_type": "technical",
    "industry": "technology",
    "current_ai_usage": "production",
    "ai_use_cases": ["support", "analytics"],
    "tech_stack_maturity": 10,
    "api_architecture": "platform",
    "cloud_infrastructure": "public_cloud",
    "cloud_provider": "aws",
    "data_infrastructure": "platform",
    "version_control": "yes",
    "code_quality": 10,
    "security_practices": ["sso", "mfa", "encryption", "audits"],
    "compliance_requirements": ["soc2", "iso27001", "gdpr"],
    "data_sensitivity": "public",
    "monitoring_capabilities": "full",
    "deployment_automation": "ci_cd",
    "incident_response": 10,
}


class TestTotalScore:
    """Tests for pillar and total aggregation."""

    def test_equal_pillars_midpoint(self):
        """Test: pillar percentages 100 and 50 give a total of 75."""
        engine = ScoringEngine(two_pillar_config())
        total = engine.calculate_total_score({"qa": 10, "qb": 5.5})

        assert total.get_pillar("a").percentage == 100.0
        assert total.get_pillar("b").percentage == 50.0
        assert total.total_score == 75.0
        assert total.percentage == 75.0
        assert total.max_total_score == 100
        assert total.version == "two-pillar"

    def test_empty_answers(self):
        """Test: no answers score 0 but still report every pillar."""
        config = get_default_config()
        total = ScoringEngine(config).calculate_total_score({})

        assert total.total_score == 0
        assert total.percentage == 0
        assert len(total.pillar_scores) == len(config.pillars)

    def test_small_wizard_total(self, small_engine):
        answers = {"team_size": 100, "has_data_team": "yes", "maturity": 10, "hosting": "cloud"}
        total = small_engine.calculate_total_score(answers)

        people = total.get_pillar("people")
        assert people.score == 5.0
        assert people.max_score == 10.0
        assert people.percentage == 50.0
        assert total.get_pillar("platform").percentage == 100.0
        assert total.total_score == 75.0

    def test_hidden_questions_are_excluded(self, small_engine):
        """Test: a question hidden by its conditional logic leaves the pillar entirely."""
        answers = {"team_size": 100, "has_data_team": "no", "maturity": 10, "hosting": "cloud"}
        total = small_engine.calculate_total_score(answers)

        people = total.get_pillar("people")
        assert people.score == 5.0
        assert people.max_score == 5.0
        assert people.percentage == 100.0
        assert [q.question_id for q in people.question_scores] == ["team_size"]
        assert total.total_score == 100.0

    def test_unanswered_questions_stay_in_denominator(self, small_engine):
        pillar = small_engine.calculate_pillar_score("platform", {"maturity": 10})
        assert pillar.score == 6.0
        assert pillar.max_score == 10.0
        assert pillar.percentage == 60.0
        assert [q.question_id for q in pillar.question_scores] == ["maturity", "hosting"]

    def test_questions_missing_from_wizard_are_excluded(self, small_scoring_data, small_wizard):
        small_scoring_data["pillars"]["people"]["questions"]["ghost"] = {
            "weight": 0.5, "scoringFunction": "linear", "maxScore": 10,
        }
        config = parse_scoring_config(small_scoring_data)
        answers = {"team_size": 100, "has_data_team": "yes", "data_team_size": 20}

        with_wizard = ScoringEngine(config, small_wizard).calculate_pillar_score("people", answers)
        without_wizard = ScoringEngine(config).calculate_pillar_score("people", answers)

        assert with_wizard.percentage == 100.0
        assert "ghost" not in [q.question_id for q in with_wizard.question_scores]
        assert without_wizard.max_score == 15.0

    def test_unnormalized_pillar_weights(self):
        """Test: totals stay on the max_total_score scale when weights do not sum to 1."""
        config = parse_scoring_config({
            "version": "heavy",
            "maxTotalScore": 50,
            "pillars": {
                "a": {"weight": 0.8, "questions": {"qa": {"weight": 1.0, "scoringFunction": "linear", "maxScore": 10}}},
                "b": {"weight": 0.4, "questions": {"qb": {"weight": 1.0, "scoringFunction": "linear", "maxScore": 10}}},
            },
        })
        total = ScoringEngine(config).calculate_total_score({"qa": 10, "qb": 10})
        assert total.total_score == 50.0
        assert total.percentage == 100.0

    def test_bundled_wizard_best_answers(self, assessment_wizard):
        engine = ScoringEngine(get_default_config(), assessment_wizard)
        total = engine.calculate_total_score(BEST_ANSWERS)
        assert total.total_score == 100.0
        assert all(p.percentage == 100.0 for p in total.pillar_scores)

    def test_scoring_is_repeatable(self, small_engine):
        answers = {"team_size": 30, "maturity": 4}
        first = small_engine.calculate_total_score(answers)
        second = small_engine.calculate_total_score(answers)
        assert first.model_dump(exclude={"calculated_at"}) == second.model_dump(exclude={"calculated_at"})


class TestUnknownReferences:
    """Unknown pillars and questions score 0 without raising."""

    def test_unknown_pillar(self, small_engine, caplog):
        pillar = small_engine.calculate_pillar_score("culture", {"team_size": 10})
        assert pillar.pillar == "culture"
        assert pillar.score == 0
        assert pillar.question_scores == []
        assert "culture" in caplog.text

    def test_unknown_question(self, small_engine):
        result = small_engine.calculate_question_score("nope", 5)
        assert result.score == 0
        assert result.max_score == 0
        assert result.raw_value == 5

    def test_question_score(self, small_engine):
        result = small_engine.calculate_question_score("hosting", "cloud")
        assert result.pillar == "platform"
        assert result.score == 10.0
        assert result.normalized_value == 1.0
        assert result.max_score == 10

    def test_question_score_rounded(self):
        engine = ScoringEngine(two_pillar_config())
        assert engine.calculate_question_score("qa", 8).score == 7.78


class TestScoringPreview:
    """Tests for the live scoring preview."""

    def test_preview(self, small_engine):
        answers = {"team_size": 50, "has_data_team": "yes"}
        preview = small_engine.generate_scoring_preview(answers)

        assert preview.current_score.total_score == 12.5
        assert preview.potential_score == 67.5
        assert preview.completed_questions == 2
        assert preview.total_questions == 6
        assert preview.progress_percentage == 33.33
        assert preview.missing_critical_questions == ["data_team_size", "maturity"]

    def test_preview_limited_to_current_step(self, small_engine):
        answers = {"team_size": 50, "has_data_team": "yes"}
        preview = small_engine.generate_scoring_preview(answers, current_step_order=1)
        assert preview.potential_score == 37.5

    def test_hidden_questions_are_not_maxed(self, small_engine):
        answers = {"team_size": 50, "has_data_team": "no", "maturity": 10}
        preview = small_engine.generate_scoring_preview(answers)
        assert preview.potential_score == preview.current_score.total_score

    def test_hidden_questions_not_critical(self, small_engine):
        """Test: perfect answers to every visible question reach the full score."""
        answers = {"team_size": 100, "has_data_team": "no", "maturity": 10, "hosting": "cloud"}
        preview = small_engine.generate_scoring_preview(answers)
        assert preview.current_score.total_score == 100.0
        assert preview.potential_score == 100.0
        assert preview.missing_critical_questions == []

    def test_potential_never_below_current(self, small_engine):
        for answers in ({}, {"team_size": 0}, {"maturity": 10, "hosting": "on_premise"}):
            preview = small_engine.generate_scoring_preview(answers)
            assert preview.potential_score >= preview.current_score.total_score

    def test_preview_without_wizard(self):
        preview = ScoringEngine(two_pillar_config()).generate_scoring_preview({"qa": 10})
        assert preview.total_questions == 2
        assert preview.completed_questions == 1
        assert preview.progress_percentage == 50.0
        assert preview.potential_score == preview.current_score.total_score


class TestConfigReplacement:
    """Tests for swapping the engine's config."""

    def test_update_config(self, small_engine, small_scoring_data):
        small_scoring_data["version"] = "test-2"
        small_scoring_data["pillars"]["platform"]["weight"] = 1.5
        new_config = parse_scoring_config(small_scoring_data)

        answers = {"team_size": 100, "maturity": 5.5, "hosting": "cloud"}
        before = small_engine.calculate_total_score(answers)
        small_engine.update_config(new_config)
        after = small_engine.calculate_total_score(answers)

        assert small_engine.config is new_config
        assert after.version == "test-2"
        assert before.total_score == 85.0
        assert after.total_score == 77.5

    def test_engines_are_independent(self, small_scoring_config, small_wizard):
        first = ScoringEngine(small_scoring_config, small_wizard)
        second = ScoringEngine(small_scoring_config, small_wizard)
        first.update_config(two_pillar_config())
        assert second.config is small_scoring_config


class TestProfiles:
    """Tests for the bundled scoring profiles."""

    def test_profiles_load(self):
        assert get_default_config().version == "1.0.0"
        assert get_enterprise_config().version == "1.0.0-enterprise"
        assert get_startup_config().version == "1.0.0-startup"

    def test_profiles_are_cached(self):
        assert get_default_config() is get_default_config()

    @pytest.mark.parametrize("answers,expected", [
        ({"company_size": "enterprise"}, ENTERPRISE_PROFILE),
        ({"company_size": "smb", "industry": "healthcare"}, ENTERPRISE_PROFILE),
        ({"company_size": "startup"}, STARTUP_PROFILE),
        ({"company_size": "smb", "industry": "retail"}, DEFAULT_PROFILE),
        ({}, DEFAULT_PROFILE),
    ])
    def test_select_profile(self, answers, expected):
        assert select_profile(answers) == expected

    def test_enterprise_weights_security(self):
        config = select_scoring_config({"company_size": "enterprise"})
        assert config.pillars["security_readiness"].weight == 0.3
        assert config.pillars["security_readiness"].questions["compliance_requirements"].scoring_function == "threshold"

    def test_startup_rewards_ai_adoption(self, assessment_wizard):
        engine = create_scoring_engine({"company_size": "startup"}, assessment_wizard)
        assert engine.config.version == "1.0.0-startup"
        production = engine.calculate_question_score("current_ai_usage", "production")
        pilot = engine.calculate_question_score("current_ai_usage", "pilot")
        assert production.score == 10.0
        assert pilot.score == pytest.approx(10 * 2 ** -0.6, abs=0.01)

    def test_custom_config_path(self, tmp_path, monkeypatch):
        custom = tmp_path / "custom.json"
        custom.write_text(
            '{"version": "custom-1", "pillars": {"a": {"weight": 1, "questions": '
            '{"qa": {"weight": 1, "scoringFunction": "linear", "maxScore": 10}}}}}'
        )
        monkeypatch.setenv("ASSESSMENT_SCORING_CONFIG_PATH", str(custom))
        get_settings.cache_clear()

        engine = create_scoring_engine({"company_size": "enterprise"})
        assert engine.config.version == "custom-1"
