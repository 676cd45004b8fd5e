"""
Default navigation rules for the AI readiness assessment.

Usage:
    from wizard.default_rules import create_default_navigation_engine

    engine = create_default_navigation_engine()
    navigation = engine.evaluate_navigation(step, wizard.steps, answers)
"""

from typing import Dict, List, Optional

from conditions.models import ComparisonRule
from wizard.models import NavigationRule, WizardConfig
from wizard.navigation import ConditionalNavigationEngine


DEFAULT_NAVIGATION_RULES: Dict[str, List[NavigationRule]] = {
    # Skip technical questions for non-technical companies
    "technical_readiness": [
        NavigationRule(
            condition=ComparisonRule(
                question_id="company_type",
                operator="equals",
                value="non_technical",
            ),
            action="skip",
            target_step="operational_readiness",
            message="Skipping technical questions for non-technical organizations",
        ),
    ],
    # Enterprises must finish the security assessment
    "security_readiness": [
        NavigationRule(
            condition=ComparisonRule(
                question_id="company_size",
                operator="equals",
                value="enterprise",
            ),
            action="require",
            message="Security assessment is required for enterprise organizations",
        ),
    ],
    # Startups are pointed at operational readiness
    "operational_readiness": [
        NavigationRule(
            condition=ComparisonRule(
                question_id="company_size",
                operator="equals",
                value="startup",
            ),
            action="suggest",
            target_step="operational_readiness",
            message="Consider focusing on operational readiness as a startup priority",
        ),
    ],
}


def create_default_navigation_engine(
    wizard: Optional[WizardConfig] = None,
) -> ConditionalNavigationEngine:
    """
    Build a navigation engine with the default rules.

    Rules declared in ``wizard`` replace the defaults for the same step.
    """
    engine = ConditionalNavigationEngine(DEFAULT_NAVIGATION_RULES)
    if wizard is not None:
        for step_id, rules in wizard.navigation_rules.items():
            engine.register_step_rules(step_id, rules)
    return engine
