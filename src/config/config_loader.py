"""
Configuration Loader.

Loads wizard definitions and scoring configs from YAML or JSON files and
validates them before they reach the evaluation and scoring code, which
never validate anything themselves:
- Structural validation through the pydantic models
- Conditional group nesting depth limit
- Unknown comparison operators and rules missing their value
- Scoring config version, total score and weights

Hard problems raise ConfigValidationError. Modeling-convention problems
(weights not summing to 1.0, dangling pillar references) are returned as
warnings and logged.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Union

import yaml
from pydantic import ValidationError

from conditions.evaluator import is_known_operator
from conditions.models import (
    VALUELESS_OPERATORS,
    ComparisonRule,
    ConditionalGroup,
    LogicalOperator,
)
from config.settings import get_settings
from scoring.models import ScoringConfig, ScoringFunction
from wizard.models import NavigationAction, WizardConfig

logger = logging.getLogger(__name__)

WEIGHT_TOLERANCE = 0.01

_KNOWN_FUNCTIONS = {f.value for f in ScoringFunction}
_KNOWN_ACTIONS = {a.value for a in NavigationAction}
_KNOWN_LOGICAL = {op.value for op in LogicalOperator}


class ConfigValidationError(Exception):
    """Raised when a configuration file cannot be used."""

    def __init__(self, source: str, problems: List[str]):
        self.source = source
        self.problems = problems
        super().__init__(f"Invalid configuration {source}: " + "; ".join(problems))


# =============================================================================
# FILE LOADING
# =============================================================================

def read_config_file(path: Union[str, Path]) -> Dict[str, Any]:
    """Read a YAML (.yaml/.yml) or JSON (.json) file into a dict."""
    path = Path(path)
    if not path.exists():
        raise ConfigValidationError(str(path), ["file does not exist"])

    with open(path, "r", encoding="utf-8") as f:
        try:
            if path.suffix.lower() == ".json":
                data = json.load(f)
            else:
                data = yaml.safe_load(f)
        except (yaml.YAMLError, json.JSONDecodeError, UnicodeDecodeError) as e:
            raise ConfigValidationError(str(path), [f"cannot parse file: {e}"]) from e

    if not isinstance(data, dict):
        raise ConfigValidationError(str(path), ["top level must be a mapping"])
    return data


def _format_pydantic_errors(error: ValidationError) -> List[str]:
    problems = []
    for item in error.errors():
        location = ".".join(str(part) for part in item["loc"])
        problems.append(f"{location}: {item['msg']}")
    return problems


def parse_scoring_config(data: Dict[str, Any], source: str = "<memory>") -> ScoringConfig:
    """Build and validate a ScoringConfig from plain data."""
    try:
        config = ScoringConfig.model_validate(data)
    except ValidationError as e:
        raise ConfigValidationError(source, _format_pydantic_errors(e)) from e

    warnings = validate_scoring_config(config, source)
    for warning in warnings:
        logger.warning(f"{source}: {warning}")
    return config


def parse_wizard_config(
    data: Dict[str, Any],
    source: str = "<memory>",
    max_depth: Optional[int] = None,
) -> WizardConfig:
    """Build and validate a WizardConfig from plain data."""
    try:
        wizard = WizardConfig.model_validate(data)
    except ValidationError as e:
        raise ConfigValidationError(source, _format_pydantic_errors(e)) from e

    warnings = validate_wizard_config(wizard, source, max_depth=max_depth)
    for warning in warnings:
        logger.warning(f"{source}: {warning}")
    return wizard


def load_scoring_config(path: Union[str, Path]) -> ScoringConfig:
    """Load a scoring config from a YAML or JSON file."""
    logger.info(f"Loading scoring config from {path}")
    return parse_scoring_config(read_config_file(path), source=str(path))


def load_wizard_config(path: Union[str, Path], max_depth: Optional[int] = None) -> WizardConfig:
    """Load a wizard definition from a YAML or JSON file."""
    logger.info(f"Loading wizard config from {path}")
    return parse_wizard_config(read_config_file(path), source=str(path), max_depth=max_depth)


def load_default_wizard() -> WizardConfig:
    """Load the wizard definition named by the settings."""
    settings = get_settings()
    return load_wizard_config(settings.wizard_config_path, max_depth=settings.max_condition_depth)


# =============================================================================
# VALIDATION
# =============================================================================

def check_condition_depth(
    group: ConditionalGroup,
    max_depth: int,
    location: str = "condition",
) -> List[str]:
    """Report groups nested deeper than ``max_depth``."""
    problems: List[str] = []
    _walk_depth(group, 1, max_depth, location, problems)
    return problems


def _walk_depth(group: ConditionalGroup, depth: int, max_depth: int, location: str, problems: List[str]) -> None:
    if depth > max_depth:
        problems.append(f"{location}: conditional groups nested deeper than {max_depth} levels")
        return
    for index, nested in enumerate(group.groups):
        _walk_depth(nested, depth + 1, max_depth, f"{location}.groups[{index}]", problems)


def _check_rule(rule: ComparisonRule, location: str) -> List[str]:
    problems = []
    if not is_known_operator(rule.operator):
        problems.append(f"{location}: unknown comparison operator '{rule.operator}'")
    elif rule.operator not in VALUELESS_OPERATORS and rule.value is None:
        problems.append(f"{location}: operator '{rule.operator}' requires a value")
    elif rule.operator in ("in", "not_in") and not isinstance(rule.value, list):
        problems.append(f"{location}: operator '{rule.operator}' requires a list value")
    return problems


def check_group(group: ConditionalGroup, max_depth: int, location: str) -> List[str]:
    """Depth, logical operator and rule checks for one group tree."""
    problems = check_condition_depth(group, max_depth, location)
    if problems:
        return problems
    return _check_group_members(group, location)


def _check_group_members(group: ConditionalGroup, location: str) -> List[str]:
    problems = []
    if group.operator not in _KNOWN_LOGICAL:
        problems.append(f"{location}: unknown logical operator '{group.operator}'")
    for index, rule in enumerate(group.rules):
        problems.extend(_check_rule(rule, f"{location}.rules[{index}]"))
    for index, nested in enumerate(group.groups):
        problems.extend(_check_group_members(nested, f"{location}.groups[{index}]"))
    return problems


def _named_groups(owner: Any, names: Iterable[str]) -> Iterable[tuple]:
    if owner is None:
        return []
    return [(name, getattr(owner, name)) for name in names if getattr(owner, name) is not None]


def validate_wizard_config(
    wizard: WizardConfig,
    source: str = "<memory>",
    max_depth: Optional[int] = None,
) -> List[str]:
    """
    Validate a wizard definition.

    Raises:
        ConfigValidationError: On unusable conditional logic or step layout

    Returns:
        Non-fatal warnings
    """
    max_depth = max_depth or get_settings().max_condition_depth
    problems: List[str] = []
    warnings: List[str] = []

    orders = sorted(step.order for step in wizard.steps)
    if len(set(orders)) != len(orders):
        problems.append("step orders must be unique")
    elif orders and orders != list(range(1, len(orders) + 1)):
        warnings.append(f"step orders {orders} are not contiguous from 1")

    step_ids = {step.id for step in wizard.steps}
    seen_questions = set()

    for step in wizard.steps:
        step_location = f"steps[{step.id}]"
        for name, group in _named_groups(step.conditional_logic, ("skip_if", "show_if")):
            problems.extend(check_group(group, max_depth, f"{step_location}.{name}"))

        for question in step.questions:
            location = f"{step_location}.questions[{question.id}]"
            if question.id in seen_questions:
                problems.append(f"{location}: duplicate question id")
            seen_questions.add(question.id)

            names = ("show_if", "hide_if", "enable_if", "disable_if")
            for name, group in _named_groups(question.enhanced_conditional_logic, names):
                problems.extend(check_group(group, max_depth, f"{location}.{name}"))

    for step_id, rules in wizard.navigation_rules.items():
        if step_id not in step_ids:
            warnings.append(f"navigation rules registered for unknown step '{step_id}'")
        for index, rule in enumerate(rules):
            location = f"navigation_rules[{step_id}][{index}]"
            if rule.action not in _KNOWN_ACTIONS:
                problems.append(f"{location}: unknown navigation action '{rule.action}'")
            if rule.target_step is not None and rule.target_step not in step_ids:
                warnings.append(f"{location}: target step '{rule.target_step}' does not exist")
            if isinstance(rule.condition, ComparisonRule):
                problems.extend(_check_rule(rule.condition, f"{location}.condition"))
            else:
                problems.extend(check_group(rule.condition, max_depth, f"{location}.condition"))

    if problems:
        raise ConfigValidationError(source, problems)
    return warnings


def validate_scoring_config(
    config: ScoringConfig,
    source: str = "<memory>",
    wizard: Optional[WizardConfig] = None,
) -> List[str]:
    """
    Validate a scoring config, optionally against a wizard definition.

    Raises:
        ConfigValidationError: On missing version, non-positive totals or weights

    Returns:
        Non-fatal warnings
    """
    problems: List[str] = []
    warnings: List[str] = []

    if not config.version:
        problems.append("configuration must have a version")
    if config.max_total_score <= 0:
        problems.append("max_total_score must be positive")
    if not config.pillars:
        warnings.append("configuration defines no pillars")

    for pillar_name, pillar in config.pillars.items():
        if pillar.weight <= 0:
            problems.append(f"pillar {pillar_name} must have a positive weight")

        for question_key, question in pillar.questions.items():
            location = f"{pillar_name}.{question_key}"
            if question.weight <= 0:
                problems.append(f"{location}: weight must be positive")
            if question.max_score <= 0:
                problems.append(f"{location}: max_score must be positive")
            if question.scoring_function not in _KNOWN_FUNCTIONS:
                problems.append(f"{location}: unknown scoring function '{question.scoring_function}'")
            elif question.scoring_function == ScoringFunction.EXPONENTIAL.value and question.exponential_config is None:
                problems.append(f"{location}: exponential scoring requires exponential_config")
            elif question.scoring_function == ScoringFunction.THRESHOLD.value:
                buckets = question.threshold_config.thresholds if question.threshold_config else []
                if not buckets:
                    problems.append(f"{location}: threshold scoring requires thresholds")
                for index, bucket in enumerate(buckets):
                    if bucket.min > bucket.max:
                        problems.append(f"{location}: threshold {index} has min greater than max")

        if pillar.questions:
            question_weights = sum(q.weight for q in pillar.questions.values())
            if abs(question_weights - 1.0) > WEIGHT_TOLERANCE:
                warnings.append(f"question weights of pillar {pillar_name} sum to {question_weights:.2f}, not 1.0")

    pillar_weights = sum(p.weight for p in config.pillars.values())
    if config.pillars and abs(pillar_weights - 1.0) > WEIGHT_TOLERANCE:
        warnings.append(f"pillar weights sum to {pillar_weights:.2f}, not 1.0")

    if wizard is not None:
        questions = wizard.question_index()
        for pillar_name, pillar in config.pillars.items():
            for question_key in pillar.questions:
                if question_key not in questions:
                    warnings.append(f"{pillar_name}.{question_key}: question not defined in wizard")
        for question in questions.values():
            if question.scoring is not None and question.scoring.pillar not in config.pillars:
                warnings.append(f"question {question.id} references unknown pillar '{question.scoring.pillar}'")

    if problems:
        raise ConfigValidationError(source, problems)
    return warnings
