"""Configuration module for the assessment wizard."""

from .settings import Settings, get_settings
from .config_loader import (
    ConfigValidationError,
    load_default_wizard,
    load_scoring_config,
    load_wizard_config,
    parse_scoring_config,
    parse_wizard_config,
    validate_scoring_config,
    validate_wizard_config,
)

__all__ = [
    "Settings",
    "get_settings",
    "ConfigValidationError",
    "load_default_wizard",
    "load_scoring_config",
    "load_wizard_config",
    "parse_scoring_config",
    "parse_wizard_config",
    "validate_scoring_config",
    "validate_wizard_config",
]
