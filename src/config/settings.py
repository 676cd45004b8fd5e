"""Application settings using Pydantic Settings.

Centralized configuration for the assessment wizard logic. Every field can be
overridden through an ``ASSESSMENT_``-prefixed environment variable or a
``.env`` file, e.g. ``ASSESSMENT_MAX_CONDITION_DEPTH=4``.
"""

import logging
from functools import lru_cache
from pathlib import Path
from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger(__name__)

CONFIG_DIR = Path(__file__).parent


class Settings(BaseSettings):
    """Main application settings."""

    model_config = SettingsConfigDict(
        env_prefix="ASSESSMENT_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Application info
    name: str = Field(default="AI Readiness Assessment", description="Application name")
    environment: str = Field(default="development", description="Environment name")

    # Logging
    log_level: str = Field(default="INFO", description="Root log level")
    log_json: bool = Field(default=False, description="Emit JSON formatted logs")

    # Configuration sources
    wizard_config_path: Path = Field(
        default=CONFIG_DIR / "wizards" / "assessment.yaml",
        description="Wizard definition (YAML or JSON)",
    )
    scoring_profiles_dir: Path = Field(
        default=CONFIG_DIR / "scoring_profiles",
        description="Directory holding the bundled scoring profiles",
    )
    scoring_config_path: Optional[Path] = Field(
        default=None,
        description="Custom scoring config overriding the bundled profiles",
    )
    default_profile: str = Field(default="default", description="Profile used when no rule selects another")

    # Conditional logic limits
    max_condition_depth: int = Field(
        default=8,
        ge=1,
        description="Maximum nesting depth of conditional groups accepted at load time",
    )

    # Hot reload
    enable_config_hot_reload: Optional[bool] = Field(
        default=None,
        description="Watch the custom scoring config for changes (defaults to on in development)",
    )
    config_poll_interval: float = Field(default=2.0, gt=0, description="Seconds between config file checks")

    @field_validator("log_level")
    @classmethod
    def _upper_log_level(cls, value: str) -> str:
        return value.upper()

    @property
    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.environment in ("production", "prod", "staging")

    @property
    def hot_reload_enabled(self) -> bool:
        if self.enable_config_hot_reload is not None:
            return self.enable_config_hot_reload
        return self.environment == "development"


@lru_cache
def get_settings() -> Settings:
    """
    Get cached application settings instance.

    Returns:
        Settings: Cached settings loaded from environment.
    """
    return Settings()
