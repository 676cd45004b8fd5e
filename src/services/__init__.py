"""
Services Module - cross-cutting infrastructure for the assessment wizard.

- Logging and observability (structured logs, session correlation, audit trail)
"""

from .logging_config import (
    ScoringAuditLogger,
    assessment_session,
    configure_logging,
    configure_logging_from_settings,
    get_logger,
)

__all__ = [
    "ScoringAuditLogger",
    "assessment_session",
    "configure_logging",
    "configure_logging_from_settings",
    "get_logger",
]
