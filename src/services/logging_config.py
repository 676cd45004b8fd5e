"""
Logging Configuration for the AI Readiness Assessment.

Provides structured logging with:
- JSON formatting for production
- Human-readable formatting for development
- Assessment session correlation through a context variable
- Audit logging of scores and navigation decisions
"""

import logging
import json
import sys
from contextlib import contextmanager
from datetime import datetime, timezone
from typing import Dict, Iterator, Optional
from pathlib import Path
from contextvars import ContextVar

from config.settings import get_settings
from scoring.models import ScoringPreview, TotalScore
from wizard.navigation import StepNavigation

# Context variable for assessment session tracking
session_id_var: ContextVar[Optional[str]] = ContextVar('session_id', default=None)


@contextmanager
def assessment_session(session_id: str) -> Iterator[str]:
    """Attach ``session_id`` to every log record emitted inside the block."""
    token = session_id_var.set(session_id)
    try:
        yield session_id
    finally:
        session_id_var.reset(token)


class JsonFormatter(logging.Formatter):
    """
    JSON log formatter for structured logging.

    Outputs logs as JSON objects for easy parsing by log aggregators.
    """

    def format(self, record: logging.LogRecord) -> str:
        """Format log record as JSON."""
        log_data = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
        }

        session_id = session_id_var.get()
        if session_id:
            log_data["session_id"] = session_id

        if hasattr(record, 'extra_data'):
            log_data.update(record.extra_data)

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_data, default=str)


class ReadableFormatter(logging.Formatter):
    """
    Human-readable log formatter for development.
    """

    COLORS = {
        'DEBUG': '\033[36m',     # Cyan
        'INFO': '\033[32m',      # Green
        'WARNING': '\033[33m',   # Yellow
        'ERROR': '\033[31m',     # Red
        'CRITICAL': '\033[35m',  # Magenta
        'RESET': '\033[0m',
    }

    def format(self, record: logging.LogRecord) -> str:
        color = self.COLORS.get(record.levelname, self.COLORS['RESET'])
        reset = self.COLORS['RESET']

        timestamp = datetime.now().strftime('%H:%M:%S.%f')[:-3]
        level = f"{color}{record.levelname:8s}{reset}"

        session_id = session_id_var.get()
        session = f" ({session_id})" if session_id else ""
        message = f"{timestamp} {level} [{record.name}]{session} {record.getMessage()}"

        if hasattr(record, 'extra_data') and record.extra_data:
            extras = ' | '.join(f"{k}={v}" for k, v in record.extra_data.items())
            message += f" | {extras}"

        return message


class ContextLogger(logging.LoggerAdapter):
    """
    Logger adapter that includes bound context in all log messages.
    """

    def process(self, msg: str, kwargs: Dict) -> tuple:
        extra = kwargs.get('extra', {})

        extra_data = dict(self.extra)
        extra_data.update(extra.get('extra_data', {}))

        session_id = session_id_var.get()
        if session_id:
            extra_data.setdefault('session_id', session_id)

        extra['extra_data'] = extra_data
        kwargs['extra'] = extra
        return msg, kwargs


def configure_logging(
    level: str = "INFO",
    json_output: bool = False,
    log_file: Optional[Path] = None
) -> None:
    """
    Configure application logging.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        json_output: If True, output JSON formatted logs
        log_file: Optional file path for log output
    """
    root_logger = logging.getLogger()
    root_logger.setLevel(level)

    root_logger.handlers.clear()

    formatter = JsonFormatter() if json_output else ReadableFormatter()

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(formatter)
    root_logger.addHandler(console_handler)

    if log_file:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_file)
        file_handler.setFormatter(JsonFormatter())  # Always JSON for files
        root_logger.addHandler(file_handler)


def configure_logging_from_settings(log_file: Optional[Path] = None) -> None:
    """Configure logging from ``Settings.log_level`` and ``Settings.log_json``."""
    settings = get_settings()
    configure_logging(level=settings.log_level, json_output=settings.log_json, log_file=log_file)


def get_logger(name: str, **extra) -> ContextLogger:
    """
    Get a context-aware logger.

    Args:
        name: Logger name (typically __name__)
        **extra: Additional context to include in all logs

    Returns:
        ContextLogger instance
    """
    base_logger = logging.getLogger(name)
    return ContextLogger(base_logger, extra)


class ScoringAuditLogger:
    """
    Audit trail for one assessment session.

    Records score results and navigation decisions as structured data so
    a session's outcome can be reconstructed from the logs.
    """

    def __init__(self, session_id: Optional[str] = None):
        self.session_id = session_id
        context = {"session_id": session_id} if session_id else {}
        self.logger = get_logger("assessment.audit", **context)

    def log_total_score(self, total: TotalScore) -> None:
        """Log a TotalScore with its per-pillar percentages."""
        self.logger.info(
            "Assessment scored",
            extra={'extra_data': {
                'config_version': total.version,
                'total_score': total.total_score,
                'max_total_score': total.max_total_score,
                'pillars': {p.pillar: p.percentage for p in total.pillar_scores},
            }}
        )

    def log_preview(self, preview: ScoringPreview) -> None:
        """Log a ScoringPreview."""
        self.logger.info(
            "Scoring preview generated",
            extra={'extra_data': {
                'current_score': preview.current_score.total_score,
                'potential_score': preview.potential_score,
                'progress_percentage': preview.progress_percentage,
                'missing_critical_questions': preview.missing_critical_questions,
            }}
        )

    def log_navigation(self, step_id: str, navigation: StepNavigation) -> None:
        """Log a StepNavigation decision for ``step_id``."""
        level = logging.INFO if navigation.can_navigate_next else logging.WARNING
        self.logger.log(
            level,
            f"Navigation from {step_id}",
            extra={'extra_data': {'step_id': step_id, **navigation.to_dict()}}
        )
