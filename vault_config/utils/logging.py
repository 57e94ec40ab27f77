"""Structured logging configuration using structlog."""

import logging
import sys
from typing import Any, Dict

import structlog
from structlog.types import EventDict

from ..config.settings import settings

REDACTED = "***"
SENSITIVE_KEYS = ("token", "password", "secret", "authorization")


def redact_sensitive(logger: Any, method_name: str, event_dict: EventDict) -> EventDict:
    """Mask values of credential-like fields before rendering."""
    for key in list(event_dict):
        if key == "event":
            continue
        lowered = key.lower()
        if any(marker in lowered for marker in SENSITIVE_KEYS) and event_dict[key] is not None:
            event_dict[key] = REDACTED
    return event_dict


def add_timestamp(logger: Any, method_name: str, event_dict: EventDict) -> EventDict:
    """Add timestamp to log records."""
    import time
    event_dict["timestamp"] = time.time()
    return event_dict


def setup_logging(log_level: str | None = None, structured: bool | None = None) -> None:
    """Configure structured logging for the application."""

    level = log_level or settings.log_level
    structured = settings.structured_logging if structured is None else structured

    # Configure standard logging
    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=getattr(logging, level),
    )

    # Configure structlog
    processors = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_logger_name,
        redact_sensitive,
        add_timestamp,
        structlog.processors.add_log_level,
        structlog.processors.StackInfoRenderer(),
        structlog.dev.set_exc_info,
    ]

    if structured:
        # JSON output for production
        processors.extend([
            structlog.processors.dict_tracebacks,
            structlog.processors.JSONRenderer()
        ])
    else:
        # Pretty output for development
        processors.extend([
            structlog.dev.ConsoleRenderer(colors=True)
        ])

    structlog.configure(
        processors=processors,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    # Set log levels for external libraries
    logging.getLogger("uvicorn.access").setLevel(logging.INFO)
    logging.getLogger("uvicorn.error").setLevel(logging.INFO)
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("redis").setLevel(logging.WARNING)


def log_error(error: Exception, context: Dict[str, Any] = None) -> None:
    """Log error with context information."""
    logger = structlog.get_logger("error")
    logger.error(
        "Error occurred",
        error_type=type(error).__name__,
        error_message=str(error),
        context=context or {},
        exc_info=error
    )
