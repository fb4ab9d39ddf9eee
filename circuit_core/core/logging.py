"""
Standardized Logging Configuration

This module provides a consistent, structured logging setup for the engine.
Supports JSON logging for production and human-readable console output for
development. Library modules log through ``structlog.get_logger(__name__)``
with snake_case event names.
"""

import logging
import os
import sys
from enum import Enum
from typing import Any, Dict, Optional, TextIO

import structlog


# =============================================================================
# Configuration
# =============================================================================


class LogFormat(str, Enum):
    """Log output formats."""

    JSON = "json"
    PRETTY = "pretty"


DEFAULT_LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
DEFAULT_LOG_FORMAT = os.getenv(
    "LOG_FORMAT",
    "json" if os.getenv("ENVIRONMENT") == "production" else "pretty",
)
SERVICE_NAME = os.getenv("SERVICE_NAME", "circuit-emotion")
ENVIRONMENT = os.getenv("ENVIRONMENT", "development")


def _add_service_context(
    logger: Any,
    method_name: str,
    event_dict: Dict[str, Any],
) -> Dict[str, Any]:
    """Stamp every entry with service and environment."""
    event_dict.setdefault("service", SERVICE_NAME)
    event_dict.setdefault("environment", ENVIRONMENT)
    return event_dict


# =============================================================================
# Logger Setup
# =============================================================================


def setup_logging(
    level: str = DEFAULT_LOG_LEVEL,
    format: str = DEFAULT_LOG_FORMAT,
    service_name: Optional[str] = None,
    stream: Optional[TextIO] = None,
) -> None:
    """
    Configure logging for the application.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        format: Log format (json, pretty)
        service_name: Service name for log entries
        stream: Output stream (defaults to stdout)
    """
    global SERVICE_NAME

    if service_name:
        SERVICE_NAME = service_name

    numeric_level = getattr(logging, level.upper(), logging.INFO)

    shared_processors = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        _add_service_context,
    ]

    if format == LogFormat.JSON or format == "json":
        renderer = structlog.processors.JSONRenderer()
        shared_processors.append(structlog.processors.format_exc_info)
    else:
        renderer = structlog.dev.ConsoleRenderer()

    structlog.configure(
        processors=shared_processors + [
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    formatter = structlog.stdlib.ProcessorFormatter(
        foreign_pre_chain=shared_processors,
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            renderer,
        ],
    )

    root_logger = logging.getLogger()
    root_logger.setLevel(numeric_level)

    # Remove existing handlers
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    handler = logging.StreamHandler(stream or sys.stdout)
    handler.setLevel(numeric_level)
    handler.setFormatter(formatter)
    root_logger.addHandler(handler)

    # Suppress noisy third-party loggers
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
    logging.getLogger("asyncio").setLevel(logging.WARNING)
    logging.getLogger("aiosqlite").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)

    structlog.get_logger(__name__).info(
        "logging_configured",
        level=level,
        format=str(format),
    )


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """
    Get a logger instance with the given name.

    Args:
        name: Logger name (typically __name__)

    Returns:
        Bound structlog logger
    """
    return structlog.get_logger(name)


# =============================================================================
# Context Logging
# =============================================================================


class LogContext:
    """
    Task-local context for adding request-scoped data to logs.

    Backed by structlog's contextvars, so values follow the current asyncio
    task rather than leaking across concurrent requests.

    Usage:
        with LogContext(request_id="abc123", session_id="s1"):
            logger.info("analysis_started")
    """

    def __init__(self, **kwargs: Any):
        self._kwargs = kwargs
        self._tokens: Dict[str, Any] = {}

    def __enter__(self) -> "LogContext":
        self._tokens = structlog.contextvars.bind_contextvars(**self._kwargs)
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        structlog.contextvars.reset_contextvars(**self._tokens)

    @classmethod
    def all(cls) -> Dict[str, Any]:
        """Get all context values."""
        return structlog.contextvars.get_contextvars()

    @classmethod
    def clear(cls) -> None:
        """Clear the current context."""
        structlog.contextvars.clear_contextvars()


__all__ = [
    "LogFormat",
    "setup_logging",
    "get_logger",
    "LogContext",
]
