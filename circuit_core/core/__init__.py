"""
Core infrastructure shared across the engine.
"""

from .logging import (
    LogContext,
    LogFormat,
    get_logger,
    setup_logging,
)

__all__ = [
    "LogContext",
    "LogFormat",
    "get_logger",
    "setup_logging",
]
