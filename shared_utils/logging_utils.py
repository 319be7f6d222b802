"""
Centralized logging utilities with scoped loggers.
Provides structured logging with consistent field names across services.

``configure_logging()`` is called once by each process entrypoint; library
code only asks for scoped loggers and never configures structlog itself.
"""

import logging
import sys
from typing import Any, Optional

import structlog

from shared_utils.constants import Environment


def configure_logging(
    environment: str = Environment.DEVELOPMENT.value,
    level: str = "INFO",
) -> None:
    """Configure structlog and the stdlib bridge.

    Production renders JSON; everything else renders console-friendly text.
    Output always goes to stderr because stdout carries the MCP protocol.

    Args:
        environment: Environment name (development, staging, production)
        level: Minimum log level name
    """
    shared_processors = [
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
    ]

    if environment == Environment.PRODUCTION.value:
        renderer = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=False)

    logging.basicConfig(
        format="%(message)s",
        stream=sys.stderr,
        level=getattr(logging, level.upper(), logging.INFO),
        force=True,
    )

    structlog.configure(
        processors=shared_processors + [renderer],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )


def get_scoped_logger(scope: str) -> structlog.BoundLogger:
    """Get a scoped logger for a specific service/component.

    Args:
        scope: LogScope value (backend_client, transcript_service, api, ...)

    Returns:
        Structured logger bound to scope.
    """
    logger = structlog.get_logger()
    return logger.bind(scope=scope)


class ContextualLogger:
    """Helper class for managing contextual logging within a scope.

    Accepts an already-built logger so callers (and tests) can inject a
    different sink.
    """

    def __init__(self, scope: str, logger: Optional[Any] = None):
        self.scope = scope
        self.logger = logger if logger is not None else get_scoped_logger(scope)

    def info(self, event_name: str, **kwargs):
        """Log info message with scope."""
        self.logger.info(event_name, **kwargs)

    def debug(self, event_name: str, **kwargs):
        """Log debug message with scope."""
        self.logger.debug(event_name, **kwargs)

    def warning(self, event_name: str, **kwargs):
        """Log warning message with scope."""
        self.logger.warning(event_name, **kwargs)

    def error(self, event_name: str, **kwargs):
        """Log error message with scope."""
        self.logger.error(event_name, **kwargs)

    def critical(self, event_name: str, **kwargs):
        """Log critical message with scope."""
        self.logger.critical(event_name, **kwargs)


class NullLogger:
    """Logger sink that drops every event."""

    def _drop(self, event_name: str, **kwargs) -> None:
        return None

    debug = info = warning = error = critical = _drop
