"""Structured logging setup.

Learn: configure_logging() builds one structlog logger from the settings
and returns it. The app factory stores it on app.state and components
get it through get_logger() or their constructor, so there is no
process-wide logging configuration to patch in tests. Request-scoped
fields (request_id) still come from structlog's contextvars.

Never log secrets, password hashes or request bodies.
"""

import logging
import sys

import structlog
from fastapi import Request

from inkwell.config import Settings


def configure_logging(settings: Settings, stream=None) -> structlog.typing.FilteringBoundLogger:
    """Build the application logger.

    JSON lines in production, human-readable console output elsewhere.
    """
    level = getattr(logging, settings.log_level.upper(), logging.INFO)

    processors = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
    ]
    if settings.is_production:
        processors += [
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ]
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=False))

    logger = structlog.wrap_logger(
        structlog.PrintLogger(file=stream or sys.stdout),
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(level),
        context_class=dict,
    )
    return logger.bind(service=settings.app_name, environment=settings.environment)


def get_logger(request: Request) -> structlog.typing.FilteringBoundLogger:
    """FastAPI dependency — the logger built at startup."""
    return request.app.state.logger
