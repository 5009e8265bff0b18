"""Structured logging setup.

Log calls take an event name plus keyword context:

    logger = get_logger(__name__)
    logger.info("account_created", account_id=account_id)
"""

import logging
import sys
from typing import Any

import structlog

from config import Settings, get_settings


def setup_logging(settings: Settings | None = None) -> None:
    """Configure structlog and the stdlib root logger.

    Args:
        settings: Application settings (defaults to the cached settings)
    """
    settings = settings or get_settings()
    level = getattr(logging, settings.log_level, logging.INFO)

    logging.basicConfig(format="%(message)s", stream=sys.stdout, level=level, force=True)

    renderer: Any
    if settings.log_format == "console":
        renderer = structlog.dev.ConsoleRenderer()
    else:
        renderer = structlog.processors.JSONRenderer()

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            renderer,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.make_filtering_bound_logger(level),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str) -> structlog.typing.FilteringBoundLogger:
    """Get a structured logger bound to a module name."""
    return structlog.get_logger(name)
