"""
structlog configuration shared by the API, scripts and tests.

Usage:
    from app.core.logging import get_logger, setup_logging

    setup_logging("INFO")          # once, at startup
    logger = get_logger(__name__)
    logger.info("Sequence issued", entity_type="POLICY", seq=12)
"""

from __future__ import annotations

import logging
import sys

import structlog

from app.core.config import settings

_configured = False


def setup_logging(level: str = "INFO") -> None:
    """Configure stdlib logging and structlog processors."""
    global _configured

    log_level = getattr(logging, level.upper(), logging.INFO)
    logging.basicConfig(format="%(message)s", stream=sys.stdout, level=log_level)

    if settings.APP_ENV == "development":
        renderer = structlog.dev.ConsoleRenderer()
    else:
        renderer = structlog.processors.JSONRenderer()

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(log_level),
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )
    _configured = True


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    """Return a structlog logger bound to `name`."""
    if not _configured:
        setup_logging(settings.LOG_LEVEL or ("DEBUG" if settings.APP_ENV == "development" else "INFO"))
    return structlog.get_logger(name)
