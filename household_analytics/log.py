"""
Structured logging for the analytics engine.

The engine itself never configures logging on import; the embedding
application calls ``configure_logging`` once at startup. Until then
structlog's defaults apply and library log calls stay harmless.
"""

import logging
from typing import Optional

import structlog

from household_analytics.config import get_settings


def configure_logging(level: Optional[str] = None, json: Optional[bool] = None) -> None:
    """Route structlog through stdlib logging with the given level and renderer.

    Unset arguments fall back to ``log_level`` and ``log_json`` from the settings.
    """
    settings = get_settings()
    level = level or settings.log_level
    json = settings.log_json if json is None else json
    logging.basicConfig(format="%(message)s", level=getattr(logging, level.upper(), logging.INFO))

    renderer = structlog.processors.JSONRenderer() if json else structlog.dev.ConsoleRenderer()
    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            renderer,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str):
    return structlog.get_logger(name)
