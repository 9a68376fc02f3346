"""
Logging Configuration

structlog setup shared by the daily pipeline and the API. Entries are JSON
lines on stdout unless `log_format` asks for the console renderer.
"""
import logging
import sys
from contextlib import contextmanager
from typing import Any, Iterator, Optional

import structlog
from structlog.types import EventDict, Processor

from config.settings import settings

# Per-request connection chatter from the scraper and geocoder sessions
NOISY_LOGGERS = ("urllib3", "charset_normalizer")


def add_app_context(logger: Any, method_name: str, event_dict: EventDict) -> EventDict:
    """Tag every entry with the app name and deployment environment."""
    event_dict["environment"] = settings.environment
    event_dict["app"] = "subastas"
    return event_dict


def setup_logging(level: Optional[str] = None, log_format: Optional[str] = None) -> structlog.BoundLogger:
    """
    Configure structured logging for the pipeline and the API.

    Args:
        level: Override settings.log_level
        log_format: Override settings.log_format ("json" or "console")

    Returns:
        Configured structlog logger instance
    """
    level_value = getattr(logging, (level or settings.log_level).upper())
    logging.basicConfig(format="%(message)s", stream=sys.stdout, level=level_value)
    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(max(level_value, logging.WARNING))

    processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        add_app_context,
    ]

    if (log_format or settings.log_format) == "json":
        processors.append(structlog.processors.format_exc_info)
        # Place names keep their accents
        processors.append(structlog.processors.JSONRenderer(ensure_ascii=False))
    else:
        processors.append(structlog.processors.ExceptionRenderer())
        processors.append(structlog.dev.ConsoleRenderer())

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    return structlog.get_logger()


@contextmanager
def stage_context(stage: str, **context: Any) -> Iterator[None]:
    """
    Bind `stage` (and any extra keys) to every entry logged inside the block.

    Usage:
        with stage_context("geocoding"):
            AuctionGeocoding(session).run()
    """
    with structlog.contextvars.bound_contextvars(stage=stage, **context):
        yield


def get_logger(name: str = None) -> structlog.BoundLogger:
    """
    Get a logger instance for a specific module.

    Args:
        name: Logger name (typically __name__)

    Returns:
        Configured logger instance
    """
    if name:
        return structlog.get_logger(name)
    return structlog.get_logger()
