"""
Structured logging for the scorecard engine.

Modules log through structlog with the event name first and context as
keyword arguments:
    logger = get_logger(__name__)
    logger.info("pillar_scored", pillar="social", claim_count=3, percentage=72.5)

The engine never configures logging on import. Applications call
configure_logging() once, optionally with their own Settings.
"""

from __future__ import annotations

import logging
import sys
from typing import TYPE_CHECKING, Any, Optional

import structlog

if TYPE_CHECKING:
    from esg_scorecard.config import Settings


def _rename_event(
    logger: Any,
    method_name: str,
    event_dict: dict[str, Any],
) -> dict[str, Any]:
    """Expose structlog's 'event' key as event_type for log aggregation."""
    if "event" in event_dict and "event_type" not in event_dict:
        event_dict["event_type"] = event_dict.pop("event")
    return event_dict


def configure_logging(settings: Optional["Settings"] = None) -> None:
    """Configure structlog processors, renderer and level from Settings."""
    if settings is None:
        from esg_scorecard.config import get_settings

        settings = get_settings()

    level = getattr(logging, settings.LOG_LEVEL, logging.INFO)
    processors: list[Any] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
    ]
    if settings.LOG_FORMAT == "json":
        processors.append(_rename_event)
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty()))

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        cache_logger_on_first_use=False,
    )


def get_logger(name: str) -> structlog.BoundLogger:
    """Return a structured logger bound to the given module name."""
    return structlog.get_logger(name)
