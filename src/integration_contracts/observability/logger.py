"""Structured JSON logging with event context support.

Uses structlog for structured logging with JSON output.
Handler code can bind the event it is working on so every log entry
carries its ``event_id`` and ``event_type``.
"""

from __future__ import annotations

import logging
import sys
from typing import TYPE_CHECKING, Any

import structlog

if TYPE_CHECKING:
    from integration_contracts.contracts.envelope import IntegrationEvent


def bind_event_context(event: IntegrationEvent) -> None:
    """Bind the event's identity into the structlog context.

    For consumer handler code, after ``EventDecoder.decode`` has produced
    the event.  The decoder itself does not bind: it logs through stdlib
    ``logging`` and names the ``EventType`` in each message, and a rejected
    payload has no trustworthy identity to bind.  Pair with
    ``clear_event_context`` when the handler finishes.
    """
    structlog.contextvars.bind_contextvars(
        event_id=str(event.event_id),
        event_type=event.event_type,
    )


def clear_event_context() -> None:
    """Drop identity bound by ``bind_event_context``."""
    structlog.contextvars.unbind_contextvars("event_id", "event_type")


def _add_component(
    logger: Any, method_name: str, event_dict: dict[str, Any]
) -> dict[str, Any]:
    """Structlog processor: add component name."""
    event_dict.setdefault("component", event_dict.get("logger", ""))
    return event_dict


def setup_logging(
    level: str = "INFO",
    format: str = "json",
) -> None:
    """Configure structured logging for the application.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR).
        format: "json" for production, "console" for development.
    """
    log_level = getattr(logging, level.upper(), logging.INFO)

    processors: list[Any] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        _add_component,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]

    if format == "json":
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer())

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    logging.basicConfig(
        format="%(message)s",
        stream=sys.stderr,
        level=log_level,
    )


def setup_logging_from_settings(settings: Any) -> None:
    """Configure logging from ``ContractSettings.observability``."""
    obs = settings.observability
    setup_logging(level=obs.log_level, format=obs.log_format.value)


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """Get a structured logger for a module."""
    return structlog.get_logger(name)
