"""
insertkit logging - structured logging on top of structlog.

Manifesto:
    Insert statements run deep inside application code. When generated keys
    go missing or a backend under-reports them, the only trace is the log, so
    every event is structured (table, backend, counts) rather than a
    formatted sentence.

Architecture:
    ::

        configure_logging(level="INFO", json_format=None, service="insertkit")
            │
            ▼
        structlog processor chain:
            1. TimeStamper (iso)
            2. add_log_level
            3. _add_service_metadata
            4. _elasticsearch_compatible (JSON only)
            5. JSONRenderer or ConsoleRenderer

Examples:
    >>> from insertkit.core.logging import configure_logging, get_logger
    >>> configure_logging(level="DEBUG", json_format=True)
    >>> logger = get_logger(__name__)
    >>> logger.debug("insert_executed", table="users", inserted=3)

Tags:
    logging, structlog, observability, insertkit

Doc-Types:
    - API Reference
"""

from __future__ import annotations

import logging
import sys
from typing import Any, TextIO

import structlog
from structlog.types import EventDict, Processor, WrappedLogger

from insertkit.core.settings import InsertKitSettings, get_settings

_SERVICE_NAME = "insertkit"


def _add_service_metadata(
    logger: WrappedLogger, method_name: str, event_dict: EventDict
) -> EventDict:
    """Add service-level metadata to all logs."""
    event_dict.setdefault("service.name", _SERVICE_NAME)
    return event_dict


def _elasticsearch_compatible(
    logger: WrappedLogger, method_name: str, event_dict: EventDict
) -> EventDict:
    """Make field names Elasticsearch/ECS compatible."""
    if "timestamp" in event_dict:
        event_dict["@timestamp"] = event_dict.pop("timestamp")

    if "level" in event_dict:
        event_dict["log.level"] = event_dict.pop("level")

    return event_dict


def configure_logging(
    level: str = "INFO",
    json_format: bool | None = None,
    service: str = "insertkit",
    add_timestamp: bool = True,
    stream: TextIO | None = None,
) -> None:
    """Configure structured logging for the application.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR)
        json_format: True for JSON, False for console, None for auto (JSON if not tty)
        service: Service name to include in logs
        add_timestamp: Include ISO timestamp in logs
        stream: Where log lines are written (default: stdout)
    """
    global _SERVICE_NAME
    _SERVICE_NAME = service

    stream = stream or sys.stdout
    if json_format is None:
        json_format = not stream.isatty()

    # PrintLogger carries no name, add_logger_name needs a stdlib logger
    shared_processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.processors.StackInfoRenderer(),
        structlog.dev.set_exc_info,
        _add_service_metadata,
    ]

    if add_timestamp:
        shared_processors.insert(0, structlog.processors.TimeStamper(fmt="iso"))

    if json_format:
        shared_processors.append(_elasticsearch_compatible)
        renderer: Processor = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=True)

    structlog.configure(
        processors=shared_processors + [renderer],
        wrapper_class=structlog.make_filtering_bound_logger(
            getattr(logging, level.upper())
        ),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=stream),
        cache_logger_on_first_use=False,
    )

    logging.basicConfig(
        format="%(message)s",
        stream=stream,
        level=getattr(logging, level.upper()),
    )


def configure_from_settings(
    settings: InsertKitSettings | None = None, stream: TextIO | None = None
) -> None:
    """Configure logging from ``INSERTKIT_LOG_LEVEL`` / ``INSERTKIT_LOG_JSON``."""
    settings = settings or get_settings()
    configure_logging(level=settings.log_level, json_format=settings.log_json, stream=stream)


def get_logger(name: str | None = None) -> Any:
    """Get a structured logger (usually ``get_logger(__name__)``)."""
    return structlog.get_logger(name)


def bind_context(**kwargs: Any) -> None:
    """Bind context to include in all subsequent logs."""
    structlog.contextvars.bind_contextvars(**kwargs)


def unbind_context(*keys: str) -> None:
    """Remove specific keys from logging context."""
    structlog.contextvars.unbind_contextvars(*keys)


def clear_context() -> None:
    """Clear all bound context."""
    structlog.contextvars.clear_contextvars()


class LogContext:
    """Context manager for scoped logging context.

    Example:
        with LogContext(table="users", backend="sqlite"):
            statement.execute(session)
    """

    def __init__(self, **kwargs: Any):
        self._context = kwargs

    def __enter__(self) -> LogContext:
        bind_context(**self._context)
        return self

    def __exit__(self, *args) -> None:
        unbind_context(*self._context.keys())


__all__ = [
    "configure_logging",
    "configure_from_settings",
    "get_logger",
    "bind_context",
    "unbind_context",
    "clear_context",
    "LogContext",
]
