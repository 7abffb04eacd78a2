"""Structured logging for the dungeon crawler simulation core.

Engine modules log through structlog with a module-level logger. The turn
scheduler binds the current depth and turn into the context, so every
line from generation, AI, combat or effects can be placed in the run.

Example:
    >>> from dungeon_crawler.core.logging import get_logger
    >>> logger = get_logger(__name__)
    >>> logger.info("Level generated", depth=1, rooms=9)
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import TYPE_CHECKING, Any

import structlog
from structlog.types import Processor


if TYPE_CHECKING:
    from structlog.types import EventDict, WrappedLogger

    from dungeon_crawler.core.config import Settings


def _app_tagger(app_name: str) -> Processor:
    def tag(logger: WrappedLogger, method_name: str, event_dict: EventDict) -> EventDict:
        event_dict.setdefault("app", app_name)
        return event_dict

    return tag


def configure_logging(
    *,
    level: str = "INFO",
    json_format: bool = False,
    log_file: str | Path | None = None,
    app_name: str = "dungeon_crawler",
) -> None:
    """Configure structlog for the engine.

    Args:
        level: Lowest level emitted (DEBUG, INFO, WARNING, ERROR, CRITICAL).
        json_format: Render one JSON object per line instead of console text.
        log_file: Append lines to this file instead of writing to stderr.
        app_name: Value of the ``app`` key added to every line.

    Example:
        >>> configure_logging(level="DEBUG", json_format=True)
    """
    processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        _app_tagger(app_name),
    ]
    if json_format:
        processors += [structlog.processors.format_exc_info, structlog.processors.JSONRenderer()]
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=log_file is None))

    if log_file is not None:
        stream = Path(log_file).open("a", encoding="utf-8")
        logger_factory: Any = structlog.WriteLoggerFactory(file=stream)
    else:
        logger_factory = structlog.PrintLoggerFactory(file=sys.stderr)

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(
            getattr(logging, level.upper(), logging.INFO)
        ),
        context_class=dict,
        logger_factory=logger_factory,
        cache_logger_on_first_use=False,
    )


def configure_from_settings(settings: Settings) -> None:
    """Configure logging from application settings.

    ``debug`` forces DEBUG regardless of ``log_level``.
    """
    configure_logging(
        level="DEBUG" if settings.debug else settings.log_level,
        json_format=settings.json_logs,
        log_file=settings.log_file,
        app_name=settings.app_name,
    )


def get_logger(name: str | None = None) -> structlog.BoundLogger:
    """Get a logger, typically with ``__name__``."""
    return structlog.get_logger(name)


def bind_context(**kwargs: Any) -> None:
    """Bind keys that are added to every following log line.

    The turn scheduler binds ``depth`` and ``turn`` here.
    """
    structlog.contextvars.bind_contextvars(**kwargs)


def clear_context() -> None:
    """Drop all bound context keys."""
    structlog.contextvars.clear_contextvars()


__all__ = [
    "configure_logging",
    "configure_from_settings",
    "get_logger",
    "bind_context",
    "clear_context",
]
