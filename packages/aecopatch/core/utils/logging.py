"""Logging setup for aecopatch runs.

Logs always go to stderr (or a file) so that command output on stdout stays
clean. Build pipelines can switch to JSON-lines records, one per log call,
which carry the worker thread name and any context bound with get_logger.
"""

from __future__ import annotations

from collections.abc import Callable
from datetime import UTC, datetime
import functools
import json
import logging
import sys
import time
from typing import Any, TypeVar

F = TypeVar("F", bound=Callable[..., Any])

DEFAULT_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

# Attributes every LogRecord carries; anything else was passed as extra context
_RESERVED_ATTRS = frozenset(vars(logging.makeLogRecord({}))) | {"message", "asctime"}


class StructuredJSONFormatter(logging.Formatter):
    """Render each record as a single JSON object.

    Format:
    {
        "level": "INFO",
        "message": "Generated manifest with 3 files ...",
        "timestamp": "2026-01-29T12:00:00.000000+00:00",
        "context": {
            "logger_name": "aecopatch.core.generator",
            "module": "generator",
            "function": "generate_config",
            "line": 142,
            "thread_name": "aecopatch-worker-0",
            ...bound context such as source and target...
        }
    }
    """

    def format(self, record: logging.LogRecord) -> str:
        entry = {
            "level": record.levelname,
            "message": record.getMessage(),
            "timestamp": datetime.fromtimestamp(record.created, tz=UTC).isoformat(),
            "context": self._context(record),
        }
        return json.dumps(entry, default=str)

    def _context(self, record: logging.LogRecord) -> dict[str, Any]:
        context: dict[str, Any] = {
            "logger_name": record.name,
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
            "thread": record.thread,
            "thread_name": record.threadName,
            "process": record.process,
        }

        if record.exc_info:
            exc_type, exc_value, _ = record.exc_info
            context["error_type"] = exc_type.__name__ if exc_type else None
            context["error_message"] = str(exc_value) if exc_value else None
            context["stack_trace"] = record.exc_text or self.formatException(record.exc_info)

        context.update(
            (key, value)
            for key, value in vars(record).items()
            if key not in _RESERVED_ATTRS and not key.startswith("_")
        )
        return context


def configure_logging(
    level: str = "INFO",
    format_string: str | None = None,
    filename: str | None = None,
    structured: bool = False,
) -> None:
    """Install a single root handler, replacing any previous configuration.

    Args:
        level: Logging level name, case-insensitive
        format_string: Text format; ignored when structured
        filename: Log file path; stderr when None
        structured: Emit JSON-lines records instead of text

    Examples:
        >>> configure_logging(level="INFO")
        >>> configure_logging(level="DEBUG", structured=True, filename="build.jsonl")
    """
    handler: logging.Handler = (
        logging.FileHandler(filename) if filename else logging.StreamHandler(sys.stderr)
    )
    handler.setFormatter(
        StructuredJSONFormatter()
        if structured
        else logging.Formatter(format_string or DEFAULT_FORMAT)
    )

    logging.basicConfig(level=level.upper(), handlers=[handler], force=True)


def get_logger(name: str, **context: Any) -> logging.Logger | logging.LoggerAdapter:
    """Return the named logger, bound to ``context`` when any is given.

    Bound values show up as extra fields in structured records.
    """
    base_logger = logging.getLogger(name)
    if context:
        return logging.LoggerAdapter(base_logger, context)
    return base_logger


def log_performance(func: F) -> F:
    """Log the wall-clock time of each call at DEBUG on the function's module logger."""
    func_logger = logging.getLogger(func.__module__)

    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        start_time = time.perf_counter()
        try:
            return func(*args, **kwargs)
        finally:
            func_logger.debug(
                "%r took %.4f seconds", func.__qualname__, time.perf_counter() - start_time
            )

    return wrapper  # type: ignore[return-value]
