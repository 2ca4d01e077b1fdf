"""Structured logging and metric hooks.

Log records are rendered as one JSON object per line. Store operations
attach their cache namespace and counts as ``context``; metric events go
to whatever callbacks the application registers.
"""

import json
import logging
import sys
import time
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Callable

PACKAGE_LOGGER = "authcache"

TEXT_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


class LogLevel(str, Enum):
    """Log levels matching Python's logging module."""

    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class StructuredFormatter(logging.Formatter):
    """Formats log records as structured JSON."""

    def format(self, record: logging.LogRecord) -> str:
        data: dict[str, Any] = {
            "level": record.levelname,
            "message": record.getMessage(),
            "timestamp": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "logger": record.name,
        }

        context = getattr(record, "context", None)
        if context:
            data["context"] = context

        if record.exc_info and record.exc_info[1] is not None:
            exc = record.exc_info[1]
            data["error"] = {"type": type(exc).__name__, "message": str(exc)}

        duration_ms = getattr(record, "duration_ms", None)
        if duration_ms is not None:
            data["duration_ms"] = round(duration_ms, 3)

        return json.dumps(data, default=str)


class StructuredLogger:
    """Logger that carries a context dict and timings on each record.

    Example:
        logger = get_logger(__name__)
        logger.debug("Scan complete", context={"count": 2}, duration_ms=1.4)
        logger.warning("No-reply pipeline failed", error=exc)
    """

    def __init__(self, name: str) -> None:
        # Level and handlers come from the "authcache" logger
        self.logger = logging.getLogger(name)

    def log(
        self,
        level: LogLevel,
        message: str,
        context: dict[str, Any] | None = None,
        error: BaseException | None = None,
        duration_ms: float | None = None,
    ) -> None:
        numeric = logging.getLevelName(level.value)
        if not self.logger.isEnabledFor(numeric):
            return

        extra: dict[str, Any] = {}
        if context:
            extra["context"] = context
        if duration_ms is not None:
            extra["duration_ms"] = duration_ms

        exc_info = (type(error), error, error.__traceback__) if error else None
        self.logger.log(numeric, message, exc_info=exc_info, extra=extra)

    def debug(self, message: str, **kwargs: Any) -> None:
        self.log(LogLevel.DEBUG, message, **kwargs)

    def info(self, message: str, **kwargs: Any) -> None:
        self.log(LogLevel.INFO, message, **kwargs)

    def warning(self, message: str, **kwargs: Any) -> None:
        self.log(LogLevel.WARNING, message, **kwargs)

    def error(self, message: str, **kwargs: Any) -> None:
        self.log(LogLevel.ERROR, message, **kwargs)


class Timer:
    """Measure wall time of a block in milliseconds."""

    def __init__(self) -> None:
        self.started: float | None = None
        self.duration_ms: float = 0.0

    def __enter__(self) -> "Timer":
        self.started = time.perf_counter()
        return self

    def __exit__(self, *args: Any) -> None:
        self.duration_ms = (time.perf_counter() - self.started) * 1000


MetricCallback = Callable[[str, float, dict[str, Any]], None]

_metric_callbacks: list[MetricCallback] = []


def register_metric_callback(callback: MetricCallback) -> None:
    """Register a callback receiving ``(name, value, labels)`` for every metric."""
    _metric_callbacks.append(callback)


def clear_metric_callbacks() -> None:
    _metric_callbacks.clear()


def emit_metric(name: str, value: float, labels: dict[str, Any] | None = None) -> None:
    """Send a metric event to every registered callback.

    Each callback gets its own copy of ``labels``. A failing callback is
    logged and does not stop the others or the cache operation.
    """
    for callback in list(_metric_callbacks):
        try:
            callback(name, value, dict(labels or {}))
        except Exception as e:
            logging.getLogger(__name__).debug("Metric callback failed for %s", name, exc_info=e)


def emit_counter(name: str, labels: dict[str, Any] | None = None) -> None:
    emit_metric(name, 1.0, labels)


def emit_timer(name: str, duration_ms: float, labels: dict[str, Any] | None = None) -> None:
    emit_metric(name, duration_ms, labels)


def configure_logging(level: LogLevel = LogLevel.INFO, format: str = "json") -> None:
    """Attach a stdout handler to the ``authcache`` logger.

    Args:
        level: Minimum log level
        format: ``"json"`` for StructuredFormatter output, ``"text"`` for
            plain lines
    """
    package_logger = logging.getLogger(PACKAGE_LOGGER)
    package_logger.setLevel(level.value)
    package_logger.handlers.clear()

    handler = logging.StreamHandler(sys.stdout)
    if format == "json":
        handler.setFormatter(StructuredFormatter())
    else:
        handler.setFormatter(logging.Formatter(TEXT_FORMAT))
    package_logger.addHandler(handler)


def get_logger(name: str) -> StructuredLogger:
    """Get a structured logger for a module (typically ``__name__``)."""
    return StructuredLogger(name)
