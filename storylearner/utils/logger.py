"""Logging utilities."""

import sys
import time
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Dict, Iterator, Optional

from loguru import logger as loguru_logger


LOG_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | <level>{level: <8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan> - <level>{message}</level> | {extra}"
)


def setup_logger(
    level: str = "INFO",
    log_file: Optional[str] = None,
) -> "EventLogger":
    """
    Set up loguru sinks.

    Args:
        level: Logging level (DEBUG, INFO, WARNING, ERROR)
        log_file: Optional log file path

    Returns:
        Event logger writing to the configured sinks
    """
    loguru_logger.remove()

    loguru_logger.add(
        sys.stderr,
        level=level.upper(),
        format=LOG_FORMAT,
    )

    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        loguru_logger.add(
            log_file,
            level=level.upper(),
            rotation="10 MB",
            retention="1 week",
            serialize=True,
        )

    return EventLogger(loguru_logger)


def get_event_logger() -> "EventLogger":
    """Get an event logger on the shared loguru sinks."""
    return EventLogger(loguru_logger)


class EventLogger:
    """
    Structured logger taking a category, an event name and a payload.

    Events are fire-and-forget: nothing a caller does depends on them. The
    payload is attached to the record as loguru ``extra`` fields.
    """

    def __init__(self, logger=None):
        self._logger = logger

    def _emit(self, level: str, category: str, event: str, payload: Dict[str, Any]) -> None:
        self._logger.bind(category=category, **payload).opt(depth=2).log(level, event)

    def debug(self, category: str, event: str, **payload: Any) -> None:
        self._emit("DEBUG", category, event, payload)

    def info(self, category: str, event: str, **payload: Any) -> None:
        self._emit("INFO", category, event, payload)

    def warning(self, category: str, event: str, **payload: Any) -> None:
        self._emit("WARNING", category, event, payload)

    def error(self, category: str, event: str, **payload: Any) -> None:
        self._emit("ERROR", category, event, payload)

    @contextmanager
    def timed(self, category: str, label: str) -> Iterator[None]:
        """Emit a debug event with the elapsed time of the wrapped block."""
        start = time.perf_counter()
        try:
            yield
        finally:
            elapsed_ms = (time.perf_counter() - start) * 1000
            self._emit("DEBUG", category, f"{label} finished", {"duration_ms": round(elapsed_ms, 3)})


class NullEventLogger(EventLogger):
    """Event logger that discards everything."""

    def _emit(self, level: str, category: str, event: str, payload: Dict[str, Any]) -> None:
        pass
