"""Logging service.

Provides an in-process logging handler capturing recent log records into a
ring buffer and re-emitting them as ``AppEvent.LOG_RECORD_ADDED`` on the
EventBus. Together with the bus this is the process-wide error/log channel:
preference write failures logged by the repository show up here without
ever raising into the view layer.

Design goals:
 - Headless testability (no Qt dependency here)
 - Filtering by level name or logger name substring
 - Capacity-bound ring buffer with O(1) append
"""

from __future__ import annotations

import logging
from collections import deque
from dataclasses import dataclass
from threading import RLock
from typing import Deque, List, Optional

from .event_bus import AppEvent, EventBus

__all__ = [
    "LogEntry",
    "LoggingService",
    "configure_logging",
]

LOG_FORMAT = "%(asctime)s %(levelname)-7s %(name)s: %(message)s"

_console_handler: logging.Handler | None = None


def configure_logging(level: str | int = "INFO") -> logging.Handler:
    """Install a console handler on the root logger (once) and set ``level``."""
    global _console_handler
    root = logging.getLogger()
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.INFO
    if _console_handler is None:
        _console_handler = logging.StreamHandler()
        _console_handler.setFormatter(logging.Formatter(LOG_FORMAT))
        root.addHandler(_console_handler)
    _console_handler.setLevel(level)
    root.setLevel(level)
    return _console_handler


@dataclass(frozen=True)
class LogEntry:
    level: str
    name: str
    message: str
    created: float


class _RingBufferHandler(logging.Handler):
    def __init__(self, svc: "LoggingService") -> None:
        super().__init__()
        self._svc = svc

    def emit(self, record: logging.LogRecord) -> None:  # noqa: D401
        try:
            self._svc._ingest_record(record)
        except Exception:  # noqa: BLE001 - logging must never raise
            self.handleError(record)


class LoggingService:
    def __init__(self, capacity: int = 500, *, event_bus: EventBus | None = None) -> None:
        self._capacity = capacity
        self._lock = RLock()
        self._entries: Deque[LogEntry] = deque(maxlen=capacity)
        self._event_bus = event_bus
        self._handler = _RingBufferHandler(self)
        self._handler.setLevel(logging.DEBUG)
        self._attached = False

    # Lifecycle --------------------------------------------------------
    def attach_root(self) -> None:
        if self._attached:
            return
        logging.getLogger().addHandler(self._handler)
        self._attached = True

    def detach_root(self) -> None:
        if not self._attached:
            return
        logging.getLogger().removeHandler(self._handler)
        self._attached = False

    @property
    def attached(self) -> bool:
        return self._attached

    # Internal ingestion -----------------------------------------------
    def _ingest_record(self, record: logging.LogRecord) -> None:
        entry = LogEntry(
            level=record.levelname,
            name=record.name,
            message=record.getMessage(),
            created=record.created,
        )
        with self._lock:
            self._entries.append(entry)
        if self._event_bus is not None:
            self._event_bus.publish(
                AppEvent.LOG_RECORD_ADDED,
                {"level": entry.level, "name": entry.name, "message": entry.message[:120]},
            )

    # Query ------------------------------------------------------------
    def recent(self, limit: Optional[int] = None) -> List[LogEntry]:
        with self._lock:
            data = list(self._entries)
        return data[-limit:] if limit is not None else data

    def filter(
        self, *, level: str | None = None, name_contains: str | None = None
    ) -> List[LogEntry]:
        out: List[LogEntry] = []
        for e in self.recent():
            if level and e.level != level:
                continue
            if name_contains and name_contains not in e.name:
                continue
            out.append(e)
        return out

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()
