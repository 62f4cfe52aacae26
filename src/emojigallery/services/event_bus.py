"""EventBus core.

Lightweight synchronous publish/subscribe mechanism with typed events. It is
the process-wide notification channel: preference write failures, theme and
layout changes, emoji clicks, log records and uncaught exceptions are all
published here.

Goals:
 - Decouple producers and consumers (no Qt dependency)
 - Safe error isolation: one failing handler doesn't break the publish cycle
 - Allow one-shot (once) subscriptions
 - Provide unsubscribe handles
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from threading import RLock
from time import perf_counter
from typing import Any, Dict, List, Protocol

__all__ = [
    "AppEvent",
    "Event",
    "EventBus",
    "EventHandler",
    "Subscription",
]


class AppEvent(str, Enum):  # str subclass keeps payload logging / JSON simple
    STARTUP_COMPLETE = "startup_complete"
    THEME_CHANGED = "theme_changed"
    LAYOUT_CHANGED = "layout_changed"
    PREFERENCE_WRITE_FAILED = "preference_write_failed"
    EMOJI_CLICKED = "emoji_clicked"
    LOG_RECORD_ADDED = "log_record_added"
    UNCAUGHT_EXCEPTION = "uncaught_exception"


@dataclass
class Event:
    name: str  # matches AppEvent value or custom string
    payload: Any
    timestamp: float


class EventHandler(Protocol):  # noqa: D401 - protocol signature docs implicit
    def __call__(self, event: Event) -> None: ...  # pragma: no cover - structural


@dataclass
class Subscription:
    event: str
    handler: EventHandler
    once: bool
    active: bool = True

    def cancel(self) -> None:
        self.active = False


class EventBus:
    """Synchronous event dispatcher.

    Thread-safety: the subscription table is guarded by a re-entrant lock.
    Handlers are invoked while the lock is NOT held (copy-first strategy) so
    handlers can subscribe/unsubscribe recursively without deadlock. Handlers
    run on the publishing thread.
    """

    def __init__(self) -> None:
        self._lock = RLock()
        self._subs: Dict[str, List[Subscription]] = {}
        self._errors: List[tuple[Event, BaseException]] = []

    # ------------------------------------------------------------------
    # Subscription management
    # ------------------------------------------------------------------
    def subscribe(
        self, name: str | AppEvent, handler: EventHandler, *, once: bool = False
    ) -> Subscription:
        key = name.value if isinstance(name, AppEvent) else name
        sub = Subscription(event=key, handler=handler, once=once)
        with self._lock:
            self._subs.setdefault(key, []).append(sub)
        return sub

    def unsubscribe(self, sub: Subscription) -> None:
        with self._lock:
            bucket = self._subs.get(sub.event)
            if bucket:
                bucket[:] = [s for s in bucket if s is not sub]
                if not bucket:
                    self._subs.pop(sub.event, None)
        sub.active = False

    def clear(self) -> None:
        with self._lock:
            self._subs.clear()
            self._errors.clear()

    # ------------------------------------------------------------------
    # Publishing
    # ------------------------------------------------------------------
    def publish(self, name: str | AppEvent, payload: Any = None) -> Event:
        key = name.value if isinstance(name, AppEvent) else name
        evt = Event(name=key, payload=payload, timestamp=perf_counter())
        with self._lock:
            subs = list(self._subs.get(key, ()))
        to_remove: List[Subscription] = []
        for sub in subs:
            if not sub.active:
                continue
            try:
                sub.handler(evt)
            except Exception as exc:  # noqa: BLE001 - capture any handler failure
                with self._lock:
                    self._errors.append((evt, exc))
            else:
                if sub.once:
                    to_remove.append(sub)
        for sub in to_remove:
            self.unsubscribe(sub)
        return evt

    # ------------------------------------------------------------------
    # Introspection
    # ------------------------------------------------------------------
    def subscriber_count(self, name: str | AppEvent) -> int:
        key = name.value if isinstance(name, AppEvent) else name
        with self._lock:
            return len(self._subs.get(key, ()))

    def list_events(self) -> list[str]:
        with self._lock:
            return list(self._subs.keys())

    @property
    def errors(self) -> list[tuple[Event, BaseException]]:
        with self._lock:
            return list(self._errors)
