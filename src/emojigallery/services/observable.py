"""Observable value holder.

A minimal publish/subscribe primitive: a current value plus a list of
callbacks invoked synchronously on every committed change. Used for the
per-key preference streams, the repository settings and the view-state
published by the view model.

Delivery rules:
 - Callbacks run on the thread calling ``set`` and outside the internal lock
   (copy-first strategy, same as ``EventBus.publish``) so a callback may
   subscribe / unsubscribe / read without deadlocking.
 - Setting a value equal to the current one does not notify.
 - A failing callback is logged and does not prevent delivery to the rest.

Writers are expected to serialize their ``set`` calls (the preference store
holds its write lock, UI-side holders are only written from the UI thread);
under that rule subscribers observe values in commit order.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from threading import RLock
from typing import Any, Callable, Generic, List, Optional, Tuple, TypeVar

_logger = logging.getLogger(__name__)

T = TypeVar("T")

__all__ = ["ObservableValue", "Subscription", "set_all"]


@dataclass
class Subscription:
    callback: Callable[..., None]
    _release: Callable[["Subscription"], None] = field(repr=False)
    active: bool = True

    def cancel(self) -> None:
        if self.active:
            self.active = False
            self._release(self)


class ObservableValue(Generic[T]):
    def __init__(self, initial: T, *, name: str = "") -> None:
        self._lock = RLock()
        self._value = initial
        self._subs: List[Subscription] = []
        self.name = name

    def __repr__(self) -> str:  # pragma: no cover - debugging aid
        return f"ObservableValue({self.name or '?'}={self._value!r})"

    @property
    def value(self) -> T:
        with self._lock:
            return self._value

    def set(self, value: T) -> bool:
        """Replace the value; notify subscribers if it changed.

        Returns True when subscribers were notified.
        """
        subs = self._commit(value)
        if subs is None:
            return False
        self._deliver(subs, value)
        return True

    def _commit(self, value: T) -> Optional[List[Subscription]]:
        # Store without notifying; returns the subscribers to notify, or None.
        with self._lock:
            if value == self._value:
                return None
            self._value = value
            return list(self._subs)

    def refresh(self) -> None:
        """Re-deliver the current value to every subscriber."""
        with self._lock:
            value = self._value
            subs = list(self._subs)
        self._deliver(subs, value)

    def _deliver(self, subs: List[Subscription], value: T) -> None:
        for sub in subs:
            if not sub.active:
                continue
            try:
                sub.callback(value)
            except Exception:  # noqa: BLE001 - isolate subscriber failures
                _logger.exception("Subscriber of %s failed", self.name or "observable")

    def subscribe(self, callback: Callable[[T], None], *, emit_current: bool = False) -> Subscription:
        """Register ``callback``; with ``emit_current`` it is called once immediately."""
        sub = Subscription(callback=callback, _release=self._unsubscribe)
        # Initial emission happens under the lock so a concurrent set() cannot
        # deliver its newer value ahead of the current one.
        with self._lock:
            self._subs.append(sub)
            if emit_current:
                callback(self._value)
        return sub

    def _unsubscribe(self, sub: Subscription) -> None:
        with self._lock:
            self._subs = [s for s in self._subs if s is not sub]

    def subscriber_count(self) -> int:
        with self._lock:
            return len(self._subs)


def set_all(*updates: Tuple[ObservableValue[Any], Any]) -> None:
    """Commit several ``(observable, value)`` pairs, then notify.

    Every value is stored before the first callback runs, so a subscriber of
    any of the observables reads the others already updated.
    """
    pending = []
    for observable, value in updates:
        subs = observable._commit(value)
        if subs is not None:
            pending.append((observable, subs, value))
    for observable, subs, value in pending:
        observable._deliver(subs, value)
