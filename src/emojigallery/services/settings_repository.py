"""Typed projection of the preference store.

Each ``BooleanSetting`` turns one raw store key into:

 - ``observe()`` - an ``ObservableValue[bool]`` starting at the
   current-or-default value and following every committed change.
 - ``update(value)`` - a fire-and-forget write running through the
   dispatcher; the returned future resolves on the UI context to True/False
   and never carries a storage exception.

The repository does not cache: its observables are fed exclusively by the
store's change notifications, posted onto the UI context in commit order. The
completion of ``update`` is posted after the change notification, so once the
future resolves the observable already reflects the write.

Storage failures stop here: they are logged and published as
``AppEvent.PREFERENCE_WRITE_FAILED``; the observable keeps the last good value.
"""

from __future__ import annotations

import logging
from concurrent.futures import Future
from typing import Any, List, Optional

from emojigallery.app.preference_store import PreferenceStore
from emojigallery.config import settings

from .dispatch import Dispatcher, ImmediateDispatcher
from .event_bus import AppEvent, EventBus
from .observable import ObservableValue, Subscription

_logger = logging.getLogger(__name__)

__all__ = ["BooleanSetting", "SettingsRepository"]


class BooleanSetting:
    def __init__(
        self,
        store: PreferenceStore,
        key: str,
        *,
        dispatcher: Dispatcher,
        event_bus: EventBus | None = None,
    ) -> None:
        self.key = key
        self._store = store
        self._dispatcher = dispatcher
        self._event_bus = event_bus
        self._observable: ObservableValue[bool] = ObservableValue(store.get(key), name=key)
        # emit_current posts the value held at subscription time, covering any
        # write committed after the get() above.
        self._store_sub: Optional[Subscription] = store.subscribe(
            key, self._on_store_change, emit_current=True
        )

    @property
    def default(self) -> bool:
        return self._store.default_for(self.key)

    @property
    def value(self) -> bool:
        return self._observable.value

    def observe(self) -> ObservableValue[bool]:
        return self._observable

    # Store -> UI -------------------------------------------------------
    def _on_store_change(self, value: bool) -> None:
        # Runs on the writer's thread; hop to the UI context.
        self._dispatcher.post_ui(lambda v=value: self._observable.set(v))

    # UI -> Store -------------------------------------------------------
    def update(self, value: bool) -> "Future[bool]":
        value = bool(value)
        result: "Future[bool]" = Future()
        result.set_running_or_notify_cancel()
        io_future = self._dispatcher.submit_io(lambda: self._write(value))
        io_future.add_done_callback(
            lambda fut: self._dispatcher.post_ui(lambda: self._complete(fut, value, result))
        )
        return result

    def _write(self, value: bool) -> bool:
        try:
            return self._store.set(self.key, value)
        except Exception:  # noqa: BLE001
            _logger.exception("Unexpected error writing preference %s", self.key)
            return False

    def _complete(self, io_future: "Future[bool]", value: bool, result: "Future[bool]") -> None:
        ok = io_future.result() if io_future.exception() is None else False
        if not ok:
            _logger.warning(
                "Preference %s could not be saved; keeping %s", self.key, self._observable.value
            )
            if self._event_bus is not None:
                self._event_bus.publish(
                    AppEvent.PREFERENCE_WRITE_FAILED,
                    {"key": self.key, "requested": value, "retained": self._observable.value},
                )
        result.set_result(ok)

    def close(self) -> None:
        if self._store_sub is not None:
            self._store_sub.cancel()
            self._store_sub = None


class SettingsRepository:
    """Dark theme and linear layout settings over a ``PreferenceStore``."""

    def __init__(
        self,
        store: PreferenceStore,
        *,
        dispatcher: Dispatcher | None = None,
        event_bus: EventBus | None = None,
    ) -> None:
        self.store = store
        self.dispatcher: Dispatcher = dispatcher or ImmediateDispatcher()
        self.dark_theme = BooleanSetting(
            store, settings.IS_DARK_THEME, dispatcher=self.dispatcher, event_bus=event_bus
        )
        self.linear_layout = BooleanSetting(
            store, settings.IS_LINEAR_LAYOUT, dispatcher=self.dispatcher, event_bus=event_bus
        )

    def settings(self) -> List[BooleanSetting]:
        return [self.dark_theme, self.linear_layout]

    def as_dict(self) -> dict[str, Any]:
        return {s.key: s.value for s in self.settings()}

    def close(self) -> None:
        for setting in self.settings():
            setting.close()
