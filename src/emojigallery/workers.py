"""Background workers for preference I/O used by the GUI.

``QtDispatcher`` implements the dispatcher interface on top of Qt:

 - I/O callables run as ``QRunnable`` tasks on a private ``QThreadPool``
   limited to one thread, so writes execute in submission order.
 - ``post_ui`` emits a queued ``pyqtSignal`` received by a bridge object
   living in the GUI thread; the callable runs there on the next event loop
   iteration.
"""

from __future__ import annotations

import logging
from concurrent.futures import Future
from typing import Callable, Set, TypeVar

from PyQt6.QtCore import QObject, QRunnable, QThreadPool, Qt, pyqtSignal

_logger = logging.getLogger(__name__)

T = TypeVar("T")

__all__ = ["QtDispatcher", "PreferenceIoTask"]


class _UiBridge(QObject):
    deliver = pyqtSignal(object)

    def __init__(self) -> None:
        super().__init__()
        self.deliver.connect(self._run, Qt.ConnectionType.QueuedConnection)

    def _run(self, fn) -> None:  # noqa: D401
        try:
            fn()
        except Exception:  # noqa: BLE001 - a slot must not raise into the event loop
            _logger.exception("UI callback failed")


class PreferenceIoTask(QRunnable):
    def __init__(self, fn: Callable[[], T], future: "Future[T]", on_done: Callable[["PreferenceIoTask"], None]):
        super().__init__()
        self._fn = fn
        self._future = future
        self._on_done = on_done

    def run(self) -> None:  # type: ignore[override]
        try:
            if not self._future.set_running_or_notify_cancel():
                return
            try:
                result = self._fn()
            except BaseException as exc:  # noqa: BLE001 - surfaced through the future
                self._future.set_exception(exc)
            else:
                self._future.set_result(result)
        finally:
            self._on_done(self)


class QtDispatcher:
    def __init__(self) -> None:
        self._pool = QThreadPool()
        self._pool.setMaxThreadCount(1)
        self._bridge = _UiBridge()
        self._in_flight: Set[PreferenceIoTask] = set()

    def submit_io(self, fn: Callable[[], T]) -> "Future[T]":
        fut: "Future[T]" = Future()
        task = PreferenceIoTask(fn, fut, self._in_flight.discard)
        task.setAutoDelete(False)
        self._in_flight.add(task)  # keep the Python wrapper alive while queued
        self._pool.start(task)
        return fut

    def post_ui(self, fn: Callable[[], None]) -> None:
        self._bridge.deliver.emit(fn)

    def shutdown(self, wait: bool = True) -> None:
        if wait:
            self._pool.waitForDone()
        else:
            self._pool.clear()
