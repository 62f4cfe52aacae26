"""Dispatchers moving persistence work off the UI context.

A dispatcher offers two operations:

 - ``submit_io(fn)`` runs ``fn`` away from the UI context and returns a
   ``concurrent.futures.Future`` with its outcome.
 - ``post_ui(fn)`` schedules ``fn`` on the UI context (FIFO).

``ImmediateDispatcher`` runs everything inline and is used for headless
bootstrap and unit tests. ``ThreadedDispatcher`` uses a single worker thread
for I/O and a queue drained by the owning thread; it serves headless event
loops and concurrency tests. The Qt implementation lives in
``emojigallery.workers``.
"""

from __future__ import annotations

import logging
import queue
import threading
from concurrent.futures import Future, ThreadPoolExecutor
from typing import Callable, Protocol, TypeVar

T = TypeVar("T")

_logger = logging.getLogger(__name__)

__all__ = ["Dispatcher", "ImmediateDispatcher", "ThreadedDispatcher"]


class Dispatcher(Protocol):  # noqa: D401 - structural interface
    def submit_io(self, fn: Callable[[], T]) -> "Future[T]": ...  # pragma: no cover

    def post_ui(self, fn: Callable[[], None]) -> None: ...  # pragma: no cover

    def shutdown(self, wait: bool = True) -> None: ...  # pragma: no cover


class ImmediateDispatcher:
    def submit_io(self, fn: Callable[[], T]) -> "Future[T]":
        fut: "Future[T]" = Future()
        fut.set_running_or_notify_cancel()
        try:
            result = fn()
        except BaseException as exc:  # noqa: BLE001 - surfaced through the future
            fut.set_exception(exc)
        else:
            fut.set_result(result)
        return fut

    def post_ui(self, fn: Callable[[], None]) -> None:
        fn()

    def shutdown(self, wait: bool = True) -> None:
        return None


class ThreadedDispatcher:
    """Single I/O worker thread plus a UI queue drained via ``drain()``.

    The thread that constructs the dispatcher is treated as the UI context;
    callbacks posted from any thread only run when that thread calls
    ``drain()``.
    """

    def __init__(self, *, thread_name_prefix: str = "prefs-io") -> None:
        self._executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix=thread_name_prefix)
        self._ui_queue: "queue.SimpleQueue[Callable[[], None]]" = queue.SimpleQueue()
        self.ui_thread = threading.current_thread()

    def submit_io(self, fn: Callable[[], T]) -> "Future[T]":
        return self._executor.submit(fn)

    def post_ui(self, fn: Callable[[], None]) -> None:
        self._ui_queue.put(fn)

    def drain(self, timeout: float | None = 0.0) -> int:
        """Run pending UI callbacks on the calling thread.

        With ``timeout`` > 0 the first callback is awaited up to that long.
        Returns the number of callbacks executed.
        """
        ran = 0
        block = bool(timeout)
        while True:
            try:
                fn = self._ui_queue.get(block=block, timeout=timeout if block else None)
            except queue.Empty:
                return ran
            block = False
            try:
                fn()
            except Exception:  # noqa: BLE001
                _logger.exception("UI callback failed")
            ran += 1

    def pending(self) -> bool:
        return not self._ui_queue.empty()

    def shutdown(self, wait: bool = True) -> None:
        self._executor.shutdown(wait=wait)
