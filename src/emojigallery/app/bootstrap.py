"""Application bootstrap utilities for the emoji gallery.

Responsibilities:
 - Optional headless bootstrap (tests / scripting without a display)
 - Logging setup and the in-process log ring buffer
 - Constructing the preference store, settings repository, dispatcher and
   view model once, and wiring them together explicitly
 - Returning every constructed object inside a single ``AppContext``
 - Single-instance guard for windowed launches

PyQt6 is only imported when a windowed (non-headless) context is requested,
keeping test collection fast and headless runs free of a display.
"""

from __future__ import annotations

import logging
import os
import tempfile
import time
from contextlib import contextmanager
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Iterator, Optional

import psutil

from emojigallery.config import settings
from emojigallery.services.dispatch import Dispatcher, ImmediateDispatcher
from emojigallery.services.error_handling_service import ErrorHandlingService
from emojigallery.services.event_bus import AppEvent, EventBus
from emojigallery.services.logging_service import LoggingService, configure_logging
from emojigallery.services.settings_repository import SettingsRepository
from emojigallery.viewmodels.emoji_screen_viewmodel import EmojiScreenViewModel

from .preference_store import PreferenceStore

_logger = logging.getLogger(__name__)

__all__ = [
    "AppContext",
    "create_app",
    "acquire_single_instance",
    "release_single_instance",
    "single_instance",
]


@dataclass
class AppContext:
    """Container with references created during bootstrap.

    Attributes
    ----------
    qt_app: The QApplication instance (None when headless)
    headless: Whether headless bootstrap was used
    data_dir: Directory holding the preference file
    store / repository / viewmodel / dispatcher / event_bus: core objects
    duration_s: Total elapsed seconds for bootstrap
    """

    qt_app: Optional[Any]
    headless: bool
    data_dir: Path
    store: PreferenceStore
    repository: SettingsRepository
    viewmodel: EmojiScreenViewModel
    dispatcher: Dispatcher
    event_bus: EventBus
    logging_service: LoggingService
    error_service: ErrorHandlingService
    duration_s: float
    metadata: dict[str, Any] = field(default_factory=dict)
    _closed: bool = False

    def close(self) -> None:
        """Tear down in reverse construction order (idempotent)."""
        if self._closed:
            return
        self._closed = True
        self.viewmodel.close()
        self.repository.close()
        self.dispatcher.shutdown(wait=True)
        self.error_service.uninstall()
        self.logging_service.detach_root()
        _logger.debug("Application context closed")


def _create_qt_app() -> tuple[Any, Dispatcher]:
    import sys

    from PyQt6.QtWidgets import QApplication

    from emojigallery.workers import QtDispatcher

    qt_app = QApplication.instance() or QApplication(sys.argv[:1])
    qt_app.setApplicationName(settings.APP_NAME)
    return qt_app, QtDispatcher()


def create_app(
    *,
    headless: bool = True,
    data_dir: str | Path | None = None,
    log_level: str | None = None,
    dispatcher: Dispatcher | None = None,
    install_error_hooks: bool = False,
    configure_console_logging: bool = False,
) -> AppContext:
    """Create and wire the application context.

    Parameters
    ----------
    headless: When False a QApplication is created and a ``QtDispatcher``
        used (unless ``dispatcher`` is given).
    data_dir: Directory for the preference file (defaults to
        ``settings.DATA_DIR``).
    dispatcher: Explicit dispatcher; headless default runs I/O inline.
    install_error_hooks: Install global ``sys`` / ``threading`` excepthooks.
    configure_console_logging: Attach a console handler at ``log_level``.
    """
    started = time.perf_counter()
    if configure_console_logging:
        configure_logging(log_level or settings.LOG_LEVEL)

    bus = EventBus()
    logging_service = LoggingService(event_bus=bus)
    logging_service.attach_root()
    error_service = ErrorHandlingService(event_bus=bus)
    if install_error_hooks:
        error_service.install()

    qt_app = None
    if not headless:
        qt_app, qt_dispatcher = _create_qt_app()
        dispatcher = dispatcher or qt_dispatcher
    dispatcher = dispatcher or ImmediateDispatcher()

    base = Path(data_dir if data_dir is not None else settings.DATA_DIR)
    store = PreferenceStore(base / settings.PREFS_FILENAME, defaults=settings.PREFERENCE_DEFAULTS)
    repository = SettingsRepository(store, dispatcher=dispatcher, event_bus=bus)
    viewmodel = EmojiScreenViewModel(repository, event_bus=bus)

    ctx = AppContext(
        qt_app=qt_app,
        headless=headless,
        data_dir=base,
        store=store,
        repository=repository,
        viewmodel=viewmodel,
        dispatcher=dispatcher,
        event_bus=bus,
        logging_service=logging_service,
        error_service=error_service,
        duration_s=time.perf_counter() - started,
        metadata={"preferences": store.snapshot(), "prefs_path": str(store.path)},
    )
    _logger.info(
        "Bootstrap complete in %.1f ms (headless=%s, prefs=%s)",
        ctx.duration_s * 1000.0,
        headless,
        store.path,
    )
    bus.publish(AppEvent.STARTUP_COMPLETE, {"headless": headless})
    return ctx


# --------------------------------------------------------------------------------------
# Single-instance guard (file lock) utilities
# --------------------------------------------------------------------------------------

_LOCK_FD: int | None = None
_LOCK_PATH: str | None = None


def _default_lock_path(name: str = settings.LOCK_NAME) -> str:
    return os.path.join(tempfile.gettempdir(), name)


def _read_lock_pid(path: str) -> int | None:
    try:
        with open(path, "r", encoding="utf-8") as f:
            contents = f.read().strip()
    except OSError:
        return None
    return int(contents) if contents.isdigit() else None


def acquire_single_instance(
    lock_name: str = settings.LOCK_NAME, *, force_reclaim_stale: bool = True
) -> bool:
    """Attempt to acquire a coarse single-instance file lock.

    Returns True if this process holds the lock, False if another live
    instance does. A lock file left behind by a dead process is reclaimed.
    """
    global _LOCK_FD, _LOCK_PATH
    if _LOCK_FD is not None:
        return True
    path = _default_lock_path(lock_name)
    flags = os.O_CREAT | os.O_EXCL | os.O_RDWR
    for attempt in range(2):
        try:
            fd = os.open(path, flags, 0o644)
        except FileExistsError:
            stale_pid = _read_lock_pid(path)
            if attempt or not force_reclaim_stale:
                return False
            if stale_pid is not None and psutil.pid_exists(stale_pid):
                return False
            _logger.info("Reclaiming stale instance lock %s (pid=%s)", path, stale_pid)
            try:
                os.unlink(path)
            except OSError:
                return False
            continue
        os.write(fd, str(os.getpid()).encode("utf-8"))
        _LOCK_FD = fd
        _LOCK_PATH = path
        return True
    return False


def release_single_instance() -> None:
    global _LOCK_FD, _LOCK_PATH
    if _LOCK_FD is None:
        return
    try:
        os.close(_LOCK_FD)
        if _LOCK_PATH and os.path.exists(_LOCK_PATH):
            os.unlink(_LOCK_PATH)
    except OSError as exc:  # pragma: no cover - leftover lock is reclaimed next start
        _logger.warning("Could not remove instance lock %s: %s", _LOCK_PATH, exc)
    finally:
        _LOCK_FD = None
        _LOCK_PATH = None


@contextmanager
def single_instance(lock_name: str = settings.LOCK_NAME) -> Iterator[bool]:
    """Yield True if the lock was acquired; released on exit."""
    acquired = acquire_single_instance(lock_name)
    try:
        yield acquired
    finally:
        if acquired:
            release_single_instance()
