"""Durable boolean preference storage.

Stores scalar user preferences (dark theme, linear layout) in a small JSON
object file so they survive process restarts.

Design Goals
------------
- Pure-Python (no Qt import) to allow headless unit tests.
- Durable writes: temp file + fsync + ``os.replace`` before ``set`` returns.
- Graceful fallback: a missing file, an unparsable file or a non-boolean value
  reads as the configured default (with a warning), never raises.
- Writers are serialized; in-memory state changes only after the file has
  been committed, so readers never see a half-written value and a failed
  write leaves the prior value authoritative.
- Change notification per key through ``ObservableValue`` (callbacks) and
  ``PreferenceWatch`` (blocking iterator).
"""

from __future__ import annotations

import json
import logging
import os
import queue
from pathlib import Path
from threading import RLock
from typing import Callable, Dict, Iterator, Mapping, Optional

from emojigallery.services.observable import ObservableValue, Subscription

from .errors import CorruptValueError, StorageUnavailableError

_logger = logging.getLogger(__name__)

__all__ = ["PreferenceStore", "PreferenceWatch", "decode_bool"]

_CLOSED = object()


def decode_bool(key: str, raw: object) -> bool:
    """Return ``raw`` if it is a JSON boolean, else raise ``CorruptValueError``."""
    if isinstance(raw, bool):
        return raw
    raise CorruptValueError(key, raw)


class PreferenceWatch(Iterator[bool]):
    """Lazy, infinite stream of values for one key.

    The first item is the value current at creation time; every committed
    change follows in commit order. Iteration blocks until a value arrives and
    ends (``StopIteration``) once ``close()`` is called.
    """

    def __init__(self, key: str) -> None:
        self.key = key
        self._queue: "queue.SimpleQueue[object]" = queue.SimpleQueue()
        self._subscription: Optional[Subscription] = None
        self._closed = False

    def _push(self, value: bool) -> None:
        self._queue.put(value)

    def _attach(self, subscription: Subscription) -> None:
        self._subscription = subscription

    def __iter__(self) -> "PreferenceWatch":
        return self

    def __next__(self) -> bool:
        item = self._queue.get()
        if item is _CLOSED:
            self._queue.put(_CLOSED)  # keep subsequent next() calls terminating
            raise StopIteration
        return item  # type: ignore[return-value]

    def poll(self, timeout: float | None = None) -> Optional[bool]:
        """Return the next value, or None if nothing arrives within ``timeout``."""
        try:
            item = self._queue.get(timeout=timeout)
        except queue.Empty:
            return None
        if item is _CLOSED:
            self._queue.put(_CLOSED)
            return None
        return item  # type: ignore[return-value]

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        if self._subscription is not None:
            self._subscription.cancel()
        self._queue.put(_CLOSED)

    @property
    def closed(self) -> bool:
        return self._closed

    def __enter__(self) -> "PreferenceWatch":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()


class PreferenceStore:
    """Key/value store for boolean preferences backed by one JSON file.

    Parameters
    ----------
    path: File holding the JSON object (created on first successful write).
    defaults: Value returned for each key until a write happens; keys not
        listed default to ``False``.
    """

    def __init__(self, path: str | Path, *, defaults: Mapping[str, bool] | None = None) -> None:
        self.path = Path(path)
        self._defaults: Dict[str, bool] = dict(defaults or {})
        self._lock = RLock()  # guards _values / _streams
        self._write_lock = RLock()  # one write in flight; re-entrant for subscriber writes
        self._values: Dict[str, bool] = {}
        self._streams: Dict[str, ObservableValue[bool]] = {}
        self.reload()

    # ------------------------------------------------------------------
    # Reading
    # ------------------------------------------------------------------
    def default_for(self, key: str) -> bool:
        return self._defaults.get(key, False)

    def get(self, key: str, default: bool | None = None) -> bool:
        with self._lock:
            if key in self._values:
                return self._values[key]
        return self.default_for(key) if default is None else default

    def snapshot(self) -> Dict[str, bool]:
        """Effective values for every known key (defaults included)."""
        with self._lock:
            merged = dict(self._defaults)
            merged.update(self._values)
        return merged

    def reload(self) -> None:
        """Re-read the backing file, notifying watchers of changed values."""
        loaded = self._read_file()
        with self._write_lock:
            with self._lock:
                self._values = loaded
                streams = dict(self._streams)
            for key, stream in streams.items():
                stream.set(self.get(key))

    def _read_file(self) -> Dict[str, bool]:
        if not self.path.exists():
            return {}
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as exc:
            _logger.warning("Preference file %s unreadable (%s); using defaults", self.path, exc)
            return {}
        if not isinstance(data, dict):
            _logger.warning("Preference file %s is not a JSON object; using defaults", self.path)
            return {}
        values: Dict[str, bool] = {}
        for key, raw in data.items():
            try:
                values[str(key)] = decode_bool(str(key), raw)
            except CorruptValueError as exc:
                _logger.warning("%s; substituting default %s", exc, self.default_for(str(key)))
        return values

    # ------------------------------------------------------------------
    # Writing
    # ------------------------------------------------------------------
    def set(self, key: str, value: bool, *, raise_on_error: bool = False) -> bool:
        """Persist ``value`` under ``key``.

        Returns True once the value is durable. On storage failure the prior
        value stays in place and False is returned (or
        ``StorageUnavailableError`` raised with ``raise_on_error``).
        """
        if not isinstance(value, bool):
            raise TypeError(f"Preference '{key}' expects bool, got {type(value).__name__}")
        with self._write_lock:
            with self._lock:
                pending = dict(self._values)
            pending[key] = value
            try:
                self._write_file(pending)
            except OSError as exc:
                _logger.error("Failed to persist preference %s=%s to %s: %s", key, value, self.path, exc)
                if raise_on_error:
                    raise StorageUnavailableError(f"Cannot write {self.path}: {exc}") from exc
                return False
            with self._lock:
                self._values = pending
                stream = self._streams.get(key)
            _logger.debug("Preference %s committed as %s", key, value)
            # Notify while still holding the write lock so watchers see commit order.
            if stream is not None:
                stream.set(value)
        return True

    def _write_file(self, data: Mapping[str, bool]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp = self.path.with_suffix(self.path.suffix + ".tmp")
        try:
            with tmp.open("w", encoding="utf-8") as fh:
                fh.write(json.dumps(dict(data), indent=2, sort_keys=True))
                fh.flush()
                os.fsync(fh.fileno())
            os.replace(tmp, self.path)
        finally:
            if tmp.exists():
                try:
                    tmp.unlink()
                except OSError as exc:  # pragma: no cover
                    _logger.debug("Could not remove temp file %s: %s", tmp, exc)

    # ------------------------------------------------------------------
    # Change notification
    # ------------------------------------------------------------------
    def _stream(self, key: str) -> ObservableValue[bool]:
        with self._lock:
            stream = self._streams.get(key)
            if stream is None:
                stream = ObservableValue(self.get(key), name=key)
                self._streams[key] = stream
            return stream

    def subscribe(
        self, key: str, callback: Callable[[bool], None], *, emit_current: bool = False
    ) -> Subscription:
        """Invoke ``callback`` (on the writer's thread) for every committed change."""
        return self._stream(key).subscribe(callback, emit_current=emit_current)

    def watch(self, key: str) -> PreferenceWatch:
        """Return a new blocking iterator over the values of ``key``."""
        watch = PreferenceWatch(key)
        watch._attach(self._stream(key).subscribe(watch._push, emit_current=True))
        return watch
