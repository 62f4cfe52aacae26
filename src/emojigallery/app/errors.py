"""Error taxonomy for preference persistence."""

from __future__ import annotations

__all__ = ["PreferenceError", "StorageUnavailableError", "CorruptValueError"]


class PreferenceError(RuntimeError):
    """Base class for preference storage failures."""


class StorageUnavailableError(PreferenceError):
    """Raised when the backing file cannot be written (or read) at all."""


class CorruptValueError(PreferenceError, ValueError):
    """Raised when a stored value cannot be decoded as a boolean."""

    def __init__(self, key: str, raw: object) -> None:
        super().__init__(f"Stored value for '{key}' is not a boolean: {raw!r}")
        self.key = key
        self.raw = raw
