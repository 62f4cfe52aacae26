"""Emoji gallery public API.

Curated, intentionally small surface for external callers (launcher, tests)
without depending on deep internal module paths. Importing this package does
not import PyQt6.
"""

from __future__ import annotations

from .app.preference_store import PreferenceStore  # noqa: F401
from .services.event_bus import AppEvent, Event, EventBus  # noqa: F401
from .services.observable import ObservableValue  # noqa: F401
from .services.settings_repository import SettingsRepository  # noqa: F401
from .viewmodels.emoji_screen_viewmodel import DisplayState, EmojiScreenViewModel  # noqa: F401

__version__ = "1.0.0"

__all__ = [
    "PreferenceStore",
    "AppEvent",
    "Event",
    "EventBus",
    "ObservableValue",
    "SettingsRepository",
    "DisplayState",
    "EmojiScreenViewModel",
    "__version__",
]
