"""Global configuration and constants for the emoji gallery."""

from __future__ import annotations

import os
from typing import Final, Mapping

APP_NAME: Final = "Emoji Release"
DATA_DIR: Final = os.environ.get("EMOJIGALLERY_DATA_DIR", "data")
LOG_LEVEL: Final = os.environ.get("EMOJIGALLERY_LOG_LEVEL", "INFO")

PREFS_FILENAME: Final = "datastore_prefs.json"
LOCK_NAME: Final = "emojigallery.lock"

# Preference keys (persisted verbatim in the JSON store)
IS_DARK_THEME: Final = "isDarkTheme"
IS_LINEAR_LAYOUT: Final = "isLinearLayout"

PREFERENCE_DEFAULTS: Final[Mapping[str, bool]] = {
    IS_DARK_THEME: False,
    IS_LINEAR_LAYOUT: True,
}

GRID_COLUMNS: Final = 3
TOAST_TIMEOUT_MS: Final = 2000
