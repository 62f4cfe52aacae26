# Shared fixtures. Qt tests rely on the 'qtbot' fixture from pytest-qt.

import os

import pytest

# Headless Qt platform must be chosen before any QApplication exists.
os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

from emojigallery.app.preference_store import PreferenceStore  # noqa: E402
from emojigallery.config import settings  # noqa: E402
from emojigallery.services.event_bus import EventBus  # noqa: E402


@pytest.fixture
def prefs_path(tmp_path):
    return tmp_path / settings.PREFS_FILENAME


@pytest.fixture
def store(prefs_path):
    return PreferenceStore(prefs_path, defaults=settings.PREFERENCE_DEFAULTS)


@pytest.fixture
def bus():
    return EventBus()
