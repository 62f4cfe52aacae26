import logging

import pytest

from emojigallery.app import preference_store as preference_store_module
from emojigallery.config import settings
from emojigallery.services.dispatch import ThreadedDispatcher
from emojigallery.services.event_bus import AppEvent
from emojigallery.services.settings_repository import SettingsRepository


@pytest.fixture
def repo(store, bus):
    r = SettingsRepository(store, event_bus=bus)
    yield r
    r.close()


def _break_storage(monkeypatch):
    def broken_replace(src, dst):
        raise OSError("storage offline")

    monkeypatch.setattr(preference_store_module.os, "replace", broken_replace)


def test_observe_starts_with_defaults(repo):
    assert repo.dark_theme.observe().value is False
    assert repo.linear_layout.observe().value is True
    assert repo.as_dict() == {settings.IS_DARK_THEME: False, settings.IS_LINEAR_LAYOUT: True}


def test_observe_starts_with_persisted_value(store, bus):
    store.set(settings.IS_DARK_THEME, True)
    repo = SettingsRepository(store, event_bus=bus)
    assert repo.dark_theme.value is True
    repo.close()


def test_write_committed_while_attaching_is_observed(store, monkeypatch):
    real_subscribe = store.subscribe

    def subscribe_after_write(key, callback, **kwargs):
        if key == settings.IS_DARK_THEME:
            store.set(settings.IS_DARK_THEME, True)
        return real_subscribe(key, callback, **kwargs)

    monkeypatch.setattr(store, "subscribe", subscribe_after_write)
    repo = SettingsRepository(store)
    try:
        assert store.get(settings.IS_DARK_THEME) is True
        assert repo.dark_theme.value is True
    finally:
        repo.close()


def test_update_writes_store_and_publishes(repo, store):
    seen = []
    repo.linear_layout.observe().subscribe(seen.append)
    fut = repo.linear_layout.update(False)
    assert fut.result(timeout=1) is True
    assert store.get(settings.IS_LINEAR_LAYOUT) is False
    assert repo.linear_layout.value is False
    assert seen == [False]


def test_external_store_write_reaches_observable(repo, store):
    store.set(settings.IS_DARK_THEME, True)
    assert repo.dark_theme.value is True


def test_update_failure_is_contained(repo, store, bus, monkeypatch, caplog):
    failures = []
    bus.subscribe(AppEvent.PREFERENCE_WRITE_FAILED, lambda e: failures.append(e.payload))
    _break_storage(monkeypatch)
    with caplog.at_level(logging.WARNING):
        fut = repo.dark_theme.update(True)
    assert fut.result(timeout=1) is False
    assert repo.dark_theme.value is False
    assert store.get(settings.IS_DARK_THEME) is False
    assert failures == [
        {"key": settings.IS_DARK_THEME, "requested": True, "retained": False}
    ]
    assert "could not be saved" in caplog.text


def test_unexpected_store_error_is_contained(repo, monkeypatch):
    def explode(*args, **kwargs):
        raise RuntimeError("unexpected")

    monkeypatch.setattr(repo.store, "set", explode)
    assert repo.linear_layout.update(False).result(timeout=1) is False
    assert repo.linear_layout.value is True


def test_close_detaches_from_store(repo, store):
    repo.close()
    store.set(settings.IS_DARK_THEME, True)
    assert repo.dark_theme.value is False


def test_threaded_update_delivers_on_ui_thread(store):
    dispatcher = ThreadedDispatcher()
    repo = SettingsRepository(store, dispatcher=dispatcher)
    try:
        fut = repo.dark_theme.update(True)
        dispatcher.drain(timeout=5)
        while not fut.done():
            dispatcher.drain(timeout=5)
        assert fut.result() is True
        # Completion is posted after the change, so the value is already current
        assert repo.dark_theme.value is True
    finally:
        repo.close()
        dispatcher.shutdown()


def test_threaded_updates_keep_write_order(store):
    dispatcher = ThreadedDispatcher()
    repo = SettingsRepository(store, dispatcher=dispatcher)
    seen = []
    repo.linear_layout.observe().subscribe(seen.append)
    try:
        futures = [repo.linear_layout.update(v) for v in (False, True, False, True, False)]
        while not all(f.done() for f in futures):
            dispatcher.drain(timeout=5)
        assert seen == [False, True, False, True, False]
        assert repo.linear_layout.value is False
        assert store.get(settings.IS_LINEAR_LAYOUT) is False
    finally:
        repo.close()
        dispatcher.shutdown()
