import logging

import pytest

from emojigallery.app import preference_store as preference_store_module
from emojigallery.app.preference_store import PreferenceStore
from emojigallery.config import settings
from emojigallery.services.event_bus import AppEvent
from emojigallery.services.settings_repository import SettingsRepository
from emojigallery.viewmodels.emoji_screen_viewmodel import (
    DisplayState,
    EmojiReleaseThemeState,
    EmojiReleaseUiState,
    EmojiScreenViewModel,
)


@pytest.fixture
def vm(store, bus):
    repo = SettingsRepository(store, event_bus=bus)
    model = EmojiScreenViewModel(repo, event_bus=bus)
    yield model
    model.close()
    repo.close()


def _flags(state: DisplayState):
    return {"isDarkTheme": state.is_dark_theme, "isLinearLayout": state.is_linear_layout}


def test_initial_state_uses_defaults(vm):
    assert _flags(vm.current) == {"isDarkTheme": False, "isLinearLayout": True}
    assert vm.current.toggle_icon == "ic_grid_layout"
    assert vm.current.toggle_content_description == "grid_layout_toggle"
    assert vm.ui_state.value == EmojiReleaseUiState()
    assert vm.theme_state.value == EmojiReleaseThemeState()


def test_theme_then_layout_scenario(vm):
    states = []
    vm.display_state.subscribe(states.append)
    vm.select_theme(True)
    assert _flags(vm.current) == {"isDarkTheme": True, "isLinearLayout": True}
    vm.select_layout(False)
    assert _flags(vm.current) == {"isDarkTheme": True, "isLinearLayout": False}
    assert vm.current.toggle_icon == "ic_linear_layout"
    assert vm.current.toggle_content_description == "linear_layout_toggle"
    assert [_flags(s) for s in states] == [
        {"isDarkTheme": True, "isLinearLayout": True},
        {"isDarkTheme": True, "isLinearLayout": False},
    ]


@pytest.mark.parametrize(
    "sequence",
    [(True,), (True, False), (False, True, True), (True, False, True, False)],
)
def test_last_select_theme_wins(vm, sequence):
    for value in sequence:
        vm.select_theme(value)
    assert vm.current.is_dark_theme is sequence[-1]
    assert vm.theme_state.value.is_dark_theme is sequence[-1]


def test_select_layout_twice_is_idempotent(vm, store):
    states = []
    vm.display_state.subscribe(states.append)
    vm.select_layout(False)
    vm.select_layout(False)
    assert len(states) == 1
    assert vm.current.is_linear_layout is False
    assert store.get(settings.IS_LINEAR_LAYOUT) is False
    vm.select_layout(True)
    assert vm.current.is_linear_layout is True


def test_toggle_layout_flips(vm):
    vm.toggle_layout()
    assert vm.current.is_linear_layout is False
    vm.toggle_layout()
    assert vm.current.is_linear_layout is True


def test_derived_fields_match_flags_for_every_published_state(vm):
    states = []
    vm.display_state.subscribe(states.append)
    for dark, linear in [(True, False), (False, False), (False, True), (True, True)]:
        vm.select_theme(dark)
        vm.select_layout(linear)
    for s in states:
        assert s == DisplayState.derive(
            is_dark_theme=s.is_dark_theme, is_linear_layout=s.is_linear_layout
        )


def test_state_survives_restart(vm, prefs_path):
    vm.select_theme(True)
    vm.select_layout(False)
    store = PreferenceStore(prefs_path, defaults=settings.PREFERENCE_DEFAULTS)
    repo = SettingsRepository(store)
    restarted = EmojiScreenViewModel(repo)
    assert _flags(restarted.current) == {"isDarkTheme": True, "isLinearLayout": False}
    restarted.close()
    repo.close()


def test_write_failure_keeps_last_good_state(vm, bus, monkeypatch, caplog):
    failures = []
    bus.subscribe(AppEvent.PREFERENCE_WRITE_FAILED, lambda e: failures.append(e.payload["key"]))
    monkeypatch.setattr(
        preference_store_module.os, "replace", lambda s, d: (_ for _ in ()).throw(OSError("ro"))
    )
    with caplog.at_level(logging.WARNING):
        vm.select_theme(True)  # must not raise
    assert vm.current.is_dark_theme is False
    assert failures == [settings.IS_DARK_THEME]


def test_change_events_published(vm, bus):
    names = []
    for evt in (AppEvent.THEME_CHANGED, AppEvent.LAYOUT_CHANGED):
        bus.subscribe(evt, lambda e: names.append((e.name, e.payload)))
    vm.select_theme(True)
    vm.select_layout(False)
    assert names == [
        ("theme_changed", {"is_dark_theme": True}),
        ("layout_changed", {"is_linear_layout": False}),
    ]


def test_emoji_click_logged_and_published(vm, bus, caplog):
    clicks = []
    bus.subscribe(AppEvent.EMOJI_CLICKED, lambda e: clicks.append(e.payload))
    with caplog.at_level(logging.INFO):
        vm.on_emoji_clicked("\U0001F600")
    assert clicks == [{"emoji": "\U0001F600", "layout": "Linear"}]
    assert "Clicked Linear Layout" in caplog.text


def test_close_stops_following_repository(vm, store):
    vm.close()
    store.set(settings.IS_DARK_THEME, True)
    assert vm.current.is_dark_theme is False


def test_write_failure_reemits_current_state(vm, monkeypatch):
    states = []
    vm.display_state.subscribe(states.append)
    monkeypatch.setattr(
        preference_store_module.os, "replace", lambda s, d: (_ for _ in ()).throw(OSError("ro"))
    )
    vm.select_layout(False)
    assert [_flags(s) for s in states] == [{"isDarkTheme": False, "isLinearLayout": True}]


def test_theme_subscribers_see_joined_state_already_updated(vm):
    seen = []
    vm.theme_state.subscribe(
        lambda ts: seen.append((ts.is_dark_theme, vm.display_state.value.is_dark_theme))
    )
    vm.select_theme(True)
    assert seen == [(True, True)]


def test_display_subscribers_see_ui_state_already_updated(vm):
    seen = []
    vm.display_state.subscribe(
        lambda ds: seen.append((ds.is_linear_layout, vm.ui_state.value.is_linear_layout))
    )
    vm.select_layout(False)
    assert seen == [(False, False)]
