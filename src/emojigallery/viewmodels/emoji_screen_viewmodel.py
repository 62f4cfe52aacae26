"""ViewModel for the emoji screen.

Joins the two repository settings (dark theme, linear layout) into the state
the screen renders:

 - ``ui_state``: layout flag plus which toggle icon / description to show.
 - ``theme_state``: dark theme flag.
 - ``display_state``: both of the above in one immutable record.

Each published record is derived from the latest observed value of both
settings, recomputed synchronously on the UI context whenever either one
changes. The two setters are fire-and-forget; write failures never reach the
caller (the repository logs them and publishes them on the event bus).
"""

from __future__ import annotations

import logging
from concurrent.futures import Future
from dataclasses import dataclass
from typing import List

from emojigallery.services.event_bus import AppEvent, EventBus
from emojigallery.services.observable import ObservableValue, Subscription, set_all
from emojigallery.services.settings_repository import SettingsRepository

_logger = logging.getLogger(__name__)

__all__ = [
    "EmojiScreenViewModel",
    "EmojiReleaseUiState",
    "EmojiReleaseThemeState",
    "DisplayState",
]


def _toggle_icon(is_linear_layout: bool) -> str:
    # The toggle shows the layout the user would switch *to*.
    return "ic_grid_layout" if is_linear_layout else "ic_linear_layout"


def _toggle_description(is_linear_layout: bool) -> str:
    return "grid_layout_toggle" if is_linear_layout else "linear_layout_toggle"


@dataclass(frozen=True)
class EmojiReleaseUiState:
    is_linear_layout: bool = True
    toggle_content_description: str = "grid_layout_toggle"
    toggle_icon: str = "ic_grid_layout"

    @classmethod
    def for_layout(cls, is_linear_layout: bool) -> "EmojiReleaseUiState":
        return cls(
            is_linear_layout=is_linear_layout,
            toggle_content_description=_toggle_description(is_linear_layout),
            toggle_icon=_toggle_icon(is_linear_layout),
        )


@dataclass(frozen=True)
class EmojiReleaseThemeState:
    is_dark_theme: bool = False


@dataclass(frozen=True)
class DisplayState:
    is_dark_theme: bool = False
    is_linear_layout: bool = True
    toggle_icon: str = "ic_grid_layout"
    toggle_content_description: str = "grid_layout_toggle"

    @classmethod
    def derive(cls, *, is_dark_theme: bool, is_linear_layout: bool) -> "DisplayState":
        return cls(
            is_dark_theme=is_dark_theme,
            is_linear_layout=is_linear_layout,
            toggle_icon=_toggle_icon(is_linear_layout),
            toggle_content_description=_toggle_description(is_linear_layout),
        )


class EmojiScreenViewModel:
    def __init__(self, repository: SettingsRepository, *, event_bus: EventBus | None = None):
        self._repo = repository
        self._event_bus = event_bus
        dark = repository.dark_theme.value
        linear = repository.linear_layout.value
        self.ui_state: ObservableValue[EmojiReleaseUiState] = ObservableValue(
            EmojiReleaseUiState.for_layout(linear), name="ui_state"
        )
        self.theme_state: ObservableValue[EmojiReleaseThemeState] = ObservableValue(
            EmojiReleaseThemeState(is_dark_theme=dark), name="theme_state"
        )
        self.display_state: ObservableValue[DisplayState] = ObservableValue(
            DisplayState.derive(is_dark_theme=dark, is_linear_layout=linear), name="display_state"
        )
        self._subs: List[Subscription] = [
            repository.dark_theme.observe().subscribe(self._on_theme),
            repository.linear_layout.observe().subscribe(self._on_layout),
        ]

    # Upstream changes --------------------------------------------------
    def _on_theme(self, is_dark: bool) -> None:
        set_all(
            (self.theme_state, EmojiReleaseThemeState(is_dark_theme=is_dark)),
            (self.display_state, self._joined()),
        )
        if self._event_bus is not None:
            self._event_bus.publish(AppEvent.THEME_CHANGED, {"is_dark_theme": is_dark})

    def _on_layout(self, is_linear: bool) -> None:
        set_all(
            (self.ui_state, EmojiReleaseUiState.for_layout(is_linear)),
            (self.display_state, self._joined()),
        )
        if self._event_bus is not None:
            self._event_bus.publish(AppEvent.LAYOUT_CHANGED, {"is_linear_layout": is_linear})

    def _joined(self) -> DisplayState:
        # Always read both settings at their latest observed value.
        return DisplayState.derive(
            is_dark_theme=self._repo.dark_theme.value,
            is_linear_layout=self._repo.linear_layout.value,
        )

    # Actions -----------------------------------------------------------
    def select_theme(self, is_dark: bool) -> None:
        _logger.debug("select_theme(%s)", is_dark)
        self._repo.dark_theme.update(bool(is_dark)).add_done_callback(self._on_write_done)

    def select_layout(self, is_linear: bool) -> None:
        _logger.debug("select_layout(%s)", is_linear)
        self._repo.linear_layout.update(bool(is_linear)).add_done_callback(self._on_write_done)

    def _on_write_done(self, fut: "Future[bool]") -> None:
        # Runs on the UI context. A rejected write re-emits the unchanged state
        # so views holding the user's optimistic input snap back.
        if not fut.result():
            self.display_state.refresh()

    def toggle_layout(self) -> None:
        self.select_layout(not self.display_state.value.is_linear_layout)

    def on_emoji_clicked(self, emoji: str) -> None:
        layout = "Linear" if self.display_state.value.is_linear_layout else "Grid"
        _logger.info("Clicked %s Layout: %s", layout, emoji)
        if self._event_bus is not None:
            self._event_bus.publish(AppEvent.EMOJI_CLICKED, {"emoji": emoji, "layout": layout})

    # Lifecycle ---------------------------------------------------------
    @property
    def current(self) -> DisplayState:
        return self.display_state.value

    def close(self) -> None:
        for sub in self._subs:
            sub.cancel()
        self._subs.clear()
