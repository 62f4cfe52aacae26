"""String and icon resources looked up by identifier.

The view model only deals in identifiers (``grid_layout_toggle``,
``ic_grid_layout``); the view resolves them here.
"""

from __future__ import annotations

from typing import Final, Mapping

STRINGS: Final[Mapping[str, str]] = {
    "top_bar_name": "Emoji Release",
    "grid_layout_toggle": "Grid Layout Toggle",
    "linear_layout_toggle": "Linear Layout Toggle",
    "dark_theme_toggle": "Dark Theme",
    "click_toast": "CLICK SMILEY",
}

# Glyphs stand in for vector drawables.
ICONS: Final[Mapping[str, str]] = {
    "ic_grid_layout": "▦",
    "ic_linear_layout": "☰",
}


def string(res_id: str) -> str:
    """Return the string for ``res_id`` (the id itself when unknown)."""
    return STRINGS.get(res_id, res_id)


def icon_glyph(res_id: str) -> str:
    return ICONS.get(res_id, "?")
