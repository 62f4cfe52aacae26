"""Light / dark colour roles and the stylesheet built from them.

Role names follow the Material colour scheme the screen was designed with
(primary, inverse primary, secondary container, ...). ``build_stylesheet``
turns a role mapping into the QSS applied to the main window.
"""

from __future__ import annotations

from typing import Final, Mapping

__all__ = ["LIGHT", "DARK", "colors_for", "build_stylesheet"]

LIGHT: Final[Mapping[str, str]] = {
    "background": "#FFFBFE",
    "on_background": "#1C1B1F",
    "primary": "#6750A4",
    "on_primary": "#FFFFFF",
    "inverse_primary": "#D0BCFF",
    "secondary_container": "#E8DEF8",
}

DARK: Final[Mapping[str, str]] = {
    "background": "#1C1B1F",
    "on_background": "#E6E1E5",
    "primary": "#D0BCFF",
    "on_primary": "#381E72",
    "inverse_primary": "#6750A4",
    "secondary_container": "#4A4458",
}


def colors_for(dark: bool) -> Mapping[str, str]:
    return DARK if dark else LIGHT


def build_stylesheet(dark: bool) -> str:
    c = colors_for(dark)
    return f"""
QMainWindow, QWidget#emojiContent, QScrollArea, QScrollArea > QWidget > QWidget {{
    background: {c['background']};
    color: {c['on_background']};
}}
QToolBar#topBar {{
    background: {c['inverse_primary']};
    border: none;
    spacing: 8px;
    padding: 4px 8px;
}}
QLabel#topBarTitle {{
    color: {c['on_background']};
    font-size: 20px;
}}
QToolButton#layoutToggle {{
    color: {c['on_background']};
    font-size: 22px;
    border: none;
}}
QCheckBox#darkThemeSwitch {{
    color: {c['on_background']};
}}
QCheckBox#darkThemeSwitch::indicator {{
    width: 36px;
    height: 18px;
    border-radius: 9px;
    background: {c['secondary_container']};
    border: 2px solid {c['primary']};
}}
QCheckBox#darkThemeSwitch::indicator:checked {{
    background: {c['primary']};
}}
QFrame#emojiCard {{
    background: {c['primary']};
    border-radius: 12px;
}}
QLabel#emojiText {{
    font-size: 50px;
    background: transparent;
}}
QLabel#toast {{
    background: {c['on_background']};
    color: {c['background']};
    border-radius: 8px;
    padding: 6px 12px;
}}
"""
