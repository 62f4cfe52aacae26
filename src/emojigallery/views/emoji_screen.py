"""Emoji screen: top bar, linear / grid layouts and toast overlay.

The window keeps no state of its own. It renders ``DisplayState`` published
by ``EmojiScreenViewModel`` and forwards user input to ``select_theme`` /
``select_layout``. Rendering happens on the GUI thread only (the dispatcher
delivers preference changes there).
"""

from __future__ import annotations

from typing import Callable, Dict, List, Optional, Sequence

from PyQt6.QtCore import Qt, pyqtSignal
from PyQt6.QtGui import QMouseEvent
from PyQt6.QtWidgets import (
    QCheckBox,
    QFrame,
    QGridLayout,
    QLabel,
    QMainWindow,
    QScrollArea,
    QSizePolicy,
    QStackedWidget,
    QToolBar,
    QToolButton,
    QVBoxLayout,
    QWidget,
)

from emojigallery.components.toast_host import ToastHost
from emojigallery.config import settings
from emojigallery.data import EMOJI_LIST, icon_glyph, string
from emojigallery.design.palette import build_stylesheet
from emojigallery.services.observable import Subscription
from emojigallery.viewmodels.emoji_screen_viewmodel import DisplayState, EmojiScreenViewModel

__all__ = [
    "EmojiCard",
    "EmojiCollection",
    "arrange_linear",
    "arrange_grid",
    "EmojiLinearLayout",
    "EmojiGridLayout",
    "EmojiMainWindow",
]

PADDING_SMALL = 8
PADDING_MEDIUM = 16
GRID_CARD_HEIGHT = 110


class EmojiCard(QFrame):
    clicked = pyqtSignal(str)

    def __init__(self, emoji: str, parent: Optional[QWidget] = None):
        super().__init__(parent)
        self.emoji = emoji
        self.setObjectName("emojiCard")
        self.setCursor(Qt.CursorShape.PointingHandCursor)
        lay = QVBoxLayout(self)
        lay.setContentsMargins(PADDING_MEDIUM, PADDING_MEDIUM, PADDING_MEDIUM, PADDING_MEDIUM)
        label = QLabel(emoji, self)
        label.setObjectName("emojiText")
        label.setAlignment(Qt.AlignmentFlag.AlignCenter)
        lay.addWidget(label)

    def mouseReleaseEvent(self, event: QMouseEvent) -> None:  # type: ignore[override]
        if event.button() == Qt.MouseButton.LeftButton:
            self.clicked.emit(self.emoji)
        super().mouseReleaseEvent(event)


def arrange_linear(body: QWidget, cards: Sequence[EmojiCard]) -> None:
    """Single column of full-width cards."""
    lay = QVBoxLayout(body)
    lay.setContentsMargins(PADDING_MEDIUM, PADDING_MEDIUM, PADDING_MEDIUM, 0)
    lay.setSpacing(PADDING_SMALL)
    for card in cards:
        lay.addWidget(card)
    lay.addStretch(1)


def arrange_grid(body: QWidget, cards: Sequence[EmojiCard]) -> None:
    """Fixed-column grid of equal height cards."""
    grid = QGridLayout(body)
    grid.setContentsMargins(PADDING_MEDIUM, PADDING_MEDIUM, PADDING_MEDIUM, 0)
    grid.setSpacing(PADDING_MEDIUM)
    for index, card in enumerate(cards):
        card.setFixedHeight(GRID_CARD_HEIGHT)
        row, col = divmod(index, settings.GRID_COLUMNS)
        grid.addWidget(card, row, col)
    grid.setRowStretch(grid.rowCount(), 1)


class EmojiCollection(QScrollArea):
    """Scrollable set of emoji cards placed by an ``arrange`` function.

    ``arrange(body, cards)`` installs a layout on ``body`` holding every card.
    """

    card_clicked = pyqtSignal(str)

    def __init__(
        self,
        emojis: Sequence[str],
        arrange: Callable[[QWidget, Sequence[EmojiCard]], None],
        parent: Optional[QWidget] = None,
    ):
        super().__init__(parent)
        self.setWidgetResizable(True)
        self.setFrameShape(QFrame.Shape.NoFrame)
        self.cards: Dict[str, EmojiCard] = {}
        placed: List[EmojiCard] = []
        for emoji in emojis:
            card = EmojiCard(emoji)
            card.clicked.connect(self.card_clicked)
            self.cards[emoji] = card
            placed.append(card)
        body = QWidget()
        arrange(body, placed)
        self.setWidget(body)


class EmojiLinearLayout(EmojiCollection):
    def __init__(self, emojis: Sequence[str], parent: Optional[QWidget] = None):
        super().__init__(emojis, arrange_linear, parent)


class EmojiGridLayout(EmojiCollection):
    def __init__(self, emojis: Sequence[str], parent: Optional[QWidget] = None):
        super().__init__(emojis, arrange_grid, parent)


class EmojiMainWindow(QMainWindow):
    def __init__(
        self,
        viewmodel: EmojiScreenViewModel,
        parent: Optional[QWidget] = None,
        *,
        emojis: Sequence[str] = EMOJI_LIST,
        toast_timeout_ms: int = settings.TOAST_TIMEOUT_MS,
    ):
        super().__init__(parent)
        self._vm = viewmodel
        self._toast_timeout_ms = toast_timeout_ms
        self._subs: List[Subscription] = []
        self.setWindowTitle(string("top_bar_name"))
        self.resize(420, 720)
        self._build_top_bar()
        self._build_content(emojis)
        self._subs.append(viewmodel.display_state.subscribe(self.render, emit_current=True))

    # Construction ------------------------------------------------------
    def _build_top_bar(self) -> None:
        bar = QToolBar(self)
        bar.setObjectName("topBar")
        bar.setMovable(False)
        self.addToolBar(Qt.ToolBarArea.TopToolBarArea, bar)
        self.lbl_title = QLabel(string("top_bar_name"))
        self.lbl_title.setObjectName("topBarTitle")
        bar.addWidget(self.lbl_title)
        spacer = QWidget()
        spacer.setSizePolicy(QSizePolicy.Policy.Expanding, QSizePolicy.Policy.Preferred)
        bar.addWidget(spacer)
        self.switch_dark = QCheckBox()
        self.switch_dark.setObjectName("darkThemeSwitch")
        self.switch_dark.setAccessibleName(string("dark_theme_toggle"))
        self.switch_dark.setToolTip(string("dark_theme_toggle"))
        self.switch_dark.toggled.connect(self._vm.select_theme)
        bar.addWidget(self.switch_dark)
        self.btn_layout = QToolButton()
        self.btn_layout.setObjectName("layoutToggle")
        self.btn_layout.clicked.connect(self._on_layout_clicked)
        bar.addWidget(self.btn_layout)

    def _build_content(self, emojis: Sequence[str]) -> None:
        content = QWidget()
        content.setObjectName("emojiContent")
        lay = QVBoxLayout(content)
        lay.setContentsMargins(0, 0, 0, PADDING_MEDIUM)
        self.stack = QStackedWidget()
        self.linear_view = EmojiLinearLayout(emojis)
        self.grid_view = EmojiGridLayout(emojis)
        for view in (self.linear_view, self.grid_view):
            view.card_clicked.connect(self._on_card_clicked)
            self.stack.addWidget(view)
        lay.addWidget(self.stack, 1)
        self.toast_host = ToastHost(content)
        lay.addWidget(self.toast_host)
        self.setCentralWidget(content)

    # Rendering ---------------------------------------------------------
    def render(self, state: DisplayState) -> None:
        blocked = self.switch_dark.blockSignals(True)
        try:
            self.switch_dark.setChecked(state.is_dark_theme)
        finally:
            self.switch_dark.blockSignals(blocked)
        self.btn_layout.setText(icon_glyph(state.toggle_icon))
        description = string(state.toggle_content_description)
        self.btn_layout.setToolTip(description)
        self.btn_layout.setAccessibleName(description)
        self.stack.setCurrentWidget(self.linear_view if state.is_linear_layout else self.grid_view)
        self.setStyleSheet(build_stylesheet(state.is_dark_theme))

    # Input -------------------------------------------------------------
    def _on_layout_clicked(self) -> None:
        self._vm.select_layout(not self._vm.current.is_linear_layout)

    def _on_card_clicked(self, emoji: str) -> None:
        self._vm.on_emoji_clicked(emoji)
        self.toast_host.show_message(string("click_toast"), self._toast_timeout_ms)

    def closeEvent(self, event) -> None:  # type: ignore[override]
        for sub in self._subs:
            sub.cancel()
        self._subs.clear()
        super().closeEvent(event)
