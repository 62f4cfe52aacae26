"""Toast presentation layer.

``ToastHost`` stacks transient notification labels ("toasts") in a vertical
column and removes each one after its timeout. Timers can be disabled
(``timeout_ms=0``) so tests can inspect the stack deterministically.

Usage:
    host = ToastHost(parent_window)
    host.show_message("CLICK SMILEY")
"""

from __future__ import annotations

from typing import List, Optional

from PyQt6.QtCore import Qt, QTimer
from PyQt6.QtWidgets import QLabel, QVBoxLayout, QWidget

from emojigallery.config import settings

__all__ = ["ToastHost"]


class ToastHost(QWidget):
    """Container widget stacking toast labels, newest first."""

    def __init__(self, parent: Optional[QWidget] = None, *, max_visible: int = 3):
        super().__init__(parent)
        self.setObjectName("toastHost")
        self.setAttribute(Qt.WidgetAttribute.WA_TransparentForMouseEvents, True)
        self._max_visible = max(1, max_visible)
        self._labels: List[QLabel] = []  # newest first
        layout = QVBoxLayout(self)
        layout.setContentsMargins(0, 0, 0, 0)
        layout.setSpacing(6)
        layout.setAlignment(Qt.AlignmentFlag.AlignHCenter | Qt.AlignmentFlag.AlignBottom)

    def show_message(self, message: str, timeout_ms: int = settings.TOAST_TIMEOUT_MS) -> QLabel:
        label = QLabel(message, self)
        label.setObjectName("toast")
        label.setAlignment(Qt.AlignmentFlag.AlignCenter)
        self.layout().insertWidget(0, label)
        self._labels.insert(0, label)
        while len(self._labels) > self._max_visible:
            self.dismiss(self._labels[-1])
        if timeout_ms > 0:
            QTimer.singleShot(timeout_ms, lambda lbl=label: self.dismiss(lbl))
        return label

    def dismiss(self, label: QLabel) -> None:
        # Timers may fire for toasts already evicted by the visible cap.
        if label not in self._labels:
            return
        self._labels.remove(label)
        self.layout().removeWidget(label)
        label.setParent(None)
        label.deleteLater()

    def toasts(self) -> List[QLabel]:
        return list(self._labels)

    def messages(self) -> List[str]:
        return [lbl.text() for lbl in self.toasts()]
