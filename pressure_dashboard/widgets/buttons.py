"""
================================================================================
Button Widgets
================================================================================

Themed push buttons and the exclusive range selector used above the
trend chart.
"""

from typing import Dict, Iterable

from PyQt6.QtWidgets import QPushButton, QWidget, QHBoxLayout, QButtonGroup
from PyQt6.QtCore import Qt, pyqtSignal

from ..styles.theme import get_button_style


class ActionButton(QPushButton):
    """
    A push button styled by colour scheme.

    Example:
        >>> btn = ActionButton("Play", "success")
        >>> btn.clicked.connect(player.toggle)
        >>> btn.set_color_scheme("secondary")
    """

    def __init__(self, text: str, color_scheme: str = "primary", parent=None):
        super().__init__(text, parent)
        self.setCursor(Qt.CursorShape.PointingHandCursor)
        self.setMinimumHeight(34)
        self.set_color_scheme(color_scheme)

    def set_color_scheme(self, scheme: str) -> None:
        self.color_scheme = scheme
        self.setStyleSheet(get_button_style(scheme))


class RangeSelector(QWidget):
    """
    Row of mutually exclusive range buttons ("1h", "6h", "24h").

    Signals:
        range_changed: Emitted with the selected range key
    """

    range_changed = pyqtSignal(str)

    def __init__(self, keys: Iterable[str], selected: str, parent=None):
        super().__init__(parent)
        layout = QHBoxLayout(self)
        layout.setContentsMargins(0, 0, 0, 0)
        layout.setSpacing(6)

        self._group = QButtonGroup(self)
        self._group.setExclusive(True)
        self._buttons: Dict[str, ActionButton] = {}

        for key in keys:
            btn = ActionButton(f"Last {key}", "secondary")
            btn.setCheckable(True)
            btn.clicked.connect(lambda _checked, k=key: self._select(k))
            self._group.addButton(btn)
            self._buttons[key] = btn
            layout.addWidget(btn)
        layout.addStretch()

        self.selected = selected
        self._refresh()

    def _select(self, key: str) -> None:
        if key == self.selected:
            return
        self.selected = key
        self._refresh()
        self.range_changed.emit(key)

    def _refresh(self) -> None:
        for key, btn in self._buttons.items():
            btn.setChecked(key == self.selected)
            btn.set_color_scheme("primary" if key == self.selected else "secondary")
