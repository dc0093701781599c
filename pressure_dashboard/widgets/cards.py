"""
================================================================================
Card Widgets - Container Components
================================================================================

Cards group related parts of the dashboard (heatmap, trends, notes) and
the StatDisplay tiles show the session KPIs.

Design Philosophy:
    "Design is a funny word. Some people think design means how it looks.
     But of course, if you dig deeper, it's really how it works." - Steve Jobs
"""

from PyQt6.QtWidgets import QFrame, QWidget, QVBoxLayout, QLabel
from PyQt6.QtCore import Qt
from PyQt6.QtGui import QFont

from ..styles.theme import COLORS, FONT_NAME, get_card_style


class Card(QFrame):
    """
    A rounded panel with an optional title.

    Example:
        >>> card = Card("Pressure Heatmap")
        >>> card.add_widget(heatmap_view)
        >>> card.add_layout(controls_row)
    """

    def __init__(self, title: str = "", parent=None):
        """
        Initialize the card widget.

        Args:
            title: Optional title displayed at the top of the card
            parent: Parent widget (optional)
        """
        super().__init__(parent)
        self.title = title
        self.setStyleSheet(get_card_style())

        self.main_layout = QVBoxLayout(self)
        self.main_layout.setContentsMargins(16, 16, 16, 16)
        self.main_layout.setSpacing(12)

        if title:
            title_label = QLabel(title)
            title_label.setFont(QFont(FONT_NAME, 13, QFont.Weight.Bold))
            title_label.setStyleSheet(
                f"color: {COLORS['text_dark']}; background: transparent; border: none;"
            )
            self.main_layout.addWidget(title_label)

    def add_widget(self, widget: QWidget, stretch: int = 0) -> None:
        self.main_layout.addWidget(widget, stretch)

    def add_layout(self, layout) -> None:
        self.main_layout.addLayout(layout)


class StatDisplay(QWidget):
    """
    A compact KPI tile: large value above a small label.

    The value colour can change at runtime, which the dashboard uses to
    tint the status tile by risk tier.

    Example:
        >>> stat = StatDisplay("PPI", "0")
        >>> stat.set_value("231", COLORS['danger'])
    """

    def __init__(self, label: str, value: str = "-", color: str = None, parent=None):
        """
        Initialize the stat display.

        Args:
            label: The label text (displayed below the value)
            value: Initial value to display
            color: Value colour (defaults to primary)
            parent: Parent widget (optional)
        """
        super().__init__(parent)
        self.color = color or COLORS['primary']

        layout = QVBoxLayout(self)
        layout.setContentsMargins(12, 10, 12, 10)
        layout.setSpacing(2)
        layout.setAlignment(Qt.AlignmentFlag.AlignCenter)

        self.value_label = QLabel(value)
        self.value_label.setFont(QFont(FONT_NAME, 20, QFont.Weight.Bold))
        self.value_label.setAlignment(Qt.AlignmentFlag.AlignCenter)
        layout.addWidget(self.value_label)

        text_label = QLabel(label)
        text_label.setFont(QFont(FONT_NAME, 10))
        text_label.setStyleSheet(f"color: {COLORS['text_light']};")
        text_label.setAlignment(Qt.AlignmentFlag.AlignCenter)
        layout.addWidget(text_label)

        self._apply_color()

    def _apply_color(self) -> None:
        self.value_label.setStyleSheet(f"color: {self.color};")

    def set_value(self, value: str, color: str = None) -> None:
        """
        Update the displayed value.

        Args:
            value: New value to display
            color: New value colour (unchanged if None)
        """
        self.value_label.setText(value)
        if color is not None:
            self.color = color
            self._apply_color()
