"""
================================================================================
Warning Widgets - Status Banner
================================================================================

A banner across the top of the dashboard for messages the clinician must
not miss: no sessions found, a load error, or a high-risk session.

Design Philosophy:
    "Fail fast, fail often, but always fail forward." - John Maxwell

An empty dashboard is confusing, so the banner always says why nothing
is shown instead of leaving a blank view.
"""

from PyQt6.QtWidgets import QWidget, QHBoxLayout, QLabel
from PyQt6.QtCore import Qt
from PyQt6.QtGui import QFont

from ..styles.theme import COLORS, FONT_NAME

# level -> background colour
_LEVEL_COLORS = {
    'info': COLORS['info'],
    'warning': COLORS['warning'],
    'danger': COLORS['danger'],
}


class StatusBanner(QWidget):
    """
    One-line coloured message banner, hidden when there is nothing to say.

    Example:
        >>> banner = StatusBanner()
        >>> banner.show_message("No sessions found", "warning")
        >>> banner.clear()
    """

    def __init__(self, parent=None):
        super().__init__(parent)
        self.setVisible(False)
        self.level = 'info'

        layout = QHBoxLayout(self)
        layout.setContentsMargins(16, 8, 16, 8)

        self.message_label = QLabel("")
        self.message_label.setFont(QFont(FONT_NAME, 11, QFont.Weight.Bold))
        self.message_label.setAlignment(Qt.AlignmentFlag.AlignCenter)
        layout.addWidget(self.message_label)

    @property
    def message(self) -> str:
        return self.message_label.text()

    def show_message(self, message: str, level: str = 'info') -> None:
        """
        Show a message.

        Args:
            message: Text to display
            level: 'info', 'warning' or 'danger'
        """
        self.level = level
        self.message_label.setText(message)
        self.setStyleSheet(f"""
            QWidget {{
                background-color: {_LEVEL_COLORS.get(level, COLORS['info'])};
                color: {COLORS['text_white']};
                border-radius: 8px;
            }}
        """)
        self.setVisible(True)

    def clear(self) -> None:
        """Hide the banner."""
        self.message_label.setText("")
        self.setVisible(False)
