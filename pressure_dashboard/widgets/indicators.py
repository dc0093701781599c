"""
================================================================================
Indicator Widgets - Playback and Palette Display
================================================================================

Small visual indicators next to the heatmap.

Design Philosophy:
    "Make it simple. Make it memorable. Make it inviting to look at.
     Make it fun to read." - Leo Burnett

    PulsingDot:    pulses while playback is running
    PaletteLegend: gradient bar for the active heatmap palette
"""

from PyQt6.QtWidgets import QWidget
from PyQt6.QtCore import Qt, QPropertyAnimation, QEasingCurve, QRect, pyqtProperty
from PyQt6.QtGui import QPainter, QColor, QBrush, QPen, QLinearGradient, QFont

from ..styles.theme import COLORS, FONT_NAME, map_color
from ..utils.constants import DEFAULT_PALETTE


class PulsingDot(QWidget):
    """
    A pulsing dot that shows playback is running.

    Example:
        >>> dot = PulsingDot(COLORS['danger'])
        >>> player.state_changed.connect(lambda s: dot.set_active(s is PlayerState.PLAYING))
    """

    def __init__(self, color: str = None, parent=None):
        """
        Initialize the pulsing dot.

        Args:
            color: The dot color (hex string)
            parent: Parent widget (optional)
        """
        super().__init__(parent)
        self.color = color or COLORS['danger']
        self._pulse = 1.0
        self._active = False
        self.setFixedSize(20, 20)

        self._pulse_anim = QPropertyAnimation(self, b"pulse")
        self._pulse_anim.setDuration(800)
        self._pulse_anim.setStartValue(0.5)
        self._pulse_anim.setEndValue(1.0)
        self._pulse_anim.setEasingCurve(QEasingCurve.Type.InOutSine)
        self._pulse_anim.setLoopCount(-1)

    @pyqtProperty(float)
    def pulse(self) -> float:
        """Get the current pulse value (0.5 to 1.0)."""
        return self._pulse

    @pulse.setter
    def pulse(self, value: float) -> None:
        self._pulse = value
        self.update()

    def set_active(self, active: bool) -> None:
        """Start or stop pulsing. An inactive dot is drawn dimmed."""
        self._active = active
        if active:
            self._pulse_anim.start()
        else:
            self._pulse_anim.stop()
            self._pulse = 1.0
            self.update()

    def paintEvent(self, event) -> None:
        painter = QPainter(self)
        painter.setRenderHint(QPainter.RenderHint.Antialiasing)
        painter.setPen(Qt.PenStyle.NoPen)

        color = QColor(self.color if self._active else COLORS['text_muted'])
        glow = QColor(color)
        glow.setAlpha(int(100 * self._pulse))
        painter.setBrush(QBrush(glow))

        size = 8 + int(6 * self._pulse)
        painter.drawEllipse((self.width() - size) // 2, (self.height() - size) // 2, size, size)

        painter.setBrush(QBrush(color))
        painter.drawEllipse(7, 7, 6, 6)


class PaletteLegend(QWidget):
    """
    Vertical gradient legend for the heatmap palette.

    Values are normalised per frame, so the legend shows the frame's own
    minimum and maximum rather than fixed pressure units.

    Example:
        >>> legend = PaletteLegend()
        >>> legend.set_palette("viridis")
        >>> legend.set_range(1, 255)
    """

    def __init__(self, palette: str = DEFAULT_PALETTE, parent=None):
        super().__init__(parent)
        self.palette = palette
        self.low = 0.0
        self.high = 0.0
        self.setFixedWidth(70)
        self.setMinimumHeight(200)

    def set_palette(self, palette: str) -> None:
        self.palette = palette
        self.update()

    def set_range(self, low: float, high: float) -> None:
        self.low = low
        self.high = high
        self.update()

    def paintEvent(self, event) -> None:
        painter = QPainter(self)
        painter.setRenderHint(QPainter.RenderHint.Antialiasing)
        painter.fillRect(self.rect(), QColor(COLORS['bg_card']))

        bar = QRect(10, 40, 20, self.height() - 80)

        # bottom = low, top = high
        gradient = QLinearGradient(0, bar.bottom(), 0, bar.top())
        for i in range(11):
            t = i / 10
            gradient.setColorAt(t, QColor(*map_color(t, self.palette)))

        painter.setBrush(gradient)
        painter.setPen(QPen(QColor(COLORS['border']), 1))
        painter.drawRoundedRect(bar, 4, 4)

        painter.setPen(QPen(QColor(COLORS['text_dark'])))
        painter.setFont(QFont(FONT_NAME, 9))
        painter.drawText(5, 25, "Pressure")
        painter.drawText(35, bar.top() + 12, f"{self.high:.0f}")
        painter.drawText(35, bar.bottom() + 4, f"{self.low:.0f}")
