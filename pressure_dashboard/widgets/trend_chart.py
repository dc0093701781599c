"""
================================================================================
Trend Chart - Two-Series Comparison
================================================================================

Line chart of two series over date labels (PPI and contact area per
session). Data is replaced in place with set_series(), the plot itself is
created once.
"""

from typing import Sequence

import pyqtgraph as pg

from ..styles.theme import COLORS


class TrendChart(pg.PlotWidget):
    """
    Comparison chart with a categorical x axis.

    Example:
        >>> chart = TrendChart()
        >>> chart.set_series(series.labels, series.ppi, series.contact, "PPI", "Contact %")
    """

    def __init__(self, parent=None):
        super().__init__(parent)
        self.setBackground(COLORS['bg_card'])
        self.showGrid(x=True, y=True, alpha=0.2)
        self.setMouseEnabled(x=False, y=False)
        self.legend = self.addLegend(labelTextColor=COLORS['text_dark'])

        self.curve_a = self.plot(
            pen=pg.mkPen(color=COLORS['primary'], width=3),
            symbol='o', symbolSize=7, symbolBrush=COLORS['primary'],
            name="Series A",
        )
        self.curve_b = self.plot(
            pen=pg.mkPen(color=COLORS['secondary'], width=3),
            symbol='s', symbolSize=7, symbolBrush=COLORS['secondary'],
            name="Series B",
        )
        self.labels: Sequence[str] = ()

    def set_series(self, labels: Sequence[str], series_a: Sequence[float],
                   series_b: Sequence[float], label_a: str = "Series A",
                   label_b: str = "Series B") -> None:
        """
        Replace both series without recreating the plot.

        Args:
            labels: X axis labels, one per point
            series_a: First series values
            series_b: Second series values
            label_a: Legend name of the first series
            label_b: Legend name of the second series
        """
        self.labels = tuple(labels)
        xs = list(range(len(self.labels)))
        self.curve_a.setData(xs, list(series_a))
        self.curve_b.setData(xs, list(series_b))

        self.getAxis('bottom').setTicks([list(enumerate(self.labels))])

        self.legend.clear()
        self.legend.addItem(self.curve_a, label_a)
        self.legend.addItem(self.curve_b, label_b)

        if xs:
            self.setXRange(-0.5, len(xs) - 0.5, padding=0)

    def clear_series(self) -> None:
        self.set_series([], [], [])
