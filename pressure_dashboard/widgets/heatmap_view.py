"""
================================================================================
Heatmap View - Frame Renderer
================================================================================

Draws one pressure frame as a coloured grid with pyqtgraph. This is the
renderer the Player hands frames to.

Each frame is normalised against its own min/max, then coloured through
the palette's lookup table, so quiet frames still show their structure.
"""

from typing import Optional

import numpy as np
import pyqtgraph as pg
from PyQt6.QtCore import pyqtSignal

from ..config import MonitorConfig
from ..styles.theme import COLORS, lookup_table, normalize_frame
from ..utils.constants import PALETTES


class HeatmapView(pg.PlotWidget):
    """
    pyqtgraph heatmap implementing the FrameRenderer protocol.

    Signals:
        frame_rendered: Emitted with (min, max) of the raw frame after drawing

    Example:
        >>> view = HeatmapView(config)
        >>> view.draw_frame(session.last_frame, "inferno")
    """

    frame_rendered = pyqtSignal(float, float)

    def __init__(self, config: Optional[MonitorConfig] = None, parent=None):
        super().__init__(parent)
        self.config = config or MonitorConfig()
        self.rows = self.config.grid_rows
        self.cols = self.config.grid_cols

        self.setAspectLocked(True)
        self.hideAxis('left')
        self.hideAxis('bottom')
        self.setBackground(COLORS['bg_card'])
        self.setMouseEnabled(x=False, y=False)
        # Row 0 at the top, like the sensor file
        self.invertY(True)

        self.image = pg.ImageItem()
        self.addItem(self.image)

        # Palette tables are built once
        self._luts = {name: lookup_table(name) for name in PALETTES}
        self.palette = self.config.default_palette
        self.image.setLookupTable(self._luts[self.palette])
        self.image.setImage(np.zeros((self.cols, self.rows)), levels=(0.0, 1.0))

    def draw_frame(self, frame: np.ndarray, palette: str) -> None:
        """
        Draw a frame.

        Args:
            frame: Flattened frame of rows x cols samples
            palette: One of PALETTES
        """
        if palette != self.palette and palette in self._luts:
            self.palette = palette
            self.image.setLookupTable(self._luts[palette])

        grid = normalize_frame(frame).reshape(self.rows, self.cols)
        # ImageItem indexes [x, y]
        self.image.setImage(grid.T, autoLevels=False, levels=(0.0, 1.0))
        self.frame_rendered.emit(float(np.min(frame)), float(np.max(frame)))

    def clear_frame(self) -> None:
        self.image.setImage(np.zeros((self.cols, self.rows)), autoLevels=False, levels=(0.0, 1.0))
