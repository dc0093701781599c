"""
================================================================================
Frame Parser - Sensor Text to Pressure Frames
================================================================================

This module turns the delimited text exported by the pressure mat into
fixed-size frames. A frame is one snapshot of the whole grid, flattened
row by row into a read-only numpy array of GRID_ROWS x GRID_COLS samples.

Design Philosophy:
    "Real artists ship." - Steve Jobs

Sensor exports are dirty: truncated rows, stray text, blank fields. The
parser never gives up on them. Anything it cannot read becomes the
baseline value, so the heatmap always has something to draw.

Text Format:
    One grid row per line, values separated by commas, semicolons or
    whitespace. Every block of GRID_ROWS lines is one frame.

    - Fewer lines than one block: a single frame, front-padded with
      baseline rows so the newest data sits at the bottom
    - Leftover lines after the last full block: dropped
    - No lines at all: a single baseline frame

    Padding rows and empty input are filled with the configured baseline
    value, not with zeros. With a non-zero baseline, padded cells read as
    that baseline in every metric rather than as an unloaded sensor.
"""

import logging
import math
import re
from dataclasses import dataclass
from typing import List, Optional, Tuple

import numpy as np

from ..config import MonitorConfig

logger = logging.getLogger(__name__)

# A flattened, read-only grid snapshot
Frame = np.ndarray

_LINE_SPLIT = re.compile(r"\r?\n")
_TOKEN_SPLIT = re.compile(r"\s*[,;]\s*|\s+")


@dataclass(frozen=True)
class ParsedFrames:
    """
    Result of parsing one sensor file.

    Attributes:
        frames: Frames in file order (never empty)
        last_frame: The most recent frame, same object as frames[-1]
        degraded_tokens: Number of values replaced by the baseline
        rows: Grid rows used to build the frames
        cols: Grid columns used to build the frames
    """
    frames: Tuple[Frame, ...]
    last_frame: Frame
    degraded_tokens: int = 0
    rows: int = 0
    cols: int = 0

    @property
    def last_grid(self) -> np.ndarray:
        """The most recent frame as a (rows, cols) grid."""
        return self.last_frame.reshape(self.rows, self.cols)

    def __len__(self) -> int:
        return len(self.frames)


class FrameParser:
    """
    Converts raw delimited text into a sequence of pressure frames.

    The parser is a pure function of its input: parsing the same text
    twice gives equal frames, and nothing outside the returned value
    changes.

    Example:
        >>> parser = FrameParser(MonitorConfig())
        >>> parsed = parser.parse(csv_text)
        >>> print(f"{len(parsed)} frames, {parsed.degraded_tokens} bad values")
    """

    def __init__(self, config: Optional[MonitorConfig] = None):
        """
        Initialize the parser.

        Args:
            config: Grid size, baseline and accepted range (defaults if None)
        """
        self.config = config or MonitorConfig()
        self.rows = self.config.grid_rows
        self.cols = self.config.grid_cols
        self.baseline = float(self.config.baseline_value)

    def parse(self, raw_text: str) -> ParsedFrames:
        """
        Parse sensor text into frames.

        Args:
            raw_text: File content, one grid row per line

        Returns:
            ParsedFrames with at least one frame
        """
        lines = [line.strip() for line in _LINE_SPLIT.split(raw_text or "")]
        lines = [line for line in lines if line]

        degraded = 0
        rows: List[List[float]] = []
        for line in lines:
            row, bad = self._parse_row(line)
            rows.append(row)
            degraded += bad

        if not rows:
            frames = [self._baseline_frame()]
        elif len(rows) < self.rows:
            # Single snapshot: newest data lands at the end of the frame
            padding = [[self.baseline] * self.cols for _ in range(self.rows - len(rows))]
            frames = [self._to_frame(padding + rows)]
        else:
            frame_count = len(rows) // self.rows
            dropped = len(rows) - frame_count * self.rows
            if dropped:
                logger.debug("Dropping %d trailing lines (incomplete frame)", dropped)
            frames = [
                self._to_frame(rows[f * self.rows:(f + 1) * self.rows])
                for f in range(frame_count)
            ]

        if degraded:
            logger.debug("Replaced %d invalid values with baseline %.1f", degraded, self.baseline)

        return ParsedFrames(
            frames=tuple(frames),
            last_frame=frames[-1],
            degraded_tokens=degraded,
            rows=self.rows,
            cols=self.cols,
        )

    def _parse_row(self, line: str) -> Tuple[List[float], int]:
        """
        Parse one line into exactly `cols` values.

        Returns:
            (values, number of tokens replaced by baseline)
        """
        tokens = _TOKEN_SPLIT.split(line)[:self.cols]
        values = []
        bad = 0
        for token in tokens:
            value = self._to_value(token)
            if value is None:
                value = self.baseline
                bad += 1
            values.append(value)

        # Short rows are padded, not counted as degraded
        values.extend([self.baseline] * (self.cols - len(values)))
        return values, bad

    def _to_value(self, token: str) -> Optional[float]:
        """Convert a token, or None when it is missing, non-numeric or out of range."""
        if not token:
            return None
        try:
            value = float(token)
        except ValueError:
            return None
        if not math.isfinite(value):
            return None
        if value < self.config.value_min or value > self.config.value_max:
            return None
        return value

    def _to_frame(self, grid: List[List[float]]) -> Frame:
        """Flatten a rows x cols grid into a read-only frame."""
        frame = np.asarray(grid, dtype=np.float64).reshape(self.rows * self.cols)
        frame.setflags(write=False)
        return frame

    def _baseline_frame(self) -> Frame:
        frame = np.full(self.rows * self.cols, self.baseline, dtype=np.float64)
        frame.setflags(write=False)
        return frame


def parse_frames(raw_text: str, config: Optional[MonitorConfig] = None) -> ParsedFrames:
    """
    Parse sensor text with a one-off parser.

    Args:
        raw_text: File content
        config: Optional configuration (defaults if None)

    Returns:
        ParsedFrames with at least one frame
    """
    return FrameParser(config).parse(raw_text)
