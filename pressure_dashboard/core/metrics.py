"""
================================================================================
Metrics Engine - Clinical KPIs from Pressure Frames
================================================================================

This module derives the numbers a clinician looks at from raw frames.

Design Philosophy:
    "Innovation distinguishes between a leader and a follower." - Steve Jobs

Metrics:
    Peak Pressure Index (PPI)
        Median of the TOP_N highest samples in a frame. A single hot pixel
        cannot move the median, so the PPI tracks the worst *region*
        without needing connected-component analysis.

    Contact Area %
        Share of samples at or above the contact threshold.

    Status
        Three ordinal tiers. High when the PPI or the contact area reaches
        its high threshold, Medium when the PPI reaches the medium
        threshold, OK otherwise. Exact threshold values resolve upward.

    Alert
        A crude density check kept separate from the status: enough
        samples above the alert threshold to form a region.

Session metrics take the worst instant for PPI (max over frames) and the
typical load for contact area (mean over frames).

All functions are pure.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Sequence

import numpy as np

from ..config import MonitorConfig
from .frame_parser import Frame


class RiskStatus(str, Enum):
    """Ordinal risk tier of a frame or session."""

    OK = "OK"
    MEDIUM = "Medium"
    HIGH = "High"

    @property
    def rank(self) -> int:
        """Ordering key: OK < Medium < High."""
        return _STATUS_RANK[self]


_STATUS_RANK = {RiskStatus.OK: 0, RiskStatus.MEDIUM: 1, RiskStatus.HIGH: 2}


@dataclass(frozen=True)
class FrameMetrics:
    """KPIs of one frame."""
    peak_pressure_index: float
    contact_area_percent: float
    alert: bool = False


@dataclass(frozen=True)
class SessionMetrics:
    """KPIs of a whole session."""
    peak_pressure_index: float
    contact_area_percent: float
    status: RiskStatus
    alert: bool = False
    frame_count: int = 0


class MetricsEngine:
    """
    Computes frame and session KPIs with fixed thresholds.

    Example:
        >>> engine = MetricsEngine(MonitorConfig())
        >>> fm = engine.compute_frame_metrics(frame)
        >>> engine.classify(fm.peak_pressure_index, fm.contact_area_percent)
        <RiskStatus.OK: 'OK'>
    """

    def __init__(self, config: Optional[MonitorConfig] = None):
        """
        Initialize the engine.

        Args:
            config: Thresholds to use (defaults if None)
        """
        self.config = config or MonitorConfig()

    # =========================================================================
    # Frame Metrics
    # =========================================================================

    def contact_area_percent(self, frame: Frame) -> float:
        """Percentage of samples at or above the contact threshold."""
        values = np.asarray(frame)
        if values.size == 0:
            return 0.0
        above = np.count_nonzero(values >= self.config.contact_threshold)
        return float(above) / values.size * 100.0

    def peak_pressure_index(self, frame: Frame) -> float:
        """Median of the top-N samples."""
        values = np.asarray(frame)
        if values.size == 0:
            return 0.0
        n = min(self.config.top_n, values.size)
        # partition is O(n); only the top slice needs ordering
        top = np.partition(values, values.size - n)[values.size - n:]
        return float(np.median(top))

    def is_alert(self, frame: Frame) -> bool:
        """True when enough samples exceed the alert threshold to form a region."""
        values = np.asarray(frame)
        hot = np.count_nonzero(values >= self.config.alert_threshold)
        return bool(hot >= self.config.min_region_size)

    def compute_frame_metrics(self, frame: Frame) -> FrameMetrics:
        """
        Compute all KPIs for a single frame.

        Args:
            frame: Flattened pressure frame

        Returns:
            FrameMetrics for the frame
        """
        return FrameMetrics(
            peak_pressure_index=self.peak_pressure_index(frame),
            contact_area_percent=self.contact_area_percent(frame),
            alert=self.is_alert(frame),
        )

    # =========================================================================
    # Classification
    # =========================================================================

    def classify(self, ppi: float, contact_pct: float) -> RiskStatus:
        """
        Map PPI and contact area to a status tier.

        Args:
            ppi: Peak pressure index
            contact_pct: Contact area percentage

        Returns:
            The highest tier whose threshold is reached
        """
        cfg = self.config
        if ppi >= cfg.high_ppi_threshold or contact_pct >= cfg.high_area_threshold:
            return RiskStatus.HIGH
        if ppi >= cfg.medium_ppi_threshold:
            return RiskStatus.MEDIUM
        return RiskStatus.OK

    # =========================================================================
    # Session Metrics
    # =========================================================================

    def compute_session_metrics(self, frames: Sequence[Frame]) -> SessionMetrics:
        """
        Aggregate frame KPIs over a session.

        PPI is the maximum frame PPI, contact area is the mean frame
        contact area, and the alert is raised if any frame alerts.

        Args:
            frames: Frames of the session, in order

        Returns:
            SessionMetrics (all zero and OK for an empty sequence)
        """
        if len(frames) == 0:
            return SessionMetrics(0.0, 0.0, RiskStatus.OK, False, 0)

        per_frame = [self.compute_frame_metrics(frame) for frame in frames]
        ppi = max(m.peak_pressure_index for m in per_frame)
        contact = float(np.mean([m.contact_area_percent for m in per_frame]))

        return SessionMetrics(
            peak_pressure_index=ppi,
            contact_area_percent=contact,
            status=self.classify(ppi, contact),
            alert=any(m.alert for m in per_frame),
            frame_count=len(per_frame),
        )


# Default engine for the module-level helpers
_default_engine = MetricsEngine()


def compute_frame_metrics(frame: Frame) -> FrameMetrics:
    """Frame KPIs with default thresholds."""
    return _default_engine.compute_frame_metrics(frame)


def compute_session_metrics(frames: Sequence[Frame]) -> SessionMetrics:
    """Session KPIs with default thresholds."""
    return _default_engine.compute_session_metrics(frames)


def classify(ppi: float, contact_pct: float) -> RiskStatus:
    """Status tier with default thresholds."""
    return _default_engine.classify(ppi, contact_pct)
