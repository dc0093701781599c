"""
Metrics Engine Tests
PPI, contact area, classification tiers and session aggregation.
"""

import numpy as np
import pytest

from pressure_dashboard.config import MonitorConfig
from pressure_dashboard.core.frame_parser import parse_frames
from pressure_dashboard.core.metrics import (
    MetricsEngine, RiskStatus, classify, compute_frame_metrics, compute_session_metrics,
)

from conftest import grid_text


@pytest.fixture
def engine():
    return MetricsEngine(MonitorConfig())


def test_all_baseline_frame_has_no_contact():
    parsed = parse_frames(grid_text(1))
    session = compute_session_metrics(parsed.frames)

    assert session.contact_area_percent == 0.0
    assert session.peak_pressure_index == 1.0
    assert session.status is RiskStatus.OK
    assert session.frame_count == 1


def test_baseline_then_loaded_frame():
    parsed = parse_frames(grid_text(1) + grid_text(255))
    session = compute_session_metrics(parsed.frames)

    assert len(parsed) == 2
    assert session.peak_pressure_index == 255.0, "PPI is the max over frames"
    assert session.contact_area_percent == pytest.approx(50.0), "contact is the mean over frames"
    assert session.status is RiskStatus.HIGH


def test_ppi_is_median_of_top_ten(engine):
    frame = np.ones(1024)
    frame[:10] = [100, 110, 120, 130, 140, 150, 160, 170, 180, 190]
    # median of an even top-10 is the mean of the two middle values
    assert engine.peak_pressure_index(frame) == pytest.approx(145.0)


def test_ppi_ignores_values_below_top_ten(engine):
    frame = np.ones(1024)
    frame[:10] = 200
    frame[10:20] = 50
    assert engine.peak_pressure_index(frame) == 200.0


def test_ppi_with_fewer_samples_than_top_n():
    engine = MetricsEngine(MonitorConfig(grid_rows=1, grid_cols=3))
    assert engine.peak_pressure_index(np.array([1.0, 5.0, 9.0])) == 5.0


def test_contact_threshold_is_inclusive(engine):
    frame = np.ones(1024)
    frame[:256] = 25
    frame[256:512] = 24.9
    assert engine.contact_area_percent(frame) == pytest.approx(25.0)


@pytest.mark.parametrize("ppi, contact, expected", [
    (0, 0, RiskStatus.OK),
    (149.9, 29.9, RiskStatus.OK),
    (150, 0, RiskStatus.MEDIUM),
    (219.9, 29.9, RiskStatus.MEDIUM),
    (220, 0, RiskStatus.HIGH),
    (10, 30, RiskStatus.HIGH),
])
def test_classify_tiers(ppi, contact, expected):
    assert classify(ppi, contact) is expected


def test_status_ranks_are_ordered():
    assert RiskStatus.OK.rank < RiskStatus.MEDIUM.rank < RiskStatus.HIGH.rank
    assert RiskStatus.HIGH.value == "High"


def test_alert_needs_a_region(engine):
    frame = np.ones(1024)
    frame[:15] = 250
    assert engine.is_alert(frame) is False
    frame[15] = 200
    assert engine.is_alert(frame) is True


def test_frame_metrics_module_helper():
    frame = np.full(1024, 30.0)
    metrics = compute_frame_metrics(frame)
    assert metrics.peak_pressure_index == 30.0
    assert metrics.contact_area_percent == 100.0
    assert metrics.alert is False


def test_empty_session_is_ok(engine):
    session = engine.compute_session_metrics([])
    assert session.peak_pressure_index == 0.0
    assert session.contact_area_percent == 0.0
    assert session.status is RiskStatus.OK
    assert session.frame_count == 0


def test_custom_thresholds():
    engine = MetricsEngine(MonitorConfig(high_ppi_threshold=100, medium_ppi_threshold=50))
    assert engine.classify(60, 0) is RiskStatus.MEDIUM
    assert engine.classify(100, 0) is RiskStatus.HIGH
