"""
Report Export Tests
"""

import asyncio
import csv

import pytest

from pressure_dashboard.core import reports
from pressure_dashboard.core.session_store import SessionStore


@pytest.fixture
def sessions(index, source, config):
    return asyncio.run(SessionStore(index, source, config).load_patient_sessions("p1"))


def test_csv_export(tmp_path, sessions):
    path = tmp_path / "out" / "report.csv"
    rows = reports.export_sessions_csv(sessions, str(path))

    assert rows == 3
    with open(path, newline='') as f:
        data = list(csv.reader(f))
    assert data[0] == reports.CSV_HEADER
    assert data[3][0] == "2025-10-13"
    assert data[3][3] == "255.0"
    assert data[3][5] == "High"


@pytest.mark.skipif(not reports.EXPORT_AVAILABLE, reason="matplotlib not installed")
def test_graph_export(tmp_path, sessions):
    path = tmp_path / "trend.png"
    reports.export_trend_graph(sessions, str(path), "Ada Lovelace")
    assert path.stat().st_size > 0
