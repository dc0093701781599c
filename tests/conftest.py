"""Shared fixtures for the dashboard tests."""

import os

import pytest

os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

from PyQt6.QtWidgets import QApplication

from pressure_dashboard.config import MonitorConfig
from pressure_dashboard.core.patient_index import PatientIndex, PatientRecord
from pressure_dashboard.errors import NotFoundError


def grid_text(value, rows=32, cols=32):
    """CSV text for one frame with every sample set to value."""
    line = ",".join(str(value) for _ in range(cols))
    return "\n".join(line for _ in range(rows)) + "\n"


class CountingSource:
    """In-memory sensor source that records every fetch."""

    def __init__(self, files):
        self.files = dict(files)
        self.calls = []

    async def fetch(self, filename):
        self.calls.append(filename)
        if filename not in self.files:
            raise NotFoundError(f"Sensor file not found: {filename}")
        content = self.files[filename]
        if isinstance(content, Exception):
            raise content
        return content


@pytest.fixture(scope="session")
def qapp():
    """One offscreen Qt application for every test that needs QObjects or widgets."""
    app = QApplication.instance()
    if app is None:
        app = QApplication([])
    yield app


@pytest.fixture
def config():
    return MonitorConfig()


@pytest.fixture
def small_config():
    """4x4 grid so hand-written frames stay readable."""
    return MonitorConfig(grid_rows=4, grid_cols=4, top_n=3, min_region_size=2)


@pytest.fixture
def index():
    return PatientIndex({
        "p1": PatientRecord("p1", "Ada Lovelace", "ada@example.com", {
            "2025-10-11": "p1_20251011.csv",
            "2025-10-12": "p1_20251012.csv",
            "2025-10-13": "p1_20251013.csv",
        }),
        "p2": PatientRecord("p2", "Alan Turing", "alan@example.com", {
            "2025-10-12": "p2_20251012.csv",
        }),
    })


@pytest.fixture
def files():
    return {
        "p1_20251011.csv": grid_text(1),
        "p1_20251012.csv": grid_text(160),
        "p1_20251013.csv": grid_text(1) + grid_text(255),
        "p2_20251012.csv": grid_text(20),
    }


@pytest.fixture
def source(files):
    return CountingSource(files)
