"""
================================================================================
Constants - Application-Wide Configuration Values
================================================================================

This module defines the default values used throughout the pressure
monitoring dashboard. Every value here is also a field of MonitorConfig,
so a deployment can override them from config.json without touching code.

Design Philosophy:
    "The details are not the details. They make the design." - Charles Eames
"""

from typing import Dict, Optional, Tuple

# =============================================================================
# Sensor Grid
# =============================================================================

# Pressure mat resolution, one CSV line per grid row
GRID_ROWS: int = 32
GRID_COLS: int = 32
GRID_TOTAL: int = GRID_ROWS * GRID_COLS  # 1024 samples per frame

# =============================================================================
# Sample Range
# =============================================================================

# Replacement for missing, unparseable or out-of-range samples.
# Sits below CONTACT_THRESHOLD so it never counts as load.
BASELINE_VALUE: float = 1.0

# Accepted raw sample range (12-bit ADC)
VALUE_MIN: float = 0.0
VALUE_MAX: float = 4095.0

# =============================================================================
# Clinical Metrics
# =============================================================================

# A sample at or above this value is load-bearing
CONTACT_THRESHOLD: float = 25.0

# Peak Pressure Index = median of the N highest samples
PPI_TOP_N: int = 10

# Status tiers (values at a threshold resolve to the higher tier)
HIGH_PPI_THRESHOLD: float = 220.0
HIGH_AREA_THRESHOLD: float = 30.0
MEDIUM_PPI_THRESHOLD: float = 150.0

# Alert heuristic: at least MIN_REGION_SIZE samples at or above ALERT_THRESHOLD
ALERT_THRESHOLD: float = 200.0
MIN_REGION_SIZE: int = 16

# =============================================================================
# Playback
# =============================================================================

# One frame every 200 ms gives 5 fps, slow enough to read posture changes
FRAME_DURATION_MS: int = 200

# Heatmap palettes, first entry is the default
PALETTES: Tuple[str, ...] = ("inferno", "viridis", "gray")
DEFAULT_PALETTE: str = PALETTES[0]

# =============================================================================
# Trend Ranges
# =============================================================================

# Range buttons map to a number of most-recent sessions (None keeps all).
# Sessions are daily, so these are labels rather than real time windows.
RANGE_KEEP: Dict[str, Optional[int]] = {
    "1h": 1,
    "6h": 2,
    "24h": None,
}
DEFAULT_RANGE: str = "24h"

# =============================================================================
# Storage
# =============================================================================

# Single namespaced key holding every patient's notes
NOTES_STORAGE_KEY: str = "clinician_notes"
