"""
================================================================================
Utils Package - Core Constants
================================================================================

This package contains fundamental constants used throughout the application.
Keeping these centralized ensures consistency and makes the codebase easier
to maintain.

Modules:
    constants: Grid dimensions, metric thresholds, playback timing
"""

from .constants import (
    # Sensor grid
    GRID_ROWS,
    GRID_COLS,
    GRID_TOTAL,
    # Sample range
    BASELINE_VALUE,
    VALUE_MIN,
    VALUE_MAX,
    # Metrics
    CONTACT_THRESHOLD,
    PPI_TOP_N,
    HIGH_PPI_THRESHOLD,
    HIGH_AREA_THRESHOLD,
    MEDIUM_PPI_THRESHOLD,
    ALERT_THRESHOLD,
    MIN_REGION_SIZE,
    # Playback
    FRAME_DURATION_MS,
    PALETTES,
    DEFAULT_PALETTE,
    # Trends and storage
    RANGE_KEEP,
    DEFAULT_RANGE,
    NOTES_STORAGE_KEY,
)

__all__ = [
    'GRID_ROWS',
    'GRID_COLS',
    'GRID_TOTAL',
    'BASELINE_VALUE',
    'VALUE_MIN',
    'VALUE_MAX',
    'CONTACT_THRESHOLD',
    'PPI_TOP_N',
    'HIGH_PPI_THRESHOLD',
    'HIGH_AREA_THRESHOLD',
    'MEDIUM_PPI_THRESHOLD',
    'ALERT_THRESHOLD',
    'MIN_REGION_SIZE',
    'FRAME_DURATION_MS',
    'PALETTES',
    'DEFAULT_PALETTE',
    'RANGE_KEEP',
    'DEFAULT_RANGE',
    'NOTES_STORAGE_KEY',
]
