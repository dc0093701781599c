"""
================================================================================
Monitor Configuration Module
================================================================================

Collects every tunable value of the dashboard into one value object.

Features:
- Grid size and accepted sample range
- Metric thresholds (contact area, PPI tiers, alert heuristic)
- Playback timing and default palette
- Data locations (sensor directory or URL, patient index, notes file)
- Configuration save/load to JSON
- Validation utilities

The object is frozen: components receive it at construction and never
change it. Build a new one with dataclasses.replace() to try other values.

Author: Capstone Project
Date: 2026-01-24
================================================================================
"""

import json
import logging
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import List, Optional

from .utils.constants import (
    GRID_ROWS, GRID_COLS, BASELINE_VALUE, VALUE_MIN, VALUE_MAX,
    CONTACT_THRESHOLD, PPI_TOP_N, HIGH_PPI_THRESHOLD, HIGH_AREA_THRESHOLD,
    MEDIUM_PPI_THRESHOLD, ALERT_THRESHOLD, MIN_REGION_SIZE,
    FRAME_DURATION_MS, PALETTES, DEFAULT_PALETTE, NOTES_STORAGE_KEY,
)
from .errors import ValidationError

logger = logging.getLogger(__name__)


def _default_notes_path() -> str:
    return str(Path.home() / ".pressure_dashboard" / "notes.json")


def _coerce(name: str, value, kind):
    """Convert a loaded value to the declared field type."""
    if kind not in (int, float, str):
        return value
    if isinstance(value, kind) and not isinstance(value, bool):
        return value
    try:
        if kind is str or value is None or isinstance(value, bool):
            raise TypeError(type(value).__name__)
        if kind is int and isinstance(value, float) and not value.is_integer():
            raise ValueError("not a whole number")
        return kind(value.strip() if isinstance(value, str) else value)
    except (TypeError, ValueError):
        raise ValidationError(
            f"Config field '{name}' must be {kind.__name__}, got {value!r}") from None


@dataclass(frozen=True)
class MonitorConfig:
    """
    Complete configuration for parsing, metrics and playback.

    Attributes:
        grid_rows: Number of rows in a frame
        grid_cols: Number of columns in a frame
        baseline_value: Replacement for missing or invalid samples
        value_min: Lowest accepted raw sample
        value_max: Highest accepted raw sample
        contact_threshold: Sample value counted as load-bearing (>=)
        top_n: Number of highest samples used for the PPI median
        high_ppi_threshold: PPI at or above which a session is High
        high_area_threshold: Contact % at or above which a session is High
        medium_ppi_threshold: PPI at or above which a session is Medium
        alert_threshold: Sample value counted by the alert heuristic
        min_region_size: Samples above alert_threshold needed to raise an alert
        frame_duration_ms: Playback timer period
        default_palette: Palette used when a player is created
        data_dir: Directory holding the sensor CSV files
        base_url: URL prefix the sensor files are served from
        patient_index_path: JSON patient index (empty = bundled demo index)
        notes_path: JSON file backing the notes store
        notes_key: Storage key holding all notes
    """

    grid_rows: int = GRID_ROWS
    grid_cols: int = GRID_COLS
    baseline_value: float = BASELINE_VALUE
    value_min: float = VALUE_MIN
    value_max: float = VALUE_MAX
    contact_threshold: float = CONTACT_THRESHOLD
    top_n: int = PPI_TOP_N
    high_ppi_threshold: float = HIGH_PPI_THRESHOLD
    high_area_threshold: float = HIGH_AREA_THRESHOLD
    medium_ppi_threshold: float = MEDIUM_PPI_THRESHOLD
    alert_threshold: float = ALERT_THRESHOLD
    min_region_size: int = MIN_REGION_SIZE
    frame_duration_ms: int = FRAME_DURATION_MS
    default_palette: str = DEFAULT_PALETTE
    data_dir: str = ""
    base_url: str = ""
    patient_index_path: str = ""
    notes_path: str = field(default_factory=_default_notes_path)
    notes_key: str = NOTES_STORAGE_KEY

    @property
    def frame_size(self) -> int:
        """Number of samples in one frame."""
        return self.grid_rows * self.grid_cols

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        return {f.name: getattr(self, f.name) for f in fields(self)}

    @classmethod
    def from_dict(cls, data: dict) -> 'MonitorConfig':
        """
        Create from dictionary. Unknown keys are ignored.

        Values are converted to the field type, so "32" is accepted for an
        int field.

        Raises:
            ValidationError: A value cannot be converted to its field type
        """
        types = {f.name: f.type for f in fields(cls)}
        unknown = sorted(set(data) - set(types))
        if unknown:
            logger.debug("Ignoring unknown config keys: %s", unknown)
        return cls(**{k: _coerce(k, v, types[k]) for k, v in data.items() if k in types})

    def save(self, filepath: str):
        """Save configuration to JSON file."""
        Path(filepath).parent.mkdir(parents=True, exist_ok=True)
        with open(filepath, 'w') as f:
            json.dump(self.to_dict(), f, indent=2)

    @classmethod
    def load(cls, filepath: str) -> 'MonitorConfig':
        """Load configuration from JSON file."""
        with open(filepath, 'r') as f:
            data = json.load(f)
        return cls.from_dict(data)

    def validate(self) -> List[str]:
        """
        Validate configuration and return list of issues.

        Returns:
            List of validation error messages (empty if valid)
        """
        issues = []

        if self.grid_rows <= 0 or self.grid_cols <= 0:
            issues.append(f"Grid must be positive, got {self.grid_rows}x{self.grid_cols}")

        if self.value_min >= self.value_max:
            issues.append(f"value_min ({self.value_min}) must be below value_max ({self.value_max})")

        if self.top_n < 1:
            issues.append(f"top_n must be at least 1, got {self.top_n}")

        if self.medium_ppi_threshold > self.high_ppi_threshold:
            issues.append("medium_ppi_threshold is above high_ppi_threshold")

        if self.min_region_size < 1:
            issues.append(f"min_region_size must be at least 1, got {self.min_region_size}")

        if self.frame_duration_ms <= 0:
            issues.append(f"frame_duration_ms must be positive, got {self.frame_duration_ms}")

        if self.default_palette not in PALETTES:
            issues.append(f"Unknown palette '{self.default_palette}', expected one of {list(PALETTES)}")

        return issues


# Default configuration file location
DEFAULT_CONFIG_PATH = Path(__file__).parent / "config.json"


def get_default_config(path: Optional[Path] = None) -> MonitorConfig:
    """Get default configuration (loads from file if exists, otherwise creates new)."""
    path = Path(path) if path is not None else DEFAULT_CONFIG_PATH
    if path.exists():
        try:
            return MonitorConfig.load(str(path))
        except (OSError, ValueError, TypeError) as e:
            logger.error("Error loading config %s: %s", path, e)

    return MonitorConfig()


def save_default_config(config: MonitorConfig, path: Optional[Path] = None):
    """Save as default configuration."""
    config.save(str(path if path is not None else DEFAULT_CONFIG_PATH))
