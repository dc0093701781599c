"""
================================================================================
Theme - Dashboard Visual Design System
================================================================================

This module defines the look of the monitoring dashboard: colours, fonts,
risk-status colours and the heatmap palettes.

Design Philosophy:
    "Simplicity is the ultimate sophistication." - Leonardo da Vinci

Color Psychology:
    - Dark slate background: heatmaps read best against a dark surround
    - Teal / amber / red: the OK / Medium / High tiers, recognisable at a
      glance from across a ward

Heatmap Palettes:
    inferno  purple -> red -> yellow (default)
    viridis  dark blue -> green -> yellow
    gray     black -> white

    Frames are normalised against their own min/max before colour mapping,
    so every frame uses the full palette.
"""

from typing import Dict, Tuple

import numpy as np

from ..utils.constants import PALETTES

# =============================================================================
# Color Palette
# =============================================================================

COLORS: Dict[str, str] = {
    # -------------------------------------------------------------------------
    # Background Colors
    # -------------------------------------------------------------------------
    'bg_main': '#0f172a',           # Slate 900 - main background
    'bg_card': '#1e293b',           # Slate 800 - card backgrounds
    'bg_input': '#334155',          # Slate 700 - inputs and lists

    # -------------------------------------------------------------------------
    # Text Colors
    # -------------------------------------------------------------------------
    'text_dark': '#e8e9ee',         # Primary text (light on dark)
    'text_light': '#cbd5e1',        # Secondary text
    'text_white': '#ffffff',
    'text_muted': '#64748b',        # Disabled/placeholder

    # -------------------------------------------------------------------------
    # Accent Colors
    # -------------------------------------------------------------------------
    'primary': '#3b82f6',           # Blue - primary actions, PPI series
    'secondary': '#22c55e',         # Green - contact series
    'success': '#14b8a6',           # Teal - OK
    'warning': '#f59e0b',           # Amber - Medium
    'danger': '#ef4444',            # Red - High / alerts
    'info': '#38bdf8',

    # -------------------------------------------------------------------------
    # Button States
    # -------------------------------------------------------------------------
    'btn_primary': '#3b82f6',
    'btn_primary_hover': '#2563eb',
    'btn_success': '#14b8a6',
    'btn_success_hover': '#0d9488',
    'btn_danger': '#ef4444',
    'btn_danger_hover': '#dc2626',
    'btn_secondary': '#334155',
    'btn_secondary_hover': '#475569',

    # -------------------------------------------------------------------------
    # Utility Colors
    # -------------------------------------------------------------------------
    'border': '#334155',
    'grid': 'rgba(255, 255, 255, 0.06)',
}

# Risk tier -> colour, keyed by RiskStatus value
STATUS_COLORS: Dict[str, str] = {
    'OK': COLORS['success'],
    'Medium': COLORS['warning'],
    'High': COLORS['danger'],
}

# =============================================================================
# Typography
# =============================================================================

FONT_FAMILY: str = "Segoe UI, Helvetica Neue, Arial, sans-serif"
FONT_NAME: str = "Segoe UI"


# =============================================================================
# Heatmap Palettes
# =============================================================================

def _inferno(t: float) -> Tuple[int, int, int]:
    r = int(255 * min(1.0, max(0.0, 2 * t)))
    g = int(255 * t ** 1.5)
    b = int(150 * (1 - t * t))
    return (r, g, b)


def _viridis(t: float) -> Tuple[int, int, int]:
    r = int(255 * max(0.0, t - 0.2))
    g = int(255 * min(1.0, t + 0.3))
    b = int(255 * (1 - t))
    return (r, g, b)


def _gray(t: float) -> Tuple[int, int, int]:
    v = int(255 * t)
    return (v, v, v)


_PALETTE_FUNCS = {
    'inferno': _inferno,
    'viridis': _viridis,
    'gray': _gray,
}


def map_color(t: float, palette: str = 'inferno') -> Tuple[int, int, int]:
    """
    Map a normalised value to an RGB colour.

    Args:
        t: Value in [0, 1] (clamped)
        palette: Palette name; unknown names fall back to inferno

    Returns:
        (r, g, b) in 0-255
    """
    t = min(1.0, max(0.0, float(t)))
    return _PALETTE_FUNCS.get(palette, _PALETTE_FUNCS[PALETTES[0]])(t)


def lookup_table(palette: str = 'inferno', size: int = 256) -> np.ndarray:
    """
    Build a pyqtgraph lookup table for a palette.

    Returns:
        (size, 3) uint8 array
    """
    steps = np.linspace(0.0, 1.0, size)
    return np.array([map_color(t, palette) for t in steps], dtype=np.uint8)


def normalize_frame(frame: np.ndarray) -> np.ndarray:
    """
    Scale a frame to [0, 1] against its own min and max.

    A flat frame (max == min) maps to all zeros.
    """
    values = np.asarray(frame, dtype=np.float64)
    if values.size == 0:
        return values
    lo = float(values.min())
    hi = float(values.max())
    span = hi - lo
    if span <= 0:
        return np.zeros_like(values)
    return (values - lo) / span


# =============================================================================
# Style Helper Functions
# =============================================================================

def get_button_style(color_scheme: str, font_family: str = FONT_FAMILY) -> str:
    """
    Generate CSS stylesheet for buttons.

    Args:
        color_scheme: One of 'primary', 'success', 'danger', 'secondary'
        font_family: Font family to use

    Returns:
        CSS stylesheet string for QPushButton
    """
    bg_color = COLORS.get(f'btn_{color_scheme}', COLORS['btn_primary'])
    hover = COLORS.get(f'btn_{color_scheme}_hover', COLORS['btn_primary_hover'])

    return f"""
        QPushButton {{
            background-color: {bg_color};
            color: {COLORS['text_white']};
            border: none;
            border-radius: 8px;
            padding: 8px 16px;
            font-family: {font_family};
            font-weight: bold;
            font-size: 12px;
        }}
        QPushButton:hover {{
            background-color: {hover};
        }}
        QPushButton:disabled {{
            background-color: {COLORS['btn_secondary']};
            color: {COLORS['text_muted']};
        }}
    """


def get_card_style() -> str:
    """Generate CSS stylesheet for card widgets."""
    return f"""
        Card {{
            background-color: {COLORS['bg_card']};
            border-radius: 12px;
            border: 1px solid {COLORS['border']};
        }}
    """
