"""
================================================================================
Styles Package - Visual Design System
================================================================================

This package defines the visual language of the dashboard, including
colors, typography, risk-status colours and heatmap palettes.

Modules:
    theme: Color palette, fonts, palettes and style helpers
"""

from .theme import (
    # Color palette
    COLORS,
    STATUS_COLORS,
    # Typography
    FONT_FAMILY,
    FONT_NAME,
    # Heatmap palettes
    map_color,
    lookup_table,
    normalize_frame,
    # Helper functions
    get_button_style,
    get_card_style,
)

__all__ = [
    'COLORS',
    'STATUS_COLORS',
    'FONT_FAMILY',
    'FONT_NAME',
    'map_color',
    'lookup_table',
    'normalize_frame',
    'get_button_style',
    'get_card_style',
]
