"""
Theme Tests
Palette colour mapping and frame normalisation.
"""

import numpy as np

from pressure_dashboard.styles.theme import STATUS_COLORS, lookup_table, map_color, normalize_frame
from pressure_dashboard.utils.constants import PALETTES


def test_map_color_endpoints():
    assert map_color(0.0, "gray") == (0, 0, 0)
    assert map_color(1.0, "gray") == (255, 255, 255)
    assert map_color(2.0, "gray") == map_color(1.0, "gray"), "values are clamped"


def test_unknown_palette_falls_back():
    assert map_color(0.5, "rainbow") == map_color(0.5, PALETTES[0])


def test_lookup_tables():
    for name in PALETTES:
        lut = lookup_table(name)
        assert lut.shape == (256, 3)
        assert lut.dtype == np.uint8


def test_normalize_frame():
    frame = np.array([10.0, 20.0, 30.0])
    assert normalize_frame(frame).tolist() == [0.0, 0.5, 1.0]
    assert normalize_frame(np.full(4, 7.0)).tolist() == [0.0] * 4


def test_status_colors_cover_all_tiers():
    assert set(STATUS_COLORS) == {"OK", "Medium", "High"}
