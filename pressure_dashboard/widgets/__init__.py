"""
================================================================================
Widgets Package - Custom UI Components
================================================================================

This package contains all custom widgets used by the dashboard. Each
widget is self-contained and reusable.

Design Philosophy:
    "The best interface is no interface." - Golden Krishna

Modules:
    buttons: Themed buttons and the trend range selector
    cards: Container cards and KPI tiles
    indicators: Playback dot and palette legend
    heatmap_view: Frame renderer for the Player
    trend_chart: Two-series comparison chart
    warnings: Status banner
"""

from .buttons import ActionButton, RangeSelector
from .cards import Card, StatDisplay
from .indicators import PulsingDot, PaletteLegend
from .heatmap_view import HeatmapView
from .trend_chart import TrendChart
from .warnings import StatusBanner

__all__ = [
    'ActionButton',
    'RangeSelector',
    'Card',
    'StatDisplay',
    'PulsingDot',
    'PaletteLegend',
    'HeatmapView',
    'TrendChart',
    'StatusBanner',
]
