"""
================================================================================
Pressure Dashboard - Pressure-Mat Monitoring
================================================================================

Loads recorded pressure-mat sessions, computes pressure metrics and plays
the frames back as a heatmap for clinicians and patients.

Package Structure:
    pressure_dashboard/
    ├── __init__.py          # This file - package entry point
    ├── app.py               # Application launcher
    ├── config.py            # MonitorConfig and its JSON persistence
    ├── errors.py            # Error taxonomy
    ├── main_window.py       # Dashboard window
    ├── core/                # Business logic (no widgets)
    │   ├── frame_parser.py      # CSV text -> frames
    │   ├── metrics.py           # PPI, contact area, risk status
    │   ├── patient_index.py     # Patient directory
    │   ├── data_source.py       # Directory, HTTP and demo sources
    │   ├── session_store.py     # Cached, single-flight session loads
    │   ├── player.py            # Heatmap playback state machine
    │   ├── notes_store.py       # Clinician notes
    │   ├── risk_flags.py        # Cross-patient risk list
    │   └── reports.py           # CSV and graph export
    ├── data/                # Bundled demo patient index
    ├── styles/              # Visual design system
    │   └── theme.py         # Colors, fonts, palettes
    ├── utils/               # Constants
    │   └── constants.py     # Grid size, thresholds, timings
    └── widgets/             # Custom UI components

Design Philosophy:
    "Simplicity is the ultimate sophistication." - Leonardo da Vinci
    "Design is not just what it looks like. Design is how it works." - Steve Jobs

Usage:
    # Launch the application
    python -m pressure_dashboard.app

    # Or import and run programmatically
    from pressure_dashboard import main
    main()
"""

__version__ = "1.0.0"

from .app import main
from .main_window import DashboardWindow

__all__ = [
    'main',
    'DashboardWindow',
]
