"""
================================================================================
Core Package - Business Logic and Data Processing
================================================================================

This package contains the data pipeline behind the dashboard: parsing
sensor files, computing clinical metrics, caching sessions, playback,
clinician notes and risk flags. Only QtCore is used here (for the
playback timer), so everything can run and be tested without a display.

Design Philosophy:
    "The people who are crazy enough to think they can change the world
     are the ones who do." - Steve Jobs

Data Flow:
    sensor text -> FrameParser -> frames -> MetricsEngine -> metrics
        -> SessionStore (cache) -> Player / RiskFlagView
    NotesStore is independent, keyed by patient id.

Modules:
    frame_parser: Delimited text to fixed-size frames
    metrics: PPI, contact area, status and alert
    patient_index: Static patient directory
    data_source: Sensor file retrieval (directory, HTTP, demo)
    session_store: Memoized per-patient session loading
    player: Playback state machine and timer
    notes_store: Append-only clinician notes
    risk_flags: High-risk session list
    reports: CSV and graph export
"""

from .frame_parser import Frame, FrameParser, ParsedFrames, parse_frames
from .metrics import (
    MetricsEngine, RiskStatus, FrameMetrics, SessionMetrics,
    compute_frame_metrics, compute_session_metrics, classify,
)
from .patient_index import PatientIndex, PatientRecord
from .data_source import (
    SensorDataSource, DirectorySource, HttpSource, DemoSource, create_source,
)
from .session_store import (
    Session, SessionStore, PatientMetricsSummary, TrendSeries,
    summarize, trend_series, slice_by_range,
)
from .player import Player, PlayerState, PlaybackTimer, FrameRenderer
from .notes_store import Note, NotesStore, JsonFileStore, MemoryStore, KeyValueStore
from .risk_flags import RiskFlag, RiskFlagView
from .reports import export_sessions_csv, export_trend_graph, EXPORT_AVAILABLE

__all__ = [
    'Frame',
    'FrameParser',
    'ParsedFrames',
    'parse_frames',
    'MetricsEngine',
    'RiskStatus',
    'FrameMetrics',
    'SessionMetrics',
    'compute_frame_metrics',
    'compute_session_metrics',
    'classify',
    'PatientIndex',
    'PatientRecord',
    'SensorDataSource',
    'DirectorySource',
    'HttpSource',
    'DemoSource',
    'create_source',
    'Session',
    'SessionStore',
    'PatientMetricsSummary',
    'TrendSeries',
    'summarize',
    'trend_series',
    'slice_by_range',
    'Player',
    'PlayerState',
    'PlaybackTimer',
    'FrameRenderer',
    'Note',
    'NotesStore',
    'JsonFileStore',
    'MemoryStore',
    'KeyValueStore',
    'RiskFlag',
    'RiskFlagView',
    'export_sessions_csv',
    'export_trend_graph',
    'EXPORT_AVAILABLE',
]
