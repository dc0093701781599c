"""
================================================================================
Main Window - Monitoring Dashboard
================================================================================

This module contains the dashboard window that ties the data pipeline to
the screen: session playback, KPIs, trends, risk flags and notes.

Design Philosophy:
    "Simplicity is the ultimate sophistication." - Leonardo da Vinci

The window is organized into clear sections:
    - Left side: heatmap playback, session KPIs, trend chart
    - Right side: patient summary, risk flags, clinician notes

Sessions are loaded off the GUI thread by a SessionLoader, which drives
the asynchronous SessionStore on its own event loop. Loaders run one at
a time, so the store is only ever touched from one loop.
"""

import asyncio
import logging
from collections import deque
from pathlib import Path
from typing import Deque, Dict, List, Mapping, Optional

from PyQt6.QtWidgets import (
    QMainWindow, QWidget, QVBoxLayout, QHBoxLayout, QLabel, QComboBox,
    QSlider, QListWidget, QListWidgetItem, QLineEdit, QFileDialog,
    QStatusBar, QScrollArea,
)
from PyQt6.QtCore import QThread, Qt, pyqtSignal
from PyQt6.QtGui import QColor, QFont

from .config import MonitorConfig
from .core import (
    PatientIndex, SessionStore, Session, Player, PlayerState, NotesStore,
    JsonFileStore, RiskFlagView, RiskStatus, create_source, summarize,
    trend_series, slice_by_range, export_sessions_csv, export_trend_graph,
    EXPORT_AVAILABLE,
)
from .errors import DashboardError, ValidationError
from .styles.theme import COLORS, FONT_FAMILY, FONT_NAME, STATUS_COLORS
from .utils.constants import DEFAULT_RANGE, PALETTES, RANGE_KEEP
from .widgets import (
    ActionButton, RangeSelector, Card, StatDisplay, PulsingDot,
    PaletteLegend, HeatmapView, TrendChart, StatusBanner,
)

logger = logging.getLogger(__name__)


class SessionLoader(QThread):
    """
    Background thread that loads patients through the session store.

    Signals:
        patient_loaded: Emitted with (patient_id, sessions) per patient
        load_failed: Emitted with (patient_id, message) when a patient fails
    """

    patient_loaded = pyqtSignal(str, object)
    load_failed = pyqtSignal(str, str)

    def __init__(self, store: SessionStore, patient_ids: List[str], parent=None):
        super().__init__(parent)
        self.store = store
        self.patient_ids = list(patient_ids)

    def run(self) -> None:
        asyncio.run(self._load_all())

    async def _load_all(self) -> None:
        for patient_id in self.patient_ids:
            if self.isInterruptionRequested():
                return
            try:
                sessions = await self.store.load_patient_sessions(patient_id)
            except DashboardError as e:
                logger.error("Could not load %s: %s", patient_id, e)
                self.load_failed.emit(patient_id, str(e))
                continue
            self.patient_loaded.emit(patient_id, sessions)


class DashboardWindow(QMainWindow):
    """
    Clinician dashboard for pressure-mat recordings.

    When started for a single patient (patient view) the patient selector
    and the cross-patient risk list are limited to that patient.

    Example:
        >>> app = QApplication(sys.argv)
        >>> window = DashboardWindow(MonitorConfig())
        >>> window.show()
        >>> sys.exit(app.exec())
    """

    def __init__(self, config: Optional[MonitorConfig] = None,
                 index: Optional[PatientIndex] = None,
                 store: Optional[SessionStore] = None,
                 notes: Optional[NotesStore] = None,
                 patient_id: Optional[str] = None):
        """
        Initialize the main window.

        Args:
            config: Shared configuration (defaults if None)
            index: Patient directory (from config or bundled demo if None)
            store: Session store (built from config if None)
            notes: Notes store (JSON file from config if None)
            patient_id: Restrict the window to one patient
        """
        super().__init__()
        self.setWindowTitle("Pressure Monitoring Dashboard")
        self.setMinimumSize(1400, 900)

        self.config = config or MonitorConfig()
        self._init_data_state(index, store, notes, patient_id)

        self._build_ui()
        self._connect_player()

        self._populate_patients()

    # =========================================================================
    # Initialization
    # =========================================================================

    def _init_data_state(self, index, store, notes, patient_id) -> None:
        """Initialize data-related state variables."""
        if index is None:
            if self.config.patient_index_path:
                index = PatientIndex.load(self.config.patient_index_path)
            else:
                index = PatientIndex.default_index()
        self.index = index
        self.store = store or SessionStore(self.index, create_source(self.config), self.config)
        self.notes = notes or NotesStore(JsonFileStore(self.config.notes_path), self.config.notes_key)
        self.risk_view = RiskFlagView()

        self.only_patient = patient_id
        self.current_patient: Optional[str] = None
        self.loaded: Dict[str, Mapping[str, Session]] = {}
        self.range_key = DEFAULT_RANGE

        self.loader: Optional[SessionLoader] = None
        self.pending_loads: Deque[str] = deque()

    # =========================================================================
    # UI Building
    # =========================================================================

    def _build_ui(self) -> None:
        """Build the complete user interface."""
        self._apply_global_styles()

        central = QWidget()
        self.setCentralWidget(central)
        root = QVBoxLayout(central)
        root.setContentsMargins(16, 16, 16, 16)
        root.setSpacing(12)

        self.banner = StatusBanner()
        root.addWidget(self.banner)
        root.addLayout(self._build_header())

        body = QHBoxLayout()
        body.setSpacing(16)
        body.addLayout(self._build_display_panel(), stretch=3)
        body.addWidget(self._build_side_panel(), stretch=1)
        root.addLayout(body, stretch=1)

        self.status_bar = QStatusBar()
        self.setStatusBar(self.status_bar)
        self.status_bar.showMessage("Ready")

    def _apply_global_styles(self) -> None:
        """Apply application-wide styles."""
        self.setStyleSheet(f"""
            QMainWindow, QWidget {{
                background-color: {COLORS['bg_main']};
                color: {COLORS['text_dark']};
                font-family: {FONT_FAMILY};
            }}
            QComboBox, QLineEdit, QListWidget {{
                background-color: {COLORS['bg_input']};
                border: 1px solid {COLORS['border']};
                border-radius: 6px;
                padding: 6px 10px;
                color: {COLORS['text_dark']};
            }}
            QStatusBar {{
                color: {COLORS['text_light']};
            }}
        """)

    def _build_header(self) -> QHBoxLayout:
        """Patient and session selectors."""
        layout = QHBoxLayout()

        title = QLabel("Pressure Monitoring")
        title.setFont(QFont(FONT_NAME, 18, QFont.Weight.Bold))
        layout.addWidget(title)
        layout.addStretch()

        layout.addWidget(QLabel("Patient"))
        self.patient_combo = QComboBox()
        self.patient_combo.setMinimumWidth(220)
        self.patient_combo.currentIndexChanged.connect(self._on_patient_selected)
        layout.addWidget(self.patient_combo)

        layout.addWidget(QLabel("Session"))
        self.session_combo = QComboBox()
        self.session_combo.setMinimumWidth(140)
        self.session_combo.currentIndexChanged.connect(self._on_session_selected)
        layout.addWidget(self.session_combo)

        return layout

    def _build_display_panel(self) -> QVBoxLayout:
        """Heatmap, KPIs and trend chart."""
        layout = QVBoxLayout()
        layout.setSpacing(12)
        layout.addWidget(self._build_heatmap_card(), stretch=3)
        layout.addLayout(self._build_stats_row())
        layout.addWidget(self._build_trend_card(), stretch=2)
        return layout

    def _build_heatmap_card(self) -> Card:
        """Heatmap with playback controls."""
        card = Card("Pressure Heatmap")

        view_row = QHBoxLayout()
        self.heatmap = HeatmapView(self.config)
        view_row.addWidget(self.heatmap, stretch=1)
        self.legend = PaletteLegend(self.config.default_palette)
        view_row.addWidget(self.legend)
        card.add_layout(view_row)

        controls = QHBoxLayout()
        self.play_btn = ActionButton("Play", "success")
        self.play_btn.setFixedWidth(90)
        self.play_btn.clicked.connect(self._toggle_playback)
        controls.addWidget(self.play_btn)

        self.playing_dot = PulsingDot(COLORS['danger'])
        controls.addWidget(self.playing_dot)

        self.frame_slider = QSlider(Qt.Orientation.Horizontal)
        self.frame_slider.setMinimum(0)
        self.frame_slider.setMaximum(0)
        self.frame_slider.sliderMoved.connect(self._on_slider_moved)
        controls.addWidget(self.frame_slider, stretch=1)

        self.frame_label = QLabel("0 / 0")
        self.frame_label.setMinimumWidth(70)
        controls.addWidget(self.frame_label)

        self.palette_combo = QComboBox()
        self.palette_combo.addItems(PALETTES)
        self.palette_combo.setCurrentText(self.config.default_palette)
        self.palette_combo.currentTextChanged.connect(self._on_palette_changed)
        controls.addWidget(self.palette_combo)

        card.add_layout(controls)
        return card

    def _build_stats_row(self) -> QHBoxLayout:
        """Session KPI tiles."""
        layout = QHBoxLayout()
        layout.setSpacing(12)

        self.ppi_stat = StatDisplay("Peak Pressure Index", "-", COLORS['primary'])
        self.contact_stat = StatDisplay("Contact Area", "-", COLORS['secondary'])
        self.status_stat = StatDisplay("Status", "-", COLORS['text_light'])
        self.frames_stat = StatDisplay("Frames", "-", COLORS['info'])

        for stat in (self.ppi_stat, self.contact_stat, self.status_stat, self.frames_stat):
            layout.addWidget(stat)
        return layout

    def _build_trend_card(self) -> Card:
        """PPI / contact trend with range buttons."""
        card = Card("Trends")
        self.range_selector = RangeSelector(RANGE_KEEP.keys(), self.range_key)
        self.range_selector.range_changed.connect(self._on_range_changed)
        card.add_widget(self.range_selector)

        self.trend_chart = TrendChart()
        card.add_widget(self.trend_chart, stretch=1)
        return card

    def _build_side_panel(self) -> QScrollArea:
        """Summary, risk flags and notes."""
        scroll = QScrollArea()
        scroll.setWidgetResizable(True)
        scroll.setHorizontalScrollBarPolicy(Qt.ScrollBarPolicy.ScrollBarAlwaysOff)
        scroll.setStyleSheet("QScrollArea { border: none; }")

        panel = QWidget()
        layout = QVBoxLayout(panel)
        layout.setSpacing(12)
        layout.addWidget(self._build_summary_card())
        layout.addWidget(self._build_flags_card())
        layout.addWidget(self._build_notes_card())
        layout.addStretch()

        scroll.setWidget(panel)
        scroll.setMinimumWidth(380)
        return scroll

    def _build_summary_card(self) -> Card:
        card = Card("Patient Summary")
        grid = QHBoxLayout()
        self.peak_summary = StatDisplay("Peak PPI", "-", COLORS['danger'])
        self.avg_summary = StatDisplay("Avg PPI", "-", COLORS['primary'])
        self.contact_summary = StatDisplay("Avg Contact", "-", COLORS['secondary'])
        self.high_summary = StatDisplay("High Episodes", "-", COLORS['warning'])
        for stat in (self.peak_summary, self.avg_summary, self.contact_summary, self.high_summary):
            grid.addWidget(stat)
        card.add_layout(grid)

        self.export_btn = ActionButton("Export Report", "secondary")
        self.export_btn.clicked.connect(self._export_report)
        card.add_widget(self.export_btn)
        return card

    def _build_flags_card(self) -> Card:
        card = Card("Risk Flags")
        self.flags_list = QListWidget()
        self.flags_list.setMinimumHeight(160)
        self.flags_list.itemDoubleClicked.connect(self._on_flag_activated)
        card.add_widget(self.flags_list)
        return card

    def _build_notes_card(self) -> Card:
        card = Card("Clinician Notes")
        self.notes_list = QListWidget()
        self.notes_list.setMinimumHeight(160)
        self.notes_list.setWordWrap(True)
        card.add_widget(self.notes_list)

        entry = QHBoxLayout()
        self.note_input = QLineEdit()
        self.note_input.setPlaceholderText("Add a note...")
        self.note_input.returnPressed.connect(self._add_note)
        entry.addWidget(self.note_input, stretch=1)
        add_btn = ActionButton("Add", "primary")
        add_btn.clicked.connect(self._add_note)
        entry.addWidget(add_btn)
        card.add_layout(entry)
        return card

    def _connect_player(self) -> None:
        """Create the player and keep the controls in step with it."""
        self.player = Player(self.heatmap, self.config, parent=self)
        self.player.frame_changed.connect(self._on_frame_changed)
        self.player.state_changed.connect(self._on_player_state)
        self.heatmap.frame_rendered.connect(self.legend.set_range)

    # =========================================================================
    # Patient and Session Selection
    # =========================================================================

    def _populate_patients(self) -> None:
        ids = [self.only_patient] if self.only_patient else self.index.patient_ids()

        self.patient_combo.blockSignals(True)
        self.patient_combo.clear()
        for pid in ids:
            self.patient_combo.addItem(f"{self.index[pid].name} ({pid})", pid)
        self.patient_combo.blockSignals(False)
        self.patient_combo.setEnabled(self.only_patient is None)

        if not ids:
            self.banner.show_message("No patients found", "warning")
            return

        # Selected patient first, then the rest for the risk list
        self._queue_loads(ids)
        self._on_patient_selected(0)

    def _on_patient_selected(self, combo_index: int) -> None:
        pid = self.patient_combo.itemData(combo_index)
        if not pid:
            return
        self.current_patient = pid
        self._refresh_notes()

        if pid in self.loaded:
            self._show_patient(pid)
        else:
            self._clear_session_view()
            self.banner.show_message(f"Loading sessions for {self.index[pid].name}...", "info")
            if self._is_loading(pid):
                return
            if pid in self.pending_loads:
                self.pending_loads.remove(pid)
            self.pending_loads.appendleft(pid)
            self._start_next_load()

    def _show_patient(self, pid: str) -> None:
        """Fill the session selector and views from loaded sessions."""
        sessions = self.loaded.get(pid, {})
        self.player.set_sessions(sessions)

        self._refresh_summary(sessions)
        self._refresh_trends()

        if not sessions:
            self._clear_session_view()
            self.banner.show_message("No sessions found", "warning")
            return

        # Most recent session first
        latest = len(sessions) - 1
        self.session_combo.blockSignals(True)
        self.session_combo.clear()
        for date_key in sessions:
            self.session_combo.addItem(date_key, date_key)
        self.session_combo.setCurrentIndex(latest)
        self.session_combo.blockSignals(False)

        self.banner.clear()
        self._on_session_selected(latest)

    def _on_session_selected(self, combo_index: int) -> None:
        date_key = self.session_combo.itemData(combo_index)
        if not date_key:
            return
        try:
            self.player.set_session(date_key)
        except DashboardError as e:
            self.status_bar.showMessage(str(e))
            return

        session = self.player.active_session
        self.frame_slider.setMaximum(max(0, session.frame_count - 1))
        self._refresh_session_stats(session)
        if session.status is RiskStatus.HIGH:
            self.banner.show_message(f"High pressure risk on {date_key}", "danger")
        else:
            self.banner.clear()

    def _clear_session_view(self) -> None:
        self.player.set_sessions({})
        self.session_combo.clear()
        self.heatmap.clear_frame()
        self.frame_slider.setMaximum(0)
        self.frame_label.setText("0 / 0")
        for stat in (self.ppi_stat, self.contact_stat, self.status_stat, self.frames_stat):
            stat.set_value("-")

    # =========================================================================
    # Background Loading
    # =========================================================================

    def _queue_loads(self, ids: List[str]) -> None:
        for pid in ids:
            if pid in self.loaded or pid in self.pending_loads or self._is_loading(pid):
                continue
            self.pending_loads.append(pid)
        self._start_next_load()

    def _is_loading(self, pid: str) -> bool:
        return self.loader is not None and pid in self.loader.patient_ids

    def _start_next_load(self) -> None:
        if self.loader is not None or not self.pending_loads:
            return

        # One patient per loader so a newly selected patient jumps the queue
        pid = self.pending_loads.popleft()
        self.loader = SessionLoader(self.store, [pid], parent=self)
        self.loader.patient_loaded.connect(self._on_patient_loaded)
        self.loader.load_failed.connect(self._on_load_failed)
        self.loader.finished.connect(self._on_loader_finished)
        self.loader.start()

    def _on_loader_finished(self) -> None:
        if self.loader is not None:
            self.loader.wait()
            self.loader.deleteLater()
            self.loader = None
        self._start_next_load()

    def _on_patient_loaded(self, pid: str, sessions) -> None:
        self.loaded[pid] = sessions
        self._refresh_flags()
        if pid == self.current_patient:
            self._show_patient(pid)
        self.status_bar.showMessage(f"Loaded {len(sessions)} sessions for {self.index[pid].name}")

    def _on_load_failed(self, pid: str, message: str) -> None:
        if pid == self.current_patient:
            self.banner.show_message(f"No sessions found: {message}", "warning")
        self.status_bar.showMessage(message)

    # =========================================================================
    # Playback
    # =========================================================================

    def _toggle_playback(self) -> None:
        self.player.toggle()

    def _on_slider_moved(self, value: int) -> None:
        self.player.seek(value)

    def _on_palette_changed(self, name: str) -> None:
        self.player.set_palette(name)
        self.legend.set_palette(name)

    def _on_frame_changed(self, index: int) -> None:
        self.frame_slider.blockSignals(True)
        self.frame_slider.setValue(index)
        self.frame_slider.blockSignals(False)
        self.frame_label.setText(f"{index + 1} / {self.player.frame_count}")

    def _on_player_state(self, state: PlayerState) -> None:
        playing = state is PlayerState.PLAYING
        self.playing_dot.set_active(playing)
        self.play_btn.setText("Pause" if playing else "Play")
        self.play_btn.set_color_scheme("secondary" if playing else "success")

    # =========================================================================
    # Metrics Display
    # =========================================================================

    def _refresh_session_stats(self, session: Session) -> None:
        status = session.status.value
        self.ppi_stat.set_value(f"{session.peak_pressure_index:.0f}")
        self.contact_stat.set_value(f"{session.contact_area_percent:.1f}%")
        self.status_stat.set_value(status + (" ⚠" if session.alert else ""), STATUS_COLORS[status])
        self.frames_stat.set_value(str(session.frame_count))

    def _refresh_summary(self, sessions: Mapping[str, Session]) -> None:
        summary = summarize(sessions)
        self.peak_summary.set_value(f"{summary.peak_ppi:.0f}")
        self.avg_summary.set_value(f"{summary.mean_ppi:.0f}")
        self.contact_summary.set_value(f"{summary.mean_contact_percent:.1f}%")
        self.high_summary.set_value(str(summary.high_risk_sessions))

    def _on_range_changed(self, range_key: str) -> None:
        self.range_key = range_key
        self._refresh_trends()

    def _refresh_trends(self) -> None:
        sessions = self.loaded.get(self.current_patient, {})
        series = trend_series(slice_by_range(sessions, self.range_key))
        self.trend_chart.set_series(series.labels, series.ppi, series.contact,
                                    "PPI", "Contact %")

    def _refresh_flags(self) -> None:
        self.flags_list.clear()
        flags = self.risk_view.flags(self.loaded)
        if not flags:
            self.flags_list.addItem("No high-risk sessions")
            return
        for flag in flags:
            item = QListWidgetItem(flag.label)
            item.setForeground(QColor(STATUS_COLORS[flag.status.value]))
            item.setData(Qt.ItemDataRole.UserRole, (flag.patient_id, flag.date_key))
            self.flags_list.addItem(item)

    def _on_flag_activated(self, item: QListWidgetItem) -> None:
        target = item.data(Qt.ItemDataRole.UserRole)
        if not target:
            return
        pid, date_key = target
        combo_index = self.patient_combo.findData(pid)
        if combo_index < 0:
            return
        self.patient_combo.setCurrentIndex(combo_index)
        session_index = self.session_combo.findData(date_key)
        if session_index >= 0:
            self.session_combo.setCurrentIndex(session_index)

    # =========================================================================
    # Notes
    # =========================================================================

    def _refresh_notes(self) -> None:
        self.notes_list.clear()
        if not self.current_patient:
            return
        for note in self.notes.list_for_patient(self.current_patient):
            self.notes_list.addItem(f"{note.timestamp}  {note.text}")

    def _add_note(self) -> None:
        if not self.current_patient:
            return
        try:
            self.notes.append(self.current_patient, self.note_input.text())
        except ValidationError as e:
            self.status_bar.showMessage(str(e))
            return
        self.note_input.clear()
        self._refresh_notes()

    # =========================================================================
    # Export
    # =========================================================================

    def _export_report(self) -> None:
        sessions = self.loaded.get(self.current_patient)
        if not sessions:
            self.status_bar.showMessage("Nothing to export")
            return

        filepath, _ = QFileDialog.getSaveFileName(
            self, "Export Report", f"{self.current_patient}_report.csv", "CSV Files (*.csv)"
        )
        if not filepath:
            return

        title = next(iter(sessions.values())).patient_name
        try:
            rows = export_sessions_csv(sessions, filepath)
            message = f"Exported {rows} sessions to {filepath}"
            if EXPORT_AVAILABLE:
                path = Path(filepath)
                graph_path = str(path.with_name(path.stem + '_trend.png'))
                export_trend_graph(sessions, graph_path, title)
                message += f" (graph: {graph_path})"
        except OSError as e:
            logger.error("Export to %s failed: %s", filepath, e)
            self.status_bar.showMessage(f"Export failed: {e}")
            return
        self.status_bar.showMessage(message)

    # =========================================================================
    # Cleanup
    # =========================================================================

    def closeEvent(self, event) -> None:
        """Handle window close event."""
        self.player.close()
        self.pending_loads.clear()
        if self.loader is not None:
            self.loader.requestInterruption()
            self.loader.wait(2000)
        event.accept()
