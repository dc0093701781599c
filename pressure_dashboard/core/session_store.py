"""
================================================================================
Session Store - Per-Patient Session Cache
================================================================================

Loads each patient's recordings, parses them into frames, computes their
metrics and keeps the result for the lifetime of the store.

Design Philosophy:
    "Stay hungry, stay foolish." - Steve Jobs

Caching Rules:
    - A patient is fetched once. Later calls get the cached mapping.
    - Concurrent first calls share one in-flight load (single flight),
      so no file is ever fetched twice for the same patient.
    - A date whose file fails to load is logged and skipped. The rest of
      the patient still loads.
    - Unknown patients or dates raise NotFoundError and are not cached.
    - Sessions are never patched. invalidate() drops them, along with any
      load still in flight, and the next load replaces them wholesale.

The store runs on a single event loop. It holds no locks: every cache
read and write happens between awaits on that loop.
"""

import asyncio
import logging
from collections import OrderedDict
from dataclasses import dataclass
from types import MappingProxyType
from typing import Dict, Mapping, Optional, Tuple

import numpy as np

from ..config import MonitorConfig
from ..errors import NotFoundError, TransportError
from ..utils.constants import RANGE_KEEP
from .data_source import SensorDataSource
from .frame_parser import Frame, FrameParser
from .metrics import MetricsEngine, RiskStatus, SessionMetrics
from .patient_index import PatientIndex, PatientRecord

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Session:
    """
    One patient's recording for one date.

    Attributes:
        patient_id: Owning patient
        patient_name: Display name at load time
        date_key: ISO date of the recording
        filename: Sensor file the frames came from
        frames: Parsed frames, oldest first (at least one)
        metrics: Session KPIs
    """
    patient_id: str
    patient_name: str
    date_key: str
    filename: str
    frames: Tuple[Frame, ...]
    metrics: SessionMetrics

    @property
    def last_frame(self) -> Frame:
        return self.frames[-1]

    @property
    def frame_count(self) -> int:
        return len(self.frames)

    @property
    def peak_pressure_index(self) -> float:
        return self.metrics.peak_pressure_index

    @property
    def contact_area_percent(self) -> float:
        return self.metrics.contact_area_percent

    @property
    def status(self) -> RiskStatus:
        return self.metrics.status

    @property
    def alert(self) -> bool:
        return self.metrics.alert


@dataclass(frozen=True)
class PatientMetricsSummary:
    """Aggregate KPIs over a patient's sessions."""
    peak_ppi: float = 0.0
    mean_ppi: float = 0.0
    mean_contact_percent: float = 0.0
    high_risk_sessions: int = 0
    session_count: int = 0


@dataclass(frozen=True)
class TrendSeries:
    """Date-ordered series for the trend chart."""
    labels: Tuple[str, ...] = ()
    ppi: Tuple[float, ...] = ()
    contact: Tuple[float, ...] = ()


SessionMap = Mapping[str, Session]


class SessionStore:
    """
    Memoizing loader for patient sessions.

    Example:
        >>> store = SessionStore(PatientIndex.default_index(), DemoSource())
        >>> sessions = asyncio.run(store.load_patient_sessions("1c0fd777"))
        >>> for date_key, session in sessions.items():
        ...     print(date_key, session.status.value)
    """

    def __init__(self, index: PatientIndex, source: SensorDataSource,
                 config: Optional[MonitorConfig] = None,
                 parser: Optional[FrameParser] = None,
                 engine: Optional[MetricsEngine] = None):
        """
        Initialize the store.

        Args:
            index: Patient directory
            source: Where sensor files are fetched from
            config: Shared configuration (defaults if None)
            parser: Frame parser (built from config if None)
            engine: Metrics engine (built from config if None)
        """
        self.index = index
        self.source = source
        self.config = config or MonitorConfig()
        self.parser = parser or FrameParser(self.config)
        self.engine = engine or MetricsEngine(self.config)

        self._patients: Dict[str, SessionMap] = {}
        self._sessions: Dict[Tuple[str, str], Session] = {}
        self._patient_loads: Dict[str, asyncio.Future] = {}
        self._session_loads: Dict[Tuple[str, str], asyncio.Future] = {}
        # Bumped by invalidate(); loads started earlier do not write the cache
        self._epoch = 0
        self._generations: Dict[str, int] = {}

    # =========================================================================
    # Loading
    # =========================================================================

    async def load_session(self, patient_id: str, date_key: str) -> Session:
        """
        Load one session.

        Args:
            patient_id: Patient identifier
            date_key: ISO date of the recording

        Returns:
            The cached or freshly loaded Session

        Raises:
            NotFoundError: Unknown patient or date, or missing file
            TransportError: The file could not be fetched
        """
        key = (patient_id, date_key)
        cached = self._sessions.get(key)
        if cached is not None:
            return cached

        record = self.index.get_patient(patient_id)
        filename = self.index.filename_for(patient_id, date_key)

        load = self._session_loads.get(key)
        if load is None:
            generation = self._generation(patient_id)
            load = asyncio.ensure_future(
                self._fetch_session(record, date_key, filename, generation)
            )
            self._session_loads[key] = load
            load.add_done_callback(
                lambda f, key=key: _forget(self._session_loads, key, f)
            )
        return await asyncio.shield(load)

    async def load_patient_sessions(self, patient_id: str) -> SessionMap:
        """
        Load every session of a patient.

        Args:
            patient_id: Patient identifier

        Returns:
            Read-only mapping of date key to Session, oldest first. Dates
            that failed to load are missing from it.

        Raises:
            NotFoundError: The patient is not in the index
        """
        cached = self._patients.get(patient_id)
        if cached is not None:
            logger.debug("Session cache hit for %s", patient_id)
            return cached

        record = self.index.get_patient(patient_id)

        load = self._patient_loads.get(patient_id)
        if load is None:
            load = asyncio.ensure_future(
                self._fetch_patient(record, self._generation(patient_id))
            )
            self._patient_loads[patient_id] = load
            load.add_done_callback(
                lambda f, pid=patient_id: _forget(self._patient_loads, pid, f)
            )
        return await asyncio.shield(load)

    def _generation(self, patient_id: str) -> Tuple[int, int]:
        return (self._epoch, self._generations.get(patient_id, 0))

    async def _fetch_patient(self, record: PatientRecord,
                             generation: Tuple[int, int]) -> SessionMap:
        sessions: "OrderedDict[str, Session]" = OrderedDict()
        for date_key in sorted(record.files):
            try:
                sessions[date_key] = await self.load_session(record.patient_id, date_key)
            except (TransportError, NotFoundError) as e:
                logger.warning("Skipping %s on %s: %s", record.patient_id, date_key, e)

        result = MappingProxyType(sessions)
        if generation != self._generation(record.patient_id):
            logger.debug("Discarding sessions of %s loaded before invalidation", record.patient_id)
            return result
        self._patients[record.patient_id] = result
        logger.info("Loaded %d/%d sessions for %s",
                    len(sessions), len(record.files), record.patient_id)
        return result

    async def _fetch_session(self, record: PatientRecord, date_key: str,
                             filename: str, generation: Tuple[int, int]) -> Session:
        text = await self.source.fetch(filename)
        parsed = self.parser.parse(text)
        metrics = self.engine.compute_session_metrics(parsed.frames)

        session = Session(
            patient_id=record.patient_id,
            patient_name=record.name,
            date_key=date_key,
            filename=filename,
            frames=parsed.frames,
            metrics=metrics,
        )
        if generation == self._generation(record.patient_id):
            self._sessions[(record.patient_id, date_key)] = session
        logger.info("Loaded %s (%d frames, PPI %.0f, %s)",
                    filename, session.frame_count,
                    metrics.peak_pressure_index, metrics.status.value)
        return session

    # =========================================================================
    # Cache Management
    # =========================================================================

    def is_cached(self, patient_id: str) -> bool:
        return patient_id in self._patients

    def cached_patients(self) -> Dict[str, SessionMap]:
        """Snapshot of every fully loaded patient."""
        return dict(self._patients)

    def invalidate(self, patient_id: Optional[str] = None) -> None:
        """
        Forget cached sessions so the next load fetches again.

        Loads already in flight still answer their callers, but their
        results are not cached and later calls start a fresh fetch.

        Args:
            patient_id: Patient to forget, or None for everyone
        """
        if patient_id is None:
            self._epoch += 1
            self._patients.clear()
            self._sessions.clear()
            self._patient_loads.clear()
            self._session_loads.clear()
            return

        self._generations[patient_id] = self._generations.get(patient_id, 0) + 1
        self._patients.pop(patient_id, None)
        self._patient_loads.pop(patient_id, None)
        for key in [k for k in self._sessions if k[0] == patient_id]:
            del self._sessions[key]
        for key in [k for k in self._session_loads if k[0] == patient_id]:
            del self._session_loads[key]


def _forget(loads: Dict, key, future: asyncio.Future) -> None:
    """Drop a finished load unless a newer one has taken its key."""
    if loads.get(key) is future:
        del loads[key]


# =============================================================================
# Session Analysis
# =============================================================================

def summarize(sessions: SessionMap) -> PatientMetricsSummary:
    """
    Aggregate a patient's sessions.

    Returns:
        Peak and mean PPI, mean contact area and the number of High
        sessions (all zero for no sessions)
    """
    values = list(sessions.values())
    if not values:
        return PatientMetricsSummary()

    ppi = [s.peak_pressure_index for s in values]
    contact = [s.contact_area_percent for s in values]
    return PatientMetricsSummary(
        peak_ppi=float(max(ppi)),
        mean_ppi=float(np.mean(ppi)),
        mean_contact_percent=float(np.mean(contact)),
        high_risk_sessions=sum(1 for s in values if s.status is RiskStatus.HIGH),
        session_count=len(values),
    )


def trend_series(sessions: SessionMap) -> TrendSeries:
    """Chart series in date order."""
    ordered = [sessions[k] for k in sorted(sessions)]
    return TrendSeries(
        labels=tuple(s.date_key for s in ordered),
        ppi=tuple(s.peak_pressure_index for s in ordered),
        contact=tuple(s.contact_area_percent for s in ordered),
    )


def slice_by_range(sessions: SessionMap, range_key: str) -> "OrderedDict[str, Session]":
    """
    Keep the most recent sessions for a range button.

    Args:
        sessions: Date-keyed sessions
        range_key: One of RANGE_KEEP's labels ("1h", "6h", "24h");
                   unknown labels keep everything

    Returns:
        The newest sessions, oldest first. All of them when fewer exist
        than the range asks for.
    """
    dates = sorted(sessions)
    keep = RANGE_KEEP.get(range_key)
    if keep is not None:
        dates = dates[max(0, len(dates) - keep):]
    return OrderedDict((d, sessions[d]) for d in dates)
