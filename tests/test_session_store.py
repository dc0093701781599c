"""
Session Store Tests
Caching, single-flight loading, skipped dates and range slicing.
"""

import asyncio

import pytest

from pressure_dashboard.core.metrics import RiskStatus
from pressure_dashboard.core.session_store import (
    SessionStore, slice_by_range, summarize, trend_series,
)
from pressure_dashboard.errors import NotFoundError, TransportError

from conftest import CountingSource, grid_text


@pytest.fixture
def store(index, source, config):
    return SessionStore(index, source, config)


def test_load_session_parses_and_scores(store):
    session = asyncio.run(store.load_session("p1", "2025-10-13"))

    assert session.patient_id == "p1"
    assert session.patient_name == "Ada Lovelace"
    assert session.filename == "p1_20251013.csv"
    assert session.frame_count == 2
    assert session.peak_pressure_index == 255.0
    assert session.contact_area_percent == pytest.approx(50.0)
    assert session.status is RiskStatus.HIGH


def test_unknown_patient_raises_not_found(store, source):
    with pytest.raises(NotFoundError):
        asyncio.run(store.load_session("nobody", "2025-10-11"))
    with pytest.raises(NotFoundError):
        asyncio.run(store.load_patient_sessions("nobody"))
    assert source.calls == []


def test_unknown_date_raises_not_found(store, source):
    with pytest.raises(NotFoundError):
        asyncio.run(store.load_session("p2", "2025-10-11"))
    assert source.calls == []


def test_patient_sessions_are_date_ordered(store):
    sessions = asyncio.run(store.load_patient_sessions("p1"))

    assert list(sessions) == ["2025-10-11", "2025-10-12", "2025-10-13"]
    assert sessions["2025-10-11"].status is RiskStatus.OK
    assert sessions["2025-10-12"].status is RiskStatus.MEDIUM
    assert sessions["2025-10-13"].status is RiskStatus.HIGH


def test_patient_sessions_are_cached(store, source):
    first = asyncio.run(store.load_patient_sessions("p1"))
    second = asyncio.run(store.load_patient_sessions("p1"))

    assert first is second
    assert len(source.calls) == 3
    assert store.is_cached("p1")


def test_cached_mapping_is_read_only(store):
    sessions = asyncio.run(store.load_patient_sessions("p2"))
    with pytest.raises(TypeError):
        sessions["2025-10-30"] = sessions["2025-10-12"]


def test_concurrent_loads_share_one_fetch(store, source):
    async def load_twice():
        return await asyncio.gather(
            store.load_patient_sessions("p1"),
            store.load_patient_sessions("p1"),
            store.load_session("p1", "2025-10-11"),
        )

    first, second, single = asyncio.run(load_twice())

    assert first is second
    assert single is first["2025-10-11"]
    assert sorted(source.calls) == sorted(set(source.calls)), "each file fetched once"
    assert len(source.calls) == 3


def test_failed_date_is_skipped(index, files, config):
    files = dict(files)
    files["p1_20251012.csv"] = TransportError("p1_20251012.csv", "503 Service Unavailable", status=503)
    del files["p1_20251013.csv"]
    store = SessionStore(index, CountingSource(files), config)

    sessions = asyncio.run(store.load_patient_sessions("p1"))

    assert list(sessions) == ["2025-10-11"]


def test_patient_with_no_loadable_dates_is_empty(index, config):
    store = SessionStore(index, CountingSource({}), config)
    sessions = asyncio.run(store.load_patient_sessions("p2"))
    assert len(sessions) == 0


def test_single_session_failure_propagates(index, config):
    store = SessionStore(index, CountingSource({}), config)
    with pytest.raises(NotFoundError):
        asyncio.run(store.load_session("p1", "2025-10-11"))


def test_invalidate_forces_refetch(store, source):
    asyncio.run(store.load_patient_sessions("p2"))
    store.invalidate("p2")
    assert not store.is_cached("p2")

    asyncio.run(store.load_patient_sessions("p2"))
    assert source.calls.count("p2_20251012.csv") == 2


def test_cached_patients_snapshot(store):
    asyncio.run(store.load_patient_sessions("p2"))
    snapshot = store.cached_patients()
    assert list(snapshot) == ["p2"]
    store.invalidate()
    assert list(snapshot) == ["p2"]
    assert store.cached_patients() == {}


# =============================================================================
# Session Analysis
# =============================================================================

def test_slice_by_range(store):
    sessions = asyncio.run(store.load_patient_sessions("p1"))

    assert list(slice_by_range(sessions, "1h")) == ["2025-10-13"]
    assert list(slice_by_range(sessions, "6h")) == ["2025-10-12", "2025-10-13"]
    assert list(slice_by_range(sessions, "24h")) == list(sessions)
    assert list(slice_by_range(sessions, "unknown")) == list(sessions)


def test_slice_by_range_with_fewer_sessions(store):
    sessions = asyncio.run(store.load_patient_sessions("p2"))
    assert list(slice_by_range(sessions, "6h")) == ["2025-10-12"]
    assert list(slice_by_range({}, "1h")) == []


def test_summarize(store):
    sessions = asyncio.run(store.load_patient_sessions("p1"))
    summary = summarize(sessions)

    assert summary.session_count == 3
    assert summary.peak_ppi == 255.0
    assert summary.mean_ppi == pytest.approx((1 + 160 + 255) / 3)
    assert summary.mean_contact_percent == pytest.approx((0 + 100 + 50) / 3)
    assert summary.high_risk_sessions == 1


def test_summarize_empty():
    summary = summarize({})
    assert summary.session_count == 0
    assert summary.peak_ppi == 0.0


def test_trend_series(store):
    sessions = asyncio.run(store.load_patient_sessions("p1"))
    series = trend_series(sessions)

    assert series.labels == ("2025-10-11", "2025-10-12", "2025-10-13")
    assert series.ppi == (1.0, 160.0, 255.0)
    assert series.contact[1] == 100.0


def test_store_from_generated_text(index, config):
    source = CountingSource({"p2_20251012.csv": grid_text(5, rows=3)})
    store = SessionStore(index, source, config)
    session = asyncio.run(store.load_session("p2", "2025-10-12"))
    assert session.frame_count == 1
    assert session.last_frame[-1] == 5.0
    assert session.last_frame[0] == config.baseline_value


class GatedSource(CountingSource):
    """Reads the file when asked but answers only once released."""

    def __init__(self, files):
        super().__init__(files)
        self.release = None

    async def fetch(self, filename):
        self.calls.append(filename)
        content = self.files[filename]
        if self.release is not None:
            await self.release.wait()
        return content


def test_invalidate_during_load_is_not_undone(index, config):
    source = GatedSource({"p2_20251012.csv": grid_text(20)})
    store = SessionStore(index, source, config)

    async def scenario():
        source.release = asyncio.Event()
        pending = asyncio.ensure_future(store.load_patient_sessions("p2"))
        while not source.calls:
            await asyncio.sleep(0)

        store.invalidate("p2")
        source.files["p2_20251012.csv"] = grid_text(240)
        source.release.set()

        stale = await pending
        fresh = await store.load_patient_sessions("p2")
        return stale, fresh

    stale, fresh = asyncio.run(scenario())

    assert stale["2025-10-12"].peak_pressure_index == 20.0
    assert fresh["2025-10-12"].peak_pressure_index == 240.0
    assert source.calls == ["p2_20251012.csv", "p2_20251012.csv"]
    assert store.is_cached("p2")
    assert asyncio.run(store.load_patient_sessions("p2")) is fresh


def test_invalidate_all_during_load(index, config):
    source = GatedSource({"p2_20251012.csv": grid_text(20)})
    store = SessionStore(index, source, config)

    async def scenario():
        source.release = asyncio.Event()
        pending = asyncio.ensure_future(store.load_session("p2", "2025-10-12"))
        while not source.calls:
            await asyncio.sleep(0)
        store.invalidate()
        source.release.set()
        await pending

    asyncio.run(scenario())
    assert not store.is_cached("p2")
    assert store.cached_patients() == {}

    source.files["p2_20251012.csv"] = grid_text(240)
    session = asyncio.run(store.load_session("p2", "2025-10-12"))
    assert session.peak_pressure_index == 240.0
    assert len(source.calls) == 2
