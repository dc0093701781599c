"""
Risk Flag Tests
Which sessions are flagged and in what order.
"""

import numpy as np

from pressure_dashboard.core.metrics import RiskStatus, SessionMetrics
from pressure_dashboard.core.risk_flags import RiskFlagView
from pressure_dashboard.core.session_store import Session


def make_session(pid, date_key, status, ppi=100.0, alert=False):
    return Session(
        patient_id=pid,
        patient_name=pid.upper(),
        date_key=date_key,
        filename=f"{pid}_{date_key}.csv",
        frames=(np.ones(4),),
        metrics=SessionMetrics(ppi, 10.0, status, alert, 1),
    )


def by_patient(*sessions):
    result = {}
    for s in sessions:
        result.setdefault(s.patient_id, {})[s.date_key] = s
    return result


def test_only_high_sessions_flagged_by_default():
    view = RiskFlagView()
    flags = view.flags(by_patient(
        make_session("a", "2025-10-11", RiskStatus.OK),
        make_session("a", "2025-10-12", RiskStatus.MEDIUM),
        make_session("b", "2025-10-12", RiskStatus.HIGH, ppi=240),
    ))
    assert [(f.patient_id, f.date_key) for f in flags] == [("b", "2025-10-12")]


def test_alerts_flag_lower_tiers():
    sessions = by_patient(make_session("a", "2025-10-11", RiskStatus.OK, alert=True))
    assert len(RiskFlagView().flags(sessions)) == 1
    assert RiskFlagView(include_alerts=False).flags(sessions) == []


def test_min_status_medium():
    view = RiskFlagView(min_status=RiskStatus.MEDIUM, include_alerts=False)
    flags = view.flags_for_patient({
        "2025-10-11": make_session("a", "2025-10-11", RiskStatus.OK),
        "2025-10-12": make_session("a", "2025-10-12", RiskStatus.MEDIUM),
    })
    assert [f.status for f in flags] == [RiskStatus.MEDIUM]


def test_worst_first_then_newest():
    view = RiskFlagView(min_status=RiskStatus.MEDIUM)
    flags = view.flags(by_patient(
        make_session("a", "2025-10-11", RiskStatus.HIGH, ppi=230),
        make_session("a", "2025-10-12", RiskStatus.MEDIUM, ppi=180),
        make_session("b", "2025-10-11", RiskStatus.HIGH, ppi=300),
        make_session("c", "2025-10-13", RiskStatus.HIGH, ppi=230),
    ))
    assert [(f.patient_id, f.date_key) for f in flags] == [
        ("b", "2025-10-11"),
        ("c", "2025-10-13"),
        ("a", "2025-10-11"),
        ("a", "2025-10-12"),
    ]


def test_label_mentions_alert():
    flag = RiskFlagView().flags_for_patient({
        "2025-10-11": make_session("a", "2025-10-11", RiskStatus.HIGH, ppi=250, alert=True),
    })[0]
    assert flag.label.startswith("A 2025-10-11: High (PPI 250")
    assert flag.label.endswith("⚠")


def test_empty_input():
    assert RiskFlagView().flags({}) == []
