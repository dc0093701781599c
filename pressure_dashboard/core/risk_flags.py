"""
================================================================================
Risk Flags - High-Risk Session List
================================================================================

Builds the clinician's "needs attention" list from loaded sessions.

A session is flagged when its status reaches the minimum tier, or when
the alert heuristic fired (if alerts are included). The list is sorted
worst first: status, then PPI, then most recent date.
"""

from dataclasses import dataclass
from typing import Iterable, List, Mapping

from .metrics import RiskStatus
from .session_store import Session


@dataclass(frozen=True)
class RiskFlag:
    """One flagged session."""
    patient_id: str
    patient_name: str
    date_key: str
    status: RiskStatus
    peak_pressure_index: float
    contact_area_percent: float
    alert: bool

    @classmethod
    def from_session(cls, session: Session) -> 'RiskFlag':
        return cls(
            patient_id=session.patient_id,
            patient_name=session.patient_name,
            date_key=session.date_key,
            status=session.status,
            peak_pressure_index=session.peak_pressure_index,
            contact_area_percent=session.contact_area_percent,
            alert=session.alert,
        )

    @property
    def label(self) -> str:
        text = (f"{self.patient_name} {self.date_key}: {self.status.value} "
                f"(PPI {self.peak_pressure_index:.0f}, contact {self.contact_area_percent:.1f}%)")
        return text + " ⚠" if self.alert else text


class RiskFlagView:
    """
    Filters and orders sessions for review.

    Example:
        >>> view = RiskFlagView()
        >>> for flag in view.flags(store.cached_patients()):
        ...     print(flag.label)
    """

    def __init__(self, min_status: RiskStatus = RiskStatus.HIGH, include_alerts: bool = True):
        """
        Args:
            min_status: Lowest status that gets flagged
            include_alerts: Also flag sessions whose alert heuristic fired
        """
        self.min_status = min_status
        self.include_alerts = include_alerts

    def is_flagged(self, session: Session) -> bool:
        if session.status.rank >= self.min_status.rank:
            return True
        return self.include_alerts and session.alert

    def flags(self, sessions_by_patient: Mapping[str, Mapping[str, Session]]) -> List[RiskFlag]:
        """Flags across all patients, worst first."""
        sessions = (s for per_patient in sessions_by_patient.values() for s in per_patient.values())
        return self._collect(sessions)

    def flags_for_patient(self, sessions: Mapping[str, Session]) -> List[RiskFlag]:
        """Flags for one patient, worst first."""
        return self._collect(sessions.values())

    def _collect(self, sessions: Iterable[Session]) -> List[RiskFlag]:
        flags = [RiskFlag.from_session(s) for s in sessions if self.is_flagged(s)]
        # Stable sorts, least significant key first
        flags.sort(key=lambda f: f.patient_id)
        flags.sort(key=lambda f: f.date_key, reverse=True)
        flags.sort(key=lambda f: (f.status.rank, f.peak_pressure_index), reverse=True)
        return flags
