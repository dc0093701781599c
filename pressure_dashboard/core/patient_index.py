"""
================================================================================
Patient Index - Static Patient Directory
================================================================================

Maps patient identifiers to display metadata and the sensor file recorded
on each date. The index is reference data: it is loaded once at startup
and never changes while the dashboard runs.

File Format (JSON):
    {
      "patients": {
        "<patientId>": {
          "name": "...",
          "email": "...",
          "files": {"2025-10-11": "<patientId>_20251011.csv", ...}
        }
      }
    }

Date keys are ISO dates, so sorting them as strings sorts them in time.
"""

import json
from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType
from typing import Dict, Iterator, List, Mapping, Optional

from ..errors import NotFoundError

# Demo index shipped with the package
DEFAULT_INDEX_PATH = Path(__file__).resolve().parent.parent / "data" / "patients.json"


@dataclass(frozen=True)
class PatientRecord:
    """
    One patient's entry in the index.

    Attributes:
        patient_id: Opaque identifier (e.g. "1c0fd777")
        name: Display name
        email: Login email, matched case-insensitively
        files: Date key -> sensor filename, ordered by date
    """
    patient_id: str
    name: str
    email: str = ""
    files: Mapping[str, str] = field(default_factory=dict)

    def __post_init__(self):
        ordered = {k: self.files[k] for k in sorted(self.files)}
        object.__setattr__(self, "files", MappingProxyType(ordered))

    @property
    def date_keys(self) -> List[str]:
        """Recording dates, oldest first."""
        return list(self.files)

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "email": self.email,
            "files": dict(self.files),
        }

    @classmethod
    def from_dict(cls, patient_id: str, d: dict) -> 'PatientRecord':
        return cls(
            patient_id=patient_id,
            name=d.get("name", patient_id),
            email=d.get("email", ""),
            files=dict(d.get("files", {})),
        )


class PatientIndex(Mapping[str, PatientRecord]):
    """
    Read-only directory of patients.

    Example:
        >>> index = PatientIndex.default_index()
        >>> index.filename_for("1c0fd777", "2025-10-11")
        '1c0fd777_20251011.csv'
    """

    def __init__(self, records: Mapping[str, PatientRecord]):
        self._records: Dict[str, PatientRecord] = dict(records)

    # Mapping interface
    def __getitem__(self, patient_id: str) -> PatientRecord:
        return self.get_patient(patient_id)

    def __iter__(self) -> Iterator[str]:
        return iter(self._records)

    def __len__(self) -> int:
        return len(self._records)

    def get_patient(self, patient_id: str) -> PatientRecord:
        """
        Look up a patient.

        Raises:
            NotFoundError: If the patient is not in the index
        """
        try:
            return self._records[patient_id]
        except KeyError:
            raise NotFoundError(f"Unknown patientId: {patient_id}") from None

    def filename_for(self, patient_id: str, date_key: str) -> str:
        """
        Sensor filename recorded for a patient on a date.

        Raises:
            NotFoundError: If the patient or the date is unknown
        """
        record = self.get_patient(patient_id)
        filename = record.files.get(date_key)
        if not filename:
            raise NotFoundError(f"No file for {patient_id} on {date_key}")
        return filename

    def patient_ids(self) -> List[str]:
        return list(self._records)

    def find_patient_id_by_email(self, email: Optional[str]) -> Optional[str]:
        """Patient id for a login email (case-insensitive), or None."""
        if not email:
            return None
        wanted = email.strip().lower()
        for patient_id, record in self._records.items():
            if record.email.lower() == wanted:
                return patient_id
        return None

    def to_dict(self) -> dict:
        return {"patients": {pid: r.to_dict() for pid, r in self._records.items()}}

    @classmethod
    def from_dict(cls, data: dict) -> 'PatientIndex':
        """Create from the JSON structure described in the module docstring."""
        patients = data.get("patients", {})
        return cls({
            pid: PatientRecord.from_dict(pid, entry)
            for pid, entry in patients.items()
        })

    @classmethod
    def load(cls, filepath: str) -> 'PatientIndex':
        """Load the index from a JSON file."""
        with open(filepath, 'r') as f:
            return cls.from_dict(json.load(f))

    @classmethod
    def default_index(cls) -> 'PatientIndex':
        """The demo index bundled with the package."""
        return cls.load(str(DEFAULT_INDEX_PATH))
