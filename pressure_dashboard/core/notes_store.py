"""
================================================================================
Notes Store - Clinician Notes per Patient
================================================================================

An append-only log of free-text notes, kept per patient in insertion
order and persisted under a single key of a local key-value store.

Storage Layout:
    key "clinician_notes" -> JSON string
        {"<patientId>": [{"patient_id": ..., "text": ..., "timestamp": ...}]}

Notes are a convenience feature, so persistence is best effort:
    - a failed write is logged and the note stays in memory
    - an unreadable or malformed store reads as empty, and is not written
      again until a later read succeeds; new notes are then merged after
      the stored ones, so stored notes are never lost
"""

import json
import logging
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Callable, Dict, List, Optional, Protocol, Tuple

from ..errors import ValidationError
from ..utils.constants import NOTES_STORAGE_KEY

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Note:
    """A single clinician note."""
    patient_id: str
    text: str
    timestamp: str

    def to_dict(self) -> dict:
        return {
            "patient_id": self.patient_id,
            "text": self.text,
            "timestamp": self.timestamp,
        }

    @classmethod
    def from_dict(cls, d: dict) -> 'Note':
        return cls(
            patient_id=str(d["patient_id"]),
            text=str(d["text"]),
            timestamp=str(d.get("timestamp", "")),
        )


class KeyValueStore(Protocol):
    """Minimal string key-value storage."""

    def get(self, key: str) -> Optional[str]:
        ...

    def set(self, key: str, value: str) -> None:
        ...


class JsonFileStore:
    """
    Key-value store kept as one JSON object in a file.

    Example:
        >>> store = JsonFileStore("~/.pressure_dashboard/notes.json")
        >>> store.set("greeting", "hello")
        >>> store.get("greeting")
        'hello'
    """

    def __init__(self, path: str):
        self.path = Path(path).expanduser()

    def _read_all(self) -> Dict[str, str]:
        if not self.path.exists():
            return {}
        with open(self.path, 'r') as f:
            data = json.load(f)
        if not isinstance(data, dict):
            raise ValueError(f"{self.path} does not contain a JSON object")
        return data

    def get(self, key: str) -> Optional[str]:
        return self._read_all().get(key)

    def set(self, key: str, value: str) -> None:
        try:
            data = self._read_all()
        except ValueError:
            # Corrupt file: start over rather than refuse every write
            data = {}
        data[key] = value
        self.path.parent.mkdir(parents=True, exist_ok=True)
        with open(self.path, 'w') as f:
            json.dump(data, f, indent=2)


class MemoryStore:
    """Key-value store that lives only as long as the process."""

    def __init__(self):
        self.data: Dict[str, str] = {}

    def get(self, key: str) -> Optional[str]:
        return self.data.get(key)

    def set(self, key: str, value: str) -> None:
        self.data[key] = value


def _now_iso() -> str:
    return datetime.now().isoformat(timespec="seconds")


class NotesStore:
    """
    Append-only clinician notes.

    Example:
        >>> notes = NotesStore(JsonFileStore(config.notes_path))
        >>> notes.append("1c0fd777", "Repositioned patient at 14:00")
        >>> [n.text for n in notes.list_for_patient("1c0fd777")]
        ['Repositioned patient at 14:00']
    """

    def __init__(self, storage: KeyValueStore, key: str = NOTES_STORAGE_KEY,
                 clock: Optional[Callable[[], str]] = None):
        """
        Initialize the notes store.

        Args:
            storage: Key-value backend
            key: Namespaced key holding every patient's notes
            clock: Returns the timestamp for new notes (ISO now if None)
        """
        self.storage = storage
        self.key = key
        self.clock = clock or _now_iso
        self._notes: Optional[Dict[str, List[Note]]] = None
        self._unsynced = False

    def append(self, patient_id: str, text: str) -> Note:
        """
        Add a note for a patient.

        Args:
            patient_id: Patient the note is about
            text: Note body, surrounding whitespace removed

        Returns:
            The stored Note

        Raises:
            ValidationError: The text is empty or only whitespace
        """
        body = (text or "").strip()
        if not body:
            raise ValidationError("Note text must not be empty")

        note = Note(patient_id=patient_id, text=body, timestamp=self.clock())
        self._log().setdefault(patient_id, []).append(note)
        self._persist()
        return note

    def list_for_patient(self, patient_id: str) -> Tuple[Note, ...]:
        """Notes for a patient, oldest first."""
        return tuple(self._log().get(patient_id, ()))

    def count(self, patient_id: str) -> int:
        return len(self._log().get(patient_id, ()))

    def patients(self) -> List[str]:
        """Patients with at least one note."""
        return [pid for pid, notes in self._log().items() if notes]

    def _log(self) -> Dict[str, List[Note]]:
        if self._notes is None:
            stored = self._read_stored()
            self._unsynced = stored is None
            self._notes = stored if stored is not None else {}
        return self._notes

    def _read_stored(self) -> Optional[Dict[str, List[Note]]]:
        """Stored notes, or None when the key cannot be read or decoded."""
        try:
            raw = self.storage.get(self.key)
            if not raw:
                return {}
            data = json.loads(raw)
            return {
                str(pid): [Note.from_dict(n) for n in notes]
                for pid, notes in data.items()
            }
        except (OSError, ValueError, KeyError, TypeError, AttributeError) as e:
            logger.warning("Could not read notes: %s", e)
            return None

    def _resync(self) -> bool:
        """
        Re-read storage and put notes added meanwhile after the stored ones.

        Returns:
            False while storage is still unreadable
        """
        stored = self._read_stored()
        if stored is None:
            return False
        for pid, notes in self._log().items():
            stored.setdefault(pid, []).extend(notes)
        self._notes = stored
        self._unsynced = False
        return True

    def _persist(self) -> None:
        # Never overwrite a key that could not be read
        if self._unsynced and not self._resync():
            logger.warning("Notes storage unreadable, keeping new notes in memory only")
            return

        payload = json.dumps({
            pid: [n.to_dict() for n in notes]
            for pid, notes in self._log().items()
        })
        try:
            self.storage.set(self.key, payload)
        except (OSError, ValueError, TypeError) as e:
            logger.warning("Could not save notes: %s", e)
