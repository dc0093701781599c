"""
Notes Store Tests
Validation, ordering and persistence through the key-value backends.
"""

import json

import pytest

from pressure_dashboard.core.notes_store import JsonFileStore, MemoryStore, NotesStore
from pressure_dashboard.errors import ValidationError


def fixed_clock():
    return "2025-10-12T09:30:00"


@pytest.fixture
def notes():
    return NotesStore(MemoryStore(), clock=fixed_clock)


def test_append_and_list_in_order(notes):
    notes.append("p1", "Turned patient")
    notes.append("p2", "Other patient")
    notes.append("p1", "  Checked heels  ")

    texts = [n.text for n in notes.list_for_patient("p1")]
    assert texts == ["Turned patient", "Checked heels"]
    assert notes.count("p2") == 1
    assert notes.list_for_patient("p1")[0].timestamp == "2025-10-12T09:30:00"


@pytest.mark.parametrize("text", ["", "   ", "\n\t", None])
def test_empty_note_rejected(notes, text):
    notes.append("p1", "First")
    with pytest.raises(ValidationError):
        notes.append("p1", text)
    assert [n.text for n in notes.list_for_patient("p1")] == ["First"]


def test_unknown_patient_has_no_notes(notes):
    assert notes.list_for_patient("nobody") == ()
    assert notes.patients() == []


def test_notes_survive_a_new_store():
    storage = MemoryStore()
    NotesStore(storage, clock=fixed_clock).append("p1", "Persisted")

    reopened = NotesStore(storage)
    assert [n.text for n in reopened.list_for_patient("p1")] == ["Persisted"]
    assert reopened.patients() == ["p1"]


def test_custom_key_namespaces_notes():
    storage = MemoryStore()
    NotesStore(storage, key="ward_a").append("p1", "Ward A note")
    assert "ward_a" in storage.data
    assert NotesStore(storage, key="ward_b").list_for_patient("p1") == ()


def test_corrupt_storage_is_not_overwritten():
    storage = MemoryStore()
    storage.set("clinician_notes", "{not json")
    notes = NotesStore(storage)
    assert notes.list_for_patient("p1") == ()

    note = notes.append("p1", "Kept in memory")
    assert notes.list_for_patient("p1") == (note,)
    assert storage.get("clinician_notes") == "{not json"


class FlakyStore(MemoryStore):
    """Memory store whose next reads fail."""

    def __init__(self):
        super().__init__()
        self.failing_reads = 0

    def get(self, key):
        if self.failing_reads:
            self.failing_reads -= 1
            raise OSError("storage offline")
        return super().get(key)


def test_read_failure_does_not_erase_stored_notes():
    storage = FlakyStore()
    writer = NotesStore(storage, clock=fixed_clock)
    writer.append("p1", "First patient")
    writer.append("p2", "Second patient")

    storage.failing_reads = 1
    notes = NotesStore(storage, clock=fixed_clock)
    assert notes.list_for_patient("p1") == ()

    notes.append("p3", "New note")

    stored = json.loads(storage.get("clinician_notes"))
    assert [n["text"] for n in stored["p1"]] == ["First patient"]
    assert [n["text"] for n in stored["p2"]] == ["Second patient"]
    assert [n["text"] for n in stored["p3"]] == ["New note"]
    assert [n.text for n in notes.list_for_patient("p1")] == ["First patient"]


def test_write_skipped_while_storage_stays_unreadable():
    storage = FlakyStore()
    NotesStore(storage, clock=fixed_clock).append("p1", "Stored")

    storage.failing_reads = 2
    notes = NotesStore(storage, clock=fixed_clock)
    notes.append("p1", "Pending")
    assert [n["text"] for n in json.loads(storage.get("clinician_notes"))["p1"]] == ["Stored"]
    assert [n.text for n in notes.list_for_patient("p1")] == ["Pending"]

    notes.append("p1", "Later")
    stored = json.loads(storage.get("clinician_notes"))
    assert [n["text"] for n in stored["p1"]] == ["Stored", "Pending", "Later"]


def test_failed_write_keeps_note_in_memory():
    class BrokenStore(MemoryStore):
        def set(self, key, value):
            raise OSError("disk full")

    notes = NotesStore(BrokenStore())
    note = notes.append("p1", "Still here")
    assert notes.list_for_patient("p1") == (note,)


def test_json_file_store_round_trip(tmp_path):
    path = tmp_path / "sub" / "notes.json"
    store = JsonFileStore(str(path))
    assert store.get("missing") is None

    store.set("a", "1")
    store.set("b", "2")
    assert JsonFileStore(str(path)).get("a") == "1"
    assert json.loads(path.read_text()) == {"a": "1", "b": "2"}


def test_json_file_store_recovers_from_corrupt_file(tmp_path):
    path = tmp_path / "notes.json"
    path.write_text("[1, 2, 3]")
    store = JsonFileStore(str(path))
    store.set("a", "1")
    assert store.get("a") == "1"
