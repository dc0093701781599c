"""
Patient Index Tests
Lookups, email matching and the bundled demo directory.
"""

import json

import pytest

from pressure_dashboard.core.patient_index import PatientIndex, PatientRecord
from pressure_dashboard.errors import NotFoundError


def test_lookup(index):
    assert index.get_patient("p1").name == "Ada Lovelace"
    assert index["p2"].email == "alan@example.com"
    assert index.filename_for("p1", "2025-10-12") == "p1_20251012.csv"
    assert len(index) == 2
    assert index.patient_ids() == ["p1", "p2"]


def test_unknown_ids_raise_not_found(index):
    with pytest.raises(NotFoundError):
        index.get_patient("nobody")
    with pytest.raises(NotFoundError, match="No file for p2 on 2025-10-11"):
        index.filename_for("p2", "2025-10-11")
    assert "nobody" not in index


def test_dates_are_ordered():
    record = PatientRecord("x", "X", files={
        "2025-10-13": "c.csv", "2025-10-11": "a.csv", "2025-10-12": "b.csv",
    })
    assert record.date_keys == ["2025-10-11", "2025-10-12", "2025-10-13"]
    with pytest.raises(TypeError):
        record.files["2025-10-14"] = "d.csv"


def test_email_lookup_is_case_insensitive(index):
    assert index.find_patient_id_by_email("ADA@example.com ") == "p1"
    assert index.find_patient_id_by_email("nobody@example.com") is None
    assert index.find_patient_id_by_email("") is None


def test_load_from_file(tmp_path, index):
    path = tmp_path / "patients.json"
    path.write_text(json.dumps(index.to_dict()))

    loaded = PatientIndex.load(str(path))
    assert loaded.patient_ids() == index.patient_ids()
    assert dict(loaded["p1"].files) == dict(index["p1"].files)


def test_bundled_index():
    index = PatientIndex.default_index()
    assert len(index) == 5
    assert index.filename_for("1c0fd777", "2025-10-11") == "1c0fd777_20251011.csv"
    assert index.find_patient_id_by_email("jason.ghanian@patient.demo") == "71e66ab3"
