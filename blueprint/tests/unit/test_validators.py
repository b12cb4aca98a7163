"""Tests for capture file validation."""
from __future__ import annotations

import json
from pathlib import Path

import pytest

from blueprint.capture import Recorder
from blueprint.records import EMPTY
from blueprint.tests._records import make_record
from blueprint.utils.errors import ErrorCode, InvalidCaptureFile
from blueprint.validators import RECORDS_SCHEMA, load_records, validate_payload


def _write(path: Path, payload) -> Path:
    path.write_text(json.dumps(payload), encoding="utf-8")
    return path


def test_minimal_payload_is_valid() -> None:
    payload = {
        "version": 1,
        "records": [
            {
                "method": "GET",
                "request_path": "/",
                "status": 200,
                "group_title": "Root",
                "action_description": "index",
            }
        ],
    }
    assert validate_payload(RECORDS_SCHEMA, payload) == (True, [])


def test_invalid_payload_reports_locations() -> None:
    payload = {
        "version": 1,
        "records": [{"method": "GET", "request_path": "/", "status": "ok", "source": None}],
    }
    valid, errors = validate_payload(RECORDS_SCHEMA, payload)
    assert not valid
    assert any(error.startswith("records/0/status") for error in errors)


def test_load_records_reads_recorder_dump(tmp_path: Path) -> None:
    recorder = Recorder()
    recorder.add(make_record(status=200, response_body={"id": 1}))
    recorder.add(make_record(status=404, response_body=EMPTY))
    path = recorder.dump(tmp_path / "capture.json")

    records = load_records(path)
    assert [record.status for record in records] == [404, 200]
    assert records[1].response_body == {"id": 1}
    assert records[0].response_body is EMPTY


def test_load_records_rejects_schema_violations(tmp_path: Path) -> None:
    path = _write(tmp_path / "bad.json", {"version": 2, "records": []})
    with pytest.raises(InvalidCaptureFile) as excinfo:
        load_records(path)
    assert excinfo.value.code is ErrorCode.INVALID_CAPTURE_FILE
    assert excinfo.value.errors


def test_load_records_rejects_invalid_json(tmp_path: Path) -> None:
    path = tmp_path / "broken.json"
    path.write_text("{not json", encoding="utf-8")
    with pytest.raises(InvalidCaptureFile):
        load_records(path)


def test_records_without_identity_are_rejected() -> None:
    anonymous = {"method": "GET", "request_path": "/x", "status": 200}
    half_named = {**anonymous, "group_title": "Things", "source": None}
    for record in (anonymous, half_named):
        valid, errors = validate_payload(RECORDS_SCHEMA, {"version": 1, "records": [record]})
        assert not valid
        assert errors


def test_scalar_bodies_survive_dump_and_load(tmp_path: Path) -> None:
    recorder = Recorder()
    recorder.add(make_record(request_body=True, response_body=42))
    records = load_records(recorder.dump(tmp_path / "capture.json"))
    assert records[0].request_body is True
    assert records[0].response_body == 42
