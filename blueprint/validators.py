"""JSON schema validation for persisted capture files."""
from __future__ import annotations

import json
import os
from functools import lru_cache
from importlib import resources
from typing import Any, Dict, List, Tuple

from jsonschema import Draft202012Validator

from .records import InteractionRecord, record_from_dict
from .utils.errors import InvalidCaptureFile

RECORDS_SCHEMA = "records.v1.json"


@lru_cache(maxsize=None)
def _schema_contents(name: str) -> Dict[str, Any]:
    with resources.files("blueprint.schemas").joinpath(name).open("r", encoding="utf-8") as handle:
        return json.load(handle)


@lru_cache(maxsize=None)
def _load_schema(name: str) -> Draft202012Validator:
    return Draft202012Validator(_schema_contents(name))


def validate_payload(schema_name: str, payload: Any) -> Tuple[bool, List[str]]:
    validator = _load_schema(schema_name)
    errors: List[str] = []
    for error in validator.iter_errors(payload):
        location = "/".join(str(part) for part in error.absolute_path)
        errors.append(f"{location}: {error.message}" if location else error.message)
    return not errors, errors


def load_records(path: str | os.PathLike[str]) -> List[InteractionRecord]:
    """Read and validate a capture file written by :meth:`Recorder.dump`."""

    try:
        with open(path, "r", encoding="utf-8") as handle:
            payload = json.load(handle)
    except json.JSONDecodeError as exc:
        raise InvalidCaptureFile(f"{os.fspath(path)} is not valid JSON: {exc.msg}") from exc

    valid, errors = validate_payload(RECORDS_SCHEMA, payload)
    if not valid:
        raise InvalidCaptureFile(f"{os.fspath(path)} failed validation", errors)
    return [record_from_dict(item) for item in payload["records"]]


__all__ = ["RECORDS_SCHEMA", "load_records", "validate_payload"]
