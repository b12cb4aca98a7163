"""Collect interaction records while a test suite runs."""
from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Any, List, Mapping, Tuple

import httpx

from .records import InteractionRecord, from_assertion, from_exchange, record_to_dict

log = logging.getLogger(__name__)


class Recorder:
    """Accumulates records for one documentation run.

    Records are kept most-recent-first, the arrival order the renderer
    reverses to list examples chronologically.
    """

    def __init__(self, app: Any = None) -> None:
        self.app = app
        self._records: List[InteractionRecord] = []

    def add(self, record: InteractionRecord) -> InteractionRecord:
        self._records.insert(0, record)
        return record

    def record(self, response: httpx.Response, **options: Any) -> InteractionRecord:
        """Capture a test client response.

        ``options`` accepts ``group_title``, ``action_description``,
        ``description`` and ``detail``.
        """

        return self.add(from_exchange(response, app=self.app, **options))

    def record_assertion(
        self, response: httpx.Response, opts: Mapping[str, Any]
    ) -> InteractionRecord:
        return self.add(from_assertion((response, opts), app=self.app))

    @property
    def records(self) -> Tuple[InteractionRecord, ...]:
        return tuple(self._records)

    def __len__(self) -> int:
        return len(self._records)

    def clear(self) -> None:
        self._records.clear()

    def dump(self, path: str | os.PathLike[str]) -> Path:
        """Persist the records as a capture file for ``blueprint-writer``."""

        target = Path(path)
        target.parent.mkdir(parents=True, exist_ok=True)
        payload = {"version": 1, "records": [record_to_dict(item) for item in self._records]}
        with target.open("w", encoding="utf-8") as handle:
            json.dump(payload, handle, indent=2, ensure_ascii=False)
            handle.write("\n")
        log.info("Wrote %d records to %s", len(self._records), target)
        return target


__all__ = ["Recorder"]
