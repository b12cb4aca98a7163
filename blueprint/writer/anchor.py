"""Rebuild templated route paths from concrete request paths."""
from __future__ import annotations

from typing import List

from ..records import InteractionRecord


def _placeholder(params, segment: str) -> str:
    for name, value in params.items():
        if value == segment:
            return "{%s}" % name
    return segment


def resolve_anchor(record: InteractionRecord) -> str:
    """Return the route template for ``record``, e.g. ``/users/{id}``.

    Each routed segment equal to a path parameter value is replaced with that
    parameter's placeholder. When several parameters share a value the first
    one in ``path_params`` order wins.
    """

    if not record.path_params:
        return record.request_path
    pieces: List[str] = [""]
    pieces.extend(_placeholder(record.path_params, segment) for segment in record.path_info)
    return "/".join(pieces)


__all__ = ["resolve_anchor"]
