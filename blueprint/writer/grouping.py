"""Group records into document sections and order examples."""
from __future__ import annotations

from typing import Callable, Dict, Iterable, List, Sequence, Tuple, TypeVar

from ..records import InteractionRecord, action_key, group_key

T = TypeVar("T")
K = TypeVar("K")

ActionGroup = Tuple[str, List[InteractionRecord]]
RecordGroup = Tuple[str, List[ActionGroup]]


def stable_group_by(items: Iterable[T], key: Callable[[T], K]) -> List[Tuple[K, List[T]]]:
    """Partition ``items`` by ``key``, ordering buckets by first appearance."""

    buckets: Dict[K, List[T]] = {}
    for item in items:
        buckets.setdefault(key(item), []).append(item)
    return list(buckets.items())


def group_records(records: Iterable[InteractionRecord]) -> List[RecordGroup]:
    """Return ``[(group, [(action, records), ...]), ...]`` in first-seen order."""

    return [
        (group, stable_group_by(members, action_key))
        for group, members in stable_group_by(records, group_key)
    ]


def sort_by_status(records: Sequence[InteractionRecord]) -> List[InteractionRecord]:
    # sorted() is stable, so equal statuses keep their chronological order
    return sorted(records, key=lambda record: record.status)


__all__ = ["ActionGroup", "RecordGroup", "group_records", "sort_by_status", "stable_group_by"]
