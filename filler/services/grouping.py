from __future__ import annotations

from collections.abc import Iterable

from ..models.record import Record

"""Grouping and in-group ordering of records.

Groups keep first-seen order so output locations are created in a
reproducible order. Sorting is Python's stable sort on the lower-cased name,
so equal names keep their spreadsheet order.
"""

__all__ = [
    "group_records",
    "sort_group",
    "group_and_sort",
]

UNKNOWN_GROUP = "Unknown"


def group_records(
    records: Iterable[Record], group_column: str, unknown: str = UNKNOWN_GROUP
) -> dict[str, list[Record]]:
    groups: dict[str, list[Record]] = {}
    for record in records:
        key = record.text(group_column) or unknown
        groups.setdefault(key, []).append(record)
    return groups


def sort_group(records: list[Record], sort_column: str) -> list[Record]:
    return sorted(records, key=lambda r: r.text(sort_column).lower())


def group_and_sort(
    records: Iterable[Record],
    group_column: str,
    sort_column: str,
    unknown: str = UNKNOWN_GROUP,
) -> dict[str, list[Record]]:
    """Partition by ``group_column``, each bucket sorted by ``sort_column``."""
    return {
        key: sort_group(bucket, sort_column)
        for key, bucket in group_records(records, group_column, unknown).items()
    }
