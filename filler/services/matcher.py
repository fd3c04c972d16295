from __future__ import annotations

from collections.abc import Iterable

"""Column/field auto-matcher.

Seeds the template-field -> column mapping the user then edits. For each
template field the first rule that hits wins:

1. exact string equality
2. case-insensitive equality
3. case-insensitive substring in either direction (first column in order)

Unmatched fields are left out of the mapping.
"""

__all__ = [
    "match_field",
    "auto_match",
    "is_gender_field",
    "suggest_overrides",
]

GENDER_MARKERS = ("género", "genero", "gender")


def match_field(field: str, columns: list[str]) -> str | None:
    """Best column for one template field, or None."""
    for col in columns:
        if col == field:
            return col
    lowered = field.lower()
    for col in columns:
        if col.lower() == lowered:
            return col
    for col in columns:
        col_lower = col.lower()
        if lowered in col_lower or col_lower in lowered:
            return col
    return None


def auto_match(fields: Iterable[str], columns: Iterable[str]) -> dict[str, str]:
    """Build a (possibly partial) mapping template field -> column."""
    column_list = list(columns)
    mapping: dict[str, str] = {}
    for field in fields:
        match = match_field(field, column_list)
        if match is not None:
            mapping[field] = match
    return mapping


def is_gender_field(field: str) -> bool:
    lowered = field.lower()
    return any(marker in lowered for marker in GENDER_MARKERS)


def suggest_overrides(mapping: dict[str, str], columns: Iterable[str]) -> dict[str, str]:
    """Propose the 'other, which one?' column for mapped gender fields."""
    other_column = next(
        (c for c in columns if "otro" in c.lower() and "cuál" in c.lower()),
        None,
    )
    if other_column is None:
        return {}
    return {field: other_column for field in mapping if is_gender_field(field)}
