from __future__ import annotations

import math
from collections.abc import Iterator, Mapping
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Any

"""Record model: one spreadsheet data row keyed by header name."""

__all__ = [
    "Record",
    "cell_text",
]


def cell_text(value: Any) -> str:
    """Render a cell value as text.

    Integral floats lose their '.0' (pandas reads whole numbers in mixed
    columns as floats), booleans render as Excel shows them, and dates render
    in ISO form. None and NaN give ''.
    """
    if value is None:
        return ""
    if isinstance(value, bool):
        return "TRUE" if value else "FALSE"
    if isinstance(value, float):
        if math.isnan(value):
            return ""
        if value.is_integer():
            return str(int(value))
        return repr(value)
    if isinstance(value, datetime):
        if value.time() == datetime.min.time():
            return value.date().isoformat()
        return value.isoformat(sep=" ")
    if isinstance(value, date):
        return value.isoformat()
    return str(value)


@dataclass(frozen=True)
class Record(Mapping[str, Any]):
    """A single data row read from the first sheet.

    Behaves as a read-only mapping of column name -> cell value. Empty cells are
    absent rather than stored as None, mirroring how the sheet was read.
    """
    index: int  # 1-based position among the sheet's data records
    row_number: int  # sheet row number (header row = 1)
    values: dict[str, Any] = field(default_factory=dict)

    def __getitem__(self, key: str) -> Any:
        return self.values[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self.values)

    def __len__(self) -> int:
        return len(self.values)

    def text(self, column: str) -> str:
        """Cell value as stripped text, '' when missing."""
        return cell_text(self.values.get(column)).strip()
