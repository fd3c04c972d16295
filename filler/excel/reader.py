from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any

import pandas as pd
from openpyxl.utils import get_column_letter

from ..models.record import Record

"""Spreadsheet reader.

Only the first sheet is used. Its first row is the header row; every later
row that is not entirely empty becomes one Record. Empty header cells fall back
to the spreadsheet column letter (A, B, ..., AA) and repeated headers get a
``_1``, ``_2`` suffix so every column stays addressable.

Cells are read through pandas (openpyxl engine) without dtype coercion, so
numbers stay numbers and date-formatted cells arrive as datetimes.
"""

__all__ = [
    "SpreadsheetReadError",
    "SheetHeaderError",
    "SheetData",
    "read_excel_file",
    "normalize_sheet",
    "read_records",
    "list_columns",
]


class SpreadsheetReadError(Exception):
    """Raised when the workbook cannot be opened or parsed."""


class SheetHeaderError(Exception):
    """Raised when the first sheet has no header row."""


@dataclass
class SheetData:
    sheet_name: str
    columns: list[str]
    records: list[Record]


def read_excel_file(path: Path, keep_na_strings: list[str] | None = None) -> tuple[list[str], pd.DataFrame]:
    """Read the workbook, returning all sheet names and the raw first sheet.

    Parameters
    ----------
    path: workbook path
    keep_na_strings: strings excluded from pandas' default NaN conversion (e.g. ['NA'])
    """
    import pandas._libs.parsers as parsers

    if keep_na_strings:
        # default NA strings minus the ones the caller wants to keep as text
        na_values = list(parsers.STR_NA_VALUES - set(keep_na_strings))
        keep_default_na = False
    else:
        na_values = None
        keep_default_na = True

    try:
        with pd.ExcelFile(path, engine="openpyxl") as xls:
            names = [str(n) for n in xls.sheet_names]
            if not names:
                raise SpreadsheetReadError(f"workbook has no sheets: {path}")
            df = xls.parse(
                xls.sheet_names[0],
                header=None,
                dtype=object,
                keep_default_na=keep_default_na,
                na_values=na_values,
            )
    except SpreadsheetReadError:
        raise
    except Exception as e:
        raise SpreadsheetReadError(f"cannot read spreadsheet {path}: {e}") from e
    return names, df


def _is_missing(val: Any) -> bool:
    if val is None:
        return True
    if isinstance(val, str):
        return val == ""
    try:
        return bool(pd.isna(val))
    except (TypeError, ValueError):
        return False


def _plain(val: Any) -> Any:
    """Unwrap pandas/numpy scalars into plain Python values."""
    if isinstance(val, pd.Timestamp):
        return val.to_pydatetime()
    if hasattr(val, "item") and not isinstance(val, (str, bytes)):
        return val.item()
    return val


def _header_text(val: Any, position: int) -> str:
    if _is_missing(val) or str(val).strip() == "":
        return get_column_letter(position + 1)
    val = _plain(val)
    if isinstance(val, float) and val.is_integer():
        return str(int(val))
    return str(val)


def header_columns(df: pd.DataFrame) -> list[str]:
    """Column names from the first row, with letter fallback and de-duplication."""
    if df.shape[0] < 1:
        raise SheetHeaderError("sheet has no header row")
    columns: list[str] = []
    seen: dict[str, int] = {}
    for pos, raw in enumerate(df.iloc[0].tolist()):
        name = _header_text(raw, pos)
        if name in seen:
            seen[name] += 1
            name = f"{name}_{seen[name]}"
        else:
            seen[name] = 0
        columns.append(name)
    return columns


def normalize_sheet(df: pd.DataFrame, sheet_name: str) -> SheetData:
    """Turn a raw header-less DataFrame into Records.

    Steps:
    1. Validate at least the header row exists
    2. Build column names from the first row
    3. Remaining rows become Records; entirely empty rows are skipped and
       empty cells are left out of the record
    """
    if df.shape[0] < 1:
        raise SheetHeaderError(f"sheet '{sheet_name}' has no header row")
    columns = header_columns(df)
    records: list[Record] = []
    for offset, raw in enumerate(df.iloc[1:].itertuples(index=False, name=None)):
        values: dict[str, Any] = {}
        for col, val in zip(columns, raw, strict=False):
            if _is_missing(val):
                continue
            values[col] = _plain(val)
        if not values:
            continue
        records.append(
            Record(
                index=len(records) + 1,
                row_number=offset + 2,  # header occupies sheet row 1
                values=values,
            )
        )
    return SheetData(sheet_name=sheet_name, columns=columns, records=records)


def read_records(path: Path, keep_na_strings: list[str] | None = None) -> SheetData:
    """Read the first sheet of ``path`` into Records."""
    names, df = read_excel_file(path, keep_na_strings=keep_na_strings)
    return normalize_sheet(df, names[0])


def list_columns(path: Path) -> list[str]:
    """Header names of the first sheet (used to seed the field mapping)."""
    names, df = read_excel_file(path)
    if df.shape[0] < 1:
        return []
    return header_columns(df)
