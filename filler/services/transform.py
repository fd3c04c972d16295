from __future__ import annotations

import logging
from datetime import date, datetime

import pandas as pd

from ..models.config_models import FillerConfig
from ..models.record import Record, cell_text
from .matcher import is_gender_field

"""Per-field value transformer.

Turns one mapped cell into the text written to the template field:

- missing cell -> None (the field keeps its template default)
- gender field holding the "Otro" sentinel -> value of the override column
- template field named like a date ("fecha") holding a serial -> dd/mm/yyyy
- column header marked "selección múltiple" -> ';' separators widened to
  three spaces so options stay apart in fixed-width fields
"""

__all__ = [
    "SERIAL_EPOCH",
    "serial_to_date",
    "format_date_value",
    "flatten_multi_select",
    "transform_value",
]

logger = logging.getLogger(__name__)

# Serial 1 is 1899-12-31 and serial 25569 is 1970-01-01.
SERIAL_EPOCH = "1899-12-30"


def serial_to_date(serial: float) -> date:
    """Convert a spreadsheet day serial to a calendar date (fraction dropped)."""
    stamp = pd.to_datetime(serial, unit="D", origin=pd.Timestamp(SERIAL_EPOCH))
    return stamp.date()


def format_date_value(value: object, text: str, date_format: str) -> str:
    """Format a date-field value; non-numeric text is returned unchanged."""
    if isinstance(value, (datetime, date)):
        return value.strftime(date_format)
    try:
        serial = float(text)
    except ValueError:
        logger.debug("not a date serial, keeping text: %r", text)
        return text
    try:
        return serial_to_date(serial).strftime(date_format)
    except (ValueError, OverflowError, pd.errors.OutOfBoundsDatetime) as e:
        logger.debug("date serial %r out of range, keeping text: %s", text, e)
        return text


def flatten_multi_select(text: str, separator: str = ";", joiner: str = "   ") -> str:
    return text.replace(separator, joiner)


def transform_value(field: str, column: str, record: Record, config: FillerConfig) -> str | None:
    """Final text for ``field`` from ``record[column]``, or None to skip."""
    value = record.get(column)
    if value is None:
        return None
    text = cell_text(value)

    if text == config.other_sentinel and is_gender_field(field):
        other_column = config.override_mapping.get(field)
        if other_column:
            other = record.text(other_column)
            if other:
                value = record.get(other_column)
                text = cell_text(value)

    if config.date_marker.lower() in field.lower():
        text = format_date_value(value, text, config.date_format)

    if config.multi_select_marker.lower() in column.lower():
        text = flatten_multi_select(text, config.multi_select_separator, config.multi_select_joiner)

    return text
