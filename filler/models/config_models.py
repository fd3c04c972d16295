from __future__ import annotations

from dataclasses import dataclass, field

"""Config dataclasses for the spreadsheet -> PDF batch filler.

These are the typed settings handed to the pipeline at startup. The YAML
loader in filler/config/loader.py builds them; nothing below the CLI reads the
process environment.
"""

__all__ = [
    "FillerConfig",
    "DEFAULT_GROUP_COLUMN",
    "DEFAULT_NAME_COLUMN",
]

DEFAULT_GROUP_COLUMN = "Entidad Territorial"
DEFAULT_NAME_COLUMN = "Nombre(s) y Apellido(s) completo(s)"


@dataclass(frozen=True)
class FillerConfig:
    """Settings for one batch run.

    Mapping keys are template field names, values are spreadsheet column names.
    An empty ``field_mapping`` means "seed from the auto-matcher" at the CLI
    level; the orchestrator itself refuses to run without one.
    """
    group_column: str = DEFAULT_GROUP_COLUMN  # records are partitioned by this column
    name_column: str = DEFAULT_NAME_COLUMN  # sort key and output filename base
    unknown_group: str = "Unknown"  # bucket for missing/empty group values
    fallback_name: str = "Record_{n}"  # {n} = 1-based position within the group
    position_width: int = 3  # zero padding of the filename prefix
    date_marker: str = "fecha"  # template field names containing this are dates
    date_format: str = "%d/%m/%Y"
    multi_select_marker: str = "selección múltiple"  # matched against column headers
    multi_select_separator: str = ";"
    multi_select_joiner: str = "   "
    other_sentinel: str = "Otro"  # gender value that triggers the override column
    field_mapping: dict[str, str] = field(default_factory=dict)
    override_mapping: dict[str, str] = field(default_factory=dict)
    keep_na_strings: list[str] | None = None  # strings pandas must not turn into NaN
