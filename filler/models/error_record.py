from __future__ import annotations

import json
from dataclasses import asdict, dataclass
from datetime import UTC, datetime

"""ErrorRecord model for the per-run error list and JSON Lines log.

Every failure the orchestrator accumulates is an ErrorRecord. It renders two
ways: the human-readable line returned to the caller (``to_message``) and a
fixed-schema JSON line for the error log file (``to_json_line``).

row is the record's 1-based position among the sheet's data records, or -1
for group-level errors where no single record is involved.
"""

__all__ = [
    "ErrorRecord",
    "RECORD_FIELD_ERROR",
    "RECORD_PROCESSING_ERROR",
    "GROUP_PROCESSING_ERROR",
]

RECORD_FIELD_ERROR = "RECORD_FIELD_ERROR"
RECORD_PROCESSING_ERROR = "RECORD_PROCESSING_ERROR"
GROUP_PROCESSING_ERROR = "GROUP_PROCESSING_ERROR"


@dataclass(frozen=True)
class ErrorRecord:
    """Structured error record.

    Attributes:
        timestamp: ISO8601 UTC timestamp with 'Z' suffix
        group: Group (grouping column value) being processed
        row: 1-based record number, -1 for group-level errors
        field: Template field name for field errors, '' otherwise
        error_type: Error classification in UPPER_SNAKE_CASE format
        message: Underlying error message
    """
    timestamp: str  # ISO8601 UTC
    group: str
    row: int
    field: str
    error_type: str  # UPPER_SNAKE
    message: str

    @staticmethod
    def create(group: str, row: int, error_type: str, message: str, field: str = "") -> ErrorRecord:
        """Create a new ErrorRecord with current UTC timestamp."""
        ts = datetime.now(UTC).isoformat().replace("+00:00", "Z")
        return ErrorRecord(
            timestamp=ts,
            group=group,
            row=row,
            field=field,
            error_type=error_type,
            message=message,
        )

    @classmethod
    def field_error(cls, group: str, row: int, field: str, exc: BaseException) -> ErrorRecord:
        return cls.create(group, row, RECORD_FIELD_ERROR, str(exc), field=field)

    @classmethod
    def record_error(cls, group: str, row: int, exc: BaseException) -> ErrorRecord:
        return cls.create(group, row, RECORD_PROCESSING_ERROR, str(exc))

    @classmethod
    def group_error(cls, group: str, exc: BaseException) -> ErrorRecord:
        return cls.create(group, -1, GROUP_PROCESSING_ERROR, str(exc))

    def to_message(self) -> str:
        """Human-readable line shown in the results list."""
        if self.error_type == RECORD_FIELD_ERROR:
            return f"Row {self.row}: Error setting field {self.field}: {self.message}"
        if self.error_type == GROUP_PROCESSING_ERROR:
            return f"Error processing {self.group}: {self.message}"
        return f"Row {self.row}: Error processing - {self.message}"

    def to_json_line(self) -> str:
        """Serialize to one JSON line with exactly the dataclass keys."""
        return json.dumps(asdict(self), ensure_ascii=False)
