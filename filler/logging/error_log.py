from __future__ import annotations

from collections.abc import Iterable
from datetime import UTC, datetime
from pathlib import Path

from ..models.error_record import ErrorRecord

"""JSON Lines error log for one batch run.

Errors are collected while the run is in progress and written together at the
end, one ErrorRecord per line. The file name is stamped with the run start
(UTC), ``errors-YYYYMMDD-HHMMSS.log``; a run without errors leaves no file.
"""

__all__ = [
    "ErrorLogBuffer",
    "DEFAULT_LOGS_DIR",
]

DEFAULT_LOGS_DIR = Path("./logs")
TIMESTAMP_FMT = "%Y%m%d-%H%M%S"


class ErrorLogBuffer:
    """Collects ErrorRecords and appends them to the run's log file on flush."""

    def __init__(self, logs_dir: Path | None = None, started: datetime | None = None) -> None:
        self.logs_dir = Path(logs_dir) if logs_dir is not None else DEFAULT_LOGS_DIR
        stamp = (started or datetime.now(UTC)).strftime(TIMESTAMP_FMT)
        self.file_path = self.logs_dir / f"errors-{stamp}.log"
        self._pending: list[ErrorRecord] = []

    def append(self, record: ErrorRecord) -> None:
        self._pending.append(record)

    def extend(self, records: Iterable[ErrorRecord]) -> None:
        self._pending.extend(records)

    def __len__(self) -> int:
        return len(self._pending)

    def flush(self) -> Path | None:
        """Write pending records; returns the file path, or None if there was nothing to write."""
        if not self._pending:
            return None
        self.file_path.parent.mkdir(parents=True, exist_ok=True)
        with self.file_path.open("a", encoding="utf-8") as f:
            f.writelines(record.to_json_line() + "\n" for record in self._pending)
        self._pending.clear()
        return self.file_path
