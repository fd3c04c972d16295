from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime

from .error_record import ErrorRecord

"""Generation result model for one batch run.

Created fresh by the orchestrator, returned to the caller, never persisted.
A run with zero successes and some errors is still a completed run; the
counts are the outcome.
"""

__all__ = [
    "GenerationResult",
]


@dataclass(frozen=True)
class GenerationResult:
    """Aggregated outcome of a batch run."""
    success_count: int  # documents written
    error_records: list[ErrorRecord] = field(default_factory=list)  # in occurrence order
    total_records: int = 0  # records read from the spreadsheet
    total_groups: int = 0  # distinct groups seen
    location: str = ""  # sink location label (directory or archive path)
    start_time: datetime | None = None
    end_time: datetime | None = None
    elapsed_seconds: float = 0.0

    @property
    def errors(self) -> list[str]:
        """Ordered human-readable error lines."""
        return [r.to_message() for r in self.error_records]

    @property
    def has_errors(self) -> bool:
        return bool(self.error_records)
