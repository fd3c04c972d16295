from __future__ import annotations

import sys
from typing import Any

from tqdm import tqdm

"""Record progress display (tqdm, interactive terminals only).

One bar counts documents across every group; its label names the group being
filled and its postfix keeps running ok/failed counts. When stdout is not a
terminal (CI, pipes, captured test output) no bar is created and every call
is a no-op apart from the counters.
"""

__all__ = [
    "ProgressTracker",
    "is_tty_enabled",
]


def is_tty_enabled() -> bool:
    """True when stdout is an interactive terminal."""
    return sys.stdout.isatty()


class ProgressTracker:
    """Counts finished records and mirrors them on a tqdm bar when one is shown."""

    def __init__(self, total_records: int, *, description: str = "Generating PDFs") -> None:
        self.total_records = total_records
        self.description = description
        self.current_group: str | None = None
        self.ok = 0
        self.failed = 0
        self.pbar: Any = None
        if is_tty_enabled():
            self.pbar = tqdm(
                total=total_records,
                desc=description,
                unit="pdf",
                ncols=80,
                ascii=True,
            )

    @property
    def enabled(self) -> bool:
        return self.pbar is not None

    def start_group(self, group: str) -> None:
        self.current_group = group
        if self.pbar is not None:
            self.pbar.set_description(f"{self.description} ({group})")

    def finish_record(self, success: bool = True) -> None:
        if success:
            self.ok += 1
        else:
            self.failed += 1
        if self.pbar is not None:
            self.pbar.update(1)
            self.pbar.set_postfix(ok=self.ok, failed=self.failed, refresh=False)

    def skip(self, count: int) -> None:
        """Count the records of a group that was never started as failed."""
        self.failed += count
        if self.pbar is not None and count:
            self.pbar.update(count)

    def close(self) -> None:
        if self.pbar is not None:
            self.pbar.close()
            self.pbar = None

    def __enter__(self) -> ProgressTracker:
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        self.close()
