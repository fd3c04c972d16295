from __future__ import annotations

import zipfile
from pathlib import Path
from typing import Any, Protocol

"""Output sinks for generated documents.

The orchestrator only talks to the OutputSink protocol, so the same pipeline
writes either into a directory tree (``root/<group>/<file>.pdf``) or into a
single zip archive with the same layout. Sinks are context managers: the
archive is finalized and closed on exit.
"""

__all__ = [
    "SinkError",
    "OutputSink",
    "DirectorySink",
    "ZipSink",
]


class SinkError(Exception):
    """Raised when an output location cannot be prepared or written."""


class OutputSink(Protocol):
    @property
    def location(self) -> str: ...

    def prepare_group(self, group: str) -> None: ...

    def write(self, group: str, filename: str, data: bytes) -> str: ...

    def __enter__(self) -> OutputSink: ...

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None: ...


class DirectorySink:
    """Writes ``root/group/filename``; directories are created as needed."""

    def __init__(self, root: Path) -> None:
        self.root = Path(root)
        self._written: set[Path] = set()

    @property
    def location(self) -> str:
        return str(self.root)

    def prepare_group(self, group: str) -> None:
        try:
            (self.root / group).mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise SinkError(f"cannot create directory {self.root / group}: {e}") from e

    def write(self, group: str, filename: str, data: bytes) -> str:
        target = self.root / group / filename
        if target in self._written:
            raise SinkError(f"already written in this run: {target}")
        try:
            target.write_bytes(data)
        except OSError as e:
            raise SinkError(f"cannot write {target}: {e}") from e
        self._written.add(target)
        return str(target)

    def __enter__(self) -> DirectorySink:
        try:
            self.root.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise SinkError(f"cannot create output directory {self.root}: {e}") from e
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        return None


class ZipSink:
    """Writes every document as ``group/filename`` inside one zip archive."""

    def __init__(self, path: Path) -> None:
        self.path = Path(path)
        self._archive: zipfile.ZipFile | None = None
        self._names: set[str] = set()

    @property
    def location(self) -> str:
        return str(self.path)

    @property
    def names(self) -> list[str]:
        return sorted(self._names)

    def prepare_group(self, group: str) -> None:
        if self._archive is None:
            raise SinkError("archive is not open")

    def write(self, group: str, filename: str, data: bytes) -> str:
        if self._archive is None:
            raise SinkError("archive is not open")
        arcname = f"{group}/{filename}"
        if arcname in self._names:
            raise SinkError(f"duplicate archive entry {arcname}")
        self._archive.writestr(arcname, data)
        self._names.add(arcname)
        return arcname

    def __enter__(self) -> ZipSink:
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self._archive = zipfile.ZipFile(self.path, "w", compression=zipfile.ZIP_DEFLATED)
        except OSError as e:
            raise SinkError(f"cannot create archive {self.path}: {e}") from e
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        if self._archive is not None:
            self._archive.close()
            self._archive = None
