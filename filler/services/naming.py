from __future__ import annotations

import logging
import re
import unicodedata
from collections.abc import Iterable

from ..models.config_models import FillerConfig
from ..models.record import Record

"""Output naming: group directory and per-record PDF filename.

Both go through ``sanitize_token``: accents decomposed and dropped, whitespace
runs collapsed to '_', anything outside [A-Za-z0-9._-] removed.
"""

__all__ = [
    "sanitize_token",
    "group_dirname",
    "assign_group_dirnames",
    "record_filename",
]

logger = logging.getLogger(__name__)

MAX_NAME_BYTES = 255
PDF_SUFFIX = ".pdf"

_WHITESPACE = re.compile(r"\s+")
_UNSAFE = re.compile(r"[^A-Za-z0-9._-]")


def strip_accents(text: str) -> str:
    decomposed = unicodedata.normalize("NFD", text)
    return "".join(c for c in decomposed if not unicodedata.combining(c))


def sanitize_token(text: str, limit: int = MAX_NAME_BYTES) -> str:
    """Filesystem-safe token; '' when nothing usable is left."""
    token = _WHITESPACE.sub("_", strip_accents(text).strip())
    token = _UNSAFE.sub("", token)[:limit]
    if token in (".", ".."):
        return ""
    return token


def group_dirname(group: str, config: FillerConfig) -> str:
    return sanitize_token(group) or sanitize_token(config.unknown_group) or "Unknown"


def assign_group_dirnames(groups: Iterable[str], config: FillerConfig) -> dict[str, str]:
    """Directory per group, in order; a name already taken gets a ``_2``, ``_3`` suffix.

    Names are compared case-insensitively so groups stay apart on
    case-insensitive filesystems too.
    """
    taken: set[str] = set()
    dirnames: dict[str, str] = {}
    for group in groups:
        base = group_dirname(group, config)
        name = base
        n = 1
        while name.lower() in taken:
            n += 1
            name = f"{base}_{n}"
        if name != base:
            logger.warning("group %r shares folder name %s with an earlier group, using %s", group, base, name)
        taken.add(name.lower())
        dirnames[group] = name
    return dirnames


def record_filename(record: Record, position: int, config: FillerConfig) -> str:
    """``{position:03d}_{name}.pdf`` for the ``position``-th (1-based) record of its group."""
    prefix = str(position).zfill(config.position_width)
    # room left for "{prefix}_" and ".pdf"
    limit = MAX_NAME_BYTES - len(prefix) - 1 - len(PDF_SUFFIX)
    base = sanitize_token(record.text(config.name_column), limit)
    if not base:
        base = sanitize_token(config.fallback_name.format(n=position), limit)
    return f"{prefix}_{base}{PDF_SUFFIX}"
