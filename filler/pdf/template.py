from __future__ import annotations

import io
import logging
from pathlib import Path

from pypdf import PdfReader, PdfWriter

"""PDF template engine for AcroForm-based templates.

A PdfTemplate is parsed once from the template bytes. Each record gets its own
FilledDocument, a fresh clone of those bytes, so nothing written for one record
can leak into the next and the template itself is never modified.
"""

__all__ = [
    "TemplateError",
    "FieldNotFoundError",
    "FieldTypeError",
    "PdfTemplate",
    "FilledDocument",
]

logger = logging.getLogger(__name__)

TEXT_FIELD_TYPE = "/Tx"


class TemplateError(Exception):
    """Raised when the template cannot be read or has no form."""


class FieldNotFoundError(KeyError):
    """Raised when a field name does not exist in the template."""

    def __str__(self) -> str:  # KeyError would quote the message
        return str(self.args[0]) if self.args else ""


class FieldTypeError(TypeError):
    """Raised when a field exists but is not a text field."""


class PdfTemplate:
    """Fillable PDF template: field enumeration plus clone-and-fill."""

    def __init__(self, data: bytes, name: str = "template.pdf") -> None:
        self.name = name
        self._data = bytes(data)
        try:
            reader = PdfReader(io.BytesIO(self._data), strict=False)
            fields = reader.get_fields() or {}
        except Exception as e:
            raise TemplateError(f"cannot read PDF template {name}: {e}") from e
        # field name -> field type (/Tx, /Btn, /Ch, /Sig or '' when absent)
        self._field_types: dict[str, str] = {
            str(fname): str(f.get("/FT", "")) for fname, f in fields.items()
        }
        logger.debug("template %s: %d fields", name, len(self._field_types))

    @classmethod
    def from_path(cls, path: Path) -> PdfTemplate:
        try:
            data = Path(path).read_bytes()
        except OSError as e:
            raise TemplateError(f"cannot read PDF template {path}: {e}") from e
        return cls(data, name=Path(path).name)

    @classmethod
    def from_bytes(cls, data: bytes, name: str = "template.pdf") -> PdfTemplate:
        return cls(data, name=name)

    @property
    def data(self) -> bytes:
        return self._data

    @property
    def field_names(self) -> list[str]:
        """Fillable text field names, in document order."""
        return [n for n, t in self._field_types.items() if t == TEXT_FIELD_TYPE]

    @property
    def all_field_names(self) -> list[str]:
        return list(self._field_types)

    def check_text_field(self, name: str) -> None:
        """Raise unless ``name`` is a text field of this template."""
        if name not in self._field_types:
            raise FieldNotFoundError(f"No field named '{name}' in {self.name}")
        ftype = self._field_types[name]
        if ftype != TEXT_FIELD_TYPE:
            raise FieldTypeError(f"Field '{name}' is of type {ftype or 'unknown'}, expected text field")

    def new_document(self) -> FilledDocument:
        return FilledDocument(self)


class FilledDocument:
    """One record's copy of the template."""

    def __init__(self, template: PdfTemplate) -> None:
        self._template = template
        reader = PdfReader(io.BytesIO(template.data), strict=False)
        self._writer = PdfWriter(clone_from=reader)
        self.values: dict[str, str] = {}

    def set_text(self, name: str, value: str) -> None:
        """Set a text field's value.

        Raises:
            FieldNotFoundError: no such field in the template
            FieldTypeError: the field is not a text field
        """
        self._template.check_text_field(name)
        for page in self._writer.pages:
            if "/Annots" not in page:
                continue
            self._writer.update_page_form_field_values(page, {name: value})
        self.values[name] = value

    def to_bytes(self) -> bytes:
        buffer = io.BytesIO()
        self._writer.write(buffer)
        return buffer.getvalue()
