"""AcroForm template handling."""

from .template import FieldNotFoundError, FieldTypeError, FilledDocument, PdfTemplate, TemplateError

__all__ = [
    "TemplateError",
    "FieldNotFoundError",
    "FieldTypeError",
    "PdfTemplate",
    "FilledDocument",
]
