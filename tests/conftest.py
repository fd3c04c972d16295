# Shared pytest fixtures
from __future__ import annotations

from pathlib import Path
from typing import Any

import pandas as pd
import pytest
from pypdf import PdfWriter
from pypdf.generic import (
    ArrayObject,
    DictionaryObject,
    FloatObject,
    NameObject,
    NumberObject,
    TextStringObject,
)

from filler.logging.init import reset_logging

NAME_COL = "Nombre(s) y Apellido(s) completo(s)"
GROUP_COL = "Entidad Territorial"
DATE_COL = "Fecha de nacimiento"
GENDER_COL = "Género"
OTHER_GENDER_COL = "Si su respuesta fue Otro ¿Cuál es?"
MULTI_COL = "Jornadas de la IE (Selección múltiple)"
NOTE_COL = "Nota"

TEMPLATE_TEXT_FIELDS = [NAME_COL, GROUP_COL, DATE_COL, GENDER_COL, "Jornadas de la IE"]
TEMPLATE_CHECKBOX_FIELDS = ["Acepta"]

HEADER = [NAME_COL, GROUP_COL, DATE_COL, GENDER_COL, OTHER_GENDER_COL, MULTI_COL, NOTE_COL]
SAMPLE_ROWS: list[list[Any]] = [
    ["Zoe Ruiz", "Antioquia", 32874, "Femenino", None, "Mañana;Tarde", None],
    ["José Pérez", "Bogotá D.C.", 25569, "Otro", "No binario", "Mañana", None],
    ["ana gómez", "Antioquia", 1, "Femenino", None, "Tarde;Noche;Sabatina", "revisar"],
    ["Carlos Díaz", "Antioquia", 36526, "Masculino", None, None, None],
    ["Beatriz Luna", "Bogotá D.C.", 44197, "Femenino", None, "Única", None],
]


def make_excel(path: Path, rows: list[list[Any]], sheet_name: str = "Respuestas") -> Path:
    """Write ``rows`` (first row = headers) as the first sheet of an .xlsx file."""
    path.parent.mkdir(parents=True, exist_ok=True)
    with pd.ExcelWriter(path, engine="openpyxl") as writer:
        pd.DataFrame(rows).to_excel(writer, sheet_name=sheet_name, header=False, index=False)
    return path


def make_form_pdf(path: Path, text_fields: list[str], checkbox_fields: list[str] | None = None) -> Path:
    """Write a one-page PDF with an AcroForm holding the given fields."""
    writer = PdfWriter()
    page = writer.add_blank_page(width=612, height=792)
    font = DictionaryObject({
        NameObject("/Type"): NameObject("/Font"),
        NameObject("/Subtype"): NameObject("/Type1"),
        NameObject("/BaseFont"): NameObject("/Helvetica"),
        NameObject("/Encoding"): NameObject("/WinAnsiEncoding"),
    })
    font_ref = writer._add_object(font)

    annots = ArrayObject()
    form_fields = ArrayObject()
    all_fields = [(n, "/Tx") for n in text_fields] + [(n, "/Btn") for n in (checkbox_fields or [])]
    for i, (name, ftype) in enumerate(all_fields):
        top = 760 - 30 * i
        widget = DictionaryObject({
            NameObject("/Type"): NameObject("/Annot"),
            NameObject("/Subtype"): NameObject("/Widget"),
            NameObject("/FT"): NameObject(ftype),
            NameObject("/T"): TextStringObject(name),
            NameObject("/Rect"): ArrayObject([
                FloatObject(40), FloatObject(top - 20), FloatObject(560), FloatObject(top),
            ]),
            NameObject("/F"): NumberObject(4),
            NameObject("/DA"): TextStringObject("/Helv 10 Tf 0 g"),
        })
        if ftype == "/Btn":
            widget[NameObject("/V")] = NameObject("/Off")
            widget[NameObject("/AS")] = NameObject("/Off")
        ref = writer._add_object(widget)
        annots.append(ref)
        form_fields.append(ref)

    page[NameObject("/Annots")] = annots
    writer._root_object[NameObject("/AcroForm")] = DictionaryObject({
        NameObject("/Fields"): form_fields,
        NameObject("/DA"): TextStringObject("/Helv 0 Tf 0 g"),
        NameObject("/DR"): DictionaryObject({
            NameObject("/Font"): DictionaryObject({NameObject("/Helv"): font_ref}),
        }),
    })
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("wb") as f:
        writer.write(f)
    return path


@pytest.fixture(autouse=True)
def _fresh_logging():
    # handlers bind sys.stdout at setup; capsys swaps it per test
    reset_logging()
    yield
    reset_logging()


@pytest.fixture()
def temp_workdir(tmp_path: Path, monkeypatch) -> Path:
    (tmp_path / "config").mkdir()
    (tmp_path / "data").mkdir()
    (tmp_path / "logs").mkdir()
    monkeypatch.chdir(tmp_path)
    monkeypatch.delenv("FILLER_CONFIG", raising=False)
    monkeypatch.delenv("FILLER_LOGS_DIR", raising=False)
    return tmp_path


@pytest.fixture()
def sample_excel(temp_workdir: Path) -> Path:
    return make_excel(temp_workdir / "data" / "respuestas.xlsx", [HEADER, *SAMPLE_ROWS])


@pytest.fixture()
def sample_template(temp_workdir: Path) -> Path:
    return make_form_pdf(
        temp_workdir / "data" / "formulario.pdf", TEMPLATE_TEXT_FIELDS, TEMPLATE_CHECKBOX_FIELDS
    )


@pytest.fixture()
def sample_config_yaml() -> str:
    return """group_column: Entidad Territorial
name_column: Nombre(s) y Apellido(s) completo(s)
field_mapping:
  Nombre(s) y Apellido(s) completo(s): Nombre(s) y Apellido(s) completo(s)
  Entidad Territorial: Entidad Territorial
  Fecha de nacimiento: Fecha de nacimiento
  Género: Género
  Jornadas de la IE: Jornadas de la IE (Selección múltiple)
override_mapping:
  Género: Si su respuesta fue Otro ¿Cuál es?
"""


@pytest.fixture()
def write_config(temp_workdir: Path, sample_config_yaml: str) -> Path:
    cfg = temp_workdir / "config" / "filler.yml"
    cfg.write_text(sample_config_yaml, encoding="utf-8")
    return cfg
