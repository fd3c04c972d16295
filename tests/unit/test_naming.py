from __future__ import annotations

from filler.models.config_models import FillerConfig
from filler.models.record import Record
from filler.services.naming import assign_group_dirnames, group_dirname, record_filename, sanitize_token

CFG = FillerConfig(name_column="Nombre")


def _rec(**values) -> Record:
    return Record(index=4, row_number=5, values=values)


def test_accents_and_spaces():
    assert sanitize_token("José Pérez") == "Jose_Perez"


def test_whitespace_runs_collapse():
    assert sanitize_token("  María \t del   Mar ") == "Maria_del_Mar"


def test_unsafe_characters_are_stripped():
    assert sanitize_token("O'Brien / Ñuñez: (2)") == "OBrien__Nunez_2"


def test_dot_names_are_rejected():
    assert sanitize_token("..") == ""
    assert sanitize_token("¿?") == ""


def test_filename_pads_position():
    assert record_filename(_rec(Nombre="José Pérez"), 7, CFG) == "007_Jose_Perez.pdf"


def test_filename_falls_back_to_position():
    assert record_filename(_rec(), 12, CFG) == "012_Record_12.pdf"
    assert record_filename(_rec(Nombre="   "), 1, CFG) == "001_Record_1.pdf"
    assert record_filename(_rec(Nombre="¿?"), 2, CFG) == "002_Record_2.pdf"


def test_filename_is_truncated_to_255_bytes():
    name = record_filename(_rec(Nombre="a" * 400), 1, CFG)
    assert len(name.encode()) == 255
    assert name.startswith("001_aaa") and name.endswith(".pdf")


def test_custom_width_and_fallback():
    cfg = FillerConfig(name_column="Nombre", position_width=4, fallback_name="Registro {n}")
    assert record_filename(_rec(), 3, cfg) == "0003_Registro_3.pdf"


def test_group_dirname():
    assert group_dirname("Bogotá D.C.", CFG) == "Bogota_D.C."
    assert group_dirname("Medellín", CFG) == "Medellin"
    assert group_dirname("???", CFG) == "Unknown"


def test_group_dirnames_get_suffix_when_taken():
    groups = ["Bogotá D.C.", "Bogota D.C.", "bogota d.c.", "Cali", "???"]
    assert assign_group_dirnames(groups, CFG) == {
        "Bogotá D.C.": "Bogota_D.C.",
        "Bogota D.C.": "Bogota_D.C._2",
        "bogota d.c.": "bogota_d.c._3",
        "Cali": "Cali",
        "???": "Unknown",
    }


def test_group_dirnames_suffix_against_unknown_bucket():
    assert assign_group_dirnames(["Unknown", "¿?"], CFG) == {"Unknown": "Unknown", "¿?": "Unknown_2"}
