from __future__ import annotations

from datetime import date, datetime

import pytest

from filler.models.config_models import FillerConfig
from filler.models.record import Record, cell_text
from filler.services.transform import (
    flatten_multi_select,
    format_date_value,
    serial_to_date,
    transform_value,
)

OTHER_COL = "Si su respuesta fue Otro ¿Cuál es?"


def _rec(**values) -> Record:
    return Record(index=1, row_number=2, values=values)


@pytest.fixture()
def config() -> FillerConfig:
    return FillerConfig(
        field_mapping={"Género": "Género"},
        override_mapping={"Género": OTHER_COL},
    )


@pytest.mark.parametrize(
    "serial, expected",
    [
        (1, date(1899, 12, 31)),
        (25569, date(1970, 1, 1)),
        (32874, date(1990, 1, 1)),
        (44197.75, date(2021, 1, 1)),
    ],
)
def test_serial_to_date(serial, expected):
    assert serial_to_date(serial) == expected


def test_date_field_serial_is_formatted(config):
    assert transform_value("Fecha de nacimiento", "Nacimiento", _rec(Nacimiento=1), config) == "31/12/1899"
    assert transform_value("FECHA de ingreso", "Ingreso", _rec(Ingreso="25569"), config) == "01/01/1970"


def test_date_field_non_numeric_text_passes_through(config):
    record = _rec(Nacimiento="15 de marzo")
    assert transform_value("Fecha de nacimiento", "Nacimiento", record, config) == "15 de marzo"


def test_date_field_datetime_cell_is_formatted():
    assert format_date_value(datetime(2001, 2, 3), "2001-02-03", "%d/%m/%Y") == "03/02/2001"


def test_date_serial_out_of_range_passes_through():
    assert format_date_value("1e12", "1e12", "%d/%m/%Y") == "1e12"


def test_non_date_field_keeps_number(config):
    assert transform_value("Número de docentes", "Docentes", _rec(Docentes=25569), config) == "25569"


def test_missing_value_is_skipped(config):
    assert transform_value("Nombre", "Nombre", _rec(), config) is None


def test_integral_float_renders_without_decimal(config):
    assert transform_value("Cédula", "Cédula", _rec(**{"Cédula": 1035123456.0}), config) == "1035123456"


def test_gender_other_uses_override_column(config):
    record = _rec(**{"Género": "Otro", OTHER_COL: "No binario"})
    assert transform_value("Género", "Género", record, config) == "No binario"


def test_gender_other_without_override_value_keeps_sentinel(config):
    record = _rec(**{"Género": "Otro", OTHER_COL: "  "})
    assert transform_value("Género", "Género", record, config) == "Otro"


def test_gender_other_without_override_mapping_keeps_sentinel():
    record = _rec(**{"Género": "Otro", OTHER_COL: "No binario"})
    assert transform_value("Género", "Género", record, FillerConfig()) == "Otro"


def test_override_only_for_gender_fields(config):
    cfg = FillerConfig(override_mapping={"Cargo": OTHER_COL})
    record = _rec(Cargo="Otro", **{OTHER_COL: "Rector"})
    assert transform_value("Cargo", "Cargo", record, cfg) == "Otro"


def test_multi_select_column_is_flattened(config):
    record = _rec(**{"Jornadas (Selección múltiple)": "A;B;C"})
    assert transform_value("Jornadas", "Jornadas (Selección múltiple)", record, config) == "A   B   C"


def test_multi_select_marker_is_matched_on_column_not_field(config):
    record = _rec(Jornadas="A;B")
    assert transform_value("Jornadas (Selección múltiple)", "Jornadas", record, config) == "A;B"


def test_flatten_multi_select():
    assert flatten_multi_select("A;B;C") == "A   B   C"
    assert flatten_multi_select("solo") == "solo"


def test_cell_text():
    assert cell_text(None) == ""
    assert cell_text(float("nan")) == ""
    assert cell_text(3.0) == "3"
    assert cell_text(3.25) == "3.25"
    assert cell_text(True) == "TRUE"
    assert cell_text(datetime(2020, 5, 1)) == "2020-05-01"
