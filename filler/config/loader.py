from __future__ import annotations

import json
from dataclasses import fields
from pathlib import Path
from typing import Any

import jsonschema
import yaml
from jsonschema.exceptions import ValidationError

from ..models.config_models import FillerConfig

"""Config loader.

Responsibilities:
- Load the YAML config file (config/filler.yml by default)
- Validate it against the bundled JSON schema (config_schema.json)
- Fill unspecified keys with FillerConfig defaults
- Load / save the editable field mapping file
"""

__all__ = [
    "ConfigurationError",
    "ConfigError",
    "SCHEMA_PATH",
    "DEFAULT_CONFIG_PATH",
    "load_config",
    "config_from_dict",
    "load_mapping",
    "save_mapping",
]

SCHEMA_PATH = Path(__file__).with_name("config_schema.json")
DEFAULT_CONFIG_PATH = Path("config/filler.yml")


class ConfigurationError(Exception):
    """Missing or invalid configuration; nothing was processed."""


class ConfigError(ConfigurationError):
    """The config file itself could not be read or validated."""


def _validate_config_schema(data: dict[str, Any]) -> None:
    """Validate config data against the bundled JSON schema.

    Raises:
        ConfigError: schema file missing/invalid or data violates the schema
    """
    if not SCHEMA_PATH.exists():
        raise ConfigError(f"config schema not found: {SCHEMA_PATH}")
    try:
        schema = json.loads(SCHEMA_PATH.read_text(encoding="utf-8"))
        jsonschema.validate(data, schema)
    except json.JSONDecodeError as e:
        raise ConfigError(f"invalid schema file: {e}") from e
    except ValidationError as e:
        raise ConfigError(f"config validation failed: {e.message}") from e


def _read_yaml(path: Path) -> dict[str, Any]:
    if not path.exists():
        raise ConfigError(f"config file not found: {path}")
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as e:
        raise ConfigError(f"invalid yaml: {e}") from e
    if not isinstance(data, dict):
        raise ConfigError(f"config root must be a mapping: {path}")
    return data


def config_from_dict(data: dict[str, Any]) -> FillerConfig:
    """Validate ``data`` and build a FillerConfig (unknown keys rejected)."""
    _validate_config_schema(data)
    known = {f.name for f in fields(FillerConfig)}
    kwargs = {k: v for k, v in data.items() if k in known}
    for key in ("field_mapping", "override_mapping"):
        if key in kwargs:
            kwargs[key] = {str(k): str(v) for k, v in kwargs[key].items()}
    return FillerConfig(**kwargs)


def load_config(path: Path) -> FillerConfig:
    return config_from_dict(_read_yaml(path))


def load_mapping(path: Path) -> tuple[dict[str, str], dict[str, str]]:
    """Read a mapping file written by ``save_mapping``.

    Returns:
        (field_mapping, override_mapping)
    """
    data = _read_yaml(path)
    subset = {k: data[k] for k in ("field_mapping", "override_mapping") if k in data}
    if set(data) - set(subset):
        raise ConfigError(f"unexpected keys in mapping file {path}: {sorted(set(data) - set(subset))}")
    cfg = config_from_dict(subset)
    return dict(cfg.field_mapping), dict(cfg.override_mapping)


def save_mapping(path: Path, field_mapping: dict[str, str], override_mapping: dict[str, str]) -> Path:
    """Write an editable YAML mapping file (template field -> column)."""
    path.parent.mkdir(parents=True, exist_ok=True)
    payload = {
        "field_mapping": dict(field_mapping),
        "override_mapping": dict(override_mapping),
    }
    path.write_text(
        yaml.safe_dump(payload, allow_unicode=True, sort_keys=False),
        encoding="utf-8",
    )
    return path
