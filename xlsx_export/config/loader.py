from __future__ import annotations

import json
from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Any

import jsonschema
import yaml
from jsonschema.exceptions import ValidationError

"""Export settings loader.

Responsibilities:
- Load YAML settings (e.g. config/export.yml)
- Validate keys and value types against the packaged JSON schema
- Merge the validated values onto DEFAULT_SETTINGS

Colors are ARGB (or RGB) hex strings as openpyxl expects them.
"""

__all__ = [
    "ConfigError",
    "ExportSettings",
    "DEFAULT_SETTINGS",
    "SCHEMA_PATH",
    "load_settings",
    "settings_from_dict",
]

SCHEMA_PATH = Path(__file__).with_name("export_schema.json")


class ConfigError(Exception):
    pass


@dataclass(frozen=True)
class ExportSettings:
    """Layout and formatting constants used during generation."""
    date_format: str = "%m/%d/%Y"  # short date (例: 01/01/2024)
    file_extension: str = ".xlsx"
    placeholder_text: str = "No data found"
    placeholder_sheet: str = "data"
    image_max_width: int = 100  # bound box (列幅/行高と同じ単位)
    image_max_height: int = 100
    label_fill_color: str = "FF000000"
    label_font_color: str = "FFFFFFFF"
    banner_fill_color: str = "FFFFFFFF"
    banner_font_size: float = 16
    hyperlink_color: str = "FF0F6CC7"
    autofit_max_width: float = 60
    autofit_padding: float = 2


DEFAULT_SETTINGS = ExportSettings()


def _validate_settings_schema(data: dict[str, Any]) -> None:
    """Validate settings data against the JSON schema.

    Raises:
        ConfigError: If the schema file is missing or unreadable, or the data
            fails validation (unknown keys, wrong types, malformed colors).
    """
    if not SCHEMA_PATH.exists():
        raise ConfigError(f"settings schema not found: {SCHEMA_PATH}")

    try:
        schema = json.loads(SCHEMA_PATH.read_text(encoding="utf-8"))
        jsonschema.validate(data, schema)
    except json.JSONDecodeError as e:
        raise ConfigError(f"invalid schema file: {e}") from e
    except ValidationError as e:
        raise ConfigError(f"config validation failed: {e.message}") from e


def settings_from_dict(data: dict[str, Any], base: ExportSettings = DEFAULT_SETTINGS) -> ExportSettings:
    """Validate ``data`` and return ``base`` with the given keys overridden."""
    if not isinstance(data, dict):
        raise ConfigError(f"config validation failed: expected a mapping, got {type(data).__name__}")
    _validate_settings_schema(data)
    known = {f.name for f in fields(ExportSettings)}
    return replace(base, **{k: v for k, v in data.items() if k in known})


def load_settings(path: Path) -> ExportSettings:
    if not path.exists():
        raise ConfigError(f"config file not found: {path}")
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as e:
        raise ConfigError(f"invalid yaml: {e}") from e

    return settings_from_dict(data)
