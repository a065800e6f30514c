from __future__ import annotations

import json
from dataclasses import fields
from pathlib import Path

import jsonschema
import yaml

from xlsx_export.config.loader import SCHEMA_PATH, ExportSettings

"""Settings schema contract: every ExportSettings field is a schema property and vice versa."""

REPO_ROOT = Path(__file__).resolve().parents[2]


def _schema() -> dict:
    return json.loads(SCHEMA_PATH.read_text(encoding="utf-8"))


def test_schema_is_valid_draft7():
    jsonschema.Draft7Validator.check_schema(_schema())


def test_schema_properties_match_settings_fields():
    schema = _schema()
    assert schema["additionalProperties"] is False
    assert set(schema["properties"]) == {f.name for f in fields(ExportSettings)}


def test_shipped_example_config_is_valid():
    data = yaml.safe_load((REPO_ROOT / "config" / "export.yml").read_text(encoding="utf-8"))
    jsonschema.validate(data, _schema())
    assert ExportSettings(**data) == ExportSettings()
