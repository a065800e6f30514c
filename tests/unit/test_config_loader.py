from __future__ import annotations

from pathlib import Path

import pytest

from xlsx_export.config.loader import (
    DEFAULT_SETTINGS,
    ConfigError,
    ExportSettings,
    load_settings,
    settings_from_dict,
)


def test_default_settings_values():
    assert DEFAULT_SETTINGS.placeholder_text == "No data found"
    assert DEFAULT_SETTINGS.placeholder_sheet == "data"
    assert DEFAULT_SETTINGS.file_extension == ".xlsx"
    assert (DEFAULT_SETTINGS.image_max_width, DEFAULT_SETTINGS.image_max_height) == (100, 100)
    assert DEFAULT_SETTINGS.banner_font_size == 16


def test_load_settings_success(write_config: Path):
    settings = load_settings(write_config)
    assert settings.date_format == "%Y-%m-%d"
    assert settings.placeholder_text == "Nothing to export"
    assert (settings.image_max_width, settings.image_max_height) == (80, 40)
    assert settings.label_fill_color == "FF1F3864"
    assert settings.banner_font_size == 20
    # untouched keys keep defaults
    assert settings.hyperlink_color == DEFAULT_SETTINGS.hyperlink_color


def test_load_settings_missing_file(temp_workdir: Path):
    with pytest.raises(ConfigError) as e:
        load_settings(temp_workdir / "config" / "not_exists.yml")
    assert "config file not found" in str(e.value)


def test_load_settings_empty_file_gives_defaults(temp_workdir: Path):
    cfg = temp_workdir / "config" / "empty.yml"
    cfg.write_text("", encoding="utf-8")
    assert load_settings(cfg) == DEFAULT_SETTINGS


def test_load_settings_invalid_yaml(temp_workdir: Path):
    cfg = temp_workdir / "config" / "bad.yml"
    cfg.write_text("date_format: [unclosed\n", encoding="utf-8")
    with pytest.raises(ConfigError) as e:
        load_settings(cfg)
    assert "invalid yaml" in str(e.value)


def test_load_settings_extra_field(write_config: Path):
    write_config.write_text(write_config.read_text(encoding="utf-8") + "\nextra_field: 1\n", encoding="utf-8")
    with pytest.raises(ConfigError) as e:
        load_settings(write_config)
    assert "config validation failed" in str(e.value)


@pytest.mark.parametrize(
    "data",
    [
        {"image_max_width": 0},
        {"image_max_height": "100"},
        {"label_fill_color": "black"},
        {"file_extension": "xlsx"},
        {"placeholder_sheet": "x" * 32},
        {"banner_font_size": -1},
    ],
)
def test_settings_from_dict_rejects_invalid_values(data):
    with pytest.raises(ConfigError) as e:
        settings_from_dict(data)
    assert str(e.value).startswith("config validation failed")


def test_settings_from_dict_not_a_mapping():
    with pytest.raises(ConfigError):
        settings_from_dict(["date_format"])  # type: ignore[arg-type]


def test_settings_from_dict_overrides_base():
    base = ExportSettings(date_format="%d.%m.%Y")
    settings = settings_from_dict({"autofit_max_width": 40}, base)
    assert settings.date_format == "%d.%m.%Y"
    assert settings.autofit_max_width == 40
