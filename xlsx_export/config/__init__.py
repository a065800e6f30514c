from .loader import DEFAULT_SETTINGS, ConfigError, ExportSettings, load_settings, settings_from_dict

__all__ = [
    "ConfigError",
    "DEFAULT_SETTINGS",
    "ExportSettings",
    "load_settings",
    "settings_from_dict",
]
