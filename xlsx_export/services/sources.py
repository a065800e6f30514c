from __future__ import annotations

import json
from datetime import datetime
from pathlib import Path
from typing import Any

import pandas as pd
import yaml

"""Row sources: turn DataFrames and input files into dynamic-row records.

DataFrame cells are normalized so that openpyxl can store them directly:
NaN / NaT -> None, Timestamp -> datetime, numpy scalars -> Python scalars.
"""

__all__ = [
    "InputError",
    "SUPPORTED_SUFFIXES",
    "is_dataframe",
    "dataframe_records",
    "load_rows",
]

SUPPORTED_SUFFIXES = (".json", ".yml", ".yaml", ".csv", ".xlsx")


class InputError(Exception):
    """Raised when an input file is unsupported or cannot be read."""


def is_dataframe(obj: Any) -> bool:
    return isinstance(obj, pd.DataFrame)


def _normalize_value(value: Any) -> Any:
    if value is None:
        return None
    if pd.api.types.is_scalar(value) and pd.isna(value):
        return None
    if isinstance(value, pd.Timestamp):
        return value.to_pydatetime()
    if hasattr(value, "item") and not isinstance(value, (str, bytes, datetime)):
        # numpy scalar (int64, float64, bool_) -> Python scalar
        return value.item()
    return value


def dataframe_records(df: pd.DataFrame) -> list[dict[str, Any]]:
    """Convert ``df`` into a list of dicts keyed by the (stringified) column names."""
    columns = [str(c).strip() for c in df.columns]
    rows: list[dict[str, Any]] = []
    for raw in df.itertuples(index=False, name=None):
        rows.append({col: _normalize_value(val) for col, val in zip(columns, raw, strict=False)})
    return rows


def _ensure_records(data: Any, path: Path) -> list[dict[str, Any]]:
    if data is None:
        return []
    if isinstance(data, dict):
        # {"rows": [...]} のようなラッパーは不可、単一オブジェクトは 1 行として扱う
        data = [data]
    if not isinstance(data, list) or not all(isinstance(r, dict) for r in data):
        raise InputError(f"{path.name}: expected a list of objects")
    return data


def load_rows(path: Path) -> list[dict[str, Any]]:
    """Read ``path`` into dynamic rows according to its suffix.

    Raises:
        InputError: If the file is missing, has an unsupported suffix or
            cannot be parsed
    """
    if not path.exists():
        raise InputError(f"input file not found: {path}")
    suffix = path.suffix.lower()
    if suffix not in SUPPORTED_SUFFIXES:
        raise InputError(f"unsupported input type '{suffix}' (expected one of {', '.join(SUPPORTED_SUFFIXES)})")

    try:
        if suffix == ".json":
            return _ensure_records(json.loads(path.read_text(encoding="utf-8")), path)
        if suffix in (".yml", ".yaml"):
            return _ensure_records(yaml.safe_load(path.read_text(encoding="utf-8")), path)
        if suffix == ".csv":
            return dataframe_records(pd.read_csv(path))
        return dataframe_records(pd.read_excel(path))
    except (json.JSONDecodeError, yaml.YAMLError, ValueError, OSError) as e:
        raise InputError(f"{path.name}: {e}") from e

