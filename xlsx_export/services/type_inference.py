from __future__ import annotations

import dataclasses
import logging
import types
from collections.abc import Callable, Mapping, Sequence
from datetime import date, datetime, time, timedelta
from decimal import Decimal
from enum import Enum
from typing import Any, ClassVar, Union, get_args, get_origin, get_type_hints

from ..config.loader import DEFAULT_SETTINGS, ExportSettings
from ..models.cell_data import CellData
from ..models.column import Column

"""Type inference: derive Column definitions from the shape of the first row.

Two row shapes are supported:
- dynamic rows (any ``Mapping``, e.g. dict / pandas records): one column per
  key, resolved later by key lookup
- objects with named fields (dataclass, NamedTuple, annotated class or plain
  object): one column per public field, in declaration order

Each field is classified once into a FieldKind; FIELD_KIND_EXTRACTORS maps
the kind to an extractor factory, or to None when the field gets no column.
"""

__all__ = [
    "FieldKind",
    "FieldSpec",
    "FIELD_KIND_EXTRACTORS",
    "DATE_TYPES",
    "PRIMITIVE_TYPES",
    "is_dynamic_row",
    "read_field",
    "format_short_date",
    "classify_annotation",
    "classify_value",
    "row_fields",
    "infer_columns",
]

logger = logging.getLogger(__name__)

DATE_TYPES: tuple[type, ...] = (datetime, date)
# str/int 派生の Enum (StrEnum, IntEnum) もここに含まれる
PRIMITIVE_TYPES: tuple[type, ...] = (str, int, float, bool, Decimal, time, timedelta)

_UNKNOWN = object()  # no usable annotation -> classify from the first row's value


class FieldKind(Enum):
    """Closed set of field classifications used for column derivation."""
    DATE_TIME = "date_time"
    NULLABLE_DATE_TIME = "nullable_date_time"
    NULLABLE_PRIMITIVE = "nullable_primitive"
    NULLABLE_COMPOSITE = "nullable_composite"
    PRIMITIVE = "primitive"
    COMPOSITE = "composite"


@dataclasses.dataclass(frozen=True)
class FieldSpec:
    name: str
    kind: FieldKind


def is_dynamic_row(row: Any) -> bool:
    """Dynamic rows expose an arbitrary key set instead of fixed fields."""
    return isinstance(row, Mapping)


def read_field(row: Any, name: str) -> Any:
    """Read attribute ``name`` from ``row``; None if the row lacks it."""
    return getattr(row, name, None)


def format_short_date(value: date | None, date_format: str) -> str | None:
    if value is None:
        return None
    return value.strftime(date_format)


ExtractorFactory = Callable[[str, ExportSettings], Callable[[Any], CellData]]


def _date_extractor(name: str, settings: ExportSettings) -> Callable[[Any], CellData]:
    def extract(row: Any) -> CellData:
        return CellData(format_short_date(read_field(row, name), settings.date_format))
    return extract


def _raw_extractor(name: str, settings: ExportSettings) -> Callable[[Any], CellData]:
    def extract(row: Any) -> CellData:
        return CellData(read_field(row, name))
    return extract


# Composite fields (nullable or not) are not flattened: no column.
FIELD_KIND_EXTRACTORS: dict[FieldKind, ExtractorFactory | None] = {
    FieldKind.DATE_TIME: _date_extractor,
    FieldKind.NULLABLE_DATE_TIME: _date_extractor,
    FieldKind.NULLABLE_PRIMITIVE: _raw_extractor,
    FieldKind.PRIMITIVE: _raw_extractor,
    FieldKind.NULLABLE_COMPOSITE: None,
    FieldKind.COMPOSITE: None,
}

_NULLABLE = {
    FieldKind.DATE_TIME: FieldKind.NULLABLE_DATE_TIME,
    FieldKind.PRIMITIVE: FieldKind.NULLABLE_PRIMITIVE,
    FieldKind.COMPOSITE: FieldKind.NULLABLE_COMPOSITE,
}


def _classify_type(tp: Any) -> FieldKind:
    # list[int] 等の generic alias は composite
    if isinstance(tp, type) and get_origin(tp) is None:
        if issubclass(tp, DATE_TYPES):
            return FieldKind.DATE_TIME
        if issubclass(tp, PRIMITIVE_TYPES):
            return FieldKind.PRIMITIVE
    return FieldKind.COMPOSITE


def classify_value(value: Any) -> FieldKind:
    """Classify a field from a runtime value (used for unannotated fields)."""
    if value is None:
        return FieldKind.NULLABLE_PRIMITIVE
    return _classify_type(type(value))


def classify_annotation(annotation: Any) -> FieldKind | None:
    """Classify a resolved type annotation.

    Returns None when the annotation carries no usable type information
    (``Any``); the caller then falls back to ``classify_value``.

    ``Optional[X]`` / ``X | None`` map to the nullable variant of X's kind.
    Other unions count as primitive only when every member is primitive.
    """
    if annotation is Any or annotation is _UNKNOWN:
        return None
    if annotation is None or annotation is type(None):
        return FieldKind.NULLABLE_PRIMITIVE

    origin = get_origin(annotation)
    if origin is Union or origin is types.UnionType:
        args = get_args(annotation)
        members = [a for a in args if a is not type(None)]
        nullable = len(members) < len(args)
        if len(members) == 1:
            base = classify_annotation(members[0])
            if base is None:
                return None
        else:
            kinds = {_classify_type(m) for m in members}
            base = FieldKind.PRIMITIVE if kinds == {FieldKind.PRIMITIVE} else FieldKind.COMPOSITE
        if nullable:
            return _NULLABLE.get(base, base)
        return base

    return _classify_type(annotation)


def _type_hints(cls: type) -> dict[str, Any]:
    try:
        return get_type_hints(cls)
    except (NameError, TypeError):
        # 解決できない前方参照 -> 実行時の値で判定
        return {}


def row_fields(row: Any) -> list[tuple[str, Any]]:
    """Public fields of ``row`` in declaration order with their annotations.

    Fields without a resolvable annotation carry a sentinel so that they are
    classified from their runtime value.
    """
    cls = type(row)
    hints = _type_hints(cls)

    if dataclasses.is_dataclass(row):
        names = [f.name for f in dataclasses.fields(row)]
    elif isinstance(row, tuple) and hasattr(cls, "_fields"):
        names = list(cls._fields)
    else:
        names = [n for n, hint in hints.items() if get_origin(hint) is not ClassVar]
        for name in getattr(row, "__dict__", {}):
            if name not in names:
                names.append(name)

    return [(n, hints.get(n, _UNKNOWN)) for n in names if not n.startswith("_")]


def _field_specs(row: Any) -> list[FieldSpec]:
    specs: list[FieldSpec] = []
    for name, annotation in row_fields(row):
        kind = classify_annotation(annotation)
        if kind is None:
            kind = classify_value(read_field(row, name))
        specs.append(FieldSpec(name=name, kind=kind))
    return specs


def infer_columns(rows: Sequence[Any], settings: ExportSettings = DEFAULT_SETTINGS) -> list[Column[Any]]:
    """Derive columns from the first row of a non-empty sequence.

    Raises:
        ValueError: If ``rows`` is empty
    """
    if not rows:
        raise ValueError("cannot infer columns from an empty row sequence")

    first = rows[0]
    if is_dynamic_row(first):
        columns: list[Column[Any]] = [Column(str(key), key=key) for key in first]
        logger.debug(f"inferred {len(columns)} key-lookup columns from {type(first).__name__}")
        return columns

    columns = []
    for spec in _field_specs(first):
        factory = FIELD_KIND_EXTRACTORS[spec.kind]
        if factory is None:
            logger.debug(f"skip field '{spec.name}' kind={spec.kind.name}")
            continue
        columns.append(Column(spec.name, factory(spec.name, settings)))

    logger.debug(f"inferred {len(columns)} columns from {type(first).__name__}")
    return columns
