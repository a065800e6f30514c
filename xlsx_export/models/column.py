from __future__ import annotations

from collections.abc import Callable, Sequence
from dataclasses import dataclass
from typing import Any, Generic, TypeVar

from ..errors import DuplicateColumnError
from .cell_data import CellData

"""Column definition model.

A Column pairs the label shown in the column-label row with the function that
turns one row into a CellData. On dynamic (mapping) rows the extractor is not
used: the cell is the entry stored under the column's lookup key.
"""

__all__ = [
    "Column",
    "Extractor",
    "validate_columns",
]

T = TypeVar("T")

Extractor = Callable[[T], CellData]


@dataclass(frozen=True)
class Column(Generic[T]):
    """One column of a worksheet, in left-to-right render order.

    ``key`` is the entry looked up on mapping rows; it defaults to
    ``header_text`` and only differs for non-string mapping keys.
    """
    header_text: str
    extract: Extractor[T] | None = None
    key: Any = None

    @property
    def lookup_key(self) -> Any:
        return self.header_text if self.key is None else self.key


def validate_columns(columns: Sequence[Column[T]]) -> None:
    """Ensure header texts are unique within one worksheet.

    Raises:
        DuplicateColumnError: If two columns share the same header text
    """
    seen: set[str] = set()
    for column in columns:
        if column.header_text in seen:
            raise DuplicateColumnError(f"duplicate column header: '{column.header_text}'")
        seen.add(column.header_text)
