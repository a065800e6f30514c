from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from typing import Generic, TypeVar

from .column import Column

"""WorksheetDefinition model for multi-sheet generation."""

__all__ = [
    "WorksheetDefinition",
]

T = TypeVar("T")


@dataclass
class WorksheetDefinition(Generic[T]):
    """Name, columns and rows of one worksheet.

    Consumed once by ``generate_many``; each definition becomes its own sheet
    laid out from A1 without a banner row.
    """
    name: str
    columns: Sequence[Column[T]]
    rows: Sequence[T]
