from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any

"""CellData model: the resolved, render-ready content of one worksheet cell.

An extractor turns a row into a CellData; the generator then either writes it
as a plain value or hands the bytes to the image embedder.
"""

__all__ = [
    "CellKind",
    "CellData",
]


class CellKind(Enum):
    """Kind of content stored in a cell.

    - PLAIN: strings, numbers, dates, booleans (anything openpyxl can store)
    - IMAGE: raw image bytes, embedded as a picture instead of a value
    """
    PLAIN = "plain"
    IMAGE = "image"


@dataclass(frozen=True)
class CellData:
    """Content and display metadata for one cell.

    ``value`` of None means "write nothing". For ``CellKind.IMAGE`` the value
    holds the encoded image bytes (PNG, JPEG, ...).
    """
    value: Any = None
    kind: CellKind = CellKind.PLAIN
    number_format: str | None = None  # Excel 表示書式 (例: "0.00", "yyyy-mm-dd")
    wrap_text: bool = False
    hyperlink: str | None = None

    @staticmethod
    def image(data: bytes | None) -> CellData:
        """Create an image cell from encoded image bytes."""
        return CellData(value=data, kind=CellKind.IMAGE)

    @property
    def is_image(self) -> bool:
        return self.kind is CellKind.IMAGE
