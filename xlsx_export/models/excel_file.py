from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

"""ExcelFile: the generated spreadsheet document.

Holds the serialized workbook bytes and the file extension to use when the
document is saved or sent as an attachment.
"""

__all__ = [
    "ExcelFile",
    "XLSX_CONTENT_TYPE",
]

XLSX_CONTENT_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"


@dataclass(frozen=True)
class ExcelFile:
    """Immutable result of one generation call."""
    content: bytes
    file_extension: str = ".xlsx"

    @property
    def content_type(self) -> str:
        """MIME type for a ``Content-Type`` header."""
        return XLSX_CONTENT_TYPE

    def filename(self, stem: str) -> str:
        """Attachment file name, e.g. ``report`` -> ``report.xlsx``."""
        return f"{stem}{self.file_extension}"

    def save(self, path: Path) -> Path:
        """Write the document bytes to ``path`` and return it."""
        path.write_bytes(self.content)
        return path

    def __len__(self) -> int:
        return len(self.content)
