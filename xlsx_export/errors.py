from __future__ import annotations

"""Exception hierarchy for spreadsheet generation.

Every failure aborts the workbook that is being built; there is no partial
output and no retry. Callers catch ``ExcelGenerationError`` to handle all of
them at once.
"""

__all__ = [
    "ExcelGenerationError",
    "ImageDecodeError",
    "MissingKeyError",
    "ExtractionError",
    "DuplicateColumnError",
]


class ExcelGenerationError(Exception):
    """Base exception for errors raised while generating a workbook."""


class ImageDecodeError(ExcelGenerationError):
    """Raised when image bytes cannot be decoded by Pillow."""


class MissingKeyError(ExcelGenerationError, KeyError):
    """Raised when a dynamic row has no entry for a column's header text."""

    def __init__(self, key: str, row_index: int) -> None:
        self.key = key
        self.row_index = row_index
        super().__init__(f"row {row_index} has no key '{key}'")

    def __str__(self) -> str:
        # KeyError.__str__ は repr() を返すので上書き
        return str(self.args[0])


class ExtractionError(ExcelGenerationError):
    """Raised when a column extractor fails for a row."""

    def __init__(self, header_text: str, row_index: int, message: str) -> None:
        self.header_text = header_text
        self.row_index = row_index
        super().__init__(f"column '{header_text}' row {row_index}: {message}")


class DuplicateColumnError(ExcelGenerationError):
    """Raised when two columns of one worksheet share the same header text."""
