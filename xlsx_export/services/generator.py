from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping, Sequence
from typing import Any, Protocol, TypeVar

from openpyxl.utils.exceptions import IllegalCharacterError
from openpyxl.worksheet.worksheet import Worksheet

from ..config.loader import DEFAULT_SETTINGS, ExportSettings
from ..errors import ExcelGenerationError, ExtractionError, MissingKeyError
from ..excel.images import add_image
from ..excel.writer import (
    add_worksheet,
    autofit_columns,
    new_workbook,
    workbook_bytes,
    write_banner,
    write_cell,
    write_column_labels,
)
from ..models.cell_data import CellData
from ..models.column import Column, validate_columns
from ..models.excel_file import ExcelFile
from ..models.worksheet_definition import WorksheetDefinition
from .sources import dataframe_records, is_dataframe
from .type_inference import infer_columns, is_dynamic_row

"""Workbook generation: banner, column labels and row population.

Public entry points:
- generate(): one worksheet with explicit columns and an optional banner
- generate_many(): one worksheet per WorksheetDefinition
- generate_from_objects(): columns inferred from the rows (or a placeholder
  sheet when there are none)

Each call builds its own openpyxl Workbook and returns the serialized bytes;
any error aborts the whole document.
"""

__all__ = [
    "RowAccessor",
    "KeyLookupAccessor",
    "ExtractorAccessor",
    "select_accessor",
    "populate_rows",
    "generate",
    "generate_many",
    "generate_from_objects",
    "empty_file",
]

logger = logging.getLogger(__name__)

T = TypeVar("T")


class RowAccessor(Protocol):
    def __call__(self, row: Any, row_index: int, column: Column[Any]) -> CellData: ...


class ExtractorAccessor:
    """Resolve cells through each column's extractor."""

    def __call__(self, row: Any, row_index: int, column: Column[Any]) -> CellData:
        if column.extract is None:
            raise ExtractionError(column.header_text, row_index, "column has no extractor and the row is not a mapping")
        try:
            return column.extract(row)
        except ExcelGenerationError:
            raise
        except Exception as e:
            raise ExtractionError(column.header_text, row_index, f"{type(e).__name__}: {e}") from e


class KeyLookupAccessor:
    """Resolve cells of mapping rows by the entry under the column's lookup key.

    Extractors are not consulted; a bag value that is already a CellData is
    used as-is (images, links, number formats).
    """

    def __call__(self, row: Any, row_index: int, column: Column[Any]) -> CellData:
        key = column.lookup_key
        if not isinstance(row, Mapping) or key not in row:
            raise MissingKeyError(key, row_index)
        value = row[key]
        if isinstance(value, CellData):
            return value
        return CellData(value)


def select_accessor(rows: Sequence[Any]) -> RowAccessor:
    """Pick the accessor for a worksheet once, from its first row."""
    if rows and is_dynamic_row(rows[0]):
        return KeyLookupAccessor()
    return ExtractorAccessor()


def populate_rows(
    worksheet: Worksheet,
    columns: Sequence[Column[T]],
    rows: Sequence[T],
    start_row: int,
    start_column: int,
    settings: ExportSettings = DEFAULT_SETTINGS,
) -> int:
    """Write ``rows`` below the label row and return the number of rows written.

    Image cells are not written into the grid: the picture is anchored on the
    cell's row, one column past the last data column.
    """
    accessor = select_accessor(rows)
    image_column = start_column + len(columns)

    for i, row in enumerate(rows):
        target_row = start_row + i
        for c, column in enumerate(columns):
            data = accessor(row, i, column)

            if data.is_image:
                add_image(worksheet, data.value, target_row, image_column, settings)
                continue

            cell = worksheet.cell(row=target_row, column=start_column + c)
            try:
                write_cell(cell, data, settings)
            except (ValueError, TypeError, IllegalCharacterError) as e:
                raise ExcelGenerationError(
                    f"cannot write cell {cell.coordinate} of '{worksheet.title}' (column '{column.header_text}'): {e}"
                ) from e

    return len(rows)


def _build_sheet(
    worksheet: Worksheet,
    columns: Sequence[Column[T]],
    rows: Sequence[T],
    header: Any,
    settings: ExportSettings,
) -> None:
    validate_columns(columns)

    label_row = 1
    if header is not None:
        write_banner(worksheet, header, len(columns), 1, 1, settings)
        label_row = 2

    write_column_labels(worksheet, [c.header_text for c in columns], label_row, 1, settings)
    written = populate_rows(worksheet, columns, rows, label_row + 1, 1, settings)
    autofit_columns(worksheet, settings)

    logger.debug(f"sheet '{worksheet.title}' columns={len(columns)} rows={written} banner={header is not None}")


def _finish(workbook: Any, settings: ExportSettings) -> ExcelFile:
    result = ExcelFile(content=workbook_bytes(workbook), file_extension=settings.file_extension)
    logger.info(f"workbook generated sheets={len(workbook.worksheets)} bytes={len(result.content)}")
    return result


def generate(
    worksheet_name: str,
    columns: Sequence[Column[T]],
    rows: Sequence[T],
    header: Any = None,
    *,
    settings: ExportSettings | None = None,
) -> ExcelFile:
    """Generate a single-sheet workbook.

    Args:
        worksheet_name: Title of the worksheet
        columns: Column definitions in render order
        rows: Row objects; mapping rows resolve every column by key lookup
        header: Optional banner rendered with ``str()`` above the labels

    Raises:
        ExcelGenerationError: On any extraction, decode or write failure
    """
    settings = settings or DEFAULT_SETTINGS
    workbook = new_workbook()
    worksheet = add_worksheet(workbook, worksheet_name)
    _build_sheet(worksheet, columns, list(rows), header, settings)
    return _finish(workbook, settings)


def generate_many(
    definitions: Iterable[WorksheetDefinition[Any]],
    *,
    settings: ExportSettings | None = None,
) -> ExcelFile:
    """Generate one worksheet per definition, each starting at A1 without banner."""
    settings = settings or DEFAULT_SETTINGS
    workbook = new_workbook()
    for definition in definitions:
        worksheet = add_worksheet(workbook, definition.name)
        _build_sheet(worksheet, definition.columns, list(definition.rows), None, settings)

    if not workbook.worksheets:
        raise ExcelGenerationError("no worksheet definitions given")
    return _finish(workbook, settings)


def empty_file(settings: ExportSettings | None = None) -> ExcelFile:
    """Placeholder document: one sheet whose A1 holds the "no data" text."""
    settings = settings or DEFAULT_SETTINGS
    workbook = new_workbook()
    worksheet = add_worksheet(workbook, settings.placeholder_sheet)
    worksheet.cell(row=1, column=1, value=settings.placeholder_text)
    autofit_columns(worksheet, settings)
    return _finish(workbook, settings)


def generate_from_objects(
    worksheet_name: str,
    rows: Iterable[Any],
    *,
    settings: ExportSettings | None = None,
) -> ExcelFile:
    """Generate a workbook whose columns are inferred from the first row.

    ``rows`` may also be a pandas DataFrame; its records are used as mapping
    rows. An empty input yields ``empty_file()`` instead of an error.
    """
    settings = settings or DEFAULT_SETTINGS
    data = dataframe_records(rows) if is_dataframe(rows) else list(rows)
    if not data:
        logger.info(f"no rows for '{worksheet_name}' -> placeholder document")
        return empty_file(settings)

    columns = infer_columns(data, settings)
    return generate(worksheet_name, columns, data, None, settings=settings)
