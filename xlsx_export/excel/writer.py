from __future__ import annotations

from collections.abc import Sequence
from io import BytesIO
from typing import Any

from openpyxl import Workbook
from openpyxl.cell.cell import Cell
from openpyxl.styles import Alignment, Font, PatternFill
from openpyxl.utils import get_column_letter
from openpyxl.worksheet.worksheet import Worksheet

from ..config.loader import DEFAULT_SETTINGS, ExportSettings
from ..errors import ExcelGenerationError
from ..models.cell_data import CellData

"""openpyxl writing helpers (cell write rule, label/banner rows, column sizing).

This is the only module besides ``images`` that touches openpyxl styles.
Rows and columns are 1-based as in openpyxl.
"""

__all__ = [
    "new_workbook",
    "add_worksheet",
    "write_cell",
    "write_column_labels",
    "write_banner",
    "autofit_columns",
    "workbook_bytes",
]


def new_workbook() -> Workbook:
    """Create an empty workbook (the default sheet is removed)."""
    wb = Workbook()
    wb.remove(wb.active)
    return wb


def add_worksheet(workbook: Workbook, name: str) -> Worksheet:
    try:
        return workbook.create_sheet(title=name)
    except ValueError as e:
        # openpyxl rejects titles containing : \ / ? * [ ]
        raise ExcelGenerationError(f"invalid worksheet name '{name}': {e}") from e


def _set_value(cell: Cell, value: Any) -> None:
    cell.value = value
    # "=..." の文字列は数式として解釈されるので文字列に戻す
    if isinstance(value, str) and cell.data_type == "f":
        cell.data_type = "s"


def write_cell(cell: Cell, data: CellData, settings: ExportSettings = DEFAULT_SETTINGS) -> bool:
    """Write a plain CellData into ``cell``.

    A None value is skipped entirely (the cell keeps no value and no style).

    Returns:
        True if a value was written, False for the None no-op
    """
    if data.value is None:
        return False

    _set_value(cell, data.value)

    if data.number_format and data.number_format.strip():
        cell.number_format = data.number_format

    if data.wrap_text:
        cell.alignment = Alignment(wrap_text=True)

    if data.hyperlink is not None:
        cell.hyperlink = data.hyperlink
        cell.font = Font(color=settings.hyperlink_color, underline="single")

    return True


def write_column_labels(
    worksheet: Worksheet,
    headers: Sequence[str],
    start_row: int,
    start_column: int,
    settings: ExportSettings = DEFAULT_SETTINGS,
) -> None:
    """Write the column-label row: dark solid fill, white bold text."""
    fill = PatternFill(fill_type="solid", start_color=settings.label_fill_color, end_color=settings.label_fill_color)
    font = Font(color=settings.label_font_color, bold=True)
    for offset, text in enumerate(headers):
        cell = worksheet.cell(row=start_row, column=start_column + offset)
        _set_value(cell, text)
        cell.fill = fill
        cell.font = font


def write_banner(
    worksheet: Worksheet,
    header: Any,
    column_count: int,
    start_row: int,
    start_column: int,
    settings: ExportSettings = DEFAULT_SETTINGS,
) -> None:
    """Write ``str(header)`` into one merged, bold, size-16 banner row."""
    cell = worksheet.cell(row=start_row, column=start_column)
    _set_value(cell, str(header))
    cell.fill = PatternFill(
        fill_type="solid", start_color=settings.banner_fill_color, end_color=settings.banner_fill_color
    )
    cell.font = Font(bold=True, size=settings.banner_font_size)

    end_column = start_column + max(column_count, 1) - 1
    if end_column > start_column:
        worksheet.merge_cells(
            start_row=start_row, start_column=start_column, end_row=start_row, end_column=end_column
        )


def _display_width(value: Any) -> int:
    if value is None:
        return 0
    if hasattr(value, "strftime"):
        # 日付セルは Excel 既定表示 (yyyy-mm-dd h:mm:ss) 程度の幅
        return 19 if hasattr(value, "hour") else 10
    return max((len(line) for line in str(value).splitlines()), default=0)


def autofit_columns(worksheet: Worksheet, settings: ExportSettings = DEFAULT_SETTINGS) -> None:
    """Approximate Excel's "auto-fit" from the rendered text length.

    Cells inside merged ranges (the banner) are ignored. Columns without any
    value keep their current width so image columns stay at the bound width.
    """
    merged: set[str] = set()
    for cell_range in worksheet.merged_cells.ranges:
        for row, col in cell_range.cells:
            merged.add(f"{get_column_letter(col)}{row}")

    widths: dict[str, int] = {}
    for row in worksheet.iter_rows():
        for cell in row:
            if cell.value is None or cell.coordinate in merged:
                continue
            letter = get_column_letter(cell.column)
            widths[letter] = max(widths.get(letter, 0), _display_width(cell.value))

    for letter, width in widths.items():
        if width == 0:
            continue
        worksheet.column_dimensions[letter].width = min(width + settings.autofit_padding, settings.autofit_max_width)


def workbook_bytes(workbook: Workbook) -> bytes:
    """Serialize ``workbook`` to xlsx bytes in memory."""
    buf = BytesIO()
    workbook.save(buf)
    return buf.getvalue()
