"""Domain models for the spreadsheet exporter.

This package contains the value objects passed between the type inference
engine, the generator and the openpyxl writing layer.
"""

from .cell_data import CellData, CellKind
from .column import Column, validate_columns
from .excel_file import XLSX_CONTENT_TYPE, ExcelFile
from .worksheet_definition import WorksheetDefinition

__all__ = [
    # Cell / column models
    "CellData",
    "CellKind",
    "Column",
    "validate_columns",
    # Sheet / document models
    "WorksheetDefinition",
    "ExcelFile",
    "XLSX_CONTENT_TYPE",
]
