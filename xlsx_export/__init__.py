"""xlsx-export: turn row collections into .xlsx workbooks.

Typical use::

    from xlsx_export import generate_from_objects

    document = generate_from_objects("items", rows)
    document.save(Path(document.filename("items")))
"""

from .config.loader import DEFAULT_SETTINGS, ConfigError, ExportSettings, load_settings
from .errors import (
    DuplicateColumnError,
    ExcelGenerationError,
    ExtractionError,
    ImageDecodeError,
    MissingKeyError,
)
from .models import CellData, CellKind, Column, ExcelFile, WorksheetDefinition
from .services.generator import generate, generate_from_objects, generate_many
from .services.type_inference import FieldKind, infer_columns

__version__ = "0.1.0"

__all__ = [
    # Generation
    "generate",
    "generate_many",
    "generate_from_objects",
    "infer_columns",
    "FieldKind",
    # Models
    "CellData",
    "CellKind",
    "Column",
    "WorksheetDefinition",
    "ExcelFile",
    # Settings
    "ExportSettings",
    "DEFAULT_SETTINGS",
    "load_settings",
    "ConfigError",
    # Errors
    "ExcelGenerationError",
    "ImageDecodeError",
    "MissingKeyError",
    "ExtractionError",
    "DuplicateColumnError",
]
