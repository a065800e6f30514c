from __future__ import annotations

import argparse
import logging
import os
import sys
from pathlib import Path

from dotenv import load_dotenv

from ..config.loader import DEFAULT_SETTINGS, ConfigError, ExportSettings, load_settings
from ..errors import ExcelGenerationError
from ..logging.init import log_summary, setup_logging
from ..models.worksheet_definition import WorksheetDefinition
from ..services.generator import generate, generate_from_objects, generate_many
from ..services.progress import ProgressTracker
from ..services.sources import InputError, load_rows
from ..services.type_inference import infer_columns

"""CLI entrypoint: export JSON / YAML / CSV / XLSX rows into one workbook.

Flow:
- Load .env, then settings (--config or $XLSX_EXPORT_CONFIG, defaults otherwise)
- Read every input file into mapping rows
- One input -> generate() (optional --header banner); several -> one sheet each
- Write the workbook and print a SUMMARY line
"""

EXIT_SUCCESS = 0
EXIT_FATAL = 1

CONFIG_ENV = "XLSX_EXPORT_CONFIG"


def _load_env_file(path: Path) -> None:
    """Load .env with python-dotenv without overriding existing variables."""
    if path.exists():
        load_dotenv(dotenv_path=path, override=False)


def _parse_args(argv: list[str]) -> argparse.Namespace:
    p = argparse.ArgumentParser(prog="xlsx-export", description="Export row data files to an .xlsx workbook")
    p.add_argument("inputs", nargs="+", type=Path, help="Input files (.json, .yml, .yaml, .csv, .xlsx)")
    p.add_argument("-o", "--output", type=Path, default=Path("export.xlsx"), help="Output workbook path")
    p.add_argument("--sheet", help="Worksheet name (single input only; default: file stem)")
    p.add_argument("--header", help="Banner text above the column labels (single input only)")
    p.add_argument("--config", type=Path, help="Settings YAML (default: $XLSX_EXPORT_CONFIG)")
    p.add_argument("--debug", action="store_true", help="Enable debug logging")
    return p.parse_args(argv)


def _resolve_settings(args: argparse.Namespace) -> ExportSettings:
    config_path = args.config
    if config_path is None and os.getenv(CONFIG_ENV):
        config_path = Path(os.environ[CONFIG_ENV])
    if config_path is None:
        return DEFAULT_SETTINGS
    return load_settings(config_path)


def main(argv: list[str] | None = None) -> int:
    logger = setup_logging()

    # None のときのみ sys.argv を読む (テストで [] を渡すケース)
    if argv is None:
        argv = sys.argv[1:]
    args = _parse_args(argv)
    _load_env_file(Path(".env"))

    if args.debug:
        for h in logger.handlers:
            h.setLevel(logging.DEBUG)
        logger.setLevel(logging.DEBUG)
        logger.debug("debug mode enabled")

    try:
        settings = _resolve_settings(args)
    except ConfigError as e:
        logger.error(f"config: {e}")
        return EXIT_FATAL

    if len(args.inputs) > 1 and (args.sheet or args.header):
        logger.warning("--sheet/--header apply to a single input only; ignored")

    sheets: dict[str, list[dict]] = {}
    try:
        with ProgressTracker(len(args.inputs)) as progress:
            for path in args.inputs:
                name = path.stem
                n = 2
                while name in sheets:
                    name = f"{path.stem}_{n}"
                    n += 1
                progress.start_sheet(name)
                sheets[name] = load_rows(path)
                progress.finish_sheet(len(sheets[name]))
                logger.info(f"loaded {path.name} rows={len(sheets[name])}")
    except InputError as e:
        logger.error(f"input: {e}")
        return EXIT_FATAL

    try:
        if len(sheets) == 1:
            (stem, rows), = sheets.items()
            sheet_name = args.sheet or stem
            if args.header is not None and rows:
                result = generate(sheet_name, infer_columns(rows, settings), rows, args.header, settings=settings)
            else:
                result = generate_from_objects(sheet_name, rows, settings=settings)
        else:
            definitions = [
                WorksheetDefinition(name, infer_columns(rows, settings) if rows else [], rows)
                for name, rows in sheets.items()
            ]
            result = generate_many(definitions, settings=settings)
    except ExcelGenerationError as e:
        logger.error(f"generation: {e}")
        return EXIT_FATAL

    output = args.output
    if output.suffix != result.file_extension:
        output = output.with_name(result.filename(output.stem))
    result.save(output)

    total_rows = sum(len(rows) for rows in sheets.values())
    log_summary(f"sheets={len(sheets)} rows={total_rows} bytes={len(result)} file={output}")
    return EXIT_SUCCESS


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
