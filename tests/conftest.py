# Shared pytest fixtures
from __future__ import annotations
import os
import tempfile
from collections.abc import Callable
from io import BytesIO
from pathlib import Path

import pytest
from openpyxl import Workbook, load_workbook
from PIL import Image as PILImage

from xlsx_export.logging.init import reset_logging


@pytest.fixture()
def temp_workdir(monkeypatch) -> Path:
    with tempfile.TemporaryDirectory() as d:
        p = Path(d)
        (p / "config").mkdir()
        (p / "data").mkdir()
        monkeypatch.chdir(p)
        yield p


@pytest.fixture(autouse=True)
def _clean_logging():
    reset_logging()
    yield
    reset_logging()


@pytest.fixture(autouse=True)
def _clean_config_env():
    # Teardown runs after monkeypatch undo, so values loaded from .env cannot leak between tests.
    os.environ.pop("XLSX_EXPORT_CONFIG", None)
    yield
    os.environ.pop("XLSX_EXPORT_CONFIG", None)


@pytest.fixture()
def sample_config_yaml() -> str:
    return """date_format: "%Y-%m-%d"
placeholder_text: Nothing to export
image_max_width: 80
image_max_height: 40
label_fill_color: FF1F3864
banner_font_size: 20
"""


@pytest.fixture()
def write_config(temp_workdir: Path, sample_config_yaml: str) -> Path:
    cfg = temp_workdir / "config" / "export.yml"
    cfg.write_text(sample_config_yaml, encoding="utf-8")
    return cfg


@pytest.fixture()
def make_png() -> Callable[..., bytes]:
    """Factory producing encoded images of the requested size."""
    def _make(width: int = 200, height: int = 100, fmt: str = "PNG") -> bytes:
        buf = BytesIO()
        PILImage.new("RGB", (width, height), color=(200, 30, 30)).save(buf, format=fmt)
        return buf.getvalue()
    return _make


@pytest.fixture()
def open_book() -> Callable[[bytes], Workbook]:
    """Load generated workbook bytes back with openpyxl."""
    def _open(content: bytes) -> Workbook:
        return load_workbook(BytesIO(content))
    return _open


@pytest.fixture()
def write_input(temp_workdir: Path) -> Callable[[str, str], Path]:
    def _write(name: str, text: str) -> Path:
        p = temp_workdir / "data" / name
        p.write_text(text, encoding="utf-8")
        return p
    return _write
