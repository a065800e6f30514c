from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from io import BytesIO

from openpyxl import load_workbook
from openpyxl.drawing.spreadsheet_drawing import OneCellAnchor

from xlsx_export import (
    CellData,
    Column,
    WorksheetDefinition,
    generate,
    generate_from_objects,
    generate_many,
)

"""End-to-end: generate workbooks and read them back with openpyxl."""


@dataclass
class Entry:
    Id: int
    Name: str
    Date: datetime | None


@dataclass
class Employee:
    name: str
    homepage: str
    photo: bytes | None


def test_inferred_example_rows(open_book):
    rows = [Entry(1, "A", datetime(2024, 1, 1)), Entry(2, "B", None)]
    result = generate_from_objects("data", rows)

    assert result.file_extension == ".xlsx"
    ws = open_book(result.content)["data"]
    assert [c.value for c in ws[1]] == ["Id", "Name", "Date"]
    assert [c.value for c in ws[2]] == [1, "A", "01/01/2024"]
    assert [c.value for c in ws[3]] == [2, "B", None]
    assert ws.max_row == 3

    label = ws["A1"]
    assert label.font.bold
    assert label.fill.fill_type == "solid"


def test_explicit_columns_with_links_and_images(make_png):
    columns = [
        Column("Name", lambda e: CellData(e.name, wrap_text=True)),
        Column("Homepage", lambda e: CellData(e.homepage, hyperlink=e.homepage)),
        Column("Photo", lambda e: CellData.image(e.photo)),
    ]
    rows = [
        Employee("Ada", "https://example.com/ada", make_png(300, 150)),
        Employee("Linus", "https://example.com/linus", None),
        Employee("Grace", "https://example.com/grace", make_png(60, 240, fmt="JPEG")),
    ]

    result = generate("Staff", columns, rows, header="Staff directory")
    wb = load_workbook(BytesIO(result.content))
    ws = wb["Staff"]

    assert ws["A1"].value == "Staff directory"
    assert [str(r) for r in ws.merged_cells.ranges] == ["A1:C1"]
    assert [c.value for c in ws[2]] == ["Name", "Homepage", "Photo"]
    assert ws["A3"].alignment.wrap_text
    assert ws["B3"].hyperlink.target == "https://example.com/ada"
    assert ws["B3"].font.u == "single"

    images = ws._images
    assert len(images) == 2
    anchors = sorted((img.anchor._from.row, img.anchor._from.col) for img in images)
    # data rows 3 and 5, one column past the three data columns
    assert anchors == [(2, 3), (4, 3)]
    for img in images:
        assert isinstance(img.anchor, OneCellAnchor)
    assert ws.row_dimensions[3].height == 50
    assert ws.row_dimensions[5].height == 100
    assert ws.column_dimensions["D"].width == 100


def test_multi_sheet_layout(open_book):
    definitions = [
        WorksheetDefinition(
            f"Sheet{n}",
            [Column("N"), Column("Square")],
            [{"N": i, "Square": i * i} for i in range(n)],
        )
        for n in range(1, 4)
    ]
    wb = open_book(generate_many(definitions).content)

    assert len(wb.worksheets) == 3
    for n, ws in enumerate(wb.worksheets, start=1):
        assert ws.title == f"Sheet{n}"
        assert [c.value for c in ws[1]] == ["N", "Square"]
        assert ws.max_row == n + 1
        assert [ws.cell(row=i + 2, column=2).value for i in range(n)] == [i * i for i in range(n)]


def test_dynamic_rows_keep_native_values(open_book):
    rows = [
        {"Id": 1, "When": datetime(2024, 5, 6, 7, 8), "Active": True},
        {"Id": 2, "When": None, "Active": False},
    ]
    ws = open_book(generate_from_objects("Bag", rows).content)["Bag"]
    assert [c.value for c in ws[2]] == [1, datetime(2024, 5, 6, 7, 8), True]
    assert [c.value for c in ws[3]] == [2, None, False]
