from __future__ import annotations

import sys
from datetime import date, datetime, time
from pathlib import Path

import pytest
from openpyxl import Workbook

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))


def _build_first_test(path: Path) -> None:
    wb = Workbook()
    wb.active.title = "EmptyWorksheet"

    wb.create_sheet("WorksheetByClassName")

    ws = wb.create_sheet("NoHeadings")
    ws["B1"] = "find me"

    ws = wb.create_sheet("TypeTests")
    ws.append(
        [
            "one",
            1.23,
            date(2020, 9, 1),
            100.00,
            datetime(2021, 4, 2, 10, 45),
            time(23, 14),
            12.23,
            3,
        ]
    )
    ws["D1"].number_format = '_("$"* #,##0.00_)'
    ws["G1"].number_format = '"$"#,##0.00'

    ws = wb.create_sheet("WithHeadings")
    ws.append(["First Column", "Second Column", "Third Column", "Fourth Column"])
    ws.append(["one", 1.23, date(2020, 9, 1), 100.00])

    ws = wb.create_sheet("HeadingsOnRowThree")
    ws["A1"] = "A title above the headings"
    ws["A3"] = "First Column"
    ws["A4"] = 234

    ws = wb.create_sheet("WithBlankRows")
    ws.append([1, "one"])
    ws.append([2, "two"])
    ws.append([None, None])
    ws.append([4, "four"])
    ws.append([5, "five"])
    ws.append([6, "six"])

    path.parent.mkdir(parents=True, exist_ok=True)
    wb.save(path)


@pytest.fixture()
def first_test_workbook(tmp_path: Path) -> Path:
    """Workbook with one worksheet per conversion scenario."""

    path = tmp_path / "FirstTest.xlsx"
    _build_first_test(path)
    return path


@pytest.fixture()
def build_workbook(tmp_path: Path):
    """Return a helper that saves ``{sheet: rows}`` as a workbook and returns its path."""

    def _build(sheets: dict[str, list[list[object]]], name: str = "custom.xlsx") -> Path:
        wb = Workbook()
        wb.remove(wb.active)
        for title, rows in sheets.items():
            ws = wb.create_sheet(title)
            for row in rows:
                ws.append(row)
        path = tmp_path / name
        wb.save(path)
        return path

    return _build
