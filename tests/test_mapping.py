"""Tests for record metadata reflection, heading capture and field mapping."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from pathlib import Path
from typing import Optional

import pytest

from excel_records import RecordShapeError, UnsupportedFieldTypeError, column, describe_record, worksheet
from excel_records.coercion import TypeRegistry, default_registry
from excel_records.headings import read_headings
from excel_records.mapping import build_field_mappings
from excel_records.reader import open_workbook


@worksheet("Rates", has_headings=True, headings_row=2, skip_blank_rows=True)
@dataclass
class RateRow:
    pair: Optional[str] = column(heading="Pair")
    rate: Optional[float] = column(name="C")
    note: Optional[str] = column(heading="Note", optional=True)
    unmapped: Optional[str] = None
    rate_date: Optional[date] = column(index=4)


@dataclass
class Positional:
    first: Optional[str] = column()
    second: Optional[str] = column()
    helper: int = 0
    third: Optional[str] = column(optional=True)


def test_describe_record_reads_worksheet_options() -> None:
    shape = describe_record(RateRow)
    assert shape.worksheet_name == "Rates"
    assert shape.has_headings is True
    assert shape.headings_row == 2
    assert shape.skip_blank_rows is True
    assert shape.first_data_row == 3


def test_describe_record_defaults_to_class_name() -> None:
    shape = describe_record(Positional)
    assert shape.worksheet_name == "Positional"
    assert shape.has_headings is False
    assert shape.first_data_row == 1


def test_describe_record_only_includes_column_fields() -> None:
    shape = describe_record(RateRow)
    assert [descriptor.name for descriptor in shape.fields] == ["pair", "rate", "note", "rate_date"]
    rate_date = shape.fields[-1]
    assert rate_date.declared_type is date
    assert rate_date.locator.index == 4


def test_describe_record_rejects_non_dataclasses() -> None:
    class NotADataclass:
        pass

    with pytest.raises(RecordShapeError):
        describe_record(NotADataclass)


def test_headings_row_must_be_one_based() -> None:
    with pytest.raises(RecordShapeError):
        worksheet("Sheet", has_headings=True, headings_row=0)


def test_negative_column_index_is_rejected() -> None:
    with pytest.raises(RecordShapeError):
        column(index=-1)


def test_read_headings(build_workbook) -> None:
    path = build_workbook({"Rates": [["Exported 2024-05-10"], ["Pair", None, "Rate", "Date"], ["USD/CNY", None, 7.2]]})
    with open_workbook(path) as reader:
        assert reader.open_worksheet("Rates")
        headings = read_headings(reader, describe_record(RateRow))
        assert headings == ["Pair", "", "Rate", "Date"]
        assert reader.row_number == 2


def test_read_headings_without_declared_headings(build_workbook) -> None:
    path = build_workbook({"Positional": [["a", "b"]]})
    with open_workbook(path) as reader:
        assert reader.open_worksheet("Positional")
        assert read_headings(reader, describe_record(Positional)) == []
        assert reader.row_number == 0


def test_read_headings_past_the_end_of_the_worksheet(build_workbook) -> None:
    path = build_workbook({"Rates": [["only one row"]]})
    with open_workbook(path) as reader:
        assert reader.open_worksheet("Rates")
        assert read_headings(reader, describe_record(RateRow)) == []


def test_build_field_mappings_resolves_and_drops_absent_optional_fields() -> None:
    shape = describe_record(RateRow)
    mappings = build_field_mappings(shape, ["Pair", "", "Rate", "Date"], default_registry)

    assert [(mapping.name, mapping.column_name) for mapping in mappings] == [
        ("pair", "A"),
        ("rate", "C"),
        ("rate_date", "D"),
    ]
    assert all(not mapping.optional for mapping in mappings)
    assert mappings[1].cell_address(7) == "C7"
    assert mappings[2].type_name == "date"


def test_build_field_mappings_keeps_optional_field_when_heading_exists() -> None:
    shape = describe_record(RateRow)
    mappings = build_field_mappings(shape, ["Pair", "Note", "Rate", "Date"], default_registry)
    note = next(mapping for mapping in mappings if mapping.name == "note")
    assert note.optional is True
    assert note.column_index == 1


def test_positional_fallback_counts_only_column_fields() -> None:
    mappings = build_field_mappings(describe_record(Positional), [], default_registry)
    assert [(mapping.name, mapping.column_index) for mapping in mappings] == [
        ("first", 0),
        ("second", 1),
        ("third", 2),
    ]


def test_unsupported_type_is_raised_while_building() -> None:
    registry = TypeRegistry({str: default_registry.lookup(str)})
    with pytest.raises(UnsupportedFieldTypeError) as excinfo:
        build_field_mappings(describe_record(RateRow), ["Pair", "", "Rate", "Date"], registry)
    assert "RateRow.rate" in str(excinfo.value)


def test_reader_reports_sheet_names_and_missing_worksheets(first_test_workbook: Path) -> None:
    with open_workbook(first_test_workbook) as reader:
        assert "TypeTests" in reader.sheet_names
        assert not reader.open_worksheet("Missing")
