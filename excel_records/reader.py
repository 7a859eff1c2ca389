"""Worksheet reader backed by openpyxl.

RESPONSIBILITIES
- Open a workbook from a path or a binary stream and expose one worksheet row by row.
- Report the last row that holds any content so trailing formatting is ignored.
- Offer typed accessors that refuse values whose stored kind does not fit.
PROCESS OVERVIEW
1. open_workbook() loads the workbook (values only) and yields a reader.
2. open_worksheet() selects a sheet and snapshots its rows.
3. read_next_row() advances; get_raw_value()/get_*() read the current row.
4. close() releases the workbook; the context manager calls it on every exit.
"""

from __future__ import annotations

import os
from contextlib import contextmanager
from datetime import date, datetime, time, timedelta
from typing import IO, Iterator, Protocol, Sequence, Union

from openpyxl import load_workbook
from openpyxl.utils.datetime import from_excel
from openpyxl.workbook.workbook import Workbook

from .errors import CellTypeError

WorkbookSource = Union[str, "os.PathLike[str]", IO[bytes]]


class SheetReader(Protocol):
    """Sequential access to the rows of one worksheet."""

    @property
    def row_number(self) -> int:
        """One-based number of the current row, 0 before the first read."""

    @property
    def field_count(self) -> int:
        """Number of cells in the current row."""

    @property
    def last_used_row(self) -> int:
        """One-based number of the last row holding content, 0 when empty."""

    def open_worksheet(self, name: str) -> bool:
        """Select a worksheet; False when it does not exist."""

    def read_next_row(self) -> bool:
        """Advance to the next row; False at the end of the worksheet."""

    def get_raw_value(self, column_index: int) -> object:
        """Return the stored value of a cell or None when it is empty."""

    def get_string(self, column_index: int) -> str: ...

    def get_float(self, column_index: int) -> float: ...

    def get_int(self, column_index: int) -> int: ...

    def get_datetime(self, column_index: int) -> datetime: ...

    def get_time_span(self, column_index: int) -> timedelta: ...

    def close(self) -> None: ...


def is_blank(value: object) -> bool:
    """Return True for empty cells; openpyxl stores them as None or ''."""

    return value is None or (isinstance(value, str) and value == "")


def _is_number(value: object) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _format_number(value: float) -> str:
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


class OpenpyxlSheetReader:
    """:class:`SheetReader` over an openpyxl workbook loaded with ``data_only=True``."""

    def __init__(self, workbook: Workbook) -> None:
        self._workbook = workbook
        self._rows: list[tuple[object, ...]] = []
        self._position = 0
        self._last_used_row = 0

    @property
    def sheet_names(self) -> list[str]:
        return list(self._workbook.sheetnames)

    @property
    def row_number(self) -> int:
        return self._position

    @property
    def field_count(self) -> int:
        return len(self._current())

    @property
    def last_used_row(self) -> int:
        return self._last_used_row

    def open_worksheet(self, name: str) -> bool:
        if name not in self._workbook.sheetnames:
            return False
        worksheet = self._workbook[name]
        self._rows = [tuple(row) for row in worksheet.iter_rows(values_only=True)]
        self._position = 0
        self._last_used_row = 0
        for number, row in enumerate(self._rows, start=1):
            if any(not is_blank(value) for value in row):
                self._last_used_row = number
        return True

    def read_next_row(self) -> bool:
        if self._position >= len(self._rows):
            return False
        self._position += 1
        return True

    def _current(self) -> Sequence[object]:
        if self._position == 0:
            return ()
        return self._rows[self._position - 1]

    def get_raw_value(self, column_index: int) -> object:
        row = self._current()
        if column_index < 0 or column_index >= len(row):
            return None
        value = row[column_index]
        return None if is_blank(value) else value

    def get_string(self, column_index: int) -> str:
        value = self.get_raw_value(column_index)
        if value is None:
            return ""
        if isinstance(value, str):
            return value
        if isinstance(value, bool):
            return "TRUE" if value else "FALSE"
        if _is_number(value):
            return _format_number(value)
        if isinstance(value, (datetime, date, time)):
            return value.isoformat()
        return str(value)

    def get_float(self, column_index: int) -> float:
        value = self.get_raw_value(column_index)
        if not _is_number(value):
            raise CellTypeError(column_index, value, "number")
        return float(value)

    def get_int(self, column_index: int) -> int:
        value = self.get_raw_value(column_index)
        if isinstance(value, int) and not isinstance(value, bool):
            return value
        if isinstance(value, float) and value.is_integer():
            return int(value)
        raise CellTypeError(column_index, value, "whole number")

    def get_datetime(self, column_index: int) -> datetime:
        value = self.get_raw_value(column_index)
        if isinstance(value, datetime):
            return value
        if isinstance(value, date):
            return datetime(value.year, value.month, value.day)
        if _is_number(value):
            # Date cells without a date number format arrive as Excel serials.
            try:
                converted = from_excel(value)
            except (OverflowError, ValueError) as exc:
                raise CellTypeError(column_index, value, "date") from exc
            if isinstance(converted, datetime):
                return converted
        raise CellTypeError(column_index, value, "date")

    def get_time_span(self, column_index: int) -> timedelta:
        value = self.get_raw_value(column_index)
        if isinstance(value, timedelta):
            return value
        if isinstance(value, time):
            return timedelta(
                hours=value.hour,
                minutes=value.minute,
                seconds=value.second,
                microseconds=value.microsecond,
            )
        if isinstance(value, datetime):
            return value - datetime(value.year, value.month, value.day)
        if _is_number(value) and 0 <= value < 1:
            return timedelta(days=value)
        raise CellTypeError(column_index, value, "time")

    def close(self) -> None:
        self._rows = []
        self._workbook.close()


@contextmanager
def open_workbook(source: WorkbookSource) -> Iterator[OpenpyxlSheetReader]:
    """Load a workbook and yield a reader that is closed on exit.

    Args:
        source: Path to an ``.xlsx`` file or a readable binary stream.

    Raises:
        FileNotFoundError: When a path does not exist.
        zipfile.BadZipFile / OSError: When openpyxl cannot decode the source.
    """

    workbook = load_workbook(source, data_only=True)
    reader = OpenpyxlSheetReader(workbook)
    try:
        yield reader
    finally:
        reader.close()
