"""Custom exceptions used across excel_records."""

from __future__ import annotations

from typing import Sequence, TYPE_CHECKING

if TYPE_CHECKING:
    from .result import ValidationProblem


class ExcelRecordsError(Exception):
    """Base error for the library."""


class ConfigurationError(ExcelRecordsError):
    """Record or field metadata is wrong; fix the record type, not the data."""


class RecordShapeError(ConfigurationError):
    """Raised when worksheet or column metadata cannot describe a record type."""


class InvalidColumnNameError(ConfigurationError):
    """Raised when an explicit column name is not in spreadsheet letter notation."""


class HeadingNotFoundError(ConfigurationError):
    """Raised when a required field names a heading the worksheet does not have."""


class UnsupportedFieldTypeError(ConfigurationError):
    """Raised when a field is declared with a type no handler is registered for."""


class CellTypeError(ExcelRecordsError):
    """Raised by typed cell accessors when the stored value has the wrong kind."""

    def __init__(self, column_index: int, raw_value: object, requested: str) -> None:
        super().__init__(f"Cell in column {column_index} holds {raw_value!r} which is not a {requested}")
        self.column_index = column_index
        self.raw_value = raw_value
        self.requested = requested


class ConversionFailed(ExcelRecordsError):
    """Raised by read_records when validation problems were collected."""

    def __init__(self, problems: Sequence["ValidationProblem"]) -> None:
        first = problems[0].message if problems else "unknown problem"
        super().__init__(f"{len(problems)} validation problem(s); first: {first}")
        self.problems = tuple(problems)
