"""`excel_records` converts worksheet rows into typed dataclass records."""

# Module responsibilities:
# - Re-export the declarative metadata helpers, the engine entry points and the
#   result types so consumers have a stable API surface.

from __future__ import annotations

from .attributes import RecordShape, column, describe_record, worksheet
from .coercion import TypeRegistry, default_registry, register_type_handler
from .columns import ABSENT, column_index_to_name, column_name_to_index, resolve_column_index
from .engine import convert_worksheet, read_data, read_records
from .errors import (
    CellTypeError,
    ConfigurationError,
    ConversionFailed,
    ExcelRecordsError,
    HeadingNotFoundError,
    InvalidColumnNameError,
    RecordShapeError,
    UnsupportedFieldTypeError,
)
from .result import ConversionResult, ValidationProblem
from .schema import load_record_shape, parse_record_shape

__all__ = [
    "ABSENT",
    "CellTypeError",
    "ConfigurationError",
    "ConversionFailed",
    "ConversionResult",
    "ExcelRecordsError",
    "HeadingNotFoundError",
    "InvalidColumnNameError",
    "RecordShape",
    "RecordShapeError",
    "TypeRegistry",
    "UnsupportedFieldTypeError",
    "ValidationProblem",
    "column",
    "column_index_to_name",
    "column_name_to_index",
    "convert_worksheet",
    "default_registry",
    "describe_record",
    "load_record_shape",
    "parse_record_shape",
    "read_data",
    "read_records",
    "register_type_handler",
    "resolve_column_index",
    "worksheet",
]

__version__ = "0.1.0"
