"""Row conversion engine.

RESPONSIBILITIES
- Open the workbook, locate the record's worksheet and resolve field mappings.
- Walk data rows applying the blank-row and required/optional policies.
- Coerce cells through the type registry and collect validation problems.
PROCESS OVERVIEW
1. read_data() loads the workbook and describes the record type.
2. convert_worksheet() reads headings and builds the field mappings once.
3. _RowConverter.run() scans rows from the first data row to the last used row:
   - blank rows are skipped, accepted (all fields optional) or deferred;
   - a deferred blank period followed by more rows halts the scan with one
     problem when the record has a required field;
   - every other row becomes one record; a missing required cell or a cell
     that cannot be coerced ends that row's fields with one problem, the
     partially filled record is still kept and the scan moves on.
4. A ConversionResult is built once from the collected problems and records.
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import Any, Dict, List, Optional, Sequence, Type, TypeVar

from .attributes import RecordShape, describe_record
from .coercion import TypeRegistry, default_registry
from .errors import CellTypeError, ConversionFailed
from .headings import read_headings
from .mapping import FieldMapping, build_field_mappings
from .reader import SheetReader, WorkbookSource, open_workbook
from .result import ConversionResult, ValidationProblem
from .utils.log import get_logger

logger = get_logger("engine")

T = TypeVar("T")


class ScanState(Enum):
    SCANNING = "scanning"
    BLANK_PENDING = "blank_pending"
    HALTED = "halted"


class _RowConverter:
    """Single-use state machine converting the rows of one worksheet."""

    def __init__(self, reader: SheetReader, shape: RecordShape, mappings: Sequence[FieldMapping]) -> None:
        self.reader = reader
        self.shape = shape
        self.mappings = list(mappings)
        self.state = ScanState.SCANNING
        self.pending_row: Optional[int] = None
        self.problems: List[ValidationProblem] = []
        self.data: List[Any] = []

    @property
    def sheet(self) -> str:
        return self.shape.worksheet_name

    def run(self) -> ConversionResult:
        last_row = self.reader.last_used_row
        first_row = self.shape.first_data_row
        all_optional = all(mapping.optional for mapping in self.mappings)

        while self.state is not ScanState.HALTED and self.reader.read_next_row():
            row_number = self.reader.row_number
            if row_number < first_row:
                continue
            if row_number > last_row:
                break

            if self._row_is_blank():
                if self.shape.skip_blank_rows:
                    logger.debug("Skipping blank row %s of %s", row_number, self.sheet)
                    continue
                if row_number == last_row:
                    break
                if not all_optional:
                    if self.state is ScanState.SCANNING:
                        logger.debug("Deferring blank row %s of %s", row_number, self.sheet)
                        self.state = ScanState.BLANK_PENDING
                        self.pending_row = row_number
                    continue
            elif self.state is ScanState.BLANK_PENDING:
                self._resolve_deferral()
                if self.state is ScanState.HALTED:
                    break

            self._convert_row(row_number)

        if self.state is ScanState.BLANK_PENDING:
            self._resolve_deferral()

        return ConversionResult(validation_problems=tuple(self.problems), data=tuple(self.data))

    def _row_is_blank(self) -> bool:
        if not self.mappings:
            return False
        return all(self.reader.get_raw_value(mapping.column_index) is None for mapping in self.mappings)

    def _resolve_deferral(self) -> None:
        required = next((mapping for mapping in self.mappings if not mapping.optional), None)
        pending_row = self.pending_row
        self.pending_row = None
        if required is None or pending_row is None:
            self.state = ScanState.SCANNING
            return

        address = required.cell_address(pending_row)
        self.problems.append(
            ValidationProblem(
                f"The row {pending_row} of worksheet '{self.sheet}' is blank "
                f"but the cell {self.sheet}!{address} is required.",
                self.sheet,
                address,
            )
        )
        logger.warning("Halting %s at blank row %s", self.sheet, pending_row)
        self.state = ScanState.HALTED

    def _convert_row(self, row_number: int) -> None:
        values: Dict[str, Any] = {}
        for mapping in self.mappings:
            raw_value = self.reader.get_raw_value(mapping.column_index)
            if raw_value is None:
                if mapping.optional:
                    continue
                address = mapping.cell_address(row_number)
                self.problems.append(
                    ValidationProblem(
                        f"The cell {self.sheet}!{address} has no value but is required.",
                        self.sheet,
                        address,
                    )
                )
                break

            try:
                values[mapping.name] = mapping.handler(self.reader, mapping.column_index)
            except CellTypeError:
                address = mapping.cell_address(row_number)
                self.problems.append(
                    ValidationProblem(
                        f"The cell {self.sheet}!{address} has the value '{raw_value}' "
                        f"which cannot be interpreted as the data type '{mapping.type_name}'.",
                        self.sheet,
                        address,
                    )
                )
                break

        self.data.append(self.shape.record_type(**values))


def convert_worksheet(
    reader: SheetReader,
    shape: RecordShape,
    registry: Optional[TypeRegistry] = None,
) -> ConversionResult:
    """Convert the worksheet named by ``shape`` using an already opened reader.

    Raises:
        ConfigurationError: When the record metadata cannot be resolved.
    """

    if not reader.open_worksheet(shape.worksheet_name):
        logger.warning("Worksheet %s not found", shape.worksheet_name)
        problem = ValidationProblem(
            f"The worksheet could not be found with the name '{shape.worksheet_name}'.",
            shape.worksheet_name,
        )
        return ConversionResult(validation_problems=(problem,))

    headings = read_headings(reader, shape)
    mappings = build_field_mappings(shape, headings, registry or default_registry)
    if logger.isEnabledFor(logging.DEBUG):
        logger.debug(
            "Resolved columns for %s: %s",
            shape.record_type.__name__,
            ", ".join(f"{mapping.name}={mapping.column_name}" for mapping in mappings),
        )
    return _RowConverter(reader, shape, mappings).run()


def read_data(
    record_type: Type[T],
    source: WorkbookSource,
    *,
    registry: Optional[TypeRegistry] = None,
) -> ConversionResult[T]:
    """Convert the rows of ``record_type``'s worksheet into records.

    Args:
        record_type: Dataclass decorated with ``worksheet``/``column`` metadata.
        source: Path to the workbook or an open binary stream.
        registry: Type registry override; defaults to the process-wide one.

    Returns:
        ConversionResult holding the records and any validation problems.

    Raises:
        ConfigurationError: When the record metadata is invalid.
    """

    shape = describe_record(record_type)
    logger.info("Reading %s from worksheet %s", record_type.__name__, shape.worksheet_name)
    with open_workbook(source) as reader:
        result = convert_worksheet(reader, shape, registry)
    logger.info(
        "Converted %s records from %s with %s problem(s)",
        len(result.data),
        shape.worksheet_name,
        len(result.validation_problems),
    )
    return result


def read_records(
    record_type: Type[T],
    source: WorkbookSource,
    *,
    registry: Optional[TypeRegistry] = None,
) -> List[T]:
    """Like :func:`read_data` but return the records or raise ConversionFailed."""

    result = read_data(record_type, source, registry=registry)
    if not result.is_valid:
        raise ConversionFailed(result.validation_problems)
    return list(result.data)
