"""Declarative worksheet and column metadata for record types.

Record types are dataclasses. The ``worksheet`` class decorator describes the
worksheet the rows come from and ``column()`` wraps ``dataclasses.field()`` to
attach the locator for a single field::

    @worksheet(name="Rates", has_headings=True)
    @dataclass
    class Rate:
        pair: Optional[str] = column(heading="Pair")
        rate: Optional[float] = column(name="C")
        note: Optional[str] = column(optional=True)

A field's column is located by ``index`` (1-based), ``name`` (letters such as
``"A"`` or ``"AA"``) or ``heading``. More than one may be given; the precedence
is documented on :func:`excel_records.columns.resolve_column_index`. Fields are
required unless ``optional=True``. Every column field defaults to ``None`` so
the engine can construct an empty record before filling it in.

``describe_record`` is the single place that reflects on a record type; the
engine only ever sees the resulting :class:`RecordShape`.
"""

from __future__ import annotations

import dataclasses
import itertools
import types
import typing
from dataclasses import dataclass
from typing import Any, Callable, Optional, TypeVar

from .errors import RecordShapeError

COLUMN_META_KEY = "excel_records.column"
WORKSHEET_ATTR = "__excel_worksheet__"

T = TypeVar("T")

# Declaration order survives inheritance and make_dataclass because the
# counter is global rather than per class.
_declaration_counter = itertools.count(1)


@dataclass(frozen=True)
class ColumnLocator:
    """How to find the source column of one field."""

    index: int = 0
    name: Optional[str] = None
    heading: Optional[str] = None
    optional: bool = False
    order: int = 0


@dataclass(frozen=True)
class WorksheetOptions:
    """Worksheet-level options attached by the ``worksheet`` decorator."""

    name: Optional[str] = None
    has_headings: bool = False
    headings_row: int = 1
    skip_blank_rows: bool = False


@dataclass(frozen=True)
class FieldDescriptor:
    """A record field carrying a column locator."""

    name: str
    declared_type: Any
    locator: ColumnLocator


@dataclass(frozen=True)
class RecordShape:
    """Everything the engine needs to know about a record type."""

    record_type: type
    worksheet_name: str
    has_headings: bool
    headings_row: int
    skip_blank_rows: bool
    fields: tuple[FieldDescriptor, ...]

    @property
    def first_data_row(self) -> int:
        return self.headings_row + 1 if self.has_headings else 1


def column(
    *,
    index: int = 0,
    name: Optional[str] = None,
    heading: Optional[str] = None,
    optional: bool = False,
) -> Any:
    """Create a dataclass field mapped to a worksheet column.

    Args:
        index: One-based column index; ``0`` leaves it unset.
        name: Column letters, e.g. ``"B"``.
        heading: Heading text; only used when the worksheet declares headings.
        optional: Allow the cell (or the heading) to be missing.
    """

    if index < 0:
        raise RecordShapeError(f"Column index must be one-based, got {index}")
    locator = ColumnLocator(
        index=index,
        name=name,
        heading=heading,
        optional=optional,
        order=next(_declaration_counter),
    )
    return dataclasses.field(default=None, metadata={COLUMN_META_KEY: locator})


def worksheet(
    name: Optional[str] = None,
    *,
    has_headings: bool = False,
    headings_row: int = 1,
    skip_blank_rows: bool = False,
) -> Callable[[type[T]], type[T]]:
    """Class decorator recording worksheet options on a record type."""

    if headings_row < 1:
        raise RecordShapeError(f"headings_row is one-based and must be >= 1, got {headings_row}")
    options = WorksheetOptions(
        name=name,
        has_headings=has_headings,
        headings_row=headings_row,
        skip_blank_rows=skip_blank_rows,
    )

    def decorate(cls: type[T]) -> type[T]:
        setattr(cls, WORKSHEET_ATTR, options)
        return cls

    return decorate


def _unwrap_optional(annotation: Any) -> Any:
    origin = typing.get_origin(annotation)
    if origin is typing.Union or origin is types.UnionType:
        args = [arg for arg in typing.get_args(annotation) if arg is not type(None)]
        if len(args) == 1:
            return args[0]
    return annotation


def describe_record(record_type: type) -> RecordShape:
    """Reflect a decorated dataclass into a :class:`RecordShape`.

    Raises:
        RecordShapeError: When ``record_type`` is not a dataclass.
    """

    if not isinstance(record_type, type) or not dataclasses.is_dataclass(record_type):
        raise RecordShapeError(f"Record type {record_type!r} must be a dataclass")

    options: WorksheetOptions = getattr(record_type, WORKSHEET_ATTR, None) or WorksheetOptions()
    hints = typing.get_type_hints(record_type)

    descriptors = []
    for field in dataclasses.fields(record_type):
        locator = field.metadata.get(COLUMN_META_KEY)
        if locator is None:
            continue
        declared_type = _unwrap_optional(hints.get(field.name, field.type))
        descriptors.append(
            FieldDescriptor(
                name=field.name,
                declared_type=declared_type,
                locator=locator,
            )
        )

    return RecordShape(
        record_type=record_type,
        worksheet_name=options.name or record_type.__name__,
        has_headings=options.has_headings,
        headings_row=options.headings_row,
        skip_blank_rows=options.skip_blank_rows,
        fields=tuple(descriptors),
    )
