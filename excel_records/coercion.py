"""Type coercion dispatch for worksheet cells.

A :class:`TypeRegistry` maps the declared type of a field to a handler that
reads one cell through the reader's typed accessors. Handlers raise
:class:`~excel_records.errors.CellTypeError` when the stored value cannot be
interpreted; the engine turns that into a validation problem.

``default_registry`` is shared by every conversion in the process. Register
extra handlers once at start-up, before conversions run::

    register_type_handler(Decimal, lambda reader, col: Decimal(reader.get_string(col)))
"""

from __future__ import annotations

import threading
from datetime import date, datetime, time, timedelta
from typing import Any, Callable, Dict, Optional

from .errors import UnsupportedFieldTypeError
from .reader import SheetReader

CellHandler = Callable[[SheetReader, int], Any]


def _time_of_day(span: timedelta) -> time:
    seconds = int(span.total_seconds()) % (24 * 3600)
    hours, remainder = divmod(seconds, 3600)
    minutes, seconds = divmod(remainder, 60)
    return time(hours, minutes, seconds, span.microseconds)


def _read_float(reader: SheetReader, column_index: int) -> float:
    return reader.get_float(column_index)


def _read_int(reader: SheetReader, column_index: int) -> int:
    return reader.get_int(column_index)


def _read_date(reader: SheetReader, column_index: int) -> date:
    return reader.get_datetime(column_index).date()


def _read_datetime(reader: SheetReader, column_index: int) -> datetime:
    return reader.get_datetime(column_index)


def _read_time(reader: SheetReader, column_index: int) -> time:
    return _time_of_day(reader.get_time_span(column_index))


def _read_str(reader: SheetReader, column_index: int) -> str:
    return reader.get_string(column_index)


BUILTIN_HANDLERS: Dict[type, CellHandler] = {
    float: _read_float,
    int: _read_int,
    date: _read_date,
    datetime: _read_datetime,
    time: _read_time,
    str: _read_str,
}


def type_display_name(declared_type: Any) -> str:
    """Name used for a declared type in messages."""

    return getattr(declared_type, "__name__", None) or str(declared_type)


class TypeRegistry:
    """Registry of cell handlers keyed by declared field type."""

    def __init__(self, handlers: Optional[Dict[type, CellHandler]] = None) -> None:
        self._handlers: Dict[Any, CellHandler] = dict(BUILTIN_HANDLERS if handlers is None else handlers)
        self._lock = threading.Lock()

    def register(self, declared_type: type, handler: CellHandler) -> None:
        """Add or replace the handler for ``declared_type``."""

        with self._lock:
            self._handlers = {**self._handlers, declared_type: handler}

    def is_supported(self, declared_type: Any) -> bool:
        return declared_type in self._handlers

    def lookup(self, declared_type: Any, *, owner: str = "") -> CellHandler:
        """Return the handler for ``declared_type``.

        Raises:
            UnsupportedFieldTypeError: No handler is registered for the type.
        """

        handler = self._handlers.get(declared_type)
        if handler is None:
            where = f"The field '{owner}'" if owner else "A field"
            raise UnsupportedFieldTypeError(
                f"{where} is declared as '{type_display_name(declared_type)}' which is not supported."
            )
        return handler

    def coerce(self, reader: SheetReader, column_index: int, declared_type: Any) -> Any:
        """Read the cell at ``column_index`` of the current row as ``declared_type``."""

        return self.lookup(declared_type)(reader, column_index)

    def copy(self) -> "TypeRegistry":
        """Return an independent registry with the same handlers."""

        return TypeRegistry(dict(self._handlers))


default_registry = TypeRegistry()


def register_type_handler(declared_type: type, handler: CellHandler) -> None:
    """Register ``handler`` on the process-wide default registry."""

    default_registry.register(declared_type, handler)
