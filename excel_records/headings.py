"""Worksheet heading row capture."""

from __future__ import annotations

from typing import List

from .attributes import RecordShape
from .reader import SheetReader


def read_headings(reader: SheetReader, shape: RecordShape) -> List[str]:
    """Advance ``reader`` to the heading row and return its cells as text.

    Returns an empty list when the record shape declares no headings or the
    worksheet ends before the heading row. Empty cells become ``""`` so list
    positions keep matching column indexes.
    """

    if not shape.has_headings:
        return []

    while reader.row_number < shape.headings_row:
        if not reader.read_next_row():
            return []

    return [reader.get_string(column_index) for column_index in range(reader.field_count)]
