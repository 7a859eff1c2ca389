"""Field mapping construction for a record shape."""

# Module responsibilities:
# - Combine the record's field descriptors with column resolution.
# - Drop optional fields whose heading is missing from the worksheet.
# - Bind each surviving field to its coercion handler once per conversion.

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, List, Sequence

from .attributes import RecordShape
from .coercion import CellHandler, TypeRegistry, type_display_name
from .columns import ABSENT, column_index_to_name, resolve_column_index


@dataclass(frozen=True)
class FieldMapping:
    """A record field bound to a zero-based worksheet column."""

    name: str
    declared_type: Any
    optional: bool
    column_index: int
    handler: CellHandler

    @property
    def column_name(self) -> str:
        return column_index_to_name(self.column_index)

    @property
    def type_name(self) -> str:
        return type_display_name(self.declared_type)

    def cell_address(self, row_number: int) -> str:
        return f"{self.column_name}{row_number}"


def build_field_mappings(
    shape: RecordShape,
    headings: Sequence[str],
    registry: TypeRegistry,
) -> List[FieldMapping]:
    """Resolve every locator-carrying field of ``shape`` to a column.

    Fields are visited in declaration order; the position in that order is the
    positional fallback for the column. Fields resolving to ABSENT are left out.

    Raises:
        ConfigurationError: Bad column name, missing required heading, or a
            declared type with no registered handler.
    """

    ordered = sorted(shape.fields, key=lambda descriptor: descriptor.locator.order)
    mappings: List[FieldMapping] = []
    for declaration_index, descriptor in enumerate(ordered):
        column_index = resolve_column_index(
            descriptor.locator,
            descriptor.name,
            declaration_index,
            headings,
        )
        if column_index == ABSENT:
            continue
        handler = registry.lookup(
            descriptor.declared_type,
            owner=f"{shape.record_type.__name__}.{descriptor.name}",
        )
        mappings.append(
            FieldMapping(
                name=descriptor.name,
                declared_type=descriptor.declared_type,
                optional=descriptor.locator.optional,
                column_index=column_index,
                handler=handler,
            )
        )
    return mappings
