"""Column locator resolution.

Turns a field's locator metadata into the zero-based column index the engine
reads from. Resolution is pure: the same locator, field name, position and
headings always give the same answer.
"""

from __future__ import annotations

import re
from typing import Sequence

from .attributes import ColumnLocator
from .errors import HeadingNotFoundError, InvalidColumnNameError

ABSENT = -1

_COLUMN_NAME_RE = re.compile(r"[A-Z]{1,3}")


def is_column_name(value: str) -> bool:
    """Return True for spreadsheet column letters such as ``"A"`` or ``"XFD"``."""

    return _COLUMN_NAME_RE.fullmatch(value) is not None


def column_name_to_index(column_name: str) -> int:
    """Convert column letters to a one-based column number (``A`` -> 1, ``AA`` -> 27)."""

    index = 0
    for letter in column_name:
        index = index * 26 + (ord(letter) - ord("A") + 1)
    return index


def column_index_to_name(column_index: int) -> str:
    """Convert a zero-based column index back to its letters (0 -> ``A``)."""

    if column_index < 0:
        raise ValueError(f"Column index must be zero or positive, got {column_index}")
    number = column_index + 1
    letters = []
    while number:
        number, remainder = divmod(number - 1, 26)
        letters.append(chr(ord("A") + remainder))
    return "".join(reversed(letters))


def _find_heading(headings: Sequence[str], text: str) -> int:
    wanted = text.casefold()
    for position, heading in enumerate(headings):
        if heading.casefold() == wanted:
            return position
    return ABSENT


def resolve_column_index(
    locator: ColumnLocator,
    field_name: str,
    declaration_index: int,
    headings: Sequence[str],
) -> int:
    """Resolve a field to a zero-based column index or :data:`ABSENT`.

    The first rule that applies wins:

    1. an explicit one-based ``index``;
    2. an explicit column ``name``, which must be 1-3 uppercase letters;
    3. the field name itself when it is written in column letters;
    4. an explicit ``heading`` looked up case-insensitively in ``headings``;
       optional fields with no matching heading are ABSENT;
    5. the field name looked up case-insensitively in ``headings``;
    6. ``declaration_index``, the field's position among the mapped fields.

    Raises:
        InvalidColumnNameError: ``name`` is not in column letter notation.
        HeadingNotFoundError: a required field's ``heading`` is not in ``headings``.
    """

    if locator.index > 0:
        return locator.index - 1

    if locator.name:
        if not is_column_name(locator.name):
            raise InvalidColumnNameError(
                f"The field '{field_name}' has an invalid column name of '{locator.name}'."
            )
        return column_name_to_index(locator.name) - 1

    if is_column_name(field_name):
        return column_name_to_index(field_name) - 1

    if headings and locator.heading:
        position = _find_heading(headings, locator.heading)
        if position != ABSENT:
            return position
        if locator.optional:
            return ABSENT
        raise HeadingNotFoundError(
            f"The field '{field_name}' names the heading '{locator.heading}' "
            "that does not exist in the list of worksheet headings."
        )

    position = _find_heading(headings, field_name)
    if position != ABSENT:
        return position

    return declaration_index
