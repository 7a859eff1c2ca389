"""Record shapes declared in YAML.

A YAML file describes the worksheet and its fields; ``load_record_shape``
validates it and builds a dataclass carrying the same ``worksheet``/``column``
metadata as a hand-written record type, so it can be passed to ``read_data``.
"""

# Module responsibilities:
# - Parse the YAML payload with PyYAML and validate it with pydantic models.
# - Translate type names to Python types and create the record dataclass.

from __future__ import annotations

import dataclasses
import keyword
from datetime import date, datetime, time
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from .attributes import column, worksheet
from .errors import RecordShapeError

TYPE_NAMES: Dict[str, type] = {
    "float": float,
    "int": int,
    "date": date,
    "datetime": datetime,
    "time": time,
    "str": str,
}


class FieldEntry(BaseModel):
    """One field entry under ``fields``."""

    model_config = ConfigDict(extra="forbid")

    name: str
    type: str = "str"
    index: int = Field(default=0, ge=0)
    column: Optional[str] = None
    heading: Optional[str] = None
    optional: bool = False

    @field_validator("name")
    @classmethod
    def _check_identifier(cls, value: str) -> str:
        if not value.isidentifier() or keyword.iskeyword(value):
            raise ValueError(f"field name '{value}' is not a valid identifier")
        return value

    @field_validator("type")
    @classmethod
    def _check_type(cls, value: str) -> str:
        if value not in TYPE_NAMES:
            raise ValueError(f"unknown type '{value}', expected one of {', '.join(TYPE_NAMES)}")
        return value


class ShapeDocument(BaseModel):
    """Top-level YAML document."""

    model_config = ConfigDict(extra="forbid")

    worksheet: str
    record_name: Optional[str] = None
    has_headings: bool = False
    headings_row: int = Field(default=1, ge=1)
    skip_blank_rows: bool = False
    fields: List[FieldEntry] = Field(default_factory=list)


def build_record_type(document: ShapeDocument) -> type:
    """Create a decorated record dataclass from a validated document."""

    names = [entry.name for entry in document.fields]
    duplicates = sorted({name for name in names if names.count(name) > 1})
    if duplicates:
        raise RecordShapeError(f"Duplicate field names in record shape: {', '.join(duplicates)}")

    definitions = [
        (
            entry.name,
            Optional[TYPE_NAMES[entry.type]],
            column(
                index=entry.index,
                name=entry.column,
                heading=entry.heading,
                optional=entry.optional,
            ),
        )
        for entry in document.fields
    ]
    class_name = document.record_name or _class_name(document.worksheet)
    record_type = dataclasses.make_dataclass(class_name, definitions)
    decorate = worksheet(
        document.worksheet,
        has_headings=document.has_headings,
        headings_row=document.headings_row,
        skip_blank_rows=document.skip_blank_rows,
    )
    return decorate(record_type)


def _class_name(worksheet_name: str) -> str:
    cleaned = "".join(part.capitalize() for part in worksheet_name.replace("-", " ").split() if part.isalnum())
    return f"{cleaned or 'Worksheet'}Record"


def parse_record_shape(payload: Mapping[str, Any]) -> type:
    """Validate a mapping and build the record type it describes."""

    try:
        document = ShapeDocument.model_validate(payload)
    except ValidationError as exc:
        raise RecordShapeError(f"Invalid record shape: {exc}") from exc
    return build_record_type(document)


def load_record_shape(path: Path) -> type:
    """Load a record shape from a YAML file.

    Raises:
        FileNotFoundError: When the YAML file does not exist.
        RecordShapeError: When the YAML structure is invalid.
    """

    if not path.exists():
        raise FileNotFoundError(f"Record shape file not found: {path}")
    with path.open("r", encoding="utf-8") as fh:
        payload = yaml.safe_load(fh)
    if not isinstance(payload, dict):
        raise RecordShapeError("Invalid record shape YAML structure (expected mapping)")
    return parse_record_shape(payload)
