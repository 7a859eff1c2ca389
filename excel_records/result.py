"""Conversion outputs: validation problems and the result aggregate."""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass
from typing import Generic, Optional, Tuple, TypeVar

import pandas as pd

T = TypeVar("T")


@dataclass(frozen=True)
class ValidationProblem:
    """A data-quality issue found while converting a worksheet."""

    message: str
    worksheet_name: Optional[str] = None
    cell_address: Optional[str] = None

    @property
    def location(self) -> Optional[str]:
        """``Sheet!B7`` style location, or None when no cell is involved."""

        if self.worksheet_name and self.cell_address:
            return f"{self.worksheet_name}!{self.cell_address}"
        return self.worksheet_name


@dataclass(frozen=True)
class ConversionResult(Generic[T]):
    """Outcome of one conversion call.

    ``data`` holds every record the engine constructed, in row order.
    ``validation_problems`` holds the problems in the order they were found;
    the conversion is valid when there are none.
    """

    validation_problems: Tuple[ValidationProblem, ...] = ()
    data: Tuple[T, ...] = ()

    @property
    def is_valid(self) -> bool:
        return not self.validation_problems

    def to_dataframe(self) -> pd.DataFrame:
        """Return the records as a DataFrame with one column per record field."""

        rows = [dataclasses.asdict(record) for record in self.data]
        return pd.DataFrame(rows)

    def problems_dataframe(self) -> pd.DataFrame:
        """Return the validation problems as a DataFrame."""

        return pd.DataFrame(
            [dataclasses.asdict(problem) for problem in self.validation_problems],
            columns=["message", "worksheet_name", "cell_address"],
        )
