"""Timing harness for read_data on a generated workbook."""

# Module responsibilities:
# - Generate a headed benchmark workbook with pandas when it does not exist.
# - Convert it repeatedly and report rows per second.

from __future__ import annotations

import argparse
import sys
import time
from dataclasses import dataclass
from datetime import date, timedelta
from pathlib import Path
from typing import Optional

import pandas as pd

from excel_records import column, read_data, worksheet
from excel_records.utils.log import get_logger

logger = get_logger("tools.benchmark")


@worksheet("Sheet1", has_headings=True)
@dataclass
class BenchmarkRow:
    First: Optional[int] = column()
    Second: Optional[float] = column()
    Third: Optional[str] = column()
    Fourth: Optional[str] = column()
    Fifth: Optional[date] = column()


def _generate_workbook(path: Path, rows: int) -> None:
    start = date(2020, 1, 1)
    frame = pd.DataFrame(
        {
            "First": range(1, rows + 1),
            "Second": [n * 1.5 for n in range(rows)],
            "Third": [f"text {n}" for n in range(rows)],
            "Fourth": [f"more {n % 17}" for n in range(rows)],
            "Fifth": [start + timedelta(days=n % 365) for n in range(rows)],
        }
    )
    path.parent.mkdir(parents=True, exist_ok=True)
    frame.to_excel(path, sheet_name="Sheet1", index=False)
    logger.info("Generated benchmark workbook %s with %s rows", path, rows)


def parse_args(argv: list[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="excel_records read_data benchmark")
    parser.add_argument("--workbook", type=Path, default=Path("benchmark.xlsx"))
    parser.add_argument("--rows", type=int, default=10_000)
    parser.add_argument("--repeat", type=int, default=3)
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv or sys.argv[1:])
    if not args.workbook.exists():
        _generate_workbook(args.workbook, args.rows)

    timings = []
    for _ in range(args.repeat):
        started = time.perf_counter()
        result = read_data(BenchmarkRow, args.workbook)
        timings.append(time.perf_counter() - started)
        if not result.is_valid:
            print(f"Error: {result.validation_problems[0].message}", file=sys.stderr)
            return 1

    best = min(timings)
    print(f"Rows: {len(result.data)}")
    print(f"Best of {args.repeat}: {best:.3f}s ({len(result.data) / best:,.0f} rows/s)")
    return 0


if __name__ == "__main__":
    sys.exit(main())
