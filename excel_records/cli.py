"""
RESPONSIBILITIES
- Minimal Typer CLI around the excel_records conversion engine.
- Converts a worksheet using a YAML record shape and previews the records.
PROCESS OVERVIEW
1. convert -> load the YAML shape, run read_data, report problems, preview/export records.
2. headings -> print the heading row of a worksheet with its column letters.
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional

import typer

from .attributes import RecordShape
from .columns import column_index_to_name
from .engine import read_data
from .errors import ConfigurationError
from .headings import read_headings
from .reader import open_workbook
from .schema import load_record_shape
from .utils.log import get_logger

app = typer.Typer(help="Convert worksheet rows into typed records.")
logger = get_logger("cli")


@app.command("convert")
def convert_command(
    workbook: Path = typer.Argument(..., exists=True, file_okay=True, dir_okay=False, readable=True, help="Workbook (.xlsx) to read."),
    shape: Path = typer.Option(..., "--shape", exists=True, readable=True, help="YAML record shape."),
    limit: int = typer.Option(5, help="Preview row limit."),
    csv_path: Optional[Path] = typer.Option(None, "--csv", help="Write the converted records to this CSV file."),
) -> None:
    """Convert the worksheet described by SHAPE and show a preview."""

    try:
        record_type = load_record_shape(shape)
        result = read_data(record_type, workbook)
    except ConfigurationError as exc:
        typer.secho(f"Configuration error: {exc}", err=True, fg=typer.colors.RED)
        raise typer.Exit(code=2) from exc

    typer.echo(f"Converted {len(result.data)} records")
    for problem in result.validation_problems:
        typer.secho(f"- [{problem.location}] {problem.message}", err=True, fg=typer.colors.YELLOW)

    frame = result.to_dataframe()
    if not frame.empty:
        typer.echo(frame.head(limit).to_string(index=False))
    if csv_path is not None:
        frame.to_csv(csv_path, index=False)
        logger.info("Wrote %s records to %s", len(frame), csv_path)
        typer.echo(f"Wrote {csv_path}")

    if not result.is_valid:
        raise typer.Exit(code=1)


@app.command("headings")
def headings_command(
    workbook: Path = typer.Argument(..., exists=True, file_okay=True, dir_okay=False, readable=True, help="Workbook (.xlsx) to read."),
    sheet: str = typer.Option(..., help="Worksheet name."),
    row: int = typer.Option(1, min=1, help="One-based heading row."),
) -> None:
    """Print the heading row of SHEET with the column letter of each heading."""

    shape = RecordShape(
        record_type=object,
        worksheet_name=sheet,
        has_headings=True,
        headings_row=row,
        skip_blank_rows=False,
        fields=(),
    )
    with open_workbook(workbook) as reader:
        if not reader.open_worksheet(sheet):
            typer.secho(f"Worksheet not found: {sheet}", err=True, fg=typer.colors.RED)
            raise typer.Exit(code=1)
        headings = read_headings(reader, shape)

    if not any(headings):
        typer.secho(f"No headings on row {row} of {sheet}", err=True, fg=typer.colors.YELLOW)
        raise typer.Exit(code=1)
    for column_index, heading in enumerate(headings):
        if heading:
            typer.echo(f"{column_index_to_name(column_index)}\t{heading}")


def main() -> None:
    app()


if __name__ == "__main__":
    main()
