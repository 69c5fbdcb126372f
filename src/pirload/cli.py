"""Command-line interface for pirload."""

from pathlib import Path
from typing import Annotated

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from pirload.config.settings import AppConfig, OverflowPolicy
from pirload.errors import IngestionError
from pirload.utils.logging import configure_logging

app = typer.Typer(
    name="pirload",
    help="Load and validate integer columns as PIR databases.",
    no_args_is_help=True,
)

console = Console()

ConfigOption = Annotated[
    Path | None,
    typer.Option(
        "--config",
        help="Path to configuration YAML file.",
        exists=True,
        dir_okay=False,
    ),
]
BitsOption = Annotated[
    int | None,
    typer.Option("--bits", "-d", help="Bits per entry (1-64).", min=1, max=64),
]
ColumnOption = Annotated[
    str | None,
    typer.Option("--column", "-c", help="Column name. Defaults to the first column."),
]
HeaderOption = Annotated[
    bool | None,
    typer.Option("--header/--no-header", help="Whether CSV input starts with a header line."),
]
RowCapOption = Annotated[
    int | None,
    typer.Option("--row-cap", help="Maximum rows to load (0 = no cap).", min=0),
]
OverflowOption = Annotated[
    OverflowPolicy | None,
    typer.Option("--overflow", help="Treatment of values that exceed the bit width."),
]
DelimiterOption = Annotated[
    str | None,
    typer.Option("--delimiter", help="CSV field delimiter."),
]


@app.callback()
def main(
    ctx: typer.Context,
    log_level: Annotated[
        str | None,
        typer.Option("--log-level", help="Log level (DEBUG, INFO, WARNING, ERROR)."),
    ] = None,
    json_logs: Annotated[
        bool,
        typer.Option("--json-logs", help="Emit logs as JSON lines on stderr."),
    ] = False,
) -> None:
    """Load and validate integer columns as PIR databases."""
    ctx.obj = {"log_level": log_level, "json_logs": json_logs}
    try:
        configure_logging(level=log_level or "INFO", json_output=json_logs)
    except ValueError as e:
        console.print(f"[red]{escape(str(e))}[/red]")
        raise typer.Exit(code=1) from e


def _load_app_config(
    ctx: typer.Context,
    config: Path | None,
    **overrides: object,
) -> AppConfig:
    """Load configuration, apply command-line overrides and reconfigure logging."""
    from pirload.config.loader import apply_overrides, load_config

    try:
        app_config = load_config(config) if config is not None else AppConfig()
        app_config = apply_overrides(app_config, **overrides)
    except (OSError, ValueError) as e:
        console.print(f"[red]Invalid configuration: {escape(str(e))}[/red]")
        raise typer.Exit(code=1) from e

    options = ctx.obj or {}
    configure_logging(
        level=options.get("log_level") or app_config.logging.level,
        json_output=options.get("json_logs") or app_config.logging.json_output,
    )
    return app_config


def _fail(error: IngestionError) -> typer.Exit:
    console.print(f"[red]Error: {escape(error.message)}[/red]")
    return typer.Exit(code=1)


@app.command()
def detect(
    path: Annotated[Path, typer.Argument(help="Source file.")],
) -> None:
    """Show the detected file format."""
    from pirload.ingestion import FileFormat, detect_file_format

    file_format = detect_file_format(path)
    if file_format is FileFormat.UNRECOGNIZED:
        console.print(f"[red]Unrecognized format: {escape(str(path))}[/red]")
        raise typer.Exit(code=1)
    console.print(file_format.value)


@app.command()
def stats(
    ctx: typer.Context,
    path: Annotated[Path, typer.Argument(help="Source file.")],
    bits: BitsOption = None,
    column: ColumnOption = None,
    header: HeaderOption = None,
    delimiter: DelimiterOption = None,
    config: ConfigOption = None,
) -> None:
    """Print descriptive statistics for a source column."""
    from pirload.stats import StatsReporter, source_stats

    app_config = _load_app_config(
        ctx,
        config,
        bit_width=bits,
        column=column,
        has_header=header,
        delimiter=delimiter,
    )
    try:
        result = source_stats(path, app_config.ingestion)
    except IngestionError as e:
        raise _fail(e) from e

    StatsReporter(console).print_stats(result)


@app.command()
def validate(
    ctx: typer.Context,
    path: Annotated[Path, typer.Argument(help="Source file.")],
    bits: BitsOption = None,
    column: ColumnOption = None,
    header: HeaderOption = None,
    overflow: OverflowOption = None,
    delimiter: DelimiterOption = None,
    config: ConfigOption = None,
) -> None:
    """Check that every value in the column fits the bit width."""
    from pirload.validation import ConsoleReporter, validate_column

    app_config = _load_app_config(
        ctx,
        config,
        bit_width=bits,
        column=column,
        has_header=header,
        overflow=overflow,
        delimiter=delimiter,
    )
    try:
        result = validate_column(path, app_config.ingestion)
    except IngestionError as e:
        raise _fail(e) from e

    ConsoleReporter(console).print_result(result)
    if not result.valid:
        raise typer.Exit(code=1)


@app.command()
def load(
    ctx: typer.Context,
    path: Annotated[Path, typer.Argument(help="Source file.")],
    query: Annotated[
        int,
        typer.Option("--query", "-q", help="Entry index to read back after loading."),
    ] = 0,
    bits: BitsOption = None,
    column: ColumnOption = None,
    header: HeaderOption = None,
    row_cap: RowCapOption = None,
    overflow: OverflowOption = None,
    delimiter: DelimiterOption = None,
    config: ConfigOption = None,
) -> None:
    """Ingest a source into the in-memory engine and read back one entry."""
    from pirload.engine import InMemoryEngine
    from pirload.etl import run_ingestion

    app_config = _load_app_config(
        ctx,
        config,
        bit_width=bits,
        column=column,
        has_header=header,
        row_cap=row_cap,
        overflow=overflow,
        delimiter=delimiter,
    )
    try:
        result = run_ingestion(path, app_config.ingestion, InMemoryEngine(app_config.engine))
    except IngestionError as e:
        raise _fail(e) from e

    report = result.load_report
    table = Table(title="Ingestion Results")
    table.add_column("Metric", style="cyan")
    table.add_column("Value", style="green", justify="right")
    table.add_row("Format", result.format.value)
    table.add_row("Entries (N)", f"{result.row_count:,}")
    table.add_row("Bits per entry (d)", str(result.bit_width))
    table.add_row("Rows loaded", f"{report.rows_loaded:,}")
    table.add_row("Empty cells", str(report.n_empty))
    table.add_row("Malformed cells", str(report.n_malformed))
    table.add_row("Clamped values", str(report.n_clamped))
    table.add_row("Reduced values", str(report.n_reduced))
    table.add_row("Database size", f"{result.handle.size_bytes:,} bytes")
    console.print(table)

    try:
        entry = result.handle.get(query)
    except IndexError as e:
        console.print(f"[red]Error: {escape(str(e))}[/red]")
        raise typer.Exit(code=1) from e
    console.print(escape(f"entry[{query}] = {entry}"))


@app.command()
def bits(
    value: Annotated[int, typer.Argument(help="Non-negative integer.")],
) -> None:
    """Show the minimum bit width needed to store a value."""
    from pirload.ingestion import calculate_bit_size

    try:
        width = calculate_bit_size(value)
    except ValueError as e:
        console.print(f"[red]Error: {escape(str(e))}[/red]")
        raise typer.Exit(code=1) from e
    console.print(str(width))


@app.command()
def version() -> None:
    """Show version information."""
    from pirload import __version__

    console.print(f"pirload version {__version__}")


if __name__ == "__main__":
    app()
