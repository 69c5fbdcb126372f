"""
Console reporter for validation results.

Formats validation results using Rich for clear, colored output.
"""

from rich.console import Console
from rich.markup import escape
from rich.table import Table

from pirload.validation.core import ValidationResult


class ConsoleReporter:
    """Formats and displays validation results to the console."""

    def __init__(self, console: Console) -> None:
        """
        Initialize console reporter.

        Args:
            console: Rich Console instance for output.
        """
        self.console = console

    def print_result(self, result: ValidationResult) -> None:
        """
        Print a validation result as a formatted table.

        Args:
            result: Validation result to display.
        """
        table = Table(title="Column Validation", show_header=True)
        table.add_column("Source", style="cyan", no_wrap=True)
        table.add_column("Column", style="blue")
        table.add_column("Bit width", justify="right")
        table.add_column("Allowed range", justify="right")
        table.add_column("Rows checked", justify="right")
        table.add_column("Status", justify="center")

        table.add_row(
            escape(str(result.source)),
            escape(result.column),
            str(result.bit_width),
            f"[0, {result.max_value}]",
            str(result.rows_checked),
            self._format_status(result),
        )
        self.console.print(table)

        if not result.valid:
            self._print_violation(result)

    def _format_status(self, result: ValidationResult) -> str:
        """Format validation status with color."""
        if result.valid:
            return "[green]Pass[/green]"
        return "[red]Fail[/red]"

    def _print_violation(self, result: ValidationResult) -> None:
        """Print details of the first violation."""
        self.console.print()
        self.console.print(f"[bold red]Validation error ({result.kind.value}):[/bold red]")
        if result.row is not None:
            self.console.print(f"  Row: {result.row}")
            self.console.print(f"  Value: {escape(repr(result.raw))}")
        if result.message:
            self.console.print(f"  {escape(result.message)}")
        self.console.print(
            f"  Values must lie in [0, {result.max_value}] for d={result.bit_width}"
        )
