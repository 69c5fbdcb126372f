"""
Reporter for source statistics.

Formats statistics for console output using Rich.
"""

from rich.console import Console
from rich.markup import escape
from rich.table import Table

from pirload.stats.core import SourceStats


class StatsReporter:
    """Formats and displays source statistics."""

    def __init__(self, console: Console | None = None) -> None:
        """
        Initialize reporter.

        Args:
            console: Rich console for output. Creates new if not provided.
        """
        self.console = console or Console()

    def print_stats(self, stats: SourceStats) -> None:
        """
        Print statistics as a two-column table.

        Args:
            stats: SourceStats to display.
        """
        table = Table(title="Database Statistics")
        table.add_column("Metric", style="cyan")
        table.add_column("Value", style="green", justify="right")

        table.add_row("File", escape(str(stats.path)))
        table.add_row("Format", stats.format.value)
        table.add_row("Column", escape(stats.column))
        table.add_row("Rows (N)", f"{stats.row_count:,}")
        table.add_row("Bits per entry (d)", str(stats.bit_width))
        table.add_row("Maximum allowed value", f"{stats.max_allowed:,}")
        table.add_row("Observed minimum", self._format_optional(stats.observed_min))
        table.add_row("Observed maximum", self._format_observed_max(stats))
        table.add_row(
            "Storage size",
            f"{stats.storage_bytes:,} bytes ({stats.storage_mib:.2f} MiB)",
        )
        self.console.print(table)

    def _format_optional(self, value: int | None) -> str:
        return "-" if value is None else f"{value:,}"

    def _format_observed_max(self, stats: SourceStats) -> str:
        """Highlight an observed maximum that exceeds the bit width."""
        text = self._format_optional(stats.observed_max)
        if not stats.fits:
            return f"[red]{text}[/red]"
        return text
