"""Rich-based run reporter implementation."""
from __future__ import annotations

import logging
import sys
from collections.abc import Iterable
from pathlib import Path
from typing import Optional

from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.panel import Panel
from rich.progress import (
    BarColumn,
    MofNCompleteColumn,
    Progress,
    SpinnerColumn,
    TaskID,
    TextColumn,
    TimeElapsedColumn,
)
from rich.table import Table
from rich.text import Text

from ..core.models import CategoryMapping, RunSummary
from ..persistence.database import HistoryRow


def configure_logging(verbose: bool = False, console: Optional[Console] = None) -> None:
    """Route library logging through Rich.

    Warnings and errors are always shown; ``verbose`` adds debug records.
    """
    handler = RichHandler(
        console=console or Console(stderr=True),
        show_path=False,
        show_time=False,
        markup=False,
    )
    package_logger = logging.getLogger("filemover")
    package_logger.handlers[:] = [handler]
    package_logger.setLevel(logging.DEBUG if verbose else logging.WARNING)


class RichRunReporter:
    """Run reporter using Rich for terminal output.

    Implements the RunReporter protocol with Rich console output.
    """

    def __init__(
        self,
        verbose: bool = False,
        quiet: bool = False,
        console: Optional[Console] = None,
    ):
        """Initialize the reporter.

        Args:
            verbose: Enable verbose output.
            quiet: Suppress all non-essential output.
            console: Console to print to (default: stderr).
        """
        self._console = console or Console(stderr=True)
        self._verbose = verbose
        self._quiet = quiet
        self._progress: Optional[Progress] = None
        self._current_task_id: Optional[TaskID] = None

    @property
    def console(self) -> Console:
        return self._console

    # --- Phase Management ---

    def start_phase(self, name: str, total: int) -> None:
        """Start a new processing phase with progress bar."""
        if self._quiet or total == 0:
            return

        self._progress = Progress(
            SpinnerColumn(),
            TextColumn("[bold blue]{task.description}"),
            BarColumn(bar_width=40),
            MofNCompleteColumn(),
            TextColumn("[cyan]•"),
            TimeElapsedColumn(),
            console=self._console,
            transient=True,
        )
        self._progress.start()
        self._current_task_id = self._progress.add_task(name, total=total)

    def advance_phase(self, amount: int = 1) -> None:
        """Advance the current phase by amount."""
        if self._progress and self._current_task_id is not None:
            self._progress.advance(self._current_task_id, amount)

    def end_phase(self) -> None:
        """End the current phase."""
        if self._progress:
            self._progress.stop()
            self._progress = None
            self._current_task_id = None

    # --- Logging Methods ---
    # Messages are plain text; names in them may contain brackets

    def info(self, message: str) -> None:
        """Log an info message."""
        if not self._quiet:
            self._console.print(f"[blue]ℹ[/blue] {escape(message)}", highlight=False)

    def success(self, message: str) -> None:
        """Log a success message."""
        if not self._quiet:
            self._console.print(f"[green]✓[/green] {escape(message)}", highlight=False)

    def warning(self, message: str) -> None:
        """Log a warning message."""
        self._console.print(f"[yellow]⚠[/yellow] {escape(message)}", highlight=False)

    def error(self, message: str) -> None:
        """Log an error message."""
        self._console.print(f"[red]✗[/red] {escape(message)}", style="red", highlight=False)

    def debug(self, message: str) -> None:
        """Log a debug message (only in verbose mode)."""
        if self._verbose:
            self._console.print(f"[dim]  {escape(message)}[/dim]", highlight=False)

    # --- Specialized Output ---

    def print_header(self, title: str) -> None:
        """Print a styled header."""
        if self._quiet:
            return

        text = Text(title, style="bold cyan")
        self._console.print(Panel(text, border_style="cyan"))

    def print_config(self, config_items: dict) -> None:
        """Print configuration as a table."""
        if self._quiet:
            return

        table = Table(title="Configuration", show_header=True, header_style="bold")
        table.add_column("Setting", style="cyan")
        table.add_column("Value", style="white")

        for key, value in config_items.items():
            table.add_row(key, str(value))

        self._console.print(table)

    def print_summary(self, summary: RunSummary, destination_root: Optional[Path] = None) -> None:
        """Print the move summary.

        Per-category counts are suppressed in quiet mode; failures never are.
        """
        if not self._quiet:
            counts = summary.planned if summary.planned else summary.moved
            title = "Dry Run Summary" if summary.planned else "Move Process Summary"
            table = Table(title=title, show_header=True, header_style="bold")
            table.add_column("Category", style="cyan")
            table.add_column("Files", style="green", justify="right")

            for category, count in counts.items():
                table.add_row(category, str(count))

            if not counts:
                table.add_row("[dim]nothing moved[/dim]", "0")
            if summary.renamed:
                table.add_row("", "")
                table.add_row("Renamed on collision", str(summary.renamed))
            if destination_root is not None:
                table.caption = str(destination_root)

            self._console.print(table)

            if summary.skipped:
                self._print_reasons("Skipped", summary.skipped, style="yellow")

        if summary.errors:
            self._print_reasons("Failed", summary.errors, style="red")

        if summary.history_errors:
            self._print_reasons("Not recorded in history", summary.history_errors, style="red")

    def _print_reasons(self, title: str, rows: Iterable[tuple[str, str]], style: str) -> None:
        table = Table(title=title, show_header=True, header_style=f"bold {style}")
        table.add_column("File", style=style)
        table.add_column("Reason")
        for name, reason in rows:
            table.add_row(escape(name), escape(reason))
        self._console.print(table)

    def print_categories(self, mapping: CategoryMapping) -> None:
        """Print the extension table grouped by category."""
        table = Table(title="Categories", show_header=True, header_style="bold")
        table.add_column("Category", style="cyan")
        table.add_column("Extensions")

        for category in mapping.categories:
            extensions = sorted(ext for ext, cat in mapping.items() if cat == category)
            table.add_row(category, ", ".join(extensions))

        self._console.print(table)

    def print_history(self, rows: list[HistoryRow]) -> None:
        """Print history rows, newest first."""
        table = Table(title="Move History", show_header=True, header_style="bold")
        table.add_column("Date", style="dim")
        table.add_column("File", style="cyan")
        table.add_column("Type")
        table.add_column("Destination")

        for row in rows:
            table.add_row(
                row.create_date.strftime("%Y-%m-%d %H:%M:%S"),
                escape(row.file_name),
                escape(row.file_type),
                escape(row.destination_path),
            )

        self._console.print(table)

    # --- Context Managers ---

    def __enter__(self) -> "RichRunReporter":
        return self

    def __exit__(self, *args) -> None:
        self.end_phase()


class QuietRunReporter:
    """Minimal reporter that only shows problems."""

    def start_phase(self, name: str, total: int) -> None:
        pass

    def advance_phase(self, amount: int = 1) -> None:
        pass

    def end_phase(self) -> None:
        pass

    def info(self, message: str) -> None:
        pass

    def success(self, message: str) -> None:
        pass

    def warning(self, message: str) -> None:
        print(f"WARNING: {message}", file=sys.stderr)

    def error(self, message: str) -> None:
        print(f"ERROR: {message}", file=sys.stderr)

    def debug(self, message: str) -> None:
        pass

    def print_header(self, title: str) -> None:
        pass

    def print_config(self, config_items: dict) -> None:
        pass

    def print_summary(self, summary: RunSummary, destination_root: Optional[Path] = None) -> None:
        for name, reason in summary.errors:
            print(f"ERROR: {name}: {reason}", file=sys.stderr)
        for name, reason in summary.history_errors:
            print(f"ERROR: history not recorded for {name}: {reason}", file=sys.stderr)

    def print_categories(self, mapping: CategoryMapping) -> None:
        for category in mapping.categories:
            extensions = sorted(ext for ext, cat in mapping.items() if cat == category)
            print(f"{category}: {','.join(extensions)}")

    def print_history(self, rows: list[HistoryRow]) -> None:
        for row in rows:
            print(f"{row.create_date.isoformat(sep=' ')}\t{row.file_name}\t{row.file_type}\t{row.destination_path}")

    def __enter__(self) -> "QuietRunReporter":
        return self

    def __exit__(self, *args) -> None:
        pass
