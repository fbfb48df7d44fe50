#!/usr/bin/env python3
"""
Console UI Module using Rich

Provides the console interface for Megethos: styled status messages, an
activity spinner for long scans, and the color-coded listing table.
"""

from typing import Optional

from rich import box
from rich.console import Console
from rich.progress import Progress, SpinnerColumn, TextColumn, TimeElapsedColumn
from rich.table import Table
from rich.text import Text

from auxiliary import (
    DEFAULT_THRESHOLDS,
    SizeThresholds,
    display_text,
    format_path_for_display,
    format_size,
    size_style,
)
from directory_listing import ListingTotals

LISTING_COLUMNS = ["No.", "File Name", "File Extension", "File Type", "File Size", "File Disk Size"]


class ConsoleUI:
    """Console UI handler using Rich"""

    def __init__(self, force_terminal: Optional[bool] = None, console: Optional[Console] = None):
        """Initialize console with optional terminal forcing or an existing Console"""
        self.console = console or Console(force_terminal=force_terminal, highlight=False)

    # Basic styled output methods
    def print_error(self, message: str):
        """Print error message in red"""
        self.console.print(display_text(message), style="red bold", markup=False)

    def print_warning(self, message: str):
        """Print warning message in yellow"""
        self.console.print(display_text(message), style="yellow", markup=False)

    def print_info(self, message: str):
        """Print info message in cyan"""
        self.console.print(display_text(message), style="cyan", markup=False)

    # Progress
    def create_activity_progress(self):
        """Create a Rich progress context manager for activity-only display (no counts)"""
        return Progress(
            SpinnerColumn(),
            TextColumn("{task.description}", markup=False),
            TimeElapsedColumn(),
            console=self.console,
            transient=True,
        )

    # Listing display
    def size_text(self, size_bytes: int, thresholds: SizeThresholds = DEFAULT_THRESHOLDS) -> Text:
        """Human-readable size colored by its tier"""
        return Text(format_size(size_bytes), style=size_style(size_bytes, thresholds))

    def build_listing_table(self, totals: ListingTotals, thresholds: SizeThresholds = DEFAULT_THRESHOLDS) -> Table:
        """Build the bordered listing table, one row per entry"""
        table = Table(box=box.ROUNDED, header_style="bold", show_lines=False)
        table.add_column(LISTING_COLUMNS[0], justify="center")
        # Names are left-aligned under a centered header
        table.add_column(Text(LISTING_COLUMNS[1], justify="center"), justify="left")
        for title in LISTING_COLUMNS[2:]:
            table.add_column(title, justify="center")

        for index, entry in totals.rows:
            table.add_row(
                str(index),
                Text(display_text(entry.name)),
                display_text(entry.extension_label),
                entry.kind_label,
                self.size_text(entry.logical_size, thresholds),
                self.size_text(entry.allocated_size, thresholds),
            )
        return table

    def show_listing(self, totals: ListingTotals, thresholds: SizeThresholds = DEFAULT_THRESHOLDS):
        """Print the listing table followed by the size totals"""
        self.console.print(self.build_listing_table(totals, thresholds))
        self.console.print()
        self.console.print(Text("Total Size: ").append_text(self.size_text(totals.total_logical, thresholds)))
        self.console.print(
            Text("Total Disks Size: ").append_text(self.size_text(totals.total_allocated, thresholds))
        )

    def show_skipped(self, errors: list[tuple[str, str]], show_limit: int = 10):
        """Show paths that were skipped because they could not be read"""
        if not errors:
            return

        self.console.print()
        self.print_warning(f"Skipped {len(errors)} unreadable entries:")
        for path, reason in errors[:show_limit]:
            self.console.print(f"  • {format_path_for_display(path)}: {reason}", style="yellow dim", markup=False)

        if len(errors) > show_limit:
            remaining = len(errors) - show_limit
            self.console.print(f"[yellow dim]  • ... and {remaining} more[/yellow dim]")
