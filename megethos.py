#!/usr/bin/env python3
"""
Megethos — Ancient Greek μέγεθος (size, magnitude)

A directory size lister. Shows every immediate child of a directory with
its logical size and the disk space it actually occupies, adding up whole
subtrees for folders, in a color-coded table with grand totals.

Usage:
    megethos                       # List the current directory
    megethos <path>                # List another directory
    megethos <path> --strict       # Abort on the first unreadable entry
    megethos --legacy-colors       # Use the older, gapped color thresholds
"""

import argparse
import os
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from auxiliary import DEFAULT_THRESHOLDS, LEGACY_THRESHOLDS, SizeThresholds, display_text, format_path_for_display
from console_ui import ConsoleUI
from directory_listing import ListingError, ListingResult, ListingTotals, scan_directory, sort_entries, summarize

# ---------------------------------------------------------------------------
# Options
# ---------------------------------------------------------------------------


@dataclass
class ListingOptions:
    root: Path
    strict: bool = False
    thresholds: SizeThresholds = DEFAULT_THRESHOLDS

    @classmethod
    def from_args(cls, args: argparse.Namespace) -> "ListingOptions":
        root = Path(args.path) if getattr(args, "path", None) else Path(os.getcwd())
        return cls(
            root=root,
            strict=getattr(args, "strict", False),
            thresholds=LEGACY_THRESHOLDS if getattr(args, "legacy_colors", False) else DEFAULT_THRESHOLDS,
        )


# ---------------------------------------------------------------------------
# Megethos
# ---------------------------------------------------------------------------


class Megethos:
    """Main application class for the Megethos directory size lister."""

    def __init__(self, options: ListingOptions, ui: Optional[ConsoleUI] = None):
        self.options = options
        self.ui = ui or ConsoleUI()

    def scan(self) -> ListingResult:
        root = self.options.root
        if not self.ui.console.is_terminal:
            return scan_directory(root, strict=self.options.strict)

        progress = self.ui.create_activity_progress()
        with progress:
            task = progress.add_task(f"Measuring {format_path_for_display(str(root))}", total=None)

            def on_entry(name: str):
                progress.update(task, description=f"Measuring {display_text(name)}")

            return scan_directory(root, strict=self.options.strict, progress_callback=on_entry)

    def report(self, result: ListingResult) -> ListingTotals:
        totals = summarize(sort_entries(result.entries))
        self.ui.show_listing(totals, self.options.thresholds)
        self.ui.show_skipped(list(result.errors))
        return totals

    def run(self) -> int:
        root = self.options.root
        if root.exists() and not root.is_dir():
            self.ui.print_error(f"Not a directory: {root}")
            return 1

        try:
            result = self.scan()
        except ListingError as e:
            self.ui.print_error(str(e))
            return 1

        try:
            self.report(result)
        except OSError as e:
            # stdout is gone, report on stderr
            print(f"Failed to print listing: {e}", file=sys.stderr)
            return 1
        return 0


# ---------------------------------------------------------------------------
# CLI
# ---------------------------------------------------------------------------


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="megethos",
        description="Megethos — directory size lister",
    )
    parser.add_argument("path", nargs="?", help="Directory to list (defaults to the current directory)")
    parser.add_argument("--strict", action="store_true", help="Abort on the first unreadable entry")
    parser.add_argument(
        "--legacy-colors",
        action="store_true",
        help="Color sizes with the legacy thresholds (alert at 50 GB, nothing between 1 GiB and 50 GB)",
    )
    return parser


def main(argv: Optional[list[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    app = Megethos(ListingOptions.from_args(args))
    return app.run()


if __name__ == "__main__":
    sys.exit(main())
