#!/usr/bin/env python3
"""
Auxiliary utility functions for Megethos

Size formatting, size tier classification and path display helpers shared
by the listing pipeline and the console UI.
"""

import os
import pathlib
from dataclasses import dataclass
from enum import Enum
from typing import Optional

SIZE_UNITS = ["B", "KB", "MB", "GB", "TB", "PB", "EB"]


def format_size(size_bytes: int) -> str:
    """Format byte size into a human-readable string using base-1000 units

    Args:
        size_bytes: Size in bytes to format

    Returns:
        Formatted string like "1.23 GB", "345.00 MB" or "789 B"
    """
    if size_bytes < 1000:
        return f"{size_bytes} B"

    value = float(size_bytes)
    unit_index = 0
    # Compare the rounded value so 999_995 bytes reads "1.00 MB", not "1000.00 KB"
    while round(value, 2) >= 1000 and unit_index < len(SIZE_UNITS) - 1:
        value /= 1000
        unit_index += 1
    return f"{value:.2f} {SIZE_UNITS[unit_index]}"


def display_text(text: str) -> str:
    """Replace undecodable filename bytes (surrogate escapes) with U+FFFD"""
    return text.encode("utf-8", "surrogateescape").decode("utf-8", "replace")


class SizeTier(Enum):
    ALERT = "alert"
    WARNING = "warning"
    NORMAL = "normal"


TIER_STYLES = {
    SizeTier.ALERT: "bright_red",
    SizeTier.WARNING: "yellow",
    SizeTier.NORMAL: "pale_green1",
}


@dataclass(frozen=True)
class SizeThresholds:
    """Byte-count boundaries for the three size tiers"""

    alert_min: int
    warning_above: int
    warning_max: Optional[int] = None  # inclusive; None means up to alert_min

    def classify(self, size_bytes: int) -> Optional[SizeTier]:
        """Return the tier for a byte count, or None if it falls into no tier"""
        if size_bytes >= self.alert_min:
            return SizeTier.ALERT
        if size_bytes > self.warning_above:
            if self.warning_max is None or size_bytes <= self.warning_max:
                return SizeTier.WARNING
            return None
        return SizeTier.NORMAL


# 1 GB and above is an alert, above 500 MB a warning
DEFAULT_THRESHOLDS = SizeThresholds(alert_min=1_000_000_000, warning_above=500_000_000)

# Sizes between 1 GiB and 50 GB are left uncolored
LEGACY_THRESHOLDS = SizeThresholds(
    alert_min=50_000_000_000,
    warning_above=524_288_000,
    warning_max=1_073_741_824,
)


def size_style(size_bytes: int, thresholds: SizeThresholds = DEFAULT_THRESHOLDS) -> str:
    """Rich style for a byte count, empty string when unclassified"""
    tier = thresholds.classify(size_bytes)
    return TIER_STYLES[tier] if tier else ""


def format_path_for_display(path: str, home_path: Optional[str] = None) -> str:
    """Format file path for display by replacing home directory with ~

    Args:
        path: File path to format
        home_path: Home directory path (defaults to platform home)

    Returns:
        Path with home directory replaced by ~ if applicable
    """
    if home_path is None:
        home_path = str(pathlib.Path.home())

    if path == home_path or path.startswith(home_path + os.sep):
        path = "~" + path[len(home_path) :]
    return display_text(path)
