#!/usr/bin/env python3
"""
Directory Listing Module for Megethos

Scans the immediate children of a directory, measures the logical and
allocated size of each one (recursively for subdirectories), orders the
result and folds it into table rows with grand totals.

Symbolic links are never followed: a link in the scanned directory is listed
with its own lstat sizes, and links inside a subtree are not counted.
"""

import os
import pathlib
from dataclasses import dataclass
from typing import Callable, Optional

# ---------------------------------------------------------------------------
# Errors
# ---------------------------------------------------------------------------


class ListingError(Exception):
    """Base class for failures while listing a directory"""

    message = "Cannot read"

    def __init__(self, path: str, error: OSError):
        self.path = str(path)
        self.reason = error.strerror or str(error)
        super().__init__(f"{self.message} {self.path}: {self.reason}")


class DirectoryUnreadableError(ListingError):
    message = "Cannot read directory"


class MetadataUnreadableError(ListingError):
    message = "Cannot read metadata of"


# ---------------------------------------------------------------------------
# Data model
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Entry:
    """One immediate child of the scanned directory"""

    name: str
    is_directory: bool
    extension: Optional[str] = None
    logical_size: int = 0
    allocated_size: int = 0

    @property
    def kind_label(self) -> str:
        return "Dir" if self.is_directory else "File"

    @property
    def extension_label(self) -> str:
        return self.extension or "-"


@dataclass(frozen=True)
class ListingResult:
    root: str
    entries: tuple[Entry, ...] = ()
    errors: tuple[tuple[str, str], ...] = ()


@dataclass(frozen=True)
class ListingTotals:
    rows: tuple[tuple[int, Entry], ...] = ()
    total_logical: int = 0
    total_allocated: int = 0


# ---------------------------------------------------------------------------
# Sizing
# ---------------------------------------------------------------------------


def extension_for(name: str) -> Optional[str]:
    """Return the text after the last '.' of a file name, or None"""
    return os.path.splitext(name)[1][1:] or None


def allocated_bytes(stat_result: os.stat_result) -> int:
    """Disk space actually consumed, 0 where the platform has no st_blocks"""
    blocks = getattr(stat_result, "st_blocks", None)
    if blocks is None:
        return 0
    return blocks * 512


def measure_file(path: str) -> tuple[int, int]:
    """Return (logical_size, allocated_size) for a single file"""
    stat_result = os.lstat(path)
    return stat_result.st_size, allocated_bytes(stat_result)


def _record_failure(path: str, error: OSError, strict: bool, errors: Optional[list]):
    if strict:
        raise MetadataUnreadableError(path, error) from error
    if errors is not None:
        errors.append((str(path), error.strerror or str(error)))


def measure_tree(path: str, strict: bool = False, errors: Optional[list] = None) -> tuple[int, int]:
    """Return (logical_size, allocated_size) summed over every regular file below *path*

    Directories themselves contribute nothing. Unreadable children raise
    MetadataUnreadableError when *strict*, otherwise they are appended to
    *errors* as (path, reason) and skipped.
    """
    logical = 0
    allocated = 0
    pending = [str(path)]

    while pending:
        current = pending.pop()
        try:
            with os.scandir(current) as it:
                children = list(it)
        except OSError as e:
            _record_failure(current, e, strict, errors)
            continue

        for child in children:
            try:
                if child.is_dir(follow_symlinks=False):
                    pending.append(child.path)
                    continue
                if not child.is_file(follow_symlinks=False):
                    continue
                stat_result = child.stat(follow_symlinks=False)
            except OSError as e:
                _record_failure(child.path, e, strict, errors)
                continue

            logical += stat_result.st_size
            allocated += allocated_bytes(stat_result)

    return logical, allocated


# ---------------------------------------------------------------------------
# Scanning
# ---------------------------------------------------------------------------


def _build_entry(child: os.DirEntry, strict: bool, errors: list) -> Entry:
    is_directory = child.is_dir(follow_symlinks=False)
    if is_directory:
        logical, allocated = measure_tree(child.path, strict=strict, errors=errors)
        return Entry(child.name, True, None, logical, allocated)

    is_regular = child.is_file(follow_symlinks=False)
    logical, allocated = measure_file(child.path)
    return Entry(
        name=child.name,
        is_directory=False,
        extension=extension_for(child.name) if is_regular else None,
        logical_size=logical,
        allocated_size=allocated,
    )


def scan_directory(
    root,
    strict: bool = False,
    progress_callback: Optional[Callable[[str], None]] = None,
) -> ListingResult:
    """Scan and measure the immediate children of *root*

    Args:
        root: Directory to list
        strict: Abort on the first unreadable entry instead of skipping it
        progress_callback: Called with each child's name before it is measured

    Returns:
        ListingResult with entries in scan order and any skipped paths

    Raises:
        DirectoryUnreadableError: if *root* cannot be opened or listed
        MetadataUnreadableError: if *strict* and any entry cannot be read
    """
    root = str(pathlib.Path(root))
    try:
        with os.scandir(root) as it:
            children = list(it)
    except OSError as e:
        raise DirectoryUnreadableError(root, e) from e

    entries: list[Entry] = []
    errors: list[tuple[str, str]] = []

    for child in children:
        if progress_callback:
            progress_callback(child.name)
        try:
            entries.append(_build_entry(child, strict, errors))
        except OSError as e:
            _record_failure(child.path, e, strict, errors)

    return ListingResult(root=root, entries=tuple(entries), errors=tuple(errors))


# ---------------------------------------------------------------------------
# Ordering and totals
# ---------------------------------------------------------------------------


def sort_entries(entries) -> list[Entry]:
    """Directories first, ordered case-insensitively by name, then files in scan order"""
    directories = sorted((e for e in entries if e.is_directory), key=lambda e: e.name.casefold())
    files = [e for e in entries if not e.is_directory]
    return directories + files


def summarize(entries) -> ListingTotals:
    """Number the entries from 1 and total both sizes"""
    entries = tuple(entries)
    return ListingTotals(
        rows=tuple(enumerate(entries, start=1)),
        total_logical=sum(e.logical_size for e in entries),
        total_allocated=sum(e.allocated_size for e in entries),
    )
