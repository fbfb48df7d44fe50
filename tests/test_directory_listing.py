"""Tests for scanning, sizing, ordering and totalling directory entries."""

import os
import sys

import pytest

from directory_listing import (
    DirectoryUnreadableError,
    Entry,
    MetadataUnreadableError,
    extension_for,
    measure_tree,
    scan_directory,
    sort_entries,
    summarize,
)

needs_symlinks = pytest.mark.skipif(sys.platform == "win32", reason="symlinks need privileges on Windows")


def write(path, size):
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(b"x" * size)


@pytest.fixture
def sample_dir(tmp_path):
    """empty/, notes.txt (10 bytes) and data (5 bytes)"""
    (tmp_path / "empty").mkdir()
    write(tmp_path / "notes.txt", 10)
    write(tmp_path / "data", 5)
    return tmp_path


@pytest.fixture
def nested_dir(tmp_path):
    write(tmp_path / "tree" / "a.bin", 100)
    write(tmp_path / "tree" / "one" / "b.bin", 20)
    write(tmp_path / "tree" / "one" / "two" / "c.bin", 3)
    write(tmp_path / "tree" / "one" / "two" / "three" / "d.bin", 4000)
    (tmp_path / "tree" / "one" / "hollow").mkdir()
    write(tmp_path / "top.log", 7)
    return tmp_path


def by_name(result):
    return {e.name: e for e in result.entries}


@pytest.mark.parametrize(
    "name, expected",
    [
        ("notes.txt", "txt"),
        ("archive.tar.gz", "gz"),
        ("data", None),
        (".bashrc", None),
        ("trailing.", None),
    ],
)
def test_extension_for(name, expected):
    assert extension_for(name) == expected


def test_scan_lists_each_immediate_child_once(sample_dir):
    result = scan_directory(sample_dir)

    assert sorted(e.name for e in result.entries) == ["data", "empty", "notes.txt"]
    assert result.errors == ()


def test_scan_fills_entry_fields(sample_dir):
    entries = by_name(scan_directory(sample_dir))

    assert entries["empty"].is_directory
    assert entries["empty"].extension is None
    assert entries["empty"].logical_size == 0
    assert entries["notes.txt"].extension == "txt"
    assert entries["notes.txt"].logical_size == 10
    assert entries["data"].extension is None
    assert entries["data"].extension_label == "-"
    assert entries["data"].kind_label == "File"
    assert entries["empty"].kind_label == "Dir"


def test_directory_size_sums_files_at_every_depth(nested_dir):
    entries = by_name(scan_directory(nested_dir))

    assert len(entries) == 2
    assert entries["tree"].logical_size == 100 + 20 + 3 + 4000
    assert entries["top.log"].logical_size == 7


def test_sizes_are_non_negative(nested_dir):
    for entry in scan_directory(nested_dir).entries:
        assert entry.logical_size >= 0
        assert entry.allocated_size >= 0


def test_measure_tree_matches_scanned_directory(nested_dir):
    logical, allocated = measure_tree(str(nested_dir / "tree"))
    tree = by_name(scan_directory(nested_dir))["tree"]

    assert (logical, allocated) == (tree.logical_size, tree.allocated_size)


def test_sort_puts_directories_first_in_case_insensitive_order():
    entries = [
        Entry("zeta.txt", False, "txt", 1),
        Entry("Cherry", True),
        Entry("alpha", False, None, 2),
        Entry("Banana", True),
        Entry("apple", True),
        Entry("mid.md", False, "md", 3),
    ]

    ordered = [e.name for e in sort_entries(entries)]

    assert ordered == ["apple", "Banana", "Cherry", "zeta.txt", "alpha", "mid.md"]


def test_sort_does_not_mutate_input():
    entries = [Entry("b", True), Entry("a", True)]
    sort_entries(entries)
    assert [e.name for e in entries] == ["b", "a"]


def test_summarize_numbers_rows_and_totals_exactly():
    entries = [Entry("d", True, None, 1_000_000_001, 4096), Entry("f.txt", False, "txt", 999, 0)]

    totals = summarize(entries)

    assert [index for index, _ in totals.rows] == [1, 2]
    assert totals.total_logical == 1_000_001_000
    assert totals.total_allocated == 4096


def test_summary_of_sample_directory(sample_dir):
    totals = summarize(sort_entries(scan_directory(sample_dir).entries))

    assert len(totals.rows) == 3
    assert totals.rows[0][1].name == "empty"
    assert totals.total_logical == 15


def test_missing_root_is_unreadable(tmp_path):
    with pytest.raises(DirectoryUnreadableError) as excinfo:
        scan_directory(tmp_path / "missing")
    assert "missing" in excinfo.value.path


def test_file_root_is_unreadable(sample_dir):
    with pytest.raises(DirectoryUnreadableError):
        scan_directory(sample_dir / "notes.txt")


def test_measure_tree_skips_unreadable_paths(tmp_path):
    errors = []
    assert measure_tree(str(tmp_path / "gone"), errors=errors) == (0, 0)
    assert len(errors) == 1
    assert errors[0][0].endswith("gone")


def test_measure_tree_strict_raises(tmp_path):
    with pytest.raises(MetadataUnreadableError):
        measure_tree(str(tmp_path / "gone"), strict=True)


@pytest.fixture
def locked_subdir(nested_dir, monkeypatch):
    """Make the 'two' directory fail to list"""
    locked = str(nested_dir / "tree" / "one" / "two")
    real_scandir = os.scandir

    def fake_scandir(path="."):
        if str(path) == locked:
            raise PermissionError(13, "Permission denied", locked)
        return real_scandir(path)

    monkeypatch.setattr(os, "scandir", fake_scandir)
    return locked


def test_unreadable_subtree_is_skipped_and_reported(nested_dir, locked_subdir):
    result = scan_directory(nested_dir)

    assert by_name(result)["tree"].logical_size == 100 + 20
    assert result.errors == ((locked_subdir, "Permission denied"),)


def test_unreadable_subtree_aborts_in_strict_mode(nested_dir, locked_subdir):
    with pytest.raises(MetadataUnreadableError) as excinfo:
        scan_directory(nested_dir, strict=True)
    assert excinfo.value.path == locked_subdir


@needs_symlinks
def test_symlinks_are_not_followed(tmp_path):
    write(tmp_path / "real" / "big.bin", 5000)
    write(tmp_path / "inner" / "small.bin", 10)
    os.symlink(tmp_path / "real" / "big.bin", tmp_path / "inner" / "link.bin")
    os.symlink(tmp_path / "real", tmp_path / "shortcut")

    entries = by_name(scan_directory(tmp_path))

    assert entries["inner"].logical_size == 10
    assert not entries["shortcut"].is_directory
    assert entries["shortcut"].extension is None
    assert entries["shortcut"].logical_size < 5000


def test_progress_callback_sees_every_child(sample_dir):
    seen = []
    scan_directory(sample_dir, progress_callback=seen.append)
    assert sorted(seen) == ["data", "empty", "notes.txt"]
