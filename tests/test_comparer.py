"""Tests for build comparison."""

from __future__ import annotations

from app_sizer.domain.entities import AppFile, DifferentAppFile, FileType
from app_sizer.services.comparer import categorize_changes, compare_builds, find_difference


def _file(name: str, download: int, install: int | None = None) -> AppFile:
    return AppFile(name, FileType.OTHER, download, download if install is None else install)


HEAD = [_file("/a", 100), _file("/b", 50), _file("/c", 10, 30)]
BASE = [_file("/a", 80), _file("/b", 50), _file("/d", 40, 60)]


def test_added_file_has_zero_old_size():
    assert find_difference([_file("f", 100)], []) == [DifferentAppFile("f", 0, 100, 100)]


def test_unchanged_and_removed_files_are_not_in_the_forward_pass():
    assert find_difference(HEAD, BASE) == [
        DifferentAppFile("/a", 80, 100, 20),
        DifferentAppFile("/c", 0, 10, 10),
    ]


def test_comparing_a_build_with_itself_reports_nothing():
    report = compare_builds(HEAD, HEAD)

    assert report.files_changed == []
    assert report.total_size_difference == 0
    assert report.changes.added == report.changes.removed == report.changes.modified == []


def test_changes_are_categorized():
    changes = categorize_changes(HEAD, BASE)

    assert changes.added == [DifferentAppFile("/c", 0, 10, 10)]
    assert changes.removed == [DifferentAppFile("/d", 40, 0, -40)]
    assert changes.modified == [DifferentAppFile("/a", 80, 100, 20)]


def test_report_totals():
    report = compare_builds(HEAD, BASE)

    assert report.new_app_download_size == 160
    assert report.new_app_install_size == 180
    assert report.old_app_download_size == 170
    assert report.old_app_install_size == 190
    assert report.total_size_difference == 10


def test_total_difference_is_base_minus_head():
    head = [_file("file1", 150), _file("file2", 250)]
    base = [_file("file1", 100), _file("file2", 200)]

    report = compare_builds(head, base)

    assert report.total_size_difference == -100
    assert [d.difference for d in report.files_changed] == [50, 50]


def test_changed_files_are_sorted_by_magnitude():
    head = [_file("/small", 5), _file("/big", 500), _file("/shrunk", 1), _file("/tie", 5)]
    base = [_file("/shrunk", 101)]

    report = compare_builds(head, base)

    assert [d.name for d in report.files_changed] == ["/big", "/shrunk", "/small", "/tie"]
