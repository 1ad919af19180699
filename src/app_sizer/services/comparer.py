"""Build comparison — download-size deltas between a head and a base build."""

from __future__ import annotations

from typing import Sequence

from app_sizer.domain.entities import (
    AppFile,
    ComparisonReport,
    DifferentAppFile,
    FilesChanged,
)


def find_difference(
    head: Sequence[AppFile], base: Sequence[AppFile]
) -> list[DifferentAppFile]:
    """Forward pass over *head*: files whose size changed, and added files.

    Files that only exist in *base* are not reported here; see
    :func:`categorize_changes` for removals.
    """
    base_by_name = {file.name: file for file in base}
    differences: list[DifferentAppFile] = []

    for head_file in head:
        base_file = base_by_name.get(head_file.name)
        if base_file is None:
            differences.append(
                DifferentAppFile(
                    name=head_file.name,
                    old_size=0,
                    new_size=head_file.download_size,
                    difference=head_file.download_size,
                )
            )
        elif head_file.download_size != base_file.download_size:
            differences.append(
                DifferentAppFile(
                    name=head_file.name,
                    old_size=base_file.download_size,
                    new_size=head_file.download_size,
                    difference=head_file.download_size - base_file.download_size,
                )
            )

    return differences


def categorize_changes(
    head: Sequence[AppFile], base: Sequence[AppFile]
) -> FilesChanged:
    """Split the deltas into added, removed and modified files."""
    head_names = {file.name for file in head}
    base_names = {file.name for file in base}

    changes = FilesChanged()
    for diff in find_difference(head, base):
        if diff.name in base_names:
            changes.modified.append(diff)
        else:
            changes.added.append(diff)

    for base_file in base:
        if base_file.name not in head_names:
            changes.removed.append(
                DifferentAppFile(
                    name=base_file.name,
                    old_size=base_file.download_size,
                    new_size=0,
                    difference=-base_file.download_size,
                )
            )

    for group in (changes.added, changes.removed, changes.modified):
        group.sort(key=_by_magnitude)
    return changes


def compare_builds(head: Sequence[AppFile], base: Sequence[AppFile]) -> ComparisonReport:
    """Compare two sanitized file lists and aggregate their totals.

    ``total_size_difference`` is base minus head download size, so a head
    build that grew yields a negative number.  Per-file differences are head
    minus base.
    """
    new_download = sum(file.download_size for file in head)
    old_download = sum(file.download_size for file in base)

    return ComparisonReport(
        new_app_download_size=new_download,
        new_app_install_size=sum(file.install_size for file in head),
        old_app_download_size=old_download,
        old_app_install_size=sum(file.install_size for file in base),
        total_size_difference=old_download - new_download,
        files_changed=sorted(find_difference(head, base), key=_by_magnitude),
        changes=categorize_changes(head, base),
    )


def _by_magnitude(diff: DifferentAppFile) -> tuple[int, str]:
    return (-abs(diff.difference), diff.name)
