"""Size-budget verification."""

from __future__ import annotations

from typing import Sequence

from app_sizer.domain.entities import AppFile
from app_sizer.domain.exceptions import SizeExceededError


def verify_sizes(
    files: Sequence[AppFile],
    download_threshold: int | None = None,
    install_threshold: int | None = None,
) -> None:
    """Raise :class:`SizeExceededError` if *files* exceed a configured budget.

    A threshold of ``None`` disables that check.  Download size is checked
    first.
    """
    if download_threshold is not None:
        download_size = sum(file.download_size for file in files)
        if download_size > download_threshold:
            raise SizeExceededError("Download", download_size, download_threshold)

    if install_threshold is not None:
        install_size = sum(file.install_size for file in files)
        if install_size > install_threshold:
            raise SizeExceededError("Install", install_size, install_threshold)
