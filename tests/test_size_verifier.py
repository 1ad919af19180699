"""Tests for size budget verification."""

from __future__ import annotations

import pytest

from app_sizer.domain.entities import AppFile, FileType
from app_sizer.domain.exceptions import SizeExceededError
from app_sizer.services.size_verifier import verify_sizes

FILES = [AppFile("/a", FileType.OTHER, 60, 100), AppFile("/b", FileType.OTHER, 40, 100)]


def test_no_thresholds_never_fail():
    verify_sizes(FILES)


def test_sizes_at_the_threshold_pass():
    verify_sizes(FILES, download_threshold=100, install_threshold=200)


def test_download_threshold_exceeded():
    with pytest.raises(SizeExceededError) as excinfo:
        verify_sizes(FILES, download_threshold=99)

    assert excinfo.value.size_type == "Download"
    assert excinfo.value.measured == 100
    assert excinfo.value.threshold == 99
    assert "Download size threshold exceeded" in str(excinfo.value)


def test_install_threshold_exceeded():
    with pytest.raises(SizeExceededError, match="Install size threshold exceeded"):
        verify_sizes(FILES, install_threshold=150)


def test_download_is_checked_first():
    with pytest.raises(SizeExceededError) as excinfo:
        verify_sizes(FILES, download_threshold=1, install_threshold=1)

    assert excinfo.value.size_type == "Download"
