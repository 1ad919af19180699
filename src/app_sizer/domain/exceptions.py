"""Domain exception hierarchy.

Each exception maps to a specific HTTP status code at the interface layer.
Inner layers raise these; the outermost error-handler translates them.
Attribution ambiguity is never an error and has no exception here.
"""

from __future__ import annotations


class AppSizerError(Exception):
    """Base exception for the entire application."""


# ── Input malformation ──────────────────────────────────────────────────────


class InvalidArchiveEntryError(AppSizerError):
    """An archive entry has a bad name or a missing / malformed size."""


class DependencyMapError(AppSizerError):
    """The dependency map handed to the attributor is malformed."""


class OwnershipFileError(AppSizerError):
    """The ownership rules could not be parsed."""


# ── Processing errors ───────────────────────────────────────────────────────


class AttributionError(AppSizerError):
    """A heuristic failed unexpectedly while attributing a file."""


# ── Size budget ─────────────────────────────────────────────────────────────


class SizeExceededError(AppSizerError):
    """The measured app size is above its configured threshold."""

    def __init__(self, size_type: str, measured: int, threshold: int) -> None:
        self.size_type = size_type
        self.measured = measured
        self.threshold = threshold
        super().__init__(
            f"{size_type} size threshold exceeded: "
            f"{measured} bytes measured, {threshold} bytes allowed."
        )
