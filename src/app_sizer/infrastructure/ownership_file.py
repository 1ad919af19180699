"""Ownership file loader — YAML document → ownership entries.

The expected document is a list of mappings::

    - identifier: ":feature:login"
      owner: team-login
    - identifier: "com.squareup.*"
      owner: team-platform

Extra keys are ignored.  Anything else is rejected with
:class:`OwnershipFileError`.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

import yaml

from app_sizer.domain.entities import OwnershipEntry
from app_sizer.domain.exceptions import OwnershipFileError

logger = logging.getLogger(__name__)

_REQUIRED_FIELDS = ("identifier", "owner")


def parse_ownership_entries(document: Any) -> list[OwnershipEntry]:
    """Validate an already-decoded ownership document."""
    if not isinstance(document, list):
        raise OwnershipFileError(
            f"Ownership document must be a list of entries, got {type(document).__name__}."
        )

    entries: list[OwnershipEntry] = []
    for index, raw in enumerate(document):
        if not isinstance(raw, dict):
            raise OwnershipFileError(f"Ownership entry #{index} is not a mapping.")
        for field_name in _REQUIRED_FIELDS:
            value = raw.get(field_name)
            if not isinstance(value, str) or not value:
                raise OwnershipFileError(
                    f"Ownership entry #{index} is missing a valid '{field_name}'."
                )
        entries.append(OwnershipEntry(identifier=raw["identifier"], owner=raw["owner"]))
    return entries


def load_ownership_file(path: str | Path) -> list[OwnershipEntry]:
    """Read and parse the ownership YAML file at *path*."""
    path = Path(path)
    try:
        with path.open(encoding="utf-8") as handle:
            document = yaml.safe_load(handle)
    except OSError as exc:
        raise OwnershipFileError(f"Could not read ownership file {path}: {exc}") from exc
    except yaml.YAMLError as exc:
        raise OwnershipFileError(f"Could not parse ownership file {path}: {exc}") from exc

    try:
        entries = parse_ownership_entries(document)
    except OwnershipFileError as exc:
        raise OwnershipFileError(f"Invalid ownership file {path}: {exc}") from exc

    logger.info("Loaded %d ownership entries from %s", len(entries), path)
    return entries
