"""Size sanitization — turn raw archive entries into canonical app files.

Every raw entry is routed to the *first* bucket whose predicate accepts it.
Each bucket then deduplicates, merges or re-derives the sizes of its own
class of entry.  The last bucket accepts everything, so routing is total.

Total size is conserved across a sanitize pass, except for the entries the
packaging-noise bucket drops on purpose.
"""

from __future__ import annotations

import logging
import re
from typing import Iterable, Sequence

from app_sizer.domain.entities import (
    AppFile,
    ArchiveEntry,
    ContainerEntry,
    FileType,
    ResourceType,
)
from app_sizer.domain.exceptions import InvalidArchiveEntryError
from app_sizer.domain.ports.name_sanitizer import NameSanitizer

logger = logging.getLogger(__name__)

# ── Well-known archive paths ────────────────────────────────────────────────

MANIFEST_NAME = "/AndroidManifest.xml"
RESOURCE_TABLE_NAME = "/resources.arsc"
RESOURCE_PREFIX = "/res/"
ASSET_PREFIX = "/assets/"
NATIVE_LIB_PREFIX = "/lib/"

# Injected by the packaging tool, absent from store-distributed archives
_NOISE_NAMES: frozenset[str] = frozenset({"/META-INF/MANIFEST.MF"})
_NOISE_PATTERNS: tuple[re.Pattern[str], ...] = (
    re.compile(r"/res/xml/splits\d+\.xml"),
)

_RESOURCE_TYPES: dict[str, ResourceType] = {
    "drawable": ResourceType.DRAWABLE,
    "layout": ResourceType.LAYOUT,
    "raw": ResourceType.RAW,
    "values": ResourceType.VALUES,
    "font": ResourceType.FONT,
}


class _KeepName:
    def sanitize(self, name: str) -> str:
        return name


# ── Helpers ─────────────────────────────────────────────────────────────────


def resource_type_for(name: str) -> ResourceType | None:
    """Classify a resource path by its directory (second path segment).

    ``/res/drawable-xxhdpi/a.png`` → DRAWABLE, ``/res/anim/b.xml`` → OTHER,
    anything outside the resource directory → ``None``.
    """
    if not name.startswith(RESOURCE_PREFIX):
        return None
    directory = name[len(RESOURCE_PREFIX):].split("/", maxsplit=1)[0]
    base = directory.split("-", maxsplit=1)[0]
    return _RESOURCE_TYPES.get(base, ResourceType.OTHER)


def file_type_for(name: str) -> FileType:
    """Assign a :class:`FileType` based on the archive path prefix."""
    if name.startswith(RESOURCE_PREFIX):
        return FileType.RESOURCE
    if name.startswith(ASSET_PREFIX):
        return FileType.ASSET
    if name.startswith(NATIVE_LIB_PREFIX):
        return FileType.NATIVE_LIB
    return FileType.OTHER


def _is_size(value: object) -> bool:
    return isinstance(value, int) and not isinstance(value, bool) and value >= 0


def validate_entry(entry: ArchiveEntry, in_container: bool = False) -> None:
    """Raise :class:`InvalidArchiveEntryError` if *entry* cannot be measured.

    Top-level names are archive paths; container children carry compiled
    class names, which only need to be non-empty.
    """
    name = getattr(entry, "name", None)
    if in_container:
        if not isinstance(name, str) or not name:
            raise InvalidArchiveEntryError(f"Container child has no name: {name!r}")
    elif not isinstance(name, str) or not name.startswith("/"):
        raise InvalidArchiveEntryError(
            f"Archive entry name must be a path starting with '/': {name!r}"
        )
    for attr in ("download_size", "install_size"):
        value = getattr(entry, attr, None)
        if not _is_size(value):
            raise InvalidArchiveEntryError(
                f"Archive entry {name} has a missing or malformed {attr}: {value!r}"
            )
    if isinstance(entry, ContainerEntry):
        for child in entry.children:
            validate_entry(child, in_container=True)


def apportion(weights: Sequence[int], total: int) -> list[int]:
    """Split *total* proportionally to *weights* into integers summing to *total*.

    Uses the largest-remainder method: every share is floored, and the bytes
    lost to flooring go one each to the shares with the largest remainders
    (earlier position first on ties).  Raises :class:`ValueError` when a
    non-zero *total* has no weight to be split over.
    """
    weight_sum = sum(weights)
    if weight_sum == 0:
        if total:
            raise ValueError(f"Cannot apportion {total} over zero total weight.")
        return [0] * len(weights)

    shares: list[int] = []
    remainders: list[tuple[int, int]] = []
    for index, weight in enumerate(weights):
        quotient, remainder = divmod(weight * total, weight_sum)
        shares.append(quotient)
        remainders.append((remainder, index))

    leftover = total - sum(shares)
    remainders.sort(key=lambda item: (-item[0], item[1]))
    for _remainder, index in remainders[:leftover]:
        shares[index] += 1
    return shares


# ── Buckets ─────────────────────────────────────────────────────────────────


class SanitizationBucket:
    """Collects the entries of one category and sanitizes them together."""

    name = "bucket"

    def __init__(self) -> None:
        self.entries: list[ArchiveEntry] = []

    def is_applicable(self, entry: ArchiveEntry) -> bool:
        raise NotImplementedError

    def add(self, entry: ArchiveEntry) -> None:
        self.entries.append(entry)

    def sanitize(self) -> list[AppFile]:
        raise NotImplementedError


class ContainerBucket(SanitizationBucket):
    """Unpacks compiled-code containers into one file per compiled unit.

    Compression works on the whole container, so a unit has no measurable
    download size of its own.  The combined download size of all containers
    is split over all units in proportion to their install sizes.
    """

    name = "container"

    def __init__(self, class_name_sanitizer: NameSanitizer) -> None:
        super().__init__()
        self._class_names = class_name_sanitizer

    def is_applicable(self, entry: ArchiveEntry) -> bool:
        return isinstance(entry, ContainerEntry)

    def sanitize(self) -> list[AppFile]:
        children = [
            child
            for entry in self.entries
            for child in entry.children  # type: ignore[attr-defined]
        ]
        container_download = sum(entry.download_size for entry in self.entries)
        child_install = [child.install_size for child in children]

        if container_download and not sum(child_install):
            names = ", ".join(entry.name for entry in self.entries)
            raise InvalidArchiveEntryError(
                f"Cannot apportion {container_download} download bytes of "
                f"containers without measurable children: {names}"
            )

        download_sizes = apportion(child_install, container_download)
        return [
            AppFile(
                name=self._class_names.sanitize(child.name),
                type=FileType.CLASS,
                download_size=download_size,
                install_size=child.install_size,
            )
            for child, download_size in zip(children, download_sizes)
        ]


class ManifestBucket(SanitizationBucket):
    """Keeps only the largest manifest; the others belong to split fragments."""

    name = "manifest"

    def is_applicable(self, entry: ArchiveEntry) -> bool:
        return entry.name == MANIFEST_NAME

    def sanitize(self) -> list[AppFile]:
        if not self.entries:
            return []
        largest = max(self.entries, key=lambda entry: entry.install_size)
        return [
            AppFile(
                name=MANIFEST_NAME,
                type=FileType.OTHER,
                download_size=largest.download_size,
                install_size=largest.install_size,
            )
        ]


class PackagingNoiseBucket(SanitizationBucket):
    """Drops files the packaging tool adds to every generated fragment."""

    name = "packaging-noise"

    def is_applicable(self, entry: ArchiveEntry) -> bool:
        if entry.name in _NOISE_NAMES:
            return True
        return any(pattern.fullmatch(entry.name) for pattern in _NOISE_PATTERNS)

    def sanitize(self) -> list[AppFile]:
        return []


class ResourceTableBucket(SanitizationBucket):
    """Merges the per-fragment compiled resource tables into one file."""

    name = "resource-table"

    def is_applicable(self, entry: ArchiveEntry) -> bool:
        return entry.name == RESOURCE_TABLE_NAME

    def sanitize(self) -> list[AppFile]:
        if not self.entries:
            return []
        return [
            AppFile(
                name=RESOURCE_TABLE_NAME,
                type=FileType.OTHER,
                download_size=sum(entry.download_size for entry in self.entries),
                install_size=sum(entry.install_size for entry in self.entries),
            )
        ]


class ResourceBucket(SanitizationBucket):
    """Deobfuscates resource file names and classifies their resource type."""

    name = "resource"

    def __init__(self, resource_name_sanitizer: NameSanitizer) -> None:
        super().__init__()
        self._resource_names = resource_name_sanitizer

    def is_applicable(self, entry: ArchiveEntry) -> bool:
        return entry.name.startswith(RESOURCE_PREFIX)

    def sanitize(self) -> list[AppFile]:
        files: list[AppFile] = []
        for entry in self.entries:
            name = self._resource_names.sanitize(entry.name)
            files.append(
                AppFile(
                    name=name,
                    type=FileType.RESOURCE,
                    download_size=entry.download_size,
                    install_size=entry.install_size,
                    resource_type=resource_type_for(name),
                )
            )
        return files


class TypeAssigningBucket(SanitizationBucket):
    """Catch-all: keeps the entry as is and assigns its file type."""

    name = "type-assigning"

    def is_applicable(self, entry: ArchiveEntry) -> bool:
        return True

    def sanitize(self) -> list[AppFile]:
        return [
            AppFile(
                name=entry.name,
                type=file_type_for(entry.name),
                download_size=entry.download_size,
                install_size=entry.install_size,
                resource_type=resource_type_for(entry.name),
            )
            for entry in self.entries
        ]


# ── Public API ──────────────────────────────────────────────────────────────


class SizeSanitizer:
    """Sanitizes the raw entries of one logical bundle.

    Parameters
    ----------
    class_name_sanitizer:
        Normalises and deobfuscates compiled class names.
    resource_name_sanitizer:
        Deobfuscates resource file names.
    """

    def __init__(
        self,
        class_name_sanitizer: NameSanitizer | None = None,
        resource_name_sanitizer: NameSanitizer | None = None,
    ) -> None:
        self._class_names = class_name_sanitizer or _KeepName()
        self._resource_names = resource_name_sanitizer or _KeepName()

    def buckets(self) -> list[SanitizationBucket]:
        """Return fresh buckets in routing priority order."""
        return [
            ContainerBucket(self._class_names),
            ManifestBucket(),
            PackagingNoiseBucket(),
            ResourceTableBucket(),
            ResourceBucket(self._resource_names),
            TypeAssigningBucket(),
        ]

    def sanitize(self, entries: Iterable[ArchiveEntry]) -> list[AppFile]:
        """Route *entries* into buckets and flatten the sanitized result.

        Raises :class:`InvalidArchiveEntryError` before producing anything if
        any entry is malformed.
        """
        entries = list(entries)
        for entry in entries:
            validate_entry(entry)

        buckets = self.buckets()
        for entry in entries:
            bucket = next(b for b in buckets if b.is_applicable(entry))
            bucket.add(entry)

        files: list[AppFile] = []
        for bucket in buckets:
            sanitized = bucket.sanitize()
            logger.debug(
                "Bucket %s: %d entries -> %d files",
                bucket.name,
                len(bucket.entries),
                len(sanitized),
            )
            files.extend(sanitized)
        return files
