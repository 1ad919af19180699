"""Domain entities — pure data structures with no external dependencies."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum


class FileType(str, Enum):
    """Kind of file contained in an application bundle."""

    CLASS = "CLASS"
    RESOURCE = "RESOURCE"
    ASSET = "ASSET"
    NATIVE_LIB = "NATIVE_LIB"
    OTHER = "OTHER"


class ResourceType(str, Enum):
    """Resource directory a resource file lives in."""

    DRAWABLE = "DRAWABLE"
    LAYOUT = "LAYOUT"
    RAW = "RAW"
    VALUES = "VALUES"
    FONT = "FONT"
    OTHER = "OTHER"


class ComponentType(str, Enum):
    """Whether a component is built from this project or pulled in from outside."""

    INTERNAL = "INTERNAL"
    EXTERNAL = "EXTERNAL"


# ── Archive input ──────────────────────────────────────────────────────────


@dataclass(frozen=True, slots=True)
class ArchiveEntry:
    """A single entry of a physical archive fragment.

    ``name`` is archive-absolute (always starts with ``/``).  Sizes are bytes:
    ``download_size`` is the compressed size, ``install_size`` the raw one.
    """

    name: str
    download_size: int
    install_size: int


@dataclass(frozen=True, slots=True)
class ContainerEntry(ArchiveEntry):
    """A compiled-code container (e.g. a DEX file) and the units packed in it."""

    children: tuple[ArchiveEntry, ...] = ()


# ── Sanitized output ───────────────────────────────────────────────────────


@dataclass(frozen=True, slots=True)
class AppFile:
    """Canonical, reporting-ready file produced by the size sanitizer."""

    name: str
    type: FileType
    download_size: int
    install_size: int
    owner: str | None = None
    resource_type: ResourceType | None = None


@dataclass(frozen=True, slots=True)
class DependencyComponent:
    """A build component (module or external library) that contributes files."""

    name: str
    type: ComponentType


@dataclass(frozen=True, slots=True)
class OwnershipEntry:
    """One ownership rule; ``identifier`` may end with the ``*`` wildcard."""

    identifier: str
    owner: str


# ── Comparison ─────────────────────────────────────────────────────────────


@dataclass(frozen=True, slots=True)
class DifferentAppFile:
    """Download-size delta of one file between two builds."""

    name: str
    old_size: int
    new_size: int
    difference: int


@dataclass(frozen=True, slots=True)
class FilesChanged:
    """Per-file deltas split by kind of change."""

    added: list[DifferentAppFile] = field(default_factory=list)
    removed: list[DifferentAppFile] = field(default_factory=list)
    modified: list[DifferentAppFile] = field(default_factory=list)


@dataclass(frozen=True, slots=True)
class ComparisonReport:
    """Size comparison between a head and a base build."""

    new_app_download_size: int
    new_app_install_size: int
    old_app_download_size: int
    old_app_install_size: int
    total_size_difference: int
    files_changed: list[DifferentAppFile]
    changes: FilesChanged


# ── Report ─────────────────────────────────────────────────────────────────


@dataclass(frozen=True, slots=True)
class AppInfo:
    """General information about the analysed app."""

    name: str
    version: str
    variant: str


@dataclass(frozen=True, slots=True)
class AppComponent:
    """Attributed size of one component."""

    name: str
    type: ComponentType
    download_size: int
    install_size: int
    owner: str | None = None
    files: list[AppFile] | None = None


@dataclass(frozen=True, slots=True)
class DynamicFeature:
    """Size of one on-demand feature module."""

    name: str
    download_size: int
    install_size: int
    owner: str | None = None
    files: list[AppFile] | None = None


@dataclass(frozen=True, slots=True)
class AppReport:
    """The full size breakdown of an app."""

    name: str
    version: str
    variant: str
    download_size: int
    install_size: int
    components: list[AppComponent]
    dynamic_features: list[DynamicFeature]
