"""Value objects — self-validating domain primitives."""

from __future__ import annotations

from dataclasses import dataclass

_VERSION_SEPARATOR = ":"


@dataclass(frozen=True, slots=True)
class ExternalCoordinate:
    """Coordinate of an external component, e.g. ``com.squareup:okio:3.2.0``.

    Everything after the last ``:`` is treated as the version.  A coordinate
    without any separator has no version and ``unversioned`` is the raw value.
    """

    unversioned: str
    version: str | None
    raw: str

    @classmethod
    def from_string(cls, coordinate: str) -> ExternalCoordinate:
        """Split a raw coordinate into its unversioned part and version."""
        head, sep, version = coordinate.rpartition(_VERSION_SEPARATOR)
        if not sep:
            return cls(unversioned=coordinate, version=None, raw=coordinate)
        return cls(unversioned=head, version=version, raw=coordinate)
