"""Ownership resolution — map components, features and files to their owners.

Rules are split once into explicit identifiers and wildcard prefixes
(identifiers ending in ``*``).  Lookups go from the most specific identifier
to the least specific one and end at the default owner.  Among wildcards the
longest matching prefix wins, so ``a.b.*`` overrides ``a.*``.
"""

from __future__ import annotations

from typing import Sequence

from app_sizer.domain.entities import ComponentType, DependencyComponent, OwnershipEntry
from app_sizer.domain.value_objects import ExternalCoordinate

WILDCARD = "*"


class OwnershipResolver:
    """Read-only view over a set of ownership rules.

    Parameters
    ----------
    entries:
        Ownership rules; the first rule registered for an identifier wins.
    default_owner:
        Owner returned when no rule matches.
    """

    def __init__(self, entries: Sequence[OwnershipEntry], default_owner: str) -> None:
        self._default_owner = default_owner
        self._explicit: dict[str, str] = {}
        self._wildcards: dict[str, str] = {}
        for entry in entries:
            if entry.identifier.endswith(WILDCARD):
                self._wildcards.setdefault(entry.identifier[: -len(WILDCARD)], entry.owner)
            else:
                self._explicit.setdefault(entry.identifier, entry.owner)

    @property
    def default_owner(self) -> str:
        return self._default_owner

    # ── Public API ──────────────────────────────────────────────────────

    def owner_of_component(self, name: str, component_type: ComponentType) -> str:
        """Owner of a component; external ones are matched without their version."""
        if component_type is ComponentType.EXTERNAL:
            owner = self._explicit.get(ExternalCoordinate.from_string(name).unversioned)
        else:
            owner = self._explicit.get(name)
        return owner or self._wildcard_owner(name) or self._default_owner

    def owner_of_feature(self, feature: str) -> str:
        return (
            self._explicit.get(feature)
            or self._wildcard_owner(feature)
            or self._default_owner
        )

    def owner_of_file(self, file: str, component: DependencyComponent) -> str:
        """Owner of a file, falling back to the owner of its component."""
        return (
            self._explicit.get(file)
            or self._wildcard_owner(file)
            or self.owner_of_component(component.name, component.type)
        )

    def owner_of_feature_file(self, file: str, feature: str) -> str:
        """Owner of a file inside a dynamic feature, falling back to the feature."""
        return (
            self._explicit.get(file)
            or self._wildcard_owner(file)
            or self.owner_of_feature(feature)
        )

    # ── Helpers ─────────────────────────────────────────────────────────

    def _wildcard_owner(self, identifier: str) -> str | None:
        best: str | None = None
        for prefix in self._wildcards:
            if identifier.startswith(prefix) and (best is None or len(prefix) > len(best)):
                best = prefix
        return self._wildcards[best] if best is not None else None
