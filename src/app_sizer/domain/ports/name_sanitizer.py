"""Port: name sanitizer — defined by the domain, implemented by infrastructure."""

from __future__ import annotations

from typing import Protocol


class NameSanitizer(Protocol):
    """Abstract contract for normalising and deobfuscating archive names."""

    def sanitize(self, name: str) -> str:
        """Return the original name, or *name* unchanged if no mapping exists."""
        ...
