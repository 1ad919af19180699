"""Mapping-backed name sanitizers — implement the NameSanitizer port.

The deobfuscation tables themselves are loaded elsewhere; these adapters only
look names up in an already-built ``{obfuscated: original}`` mapping.
"""

from __future__ import annotations

from typing import Mapping


def normalize_class_name(name: str) -> str:
    """Turn a class descriptor or path into a dotted class name.

    ``La/b/C;`` → ``a.b.C`` and ``a/b/C.class`` → ``a.b.C``.
    """
    if name.startswith("L") and name.endswith(";"):
        name = name[1:-1]
    name = name.removesuffix(".class")
    return name.replace("/", ".")


class ClassNameMapping:
    """Concrete ``NameSanitizer`` for compiled class names."""

    def __init__(self, mapping: Mapping[str, str] | None = None) -> None:
        self._mapping: dict[str, str] = dict(mapping or {})

    def sanitize(self, name: str) -> str:
        normalized = normalize_class_name(name)
        return self._mapping.get(normalized, normalized)


class ResourceNameMapping:
    """Concrete ``NameSanitizer`` for resource file names.

    Keys and values are archive-absolute, e.g.
    ``{"/res/raw/dVo.xml": "/res/drawable/icon.xml"}``.
    """

    def __init__(self, mapping: Mapping[str, str] | None = None) -> None:
        self._mapping: dict[str, str] = dict(mapping or {})

    def sanitize(self, name: str) -> str:
        return self._mapping.get(name, name)
