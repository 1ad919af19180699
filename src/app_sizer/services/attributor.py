"""Attribution — decide which dependency component every app file came from.

Each file type has an ordered chain of heuristics.  A heuristic is a pure
function ``(name, dependencies) -> component | None``; the first one that
returns a component wins.  Files no heuristic can place go to the static
path-pattern components, then to the caller's default component.

Ambiguity (several candidates, or none) is never an error.
"""

from __future__ import annotations

import logging
import re
from concurrent.futures import Executor, ThreadPoolExecutor
from typing import Callable, Mapping, Sequence

from app_sizer.domain.entities import AppFile, DependencyComponent, FileType
from app_sizer.domain.exceptions import AttributionError, DependencyMapError

logger = logging.getLogger(__name__)

Dependencies = Mapping[str, Sequence[DependencyComponent]]
Heuristic = Callable[[str, Dependencies], "DependencyComponent | None"]

# ── Naming markers ──────────────────────────────────────────────────────────

_FACTORY_SUFFIX = "_Factory"
_PROVIDER_MARKER = "_Provide"
_LAMBDA_MARKER = ".-$$Lambda$"
_SYNTHETIC_MARKER = "$$ExternalSynthetic"

_RESOURCE_ROOT = "/res"
_ASSET_ROOT = "/assets"
_NATIVE_LIB_ROOT = "/lib"
_COMPRESSED_LIB_INFIX = ".lzma."

# Qualifiers of the last directory: /res/layout-watch-v22/a.xml → /res/layout/a.xml
_RESOURCE_QUALIFIER_RE = re.compile(r"-[^/]*(?=/[^/]*$)")
# Multi-output vectors: /res/drawable/$ic_car__2.xml → /res/drawable/ic_car.xml
_RESOURCE_VECTOR_RE = re.compile(r"\$(\D+)__\d+\.xml$")

DEFAULT_CHUNK_SIZE = 1000


# ── Lookup primitives ───────────────────────────────────────────────────────


def single_match(name: str, dependencies: Dependencies) -> DependencyComponent | None:
    """Return the component if exactly one component claims *name*."""
    candidates = dependencies.get(name)
    if candidates is not None and len(candidates) == 1:
        return candidates[0]
    return None


def _package_of(name: str) -> str:
    return name.rsplit(".", maxsplit=1)[0]


def _simple_name_of(name: str) -> str:
    return name.rsplit(".", maxsplit=1)[-1]


def _distinct_single(
    candidates: Sequence[DependencyComponent],
) -> DependencyComponent | None:
    distinct = list(dict.fromkeys(candidates))
    return distinct[0] if len(distinct) == 1 else None


def package_match(package: str, dependencies: Dependencies) -> DependencyComponent | None:
    """Return the only component owning keys in exactly *package*, if any."""
    candidates = [
        component
        for key, components in dependencies.items()
        if _package_of(key) == package
        for component in components
    ]
    return _distinct_single(candidates)


# ── Class heuristics ────────────────────────────────────────────────────────


def class_exact(name: str, dependencies: Dependencies) -> DependencyComponent | None:
    return single_match(name, dependencies)


def class_factory(name: str, dependencies: Dependencies) -> DependencyComponent | None:
    """Generated factories are attributed like the type they construct."""
    return single_match(name.removesuffix(_FACTORY_SUFFIX), dependencies)


def class_provider(name: str, dependencies: Dependencies) -> DependencyComponent | None:
    """Generated provider methods are attributed like their declaring module."""
    return single_match(name.split(_PROVIDER_MARKER, maxsplit=1)[0], dependencies)


def class_lambda(name: str, dependencies: Dependencies) -> DependencyComponent | None:
    """Desugared lambdas are attributed by the package they were defined in."""
    if _LAMBDA_MARKER not in name:
        return None
    return package_match(name.split(_LAMBDA_MARKER, maxsplit=1)[0], dependencies)


def class_external_synthetic(
    name: str, dependencies: Dependencies
) -> DependencyComponent | None:
    """Compiler-synthesized classes are matched by simple class name anywhere."""
    if _SYNTHETIC_MARKER not in name:
        return None
    simple_name = _simple_name_of(name.split(_SYNTHETIC_MARKER, maxsplit=1)[0])
    candidates = [
        component
        for key, components in dependencies.items()
        if _simple_name_of(key) == simple_name
        for component in components
    ]
    return _distinct_single(candidates)


def class_package(name: str, dependencies: Dependencies) -> DependencyComponent | None:
    return package_match(_package_of(name), dependencies)


# ── Resource heuristics ─────────────────────────────────────────────────────


def _resource_keys(name: str) -> list[str]:
    keys = [name.removeprefix(_RESOURCE_ROOT)]
    if _RESOURCE_QUALIFIER_RE.search(name):
        keys.append(_RESOURCE_QUALIFIER_RE.sub("", name).removeprefix(_RESOURCE_ROOT))
    if _RESOURCE_VECTOR_RE.search(name):
        keys.append(_RESOURCE_VECTOR_RE.sub(r"\1.xml", name).removeprefix(_RESOURCE_ROOT))
    return keys


def resource_unique(name: str, dependencies: Dependencies) -> DependencyComponent | None:
    """Single match on the path, then without qualifiers, then vector-collapsed."""
    for key in _resource_keys(name):
        component = single_match(key, dependencies)
        if component is not None:
            return component
    return None


def resource_first_candidate(
    name: str, dependencies: Dependencies
) -> DependencyComponent | None:
    """Last resort for resources: accept the first claimant even if ambiguous."""
    for key in _resource_keys(name):
        candidates = dependencies.get(key)
        if candidates:
            return candidates[0]
    return None


# ── Asset / native / other heuristics ───────────────────────────────────────


def asset_exact(name: str, dependencies: Dependencies) -> DependencyComponent | None:
    return single_match(name.removeprefix(_ASSET_ROOT), dependencies)


def native_lib_exact(name: str, dependencies: Dependencies) -> DependencyComponent | None:
    return single_match(name.removeprefix(_NATIVE_LIB_ROOT), dependencies)


def native_lib_compressed(
    name: str, dependencies: Dependencies
) -> DependencyComponent | None:
    """Libraries re-compressed on device are matched to their plain name."""
    stripped = name.removeprefix(_NATIVE_LIB_ROOT)
    return single_match(stripped.replace(_COMPRESSED_LIB_INFIX, "."), dependencies)


def other_exact(name: str, dependencies: Dependencies) -> DependencyComponent | None:
    return single_match(name, dependencies)


HEURISTICS: dict[FileType, tuple[Heuristic, ...]] = {
    FileType.CLASS: (
        class_exact,
        class_factory,
        class_provider,
        class_lambda,
        class_external_synthetic,
        class_package,
    ),
    FileType.RESOURCE: (resource_unique, resource_first_candidate),
    FileType.ASSET: (asset_exact,),
    FileType.NATIVE_LIB: (native_lib_exact, native_lib_compressed),
    FileType.OTHER: (other_exact,),
}


# ── Validation ──────────────────────────────────────────────────────────────


def validate_dependencies(dependencies: Dependencies) -> None:
    """Raise :class:`DependencyMapError` unless every value lists components."""
    for key, components in dependencies.items():
        if not isinstance(key, str):
            raise DependencyMapError(f"Dependency map key is not a file name: {key!r}")
        if isinstance(components, (str, bytes)) or not isinstance(components, Sequence):
            raise DependencyMapError(
                f"Dependency map entry for {key} is not a list of components."
            )
        for component in components:
            if not isinstance(component, DependencyComponent):
                raise DependencyMapError(
                    f"Dependency map entry for {key} holds a non-component: {component!r}"
                )


# ── Attributor ──────────────────────────────────────────────────────────────


class Attributor:
    """Assigns exactly one component to every app file.

    Parameters
    ----------
    default_component:
        Receives every file no heuristic can attribute.
    static_components:
        ``{regex pattern: components}`` applied, longest pattern first, to
        files the heuristics could not place.
    chunk_size:
        Number of files handed to one worker.
    max_workers:
        Worker threads used when no *executor* is given.
    executor:
        Shared executor to fan chunks out on; not shut down by the attributor.
    """

    def __init__(
        self,
        default_component: DependencyComponent,
        static_components: Mapping[str, Sequence[DependencyComponent]] | None = None,
        chunk_size: int = DEFAULT_CHUNK_SIZE,
        max_workers: int = 1,
        executor: Executor | None = None,
    ) -> None:
        if chunk_size < 1:
            raise ValueError("chunk_size must be at least 1.")
        self._default = default_component
        self._static: list[tuple[re.Pattern[str], list[DependencyComponent]]] = []
        for pattern, components in sorted(
            (static_components or {}).items(),
            key=lambda item: len(item[0]),
            reverse=True,
        ):
            try:
                self._static.append((re.compile(pattern), list(components)))
            except re.error as exc:
                raise DependencyMapError(
                    f"Invalid static component pattern '{pattern}': {exc}"
                ) from exc
        self._chunk_size = chunk_size
        self._max_workers = max_workers
        self._executor = executor

    # ── Public entry point ──────────────────────────────────────────────

    def attribute(
        self,
        files: Sequence[AppFile],
        dependencies: Dependencies,
    ) -> dict[DependencyComponent, list[AppFile]]:
        """Group *files* by the component they are attributed to.

        Every input file appears in exactly one group.  Any failure aborts
        the whole call; no partial grouping is returned.
        """
        validate_dependencies(dependencies)
        chunks = [
            files[start : start + self._chunk_size]
            for start in range(0, len(files), self._chunk_size)
        ]

        if len(chunks) <= 1 or (self._executor is None and self._max_workers <= 1):
            partials = [self._attribute_chunk(chunk, dependencies) for chunk in chunks]
        elif self._executor is not None:
            partials = list(
                self._executor.map(lambda c: self._attribute_chunk(c, dependencies), chunks)
            )
        else:
            with ThreadPoolExecutor(max_workers=self._max_workers) as pool:
                partials = list(
                    pool.map(lambda c: self._attribute_chunk(c, dependencies), chunks)
                )

        logger.debug("Attributed %d files in %d chunk(s)", len(files), len(chunks))
        return _merge(partials)

    def component_for(
        self, file: AppFile, dependencies: Dependencies
    ) -> DependencyComponent:
        """Return the component a single *file* is attributed to."""
        for heuristic in HEURISTICS[file.type]:
            try:
                component = heuristic(file.name, dependencies)
            except Exception as exc:
                raise AttributionError(
                    f"Attribution of {file.name} failed in stage {heuristic.__name__}: {exc}"
                ) from exc
            if component is not None:
                return component

        for pattern, components in self._static:
            if components and pattern.search(file.name):
                return components[0]

        return self._default

    # ── Worker ──────────────────────────────────────────────────────────

    def _attribute_chunk(
        self,
        files: Sequence[AppFile],
        dependencies: Dependencies,
    ) -> dict[DependencyComponent, list[AppFile]]:
        grouped: dict[DependencyComponent, list[AppFile]] = {}
        for file in files:
            component = self.component_for(file, dependencies)
            grouped.setdefault(component, []).append(file)
        return grouped


def _merge(
    partials: Sequence[dict[DependencyComponent, list[AppFile]]],
) -> dict[DependencyComponent, list[AppFile]]:
    merged: dict[DependencyComponent, list[AppFile]] = {}
    for partial in partials:
        for component, files in partial.items():
            merged.setdefault(component, []).extend(files)
    return merged
