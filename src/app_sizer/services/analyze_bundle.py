"""Analyze-bundle use case — the main orchestration pipeline.

This is the single entry point for the business logic.  It depends only on
the name-sanitizer port and the pure service modules.  The interface layer
injects concrete adapters and settings at runtime.
"""

from __future__ import annotations

import logging
from concurrent.futures import Executor
from typing import Mapping, Sequence

from app_sizer.domain.entities import (
    AppFile,
    AppInfo,
    AppReport,
    ArchiveEntry,
    ComparisonReport,
    ComponentType,
    DependencyComponent,
)
from app_sizer.domain.exceptions import InvalidArchiveEntryError
from app_sizer.domain.ports.name_sanitizer import NameSanitizer
from app_sizer.services.attributor import DEFAULT_CHUNK_SIZE, Attributor, Dependencies
from app_sizer.services.comparer import compare_builds
from app_sizer.services.ownership import OwnershipResolver
from app_sizer.services.report_builder import build_report
from app_sizer.services.size_sanitizer import SizeSanitizer
from app_sizer.services.size_verifier import verify_sizes

logger = logging.getLogger(__name__)

BASE_FEATURE_NAME = "base"

# Kotlin standard library classes are matched by package to this component
KOTLIN_STDLIB = DependencyComponent(name="kotlin", type=ComponentType.INTERNAL)


def default_component_for(
    project_path: str, dependencies: Dependencies
) -> DependencyComponent:
    """The project's own component, reused from *dependencies* when present."""
    for components in dependencies.values():
        for component in components:
            if component.name == project_path:
                return component
    return DependencyComponent(name=project_path, type=ComponentType.INTERNAL)


def with_builtin_dependencies(dependencies: Dependencies) -> Dependencies:
    """Add the Kotlin standard library entry unless the caller already maps ``kotlin``."""
    merged: dict[str, Sequence[DependencyComponent]] = {KOTLIN_STDLIB.name: [KOTLIN_STDLIB]}
    merged.update(dependencies)
    return merged


class AnalyzeBundleUseCase:
    """Orchestrates the full raw entries → attributed report pipeline.

    Parameters
    ----------
    class_name_sanitizer:
        Adapter that normalises and deobfuscates compiled class names.
    resource_name_sanitizer:
        Adapter that deobfuscates resource file names.
    executor:
        Shared executor for parallel attribution (optional).
    chunk_size:
        Number of files per attribution worker.
    max_workers:
        Worker threads when no shared executor is given.
    base_feature_name:
        Feature whose files are attributed to components; every other
        feature is reported as a dynamic feature.
    download_size_threshold / install_size_threshold:
        Optional size budgets checked against the base feature.
    """

    def __init__(
        self,
        class_name_sanitizer: NameSanitizer | None = None,
        resource_name_sanitizer: NameSanitizer | None = None,
        executor: Executor | None = None,
        chunk_size: int = DEFAULT_CHUNK_SIZE,
        max_workers: int = 1,
        base_feature_name: str = BASE_FEATURE_NAME,
        download_size_threshold: int | None = None,
        install_size_threshold: int | None = None,
    ) -> None:
        self._class_names = class_name_sanitizer
        self._resource_names = resource_name_sanitizer
        self._sanitizer = SizeSanitizer(class_name_sanitizer, resource_name_sanitizer)
        self._executor = executor
        self._chunk_size = chunk_size
        self._max_workers = max_workers
        self._base_feature = base_feature_name
        self._download_threshold = download_size_threshold
        self._install_threshold = install_size_threshold

    # ── Public entry points ─────────────────────────────────────────────

    def execute(
        self,
        app_info: AppInfo,
        project_path: str,
        features: Mapping[str, Sequence[ArchiveEntry]],
        dependencies: Dependencies,
        ownership: OwnershipResolver | None = None,
        static_components: Mapping[str, Sequence[DependencyComponent]] | None = None,
        omit_file_breakdown: bool = False,
        class_name_sanitizer: NameSanitizer | None = None,
        resource_name_sanitizer: NameSanitizer | None = None,
    ) -> AppReport:
        """Run the full pipeline and return the attributed size report.

        *class_name_sanitizer* and *resource_name_sanitizer* replace the
        injected adapters for this call only.
        """
        logger.info("Analysing %s %s (%s)", app_info.name, app_info.version, app_info.variant)

        # 1. Sanitize every feature independently
        sanitizer = self._sanitizer
        if class_name_sanitizer is not None or resource_name_sanitizer is not None:
            sanitizer = SizeSanitizer(
                class_name_sanitizer or self._class_names,
                resource_name_sanitizer or self._resource_names,
            )
        files = self.sanitize_features(features, sanitizer)
        if self._base_feature not in files:
            raise InvalidArchiveEntryError(
                f"No entries for the base feature '{self._base_feature}'."
            )
        base_files = files.pop(self._base_feature)

        # 2. Attribute the base feature
        default_component = default_component_for(project_path, dependencies)
        attributor = Attributor(
            default_component,
            static_components=static_components,
            chunk_size=self._chunk_size,
            max_workers=self._max_workers,
            executor=self._executor,
        )
        components = attributor.attribute(base_files, with_builtin_dependencies(dependencies))
        logger.info(
            "Attributed %d files to %d components (%d dynamic features)",
            len(base_files),
            len(components),
            len(files),
        )

        # 3. Aggregate
        report = build_report(
            app_info,
            components,
            files,
            ownership=ownership,
            omit_file_breakdown=omit_file_breakdown,
        )

        # 4. Size budget
        verify_sizes(base_files, self._download_threshold, self._install_threshold)
        return report

    def compare(
        self,
        head: Sequence[ArchiveEntry],
        base: Sequence[ArchiveEntry],
    ) -> ComparisonReport:
        """Sanitize both builds independently and compare them."""
        report = compare_builds(self._sanitizer.sanitize(head), self._sanitizer.sanitize(base))
        logger.info(
            "Compared builds: %d changed files, base minus head %+d bytes",
            len(report.files_changed),
            report.total_size_difference,
        )
        return report

    def sanitize_features(
        self,
        features: Mapping[str, Sequence[ArchiveEntry]],
        sanitizer: SizeSanitizer | None = None,
    ) -> dict[str, list[AppFile]]:
        """Sanitize the raw entries of every feature separately."""
        sanitizer = sanitizer or self._sanitizer
        return {
            feature: sanitizer.sanitize(entries)
            for feature, entries in features.items()
        }
