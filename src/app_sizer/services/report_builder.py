"""Report aggregation — attributed files → component and feature breakdown.

Every list in the report is sorted by descending download size, then by
descending install size.
"""

from __future__ import annotations

from dataclasses import replace
from typing import Mapping, Sequence

from app_sizer.domain.entities import (
    AppComponent,
    AppFile,
    AppInfo,
    AppReport,
    DependencyComponent,
    DynamicFeature,
)
from app_sizer.services.ownership import OwnershipResolver


def _size_key(item: AppFile | AppComponent | DynamicFeature) -> tuple[int, int]:
    return (item.download_size, item.install_size)


def _sorted_files(files: Sequence[AppFile]) -> list[AppFile]:
    return sorted(files, key=_size_key, reverse=True)


def build_component(
    component: DependencyComponent,
    files: Sequence[AppFile],
    ownership: OwnershipResolver | None = None,
    omit_files: bool = False,
) -> AppComponent:
    """Aggregate the files attributed to one component."""
    owner = (
        ownership.owner_of_component(component.name, component.type) if ownership else None
    )
    breakdown: list[AppFile] | None = None
    if not omit_files:
        breakdown = _sorted_files(
            [
                replace(f, owner=ownership.owner_of_file(f.name, component))
                if ownership
                else f
                for f in files
            ]
        )

    return AppComponent(
        name=component.name,
        type=component.type,
        download_size=sum(f.download_size for f in files),
        install_size=sum(f.install_size for f in files),
        owner=owner,
        files=breakdown,
    )


def build_feature(
    feature: str,
    files: Sequence[AppFile],
    ownership: OwnershipResolver | None = None,
    omit_files: bool = False,
) -> DynamicFeature:
    """Aggregate the files of one dynamic feature."""
    owner = ownership.owner_of_feature(feature) if ownership else None
    breakdown: list[AppFile] | None = None
    if not omit_files:
        breakdown = _sorted_files(
            [
                replace(f, owner=ownership.owner_of_feature_file(f.name, feature))
                if ownership
                else f
                for f in files
            ]
        )

    return DynamicFeature(
        name=feature,
        download_size=sum(f.download_size for f in files),
        install_size=sum(f.install_size for f in files),
        owner=owner,
        files=breakdown,
    )


def build_report(
    app_info: AppInfo,
    components: Mapping[DependencyComponent, Sequence[AppFile]],
    features: Mapping[str, Sequence[AppFile]],
    ownership: OwnershipResolver | None = None,
    omit_file_breakdown: bool = False,
) -> AppReport:
    """Build the full app report.

    Parameters
    ----------
    app_info:
        Name, version and variant of the analysed app.
    components:
        Attributed files of the base feature, grouped by component.
    features:
        Sanitized files of every dynamic feature, keyed by feature name.
    ownership:
        Optional resolver used to fill in component, feature and file owners.
    omit_file_breakdown:
        Leave the per-component and per-feature file lists out.
    """
    app_components = [
        build_component(component, files, ownership, omit_file_breakdown)
        for component, files in components.items()
    ]
    dynamic_features = [
        build_feature(feature, files, ownership, omit_file_breakdown)
        for feature, files in features.items()
    ]

    return AppReport(
        name=app_info.name,
        version=app_info.version,
        variant=app_info.variant,
        download_size=sum(c.download_size for c in app_components),
        install_size=sum(c.install_size for c in app_components),
        components=sorted(app_components, key=_size_key, reverse=True),
        dynamic_features=sorted(dynamic_features, key=_size_key, reverse=True),
    )
