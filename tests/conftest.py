"""Shared pytest fixtures for app-sizer tests."""

from __future__ import annotations

import pytest

from app_sizer.domain.entities import (
    ArchiveEntry,
    ComponentType,
    ContainerEntry,
    DependencyComponent,
)

# ============================================================================
# Component Fixtures
# ============================================================================


@pytest.fixture
def default_component() -> DependencyComponent:
    return DependencyComponent(":app", ComponentType.INTERNAL)


@pytest.fixture
def lib_component() -> DependencyComponent:
    return DependencyComponent(":lib", ComponentType.INTERNAL)


@pytest.fixture
def external_component() -> DependencyComponent:
    return DependencyComponent("com.squareup:okio:3.2.0", ComponentType.EXTERNAL)


# ============================================================================
# Archive Fixtures
# ============================================================================


@pytest.fixture
def raw_entries() -> list[ArchiveEntry]:
    """Entries of a base fragment plus one split fragment."""
    return [
        ContainerEntry(
            "/classes.dex",
            100,
            150,
            children=(
                ArchiveEntry("Lcom/app/MainActivity;", 50, 50),
                ArchiveEntry("Lcom/lib/Helper;", 100, 100),
            ),
        ),
        ArchiveEntry("/AndroidManifest.xml", 300, 776),
        ArchiveEntry("/AndroidManifest.xml", 250, 600),
        ArchiveEntry("/META-INF/MANIFEST.MF", 40, 90),
        ArchiveEntry("/res/xml/splits0.xml", 10, 20),
        ArchiveEntry("/resources.arsc", 500, 1000),
        ArchiveEntry("/resources.arsc", 200, 400),
        ArchiveEntry("/res/layout/activity_main.xml", 70, 120),
        ArchiveEntry("/assets/licenses.html", 30, 90),
        ArchiveEntry("/lib/arm64-v8a/libnative.so", 800, 2000),
        ArchiveEntry("/kotlin/kotlin.kotlin_builtins", 5, 9),
    ]
