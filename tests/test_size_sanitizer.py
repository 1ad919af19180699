"""Tests for the size sanitizer buckets and size accounting."""

from __future__ import annotations

import pytest

from app_sizer.domain.entities import (
    AppFile,
    ArchiveEntry,
    ContainerEntry,
    FileType,
    ResourceType,
)
from app_sizer.domain.exceptions import InvalidArchiveEntryError
from app_sizer.infrastructure.name_mapping import ClassNameMapping, ResourceNameMapping
from app_sizer.services.size_sanitizer import (
    SizeSanitizer,
    apportion,
    file_type_for,
    resource_type_for,
)


@pytest.fixture
def sanitizer() -> SizeSanitizer:
    return SizeSanitizer(ClassNameMapping(), ResourceNameMapping())


def _by_name(files: list[AppFile]) -> dict[str, AppFile]:
    return {f.name: f for f in files}


# ============================================================================
# Scenarios
# ============================================================================


def test_largest_manifest_is_kept(sanitizer):
    files = sanitizer.sanitize(
        [
            ArchiveEntry("/AndroidManifest.xml", 250, 600),
            ArchiveEntry("/AndroidManifest.xml", 300, 776),
        ]
    )

    assert files == [AppFile("/AndroidManifest.xml", FileType.OTHER, 300, 776)]


def test_container_download_size_is_apportioned(sanitizer):
    container = ContainerEntry(
        "/classes.dex",
        100,
        150,
        children=(
            ArchiveEntry("Lcom/app/MainActivity;", 50, 50),
            ArchiveEntry("Lcom/lib/Helper;", 100, 100),
        ),
    )

    files = sanitizer.sanitize([container])

    assert files == [
        AppFile("com.app.MainActivity", FileType.CLASS, 33, 50),
        AppFile("com.lib.Helper", FileType.CLASS, 67, 100),
    ]


def test_container_class_names_are_deobfuscated():
    sanitizer = SizeSanitizer(ClassNameMapping({"a.b": "com.app.Real"}))
    container = ContainerEntry("/classes.dex", 10, 10, children=(ArchiveEntry("La/b;", 10, 10),))

    files = sanitizer.sanitize([container])

    assert [f.name for f in files] == ["com.app.Real"]


def test_multiple_containers_share_one_pool(sanitizer):
    containers = [
        ContainerEntry(
            "/classes.dex",
            7,
            9,
            children=tuple(ArchiveEntry(f"La/A{i};", 3, 3) for i in range(3)),
        ),
        ContainerEntry(
            "/classes2.dex",
            11,
            6,
            children=(ArchiveEntry("La/B;", 1, 1), ArchiveEntry("La/C;", 5, 5)),
        ),
    ]

    files = sanitizer.sanitize(containers)

    assert len(files) == 5
    assert sum(f.download_size for f in files) == 18
    assert sum(f.install_size for f in files) == 15


def test_apportion_never_loses_a_byte():
    assert apportion([1, 1, 1], 10) == [4, 3, 3]
    assert apportion([50, 100], 100) == [33, 67]
    assert apportion([0, 0], 0) == [0, 0]
    assert sum(apportion([7, 13, 29, 31], 997)) == 997


def test_container_without_measurable_children_fails(sanitizer):
    container = ContainerEntry("/classes.dex", 10, 10, children=(ArchiveEntry("La/B;", 0, 0),))

    with pytest.raises(InvalidArchiveEntryError, match="/classes.dex"):
        sanitizer.sanitize([container])


# ============================================================================
# Buckets
# ============================================================================


def test_packaging_noise_is_dropped(sanitizer):
    files = sanitizer.sanitize(
        [
            ArchiveEntry("/META-INF/MANIFEST.MF", 40, 90),
            ArchiveEntry("/res/xml/splits0.xml", 10, 20),
            ArchiveEntry("/res/xml/splits12.xml", 10, 20),
        ]
    )

    assert files == []


def test_non_numbered_splits_file_is_a_resource(sanitizer):
    files = sanitizer.sanitize([ArchiveEntry("/res/xml/splits.xml", 10, 20)])

    assert files == [
        AppFile("/res/xml/splits.xml", FileType.RESOURCE, 10, 20, resource_type=ResourceType.OTHER)
    ]


def test_resource_tables_are_summed(sanitizer):
    files = sanitizer.sanitize(
        [
            ArchiveEntry("/resources.arsc", 500, 1000),
            ArchiveEntry("/resources.arsc", 200, 400),
        ]
    )

    assert files == [AppFile("/resources.arsc", FileType.OTHER, 700, 1400)]


def test_resource_names_are_deobfuscated_and_classified():
    sanitizer = SizeSanitizer(
        resource_name_sanitizer=ResourceNameMapping({"/res/raw/dVo.xml": "/res/drawable/icon.xml"})
    )

    files = sanitizer.sanitize([ArchiveEntry("/res/raw/dVo.xml", 5, 8)])

    assert files == [
        AppFile("/res/drawable/icon.xml", FileType.RESOURCE, 5, 8, resource_type=ResourceType.DRAWABLE)
    ]


@pytest.mark.parametrize(
    ("name", "expected"),
    [
        ("/res/drawable-xxhdpi-v4/icon.png", ResourceType.DRAWABLE),
        ("/res/layout/main.xml", ResourceType.LAYOUT),
        ("/res/raw/sound.ogg", ResourceType.RAW),
        ("/res/values-de/strings.xml", ResourceType.VALUES),
        ("/res/font/inter.ttf", ResourceType.FONT),
        ("/res/anim/fade.xml", ResourceType.OTHER),
        ("/assets/font/inter.ttf", None),
    ],
)
def test_resource_type_for(name, expected):
    assert resource_type_for(name) == expected


@pytest.mark.parametrize(
    ("name", "expected"),
    [
        ("/res/anim/fade.xml", FileType.RESOURCE),
        ("/assets/licenses.html", FileType.ASSET),
        ("/lib/arm64-v8a/libnative.so", FileType.NATIVE_LIB),
        ("/kotlin/kotlin.kotlin_builtins", FileType.OTHER),
        ("/library.txt", FileType.OTHER),
    ],
)
def test_file_type_for(name, expected):
    assert file_type_for(name) == expected


def test_everything_else_gets_a_type(sanitizer, raw_entries):
    files = _by_name(sanitizer.sanitize(raw_entries))

    assert files["/assets/licenses.html"].type is FileType.ASSET
    assert files["/lib/arm64-v8a/libnative.so"].type is FileType.NATIVE_LIB
    assert files["/kotlin/kotlin.kotlin_builtins"].type is FileType.OTHER
    assert files["/kotlin/kotlin.kotlin_builtins"].resource_type is None
    assert files["/res/layout/activity_main.xml"].resource_type is ResourceType.LAYOUT


# ============================================================================
# Size accounting
# ============================================================================


def test_total_size_is_conserved(sanitizer, raw_entries):
    files = sanitizer.sanitize(raw_entries)

    # Raw totals minus the dropped packaging noise and the smaller manifest.
    assert sum(f.download_size for f in files) == 2305 - 50 - 250
    assert sum(f.install_size for f in files) == 5255 - 110 - 600


def test_size_is_conserved_without_noise(sanitizer):
    entries = [
        ArchiveEntry("/AndroidManifest.xml", 12, 40),
        ArchiveEntry("/resources.arsc", 33, 90),
        ArchiveEntry("/res/drawable/a.png", 7, 7),
        ArchiveEntry("/assets/data.bin", 19, 64),
    ]

    files = sanitizer.sanitize(entries)

    assert sum(f.download_size for f in files) == sum(e.download_size for e in entries)
    assert sum(f.install_size for f in files) == sum(e.install_size for e in entries)


# ============================================================================
# Failures
# ============================================================================


@pytest.mark.parametrize(
    "entry",
    [
        ArchiveEntry("/assets/a.bin", -1, 10),
        ArchiveEntry("/assets/a.bin", 1, None),  # type: ignore[arg-type]
        ArchiveEntry("/assets/a.bin", True, 10),  # type: ignore[arg-type]
        ArchiveEntry("/assets/a.bin", 1.5, 10),  # type: ignore[arg-type]
        ArchiveEntry("assets/a.bin", 1, 10),
        ContainerEntry("/classes.dex", 1, 1, children=(ArchiveEntry("La/B;", 1, -3),)),
    ],
)
def test_malformed_entries_fail_the_whole_call(sanitizer, entry):
    good = ArchiveEntry("/assets/ok.bin", 1, 1)

    with pytest.raises(InvalidArchiveEntryError):
        sanitizer.sanitize([good, entry])


def test_apportion_rejects_bytes_without_weight():
    with pytest.raises(ValueError, match="zero total weight"):
        apportion([0, 0], 5)
