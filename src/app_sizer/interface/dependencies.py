"""FastAPI dependency injection wiring."""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor

from app_sizer.domain.entities import OwnershipEntry
from app_sizer.infrastructure.config import get_settings
from app_sizer.infrastructure.name_mapping import ClassNameMapping, ResourceNameMapping
from app_sizer.infrastructure.ownership_file import load_ownership_file
from app_sizer.services.analyze_bundle import AnalyzeBundleUseCase

logger = logging.getLogger(__name__)

_executor: ThreadPoolExecutor | None = None
_ownership_entries: list[OwnershipEntry] = []


async def startup() -> None:
    """Initialise shared resources — called from the lifespan context manager."""
    global _executor, _ownership_entries  # noqa: PLW0603

    settings = get_settings()
    _executor = ThreadPoolExecutor(
        max_workers=settings.attribution_workers,
        thread_name_prefix="attribution",
    )
    logger.info("Attribution pool started with %d workers", settings.attribution_workers)
    if settings.ownership_file is not None:
        _ownership_entries = load_ownership_file(settings.ownership_file)


async def shutdown() -> None:
    """Release shared resources."""
    global _executor, _ownership_entries  # noqa: PLW0603

    if _executor:
        _executor.shutdown(wait=True)
        _executor = None
    _ownership_entries = []


def get_default_ownership() -> list[OwnershipEntry]:
    """Ownership entries loaded from the configured file (may be empty)."""
    return _ownership_entries


def get_use_case() -> AnalyzeBundleUseCase:
    """Build the use case with injected adapters."""
    settings = get_settings()

    assert _executor is not None, "startup() was not called"

    return AnalyzeBundleUseCase(
        class_name_sanitizer=ClassNameMapping(),
        resource_name_sanitizer=ResourceNameMapping(),
        executor=_executor,
        chunk_size=settings.attribution_chunk_size,
        max_workers=settings.attribution_workers,
        base_feature_name=settings.base_feature_name,
        download_size_threshold=settings.download_size_threshold,
        install_size_threshold=settings.install_size_threshold,
    )
