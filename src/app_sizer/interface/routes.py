"""API routes — thin controllers that delegate to the use case."""

from __future__ import annotations

from fastapi import APIRouter, Depends

from app_sizer.domain.entities import OwnershipEntry
from app_sizer.infrastructure.config import Settings, get_settings
from app_sizer.infrastructure.name_mapping import ClassNameMapping, ResourceNameMapping
from app_sizer.infrastructure.ownership_file import parse_ownership_entries
from app_sizer.interface.dependencies import get_default_ownership, get_use_case
from app_sizer.interface.schemas import (
    AnalyzeRequest,
    AnalyzeResponse,
    CompareRequest,
    CompareResponse,
    ErrorResponse,
)
from app_sizer.services.analyze_bundle import AnalyzeBundleUseCase
from app_sizer.services.ownership import OwnershipResolver

router = APIRouter()


@router.post(
    "/analyze",
    tags=["analysis"],
    response_model=AnalyzeResponse,
    responses={
        422: {
            "model": ErrorResponse,
            "description": "Malformed entries, dependency map or ownership rules; size budget exceeded",
        },
        500: {"model": ErrorResponse, "description": "Attribution failed"},
    },
)
def analyze(
    body: AnalyzeRequest,
    use_case: AnalyzeBundleUseCase = Depends(get_use_case),
    default_ownership: list[OwnershipEntry] = Depends(get_default_ownership),
    settings: Settings = Depends(get_settings),
) -> AnalyzeResponse:
    """Attribute the size of an app bundle to its components."""
    if body.ownership is not None:
        ownership = OwnershipResolver(
            parse_ownership_entries(body.ownership.entries),
            body.ownership.default_owner or settings.default_owner,
        )
    elif default_ownership:
        ownership = OwnershipResolver(default_ownership, settings.default_owner)
    else:
        ownership = None

    report = use_case.execute(
        app_info=body.app.to_domain(),
        project_path=body.project_path,
        features={
            feature: [entry.to_domain() for entry in entries]
            for feature, entries in body.features.items()
        },
        dependencies={
            name: [component.to_domain() for component in components]
            for name, components in body.dependencies.items()
        },
        ownership=ownership,
        static_components={
            pattern: [component.to_domain() for component in components]
            for pattern, components in body.static_components.items()
        },
        omit_file_breakdown=body.omit_file_breakdown,
        class_name_sanitizer=ClassNameMapping(body.class_mapping) if body.class_mapping else None,
        resource_name_sanitizer=(
            ResourceNameMapping(body.resource_mapping) if body.resource_mapping else None
        ),
    )
    return AnalyzeResponse.model_validate(report)


@router.post(
    "/compare",
    tags=["comparison"],
    response_model=CompareResponse,
    responses={422: {"model": ErrorResponse, "description": "Malformed entries"}},
)
def compare(
    body: CompareRequest,
    use_case: AnalyzeBundleUseCase = Depends(get_use_case),
) -> CompareResponse:
    """Compare the sizes of a head and a base build."""
    report = use_case.compare(
        [entry.to_domain() for entry in body.head],
        [entry.to_domain() for entry in body.base],
    )
    return CompareResponse.model_validate(report)


@router.get("/health", include_in_schema=False)
async def health() -> dict[str, str]:
    """Liveness check."""
    return {"status": "ok"}
