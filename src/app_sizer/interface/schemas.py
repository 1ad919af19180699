"""Pydantic request / response DTOs for the API boundary."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, field_validator

from app_sizer.domain.entities import (
    AppInfo,
    ArchiveEntry,
    ComponentType,
    ContainerEntry,
    DependencyComponent,
    FileType,
    ResourceType,
)

# ── Requests ────────────────────────────────────────────────────────────────


class ArchiveEntrySchema(BaseModel):
    """One raw archive entry; ``children`` marks a compiled-code container."""

    name: str = Field(min_length=1)
    download_size: int = Field(ge=0, strict=True)
    install_size: int = Field(ge=0, strict=True)
    children: list[ArchiveEntrySchema] | None = None

    @field_validator("children")
    @classmethod
    def _children_are_leaves(
        cls, v: list[ArchiveEntrySchema] | None
    ) -> list[ArchiveEntrySchema] | None:
        if v and any(child.children is not None for child in v):
            msg = "Containers cannot be nested."
            raise ValueError(msg)
        return v

    def to_domain(self) -> ArchiveEntry:
        if self.children is None:
            return ArchiveEntry(self.name, self.download_size, self.install_size)
        return ContainerEntry(
            self.name,
            self.download_size,
            self.install_size,
            children=tuple(child.to_domain() for child in self.children),
        )


class ComponentSchema(BaseModel):
    name: str
    type: ComponentType

    def to_domain(self) -> DependencyComponent:
        return DependencyComponent(name=self.name, type=self.type)


class AppInfoSchema(BaseModel):
    name: str
    version: str
    variant: str

    def to_domain(self) -> AppInfo:
        return AppInfo(name=self.name, version=self.version, variant=self.variant)


class OwnershipSchema(BaseModel):
    """Ownership rules; entries are validated by the ownership loader."""

    entries: list[dict[str, object]]
    default_owner: str | None = None


class AnalyzeRequest(BaseModel):
    """Request body for ``POST /analyze``."""

    app: AppInfoSchema
    project_path: str
    features: dict[str, list[ArchiveEntrySchema]]
    dependencies: dict[str, list[ComponentSchema]] = Field(default_factory=dict)
    static_components: dict[str, list[ComponentSchema]] = Field(default_factory=dict)
    ownership: OwnershipSchema | None = None
    omit_file_breakdown: bool = False
    class_mapping: dict[str, str] = Field(default_factory=dict)
    resource_mapping: dict[str, str] = Field(default_factory=dict)


class CompareRequest(BaseModel):
    """Request body for ``POST /compare``."""

    head: list[ArchiveEntrySchema]
    base: list[ArchiveEntrySchema]


# ── Responses ───────────────────────────────────────────────────────────────


class _FromDomain(BaseModel):
    model_config = ConfigDict(from_attributes=True)


class AppFileResponse(_FromDomain):
    name: str
    type: FileType
    download_size: int
    install_size: int
    owner: str | None = None
    resource_type: ResourceType | None = None


class AppComponentResponse(_FromDomain):
    name: str
    type: ComponentType
    download_size: int
    install_size: int
    owner: str | None = None
    files: list[AppFileResponse] | None = None


class DynamicFeatureResponse(_FromDomain):
    name: str
    download_size: int
    install_size: int
    owner: str | None = None
    files: list[AppFileResponse] | None = None


class AnalyzeResponse(_FromDomain):
    """Successful response from ``POST /analyze``."""

    name: str
    version: str
    variant: str
    download_size: int
    install_size: int
    components: list[AppComponentResponse]
    dynamic_features: list[DynamicFeatureResponse]


class DifferentAppFileResponse(_FromDomain):
    name: str
    old_size: int
    new_size: int
    difference: int


class FilesChangedResponse(_FromDomain):
    added: list[DifferentAppFileResponse]
    removed: list[DifferentAppFileResponse]
    modified: list[DifferentAppFileResponse]


class CompareResponse(_FromDomain):
    """Successful response from ``POST /compare``."""

    new_app_download_size: int
    new_app_install_size: int
    old_app_download_size: int
    old_app_install_size: int
    total_size_difference: int
    files_changed: list[DifferentAppFileResponse]
    changes: FilesChangedResponse


class ErrorResponse(BaseModel):
    """Standard error envelope returned on all failure paths."""

    status: str = "error"
    message: str
