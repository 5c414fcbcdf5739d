"""Scan and remediation request/response schemas."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, field_validator

from pkgsentinel.engines.project_scanner.models import PackageManagerKind, ProjectStatus


class ScanRequest(BaseModel):
    path: str

    @field_validator("path", mode="before")
    @classmethod
    def _strip_whitespace(cls, v: str) -> str:
        return v.strip() if isinstance(v, str) else v


class ProjectStatusSchema(BaseModel):
    """Wire form of a project status; posted back unchanged to the action routes."""

    model_config = ConfigDict(from_attributes=True)

    path: str
    display_path: str
    current_branch: str | None = None
    default_branch: str | None = None
    commits_behind_default: int | None = None
    production_branch: str | None = None
    commits_behind_production: int | None = None
    uncommitted_file_count: int | None = None
    declared_versions: dict[str, str] = {}
    vulnerable_flags: dict[str, bool] = {}
    proposed_safe_versions: dict[str, str] = {}
    package_manager: PackageManagerKind = PackageManagerKind.UNKNOWN
    manifest_error: str | None = None

    @classmethod
    def from_status(cls, status: ProjectStatus) -> ProjectStatusSchema:
        return cls(**status.to_dict())

    def to_status(self) -> ProjectStatus:
        return ProjectStatus(**self.model_dump())


class ScanResponse(BaseModel):
    base_path: str
    packages: list[ProjectStatusSchema]


class ActionResponse(BaseModel):
    success: bool
    message: str | None = None
    error: str | None = None
