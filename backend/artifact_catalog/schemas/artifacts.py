from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

from artifact_catalog.core.config import get_settings

SortField = Literal["moduleName", "buildNumber", "totalSize", "artifactCount", "repo", "latestCreated"]
SortOrder = Literal["asc", "desc"]

ALL_REPOS = "all"


class Artifact(BaseModel):
    """One inventory record as delivered by the repository catalog."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    name: str
    path: str
    repo: str = ""
    size: int = Field(default=0, ge=0)
    created: str = ""
    modified: str = ""
    updated: str = ""
    created_by: str = Field(default="", alias="createdBy")
    modified_by: str = Field(default="", alias="modifiedBy")
    updated_by: str = Field(default="", alias="updatedBy")
    sha1: str = ""
    md5: str = ""


class ArtifactNodeView(BaseModel):
    name: str
    full_path: str
    is_file: bool
    size: int | None = None
    created: str | None = None
    children: list[ArtifactNodeView] = Field(default_factory=list)
    artifact: Artifact | None = None


class BuildSummary(BaseModel):
    id: str
    module_name: str
    branch_type: str
    branch_name: str
    build_number: str
    repo: str
    total_size: int
    artifact_count: int
    latest_created: str
    artifacts: list[Artifact] = Field(default_factory=list)


class BuildStatistics(BaseModel):
    total_builds: int = 0
    total_artifacts: int = 0
    total_size: int = 0
    total_modules: int = 0


class BuildStatisticsPair(BaseModel):
    total: BuildStatistics
    filtered: BuildStatistics


class BuildQueryRequest(BaseModel):
    artifacts: list[Artifact] = Field(default_factory=list)
    search_term: str = ""
    repo_filter: str = ALL_REPOS
    sort_field: SortField = "moduleName"
    sort_order: SortOrder = "asc"
    page: int = Field(default=0, ge=0)
    page_size: int | None = Field(default=None, ge=1)

    @field_validator("page_size")
    @classmethod
    def _cap_page_size(cls, value: int | None) -> int | None:
        limit = get_settings().max_page_size
        if value is not None and value > limit:
            raise ValueError(f"page_size must be <= {limit}")
        return value


class BuildQueryResponse(BaseModel):
    builds: list[BuildSummary]
    total_filtered: int
    page: int
    page_size: int
    page_count: int
    statistics: BuildStatisticsPair
    repos: list[str]
    modules: list[str]


class BuildTreeRequest(BaseModel):
    artifacts: list[Artifact] = Field(default_factory=list)
    build_id: str = Field(min_length=1)


class BuildTreeResponse(BaseModel):
    build: BuildSummary
    tree: ArtifactNodeView
    file_count: int
    folder_count: int
