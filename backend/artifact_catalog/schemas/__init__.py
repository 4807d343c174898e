from artifact_catalog.schemas.artifacts import (
    ALL_REPOS,
    Artifact,
    ArtifactNodeView,
    BuildQueryRequest,
    BuildQueryResponse,
    BuildStatistics,
    BuildStatisticsPair,
    BuildSummary,
    BuildTreeRequest,
    BuildTreeResponse,
    SortField,
    SortOrder,
)

__all__ = [
    "ALL_REPOS",
    "Artifact",
    "ArtifactNodeView",
    "BuildQueryRequest",
    "BuildQueryResponse",
    "BuildStatistics",
    "BuildStatisticsPair",
    "BuildSummary",
    "BuildTreeRequest",
    "BuildTreeResponse",
    "SortField",
    "SortOrder",
]
