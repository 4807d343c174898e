from fastapi import APIRouter, HTTPException

from artifact_catalog.core.config import get_settings
from artifact_catalog.schemas.artifacts import (
    BuildQueryRequest,
    BuildQueryResponse,
    BuildStatisticsPair,
    BuildTreeRequest,
    BuildTreeResponse,
)
from artifact_catalog.services.artifact_tree import count_folders, iter_files, node_to_view
from artifact_catalog.services.build_groups import assemble_build_groups, find_build, group_to_summary
from artifact_catalog.services.build_query import BuildQuery, run_query

router = APIRouter(prefix="/builds", tags=["builds"])


@router.post("/query", response_model=BuildQueryResponse)
def query_builds(payload: BuildQueryRequest) -> BuildQueryResponse:
    query = BuildQuery(
        search_term=payload.search_term,
        repo_filter=payload.repo_filter,
        sort_field=payload.sort_field,
        sort_order=payload.sort_order,
        page=payload.page,
        page_size=payload.page_size or get_settings().default_page_size,
    )
    result = run_query(assemble_build_groups(payload.artifacts), query)

    return BuildQueryResponse(
        builds=[group_to_summary(group) for group in result.page_items],
        total_filtered=len(result.filtered),
        page=query.page,
        page_size=query.page_size,
        page_count=result.page_count,
        statistics=BuildStatisticsPair(
            total=result.total_statistics,
            filtered=result.filtered_statistics,
        ),
        repos=result.repos,
        modules=result.modules,
    )


@router.post("/tree", response_model=BuildTreeResponse)
def build_tree(payload: BuildTreeRequest) -> BuildTreeResponse:
    group = find_build(assemble_build_groups(payload.artifacts), payload.build_id)
    if group is None:
        raise HTTPException(status_code=404, detail="build not found")

    return BuildTreeResponse(
        build=group_to_summary(group),
        tree=node_to_view(group.tree),
        file_count=len(iter_files(group.tree)),
        folder_count=count_folders(group.tree),
    )
