from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass, field

from artifact_catalog.schemas.artifacts import Artifact, BuildSummary
from artifact_catalog.services.artifact_tree import ROOT_NAME, ArtifactNode, build_artifact_tree
from artifact_catalog.services.path_parser import PathParser, get_path_parser

logger = logging.getLogger(__name__)


@dataclass
class BuildGroup:
    id: str
    module_name: str
    branch_type: str
    branch_name: str
    build_number: str
    repo: str
    latest_created: str
    artifacts: list[Artifact] = field(default_factory=list)
    tree: ArtifactNode = field(default_factory=lambda: ArtifactNode(name=ROOT_NAME, full_path=""))
    total_size: int = 0
    artifact_count: int = 0

    def add(self, artifact: Artifact) -> None:
        self.artifacts.append(artifact)
        self.total_size += artifact.size
        self.artifact_count += 1
        if artifact.created > self.latest_created:
            self.latest_created = artifact.created


def build_key(module_name: str, branch_type: str, branch_name: str, build_number: str, repo: str) -> str:
    return "|".join((module_name, branch_type, branch_name, build_number, repo))


def assemble_build_groups(artifacts: Iterable[Artifact] | None, parser: PathParser | None = None) -> list[BuildGroup]:
    """Group artifacts by (module, branch type, branch name, build number, repo).

    Groups come back in the order their first artifact appeared.  Artifacts whose
    path has fewer than four segments are left out.
    """
    parser = parser or get_path_parser()
    groups: dict[str, BuildGroup] = {}
    seen = 0
    skipped = 0

    for artifact in artifacts or ():
        seen += 1
        info = parser.parse(artifact.path, artifact.name)
        if info is None:
            skipped += 1
            logger.debug("skipping artifact outside build layout: %s", artifact.path)
            continue

        key = build_key(info.module_name, info.branch_type, info.branch_name, info.build_number, artifact.repo)
        group = groups.get(key)
        if group is None:
            group = BuildGroup(
                id=key,
                module_name=info.module_name,
                branch_type=info.branch_type,
                branch_name=info.branch_name,
                build_number=info.build_number,
                repo=artifact.repo,
                latest_created=artifact.created,
            )
            groups[key] = group
        group.add(artifact)

    for group in groups.values():
        group.tree = build_artifact_tree(group.artifacts, parser=parser)

    logger.debug(
        "assembled %d build groups from %d artifacts (%d skipped)",
        len(groups),
        seen,
        skipped,
    )
    return list(groups.values())


def unique_repos(groups: Iterable[BuildGroup]) -> list[str]:
    return sorted({group.repo for group in groups})


def unique_modules(groups: Iterable[BuildGroup]) -> list[str]:
    return sorted({group.module_name for group in groups})


def find_build(groups: Iterable[BuildGroup], build_id: str) -> BuildGroup | None:
    for group in groups:
        if group.id == build_id:
            return group
    return None


def group_to_summary(group: BuildGroup) -> BuildSummary:
    return BuildSummary(
        id=group.id,
        module_name=group.module_name,
        branch_type=group.branch_type,
        branch_name=group.branch_name,
        build_number=group.build_number,
        repo=group.repo,
        total_size=group.total_size,
        artifact_count=group.artifact_count,
        latest_created=group.latest_created,
        artifacts=list(group.artifacts),
    )
