"""Folder/file hierarchy beneath a single build."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field

from artifact_catalog.schemas.artifacts import Artifact, ArtifactNodeView
from artifact_catalog.services.path_parser import PathParser, get_path_parser

ROOT_NAME = "root"


@dataclass
class ArtifactNode:
    name: str
    full_path: str
    is_file: bool = False
    size: int | None = None
    created: str | None = None
    # Insertion-ordered: dict preserves first-insertion order and keeps a
    # replaced key in its original slot.
    children: dict[str, ArtifactNode] = field(default_factory=dict)
    artifact: Artifact | None = None


def _folder(name: str, full_path: str) -> ArtifactNode:
    return ArtifactNode(name=name, full_path=full_path)


def build_artifact_tree(artifacts: Iterable[Artifact], parser: PathParser | None = None) -> ArtifactNode:
    """Rebuild the folder tree of one build from its artifacts' remainder paths.

    Every remainder segment except the last becomes a folder.  The file itself is
    keyed by the artifact's own ``name``, so a later artifact with the same name
    in the same folder replaces the earlier leaf.
    """
    parser = parser or get_path_parser()
    root = _folder(ROOT_NAME, "")

    for artifact in artifacts:
        info = parser.parse(artifact.path, artifact.name)
        if info is None:
            continue

        segments = [part for part in info.remainder_path.split("/") if part]
        folders = segments[:-1]

        current = root
        for depth, folder_name in enumerate(folders):
            child = current.children.get(folder_name)
            if child is None or child.is_file:
                child = _folder(folder_name, "/".join(folders[: depth + 1]))
                current.children[folder_name] = child
            current = child

        current.children[info.file_name] = ArtifactNode(
            name=info.file_name,
            full_path=f"{info.remainder_path}/{info.file_name}" if info.remainder_path else info.file_name,
            is_file=True,
            size=artifact.size,
            created=artifact.created,
            artifact=artifact,
        )

    return root


def sorted_children(node: ArtifactNode) -> list[ArtifactNode]:
    """Children in display order: folders first, then by name (case-sensitive)."""
    return sorted(node.children.values(), key=lambda child: (child.is_file, child.name))


def iter_files(node: ArtifactNode) -> list[ArtifactNode]:
    if node.is_file:
        return [node]
    files: list[ArtifactNode] = []
    for child in node.children.values():
        files.extend(iter_files(child))
    return files


def count_folders(node: ArtifactNode) -> int:
    total = 0
    for child in node.children.values():
        if not child.is_file:
            total += 1 + count_folders(child)
    return total


def node_to_view(node: ArtifactNode) -> ArtifactNodeView:
    return ArtifactNodeView(
        name=node.name,
        full_path=node.full_path,
        is_file=node.is_file,
        size=node.size,
        created=node.created,
        children=[node_to_view(child) for child in sorted_children(node)],
        artifact=node.artifact,
    )
