"""Fold flat artifact lists into snapshot trees and unfold them again.

``encode`` builds the tree with a pure recursive insert: every level returns
a fresh mapping rather than mutating a shared cursor.  Two artifacts that
share a path prefix share the corresponding branch; two artifacts with the
same full path collapse to the later one.

``decode`` walks the tree depth-first in key order.  Callers must not rely
on the order of the returned list.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence

from sizewatch.models.artifacts import BuildArtifact
from sizewatch.models.snapshot import (
    Branch,
    Leaf,
    Snapshot,
    SnapshotMetadata,
    TreeNode,
)


class MixedProjectError(ValueError):
    """Raised when one encode call receives artifacts of several projects."""


def encode(
    project: str,
    artifacts: Iterable[BuildArtifact],
    metadata: SnapshotMetadata | None = None,
) -> Snapshot:
    """Build the snapshot for *project* from its artifacts."""
    tree: dict[str, TreeNode] = {}
    for artifact in artifacts:
        if artifact.project_name != project:
            raise MixedProjectError(
                f"Artifact {artifact.full_path!r} does not belong to project {project!r}"
            )
        tree = _insert(tree, artifact.context_path, artifact.size_bytes)
    return Snapshot(
        project=project,
        tree=tree,
        metadata=metadata or SnapshotMetadata(),
    )


def encode_projects(
    artifacts: Sequence[BuildArtifact],
    metadata: SnapshotMetadata | None = None,
) -> dict[str, Snapshot]:
    """Group *artifacts* by project and encode each group.

    Projects appear in the order they are first seen.
    """
    grouped: dict[str, list[BuildArtifact]] = {}
    for artifact in artifacts:
        grouped.setdefault(artifact.project_name, []).append(artifact)
    return {
        project: encode(project, members, metadata)
        for project, members in grouped.items()
    }


def _insert(
    children: Mapping[str, TreeNode], path: Sequence[str], size_bytes: int
) -> dict[str, TreeNode]:
    head, rest = path[0], path[1:]
    updated = dict(children)
    if not rest:
        updated[head] = Leaf(size_bytes=size_bytes)
        return updated

    existing = children.get(head)
    below = existing.children if isinstance(existing, Branch) else {}
    updated[head] = Branch(children=_insert(below, rest, size_bytes))
    return updated


def decode(snapshot: Snapshot) -> list[BuildArtifact]:
    """Unfold *snapshot* into one ``BuildArtifact`` per leaf."""
    artifacts: list[BuildArtifact] = []
    _walk(snapshot.tree, snapshot.project, (), artifacts)
    return artifacts


def _walk(
    children: Mapping[str, TreeNode],
    project: str,
    prefix: tuple[str, ...],
    out: list[BuildArtifact],
) -> None:
    for key, node in children.items():
        path = (*prefix, key)
        if isinstance(node, Branch):
            _walk(node.children, project, path, out)
        else:
            out.append(
                BuildArtifact(
                    project_name=project,
                    context_path=path,
                    size_bytes=node.size_bytes,
                )
            )
