"""Snapshot tree models — the persisted, nested per-commit size record.

A snapshot's tree is a tagged variant: every node is either a ``Leaf``
carrying a byte size or a ``Branch`` mapping path segments to child nodes.
Metadata (``change``, ``message``, ``timestamp``) lives beside the tree
and only meets it again in the stored document form.
"""

from __future__ import annotations

import time
from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, ConfigDict, Field

METADATA_KEYS: frozenset[str] = frozenset({"change", "message", "timestamp"})


class SnapshotFormatError(ValueError):
    """Raised when a stored document cannot be read as a snapshot."""


class Leaf(BaseModel):
    """Terminal node: the size of one artifact."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["leaf"] = "leaf"
    size_bytes: int = Field(ge=0)


class Branch(BaseModel):
    """Intermediate node: one path segment shared by one or more artifacts."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["branch"] = "branch"
    children: dict[str, TreeNode] = {}


TreeNode = Annotated[Union[Leaf, Branch], Field(discriminator="kind")]

Branch.model_rebuild()


def _now_ms() -> int:
    return int(time.time() * 1000)


class SnapshotMetadata(BaseModel):
    """Sibling fields stored next to the tree."""

    model_config = ConfigDict(frozen=True)

    change: str = "application"
    message: str = ""
    timestamp: int = Field(default_factory=_now_ms)


class Snapshot(BaseModel):
    """Sizes of one project's artifacts at one (branch, commit)."""

    model_config = ConfigDict(frozen=True)

    project: str
    tree: dict[str, TreeNode] = {}
    metadata: SnapshotMetadata = SnapshotMetadata(timestamp=0)

    def to_document(self) -> dict[str, Any]:
        """Render the nested mapping that is written to storage.

        Metadata keys sit at the top level next to the first tree level.
        """
        document: dict[str, Any] = _tree_to_document(self.tree)
        document.update(self.metadata.model_dump())
        return document

    @classmethod
    def from_document(cls, project: str, document: dict[str, Any]) -> Snapshot:
        """Read a stored document back into a snapshot.

        Metadata keys are only recognised at the top level; the same names
        deeper in the tree are ordinary path segments.
        """
        if not isinstance(document, dict):
            raise SnapshotFormatError(
                f"Snapshot for {project!r} must be a mapping, got {type(document).__name__}"
            )
        meta = {k: document[k] for k in METADATA_KEYS if k in document}
        body = {k: v for k, v in document.items() if k not in METADATA_KEYS}
        try:
            metadata = SnapshotMetadata(**meta)
        except ValueError as exc:
            raise SnapshotFormatError(f"Invalid snapshot metadata for {project!r}: {exc}") from exc
        return cls(
            project=project,
            tree=_document_to_tree(body, project),
            metadata=metadata,
        )


def _tree_to_document(children: dict[str, TreeNode]) -> dict[str, Any]:
    out: dict[str, Any] = {}
    for key, node in children.items():
        if isinstance(node, Leaf):
            out[key] = node.size_bytes
        else:
            out[key] = _tree_to_document(node.children)
    return out


def _document_to_tree(mapping: dict[str, Any], where: str) -> dict[str, TreeNode]:
    tree: dict[str, TreeNode] = {}
    for key, value in mapping.items():
        path = f"{where}/{key}"
        if isinstance(value, dict):
            tree[key] = Branch(children=_document_to_tree(value, path))
        else:
            tree[key] = Leaf(size_bytes=_coerce_size(value, path))
    return tree


def _coerce_size(value: Any, path: str) -> int:
    # JSON stores may hand back 1234.0 for 1234
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise SnapshotFormatError(f"Leaf {path!r} is not a byte size: {value!r}")
    if isinstance(value, float) and not value.is_integer():
        raise SnapshotFormatError(f"Leaf {path!r} has a fractional size: {value!r}")
    if value < 0:
        raise SnapshotFormatError(f"Leaf {path!r} has a negative size: {value!r}")
    return int(value)
