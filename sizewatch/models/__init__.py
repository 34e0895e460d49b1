"""Sizewatch data models — all Pydantic v2, all frozen (immutable)."""

from sizewatch.models.artifacts import BuildArtifact, BuildArtifactDiff
from sizewatch.models.config import RepositoryConfig, SizeConfig, StatusConfig
from sizewatch.models.events import (
    BranchRef,
    GitRef,
    PullRequest,
    Repository,
    StatusEvent,
)
from sizewatch.models.snapshot import (
    METADATA_KEYS,
    Branch,
    Leaf,
    Snapshot,
    SnapshotFormatError,
    SnapshotMetadata,
    TreeNode,
)
from sizewatch.models.status import (
    VALID_TRANSITIONS,
    CheckOutcome,
    CheckPath,
    CommitState,
    GateResult,
    WorkflowState,
)

__all__ = [
    # artifacts
    "BuildArtifact",
    "BuildArtifactDiff",
    # config
    "RepositoryConfig",
    "SizeConfig",
    "StatusConfig",
    # events
    "BranchRef",
    "GitRef",
    "PullRequest",
    "Repository",
    "StatusEvent",
    # snapshot
    "METADATA_KEYS",
    "Branch",
    "Leaf",
    "Snapshot",
    "SnapshotFormatError",
    "SnapshotMetadata",
    "TreeNode",
    # status
    "VALID_TRANSITIONS",
    "CheckOutcome",
    "CheckPath",
    "CommitState",
    "GateResult",
    "WorkflowState",
]
