"""Commit status and size-check workflow state models."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict

from sizewatch.models.artifacts import BuildArtifactDiff


class CommitState(str, Enum):
    """GitHub commit status states."""

    PENDING = "pending"
    SUCCESS = "success"
    FAILURE = "failure"
    ERROR = "error"


class WorkflowState(str, Enum):
    """Reported state of one size check."""

    IDLE = "idle"
    PENDING = "pending"
    SUCCESS = "success"
    FAILURE = "failure"


# SUCCESS and FAILURE are terminal.
VALID_TRANSITIONS: dict[WorkflowState, set[WorkflowState]] = {
    WorkflowState.IDLE: {WorkflowState.PENDING},
    WorkflowState.PENDING: {WorkflowState.SUCCESS, WorkflowState.FAILURE},
    WorkflowState.SUCCESS: set(),
    WorkflowState.FAILURE: set(),
}


class CheckPath(str, Enum):
    """Which branch of the workflow handled an event."""

    DISCARDED = "discarded"
    STORED = "stored"
    COMPARED = "compared"


class GateResult(BaseModel):
    """Verdict of the size gate for one diff."""

    model_config = ConfigDict(frozen=True)

    state: CommitState
    description: str


class CheckOutcome(BaseModel):
    """What the workflow did with one inbound event."""

    model_config = ConfigDict(frozen=True)

    path: CheckPath
    state: WorkflowState = WorkflowState.IDLE
    description: str = ""
    diff: BuildArtifactDiff | None = None
    stored_keys: list[str] = []
