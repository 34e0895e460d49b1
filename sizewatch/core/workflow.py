"""Size check workflow — reacts to build-completion status events.

For every inbound status event the workflow takes one of three paths:

1. **Discard** — the check is disabled, the status context is not the
   configured CircleCI build, or the build did not succeed.  Nothing is
   written.
2. **Store** — the commit has no open pull request.  The build's artifacts
   are encoded and stored as a snapshot for every (project, branch) pair.
3. **Compare** — the commit heads an open pull request.  A pending status
   is written, the build is diffed against the PR base snapshots, and the
   size gate's verdict is written as the final status.

The reported status follows ``VALID_TRANSITIONS``: idle -> pending ->
success | failure.  Errors propagate; on the compare path the status is
left at pending.
"""

from __future__ import annotations

import logging

from sizewatch.clients import ArtifactSource, ConfigSource, PullRequestFinder, StatusSink
from sizewatch.core import diff_engine, path_codec, size_gate
from sizewatch.core.snapshot_store import SnapshotStore
from sizewatch.models.artifacts import BuildArtifact, BuildArtifactDiff
from sizewatch.models.config import SizeConfig
from sizewatch.models.events import PullRequest, StatusEvent
from sizewatch.models.snapshot import SnapshotMetadata
from sizewatch.models.status import (
    VALID_TRANSITIONS,
    CheckOutcome,
    CheckPath,
    CommitState,
    WorkflowState,
)

logger = logging.getLogger(__name__)

SUCCESS_STATE = "success"
PENDING_DESCRIPTION = "Calculating artifact sizes"

_COMMIT_STATES: dict[WorkflowState, CommitState] = {
    WorkflowState.PENDING: CommitState.PENDING,
    WorkflowState.SUCCESS: CommitState.SUCCESS,
    WorkflowState.FAILURE: CommitState.FAILURE,
}


class InvalidTransitionError(RuntimeError):
    """Raised when a requested status transition is not valid."""


class StatusTracker:
    """Guards the status transitions of one check and forwards them to a sink.

    Parameters
    ----------
    sink:
        Where commit statuses are written.
    event:
        The event whose commit receives the statuses.
    context:
        The status context name to write under.
    """

    def __init__(self, sink: StatusSink, event: StatusEvent, context: str) -> None:
        self._sink = sink
        self._event = event
        self._context = context
        self.state = WorkflowState.IDLE
        self.history: list[str] = []

    def transition(self, target: WorkflowState, description: str) -> None:
        allowed = VALID_TRANSITIONS.get(self.state, set())
        if target not in allowed:
            raise InvalidTransitionError(
                f"Cannot transition size check from {self.state.value} to {target.value}. "
                f"Allowed: {sorted(s.value for s in allowed)}"
            )
        self._sink.set_status(self._event, _COMMIT_STATES[target], description, self._context)
        self.history.append(f"{self.state.value}->{target.value}")
        self.state = target


class SizeCheckWorkflow:
    """Orchestrates one size check per inbound status event.

    Parameters
    ----------
    store:
        Snapshot storage.
    artifacts:
        Source of the measured artifacts for an event's build.
    pull_requests:
        Resolves whether the event's commit belongs to an open PR.
    statuses:
        Commit status sink.
    configs:
        Per-repository configuration.  May be omitted when ``config`` is
        passed to :meth:`handle` directly.
    """

    def __init__(
        self,
        store: SnapshotStore,
        artifacts: ArtifactSource,
        pull_requests: PullRequestFinder,
        statuses: StatusSink,
        configs: ConfigSource | None = None,
    ) -> None:
        self._store = store
        self._artifacts = artifacts
        self._pull_requests = pull_requests
        self._statuses = statuses
        self._configs = configs

    # ------------------------------------------------------------------
    # Entry point
    # ------------------------------------------------------------------

    def handle(self, event: StatusEvent, config: SizeConfig | None = None) -> CheckOutcome:
        """Process one status event start to finish."""
        if config is None:
            config = self._configs.load(event) if self._configs else SizeConfig()

        reason = self.discard_reason(event, config)
        if reason:
            logger.debug("Discarding status event for %s: %s", event.sha[:7], reason)
            return CheckOutcome(path=CheckPath.DISCARDED, description=reason)

        pr = self._pull_requests.find_pull_request(event)
        if pr is None:
            return self.store_artifacts(event)
        return self.compare(event, pr, config)

    @staticmethod
    def discard_reason(event: StatusEvent, config: SizeConfig) -> str:
        """Return why *event* is ignored, or an empty string if it is not."""
        if config.disabled:
            return "size check disabled"
        if event.context != config.circle_ci_status_name:
            return f"status context {event.context!r} is not {config.circle_ci_status_name!r}"
        if event.state != SUCCESS_STATE:
            return f"build state is {event.state!r}"
        return ""

    # ------------------------------------------------------------------
    # Branch push
    # ------------------------------------------------------------------

    def store_artifacts(self, event: StatusEvent) -> CheckOutcome:
        """Snapshot the event's build for each of its branches."""
        artifacts = self._artifacts.fetch_event_artifacts(event)
        metadata = SnapshotMetadata(message=event.commit_message)
        snapshots = path_codec.encode_projects(artifacts, metadata)

        keys: list[str] = []
        for project, snapshot in snapshots.items():
            for branch in event.branches:
                keys.append(self._store.put(project, branch.name, event.sha, snapshot))

        logger.info(
            "Stored %d snapshots for %s (%d projects, %d branches)",
            len(keys),
            event.sha[:7],
            len(snapshots),
            len(event.branches),
        )
        return CheckOutcome(
            path=CheckPath.STORED,
            description=f"stored {len(keys)} snapshots",
            stored_keys=keys,
        )

    # ------------------------------------------------------------------
    # Pull request comparison
    # ------------------------------------------------------------------

    def compare(self, event: StatusEvent, pr: PullRequest, config: SizeConfig) -> CheckOutcome:
        """Diff the event's build against the PR base and report the verdict."""
        tracker = StatusTracker(self._statuses, event, config.status.context)
        tracker.transition(WorkflowState.PENDING, PENDING_DESCRIPTION)

        try:
            candidate = self._artifacts.fetch_event_artifacts(event)
            baseline = self.baseline_artifacts(pr)
        except Exception:
            logger.exception(
                "Size check for PR #%d (%s) aborted; status left pending", pr.number, event.sha[:7]
            )
            raise

        result = diff_engine.diff(baseline, candidate)
        if result.artifact is None:
            state, description = WorkflowState.SUCCESS, size_gate.NO_ARTIFACTS_DESCRIPTION
        else:
            verdict = size_gate.evaluate(result, config)
            state = (
                WorkflowState.FAILURE
                if verdict.state is CommitState.FAILURE
                else WorkflowState.SUCCESS
            )
            description = verdict.description

        tracker.transition(state, description)
        logger.info("PR #%d size check %s: %s", pr.number, state.value, description)
        return CheckOutcome(
            path=CheckPath.COMPARED,
            state=state,
            description=description,
            diff=result,
        )

    def baseline_artifacts(self, pr: PullRequest) -> list[BuildArtifact]:
        """Decode the base-branch snapshot of every known project.

        Projects without a snapshot at the base commit contribute nothing.
        """
        artifacts: list[BuildArtifact] = []
        for project in self._store.list_projects():
            snapshot = self._store.get(project, pr.base.ref, pr.base.sha)
            if snapshot is None:
                logger.debug("No baseline for %s at %s@%s", project, pr.base.ref, pr.base.sha[:7])
                continue
            artifacts.extend(path_codec.decode(snapshot))
        return artifacts


def compare_snapshots(
    store: SnapshotStore,
    project: str,
    base: tuple[str, str],
    head: tuple[str, str],
) -> BuildArtifactDiff:
    """Diff two stored snapshots of *project*; missing snapshots are empty."""
    lists: list[list[BuildArtifact]] = []
    for branch, sha in (base, head):
        snapshot = store.get(project, branch, sha)
        lists.append(path_codec.decode(snapshot) if snapshot else [])
    return diff_engine.diff(lists[0], lists[1])
