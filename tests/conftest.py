"""Shared test fixtures for Sizewatch."""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path
from typing import Any
from unittest.mock import Mock

import pytest

from sizewatch.clients import ArtifactSource, PullRequestFinder, StatusSink
from sizewatch.core.snapshot_store import InMemorySnapshotStore, SqliteSnapshotStore
from sizewatch.core.workflow import SizeCheckWorkflow
from sizewatch.models.config import SizeConfig
from sizewatch.models.events import PullRequest, StatusEvent

CIRCLE_URL = "https://circleci.com/gh/angular/angular/4242?utm_campaign=vcs"


@pytest.fixture
def memory_store() -> InMemorySnapshotStore:
    """Provide an empty in-memory snapshot store."""
    return InMemorySnapshotStore()


@pytest.fixture
def sqlite_store(tmp_path: Path) -> SqliteSnapshotStore:
    """Provide a fresh SqliteSnapshotStore backed by a temp database."""
    return SqliteSnapshotStore(tmp_path / "snapshots.db")


@pytest.fixture
def size_config() -> SizeConfig:
    """Provide a size config with a 40 byte threshold."""
    return SizeConfig(max_size_increase=40)


# ---------------------------------------------------------------------------
# Factories — shared across test modules
# ---------------------------------------------------------------------------


@pytest.fixture
def make_status_event() -> Callable[..., StatusEvent]:
    """Factory fixture: build a StatusEvent from a webhook-shaped payload."""

    def _factory(**overrides: Any) -> StatusEvent:
        payload: dict[str, Any] = {
            "sha": "c0ffee0000000000000000000000000000000001",
            "state": "success",
            "context": "ci/circleci: build",
            "target_url": CIRCLE_URL,
            "description": "Your tests passed on CircleCI!",
            "repository": {
                "id": 24195339,
                "name": "angular",
                "full_name": "angular/angular",
                "owner": {"login": "angular"},
            },
            "branches": [{"name": "main"}],
            "commit": {"sha": "c0ffee", "commit": {"message": "feat: add thing"}},
        }
        payload.update(overrides)
        return StatusEvent.model_validate(payload)

    return _factory


@pytest.fixture
def status_event(make_status_event: Callable[..., StatusEvent]) -> StatusEvent:
    """Convenience: a ready-made successful CircleCI status event."""
    return make_status_event()


@pytest.fixture
def pull_request() -> PullRequest:
    """A PR whose base is main at a fixed sha."""
    return PullRequest.model_validate(
        {
            "number": 101,
            "state": "open",
            "head": {"ref": "feature", "sha": "c0ffee0000000000000000000000000000000001"},
            "base": {"ref": "main", "sha": "ba5e000000000000000000000000000000000000"},
        }
    )


# ---------------------------------------------------------------------------
# Collaborator spies
# ---------------------------------------------------------------------------


@pytest.fixture
def artifact_source() -> Mock:
    source = Mock(spec=ArtifactSource)
    source.fetch_event_artifacts.return_value = []
    return source


@pytest.fixture
def pr_finder() -> Mock:
    finder = Mock(spec=PullRequestFinder)
    finder.find_pull_request.return_value = None
    return finder


@pytest.fixture
def status_sink() -> Mock:
    return Mock(spec=StatusSink)


@pytest.fixture
def workflow(
    memory_store: InMemorySnapshotStore,
    artifact_source: Mock,
    pr_finder: Mock,
    status_sink: Mock,
) -> SizeCheckWorkflow:
    """Provide a SizeCheckWorkflow wired to an in-memory store and spies."""
    return SizeCheckWorkflow(
        store=memory_store,
        artifacts=artifact_source,
        pull_requests=pr_finder,
        statuses=status_sink,
    )
