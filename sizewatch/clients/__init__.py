"""Collaborator protocols for the size check and their HTTP implementations.

The workflow depends only on these protocols; ``CircleCiClient`` and
``GitHubClient`` are the production implementations.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from sizewatch.models.artifacts import BuildArtifact
from sizewatch.models.config import SizeConfig
from sizewatch.models.events import PullRequest, StatusEvent
from sizewatch.models.status import CommitState


@runtime_checkable
class ArtifactSource(Protocol):
    """Yields the measured artifacts of the build an event points at."""

    def fetch_event_artifacts(self, event: StatusEvent) -> list[BuildArtifact]:
        ...


@runtime_checkable
class StatusSink(Protocol):
    """Writes a commit status for the event's commit."""

    def set_status(
        self,
        event: StatusEvent,
        state: CommitState,
        description: str,
        context: str,
    ) -> None:
        ...


@runtime_checkable
class PullRequestFinder(Protocol):
    """Resolves the open pull request a commit belongs to, if any."""

    def find_pull_request(self, event: StatusEvent) -> PullRequest | None:
        ...


@runtime_checkable
class ConfigSource(Protocol):
    """Supplies the size configuration of the event's repository."""

    def load(self, event: StatusEvent) -> SizeConfig:
        ...


__all__ = [
    "ArtifactSource",
    "ConfigSource",
    "PullRequestFinder",
    "StatusSink",
]
