"""Inbound GitHub payload models.

Only the fields the size check reads are declared; everything else in the
webhook body is ignored on validation.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict


class _Payload(BaseModel):
    model_config = ConfigDict(frozen=True, extra="ignore")


class Owner(_Payload):
    login: str


class Repository(_Payload):
    id: int
    name: str
    full_name: str = ""
    owner: Owner


class BranchRef(_Payload):
    name: str


class CommitDetail(_Payload):
    message: str = ""


class StatusCommit(_Payload):
    sha: str = ""
    commit: CommitDetail = CommitDetail()


class StatusEvent(_Payload):
    """A GitHub ``status`` webhook payload."""

    sha: str
    state: str
    context: str
    target_url: str | None = None
    description: str | None = None
    repository: Repository
    branches: list[BranchRef] = []
    commit: StatusCommit = StatusCommit()

    @property
    def owner(self) -> str:
        return self.repository.owner.login

    @property
    def repo(self) -> str:
        return self.repository.name

    @property
    def commit_message(self) -> str:
        return self.commit.commit.message


class GitRef(_Payload):
    ref: str = ""
    sha: str


class PullRequest(_Payload):
    """The subset of a GitHub pull request used to locate the baseline."""

    number: int
    state: str = "open"
    head: GitRef
    base: GitRef
