"""GitHub REST client — commit statuses, pull request lookup, repo config.

``GitHubClient`` implements the ``StatusSink`` and ``PullRequestFinder``
protocols.  ``GitHubConfigSource`` wraps it as a ``ConfigSource`` that
falls back to default settings when the repository's file is missing or
unreadable.
"""

from __future__ import annotations

import logging
from typing import Any

import requests

from sizewatch.models.config import SizeConfig
from sizewatch.models.events import PullRequest, StatusEvent
from sizewatch.models.status import CommitState
from sizewatch.repo_config import RepositoryConfigError, parse_repository_config

logger = logging.getLogger(__name__)

DEFAULT_API_BASE = "https://api.github.com"
DEFAULT_CONFIG_PATH = ".github/angular-robot.yml"

# GitHub rejects longer status descriptions.
MAX_DESCRIPTION_LENGTH = 140


class GitHubApiError(RuntimeError):
    """Raised when a GitHub API call fails."""


def truncate_description(description: str, limit: int = MAX_DESCRIPTION_LENGTH) -> str:
    if len(description) <= limit:
        return description
    return description[: limit - 3] + "..."


class GitHubClient:
    """Thin wrapper over the GitHub REST endpoints the size check needs.

    Parameters
    ----------
    token:
        Token sent as ``Authorization: token ...``.  Optional for reads of
        public repositories.
    api_base:
        Base URL of the REST API (GitHub Enterprise installs differ).
    timeout:
        Per-request timeout in seconds.
    session:
        Pre-configured ``requests.Session``; one is created if omitted.
    """

    def __init__(
        self,
        token: str = "",
        api_base: str = DEFAULT_API_BASE,
        *,
        timeout: float = 30.0,
        session: requests.Session | None = None,
    ) -> None:
        self._api_base = api_base.rstrip("/")
        self._timeout = timeout
        self.session = session or requests.Session()
        self.session.headers["Accept"] = "application/vnd.github+json"
        if token:
            self.session.headers["Authorization"] = f"token {token}"

    def _url(self, path: str) -> str:
        return f"{self._api_base}{path}"

    # ------------------------------------------------------------------
    # Pull requests
    # ------------------------------------------------------------------

    def find_pull_request(self, event: StatusEvent) -> PullRequest | None:
        """Return the open pull request whose head is the event's commit."""
        url = self._url(f"/repos/{event.owner}/{event.repo}/commits/{event.sha}/pulls")
        try:
            response = self.session.get(url, timeout=self._timeout)
            response.raise_for_status()
            payload: Any = response.json()
        except requests.exceptions.RequestException as exc:
            raise GitHubApiError(f"Pull request lookup failed for {event.sha}: {exc}") from exc
        except ValueError as exc:
            raise GitHubApiError(f"Pull request lookup for {event.sha} is not JSON: {exc}") from exc

        if not isinstance(payload, list):
            raise GitHubApiError(f"Pull request lookup for {event.sha} is not a list")
        open_prs = [
            PullRequest.model_validate(item)
            for item in payload
            if isinstance(item, dict) and item.get("state") == "open"
        ]
        for pr in open_prs:
            if pr.head.sha == event.sha:
                return pr
        return open_prs[0] if open_prs else None

    # ------------------------------------------------------------------
    # Statuses
    # ------------------------------------------------------------------

    def set_status(
        self,
        event: StatusEvent,
        state: CommitState,
        description: str,
        context: str,
    ) -> None:
        """Create a commit status on the event's commit."""
        url = self._url(f"/repos/{event.owner}/{event.repo}/statuses/{event.sha}")
        body: dict[str, Any] = {
            "state": state.value,
            "description": truncate_description(description),
            "context": context,
        }
        if event.target_url:
            body["target_url"] = event.target_url
        try:
            response = self.session.post(url, json=body, timeout=self._timeout)
            response.raise_for_status()
        except requests.exceptions.RequestException as exc:
            raise GitHubApiError(f"Failed to set status on {event.sha}: {exc}") from exc
        logger.info("Status %s on %s (%s): %s", state.value, event.sha[:7], context, description)

    # ------------------------------------------------------------------
    # Repository config
    # ------------------------------------------------------------------

    def fetch_repository_config(
        self, owner: str, repo: str, path: str = DEFAULT_CONFIG_PATH
    ) -> str | None:
        """Return the raw text of the repo's config file, or ``None`` if absent."""
        url = self._url(f"/repos/{owner}/{repo}/contents/{path}")
        try:
            response = self.session.get(
                url,
                headers={"Accept": "application/vnd.github.raw"},
                timeout=self._timeout,
            )
            if response.status_code == 404:
                return None
            response.raise_for_status()
        except requests.exceptions.RequestException as exc:
            raise GitHubApiError(f"Failed to read {path} from {owner}/{repo}: {exc}") from exc
        return response.text

    def close(self) -> None:
        self.session.close()


class GitHubConfigSource:
    """``ConfigSource`` reading the size section from the repository itself.

    Only an explicit ``disabled: true`` disables the check; a missing or
    malformed file falls back to defaults.
    """

    def __init__(self, client: GitHubClient, path: str = DEFAULT_CONFIG_PATH) -> None:
        self._client = client
        self._path = path

    def load(self, event: StatusEvent) -> SizeConfig:
        text = self._client.fetch_repository_config(event.owner, event.repo, self._path)
        if text is None:
            logger.debug("No %s in %s; using defaults", self._path, event.repository.full_name)
            return SizeConfig()
        try:
            return parse_repository_config(text).size
        except RepositoryConfigError as exc:
            logger.warning(
                "Ignoring malformed %s in %s: %s", self._path, event.repository.full_name, exc
            )
            return SizeConfig()
