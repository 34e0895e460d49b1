"""CircleCI artifact source.

Lists the artifacts of a build through the v1.1 API and measures each one
by the ``Content-Length`` of its download URL.  The per-artifact lookups
are independent and run concurrently; the result keeps the listing order.
"""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Any

import requests
from pydantic import BaseModel, ConfigDict

from sizewatch.models.artifacts import BuildArtifact
from sizewatch.models.events import StatusEvent

logger = logging.getLogger(__name__)

DEFAULT_API_BASE = "https://circleci.com/api/v1.1"


class MalformedBuildUrlError(ValueError):
    """Raised when a status target URL does not point at a CircleCI build."""


class ArtifactFetchError(RuntimeError):
    """Raised when listing or measuring build artifacts fails."""


class CircleCiArtifact(BaseModel):
    """One entry of the CircleCI artifact listing."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    path: str
    url: str
    pretty_path: str = ""
    node_index: int = 0


def parse_build_number(url: str | None) -> int:
    """Extract the build number from a CircleCI build URL.

    The URL must look like ``https://circleci.com/gh/{owner}/{repo}/{build}``,
    optionally followed by a query string.

    >>> parse_build_number("https://circleci.com/gh/angular/angular/4242?utm=x")
    4242
    """
    parts = (url or "").split("/")
    if len(parts) > 6 and parts[2] == "circleci.com" and parts[3] == "gh":
        build = parts[6].split("?")[0]
        if build.isdigit():
            return int(build)
    raise MalformedBuildUrlError(f"incorrect external-build path: {url!r}")


class CircleCiClient:
    """Reads build artifacts from CircleCI.

    Parameters
    ----------
    api_base:
        Base URL of the CircleCI v1.1 API.
    token:
        Optional CircleCI API token, sent as ``Circle-Token``.
    timeout:
        Per-request timeout in seconds.
    max_workers:
        Upper bound on concurrent size lookups.
    session:
        Pre-configured ``requests.Session``; one is created if omitted.
    """

    def __init__(
        self,
        api_base: str = DEFAULT_API_BASE,
        token: str = "",
        *,
        timeout: float = 30.0,
        max_workers: int = 16,
        session: requests.Session | None = None,
    ) -> None:
        self._api_base = api_base.rstrip("/")
        self._timeout = timeout
        self._max_workers = max(1, max_workers)
        self.session = session or requests.Session()
        if token:
            self.session.headers["Circle-Token"] = token

    # ------------------------------------------------------------------
    # Listing
    # ------------------------------------------------------------------

    def list_artifacts(self, owner: str, repo: str, build_number: int) -> list[CircleCiArtifact]:
        """Return the artifact listing for one build."""
        url = f"{self._api_base}/project/github/{owner}/{repo}/{build_number}/artifacts"
        try:
            response = self.session.get(url, timeout=self._timeout)
            response.raise_for_status()
            payload: Any = response.json()
        except requests.exceptions.RequestException as exc:
            raise ArtifactFetchError(f"Failed to list artifacts at {url}: {exc}") from exc
        except ValueError as exc:
            raise ArtifactFetchError(f"Artifact listing at {url} is not JSON: {exc}") from exc

        if not isinstance(payload, list):
            raise ArtifactFetchError(f"Artifact listing at {url} is not a list")
        return [CircleCiArtifact.model_validate(item) for item in payload]

    # ------------------------------------------------------------------
    # Measuring
    # ------------------------------------------------------------------

    def fetch_size(self, url: str) -> int:
        """Return the byte size of the object at *url* without reading its body."""
        try:
            response = self.session.get(url, stream=True, timeout=self._timeout)
            try:
                response.raise_for_status()
                length = response.headers.get("content-length")
            finally:
                response.close()
        except requests.exceptions.RequestException as exc:
            raise ArtifactFetchError(f"Failed to fetch {url}: {exc}") from exc

        if length is None or not str(length).isdigit():
            raise ArtifactFetchError(f"No usable Content-Length for {url}: {length!r}")
        return int(length)

    def fetch_build_artifacts(self, owner: str, repo: str, build_number: int) -> list[BuildArtifact]:
        """List a build's artifacts and measure them concurrently."""
        listing = []
        for artifact in self.list_artifacts(owner, repo, build_number):
            # Files at the build root have no segment after the project name.
            if not artifact.path.partition("/")[2]:
                logger.warning(
                    "Skipping root-level artifact %r in %s/%s#%d",
                    artifact.path, owner, repo, build_number,
                )
                continue
            listing.append(artifact)
        if not listing:
            logger.info("Build %s/%s#%d has no artifacts", owner, repo, build_number)
            return []

        workers = min(self._max_workers, len(listing))
        with ThreadPoolExecutor(max_workers=workers) as pool:
            sizes = list(pool.map(lambda a: self.fetch_size(a.url), listing))

        logger.info(
            "Measured %d artifacts for %s/%s#%d", len(listing), owner, repo, build_number
        )
        return [
            BuildArtifact.from_path(artifact.path, size)
            for artifact, size in zip(listing, sizes)
        ]

    def fetch_event_artifacts(self, event: StatusEvent) -> list[BuildArtifact]:
        """Measure the artifacts of the build referenced by *event*."""
        build_number = parse_build_number(event.target_url)
        return self.fetch_build_artifacts(event.owner, event.repo, build_number)

    def close(self) -> None:
        self.session.close()

    def __enter__(self) -> CircleCiClient:
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()
