"""Tests for the GitHub client and the repository config source."""

from __future__ import annotations

from unittest.mock import MagicMock

import pytest
import requests

from sizewatch.clients.github import (
    GitHubApiError,
    GitHubClient,
    GitHubConfigSource,
    truncate_description,
)
from sizewatch.models.config import SizeConfig
from sizewatch.models.status import CommitState

HEAD_SHA = "c0ffee0000000000000000000000000000000001"


def _response(json_body=None, text="", status_code=200, status_error=None) -> MagicMock:
    response = MagicMock()
    response.json.return_value = json_body
    response.text = text
    response.status_code = status_code
    if status_error:
        response.raise_for_status.side_effect = status_error
    return response


def _pr(number: int, head_sha: str, state: str = "open") -> dict:
    return {
        "number": number,
        "state": state,
        "head": {"ref": f"feature-{number}", "sha": head_sha},
        "base": {"ref": "main", "sha": "ba5e"},
    }


@pytest.fixture
def session() -> MagicMock:
    session = MagicMock(spec=requests.Session)
    session.headers = {}
    return session


@pytest.fixture
def client(session) -> GitHubClient:
    return GitHubClient("tok", session=session)


class TestFindPullRequest:
    def test_matches_head_sha(self, client, session, status_event):
        session.get.return_value = _response([_pr(1, "other"), _pr(2, HEAD_SHA)])
        pr = client.find_pull_request(status_event)
        assert pr.number == 2
        assert pr.base.ref == "main"
        url = session.get.call_args.args[0]
        assert url == f"https://api.github.com/repos/angular/angular/commits/{HEAD_SHA}/pulls"

    def test_closed_prs_ignored(self, client, session, status_event):
        session.get.return_value = _response([_pr(1, HEAD_SHA, state="closed")])
        assert client.find_pull_request(status_event) is None

    def test_falls_back_to_first_open_pr(self, client, session, status_event):
        session.get.return_value = _response([_pr(3, "x"), _pr(4, "y")])
        assert client.find_pull_request(status_event).number == 3

    def test_no_prs(self, client, session, status_event):
        session.get.return_value = _response([])
        assert client.find_pull_request(status_event) is None

    def test_http_error(self, client, session, status_event):
        session.get.side_effect = requests.exceptions.ConnectionError("down")
        with pytest.raises(GitHubApiError):
            client.find_pull_request(status_event)

    def test_non_json_body(self, client, session, status_event):
        response = _response(text="<html>")
        response.json.side_effect = ValueError("Expecting value")
        session.get.return_value = response
        with pytest.raises(GitHubApiError, match="not JSON"):
            client.find_pull_request(status_event)

    def test_payload_must_be_a_list(self, client, session, status_event):
        session.get.return_value = _response({"message": "Not Found"})
        with pytest.raises(GitHubApiError, match="not a list"):
            client.find_pull_request(status_event)


class TestSetStatus:
    def test_posts_status(self, client, session, status_event):
        session.post.return_value = _response()
        client.set_status(status_event, CommitState.FAILURE, "aio/main increased by 41 bytes", "size")
        url = session.post.call_args.args[0]
        body = session.post.call_args.kwargs["json"]
        assert url == f"https://api.github.com/repos/angular/angular/statuses/{HEAD_SHA}"
        assert body == {
            "state": "failure",
            "description": "aio/main increased by 41 bytes",
            "context": "size",
            "target_url": status_event.target_url,
        }

    def test_long_description_truncated(self, client, session, status_event):
        session.post.return_value = _response()
        client.set_status(status_event, CommitState.SUCCESS, "x" * 500, "size")
        assert len(session.post.call_args.kwargs["json"]["description"]) == 140

    def test_error(self, client, session, status_event):
        session.post.return_value = _response(
            status_error=requests.exceptions.HTTPError("422")
        )
        with pytest.raises(GitHubApiError):
            client.set_status(status_event, CommitState.PENDING, "working", "size")

    def test_auth_header(self, client, session):
        assert session.headers["Authorization"] == "token tok"


class TestTruncate:
    def test_short_unchanged(self):
        assert truncate_description("abc") == "abc"

    def test_long_ends_with_ellipsis(self):
        assert truncate_description("a" * 200).endswith("...")


class TestConfigSource:
    def test_missing_file_uses_defaults(self, client, session, status_event):
        session.get.return_value = _response(status_code=404)
        assert GitHubConfigSource(client).load(status_event) == SizeConfig()

    def test_reads_size_section(self, client, session, status_event):
        session.get.return_value = _response(text="size:\n  maxSizeIncrease: 7\n  disabled: true\n")
        config = GitHubConfigSource(client).load(status_event)
        assert config.max_size_increase == 7
        assert config.disabled is True
        url = session.get.call_args.args[0]
        assert url.endswith("/repos/angular/angular/contents/.github/angular-robot.yml")

    def test_malformed_file_uses_defaults(self, client, session, status_event):
        session.get.return_value = _response(text="size: [unclosed\n")
        assert GitHubConfigSource(client).load(status_event) == SizeConfig()

    def test_invalid_values_use_defaults(self, client, session, status_event):
        session.get.return_value = _response(text="size:\n  maxSizeIncrease: lots\n")
        assert GitHubConfigSource(client).load(status_event).disabled is False
