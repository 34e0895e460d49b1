"""Adversarial tests — hostile branch names and path segments.

These tests verify that:
1. Branch and project names cannot escape their key segment
2. Escaped keys never collide for distinct inputs
3. Artifact segments named like metadata do not corrupt metadata
"""

from __future__ import annotations

import pytest

from sizewatch.core.path_codec import decode, encode
from sizewatch.core.snapshot_store import snapshot_key
from sizewatch.models.artifacts import BuildArtifact
from sizewatch.models.snapshot import Snapshot, SnapshotMetadata


def _snap(project: str, size: int) -> Snapshot:
    return encode(project, [BuildArtifact.from_path(f"{project}/main", size)])


class TestKeyInjection:
    @pytest.mark.parametrize(
        "branch",
        ["../main", "main/../../payload", "a/b/c", "x%2Fy", "%", "..", "[0]", "$ref", "#frag"],
    )
    def test_branch_stays_one_segment(self, branch):
        key = snapshot_key("aio", branch, "sha")
        assert key.count("/") == 4
        assert key.startswith("/payload/aio/")
        assert key.endswith("/sha")

    def test_distinct_inputs_never_collide(self):
        pairs = [
            ("a/b", "c"),
            ("a", "b/c"),
            ("a%2Fb", "c"),
            ("a.b", "c"),
            ("a%2Eb", "c"),
        ]
        keys = {snapshot_key("p", branch, sha) for branch, sha in pairs}
        assert len(keys) == len(pairs)

    @pytest.mark.parametrize("store_name", ["memory_store", "sqlite_store"])
    def test_pre_escaped_branch_does_not_alias(self, request, store_name):
        store = request.getfixturevalue(store_name)
        store.put("aio", "a/b", "sha", _snap("aio", 1))
        store.put("aio", "a%2Fb", "sha", _snap("aio", 2))
        assert decode(store.get("aio", "a/b", "sha"))[0].size_bytes == 1
        assert decode(store.get("aio", "a%2Fb", "sha"))[0].size_bytes == 2


class TestMetadataNameCollisions:
    def test_top_level_artifact_named_message_is_shadowed_by_metadata(self):
        # The document form keeps metadata at the top level; a top-level
        # artifact of the same name is overwritten there.
        snapshot = encode(
            "aio",
            [BuildArtifact.from_path("aio/message", 5)],
            SnapshotMetadata(message="hello", timestamp=1),
        )
        assert snapshot.to_document()["message"] == "hello"
        assert decode(snapshot) == [BuildArtifact.from_path("aio/message", 5)]

    def test_nested_metadata_names_survive_storage(self, memory_store):
        artifacts = [
            BuildArtifact.from_path("aio/logs/change", 1),
            BuildArtifact.from_path("aio/logs/timestamp", 2),
        ]
        memory_store.put("aio", "main", "sha", encode("aio", artifacts))
        restored = decode(memory_store.get("aio", "main", "sha"))
        assert {a.full_path for a in restored} == {"aio/logs/change", "aio/logs/timestamp"}
