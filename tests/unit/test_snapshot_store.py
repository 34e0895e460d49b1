"""Tests for snapshot stores — keyed put/get, overwrite, project listing."""

from __future__ import annotations

import pytest

from sizewatch.core.path_codec import encode
from sizewatch.core.snapshot_store import (
    InMemorySnapshotStore,
    SnapshotStore,
    SqliteSnapshotStore,
    decode_key_segment,
    encode_key_segment,
    snapshot_key,
)
from sizewatch.models.artifacts import BuildArtifact
from sizewatch.models.snapshot import Snapshot, SnapshotMetadata

META = SnapshotMetadata(message="chore: release", timestamp=1700000000000)


def _snapshot(project: str = "aio", size: int = 100) -> Snapshot:
    return encode(project, [BuildArtifact.from_path(f"{project}/gzip7/main", size)], META)


@pytest.fixture(params=["memory", "sqlite"])
def store(request, memory_store, sqlite_store) -> SnapshotStore:
    return memory_store if request.param == "memory" else sqlite_store


class TestSnapshotStoreContract:
    def test_get_missing_returns_none(self, store: SnapshotStore):
        assert store.get("aio", "main", "abc") is None

    def test_put_then_get(self, store: SnapshotStore):
        snapshot = _snapshot()
        store.put("aio", "main", "abc", snapshot)
        assert store.get("aio", "main", "abc") == snapshot

    def test_put_returns_key(self, store: SnapshotStore):
        assert store.put("aio", "main", "abc", _snapshot()) == "/payload/aio/main/abc"

    def test_put_twice_is_idempotent(self, store: SnapshotStore):
        snapshot = _snapshot()
        store.put("aio", "main", "abc", snapshot)
        store.put("aio", "main", "abc", snapshot)
        assert store.get("aio", "main", "abc") == snapshot
        assert store.list_projects() == ["aio"]

    def test_put_overwrites(self, store: SnapshotStore):
        store.put("aio", "main", "abc", _snapshot(size=1))
        store.put("aio", "main", "abc", _snapshot(size=2))
        assert store.get("aio", "main", "abc") == _snapshot(size=2)

    def test_keys_are_independent(self, store: SnapshotStore):
        store.put("aio", "main", "abc", _snapshot(size=1))
        store.put("aio", "main", "def", _snapshot(size=2))
        store.put("aio", "patch", "abc", _snapshot(size=3))
        assert store.get("aio", "main", "abc") == _snapshot(size=1)
        assert store.get("aio", "main", "def") == _snapshot(size=2)
        assert store.get("aio", "patch", "abc") == _snapshot(size=3)

    def test_list_projects(self, store: SnapshotStore):
        assert store.list_projects() == []
        store.put("ivy", "main", "abc", _snapshot("ivy"))
        store.put("aio", "main", "abc", _snapshot("aio"))
        store.put("aio", "main", "def", _snapshot("aio"))
        assert store.list_projects() == ["aio", "ivy"]

    def test_branch_with_slash_round_trips(self, store: SnapshotStore):
        store.put("aio", "release/1.2", "abc", _snapshot())
        assert store.get("aio", "release/1.2", "abc") == _snapshot()
        assert store.get("aio", "release", "abc") is None

    def test_implements_protocol(self, store):
        assert isinstance(store, SnapshotStore)


class TestSqliteSnapshotStore:
    def test_persists_across_instances(self, tmp_path):
        path = tmp_path / "nested" / "snapshots.db"
        SqliteSnapshotStore(path).put("aio", "main", "abc", _snapshot())
        assert SqliteSnapshotStore(path).get("aio", "main", "abc") == _snapshot()

    def test_list_keys(self, sqlite_store: SqliteSnapshotStore):
        sqlite_store.put("aio", "main", "abc", _snapshot())
        sqlite_store.put("ivy", "v1.x", "abc", _snapshot("ivy"))
        assert sqlite_store.list_keys() == ["/payload/aio/main/abc", "/payload/ivy/v1%2Ex/abc"]
        assert sqlite_store.list_keys("ivy") == ["/payload/ivy/v1%2Ex/abc"]


class TestInMemorySnapshotStore:
    def test_len_counts_keys(self, memory_store: InMemorySnapshotStore):
        memory_store.put("aio", "main", "abc", _snapshot())
        memory_store.put("aio", "main", "abc", _snapshot())
        assert len(memory_store) == 1


class TestKeys:
    def test_plain_key(self):
        assert snapshot_key("aio", "main", "abc123") == "/payload/aio/main/abc123"

    @pytest.mark.parametrize(
        ("raw", "escaped"),
        [
            ("release/1.2", "release%2F1%2E2"),
            ("a$b#c", "a%24b%23c"),
            ("[x]", "%5Bx%5D"),
            ("100%", "100%25"),
        ],
    )
    def test_segment_escaping(self, raw, escaped):
        assert encode_key_segment(raw) == escaped
        assert decode_key_segment(escaped) == raw

    def test_escaped_key_has_four_segments(self):
        key = snapshot_key("a.b", "feat/x", "sha")
        assert key.count("/") == 4
