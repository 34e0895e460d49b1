"""Keyed snapshot persistence — one document per (project, branch, commit).

Storage keys follow ``/payload/{project}/{branch}/{commit_sha}``.  Each
segment is escaped so that branch names such as ``release/1.2`` stay a
single key segment.

Two engines are provided:
- ``InMemorySnapshotStore`` for tests and dry runs.
- ``SqliteSnapshotStore`` for durable storage (WAL journal, one row per key).

Writes overwrite; reads of a missing key return ``None``.  There is no
delete — retention is an operational concern.
"""

from __future__ import annotations

import json
import logging
import sqlite3
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Protocol, runtime_checkable

from sizewatch.models.snapshot import Snapshot

logger = logging.getLogger(__name__)

KEY_ROOT = "payload"

# "%" first so already-escaped output is never re-read as an escape.
_ESCAPES: dict[str, str] = {
    "%": "%25",
    ".": "%2E",
    "$": "%24",
    "#": "%23",
    "[": "%5B",
    "]": "%5D",
    "/": "%2F",
}


class SnapshotStoreError(RuntimeError):
    """Raised when the storage engine cannot read or write a snapshot."""


def encode_key_segment(segment: str) -> str:
    """Escape characters that are not allowed inside one key segment.

    >>> encode_key_segment("release/1.2")
    'release%2F1%2E2'
    """
    return "".join(_ESCAPES.get(ch, ch) for ch in segment)


def decode_key_segment(segment: str) -> str:
    """Reverse :func:`encode_key_segment`."""
    out: list[str] = []
    i = 0
    reverse = {v: k for k, v in _ESCAPES.items()}
    while i < len(segment):
        token = segment[i : i + 3].upper()
        if segment[i] == "%" and token in reverse:
            out.append(reverse[token])
            i += 3
        else:
            out.append(segment[i])
            i += 1
    return "".join(out)


def snapshot_key(project: str, branch: str, commit_sha: str) -> str:
    """Return the storage key for one snapshot."""
    parts = (KEY_ROOT, project, branch, commit_sha)
    return "/" + "/".join(encode_key_segment(p) for p in parts)


@runtime_checkable
class SnapshotStore(Protocol):
    """Contract every snapshot storage engine implements."""

    def put(self, project: str, branch: str, commit_sha: str, snapshot: Snapshot) -> str:
        """Store *snapshot*, overwriting any existing one.  Returns the key."""
        ...

    def get(self, project: str, branch: str, commit_sha: str) -> Snapshot | None:
        """Return the stored snapshot, or ``None`` if none was written."""
        ...

    def list_projects(self) -> list[str]:
        """Return every distinct project name ever stored."""
        ...


class InMemorySnapshotStore:
    """Volatile store holding documents in a dict."""

    def __init__(self) -> None:
        self._documents: dict[str, tuple[str, dict[str, Any]]] = {}

    def put(self, project: str, branch: str, commit_sha: str, snapshot: Snapshot) -> str:
        key = snapshot_key(project, branch, commit_sha)
        # Store the document form so reads go through the same decoding
        # path as durable engines.
        self._documents[key] = (project, json.loads(json.dumps(snapshot.to_document())))
        logger.debug("InMemorySnapshotStore: wrote %s", key)
        return key

    def get(self, project: str, branch: str, commit_sha: str) -> Snapshot | None:
        stored = self._documents.get(snapshot_key(project, branch, commit_sha))
        if stored is None:
            return None
        return Snapshot.from_document(project, stored[1])

    def list_projects(self) -> list[str]:
        return sorted({project for project, _ in self._documents.values()})

    def __len__(self) -> int:
        return len(self._documents)


_CREATE_SNAPSHOTS = """
CREATE TABLE IF NOT EXISTS snapshots (
    key           TEXT PRIMARY KEY,
    project       TEXT NOT NULL,
    branch        TEXT NOT NULL,
    commit_sha    TEXT NOT NULL,
    document_json TEXT NOT NULL,
    written_at    TEXT NOT NULL
);
"""

_CREATE_IDX_PROJECT = """
CREATE INDEX IF NOT EXISTS idx_snapshots_project ON snapshots(project);
"""


class SqliteSnapshotStore:
    """Durable snapshot store backed by SQLite.

    Parameters
    ----------
    db_path:
        Path to the SQLite database file. Created if it does not exist.
    """

    def __init__(self, db_path: Path) -> None:
        self._db_path = Path(db_path)
        self._db_path.parent.mkdir(parents=True, exist_ok=True)
        self._init_schema()

    def _connect(self) -> sqlite3.Connection:
        conn = sqlite3.connect(str(self._db_path), check_same_thread=False)
        conn.execute("PRAGMA journal_mode=WAL")
        return conn

    def _init_schema(self) -> None:
        with self._connect() as conn:
            conn.execute(_CREATE_SNAPSHOTS)
            conn.execute(_CREATE_IDX_PROJECT)
            conn.commit()

    # ------------------------------------------------------------------
    # Write
    # ------------------------------------------------------------------

    def put(self, project: str, branch: str, commit_sha: str, snapshot: Snapshot) -> str:
        """Write *snapshot*; an existing row for the same key is replaced."""
        key = snapshot_key(project, branch, commit_sha)
        try:
            with self._connect() as conn:
                conn.execute(
                    """
                    INSERT OR REPLACE INTO snapshots
                        (key, project, branch, commit_sha, document_json, written_at)
                    VALUES (?, ?, ?, ?, ?, ?)
                    """,
                    (
                        key,
                        project,
                        branch,
                        commit_sha,
                        json.dumps(snapshot.to_document(), sort_keys=True),
                        datetime.now(timezone.utc).isoformat(),
                    ),
                )
                conn.commit()
        except sqlite3.Error as exc:
            raise SnapshotStoreError(f"Failed to write snapshot {key}: {exc}") from exc
        logger.debug("SqliteSnapshotStore: wrote %s", key)
        return key

    # ------------------------------------------------------------------
    # Read
    # ------------------------------------------------------------------

    def get(self, project: str, branch: str, commit_sha: str) -> Snapshot | None:
        key = snapshot_key(project, branch, commit_sha)
        try:
            with self._connect() as conn:
                row = conn.execute(
                    "SELECT document_json FROM snapshots WHERE key = ?", (key,)
                ).fetchone()
        except sqlite3.Error as exc:
            raise SnapshotStoreError(f"Failed to read snapshot {key}: {exc}") from exc
        if row is None:
            return None
        return Snapshot.from_document(project, json.loads(row[0]))

    def list_projects(self) -> list[str]:
        try:
            with self._connect() as conn:
                rows = conn.execute(
                    "SELECT DISTINCT project FROM snapshots ORDER BY project"
                ).fetchall()
        except sqlite3.Error as exc:
            raise SnapshotStoreError(f"Failed to list projects: {exc}") from exc
        return [row[0] for row in rows]

    def list_keys(self, project: str | None = None) -> list[str]:
        """Return stored keys, optionally limited to one project."""
        query = "SELECT key FROM snapshots"
        params: tuple[str, ...] = ()
        if project is not None:
            query += " WHERE project = ?"
            params = (project,)
        with self._connect() as conn:
            rows = conn.execute(query + " ORDER BY key", params).fetchall()
        return [row[0] for row in rows]
