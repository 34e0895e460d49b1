"""Shared helpers for CLI commands."""

from __future__ import annotations

from pathlib import Path

from sizewatch.config import ServiceConfig
from sizewatch.core.snapshot_store import SqliteSnapshotStore


def open_store(db: Path | None, config: ServiceConfig | None = None) -> SqliteSnapshotStore:
    """Open the snapshot database at *db*, or the configured default."""
    config = config or ServiceConfig()
    return SqliteSnapshotStore(db or config.snapshot_db_path)
