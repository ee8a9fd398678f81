"""SQLite persistence for ingestion runs."""
from __future__ import annotations

import json
import sqlite3
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List


@dataclass(slots=True)
class IngestionLogEntry:
    run_id: str
    source_id: str
    kind: str
    format: str
    local_path: str
    checksum: str
    record_count: int
    loaded_count: int
    rejected_count: int
    status: str
    error: str | None
    started_at: datetime
    completed_at: datetime
    metadata: Dict[str, Any] = field(default_factory=dict)


class IngestionStore:
    """Utility wrapper around SQLite for ingestion logging."""

    def __init__(self, path: Path) -> None:
        self.path = path
        self._ensure_schema()

    def _ensure_schema(self) -> None:
        with sqlite3.connect(self.path) as connection:
            connection.execute(
                """
                CREATE TABLE IF NOT EXISTS ingestion_log (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    run_id TEXT NOT NULL,
                    source_id TEXT NOT NULL,
                    kind TEXT NOT NULL,
                    format TEXT NOT NULL,
                    local_path TEXT NOT NULL,
                    checksum TEXT NOT NULL,
                    record_count INTEGER NOT NULL,
                    loaded_count INTEGER NOT NULL,
                    rejected_count INTEGER NOT NULL,
                    status TEXT NOT NULL,
                    error TEXT,
                    started_at TEXT NOT NULL,
                    completed_at TEXT NOT NULL,
                    metadata TEXT NOT NULL
                )
                """
            )

    def record(self, entry: IngestionLogEntry) -> None:
        metadata = json.dumps(entry.metadata or {}, ensure_ascii=False, default=str)
        with sqlite3.connect(self.path) as connection:
            connection.execute(
                """
                INSERT INTO ingestion_log (
                    run_id,
                    source_id,
                    kind,
                    format,
                    local_path,
                    checksum,
                    record_count,
                    loaded_count,
                    rejected_count,
                    status,
                    error,
                    started_at,
                    completed_at,
                    metadata
                ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    entry.run_id,
                    entry.source_id,
                    entry.kind,
                    entry.format,
                    entry.local_path,
                    entry.checksum,
                    entry.record_count,
                    entry.loaded_count,
                    entry.rejected_count,
                    entry.status,
                    entry.error,
                    entry.started_at.isoformat(),
                    entry.completed_at.isoformat(),
                    metadata,
                ),
            )

    def entries_for_run(self, run_id: str) -> List[Dict[str, Any]]:
        with sqlite3.connect(self.path) as connection:
            connection.row_factory = sqlite3.Row
            rows = connection.execute(
                "SELECT * FROM ingestion_log WHERE run_id = ? ORDER BY id", (run_id,)
            ).fetchall()
        return [dict(row) for row in rows]
