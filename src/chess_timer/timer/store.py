from __future__ import annotations

import contextlib
import sqlite3
from collections.abc import Iterator
from pathlib import Path
from typing import Any

from loguru import logger


class TimerStore:
    def __init__(self, db_path: str):
        if db_path != ":memory:":
            Path(db_path).parent.mkdir(parents=True, exist_ok=True)
        self._conn = sqlite3.connect(db_path, check_same_thread=False)
        self._conn.row_factory = sqlite3.Row
        self._conn.execute("PRAGMA foreign_keys = ON")
        self._depth = 0
        self._initialize_schema()
        logger.debug(f"Timer store opened: {db_path}")

    def close(self) -> None:
        self._conn.close()

    def execute(self, query: str, params: tuple[Any, ...] = ()) -> sqlite3.Cursor:
        return self._conn.execute(query, params)

    @contextlib.contextmanager
    def transaction(self) -> Iterator[None]:
        """All-or-nothing block. Nested blocks join the outermost one."""
        self._depth += 1
        try:
            yield
        except BaseException:
            self._depth -= 1
            if self._depth == 0:
                self._conn.rollback()
            raise
        self._depth -= 1
        if self._depth == 0:
            self._conn.commit()

    def _initialize_schema(self) -> None:
        self._conn.executescript(
            """
            CREATE TABLE IF NOT EXISTS work_sessions (
                id TEXT PRIMARY KEY,
                feature_id TEXT NOT NULL,
                feature_description TEXT NOT NULL,
                scope TEXT NOT NULL,
                status TEXT NOT NULL DEFAULT 'active'
                    CHECK (status IN ('active', 'paused', 'completed', 'abandoned')),
                started_at TEXT NOT NULL,
                completed_at TEXT NULL,
                total_active_seconds INTEGER NOT NULL DEFAULT 0,
                satisfaction INTEGER NULL,
                notes TEXT NULL,
                created_at TEXT NOT NULL,
                updated_at TEXT NOT NULL
            );

            CREATE TABLE IF NOT EXISTS work_segments (
                id TEXT PRIMARY KEY,
                session_id TEXT NOT NULL REFERENCES work_sessions(id) ON DELETE CASCADE,
                started_at TEXT NOT NULL,
                ended_at TEXT NULL,
                trigger_start TEXT NOT NULL,
                trigger_end TEXT NULL
            );

            CREATE TABLE IF NOT EXISTS work_metrics (
                id TEXT PRIMARY KEY,
                session_id TEXT NOT NULL REFERENCES work_sessions(id) ON DELETE CASCADE,
                files_touched INTEGER NOT NULL DEFAULT 0,
                lines_added INTEGER NOT NULL DEFAULT 0,
                lines_removed INTEGER NOT NULL DEFAULT 0,
                complexity_rating INTEGER NOT NULL DEFAULT 3,
                work_type TEXT NOT NULL DEFAULT 'other'
                    CHECK (work_type IN ('feature', 'bugfix', 'refactor', 'docs', 'other')),
                recorded_at TEXT NOT NULL
            );

            CREATE INDEX IF NOT EXISTS idx_work_sessions_scope
                ON work_sessions(scope);
            CREATE INDEX IF NOT EXISTS idx_work_sessions_status_updated
                ON work_sessions(status, updated_at);
            CREATE INDEX IF NOT EXISTS idx_work_segments_session_started
                ON work_segments(session_id, started_at);
            CREATE INDEX IF NOT EXISTS idx_work_metrics_session_recorded
                ON work_metrics(session_id, recorded_at);
            """
        )
        self._conn.commit()
