from __future__ import annotations

import sqlite3
from uuid import uuid4

from loguru import logger

from chess_timer.timer.clock import Clock, elapsed_seconds, from_iso, to_iso, utc_now
from chess_timer.timer.errors import InvalidStateError, NotFoundError
from chess_timer.timer.models import (
    DEFAULT_COMPLEXITY_RATING,
    TRIGGER_RESUME,
    TRIGGER_SESSION_ABANDONED,
    TRIGGER_SESSION_COMPLETE,
    TRIGGER_SESSION_START,
    MetricsInput,
    WorkMetrics,
    WorkSegment,
    WorkSession,
    WorkType,
)
from chess_timer.timer.store import TimerStore


class SessionRepository:
    """Durable work sessions and their pause/resume/complete lifecycle.

    The persisted ``total_active_seconds`` only covers closed segments. For an
    active session, callers that want the live figure use
    ``current_active_seconds``; nothing on the read path writes.

    Uniqueness of the open session per scope is not enforced here. Callers are
    expected to check ``get_active_session(scope)`` before ``create_session``.
    """

    def __init__(self, store: TimerStore, *, clock: Clock = utc_now):
        self._store = store
        self._clock = clock

    def create_session(
        self,
        feature_id: str,
        description: str,
        scope: str,
        work_type: WorkType | None = None,
    ) -> WorkSession:
        session_id = str(uuid4())
        now = to_iso(self._clock())
        with self._store.transaction():
            self._store.execute(
                """
                INSERT INTO work_sessions
                    (id, feature_id, feature_description, scope, status, started_at,
                     total_active_seconds, created_at, updated_at)
                VALUES (?, ?, ?, ?, 'active', ?, 0, ?, ?)
                """,
                (session_id, feature_id, description, scope, now, now, now),
            )
            self._open_segment(session_id, TRIGGER_SESSION_START, now)
            if work_type:
                self._insert_metrics(session_id, work_type=work_type, recorded_at=now)
        logger.info(f"Work session started: {session_id} ({feature_id}, scope={scope})")
        return self.get_session(session_id)

    def find_session(self, session_id: str) -> WorkSession | None:
        row = self._store.execute(
            "SELECT * FROM work_sessions WHERE id = ? LIMIT 1",
            (session_id,),
        ).fetchone()
        if row is None:
            return None
        return self._to_session(row)

    def get_session(self, session_id: str) -> WorkSession:
        session = self.find_session(session_id)
        if session is None:
            raise NotFoundError(session_id)
        return session

    def get_active_session(self, scope: str) -> WorkSession | None:
        # More than one row can match when callers skipped the pre-check; the
        # most recently touched one wins.
        row = self._store.execute(
            """
            SELECT * FROM work_sessions
            WHERE scope = ? AND status IN ('active', 'paused')
            ORDER BY updated_at DESC, rowid DESC
            LIMIT 1
            """,
            (scope,),
        ).fetchone()
        if row is None:
            return None
        return self._to_session(row)

    def get_segments(self, session_id: str) -> list[WorkSegment]:
        rows = self._store.execute(
            """
            SELECT * FROM work_segments
            WHERE session_id = ?
            ORDER BY started_at ASC, rowid ASC
            """,
            (session_id,),
        ).fetchall()
        return [self._to_segment(row) for row in rows]

    def get_metrics(self, session_id: str) -> list[WorkMetrics]:
        rows = self._store.execute(
            """
            SELECT * FROM work_metrics
            WHERE session_id = ?
            ORDER BY recorded_at ASC, rowid ASC
            """,
            (session_id,),
        ).fetchall()
        return [self._to_metrics(row) for row in rows]

    def latest_metrics(self, session_id: str) -> WorkMetrics | None:
        metrics = self.get_metrics(session_id)
        return metrics[-1] if metrics else None

    def list_sessions(
        self,
        *,
        scope: str | None = None,
        status: str | None = None,
        limit: int | None = None,
    ) -> list[WorkSession]:
        query = "SELECT * FROM work_sessions WHERE 1=1"
        params: list[object] = []
        if scope:
            query += " AND scope = ?"
            params.append(scope)
        if status:
            query += " AND status = ?"
            params.append(status)
        query += " ORDER BY updated_at DESC, rowid DESC"
        if limit:
            query += " LIMIT ?"
            params.append(max(1, limit))
        rows = self._store.execute(query, tuple(params)).fetchall()
        return [self._to_session(row) for row in rows]

    def pause_session(self, session_id: str, reason: str) -> WorkSession:
        session = self.get_session(session_id)
        if session.status != "active":
            logger.warning(f"Rejected pause of {session_id}: status is {session.status}")
            raise InvalidStateError(session_id, session.status, "pause")

        now = to_iso(self._clock())
        with self._store.transaction():
            self._close_open_segment(session_id, reason, now)
            total = self._recompute_total(session_id)
            self._store.execute(
                """
                UPDATE work_sessions
                SET status = 'paused', total_active_seconds = ?, updated_at = ?
                WHERE id = ?
                """,
                (total, now, session_id),
            )
        logger.info(f"Work session paused: {session_id} (reason={reason}, active={total}s)")
        return self.get_session(session_id)

    def resume_session(self, session_id: str) -> WorkSession:
        session = self.get_session(session_id)
        if session.status != "paused":
            logger.warning(f"Rejected resume of {session_id}: status is {session.status}")
            raise InvalidStateError(session_id, session.status, "resume")

        now = to_iso(self._clock())
        with self._store.transaction():
            self._open_segment(session_id, TRIGGER_RESUME, now)
            self._store.execute(
                "UPDATE work_sessions SET status = 'active', updated_at = ? WHERE id = ?",
                (now, session_id),
            )
        logger.info(f"Work session resumed: {session_id}")
        return self.get_session(session_id)

    def complete_session(
        self,
        session_id: str,
        *,
        satisfaction: int | None = None,
        notes: str | None = None,
        metrics: MetricsInput | None = None,
    ) -> WorkSession:
        session = self.get_session(session_id)
        if session.status == "completed":
            logger.warning(f"Rejected completion of {session_id}: already completed")
            raise InvalidStateError(session_id, session.status, "complete")

        now = to_iso(self._clock())
        with self._store.transaction():
            self._close_open_segment(session_id, TRIGGER_SESSION_COMPLETE, now)
            total = self._recompute_total(session_id)
            self._store.execute(
                """
                UPDATE work_sessions
                SET status = 'completed',
                    completed_at = ?,
                    total_active_seconds = ?,
                    satisfaction = COALESCE(?, satisfaction),
                    notes = COALESCE(?, notes),
                    updated_at = ?
                WHERE id = ?
                """,
                (now, total, satisfaction, notes, now, session_id),
            )
            if metrics is not None and metrics.work_type:
                self._insert_metrics(
                    session_id,
                    work_type=metrics.work_type,
                    files_touched=metrics.files_touched,
                    lines_added=metrics.lines_added,
                    lines_removed=metrics.lines_removed,
                    complexity_rating=metrics.complexity_rating,
                    recorded_at=now,
                )
        logger.info(f"Work session completed: {session_id} (active={total}s)")
        return self.get_session(session_id)

    def abandon_session(self, session_id: str) -> WorkSession:
        session = self.get_session(session_id)
        if not session.is_open:
            logger.warning(f"Rejected abandon of {session_id}: status is {session.status}")
            raise InvalidStateError(session_id, session.status, "abandon")

        now = to_iso(self._clock())
        with self._store.transaction():
            self._close_open_segment(session_id, TRIGGER_SESSION_ABANDONED, now)
            total = self._recompute_total(session_id)
            self._store.execute(
                """
                UPDATE work_sessions
                SET status = 'abandoned', completed_at = ?, total_active_seconds = ?, updated_at = ?
                WHERE id = ?
                """,
                (now, total, now, session_id),
            )
        logger.info(f"Work session abandoned: {session_id} (active={total}s)")
        return self.get_session(session_id)

    def add_metrics(
        self,
        session_id: str,
        *,
        work_type: WorkType,
        files_touched: int | None = None,
        lines_added: int | None = None,
        lines_removed: int | None = None,
        complexity_rating: int | None = None,
    ) -> WorkMetrics:
        self.get_session(session_id)
        now = to_iso(self._clock())
        with self._store.transaction():
            metrics_id = self._insert_metrics(
                session_id,
                work_type=work_type,
                files_touched=files_touched,
                lines_added=lines_added,
                lines_removed=lines_removed,
                complexity_rating=complexity_rating,
                recorded_at=now,
            )
            self._store.execute(
                "UPDATE work_sessions SET updated_at = ? WHERE id = ?",
                (now, session_id),
            )
        row = self._store.execute("SELECT * FROM work_metrics WHERE id = ?", (metrics_id,)).fetchone()
        return self._to_metrics(row)

    def current_active_seconds(self, session_id: str) -> int:
        """Stored total plus the running open segment, if any. Read-only."""
        session = self.get_session(session_id)
        if session.status != "active":
            return session.total_active_seconds
        now = self._clock()
        running = sum(
            elapsed_seconds(segment.started_at, now)
            for segment in self.get_segments(session_id)
            if segment.is_open
        )
        return session.total_active_seconds + running

    def _open_segment(self, session_id: str, trigger_start: str, started_at: str) -> str:
        segment_id = str(uuid4())
        self._store.execute(
            """
            INSERT INTO work_segments (id, session_id, started_at, ended_at, trigger_start, trigger_end)
            VALUES (?, ?, ?, NULL, ?, NULL)
            """,
            (segment_id, session_id, started_at, trigger_start),
        )
        return segment_id

    def _close_open_segment(self, session_id: str, trigger_end: str, ended_at: str) -> int:
        cursor = self._store.execute(
            """
            UPDATE work_segments
            SET ended_at = ?, trigger_end = ?
            WHERE session_id = ? AND ended_at IS NULL
            """,
            (ended_at, trigger_end, session_id),
        )
        return cursor.rowcount

    def _recompute_total(self, session_id: str) -> int:
        now = self._clock()
        total = 0
        for segment in self.get_segments(session_id):
            total += elapsed_seconds(segment.started_at, segment.ended_at or now)
        return total

    def _insert_metrics(
        self,
        session_id: str,
        *,
        work_type: str,
        recorded_at: str,
        files_touched: int | None = None,
        lines_added: int | None = None,
        lines_removed: int | None = None,
        complexity_rating: int | None = None,
    ) -> str:
        metrics_id = str(uuid4())
        self._store.execute(
            """
            INSERT INTO work_metrics
                (id, session_id, files_touched, lines_added, lines_removed,
                 complexity_rating, work_type, recorded_at)
            VALUES (?, ?, ?, ?, ?, ?, ?, ?)
            """,
            (
                metrics_id,
                session_id,
                files_touched or 0,
                lines_added or 0,
                lines_removed or 0,
                complexity_rating if complexity_rating is not None else DEFAULT_COMPLEXITY_RATING,
                work_type,
                recorded_at,
            ),
        )
        return metrics_id

    def _to_session(self, row: sqlite3.Row) -> WorkSession:
        return WorkSession(
            id=row["id"],
            feature_id=row["feature_id"],
            feature_description=row["feature_description"],
            scope=row["scope"],
            status=row["status"],
            started_at=from_iso(row["started_at"]),
            completed_at=from_iso(row["completed_at"]),
            total_active_seconds=int(row["total_active_seconds"]),
            satisfaction=row["satisfaction"],
            notes=row["notes"],
            created_at=from_iso(row["created_at"]),
            updated_at=from_iso(row["updated_at"]),
        )

    def _to_segment(self, row: sqlite3.Row) -> WorkSegment:
        return WorkSegment(
            id=row["id"],
            session_id=row["session_id"],
            started_at=from_iso(row["started_at"]),
            ended_at=from_iso(row["ended_at"]),
            trigger_start=row["trigger_start"],
            trigger_end=row["trigger_end"],
        )

    def _to_metrics(self, row: sqlite3.Row) -> WorkMetrics:
        return WorkMetrics(
            id=row["id"],
            session_id=row["session_id"],
            files_touched=int(row["files_touched"]),
            lines_added=int(row["lines_added"]),
            lines_removed=int(row["lines_removed"]),
            complexity_rating=int(row["complexity_rating"]),
            work_type=row["work_type"],
            recorded_at=from_iso(row["recorded_at"]),
        )
