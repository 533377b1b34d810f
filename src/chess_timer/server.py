from __future__ import annotations

import time
from typing import Any

from loguru import logger
from mcp.server.fastmcp import FastMCP

from chess_timer.app_config import load_json_config, parse_app_config
from chess_timer.bootstrap import AppRuntime, bootstrap_runtime
from chess_timer.timer import TimerError, WorkSession
from chess_timer.validation import (
    build_metrics_input,
    validate_pause_reason,
    validate_rating,
    validate_status,
    validate_work_type,
)

mcp = FastMCP("chess-timer")

_runtime: AppRuntime | None = None


def set_runtime(runtime: AppRuntime | None) -> None:
    global _runtime
    _runtime = runtime


def get_runtime() -> AppRuntime:
    global _runtime
    if _runtime is None:
        _runtime = bootstrap_runtime(parse_app_config(load_json_config()))
    return _runtime


def _error(ex: TimerError) -> dict[str, Any]:
    logger.warning(f"{type(ex).__name__}: {ex}")
    return {"error": str(ex), "error_type": type(ex).__name__}


def _resolve_session(rt: AppRuntime, session_id: str | None, scope: str | None) -> WorkSession | None:
    if session_id:
        return rt.sessions.get_session(session_id)
    return rt.sessions.get_active_session(rt.resolve_scope(scope))


def _session_summary(session: WorkSession, **extra: Any) -> dict[str, Any]:
    summary = {
        "id": session.id,
        "feature_id": session.feature_id,
        "description": session.feature_description,
        "scope": session.scope,
        "status": session.status,
        "total_active_seconds": session.total_active_seconds,
    }
    summary.update(extra)
    return summary


@mcp.tool(description="Start tracking time for a coding session. Returns an estimate if similar work exists.")
def start_work_session(
    feature_id: str | None = None,
    description: str | None = None,
    work_type: str | None = None,
    scope: str | None = None,
) -> dict[str, Any]:
    rt = get_runtime()
    try:
        work_type = validate_work_type(work_type)
    except TimerError as ex:
        return _error(ex)

    resolved_scope = rt.resolve_scope(scope)
    existing = rt.sessions.get_active_session(resolved_scope)
    if existing is not None:
        return {"message": "Session already active", "session": _session_summary(existing)}

    session = rt.sessions.create_session(
        feature_id or f"work-{int(time.time() * 1000)}",
        description or "Coding session",
        resolved_scope,
        work_type=work_type,
    )
    estimate = rt.estimator.get_estimate(work_type=work_type)
    return {
        "message": "Session started",
        "session": _session_summary(session, started_at=session.started_at.isoformat()),
        "estimate": (
            {
                "message": estimate.message,
                "confidence": estimate.confidence,
                "similar_count": estimate.sample_count,
            }
            if estimate.sample_count > 0
            else None
        ),
    }


@mcp.tool(description="Get the current active or paused work session.")
def get_active_session(scope: str | None = None) -> dict[str, Any]:
    rt = get_runtime()
    session = rt.sessions.get_active_session(rt.resolve_scope(scope))
    if session is None:
        return {"message": "No active session.", "session": None}
    segments = rt.sessions.get_segments(session.id)
    return {
        "session": _session_summary(
            session,
            started_at=session.started_at.isoformat(),
            total_active_seconds=rt.sessions.current_active_seconds(session.id),
            segment_count=len(segments),
        )
    }


@mcp.tool(description="Pause the current work session (ends the current segment).")
def pause_work_session(
    session_id: str | None = None,
    reason: str | None = None,
    scope: str | None = None,
) -> dict[str, Any]:
    rt = get_runtime()
    try:
        reason = validate_pause_reason(reason)
        session = _resolve_session(rt, session_id, scope)
        if session is None:
            return {"message": "No active session to pause.", "session": None}
        paused = rt.sessions.pause_session(session.id, reason)
    except TimerError as ex:
        return _error(ex)
    return {"message": "Session paused", "session": _session_summary(paused)}


@mcp.tool(description="Resume a paused work session.")
def resume_work_session(session_id: str | None = None, scope: str | None = None) -> dict[str, Any]:
    rt = get_runtime()
    try:
        session = _resolve_session(rt, session_id, scope)
        if session is None:
            return {"message": "No paused session to resume.", "session": None}
        resumed = rt.sessions.resume_session(session.id)
    except TimerError as ex:
        return _error(ex)
    return {"message": "Session resumed", "session": _session_summary(resumed)}


@mcp.tool(description="Complete a work session and record final metrics.")
def complete_work_session(
    session_id: str | None = None,
    satisfaction: int | None = None,
    notes: str | None = None,
    files_touched: int | None = None,
    lines_added: int | None = None,
    lines_removed: int | None = None,
    complexity_rating: int | None = None,
    work_type: str | None = None,
    scope: str | None = None,
) -> dict[str, Any]:
    rt = get_runtime()
    try:
        satisfaction = validate_rating("satisfaction", satisfaction)
        metrics = build_metrics_input(
            work_type=work_type,
            files_touched=files_touched,
            lines_added=lines_added,
            lines_removed=lines_removed,
            complexity_rating=complexity_rating,
        )
        session = _resolve_session(rt, session_id, scope)
        if session is None:
            return {"message": "No active session to complete.", "session": None}
        completed = rt.sessions.complete_session(
            session.id,
            satisfaction=satisfaction,
            notes=notes,
            metrics=metrics,
        )
    except TimerError as ex:
        return _error(ex)

    return {
        "message": "Session completed",
        "session": _session_summary(
            completed,
            total_minutes=round(completed.total_active_seconds / 60),
            satisfaction=completed.satisfaction,
        ),
        "comparison": rt.estimator.compare_to_history(completed.total_active_seconds, work_type=metrics.work_type),
    }


@mcp.tool(description="Abandon an unfinished work session. Abandoned sessions are excluded from estimates.")
def abandon_work_session(session_id: str | None = None, scope: str | None = None) -> dict[str, Any]:
    rt = get_runtime()
    try:
        session = _resolve_session(rt, session_id, scope)
        if session is None:
            return {"message": "No active session to abandon.", "session": None}
        abandoned = rt.sessions.abandon_session(session.id)
    except TimerError as ex:
        return _error(ex)
    return {"message": "Session abandoned", "session": _session_summary(abandoned)}


@mcp.tool(description="Estimate how long a task will take based on completed work sessions.")
def get_work_estimate(work_type: str | None = None, complexity_rating: int | None = None) -> dict[str, Any]:
    rt = get_runtime()
    try:
        work_type = validate_work_type(work_type)
        complexity_rating = validate_rating("complexity_rating", complexity_rating)
    except TimerError as ex:
        return _error(ex)
    return rt.estimator.get_estimate(work_type=work_type, complexity_rating=complexity_rating).to_dict()


@mcp.tool(description="List work sessions, most recently updated first.")
def list_work_sessions(
    scope: str | None = None,
    status: str | None = None,
    limit: int = 10,
) -> dict[str, Any]:
    rt = get_runtime()
    try:
        status = validate_status(status)
    except TimerError as ex:
        return _error(ex)
    sessions = rt.sessions.list_sessions(scope=scope, status=status, limit=max(1, limit))
    return {
        "count": len(sessions),
        "sessions": [
            _session_summary(
                s,
                started_at=s.started_at.isoformat(),
                completed_at=s.completed_at.isoformat() if s.completed_at else None,
                satisfaction=s.satisfaction,
            )
            for s in sessions
        ],
    }
