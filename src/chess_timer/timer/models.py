from __future__ import annotations

from dataclasses import asdict, dataclass, field
from datetime import datetime
from typing import Any, Literal

SessionStatus = Literal["active", "paused", "completed", "abandoned"]
WorkType = Literal["feature", "bugfix", "refactor", "docs", "other"]
Confidence = Literal["low", "medium", "high"]

SESSION_STATUSES: tuple[str, ...] = ("active", "paused", "completed", "abandoned")
OPEN_STATUSES: tuple[str, ...] = ("active", "paused")
WORK_TYPES: tuple[str, ...] = ("feature", "bugfix", "refactor", "docs", "other")
PAUSE_REASONS: tuple[str, ...] = ("context_switch", "break", "end_of_day", "unknown")

TRIGGER_SESSION_START = "session_start"
TRIGGER_RESUME = "resume"
TRIGGER_SESSION_COMPLETE = "session_complete"
TRIGGER_SESSION_ABANDONED = "session_abandoned"

DEFAULT_COMPLEXITY_RATING = 3


@dataclass(frozen=True)
class WorkSession:
    id: str
    feature_id: str
    feature_description: str
    scope: str
    status: SessionStatus
    started_at: datetime
    completed_at: datetime | None
    total_active_seconds: int
    satisfaction: int | None
    notes: str | None
    created_at: datetime
    updated_at: datetime

    @property
    def is_open(self) -> bool:
        return self.status in OPEN_STATUSES


@dataclass(frozen=True)
class WorkSegment:
    id: str
    session_id: str
    started_at: datetime
    ended_at: datetime | None
    trigger_start: str
    trigger_end: str | None

    @property
    def is_open(self) -> bool:
        return self.ended_at is None


@dataclass(frozen=True)
class WorkMetrics:
    id: str
    session_id: str
    files_touched: int
    lines_added: int
    lines_removed: int
    complexity_rating: int
    work_type: WorkType
    recorded_at: datetime


@dataclass(frozen=True)
class MetricsInput:
    """Metrics supplied when a session completes. Only recorded when work_type is set."""

    work_type: WorkType | None = None
    files_touched: int | None = None
    lines_added: int | None = None
    lines_removed: int | None = None
    complexity_rating: int | None = None


@dataclass(frozen=True)
class SimilarSession:
    feature_id: str
    description: str
    duration_seconds: int


@dataclass(frozen=True)
class Estimate:
    min_seconds: int
    max_seconds: int
    confidence: Confidence
    sample_count: int
    message: str
    similar_sessions: list[SimilarSession] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)
