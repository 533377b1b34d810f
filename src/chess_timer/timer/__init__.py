from chess_timer.timer.errors import InvalidStateError, NotFoundError, TimerError, ValidationError
from chess_timer.timer.estimator import DurationEstimator
from chess_timer.timer.models import Estimate, MetricsInput, WorkMetrics, WorkSegment, WorkSession
from chess_timer.timer.session_repository import SessionRepository
from chess_timer.timer.store import TimerStore

__all__ = [
    "DurationEstimator",
    "Estimate",
    "InvalidStateError",
    "MetricsInput",
    "NotFoundError",
    "SessionRepository",
    "TimerError",
    "TimerStore",
    "ValidationError",
    "WorkMetrics",
    "WorkSegment",
    "WorkSession",
]
