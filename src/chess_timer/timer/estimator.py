"""
Duration forecasts from completed work-session history.

The confidence tier decides how the range is built: sparse history gets the
full spread, a moderate sample the interquartile range, and a large sample a
band of one deviation around the median.
"""

from __future__ import annotations

import math
from datetime import timedelta

from loguru import logger

from chess_timer.timer.clock import Clock, format_duration, round_half_up, utc_now
from chess_timer.timer.models import Confidence, Estimate, SimilarSession, WorkSession, WorkType
from chess_timer.timer.session_repository import SessionRepository

NO_HISTORY_MESSAGE = "Hard to say—this is new territory for us."

DEFAULT_HISTORY_LIMIT = 100
DEFAULT_RECENT_WINDOW_DAYS = 30
MIN_RECENT_SAMPLES = 3
MAX_SIMILAR_SESSIONS = 3


def confidence_for(sample_count: int) -> Confidence:
    if sample_count < 5:
        return "low"
    if sample_count < 15:
        return "medium"
    return "high"


def _deviation_around(values: list[int], center: float) -> float:
    if not values:
        return 0.0
    return math.sqrt(sum((v - center) ** 2 for v in values) / len(values))


class DurationEstimator:
    def __init__(
        self,
        repository: SessionRepository,
        *,
        clock: Clock = utc_now,
        history_limit: int = DEFAULT_HISTORY_LIMIT,
        recent_window_days: int = DEFAULT_RECENT_WINDOW_DAYS,
    ):
        self._repository = repository
        self._clock = clock
        self._history_limit = max(1, history_limit)
        self._recent_window = timedelta(days=max(1, recent_window_days))

    def get_estimate(
        self,
        work_type: WorkType | None = None,
        complexity_rating: int | None = None,
    ) -> Estimate:
        samples = self._select_samples(work_type, complexity_rating)
        sample_count = len(samples)
        logger.debug(
            f"Estimating work_type={work_type} complexity={complexity_rating}: {sample_count} samples"
        )
        if sample_count == 0:
            return Estimate(
                min_seconds=0,
                max_seconds=0,
                confidence="low",
                sample_count=0,
                message=NO_HISTORY_MESSAGE,
            )

        confidence = confidence_for(sample_count)
        durations = [s.total_active_seconds for s in samples]
        ordered = sorted(durations)
        median = ordered[len(ordered) // 2]

        if confidence == "low":
            low, high = ordered[0], ordered[-1]
            message = f"Similar work has taken anywhere from {format_duration(low)} to {format_duration(high)}"
        elif confidence == "medium":
            low = ordered[math.floor(len(ordered) * 0.25)]
            high = ordered[math.floor(len(ordered) * 0.75)]
            message = (
                f"Based on {sample_count} similar sessions, probably "
                f"{format_duration(low)} to {format_duration(high)}"
            )
        else:
            spread = _deviation_around(durations, median)
            low = max(0.0, median - spread)
            high = median + spread
            message = f"This usually takes about {format_duration(median)}"

        return Estimate(
            min_seconds=round_half_up(low),
            max_seconds=round_half_up(high),
            confidence=confidence,
            sample_count=sample_count,
            message=message,
            similar_sessions=[
                SimilarSession(
                    feature_id=s.feature_id,
                    description=s.feature_description,
                    duration_seconds=s.total_active_seconds,
                )
                for s in samples[:MAX_SIMILAR_SESSIONS]
            ],
        )

    def compare_to_history(self, total_active_seconds: int, work_type: WorkType | None = None) -> str | None:
        """One-line comparison of a finished session against similar history."""
        estimate = self.get_estimate(work_type=work_type)
        if estimate.sample_count == 0:
            return None
        midpoint = (estimate.min_seconds + estimate.max_seconds) / 2
        if midpoint <= 0:
            return None
        diff = (total_active_seconds - midpoint) / midpoint * 100
        if diff < -10:
            return f"About {abs(round_half_up(diff))}% faster than similar work."
        if diff > 10:
            return f"About {round_half_up(diff)}% slower than similar work."
        return "Right in line with similar work."

    def _select_samples(self, work_type: str | None, complexity_rating: int | None) -> list[WorkSession]:
        history = self._repository.list_sessions(status="completed", limit=self._history_limit)

        if work_type is not None or complexity_rating is not None:
            filtered: list[WorkSession] = []
            for session in history:
                latest = self._repository.latest_metrics(session.id)
                if latest is None:
                    continue
                if work_type is not None and latest.work_type != work_type:
                    continue
                if complexity_rating is not None and abs(latest.complexity_rating - complexity_rating) > 1:
                    continue
                filtered.append(session)
            history = filtered

        cutoff = self._clock() - self._recent_window
        recent = [s for s in history if s.completed_at is not None and s.completed_at > cutoff]
        return recent if len(recent) >= MIN_RECENT_SAMPLES else history
