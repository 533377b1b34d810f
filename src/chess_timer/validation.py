from __future__ import annotations

from chess_timer.timer.errors import ValidationError
from chess_timer.timer.models import PAUSE_REASONS, SESSION_STATUSES, WORK_TYPES, MetricsInput


def validate_rating(field: str, value: int | None) -> int | None:
    if value is None:
        return None
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValidationError(field, value, "must be an integer")
    if not 1 <= value <= 5:
        raise ValidationError(field, value, "must be between 1 and 5")
    return value


def validate_count(field: str, value: int | None) -> int | None:
    if value is None:
        return None
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValidationError(field, value, "must be an integer")
    if value < 0:
        raise ValidationError(field, value, "must not be negative")
    return value


def validate_work_type(value: str | None) -> str | None:
    if value is None:
        return None
    if value not in WORK_TYPES:
        raise ValidationError("work_type", value, f"must be one of {', '.join(WORK_TYPES)}")
    return value


def validate_status(value: str | None) -> str | None:
    if value is None:
        return None
    if value not in SESSION_STATUSES:
        raise ValidationError("status", value, f"must be one of {', '.join(SESSION_STATUSES)}")
    return value


def validate_pause_reason(value: str | None) -> str:
    if value is None:
        return "unknown"
    if value not in PAUSE_REASONS:
        raise ValidationError("reason", value, f"must be one of {', '.join(PAUSE_REASONS)}")
    return value


def build_metrics_input(
    *,
    work_type: str | None,
    files_touched: int | None,
    lines_added: int | None,
    lines_removed: int | None,
    complexity_rating: int | None,
) -> MetricsInput:
    return MetricsInput(
        work_type=validate_work_type(work_type),
        files_touched=validate_count("files_touched", files_touched),
        lines_added=validate_count("lines_added", lines_added),
        lines_removed=validate_count("lines_removed", lines_removed),
        complexity_rating=validate_rating("complexity_rating", complexity_rating),
    )
