from __future__ import annotations

import math
from collections.abc import Callable
from datetime import UTC, datetime

Clock = Callable[[], datetime]


def utc_now() -> datetime:
    return datetime.now(UTC)


def to_iso(value: datetime) -> str:
    # Fixed width so that lexical order in SQL matches chronological order.
    return value.astimezone(UTC).isoformat(timespec="milliseconds")


def from_iso(value: str | None) -> datetime | None:
    if value is None:
        return None
    parsed = datetime.fromisoformat(value)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=UTC)
    return parsed


def elapsed_seconds(start: datetime, end: datetime) -> int:
    """Whole seconds between two instants, floored at millisecond resolution."""
    delta = end - start
    millis = delta.days * 86_400_000 + delta.seconds * 1000 + delta.microseconds // 1000
    return millis // 1000


def round_half_up(value: float) -> int:
    """Nearest integer with .5 going up, not to the nearest even number."""
    return math.floor(value + 0.5)


def format_duration(seconds: int) -> str:
    if seconds < 60:
        return f"{seconds} seconds"
    minutes = round_half_up(seconds / 60)
    if minutes == 1:
        return "1 minute"
    if minutes < 60:
        return f"{minutes} minutes"
    hours, remaining = divmod(minutes, 60)
    if remaining == 0:
        return f"{hours} hour{'s' if hours > 1 else ''}"
    return f"{hours}h {remaining}m"
