import math
from datetime import datetime, timezone, timedelta
from typing import Optional


def as_utc(value: Optional[datetime]) -> Optional[datetime]:
    """Attach UTC to naive datetimes (SQLite drops tzinfo on round-trip).

    Args:
        value: Datetime from the database or caller, possibly naive

    Returns:
        Timezone-aware datetime in UTC, or None
    """
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def days_remaining(deadline: Optional[datetime], now: datetime) -> int:
    """Whole days left before a deadline, rounded up, never negative."""
    deadline = as_utc(deadline)
    if deadline is None:
        return 0
    remaining = (deadline - as_utc(now)) / timedelta(days=1)
    return max(0, math.ceil(remaining))
