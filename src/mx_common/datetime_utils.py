"""UTC datetime utilities."""

import math
from datetime import datetime, timedelta, timezone

_SECONDS_PER_DAY = 86400.0


def utc_now() -> datetime:
    """Return timezone-aware UTC now."""
    return datetime.now(timezone.utc)


def ensure_utc(value: datetime) -> datetime:
    """Naive datetimes from the market-data source are UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def expires_at(issued: datetime, duration_days: int) -> datetime:
    return ensure_utc(issued) + timedelta(days=duration_days)


def days_until(deadline: datetime, now: datetime) -> int:
    """Whole days left before deadline, rounded up and floored at 0."""
    remaining = (ensure_utc(deadline) - ensure_utc(now)).total_seconds() / _SECONDS_PER_DAY
    return max(0, math.ceil(remaining))
