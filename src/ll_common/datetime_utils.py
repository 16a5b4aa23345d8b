"""UTC datetime utilities."""

import math
from collections.abc import Callable
from datetime import datetime, timedelta, timezone

Clock = Callable[[], datetime]

ONE_DAY = timedelta(days=1)


def utc_now() -> datetime:
    """Return timezone-aware UTC now."""
    return datetime.now(timezone.utc)


def days_until(target: datetime, now: datetime) -> int:
    """Whole days remaining until target, rounded up (0 or negative once passed)."""
    return math.ceil((target - now) / ONE_DAY)


def later_of(expires_at: datetime, now: datetime, duration_days: int) -> datetime:
    """max(expires_at, now + duration_days)."""
    return max(expires_at, now + timedelta(days=duration_days))
