"""UTC datetime utilities."""

from datetime import datetime, timedelta, timezone


def utc_now() -> datetime:
    """Return timezone-aware UTC now."""
    return datetime.now(timezone.utc)


def expiry_from(start: datetime, ttl_hours: int) -> datetime | None:
    """Deadline ``ttl_hours`` after ``start``; None when the TTL is disabled (<= 0)."""
    if ttl_hours <= 0:
        return None
    return start + timedelta(hours=ttl_hours)
