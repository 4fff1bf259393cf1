"""Date-time helpers for daily reporting windows."""

from datetime import datetime, timedelta, timezone


def utc_naive(now: datetime | None = None) -> datetime:
    """Return ``now`` (or the current time) as a naive UTC timestamp."""

    current = now.astimezone(timezone.utc) if now else datetime.now(timezone.utc)
    return current.replace(tzinfo=None)


def day_window(now: datetime | None = None) -> tuple[datetime, datetime]:
    """Return the naive UTC bounds ``[start, end)`` of the day containing ``now``."""

    current = utc_naive(now)
    start = current.replace(hour=0, minute=0, second=0, microsecond=0)
    return start, start + timedelta(days=1)
