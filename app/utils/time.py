"""Time utilities (UTC)."""

from datetime import date, datetime, timezone


def now_utc_naive() -> datetime:
    """
    Current time in UTC, returned as naive datetime for DB storage.
    """
    return datetime.now(timezone.utc).replace(tzinfo=None)


def month_start(day: date) -> date:
    """First day of the calendar month, used as the snapshot period key."""
    return date(day.year, day.month, 1)
