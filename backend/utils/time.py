"""Time-related utility functions."""

from datetime import date, datetime, time, timezone


def utc_now() -> datetime:
    """Return current UTC time as timezone-aware datetime."""
    return datetime.now(timezone.utc)


def start_of_day(moment: datetime) -> datetime:
    """Midnight of the day containing ``moment``, keeping its tzinfo."""
    return moment.replace(hour=0, minute=0, second=0, microsecond=0)


def hours_between(start: datetime, end: datetime) -> float:
    """Signed number of hours from start to end."""
    return (end - start).total_seconds() / 3600


def as_datetime(value: date | datetime, tzinfo=None) -> datetime:
    """Promote a date to midnight of that day; datetimes pass through."""
    if isinstance(value, datetime):
        return value
    return datetime.combine(value, time.min, tzinfo=tzinfo)
