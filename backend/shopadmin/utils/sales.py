"""
Sale lifecycle helpers: status derived from the date range, and
human readable date ranges for list views.
"""
from datetime import date, datetime, timezone
from enum import Enum


MONTHS = ("Jan", "Feb", "Mar", "Apr", "May", "Jun", "Jul", "Aug", "Sep", "Oct", "Nov", "Dec")


class SaleStatus(str, Enum):
    UPCOMING = "upcoming"
    ACTIVE = "active"
    ENDED = "ended"


DateLike = date | datetime | str


def utcnow() -> datetime:
    """Server-side 'now' in UTC (naive, canonical)."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def parse_datetime(value: DateLike) -> datetime:
    """
    Normalize a date, datetime or ISO-8601 string to a UTC-naive datetime.

    - "YYYY-MM-DD" means midnight UTC of that day
    - naive datetimes are interpreted as UTC
    - "...Z" or "...+/-HH:MM" is converted to UTC and tzinfo is stripped
    """
    if isinstance(value, str):
        s = value.strip()
        if s.endswith("Z"):
            s = s[:-1] + "+00:00"
        value = datetime.fromisoformat(s)
    elif not isinstance(value, datetime):
        value = datetime(value.year, value.month, value.day)

    if value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc).replace(tzinfo=None)


def get_sale_status(start_date: DateLike, end_date: DateLike, now: datetime | None = None) -> SaleStatus:
    """Status of a sale at `now` (defaults to the current instant).

    Both ends of the range are inclusive.
    """
    now = parse_datetime(now) if now is not None else utcnow()
    start = parse_datetime(start_date)
    end = parse_datetime(end_date)

    if now < start:
        return SaleStatus.UPCOMING
    elif now <= end:
        return SaleStatus.ACTIVE
    return SaleStatus.ENDED


def _short(value: datetime) -> str:
    return f"{MONTHS[value.month - 1]} {value.day}"


def format_date_range(start_date: DateLike, end_date: DateLike) -> str:
    """Format a sale's range, e.g. "Mar 15 - Mar 22, 2024".

    The start year is only repeated when the range crosses a year boundary:
    "Dec 30, 2023 - Jan 2, 2024".
    """
    start = parse_datetime(start_date)
    end = parse_datetime(end_date)

    if start.year == end.year:
        return f"{_short(start)} - {_short(end)}, {end.year}"
    return f"{_short(start)}, {start.year} - {_short(end)}, {end.year}"
