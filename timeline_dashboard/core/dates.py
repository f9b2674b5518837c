"""Day-granularity date arithmetic.

All functions work on calendar days. Times of day are dropped on parsing, so
two values that only differ in time compare equal and daylight-saving shifts
never change a day count.
"""

from datetime import date, datetime, timedelta
from typing import Union

DateLike = Union[date, datetime, str]


def parse_date(value: DateLike) -> date:
    """Parse a date-like value into a ``datetime.date``.

    Parameters
    ----------
    value : date, datetime or str
        A date, a datetime (its time is ignored) or an ISO-8601 string such
        as ``"2024-01-05"`` or ``"2024-01-05T10:30:00"``.

    Raises
    ------
    ValueError
        If the value cannot be read as a calendar day.
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not isinstance(value, str):
        raise ValueError(f"Cannot parse date from {type(value).__name__}: {value!r}")

    text = value.strip()
    if text.endswith(("Z", "z")):
        text = text[:-1]
    try:
        if len(text) == 10:
            return date.fromisoformat(text)
        return datetime.fromisoformat(text).date()
    except ValueError:
        raise ValueError(f"Invalid calendar date: {value!r}") from None


def format_date(value: DateLike) -> str:
    """Format as ``YYYY-MM-DD``."""
    return parse_date(value).isoformat()


def days_between(a: DateLike, b: DateLike) -> int:
    """Whole calendar days from ``a`` to ``b`` (negative when ``b`` is earlier)."""
    return parse_date(b).toordinal() - parse_date(a).toordinal()


def add_days(value: DateLike, n: int) -> date:
    """Return a new date ``n`` days after ``value`` (``n`` may be negative)."""
    return parse_date(value) + timedelta(days=n)


def is_before(a: DateLike, b: DateLike) -> bool:
    return parse_date(a) < parse_date(b)


def is_after(a: DateLike, b: DateLike) -> bool:
    return parse_date(a) > parse_date(b)


def is_same_day(a: DateLike, b: DateLike) -> bool:
    return parse_date(a) == parse_date(b)
