"""Calendar-day helpers shared by the domain and application layers.

The scheduler works at day granularity: every date is a `datetime.date`
and "today" is the local calendar day.
"""

from datetime import date, datetime

from .errors import InvalidDateError


def parse_iso_date(value: object) -> date | None:
    """
    Parse a YYYY-MM-DD value into a date.

    Accepts None or an empty string (returns None), `date` and `datetime`
    instances, and ISO strings. A time component after "T" is ignored.

    Raises:
        InvalidDateError: If the value cannot be read as a calendar date.
    """
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        text = value.strip()
        if not text:
            return None
        try:
            return date.fromisoformat(text.split("T", 1)[0])
        except ValueError:
            raise InvalidDateError(value) from None
    raise InvalidDateError(value)


def format_iso_date(value: date | None) -> str | None:
    return value.isoformat() if value else None


def resolve_today(today: date | datetime | None = None) -> date:
    """Return the calendar day for `today`, defaulting to the local current date."""
    if today is None:
        return date.today()
    if isinstance(today, datetime):
        return today.date()
    return today


def days_between(start: date, end: date) -> int:
    """Signed whole days from `start` to `end`."""
    return (end - start).days
