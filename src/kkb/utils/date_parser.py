"""Date and timestamp utilities."""

import re
from datetime import date, datetime, timedelta, UTC
from dateutil import parser as date_parser
from dateutil.relativedelta import relativedelta

ISO_DATE_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}$")


def current_timestamp() -> datetime:
    """Return the current UTC time truncated to millisecond precision.

    Millisecond precision matches the serialized form, so a timestamp survives
    a save/load cycle unchanged.
    """
    now = datetime.now(UTC)
    return now.replace(microsecond=(now.microsecond // 1000) * 1000)


def format_timestamp(value: datetime) -> str:
    """Format a timestamp as ISO 8601 UTC, e.g. ``2025-10-18T12:34:56.789Z``."""
    if value.tzinfo is None:
        value = value.replace(tzinfo=UTC)
    value = value.astimezone(UTC)
    return value.strftime("%Y-%m-%dT%H:%M:%S.") + f"{value.microsecond // 1000:03d}Z"


def parse_timestamp(value: str) -> datetime:
    """Parse an ISO 8601 timestamp into an aware UTC datetime.

    Raises:
        ValueError: If the string is not an ISO 8601 timestamp
    """
    try:
        parsed = date_parser.isoparse(value)
    except (ValueError, TypeError, OverflowError) as e:
        raise ValueError(f"Could not parse timestamp '{value}': {e}")
    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=UTC)
    return parsed.astimezone(UTC)


def is_valid_date(date_str: str) -> bool:
    """Return True for a real calendar date in strict ``YYYY-MM-DD`` form."""
    if not isinstance(date_str, str) or not ISO_DATE_PATTERN.match(date_str):
        return False
    try:
        date.fromisoformat(date_str)
    except ValueError:
        return False
    return True


def parse_iso_date(date_str: str) -> date:
    """Parse a strict ``YYYY-MM-DD`` date string.

    Raises:
        ValueError: If the string is not a valid calendar date in that form
    """
    if not is_valid_date(date_str):
        raise ValueError(f"Invalid date '{date_str}': expected YYYY-MM-DD")
    return date.fromisoformat(date_str)


PERIOD_NAMES = ("this-month", "this-year", "this-week", "last-month", "last-year", "last-week")


def get_date_range(period: str, today: date | None = None) -> tuple[date, date]:
    """Get start and end dates (both inclusive) for a named period.

    Args:
        period: One of ``PERIOD_NAMES``
        today: Reference date, defaults to the current date

    Returns:
        Tuple of (start_date, end_date). Periods starting with "this" end today.

    Raises:
        ValueError: If period string is not recognized
    """
    period = period.strip().lower()
    today = today or date.today()
    month_start = today.replace(day=1)
    year_start = today.replace(month=1, day=1)
    week_start = today - timedelta(days=today.weekday())

    ranges = {
        "this-month": (month_start, today),
        "this-year": (year_start, today),
        "this-week": (week_start, today),
        "last-month": (month_start - relativedelta(months=1), month_start - timedelta(days=1)),
        "last-year": (year_start - relativedelta(years=1), year_start - timedelta(days=1)),
        "last-week": (week_start - timedelta(days=7), week_start - timedelta(days=1)),
    }
    if period not in ranges:
        raise ValueError(
            f"Unknown period: '{period}'. Supported periods: {', '.join(PERIOD_NAMES)}"
        )
    return ranges[period]


def parse_date(date_str: str, today: date | None = None) -> date:
    """Parse a user-supplied date string into a date object.

    Supports various formats including relative dates:
    - Absolute dates: "2024-01-15", "January 15, 2024", etc.
    - Relative days: "today", "yesterday", "tomorrow"
    - Period starts: "this month", "last year", "last week", ...
    - Period ends: "end of month", "end of last month", "end of year"

    Args:
        date_str: Date string in various formats
        today: Reference date for relative forms, defaults to the current date

    Returns:
        Date object

    Raises:
        ValueError: If date string cannot be parsed
    """
    text = date_str.strip().lower()
    today = today or date.today()

    days = {
        "today": today,
        "yesterday": today - timedelta(days=1),
        "tomorrow": today + timedelta(days=1),
    }
    if text in days:
        return days[text]

    period = text.replace(" ", "-")
    if period in PERIOD_NAMES:
        return get_date_range(period, today)[0]

    if text.startswith("end of "):
        # Closing dates, handy for balance sheets
        ends = {
            "month": today.replace(day=1) + relativedelta(months=1) - timedelta(days=1),
            "last-month": get_date_range("last-month", today)[1],
            "year": today.replace(month=12, day=31),
            "last-year": get_date_range("last-year", today)[1],
        }
        if period[len("end-of-"):] in ends:
            return ends[period[len("end-of-"):]]

    if is_valid_date(text):
        return date.fromisoformat(text)

    try:
        return date_parser.parse(text).date()
    except (ValueError, TypeError, OverflowError) as e:
        raise ValueError(f"Could not parse date '{date_str}': {e}")
