"""Date parsing utilities."""

from datetime import date, timedelta
from dateutil import parser as date_parser

WEEKDAYS = ["monday", "tuesday", "wednesday", "thursday", "friday", "saturday", "sunday"]


def parse_date(date_str: str, today: date | None = None) -> date:
    """Parse an execution date string into a date object.

    Supports:
    - Absolute dates: "2024-01-15", "15.01.2024", "January 15, 2024"
    - Relative dates: "today", "tomorrow", "next week", "next friday"

    Dotted and slashed dates are read day first, as in German bank exports.

    Args:
        date_str: Date string
        today: Reference date for relative expressions (defaults to today)

    Returns:
        Date object

    Raises:
        ValueError: If date string cannot be parsed
    """
    date_str = date_str.strip().lower()
    today = today or date.today()

    relative_dates = {
        "today": today,
        "tomorrow": today + timedelta(days=1),
    }
    if date_str in relative_dates:
        return relative_dates[date_str]

    if date_str.startswith("next "):
        period = date_str[5:]
        if period == "week":
            # Monday of next week
            return today + timedelta(days=(7 - today.weekday()))
        if period in WEEKDAYS:
            days_ahead = (WEEKDAYS.index(period) - today.weekday()) % 7
            if days_ahead == 0:
                days_ahead = 7
            return today + timedelta(days=days_ahead)

    # ISO dates are year first; everything else is read day first
    dayfirst = not (len(date_str) >= 5 and date_str[4] == "-")
    try:
        return date_parser.parse(date_str, dayfirst=dayfirst).date()
    except (ValueError, TypeError, OverflowError) as e:
        raise ValueError(f"Could not parse date '{date_str}': {e}")


def days_until(target: date, today: date | None = None) -> int:
    """Return the number of days from today to target.

    Raises:
        ValueError: If target lies in the past
    """
    today = today or date.today()
    offset = (target - today).days
    if offset < 0:
        raise ValueError(f"Execution date {target.isoformat()} lies in the past")
    return offset
