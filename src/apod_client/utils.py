"""Date helpers for the APOD client."""

from datetime import date, datetime, timedelta

# Date format used by the endpoint's ``date`` query parameter
DATE_FORMAT = "%Y-%m-%d"


def format_date(day: date) -> str:
    """Format a calendar date the way the endpoint expects it.

    Args:
        day: Date to format

    Returns:
        Date as ``YYYY-MM-DD``
    """
    return day.strftime(DATE_FORMAT)


def parse_date(text: str) -> date:
    """Parse a ``YYYY-MM-DD`` string.

    Args:
        text: Date string to parse

    Returns:
        The parsed date

    Raises:
        ValueError: If the text is not a valid ``YYYY-MM-DD`` date
    """
    try:
        return datetime.strptime(text, DATE_FORMAT).date()
    except ValueError as e:
        raise ValueError(f"Invalid date '{text}', expected YYYY-MM-DD") from e


def previous_day(day: date) -> date:
    """Return the calendar day before ``day``."""
    return day - timedelta(days=1)
