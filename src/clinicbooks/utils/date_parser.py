"""Date parsing utilities."""

from datetime import date, timedelta
from dateutil import parser as date_parser


def parse_date(date_str: str) -> date:
    """Parse a date string into a date object.

    Supports "today", "yesterday", ISO dates ("2026-03-10") and day-first
    dates as written in Spain ("10/03/2026").

    Args:
        date_str: Date string

    Returns:
        Date object

    Raises:
        ValueError: If date string cannot be parsed
    """
    date_str = date_str.strip().lower()
    today = date.today()

    relative_dates = {
        "today": today,
        "hoy": today,
        "yesterday": today - timedelta(days=1),
        "ayer": today - timedelta(days=1),
    }
    if date_str in relative_dates:
        return relative_dates[date_str]

    try:
        # ISO strings must not be read day-first
        dayfirst = not (len(date_str) >= 5 and date_str[:4].isdigit() and date_str[4] in "-/")
        dt = date_parser.parse(date_str, dayfirst=dayfirst)
        return dt.date()
    except (ValueError, OverflowError) as e:
        raise ValueError(f"Could not parse date '{date_str}': {e}")


def fiscal_year_range(year: int) -> tuple[date, date]:
    """Return the first and last day of a fiscal (calendar) year."""
    return date(year, 1, 1), date(year, 12, 31)


def current_fiscal_year() -> int:
    """Return the fiscal year of today's date."""
    return date.today().year
