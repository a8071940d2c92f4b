"""Date parsing utilities."""

from datetime import date, datetime, timedelta
from dateutil import parser as date_parser
from dateutil.relativedelta import relativedelta

# Unambiguous formats, tried before the day/month-order dependent ones
_ISO_FORMATS = ["%Y-%m-%d", "%Y/%m/%d"]

_DAY_FIRST_FORMATS = ["%d/%m/%Y", "%d/%m/%y", "%d-%m-%Y", "%d-%m-%y", "%d.%m.%Y"]

_MONTH_FIRST_FORMATS = ["%m/%d/%Y", "%m/%d/%y", "%m-%d-%Y", "%m-%d-%y"]

_NAMED_MONTH_FORMATS = ["%d-%b-%Y", "%d-%b-%y", "%d %b %Y", "%d %B %Y", "%d-%B-%Y"]


def statement_date_formats(day_first: bool = True) -> list[str]:
    """Return the strptime formats accepted for statement dates, in trial order.

    Args:
        day_first: Try DD/MM before MM/DD when a slash or dash date is ambiguous

    Returns:
        List of strptime format strings
    """
    if day_first:
        ordered = _DAY_FIRST_FORMATS + _MONTH_FIRST_FORMATS
    else:
        ordered = _MONTH_FIRST_FORMATS + _DAY_FIRST_FORMATS
    return _ISO_FORMATS + ordered + _NAMED_MONTH_FORMATS


def parse_statement_date(date_str: str, day_first: bool = True) -> date:
    """Parse a date cell from a bank statement.

    Only the fixed statement format set is accepted; free-form text such as
    "yesterday" is rejected so that content sniffing stays strict.

    Args:
        date_str: Raw cell value
        day_first: Prefer DD/MM/YYYY over MM/DD/YYYY for ambiguous values

    Returns:
        Date object

    Raises:
        ValueError: If the value matches none of the accepted formats
    """
    value = date_str.strip()
    if not value:
        raise ValueError("Empty date string")

    for fmt in statement_date_formats(day_first):
        try:
            return datetime.strptime(value, fmt).date()
        except ValueError:
            continue

    raise ValueError(f"Could not parse date '{value}'")


def looks_like_date(value: str) -> bool:
    """Return True if value parses as a statement date in either day order."""
    try:
        parse_statement_date(value)
    except ValueError:
        return False
    return True


def parse_date(date_str: str) -> date:
    """Parse a user-supplied date filter.

    Supports absolute dates ("2024-01-15", "January 15, 2024") and a few
    relative forms: "today", "yesterday", and "this"/"last" followed by
    "week", "month" or "year" (meaning the first day of that period).

    Args:
        date_str: Date string

    Returns:
        Date object

    Raises:
        ValueError: If date string cannot be parsed
    """
    date_str = date_str.strip().lower()
    today = date.today()

    if date_str == "today":
        return today
    if date_str == "yesterday":
        return today - timedelta(days=1)

    period_starts = {
        "week": today - timedelta(days=today.weekday()),
        "month": today.replace(day=1),
        "year": today.replace(month=1, day=1),
    }
    period_lengths = {
        "week": relativedelta(weeks=1),
        "month": relativedelta(months=1),
        "year": relativedelta(years=1),
    }

    prefix, _, period = date_str.partition(" ")
    if period in period_starts:
        if prefix == "this":
            return period_starts[period]
        if prefix == "last":
            return period_starts[period] - period_lengths[period]

    try:
        return date_parser.parse(date_str).date()
    except (ValueError, TypeError, OverflowError) as e:
        raise ValueError(f"Could not parse date '{date_str}': {e}")
