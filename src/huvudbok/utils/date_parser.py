"""Date parsing utilities."""

from datetime import date, timedelta
from dateutil import parser as date_parser
from dateutil.relativedelta import relativedelta


def _quarter_start(day: date) -> date:
    return day.replace(month=3 * ((day.month - 1) // 3) + 1, day=1)


def parse_date(date_str: str) -> date:
    """Parse a date string into a date object.

    Supports ISO dates ("2024-01-15"), compact SIE dates ("20240115") and a
    few relative words: "today", "yesterday", "this month", "last month",
    "this year" and "last year" (the latter four give the first day of the
    period).

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
        "yesterday": today - timedelta(days=1),
        "this month": today.replace(day=1),
        "last month": (today - relativedelta(months=1)).replace(day=1),
        "this year": today.replace(month=1, day=1),
        "last year": today.replace(month=1, day=1) - relativedelta(years=1),
    }
    if date_str in relative_dates:
        return relative_dates[date_str]

    try:
        # Day first is never assumed; Swedish dates are written year first
        return date_parser.parse(date_str, yearfirst=True, dayfirst=False).date()
    except (ValueError, OverflowError) as e:
        raise ValueError(f"Could not parse date '{date_str}': {e}") from None


def get_date_range(period: str) -> tuple[date, date]:
    """Get start and end dates for a named reporting period.

    Args:
        period: One of this-month, last-month, this-quarter, last-quarter,
            this-year, last-year

    Returns:
        Tuple of (start_date, end_date). Periods that include today end
        today; past periods end on their last day.

    Raises:
        ValueError: If period string is not recognized
    """
    period = period.strip().lower()
    today = date.today()

    if period == "this-month":
        return today.replace(day=1), today
    if period == "last-month":
        end_date = today.replace(day=1) - timedelta(days=1)
        return end_date.replace(day=1), end_date
    if period == "this-quarter":
        return _quarter_start(today), today
    if period == "last-quarter":
        end_date = _quarter_start(today) - timedelta(days=1)
        return _quarter_start(end_date), end_date
    if period == "this-year":
        return today.replace(month=1, day=1), today
    if period == "last-year":
        start_date = today.replace(month=1, day=1) - relativedelta(years=1)
        return start_date, start_date.replace(month=12, day=31)

    raise ValueError(
        f"Unknown period: '{period}'. Supported periods: this-month, last-month, "
        "this-quarter, last-quarter, this-year, last-year"
    )
