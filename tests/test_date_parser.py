"""Tests for date parser with relative dates and reporting periods."""

import pytest
from datetime import date, timedelta
from dateutil.relativedelta import relativedelta
from huvudbok.utils.date_parser import parse_date, get_date_range


def test_parse_absolute_date():
    """Test parsing ISO dates."""
    assert parse_date("2024-01-15") == date(2024, 1, 15)


def test_parse_compact_date():
    """Test parsing YYYYMMDD as used in SIE files."""
    assert parse_date("20240115") == date(2024, 1, 15)


def test_parse_today_and_yesterday():
    assert parse_date("today") == date.today()
    assert parse_date(" Yesterday ") == date.today() - timedelta(days=1)


def test_parse_last_month():
    """'last month' is the first day of the previous month."""
    expected = (date.today() - relativedelta(months=1)).replace(day=1)
    assert parse_date("last month") == expected


def test_parse_this_year():
    assert parse_date("this year") == date.today().replace(month=1, day=1)


def test_parse_invalid_date():
    with pytest.raises(ValueError, match="Could not parse date"):
        parse_date("not a date")


def test_get_date_range_last_month():
    start, end = get_date_range("last-month")
    assert start.day == 1
    assert end == date.today().replace(day=1) - timedelta(days=1)
    assert start.month == end.month


def test_get_date_range_this_quarter():
    start, end = get_date_range("this-quarter")
    assert start.day == 1
    assert start.month in (1, 4, 7, 10)
    assert start <= date.today() == end


def test_get_date_range_last_quarter():
    start, end = get_date_range("last-quarter")
    assert start.month in (1, 4, 7, 10)
    assert end.month == start.month + 2
    assert end + timedelta(days=1) == get_date_range("this-quarter")[0]


def test_get_date_range_last_year():
    start, end = get_date_range("last-year")
    year = date.today().year - 1
    assert (start, end) == (date(year, 1, 1), date(year, 12, 31))


def test_get_date_range_unknown():
    with pytest.raises(ValueError, match="Unknown period"):
        get_date_range("next-decade")
