"""Tests for date parser with relative dates."""

import pytest
from datetime import date, timedelta
from dateutil.relativedelta import relativedelta
from bankrec.utils.date_parser import parse_date


def test_parse_absolute_date():
    """Test parsing absolute dates."""
    result = parse_date("2025-01-31")
    assert result == date(2025, 1, 31)


def test_parse_today():
    """Test parsing 'today'."""
    assert parse_date("today") == date.today()


def test_parse_yesterday():
    """Test parsing 'yesterday'."""
    assert parse_date("Yesterday") == date.today() - timedelta(days=1)


def test_parse_end_of_last_month():
    """Statement dates are usually the last day of the previous month."""
    result = parse_date("end of last month")
    today = date.today()
    assert result == today.replace(day=1) - timedelta(days=1)
    assert (result + timedelta(days=1)).day == 1


def test_parse_end_of_this_month():
    """Test parsing 'end of this month'."""
    result = parse_date("end of this month")
    today = date.today()
    assert result.month == today.month
    assert result == (today.replace(day=1) + relativedelta(months=1)) - timedelta(days=1)


def test_parse_last_month():
    """Test parsing 'last month' as the first day of last month."""
    result = parse_date("last month")
    assert result == (date.today() - relativedelta(months=1)).replace(day=1)


def test_parse_this_week_is_monday():
    """Test parsing 'this week'."""
    result = parse_date("this week")
    assert result.weekday() == 0
    assert result <= date.today()


def test_parse_invalid_relative():
    """Test parsing invalid relative date."""
    with pytest.raises(ValueError):
        parse_date("last invalid")


def test_parse_garbage():
    """Test parsing a string that is not a date."""
    with pytest.raises(ValueError, match="Could not parse date"):
        parse_date("not a date")


def test_parse_standard_formats():
    """Test parsing various standard date formats."""
    assert parse_date("January 31, 2025") == date(2025, 1, 31)
    assert parse_date("28/02/2025") == date(2025, 2, 28)
