"""Tests for amount parsing and sign conventions."""

import pytest
from decimal import Decimal

from bankrec.utils.amount_parser import parse_amount, signed_amount


@pytest.mark.parametrize(
    "text, expected",
    [
        ("123.45", Decimal("123.45")),
        ("$123.45", Decimal("123.45")),
        ("-123.45", Decimal("-123.45")),
        ("-$123.45", Decimal("-123.45")),
        ("1,234.56", Decimal("1234.56")),
        ("(200.00)", Decimal("-200.00")),
        ("  1300 ", Decimal("1300")),
    ],
)
def test_parse_amount_formats(text, expected):
    """Test the amount formats accepted on the command line."""
    assert parse_amount(text) == expected


def test_parse_amount_empty():
    """Test empty amount strings are rejected."""
    with pytest.raises(ValueError, match="Empty amount"):
        parse_amount("   ")


def test_parse_amount_invalid():
    """Test unparseable amounts are rejected."""
    with pytest.raises(ValueError, match="Could not parse amount"):
        parse_amount("twelve")


def test_parse_amount_rejects_non_finite():
    """Infinity and NaN are not amounts."""
    with pytest.raises(ValueError):
        parse_amount("Infinity")
    with pytest.raises(ValueError):
        parse_amount("NaN")


def test_signed_amount_money_in():
    """Deposits and interest are positive whatever sign was entered."""
    assert signed_amount(Decimal("-500"), "Deposit") == Decimal("500")
    assert signed_amount(Decimal("1.25"), "interest") == Decimal("1.25")


def test_signed_amount_money_out():
    """Withdrawals, checks, transfers and fees are negative."""
    for kind in ("Withdrawal", "Check", "Transfer", "Fee"):
        assert signed_amount(Decimal("200"), kind) == Decimal("-200")
        assert signed_amount(Decimal("-200"), kind) == Decimal("-200")


def test_signed_amount_adjustment_keeps_sign():
    """Adjustments can go either way."""
    assert signed_amount(Decimal("-3.10"), "Adjustment") == Decimal("-3.10")
    assert signed_amount(Decimal("3.10"), "Adjustment") == Decimal("3.10")
