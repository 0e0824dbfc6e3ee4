"""Amount parsing utilities."""

from decimal import Decimal, InvalidOperation
import re


def parse_amount(amount_str: str) -> Decimal:
    """Parse an amount string into a Decimal.

    Handles various formats:
    - "123.45"
    - "$123.45"
    - "-123.45"
    - "-$123.45"
    - "1,234.56"
    - "(123.45)" (negative in parentheses)

    Args:
        amount_str: Amount string

    Returns:
        Decimal amount

    Raises:
        ValueError: If amount string cannot be parsed
    """
    if not amount_str or not amount_str.strip():
        raise ValueError("Empty amount string")

    amount_str = amount_str.strip()

    # Handle parentheses notation (negative)
    is_negative = False
    if amount_str.startswith("(") and amount_str.endswith(")"):
        is_negative = True
        amount_str = amount_str[1:-1]

    # "-$12.00" puts the sign before the currency symbol
    if amount_str.startswith("-"):
        is_negative = not is_negative
        amount_str = amount_str[1:]

    amount_str = re.sub(r"[$€£¥]", "", amount_str)
    amount_str = amount_str.replace(",", "").strip()

    try:
        amount = Decimal(amount_str)
    except InvalidOperation as e:
        raise ValueError(f"Could not parse amount '{amount_str}'") from e
    if not amount.is_finite():
        raise ValueError(f"Could not parse amount '{amount_str}'")
    return -amount if is_negative else amount


def signed_amount(amount: Decimal, transaction_type: str) -> Decimal:
    """Apply the sign convention of a transaction type to an amount.

    Deposits and interest are money in; withdrawals, checks, transfers and
    fees are money out. Adjustments keep the sign they were given.
    """
    kind = transaction_type.strip().lower()
    if kind in ("deposit", "interest"):
        return abs(amount)
    if kind in ("withdrawal", "check", "transfer", "fee"):
        return -abs(amount)
    return amount
