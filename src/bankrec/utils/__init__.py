"""Utility functions for bankrec."""

from bankrec.utils.date_parser import parse_date
from bankrec.utils.amount_parser import parse_amount
from bankrec.utils.account_resolver import resolve_bank_account

__all__ = ["parse_date", "parse_amount", "resolve_bank_account"]
