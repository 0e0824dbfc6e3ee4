"""Domain layer for bankrec application."""

from bankrec.domain.bank_account import BankAccountService
from bankrec.domain.transaction import TransactionService
from bankrec.domain.reconciliation import ReconciliationService

__all__ = [
    "BankAccountService",
    "TransactionService",
    "ReconciliationService",
]
