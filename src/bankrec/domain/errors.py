"""Shared domain error messages and error types."""

from decimal import Decimal
from typing import Optional


class DomainError(ValueError):
    """Base class for domain-level errors.

    Subclasses provide semantic categories while preserving ValueError
    compatibility for existing error handling.
    """


class ValidationError(DomainError):
    """Invalid input or failed validation in domain logic."""

    def __init__(self, message: str, difference: Optional[Decimal] = None):
        super().__init__(message)
        self.difference = difference


class NotFoundError(DomainError):
    """Requested domain entity does not exist."""


class ConflictError(DomainError):
    """Operation violates a state precondition."""

    def __init__(self, message: str, existing_id: Optional[int] = None):
        super().__init__(message)
        self.existing_id = existing_id


class StorageError(RuntimeError):
    """Infrastructure failure in the storage layer.

    Not a DomainError: callers treat it as fatal to the current operation.
    """


def bank_account_not_found(bank_account_id: int) -> str:
    """Return message for missing bank account."""
    return f"Bank account {bank_account_id} not found"


def transaction_not_found(transaction_id: int) -> str:
    """Return message for missing transaction."""
    return f"Transaction {transaction_id} not found"


def reconciliation_not_found(reconciliation_id: int) -> str:
    """Return message for missing reconciliation."""
    return f"Reconciliation {reconciliation_id} not found"


def cleared_transaction_locked(action: str) -> str:
    """Return message when a cleared transaction is edited or deleted."""
    return f"Cannot {action} a cleared transaction"


def in_progress_exists(existing_id: int) -> str:
    """Return message when an account already has an open reconciliation."""
    return (
        "An in-progress reconciliation already exists for this account "
        f"(ID: {existing_id})"
    )


def non_zero_difference(difference: Decimal) -> str:
    """Return message when completing with an unbalanced difference."""
    return (
        "Cannot complete reconciliation with a non-zero difference "
        f"(difference: {difference:,.2f})"
    )
