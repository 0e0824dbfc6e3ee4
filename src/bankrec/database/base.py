"""Abstract database interface."""

from abc import ABC, abstractmethod
from contextlib import AbstractContextManager
from typing import Optional, Any
from datetime import date, datetime
from decimal import Decimal

# Import entities directly to avoid circular import through domain/__init__.py
from bankrec.domain.entities import (
    BankAccount,
    BankTransaction,
    Reconciliation,
    ReconciliationStatus,
    ReconciliationTotals,
)


class Database(ABC):
    """Abstract database interface for bankrec.

    Mutating methods do their work inside ``unit_of_work()``. Called on
    their own they commit immediately; called inside an enclosing unit they
    join it and are committed or rolled back together.
    """

    @abstractmethod
    def connect(self) -> None:
        """Connect to the database."""
        pass

    @abstractmethod
    def disconnect(self) -> None:
        """Disconnect from the database."""
        pass

    @abstractmethod
    def initialize_schema(self) -> None:
        """Initialize database schema (create tables)."""
        pass

    @abstractmethod
    def unit_of_work(self) -> AbstractContextManager[None]:
        """Group several operations into one atomic commit."""
        pass

    # Bank account operations
    @abstractmethod
    def create_bank_account(
        self,
        gl_account_number: str,
        bank_name: str,
        opening_balance_date: date,
        opening_balance: Decimal = Decimal("0"),
        account_type: str = "Checking",
        account_number_last4: Optional[str] = None,
        routing_number: Optional[str] = None,
    ) -> int:
        """Create a bank account. Returns bank account ID."""
        pass

    @abstractmethod
    def get_bank_account(self, bank_account_id: int, for_update: bool = False) -> Optional[BankAccount]:
        """Get bank account by ID, optionally locking the row."""
        pass

    @abstractmethod
    def list_bank_accounts(self, include_inactive: bool = False) -> list[BankAccount]:
        """List bank accounts."""
        pass

    @abstractmethod
    def update_bank_account(self, bank_account_id: int, changes: dict[str, Any]) -> None:
        """Apply column changes to a bank account."""
        pass

    @abstractmethod
    def get_transaction_counts(self, bank_account_id: int) -> tuple[int, int]:
        """Return (total, uncleared) transaction counts for a bank account."""
        pass

    @abstractmethod
    def set_current_balance(self, bank_account_id: int, balance: Decimal) -> None:
        """Store the derived current balance."""
        pass

    @abstractmethod
    def set_reconciled_watermark(
        self,
        bank_account_id: int,
        reconciled_date: Optional[date],
        reconciled_balance: Optional[Decimal],
    ) -> None:
        """Store (or null out) the last reconciled date and balance."""
        pass

    # Transaction operations
    @abstractmethod
    def create_transaction(
        self,
        bank_account_id: int,
        transaction_date: date,
        transaction_type: str,
        amount: Decimal,
        check_number: Optional[str] = None,
        payee: Optional[str] = None,
        description: Optional[str] = None,
        reference: Optional[str] = None,
    ) -> int:
        """Create an uncleared transaction. Returns transaction ID."""
        pass

    @abstractmethod
    def get_transaction(self, transaction_id: int) -> Optional[BankTransaction]:
        """Get transaction by ID."""
        pass

    @abstractmethod
    def update_transaction(self, transaction_id: int, changes: dict[str, Any]) -> None:
        """Apply column changes to a transaction."""
        pass

    @abstractmethod
    def delete_transaction(self, transaction_id: int) -> None:
        """Delete a transaction."""
        pass

    @abstractmethod
    def list_transactions(
        self,
        bank_account_id: int,
        cleared: Optional[bool] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        limit: Optional[int] = None,
    ) -> list[BankTransaction]:
        """List a bank account's transactions, newest first."""
        pass

    @abstractmethod
    def list_uncleared_transactions(
        self, bank_account_id: int, as_of_date: Optional[date] = None
    ) -> list[BankTransaction]:
        """List uncleared transactions in chronological order."""
        pass

    @abstractmethod
    def list_reconciliation_transactions(self, reconciliation_id: int) -> list[BankTransaction]:
        """List transactions owned by a reconciliation, oldest first."""
        pass

    @abstractmethod
    def list_transaction_amounts(self, bank_account_id: int) -> list[Decimal]:
        """Return the amounts of every transaction on a bank account."""
        pass

    @abstractmethod
    def mark_transactions_cleared(
        self,
        transaction_ids: list[int],
        reconciliation_id: int,
        cleared_date: date,
    ) -> None:
        """Attach transactions to a reconciliation as cleared."""
        pass

    @abstractmethod
    def mark_transactions_uncleared(self, transaction_ids: list[int]) -> None:
        """Detach transactions from their reconciliation."""
        pass

    @abstractmethod
    def release_reconciliation_transactions(self, reconciliation_id: int) -> int:
        """Unclear every transaction owned by a reconciliation. Returns count."""
        pass

    # Reconciliation operations
    @abstractmethod
    def create_reconciliation(
        self,
        bank_account_id: int,
        statement_date: date,
        statement_ending_balance: Decimal,
        beginning_balance: Decimal,
        notes: Optional[str] = None,
    ) -> int:
        """Create an in-progress reconciliation. Returns reconciliation ID.

        Raises:
            ConflictError: If the account already has an in-progress one
        """
        pass

    @abstractmethod
    def get_reconciliation(self, reconciliation_id: int, for_update: bool = False) -> Optional[Reconciliation]:
        """Get reconciliation by ID, optionally locking the row."""
        pass

    @abstractmethod
    def find_in_progress_reconciliation(self, bank_account_id: int) -> Optional[Reconciliation]:
        """Return the account's in-progress reconciliation, if any."""
        pass

    @abstractmethod
    def find_latest_completed_reconciliation(self, bank_account_id: int) -> Optional[Reconciliation]:
        """Return the completed reconciliation with the latest statement date."""
        pass

    @abstractmethod
    def has_later_completed_reconciliation(
        self, bank_account_id: int, statement_date: date, exclude_id: int
    ) -> bool:
        """Check for a completed reconciliation dated after statement_date."""
        pass

    @abstractmethod
    def list_reconciliations(self, bank_account_id: int) -> list[Reconciliation]:
        """List an account's reconciliations, latest statement date first."""
        pass

    @abstractmethod
    def update_reconciliation_totals(self, reconciliation_id: int, totals: ReconciliationTotals) -> None:
        """Persist recomputed totals on a reconciliation."""
        pass

    @abstractmethod
    def update_reconciliation_status(
        self,
        reconciliation_id: int,
        status: ReconciliationStatus,
        completed_at: Optional[datetime] = None,
        completed_by: Optional[str] = None,
    ) -> None:
        """Set status and completion stamp of a reconciliation."""
        pass
