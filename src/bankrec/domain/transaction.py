"""Bank transaction domain service."""

import logging
from datetime import date
from decimal import Decimal
from typing import TYPE_CHECKING, Optional

from bankrec.domain.bank_account import BankAccountService
from bankrec.domain.entities import BankTransaction, TransactionPatch, TransactionType
from bankrec.domain.errors import (
    ConflictError,
    NotFoundError,
    ValidationError,
    bank_account_not_found,
    cleared_transaction_locked,
    transaction_not_found,
)

if TYPE_CHECKING:
    from bankrec.database.base import Database

logger = logging.getLogger(__name__)

DEFAULT_LIST_LIMIT = 500


def parse_transaction_type(value: TransactionType | str) -> TransactionType:
    """Coerce a string to a TransactionType.

    Raises:
        ValidationError: If the value is not a known transaction type
    """
    if isinstance(value, TransactionType):
        return value
    for transaction_type in TransactionType:
        if value.strip().lower() in (transaction_type.value.lower(), transaction_type.name.lower()):
            return transaction_type
    choices = ", ".join(t.value for t in TransactionType)
    raise ValidationError(f"Unknown transaction type '{value}'. Expected one of: {choices}")


class TransactionService:
    """Service for recording bank transactions.

    Every create, update and delete recomputes the owning account's current
    balance in the same unit of work.
    """

    def __init__(self, db: "Database"):
        """Initialize transaction service.

        Args:
            db: Database instance
        """
        self.db = db
        self.accounts = BankAccountService(db)

    def create_transaction(
        self,
        bank_account_id: int,
        transaction_date: date,
        transaction_type: TransactionType | str,
        amount: Decimal,
        check_number: Optional[str] = None,
        payee: Optional[str] = None,
        description: Optional[str] = None,
        reference: Optional[str] = None,
    ) -> BankTransaction:
        """Record a new, uncleared transaction.

        The amount is stored as given; callers are responsible for using a
        positive sign for money in and a negative sign for money out.

        Args:
            bank_account_id: Bank account ID
            transaction_date: Transaction date
            transaction_type: Deposit, Withdrawal, Check, Transfer, Fee,
                Interest or Adjustment
            amount: Signed amount
            check_number: Optional check number
            payee: Optional payee
            description: Optional description
            reference: Optional reference

        Returns:
            The created transaction

        Raises:
            NotFoundError: If the bank account doesn't exist
            ValidationError: If the transaction type is unknown
        """
        kind = parse_transaction_type(transaction_type)

        with self.db.unit_of_work():
            if self.db.get_bank_account(bank_account_id) is None:
                raise NotFoundError(bank_account_not_found(bank_account_id))

            transaction_id = self.db.create_transaction(
                bank_account_id=bank_account_id,
                transaction_date=transaction_date,
                transaction_type=kind.value,
                amount=amount,
                check_number=check_number,
                payee=payee,
                description=description,
                reference=reference,
            )
            self.accounts.recompute_balance(bank_account_id)

        logger.info(
            "Recorded %s %s on bank account %s", kind.value, amount, bank_account_id
        )
        return self.require_transaction(transaction_id)

    def get_transaction(self, transaction_id: int) -> Optional[BankTransaction]:
        """Get transaction by ID, or None if not found."""
        return self.db.get_transaction(transaction_id)

    def require_transaction(self, transaction_id: int) -> BankTransaction:
        """Get transaction by ID.

        Raises:
            NotFoundError: If the transaction doesn't exist
        """
        txn = self.db.get_transaction(transaction_id)
        if txn is None:
            raise NotFoundError(transaction_not_found(transaction_id))
        return txn

    def update_transaction(self, transaction_id: int, patch: TransactionPatch) -> BankTransaction:
        """Update an uncleared transaction.

        Only fields set on the patch change; everything else keeps its
        stored value.

        Raises:
            NotFoundError: If the transaction doesn't exist
            ConflictError: If the transaction is cleared
            ValidationError: If the new transaction type is unknown
        """
        changes = patch.changes()
        if "transaction_type" in changes:
            changes["transaction_type"] = parse_transaction_type(changes["transaction_type"]).value

        with self.db.unit_of_work():
            txn = self.require_transaction(transaction_id)
            if txn.is_cleared:
                raise ConflictError(cleared_transaction_locked("modify"))
            if changes:
                self.db.update_transaction(transaction_id, changes)
            self.accounts.recompute_balance(txn.bank_account_id)

        logger.info("Updated transaction %s: %s", transaction_id, sorted(changes))
        return self.require_transaction(transaction_id)

    def delete_transaction(self, transaction_id: int) -> None:
        """Delete an uncleared transaction.

        Raises:
            NotFoundError: If the transaction doesn't exist
            ConflictError: If the transaction is cleared
        """
        with self.db.unit_of_work():
            txn = self.require_transaction(transaction_id)
            if txn.is_cleared:
                raise ConflictError(cleared_transaction_locked("delete"))
            self.db.delete_transaction(transaction_id)
            self.accounts.recompute_balance(txn.bank_account_id)

        logger.info("Deleted transaction %s", transaction_id)

    def list_transactions(
        self,
        bank_account_id: int,
        cleared: Optional[bool] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        limit: Optional[int] = DEFAULT_LIST_LIMIT,
    ) -> list[BankTransaction]:
        """List an account's register, newest first.

        Args:
            bank_account_id: Bank account ID
            cleared: If set, only cleared (True) or uncleared (False) rows
            start_date: Optional start date filter
            end_date: Optional end date filter
            limit: Maximum number of rows (None for all)
        """
        return self.db.list_transactions(
            bank_account_id,
            cleared=cleared,
            start_date=start_date,
            end_date=end_date,
            limit=limit,
        )

    def list_uncleared(
        self, bank_account_id: int, as_of_date: Optional[date] = None
    ) -> list[BankTransaction]:
        """List uncleared transactions up to as_of_date, oldest first.

        Ordered by transaction date then entry time.
        """
        return self.db.list_uncleared_transactions(bank_account_id, as_of_date=as_of_date)

    def list_by_reconciliation(self, reconciliation_id: int) -> list[BankTransaction]:
        """List every transaction cleared into a reconciliation.

        No date filter applies, so items dated after the statement date
        that were cleared into it are included.
        """
        return self.db.list_reconciliation_transactions(reconciliation_id)
