"""Bank reconciliation domain service.

A reconciliation matches one bank statement against the transactions
recorded for the account. Transactions are cleared into an in-progress
reconciliation until its difference reaches zero, at which point it can be
completed. Lifecycle::

    In Progress -> Completed     (complete, difference within tolerance)
    In Progress -> Voided        (void, releases every cleared transaction)
    Completed   -> In Progress   (undo, only for the latest completed one)

Each operation validates its preconditions, then writes inside a single
unit of work with the reconciliation row locked, so a failed call leaves
nothing behind.
"""

import logging
from collections.abc import Iterable
from datetime import date, datetime, UTC
from decimal import Decimal
from typing import TYPE_CHECKING, Optional

from bankrec.domain.bank_account import BankAccountService
from bankrec.domain.calculations import (
    beginning_balance_for,
    compute_reconciliation_totals,
    is_balanced,
)
from bankrec.domain.entities import (
    BulkToggleResult,
    Reconciliation,
    ReconciliationDetail,
    ReconciliationStatus,
    ReconciliationTotals,
)
from bankrec.domain.errors import (
    ConflictError,
    NotFoundError,
    ValidationError,
    bank_account_not_found,
    in_progress_exists,
    non_zero_difference,
    reconciliation_not_found,
    transaction_not_found,
)

if TYPE_CHECKING:
    from bankrec.database.base import Database

logger = logging.getLogger(__name__)


class ReconciliationService:
    """Service driving the reconciliation state machine."""

    def __init__(self, db: "Database"):
        """Initialize reconciliation service.

        Args:
            db: Database instance
        """
        self.db = db
        self.accounts = BankAccountService(db)

    # Queries
    def get_reconciliation(self, reconciliation_id: int) -> Optional[Reconciliation]:
        """Get reconciliation by ID, or None if not found."""
        return self.db.get_reconciliation(reconciliation_id)

    def require_reconciliation(self, reconciliation_id: int) -> Reconciliation:
        """Get reconciliation by ID.

        Raises:
            NotFoundError: If the reconciliation doesn't exist
        """
        reconciliation = self.db.get_reconciliation(reconciliation_id)
        if reconciliation is None:
            raise NotFoundError(reconciliation_not_found(reconciliation_id))
        return reconciliation

    def get_detail(self, reconciliation_id: int) -> ReconciliationDetail:
        """Get a reconciliation together with its cleared transactions."""
        reconciliation = self.require_reconciliation(reconciliation_id)
        return ReconciliationDetail(
            reconciliation=reconciliation,
            cleared_transactions=self.db.list_reconciliation_transactions(reconciliation_id),
        )

    def get_in_progress(self, bank_account_id: int) -> Optional[Reconciliation]:
        """Return the account's open reconciliation, if any."""
        return self.db.find_in_progress_reconciliation(bank_account_id)

    def list_history(self, bank_account_id: int) -> list[Reconciliation]:
        """List every reconciliation for an account, latest statement first."""
        return self.db.list_reconciliations(bank_account_id)

    # State transitions
    def start(
        self,
        bank_account_id: int,
        statement_date: date,
        statement_ending_balance: Decimal,
        notes: Optional[str] = None,
    ) -> Reconciliation:
        """Open a reconciliation for a bank statement.

        The beginning balance is the ending balance of the latest completed
        reconciliation, or the account's opening balance if there is none.
        Statement dates are not required to follow the previous one.

        Args:
            bank_account_id: Bank account ID
            statement_date: Statement closing date
            statement_ending_balance: Ending balance printed on the statement
            notes: Optional notes

        Returns:
            The new in-progress reconciliation

        Raises:
            NotFoundError: If the bank account doesn't exist
            ConflictError: If the account already has an in-progress
                reconciliation (its ID is on ``existing_id``)
        """
        try:
            with self.db.unit_of_work():
                account = self.db.get_bank_account(bank_account_id, for_update=True)
                if account is None:
                    raise NotFoundError(bank_account_not_found(bank_account_id))

                existing = self.db.find_in_progress_reconciliation(bank_account_id)
                if existing is not None:
                    raise ConflictError(in_progress_exists(existing.id), existing_id=existing.id)

                beginning_balance = beginning_balance_for(
                    account.opening_balance,
                    self.db.find_latest_completed_reconciliation(bank_account_id),
                )
                reconciliation_id = self.db.create_reconciliation(
                    bank_account_id=bank_account_id,
                    statement_date=statement_date,
                    statement_ending_balance=statement_ending_balance,
                    beginning_balance=beginning_balance,
                    notes=notes,
                )
        except ConflictError as exc:
            if exc.existing_id is not None:
                raise
            # Unique index rejected the insert: a concurrent start won
            winner = self.db.find_in_progress_reconciliation(bank_account_id)
            if winner is None:
                raise
            raise ConflictError(in_progress_exists(winner.id), existing_id=winner.id) from exc

        logger.info(
            "Started reconciliation %s for bank account %s (statement %s, ending %s, beginning %s)",
            reconciliation_id,
            bank_account_id,
            statement_date,
            statement_ending_balance,
            beginning_balance,
        )
        return self.require_reconciliation(reconciliation_id)

    def toggle_cleared(
        self, reconciliation_id: int, transaction_id: int, is_cleared: bool
    ) -> ReconciliationTotals:
        """Clear a transaction into, or release it from, a reconciliation.

        Clearing an already cleared transaction (or releasing an uncleared
        one) changes nothing but still recomputes the totals.

        Returns:
            Recomputed totals

        Raises:
            NotFoundError: If the reconciliation or transaction doesn't exist
            ConflictError: If the reconciliation is not in progress, the
                transaction is on another account, or it is cleared into a
                different reconciliation
        """
        with self.db.unit_of_work():
            reconciliation = self._lock_in_progress(reconciliation_id)

            txn = self.db.get_transaction(transaction_id)
            if txn is None:
                raise NotFoundError(transaction_not_found(transaction_id))
            if txn.bank_account_id != reconciliation.bank_account_id:
                raise ConflictError("Transaction does not belong to this bank account")
            if txn.reconciliation_id is not None and txn.reconciliation_id != reconciliation.id:
                raise ConflictError(
                    f"Transaction {transaction_id} is cleared in reconciliation {txn.reconciliation_id}"
                )

            if is_cleared:
                self.db.mark_transactions_cleared(
                    [transaction_id], reconciliation.id, reconciliation.statement_date
                )
            else:
                self.db.mark_transactions_uncleared([transaction_id])
            totals = self._recompute(reconciliation)

        logger.debug(
            "Reconciliation %s: transaction %s cleared=%s, difference %s",
            reconciliation_id,
            transaction_id,
            is_cleared,
            totals.difference,
        )
        return totals

    def bulk_toggle(
        self, reconciliation_id: int, transaction_ids: Iterable[int], is_cleared: bool
    ) -> BulkToggleResult:
        """Clear or release several transactions with a single recompute.

        Transactions that don't exist, belong to another account, or are
        cleared into a different reconciliation are skipped rather than
        failing the batch; they are listed in ``skipped_ids``.

        Raises:
            NotFoundError: If the reconciliation doesn't exist
            ConflictError: If the reconciliation is not in progress
        """
        with self.db.unit_of_work():
            reconciliation = self._lock_in_progress(reconciliation_id)

            applied: list[int] = []
            skipped: list[int] = []
            for transaction_id in dict.fromkeys(transaction_ids):
                txn = self.db.get_transaction(transaction_id)
                if (
                    txn is None
                    or txn.bank_account_id != reconciliation.bank_account_id
                    or txn.reconciliation_id not in (None, reconciliation.id)
                ):
                    skipped.append(transaction_id)
                    continue
                applied.append(transaction_id)

            if is_cleared:
                self.db.mark_transactions_cleared(
                    applied, reconciliation.id, reconciliation.statement_date
                )
            else:
                self.db.mark_transactions_uncleared(applied)
            totals = self._recompute(reconciliation)

        if skipped:
            logger.warning(
                "Reconciliation %s: skipped %d transaction(s) not eligible for this account: %s",
                reconciliation_id,
                len(skipped),
                skipped,
            )
        logger.debug(
            "Reconciliation %s: %d transaction(s) cleared=%s, difference %s",
            reconciliation_id,
            len(applied),
            is_cleared,
            totals.difference,
        )
        return BulkToggleResult(totals=totals, applied_ids=tuple(applied), skipped_ids=tuple(skipped))

    def recompute(self, reconciliation_id: int) -> ReconciliationTotals:
        """Recompute and store a reconciliation's totals."""
        with self.db.unit_of_work():
            reconciliation = self._lock(reconciliation_id)
            return self._recompute(reconciliation)

    def complete(self, reconciliation_id: int, completed_by: str = "system") -> Reconciliation:
        """Complete a balanced reconciliation.

        Totals are recomputed first. On success the account watermark is
        moved to its latest completed reconciliation, which is not this one
        when a later statement was completed before it.

        Raises:
            NotFoundError: If the reconciliation doesn't exist
            ConflictError: If the reconciliation is not in progress
            ValidationError: If the difference is not zero (within half a
                cent); the difference is on ``difference``
        """
        with self.db.unit_of_work():
            reconciliation = self._lock(reconciliation_id)
            if not reconciliation.is_in_progress:
                raise ConflictError("Reconciliation is not in progress")

            totals = self._recompute(reconciliation)
            if not is_balanced(totals.difference):
                raise ValidationError(non_zero_difference(totals.difference), difference=totals.difference)

            self.db.update_reconciliation_status(
                reconciliation.id,
                ReconciliationStatus.COMPLETED,
                completed_at=datetime.now(UTC),
                completed_by=completed_by,
            )
            self._refresh_watermark(reconciliation.bank_account_id)

        logger.info(
            "Completed reconciliation %s for bank account %s (statement %s)",
            reconciliation_id,
            reconciliation.bank_account_id,
            reconciliation.statement_date,
        )
        return self.require_reconciliation(reconciliation_id)

    def void(self, reconciliation_id: int) -> None:
        """Abandon an in-progress reconciliation.

        Every transaction cleared into it becomes uncleared again. The
        account's reconciliation watermark is not touched.

        Raises:
            NotFoundError: If the reconciliation doesn't exist
            ConflictError: If the reconciliation is not in progress
        """
        with self.db.unit_of_work():
            reconciliation = self._lock(reconciliation_id)
            if not reconciliation.is_in_progress:
                raise ConflictError("Can only void in-progress reconciliations")

            released = self.db.release_reconciliation_transactions(reconciliation.id)
            self.db.update_reconciliation_status(reconciliation.id, ReconciliationStatus.VOIDED)

        logger.info(
            "Voided reconciliation %s, released %d transaction(s)", reconciliation_id, released
        )

    def undo(self, reconciliation_id: int, unclear_transactions: bool = False) -> Reconciliation:
        """Reopen a completed reconciliation.

        Only the latest completed reconciliation of an account can be
        reopened, since later ones start from its ending balance. By
        default its transactions stay cleared, so the reopened
        reconciliation shows the totals it was completed with. Pass
        ``unclear_transactions=True`` to release them the way ``void``
        does, so the statement is reconciled again from nothing cleared.

        The account watermark moves back to the latest remaining completed
        reconciliation, or is cleared if there is none.

        Raises:
            NotFoundError: If the reconciliation doesn't exist
            ConflictError: If the reconciliation is not completed, a later
                completed reconciliation exists, or another reconciliation
                is already in progress on the account
        """
        with self.db.unit_of_work():
            reconciliation = self._lock(reconciliation_id)
            if not reconciliation.is_completed:
                raise ConflictError("Can only undo completed reconciliations")

            bank_account_id = reconciliation.bank_account_id
            if self.db.has_later_completed_reconciliation(
                bank_account_id, reconciliation.statement_date, exclude_id=reconciliation.id
            ):
                raise ConflictError(
                    "Cannot undo this reconciliation: a later completed reconciliation exists"
                )

            open_reconciliation = self.db.find_in_progress_reconciliation(bank_account_id)
            if open_reconciliation is not None:
                raise ConflictError(
                    in_progress_exists(open_reconciliation.id), existing_id=open_reconciliation.id
                )

            if unclear_transactions:
                self.db.release_reconciliation_transactions(reconciliation.id)
            self.db.update_reconciliation_status(reconciliation.id, ReconciliationStatus.IN_PROGRESS)
            self._recompute(reconciliation)

            self._refresh_watermark(bank_account_id)

        logger.info(
            "Reopened reconciliation %s for bank account %s (transactions released: %s)",
            reconciliation_id,
            bank_account_id,
            unclear_transactions,
        )
        return self.require_reconciliation(reconciliation_id)

    # Internals
    def _lock(self, reconciliation_id: int) -> Reconciliation:
        """Load a reconciliation with its row locked for the current unit."""
        reconciliation = self.db.get_reconciliation(reconciliation_id, for_update=True)
        if reconciliation is None:
            raise NotFoundError(reconciliation_not_found(reconciliation_id))
        return reconciliation

    def _lock_in_progress(self, reconciliation_id: int) -> Reconciliation:
        reconciliation = self._lock(reconciliation_id)
        if not reconciliation.is_in_progress:
            raise ConflictError("Cannot modify a reconciliation that is not in progress")
        return reconciliation

    def _refresh_watermark(self, bank_account_id: int) -> None:
        """Point the account watermark at its latest completed reconciliation."""
        latest = self.db.find_latest_completed_reconciliation(bank_account_id)
        if latest is None:
            self.accounts.clear_reconciled_watermark(bank_account_id)
        else:
            self.accounts.set_reconciled_watermark(
                bank_account_id, latest.statement_date, latest.statement_ending_balance
            )

    def _recompute(self, reconciliation: Reconciliation) -> ReconciliationTotals:
        """Derive totals from the transactions currently cleared into it."""
        amounts = [
            txn.amount for txn in self.db.list_reconciliation_transactions(reconciliation.id)
        ]
        totals = compute_reconciliation_totals(
            reconciliation.beginning_balance,
            reconciliation.statement_ending_balance,
            amounts,
        )
        self.db.update_reconciliation_totals(reconciliation.id, totals)
        return totals
