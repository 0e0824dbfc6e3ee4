"""Bank account domain service."""

import logging
from datetime import date
from decimal import Decimal
from typing import TYPE_CHECKING, Optional

from bankrec.domain.calculations import account_balance
from bankrec.domain.entities import (
    AccountType,
    BankAccount,
    BankAccountPatch,
    BankAccountSummary,
)
from bankrec.domain.errors import NotFoundError, ValidationError, bank_account_not_found

if TYPE_CHECKING:
    from bankrec.database.base import Database

logger = logging.getLogger(__name__)


def parse_account_type(value: AccountType | str) -> AccountType:
    """Coerce a string to an AccountType.

    Raises:
        ValidationError: If the value is not a known account type
    """
    if isinstance(value, AccountType):
        return value
    for account_type in AccountType:
        if value.strip().lower() in (account_type.value.lower(), account_type.name.lower()):
            return account_type
    choices = ", ".join(t.value for t in AccountType)
    raise ValidationError(f"Unknown account type '{value}'. Expected one of: {choices}")


def check_last4(account_number_last4: Optional[str]) -> None:
    """Raise ValidationError unless the value is None or four digits."""
    if account_number_last4 is None:
        return
    if len(account_number_last4) != 4 or not account_number_last4.isdigit():
        raise ValidationError("Account number last 4 must be exactly four digits")


class BankAccountService:
    """Service for bank accounts and their derived balances."""

    def __init__(self, db: "Database"):
        """Initialize bank account service.

        Args:
            db: Database instance
        """
        self.db = db

    def create_account(
        self,
        gl_account_number: str,
        bank_name: str,
        opening_balance_date: date,
        opening_balance: Decimal = Decimal("0"),
        account_type: AccountType | str = AccountType.CHECKING,
        account_number_last4: Optional[str] = None,
        routing_number: Optional[str] = None,
    ) -> BankAccount:
        """Create a bank account.

        The current balance starts at the opening balance.

        Args:
            gl_account_number: Ledger (asset) account this bank account posts to
            bank_name: Bank name
            opening_balance_date: Date the opening balance is effective
            opening_balance: Opening balance
            account_type: Checking, Savings, Money Market or Credit Card
            account_number_last4: Last four digits of the account number
            routing_number: Routing number

        Returns:
            The created bank account

        Raises:
            ValidationError: If the account type or last-4 digits are invalid
        """
        kind = parse_account_type(account_type)
        check_last4(account_number_last4)

        bank_account_id = self.db.create_bank_account(
            gl_account_number=gl_account_number,
            bank_name=bank_name,
            opening_balance_date=opening_balance_date,
            opening_balance=opening_balance,
            account_type=kind.value,
            account_number_last4=account_number_last4,
            routing_number=routing_number,
        )
        logger.info("Created bank account %s (%s)", bank_account_id, bank_name)
        return self.require_account(bank_account_id)

    def get_account(self, bank_account_id: int) -> Optional[BankAccount]:
        """Get bank account by ID, or None if not found."""
        return self.db.get_bank_account(bank_account_id)

    def require_account(self, bank_account_id: int) -> BankAccount:
        """Get bank account by ID.

        Raises:
            NotFoundError: If the account does not exist
        """
        account = self.db.get_bank_account(bank_account_id)
        if account is None:
            raise NotFoundError(bank_account_not_found(bank_account_id))
        return account

    def list_accounts(self, include_inactive: bool = False) -> list[BankAccountSummary]:
        """List bank accounts with transaction and uncleared counts."""
        summaries = []
        for account in self.db.list_bank_accounts(include_inactive=include_inactive):
            total, uncleared = self.db.get_transaction_counts(account.id)
            summaries.append(
                BankAccountSummary(account=account, transaction_count=total, uncleared_count=uncleared)
            )
        return summaries

    def update_account(self, bank_account_id: int, patch: BankAccountPatch) -> BankAccount:
        """Update descriptive fields of a bank account.

        Only fields set on the patch change. Balances and the reconciliation
        watermark are never updated here.

        Raises:
            NotFoundError: If the account does not exist
            ValidationError: If the new account type is unknown
        """
        self.require_account(bank_account_id)
        changes = patch.changes()
        if "account_type" in changes:
            changes["account_type"] = parse_account_type(changes["account_type"]).value
        check_last4(changes.get("account_number_last4"))
        if changes:
            self.db.update_bank_account(bank_account_id, changes)
        return self.require_account(bank_account_id)

    def recompute_balance(self, bank_account_id: int) -> Decimal:
        """Recompute and store the current balance.

        current_balance = opening_balance + sum of every transaction amount,
        cleared or not.

        Returns:
            The new current balance

        Raises:
            NotFoundError: If the account does not exist
        """
        with self.db.unit_of_work():
            account = self.db.get_bank_account(bank_account_id, for_update=True)
            if account is None:
                raise NotFoundError(bank_account_not_found(bank_account_id))
            balance = account_balance(
                account.opening_balance, self.db.list_transaction_amounts(bank_account_id)
            )
            self.db.set_current_balance(bank_account_id, balance)
        logger.debug("Bank account %s balance recomputed: %s", bank_account_id, balance)
        return balance

    def set_reconciled_watermark(
        self, bank_account_id: int, reconciled_date: date, reconciled_balance: Decimal
    ) -> None:
        """Record the most recent completed reconciliation on the account."""
        self.db.set_reconciled_watermark(bank_account_id, reconciled_date, reconciled_balance)

    def clear_reconciled_watermark(self, bank_account_id: int) -> None:
        """Forget the account's last reconciliation."""
        self.db.set_reconciled_watermark(bank_account_id, None, None)
