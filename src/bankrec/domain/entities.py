"""Domain model entities for bankrec.

These are pure data classes representing business concepts, independent of
database schema. Services receive and return these; ORM rows never leave
the database layer.
"""

from dataclasses import dataclass, field
from datetime import datetime, date
from decimal import Decimal
from enum import Enum
from typing import Optional


class AccountType(str, Enum):
    """Kind of bank account."""

    CHECKING = "Checking"
    SAVINGS = "Savings"
    MONEY_MARKET = "Money Market"
    CREDIT_CARD = "Credit Card"


class TransactionType(str, Enum):
    """Kind of money movement on a bank account."""

    DEPOSIT = "Deposit"
    WITHDRAWAL = "Withdrawal"
    CHECK = "Check"
    TRANSFER = "Transfer"
    FEE = "Fee"
    INTEREST = "Interest"
    ADJUSTMENT = "Adjustment"


class ReconciliationStatus(str, Enum):
    """Lifecycle state of a reconciliation."""

    IN_PROGRESS = "In Progress"
    COMPLETED = "Completed"
    VOIDED = "Voided"


@dataclass(frozen=True)
class BankAccount:
    """Bank account domain entity."""

    id: int
    gl_account_number: str
    bank_name: str
    account_number_last4: Optional[str]
    routing_number: Optional[str]
    account_type: AccountType
    opening_balance: Decimal
    opening_balance_date: date
    current_balance: Decimal
    last_reconciled_date: Optional[date]
    last_reconciled_balance: Optional[Decimal]
    is_active: bool
    created_at: datetime
    updated_at: datetime


@dataclass(frozen=True)
class BankAccountSummary:
    """Bank account with register counts, used for listings."""

    account: BankAccount
    transaction_count: int
    uncleared_count: int


@dataclass(frozen=True)
class BankTransaction:
    """Bank transaction domain entity."""

    id: int
    bank_account_id: int
    transaction_date: date
    transaction_type: TransactionType
    amount: Decimal
    check_number: Optional[str]
    payee: Optional[str]
    description: Optional[str]
    reference: Optional[str]
    is_cleared: bool
    cleared_date: Optional[date]
    reconciliation_id: Optional[int]
    created_at: datetime
    updated_at: datetime


@dataclass(frozen=True)
class Reconciliation:
    """Reconciliation session domain entity."""

    id: int
    bank_account_id: int
    statement_date: date
    statement_ending_balance: Decimal
    beginning_balance: Decimal
    cleared_deposits: Decimal
    cleared_payments: Decimal
    cleared_balance: Decimal
    difference: Decimal
    status: ReconciliationStatus
    completed_at: Optional[datetime]
    completed_by: Optional[str]
    notes: Optional[str]
    created_at: datetime
    updated_at: datetime

    @property
    def is_in_progress(self) -> bool:
        return self.status == ReconciliationStatus.IN_PROGRESS

    @property
    def is_completed(self) -> bool:
        return self.status == ReconciliationStatus.COMPLETED


@dataclass(frozen=True)
class ReconciliationTotals:
    """Recomputed figures for a reconciliation."""

    beginning_balance: Decimal
    cleared_deposits: Decimal
    cleared_payments: Decimal
    cleared_balance: Decimal
    statement_ending_balance: Decimal
    difference: Decimal


@dataclass(frozen=True)
class BulkToggleResult:
    """Outcome of a bulk cleared-status change."""

    totals: ReconciliationTotals
    applied_ids: tuple[int, ...] = ()
    skipped_ids: tuple[int, ...] = ()


@dataclass(frozen=True)
class ReconciliationDetail:
    """Reconciliation with the transactions cleared into it."""

    reconciliation: Reconciliation
    cleared_transactions: list[BankTransaction] = field(default_factory=list)


@dataclass(frozen=True)
class TransactionPatch:
    """Partial update for a bank transaction.

    Fields left as None keep their stored value.
    """

    transaction_date: Optional[date] = None
    transaction_type: Optional[TransactionType] = None
    amount: Optional[Decimal] = None
    check_number: Optional[str] = None
    payee: Optional[str] = None
    description: Optional[str] = None
    reference: Optional[str] = None

    def changes(self) -> dict:
        """Return only the fields that were set."""
        return {
            name: value
            for name, value in self.__dict__.items()
            if value is not None
        }


@dataclass(frozen=True)
class BankAccountPatch:
    """Partial update for a bank account.

    Fields left as None keep their stored value.
    """

    bank_name: Optional[str] = None
    account_number_last4: Optional[str] = None
    routing_number: Optional[str] = None
    account_type: Optional[AccountType] = None
    is_active: Optional[bool] = None

    def changes(self) -> dict:
        """Return only the fields that were set."""
        return {
            name: value
            for name, value in self.__dict__.items()
            if value is not None
        }
