"""Tests for database mappers."""

from datetime import datetime, date, UTC
from decimal import Decimal

from bankrec.database.models import (
    BankAccount as ORMBankAccount,
    BankTransaction as ORMBankTransaction,
    BankReconciliation as ORMBankReconciliation,
)
from bankrec.database.mappers import (
    bank_account_to_domain,
    bank_transaction_to_domain,
    reconciliation_to_domain,
)
from bankrec.domain.entities import (
    AccountType,
    BankAccount,
    BankTransaction,
    Reconciliation,
    ReconciliationStatus,
    TransactionType,
)


class TestBankAccountMapper:
    """Tests for BankAccount mapper."""

    def test_bank_account_to_domain(self):
        """Test converting ORM BankAccount to domain BankAccount."""
        now = datetime.now(UTC)
        orm_account = ORMBankAccount(
            id=1,
            gl_account_number="1010",
            bank_name="First National",
            account_number_last4="4321",
            routing_number=None,
            account_type="Savings",
            opening_balance=Decimal("1000.00"),
            opening_balance_date=date(2025, 1, 1),
            current_balance=1300.5,
            last_reconciled_date=None,
            last_reconciled_balance=None,
            is_active=True,
            created_at=now,
            updated_at=now,
        )
        account = bank_account_to_domain(orm_account)

        assert isinstance(account, BankAccount)
        assert account.gl_account_number == "1010"
        assert account.account_type == AccountType.SAVINGS
        assert account.opening_balance == Decimal("1000.00")
        # Floats coming back from a driver are normalized through str()
        assert account.current_balance == Decimal("1300.5")
        assert account.last_reconciled_balance is None
        assert account.is_active is True


class TestBankTransactionMapper:
    """Tests for BankTransaction mapper."""

    def test_bank_transaction_to_domain(self):
        """Test converting ORM BankTransaction to domain BankTransaction."""
        now = datetime.now(UTC)
        orm_txn = ORMBankTransaction(
            id=7,
            bank_account_id=1,
            transaction_date=date(2025, 1, 10),
            transaction_type="Check",
            amount=Decimal("-200.00"),
            check_number="1001",
            payee="Landlord",
            description=None,
            reference=None,
            is_cleared=True,
            cleared_date=date(2025, 1, 31),
            reconciliation_id=3,
            created_at=now,
            updated_at=now,
        )
        txn = bank_transaction_to_domain(orm_txn)

        assert isinstance(txn, BankTransaction)
        assert txn.transaction_type == TransactionType.CHECK
        assert txn.amount == Decimal("-200.00")
        assert txn.check_number == "1001"
        assert txn.is_cleared is True
        assert txn.cleared_date == date(2025, 1, 31)
        assert txn.reconciliation_id == 3


class TestReconciliationMapper:
    """Tests for Reconciliation mapper."""

    def test_reconciliation_to_domain(self):
        """Test converting ORM BankReconciliation to domain Reconciliation."""
        now = datetime.now(UTC)
        orm_rec = ORMBankReconciliation(
            id=3,
            bank_account_id=1,
            statement_date=date(2025, 1, 31),
            statement_ending_balance=Decimal("1300.00"),
            beginning_balance=Decimal("1000.00"),
            cleared_deposits=Decimal("500.00"),
            cleared_payments=Decimal("200.00"),
            cleared_balance=Decimal("1300.00"),
            difference=Decimal("0.00"),
            status="In Progress",
            completed_at=None,
            completed_by=None,
            notes="January",
            created_at=now,
            updated_at=now,
        )
        rec = reconciliation_to_domain(orm_rec)

        assert isinstance(rec, Reconciliation)
        assert rec.status == ReconciliationStatus.IN_PROGRESS
        assert rec.is_in_progress
        assert rec.cleared_balance == Decimal("1300.00")
        assert rec.notes == "January"
