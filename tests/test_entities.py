"""Tests for domain entities."""

import pytest
from datetime import datetime, date, UTC
from decimal import Decimal

from bankrec.domain.entities import (
    AccountType,
    BankAccountPatch,
    BankTransaction,
    Reconciliation,
    ReconciliationStatus,
    TransactionPatch,
    TransactionType,
)


def _transaction(**overrides) -> BankTransaction:
    now = datetime.now(UTC)
    values = dict(
        id=1,
        bank_account_id=1,
        transaction_date=date(2025, 1, 5),
        transaction_type=TransactionType.DEPOSIT,
        amount=Decimal("500.00"),
        check_number=None,
        payee="Customer",
        description=None,
        reference=None,
        is_cleared=False,
        cleared_date=None,
        reconciliation_id=None,
        created_at=now,
        updated_at=now,
    )
    values.update(overrides)
    return BankTransaction(**values)


class TestBankTransaction:
    """Tests for BankTransaction entity."""

    def test_create_transaction(self):
        txn = _transaction()
        assert txn.amount == Decimal("500.00")
        assert txn.transaction_type == TransactionType.DEPOSIT
        assert not txn.is_cleared

    def test_transaction_immutability(self):
        """Test that BankTransaction entities are immutable."""
        txn = _transaction()
        with pytest.raises(Exception):  # dataclass frozen raises FrozenInstanceError
            txn.amount = Decimal("1")


class TestEnums:
    """Tests for the string enums stored in the database."""

    def test_values_match_stored_strings(self):
        assert ReconciliationStatus.IN_PROGRESS == "In Progress"
        assert AccountType.MONEY_MARKET.value == "Money Market"
        assert TransactionType("Check") is TransactionType.CHECK


class TestReconciliation:
    """Tests for Reconciliation status helpers."""

    def _reconciliation(self, status: ReconciliationStatus) -> Reconciliation:
        now = datetime.now(UTC)
        return Reconciliation(
            id=1,
            bank_account_id=1,
            statement_date=date(2025, 1, 31),
            statement_ending_balance=Decimal("1300"),
            beginning_balance=Decimal("1000"),
            cleared_deposits=Decimal("0"),
            cleared_payments=Decimal("0"),
            cleared_balance=Decimal("1000"),
            difference=Decimal("300"),
            status=status,
            completed_at=None,
            completed_by=None,
            notes=None,
            created_at=now,
            updated_at=now,
        )

    def test_in_progress(self):
        rec = self._reconciliation(ReconciliationStatus.IN_PROGRESS)
        assert rec.is_in_progress
        assert not rec.is_completed

    def test_voided_is_neither(self):
        rec = self._reconciliation(ReconciliationStatus.VOIDED)
        assert not rec.is_in_progress
        assert not rec.is_completed


class TestPatches:
    """Tests for partial update structures."""

    def test_empty_patch_has_no_changes(self):
        assert TransactionPatch().changes() == {}
        assert BankAccountPatch().changes() == {}

    def test_only_set_fields_are_changes(self):
        patch = TransactionPatch(amount=Decimal("-75.00"), payee="Acme")
        assert patch.changes() == {"amount": Decimal("-75.00"), "payee": "Acme"}

    def test_false_is_a_change(self):
        """Deactivating an account sets is_active to False, which must not be dropped."""
        assert BankAccountPatch(is_active=False).changes() == {"is_active": False}
