"""Tests for Database interface returning domain models and unit-of-work behavior."""

import pytest
from datetime import date, datetime
from decimal import Decimal

from bankrec.domain import entities
from bankrec.domain.errors import ConflictError, NotFoundError, StorageError


def _create_account(db, gl_account_number="1010", bank_name="First National"):
    return db.create_bank_account(
        gl_account_number=gl_account_number,
        bank_name=bank_name,
        opening_balance_date=date(2025, 1, 1),
        opening_balance=Decimal("1000.00"),
    )


class TestDatabaseInterface:
    """Tests to verify Database interface returns domain models."""

    def test_get_bank_account_returns_domain_model(self, temp_db):
        """Test that get_bank_account returns a domain BankAccount entity."""
        account_id = _create_account(temp_db)

        account = temp_db.get_bank_account(account_id)

        assert isinstance(account, entities.BankAccount)
        assert account.id == account_id
        assert account.current_balance == Decimal("1000.00")
        assert account.account_type == entities.AccountType.CHECKING
        assert account.is_active is True
        assert isinstance(account.created_at, datetime)

    def test_get_missing_rows_return_none(self, temp_db):
        assert temp_db.get_bank_account(999) is None
        assert temp_db.get_transaction(999) is None
        assert temp_db.get_reconciliation(999) is None

    def test_list_bank_accounts_skips_inactive(self, temp_db):
        active_id = _create_account(temp_db, "1010", "Bank 1")
        inactive_id = _create_account(temp_db, "1020", "Bank 2")
        temp_db.update_bank_account(inactive_id, {"is_active": False})

        assert [a.id for a in temp_db.list_bank_accounts()] == [active_id]
        assert [a.id for a in temp_db.list_bank_accounts(include_inactive=True)] == [
            active_id,
            inactive_id,
        ]

    def test_update_missing_account_raises(self, temp_db):
        with pytest.raises(NotFoundError):
            temp_db.update_bank_account(999, {"bank_name": "Nope"})

    def test_transaction_round_trip(self, temp_db):
        account_id = _create_account(temp_db)
        txn_id = temp_db.create_transaction(
            bank_account_id=account_id,
            transaction_date=date(2025, 1, 10),
            transaction_type="Check",
            amount=Decimal("-200.00"),
            check_number="1001",
        )

        txn = temp_db.get_transaction(txn_id)

        assert isinstance(txn, entities.BankTransaction)
        assert txn.amount == Decimal("-200.00")
        assert txn.is_cleared is False
        assert txn.reconciliation_id is None
        assert temp_db.get_transaction_counts(account_id) == (1, 1)

    def test_list_uncleared_is_chronological(self, temp_db):
        account_id = _create_account(temp_db)
        later = temp_db.create_transaction(account_id, date(2025, 1, 20), "Deposit", Decimal("5"))
        earlier = temp_db.create_transaction(account_id, date(2025, 1, 2), "Deposit", Decimal("5"))
        same_day = temp_db.create_transaction(account_id, date(2025, 1, 20), "Fee", Decimal("-1"))

        uncleared = temp_db.list_uncleared_transactions(account_id)
        assert [t.id for t in uncleared] == [earlier, later, same_day]

        as_of = temp_db.list_uncleared_transactions(account_id, as_of_date=date(2025, 1, 10))
        assert [t.id for t in as_of] == [earlier]

    def test_list_transactions_newest_first_with_limit(self, temp_db):
        account_id = _create_account(temp_db)
        first = temp_db.create_transaction(account_id, date(2025, 1, 2), "Deposit", Decimal("5"))
        second = temp_db.create_transaction(account_id, date(2025, 1, 3), "Deposit", Decimal("5"))
        third = temp_db.create_transaction(account_id, date(2025, 1, 4), "Deposit", Decimal("5"))

        assert [t.id for t in temp_db.list_transactions(account_id)] == [third, second, first]
        assert [t.id for t in temp_db.list_transactions(account_id, limit=2)] == [third, second]

    def test_mark_cleared_and_release(self, temp_db):
        account_id = _create_account(temp_db)
        txn_id = temp_db.create_transaction(account_id, date(2025, 1, 5), "Deposit", Decimal("500"))
        rec_id = temp_db.create_reconciliation(
            bank_account_id=account_id,
            statement_date=date(2025, 1, 31),
            statement_ending_balance=Decimal("1500"),
            beginning_balance=Decimal("1000"),
        )

        temp_db.mark_transactions_cleared([txn_id], rec_id, date(2025, 1, 31))
        txn = temp_db.get_transaction(txn_id)
        assert txn.is_cleared
        assert txn.cleared_date == date(2025, 1, 31)
        assert txn.reconciliation_id == rec_id

        assert temp_db.release_reconciliation_transactions(rec_id) == 1
        txn = temp_db.get_transaction(txn_id)
        assert not txn.is_cleared
        assert txn.cleared_date is None
        assert txn.reconciliation_id is None

    def test_new_reconciliation_starts_at_beginning_balance(self, temp_db):
        account_id = _create_account(temp_db)
        rec_id = temp_db.create_reconciliation(
            bank_account_id=account_id,
            statement_date=date(2025, 1, 31),
            statement_ending_balance=Decimal("1300"),
            beginning_balance=Decimal("1000"),
        )

        rec = temp_db.get_reconciliation(rec_id)

        assert isinstance(rec, entities.Reconciliation)
        assert rec.status == entities.ReconciliationStatus.IN_PROGRESS
        assert rec.cleared_deposits == Decimal("0")
        assert rec.cleared_payments == Decimal("0")
        assert rec.cleared_balance == Decimal("1000")
        assert rec.difference == Decimal("300")


class TestUnitOfWork:
    """Tests for atomic grouping of database writes."""

    def test_exception_rolls_back_everything(self, temp_db):
        account_id = _create_account(temp_db)

        with pytest.raises(RuntimeError):
            with temp_db.unit_of_work():
                temp_db.create_transaction(account_id, date(2025, 1, 5), "Deposit", Decimal("500"))
                temp_db.set_current_balance(account_id, Decimal("1500"))
                raise RuntimeError("boom")

        assert temp_db.get_transaction_counts(account_id) == (0, 0)
        assert temp_db.get_bank_account(account_id).current_balance == Decimal("1000.00")

    def test_nested_units_commit_with_outer(self, temp_db):
        account_id = _create_account(temp_db)

        with temp_db.unit_of_work():
            with temp_db.unit_of_work():
                temp_db.create_transaction(account_id, date(2025, 1, 5), "Deposit", Decimal("500"))
            temp_db.set_current_balance(account_id, Decimal("1500"))

        assert temp_db.get_transaction_counts(account_id) == (1, 1)
        assert temp_db.get_bank_account(account_id).current_balance == Decimal("1500.00")

    def test_storage_failure_becomes_storage_error(self, temp_db):
        account_id = _create_account(temp_db)

        with pytest.raises(StorageError):
            temp_db.update_bank_account(account_id, {"bank_name": None})

        # The session is usable again after the rollback
        assert temp_db.get_bank_account(account_id).bank_name == "First National"

    def test_second_in_progress_reconciliation_rejected_by_index(self, temp_db):
        account_id = _create_account(temp_db)
        temp_db.create_reconciliation(
            bank_account_id=account_id,
            statement_date=date(2025, 1, 31),
            statement_ending_balance=Decimal("1300"),
            beginning_balance=Decimal("1000"),
        )

        with pytest.raises(ConflictError):
            temp_db.create_reconciliation(
                bank_account_id=account_id,
                statement_date=date(2025, 2, 28),
                statement_ending_balance=Decimal("1300"),
                beginning_balance=Decimal("1000"),
            )

        assert len(temp_db.list_reconciliations(account_id)) == 1
