"""Shared pytest fixtures for bankrec tests."""

import tempfile
import os
from datetime import date
from decimal import Decimal
import pytest

from bankrec.database.factories import create_sqlite_database
from bankrec.domain.bank_account import BankAccountService
from bankrec.domain.reconciliation import ReconciliationService
from bankrec.domain.transaction import TransactionService


@pytest.fixture
def temp_db():
    """Create a temporary database for testing."""
    # Create a temporary file for the database
    fd, db_path = tempfile.mkstemp(suffix=".db")
    os.close(fd)

    # Create database
    db = create_sqlite_database(database_path=db_path)
    # Store the path for tests that need it
    db.database_path = db_path
    db.connect()
    db.initialize_schema()

    yield db

    # Cleanup
    db.disconnect()
    if os.path.exists(db_path):
        os.unlink(db_path)


@pytest.fixture
def account_service(temp_db):
    """Create a BankAccountService with a temporary database."""
    return BankAccountService(temp_db)


@pytest.fixture
def transaction_service(temp_db):
    """Create a TransactionService with a temporary database."""
    return TransactionService(temp_db)


@pytest.fixture
def reconciliation_service(temp_db):
    """Create a ReconciliationService with a temporary database."""
    return ReconciliationService(temp_db)


@pytest.fixture
def sample_account(account_service):
    """Create a checking account opened with 1,000.00 on 2025-01-01."""
    return account_service.create_account(
        gl_account_number="1010",
        bank_name="First National",
        opening_balance_date=date(2025, 1, 1),
        opening_balance=Decimal("1000.00"),
        account_number_last4="4321",
    )


@pytest.fixture
def january_transactions(transaction_service, sample_account):
    """Record a deposit of 500, a check of 200 and a fee of 25 in January 2025.

    Returns the transactions keyed by name.
    """
    deposit = transaction_service.create_transaction(
        sample_account.id, date(2025, 1, 5), "Deposit", Decimal("500.00"), payee="Customer"
    )
    check = transaction_service.create_transaction(
        sample_account.id,
        date(2025, 1, 10),
        "Check",
        Decimal("-200.00"),
        check_number="1001",
        payee="Landlord",
    )
    fee = transaction_service.create_transaction(
        sample_account.id, date(2025, 1, 31), "Fee", Decimal("-25.00"), description="Monthly fee"
    )
    return {"deposit": deposit, "check": check, "fee": fee}


@pytest.fixture
def cli_runner():
    """Create a Click CLI test runner."""
    from click.testing import CliRunner

    return CliRunner()
