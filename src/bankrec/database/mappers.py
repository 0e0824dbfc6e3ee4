"""Mapper functions to convert between domain models and SQLAlchemy models.

This layer isolates the conversion logic, so the domain entities stay
stable when the schema changes.
"""

from decimal import Decimal
from typing import Optional

from bankrec.domain import entities as domain
from bankrec.database.models import (
    BankAccount as ORMBankAccount,
    BankTransaction as ORMBankTransaction,
    BankReconciliation as ORMBankReconciliation,
)


def _money(value) -> Decimal:
    """Normalize a stored numeric to Decimal."""
    if value is None:
        return Decimal("0")
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def _optional_money(value) -> Optional[Decimal]:
    if value is None:
        return None
    return _money(value)


def bank_account_to_domain(orm_account: ORMBankAccount) -> domain.BankAccount:
    """Convert SQLAlchemy BankAccount model to domain BankAccount entity."""
    return domain.BankAccount(
        id=orm_account.id,
        gl_account_number=orm_account.gl_account_number,
        bank_name=orm_account.bank_name,
        account_number_last4=orm_account.account_number_last4,
        routing_number=orm_account.routing_number,
        account_type=domain.AccountType(orm_account.account_type),
        opening_balance=_money(orm_account.opening_balance),
        opening_balance_date=orm_account.opening_balance_date,
        current_balance=_money(orm_account.current_balance),
        last_reconciled_date=orm_account.last_reconciled_date,
        last_reconciled_balance=_optional_money(orm_account.last_reconciled_balance),
        is_active=bool(orm_account.is_active),
        created_at=orm_account.created_at,
        updated_at=orm_account.updated_at,
    )


def bank_transaction_to_domain(orm_transaction: ORMBankTransaction) -> domain.BankTransaction:
    """Convert SQLAlchemy BankTransaction model to domain BankTransaction entity."""
    return domain.BankTransaction(
        id=orm_transaction.id,
        bank_account_id=orm_transaction.bank_account_id,
        transaction_date=orm_transaction.transaction_date,
        transaction_type=domain.TransactionType(orm_transaction.transaction_type),
        amount=_money(orm_transaction.amount),
        check_number=orm_transaction.check_number,
        payee=orm_transaction.payee,
        description=orm_transaction.description,
        reference=orm_transaction.reference,
        is_cleared=bool(orm_transaction.is_cleared),
        cleared_date=orm_transaction.cleared_date,
        reconciliation_id=orm_transaction.reconciliation_id,
        created_at=orm_transaction.created_at,
        updated_at=orm_transaction.updated_at,
    )


def reconciliation_to_domain(orm_reconciliation: ORMBankReconciliation) -> domain.Reconciliation:
    """Convert SQLAlchemy BankReconciliation model to domain Reconciliation entity."""
    return domain.Reconciliation(
        id=orm_reconciliation.id,
        bank_account_id=orm_reconciliation.bank_account_id,
        statement_date=orm_reconciliation.statement_date,
        statement_ending_balance=_money(orm_reconciliation.statement_ending_balance),
        beginning_balance=_money(orm_reconciliation.beginning_balance),
        cleared_deposits=_money(orm_reconciliation.cleared_deposits),
        cleared_payments=_money(orm_reconciliation.cleared_payments),
        cleared_balance=_money(orm_reconciliation.cleared_balance),
        difference=_money(orm_reconciliation.difference),
        status=domain.ReconciliationStatus(orm_reconciliation.status),
        completed_at=orm_reconciliation.completed_at,
        completed_by=orm_reconciliation.completed_by,
        notes=orm_reconciliation.notes,
        created_at=orm_reconciliation.created_at,
        updated_at=orm_reconciliation.updated_at,
    )
