"""SQLAlchemy models for bankrec database."""

from datetime import datetime, UTC
from sqlalchemy import (
    Column,
    Integer,
    String,
    ForeignKey,
    DateTime,
    Date,
    Numeric,
    Boolean,
    Index,
    text,
    create_engine,
)
from sqlalchemy.orm import declarative_base, relationship, sessionmaker, Session

Base = declarative_base()

IN_PROGRESS_CLAUSE = text("status = 'In Progress'")


def _now() -> datetime:
    return datetime.now(UTC)


class BankAccount(Base):
    """Bank account model."""

    __tablename__ = "bank_accounts"

    id = Column(Integer, primary_key=True)
    gl_account_number = Column(String, nullable=False)
    bank_name = Column(String, nullable=False)
    account_number_last4 = Column(String, nullable=True)
    routing_number = Column(String, nullable=True)
    account_type = Column(String, default="Checking", nullable=False)
    opening_balance = Column(Numeric(12, 2), default=0, nullable=False)
    opening_balance_date = Column(Date, nullable=False)
    current_balance = Column(Numeric(12, 2), default=0, nullable=False)
    last_reconciled_date = Column(Date, nullable=True)
    last_reconciled_balance = Column(Numeric(12, 2), nullable=True)
    is_active = Column(Boolean, default=True, nullable=False)
    created_at = Column(DateTime, default=_now, nullable=False)
    updated_at = Column(DateTime, default=_now, onupdate=_now, nullable=False)

    # Relationships
    transactions = relationship("BankTransaction", back_populates="bank_account")
    reconciliations = relationship("BankReconciliation", back_populates="bank_account")


class BankReconciliation(Base):
    """Reconciliation header model."""

    __tablename__ = "bank_reconciliations"

    id = Column(Integer, primary_key=True)
    bank_account_id = Column(Integer, ForeignKey("bank_accounts.id"), nullable=False)
    statement_date = Column(Date, nullable=False)
    statement_ending_balance = Column(Numeric(12, 2), nullable=False)
    beginning_balance = Column(Numeric(12, 2), nullable=False)
    cleared_deposits = Column(Numeric(12, 2), default=0, nullable=False)
    cleared_payments = Column(Numeric(12, 2), default=0, nullable=False)
    cleared_balance = Column(Numeric(12, 2), default=0, nullable=False)
    difference = Column(Numeric(12, 2), default=0, nullable=False)
    status = Column(String, default="In Progress", nullable=False)
    completed_at = Column(DateTime, nullable=True)
    completed_by = Column(String, nullable=True)
    notes = Column(String, nullable=True)
    created_at = Column(DateTime, default=_now, nullable=False)
    updated_at = Column(DateTime, default=_now, onupdate=_now, nullable=False)

    # At most one open reconciliation per bank account
    __table_args__ = (
        Index("ix_bank_reconciliations_account", "bank_account_id"),
        Index(
            "uq_bank_reconciliations_in_progress",
            "bank_account_id",
            unique=True,
            sqlite_where=IN_PROGRESS_CLAUSE,
            postgresql_where=IN_PROGRESS_CLAUSE,
        ),
    )

    # Relationships
    bank_account = relationship("BankAccount", back_populates="reconciliations")
    transactions = relationship("BankTransaction", back_populates="reconciliation")


class BankTransaction(Base):
    """Bank transaction model."""

    __tablename__ = "bank_transactions"

    id = Column(Integer, primary_key=True)
    bank_account_id = Column(Integer, ForeignKey("bank_accounts.id"), nullable=False)
    transaction_date = Column(Date, nullable=False)
    transaction_type = Column(String, nullable=False)
    check_number = Column(String, nullable=True)
    payee = Column(String, nullable=True)
    description = Column(String, nullable=True)
    amount = Column(Numeric(12, 2), nullable=False)
    is_cleared = Column(Boolean, default=False, nullable=False)
    cleared_date = Column(Date, nullable=True)
    reconciliation_id = Column(Integer, ForeignKey("bank_reconciliations.id"), nullable=True)
    reference = Column(String, nullable=True)
    created_at = Column(DateTime, default=_now, nullable=False)
    updated_at = Column(DateTime, default=_now, onupdate=_now, nullable=False)

    __table_args__ = (
        Index("ix_bank_transactions_account", "bank_account_id"),
        Index("ix_bank_transactions_date", "transaction_date"),
        Index("ix_bank_transactions_cleared", "is_cleared"),
        Index("ix_bank_transactions_reconciliation", "reconciliation_id"),
    )

    # Relationships
    bank_account = relationship("BankAccount", back_populates="transactions")
    reconciliation = relationship("BankReconciliation", back_populates="transactions")


def create_session_factory(database_url: str) -> sessionmaker[Session]:
    """Create a SQLAlchemy session factory."""
    engine = create_engine(database_url, echo=False)
    Base.metadata.create_all(engine)
    return sessionmaker(bind=engine)
