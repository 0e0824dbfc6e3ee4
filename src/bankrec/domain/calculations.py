"""Pure balance and reconciliation calculations.

Balances and reconciliation totals are always derived from the full set of
amounts involved rather than patched with deltas.
"""

from collections.abc import Iterable
from decimal import Decimal
from typing import Optional

from bankrec.domain.entities import Reconciliation, ReconciliationTotals

ZERO = Decimal("0")

# Half a cent, absorbs rounding carried in from imported amounts
RECONCILIATION_TOLERANCE = Decimal("0.005")


def account_balance(opening_balance: Decimal, amounts: Iterable[Decimal]) -> Decimal:
    """Return opening balance plus the signed sum of every amount."""
    return opening_balance + sum(amounts, ZERO)


def compute_reconciliation_totals(
    beginning_balance: Decimal,
    statement_ending_balance: Decimal,
    cleared_amounts: Iterable[Decimal],
) -> ReconciliationTotals:
    """Compute reconciliation figures from the amounts cleared into it.

    Args:
        beginning_balance: Balance carried forward into the reconciliation
        statement_ending_balance: Ending balance declared on the statement
        cleared_amounts: Signed amounts of the transactions it owns

    Returns:
        ReconciliationTotals with deposits, payments, cleared balance and
        difference
    """
    deposits = ZERO
    payments = ZERO
    for amount in cleared_amounts:
        if amount > 0:
            deposits += amount
        elif amount < 0:
            payments += abs(amount)

    cleared_balance = beginning_balance + deposits - payments
    return ReconciliationTotals(
        beginning_balance=beginning_balance,
        cleared_deposits=deposits,
        cleared_payments=payments,
        cleared_balance=cleared_balance,
        statement_ending_balance=statement_ending_balance,
        difference=statement_ending_balance - cleared_balance,
    )


def is_balanced(difference: Decimal, tolerance: Decimal = RECONCILIATION_TOLERANCE) -> bool:
    """Return True when the difference is within tolerance of zero."""
    return abs(difference) <= tolerance


def beginning_balance_for(
    opening_balance: Decimal, last_completed: Optional[Reconciliation]
) -> Decimal:
    """Balance a new reconciliation starts from."""
    if last_completed is None:
        return opening_balance
    return last_completed.statement_ending_balance


def totals_of(reconciliation: Reconciliation) -> ReconciliationTotals:
    """Return the totals currently stored on a reconciliation."""
    return ReconciliationTotals(
        beginning_balance=reconciliation.beginning_balance,
        cleared_deposits=reconciliation.cleared_deposits,
        cleared_payments=reconciliation.cleared_payments,
        cleared_balance=reconciliation.cleared_balance,
        statement_ending_balance=reconciliation.statement_ending_balance,
        difference=reconciliation.difference,
    )
