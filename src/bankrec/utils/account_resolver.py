"""Utility for resolving bank account references to IDs."""

from bankrec.domain.bank_account import BankAccountService


def resolve_bank_account(account_service: BankAccountService, account: str | int) -> int:
    """Resolve a bank account ID, ledger account number or bank name to an ID.

    Args:
        account_service: BankAccountService instance
        account: Bank account ID (int or numeric string), ledger account
            number, or bank name

    Returns:
        Bank account ID

    Raises:
        ValueError: If no bank account matches, or a bank name is ambiguous
    """
    if isinstance(account, int):
        if account_service.get_account(account) is None:
            raise ValueError(f"Bank account ID {account} not found")
        return account

    accounts = [summary.account for summary in account_service.list_accounts(include_inactive=True)]

    # Ledger account numbers are numeric too, so they win over IDs
    for acc in accounts:
        if acc.gl_account_number == account:
            return acc.id

    try:
        account_id = int(account)
    except (ValueError, TypeError):
        pass
    else:
        if account_service.get_account(account_id) is None:
            raise ValueError(f"Bank account ID {account_id} not found")
        return account_id

    matches = [acc for acc in accounts if acc.bank_name == account]
    if len(matches) == 1:
        return matches[0].id
    if len(matches) > 1:
        raise ValueError(
            f"Bank name '{account}' matches {len(matches)} accounts; use the ID or ledger account number"
        )

    raise ValueError(f"Bank account '{account}' not found")
