"""CLI helper for turning an ACCOUNT argument into a bank account ID."""

import click
from bankrec.domain.bank_account import BankAccountService
from bankrec.utils.account_resolver import resolve_bank_account


def resolve_account_or_exit(
    ctx: click.Context, account_service: BankAccountService, account: str | int
) -> int:
    """Resolve a bank account reference, or exit with a CLI error.

    Inactive accounts still resolve, since their history stays reconcilable,
    but a warning is printed so the user notices.
    """
    try:
        account_id = resolve_bank_account(account_service, account)
    except ValueError as exc:
        click.echo(f"Error: {exc}", err=True)
        click.echo("Run 'bankrec account list --all' to see bank accounts.", err=True)
        ctx.exit(1)

    resolved = account_service.get_account(account_id)
    if resolved is not None and not resolved.is_active:
        click.echo(f"Warning: bank account {account_id} ({resolved.bank_name}) is inactive", err=True)
    return account_id
