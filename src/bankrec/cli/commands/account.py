"""Bank account management commands."""

import click
from bankrec.cli.account_resolution import resolve_account_or_exit
from bankrec.cli.error_handling import format_money, handle_domain_error
from bankrec.cli.options import parse_amount_or_exit, parse_date_or_exit
from bankrec.domain.bank_account import BankAccountService
from bankrec.domain.entities import AccountType, BankAccountPatch
from bankrec.domain.errors import DomainError

ACCOUNT_TYPE_CHOICES = [t.value for t in AccountType]


@click.group()
def account_group():
    """Manage bank accounts."""
    pass


@account_group.command("create")
@click.argument("gl_account", metavar="GL_ACCOUNT")
@click.option("--bank", "bank_name", required=True, help="Bank name")
@click.option("--opening-balance", default="0", help="Opening balance (default 0)")
@click.option("--opening-date", required=True, help="Date the opening balance is effective")
@click.option(
    "--type",
    "account_type",
    type=click.Choice(ACCOUNT_TYPE_CHOICES, case_sensitive=False),
    default=AccountType.CHECKING.value,
    show_default=True,
    help="Account type",
)
@click.option("--last4", help="Last four digits of the account number")
@click.option("--routing", help="Routing number")
@click.pass_context
def create_account(
    ctx,
    gl_account: str,
    bank_name: str,
    opening_balance: str,
    opening_date: str,
    account_type: str,
    last4: str | None,
    routing: str | None,
):
    """Create a bank account linked to ledger account GL_ACCOUNT.

    Examples:
        bankrec account create 1010 --bank "First National" --opening-date 2025-01-01 --opening-balance 1000
        bankrec account create 1020 --bank "First National" --type Savings --opening-date 2025-01-01
    """
    service = BankAccountService(ctx.obj["db"])
    balance = parse_amount_or_exit(ctx, opening_balance, "opening balance")
    opened = parse_date_or_exit(ctx, opening_date, "opening date")

    try:
        account = service.create_account(
            gl_account_number=gl_account,
            bank_name=bank_name,
            opening_balance_date=opened,
            opening_balance=balance,
            account_type=account_type,
            account_number_last4=last4,
            routing_number=routing,
        )
    except DomainError as e:
        handle_domain_error(ctx, e)
        return

    click.echo(f"Created bank account '{account.bank_name}' (ID: {account.id})")
    click.echo(f"  Opening balance: {format_money(account.opening_balance)} as of {account.opening_balance_date}")


@account_group.command("list")
@click.option("--all", "include_inactive", is_flag=True, help="Include inactive accounts")
@click.pass_context
def list_accounts(ctx, include_inactive: bool):
    """List bank accounts with balances and uncleared counts."""
    service = BankAccountService(ctx.obj["db"])

    summaries = service.list_accounts(include_inactive=include_inactive)
    if not summaries:
        click.echo("No bank accounts found.")
        return

    click.echo("\nBank accounts:")
    click.echo("-" * 100)
    for summary in summaries:
        acc = summary.account
        last4 = f"...{acc.account_number_last4}" if acc.account_number_last4 else ""
        reconciled = str(acc.last_reconciled_date) if acc.last_reconciled_date else "never"
        inactive = "" if acc.is_active else " (inactive)"
        click.echo(
            f"ID: {acc.id:3d} | GL {acc.gl_account_number:8s} | {acc.bank_name:20s} {last4:8s} | "
            f"{acc.account_type.value:12s} | Balance: {format_money(acc.current_balance):>14s} | "
            f"Uncleared: {summary.uncleared_count:3d}/{summary.transaction_count:<4d} | "
            f"Reconciled: {reconciled}{inactive}"
        )


@account_group.command("show")
@click.argument("account", metavar="ACCOUNT")
@click.pass_context
def show_account(ctx, account: str):
    """Show one bank account.

    ACCOUNT can be an ID, ledger account number, or bank name.
    """
    service = BankAccountService(ctx.obj["db"])
    account_id = resolve_account_or_exit(ctx, service, account)
    acc = service.require_account(account_id)

    click.echo(f"Bank account {acc.id}: {acc.bank_name}")
    click.echo(f"  Ledger account: {acc.gl_account_number}")
    click.echo(f"  Type: {acc.account_type.value}")
    if acc.account_number_last4:
        click.echo(f"  Account number: ...{acc.account_number_last4}")
    if acc.routing_number:
        click.echo(f"  Routing number: {acc.routing_number}")
    click.echo(f"  Opening balance: {format_money(acc.opening_balance)} as of {acc.opening_balance_date}")
    click.echo(f"  Current balance: {format_money(acc.current_balance)}")
    if acc.last_reconciled_date is None:
        click.echo("  Last reconciled: never")
    else:
        click.echo(
            f"  Last reconciled: {acc.last_reconciled_date} at {format_money(acc.last_reconciled_balance)}"
        )
    click.echo(f"  Active: {'yes' if acc.is_active else 'no'}")


@account_group.command("update")
@click.argument("account", metavar="ACCOUNT")
@click.option("--bank", "bank_name", help="New bank name")
@click.option("--last4", help="New last four digits")
@click.option("--routing", help="New routing number")
@click.option(
    "--type",
    "account_type",
    type=click.Choice(ACCOUNT_TYPE_CHOICES, case_sensitive=False),
    help="New account type",
)
@click.option("--active/--inactive", "is_active", default=None, help="Activate or deactivate")
@click.pass_context
def update_account(
    ctx,
    account: str,
    bank_name: str | None,
    last4: str | None,
    routing: str | None,
    account_type: str | None,
    is_active: bool | None,
):
    """Update a bank account. Only the options given are changed.

    Examples:
        bankrec account update 1 --bank "First National Bank"
        bankrec account update 1010 --inactive
    """
    service = BankAccountService(ctx.obj["db"])
    account_id = resolve_account_or_exit(ctx, service, account)

    patch = BankAccountPatch(
        bank_name=bank_name,
        account_number_last4=last4,
        routing_number=routing,
        account_type=account_type,
        is_active=is_active,
    )
    try:
        updated = service.update_account(account_id, patch)
    except DomainError as e:
        handle_domain_error(ctx, e)
        return

    click.echo(f"Updated bank account {updated.id} ({updated.bank_name})")


def register_commands(cli):
    """Register account commands with main CLI."""
    cli.add_command(account_group, name="account")
