"""Bank transaction commands."""

import click
from bankrec.cli.account_resolution import resolve_account_or_exit
from bankrec.cli.error_handling import format_money, handle_domain_error
from bankrec.cli.options import parse_amount_or_exit, parse_date_or_exit
from bankrec.domain.bank_account import BankAccountService
from bankrec.domain.entities import BankTransaction, TransactionPatch, TransactionType
from bankrec.domain.errors import DomainError
from bankrec.domain.transaction import TransactionService
from bankrec.utils.amount_parser import signed_amount

TRANSACTION_TYPE_CHOICES = [t.value for t in TransactionType]


def format_transaction_row(txn: BankTransaction) -> str:
    """Format a transaction as a single register line."""
    who = txn.payee or txn.description or ""
    check = f"#{txn.check_number}" if txn.check_number else ""
    cleared = "C" if txn.is_cleared else " "
    return (
        f"{txn.id:5d} | {txn.transaction_date} | {txn.transaction_type.value:10s} | "
        f"{check:7s} | {who[:30]:30s} | {format_money(txn.amount):>13s} | {cleared}"
    )


@click.group()
def transaction_group():
    """Record and manage bank transactions."""
    pass


@transaction_group.command("add")
@click.option("--account", required=True, help="Bank account ID, ledger account number or bank name")
@click.option("--date", "txn_date", required=True, help="Transaction date (YYYY-MM-DD or 'today', 'yesterday')")
@click.option(
    "--type",
    "txn_type",
    required=True,
    type=click.Choice(TRANSACTION_TYPE_CHOICES, case_sensitive=False),
    help="Transaction type",
)
@click.option("--amount", required=True, help="Amount; sign follows the type unless --as-is is given")
@click.option("--as-is", is_flag=True, help="Store the amount exactly as entered")
@click.option("--check-number", help="Check number")
@click.option("--payee", help="Payee")
@click.option("--description", help="Description")
@click.option("--reference", help="Reference")
@click.pass_context
def add_transaction(
    ctx,
    account: str,
    txn_date: str,
    txn_type: str,
    amount: str,
    as_is: bool,
    check_number: str | None,
    payee: str | None,
    description: str | None,
    reference: str | None,
):
    """Record a bank transaction.

    Deposits and interest are stored positive; withdrawals, checks,
    transfers and fees negative. Adjustments keep the sign entered.

    Examples:
        bankrec transaction add --account 1 --date 2025-01-05 --type Deposit --amount 500
        bankrec transaction add --account 1010 --date 2025-01-10 --type Check --amount 200 --check-number 1001
    """
    db = ctx.obj["db"]
    account_id = resolve_account_or_exit(ctx, BankAccountService(db), account)
    parsed_date = parse_date_or_exit(ctx, txn_date)
    parsed_amount = parse_amount_or_exit(ctx, amount)
    if not as_is:
        parsed_amount = signed_amount(parsed_amount, txn_type)

    try:
        txn = TransactionService(db).create_transaction(
            bank_account_id=account_id,
            transaction_date=parsed_date,
            transaction_type=txn_type,
            amount=parsed_amount,
            check_number=check_number,
            payee=payee,
            description=description,
            reference=reference,
        )
    except DomainError as e:
        handle_domain_error(ctx, e)
        return

    click.echo(f"Created transaction {txn.id}")
    click.echo(f"  Date: {txn.transaction_date}")
    click.echo(f"  Type: {txn.transaction_type.value}")
    click.echo(f"  Amount: {format_money(txn.amount)}")
    if txn.payee:
        click.echo(f"  Payee: {txn.payee}")


@transaction_group.command("update")
@click.argument("transaction_id", type=int)
@click.option("--date", "txn_date", help="Transaction date")
@click.option(
    "--type",
    "txn_type",
    type=click.Choice(TRANSACTION_TYPE_CHOICES, case_sensitive=False),
    help="Transaction type",
)
@click.option("--amount", help="Signed amount, stored as entered")
@click.option("--check-number", help="Check number")
@click.option("--payee", help="Payee")
@click.option("--description", help="Description")
@click.option("--reference", help="Reference")
@click.pass_context
def update_transaction(
    ctx,
    transaction_id: int,
    txn_date: str | None,
    txn_type: str | None,
    amount: str | None,
    check_number: str | None,
    payee: str | None,
    description: str | None,
    reference: str | None,
) -> None:
    """Update an uncleared transaction.

    Updates only the fields that are provided. Cleared transactions cannot
    be changed until they are uncleared.

    Examples:
        bankrec transaction update 3 --amount -75.00
        bankrec transaction update 3 --payee "Acme Supplies"
    """
    patch = TransactionPatch(
        transaction_date=parse_date_or_exit(ctx, txn_date) if txn_date is not None else None,
        transaction_type=txn_type,
        amount=parse_amount_or_exit(ctx, amount) if amount is not None else None,
        check_number=check_number,
        payee=payee,
        description=description,
        reference=reference,
    )

    try:
        TransactionService(ctx.obj["db"]).update_transaction(transaction_id, patch)
    except DomainError as e:
        handle_domain_error(ctx, e)
        return

    click.echo(f"Updated transaction {transaction_id}")


@transaction_group.command("delete")
@click.argument("transaction_id", type=int)
@click.option("--yes", "-y", is_flag=True, help="Skip confirmation")
@click.pass_context
def delete_transaction(ctx, transaction_id: int, yes: bool) -> None:
    """Delete an uncleared transaction."""
    service = TransactionService(ctx.obj["db"])

    if not yes and not click.confirm(f"Are you sure you want to delete transaction {transaction_id}?"):
        click.echo("Deletion cancelled.")
        return

    try:
        service.delete_transaction(transaction_id)
    except DomainError as e:
        handle_domain_error(ctx, e)
        return

    click.echo(f"Deleted transaction {transaction_id}")


@transaction_group.command("list")
@click.option("--account", required=True, help="Bank account ID, ledger account number or bank name")
@click.option("--start-date", help="Start date")
@click.option("--end-date", help="End date")
@click.option("--cleared/--uncleared", "cleared", default=None, help="Only cleared or only uncleared")
@click.option("--limit", type=int, default=500, show_default=True, help="Maximum rows")
@click.pass_context
def list_transactions(
    ctx,
    account: str,
    start_date: str | None,
    end_date: str | None,
    cleared: bool | None,
    limit: int,
):
    """Show an account register, newest first."""
    db = ctx.obj["db"]
    account_id = resolve_account_or_exit(ctx, BankAccountService(db), account)

    start = parse_date_or_exit(ctx, start_date, "start date") if start_date else None
    end = parse_date_or_exit(ctx, end_date, "end date") if end_date else None

    transactions = TransactionService(db).list_transactions(
        account_id, cleared=cleared, start_date=start, end_date=end, limit=limit
    )
    if not transactions:
        click.echo("No transactions found.")
        return

    click.echo(f"\nFound {len(transactions)} transaction(s):")
    click.echo("-" * 100)
    for txn in transactions:
        click.echo(format_transaction_row(txn))


def register_commands(cli):
    """Register transaction commands with main CLI."""
    cli.add_command(transaction_group, name="transaction")
