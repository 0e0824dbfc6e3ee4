"""Bank reconciliation commands."""

import click
from bankrec.cli.account_resolution import resolve_account_or_exit
from bankrec.cli.commands.transaction import format_transaction_row
from bankrec.cli.error_handling import format_money, handle_domain_error
from bankrec.cli.options import parse_amount_or_exit, parse_date_or_exit
from bankrec.domain.bank_account import BankAccountService
from bankrec.domain.calculations import is_balanced, totals_of
from bankrec.domain.entities import Reconciliation, ReconciliationTotals
from bankrec.domain.errors import DomainError
from bankrec.domain.reconciliation import ReconciliationService
from bankrec.domain.transaction import TransactionService


def echo_totals(totals: ReconciliationTotals) -> None:
    """Print reconciliation totals."""
    click.echo(f"  Beginning balance:  {format_money(totals.beginning_balance):>14s}")
    click.echo(f"  Cleared deposits:   {format_money(totals.cleared_deposits):>14s}")
    click.echo(f"  Cleared payments:   {format_money(totals.cleared_payments):>14s}")
    click.echo(f"  Cleared balance:    {format_money(totals.cleared_balance):>14s}")
    click.echo(f"  Statement balance:  {format_money(totals.statement_ending_balance):>14s}")
    click.echo(f"  Difference:         {format_money(totals.difference):>14s}")
    if is_balanced(totals.difference):
        click.echo("  Balanced - ready to complete.")


def echo_reconciliation(reconciliation: Reconciliation) -> None:
    """Print a reconciliation header."""
    click.echo(
        f"Reconciliation {reconciliation.id} | statement {reconciliation.statement_date} | "
        f"{reconciliation.status.value}"
    )


@click.group()
def reconcile_group():
    """Reconcile bank accounts against statements."""
    pass


@reconcile_group.command("start")
@click.argument("account", metavar="ACCOUNT")
@click.option("--statement-date", required=True, help="Statement closing date")
@click.option("--ending-balance", required=True, help="Ending balance on the statement")
@click.option("--notes", help="Notes")
@click.pass_context
def start_reconciliation(ctx, account: str, statement_date: str, ending_balance: str, notes: str | None):
    """Start reconciling ACCOUNT against a statement.

    Examples:
        bankrec reconcile start 1 --statement-date 2025-01-31 --ending-balance 1300
    """
    db = ctx.obj["db"]
    account_id = resolve_account_or_exit(ctx, BankAccountService(db), account)
    stmt_date = parse_date_or_exit(ctx, statement_date, "statement date")
    stmt_balance = parse_amount_or_exit(ctx, ending_balance, "ending balance")

    try:
        reconciliation = ReconciliationService(db).start(account_id, stmt_date, stmt_balance, notes=notes)
    except DomainError as e:
        handle_domain_error(ctx, e)
        return

    click.echo(f"Started reconciliation {reconciliation.id}")
    echo_totals(totals_of(reconciliation))


@reconcile_group.command("clear")
@click.argument("reconciliation_id", type=int)
@click.argument("transaction_ids", type=int, nargs=-1, required=True)
@click.pass_context
def clear_transactions(ctx, reconciliation_id: int, transaction_ids: tuple[int, ...]):
    """Mark transactions as cleared in a reconciliation.

    Examples:
        bankrec reconcile clear 1 4
        bankrec reconcile clear 1 4 5 6
    """
    _toggle(ctx, reconciliation_id, transaction_ids, True)


@reconcile_group.command("unclear")
@click.argument("reconciliation_id", type=int)
@click.argument("transaction_ids", type=int, nargs=-1, required=True)
@click.pass_context
def unclear_transactions(ctx, reconciliation_id: int, transaction_ids: tuple[int, ...]):
    """Remove transactions from a reconciliation."""
    _toggle(ctx, reconciliation_id, transaction_ids, False)


def _toggle(ctx, reconciliation_id: int, transaction_ids: tuple[int, ...], is_cleared: bool) -> None:
    service = ReconciliationService(ctx.obj["db"])
    try:
        if len(transaction_ids) == 1:
            totals = service.toggle_cleared(reconciliation_id, transaction_ids[0], is_cleared)
            skipped: tuple[int, ...] = ()
        else:
            result = service.bulk_toggle(reconciliation_id, transaction_ids, is_cleared)
            totals, skipped = result.totals, result.skipped_ids
    except DomainError as e:
        handle_domain_error(ctx, e)
        return

    if skipped:
        click.echo(f"Skipped (not eligible): {', '.join(str(i) for i in skipped)}", err=True)
    echo_totals(totals)


@reconcile_group.command("clear-through")
@click.argument("reconciliation_id", type=int)
@click.pass_context
def clear_through_statement(ctx, reconciliation_id: int):
    """Clear every uncleared transaction dated on or before the statement date."""
    db = ctx.obj["db"]
    service = ReconciliationService(db)
    try:
        reconciliation = service.require_reconciliation(reconciliation_id)
        uncleared = TransactionService(db).list_uncleared(
            reconciliation.bank_account_id, as_of_date=reconciliation.statement_date
        )
        result = service.bulk_toggle(reconciliation_id, [txn.id for txn in uncleared], True)
    except DomainError as e:
        handle_domain_error(ctx, e)
        return

    click.echo(f"Cleared {len(result.applied_ids)} transaction(s)")
    echo_totals(result.totals)


@reconcile_group.command("complete")
@click.argument("reconciliation_id", type=int)
@click.option("--by", "completed_by", default="system", show_default=True, help="Who completed it")
@click.pass_context
def complete_reconciliation(ctx, reconciliation_id: int, completed_by: str):
    """Complete a reconciliation whose difference is zero."""
    try:
        reconciliation = ReconciliationService(ctx.obj["db"]).complete(
            reconciliation_id, completed_by=completed_by
        )
    except DomainError as e:
        handle_domain_error(ctx, e)
        return

    click.echo(
        f"Completed reconciliation {reconciliation.id} "
        f"(statement {reconciliation.statement_date}, "
        f"{format_money(reconciliation.statement_ending_balance)})"
    )


@reconcile_group.command("void")
@click.argument("reconciliation_id", type=int)
@click.pass_context
def void_reconciliation(ctx, reconciliation_id: int):
    """Abandon an in-progress reconciliation and unclear its transactions."""
    try:
        ReconciliationService(ctx.obj["db"]).void(reconciliation_id)
    except DomainError as e:
        handle_domain_error(ctx, e)
        return

    click.echo(f"Voided reconciliation {reconciliation_id}")


@reconcile_group.command("undo")
@click.argument("reconciliation_id", type=int)
@click.option(
    "--unclear-transactions",
    is_flag=True,
    help="Also release the transactions cleared in it",
)
@click.option("--yes", "-y", is_flag=True, help="Skip confirmation")
@click.pass_context
def undo_reconciliation(ctx, reconciliation_id: int, unclear_transactions: bool, yes: bool):
    """Reopen the latest completed reconciliation of an account."""
    if not yes and not click.confirm(f"Reopen completed reconciliation {reconciliation_id}?"):
        click.echo("Undo cancelled.")
        return

    try:
        reconciliation = ReconciliationService(ctx.obj["db"]).undo(
            reconciliation_id, unclear_transactions=unclear_transactions
        )
    except DomainError as e:
        handle_domain_error(ctx, e)
        return

    click.echo(f"Reopened reconciliation {reconciliation.id}")


@reconcile_group.command("show")
@click.argument("reconciliation_id", type=int)
@click.pass_context
def show_reconciliation(ctx, reconciliation_id: int):
    """Show a reconciliation with its cleared transactions."""
    try:
        detail = ReconciliationService(ctx.obj["db"]).get_detail(reconciliation_id)
    except DomainError as e:
        handle_domain_error(ctx, e)
        return

    rec = detail.reconciliation
    echo_reconciliation(rec)
    if rec.completed_at:
        click.echo(f"  Completed {rec.completed_at:%Y-%m-%d %H:%M} by {rec.completed_by}")
    if rec.notes:
        click.echo(f"  Notes: {rec.notes}")
    echo_totals(totals_of(rec))
    if detail.cleared_transactions:
        click.echo(f"\nCleared transactions ({len(detail.cleared_transactions)}):")
        for txn in detail.cleared_transactions:
            click.echo(format_transaction_row(txn))


@reconcile_group.command("uncleared")
@click.argument("account", metavar="ACCOUNT")
@click.option("--as-of", help="Only transactions dated on or before this date")
@click.pass_context
def list_uncleared(ctx, account: str, as_of: str | None):
    """List uncleared transactions, oldest first."""
    db = ctx.obj["db"]
    account_id = resolve_account_or_exit(ctx, BankAccountService(db), account)
    as_of_date = parse_date_or_exit(ctx, as_of, "as-of date") if as_of else None

    transactions = TransactionService(db).list_uncleared(account_id, as_of_date=as_of_date)
    if not transactions:
        click.echo("No uncleared transactions.")
        return

    for txn in transactions:
        click.echo(format_transaction_row(txn))


@reconcile_group.command("history")
@click.argument("account", metavar="ACCOUNT")
@click.pass_context
def reconciliation_history(ctx, account: str):
    """List reconciliations for an account, latest statement first."""
    db = ctx.obj["db"]
    account_id = resolve_account_or_exit(ctx, BankAccountService(db), account)

    history = ReconciliationService(db).list_history(account_id)
    if not history:
        click.echo("No reconciliations found.")
        return

    for rec in history:
        click.echo(
            f"{rec.id:5d} | {rec.statement_date} | {rec.status.value:11s} | "
            f"Ending: {format_money(rec.statement_ending_balance):>14s} | "
            f"Difference: {format_money(rec.difference):>12s}"
        )


def register_commands(cli):
    """Register reconciliation commands with main CLI."""
    cli.add_command(reconcile_group, name="reconcile")
