"""CLI error handling helpers."""

import click

from bankrec.domain.errors import ConflictError, DomainError, ValidationError


def handle_domain_error(ctx: click.Context, error: DomainError | ValueError) -> None:
    """Render a domain error and exit with failure."""
    click.echo(f"Error: {error}", err=True)
    if isinstance(error, ConflictError) and error.existing_id is not None:
        click.echo(f"Resume it with: bankrec reconcile show {error.existing_id}", err=True)
    if isinstance(error, ValidationError) and error.difference is not None:
        click.echo(f"Difference: {format_money(error.difference)}", err=True)
    ctx.exit(1)


def format_money(amount) -> str:
    """Format an amount as dollars, sign before the symbol."""
    if amount is None:
        return "-"
    if amount < 0:
        return f"-${-amount:,.2f}"
    return f"${amount:,.2f}"
