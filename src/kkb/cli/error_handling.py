"""CLI error reporting and ledger saving helpers."""

import click

from kkb.domain.errors import DomainError


def fail(ctx: click.Context, message: object) -> None:
    """Print ``Error: <message>`` on stderr and exit with status 1."""
    click.echo(f"Error: {message}", err=True)
    ctx.exit(1)


def handle_domain_error(ctx: click.Context, error: DomainError | ValueError) -> None:
    """Report a rejected ledger operation; the ledger is left unchanged."""
    fail(ctx, error)


def save_ledger(ctx: click.Context) -> None:
    """Persist the ledger after a successful mutation."""
    ctx.obj["persistence"].save(ctx.obj["store"])
