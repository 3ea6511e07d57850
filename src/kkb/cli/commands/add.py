"""Add transaction command."""

import click
from kkb.cli.entry_options import build_entries_or_exit, entry_options
from kkb.cli.error_handling import fail, handle_domain_error, save_ledger
from kkb.domain.account_tree import account_name
from kkb.domain.errors import DomainError
from kkb.utils.amount_parser import format_amount
from kkb.utils.date_parser import parse_date


@click.command("add")
@click.option(
    "--date",
    required=True,
    help="Transaction date (YYYY-MM-DD or relative like 'today', 'yesterday')",
)
@click.option("--description", required=True, help="Transaction description")
@entry_options
@click.pass_context
def add_transaction(
    ctx,
    date: str,
    description: str,
    debits: tuple[tuple[str, str], ...],
    credits: tuple[tuple[str, str], ...],
):
    """Record a balanced transaction.

    Give at least one --debit and one --credit line; debits must equal credits.

    Examples:
        kkb add --date 2025-01-15 --description "Opening balance" --debit Cash 100000 --credit "Opening Balance" 100000
        kkb add --date today --description "Lunch" --debit Food 1200 --credit Cash 1200
    """
    store = ctx.obj["store"]

    try:
        txn_date = parse_date(date)
    except ValueError as e:
        fail(ctx, f"Invalid date format: {e}")

    entries = build_entries_or_exit(ctx, store, debits, credits)

    try:
        created = store.create_transaction(date=txn_date, description=description, entries=entries)
    except DomainError as e:
        handle_domain_error(ctx, e)
    save_ledger(ctx)

    accounts = store.get_accounts()
    click.echo(f"Created transaction {created.id}")
    click.echo(f"  Date: {created.date}")
    click.echo(f"  Description: {created.description}")
    for entry in created.entries:
        side = "Dr" if entry.debit > 0 else "Cr"
        amount = entry.debit if entry.debit > 0 else entry.credit
        click.echo(f"  {side} {account_name(accounts, entry.account_id):30s} {format_amount(amount):>15s}")


def register_commands(cli):
    """Register add command with main CLI."""
    cli.add_command(add_transaction)
