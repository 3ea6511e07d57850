"""Transaction management commands."""

import click
from kkb.cli.account_resolution import resolve_account_or_exit, resolve_transaction_or_exit
from kkb.cli.date_filters import resolve_cli_date_range
from kkb.cli.entry_options import build_entries_or_exit, entry_options
from kkb.cli.error_handling import fail, handle_domain_error, save_ledger
from kkb.domain.account_tree import account_name
from kkb.domain.errors import DomainError
from kkb.utils.amount_parser import format_amount
from kkb.utils.date_parser import format_timestamp, parse_date


@click.group()
def transaction_group():
    """Manage transactions."""
    pass


@transaction_group.command("list")
@click.option("--start-date", help="Start date (YYYY-MM-DD or relative like 'last month', 'this year')")
@click.option("--end-date", help="End date (YYYY-MM-DD or relative like 'today', 'this month')")
@click.option("--account", help="Only transactions posting to this account (name or ID)")
@click.pass_context
def list_transactions(ctx, start_date: str | None, end_date: str | None, account: str | None) -> None:
    """List transactions, oldest first."""
    store = ctx.obj["store"]
    start, end = resolve_cli_date_range(
        ctx, start_date=start_date, end_date=end_date, period_flags={}
    )

    account_id = None
    if account is not None:
        account_id = resolve_account_or_exit(ctx, store, account)

    transactions = [
        txn
        for txn in store.get_transactions()
        if (start is None or txn.date >= start)
        and (end is None or txn.date <= end)
        and (account_id is None or txn.references(account_id))
    ]
    transactions.sort(key=lambda txn: txn.date)

    if not transactions:
        click.echo("No transactions found.")
        return

    click.echo(f"\n{'ID':8s} | {'Date':10s} | {'Amount':>12s} | Description")
    click.echo("-" * 80)
    for txn in transactions:
        click.echo(
            f"{txn.id[:8]} | {txn.date} | {format_amount(txn.total_debit):>12s} | {txn.description}"
        )


@transaction_group.command("show")
@click.argument("transaction", metavar="TRANSACTION_ID")
@click.pass_context
def show_transaction(ctx, transaction: str) -> None:
    """Show a transaction with its journal lines."""
    store = ctx.obj["store"]
    transaction_id = resolve_transaction_or_exit(ctx, store, transaction)
    txn = store.get_transaction(transaction_id)
    accounts = store.get_accounts()

    click.echo(f"Transaction {txn.id}")
    click.echo(f"  Date: {txn.date}")
    click.echo(f"  Description: {txn.description}")
    click.echo(f"  Created: {format_timestamp(txn.created_at)}")
    click.echo(f"  Updated: {format_timestamp(txn.updated_at)}")
    click.echo(f"\n  {'Account':30s} {'Debit':>12s} {'Credit':>12s}")
    for entry in txn.entries:
        debit = format_amount(entry.debit) if entry.debit > 0 else ""
        credit = format_amount(entry.credit) if entry.credit > 0 else ""
        click.echo(f"  {account_name(accounts, entry.account_id):30s} {debit:>12s} {credit:>12s}")
    click.echo(
        f"  {'Total':30s} {format_amount(txn.total_debit):>12s} {format_amount(txn.total_credit):>12s}"
    )


@transaction_group.command("update")
@click.argument("transaction", metavar="TRANSACTION_ID")
@click.option("--date", help="Transaction date (YYYY-MM-DD or relative like 'today', 'yesterday')")
@click.option("--description", help="Transaction description")
@entry_options
@click.pass_context
def update_transaction(
    ctx,
    transaction: str,
    date: str | None,
    description: str | None,
    debits: tuple[tuple[str, str], ...],
    credits: tuple[tuple[str, str], ...],
) -> None:
    """Update a transaction.

    Updates only the fields that are provided. Giving any --debit or --credit
    line replaces all journal lines of the transaction.

    Examples:
        kkb transaction update 1a2b3c4d --description "Dinner"
        kkb transaction update 1a2b3c4d --debit Food 1500 --credit Cash 1500
    """
    store = ctx.obj["store"]
    transaction_id = resolve_transaction_or_exit(ctx, store, transaction)

    changes = {}
    if date is not None:
        try:
            changes["date"] = parse_date(date)
        except ValueError as e:
            fail(ctx, f"Invalid date format: {e}")
    if description is not None:
        changes["description"] = description
    if debits or credits:
        changes["entries"] = build_entries_or_exit(ctx, store, debits, credits)

    if not changes:
        click.echo("Nothing to update.")
        return

    try:
        store.update_transaction(transaction_id, **changes)
    except DomainError as e:
        handle_domain_error(ctx, e)
    save_ledger(ctx)
    click.echo(f"Updated transaction {transaction_id}")


@transaction_group.command("delete")
@click.argument("transaction", metavar="TRANSACTION_ID")
@click.option("--yes", is_flag=True, help="Do not ask for confirmation")
@click.pass_context
def delete_transaction(ctx, transaction: str, yes: bool) -> None:
    """Delete a transaction."""
    store = ctx.obj["store"]
    transaction_id = resolve_transaction_or_exit(ctx, store, transaction)
    txn = store.get_transaction(transaction_id)

    if not yes and not click.confirm(
        f"Are you sure you want to delete transaction '{txn.description}' ({txn.date})?"
    ):
        click.echo("Deletion cancelled.")
        return

    store.delete_transaction(transaction_id)
    save_ledger(ctx)
    click.echo(f"Deleted transaction {transaction_id}")


def register_commands(cli):
    """Register transaction commands with main CLI."""
    cli.add_command(transaction_group, name="transaction")
