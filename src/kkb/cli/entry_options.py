"""CLI helpers for entering journal lines."""

import click
from kkb.cli.account_resolution import resolve_account_or_exit
from kkb.cli.error_handling import fail
from kkb.domain.entities import Entry
from kkb.domain.ledger import LedgerStore
from kkb.utils.amount_parser import parse_amount


def entry_options(command):
    """Decorate a command with repeatable --debit and --credit options."""
    command = click.option(
        "--credit",
        "credits",
        type=(str, str),
        multiple=True,
        metavar="ACCOUNT AMOUNT",
        help="Credit line (repeatable)",
    )(command)
    command = click.option(
        "--debit",
        "debits",
        type=(str, str),
        multiple=True,
        metavar="ACCOUNT AMOUNT",
        help="Debit line (repeatable)",
    )(command)
    return command


def build_entries_or_exit(
    ctx: click.Context,
    store: LedgerStore,
    debits: tuple[tuple[str, str], ...],
    credits: tuple[tuple[str, str], ...],
) -> list[Entry]:
    """Turn --debit/--credit option values into entries, debits first."""
    entries = []
    for lines, side in ((debits, "debit"), (credits, "credit")):
        for account, amount in lines:
            account_id = resolve_account_or_exit(ctx, store, account)
            try:
                value = parse_amount(amount)
            except ValueError as e:
                fail(ctx, f"Invalid amount format: {e}")
            entries.append(Entry(account_id=account_id, **{side: value}))
    return entries
