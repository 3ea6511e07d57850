"""Command to create the default chart of accounts."""

import click
from kkb.cli.error_handling import save_ledger
from kkb.domain.seed import INITIAL_ACCOUNTS, seed_initial_accounts


@click.command("init-accounts")
@click.pass_context
def init_accounts(ctx):
    """Create the default household chart of accounts.

    Accounts that already exist (by name) are left untouched.
    """
    store = ctx.obj["store"]
    created = seed_initial_accounts(store)
    if created:
        save_ledger(ctx)

    click.echo(f"Created {len(created)} account{'s' if len(created) != 1 else ''}")
    skipped = len(INITIAL_ACCOUNTS) - len(created)
    if skipped:
        click.echo(f"Skipped {skipped} existing account{'s' if skipped != 1 else ''}")


def register_commands(cli):
    """Register init-accounts command with main CLI."""
    cli.add_command(init_accounts)
