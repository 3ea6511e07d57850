"""Main CLI entry point."""

import logging

import click
from kkb.database.factories import DB_PATH_ENV_VAR, create_sqlite_storage
from kkb.database.persistence import PersistenceAdapter
from kkb.domain.ledger import LedgerStore

# Import and register all commands at module level
from kkb.cli.commands import (
    account,
    add,
    transaction,
    report,
    init_accounts,
)

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


@click.group()
@click.option(
    "--db-path",
    type=click.Path(),
    help=f"Path to database file (overrides {DB_PATH_ENV_VAR} environment variable)",
    envvar=DB_PATH_ENV_VAR,
)
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging")
@click.pass_context
def cli(ctx, db_path: str | None, verbose: bool):
    """kkb - Double-entry household bookkeeping.

    Keep a chart of accounts, record balanced transactions and produce
    income statements and balance sheets.
    """
    logging.basicConfig(level=logging.DEBUG if verbose else logging.WARNING, format=LOG_FORMAT)
    ctx.ensure_object(dict)

    # Open the ledger only when actually running a command (not when showing help)
    if ctx.invoked_subcommand is not None:
        storage = create_sqlite_storage(database_path=db_path)
        storage.connect()
        storage.initialize_schema()
        ctx.call_on_close(storage.disconnect)

        store = LedgerStore()
        persistence = PersistenceAdapter(storage)
        persistence.load(store)

        ctx.obj["storage"] = storage
        ctx.obj["store"] = store
        ctx.obj["persistence"] = persistence


# Register all commands
account.register_commands(cli)
add.register_commands(cli)
transaction.register_commands(cli)
report.register_commands(cli)
init_accounts.register_commands(cli)


def main():
    """Main entry point for CLI."""
    cli()


if __name__ == "__main__":
    main()
