"""Shared pytest fixtures for kkb tests."""

import tempfile
import os
from datetime import date
import pytest

from kkb.database.factories import create_sqlite_storage
from kkb.database.persistence import PersistenceAdapter
from kkb.domain.entities import AccountType, Entry
from kkb.domain.ledger import LedgerStore


@pytest.fixture
def temp_storage():
    """Create a temporary SQLite storage for testing."""
    fd, db_path = tempfile.mkstemp(suffix=".db")
    os.close(fd)

    storage = create_sqlite_storage(database_path=db_path)
    # Store the path for tests that need it
    storage.database_path = db_path
    storage.connect()
    storage.initialize_schema()

    yield storage

    storage.disconnect()
    if os.path.exists(db_path):
        os.unlink(db_path)


@pytest.fixture
def persistence(temp_storage):
    """Create a PersistenceAdapter over temporary storage."""
    return PersistenceAdapter(temp_storage)


@pytest.fixture
def store():
    """Create an empty ledger store."""
    return LedgerStore()


@pytest.fixture
def sample_accounts(store):
    """Create one or two accounts of every type and return them by name."""
    specs = [
        ("Cash", AccountType.ASSET),
        ("Bank", AccountType.ASSET),
        ("Credit Card", AccountType.LIABILITY),
        ("Opening Balance", AccountType.EQUITY),
        ("Salary", AccountType.REVENUE),
        ("Food", AccountType.EXPENSE),
        ("Rent", AccountType.EXPENSE),
    ]
    return {name: store.create_account(name=name, type=account_type) for name, account_type in specs}


@pytest.fixture
def opening_transaction(store, sample_accounts):
    """Record the opening balance of the Cash account."""
    return store.create_transaction(
        date=date(2025, 1, 15),
        description="Opening balance",
        entries=[
            Entry(account_id=sample_accounts["Cash"].id, debit=100000),
            Entry(account_id=sample_accounts["Opening Balance"].id, credit=100000),
        ],
    )


@pytest.fixture
def cli_runner():
    """Create a Click CLI test runner."""
    from click.testing import CliRunner

    return CliRunner()


@pytest.fixture
def run_cli(cli_runner, temp_storage):
    """Invoke the kkb CLI against the temporary database."""
    from kkb.cli.main import cli

    def run(*args, **kwargs):
        return cli_runner.invoke(cli, ["--db-path", temp_storage.database_path, *args], **kwargs)

    return run
