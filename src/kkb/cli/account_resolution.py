"""CLI helpers turning account and transaction references into IDs."""

from __future__ import annotations

from typing import Callable

import click
from kkb.cli.error_handling import fail
from kkb.domain.ledger import LedgerStore
from kkb.utils.account_resolver import resolve_account, resolve_transaction


def _resolve_or_exit(
    ctx: click.Context, resolver: Callable[[LedgerStore, str], str], store: LedgerStore, reference: str
) -> str:
    try:
        return resolver(store, reference)
    except ValueError as exc:
        fail(ctx, exc)


def resolve_account_or_exit(ctx: click.Context, store: LedgerStore, account: str) -> str:
    """Resolve an account name, ID or ID prefix, or exit with a CLI error."""
    return _resolve_or_exit(ctx, resolve_account, store, account)


def resolve_transaction_or_exit(ctx: click.Context, store: LedgerStore, transaction: str) -> str:
    """Resolve a transaction ID or unique ID prefix, or exit with a CLI error."""
    return _resolve_or_exit(ctx, resolve_transaction, store, transaction)
