"""Mapper functions to convert between domain entities and the persisted form.

The persisted form is a JSON-compatible dict using only strings, numbers,
booleans and None. Conversion back to entities only checks structure; the
ledger store validates the entities themselves when the snapshot is loaded.
"""

from decimal import Decimal
from typing import Any

from kkb.domain import entities as domain
from kkb.domain.errors import ValidationError
from kkb.utils.date_parser import format_timestamp, parse_timestamp


def _amount_to_json(amount: Decimal) -> int | float:
    """Convert an amount to a JSON number, as an integer when integral."""
    if amount == amount.to_integral_value():
        return int(amount)
    return float(amount)


def _require(data: Any, key: str, kind: str) -> Any:
    if not isinstance(data, dict):
        raise ValidationError(f"{kind} must be an object")
    if key not in data:
        raise ValidationError(f"{kind} missing field '{key}'")
    return data[key]


def _timestamp_from_json(value: Any, kind: str) -> Any:
    if not isinstance(value, str):
        raise ValidationError(f"{kind} timestamp must be a string")
    try:
        return parse_timestamp(value)
    except ValueError as e:
        raise ValidationError(str(e))


def account_to_dict(account: domain.Account) -> dict[str, Any]:
    """Convert domain Account entity to its persisted form."""
    return {
        "id": account.id,
        "name": account.name,
        "type": domain.AccountType(account.type).value,
        "parent_id": account.parent_id,
        "currency": account.currency,
        "is_active": account.is_active,
        "created_at": format_timestamp(account.created_at),
        "updated_at": format_timestamp(account.updated_at),
    }


def account_from_dict(data: dict[str, Any]) -> domain.Account:
    """Convert a persisted account to a domain Account entity."""
    return domain.Account(
        id=_require(data, "id", "Account"),
        name=_require(data, "name", "Account"),
        type=_require(data, "type", "Account"),
        parent_id=data.get("parent_id"),
        currency=data.get("currency") or domain.DEFAULT_CURRENCY,
        is_active=data.get("is_active", True),
        created_at=_timestamp_from_json(_require(data, "created_at", "Account"), "Account"),
        updated_at=_timestamp_from_json(_require(data, "updated_at", "Account"), "Account"),
    )


def entry_to_dict(entry: domain.Entry) -> dict[str, Any]:
    """Convert domain Entry to its persisted form."""
    return {
        "account_id": entry.account_id,
        "debit": _amount_to_json(entry.debit),
        "credit": _amount_to_json(entry.credit),
    }


def entry_from_dict(data: dict[str, Any]) -> domain.Entry:
    """Convert a persisted entry to a domain Entry."""
    return domain.Entry(
        account_id=_require(data, "account_id", "Entry"),
        debit=_require(data, "debit", "Entry"),
        credit=_require(data, "credit", "Entry"),
    )


def transaction_to_dict(transaction: domain.Transaction) -> dict[str, Any]:
    """Convert domain Transaction entity to its persisted form."""
    return {
        "id": transaction.id,
        "date": transaction.date.isoformat(),
        "description": transaction.description,
        "entries": [entry_to_dict(entry) for entry in transaction.entries],
        "created_at": format_timestamp(transaction.created_at),
        "updated_at": format_timestamp(transaction.updated_at),
    }


def transaction_from_dict(data: dict[str, Any]) -> domain.Transaction:
    """Convert a persisted transaction to a domain Transaction entity.

    The date is passed through as its string form; the store parses it.
    """
    entries = _require(data, "entries", "Transaction")
    if not isinstance(entries, list):
        raise ValidationError("Transaction entries must be a list")
    return domain.Transaction(
        id=_require(data, "id", "Transaction"),
        date=_require(data, "date", "Transaction"),
        description=_require(data, "description", "Transaction"),
        entries=tuple(entry_from_dict(entry) for entry in entries),
        created_at=_timestamp_from_json(_require(data, "created_at", "Transaction"), "Transaction"),
        updated_at=_timestamp_from_json(_require(data, "updated_at", "Transaction"), "Transaction"),
    )


def snapshot_to_dict(snapshot: domain.LedgerSnapshot) -> dict[str, Any]:
    """Convert a ledger snapshot to its persisted form."""
    return {
        "version": snapshot.version,
        "lastModified": format_timestamp(snapshot.last_modified),
        "accounts": [account_to_dict(account) for account in snapshot.accounts],
        "transactions": [transaction_to_dict(txn) for txn in snapshot.transactions],
    }


def snapshot_from_dict(data: dict[str, Any]) -> domain.LedgerSnapshot:
    """Convert a persisted snapshot to a domain LedgerSnapshot.

    Raises:
        ValidationError: If the structure is malformed
    """
    accounts = _require(data, "accounts", "Snapshot")
    transactions = _require(data, "transactions", "Snapshot")
    if not isinstance(accounts, list) or not isinstance(transactions, list):
        raise ValidationError("Snapshot accounts and transactions must be lists")

    version = data.get("version") or domain.DATA_VERSION
    last_modified = data.get("lastModified")
    return domain.LedgerSnapshot(
        version=version,
        last_modified=(
            _timestamp_from_json(last_modified, "Snapshot") if last_modified is not None else None
        ),
        accounts=tuple(account_from_dict(account) for account in accounts),
        transactions=tuple(transaction_from_dict(txn) for txn in transactions),
    )
