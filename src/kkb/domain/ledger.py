"""Ledger store: the single owner and mutator of ledger state.

Every invariant of the double-entry model is enforced here. All operations
are synchronous. A mutation either applies completely or raises
``ValidationError`` and leaves the ledger exactly as it was.
"""

import logging
import math
from collections.abc import Iterable, Mapping
from dataclasses import replace
from datetime import date, datetime, timedelta, UTC
from decimal import Decimal
from typing import Any, Optional

from kkb.domain import errors
from kkb.domain.account_tree import children, descendant_ids
from kkb.domain.entities import (
    Account,
    AccountType,
    BALANCE_TOLERANCE,
    DATA_VERSION,
    DEFAULT_CURRENCY,
    Entry,
    LedgerSnapshot,
    Transaction,
)
from kkb.domain.errors import ValidationError
from kkb.utils.date_parser import current_timestamp, parse_iso_date
from kkb.utils.ids import generate_id

logger = logging.getLogger(__name__)

ACCOUNT_UPDATABLE_FIELDS = frozenset({"name", "type", "parent_id", "currency", "is_active"})
TRANSACTION_UPDATABLE_FIELDS = frozenset({"date", "description", "entries"})


def _next_timestamp(previous: datetime) -> datetime:
    """Return the current time, strictly later than ``previous``."""
    if previous.tzinfo is None:
        previous = previous.replace(tzinfo=UTC)
    now = current_timestamp()
    if now <= previous:
        return previous + timedelta(milliseconds=1)
    return now


def _is_amount(value: Any) -> bool:
    if isinstance(value, bool) or not isinstance(value, (int, float, Decimal)):
        return False
    if isinstance(value, Decimal):
        return value.is_finite()
    return math.isfinite(value)


def _to_decimal(value: Any) -> Decimal:
    if isinstance(value, Decimal):
        return value
    if isinstance(value, float):
        return Decimal(str(value))
    return Decimal(value)


def _reject_unknown_fields(kind: str, changes: Mapping[str, Any], allowed: frozenset[str]) -> None:
    unknown = sorted(set(changes) - allowed)
    if unknown:
        raise ValidationError(f"{kind} field(s) cannot be updated: {', '.join(unknown)}")


class LedgerStore:
    """In-memory double-entry ledger.

    The store is an ordinary object owned by its caller; create one per
    session and pass it to whatever needs it.
    """

    def __init__(self, snapshot: Optional[LedgerSnapshot] = None):
        """Initialize the ledger store.

        Args:
            snapshot: Optional initial state, validated like ``load_snapshot``
        """
        self._version = DATA_VERSION
        self._last_modified = current_timestamp()
        self._accounts: tuple[Account, ...] = ()
        self._transactions: tuple[Transaction, ...] = ()
        if snapshot is not None:
            self.load_snapshot(snapshot)

    def _commit(
        self,
        accounts: Optional[tuple[Account, ...]] = None,
        transactions: Optional[tuple[Transaction, ...]] = None,
    ) -> None:
        if accounts is not None:
            self._accounts = accounts
        if transactions is not None:
            self._transactions = transactions
        self._last_modified = _next_timestamp(self._last_modified)

    def _account_index(self) -> dict[str, Account]:
        return {account.id: account for account in self._accounts}

    # Account operations
    def create_account(
        self,
        name: str,
        type: AccountType | str,
        parent_id: Optional[str] = None,
        currency: Optional[str] = DEFAULT_CURRENCY,
        is_active: bool = True,
    ) -> Account:
        """Create a new account.

        Args:
            name: Display name
            type: Account type (enum member or its string value)
            parent_id: Optional parent account ID; parent must have the same type
            currency: Currency code, defaults to JPY
            is_active: Whether the account starts active

        Returns:
            The created account

        Raises:
            ValidationError: If a required field is missing, the type is
                invalid, or the parent is unknown or of a different type
        """
        now = current_timestamp()
        account = Account(
            id=generate_id(),
            name=name,
            type=type,
            parent_id=parent_id,
            currency=currency or DEFAULT_CURRENCY,
            is_active=is_active,
            created_at=now,
            updated_at=now,
        )
        account = self._check_account(account, self._account_index())

        self._commit(accounts=self._accounts + (account,))
        logger.debug("Created account %s (%s, %s)", account.id, account.name, account.type.value)
        return account

    def update_account(self, account_id: str, **changes: Any) -> Account:
        """Update fields of an existing account.

        The merged account is validated with the same rules as creation.
        ``id`` and ``created_at`` are preserved and ``updated_at`` advances.

        Args:
            account_id: Account ID to update
            **changes: Any of name, type, parent_id, currency, is_active

        Returns:
            The updated account

        Raises:
            ValidationError: If the account is unknown, a field may not be
                updated, the type would change, the new parent would create a
                cycle, or the resulting account is invalid
        """
        existing = self.get_account(account_id)
        if existing is None:
            raise ValidationError(errors.account_not_found(account_id))

        _reject_unknown_fields("Account", changes, ACCOUNT_UPDATABLE_FIELDS)

        if "type" in changes and changes["type"] != existing.type:
            raise ValidationError("Account type cannot be changed after creation")

        new_parent = changes.get("parent_id")
        if new_parent and new_parent != existing.parent_id:
            if new_parent == account_id or new_parent in descendant_ids(self._accounts, account_id):
                raise ValidationError(
                    "Account cannot be moved under itself or one of its descendants"
                )

        updated = replace(existing, **changes, updated_at=_next_timestamp(existing.updated_at))
        updated = self._check_account(updated, self._account_index())

        self._commit(
            accounts=tuple(updated if acc.id == account_id else acc for acc in self._accounts)
        )
        logger.debug("Updated account %s: %s", account_id, sorted(changes))
        return updated

    def delete_account(self, account_id: str) -> bool:
        """Delete an account.

        An account referenced by any transaction entry is only deactivated
        (soft delete). The same applies while inactive child accounts still
        point at it, so that no parent reference is left dangling. Otherwise
        the account is removed.

        Args:
            account_id: Account ID to delete

        Returns:
            False if the account does not exist, True otherwise

        Raises:
            ValidationError: If the account has active child accounts
        """
        account = self.get_account(account_id)
        if account is None:
            return False

        active_children = children(self._accounts, account_id, active_only=True)
        if active_children:
            raise ValidationError(errors.account_delete_blocked(account_id, len(active_children)))

        referenced = any(txn.references(account_id) for txn in self._transactions)
        if referenced or children(self._accounts, account_id):
            self.update_account(account_id, is_active=False)
            logger.debug("Deactivated account %s", account_id)
        else:
            self._commit(accounts=tuple(acc for acc in self._accounts if acc.id != account_id))
            logger.debug("Removed account %s", account_id)

        return True

    def get_account(self, account_id: str) -> Optional[Account]:
        """Get account by ID, or None if not found."""
        for account in self._accounts:
            if account.id == account_id:
                return account
        return None

    def get_accounts(self, active_only: bool = False) -> list[Account]:
        """List accounts in insertion order.

        Args:
            active_only: If True, exclude archived accounts
        """
        if active_only:
            return [account for account in self._accounts if account.is_active]
        return list(self._accounts)

    # Transaction operations
    def create_transaction(
        self,
        date: date | str,
        description: str,
        entries: Iterable[Entry | Mapping[str, Any]],
    ) -> Transaction:
        """Create a balanced transaction.

        Args:
            date: Transaction date (date or YYYY-MM-DD string)
            description: Free text description
            entries: At least two entries, as ``Entry`` objects or mappings
                with account_id, debit and credit

        Returns:
            The created transaction

        Raises:
            ValidationError: Naming the first violated rule
        """
        now = current_timestamp()
        transaction = Transaction(
            id=generate_id(),
            date=date,
            description=description,
            entries=entries,
            created_at=now,
            updated_at=now,
        )
        transaction = self._check_transaction(transaction, self._account_index())

        self._commit(transactions=self._transactions + (transaction,))
        logger.debug(
            "Created transaction %s on %s with %d entries",
            transaction.id,
            transaction.date,
            len(transaction.entries),
        )
        return transaction

    def update_transaction(self, transaction_id: str, **changes: Any) -> Transaction:
        """Update fields of an existing transaction.

        The merged transaction is re-validated exactly as on creation.

        Args:
            transaction_id: Transaction ID to update
            **changes: Any of date, description, entries

        Returns:
            The updated transaction

        Raises:
            ValidationError: If the transaction is unknown, a field may not be
                updated, or the resulting transaction is invalid
        """
        existing = self.get_transaction(transaction_id)
        if existing is None:
            raise ValidationError(errors.transaction_not_found(transaction_id))

        _reject_unknown_fields("Transaction", changes, TRANSACTION_UPDATABLE_FIELDS)

        updated = replace(existing, **changes, updated_at=_next_timestamp(existing.updated_at))
        updated = self._check_transaction(updated, self._account_index())

        self._commit(
            transactions=tuple(
                updated if txn.id == transaction_id else txn for txn in self._transactions
            )
        )
        logger.debug("Updated transaction %s: %s", transaction_id, sorted(changes))
        return updated

    def delete_transaction(self, transaction_id: str) -> bool:
        """Delete a transaction.

        Returns:
            False if the transaction does not exist, True otherwise
        """
        if self.get_transaction(transaction_id) is None:
            return False

        self._commit(
            transactions=tuple(txn for txn in self._transactions if txn.id != transaction_id)
        )
        logger.debug("Deleted transaction %s", transaction_id)
        return True

    def get_transaction(self, transaction_id: str) -> Optional[Transaction]:
        """Get transaction by ID, or None if not found."""
        for transaction in self._transactions:
            if transaction.id == transaction_id:
                return transaction
        return None

    def get_transactions(self) -> list[Transaction]:
        """List transactions in insertion order."""
        return list(self._transactions)

    # Snapshot operations
    def get_snapshot(self) -> LedgerSnapshot:
        """Return the complete ledger state.

        The snapshot is built from frozen entities and tuples, so nothing a
        caller does with it can reach back into the store.
        """
        return LedgerSnapshot(
            version=self._version,
            last_modified=self._last_modified,
            accounts=self._accounts,
            transactions=self._transactions,
        )

    def load_snapshot(self, snapshot: LedgerSnapshot) -> None:
        """Replace the ledger state with a snapshot.

        Every account and transaction is validated against the incoming
        snapshot before anything is replaced.

        Raises:
            ValidationError: If any entity is invalid; the current state is
                left untouched
        """
        if not isinstance(snapshot, LedgerSnapshot):
            raise ValidationError("Snapshot must be a LedgerSnapshot")

        raw_accounts = tuple(snapshot.accounts)
        raw_transactions = tuple(snapshot.transactions)
        for account in raw_accounts:
            if not isinstance(account, Account):
                raise ValidationError("Snapshot accounts must be Account entities")
        for transaction in raw_transactions:
            if not isinstance(transaction, Transaction):
                raise ValidationError("Snapshot transactions must be Transaction entities")

        for entity in raw_accounts + raw_transactions:
            if not isinstance(entity.id, str) or not entity.id:
                raise ValidationError("Snapshot entity IDs must be non-empty strings")
        for account in raw_accounts:
            if account.parent_id is not None and not isinstance(account.parent_id, str):
                raise ValidationError(f"Account parent_id must be a string: {account.id}")

        raw_index = {account.id: account for account in raw_accounts}
        if len(raw_index) != len(raw_accounts):
            raise ValidationError("Snapshot contains duplicate account IDs")
        if len({txn.id for txn in raw_transactions}) != len(raw_transactions):
            raise ValidationError("Snapshot contains duplicate transaction IDs")

        accounts = tuple(self._check_account(account, raw_index) for account in raw_accounts)
        index = {account.id: account for account in accounts}
        self._check_hierarchy(index)
        transactions = tuple(self._check_transaction(txn, index) for txn in raw_transactions)

        if snapshot.version != DATA_VERSION:
            logger.info("Loading snapshot version %s (current %s)", snapshot.version, DATA_VERSION)

        self._version = snapshot.version or DATA_VERSION
        self._last_modified = snapshot.last_modified or current_timestamp()
        self._accounts = accounts
        self._transactions = transactions
        logger.debug(
            "Loaded snapshot with %d accounts and %d transactions",
            len(accounts),
            len(transactions),
        )

    # Validation
    def _check_account(self, account: Account, accounts_by_id: Mapping[str, Account]) -> Account:
        """Validate an account and return it with normalized fields.

        Raises:
            ValidationError: If validation fails
        """
        if (
            not isinstance(account.id, str)
            or not account.id
            or not isinstance(account.name, str)
            or not account.name.strip()
            or not account.type
        ):
            raise ValidationError("Account missing required fields")

        try:
            account_type = AccountType(account.type)
        except ValueError:
            raise ValidationError(f"Invalid account type: {account.type}")

        if not isinstance(account.currency, str) or not account.currency.strip():
            raise ValidationError("Account currency must be a non-empty currency code")

        if not isinstance(account.is_active, bool):
            raise ValidationError("Account is_active must be a boolean")

        if account.parent_id is not None and not isinstance(account.parent_id, str):
            raise ValidationError(f"Account parent_id must be a string: {account.id}")
        parent_id = account.parent_id or None
        if parent_id is not None:
            if parent_id == account.id:
                raise ValidationError("Account cannot be its own parent")
            parent = accounts_by_id.get(parent_id)
            if parent is None:
                raise ValidationError(errors.parent_not_found(parent_id))
            if parent.type != account_type:
                raise ValidationError(
                    errors.parent_type_mismatch(
                        account_type.value, getattr(parent.type, "value", parent.type)
                    )
                )

        return replace(account, type=account_type, parent_id=parent_id)

    def _check_hierarchy(self, accounts_by_id: Mapping[str, Account]) -> None:
        """Reject parent chains that loop back on themselves."""
        for account in accounts_by_id.values():
            seen = {account.id}
            parent_id = account.parent_id
            while parent_id is not None:
                if parent_id in seen:
                    raise ValidationError(f"Account hierarchy contains a cycle at account: {account.id}")
                seen.add(parent_id)
                parent = accounts_by_id.get(parent_id)
                parent_id = parent.parent_id if parent is not None else None

    def _check_transaction(
        self, transaction: Transaction, accounts_by_id: Mapping[str, Account]
    ) -> Transaction:
        """Validate a transaction and return it with normalized fields.

        Checks run in a fixed order: required fields, entry count, each
        entry, balance, then account references.

        Raises:
            ValidationError: If validation fails
        """
        if (
            not isinstance(transaction.id, str)
            or not transaction.id
            or not transaction.date
            or not isinstance(transaction.description, str)
            or not transaction.description.strip()
        ):
            raise ValidationError("Transaction missing required fields")
        txn_date = self._check_date(transaction.date)

        raw_entries = transaction.entries
        if isinstance(raw_entries, (str, bytes, Mapping)) or not isinstance(raw_entries, Iterable):
            raise ValidationError("Transaction must have at least 2 entries")
        raw_entries = tuple(raw_entries)
        if len(raw_entries) < 2:
            raise ValidationError("Transaction must have at least 2 entries")

        entries = tuple(self._check_entry(raw) for raw in raw_entries)

        total_debit = sum((entry.debit for entry in entries), Decimal("0"))
        total_credit = sum((entry.credit for entry in entries), Decimal("0"))
        if abs(total_debit - total_credit) > BALANCE_TOLERANCE:
            raise ValidationError(errors.transaction_not_balanced(total_debit, total_credit))

        for entry in entries:
            if entry.account_id not in accounts_by_id:
                raise ValidationError(errors.unknown_entry_account(entry.account_id))

        return replace(transaction, date=txn_date, entries=entries)

    def _check_date(self, value: Any) -> date:
        if isinstance(value, datetime):
            raise ValidationError("Transaction date must be a calendar date (YYYY-MM-DD)")
        if isinstance(value, date):
            return value
        if isinstance(value, str):
            try:
                return parse_iso_date(value)
            except ValueError as e:
                raise ValidationError(str(e))
        raise ValidationError("Transaction date must be a calendar date (YYYY-MM-DD)")

    def _check_entry(self, raw: Entry | Mapping[str, Any]) -> Entry:
        """Validate a single entry and return it with Decimal amounts."""
        if isinstance(raw, Entry):
            account_id, debit, credit = raw.account_id, raw.debit, raw.credit
        elif isinstance(raw, Mapping):
            account_id = raw.get("account_id")
            debit = raw.get("debit", 0)
            credit = raw.get("credit", 0)
        else:
            raise ValidationError("Entry must have account_id, debit and credit")

        if not account_id or not isinstance(account_id, str):
            raise ValidationError("Entry missing account_id")

        if not _is_amount(debit) or not _is_amount(credit):
            raise ValidationError("Entry debit and credit must be numbers")

        debit, credit = _to_decimal(debit), _to_decimal(credit)
        if debit < 0 or credit < 0:
            raise ValidationError("Entry debit and credit must be non-negative")

        if debit > 0 and credit > 0:
            raise ValidationError("Entry cannot have both debit and credit (use separate entries)")

        if debit == 0 and credit == 0:
            raise ValidationError("Entry must have either debit or credit > 0")

        return Entry(account_id=account_id, debit=debit, credit=credit)
