"""Tests for ledger snapshots: read isolation and bulk load."""

import dataclasses
import pytest
from datetime import date, datetime, UTC
from decimal import Decimal

from kkb.domain.entities import Account, AccountType, DATA_VERSION, Entry, LedgerSnapshot, Transaction
from kkb.domain.errors import ValidationError
from kkb.domain.ledger import LedgerStore

NOW = datetime(2025, 1, 1, 9, 0, tzinfo=UTC)


def make_account(account_id, name, account_type, parent_id=None, is_active=True):
    return Account(
        id=account_id,
        name=name,
        type=account_type,
        parent_id=parent_id,
        currency="JPY",
        is_active=is_active,
        created_at=NOW,
        updated_at=NOW,
    )


def make_transaction(transaction_id, entries, txn_date=date(2025, 1, 15)):
    return Transaction(
        id=transaction_id,
        date=txn_date,
        description="Imported",
        entries=tuple(entries),
        created_at=NOW,
        updated_at=NOW,
    )


class TestGetSnapshot:
    """Tests for LedgerStore.get_snapshot."""

    def test_empty_snapshot(self, store):
        snapshot = store.get_snapshot()
        assert snapshot.version == DATA_VERSION
        assert snapshot.accounts == ()
        assert snapshot.transactions == ()

    def test_snapshot_reflects_state(self, store, sample_accounts, opening_transaction):
        snapshot = store.get_snapshot()
        assert list(snapshot.accounts) == store.get_accounts()
        assert snapshot.transactions == (opening_transaction,)

    def test_last_modified_advances_on_mutation(self, store):
        before = store.get_snapshot().last_modified
        store.create_account(name="Cash", type="asset")
        assert store.get_snapshot().last_modified > before

    def test_entities_cannot_be_mutated(self, store, sample_accounts, opening_transaction):
        snapshot = store.get_snapshot()

        with pytest.raises(dataclasses.FrozenInstanceError):
            snapshot.accounts[0].name = "Hacked"
        with pytest.raises(dataclasses.FrozenInstanceError):
            snapshot.transactions[0].entries[0].debit = Decimal("1")
        with pytest.raises(TypeError):
            snapshot.accounts[0] = snapshot.accounts[1]

        assert store.get_account(sample_accounts["Cash"].id).name == "Cash"

    def test_snapshot_is_not_affected_by_later_mutations(self, store, sample_accounts):
        snapshot = store.get_snapshot()
        store.create_account(name="Later", type="asset")
        assert len(snapshot.accounts) == len(sample_accounts)


class TestLoadSnapshot:
    """Tests for LedgerStore.load_snapshot."""

    def test_round_trip(self, store, sample_accounts, opening_transaction):
        snapshot = store.get_snapshot()

        other = LedgerStore()
        other.load_snapshot(snapshot)

        assert other.get_snapshot() == snapshot

    def test_constructor_accepts_snapshot(self, store, sample_accounts, opening_transaction):
        snapshot = store.get_snapshot()
        assert LedgerStore(snapshot).get_snapshot() == snapshot

    def test_load_replaces_state(self, store, sample_accounts):
        snapshot = LedgerSnapshot(
            version=DATA_VERSION,
            last_modified=NOW,
            accounts=(make_account("a1", "Wallet", AccountType.ASSET),),
        )
        store.load_snapshot(snapshot)

        assert [acc.id for acc in store.get_accounts()] == ["a1"]
        assert store.get_snapshot().last_modified == NOW

    def test_children_may_precede_parents(self, store):
        snapshot = LedgerSnapshot(
            version=DATA_VERSION,
            last_modified=NOW,
            accounts=(
                make_account("child", "Groceries", AccountType.EXPENSE, parent_id="root"),
                make_account("root", "Food", AccountType.EXPENSE),
            ),
        )
        store.load_snapshot(snapshot)
        assert store.get_account("child").parent_id == "root"

    def test_string_types_and_dates_are_normalized(self, store):
        snapshot = LedgerSnapshot(
            version=DATA_VERSION,
            last_modified=NOW,
            accounts=(
                make_account("cash", "Cash", "asset"),
                make_account("food", "Food", "expense"),
            ),
            transactions=(
                make_transaction(
                    "t1",
                    [
                        Entry(account_id="food", debit=1000, credit=0),
                        Entry(account_id="cash", debit=0, credit=1000),
                    ],
                    txn_date="2025-01-20",
                ),
            ),
        )
        store.load_snapshot(snapshot)

        assert store.get_account("cash").type is AccountType.ASSET
        txn = store.get_transaction("t1")
        assert txn.date == date(2025, 1, 20)
        assert txn.entries[0].debit == Decimal("1000")

    def test_inactive_accounts_are_loaded(self, store):
        snapshot = LedgerSnapshot(
            version=DATA_VERSION,
            last_modified=NOW,
            accounts=(make_account("old", "Old Wallet", AccountType.ASSET, is_active=False),),
        )
        store.load_snapshot(snapshot)
        assert store.get_accounts(active_only=True) == []

    def _assert_rejected(self, store, snapshot, message):
        before = store.get_snapshot()
        with pytest.raises(ValidationError, match=message):
            store.load_snapshot(snapshot)
        assert store.get_snapshot() == before

    def test_unbalanced_transaction_leaves_state_unchanged(self, store, sample_accounts, opening_transaction):
        snapshot = LedgerSnapshot(
            version=DATA_VERSION,
            last_modified=NOW,
            accounts=(make_account("cash", "Cash", AccountType.ASSET),),
            transactions=(
                make_transaction(
                    "t1",
                    [Entry(account_id="cash", debit=1000), Entry(account_id="cash", credit=999)],
                ),
            ),
        )
        self._assert_rejected(store, snapshot, "not balanced")

    def test_unknown_parent_rejected(self, store):
        snapshot = LedgerSnapshot(
            version=DATA_VERSION,
            last_modified=NOW,
            accounts=(make_account("child", "Groceries", AccountType.EXPENSE, parent_id="gone"),),
        )
        self._assert_rejected(store, snapshot, "Parent account not found")

    def test_parent_type_mismatch_rejected(self, store):
        snapshot = LedgerSnapshot(
            version=DATA_VERSION,
            last_modified=NOW,
            accounts=(
                make_account("card", "Credit Card", AccountType.LIABILITY),
                make_account("wallet", "Wallet", AccountType.ASSET, parent_id="card"),
            ),
        )
        self._assert_rejected(store, snapshot, "must match parent type")

    def test_cycle_rejected(self, store):
        snapshot = LedgerSnapshot(
            version=DATA_VERSION,
            last_modified=NOW,
            accounts=(
                make_account("a", "A", AccountType.ASSET, parent_id="b"),
                make_account("b", "B", AccountType.ASSET, parent_id="a"),
            ),
        )
        self._assert_rejected(store, snapshot, "cycle")

    def test_duplicate_account_ids_rejected(self, store):
        snapshot = LedgerSnapshot(
            version=DATA_VERSION,
            last_modified=NOW,
            accounts=(
                make_account("a", "A", AccountType.ASSET),
                make_account("a", "B", AccountType.ASSET),
            ),
        )
        self._assert_rejected(store, snapshot, "duplicate account IDs")

    def test_transaction_referencing_missing_account_rejected(self, store):
        snapshot = LedgerSnapshot(
            version=DATA_VERSION,
            last_modified=NOW,
            accounts=(make_account("cash", "Cash", AccountType.ASSET),),
            transactions=(
                make_transaction(
                    "t1",
                    [Entry(account_id="cash", debit=1000), Entry(account_id="gone", credit=1000)],
                ),
            ),
        )
        self._assert_rejected(store, snapshot, "non-existent account: gone")

    def test_non_snapshot_rejected(self, store):
        self._assert_rejected(store, {"accounts": []}, "LedgerSnapshot")

    def test_non_entity_items_rejected(self, store):
        snapshot = LedgerSnapshot(version=DATA_VERSION, last_modified=NOW, accounts=({"id": "a"},))
        self._assert_rejected(store, snapshot, "Account entities")

    def test_non_string_account_id_rejected(self, store):
        snapshot = LedgerSnapshot(
            version=DATA_VERSION,
            last_modified=NOW,
            accounts=(make_account({"x": 1}, "Cash", AccountType.ASSET),),
        )
        self._assert_rejected(store, snapshot, "IDs must be non-empty strings")

    def test_non_string_parent_id_rejected(self, store):
        snapshot = LedgerSnapshot(
            version=DATA_VERSION,
            last_modified=NOW,
            accounts=(
                make_account("cash", "Cash", AccountType.ASSET),
                make_account("wallet", "Wallet", AccountType.ASSET, parent_id=["cash"]),
            ),
        )
        self._assert_rejected(store, snapshot, "parent_id must be a string: wallet")

    def test_non_string_transaction_id_rejected(self, store):
        snapshot = LedgerSnapshot(
            version=DATA_VERSION,
            last_modified=NOW,
            accounts=(make_account("cash", "Cash", AccountType.ASSET),),
            transactions=(
                make_transaction(
                    ["t1"],
                    [Entry(account_id="cash", debit=1000), Entry(account_id="cash", credit=1000)],
                ),
            ),
        )
        self._assert_rejected(store, snapshot, "IDs must be non-empty strings")
