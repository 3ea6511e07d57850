"""Tests for resolving account and transaction references."""

import pytest

from kkb.utils.account_resolver import resolve_account, resolve_transaction


def test_resolve_by_id(store, sample_accounts):
    cash = sample_accounts["Cash"]
    assert resolve_account(store, cash.id) == cash.id


def test_resolve_by_name(store, sample_accounts):
    assert resolve_account(store, "Credit Card") == sample_accounts["Credit Card"].id


def test_resolve_by_id_prefix(store, sample_accounts):
    cash = sample_accounts["Cash"]
    assert resolve_account(store, cash.id[:8]) == cash.id


def test_short_prefix_is_not_matched(store, sample_accounts):
    with pytest.raises(ValueError, match="not found"):
        resolve_account(store, sample_accounts["Cash"].id[:3])


def test_unknown_account(store, sample_accounts):
    with pytest.raises(ValueError, match="'Nowhere' not found"):
        resolve_account(store, "Nowhere")


def test_active_account_preferred_over_archived_namesake(store, sample_accounts):
    old = sample_accounts["Cash"]
    store.update_account(old.id, is_active=False)
    new = store.create_account(name="Cash", type="asset")

    assert resolve_account(store, "Cash") == new.id
    assert resolve_account(store, old.id) == old.id


def test_ambiguous_name(store, sample_accounts):
    store.create_account(name="Cash", type="asset")
    with pytest.raises(ValueError, match="ambiguous"):
        resolve_account(store, "Cash")


def test_resolve_transaction(store, opening_transaction):
    assert resolve_transaction(store, opening_transaction.id) == opening_transaction.id
    assert resolve_transaction(store, opening_transaction.id[:8]) == opening_transaction.id


def test_unknown_transaction(store, opening_transaction):
    with pytest.raises(ValueError, match="Transaction 'zzzzzzzz' not found"):
        resolve_transaction(store, "zzzzzzzz")
