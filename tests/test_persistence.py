"""Tests for snapshot storage and the persistence adapter."""

import json
import logging
from datetime import date
from decimal import Decimal

from kkb.database.factories import create_sqlite_storage
from kkb.database.persistence import STORAGE_KEY, PersistenceAdapter
from kkb.domain.entities import Entry
from kkb.domain.ledger import LedgerStore


class TestSQLAlchemyStorage:
    """Tests for the SQLite blob storage."""

    def test_read_missing_key(self, temp_storage):
        assert temp_storage.read("missing") is None

    def test_write_and_read(self, temp_storage):
        temp_storage.write("key", "value")
        assert temp_storage.read("key") == "value"

    def test_write_replaces(self, temp_storage):
        temp_storage.write("key", "first")
        temp_storage.write("key", "second")
        assert temp_storage.read("key") == "second"

    def test_delete(self, temp_storage):
        temp_storage.write("key", "value")
        assert temp_storage.delete("key") is True
        assert temp_storage.read("key") is None
        assert temp_storage.delete("key") is False

    def test_data_survives_reconnect(self, temp_storage):
        temp_storage.write("key", "日本語の値")
        temp_storage.disconnect()

        other = create_sqlite_storage(database_path=temp_storage.database_path)
        try:
            assert other.read("key") == "日本語の値"
        finally:
            other.disconnect()


class TestPersistenceAdapter:
    """Tests for PersistenceAdapter load/save/clear."""

    def test_missing_blob_starts_empty(self, persistence, store):
        assert persistence.load(store) is False
        assert store.get_accounts() == []

    def test_save_and_load(self, persistence, store, sample_accounts, opening_transaction):
        persistence.save(store)

        restored = LedgerStore()
        assert persistence.load(restored) is True
        assert restored.get_snapshot() == store.get_snapshot()

    def test_saved_blob_layout(self, persistence, temp_storage, store, sample_accounts):
        persistence.save(store)
        data = json.loads(temp_storage.read(STORAGE_KEY))
        assert data["version"] == "1.0.0"
        assert [acc["name"] for acc in data["accounts"]] == list(sample_accounts)
        assert data["transactions"] == []

    def test_non_ascii_names_round_trip(self, persistence, store):
        cash = store.create_account(name="現金", type="asset")
        equity = store.create_account(name="元入金", type="equity")
        store.create_transaction(
            date=date(2025, 4, 1),
            description="期首残高",
            entries=[
                Entry(account_id=cash.id, debit=Decimal("50000")),
                Entry(account_id=equity.id, credit=Decimal("50000")),
            ],
        )
        persistence.save(store)

        restored = LedgerStore()
        persistence.load(restored)
        assert restored.get_transactions()[0].description == "期首残高"

    def test_unparsable_blob_starts_empty(self, persistence, temp_storage, store, caplog):
        temp_storage.write(STORAGE_KEY, "{not json")

        with caplog.at_level(logging.WARNING):
            assert persistence.load(store) is False

        assert store.get_accounts() == []
        assert "not valid JSON" in caplog.text

    def test_invalid_snapshot_starts_empty(self, persistence, temp_storage, store, caplog):
        temp_storage.write(
            STORAGE_KEY,
            json.dumps(
                {
                    "version": "1.0.0",
                    "accounts": [
                        {
                            "id": "a",
                            "name": "Broken",
                            "type": "nonsense",
                            "created_at": "2025-01-01T00:00:00.000Z",
                            "updated_at": "2025-01-01T00:00:00.000Z",
                        }
                    ],
                    "transactions": [],
                }
            ),
        )

        with caplog.at_level(logging.WARNING):
            assert persistence.load(store) is False

        assert store.get_accounts() == []
        assert "invalid" in caplog.text

    def test_non_string_ids_start_empty(self, persistence, temp_storage, store, caplog):
        account = {
            "id": "wallet",
            "name": "Wallet",
            "type": "asset",
            "parent_id": ["cash"],
            "created_at": "2025-01-01T00:00:00.000Z",
            "updated_at": "2025-01-01T00:00:00.000Z",
        }
        for broken in [account, {**account, "id": {"x": 1}, "parent_id": None}]:
            temp_storage.write(
                STORAGE_KEY,
                json.dumps({"version": "1.0.0", "accounts": [broken], "transactions": []}),
            )

            with caplog.at_level(logging.WARNING):
                assert persistence.load(store) is False

            assert store.get_accounts() == []
        assert "must be" in caplog.text

    def test_malformed_structure_starts_empty(self, persistence, temp_storage, store):
        temp_storage.write(STORAGE_KEY, json.dumps(["not", "a", "snapshot"]))
        assert persistence.load(store) is False

    def test_failed_load_keeps_existing_state(self, persistence, temp_storage, store, sample_accounts):
        temp_storage.write(STORAGE_KEY, "{not json")
        persistence.load(store)
        assert len(store.get_accounts()) == len(sample_accounts)

    def test_clear(self, persistence, store, sample_accounts):
        persistence.save(store)
        assert persistence.clear() is True
        assert persistence.clear() is False
        assert persistence.load(LedgerStore()) is False

    def test_custom_key(self, temp_storage, store, sample_accounts):
        PersistenceAdapter(temp_storage, key="other").save(store)
        assert temp_storage.read("other") is not None
        assert temp_storage.read(STORAGE_KEY) is None
