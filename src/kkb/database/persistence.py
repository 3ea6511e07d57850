"""Loading and saving the ledger through snapshot storage."""

import json
import logging

from kkb.database.base import SnapshotStorage
from kkb.database.mappers import snapshot_from_dict, snapshot_to_dict
from kkb.domain.errors import ValidationError
from kkb.domain.ledger import LedgerStore

logger = logging.getLogger(__name__)

STORAGE_KEY = "kkb-data"


class PersistenceAdapter:
    """Moves ledger snapshots between a store and durable storage.

    The store knows nothing about persistence; callers load once at startup
    and save after every successful mutation.
    """

    def __init__(self, storage: SnapshotStorage, key: str = STORAGE_KEY):
        """Initialize persistence adapter.

        Args:
            storage: Storage backend
            key: Key the snapshot blob is stored under
        """
        self.storage = storage
        self.key = key

    def load(self, store: LedgerStore) -> bool:
        """Load the stored snapshot into a store.

        A missing, unparsable or invalid blob is not an error: the store is
        left as it is (normally empty) and the problem is logged.

        Returns:
            True if a stored snapshot was loaded
        """
        blob = self.storage.read(self.key)
        if blob is None:
            logger.info("No stored ledger under '%s'; starting empty", self.key)
            return False

        try:
            snapshot = snapshot_from_dict(json.loads(blob))
            store.load_snapshot(snapshot)
        except json.JSONDecodeError as e:
            logger.warning("Stored ledger under '%s' is not valid JSON (%s); starting empty", self.key, e)
            return False
        except ValidationError as e:
            logger.warning("Stored ledger under '%s' is invalid (%s); starting empty", self.key, e)
            return False

        logger.debug("Loaded ledger from '%s'", self.key)
        return True

    def save(self, store: LedgerStore) -> None:
        """Write the store's current snapshot to storage."""
        payload = snapshot_to_dict(store.get_snapshot())
        self.storage.write(self.key, json.dumps(payload, ensure_ascii=False))
        logger.debug(
            "Saved ledger with %d accounts and %d transactions",
            len(payload["accounts"]),
            len(payload["transactions"]),
        )

    def clear(self) -> bool:
        """Remove the stored snapshot. Returns False if nothing was stored."""
        return self.storage.delete(self.key)
