"""Abstract storage interface for persisted ledger snapshots."""

from abc import ABC, abstractmethod
from typing import Optional


class SnapshotStorage(ABC):
    """Durable key-value storage for serialized ledger snapshots."""

    @abstractmethod
    def connect(self) -> None:
        """Connect to the storage backend."""
        pass

    @abstractmethod
    def disconnect(self) -> None:
        """Disconnect from the storage backend."""
        pass

    @abstractmethod
    def initialize_schema(self) -> None:
        """Initialize storage schema (create tables)."""
        pass

    @abstractmethod
    def read(self, key: str) -> Optional[str]:
        """Return the blob stored under key, or None if there is none."""
        pass

    @abstractmethod
    def write(self, key: str, value: str) -> None:
        """Store a blob under key, replacing any previous value."""
        pass

    @abstractmethod
    def delete(self, key: str) -> bool:
        """Remove the blob stored under key. Returns False if there was none."""
        pass
