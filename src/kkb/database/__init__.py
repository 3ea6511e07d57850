"""Persistence layer for kkb application."""

from kkb.database.base import SnapshotStorage
from kkb.database.factories import create_sqlite_storage
from kkb.database.persistence import PersistenceAdapter, STORAGE_KEY

__all__ = ["SnapshotStorage", "create_sqlite_storage", "PersistenceAdapter", "STORAGE_KEY"]
