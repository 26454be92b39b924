"""SQLite persistence for the accounts, currencies and allocations collections."""

from pinsight.storage.database import Database
from pinsight.storage.migrations import ensure_schema
from pinsight.storage.queries import SqliteBackend, load_collections, save_collection

__all__ = [
    "Database",
    "SqliteBackend",
    "ensure_schema",
    "load_collections",
    "save_collection",
]
