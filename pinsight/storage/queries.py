"""Named query functions for the collections table."""

from __future__ import annotations

import json
import logging
from typing import Any

from pinsight.config.defaults import COLLECTIONS
from pinsight.storage.database import Database

logger = logging.getLogger(__name__)


def load_collections(db: Database) -> dict[str, list[dict[str, Any]]]:
    """Load every stored collection. Missing collections are left out.

    A collection whose JSON cannot be decoded is skipped with a warning so
    the rest of the portfolio still loads.
    """
    result: dict[str, list[dict[str, Any]]] = {}
    for row in db.query("SELECT name, records FROM collections"):
        try:
            records = json.loads(row["records"])
        except json.JSONDecodeError as e:
            logger.warning("Skipping unreadable collection %s: %s", row["name"], e)
            continue
        if not isinstance(records, list):
            logger.warning("Skipping collection %s: expected a list", row["name"])
            continue
        result[row["name"]] = records
    return result


def save_collection(db: Database, name: str, records: list[dict[str, Any]]) -> None:
    """Replace a whole collection in one statement."""
    if name not in COLLECTIONS:
        raise ValueError(f"Unknown collection: {name}")
    with db.transaction() as cursor:
        cursor.execute(
            """INSERT INTO collections (name, records, updated_at)
            VALUES (?, ?, datetime('now'))
            ON CONFLICT(name) DO UPDATE SET
                records=excluded.records, updated_at=excluded.updated_at""",
            (name, json.dumps(records)),
        )
    logger.debug("Saved %d %s", len(records), name)


class SqliteBackend:
    """PortfolioStore persistence backend writing through to the database."""

    def __init__(self, db: Database) -> None:
        self.db = db

    def save(self, name: str, records: list[dict[str, Any]]) -> None:
        save_collection(self.db, name, records)
