"""Schema migrations shipped as package data.

Files live in ``pinsight/migrations/`` and are named ``NNN_description.sql``.
Each script records its own version in ``_schema_version``; the runner
only decides which scripts are still pending.
"""

from __future__ import annotations

import logging
import re
import sqlite3
from importlib.resources import files
from typing import NamedTuple

from pinsight.errors import StorageError
from pinsight.storage.database import Database

logger = logging.getLogger(__name__)

_FILENAME = re.compile(r"^(\d{3})_\w+\.sql$")


class Migration(NamedTuple):
    version: int
    name: str
    sql: str


def available_migrations() -> list[Migration]:
    """Every packaged migration, ordered by version."""
    found = []
    for resource in files("pinsight").joinpath("migrations").iterdir():
        match = _FILENAME.match(resource.name)
        if match:
            found.append(Migration(int(match.group(1)), resource.name, resource.read_text("utf-8")))
    return sorted(found)


def pending_migrations(db: Database) -> list[Migration]:
    current = db.schema_version()
    return [m for m in available_migrations() if m.version > current]


def ensure_schema(db: Database) -> int:
    """Bring ``db`` up to the latest schema and return its version.

    Raises:
        StorageError: A migration script failed; earlier ones stay applied.
    """
    for migration in pending_migrations(db):
        logger.info("Applying migration %s", migration.name)
        try:
            db.run_script(migration.sql)
        except sqlite3.Error as e:
            raise StorageError(f"Migration {migration.name} failed: {e}") from e

    version = db.schema_version()
    logger.debug("Schema at version %d", version)
    return version
