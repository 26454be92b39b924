"""SQLite connection wrapper used by the collection store."""

from __future__ import annotations

import logging
import sqlite3
from contextlib import contextmanager
from pathlib import Path
from typing import Generator

logger = logging.getLogger(__name__)

MEMORY = ":memory:"

# Applied to every connection; WAL only makes sense for a real file.
_PRAGMAS = ("PRAGMA busy_timeout = 5000",)
_FILE_PRAGMAS = ("PRAGMA journal_mode = WAL", "PRAGMA synchronous = NORMAL")


class Database:
    """Lazily-opened SQLite database holding the portfolio collections.

    Pass ``":memory:"`` for a throwaway database (tests, dry runs).
    """

    def __init__(self, path: str | Path):
        self.is_memory = str(path) == MEMORY
        self.path = Path(MEMORY) if self.is_memory else Path(path).expanduser().resolve()
        self._conn: sqlite3.Connection | None = None

    def _open(self) -> sqlite3.Connection:
        if self.is_memory:
            conn = sqlite3.connect(MEMORY)
            pragmas = _PRAGMAS
        else:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            conn = sqlite3.connect(str(self.path))
            pragmas = _PRAGMAS + _FILE_PRAGMAS
        for pragma in pragmas:
            conn.execute(pragma)
        conn.row_factory = sqlite3.Row
        logger.debug("Opened %s", self)
        return conn

    def connect(self) -> sqlite3.Connection:
        if self._conn is None:
            self._conn = self._open()
        return self._conn

    @property
    def conn(self) -> sqlite3.Connection:
        return self.connect()

    def close(self) -> None:
        if self._conn is None:
            return
        self._conn.close()
        self._conn = None
        logger.debug("Closed %s", self)

    @contextmanager
    def transaction(self) -> Generator[sqlite3.Cursor, None, None]:
        """Yield a cursor; commit on success, roll back on any exception."""
        cursor = self.conn.cursor()
        try:
            yield cursor
        except Exception:
            self.conn.rollback()
            raise
        else:
            self.conn.commit()
        finally:
            cursor.close()

    def query(self, sql: str, params: tuple = ()) -> list[sqlite3.Row]:
        return self.conn.execute(sql, params).fetchall()

    def run_script(self, sql: str) -> None:
        self.conn.executescript(sql)

    def table_names(self) -> list[str]:
        rows = self.query("SELECT name FROM sqlite_master WHERE type = 'table' ORDER BY name")
        return [row["name"] for row in rows]

    def schema_version(self) -> int:
        """Highest applied migration, or 0 for a fresh database."""
        if "_schema_version" not in self.table_names():
            return 0
        row = self.query("SELECT MAX(version) AS v FROM _schema_version")[0]
        return row["v"] or 0

    def __enter__(self) -> "Database":
        self.connect()
        return self

    def __exit__(self, *args) -> None:
        self.close()

    def __repr__(self) -> str:
        return f"Database({self.path})"
