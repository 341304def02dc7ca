"""Single-table key-value stores backed by SQLite.

Each store lives in its own database file so that the directory grant, the
project completion state and the user's preferences never share a
transaction.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Optional

from unslop.db.connection import Database

SCHEMA_VERSION = 1

SCHEMA_SQL = """
CREATE TABLE IF NOT EXISTS schema_version (
    version INTEGER PRIMARY KEY,
    applied_at TEXT NOT NULL DEFAULT (datetime('now'))
);

CREATE TABLE IF NOT EXISTS entries (
    store TEXT NOT NULL,
    key TEXT NOT NULL,
    value TEXT NOT NULL,  -- JSON
    updated_at TEXT NOT NULL DEFAULT (datetime('now')),
    PRIMARY KEY (store, key)
);
"""


def run_migrations(db: Database) -> None:
    """Create the schema on first use and record its version."""
    try:
        result = db.execute(
            "SELECT version FROM schema_version ORDER BY version DESC LIMIT 1"
        ).fetchone()
        current_version = result[0] if result else 0
    except Exception:
        # Table doesn't exist yet
        current_version = 0

    if current_version < SCHEMA_VERSION:
        db.executescript(SCHEMA_SQL)
        db.execute(
            "INSERT OR REPLACE INTO schema_version (version) VALUES (?)",
            (SCHEMA_VERSION,),
        )
        db.commit()


class KeyValueStore:
    """Named object store holding JSON values under string keys."""

    def __init__(self, db_path: Path, store: str) -> None:
        """Open (and create if needed) the store.

        Args:
            db_path: SQLite file backing this store.
            store: Object store name inside the file.
        """
        self.db_path = db_path
        self.store = store
        self._db = Database(db_path)
        run_migrations(self._db)

    def get(self, key: str) -> Optional[Any]:
        """Return the decoded value for key, or None if absent."""
        row = self._db.execute(
            "SELECT value FROM entries WHERE store = ? AND key = ?",
            (self.store, key),
        ).fetchone()
        return json.loads(row["value"]) if row else None

    def put(self, key: str, value: Any) -> None:
        """Insert or fully replace the value stored under key."""
        self._db.execute(
            """
            INSERT INTO entries (store, key, value, updated_at)
            VALUES (?, ?, ?, datetime('now'))
            ON CONFLICT(store, key) DO UPDATE SET
                value = excluded.value,
                updated_at = excluded.updated_at
            """,
            (self.store, key, json.dumps(value)),
        )
        self._db.commit()

    def delete(self, key: str) -> None:
        """Delete key. Deleting a missing key is a no-op."""
        self._db.execute(
            "DELETE FROM entries WHERE store = ? AND key = ?",
            (self.store, key),
        )
        self._db.commit()

    def keys(self) -> list[str]:
        cursor = self._db.execute(
            "SELECT key FROM entries WHERE store = ? ORDER BY key", (self.store,)
        )
        return [row["key"] for row in cursor.fetchall()]

    def close(self) -> None:
        """Close the database connection."""
        self._db.close()
