"""
Database schema definition for timet.

This module contains the SQL schema and migration logic for the SQLite database.
"""

import sqlite3
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Dict, Generator, Optional

# Database schema version
SCHEMA_VERSION = 2

CREATE_ITEMS_TABLE = """
CREATE TABLE IF NOT EXISTS items (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    start INTEGER NOT NULL,  -- epoch seconds
    "end" INTEGER,  -- epoch seconds, NULL for active items
    tag TEXT NOT NULL,
    notes TEXT,
    deleted INTEGER NOT NULL DEFAULT 0,
    created_at TEXT NOT NULL DEFAULT CURRENT_TIMESTAMP,
    updated_at TEXT NOT NULL DEFAULT CURRENT_TIMESTAMP
);
"""

CREATE_SCHEMA_VERSION_TABLE = """
CREATE TABLE IF NOT EXISTS schema_version (
    version INTEGER PRIMARY KEY,
    applied_at TEXT NOT NULL DEFAULT CURRENT_TIMESTAMP
);
"""

CREATE_INDEXES = [
    "CREATE INDEX IF NOT EXISTS idx_items_start ON items(start);",
    "CREATE INDEX IF NOT EXISTS idx_items_tag ON items(tag);",
    "CREATE INDEX IF NOT EXISTS idx_items_deleted ON items(deleted);",
]

CREATE_TRIGGERS = [
    """
    CREATE TRIGGER IF NOT EXISTS update_items_timestamp
    AFTER UPDATE ON items
    BEGIN
        UPDATE items SET updated_at = CURRENT_TIMESTAMP WHERE id = NEW.id;
    END;
    """,
]


class DatabaseManager:
    """Manages database connections and schema operations."""

    def __init__(self, db_path: Path):
        """Initialize database manager with the given database path."""
        self.db_path = Path(db_path)
        self.db_path.parent.mkdir(parents=True, exist_ok=True)

    @contextmanager
    def get_connection(self) -> Generator[sqlite3.Connection, None, None]:
        """Get a database connection with proper cleanup."""
        conn = sqlite3.connect(str(self.db_path))
        try:
            conn.execute("PRAGMA journal_mode = WAL")
            conn.row_factory = sqlite3.Row
            yield conn
        finally:
            conn.close()

    def initialize_database(self) -> None:
        """Initialize the database with the current schema."""
        with self.get_connection() as conn:
            conn.execute(CREATE_SCHEMA_VERSION_TABLE)

            current_version = self._get_schema_version(conn)

            if current_version is None:
                self._create_tables(conn)
                self._set_schema_version(conn, SCHEMA_VERSION)
            elif current_version < SCHEMA_VERSION:
                self._migrate_database(conn, current_version, SCHEMA_VERSION)

            conn.commit()

    def _create_tables(self, conn: sqlite3.Connection) -> None:
        """Create all database tables."""
        conn.execute(CREATE_ITEMS_TABLE)

        for index_sql in CREATE_INDEXES:
            conn.execute(index_sql)

        for trigger_sql in CREATE_TRIGGERS:
            conn.execute(trigger_sql)

    def _get_schema_version(self, conn: sqlite3.Connection) -> Optional[int]:
        """Get the current schema version."""
        try:
            cursor = conn.execute("SELECT MAX(version) FROM schema_version")
            result = cursor.fetchone()
            return result[0] if result and result[0] is not None else None
        except sqlite3.OperationalError:
            return None

    def _set_schema_version(self, conn: sqlite3.Connection, version: int) -> None:
        """Set the schema version."""
        conn.execute("INSERT INTO schema_version (version) VALUES (?)", (version,))

    def _migrate_database(
        self, conn: sqlite3.Connection, from_version: int, to_version: int
    ) -> None:
        """Migrate database from one version to another."""
        if from_version == 1 and to_version >= 2:
            # v1 only tracked start, end and tag
            columns = {row["name"] for row in conn.execute("PRAGMA table_info(items)")}
            if "notes" not in columns:
                conn.execute("ALTER TABLE items ADD COLUMN notes TEXT;")
            if "deleted" not in columns:
                conn.execute(
                    "ALTER TABLE items ADD COLUMN deleted INTEGER NOT NULL DEFAULT 0;"
                )
            conn.execute("CREATE INDEX IF NOT EXISTS idx_items_deleted ON items(deleted);")

            self._set_schema_version(conn, 2)

    def get_database_stats(self) -> Dict[str, Any]:
        """Get basic database statistics."""
        empty = {
            "total_items": 0,
            "active_items": 0,
            "deleted_items": 0,
            "first_item": None,
            "last_item": None,
            "database_size": 0,
        }
        if not self.db_path.exists():
            return empty

        try:
            with self.get_connection() as conn:
                result = conn.execute(
                    """
                    SELECT
                        COUNT(*) as total_items,
                        COUNT(CASE WHEN "end" IS NULL AND deleted = 0 THEN 1 END) as active_items,
                        COUNT(CASE WHEN deleted = 1 THEN 1 END) as deleted_items,
                        MIN(start) as first_item,
                        MAX(start) as last_item
                    FROM items
                """
                ).fetchone()
        except sqlite3.OperationalError:
            result = None

        stats = dict(empty)
        if result:
            stats.update({key: result[key] for key in result.keys()})
        stats["database_size"] = self.db_path.stat().st_size
        return stats
