"""
Database repository for timet items.

This module provides the data access layer for tracked time items.
"""

import logging
import sqlite3
from typing import List, Optional, Union

from .models import TimeItem
from .schema import DatabaseManager

logger = logging.getLogger(__name__)

# Columns that may be changed through update_item
EDITABLE_FIELDS = ("start", "end", "tag", "notes", "deleted")

# Explicit column list keeps the row layout stable for TimeItem.from_row
ITEM_COLUMNS = 'id, start, "end", tag, notes, deleted'


class ItemRepository:
    """Repository for managing tracked time items in the database."""

    def __init__(self, db_manager: DatabaseManager):
        """Initialize repository with database manager."""
        self.db_manager = db_manager

    def insert_item(
        self, start: int, tag: str, notes: Optional[str] = None, end: Optional[int] = None
    ) -> TimeItem:
        """
        Insert a new item and return it with its assigned ID.

        The item is validated before anything is written.

        Raises:
            pydantic.ValidationError: If the values do not form a valid item
        """
        item = TimeItem(start=start, end=end, tag=tag, notes=notes)

        with self.db_manager.get_connection() as conn:
            cursor = conn.execute(
                'INSERT INTO items (start, "end", tag, notes) VALUES (?, ?, ?, ?)',
                (item.start, item.end, item.tag, item.notes),
            )
            conn.commit()
            item_id = cursor.lastrowid

        logger.debug(f"Inserted item {item_id} ({item.tag})")
        return item.model_copy(update={"id": item_id})

    def find_item(self, item_id: int) -> Optional[TimeItem]:
        """Get an item by its ID, including soft-deleted items."""
        with self.db_manager.get_connection() as conn:
            row = conn.execute(
                f"SELECT {ITEM_COLUMNS} FROM items WHERE id = ?", (item_id,)
            ).fetchone()

        return self._row_to_item(row) if row else None

    def last_item(self) -> Optional[TimeItem]:
        """Get the most recently inserted item that is not deleted."""
        with self.db_manager.get_connection() as conn:
            row = conn.execute(
                f"SELECT {ITEM_COLUMNS} FROM items WHERE deleted = 0 "
                "ORDER BY id DESC LIMIT 1"
            ).fetchone()

        return self._row_to_item(row) if row else None

    def get_active_item(self) -> Optional[TimeItem]:
        """Get the currently open item (there should be at most one)."""
        with self.db_manager.get_connection() as conn:
            row = conn.execute(
                f'SELECT {ITEM_COLUMNS} FROM items WHERE "end" IS NULL AND deleted = 0 '
                "ORDER BY start DESC LIMIT 1"
            ).fetchone()

        return self._row_to_item(row) if row else None

    def item_status(self) -> str:
        """
        Get the tracking status of the store.

        Returns:
            ``no_items`` when nothing has been tracked, ``in_progress`` when the
            last item is still open, ``complete`` otherwise
        """
        last = self.last_item()
        if last is None:
            return "no_items"
        return "in_progress" if last.is_active else "complete"

    def update_item(self, item_id: int, field: str, value: Union[int, str, None]) -> None:
        """Update a single field of an item."""
        if field not in EDITABLE_FIELDS:
            raise ValueError(f"Field '{field}' cannot be updated")

        with self.db_manager.get_connection() as conn:
            conn.execute(f'UPDATE items SET "{field}" = ? WHERE id = ?', (value, item_id))
            conn.commit()

        logger.debug(f"Updated item {item_id}: {field}")

    def soft_delete(self, item_id: int) -> bool:
        """Flag an item as deleted. Returns True if it existed."""
        with self.db_manager.get_connection() as conn:
            cursor = conn.execute(
                "UPDATE items SET deleted = 1 WHERE id = ? AND deleted = 0", (item_id,)
            )
            conn.commit()
            return cursor.rowcount > 0

    def delete_item(self, item_id: int) -> bool:
        """Remove an item from the database. Returns True if deleted, False if not found."""
        with self.db_manager.get_connection() as conn:
            cursor = conn.execute("DELETE FROM items WHERE id = ?", (item_id,))
            conn.commit()
            return cursor.rowcount > 0

    def fetch_all(self) -> List[TimeItem]:
        """Get every item in the database, soft-deleted ones included."""
        with self.db_manager.get_connection() as conn:
            rows = conn.execute(
                f"SELECT {ITEM_COLUMNS} FROM items ORDER BY id ASC"
            ).fetchall()

        return [self._row_to_item(row) for row in rows]

    def all_items(self) -> List[TimeItem]:
        """Get all items that are not deleted, newest first."""
        with self.db_manager.get_connection() as conn:
            rows = conn.execute(
                f"SELECT {ITEM_COLUMNS} FROM items WHERE deleted = 0 "
                "ORDER BY start DESC, id DESC"
            ).fetchall()

        return [self._row_to_item(row) for row in rows]

    def _row_to_item(self, row: sqlite3.Row) -> TimeItem:
        """Convert a database row to a TimeItem model."""
        return TimeItem.from_row(row)
