"""
Core time tracking functionality for timet.

This module contains the TimeTracker class that manages the tracked items in
the store and hands snapshots of them to the report builder.
"""

import logging
from datetime import datetime
from pathlib import Path
from typing import Callable, List, Optional, Union

from pydantic import ValidationError

from ..db.models import TimeItem
from ..db.repository import ItemRepository
from ..db.schema import DatabaseManager
from ..utils.formatting import DEFAULT_DATETIME_FORMAT
from ..utils.time_validation import TimeValidationError, resolve_edit_timestamp
from .presentation import Row
from .report import TimeReport

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]


class TimeTrackingError(Exception):
    """Base exception for time tracking operations."""

    pass


class ActiveItemError(TimeTrackingError):
    """Raised when there's an issue with active item management."""

    pass


class ItemNotFoundError(TimeTrackingError):
    """Raised when a requested item cannot be found."""

    pass


class InvalidFieldError(TimeTrackingError):
    """Raised when an edit names an unknown field or carries an invalid value."""

    pass


class TimeTracker:
    """Main time tracking service that coordinates item management."""

    EDITABLE_FIELDS = ("tag", "notes", "start", "end")

    def __init__(
        self,
        data_dir: Path,
        db_name: str = "timet.db",
        clock: Optional[Clock] = None,
        datetime_format: str = DEFAULT_DATETIME_FORMAT,
        notes_width: int = 20,
    ):
        """
        Initialize TimeTracker with the given data directory.

        Args:
            data_dir: Directory where the database is stored
            db_name: File name of the SQLite database
            clock: Callable returning the current local time
            datetime_format: strftime format used for exported timestamps
            notes_width: Maximum notes length shown in report tables
        """
        self.data_dir = Path(data_dir)
        self.data_dir.mkdir(parents=True, exist_ok=True)
        self.clock: Clock = clock or datetime.now
        self.datetime_format = datetime_format
        self.notes_width = notes_width

        self.db_manager = DatabaseManager(self.data_dir / db_name)
        self.db_manager.initialize_database()

        self.item_repo = ItemRepository(self.db_manager)

    def _now_ts(self) -> int:
        return int(self.clock().timestamp())

    def _get_existing(self, item_id: int) -> TimeItem:
        item = self.item_repo.find_item(item_id)
        if item is None or item.deleted:
            raise ItemNotFoundError(f"Item with ID {item_id} not found")
        return item

    def start(self, tag: str, notes: Optional[str] = None) -> TimeItem:
        """
        Start tracking a new item.

        Args:
            tag: Activity tag of the new item
            notes: Optional free-text notes

        Returns:
            The created open item

        Raises:
            ActiveItemError: If an item is already being tracked
            InvalidFieldError: If the tag is empty
        """
        active = self.item_repo.get_active_item()
        if active:
            raise ActiveItemError(
                f"Item '{active.tag}' is already active. Stop it before starting a new one."
            )

        tag = tag.strip() if tag else ""
        if not tag:
            raise InvalidFieldError("Tag cannot be empty")

        notes = notes.strip() if notes and notes.strip() else None
        item = self.item_repo.insert_item(self._now_ts(), tag, notes)
        logger.info(f"Started item {item.id} ({item.tag})")
        return item

    def stop(self) -> TimeItem:
        """
        Stop the active item.

        Returns:
            The closed item

        Raises:
            ActiveItemError: If no item is active
        """
        active = self.item_repo.get_active_item()
        if not active:
            raise ActiveItemError("No active item to stop")

        end = max(self._now_ts(), active.start)
        self.item_repo.update_item(active.id, "end", end)  # type: ignore[arg-type]
        logger.info(f"Stopped item {active.id} ({active.tag})")
        return active.model_copy(update={"end": end})

    def resume(self, item_id: Optional[int] = None) -> TimeItem:
        """
        Start a new item with the tag and notes of an earlier one.

        Args:
            item_id: Item to resume; the most recent item when omitted

        Raises:
            ActiveItemError: If an item is already being tracked
            ItemNotFoundError: If there is nothing to resume
        """
        if item_id is not None:
            previous = self._get_existing(item_id)
        else:
            previous = self.item_repo.last_item()
            if previous is None:
                raise ItemNotFoundError("No previous item to resume")

        return self.start(previous.tag, previous.notes)

    def cancel(self) -> TimeItem:
        """
        Discard the active item entirely.

        Raises:
            ActiveItemError: If no item is active
        """
        active = self.item_repo.get_active_item()
        if not active:
            raise ActiveItemError("No active item to cancel")

        self.item_repo.delete_item(active.id)  # type: ignore[arg-type]
        logger.info(f"Canceled item {active.id} ({active.tag})")
        return active

    def edit(self, item_id: int, field: str, value: str) -> TimeItem:
        """
        Change one field of an item.

        Times for ``start`` and ``end`` are given as a time of day on the
        item's start date.

        Returns:
            The updated item

        Raises:
            ItemNotFoundError: If the item does not exist
            InvalidFieldError: If the field is unknown or the value is invalid
        """
        if field not in self.EDITABLE_FIELDS:
            raise InvalidFieldError(
                f"Cannot edit '{field}'; choose one of {', '.join(self.EDITABLE_FIELDS)}"
            )

        item = self._get_existing(item_id)
        new_value: Union[int, str, None]

        if field == "tag":
            new_value = value.strip()
            if not new_value:
                raise InvalidFieldError("Tag cannot be empty")
        elif field == "notes":
            new_value = value.strip() or None
        else:
            try:
                new_value = resolve_edit_timestamp(item, field, value, self.clock())
            except TimeValidationError as e:
                raise InvalidFieldError(str(e)) from e

        try:
            updated = TimeItem.model_validate({**item.model_dump(), field: new_value})
        except ValidationError as e:
            raise InvalidFieldError(f"Invalid value for '{field}': {e}") from e

        self.item_repo.update_item(item_id, field, new_value)
        logger.info(f"Edited item {item_id}: {field}")
        return updated

    def delete(self, item_id: int) -> TimeItem:
        """
        Soft-delete an item so it no longer appears in reports.

        Raises:
            ItemNotFoundError: If the item does not exist or is already deleted
        """
        item = self._get_existing(item_id)
        self.item_repo.soft_delete(item_id)
        logger.info(f"Deleted item {item_id} ({item.tag})")
        return item

    def get_active_item(self) -> Optional[TimeItem]:
        """Get the currently active item, or None."""
        return self.item_repo.get_active_item()

    def get_status(self) -> str:
        """Get the store status: ``no_items``, ``in_progress`` or ``complete``."""
        return self.item_repo.item_status()

    def report(
        self,
        filter_expr: Optional[str] = "today",
        tag: Optional[str] = None,
        now: Optional[datetime] = None,
    ) -> TimeReport:
        """Build a report over a fresh snapshot of the store."""
        return TimeReport(
            self.item_repo.fetch_all(),
            filter_expr,
            tag,
            now=now or self.clock(),
            datetime_format=self.datetime_format,
            notes_width=self.notes_width,
        )

    def generate_summary(self, filter_expr: Optional[str] = "today", tag: Optional[str] = None) -> str:
        """Render the report table for a filter."""
        return self.report(filter_expr, tag).generate_summary()

    def generate_export_rows(
        self, filter_expr: Optional[str] = "today", tag: Optional[str] = None
    ) -> List[Row]:
        """Flatten the report for a filter into export rows."""
        return self.report(filter_expr, tag).generate_export_rows()
