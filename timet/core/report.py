"""
Report building for timet.

This module ties the filter resolver, the statistics engine and the
presentation layer together. It works on a snapshot of items handed to it and
never reads or writes storage itself.
"""

import csv
import logging
from datetime import datetime
from pathlib import Path
from typing import Any, Iterable, List, Mapping, Optional, Sequence, Union

from ..db.models import TimeItem, TimeStatistics
from ..utils.formatting import DEFAULT_DATETIME_FORMAT
from .filters import FilterWindow, resolve_filter
from .presentation import Row, to_ical, to_rows, to_table
from .time_statistics import compute_statistics

logger = logging.getLogger(__name__)

Record = Union[TimeItem, Sequence[Any], Mapping[str, Any]]


def _as_item(record: Record) -> TimeItem:
    if isinstance(record, TimeItem):
        return record
    return TimeItem.from_row(record)


def apply_filter(records: Iterable[Record], window: FilterWindow) -> List[TimeItem]:
    """
    Select the items matching a resolved window, most recent first.

    Ties on start time are broken by descending ID.
    """
    if window.is_empty:
        return []

    items = [item for item in map(_as_item, records) if window.matches(item)]
    return sorted(items, key=lambda item: (item.start, item.id or 0), reverse=True)


def build_report(
    records: Iterable[Record],
    filter_expr: Optional[str] = "today",
    tag: Optional[str] = None,
    now: Optional[datetime] = None,
) -> List[TimeItem]:
    """
    Filter records for a report.

    Args:
        records: TimeItem instances or raw store rows, deleted ones included
        filter_expr: Filter expression understood by resolve_filter
        tag: Optional exact tag
        now: The current time; defaults to the local wall clock

    Returns:
        A new list of matching items ordered by start, most recent first.
        Empty when nothing matches or the expression is not recognized.
    """
    return apply_filter(records, resolve_filter(filter_expr, tag, now))


class TimeReport:
    """A filtered view over a snapshot of items together with its statistics."""

    def __init__(
        self,
        records: Iterable[Record],
        filter_expr: Optional[str] = "today",
        tag: Optional[str] = None,
        now: Optional[datetime] = None,
        datetime_format: str = DEFAULT_DATETIME_FORMAT,
        notes_width: int = 20,
    ):
        """
        Build a report.

        Args:
            records: Snapshot of all items from the store
            filter_expr: Filter expression understood by resolve_filter
            tag: Optional exact tag
            now: The current time used to resolve relative filters
            datetime_format: strftime format for exported timestamps
            notes_width: Maximum notes length in the table
        """
        self.now = now or datetime.now()
        self.window = resolve_filter(filter_expr, tag, self.now)
        self.items = apply_filter(records, self.window)
        self.statistics: TimeStatistics = compute_statistics(self.items)
        self.datetime_format = datetime_format
        self.notes_width = notes_width

        if self.window.is_empty:
            logger.info(f"Filter '{filter_expr}' is not recognized; report is empty")

    @property
    def title(self) -> str:
        """Table title naming the filter and tag."""
        title = f"Tracked time report [{self.window.label or self.window.kind}]"
        if self.window.tag:
            title += f" tag={self.window.tag}"
        return title

    def is_empty(self) -> bool:
        """Whether no item matched the filter."""
        return not self.items

    def generate_summary(self) -> str:
        """Render the report table and summary as text."""
        return to_table(
            self.items, self.statistics, title=self.title, notes_width=self.notes_width
        )

    def generate_export_rows(self) -> List[Row]:
        """Flatten the report into export rows, header first."""
        return to_rows(self.items, self.datetime_format)

    def write_csv(self, file_path: Union[str, Path]) -> int:
        """
        Write the export rows to a CSV file.

        Returns:
            Number of item rows written, the header excluded
        """
        rows = self.generate_export_rows()
        with open(file_path, "w", newline="", encoding="utf-8") as csvfile:
            writer = csv.writer(csvfile)
            writer.writerows(rows)

        logger.info(f"Exported {len(rows) - 1} items to {file_path}")
        return len(rows) - 1

    def write_ical(self, file_path: Union[str, Path]) -> int:
        """
        Write closed items to an iCalendar file.

        Returns:
            Number of events written
        """
        with open(file_path, "w", encoding="utf-8") as f:
            f.write(to_ical(self.items, self.now.astimezone()))

        count = sum(1 for item in self.items if item.end is not None)
        logger.info(f"Exported {count} events to {file_path}")
        return count
