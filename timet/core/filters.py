"""
Filter resolution for timet reports.

A filter expression such as ``today``, ``week`` or ``2024-01-01..2024-01-31``
is resolved against an injected clock into a FilterWindow, a concrete time
window plus an optional tag that can be matched against items.
"""

import logging
import re
from dataclasses import dataclass
from datetime import date, datetime, time, timedelta
from typing import Optional

from ..db.models import TimeItem

logger = logging.getLogger(__name__)

FILTER_ALIASES = {"t": "today", "y": "yesterday", "w": "week", "m": "month"}

DATE_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}$")
RANGE_PATTERN = re.compile(r"^(\d{4}-\d{2}-\d{2})\.\.(\d{4}-\d{2}-\d{2})$")


@dataclass(frozen=True)
class FilterWindow:
    """
    A resolved report filter.

    ``start`` is inclusive. ``end`` is exclusive unless ``inclusive_end`` is
    set, which is the case for windows that run up to "now". A window of kind
    ``empty`` matches nothing.
    """

    kind: str
    label: str
    start: Optional[int] = None
    end: Optional[int] = None
    inclusive_end: bool = False
    tag: Optional[str] = None

    @property
    def is_empty(self) -> bool:
        """Whether this window can never match an item."""
        return self.kind == "empty"

    def matches(self, item: TimeItem) -> bool:
        """Check whether an item belongs to this window."""
        if self.is_empty or item.deleted:
            return False
        if self.tag is not None and item.tag != self.tag:
            return False
        if self.start is not None and item.start < self.start:
            return False
        if self.end is not None:
            if self.inclusive_end:
                return item.start <= self.end
            return item.start < self.end
        return True


def day_start(day: date) -> int:
    """Epoch seconds of local midnight at the start of the given day."""
    return int(datetime.combine(day, time.min).timestamp())


def parse_date(value: str) -> Optional[date]:
    """Parse a ``YYYY-MM-DD`` string, returning None when it is not a real date."""
    try:
        return datetime.strptime(value, "%Y-%m-%d").date()
    except ValueError:
        return None


def _day_window(kind: str, label: str, first: date, last: date, tag: Optional[str]) -> FilterWindow:
    return FilterWindow(
        kind=kind,
        label=label,
        start=day_start(first),
        end=day_start(last + timedelta(days=1)),
        tag=tag,
    )


def _until_now(kind: str, label: str, first: date, now: datetime, tag: Optional[str]) -> FilterWindow:
    return FilterWindow(
        kind=kind,
        label=label,
        start=day_start(first),
        end=int(now.timestamp()),
        inclusive_end=True,
        tag=tag,
    )


def resolve_filter(
    filter_expr: Optional[str],
    tag: Optional[str] = None,
    now: Optional[datetime] = None,
) -> FilterWindow:
    """
    Resolve a filter expression into a FilterWindow.

    Args:
        filter_expr: ``today``, ``yesterday``, ``week``, ``month``, ``all``,
            their one-letter aliases, ``YYYY-MM-DD`` or
            ``YYYY-MM-DD..YYYY-MM-DD``. None or blank means ``all``.
        tag: Optional exact, case-sensitive tag to match; surrounding
            whitespace is ignored, as it is when items are stored
        now: The current time; defaults to the local wall clock

    Returns:
        The resolved window. Unrecognized or malformed expressions resolve to
        an ``empty`` window instead of raising.
    """
    if now is None:
        now = datetime.now()
    elif now.tzinfo is not None:
        now = now.astimezone().replace(tzinfo=None)

    label = (filter_expr or "").strip()
    expr = FILTER_ALIASES.get(label.lower(), label.lower()) or "all"
    tag = (tag.strip() or None) if tag else None
    today = now.date()

    if expr == "all":
        return FilterWindow(kind="all", label=label or "all", tag=tag)
    if expr == "today":
        return _day_window("today", label, today, today, tag)
    if expr == "yesterday":
        yesterday = today - timedelta(days=1)
        return _day_window("yesterday", label, yesterday, yesterday, tag)
    if expr == "week":
        monday = today - timedelta(days=today.weekday())
        return _until_now("week", label, monday, now, tag)
    if expr == "month":
        return _until_now("month", label, today.replace(day=1), now, tag)

    range_match = RANGE_PATTERN.match(expr)
    if range_match:
        first = parse_date(range_match.group(1))
        last = parse_date(range_match.group(2))
        if first is not None and last is not None and first <= last:
            return _day_window("range", label, first, last, tag)
    elif DATE_PATTERN.match(expr):
        day = parse_date(expr)
        if day is not None:
            return _day_window("date", label, day, day, tag)

    logger.debug(f"Unrecognized filter expression: {filter_expr!r}")
    return FilterWindow(kind="empty", label=label, tag=tag)
