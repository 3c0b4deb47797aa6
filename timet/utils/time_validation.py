"""
Time validation utilities for editing tracked items.

This module parses user supplied times of day and turns them into validated
epoch timestamps for an item's start or end.
"""

import re
from datetime import datetime, time, timedelta
from typing import Optional

from ..db.models import TimeItem


class TimeValidationError(Exception):
    """Exception raised for time validation errors."""

    pass


def parse_time_of_day(value: str) -> time:
    """
    Parse a time of day.

    Accepts ``HH:MM``, ``HH:MM:SS`` and the compact digit form where missing
    digits are padded with zeros (``9`` -> 09:00:00, ``0930`` -> 09:30:00).

    Raises:
        TimeValidationError: If the value is not a valid time of day
    """
    text = value.strip()
    if ":" in text:
        parts = text.split(":")
        if len(parts) > 3 or not all(part.isdigit() for part in parts):
            raise TimeValidationError(f"Invalid time format: {value}")
        parts += ["0"] * (3 - len(parts))
    else:
        digits = re.sub(r"\D", "", text)
        if not digits or len(digits) > 6:
            raise TimeValidationError(f"Invalid time format: {value}")
        if len(digits) == 1:
            digits = f"0{digits}"
        digits = digits.ljust(6, "0")
        parts = [digits[0:2], digits[2:4], digits[4:6]]

    try:
        return time(int(parts[0]), int(parts[1]), int(parts[2]))
    except ValueError:
        raise TimeValidationError(f"Invalid time format: {value}")


def resolve_edit_timestamp(
    item: TimeItem, field: str, value: str, now: Optional[datetime] = None
) -> int:
    """
    Compute the new start or end timestamp of an item from a time of day.

    The time is placed on the local date of the item's start. An end time that
    would not come after the start is assumed to be on the following day.

    Args:
        item: The item being edited
        field: ``start`` or ``end``
        value: Time of day entered by the user
        now: The current time; defaults to the local wall clock

    Returns:
        The new timestamp in epoch seconds

    Raises:
        TimeValidationError: If the time is malformed, lies in the future or
            would leave the item with its end before its start
    """
    if field not in ("start", "end"):
        raise TimeValidationError(f"Invalid field: {field}")

    now = now or datetime.now()
    base_date = datetime.fromtimestamp(item.start).date()
    new_datetime = datetime.combine(base_date, parse_time_of_day(value))
    timestamp = int(new_datetime.timestamp())

    if field == "end" and timestamp <= item.start:
        timestamp = int((new_datetime + timedelta(days=1)).timestamp())

    if timestamp > int(now.timestamp()):
        raise TimeValidationError(f"{field.capitalize()} time cannot be in the future")

    if field == "start" and item.end is not None and timestamp > item.end:
        raise TimeValidationError("Start time must not be after end time")

    return timestamp
