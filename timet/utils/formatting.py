"""
Utility functions for formatting time and display elements.

This module provides consistent formatting for durations, timestamps, and other
display elements. Nothing here reads configuration; callers pass formats in.
"""

from datetime import datetime
from typing import Optional

DEFAULT_DATETIME_FORMAT = "%Y-%m-%d %H:%M:%S"


def seconds_to_hms(seconds: float) -> str:
    """
    Format a number of seconds as ``HH:MM:SS``.

    Hours are not wrapped at 24, so long totals stay readable.

    Args:
        seconds: Duration in seconds

    Returns:
        Formatted duration string (e.g., "02:00:00", "27:15:03")
    """
    total_seconds = max(int(seconds), 0)
    hours, remainder = divmod(total_seconds, 3600)
    minutes, secs = divmod(remainder, 60)
    return f"{hours:02d}:{minutes:02d}:{secs:02d}"


def format_minutes(seconds: float) -> str:
    """Format seconds as minutes with one decimal place (e.g., "60.0")."""
    return f"{seconds / 60:.1f}"


def format_timestamp(
    timestamp: Optional[int], fmt: str = DEFAULT_DATETIME_FORMAT
) -> Optional[str]:
    """
    Format an epoch timestamp in local time.

    Args:
        timestamp: Epoch seconds, or None
        fmt: strftime format

    Returns:
        Formatted string, or None when timestamp is None
    """
    if timestamp is None:
        return None
    return datetime.fromtimestamp(timestamp).strftime(fmt)


def format_date(timestamp: int) -> str:
    """Format just the local date of an epoch timestamp."""
    return datetime.fromtimestamp(timestamp).strftime("%Y-%m-%d")


def format_clock(timestamp: int) -> str:
    """Format just the local time of day of an epoch timestamp."""
    return datetime.fromtimestamp(timestamp).strftime("%H:%M:%S")


def truncate_text(text: Optional[str], max_length: int = 20) -> str:
    """
    Truncate text to a maximum length with ellipsis.

    Args:
        text: Text to potentially truncate
        max_length: Maximum length including the ellipsis

    Returns:
        Truncated text with ellipsis if needed, "" for None
    """
    if not text:
        return ""

    if len(text) <= max_length:
        return text

    return text[: max(max_length - 3, 0)] + "..."


def format_percentage(value: float, total: float) -> str:
    """
    Format a percentage value.

    Args:
        value: The value
        total: The total to calculate percentage against

    Returns:
        Formatted percentage string (e.g., "75.00%")
    """
    if total == 0:
        return "0.00%"

    percentage = (value / total) * 100
    return f"{percentage:.2f}%"

