"""
Tests for formatting helpers (timet.utils.formatting).
"""

from typing import Callable

import pytest

from timet.utils.formatting import (
    format_clock,
    format_date,
    format_minutes,
    format_percentage,
    format_timestamp,
    seconds_to_hms,
    truncate_text,
)


class TestDurations:
    """Test cases for duration formatting."""

    @pytest.mark.parametrize(
        "seconds,expected",
        [(0, "00:00:00"), (59, "00:00:59"), (3600, "01:00:00"), (98103, "27:15:03"), (-5, "00:00:00")],
    )
    def test_seconds_to_hms(self, seconds: int, expected: str) -> None:
        assert seconds_to_hms(seconds) == expected

    def test_format_minutes(self) -> None:
        assert format_minutes(3600) == "60.0"
        assert format_minutes(2700.0) == "45.0"
        assert format_minutes(0) == "0.0"


class TestTimestamps:
    """Test cases for timestamp formatting."""

    def test_format_timestamp(self, ts: Callable[..., int]) -> None:
        assert format_timestamp(ts(2024, 1, 15, 9, 5, 7)) == "2024-01-15 09:05:07"
        assert format_timestamp(ts(2024, 1, 15, 9), "%H:%M") == "09:00"
        assert format_timestamp(None) is None

    def test_date_and_clock(self, ts: Callable[..., int]) -> None:
        value = ts(2024, 1, 15, 9, 5, 7)

        assert format_date(value) == "2024-01-15"
        assert format_clock(value) == "09:05:07"


class TestText:
    """Test cases for text helpers."""

    def test_truncate_text(self) -> None:
        assert truncate_text("short") == "short"
        assert truncate_text("a" * 25, 20) == "a" * 17 + "..."
        assert truncate_text(None) == ""

    def test_format_percentage(self) -> None:
        assert format_percentage(1, 3) == "33.33%"
        assert format_percentage(5, 0) == "0.00%"
