"""
Tests for time validation utilities (timet.utils.time_validation).
"""

from datetime import datetime, time
from typing import Callable

import pytest

from timet.db.models import TimeItem
from timet.utils.time_validation import (
    TimeValidationError,
    parse_time_of_day,
    resolve_edit_timestamp,
)

ItemFactory = Callable[..., TimeItem]
TsFactory = Callable[..., int]

NOW = datetime(2024, 1, 15, 12, 0)


class TestParseTimeOfDay:
    """Test cases for parse_time_of_day."""

    @pytest.mark.parametrize(
        "value,expected",
        [
            ("09:30", time(9, 30)),
            ("9:05", time(9, 5)),
            ("23:59:59", time(23, 59, 59)),
            ("9", time(9, 0)),
            ("0930", time(9, 30)),
            ("093015", time(9, 30, 15)),
            (" 14:00 ", time(14, 0)),
        ],
    )
    def test_valid_times(self, value: str, expected: time) -> None:
        assert parse_time_of_day(value) == expected

    @pytest.mark.parametrize("value", ["", "25:00", "12:60", "1:2:3:4", "ab:cd", "1234567"])
    def test_invalid_times(self, value: str) -> None:
        with pytest.raises(TimeValidationError, match="Invalid time format"):
            parse_time_of_day(value)


class TestResolveEditTimestamp:
    """Test cases for resolve_edit_timestamp."""

    def test_start_on_item_date(self, ts: TsFactory, make_item: ItemFactory) -> None:
        item = make_item(1, ts(2024, 1, 14, 9), ts(2024, 1, 14, 10), "work")

        result = resolve_edit_timestamp(item, "start", "08:00", NOW)

        assert result == ts(2024, 1, 14, 8)

    def test_end_rolls_over_midnight(self, ts: TsFactory, make_item: ItemFactory) -> None:
        """Test an end not after the start is placed on the next day."""
        # Arrange
        item = make_item(1, ts(2024, 1, 14, 22), ts(2024, 1, 14, 23), "work")

        # Act
        result = resolve_edit_timestamp(item, "end", "01:30", NOW)

        # Assert
        assert result == ts(2024, 1, 15, 1, 30)

    def test_end_on_open_item(self, ts: TsFactory, make_item: ItemFactory) -> None:
        item = make_item(1, ts(2024, 1, 15, 9), None, "work")

        assert resolve_edit_timestamp(item, "end", "11:00", NOW) == ts(2024, 1, 15, 11)

    def test_future_rejected(self, ts: TsFactory, make_item: ItemFactory) -> None:
        item = make_item(1, ts(2024, 1, 15, 9), None, "work")

        with pytest.raises(TimeValidationError, match="End time cannot be in the future"):
            resolve_edit_timestamp(item, "end", "12:00:01", NOW)

    def test_start_after_end_rejected(self, ts: TsFactory, make_item: ItemFactory) -> None:
        item = make_item(1, ts(2024, 1, 15, 9), ts(2024, 1, 15, 10), "work")

        with pytest.raises(TimeValidationError, match="Start time must not be after end time"):
            resolve_edit_timestamp(item, "start", "10:01", NOW)

    def test_other_fields_rejected(self, ts: TsFactory, make_item: ItemFactory) -> None:
        item = make_item(1, ts(2024, 1, 15, 9), None, "work")

        with pytest.raises(TimeValidationError, match="Invalid field"):
            resolve_edit_timestamp(item, "tag", "10:00", NOW)
