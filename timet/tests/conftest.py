"""
Pytest configuration and fixtures for timet tests.

This module provides shared fixtures and configuration for all test modules.
Timestamps are built from naive local datetimes so calendar-day filters line
up with the local timezone the code resolves them in.
"""

import tempfile
from datetime import datetime
from pathlib import Path
from typing import Any, Callable, Generator, List, Optional
from unittest.mock import Mock

import pytest

from timet.core.time_tracker import TimeTracker
from timet.db.models import TimeItem
from timet.db.repository import ItemRepository
from timet.db.schema import DatabaseManager
from timet.utils.config import ConfigManager

# Monday noon, so "week" starts on the same day
FIXED_NOW = datetime(2024, 1, 15, 12, 0, 0)


def _local_ts(year: int, month: int, day: int, hour: int = 0, minute: int = 0, second: int = 0) -> int:
    """Epoch seconds of a local wall-clock time."""
    return int(datetime(year, month, day, hour, minute, second).timestamp())


def _build_item(
    item_id: int,
    start: int,
    end: Optional[int],
    tag: str,
    notes: Optional[str] = None,
    deleted: bool = False,
) -> TimeItem:
    """Build a TimeItem with positional shorthand."""
    return TimeItem(id=item_id, start=start, end=end, tag=tag, notes=notes, deleted=deleted)


class FakeClock:
    """A settable clock for the tracking service."""

    def __init__(self, now: datetime):
        self.now = now

    def __call__(self) -> datetime:
        return self.now


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Provide a temporary directory for test files."""
    with tempfile.TemporaryDirectory() as tmp_dir:
        yield Path(tmp_dir)


@pytest.fixture
def test_db_path(temp_dir: Path) -> Path:
    """Provide a test database path."""
    return temp_dir / "test_timet.db"


@pytest.fixture
def db_manager(test_db_path: Path) -> DatabaseManager:
    """Provide a test database manager."""
    manager = DatabaseManager(test_db_path)
    manager.initialize_database()
    return manager


@pytest.fixture
def item_repository(db_manager: DatabaseManager) -> ItemRepository:
    """Provide a test item repository."""
    return ItemRepository(db_manager)


@pytest.fixture
def ts() -> Callable[..., int]:
    """Provide a factory for epoch seconds of local wall-clock times."""
    return _local_ts


@pytest.fixture
def make_item() -> Callable[..., TimeItem]:
    """Provide a factory for TimeItem instances with positional shorthand."""
    return _build_item


@pytest.fixture
def fixed_now() -> datetime:
    """Provide the fixed current time used across tests."""
    return FIXED_NOW


@pytest.fixture
def clock() -> Any:
    """Provide a settable clock starting at FIXED_NOW."""
    return FakeClock(FIXED_NOW)


@pytest.fixture
def time_tracker(temp_dir: Path, clock: Any) -> TimeTracker:
    """Provide a test time tracker instance driven by the fake clock."""
    return TimeTracker(temp_dir, clock=clock)


@pytest.fixture
def mock_config_manager() -> Mock:
    """Provide a mocked configuration manager."""
    mock_config = Mock(spec=ConfigManager)
    mock_config.get_data_dir.return_value = Path("/tmp/test_timet")
    mock_config.get_database_path.return_value = Path("/tmp/test_timet/timet.db")
    mock_config.get_default_filter.return_value = "today"
    mock_config.get_datetime_format.return_value = "%Y-%m-%d %H:%M:%S"
    mock_config.get_notes_width.return_value = 20
    mock_config.are_notifications_enabled.return_value = True
    mock_config.get_notification_timeout.return_value = 5
    mock_config.should_fallback_to_log.return_value = True
    mock_config.should_notify_start.return_value = True
    mock_config.should_notify_stop.return_value = True
    mock_config.should_notify_errors.return_value = True
    return mock_config


@pytest.fixture
def sample_items() -> List[TimeItem]:
    """
    Provide items spread over several days around FIXED_NOW.

    Two items today, one yesterday, one earlier in the month, one in the
    previous month, one deleted item today and one open item today.
    """
    return [
        _build_item(1, _local_ts(2023, 12, 20, 9), _local_ts(2023, 12, 20, 10), "work"),
        _build_item(2, _local_ts(2024, 1, 3, 9), _local_ts(2024, 1, 3, 11), "reading", "Chapter 4"),
        _build_item(3, _local_ts(2024, 1, 14, 14), _local_ts(2024, 1, 14, 15), "work", "Sunday catch-up"),
        _build_item(4, _local_ts(2024, 1, 15, 9), _local_ts(2024, 1, 15, 10), "work", "Standup prep"),
        _build_item(5, _local_ts(2024, 1, 15, 10), _local_ts(2024, 1, 15, 10, 30), "meeting"),
        _build_item(6, _local_ts(2024, 1, 15, 10, 30), _local_ts(2024, 1, 15, 11), "work", deleted=True),
        _build_item(7, _local_ts(2024, 1, 15, 11), None, "work", "In progress"),
    ]
