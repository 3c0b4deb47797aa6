"""
Database models for timet.

This module defines the Pydantic models for tracked time items, report options
and the aggregated statistics computed from them.
"""

from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

# Stable field order of a row selected by the repository
ITEM_FIELDS = ("id", "start", "end", "tag", "notes", "deleted")

# Column order of a full-width items row as exported by earlier releases
WIDE_ROW_FIELDS = (
    "id",
    "start",
    "end",
    "tag",
    "notes",
    "pomodoro",
    "updated_at",
    "created_at",
    "deleted",
)


class TimeItem(BaseModel):
    """Model for a single tracked time interval."""

    model_config = ConfigDict(frozen=True)

    id: Optional[int] = Field(None, description="Identifier assigned by the store")
    start: int = Field(..., description="Start time in epoch seconds")
    end: Optional[int] = Field(
        None, description="End time in epoch seconds (None for active items)"
    )
    tag: str = Field(..., min_length=1, description="Activity tag")
    notes: Optional[str] = Field(None, description="Free text notes")
    deleted: bool = Field(default=False, description="Soft-delete flag")

    @field_validator("tag")
    @classmethod
    def validate_tag(cls, v: str) -> str:
        """Strip surrounding whitespace and reject blank tags."""
        v = v.strip()
        if not v:
            raise ValueError("Tag cannot be blank")
        return v

    @field_validator("end")
    @classmethod
    def validate_end(cls, v: Optional[int], info: Any) -> Optional[int]:
        """Validate that end is not before start."""
        if v is not None:
            start = info.data.get("start")
            if start is not None and v < start:
                raise ValueError("End time must not be before start time")
        return v

    @property
    def duration(self) -> Optional[int]:
        """Get item duration in seconds. Returns None for active items."""
        if self.end is None:
            return None
        return self.end - self.start

    @property
    def is_active(self) -> bool:
        """Whether the item is still being tracked."""
        return self.end is None

    @classmethod
    def from_row(cls, row: Union[Sequence[Any], Mapping[str, Any]]) -> "TimeItem":
        """
        Build an item from a store row.

        Rows with column names (``sqlite3.Row`` or a mapping) are read by
        name. Positional rows of up to six values follow the repository
        layout ``id, start, end, tag, notes, deleted``. Longer positional
        rows follow the full-width layout ``id, start, end, tag, notes,
        pomodoro, updated_at, created_at, deleted``. Columns other than the
        item fields are ignored.

        Args:
            row: A tuple, list, mapping or sqlite3.Row

        Returns:
            The corresponding TimeItem
        """
        if hasattr(row, "keys"):
            data = {key: row[key] for key in row.keys() if key in ITEM_FIELDS}
        else:
            values = tuple(row)
            fields = ITEM_FIELDS if len(values) <= len(ITEM_FIELDS) else WIDE_ROW_FIELDS
            data = {key: value for key, value in zip(fields, values) if key in ITEM_FIELDS}

        data["deleted"] = bool(data.get("deleted") or False)
        return cls(**data)


class ReportOptions(BaseModel):
    """Options for a single report invocation, resolved before the report runs."""

    filter_expr: str = Field("today", description="Filter expression")
    tag: Optional[str] = Field(None, description="Exact tag to filter on")
    csv_path: Optional[str] = Field(None, description="CSV export destination")
    ics_path: Optional[str] = Field(None, description="iCalendar export destination")


class Totals(BaseModel):
    """Global totals across all counted items."""

    total: int = Field(0, description="Total tracked time in seconds")
    avg: float = Field(0.0, description="Average item duration in seconds")


class TagStats(BaseModel):
    """Descriptive statistics of the item durations for one tag."""

    min: int = Field(..., description="Shortest item in seconds")
    max: int = Field(..., description="Longest item in seconds")
    mean: float = Field(..., description="Mean item duration in seconds")


class TimeStatistics(BaseModel):
    """Aggregated statistics for a set of tracked items."""

    total_duration: int = Field(0, description="Total tracked time in seconds")
    count_by_tag: Dict[str, int] = Field(default_factory=dict)
    duration_by_tag: Dict[str, int] = Field(default_factory=dict)
    average_by_tag: Dict[str, float] = Field(default_factory=dict)
    standard_deviation_by_tag: Dict[str, float] = Field(default_factory=dict)
    sorted_duration_by_tag: List[Tuple[str, int]] = Field(default_factory=list)
    totals: Totals = Field(default_factory=Totals)
    additional_stats_by_tag: Dict[str, TagStats] = Field(default_factory=dict)

    @property
    def item_count(self) -> int:
        """Number of items that contributed to the statistics."""
        return sum(self.count_by_tag.values())
