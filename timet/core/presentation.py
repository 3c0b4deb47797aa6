"""
Rendering of reports for the terminal and for export.

The table is drawn with rich into a plain-text block so it can be printed,
logged or asserted on. Export rows are flat lists ready for a CSV writer.
"""

import io
from datetime import datetime, timezone
from typing import List, Optional, Sequence, Union

from rich import box
from rich.console import Console
from rich.table import Table

from ..db.models import TimeItem, TimeStatistics
from ..utils.formatting import (
    DEFAULT_DATETIME_FORMAT,
    format_clock,
    format_date,
    format_minutes,
    format_percentage,
    format_timestamp,
    seconds_to_hms,
    truncate_text,
)
from .time_statistics import tag_distribution

EMPTY_REPORT_NOTICE = "No tracked time found for the specified filter."
EXPORT_HEADER = ["ID", "Start", "End", "Tag", "Notes"]
BLOCK_CHAR = "▅"

Row = List[Union[int, str, None]]


def _render(*renderables: object, width: int) -> str:
    buffer = io.StringIO()
    console = Console(
        file=buffer,
        width=width,
        color_system=None,
        force_terminal=False,
        highlight=False,
        markup=False,
        emoji=False,
    )
    for renderable in renderables:
        console.print(renderable)
    return buffer.getvalue().rstrip("\n")


def _items_table(items: Sequence[TimeItem], title: Optional[str], notes_width: int) -> Table:
    table = Table(title=title, box=box.ASCII, show_header=True, header_style="bold")
    table.add_column("Id", justify="right")
    table.add_column("Date")
    table.add_column("Tag")
    table.add_column("Start")
    table.add_column("End")
    table.add_column("Duration", justify="right")
    table.add_column("Notes")

    for item in items:
        if item.end is None:
            end_str = "-"
            duration_str = "active"
        else:
            end_str = format_clock(item.end)
            duration_str = seconds_to_hms(item.end - item.start)

        table.add_row(
            str(item.id) if item.id is not None else "",
            format_date(item.start),
            item.tag,
            format_clock(item.start),
            end_str,
            duration_str,
            truncate_text(item.notes, notes_width),
        )

    return table


def _summary_lines(stats: TimeStatistics) -> List[str]:
    lines = [
        f"Total: {seconds_to_hms(stats.total_duration)} | "
        f"AVG: {format_minutes(stats.totals.avg)}min"
    ]
    if not stats.sorted_duration_by_tag:
        return lines

    tag_width = max(len(tag) for tag, _ in stats.sorted_duration_by_tag)
    bars = {tag: bar for tag, _, bar in tag_distribution(stats)}
    for tag, duration in stats.sorted_duration_by_tag:
        lines.append(
            f"{tag.rjust(tag_width)}: {seconds_to_hms(duration)}"
            f"  AVG: {format_minutes(stats.average_by_tag[tag])}min"
            f"  SD: {format_minutes(stats.standard_deviation_by_tag[tag])}min"
            f"  {format_percentage(duration, stats.total_duration).rjust(7)}"
            f"  {BLOCK_CHAR * bars.get(tag, 0)}"
        )
    return lines


def to_table(
    items: Sequence[TimeItem],
    stats: TimeStatistics,
    title: Optional[str] = None,
    notes_width: int = 20,
    width: int = 160,
) -> str:
    """
    Render items and their statistics as a text block for the terminal.

    Args:
        items: Filtered items in display order
        stats: Statistics computed from the same items
        title: Optional table title
        notes_width: Maximum notes length per row
        width: Console width used for rendering

    Returns:
        The rendered table followed by the summary section, or a single
        notice line when there are no items
    """
    if not items:
        return EMPTY_REPORT_NOTICE

    return _render(
        _items_table(items, title, notes_width),
        "\n".join(_summary_lines(stats)),
        width=width,
    )


def to_rows(
    items: Sequence[TimeItem], datetime_format: str = DEFAULT_DATETIME_FORMAT
) -> List[Row]:
    """
    Flatten items into export rows.

    The first row is always the header ``ID, Start, End, Tag, Notes``; one row
    per item follows in the order given.
    """
    rows: List[Row] = [list(EXPORT_HEADER)]
    for item in items:
        rows.append(
            [
                item.id,
                format_timestamp(item.start, datetime_format),
                format_timestamp(item.end, datetime_format) or "",
                item.tag,
                item.notes or "",
            ]
        )
    return rows


def _escape_ical_text(text: Optional[str]) -> str:
    """Escape text for iCal format."""
    if not text:
        return ""
    return (
        text.replace("\\", "\\\\")
        .replace(",", "\\,")
        .replace(";", "\\;")
        .replace("\n", "\\n")
    )


def _ical_timestamp(timestamp: int) -> str:
    return datetime.fromtimestamp(timestamp, timezone.utc).strftime("%Y%m%dT%H%M%SZ")


def to_ical(items: Sequence[TimeItem], now: Optional[datetime] = None) -> str:
    """Render closed items as an iCalendar document, one event per item."""
    stamp = (now or datetime.now(timezone.utc)).astimezone(timezone.utc)
    dtstamp = stamp.strftime("%Y%m%dT%H%M%SZ")

    lines = [
        "BEGIN:VCALENDAR",
        "VERSION:2.0",
        "PRODID:-//timet//Time Tracking//EN",
        "CALSCALE:GREGORIAN",
        "METHOD:PUBLISH",
    ]

    for item in items:
        if item.end is None:
            continue
        lines.extend(
            [
                "BEGIN:VEVENT",
                f"UID:{item.id}@timet",
                f"DTSTART:{_ical_timestamp(item.start)}",
                f"DTEND:{_ical_timestamp(item.end)}",
                f"DTSTAMP:{dtstamp}",
                f"SUMMARY:{_escape_ical_text(item.tag)}",
                f"DESCRIPTION:{_escape_ical_text(item.notes)}",
                "CLASS:PRIVATE",
                "END:VEVENT",
            ]
        )

    lines.append("END:VCALENDAR")
    return "\n".join(lines) + "\n"
