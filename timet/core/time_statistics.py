"""
Aggregate statistics over tracked time items.

Every function here is pure: it reads the items it is given and returns new
values, so the same input always yields the same statistics.
"""

import statistics
from typing import Dict, Iterable, List, Tuple

from ..db.models import TagStats, TimeItem, TimeStatistics, Totals

MAX_BAR_LENGTH = 70


def durations_by_tag(items: Iterable[TimeItem]) -> Dict[str, List[int]]:
    """
    Collect the per-item durations of closed items, keyed by tag.

    Keys keep the order in which tags are first seen. Open items are skipped.
    """
    durations: Dict[str, List[int]] = {}
    for item in items:
        duration = item.duration
        if duration is None:
            continue
        durations.setdefault(item.tag, []).append(duration)
    return durations


def compute_statistics(items: Iterable[TimeItem]) -> TimeStatistics:
    """
    Compute aggregate statistics for a list of items.

    Args:
        items: Items already filtered for the report

    Returns:
        Totals, per-tag totals, averages, population standard deviations,
        min/max/mean and the duration ranking of tags
    """
    by_tag = durations_by_tag(items)

    count_by_tag = {tag: len(values) for tag, values in by_tag.items()}
    duration_by_tag = {tag: sum(values) for tag, values in by_tag.items()}
    average_by_tag = {
        tag: duration_by_tag[tag] / count_by_tag[tag] for tag in duration_by_tag
    }
    standard_deviation_by_tag = {
        tag: statistics.pstdev(values) for tag, values in by_tag.items()
    }
    additional_stats_by_tag = {
        tag: TagStats(min=min(values), max=max(values), mean=average_by_tag[tag])
        for tag, values in by_tag.items()
    }

    # sorted() is stable, so equal durations keep first-seen order
    sorted_duration_by_tag = sorted(
        duration_by_tag.items(), key=lambda pair: pair[1], reverse=True
    )

    total_duration = sum(duration_by_tag.values())
    item_count = sum(count_by_tag.values())
    totals = Totals(
        total=total_duration,
        avg=total_duration / item_count if item_count else 0.0,
    )

    return TimeStatistics(
        total_duration=total_duration,
        count_by_tag=count_by_tag,
        duration_by_tag=duration_by_tag,
        average_by_tag=average_by_tag,
        standard_deviation_by_tag=standard_deviation_by_tag,
        sorted_duration_by_tag=sorted_duration_by_tag,
        totals=totals,
        additional_stats_by_tag=additional_stats_by_tag,
    )


def tag_distribution(
    stats: TimeStatistics, max_bar_length: int = MAX_BAR_LENGTH
) -> List[Tuple[str, float, int]]:
    """
    Share of the total tracked time per tag.

    Returns:
        ``(tag, percentage, bar_length)`` rows in ranking order, where
        percentage is rounded to two decimals and bar_length is scaled to
        ``max_bar_length``. Empty when nothing was tracked.
    """
    total = stats.total_duration
    if total <= 0:
        return []

    rows = []
    for tag, duration in stats.sorted_duration_by_tag:
        share = duration / total
        rows.append((tag, round(share * 100, 2), round(share * max_bar_length)))
    return rows
