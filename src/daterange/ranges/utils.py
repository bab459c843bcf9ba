from __future__ import annotations

from datetime import timedelta
from typing import Iterable

from daterange.ranges.daterange import DateRange


def sort_ranges_by_start(ranges: Iterable[DateRange]) -> list[DateRange]:
    """Stable ascending sort on the start instant."""
    return sorted(ranges, key=lambda r: r.start)


def _touches(current: DateRange, nxt: DateRange) -> bool:
    return (
        current.overlaps(nxt)
        or current.end_date + timedelta(days=1) == nxt.start_date
    )


def merge_ranges(ranges: Iterable[DateRange]) -> list[DateRange]:
    """
    Collapse overlapping or calendar-day-adjacent ranges.

    The result is sorted, and no two of its ranges overlap or touch.
    """
    ranges = list(ranges)
    if len(ranges) <= 1:
        return ranges

    sorted_ranges = sort_ranges_by_start(ranges)
    merged: list[DateRange] = []
    current = sorted_ranges[0]

    for nxt in sorted_ranges[1:]:
        if _touches(current, nxt):
            current = DateRange.from_objects(
                min(current.start, nxt.start),
                max(current.end, nxt.end),
                current.clock,
            )
        else:
            merged.append(current)
            current = nxt

    merged.append(current)
    return merged
