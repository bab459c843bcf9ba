"""
daterange.ranges
~~~~~~~~~~~~~~~~

Closed date intervals and the business-day operations built on them.

Basic usage::

    from daterange.calendar import BusinessCalendar
    from daterange.ranges import DateRange, merge_ranges

    cal = BusinessCalendar()
    week = DateRange.from_date("2024-01-01").to("2024-01-07")
    week.business_days_in_range(cal)                  # → 5
    week.shift_business_days(2, cal)
    week.get_business_day_ranges(cal)

    merge_ranges([week, week.shift(3)])

Public API
----------
DateRange             Immutable [start, end] interval.
sort_ranges_by_start  Stable sort by start instant.
merge_ranges          Collapse overlapping/adjacent ranges.
"""

from __future__ import annotations

from daterange.ranges.daterange import DateRange
from daterange.ranges.utils import merge_ranges, sort_ranges_by_start

__all__ = [
    "DateRange",
    "merge_ranges",
    "sort_ranges_by_start",
]
