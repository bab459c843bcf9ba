"""
daterange
~~~~~~~~~

Closed date intervals with business-day arithmetic: counting working days,
skipping weekends and holidays, shifting by business days, splitting a range
into business-day runs and merging overlapping ranges.

Basic usage::

    from daterange import BusinessCalendar, DateRange

    cal = BusinessCalendar.from_settings()        # DATE_RANGE_HELPER_* env
    r = DateRange.from_date("2024-01-01").to("2024-01-31")
    r.business_days_in_range(cal, "US")
"""

from __future__ import annotations

import logging

__version__ = "1.0.0"

from daterange._exceptions import (  # noqa: E402
    CalendarError,
    HolidaySourceError,
    InvalidConfigError,
    InvalidDateError,
    InvalidTimezoneError,
)
from daterange.calendar import BusinessCalendar  # noqa: E402
from daterange.clock import Clock  # noqa: E402
from daterange.ranges import DateRange, merge_ranges, sort_ranges_by_start  # noqa: E402

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    "BusinessCalendar",
    "Clock",
    "DateRange",
    "merge_ranges",
    "sort_ranges_by_start",
    "CalendarError",
    "HolidaySourceError",
    "InvalidConfigError",
    "InvalidDateError",
    "InvalidTimezoneError",
]
