"""
daterange.holidays
~~~~~~~~~~~~~~~~~~

Providers of holiday dates for a country and year.

Basic usage::

    from daterange.holidays import NagerHolidaySource, with_fallback

    source = with_fallback(NagerHolidaySource())
    source.fetch("US", 2024)      # remote, or the local table on failure

Public API
----------
HolidaySource              Protocol: fetch(country_code, year) -> list[str].
NagerHolidaySource         date.nager.at client.
CalendarificHolidaySource  calendarific.com client.
LocalHolidaySource         Built-in month-day tables.
CachingHolidaySource       TTL cache per (country, year).
FallbackHolidaySource      Recovery combinator.
with_fallback              Wrap a source with a local fallback.
build_holiday_source       Chain configured from settings.
"""

from __future__ import annotations

from daterange.holidays.local import (
    LOCAL_HOLIDAYS,
    PREDEFINED_CALENDARS,
    LocalHolidaySource,
    predefined_calendar,
)
from daterange.holidays.source import (
    CachingHolidaySource,
    CalendarificHolidaySource,
    FallbackHolidaySource,
    HolidaySource,
    NagerHolidaySource,
    build_holiday_source,
    with_fallback,
)

__all__ = [
    "HolidaySource",
    "NagerHolidaySource",
    "CalendarificHolidaySource",
    "LocalHolidaySource",
    "CachingHolidaySource",
    "FallbackHolidaySource",
    "with_fallback",
    "build_holiday_source",
    "predefined_calendar",
    "LOCAL_HOLIDAYS",
    "PREDEFINED_CALENDARS",
]
