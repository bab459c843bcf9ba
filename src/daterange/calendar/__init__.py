"""
daterange.calendar
~~~~~~~~~~~~~~~~~~

Business-day semantics over plain calendar dates.  A BusinessCalendar holds
the weekend weekdays and holiday dates, compiles them into a
``numpy.busdaycalendar`` and answers "is this a business day", "which is the
next/previous one" and "how many are there between two dates".

Basic usage::

    from daterange.calendar import BusinessCalendar

    cal = BusinessCalendar()                      # Sat/Sun weekend
    cal.add_holiday("2024-01-02")
    cal.is_business_day("2024-01-02")             # → False
    cal.next_business_day(date(2024, 1, 5))       # → date(2024, 1, 8)
    cal.count_business_days("2024-01-01", "2024-01-05")   # → 4

NumPy arrays are accepted by is_business_day and count_business_days::

    import numpy as np
    days = np.arange("2024-01-01", "2024-01-08", dtype="datetime64[D]")
    cal.is_business_day(days)

Public API
----------
BusinessCalendar  The configuration object passed to every range operation.
CalendarError     Base exception for all calendar-related errors.
"""

from __future__ import annotations

from daterange._exceptions import CalendarError
from daterange.calendar.calendar import DEFAULT_WEEKEND, BusinessCalendar, parse_ymd

__all__ = [
    "BusinessCalendar",
    "CalendarError",
    "DEFAULT_WEEKEND",
    "parse_ymd",
]
