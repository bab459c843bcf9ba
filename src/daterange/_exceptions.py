"""
Exceptions raised by daterange.

Hierarchy::

    CalendarError
    ├── InvalidConfigError     weekend day outside 1..7, bad settings value
    ├── InvalidDateError       unparseable date string
    ├── InvalidTimezoneError   unknown IANA identifier
    └── HolidaySourceError     network / payload failure of a holiday source

HolidaySourceError never escapes BusinessCalendar; it is converted into a
local-table fallback.
"""

from __future__ import annotations


class CalendarError(Exception):
    """Base exception for all calendar-related errors."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)

    def __str__(self) -> str:
        return self.message


class InvalidConfigError(CalendarError, ValueError):
    pass


class InvalidDateError(CalendarError, ValueError):
    def __init__(self, value: object) -> None:
        self.value = value
        super().__init__(f"Invalid date: {value!r}. Use Y-m-d format.")


class InvalidTimezoneError(CalendarError, ValueError):
    def __init__(self, timezone: object) -> None:
        self.timezone = timezone
        super().__init__(f"Invalid timezone: {timezone!r}.")


class HolidaySourceError(CalendarError):
    """
    A holiday source could not deliver dates.

    Attributes:
        source: Short name of the failing source ("nager", "calendarific")
    """

    def __init__(self, source: str, message: str) -> None:
        self.source = source
        super().__init__(f"[{source}] {message}")
