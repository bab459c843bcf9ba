"""
Built-in holiday tables.

Two kinds of data live here:

- PREDEFINED_CALENDARS: complete dated lists for a fixed reference year,
  loaded by name through BusinessCalendar.load_holiday_calendar().
- LOCAL_HOLIDAYS: month-day pairs per country, expanded for any year.
  Movable feasts are pinned to their 2024 dates; this table is only the
  fallback when a remote source is unavailable.
"""

from __future__ import annotations

import logging

logger = logging.getLogger(__name__)

PREDEFINED_CALENDARS: dict[str, tuple[str, ...]] = {
    "US": (
        "2024-01-01",  # New Year's Day
        "2024-01-15",  # Martin Luther King Jr. Day
        "2024-02-19",  # Presidents' Day
        "2024-05-27",  # Memorial Day
        "2024-07-04",  # Independence Day
        "2024-09-02",  # Labor Day
        "2024-10-14",  # Columbus Day
        "2024-11-11",  # Veterans Day
        "2024-11-28",  # Thanksgiving Day
        "2024-12-25",  # Christmas Day
    ),
    "EU": (
        "2024-01-01",
        "2024-05-01",
        "2024-05-08",
        "2024-12-25",
        "2024-12-26",
    ),
    "TR": (
        "2024-01-01",
        "2024-04-10",  # Ramadan Feast (approximate)
        "2024-04-11",
        "2024-04-12",
        "2024-04-23",
        "2024-05-01",
        "2024-05-19",
        "2024-06-16",  # Sacrifice Feast (approximate)
        "2024-06-17",
        "2024-06-18",
        "2024-06-19",
        "2024-07-15",
        "2024-08-30",
        "2024-10-29",
    ),
}

LOCAL_HOLIDAYS: dict[str, tuple[str, ...]] = {
    "US": (
        "01-01", "01-15", "02-19", "05-27", "07-04",
        "09-02", "10-14", "11-11", "11-28", "12-25",
    ),
    "FR": (
        "01-01", "05-01", "05-08", "07-14",
        "08-15", "11-01", "11-11", "12-25",
    ),
    "DE": ("01-01", "05-01", "10-03", "12-25", "12-26"),
    "GB": ("01-01", "12-25", "12-26"),
    "TR": ("01-01", "04-23", "05-01", "05-19", "07-15", "08-30", "10-29"),
}


def predefined_calendar(name: str) -> list[str]:
    return list(PREDEFINED_CALENDARS.get(name.upper(), ()))


class LocalHolidaySource:
    """Holiday source backed by LOCAL_HOLIDAYS; never fails."""

    name = "local"

    def fetch(self, country_code: str, year: int) -> list[str]:
        month_days = LOCAL_HOLIDAYS.get(country_code.upper())
        if month_days is None:
            logger.debug("No local holidays for %s", country_code)
            return []
        return [f"{int(year):04d}-{md}" for md in month_days]

    @staticmethod
    def supported_countries() -> list[str]:
        return list(LOCAL_HOLIDAYS)

    @classmethod
    def is_country_supported(cls, country_code: str) -> bool:
        return country_code.upper() in LOCAL_HOLIDAYS

    def __repr__(self) -> str:
        return f"LocalHolidaySource(countries={self.supported_countries()})"
