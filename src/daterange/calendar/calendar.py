import logging
import operator
from datetime import date, datetime, timedelta
from typing import Iterable, Optional, Sequence, Union

import numpy as np

from daterange._exceptions import (
    CalendarError,
    HolidaySourceError,
    InvalidConfigError,
    InvalidDateError,
)
from daterange.holidays.local import LocalHolidaySource, predefined_calendar
from daterange.holidays.source import HolidaySource

logger = logging.getLogger(__name__)

DateLike = Union[date, datetime, str, np.datetime64]
ArrayLike = Union[DateLike, Sequence[DateLike], "np.ndarray"]

DEFAULT_WEEKEND: frozenset[int] = frozenset({6, 7})
_ONE_DAY = np.timedelta64(1, "D")


# ── date coercion ────────────────────────────────────────────────────────────

def parse_ymd(value: DateLike) -> date:
    """Strict Y-m-d parse; date/datetime inputs are projected to their date."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, np.datetime64):
        return value.astype("datetime64[D]").item()
    if isinstance(value, str):
        try:
            return datetime.strptime(value.strip(), "%Y-%m-%d").date()
        except ValueError:
            raise InvalidDateError(value) from None
    raise InvalidDateError(value)


def _as_days(values: ArrayLike) -> np.ndarray:
    if isinstance(values, np.ndarray) and np.issubdtype(values.dtype, np.datetime64):
        return values.astype("datetime64[D]")
    if np.ndim(values) == 0:
        return np.datetime64(parse_ymd(values), "D")
    arr = np.asarray(values, dtype=object)
    flat = [parse_ymd(v) for v in arr.ravel()]
    return np.array(flat, dtype="datetime64[D]").reshape(arr.shape)


def _shift_like(value: DateLike, days: int) -> DateLike:
    """Move ``value`` by whole calendar days, keeping its type (and time/tz)."""
    if isinstance(value, (date, datetime)):
        return value + timedelta(days=days)
    if isinstance(value, np.datetime64):
        return value + np.timedelta64(days, "D")
    return (parse_ymd(value) + timedelta(days=days)).isoformat()


class BusinessCalendar:
    """
    Weekend days + holiday dates, compiled into a ``numpy.busdaycalendar``.

    The compiled form is rebuilt lazily after any mutation. Weekday numbers
    follow ISO 8601: 1=Monday .. 7=Sunday.
    """

    def __init__(
        self,
        weekend_days: Iterable[int] = DEFAULT_WEEKEND,
        holidays: Optional[Iterable[DateLike]] = None,
        source: Optional[HolidaySource] = None,
        default_country: Optional[str] = None,
    ) -> None:
        self._weekend: frozenset[int] = DEFAULT_WEEKEND
        self._holidays: set[date] = set()
        self._loaded: set[tuple[str, int]] = set()
        self._compiled: Optional[np.busdaycalendar] = None
        self._dirty = True

        self._source: HolidaySource = source if source is not None else LocalHolidaySource()
        self.default_country: Optional[str] = (
            default_country.upper() if default_country else None
        )

        self.set_weekend_days(weekend_days)
        if holidays:
            self.add_holidays(holidays)

    @classmethod
    def from_settings(cls, settings=None, source: Optional[HolidaySource] = None) -> "BusinessCalendar":
        """Calendar seeded from DATE_RANGE_HELPER_* environment settings."""
        from daterange.holidays.source import build_holiday_source
        from daterange.settings import get_settings

        settings = settings if settings is not None else get_settings()
        return cls(
            weekend_days=settings.weekend_day_numbers,
            holidays=settings.holiday_dates,
            source=source if source is not None else build_holiday_source(settings),
            default_country=settings.country,
        )

    # ── compiled calendar ────────────────────────────────────────────────

    def _invalidate(self) -> None:
        self._dirty = True

    def _busdaycal(self) -> Optional[np.busdaycalendar]:
        """None when every weekday is a weekend day."""
        if self._dirty:
            weekmask = [0 if d in self._weekend else 1 for d in range(1, 8)]
            if any(weekmask):
                self._compiled = np.busdaycalendar(
                    weekmask=weekmask,
                    holidays=np.array(sorted(self._holidays), dtype="datetime64[D]"),
                )
            else:
                self._compiled = None
            self._dirty = False
        return self._compiled

    def _require_busdaycal(self) -> np.busdaycalendar:
        cal = self._busdaycal()
        if cal is None:
            raise CalendarError(
                "All weekdays are weekend days; no business day can be reached."
            )
        return cal

    # ── weekend management ───────────────────────────────────────────────

    def set_weekend_days(self, days: Iterable[int]) -> None:
        validated = set()
        for day in days:
            try:
                if isinstance(day, bool):
                    raise TypeError
                n = operator.index(day)
            except TypeError:
                raise InvalidConfigError(f"Invalid day number: {day!r}. Must be 1-7") from None
            if not 1 <= n <= 7:
                raise InvalidConfigError(f"Invalid day number: {n}. Must be 1-7")
            validated.add(n)
        self._weekend = frozenset(validated)
        self._invalidate()

    @property
    def weekend_days(self) -> frozenset[int]:
        return self._weekend

    # ── holiday management ───────────────────────────────────────────────

    def add_holiday(self, value: DateLike) -> None:
        self._holidays.add(parse_ymd(value))
        self._invalidate()

    def add_holidays(self, values: Iterable[DateLike]) -> None:
        """All-or-nothing: nothing is added if any entry fails to parse."""
        parsed = [parse_ymd(v) for v in values]
        if parsed:
            self._holidays.update(parsed)
            self._invalidate()

    def remove_holiday(self, value: DateLike) -> None:
        d = parse_ymd(value)
        if d in self._holidays:
            self._holidays.discard(d)
            self._invalidate()

    def get_holidays(self) -> list[str]:
        return [d.isoformat() for d in sorted(self._holidays)]

    @property
    def holidays(self) -> frozenset[date]:
        return frozenset(self._holidays)

    def clear_holidays(self) -> None:
        self._holidays.clear()
        self._loaded.clear()
        self._invalidate()

    def load_holiday_calendar(self, name: str) -> None:
        dates = predefined_calendar(name)
        if not dates:
            logger.debug("Unknown holiday calendar %r; nothing loaded", name)
            return
        self.add_holidays(dates)

    def load_holidays_from_source(self, country_code: str, year: int) -> list[str]:
        """
        Merge the holidays of ``country_code`` in ``year`` into this calendar.

        Returns the dates that were merged. Source failures fall back to the
        local tables; an unsupported country yields an empty list.
        """
        country = country_code.upper()
        year = int(year)
        try:
            raw = self._source.fetch(country, year)
        except HolidaySourceError as e:
            logger.warning("Holiday source failed for %s/%d (%s); using local data", country, year, e)
            raw = LocalHolidaySource().fetch(country, year)

        merged = []
        for value in raw:
            try:
                merged.append(parse_ymd(value))
            except InvalidDateError:
                logger.warning("Skipping malformed holiday %r for %s/%d", value, country, year)

        self._holidays.update(merged)
        self._loaded.add((country, year))
        self._invalidate()
        logger.debug("Loaded %d holidays for %s/%d", len(merged), country, year)
        return [d.isoformat() for d in merged]

    def load_holidays_for_years(self, country_code: Optional[str], years: Iterable[int]) -> None:
        """
        Load every year not loaded yet. ``None`` means the default country;
        with no default country this is a no-op.
        """
        country = country_code or self.default_country
        if not country:
            return
        country = country.upper()
        for year in years:
            if (country, int(year)) not in self._loaded:
                self.load_holidays_from_source(country, year)

    @property
    def source(self) -> HolidaySource:
        return self._source

    # ── predicate / walker / count ───────────────────────────────────────

    def is_business_day(self, value: ArrayLike):
        days = _as_days(value)
        cal = self._busdaycal()
        if cal is None:
            result = np.zeros(np.shape(days), dtype=bool)
        else:
            result = np.is_busday(days, busdaycal=cal)
        return bool(result) if np.ndim(result) == 0 else result

    def next_business_day(self, value: ArrayLike):
        """First business day strictly after ``value``."""
        return self._walk(value, forward=True)

    def previous_business_day(self, value: ArrayLike):
        """Last business day strictly before ``value``."""
        return self._walk(value, forward=False)

    def _walk(self, value: ArrayLike, forward: bool):
        cal = self._require_busdaycal()
        days = _as_days(value)
        if forward:
            found = np.busday_offset(days + _ONE_DAY, 0, roll="forward", busdaycal=cal)
        else:
            found = np.busday_offset(days - _ONE_DAY, 0, roll="backward", busdaycal=cal)
        if np.ndim(found) > 0:
            return found
        return _shift_like(value, int((found - days) // _ONE_DAY))

    def count_business_days(self, start: ArrayLike, end: ArrayLike):
        """Business days in [start, end], inclusive. 0 when start > end."""
        s = _as_days(start)
        e = _as_days(end)
        cal = self._busdaycal()
        if cal is None:
            counts = np.zeros(np.broadcast(s, e).shape, dtype=np.int64)
        else:
            counts = np.maximum(np.busday_count(s, e + _ONE_DAY, busdaycal=cal), 0)
        return int(counts) if np.ndim(counts) == 0 else counts

    def reset(self) -> None:
        self._weekend = DEFAULT_WEEKEND
        self._holidays.clear()
        self._loaded.clear()
        self._invalidate()

    # ── repr ─────────────────────────────────────────────────────────────

    def __repr__(self) -> str:
        return (
            f"BusinessCalendar(weekend_days={sorted(self._weekend)}, "
            f"holidays={len(self._holidays)}, "
            f"default_country={self.default_country!r}, "
            f"source={type(self._source).__name__})"
        )
