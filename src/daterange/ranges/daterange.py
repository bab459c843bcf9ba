from __future__ import annotations

from datetime import date, datetime, time, timedelta
from typing import Iterator, Optional, Union

import numpy as np

from daterange.calendar import BusinessCalendar
from daterange.clock import Clock, default_clock
from daterange.clock.clock import zone_name

DateLike = Union[str, date, datetime]


class DateRange:
    """
    Immutable closed interval [start, end] of timezone-aware instants.

    Every transforming method returns a new DateRange.  A range whose start
    falls after its end is *degenerate*: it is treated as empty, so its
    duration is 0 and it contains no days.  The end is held in the zone of
    the start, so both calendar dates are read in one zone.
    """

    __slots__ = ("_start", "_end", "_clock")

    def __init__(
        self,
        start: datetime,
        end: datetime,
        clock: Optional[Clock] = None,
    ) -> None:
        self._clock: Clock = clock if clock is not None else default_clock()
        self._start: datetime = self._clock.parse(start)
        self._end: datetime = self._clock.parse(end, self._start.tzinfo).astimezone(
            self._start.tzinfo
        )

    # ── construction ─────────────────────────────────────────────────────

    @classmethod
    def from_date(cls, start: DateLike, clock: Optional[Clock] = None) -> "DateRange":
        """Single-instant range; extend it with to()."""
        clock = clock if clock is not None else default_clock()
        instant = clock.parse(start)
        return cls(instant, instant, clock)

    @classmethod
    def from_objects(
        cls, start: datetime, end: datetime, clock: Optional[Clock] = None
    ) -> "DateRange":
        return cls(start, end, clock)

    def to(self, end: DateLike) -> "DateRange":
        return DateRange(self._start, self._instant(end), self._clock)

    def _instant(self, value: DateLike) -> datetime:
        # Naive values are read in the zone of the start instant.
        return self._clock.parse(value, self._start.tzinfo)

    def _with(self, start: datetime, end: datetime) -> "DateRange":
        return DateRange(start, end, self._clock)

    # ── accessors ────────────────────────────────────────────────────────

    @property
    def start(self) -> datetime:
        return self._start

    @property
    def end(self) -> datetime:
        return self._end

    @property
    def start_date(self) -> date:
        return self._start.date()

    @property
    def end_date(self) -> date:
        return self._end.date()

    @property
    def clock(self) -> Clock:
        return self._clock

    @property
    def is_empty(self) -> bool:
        return self._start > self._end

    # ── interval algebra ─────────────────────────────────────────────────

    def contains(self, value: DateLike) -> bool:
        instant = self._instant(value)
        return self._start <= instant <= self._end

    def overlaps(self, other: "DateRange") -> bool:
        return self._start <= other._end and other._start <= self._end

    def shift(self, days: int) -> "DateRange":
        delta = timedelta(days=days)
        return self._with(self._start + delta, self._end + delta)

    def duration_in_days(self) -> int:
        if self.is_empty:
            return 0
        return (self.end_date - self.start_date).days + 1

    def days(self) -> np.ndarray:
        """Calendar dates covered by the range as ``datetime64[D]``."""
        if self.is_empty:
            return np.array([], dtype="datetime64[D]")
        return np.arange(
            np.datetime64(self.start_date, "D"),
            np.datetime64(self.end_date, "D") + np.timedelta64(1, "D"),
            dtype="datetime64[D]",
        )

    def __iter__(self) -> Iterator[date]:
        if self.is_empty:
            return
        current = self.start_date
        while current <= self.end_date:
            yield current
            current += timedelta(days=1)

    # ── timezone ─────────────────────────────────────────────────────────

    @property
    def timezone(self) -> str:
        return zone_name(self._start.tzinfo)

    def get_timezone(self) -> str:
        return self.timezone

    def to_timezone(self, timezone: str) -> "DateRange":
        """Same instants in another IANA zone or "+HH:MM" offset."""
        return self._with(
            self._clock.convert(self._start, timezone),
            self._clock.convert(self._end, timezone),
        )

    # ── business days ────────────────────────────────────────────────────

    def _years(self) -> range:
        return range(self._start.year, self._end.year + 1)

    def business_days_in_range(
        self, calendar: BusinessCalendar, country: Optional[str] = None
    ) -> int:
        if self.is_empty:
            return 0
        calendar.load_holidays_for_years(country, self._years())
        return calendar.count_business_days(self.start_date, self.end_date)

    def non_business_days_in_range(
        self, calendar: BusinessCalendar, country: Optional[str] = None
    ) -> int:
        return self.duration_in_days() - self.business_days_in_range(calendar, country)

    def shift_business_days(
        self, n: int, calendar: BusinessCalendar, country: Optional[str] = None
    ) -> "DateRange":
        """
        Move both endpoints by ``n`` business days.

        Each endpoint is walked on its own, so the calendar-day length of the
        result can differ from this range when holidays fall unevenly.
        """
        if n == 0:
            return self
        return self._with(
            _walk(calendar, country, self._start, n),
            _walk(calendar, country, self._end, n),
        )

    def expand_to_business_days(
        self, calendar: BusinessCalendar, country: Optional[str] = None
    ) -> "DateRange":
        """
        Move start forward and end backward onto business days.

        A range holding no business day comes back degenerate (start > end).
        """
        calendar.load_holidays_for_years(
            country, range(self._start.year, self._start.year + 2)
        )
        calendar.load_holidays_for_years(
            country, range(self._end.year - 1, self._end.year + 1)
        )
        start, end = self._start, self._end
        if not calendar.is_business_day(start):
            start = calendar.next_business_day(start)
        if not calendar.is_business_day(end):
            end = calendar.previous_business_day(end)
        return self._with(start, end)

    def get_business_day_ranges(
        self, calendar: BusinessCalendar, country: Optional[str] = None
    ) -> list["DateRange"]:
        """
        Maximal runs of consecutive business days, in order.

        A run touching either end of this range keeps that end's instant;
        inner run edges fall on the start and end of their day.
        """
        days = self.days()
        if not days.size:
            return []
        calendar.load_holidays_for_years(country, self._years())
        mask = calendar.is_business_day(days)

        edges = np.diff(np.concatenate(([0], mask.astype(np.int8), [0])))
        run_starts = np.flatnonzero(edges == 1)
        run_ends = np.flatnonzero(edges == -1) - 1

        tz = self._start.tzinfo
        first, last = self.start_date, self.end_date
        runs = []
        for a, b in zip(run_starts, run_ends):
            day_a = first + timedelta(days=int(a))
            day_b = first + timedelta(days=int(b))
            start = self._start if day_a == first else datetime.combine(day_a, time.min, tzinfo=tz)
            end = self._end if day_b == last else datetime.combine(day_b, time.max, tzinfo=tz)
            runs.append(self._with(start, end))
        return runs

    def is_business_days_only(
        self, calendar: BusinessCalendar, country: Optional[str] = None
    ) -> bool:
        calendar.load_holidays_for_years(country, self._years())
        for day in self:
            if not calendar.is_business_day(day):
                return False
        return True

    # ── dunder ───────────────────────────────────────────────────────────

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, DateRange):
            return NotImplemented
        return self._start == other._start and self._end == other._end

    def __hash__(self) -> int:
        return hash((self._start, self._end))

    def __repr__(self) -> str:
        return (
            f"DateRange(start={self._start.isoformat()}, "
            f"end={self._end.isoformat()}, "
            f"timezone={self.timezone!r})"
        )


def _walk(
    calendar: BusinessCalendar,
    country: Optional[str],
    instant: datetime,
    n: int,
) -> datetime:
    step = 1 if n > 0 else -1
    current = instant
    for _ in range(abs(n)):
        # Holidays of the year being walked into must be known before the step.
        calendar.load_holidays_for_years(country, (current.year, current.year + step))
        if step > 0:
            current = calendar.next_business_day(current)
        else:
            current = calendar.previous_business_day(current)
    return current
