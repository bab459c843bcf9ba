from __future__ import annotations

import logging
from datetime import date, datetime, time, timedelta, tzinfo
from functools import lru_cache
from typing import Optional, Union
from zoneinfo import ZoneInfo, available_timezones

from daterange._exceptions import InvalidDateError, InvalidTimezoneError

logger = logging.getLogger(__name__)

DateLike = Union[str, date, datetime]


@lru_cache(maxsize=1)
def _known_timezones() -> frozenset[str]:
    return frozenset(available_timezones())


def is_valid_timezone(name: object) -> bool:
    return isinstance(name, str) and name in _known_timezones()


def _named_zone(name: str) -> ZoneInfo:
    if not is_valid_timezone(name):
        raise InvalidTimezoneError(name)
    return ZoneInfo(name)


def _offset_zone(name: str) -> Optional[tzinfo]:
    # "+03:00" style fixed offsets, as produced by zone_name().
    if name[:1] not in ("+", "-"):
        return None
    try:
        return datetime.strptime(name, "%z").tzinfo
    except ValueError:
        return None


def _zone(name: Union[str, tzinfo]) -> tzinfo:
    if isinstance(name, tzinfo):
        return name
    if isinstance(name, str) and not is_valid_timezone(name):
        offset = _offset_zone(name)
        if offset is not None:
            return offset
    return _named_zone(name)


def zone_name(tz: Optional[tzinfo]) -> str:
    """
    IANA key of a ZoneInfo, otherwise a "+HH:MM" offset.

    Either form is accepted back by Clock.convert() and DateRange.to_timezone().
    """
    if tz is None:
        return "UTC"
    key = getattr(tz, "key", None)
    if key:
        return key
    offset = tz.utcoffset(None)
    if offset is None:
        return tz.tzname(None) or "UTC"
    if not offset:
        return "UTC"
    sign = "-" if offset < timedelta(0) else "+"
    minutes = abs(offset) // timedelta(minutes=1)
    return f"{sign}{minutes // 60:02d}:{minutes % 60:02d}"


class Clock:
    """
    Maps date strings to timezone-aware datetimes.

    Naive inputs are placed in the clock's zone (or the zone passed to
    parse()); inputs carrying an offset keep it.
    """

    def __init__(self, timezone: str = "UTC") -> None:
        self._zone = _named_zone(timezone)
        self._initial = timezone

    @classmethod
    def from_settings(cls, settings=None) -> "Clock":
        if settings is None:
            from daterange.settings import get_settings
            settings = get_settings()
        return cls(settings.timezone)

    # ── zone management ──────────────────────────────────────────────────

    @property
    def timezone(self) -> str:
        return self._zone.key

    def set_timezone(self, timezone: str) -> None:
        self._zone = _named_zone(timezone)

    def reset_timezone(self) -> None:
        self._zone = ZoneInfo(self._initial)

    @staticmethod
    def is_valid_timezone(name: object) -> bool:
        return is_valid_timezone(name)

    # ── parse / convert ──────────────────────────────────────────────────

    def parse(
        self, value: DateLike, timezone: Union[str, tzinfo, None] = None
    ) -> datetime:
        zone = self._zone if timezone is None else _zone(timezone)

        if isinstance(value, datetime):
            parsed = value
        elif isinstance(value, date):
            parsed = datetime.combine(value, time())
        elif isinstance(value, str):
            text = value.strip()
            if not text:
                raise InvalidDateError(value)
            try:
                parsed = datetime.fromisoformat(text)
            except ValueError:
                raise InvalidDateError(value) from None
        else:
            raise InvalidDateError(value)

        if parsed.tzinfo is None:
            parsed = parsed.replace(tzinfo=zone)
        return parsed

    def convert(self, instant: datetime, timezone: str) -> datetime:
        """Same instant seen in an IANA zone or a "+HH:MM" fixed offset."""
        zone = _zone(timezone)
        if instant.tzinfo is None:
            instant = instant.replace(tzinfo=self._zone)
        return instant.astimezone(zone)

    def __repr__(self) -> str:
        return f"Clock(timezone={self.timezone!r})"


_default: Optional[Clock] = None


def default_clock() -> Clock:
    """Process-wide clock, built from settings on first use."""
    global _default
    if _default is None:
        _default = Clock.from_settings()
        logger.debug("Default clock initialised in %s", _default.timezone)
    return _default


def reset_default_clock() -> None:
    """Forget the process-wide clock so the next call re-reads settings."""
    global _default
    _default = None
