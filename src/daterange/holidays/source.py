"""
Holiday sources: where a calendar gets holiday dates for a country and year.

Every source implements ``fetch(country_code, year) -> list[str]`` and
returns ISO ``YYYY-MM-DD`` strings. Remote sources raise HolidaySourceError
on any network or payload failure; FallbackHolidaySource turns that into a
lookup in a second source, so callers above it never see the error.

Typical chain, as built by build_holiday_source()::

    FallbackHolidaySource(
        CachingHolidaySource(NagerHolidaySource()),
        LocalHolidaySource(),
    )
"""

from __future__ import annotations

import logging
import time
from typing import Callable, Optional, Protocol, runtime_checkable

import httpx

from daterange import __version__
from daterange._exceptions import HolidaySourceError
from daterange.holidays.local import LocalHolidaySource

logger = logging.getLogger(__name__)

NAGER_API_BASE = "https://date.nager.at/api/v3/PublicHolidays"
CALENDARIFIC_API_BASE = "https://calendarific.com/api/v2/holidays"
DEFAULT_TIMEOUT = 10.0
DEFAULT_CACHE_TTL = 86400
USER_AGENT = f"date-range-helper/{__version__}"


@runtime_checkable
class HolidaySource(Protocol):
    def fetch(self, country_code: str, year: int) -> list[str]:
        ...


# ── remote sources ───────────────────────────────────────────────────────────

class _HttpHolidaySource:
    """Shared request handling for the JSON holiday APIs."""

    name = "http"

    def __init__(
        self,
        base_url: str,
        timeout: float = DEFAULT_TIMEOUT,
        client: Optional[httpx.Client] = None,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout
        self._client = client

    def _get_json(self, url: str, params: Optional[dict] = None):
        headers = {"User-Agent": USER_AGENT, "Accept": "application/json"}
        try:
            if self._client is not None:
                response = self._client.get(
                    url, params=params, headers=headers, timeout=self._timeout
                )
            else:
                with httpx.Client(timeout=self._timeout) as client:
                    response = client.get(url, params=params, headers=headers)
            response.raise_for_status()
            return response.json()
        except httpx.HTTPError as e:
            raise HolidaySourceError(self.name, f"request failed: {e}") from e
        except ValueError as e:
            raise HolidaySourceError(self.name, f"invalid JSON response: {e}") from e


class NagerHolidaySource(_HttpHolidaySource):
    """date.nager.at public holidays (free, no key)."""

    name = "nager"

    def __init__(
        self,
        base_url: str = NAGER_API_BASE,
        timeout: float = DEFAULT_TIMEOUT,
        client: Optional[httpx.Client] = None,
    ) -> None:
        super().__init__(base_url, timeout, client)

    def fetch(self, country_code: str, year: int) -> list[str]:
        url = f"{self._base_url}/{int(year)}/{country_code.upper()}"
        data = self._get_json(url)
        if not isinstance(data, list):
            raise HolidaySourceError(self.name, "expected a JSON list of holidays")
        return [
            str(item["date"])
            for item in data
            if isinstance(item, dict) and "date" in item
        ]


class CalendarificHolidaySource(_HttpHolidaySource):
    """calendarific.com holidays (API key required)."""

    name = "calendarific"

    def __init__(
        self,
        api_key: Optional[str],
        base_url: str = CALENDARIFIC_API_BASE,
        timeout: float = DEFAULT_TIMEOUT,
        client: Optional[httpx.Client] = None,
    ) -> None:
        super().__init__(base_url, timeout, client)
        self._api_key = api_key

    def fetch(self, country_code: str, year: int) -> list[str]:
        if not self._api_key:
            raise HolidaySourceError(self.name, "API key not set")
        data = self._get_json(
            self._base_url,
            params={
                "api_key": self._api_key,
                "country": country_code.upper(),
                "year": int(year),
            },
        )
        try:
            holidays = data["response"]["holidays"]
        except (KeyError, TypeError):
            raise HolidaySourceError(self.name, "response.holidays missing") from None

        out = []
        for item in holidays:
            iso = (item.get("date") or {}).get("iso") if isinstance(item, dict) else None
            if iso:
                # "2024-12-31T23:59:59+00:00" for timed entries
                out.append(str(iso)[:10])
        return out


# ── combinators ──────────────────────────────────────────────────────────────

class CachingHolidaySource:
    """
    Per (country, year) cache in front of another source.

    Entries expire after ``ttl`` seconds. Failures are not cached.
    """

    def __init__(
        self,
        source: HolidaySource,
        ttl: float = DEFAULT_CACHE_TTL,
        now: Callable[[], float] = time.monotonic,
    ) -> None:
        self._source = source
        self._ttl = ttl
        self._now = now
        self._entries: dict[tuple[str, int], tuple[float, list[str]]] = {}

    def fetch(self, country_code: str, year: int) -> list[str]:
        key = (country_code.upper(), int(year))
        entry = self._entries.get(key)
        if entry is not None and entry[0] > self._now():
            logger.debug("Holiday cache hit for %s/%d", *key)
            return list(entry[1])

        dates = self._source.fetch(*key)
        self._entries[key] = (self._now() + self._ttl, list(dates))
        return list(dates)

    def clear(self) -> None:
        self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)


class FallbackHolidaySource:
    """Try ``primary``; on HolidaySourceError answer from ``fallback``."""

    def __init__(self, primary: HolidaySource, fallback: HolidaySource) -> None:
        self.primary = primary
        self.fallback = fallback

    def fetch(self, country_code: str, year: int) -> list[str]:
        try:
            return self.primary.fetch(country_code, year)
        except HolidaySourceError as e:
            logger.warning(
                "Holiday source failed for %s/%s (%s); using fallback source",
                country_code, year, e,
            )
            return self.fallback.fetch(country_code, year)


def with_fallback(
    primary: HolidaySource,
    fallback: Optional[HolidaySource] = None,
) -> FallbackHolidaySource:
    return FallbackHolidaySource(
        primary, fallback if fallback is not None else LocalHolidaySource()
    )


def build_holiday_source(settings=None, client: Optional[httpx.Client] = None) -> HolidaySource:
    """Remote API chosen by settings, cached, with local fallback."""
    if settings is None:
        from daterange.settings import get_settings
        settings = get_settings()

    remote: HolidaySource
    if settings.holiday_api == "calendarific":
        remote = CalendarificHolidaySource(
            settings.calendarific_api_key,
            timeout=settings.holiday_api_timeout,
            client=client,
        )
    else:
        remote = NagerHolidaySource(timeout=settings.holiday_api_timeout, client=client)

    if settings.holiday_cache_ttl > 0:
        remote = CachingHolidaySource(remote, ttl=settings.holiday_cache_ttl)
    return with_fallback(remote)
