"""
tests/holidays/test_holiday_sources.py

Covers:
  - Nager client: URL, headers, payload parsing, HTTP / transport / JSON errors
  - Calendarific client: API key, query params, ISO truncation, bad payloads
  - Local tables for any year, supported countries
  - TTL cache (hits, expiry, errors not cached, clear)
  - Fallback combinator and the settings-built chain
"""

import httpx
import pytest

from daterange._exceptions import HolidaySourceError
from daterange.holidays import (
    CachingHolidaySource,
    CalendarificHolidaySource,
    FallbackHolidaySource,
    HolidaySource,
    LocalHolidaySource,
    NagerHolidaySource,
    build_holiday_source,
    predefined_calendar,
    with_fallback,
)
from daterange.settings import Settings


# ── Helpers ───────────────────────────────────────────────────────────────────

def mock_client(handler):
    return httpx.Client(transport=httpx.MockTransport(handler))


NAGER_PAYLOAD = [
    {"date": "2024-01-01", "localName": "New Year's Day", "countryCode": "US"},
    {"date": "2024-07-04", "localName": "Independence Day", "countryCode": "US"},
    {"localName": "no date"},
]


class CountingSource:
    def __init__(self, result=None, fail=False):
        self.result = result if result is not None else ["2024-01-01"]
        self.fail = fail
        self.calls = 0

    def fetch(self, country_code, year):
        self.calls += 1
        if self.fail:
            raise HolidaySourceError("stub", "down")
        return list(self.result)


class FakeTime:
    def __init__(self):
        self.now = 1000.0

    def __call__(self):
        return self.now


# ── Nager ─────────────────────────────────────────────────────────────────────

class TestNager:

    def test_fetch_parses_dates(self):
        seen = {}

        def handler(request):
            seen["path"] = request.url.path
            seen["ua"] = request.headers["user-agent"]
            return httpx.Response(200, json=NAGER_PAYLOAD)

        source = NagerHolidaySource(client=mock_client(handler))
        assert source.fetch("us", 2024) == ["2024-01-01", "2024-07-04"]
        assert seen["path"] == "/api/v3/PublicHolidays/2024/US"
        assert seen["ua"].startswith("date-range-helper/")

    def test_custom_base_url(self):
        def handler(request):
            assert str(request.url) == "https://holidays.example/v3/2025/DE"
            return httpx.Response(200, json=[])

        source = NagerHolidaySource("https://holidays.example/v3/", client=mock_client(handler))
        assert source.fetch("DE", 2025) == []

    def test_http_error_raises(self):
        source = NagerHolidaySource(client=mock_client(lambda r: httpx.Response(404)))
        with pytest.raises(HolidaySourceError) as exc:
            source.fetch("ZZ", 2024)
        assert exc.value.source == "nager"

    def test_transport_error_raises(self):
        def handler(request):
            raise httpx.ConnectError("connection refused", request=request)

        with pytest.raises(HolidaySourceError):
            NagerHolidaySource(client=mock_client(handler)).fetch("US", 2024)

    def test_invalid_json_raises(self):
        source = NagerHolidaySource(client=mock_client(lambda r: httpx.Response(200, text="<html>")))
        with pytest.raises(HolidaySourceError):
            source.fetch("US", 2024)

    def test_non_list_payload_raises(self):
        source = NagerHolidaySource(client=mock_client(lambda r: httpx.Response(200, json={"error": 1})))
        with pytest.raises(HolidaySourceError):
            source.fetch("US", 2024)

    def test_satisfies_protocol(self):
        assert isinstance(NagerHolidaySource(), HolidaySource)


# ── Calendarific ──────────────────────────────────────────────────────────────

class TestCalendarific:

    def test_missing_key_raises_without_request(self):
        def handler(request):
            raise AssertionError("no request expected")

        source = CalendarificHolidaySource(None, client=mock_client(handler))
        with pytest.raises(HolidaySourceError, match="API key"):
            source.fetch("US", 2024)

    def test_fetch_parses_iso_dates(self):
        seen = {}

        def handler(request):
            seen.update(request.url.params)
            return httpx.Response(200, json={"response": {"holidays": [
                {"name": "New Year", "date": {"iso": "2024-01-01"}},
                {"name": "DST", "date": {"iso": "2024-03-10T02:00:00-05:00"}},
                {"name": "broken"},
            ]}})

        source = CalendarificHolidaySource("secret", client=mock_client(handler))
        assert source.fetch("us", 2024) == ["2024-01-01", "2024-03-10"]
        assert seen == {"api_key": "secret", "country": "US", "year": "2024"}

    def test_missing_holidays_raises(self):
        source = CalendarificHolidaySource(
            "secret", client=mock_client(lambda r: httpx.Response(200, json={"meta": {"code": 401}}))
        )
        with pytest.raises(HolidaySourceError):
            source.fetch("US", 2024)


# ── Local tables ──────────────────────────────────────────────────────────────

class TestLocal:

    def test_us_for_any_year(self):
        holidays = LocalHolidaySource().fetch("US", 2025)
        assert len(holidays) == 10
        assert "2025-07-04" in holidays

    def test_fr(self):
        holidays = LocalHolidaySource().fetch("fr", 2024)
        assert "2024-07-14" in holidays
        assert "2024-08-15" in holidays

    def test_unsupported_country_is_empty(self):
        assert LocalHolidaySource().fetch("XX", 2024) == []

    def test_supported_countries(self):
        assert set(LocalHolidaySource.supported_countries()) == {"US", "FR", "DE", "GB", "TR"}

    def test_is_country_supported(self):
        assert LocalHolidaySource.is_country_supported("us")
        assert not LocalHolidaySource.is_country_supported("XX")

    def test_predefined_calendar(self):
        assert predefined_calendar("eu")[0] == "2024-01-01"
        assert predefined_calendar("nowhere") == []


# ── Cache ─────────────────────────────────────────────────────────────────────

class TestCache:

    def test_second_fetch_is_cached(self):
        inner = CountingSource()
        cache = CachingHolidaySource(inner)
        assert cache.fetch("US", 2024) == cache.fetch("us", 2024)
        assert inner.calls == 1
        assert len(cache) == 1

    def test_keys_by_country_and_year(self):
        inner = CountingSource()
        cache = CachingHolidaySource(inner)
        cache.fetch("US", 2024)
        cache.fetch("US", 2025)
        cache.fetch("FR", 2024)
        assert inner.calls == 3

    def test_entries_expire(self):
        inner = CountingSource()
        clock = FakeTime()
        cache = CachingHolidaySource(inner, ttl=60, now=clock)
        cache.fetch("US", 2024)
        clock.now += 61
        cache.fetch("US", 2024)
        assert inner.calls == 2

    def test_errors_not_cached(self):
        inner = CountingSource(fail=True)
        cache = CachingHolidaySource(inner)
        for _ in range(2):
            with pytest.raises(HolidaySourceError):
                cache.fetch("US", 2024)
        assert inner.calls == 2
        assert len(cache) == 0

    def test_clear(self):
        inner = CountingSource()
        cache = CachingHolidaySource(inner)
        cache.fetch("US", 2024)
        cache.clear()
        cache.fetch("US", 2024)
        assert inner.calls == 2

    def test_returned_list_is_a_copy(self):
        cache = CachingHolidaySource(CountingSource())
        cache.fetch("US", 2024).append("2099-01-01")
        assert cache.fetch("US", 2024) == ["2024-01-01"]


# ── Fallback ──────────────────────────────────────────────────────────────────

class TestFallback:

    def test_primary_result_used(self):
        source = FallbackHolidaySource(CountingSource(["2024-02-02"]), LocalHolidaySource())
        assert source.fetch("US", 2024) == ["2024-02-02"]

    def test_failure_uses_fallback(self, caplog):
        source = with_fallback(CountingSource(fail=True))
        with caplog.at_level("WARNING"):
            holidays = source.fetch("US", 2024)
        assert "2024-01-01" in holidays
        assert "using fallback source" in caplog.text

    def test_failure_for_unsupported_country(self):
        assert with_fallback(CountingSource(fail=True)).fetch("XX", 2024) == []

    def test_explicit_fallback(self):
        source = with_fallback(CountingSource(fail=True), CountingSource(["2024-12-24"]))
        assert source.fetch("US", 2024) == ["2024-12-24"]

    def test_http_failure_end_to_end(self):
        nager = NagerHolidaySource(client=mock_client(lambda r: httpx.Response(503)))
        assert "2024-12-25" in with_fallback(nager).fetch("GB", 2024)


# ── Settings-built chain ──────────────────────────────────────────────────────

class TestBuild:

    def test_nager_chain_with_cache(self):
        calls = []

        def handler(request):
            calls.append(request.url.path)
            return httpx.Response(200, json=NAGER_PAYLOAD)

        source = build_holiday_source(Settings(_env_file=None), client=mock_client(handler))
        assert isinstance(source, FallbackHolidaySource)
        assert isinstance(source.primary, CachingHolidaySource)
        source.fetch("US", 2024)
        source.fetch("US", 2024)
        assert calls == ["/api/v3/PublicHolidays/2024/US"]

    def test_cache_disabled(self):
        settings = Settings(_env_file=None, holiday_cache_ttl=0)
        source = build_holiday_source(settings)
        assert isinstance(source.primary, NagerHolidaySource)

    def test_calendarific_without_key_falls_back(self):
        settings = Settings(_env_file=None, holiday_api="calendarific")
        source = build_holiday_source(settings)
        assert "2024-05-01" in source.fetch("DE", 2024)
