"""
Environment configuration using Pydantic Settings.

All variables share the ``DATE_RANGE_HELPER_`` prefix:

- COUNTRY: default country for automatic holiday loading (default "US")
- TIMEZONE: IANA zone used to parse date strings (default "UTC")
- WEEKEND_DAYS: comma-separated ISO weekday numbers (default "6,7")
- HOLIDAYS: comma-separated Y-m-d dates added to every calendar
- HOLIDAY_API: "nager" or "calendarific" (default "nager")
- CALENDARIFIC_API_KEY: required when HOLIDAY_API=calendarific
- HOLIDAY_API_TIMEOUT: request timeout in seconds (default 10)
- HOLIDAY_CACHE_TTL: lifetime of cached holiday responses in seconds

Usage::

    from daterange.settings import get_settings

    country = get_settings().country
"""

from __future__ import annotations

import logging
from functools import lru_cache
from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from daterange._exceptions import InvalidConfigError
from daterange.clock.clock import is_valid_timezone

logger = logging.getLogger(__name__)

DEFAULT_TIMEZONE = "UTC"


class Settings(BaseSettings):

    country: str = Field(
        default="US",
        description="ISO 3166-1 alpha-2 country used when no country is given",
    )
    timezone: str = Field(
        default=DEFAULT_TIMEZONE,
        description="IANA timezone used when parsing date strings",
    )
    weekend_days: str = Field(
        default="6,7",
        description="Comma-separated weekday numbers, 1=Monday .. 7=Sunday",
    )
    holidays: str = Field(
        default="",
        description="Comma-separated Y-m-d holiday dates",
    )
    holiday_api: Literal["nager", "calendarific"] = Field(default="nager")
    calendarific_api_key: str | None = Field(default=None)
    holiday_api_timeout: float = Field(default=10.0, gt=0)
    holiday_cache_ttl: int = Field(default=86400, ge=0)

    model_config = SettingsConfigDict(
        env_prefix="DATE_RANGE_HELPER_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    @field_validator("country")
    @classmethod
    def _upper_country(cls, value: str) -> str:
        return value.strip().upper()

    @field_validator("timezone")
    @classmethod
    def _known_timezone(cls, value: str) -> str:
        if is_valid_timezone(value):
            return value
        logger.warning(
            "Invalid timezone %r in DATE_RANGE_HELPER_TIMEZONE; using %s",
            value, DEFAULT_TIMEZONE,
        )
        return DEFAULT_TIMEZONE

    @property
    def weekend_day_numbers(self) -> list[int]:
        days = []
        for token in self.weekend_days.split(","):
            token = token.strip()
            if not token:
                continue
            try:
                days.append(int(token))
            except ValueError:
                raise InvalidConfigError(
                    f"Invalid day number: {token!r}. Must be 1-7"
                ) from None
        return days

    @property
    def holiday_dates(self) -> list[str]:
        return [t.strip() for t in self.holidays.split(",") if t.strip()]

    @property
    def is_calendarific_configured(self) -> bool:
        return bool(self.calendarific_api_key)


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()
