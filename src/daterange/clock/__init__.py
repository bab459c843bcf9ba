"""
daterange.clock
~~~~~~~~~~~~~~~

Timezone-aware parsing of date strings into instants.

Basic usage::

    from daterange.clock import Clock

    clock = Clock("Europe/Istanbul")
    instant = clock.parse("2024-01-01")        # 2024-01-01 00:00+03:00
    utc = clock.convert(instant, "UTC")

Public API
----------
Clock              Parser/converter bound to a default zone.
default_clock      Process-wide Clock built from settings.
is_valid_timezone  IANA identifier check.
"""

from __future__ import annotations

from daterange.clock.clock import (
    Clock,
    default_clock,
    is_valid_timezone,
    reset_default_clock,
)

__all__ = [
    "Clock",
    "default_clock",
    "is_valid_timezone",
    "reset_default_clock",
]
