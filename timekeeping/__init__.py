"""Time computations: clock sources, calendar arithmetic and city timezones."""

from timekeeping.clock import Clock, LocalTimezone, resolve_timezone
from timekeeping.zones import (
    CityTimezone,
    DstRule,
    CITY_TIMEZONES,
    normalize_city,
    time_in_city,
)

__all__ = [
    'Clock',
    'LocalTimezone',
    'resolve_timezone',
    'CityTimezone',
    'DstRule',
    'CITY_TIMEZONES',
    'normalize_city',
    'time_in_city',
]
