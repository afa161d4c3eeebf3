"""City timezones and daylight saving rules.

The city table uses fixed base offsets plus one of two DST schedules
instead of the tz database, so results do not depend on the host.
"""

import calendar
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from enum import Enum
from typing import Dict

from timekeeping.dates import last_weekday_of_month, nth_weekday_of_month

DEFAULT_CITY = "utc"


class DstRule(Enum):
    """Daylight saving schedule applied to a city's base offset."""

    NONE = "none"
    EUROPEAN_UNION = "eu"
    UNITED_STATES = "us"


@dataclass(frozen=True)
class CityTimezone:
    """Base UTC offset and DST behaviour of a supported city."""

    base_utc_offset_hours: int
    observes_dst: bool = False
    dst_rule: DstRule = DstRule.NONE


CITY_TIMEZONES: Dict[str, CityTimezone] = {
    "doha": CityTimezone(3),
    "prague": CityTimezone(1, True, DstRule.EUROPEAN_UNION),
    "new-york": CityTimezone(-5, True, DstRule.UNITED_STATES),
    "berlin": CityTimezone(1, True, DstRule.EUROPEAN_UNION),
    DEFAULT_CITY: CityTimezone(0),
}

# Menu numbers and spellings accepted for each city
CITY_ALIASES: Dict[str, str] = {
    "1": "doha",
    "2": "prague",
    "3": "new-york",
    "newyork": "new-york",
    "4": "berlin",
}


def normalize_city(raw: str) -> str:
    """
    Map user input to a canonical city name.

    Input is trimmed, lowercased and has spaces replaced by hyphens.
    Unrecognized names fall back to "utc".
    """
    city = raw.strip().lower().replace(' ', '-')
    city = CITY_ALIASES.get(city, city)
    if city not in CITY_TIMEZONES:
        return DEFAULT_CITY
    return city


def lookup_city(name: str) -> CityTimezone:
    return CITY_TIMEZONES.get(name, CITY_TIMEZONES[DEFAULT_CITY])


def _naive_utc(moment: datetime) -> datetime:
    if moment.tzinfo is not None:
        moment = moment.astimezone(timezone.utc).replace(tzinfo=None)
    return moment


def is_dst_european_union(utc: datetime) -> bool:
    """
    EU rule: last Sunday of March 01:00 UTC (inclusive) to last Sunday
    of October 01:00 UTC (exclusive).
    """
    utc = _naive_utc(utc)
    year = utc.year
    start = datetime(year, 3, last_weekday_of_month(year, 3, calendar.SUNDAY), 1)
    end = datetime(year, 10, last_weekday_of_month(year, 10, calendar.SUNDAY), 1)
    return start <= utc < end


def is_dst_united_states(local_base: datetime) -> bool:
    """
    US rule: second Sunday of March 02:00 to first Sunday of November 02:00
    (start inclusive, end exclusive), both in local standard time.

    Args:
        local_base: Naive wall-clock time at the zone's base offset
    """
    year = local_base.year
    start = datetime(year, 3, nth_weekday_of_month(year, 3, calendar.SUNDAY, 2), 2)
    end = datetime(year, 11, nth_weekday_of_month(year, 11, calendar.SUNDAY, 1), 2)
    return start <= local_base.replace(tzinfo=None) < end


def utc_offset(city: CityTimezone, now: datetime) -> timedelta:
    """Resolve a city's UTC offset at the given instant."""
    utc = _naive_utc(now)
    base = timedelta(hours=city.base_utc_offset_hours)
    if not city.observes_dst:
        return base
    if city.dst_rule == DstRule.EUROPEAN_UNION and is_dst_european_union(utc):
        return base + timedelta(hours=1)
    if city.dst_rule == DstRule.UNITED_STATES and is_dst_united_states(utc + base):
        return base + timedelta(hours=1)
    return base


def time_in_city(raw_city: str, now: datetime) -> str:
    """Wall-clock time (HH:MM:SS) in a supported city."""
    city = lookup_city(normalize_city(raw_city))
    local = _naive_utc(now) + utc_offset(city, now)
    return local.strftime("%H:%M:%S")
