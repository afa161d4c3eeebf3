"""Values computed for each time request.

Every function receives the moment to work from, so the results are
fully determined by their arguments.
"""

from datetime import datetime, timezone

from protocol.constants import BOUNDED_INT_MAX
from timekeeping.dates import seconds_since_month_start, week_of_year
from timekeeping.zones import time_in_city


def get_time(local: datetime) -> str:
    return local.strftime("%d/%m/%Y %H:%M:%S")


def get_time_without_date(local: datetime) -> str:
    return local.strftime("%H:%M:%S")


def get_time_since_epoch(now: datetime) -> int:
    """Whole seconds since 1970-01-01T00:00:00Z, truncated to 32 bits."""
    epoch = datetime(1970, 1, 1, tzinfo=timezone.utc)
    return int((now - epoch).total_seconds()) & BOUNDED_INT_MAX


def get_client_to_server_delay_estimation(ticks: int) -> int:
    # Only meaningful relative to other samples from the same server
    return ticks & BOUNDED_INT_MAX


def get_time_without_date_or_seconds(local: datetime) -> str:
    return local.strftime("%H:%M")


def get_year(local: datetime) -> str:
    return f"{local.year:04d}"


def get_month_and_day(local: datetime) -> str:
    return local.strftime("%d/%m")


def get_seconds_since_beginning_of_month(local: datetime) -> int:
    return seconds_since_month_start(local)


def get_week_of_year(local: datetime) -> int:
    return week_of_year(local)


def get_daylight_savings(local: datetime) -> str:
    """"1" while the local zone observes daylight saving time, else "0"."""
    return "1" if local.dst() else "0"


def get_time_without_date_in_city(raw_city: str, now: datetime) -> str:
    return time_in_city(raw_city, now)
