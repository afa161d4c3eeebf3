from datetime import datetime, timedelta, timezone

import pytest

from timekeeping import queries
from timekeeping.clock import Clock, LocalTimezone, resolve_timezone
from utils.exceptions import ConfigurationError

from tests.conftest import SummerTime

NOW = datetime(2024, 1, 7, 12, 0, 0, tzinfo=timezone.utc)


def test_text_queries():
    assert queries.get_time(NOW) == "07/01/2024 12:00:00"
    assert queries.get_time_without_date(NOW) == "12:00:00"
    assert queries.get_time_without_date_or_seconds(NOW) == "12:00"
    assert queries.get_year(NOW) == "2024"
    assert queries.get_month_and_day(NOW) == "07/01"


def test_integer_queries():
    assert queries.get_time_since_epoch(NOW) == 1704628800
    assert queries.get_seconds_since_beginning_of_month(NOW) == 561600
    assert queries.get_week_of_year(NOW) == 1


def test_epoch_ignores_input_zone():
    local = NOW.astimezone(timezone(timedelta(hours=-7)))
    assert queries.get_time_since_epoch(local) == 1704628800


def test_delay_estimation_is_masked_to_32_bits():
    assert queries.get_client_to_server_delay_estimation(2 ** 32 + 5) == 5


def test_daylight_savings_flag():
    assert queries.get_daylight_savings(NOW) == "0"
    assert queries.get_daylight_savings(NOW.astimezone(SummerTime())) == "1"


def test_city_query():
    assert queries.get_time_without_date_in_city("berlin", NOW) == "13:00:00"


def test_clock_uses_injected_sources():
    clock = Clock(
        tz=SummerTime(),
        wall=lambda: NOW,
        monotonic=lambda: 42.0,
        ticks=lambda: 2 ** 32 + 7,
    )
    assert clock.utc_now() == NOW
    assert clock.local_now().hour == 14
    assert clock.monotonic() == 42.0
    assert clock.ticks() == 7


def test_default_clock_is_timezone_aware():
    clock = Clock()
    assert isinstance(clock.tz, LocalTimezone)
    assert clock.utc_now().tzinfo is timezone.utc
    assert clock.local_now().utcoffset() is not None
    assert 0 <= clock.ticks() < 2 ** 32


def test_local_timezone_preserves_instant():
    local = NOW.astimezone(LocalTimezone())
    assert local.timestamp() == NOW.timestamp()


def test_resolve_timezone():
    assert isinstance(resolve_timezone(None), LocalTimezone)
    with pytest.raises(ConfigurationError):
        resolve_timezone("Nowhere/Atlantis")
