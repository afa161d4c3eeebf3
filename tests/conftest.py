"""Shared fixtures: a controllable clock and a dispatcher built on it."""

import itertools
from datetime import datetime, timedelta, timezone, tzinfo

import pytest

from server.dispatcher import Dispatcher
from server.lap_timer import EndpointIdentity, LapTimerTable
from timekeeping.clock import Clock


class SummerTime(tzinfo):
    """UTC+2 with a one hour DST component, like central Europe in summer."""

    def utcoffset(self, dt):
        return timedelta(hours=2)

    def dst(self, dt):
        return timedelta(hours=1)

    def tzname(self, dt):
        return "CEST"


class ManualClock(Clock):
    """Clock whose readings are set by the test."""

    def __init__(self, now: datetime, tz: tzinfo = timezone.utc):
        self.now = now
        self.mono = 0.0
        self._tick_counter = itertools.count(1000, 5)
        super().__init__(
            tz=tz,
            wall=lambda: self.now,
            monotonic=lambda: self.mono,
            ticks=lambda: next(self._tick_counter),
        )


@pytest.fixture
def clock():
    return ManualClock(datetime(2024, 1, 7, 12, 0, 0, tzinfo=timezone.utc))


@pytest.fixture
def dispatcher(clock):
    return Dispatcher(clock, LapTimerTable())


@pytest.fixture
def endpoint():
    return EndpointIdentity.from_address(("127.0.0.1", 50000))
