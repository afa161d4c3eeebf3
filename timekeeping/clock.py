"""Time sources for the time server.

Every reading the server depends on (wall clock, local timezone,
monotonic clock and tick counter) goes through a Clock so tests can
substitute fixed values.
"""

import time as _time
from datetime import datetime, timedelta, timezone, tzinfo
from typing import Callable, Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from utils.exceptions import ConfigurationError

ZERO = timedelta(0)
TICK_MASK = 0xFFFFFFFF


class LocalTimezone(tzinfo):
    """The host's timezone, as reported by ``time.localtime``."""

    def __init__(self):
        self._std_offset = timedelta(seconds=-_time.timezone)
        if _time.daylight:
            self._dst_offset = timedelta(seconds=-_time.altzone)
        else:
            self._dst_offset = self._std_offset

    def fromutc(self, dt: datetime) -> datetime:
        stamp = (dt.replace(tzinfo=timezone.utc) - datetime(1970, 1, 1, tzinfo=timezone.utc))
        args = _time.localtime(stamp // timedelta(seconds=1))[:6]
        return datetime(*args, microsecond=dt.microsecond, tzinfo=self)

    def utcoffset(self, dt: datetime) -> timedelta:
        return self._dst_offset if self._isdst(dt) else self._std_offset

    def dst(self, dt: datetime) -> timedelta:
        return self._dst_offset - self._std_offset if self._isdst(dt) else ZERO

    def tzname(self, dt: datetime) -> str:
        return _time.tzname[self._isdst(dt)]

    def _isdst(self, dt: datetime) -> bool:
        tt = (dt.year, dt.month, dt.day, dt.hour, dt.minute, dt.second, dt.weekday(), 0, -1)
        return _time.localtime(_time.mktime(tt)).tm_isdst > 0

    def __repr__(self) -> str:
        return "LocalTimezone()"


def resolve_timezone(name: Optional[str]) -> tzinfo:
    """
    Resolve the server's local timezone.

    Args:
        name: IANA zone name (e.g. "Europe/Prague"), or None for the host zone

    Raises:
        ConfigurationError: If the zone name is unknown
    """
    if not name:
        return LocalTimezone()
    try:
        return ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError) as e:
        raise ConfigurationError(f"Unknown timezone: {name}") from e


def _system_ticks() -> int:
    return (_time.monotonic_ns() // 1_000_000) & TICK_MASK


class Clock:
    """Injectable source of wall-clock, monotonic and tick readings."""

    def __init__(
        self,
        tz: Optional[tzinfo] = None,
        wall: Optional[Callable[[], datetime]] = None,
        monotonic: Optional[Callable[[], float]] = None,
        ticks: Optional[Callable[[], int]] = None,
    ):
        """
        Args:
            tz: Local timezone (default: host zone)
            wall: Returns the current time as an aware datetime
            monotonic: Returns monotonic seconds
            ticks: Returns a millisecond tick count
        """
        self.tz: tzinfo = tz if tz is not None else LocalTimezone()
        self._wall = wall or (lambda: datetime.now(timezone.utc))
        self._monotonic = monotonic or _time.monotonic
        self._ticks = ticks or _system_ticks

    def utc_now(self) -> datetime:
        return self._wall().astimezone(timezone.utc)

    def local_now(self) -> datetime:
        return self._wall().astimezone(self.tz)

    def monotonic(self) -> float:
        return self._monotonic()

    def ticks(self) -> int:
        return self._ticks() & TICK_MASK
