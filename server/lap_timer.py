"""Per-client lap timers for MEASURE_TIME_LAP requests."""

import socket
import threading
from dataclasses import dataclass
from typing import Dict, Tuple, Union

from protocol.constants import LAP_EXPIRY_SECONDS
from utils.logging import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class EndpointIdentity:
    """Client address (as an integer), its address family and port."""

    address: int
    port: int
    family: int = socket.AF_INET

    @classmethod
    def from_address(cls, addr: Tuple) -> 'EndpointIdentity':
        """
        Build an identity from a socket address tuple.

        Args:
            addr: (host, port) for IPv4 or (host, port, flowinfo, scope_id)
                for IPv6, as reported by the datagram transport

        Raises:
            OSError: If host is not a numeric IPv4 or IPv6 address
        """
        host, port = addr[0], addr[1]
        family = socket.AF_INET6 if ':' in host else socket.AF_INET
        # Link-local IPv6 hosts may carry a %scope suffix
        packed = socket.inet_pton(family, host.split('%', 1)[0])
        return cls(address=int.from_bytes(packed, byteorder='big'), port=port, family=family)

    def __str__(self) -> str:
        size = 16 if self.family == socket.AF_INET6 else 4
        host = socket.inet_ntop(self.family, self.address.to_bytes(size, byteorder='big'))
        if self.family == socket.AF_INET6:
            return f"[{host}]:{self.port}"
        return f"{host}:{self.port}"


@dataclass(frozen=True)
class LapStarted:
    """A new lap timer was started."""


@dataclass(frozen=True)
class LapElapsed:
    """A pending lap timer was stopped after the given number of seconds."""

    seconds: float


LapResult = Union[LapStarted, LapElapsed]


def format_lap(seconds: float) -> str:
    """Render whole elapsed seconds as MM:SS (minutes are not capped)."""
    minutes, secs = divmod(int(seconds), 60)
    return f"{minutes:02d}:{secs:02d}"


class LapTimerTable:
    """
    Start instants of pending lap timers, keyed by client endpoint.

    Each touch first discards timers older than the expiry window, for
    every endpoint, then starts or stops the caller's timer. Both steps
    run under one lock.
    """

    def __init__(self, expiry_seconds: float = LAP_EXPIRY_SECONDS):
        self._expiry = expiry_seconds
        self._timers: Dict[EndpointIdentity, float] = {}
        self._lock = threading.Lock()

    def touch(self, endpoint: EndpointIdentity, now: float) -> LapResult:
        """
        Start or stop the lap timer of an endpoint.

        Args:
            endpoint: Requesting client
            now: Current monotonic time in seconds

        Returns:
            LapStarted for a new timer, LapElapsed when a pending one stops
        """
        with self._lock:
            self._purge(now)

            started = self._timers.pop(endpoint, None)
            if started is None:
                self._timers[endpoint] = now
                logger.debug(f"Lap timer started for {endpoint}")
                return LapStarted()

            logger.debug(f"Lap timer stopped for {endpoint}")
            return LapElapsed(now - started)

    def _purge(self, now: float) -> None:
        expired = [
            endpoint for endpoint, started in self._timers.items()
            if now - started > self._expiry
        ]
        for endpoint in expired:
            del self._timers[endpoint]
        if expired:
            logger.debug(f"Discarded {len(expired)} expired lap timer(s)")

    def __len__(self) -> int:
        with self._lock:
            return len(self._timers)

    def __contains__(self, endpoint: EndpointIdentity) -> bool:
        with self._lock:
            return endpoint in self._timers
