"""UDP client for the time server."""

from typing import List, Optional, Union
import asyncio
import time

from protocol.commands import RequestCode, response_kind
from protocol.encoding import decode_response, encode_request
from protocol.messages import BoundedIntPayload, Request, ResponsePayload
from protocol.constants import MAX_DATAGRAM_SIZE
from client.dispatcher import (
    build_request,
    calc_average,
    calc_avg_difference,
    render,
    render_aggregate,
)
from config.settings import ClientConfig
from utils.logging import get_logger
from utils.exceptions import (
    MalformedResponseError,
    ResponseTimeoutError,
    TransportFailureError,
)

logger = get_logger(__name__)


class TimeClient:
    """
    Sends requests to a time server and decodes the replies.

    Use as an async context manager, or call open() and close().
    """

    def __init__(self, config: ClientConfig):
        self._config = config
        self._transport: Optional[asyncio.DatagramTransport] = None
        self._responses: "asyncio.Queue[Union[bytes, Exception]]" = asyncio.Queue()

    class _Protocol(asyncio.DatagramProtocol):
        def __init__(self, outer: 'TimeClient'):
            self.outer = outer

        def datagram_received(self, data, addr):
            self.outer._responses.put_nowait(data)

        def error_received(self, exc):
            self.outer._responses.put_nowait(
                TransportFailureError(f"Error receiving response: {exc}")
            )

    async def open(self) -> None:
        """
        Create the UDP socket towards the configured server.

        Raises:
            TransportFailureError: If the socket cannot be created
        """
        loop = asyncio.get_running_loop()
        try:
            self._transport, _ = await loop.create_datagram_endpoint(
                lambda: self._Protocol(self),
                remote_addr=(self._config.server_host, self._config.server_port),
            )
        except OSError as e:
            raise TransportFailureError(
                f"Cannot reach {self._config.server_host}:{self._config.server_port}: {e}"
            ) from e
        logger.info(
            f"Client ready for {self._config.server_host}:{self._config.server_port}"
        )

    async def close(self) -> None:
        if self._transport:
            self._transport.close()
            self._transport = None

    async def __aenter__(self) -> 'TimeClient':
        await self.open()
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()

    def _send(self, request: Request) -> None:
        if self._transport is None:
            raise TransportFailureError("Client is not open")
        data = encode_request(request.code, request.params)
        try:
            self._transport.sendto(data)
        except OSError as e:
            raise TransportFailureError(f"Error sending request: {e}") from e
        if self._config.debug:
            logger.info(f"Sent: {len(data)} bytes.")

    async def _receive(self) -> bytes:
        try:
            item = await asyncio.wait_for(self._responses.get(), self._config.timeout)
        except asyncio.TimeoutError:
            raise ResponseTimeoutError(
                f"No response within {self._config.timeout} seconds"
            ) from None
        if isinstance(item, Exception):
            raise item
        if self._config.debug:
            logger.info(f"Received: {len(item)} bytes.")
        return item[:MAX_DATAGRAM_SIZE]

    def _discard_stale(self) -> None:
        # Late replies to a timed-out request must not answer the next one
        while not self._responses.empty():
            self._responses.get_nowait()

    async def request(self, request: Request) -> ResponsePayload:
        """
        Perform one request/response cycle.

        Raises:
            TransportFailureError: If sending fails or no response arrives
            MalformedResponseError: If the response has the wrong shape
        """
        self._discard_stale()
        self._send(request)
        data = await self._receive()
        return decode_response(response_kind(request.code), data)

    async def estimate_delay(self, iterations: Optional[int] = None) -> float:
        """
        Estimate the client-to-server delay in milliseconds.

        Sends all delay requests first, then collects the server tick
        samples and averages their successive differences.
        """
        if iterations is None:
            iterations = self._config.iterations
        request = Request(code=RequestCode.GET_CLIENT_TO_SERVER_DELAY_ESTIMATION)
        self._discard_stale()
        for _ in range(iterations):
            self._send(request)

        samples: List[int] = []
        for _ in range(iterations):
            payload = decode_response(response_kind(request.code), await self._receive())
            if not isinstance(payload, BoundedIntPayload):
                raise MalformedResponseError(f"Unexpected delay sample: {payload!r}")
            samples.append(payload.value)
        return calc_avg_difference(samples)

    async def measure_rtt(self, iterations: Optional[int] = None) -> float:
        """Average round-trip time in milliseconds over several pings."""
        if iterations is None:
            iterations = self._config.iterations
        request = Request(code=RequestCode.MEASURE_RTT)
        elapsed: List[float] = []
        for _ in range(iterations):
            started = time.perf_counter()
            await self.request(request)
            elapsed.append((time.perf_counter() - started) * 1000)
        return calc_average(elapsed)

    async def execute(self, choice: int, city: Optional[str] = None) -> str:
        """
        Run a menu choice against the server.

        Args:
            choice: Request code number (1-13)
            city: City input for GET_TIME_WITHOUT_DATE_IN_CITY

        Returns:
            Text to display
        """
        request = build_request(choice, city)
        if request.code == RequestCode.GET_CLIENT_TO_SERVER_DELAY_ESTIMATION:
            return render_aggregate(request.code, await self.estimate_delay())
        if request.code == RequestCode.MEASURE_RTT:
            return render_aggregate(request.code, await self.measure_rtt())

        payload = await self.request(request)
        return render(request, payload)
