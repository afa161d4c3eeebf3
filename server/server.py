"""UDP time server handling client requests."""

from typing import Optional, Tuple
import asyncio

from protocol.constants import MAX_DATAGRAM_SIZE
from protocol.encoding import decode_request, encode_response
from config.settings import ServerConfig
from server.dispatcher import Dispatcher
from server.lap_timer import EndpointIdentity
from utils.logging import get_logger
from utils.exceptions import TimeServiceError

logger = get_logger(__name__)


class TimeServer:
    """Server class receiving time requests and sending back responses."""

    def __init__(self, config: ServerConfig, dispatcher: Dispatcher):
        """
        Initialize server with configuration.

        Args:
            config: Server configuration
            dispatcher: Request dispatcher owning the lap timer table
        """
        self._config: ServerConfig = config
        self._dispatcher: Dispatcher = dispatcher
        self._transport: Optional[asyncio.DatagramTransport] = None

        logger.info(f"Server initialized for {config.host}:{config.port}")

    class _Protocol(asyncio.DatagramProtocol):
        def __init__(self, outer: 'TimeServer'):
            self.outer = outer

        def connection_made(self, transport):
            self.outer._transport = transport

        def datagram_received(self, data, addr):
            response = self.outer.handle_datagram(data, addr)
            if response is None:
                return
            try:
                self.outer._transport.sendto(response, addr)
                logger.info(f"Sent {len(response)} bytes to {addr[0]}:{addr[1]}")
            except OSError as e:
                logger.error(f"Failed to send response to {addr[0]}:{addr[1]}: {e}")

        def error_received(self, exc):
            logger.error(f"UDP transport error received: {exc}")

        def connection_lost(self, exc):
            logger.info("UDP transport closed")

    @property
    def address(self) -> Optional[Tuple[str, int]]:
        """Bound (host, port), once started."""
        if self._transport is None:
            return None
        return self._transport.get_extra_info('sockname')[:2]

    async def start(self) -> None:
        """
        Bind the UDP socket and start serving requests.

        Raises:
            OSError: If the socket cannot be bound
        """
        logger.info("Starting server...")

        loop = asyncio.get_running_loop()
        try:
            await loop.create_datagram_endpoint(
                lambda: self._Protocol(self),
                local_addr=(self._config.host, self._config.port),
            )
        except OSError as e:
            logger.error(f"Failed to bind {self._config.host}:{self._config.port}: {e}")
            raise

        host, port = self.address
        logger.info(f"Time server waiting for requests on {host}:{port}")

    async def stop(self) -> None:
        """Close the UDP socket."""
        logger.info("Stopping server...")
        if self._transport:
            self._transport.close()
            self._transport = None
        logger.info("Server stopped successfully")

    def handle_datagram(self, data: bytes, addr: Tuple) -> Optional[bytes]:
        """
        Compute the response datagram for a received request.

        Args:
            data: Received datagram
            addr: Sender address tuple (IPv4 or IPv6)

        Returns:
            Response bytes, or None when the request is dropped
        """
        data = data[:MAX_DATAGRAM_SIZE]
        request = decode_request(data)
        logger.info(
            f"Received {len(data)} bytes from {addr[0]}:{addr[1]} | {request.describe()}"
        )

        if not self._dispatcher.handles(request.code):
            logger.warning(f"Dropped {request.describe()}: no handler")
            return None

        try:
            endpoint = EndpointIdentity.from_address(addr)
            return encode_response(self._dispatcher.handle(request, endpoint))
        except (TimeServiceError, ValueError, OSError) as e:
            logger.error(f"Dispatch failed for {request.describe()}: {e}")
            return None
