"""Server datagram handling, plus end-to-end runs over loopback UDP."""

import asyncio
from datetime import datetime, timezone

import pytest

from client.time_client import TimeClient
from config.settings import ClientConfig, ServerConfig
from protocol.commands import RequestCode
from protocol.messages import Request, TextPayload
from server.server import TimeServer
from utils.exceptions import ResponseTimeoutError

ADDR = ("127.0.0.1", 50000)


@pytest.fixture
def server(dispatcher):
    return TimeServer(ServerConfig(host="127.0.0.1", port=0), dispatcher)


def test_epoch_datagram(server):
    assert server.handle_datagram(b'\x03', ADDR) == bytes([0x65, 0x9A, 0x92, 0x40])


def test_text_datagram(server):
    assert server.handle_datagram(b'\x07', ADDR) == b'2024'


def test_city_datagram(server, clock):
    clock.now = datetime(2024, 7, 15, 12, 0, 0, tzinfo=timezone.utc)
    assert server.handle_datagram(b'\x0c\x00berlin', ADDR) == b'14:00:00'


def test_pong_datagram(server):
    assert server.handle_datagram(b'\x05', ADDR) == b'\x00'


@pytest.mark.parametrize("data", [b'', b'\xff', b'\x00', b'\x0e', b'\x00\x00\x00'])
def test_dropped_datagrams(server, data):
    assert server.handle_datagram(data, ADDR) is None


def test_oversized_datagram_is_truncated(server):
    data = b'\x0c\x00' + b'a' * 400
    assert server.handle_datagram(data, ADDR) == b'12:00:00'


def test_lap_timers_are_per_endpoint(server, clock):
    assert server.handle_datagram(b'\x0d', ADDR) == b'Timer started'
    assert server.handle_datagram(b'\x0d', ("127.0.0.1", 50001)) == b'Timer started'
    clock.mono = 65.0
    assert server.handle_datagram(b'\x0d', ADDR) == b'01:05'


@pytest.mark.parametrize("data, expected", [
    (b'\x07', b'2024'),
    (b'\x05', b'\x00'),
    (b'\x03', bytes([0x65, 0x9A, 0x92, 0x40])),
])
def test_ipv6_sender_is_served(server, data, expected):
    assert server.handle_datagram(data, ("::1", 50000, 0, 0)) == expected


def test_ipv6_lap_timer(server, clock):
    addr = ("::1", 50000, 0, 0)
    assert server.handle_datagram(b'\x0d', addr) == b'Timer started'
    assert server.handle_datagram(b'\x0d', ("127.0.0.1", 50000)) == b'Timer started'
    clock.mono = 42.0
    assert server.handle_datagram(b'\x0d', addr) == b'00:42'


def test_unparseable_sender_is_dropped(server):
    assert server.handle_datagram(b'\x0d', ("not-an-address", 50000)) is None


def run_with_server(server, scenario):
    async def main():
        await server.start()
        host, port = server.address
        config = ClientConfig(server_host=host, server_port=port, timeout=2.0, iterations=5)
        try:
            async with TimeClient(config) as client:
                return await scenario(client)
        finally:
            await server.stop()

    return asyncio.run(main())


def test_end_to_end_requests(server, clock):
    async def scenario(client):
        return [
            await client.execute(RequestCode.GET_TIME),
            await client.execute(RequestCode.GET_TIME_SINCE_EPOCH),
            await client.execute(RequestCode.GET_WEEK_OF_YEAR),
            await client.execute(RequestCode.GET_DAYLIGHT_SAVINGS),
            await client.execute(RequestCode.GET_TIME_WITHOUT_DATE_IN_CITY, " Doha "),
        ]

    assert run_with_server(server, scenario) == [
        "The time and date are: 07/01/2024 12:00:00",
        "Seconds since epoch: 1704628800",
        "Week of the year: 1",
        "It is currently Standard Time.",
        "The time in doha is: 15:00:00",
    ]


def test_end_to_end_lap(server, clock):
    async def scenario(client):
        first = await client.execute(RequestCode.MEASURE_TIME_LAP)
        clock.mono = 150.0
        second = await client.execute(RequestCode.MEASURE_TIME_LAP)
        return first, second

    first, second = run_with_server(server, scenario)
    assert first == "Timer started. Send the same request again to stop the timer."
    assert second == "Time elapsed since the timer was started: 02:30"


def test_end_to_end_aggregates(server):
    async def scenario(client):
        return await client.estimate_delay(), await client.measure_rtt()

    delay, rtt = run_with_server(server, scenario)
    # The injected tick source advances 5 ticks per request
    assert delay == 5.0
    assert rtt >= 0.0


def test_zero_iterations_send_nothing(server):
    async def scenario(client):
        return await client.estimate_delay(0), await client.measure_rtt(0)

    assert run_with_server(server, scenario) == (0.0, 0.0)


def test_client_request_payload(server):
    async def scenario(client):
        return await client.request(Request(RequestCode.GET_YEAR))

    assert run_with_server(server, scenario) == TextPayload("2024")


def test_client_times_out_on_dropped_request():
    async def main():
        server = TimeServer(ServerConfig(host="127.0.0.1", port=0), _NoReply())
        await server.start()
        host, port = server.address
        config = ClientConfig(server_host=host, server_port=port, timeout=0.2)
        try:
            async with TimeClient(config) as client:
                with pytest.raises(ResponseTimeoutError):
                    await client.request(Request(RequestCode.GET_TIME))
        finally:
            await server.stop()

    asyncio.run(main())


class _NoReply:
    """Dispatcher stand-in that handles no request code."""

    def handles(self, code):
        return False
