"""Request code and response kind definitions."""

from enum import IntEnum
from typing import Dict

from utils.exceptions import UnknownRequestCodeError


class RequestCode(IntEnum):
    """Enumeration of request codes understood by the time server."""

    ERROR = -1                                      # Empty or invalid datagram
    DEFAULT = 0                                     # Unused
    GET_TIME = 1
    GET_TIME_WITHOUT_DATE = 2
    GET_TIME_SINCE_EPOCH = 3
    GET_CLIENT_TO_SERVER_DELAY_ESTIMATION = 4
    MEASURE_RTT = 5
    GET_TIME_WITHOUT_DATE_OR_SECONDS = 6
    GET_YEAR = 7
    GET_MONTH_AND_DAY = 8
    GET_SECONDS_SINCE_BEGINNING_OF_MONTH = 9
    GET_WEEK_OF_YEAR = 10
    GET_DAYLIGHT_SAVINGS = 11
    GET_TIME_WITHOUT_DATE_IN_CITY = 12
    MEASURE_TIME_LAP = 13


class ResponseKind(IntEnum):
    """Shape of the response datagram for a request."""

    TEXT = 1            # Raw ASCII bytes
    BOUNDED_INT = 2     # 1-4 bytes, big-endian, leading zero bytes stripped
    PONG = 3            # Single 0x00 byte


RESPONSE_KINDS: Dict[RequestCode, ResponseKind] = {
    RequestCode.GET_TIME: ResponseKind.TEXT,
    RequestCode.GET_TIME_WITHOUT_DATE: ResponseKind.TEXT,
    RequestCode.GET_TIME_SINCE_EPOCH: ResponseKind.BOUNDED_INT,
    RequestCode.GET_CLIENT_TO_SERVER_DELAY_ESTIMATION: ResponseKind.BOUNDED_INT,
    RequestCode.MEASURE_RTT: ResponseKind.PONG,
    RequestCode.GET_TIME_WITHOUT_DATE_OR_SECONDS: ResponseKind.TEXT,
    RequestCode.GET_YEAR: ResponseKind.TEXT,
    RequestCode.GET_MONTH_AND_DAY: ResponseKind.TEXT,
    RequestCode.GET_SECONDS_SINCE_BEGINNING_OF_MONTH: ResponseKind.BOUNDED_INT,
    RequestCode.GET_WEEK_OF_YEAR: ResponseKind.BOUNDED_INT,
    RequestCode.GET_DAYLIGHT_SAVINGS: ResponseKind.TEXT,
    RequestCode.GET_TIME_WITHOUT_DATE_IN_CITY: ResponseKind.TEXT,
    RequestCode.MEASURE_TIME_LAP: ResponseKind.TEXT,
}


def response_kind(code: int) -> ResponseKind:
    """
    Get the response shape the server uses for a request code.

    Args:
        code: Request code (1-13)

    Returns:
        ResponseKind for the code

    Raises:
        UnknownRequestCodeError: If the code has no response
    """
    kind = RESPONSE_KINDS.get(code)
    if kind is None:
        raise UnknownRequestCodeError(f"No response defined for request code {code}")
    return kind
