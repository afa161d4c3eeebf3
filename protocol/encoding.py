"""Request and response encoding and decoding functions."""

import struct
from typing import List, Sequence

from protocol.commands import RequestCode, ResponseKind
from protocol.constants import (
    BOUNDED_INT_MAX,
    BOUNDED_INT_SIZE,
    MAX_DATAGRAM_SIZE,
    PARAM_SEPARATOR,
    PONG,
)
from protocol.messages import (
    BoundedIntPayload,
    PongPayload,
    Request,
    ResponsePayload,
    TextPayload,
)
from utils.exceptions import MalformedResponseError, MessageTooLargeError

# Request code byte: signed char, so 0xFF reads back as RequestCode.ERROR
CODE_FORMAT = '>b'
BOUNDED_INT_FORMAT = '>I'


def read_code(data: bytes) -> int:
    """Read the leading code byte of a datagram as a signed value."""
    if not data:
        return RequestCode.ERROR
    return struct.unpack(CODE_FORMAT, data[:1])[0]


def encode_request(code: int, params: Sequence[str] = ()) -> bytes:
    """
    Encode a request datagram.

    Each parameter is preceded by a single null byte; the last one
    is not terminated.

    Args:
        code: Request code
        params: Ordered request parameters (ASCII)

    Returns:
        Encoded datagram

    Raises:
        MessageTooLargeError: If the datagram exceeds MAX_DATAGRAM_SIZE
    """
    parts = [struct.pack(CODE_FORMAT, code)]
    for param in params:
        parts.append(PARAM_SEPARATOR)
        parts.append(param.encode('ascii'))
    data = b''.join(parts)
    if len(data) > MAX_DATAGRAM_SIZE:
        raise MessageTooLargeError(
            f"Request size {len(data)} exceeds limit {MAX_DATAGRAM_SIZE}"
        )
    return data


def split_params(data: bytes) -> List[str]:
    """
    Collect the null-delimited parameters following the code byte.

    Every non-empty run of bytes that follows a null byte becomes one
    parameter. Bytes between the code byte and the first null are ignored.
    """
    params = []
    for run in data[1:].split(PARAM_SEPARATOR)[1:]:
        if run:
            params.append(run.decode('latin-1'))
    return params


def decode_request(data: bytes) -> Request:
    """
    Decode a request datagram.

    An empty datagram decodes to RequestCode.ERROR. Code bytes that do not
    name a known request are kept as their raw value so that the
    dispatcher, not the decoder, decides to drop them.
    """
    value = read_code(data)
    try:
        code = RequestCode(value)
    except ValueError:
        code = value
    return Request(code=code, params=split_params(data))


def encode_text(text: str) -> bytes:
    """Encode a text response as raw ASCII, without terminator."""
    data = text.encode('ascii')
    if len(data) > MAX_DATAGRAM_SIZE:
        raise MessageTooLargeError(
            f"Response size {len(data)} exceeds limit {MAX_DATAGRAM_SIZE}"
        )
    return data


def encode_bounded_int(value: int) -> bytes:
    """
    Encode an unsigned 32-bit value, most significant byte first.

    Leading zero bytes are stripped, but at least one byte is always
    emitted, so 0 encodes as a single 0x00.
    """
    if not 0 <= value <= BOUNDED_INT_MAX:
        raise ValueError(f"Value {value} does not fit in {BOUNDED_INT_SIZE} bytes")
    data = struct.pack(BOUNDED_INT_FORMAT, value).lstrip(b'\x00')
    return data or b'\x00'


def decode_bounded_int(data: bytes) -> int:
    """
    Decode an integer response produced by encode_bounded_int.

    Raises:
        MalformedResponseError: If data is empty or longer than 4 bytes
    """
    if not data or len(data) > BOUNDED_INT_SIZE:
        raise MalformedResponseError(
            f"Invalid integer response size: {len(data)} bytes"
        )
    return struct.unpack(BOUNDED_INT_FORMAT, data.rjust(BOUNDED_INT_SIZE, b'\x00'))[0]


def encode_pong() -> bytes:
    return PONG


def decode_pong(data: bytes) -> None:
    if data != PONG:
        raise MalformedResponseError(f"Invalid pong response: {data!r}")


def is_error_response(data: bytes) -> bool:
    """Whether a received datagram is empty or carries the error marker."""
    return not data or read_code(data) == RequestCode.ERROR


def encode_response(payload: ResponsePayload) -> bytes:
    """Frame a response payload according to its kind."""
    if isinstance(payload, TextPayload):
        return encode_text(payload.text)
    if isinstance(payload, BoundedIntPayload):
        return encode_bounded_int(payload.value)
    if isinstance(payload, PongPayload):
        return encode_pong()
    raise TypeError(f"Unsupported response payload: {payload!r}")


def decode_response(kind: ResponseKind, data: bytes) -> ResponsePayload:
    """
    Decode a response datagram of the expected kind.

    The error marker check applies to text and pong responses only; an
    integer response may legitimately start with 0xFF.

    Raises:
        MalformedResponseError: If data does not match the expected shape
    """
    if kind == ResponseKind.BOUNDED_INT:
        # Tick counts from 0xFF000000 upwards start with 0xFF
        return BoundedIntPayload(decode_bounded_int(data))

    if is_error_response(data):
        raise MalformedResponseError(f"Error response received: {data!r}")

    if kind == ResponseKind.TEXT:
        try:
            return TextPayload(data.decode('ascii'))
        except UnicodeDecodeError as e:
            raise MalformedResponseError(f"Non-ASCII text response: {data!r}") from e
    if kind == ResponseKind.PONG:
        decode_pong(data)
        return PongPayload()
    raise ValueError(f"Unsupported response kind: {kind}")
