"""Protocol module for request/response framing and request code definitions."""

from protocol.constants import DEFAULT_PORT, MAX_DATAGRAM_SIZE, LAP_EXPIRY_SECONDS
from protocol.commands import RequestCode, ResponseKind, RESPONSE_KINDS, response_kind
from protocol.encoding import (
    encode_request,
    decode_request,
    encode_response,
    decode_response,
    encode_bounded_int,
    decode_bounded_int,
    is_error_response,
)
from protocol.messages import (
    Request,
    ResponsePayload,
    TextPayload,
    BoundedIntPayload,
    PongPayload,
)

__all__ = [
    'DEFAULT_PORT',
    'MAX_DATAGRAM_SIZE',
    'LAP_EXPIRY_SECONDS',
    'RequestCode',
    'ResponseKind',
    'RESPONSE_KINDS',
    'response_kind',
    'encode_request',
    'decode_request',
    'encode_response',
    'decode_response',
    'encode_bounded_int',
    'decode_bounded_int',
    'is_error_response',
    'Request',
    'ResponsePayload',
    'TextPayload',
    'BoundedIntPayload',
    'PongPayload',
]
