import math

import pytest

from protocol.commands import RequestCode, ResponseKind, response_kind
from protocol.encoding import (
    decode_bounded_int,
    decode_request,
    decode_response,
    encode_bounded_int,
    encode_pong,
    encode_request,
    encode_response,
    encode_text,
    is_error_response,
)
from protocol.messages import BoundedIntPayload, PongPayload, Request, TextPayload
from utils.exceptions import MalformedResponseError, MessageTooLargeError, UnknownRequestCodeError

KNOWN_CODES = [code for code in RequestCode if code > 0]


def test_encode_request_without_params():
    assert encode_request(RequestCode.GET_TIME) == b'\x01'


def test_encode_request_with_param():
    data = encode_request(RequestCode.GET_TIME_WITHOUT_DATE_IN_CITY, ["prague"])
    assert data == b'\x0c\x00prague'


@pytest.mark.parametrize("code", KNOWN_CODES)
@pytest.mark.parametrize("params", [[], ["berlin"], ["new-york", "2"]])
def test_request_round_trip(code, params):
    assert decode_request(encode_request(code, params)) == Request(code, params)


def test_encode_request_too_large():
    with pytest.raises(MessageTooLargeError):
        encode_request(RequestCode.GET_TIME_WITHOUT_DATE_IN_CITY, ["x" * 254])


def test_decode_empty_datagram_is_error():
    request = decode_request(b'')
    assert request.code == RequestCode.ERROR
    assert request.params == []


def test_decode_ff_is_error():
    assert decode_request(b'\xff').code is RequestCode.ERROR


def test_decode_unknown_code_keeps_raw_value():
    request = decode_request(b'\x0e')
    assert request.code == 14
    assert not request.is_known

    # Bytes above 0x7f are read as signed chars
    assert decode_request(b'\xc8').code == -56


def test_decode_skips_empty_runs_and_leading_bytes():
    request = decode_request(b'\x0cjunk\x00a\x00\x00b')
    assert request.code is RequestCode.GET_TIME_WITHOUT_DATE_IN_CITY
    assert request.params == ["a", "b"]


def test_decode_trailing_separator_yields_no_param():
    assert decode_request(b'\x0c\x00').params == []


def test_encode_bounded_int_zero():
    assert encode_bounded_int(0) == b'\x00'


@pytest.mark.parametrize("value, expected", [
    (1, b'\x01'),
    (255, b'\xff'),
    (256, b'\x01\x00'),
    (65536, b'\x01\x00\x00'),
    (0x01000000, b'\x01\x00\x00\x00'),
    (0xFFFFFFFF, b'\xff\xff\xff\xff'),
])
def test_encode_bounded_int_strips_leading_zeros(value, expected):
    assert encode_bounded_int(value) == expected


@pytest.mark.parametrize("value", [0, 1, 127, 255, 256, 4095, 65535, 65536, 1704628800, 0xFFFFFFFF])
def test_bounded_int_length_and_reconstruction(value):
    data = encode_bounded_int(value)
    assert len(data) == max(1, math.ceil(value.bit_length() / 8))
    assert decode_bounded_int(data) == value


def test_epoch_scenario_bytes():
    assert encode_bounded_int(1704628800) == bytes([0x65, 0x9A, 0x92, 0x40])


@pytest.mark.parametrize("value", [-1, 2 ** 32])
def test_encode_bounded_int_out_of_range(value):
    with pytest.raises(ValueError):
        encode_bounded_int(value)


def test_decode_bounded_int_left_pads():
    assert decode_bounded_int(b'\x00\x00\x01') == 1
    assert decode_bounded_int(b'\x01\x00') == 256


@pytest.mark.parametrize("data", [b'', b'\x01\x02\x03\x04\x05'])
def test_decode_bounded_int_rejects_bad_sizes(data):
    with pytest.raises(MalformedResponseError):
        decode_bounded_int(data)


def test_encode_pong():
    assert encode_pong() == b'\x00'


def test_encode_text_limit():
    assert encode_text("12:00:00") == b'12:00:00'
    with pytest.raises(MessageTooLargeError):
        encode_text("x" * 256)


def test_is_error_response():
    assert is_error_response(b'')
    assert is_error_response(b'\xffabc')
    assert not is_error_response(b'12:00')
    assert not is_error_response(b'\x00')


def test_encode_response_by_payload():
    assert encode_response(TextPayload("2024")) == b'2024'
    assert encode_response(BoundedIntPayload(0)) == b'\x00'
    assert encode_response(PongPayload()) == b'\x00'


def test_decode_response_shapes():
    assert decode_response(ResponseKind.TEXT, b'12:00') == TextPayload("12:00")
    assert decode_response(ResponseKind.BOUNDED_INT, b'\x01\x00') == BoundedIntPayload(256)
    assert decode_response(ResponseKind.PONG, b'\x00') == PongPayload()


def test_decode_response_int_may_start_with_ff():
    assert decode_response(ResponseKind.BOUNDED_INT, b'\xff\x00\x00\x00') == BoundedIntPayload(0xFF000000)


@pytest.mark.parametrize("kind, data", [
    (ResponseKind.TEXT, b''),
    (ResponseKind.TEXT, b'\xff12'),
    (ResponseKind.TEXT, b'\x80abc'),
    (ResponseKind.BOUNDED_INT, b''),
    (ResponseKind.BOUNDED_INT, b'\x00' * 5),
    (ResponseKind.PONG, b'\x01'),
    (ResponseKind.PONG, b'\x00\x00'),
])
def test_decode_response_malformed(kind, data):
    with pytest.raises(MalformedResponseError):
        decode_response(kind, data)


def test_response_kind():
    assert response_kind(RequestCode.GET_YEAR) == ResponseKind.TEXT
    assert response_kind(RequestCode.GET_WEEK_OF_YEAR) == ResponseKind.BOUNDED_INT
    assert response_kind(5) == ResponseKind.PONG


@pytest.mark.parametrize("code", [RequestCode.ERROR, RequestCode.DEFAULT, 14])
def test_response_kind_unknown_code(code):
    with pytest.raises(UnknownRequestCodeError):
        response_kind(code)
