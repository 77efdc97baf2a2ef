import pytest

from samsa.sasl_handshake import (
    SaslHandshakeRequest,
    SaslHandshakeResponse,
    parse_handshake_response,
)
from samsa.wire import HeaderResponse, KafkaCode, ParsingError, Reader, Writer


def _response_bytes(correlation_id, code, mechanisms):
    writer = Writer()
    writer.int32(correlation_id)
    writer.int16(code)
    writer.array(mechanisms, writer.string)
    return writer.getvalue()


def test_request_wire_bytes():
    request = SaslHandshakeRequest.create(1, "rust", "PLAIN")
    expected = bytes([0, 17, 0, 1, 0, 0, 0, 1, 0, 4]) + b"rust" + bytes([0, 5]) + b"PLAIN"
    assert request.to_bytes() == expected


def test_request_header_fields():
    request = SaslHandshakeRequest.create(7, "client", "SCRAM-SHA-256")
    reader = Reader(request.to_bytes())
    assert reader.int16() == 17
    assert reader.int16() == 1
    assert reader.int32() == 7
    assert reader.string() == b"client"
    assert reader.string() == b"SCRAM-SHA-256"
    assert reader.remaining() == b""


def test_parse_response_round_trip():
    mechanisms = [b"PLAIN", b"SCRAM-SHA-512"]
    data = _response_bytes(3, 0, mechanisms)
    parsed = SaslHandshakeResponse.from_bytes(data)
    assert parsed == SaslHandshakeResponse(
        header=HeaderResponse(correlation_id=3),
        error_code=KafkaCode.NONE,
        mechanisms=mechanisms,
    )


def test_parse_response_error_code():
    data = _response_bytes(1, int(KafkaCode.UNSUPPORTED_SASL_MECHANISM), [b"PLAIN"])
    parsed = parse_handshake_response(Reader(data))
    assert parsed.error_code is KafkaCode.UNSUPPORTED_SASL_MECHANISM
    assert parsed.mechanisms == [b"PLAIN"]


def test_parse_empty_mechanisms():
    parsed = SaslHandshakeResponse.from_bytes(_response_bytes(1, 0, []))
    assert parsed.mechanisms == []


def test_truncated_response_raises():
    data = _response_bytes(1, 0, [b"PLAIN"])
    with pytest.raises(ParsingError):
        SaslHandshakeResponse.from_bytes(data[:-2])


def test_unknown_error_code_raises():
    with pytest.raises(ParsingError):
        SaslHandshakeResponse.from_bytes(_response_bytes(1, 9999, []))