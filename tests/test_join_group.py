import pytest

from samsa.join_group import (
    JoinGroupRequest,
    JoinGroupResponse,
    Member,
    Protocol,
    parse_join_group_response,
)
from samsa.wire import DecodingUtf8Error, HeaderResponse, KafkaCode, ParsingError, Reader

MEMBER_A = b"group integration test-1fdacda0-218b-4c93-aa1d-bfe1ee48e9c9"
MEMBER_B = b"group integration test-f92a30c7-3927-4817-8a13-7949b4688680"
MEMBER_METADATA = b"\x00\x03\x00\x00\x00\x01\x00\tpurchases\xff\xff\xff\xff"

RESPONSE_BYTES = (
    b"\x00\x00\x00\x01\x00\x00\x00\x00\x00\x00\x00\x00\x00\x02\x00\x08consumer"
    + b"\x00;" + MEMBER_A
    + b"\x00;" + MEMBER_A
    + b"\x00\x00\x00\x02"
    + b"\x00;" + MEMBER_A
    + b"\x00\x00\x00\x15" + MEMBER_METADATA
    + b"\x00;" + MEMBER_B
    + b"\x00\x00\x00\x15" + MEMBER_METADATA
)


def _request(member_id=""):
    return JoinGroupRequest.create(
        1,
        "rust",
        "Big Dogs",
        10000,
        10000,
        member_id,
        "consumer-range",
        [Protocol.create("consumer", ["purchases"])],
    )


def test_encode():
    expected = bytes([
        0, 11, 0, 2, 0, 0, 0, 1, 0, 4, 114, 117, 115, 116, 0, 8, 66, 105, 103, 32, 68, 111,
        103, 115, 0, 0, 39, 16, 0, 0, 39, 16, 0, 0, 0, 14, 99, 111, 110, 115, 117, 109, 101,
        114, 45, 114, 97, 110, 103, 101, 0, 0, 0, 1, 0, 8, 99, 111, 110, 115, 117, 109, 101,
        114, 0, 0, 0, 21, 0, 3, 0, 0, 0, 1, 0, 9, 112, 117, 114, 99, 104, 97, 115, 101, 115,
        255, 255, 255, 255,
    ])
    assert _request().to_bytes() == expected


def test_bytes_member_id_encodes_like_text():
    assert _request(b"").to_bytes() == _request("").to_bytes()


def test_invalid_utf8_member_id_raises():
    with pytest.raises(DecodingUtf8Error):
        _request(b"\xff\xfe")


def test_protocol_create_uses_version_three():
    protocol = Protocol.create("consumer", ["purchases"])
    assert protocol.metadata.version == 3
    assert protocol.metadata.subscription == ["purchases"]
    assert protocol.metadata.user_data is None


def test_parse():
    expected = JoinGroupResponse(
        header=HeaderResponse(correlation_id=1),
        throttle_time_ms=0,
        error_code=KafkaCode.NONE,
        generation_id=2,
        protocol_name=b"consumer",
        leader=MEMBER_A,
        member_id=MEMBER_A,
        members=[
            Member(member_id=MEMBER_A, metadata=MEMBER_METADATA),
            Member(member_id=MEMBER_B, metadata=MEMBER_METADATA),
        ],
    )
    assert parse_join_group_response(Reader(RESPONSE_BYTES)) == expected
    assert JoinGroupResponse.from_bytes(RESPONSE_BYTES) == expected


def test_parse_consumes_all_bytes():
    reader = Reader(RESPONSE_BYTES)
    parse_join_group_response(reader)
    assert reader.remaining() == b""


def test_truncated_response_raises():
    with pytest.raises(ParsingError):
        JoinGroupResponse.from_bytes(RESPONSE_BYTES[:-3])