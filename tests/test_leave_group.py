import pytest

from samsa.leave_group import (
    LeaveGroupRequest,
    LeaveGroupResponse,
    parse_leave_group_response,
)
from samsa.wire import DecodingUtf8Error, HeaderResponse, KafkaCode, ParsingError, Reader


def test_encode():
    expected = bytes(
        [
            0, 13, 0, 0, 0, 0, 0, 1, 0, 4, 114, 117, 115, 116, 0, 8, 66, 105, 103, 32, 68, 111,
            103, 115, 0, 0,
        ]
    )
    req = LeaveGroupRequest.create(1, "rust", "Big Dogs", b"")
    assert req.to_bytes() == expected


def test_member_id_text_and_bytes_agree():
    a = LeaveGroupRequest.create(1, "rust", "Big Dogs", "member-1")
    b = LeaveGroupRequest.create(1, "rust", "Big Dogs", b"member-1")
    assert a.to_bytes() == b.to_bytes()
    assert b.member_id == "member-1"


def test_invalid_utf8_member_id():
    with pytest.raises(DecodingUtf8Error):
        LeaveGroupRequest.create(1, "rust", "Big Dogs", b"\xff\xfe")


def test_parse():
    expected = LeaveGroupResponse(
        header=HeaderResponse(correlation_id=1), error_code=KafkaCode.NONE
    )
    assert parse_leave_group_response(Reader(b"\0\0\0\x01\0\0")) == expected
    assert LeaveGroupResponse.from_bytes(b"\0\0\0\x01\0\0") == expected


def test_parse_truncated():
    with pytest.raises(ParsingError):
        LeaveGroupResponse.from_bytes(b"\0\0\0\x01\0")