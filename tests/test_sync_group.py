import pytest

from samsa.sync_group import (
    Assignment,
    MemberAssignment,
    PartitionAssignment,
    SyncGroupRequest,
    SyncGroupResponse,
    parse_sync_group_response,
)
from samsa.wire import DecodingUtf8Error, HeaderResponse, KafkaCode, ParsingError, Reader, Writer

PARSE_BUF = (
    b"\0\0\0\x01\0\0\0\0\0\0\0\0\0\x1d\0\x03\0\0\0\x01\0\tpurchases"
    b"\0\0\0\x01\0\0\0\0\xff\xff\xff\xff"
)


def test_encode():
    expected = bytes([
        0, 14, 0, 2, 0, 0, 0, 1, 0, 4, 114, 117, 115, 116, 0, 8, 66, 105, 103, 32, 68, 111,
        103, 115, 0, 0, 0, 0, 0, 4, 106, 111, 101, 121, 0, 0, 0, 1, 0, 4, 106, 111, 101, 121,
        0, 0, 0, 29, 0, 3, 0, 0, 0, 1, 0, 9, 112, 117, 114, 99, 104, 97, 115, 101, 115, 0, 0,
        0, 1, 0, 0, 0, 1, 255, 255, 255, 255,
    ])
    assignments = [
        Assignment.create(
            b"joey",
            MemberAssignment(
                version=3,
                partition_assignments=[PartitionAssignment("purchases", [1])],
                user_data=None,
            ),
        )
    ]
    req = SyncGroupRequest.create(1, "rust", "Big Dogs", 0, b"joey", assignments)
    assert req.to_bytes() == expected


def test_parse():
    expected = SyncGroupResponse(
        header=HeaderResponse(correlation_id=1),
        throttle_time_ms=0,
        error_code=KafkaCode.NONE,
        assignment=MemberAssignment(
            version=3,
            partition_assignments=[PartitionAssignment(b"purchases", [0])],
            user_data=None,
        ),
    )
    assert parse_sync_group_response(Reader(PARSE_BUF)) == expected
    assert SyncGroupResponse.from_bytes(PARSE_BUF) == expected


def test_from_bytes_truncated():
    with pytest.raises(ParsingError):
        SyncGroupResponse.from_bytes(PARSE_BUF[:20])


def test_member_id_must_be_utf8():
    with pytest.raises(DecodingUtf8Error):
        Assignment.create(b"\xff\xfe", MemberAssignment(version=3))
    with pytest.raises(DecodingUtf8Error):
        SyncGroupRequest.create(1, "rust", "g", 0, b"\xc3", [])


def test_member_assignment_round_trip():
    original = MemberAssignment(
        version=1,
        partition_assignments=[PartitionAssignment("a", [0, 2]), PartitionAssignment("b", [])],
        user_data=b"data",
    )
    writer = Writer()
    original.encode(writer)
    parsed = MemberAssignment.parse(Reader(writer.getvalue()))
    assert parsed.version == 1
    assert parsed.user_data == b"data"
    assert [(p.topic_name, p.partitions) for p in parsed.partition_assignments] == [
        (b"a", [0, 2]),
        (b"b", []),
    ]


def test_follower_request_has_empty_assignments():
    req = SyncGroupRequest.create(1, "rust", "Big Dogs", 4, "joey", [])
    assert req.to_bytes().endswith(b"\0\x04joey\0\0\0\0")