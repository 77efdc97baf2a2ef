"""SyncGroup (version 2): distribute partition assignments to group members."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from samsa.wire import (
    DecodingUtf8Error,
    HeaderRequest,
    HeaderResponse,
    KafkaCode,
    Reader,
    Writer,
    parse_header_response,
)

logger = logging.getLogger(__name__)

API_KEY_SYNC_GROUP = 14
API_VERSION = 2


def _to_text(value: str | bytes) -> str:
    if isinstance(value, str):
        return value
    try:
        return bytes(value).decode("utf-8")
    except UnicodeDecodeError as exc:
        raise DecodingUtf8Error("member id is not valid UTF-8") from exc


@dataclass
class PartitionAssignment:
    """The partitions of one topic given to a member."""

    topic_name: str | bytes
    partitions: list[int] = field(default_factory=list)

    def encode(self, writer: Writer) -> None:
        writer.string(self.topic_name)
        writer.array(self.partitions, writer.int32)

    @classmethod
    def parse(cls, reader: Reader) -> PartitionAssignment:
        topic_name = reader.string()
        partitions = reader.array(Reader.int32)
        return cls(topic_name=topic_name, partitions=partitions)


@dataclass
class MemberAssignment:
    """The embedded consumer assignment schema."""

    version: int
    partition_assignments: list[PartitionAssignment] = field(default_factory=list)
    user_data: bytes | None = None

    def encode(self, writer: Writer) -> None:
        writer.int16(self.version)
        writer.array(self.partition_assignments, lambda item: item.encode(writer))
        writer.nullable_blob(self.user_data)

    @classmethod
    def parse(cls, reader: Reader) -> MemberAssignment:
        version = reader.int16()
        partition_assignments = reader.array(PartitionAssignment.parse)
        user_data = reader.nullable_blob()
        return cls(version, partition_assignments, user_data)


@dataclass
class Assignment:
    """An assignment for one member, sent by the group leader."""

    member_id: str
    assignment: MemberAssignment

    @classmethod
    def create(cls, member_id: str | bytes, assignment: MemberAssignment) -> Assignment:
        return cls(member_id=_to_text(member_id), assignment=assignment)

    def encode(self, writer: Writer) -> None:
        writer.string(self.member_id)
        inner = Writer()
        self.assignment.encode(inner)
        writer.blob(inner.getvalue())


@dataclass
class SyncGroupRequest:
    """A request carrying the leader's assignments, or none from followers."""

    header: HeaderRequest
    group_id: str
    generation_id: int
    member_id: str
    assignments: list[Assignment] = field(default_factory=list)

    @classmethod
    def create(
        cls,
        correlation_id: int,
        client_id: str,
        group_id: str,
        generation_id: int,
        member_id: str | bytes,
        assignments: list[Assignment],
    ) -> SyncGroupRequest:
        header = HeaderRequest(API_KEY_SYNC_GROUP, API_VERSION, correlation_id, client_id)
        return cls(header, group_id, generation_id, _to_text(member_id), list(assignments))

    def encode(self, writer: Writer) -> None:
        logger.debug("Encoding SyncGroupRequest %r", self)
        self.header.encode(writer)
        writer.string(self.group_id)
        writer.int32(self.generation_id)
        writer.string(self.member_id)
        writer.array(self.assignments, lambda item: item.encode(writer))

    def to_bytes(self) -> bytes:
        writer = Writer()
        self.encode(writer)
        return writer.getvalue()


@dataclass
class SyncGroupResponse:
    """The assignment the coordinator hands to this member."""

    header: HeaderResponse
    throttle_time_ms: int
    error_code: KafkaCode
    assignment: MemberAssignment

    @classmethod
    def from_bytes(cls, data: bytes) -> SyncGroupResponse:
        return parse_sync_group_response(Reader(data))


def parse_sync_group_response(reader: Reader) -> SyncGroupResponse:
    header = parse_header_response(reader)
    throttle_time_ms = reader.int32()
    error_code = reader.kafka_code()
    reader.int32()  # length of the embedded assignment
    assignment = MemberAssignment.parse(reader)
    return SyncGroupResponse(header, throttle_time_ms, error_code, assignment)