"""JoinGroup (version 2): become a member of a consumer group."""

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

API_KEY_JOIN_GROUP = 11
API_VERSION = 2

METADATA_VERSION = 3


def _to_text(value: str | bytes) -> str:
    if isinstance(value, str):
        return value
    try:
        return bytes(value).decode("utf-8")
    except UnicodeDecodeError as exc:
        raise DecodingUtf8Error("member id is not valid UTF-8") from exc


@dataclass
class Metadata:
    """The embedded consumer subscription schema."""

    version: int
    subscription: list[str] = field(default_factory=list)
    user_data: bytes | None = None

    def encode(self, writer: Writer) -> None:
        writer.int16(self.version)
        writer.array(self.subscription, writer.string)
        writer.nullable_blob(self.user_data)


@dataclass
class Protocol:
    """A protocol the member supports, with its subscription metadata."""

    name: str
    metadata: Metadata

    @classmethod
    def create(cls, name: str, topics: list[str]) -> Protocol:
        return cls(name=name, metadata=Metadata(METADATA_VERSION, list(topics), None))

    def encode(self, writer: Writer) -> None:
        writer.string(self.name)
        inner = Writer()
        self.metadata.encode(inner)
        writer.blob(inner.getvalue())


@dataclass
class JoinGroupRequest:
    """A request to join a group; an empty member id means a first join."""

    header: HeaderRequest
    group_id: str
    session_timeout_ms: int
    rebalance_timeout_ms: int
    member_id: str
    protocol_type: str
    protocols: list[Protocol] = field(default_factory=list)

    @classmethod
    def create(
        cls,
        correlation_id: int,
        client_id: str,
        group_id: str,
        session_timeout_ms: int,
        rebalance_timeout_ms: int,
        member_id: str | bytes,
        protocol_type: str,
        protocols: list[Protocol],
    ) -> JoinGroupRequest:
        header = HeaderRequest(API_KEY_JOIN_GROUP, API_VERSION, correlation_id, client_id)
        return cls(
            header,
            group_id,
            session_timeout_ms,
            rebalance_timeout_ms,
            _to_text(member_id),
            protocol_type,
            list(protocols),
        )

    def encode(self, writer: Writer) -> None:
        logger.debug("Encoding JoinGroupRequest %r", self)
        self.header.encode(writer)
        writer.string(self.group_id)
        writer.int32(self.session_timeout_ms)
        writer.int32(self.rebalance_timeout_ms)
        writer.string(self.member_id)
        writer.string(self.protocol_type)
        writer.array(self.protocols, lambda item: item.encode(writer))

    def to_bytes(self) -> bytes:
        writer = Writer()
        self.encode(writer)
        return writer.getvalue()


@dataclass
class Member:
    """A member of the group, as seen by the leader."""

    member_id: bytes
    metadata: bytes


@dataclass
class JoinGroupResponse:
    """The coordinator's answer to a join request."""

    header: HeaderResponse
    throttle_time_ms: int
    error_code: KafkaCode
    generation_id: int
    protocol_name: bytes
    leader: bytes
    member_id: bytes
    members: list[Member] = field(default_factory=list)

    @classmethod
    def from_bytes(cls, data: bytes) -> JoinGroupResponse:
        return parse_join_group_response(Reader(data))


def _parse_member(reader: Reader) -> Member:
    member_id = reader.string()
    metadata = reader.blob()
    return Member(member_id=member_id, metadata=metadata)


def parse_join_group_response(reader: Reader) -> JoinGroupResponse:
    header = parse_header_response(reader)
    throttle_time_ms = reader.int32()
    error_code = reader.kafka_code()
    generation_id = reader.int32()
    protocol_name = reader.string()
    leader = reader.string()
    member_id = reader.string()
    members = reader.array(_parse_member)
    return JoinGroupResponse(
        header,
        throttle_time_ms,
        error_code,
        generation_id,
        protocol_name,
        leader,
        member_id,
        members,
    )