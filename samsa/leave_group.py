"""LeaveGroup (version 0): depart a consumer group directly."""

from __future__ import annotations

import logging
from dataclasses import dataclass

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

API_KEY_LEAVE_GROUP = 13
API_VERSION = 0


def _to_text(value: str | bytes) -> str:
    if isinstance(value, str):
        return value
    try:
        return bytes(value).decode("utf-8")
    except UnicodeDecodeError as exc:
        raise DecodingUtf8Error("member id is not valid UTF-8") from exc


@dataclass
class LeaveGroupRequest:
    """A request to remove a member from a group."""

    header: HeaderRequest
    group_id: str
    member_id: str

    @classmethod
    def create(
        cls, correlation_id: int, client_id: str, group_id: str, member_id: str | bytes
    ) -> LeaveGroupRequest:
        header = HeaderRequest(API_KEY_LEAVE_GROUP, API_VERSION, correlation_id, client_id)
        return cls(header=header, group_id=group_id, member_id=_to_text(member_id))

    def encode(self, writer: Writer) -> None:
        logger.debug("Encoding LeaveGroupRequest %r", self)
        self.header.encode(writer)
        writer.string(self.group_id)
        writer.string(self.member_id)

    def to_bytes(self) -> bytes:
        writer = Writer()
        self.encode(writer)
        return writer.getvalue()


@dataclass
class LeaveGroupResponse:
    """The coordinator's answer to a leave request."""

    header: HeaderResponse
    error_code: KafkaCode

    @classmethod
    def from_bytes(cls, data: bytes) -> LeaveGroupResponse:
        return parse_leave_group_response(Reader(data))


def parse_leave_group_response(reader: Reader) -> LeaveGroupResponse:
    header = parse_header_response(reader)
    error_code = reader.kafka_code()
    return LeaveGroupResponse(header=header, error_code=error_code)