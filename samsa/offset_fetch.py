"""OffsetFetch (version 2): fetch the committed offsets of a consumer group."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Iterator

from samsa.wire import (
    HeaderRequest,
    HeaderResponse,
    KafkaCode,
    Reader,
    Writer,
    parse_header_response,
)

logger = logging.getLogger(__name__)

API_KEY_OFFSET_FETCH = 9
API_VERSION = 2


@dataclass
class TopicRequest:
    """A topic whose committed offsets are wanted, with its partition indexes."""

    name: str
    partition_indexes: list[int] = field(default_factory=list)

    def encode(self, writer: Writer) -> None:
        writer.string(self.name)
        writer.array(self.partition_indexes, writer.int32)


@dataclass
class OffsetFetchRequest:
    """A request for the offsets a group has committed."""

    header: HeaderRequest
    group_id: str
    topics: list[TopicRequest] = field(default_factory=list)

    @classmethod
    def create(cls, correlation_id: int, client_id: str, group_id: str) -> OffsetFetchRequest:
        header = HeaderRequest(API_KEY_OFFSET_FETCH, API_VERSION, correlation_id, client_id)
        return cls(header=header, group_id=group_id)

    def add(self, topic_name: str, partition_index: int) -> None:
        """Add a partition; a partition already present is left as it is."""
        topic = next((t for t in self.topics if t.name == topic_name), None)
        if topic is None:
            self.topics.append(TopicRequest(topic_name, [partition_index]))
        elif partition_index not in topic.partition_indexes:
            topic.partition_indexes.append(partition_index)

    def encode(self, writer: Writer) -> None:
        logger.debug("Encoding OffsetFetchRequest %r", self)
        self.header.encode(writer)
        writer.string(self.group_id)
        writer.array(self.topics, lambda item: item.encode(writer))

    def to_bytes(self) -> bytes:
        writer = Writer()
        self.encode(writer)
        return writer.getvalue()


@dataclass
class PartitionResponse:
    """The committed offset of one partition; -1 when nothing was committed."""

    partition_index: int
    committed_offset: int
    metadata: bytes | None
    error_code: KafkaCode


@dataclass
class TopicResponse:
    """The committed offsets of one topic."""

    name: bytes
    partitions: list[PartitionResponse] = field(default_factory=list)


@dataclass
class OffsetFetchResponse:
    """The coordinator's answer to an offset fetch request."""

    header: HeaderResponse
    topics: list[TopicResponse] = field(default_factory=list)
    error_code: KafkaCode = KafkaCode.NONE

    @classmethod
    def from_bytes(cls, data: bytes) -> OffsetFetchResponse:
        return parse_offset_fetch_response(Reader(data))

    def iter_partitions(self) -> Iterator[tuple[bytes, PartitionResponse]]:
        """Yield ``(topic_name, partition)`` for every partition in the response."""
        for topic in self.topics:
            for partition in topic.partitions:
                yield topic.name, partition


def _parse_partition(reader: Reader) -> PartitionResponse:
    partition_index = reader.int32()
    committed_offset = reader.int64()
    metadata = reader.nullable_string()
    error_code = reader.kafka_code()
    return PartitionResponse(partition_index, committed_offset, metadata, error_code)


def _parse_topic(reader: Reader) -> TopicResponse:
    name = reader.string()
    partitions = reader.array(_parse_partition)
    return TopicResponse(name=name, partitions=partitions)


def parse_offset_fetch_response(reader: Reader) -> OffsetFetchResponse:
    header = parse_header_response(reader)
    topics = reader.array(_parse_topic)
    error_code = reader.kafka_code()
    return OffsetFetchResponse(header=header, topics=topics, error_code=error_code)