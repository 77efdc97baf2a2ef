"""ListOffsets (version 1): look up the available offsets of topic partitions."""

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

API_KEY_LIST_OFFSETS = 2
API_VERSION = 1

LATEST_TIMESTAMP = -1
EARLIEST_TIMESTAMP = -2


@dataclass
class PartitionRequest:
    """A partition to look up, with the timestamp to search from."""

    partition_index: int
    timestamp: int

    def encode(self, writer: Writer) -> None:
        writer.int32(self.partition_index)
        writer.int64(self.timestamp)


@dataclass
class TopicRequest:
    """A topic to look up, with its partitions."""

    name: str
    partitions: list[PartitionRequest] = field(default_factory=list)

    def encode(self, writer: Writer) -> None:
        writer.string(self.name)
        writer.array(self.partitions, lambda item: item.encode(writer))


@dataclass
class ListOffsetsRequest:
    """A request for offsets; -1 asks for the latest, -2 for the earliest."""

    header: HeaderRequest
    replica_id: int
    topics: list[TopicRequest] = field(default_factory=list)

    @classmethod
    def create(cls, correlation_id: int, client_id: str, replica_id: int) -> ListOffsetsRequest:
        header = HeaderRequest(API_KEY_LIST_OFFSETS, API_VERSION, correlation_id, client_id)
        return cls(header=header, replica_id=replica_id)

    def add(self, topic_name: str, partition_index: int, timestamp: int) -> None:
        """Add a partition; a partition already present is left as it is."""
        topic = next((t for t in self.topics if t.name == topic_name), None)
        if topic is None:
            self.topics.append(
                TopicRequest(topic_name, [PartitionRequest(partition_index, timestamp)])
            )
            return
        if not any(p.partition_index == partition_index for p in topic.partitions):
            topic.partitions.append(PartitionRequest(partition_index, timestamp))

    def encode(self, writer: Writer) -> None:
        logger.debug("Encoding ListOffsetsRequest %r", self)
        self.header.encode(writer)
        writer.int32(self.replica_id)
        writer.array(self.topics, lambda item: item.encode(writer))

    def to_bytes(self) -> bytes:
        writer = Writer()
        self.encode(writer)
        return writer.getvalue()


@dataclass
class PartitionResponse:
    """The offset found for one partition."""

    partition_index: int
    error_code: KafkaCode
    timestamp: int
    offset: int


@dataclass
class TopicResponse:
    """The offsets found for one topic."""

    name: bytes
    partitions: list[PartitionResponse] = field(default_factory=list)


@dataclass
class ListOffsetsResponse:
    """The broker's answer to a list offsets request."""

    header: HeaderResponse
    topics: list[TopicResponse] = field(default_factory=list)

    @classmethod
    def from_bytes(cls, data: bytes) -> ListOffsetsResponse:
        return parse_list_offsets_response(Reader(data))

    def iter_partitions(self) -> Iterator[tuple[bytes, PartitionResponse]]:
        """Yield ``(topic_name, partition)`` for every partition in the response."""
        for topic in self.topics:
            for partition in topic.partitions:
                yield topic.name, partition


def _parse_partition(reader: Reader) -> PartitionResponse:
    partition_index = reader.int32()
    error_code = reader.kafka_code()
    timestamp = reader.int64()
    offset = reader.int64()
    return PartitionResponse(partition_index, error_code, timestamp, offset)


def _parse_topic(reader: Reader) -> TopicResponse:
    name = reader.string()
    partitions = reader.array(_parse_partition)
    return TopicResponse(name=name, partitions=partitions)


def parse_list_offsets_response(reader: Reader) -> ListOffsetsResponse:
    header = parse_header_response(reader)
    topics = reader.array(_parse_topic)
    return ListOffsetsResponse(header=header, topics=topics)