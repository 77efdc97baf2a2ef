"""Metadata (version 1): discover brokers, topics and partition leaders."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Sequence

from samsa.wire import (
    HeaderRequest,
    HeaderResponse,
    KafkaCode,
    KafkaError,
    Reader,
    Writer,
    parse_header_response,
)

logger = logging.getLogger(__name__)

API_KEY_METADATA = 3
API_VERSION = 1


@dataclass
class MetadataRequest:
    """A request for metadata about the given topics."""

    header: HeaderRequest
    topics: list[str] = field(default_factory=list)

    @classmethod
    def create(cls, correlation_id: int, client_id: str, topics: Sequence[str]) -> MetadataRequest:
        header = HeaderRequest(API_KEY_METADATA, API_VERSION, correlation_id, client_id)
        return cls(header=header, topics=list(topics))

    def encode(self, writer: Writer) -> None:
        logger.debug("Encoding MetadataRequest %r", self)
        self.header.encode(writer)
        writer.array(self.topics, writer.string)

    def to_bytes(self) -> bytes:
        writer = Writer()
        self.encode(writer)
        return writer.getvalue()


@dataclass
class Broker:
    """A broker in the cluster."""

    node_id: int
    host: bytes
    port: int
    rack: bytes | None = None


@dataclass
class Partition:
    """A partition of a topic, with its leader and replicas."""

    error_code: KafkaCode
    partition_index: int
    leader_id: int
    replica_nodes: list[int] = field(default_factory=list)
    isr_nodes: list[int] = field(default_factory=list)

    def check_errors(self, topic_name: bytes) -> None:
        """Raise KafkaError if the partition reports an error."""
        if self.error_code != KafkaCode.NONE:
            logger.error(
                "Kafka error %s in topic %r partition %d",
                self.error_code.name,
                topic_name,
                self.partition_index,
            )
            raise KafkaError(self.error_code)


@dataclass
class Topic:
    """A topic and its partitions."""

    error_code: KafkaCode
    name: bytes
    is_internal: bool
    partitions: list[Partition] = field(default_factory=list)

    def check_errors(self) -> None:
        """Raise KafkaError if the topic or any of its partitions reports an error."""
        if self.error_code != KafkaCode.NONE:
            logger.error("Kafka error %s in topic %r", self.error_code.name, self.name)
            raise KafkaError(self.error_code)
        for partition in self.partitions:
            partition.check_errors(self.name)


@dataclass
class MetadataResponse:
    """The cluster's brokers, controller and topic layout."""

    header_response: HeaderResponse = field(default_factory=HeaderResponse)
    brokers: list[Broker] = field(default_factory=list)
    controller_id: int = 0
    topics: list[Topic] = field(default_factory=list)

    @classmethod
    def from_bytes(cls, data: bytes) -> MetadataResponse:
        return parse_metadata_response(Reader(data))

    def check_errors(self) -> None:
        """Raise KafkaError for the first error found in any topic."""
        for topic in self.topics:
            topic.check_errors()


def _parse_broker(reader: Reader) -> Broker:
    node_id = reader.int32()
    host = reader.string()
    port = reader.int32()
    rack = reader.nullable_string()
    return Broker(node_id=node_id, host=host, port=port, rack=rack)


def _parse_partition(reader: Reader) -> Partition:
    error_code = reader.kafka_code()
    partition_index = reader.int32()
    leader_id = reader.int32()
    replica_nodes = reader.array(Reader.int32)
    isr_nodes = reader.array(Reader.int32)
    return Partition(error_code, partition_index, leader_id, replica_nodes, isr_nodes)


def _parse_topic(reader: Reader) -> Topic:
    error_code = reader.kafka_code()
    name = reader.string()
    is_internal = reader.boolean()
    partitions = reader.array(_parse_partition)
    return Topic(error_code, name, is_internal, partitions)


def parse_metadata_response(reader: Reader) -> MetadataResponse:
    header_response = parse_header_response(reader)
    brokers = reader.array(_parse_broker)
    controller_id = reader.int32()
    topics = reader.array(_parse_topic)
    return MetadataResponse(header_response, brokers, controller_id, topics)