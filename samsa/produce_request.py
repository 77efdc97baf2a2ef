"""Produce request (version 3): record batches sent to partition leaders."""

from __future__ import annotations

import enum
import logging
from dataclasses import dataclass, field

from samsa.utils import compress, now, to_crc
from samsa.wire import HeaderRequest, Writer

logger = logging.getLogger(__name__)

API_KEY_PRODUCE = 0
API_VERSION = 3

MESSAGE_MAGIC_BYTE = 2

_CRC_POSITION = 5


class Compression(enum.Enum):
    """Compression codecs a record batch can use."""

    GZIP = 1


@dataclass(frozen=True)
class Attributes:
    """Record batch attributes; only the compression bits are used."""

    compression: Compression | None = None

    @classmethod
    def from_int(cls, value: int) -> Attributes:
        """Read attributes from their int16 form; an odd positive value means gzip."""
        if value > 0 and value % 2 == 1:
            return cls(Compression.GZIP)
        return cls(None)

    def encode(self, writer: Writer) -> None:
        writer.int16(1 if self.compression is Compression.GZIP else 0)


@dataclass
class Header:
    """A record header: a text key and a byte value."""

    key: str
    value: bytes

    def encode(self, writer: Writer) -> None:
        key = self.key.encode("utf-8")
        value = bytes(self.value)
        writer.varint(len(key))
        writer.raw(key)
        writer.varint(len(value))
        writer.raw(value)


@dataclass
class Message:
    """A key, value and headers to be produced."""

    key: bytes | None = None
    value: bytes | None = None
    headers: list[Header] = field(default_factory=list)


@dataclass
class Record:
    """A single record inside a batch, with its deltas from the batch base."""

    timestamp_delta: int
    offset_delta: int
    key: bytes | None = None
    value: bytes | None = None
    headers: list[Header] = field(default_factory=list)
    attributes: int = 0

    @classmethod
    def from_message(cls, message: Message, timestamp_delta: int, offset_delta: int) -> Record:
        return cls(
            timestamp_delta=timestamp_delta,
            offset_delta=offset_delta,
            key=message.key,
            value=message.value,
            headers=list(message.headers),
        )

    def _body(self) -> bytes:
        body = Writer()
        body.int8(self.attributes)
        body.varint(self.timestamp_delta)
        body.varint(self.offset_delta)
        key = bytes(self.key) if self.key is not None else b""
        body.varint(len(key))
        body.raw(key)
        value = bytes(self.value) if self.value is not None else b""
        body.varint(len(value))
        body.raw(value)
        body.varint(len(self.headers))
        for header in self.headers:
            header.encode(body)
        return body.getvalue()

    def encode(self, writer: Writer) -> None:
        """Write the record as a varint length followed by its body."""
        body = self._body()
        writer.varint(len(body))
        writer.raw(body)


@dataclass
class RecordBatch:
    """A batch of records in message format version 2."""

    attributes: Attributes = field(default_factory=Attributes)
    base_offset: int = 0
    partition_leader_epoch: int = -1
    magic: int = MESSAGE_MAGIC_BYTE
    crc: int = 0
    last_offset_delta: int = -1
    base_timestamp: int = field(default_factory=now)
    max_timestamp: int = 0
    producer_id: int = -1
    producer_epoch: int = -1
    base_sequence: int = -1
    records: list[Record] = field(default_factory=list)

    @classmethod
    def create(cls, attributes: Attributes) -> RecordBatch:
        return cls(attributes=attributes)

    def add(self, message: Message) -> None:
        """Append a message, stamping it with offset and timestamp deltas."""
        self.last_offset_delta += 1
        self.max_timestamp = now()
        timestamp_delta = self.max_timestamp - self.base_timestamp
        self.records.append(
            Record.from_message(message, timestamp_delta, self.last_offset_delta)
        )

    def encode(self, writer: Writer) -> None:
        """Write the base offset, then the batch as length-prefixed bytes with its CRC."""
        body = Writer()
        body.int32(self.partition_leader_epoch)
        body.int8(self.magic)
        body.uint32(self.crc)
        self.attributes.encode(body)
        body.int32(self.last_offset_delta)
        body.int64(self.base_timestamp)
        body.int64(self.max_timestamp)
        body.int64(self.producer_id)
        body.int16(self.producer_epoch)
        body.int32(self.base_sequence)

        if self.attributes.compression is Compression.GZIP:
            records = Writer()
            for record in self.records:
                record.encode(records)
            # compressed data follows the record count directly, without a length
            body.int32(len(self.records))
            body.raw(compress(records.getvalue()))
        else:
            body.array(self.records, lambda record: record.encode(body))

        data = bytearray(body.getvalue())
        checksum = to_crc(bytes(data[_CRC_POSITION + 4:]))
        data[_CRC_POSITION:_CRC_POSITION + 4] = checksum.to_bytes(4, "big")

        writer.int64(self.base_offset)
        writer.blob(bytes(data))


@dataclass
class _PartitionData:
    partition: int
    attributes: Attributes
    batches: list[RecordBatch] = field(default_factory=list)

    def add(self, message: Message) -> None:
        # every message goes into a single batch
        if not self.batches:
            self.batches.append(RecordBatch.create(self.attributes))
        self.batches[0].add(message)

    def encode(self, writer: Writer) -> None:
        writer.int32(self.partition)
        record_set = Writer()
        for batch in self.batches:
            batch.encode(record_set)
        writer.blob(record_set.getvalue())


@dataclass
class _TopicData:
    name: str
    attributes: Attributes
    partitions: list[_PartitionData] = field(default_factory=list)

    def add(self, partition: int, message: Message) -> None:
        target = next((p for p in self.partitions if p.partition == partition), None)
        if target is None:
            target = _PartitionData(partition, self.attributes)
            self.partitions.append(target)
        target.add(message)

    def encode(self, writer: Writer) -> None:
        writer.string(self.name)
        writer.array(self.partitions, lambda item: item.encode(writer))


@dataclass
class ProduceRequest:
    """A request that sends messages to topic partitions."""

    header: HeaderRequest
    required_acks: int
    timeout_ms: int
    attributes: Attributes = field(default_factory=Attributes)
    transactional_id: str | None = None
    topic_partitions: list[_TopicData] = field(default_factory=list)

    @classmethod
    def create(
        cls,
        required_acks: int,
        timeout_ms: int,
        correlation_id: int,
        client_id: str,
        attributes: Attributes,
    ) -> ProduceRequest:
        header = HeaderRequest(API_KEY_PRODUCE, API_VERSION, correlation_id, client_id)
        return cls(
            header=header,
            required_acks=required_acks,
            timeout_ms=timeout_ms,
            attributes=attributes,
        )

    def add(
        self,
        topic: str,
        partition: int,
        key: bytes | None,
        value: bytes | None,
        headers: list[Header] | None = None,
    ) -> None:
        """Queue a message for a topic partition."""
        message = Message(key, value, list(headers or []))
        target = next((t for t in self.topic_partitions if t.name == topic), None)
        if target is None:
            target = _TopicData(topic, self.attributes)
            self.topic_partitions.append(target)
        target.add(partition, message)

    def encode(self, writer: Writer) -> None:
        logger.debug("Encoding ProduceRequest %r", self)
        self.header.encode(writer)
        writer.nullable_string(self.transactional_id)
        writer.int16(self.required_acks)
        writer.int32(self.timeout_ms)
        writer.array(self.topic_partitions, lambda item: item.encode(writer))

    def to_bytes(self) -> bytes:
        writer = Writer()
        self.encode(writer)
        return writer.getvalue()