"""Produce response (version 3) parsing."""

from __future__ import annotations

from dataclasses import dataclass, field

from samsa.wire import HeaderResponse, KafkaCode, Reader, parse_header_response


@dataclass
class PartitionResponse:
    """The outcome of producing to one partition."""

    index: int
    error_code: KafkaCode
    base_offset: int
    log_append_time: int


@dataclass
class Response:
    """The outcome of producing to one topic."""

    name: bytes
    partition_responses: list[PartitionResponse] = field(default_factory=list)


@dataclass
class ProduceResponse:
    """A broker's answer to a produce request with non-zero acks."""

    header: HeaderResponse
    responses: list[Response] = field(default_factory=list)

    @classmethod
    def from_bytes(cls, data: bytes) -> ProduceResponse:
        return parse_produce_response(Reader(data))


def parse_produce_response(reader: Reader) -> ProduceResponse:
    header = parse_header_response(reader)
    responses = reader.array(parse_response)
    return ProduceResponse(header=header, responses=responses)


def parse_response(reader: Reader) -> Response:
    name = reader.string()
    partition_responses = reader.array(parse_partition_response)
    return Response(name=name, partition_responses=partition_responses)


def parse_partition_response(reader: Reader) -> PartitionResponse:
    index = reader.int32()
    error_code = reader.kafka_code()
    base_offset = reader.int64()
    log_append_time = reader.int64()
    return PartitionResponse(index, error_code, base_offset, log_append_time)