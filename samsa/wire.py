"""Kafka wire primitives: error types, error codes, a writer, a reader and headers."""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Any, Callable, Iterable, TypeVar

T = TypeVar("T")

_U64_MASK = 0xFFFFFFFFFFFFFFFF


class KafkaCode(enum.IntEnum):
    """Error codes a Kafka broker reports."""

    UNKNOWN_SERVER_ERROR = -1
    NONE = 0
    OFFSET_OUT_OF_RANGE = 1
    CORRUPT_MESSAGE = 2
    UNKNOWN_TOPIC_OR_PARTITION = 3
    INVALID_FETCH_SIZE = 4
    LEADER_NOT_AVAILABLE = 5
    NOT_LEADER_OR_FOLLOWER = 6
    REQUEST_TIMED_OUT = 7
    BROKER_NOT_AVAILABLE = 8
    REPLICA_NOT_AVAILABLE = 9
    MESSAGE_TOO_LARGE = 10
    STALE_CONTROLLER_EPOCH = 11
    OFFSET_METADATA_TOO_LARGE = 12
    NETWORK_EXCEPTION = 13
    COORDINATOR_LOAD_IN_PROGRESS = 14
    COORDINATOR_NOT_AVAILABLE = 15
    NOT_COORDINATOR = 16
    INVALID_TOPIC_EXCEPTION = 17
    RECORD_LIST_TOO_LARGE = 18
    NOT_ENOUGH_REPLICAS = 19
    NOT_ENOUGH_REPLICAS_AFTER_APPEND = 20
    INVALID_REQUIRED_ACKS = 21
    ILLEGAL_GENERATION = 22
    INCONSISTENT_GROUP_PROTOCOL = 23
    INVALID_GROUP_ID = 24
    UNKNOWN_MEMBER_ID = 25
    INVALID_SESSION_TIMEOUT = 26
    REBALANCE_IN_PROGRESS = 27
    INVALID_COMMIT_OFFSET_SIZE = 28
    TOPIC_AUTHORIZATION_FAILED = 29
    GROUP_AUTHORIZATION_FAILED = 30
    CLUSTER_AUTHORIZATION_FAILED = 31
    INVALID_TIMESTAMP = 32
    UNSUPPORTED_SASL_MECHANISM = 33
    ILLEGAL_SASL_STATE = 34
    UNSUPPORTED_VERSION = 35
    TOPIC_ALREADY_EXISTS = 36
    INVALID_PARTITIONS = 37
    INVALID_REPLICATION_FACTOR = 38
    INVALID_REPLICA_ASSIGNMENT = 39
    INVALID_CONFIG = 40
    NOT_CONTROLLER = 41
    INVALID_REQUEST = 42
    UNSUPPORTED_FOR_MESSAGE_FORMAT = 43
    POLICY_VIOLATION = 44
    OUT_OF_ORDER_SEQUENCE_NUMBER = 45
    DUPLICATE_SEQUENCE_NUMBER = 46
    INVALID_PRODUCER_EPOCH = 47
    INVALID_TXN_STATE = 48
    INVALID_PRODUCER_ID_MAPPING = 49
    INVALID_TRANSACTION_TIMEOUT = 50
    CONCURRENT_TRANSACTIONS = 51
    TRANSACTION_COORDINATOR_FENCED = 52
    TRANSACTIONAL_ID_AUTHORIZATION_FAILED = 53
    SECURITY_DISABLED = 54
    OPERATION_NOT_ATTEMPTED = 55
    KAFKA_STORAGE_ERROR = 56
    LOG_DIR_NOT_FOUND = 57
    SASL_AUTHENTICATION_FAILED = 58
    UNKNOWN_PRODUCER_ID = 59
    REASSIGNMENT_IN_PROGRESS = 60
    DELEGATION_TOKEN_AUTH_DISABLED = 61
    DELEGATION_TOKEN_NOT_FOUND = 62
    DELEGATION_TOKEN_OWNER_MISMATCH = 63
    DELEGATION_TOKEN_REQUEST_NOT_ALLOWED = 64
    DELEGATION_TOKEN_AUTHORIZATION_FAILED = 65
    DELEGATION_TOKEN_EXPIRED = 66
    INVALID_PRINCIPAL_TYPE = 67
    NON_EMPTY_GROUP = 68
    GROUP_ID_NOT_FOUND = 69
    FETCH_SESSION_ID_NOT_FOUND = 70
    INVALID_FETCH_SESSION_EPOCH = 71
    LISTENER_NOT_FOUND = 72
    TOPIC_DELETION_DISABLED = 73
    FENCED_LEADER_EPOCH = 74
    UNKNOWN_LEADER_EPOCH = 75
    UNSUPPORTED_COMPRESSION_TYPE = 76
    STALE_BROKER_EPOCH = 77
    OFFSET_NOT_AVAILABLE = 78
    MEMBER_ID_REQUIRED = 79
    PREFERRED_LEADER_NOT_AVAILABLE = 80
    GROUP_MAX_SIZE_REACHED = 81
    FENCED_INSTANCE_ID = 82


class SamsaError(Exception):
    """Base class of every error this package raises."""


class ParsingError(SamsaError, ValueError):
    """A broker response could not be parsed; ``data`` holds the bytes."""

    def __init__(self, data: bytes = b"", reason: str = "failed to parse response") -> None:
        super().__init__(reason)
        self.data = bytes(data)


class DecodingUtf8Error(SamsaError, ValueError):
    """Bytes that had to be UTF-8 text were not."""


class KafkaError(SamsaError):
    """The broker reported an error code."""

    def __init__(self, code: KafkaCode) -> None:
        super().__init__(f"kafka error {code.name}")
        self.code = code


class ArgError(SamsaError, ValueError):
    """An argument was not acceptable."""


def _text_bytes(value: str | bytes) -> bytes:
    return value.encode("utf-8") if isinstance(value, str) else bytes(value)


class Writer:
    """Accumulates big-endian Kafka protocol fields."""

    def __init__(self) -> None:
        self._buffer = bytearray()

    def _int(self, value: int, size: int, signed: bool = True) -> Writer:
        self._buffer += int(value).to_bytes(size, "big", signed=signed)
        return self

    def int8(self, value: int) -> Writer:
        return self._int(value, 1)

    def int16(self, value: int) -> Writer:
        return self._int(value, 2)

    def int32(self, value: int) -> Writer:
        return self._int(value, 4)

    def int64(self, value: int) -> Writer:
        return self._int(value, 8)

    def uint32(self, value: int) -> Writer:
        return self._int(value, 4, signed=False)

    def varint(self, value: int) -> Writer:
        """Write a zigzag-encoded variable-length integer."""
        encoded = ((value << 1) ^ (value >> 63)) & _U64_MASK
        while encoded >= 0x80:
            self._buffer.append((encoded & 0x7F) | 0x80)
            encoded >>= 7
        self._buffer.append(encoded)
        return self

    def string(self, value: str | bytes) -> Writer:
        data = _text_bytes(value)
        self.int16(len(data))
        self._buffer += data
        return self

    def nullable_string(self, value: str | bytes | None) -> Writer:
        if value is None:
            return self.int16(-1)
        return self.string(value)

    def blob(self, value: bytes) -> Writer:
        data = bytes(value)
        self.int32(len(data))
        self._buffer += data
        return self

    def nullable_blob(self, value: bytes | None) -> Writer:
        if value is None:
            return self.int32(-1)
        return self.blob(value)

    def raw(self, data: bytes) -> Writer:
        self._buffer += data
        return self

    def array(self, items: Iterable[T], encode_item: Callable[[T], Any]) -> Writer:
        """Write an int32 count, then call ``encode_item`` on each item in turn."""
        items = list(items)
        self.int32(len(items))
        for item in items:
            encode_item(item)
        return self

    def getvalue(self) -> bytes:
        return bytes(self._buffer)


class Reader:
    """Reads big-endian Kafka protocol fields from a byte string."""

    def __init__(self, data: bytes) -> None:
        self._data = bytes(data)
        self._pos = 0

    def _take(self, size: int) -> bytes:
        end = self._pos + size
        if size < 0 or end > len(self._data):
            raise ParsingError(self._data, f"needed {size} bytes at offset {self._pos}")
        chunk = self._data[self._pos:end]
        self._pos = end
        return chunk

    def _int(self, size: int) -> int:
        return int.from_bytes(self._take(size), "big", signed=True)

    def int16(self) -> int:
        return self._int(2)

    def int32(self) -> int:
        return self._int(4)

    def int64(self) -> int:
        return self._int(8)

    def boolean(self) -> bool:
        return self._take(1) != b"\x00"

    def string(self) -> bytes:
        length = self.int16()
        if length < 0:
            raise ParsingError(self._data, "null where a string was required")
        return self._take(length)

    def nullable_string(self) -> bytes | None:
        length = self.int16()
        if length < 0:
            return None
        return self._take(length)

    def blob(self) -> bytes:
        length = self.int32()
        if length < 0:
            raise ParsingError(self._data, "null where bytes were required")
        return self._take(length)

    def nullable_blob(self) -> bytes | None:
        length = self.int32()
        if length < 0:
            return None
        return self._take(length)

    def kafka_code(self) -> KafkaCode:
        value = self.int16()
        try:
            return KafkaCode(value)
        except ValueError:
            raise ParsingError(self._data, f"unknown kafka error code {value}") from None

    def array(self, parse_item: Callable[[Reader], T]) -> list[T]:
        """Read an int32 count, then that many items with ``parse_item(reader)``."""
        count = self.int32()
        return [parse_item(self) for _ in range(max(count, 0))]

    def remaining(self) -> bytes:
        return self._data[self._pos:]


@dataclass
class HeaderRequest:
    """The header that starts every request."""

    api_key: int
    api_version: int
    correlation_id: int
    client_id: str

    def encode(self, writer: Writer) -> None:
        writer.int16(self.api_key)
        writer.int16(self.api_version)
        writer.int32(self.correlation_id)
        writer.string(self.client_id)


@dataclass
class HeaderResponse:
    """The header that starts every response."""

    correlation_id: int = 0


def parse_header_response(reader: Reader) -> HeaderResponse:
    return HeaderResponse(correlation_id=reader.int32())