"""SaslHandshake (version 1): agree on a SASL mechanism."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from samsa.wire import (
    HeaderRequest,
    HeaderResponse,
    KafkaCode,
    Reader,
    Writer,
    parse_header_response,
)

logger = logging.getLogger(__name__)

API_KEY_SASL_HANDSHAKE = 17
API_VERSION = 1


@dataclass
class SaslHandshakeRequest:
    """A request naming the SASL mechanism the client has chosen."""

    header: HeaderRequest
    mechanism: str

    @classmethod
    def create(cls, correlation_id: int, client_id: str, mechanism: str) -> SaslHandshakeRequest:
        header = HeaderRequest(API_KEY_SASL_HANDSHAKE, API_VERSION, correlation_id, client_id)
        return cls(header=header, mechanism=mechanism)

    def encode(self, writer: Writer) -> None:
        logger.debug("Encoding SaslHandshakeRequest %r", self)
        self.header.encode(writer)
        writer.string(self.mechanism)

    def to_bytes(self) -> bytes:
        writer = Writer()
        self.encode(writer)
        return writer.getvalue()


@dataclass
class SaslHandshakeResponse:
    """The broker's answer, listing the mechanisms it has enabled."""

    header: HeaderResponse
    error_code: KafkaCode
    mechanisms: list[bytes] = field(default_factory=list)

    @classmethod
    def from_bytes(cls, data: bytes) -> SaslHandshakeResponse:
        return parse_handshake_response(Reader(data))


def parse_handshake_response(reader: Reader) -> SaslHandshakeResponse:
    header = parse_header_response(reader)
    error_code = reader.kafka_code()
    mechanisms = reader.array(Reader.string)
    return SaslHandshakeResponse(header=header, error_code=error_code, mechanisms=mechanisms)