"""SaslAuthenticate (version 1): exchange SASL authentication bytes."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from samsa.wire import (
    HeaderRequest,
    HeaderResponse,
    KafkaCode,
    Reader,
    Writer,
    parse_header_response,
)

logger = logging.getLogger(__name__)

API_KEY_SASL_AUTHENTICATE = 36
API_VERSION = 1


@dataclass
class SaslAuthenticationRequest:
    """A request carrying the client's SASL mechanism bytes."""

    header: HeaderRequest
    auth_bytes: bytes

    @classmethod
    def create(
        cls, correlation_id: int, client_id: str, auth_bytes: bytes
    ) -> SaslAuthenticationRequest:
        header = HeaderRequest(API_KEY_SASL_AUTHENTICATE, API_VERSION, correlation_id, client_id)
        return cls(header=header, auth_bytes=bytes(auth_bytes))

    def encode(self, writer: Writer) -> None:
        logger.debug("Encoding SaslAuthenticationRequest %r", self)
        self.header.encode(writer)
        writer.blob(self.auth_bytes)

    def to_bytes(self) -> bytes:
        writer = Writer()
        self.encode(writer)
        return writer.getvalue()


@dataclass
class SaslAuthenticationResponse:
    """The broker's SASL answer and session lifetime."""

    header: HeaderResponse
    error_code: KafkaCode
    error_message: bytes | None
    auth_bytes: bytes
    session_lifetime_ms: int

    @classmethod
    def from_bytes(cls, data: bytes) -> SaslAuthenticationResponse:
        return parse_authenticate_response(Reader(data))


def parse_authenticate_response(reader: Reader) -> SaslAuthenticationResponse:
    header = parse_header_response(reader)
    error_code = reader.kafka_code()
    error_message = reader.nullable_string()
    auth_bytes = reader.blob()
    session_lifetime_ms = reader.int64()
    return SaslAuthenticationResponse(
        header, error_code, error_message, auth_bytes, session_lifetime_ms
    )