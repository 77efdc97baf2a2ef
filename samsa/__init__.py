"""Kafka/Redpanda wire protocol messages and Redpanda admin API data models."""

__version__ = "0.1.8"

__all__ = [
    "join_group",
    "leave_group",
    "list_offsets",
    "metadata",
    "offset_fetch",
    "produce_request",
    "produce_response",
    "redpanda_models",
    "sasl_authenticate",
    "sasl_handshake",
    "sync_group",
    "utils",
    "wire",
]