"""Data shapes exchanged with the Redpanda admin HTTP API."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any, Mapping

from samsa.wire import ParsingError


def _field(data: Mapping[str, Any], kind: type, *names: str) -> Any:
    for name in names:
        if name in data:
            value = data[name]
            if kind is int and isinstance(value, bool) or not isinstance(value, kind):
                raise ParsingError(b"", f"field {name!r} must be {kind.__name__}")
            return value
    raise ParsingError(b"", f"missing field {names[0]!r}")


def _str_list(data: Mapping[str, Any], name: str) -> list[str]:
    values = _field(data, list, name)
    if not all(isinstance(v, str) for v in values):
        raise ParsingError(b"", f"field {name!r} must hold strings")
    return list(values)


def _dict_list(data: Mapping[str, Any], name: str) -> list[Mapping[str, Any]]:
    values = _field(data, list, name)
    if not all(isinstance(v, Mapping) for v in values):
        raise ParsingError(b"", f"field {name!r} must hold objects")
    return list(values)


@dataclass
class EnvironmentVariable:
    """A key/value pair passed to a transform."""

    key: str
    value: str

    def to_dict(self) -> dict[str, Any]:
        return {"key": self.key, "value": self.value}

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> EnvironmentVariable:
        return cls(key=_field(data, str, "key"), value=_field(data, str, "value"))


@dataclass
class NodeConfig:
    """The configuration of one broker node."""

    node_id: int

    def to_dict(self) -> dict[str, Any]:
        return {"node_id": self.node_id}

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> NodeConfig:
        return cls(node_id=_field(data, int, "node_id"))


@dataclass
class Partition:
    """A partition as described by the admin API; ``ns`` is accepted for namespace."""

    leader_id: int
    namespace: str
    partition_id: int
    raft_group_id: int
    status: str
    topic: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "leader_id": self.leader_id,
            "namespace": self.namespace,
            "partition_id": self.partition_id,
            "raft_group_id": self.raft_group_id,
            "status": self.status,
            "topic": self.topic,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> Partition:
        return cls(
            leader_id=_field(data, int, "leader_id"),
            namespace=_field(data, str, "namespace", "ns"),
            partition_id=_field(data, int, "partition_id"),
            raft_group_id=_field(data, int, "raft_group_id"),
            status=_field(data, str, "status"),
            topic=_field(data, str, "topic"),
        )


@dataclass
class PartitionTransformStatus:
    """The state of a transform on one partition."""

    node_id: int
    partition: int
    status: str
    lag: int

    def to_dict(self) -> dict[str, Any]:
        return {
            "node_id": self.node_id,
            "partition": self.partition,
            "status": self.status,
            "lag": self.lag,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> PartitionTransformStatus:
        return cls(
            node_id=_field(data, int, "node_id"),
            partition=_field(data, int, "partition"),
            status=_field(data, str, "status"),
            lag=_field(data, int, "lag"),
        )


@dataclass
class TransformMetadataIn:
    """The description of a transform to deploy."""

    name: str = ""
    input_topic: str = ""
    output_topics: list[str] = field(default_factory=list)
    environment: list[EnvironmentVariable] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "input_topic": self.input_topic,
            "output_topics": list(self.output_topics),
            "environment": [env.to_dict() for env in self.environment],
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> TransformMetadataIn:
        return cls(
            name=_field(data, str, "name"),
            input_topic=_field(data, str, "input_topic"),
            output_topics=_str_list(data, "output_topics"),
            environment=[
                EnvironmentVariable.from_dict(item) for item in _dict_list(data, "environment")
            ],
        )


@dataclass
class TransformMetadataOut:
    """A deployed transform, as listed by the admin API."""

    name: str = ""
    input_topic: str = ""
    output_topics: list[str] = field(default_factory=list)
    status: list[PartitionTransformStatus] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "input_topic": self.input_topic,
            "output_topics": list(self.output_topics),
            "status": [item.to_dict() for item in self.status],
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> TransformMetadataOut:
        return cls(
            name=_field(data, str, "name"),
            input_topic=_field(data, str, "input_topic"),
            output_topics=_str_list(data, "output_topics"),
            status=[
                PartitionTransformStatus.from_dict(item) for item in _dict_list(data, "status")
            ],
        )


@dataclass
class Transform:
    """A transform's metadata together with its compiled module."""

    metadata: TransformMetadataIn
    contents: bytes

    def to_body(self) -> bytes:
        """The request body: compact JSON metadata followed by the raw contents."""
        encoded = json.dumps(self.metadata.to_dict(), separators=(",", ":")).encode("utf-8")
        return encoded + bytes(self.contents)