import json

import pytest

from samsa.redpanda_models import (
    EnvironmentVariable,
    NodeConfig,
    Partition,
    PartitionTransformStatus,
    Transform,
    TransformMetadataIn,
    TransformMetadataOut,
)
from samsa.wire import ParsingError


def test_environment_variable_round_trip():
    env = EnvironmentVariable(key="LEVEL", value="debug")
    assert EnvironmentVariable.from_dict(env.to_dict()) == env


def test_environment_variable_missing_field():
    with pytest.raises(ParsingError):
        EnvironmentVariable.from_dict({"key": "LEVEL"})


def test_node_config_from_dict():
    assert NodeConfig.from_dict({"node_id": 7, "extra": "ignored"}).node_id == 7


def test_node_config_rejects_wrong_type():
    with pytest.raises(ParsingError):
        NodeConfig.from_dict({"node_id": "seven"})


def test_partition_accepts_ns_alias():
    data = {
        "leader_id": 1,
        "ns": "redpanda",
        "partition_id": 0,
        "raft_group_id": 0,
        "status": "done",
        "topic": "controller",
    }
    partition = Partition.from_dict(data)
    assert partition.namespace == "redpanda"
    assert partition.leader_id == 1
    assert partition.topic == "controller"


def test_partition_round_trip():
    partition = Partition(
        leader_id=-1,
        namespace="kafka",
        partition_id=2,
        raft_group_id=5,
        status="done",
        topic="purchases",
    )
    assert Partition.from_dict(partition.to_dict()) == partition


def test_partition_transform_status_round_trip():
    status = PartitionTransformStatus(node_id=1, partition=0, status="running", lag=3)
    assert PartitionTransformStatus.from_dict(status.to_dict()) == status


def test_metadata_in_defaults_are_empty():
    metadata = TransformMetadataIn()
    assert metadata.to_dict() == {
        "name": "",
        "input_topic": "",
        "output_topics": [],
        "environment": [],
    }


def test_metadata_in_round_trip():
    metadata = TransformMetadataIn(
        name="upper",
        input_topic="in",
        output_topics=["out"],
        environment=[EnvironmentVariable("A", "b")],
    )
    assert TransformMetadataIn.from_dict(metadata.to_dict()) == metadata


def test_metadata_out_from_dict():
    data = {
        "name": "upper",
        "input_topic": "in",
        "output_topics": ["out"],
        "status": [{"node_id": 1, "partition": 0, "status": "running", "lag": 0}],
    }
    out = TransformMetadataOut.from_dict(data)
    assert out.status == [PartitionTransformStatus(1, 0, "running", 0)]
    assert out.to_dict() == data


def test_metadata_out_rejects_bad_topics():
    with pytest.raises(ParsingError):
        TransformMetadataOut.from_dict(
            {"name": "n", "input_topic": "i", "output_topics": [1], "status": []}
        )


def test_transform_body_is_compact_json_then_contents():
    metadata = TransformMetadataIn(name="t", input_topic="in", output_topics=["out"])
    body = Transform(metadata=metadata, contents=b"\x00asm").to_body()
    assert body == (
        b'{"name":"t","input_topic":"in","output_topics":["out"],"environment":[]}\x00asm'
    )


def test_transform_body_prefix_decodes_to_metadata():
    metadata = TransformMetadataIn(
        name="upper",
        input_topic="in",
        output_topics=["a", "b"],
        environment=[EnvironmentVariable("K", "V")],
    )
    contents = bytes(range(10))
    body = Transform(metadata=metadata, contents=contents).to_body()
    assert body.endswith(contents)
    assert json.loads(body[: -len(contents)]) == metadata.to_dict()