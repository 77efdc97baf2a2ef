# samsa

Encoders and decoders for the Kafka wire protocol, as spoken by Kafka and
Redpanda brokers, plus data models for the Redpanda admin HTTP API.

The package builds request frames and parses response frames. Send the
bytes over a socket of your own choosing, then hand the response body back
to the matching parser.

## Installation

```
pip install .
```

To run the tests:

```
pip install ".[test]"
pytest
```

## Building requests

Each request type has a `create` class method and a `to_bytes` method.

```python
from samsa.metadata import MetadataRequest

request = MetadataRequest.create(1, "my-client", ["purchases"])
payload = request.to_bytes()
```

Requests that cover several topics and partitions are filled in with `add`:

```python
from samsa.list_offsets import ListOffsetsRequest
from samsa.offset_fetch import OffsetFetchRequest

offsets = ListOffsetsRequest.create(1, "my-client", -1)
offsets.add("purchases", 0, -1)   # -1 asks for the latest offset
offsets.add("purchases", 1, -2)   # -2 asks for the earliest offset

committed = OffsetFetchRequest.create(2, "my-client", "my-group")
committed.add("purchases", 0)
```

An `add` for a topic and partition that are already present is ignored.

### Producing

```python
from samsa.produce_request import Attributes, Compression, ProduceRequest

produce = ProduceRequest.create(1, 1000, 3, "my-client", Attributes(Compression.GZIP))
produce.add("purchases", 0, b"key", b"value", [])
payload = produce.to_bytes()
```

All messages for one partition go into a single record batch, written in
message format version 2 with a CRC-32C checksum. The records are
gzip-compressed when the attributes ask for it. Record headers are
`samsa.produce_request.Header(key, value)` objects.

Produce responses are parsed with `samsa.produce_response.ProduceResponse`.

### Consumer groups

The group membership requests live in `samsa.join_group`,
`samsa.sync_group` and `samsa.leave_group`:

```python
from samsa.join_group import JoinGroupRequest, Protocol

join = JoinGroupRequest.create(
    1, "my-client", "my-group", 30000, 30000, b"", "consumer",
    [Protocol.create("consumer", ["purchases"])],
)
```

Member ids may be given as `str` or as UTF-8 `bytes`; bytes that are not
valid UTF-8 raise `samsa.wire.DecodingUtf8Error`.

The group leader hands out partitions with `samsa.sync_group.Assignment`,
`MemberAssignment` and `PartitionAssignment`; `SyncGroupResponse` carries
the assignment the coordinator returns to each member.

### SASL

`samsa.sasl_handshake.SaslHandshakeRequest` and
`samsa.sasl_authenticate.SaslAuthenticationRequest` carry the SASL exchange.
The mechanism's own bytes come from whatever SASL library you use.

## Parsing responses

Every response type has a `from_bytes` class method. Pass it the response
body without the four-byte size prefix:

```python
from samsa.metadata import MetadataResponse
from samsa.wire import KafkaError, ParsingError

try:
    metadata = MetadataResponse.from_bytes(body)
    metadata.check_errors()
except ParsingError:
    ...   # the bytes did not match the expected layout
except KafkaError as err:
    ...   # the broker reported an error code for a topic or partition
```

Broker error codes are exposed as the `samsa.wire.KafkaCode` enum. Offset
responses (`ListOffsetsResponse`, `OffsetFetchResponse`) can be walked as
`(topic_name, partition)` pairs with `iter_partitions()`.

The lower-level `samsa.wire.Writer` and `samsa.wire.Reader` write and read
the protocol's big-endian integers, strings, byte strings, arrays and
zigzag varints, if you need to build a message the package does not cover.

## Redpanda admin API models

`samsa.redpanda_models` holds the shapes exchanged with the Redpanda admin
HTTP API: `NodeConfig`, `Partition`, `PartitionTransformStatus`,
`TransformMetadataIn`, `TransformMetadataOut`, `EnvironmentVariable` and
`Transform`. The response models are read from decoded JSON with
`from_dict`, which raises `ParsingError` for missing or mistyped fields.
`Transform.to_body()` gives the body of a transform deployment: the
metadata as compact JSON followed by the module's raw bytes.

```python
from samsa.redpanda_models import Transform, TransformMetadataIn

metadata = TransformMetadataIn(name="upper", input_topic="in", output_topics=["out"])
with open("transform.wasm", "rb") as wasm:
    body = Transform(metadata, wasm.read()).to_body()
```

## Utilities

`samsa.utils` offers `to_crc` (CRC-32C), `compress` and `uncompress` (gzip;
`uncompress` raises `OSError` on bad input), and `now` (the current time in
milliseconds since the epoch).

## What this package does not do

- It opens no network connections. There is no broker connection, no
  producer or consumer loop and no group coordination logic; you send the
  encoded bytes and read the responses yourself.
- It has no HTTP client for the Redpanda admin API. Only the data models
  and the deployment body are provided; making the requests is up to you.
- Only gzip compression is supported for record batches.
- There is no command-line tool.