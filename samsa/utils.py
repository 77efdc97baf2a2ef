"""Checksums, clock and gzip helpers used by the record format."""

from __future__ import annotations

import gzip
import io
import logging
import time
import zlib
from typing import BinaryIO

logger = logging.getLogger(__name__)


def _make_crc32c_table() -> list[int]:
    table = []
    for byte in range(256):
        crc = byte
        for _ in range(8):
            crc = (crc >> 1) ^ 0x82F63B78 if crc & 1 else crc >> 1
        table.append(crc)
    return table


_CRC32C_TABLE = _make_crc32c_table()


def to_crc(data: bytes) -> int:
    """Return the CRC-32C (Castagnoli) checksum of ``data``."""
    crc = 0xFFFFFFFF
    for byte in data:
        crc = _CRC32C_TABLE[(crc ^ byte) & 0xFF] ^ (crc >> 8)
    return crc ^ 0xFFFFFFFF


def now() -> int:
    """Milliseconds since the Unix epoch."""
    return time.time_ns() // 1_000_000


def compress(src: bytes) -> bytes:
    """Gzip ``src`` at the best compression level."""
    return gzip.compress(bytes(src), compresslevel=9)


def uncompress(src: bytes | BinaryIO) -> bytes:
    """Gunzip bytes or a readable binary stream; raise OSError on bad input."""
    stream = io.BytesIO(src) if isinstance(src, (bytes, bytearray, memoryview)) else src
    try:
        with gzip.GzipFile(fileobj=stream, mode="rb") as decoder:
            return decoder.read()
    except (OSError, EOFError, zlib.error) as exc:
        logger.error("Error uncompressing buffer %r", exc)
        raise OSError(f"cannot uncompress buffer: {exc}") from exc