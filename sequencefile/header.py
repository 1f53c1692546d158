# ==================================================
# sequencefile/header.py
# ==================================================
from __future__ import annotations

import enum
import hashlib
import logging
import struct
import time
import uuid
from typing import BinaryIO, Optional

from .compression import Codec, get_codec
from .const import (BYTES_WRITABLE, INT_FMT, MAGIC, MAX_METADATA_PAIRS,
                    MIN_VERSION, SYNC_SIZE, VERSION)
from .errors import CorruptFileError
from .vint import encode_vint, read_vint

logger = logging.getLogger(__name__)


class Compression(enum.Enum):
    """Compression granularity of a container body."""
    NONE = "none"
    RECORD = "record"
    BLOCK = "block"

    @classmethod
    def parse(cls, value) -> "Compression":
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).lower())
        except ValueError:
            raise ValueError(f"unknown compression granularity: {value!r}") from None


def new_sync_marker() -> bytes:
    seed = f"{uuid.uuid4()}@{time.time_ns()}".encode()
    return hashlib.md5(seed).digest()


class Header:
    def __init__(self,
                 key_class: str = BYTES_WRITABLE,
                 value_class: str = BYTES_WRITABLE,
                 compression: Compression = Compression.NONE,
                 codec: Optional[Codec] = None,
                 metadata: Optional[dict[str, str]] = None,
                 sync_marker: Optional[bytes] = None,
                 version: int = VERSION):
        self.version     = version
        self.key_class   = key_class
        self.value_class = value_class
        self.compression = compression
        self.codec       = codec
        self.metadata    = dict(metadata or {})
        self.sync_marker = sync_marker if sync_marker is not None else new_sync_marker()
        if len(self.sync_marker) != SYNC_SIZE:
            raise ValueError(f"sync marker must be {SYNC_SIZE} bytes")

    @property
    def codec_class_name(self) -> Optional[str]:
        return self.codec.class_name if self.codec is not None else None

    def __repr__(self):
        return (f"Header(version={self.version}, key_class={self.key_class!r}, "
                f"value_class={self.value_class!r}, compression={self.compression.name}, "
                f"codec={self.codec_class_name!r})")

    # ------------------------------------------------------------------
    def to_bytes(self) -> bytes:
        out = bytearray(MAGIC)
        out.append(self.version)
        out += _text(self.key_class)
        out += _text(self.value_class)
        out.append(self.compression is not Compression.NONE)
        out.append(self.compression is Compression.BLOCK)
        if self.compression is not Compression.NONE:
            out += _text(self.codec.class_name)
        out += struct.pack(INT_FMT, len(self.metadata))
        for key in sorted(self.metadata):
            out += _text(key)
            out += _text(self.metadata[key])
        out += self.sync_marker
        return bytes(out)

    # ------------------------------------------------------------------
    @classmethod
    def read(cls, stream: BinaryIO) -> "Header":
        magic = _consume(stream, 4, "magic number")
        if magic[:3] != MAGIC:
            raise CorruptFileError(f"invalid magic number: {magic!r}")
        version = magic[3]
        if not MIN_VERSION <= version <= VERSION:
            raise CorruptFileError(f"unsupported version: {version}")

        key_class = _read_text(stream)
        value_class = _read_text(stream)
        compressed = _consume(stream, 1, "compression flag")[0] != 0
        block = _consume(stream, 1, "block compression flag")[0] != 0
        if block:
            compression = Compression.BLOCK
        elif compressed:
            compression = Compression.RECORD
        else:
            compression = Compression.NONE

        codec = None
        if compression is not Compression.NONE:
            codec = get_codec(_read_text(stream))

        metadata = {}
        if version >= 6:
            (pairs,) = struct.unpack(INT_FMT, _consume(stream, 4, "metadata count"))
            if not 0 <= pairs <= MAX_METADATA_PAIRS:
                raise CorruptFileError(f"invalid metadata pair count: {pairs}")
            for _ in range(pairs):
                key = _read_text(stream)
                metadata[key] = _read_text(stream)

        sync_marker = _consume(stream, SYNC_SIZE, "sync marker")
        header = cls(key_class, value_class, compression, codec, metadata,
                     sync_marker, version)
        logger.debug("read %r", header)
        return header

# -------- Text helpers ----------------------------------------------------

def _text(s: str) -> bytes:
    raw = s.encode("utf-8")
    return encode_vint(len(raw)) + raw


def _consume(stream: BinaryIO, n: int, what: str) -> bytes:
    data = stream.read(n)
    if len(data) != n:
        raise CorruptFileError(f"unexpected end of file reading {what}")
    return data


def _read_text(stream: BinaryIO) -> str:
    size = read_vint(stream)
    if size < 0:
        raise CorruptFileError(f"negative string length: {size}")
    raw = _consume(stream, size, "string")
    try:
        return raw.decode("utf-8")
    except UnicodeDecodeError as exc:
        raise CorruptFileError(f"string is not valid UTF-8: {exc}") from exc
