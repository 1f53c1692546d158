# ==================================================
# sequencefile/writable.py
# ==================================================
"""Serialization for the Writable types a container's keys and values use."""
from __future__ import annotations

import struct

from .const import (BYTES_WRITABLE, INT_FMT, INT_WRITABLE, LONG_FMT,
                    LONG_WRITABLE, NULL_WRITABLE, TEXT)
from .errors import CorruptFileError, UnsupportedWritableError
from .vint import decode_vint, encode_vint

# -------- writers ---------------------------------------------------------

def write_bytes_writable(value) -> bytes:
    if not isinstance(value, (bytes, bytearray, memoryview)):
        raise TypeError(f"BytesWritable needs bytes, got {type(value).__name__}")
    value = bytes(value)
    return struct.pack(INT_FMT, len(value)) + value


def write_text(value) -> bytes:
    if not isinstance(value, str):
        raise TypeError(f"Text needs str, got {type(value).__name__}")
    raw = value.encode("utf-8")
    return encode_vint(len(raw)) + raw


def write_int_writable(value) -> bytes:
    if isinstance(value, bool) or not isinstance(value, int):
        raise TypeError(f"IntWritable needs int, got {type(value).__name__}")
    return struct.pack(INT_FMT, value)


def write_long_writable(value) -> bytes:
    if isinstance(value, bool) or not isinstance(value, int):
        raise TypeError(f"LongWritable needs int, got {type(value).__name__}")
    return struct.pack(LONG_FMT, value)


def write_null_writable(value) -> bytes:
    if value is not None:
        raise TypeError("NullWritable only accepts None")
    return b""

# -------- readers ---------------------------------------------------------

def read_bytes_writable(data: bytes) -> bytes:
    if len(data) < 4:
        raise CorruptFileError("BytesWritable shorter than its length prefix")
    (size,) = struct.unpack_from(INT_FMT, data, 0)
    if size != len(data) - 4:
        raise CorruptFileError(f"BytesWritable declares {size} bytes, has {len(data) - 4}")
    return bytes(data[4:])


def read_text(data: bytes) -> str:
    size, off = decode_vint(data)
    if size != len(data) - off:
        raise CorruptFileError(f"Text declares {size} bytes, has {len(data) - off}")
    try:
        return bytes(data[off:]).decode("utf-8")
    except UnicodeDecodeError as exc:
        raise CorruptFileError(f"Text is not valid UTF-8: {exc}") from exc


def read_int_writable(data: bytes) -> int:
    if len(data) != 4:
        raise CorruptFileError(f"IntWritable needs 4 bytes, got {len(data)}")
    return struct.unpack(INT_FMT, data)[0]


def read_long_writable(data: bytes) -> int:
    if len(data) != 8:
        raise CorruptFileError(f"LongWritable needs 8 bytes, got {len(data)}")
    return struct.unpack(LONG_FMT, data)[0]


def read_null_writable(data: bytes) -> None:
    return None

# --------------------------------------------------------------------------

_WRITERS = {
    BYTES_WRITABLE: write_bytes_writable,
    TEXT: write_text,
    INT_WRITABLE: write_int_writable,
    LONG_WRITABLE: write_long_writable,
    NULL_WRITABLE: write_null_writable,
}

_READERS = {
    BYTES_WRITABLE: read_bytes_writable,
    TEXT: read_text,
    INT_WRITABLE: read_int_writable,
    LONG_WRITABLE: read_long_writable,
    NULL_WRITABLE: read_null_writable,
}


def serializer(class_name: str):
    try:
        return _WRITERS[class_name]
    except KeyError:
        raise UnsupportedWritableError(f"no serializer for {class_name}") from None


def deserializer(class_name: str):
    try:
        return _READERS[class_name]
    except KeyError:
        raise UnsupportedWritableError(f"no deserializer for {class_name}") from None
