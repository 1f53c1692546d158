# ==================================================
# sequencefile/vint.py
# ==================================================
"""Hadoop zero-compressed variable-length integers (WritableUtils.writeVLong).

Values in ``[-112, 127]`` take a single byte. Anything else is a length byte
(which also carries the sign) followed by the magnitude in big-endian order,
one's-complemented for negative numbers.
"""
from __future__ import annotations

from typing import BinaryIO

from .errors import CorruptFileError

# -------- encoding --------------------------------------------------------

def encode_vint(n: int) -> bytes:
    if -112 <= n <= 127:
        return bytes([n & 0xFF])

    marker = -112
    if n < 0:
        n = ~n
        marker = -120

    tmp = n
    while tmp:
        tmp >>= 8
        marker -= 1

    size = -(marker + 120) if marker < -120 else -(marker + 112)
    out = bytearray([marker & 0xFF])
    for shift in range(size - 1, -1, -1):
        out.append((n >> (8 * shift)) & 0xFF)
    return bytes(out)


def encoded_size(first: int) -> int:
    """Total encoded length given the (signed) first byte."""
    if first >= -112:
        return 1
    if first < -120:
        return -119 - first
    return -111 - first

# -------- decoding --------------------------------------------------------

def _signed(byte: int) -> int:
    return byte - 256 if byte > 127 else byte


def _finish(first: int, payload: bytes) -> int:
    n = int.from_bytes(payload, "big")
    return ~n if first < -120 else n


def decode_vint(buf, offset: int = 0) -> tuple[int, int]:
    """Decode one VInt from ``buf`` at ``offset``; returns ``(value, new_offset)``."""
    if offset >= len(buf):
        raise CorruptFileError("truncated vint")
    first = _signed(buf[offset])
    size = encoded_size(first)
    if size == 1:
        return first, offset + 1
    end = offset + size
    if end > len(buf):
        raise CorruptFileError("truncated vint")
    return _finish(first, bytes(buf[offset + 1:end])), end


def read_vint(stream: BinaryIO) -> int:
    head = stream.read(1)
    if not head:
        raise CorruptFileError("unexpected end of file reading vint")
    first = _signed(head[0])
    size = encoded_size(first)
    if size == 1:
        return first
    payload = stream.read(size - 1)
    if len(payload) != size - 1:
        raise CorruptFileError("unexpected end of file reading vint")
    return _finish(first, payload)
