# ==================================================
# sequencefile/compression.py
# ==================================================
"""Compression codecs, looked up by short name or Hadoop codec class name.

A codec turns one payload (a record value, or one section of a block) into
the bytes Hadoop's matching ``CompressionCodec`` would have written for it,
and back.
"""
from __future__ import annotations

import bz2
import gzip
import struct
import zlib

import lz4.block
import pyarrow as pa
import zstandard as zstd

from .const import (BZIP2_CODEC, GZIP_CODEC, INT_FMT, LZ4_CODEC, SNAPPY_CODEC,
                    ZLIB_CODEC, ZSTD_CODEC)
from .errors import CodecUnavailableError, CorruptFileError


class Codec:
    name: str = ""
    class_name: str = ""

    def compress(self, data: bytes) -> bytes:
        raise NotImplementedError

    def decompress(self, data: bytes) -> bytes:
        raise NotImplementedError

    def __repr__(self):
        return f"<{type(self).__name__} {self.class_name}>"

# -------- stream codecs ---------------------------------------------------

class ZlibCodec(Codec):
    name, class_name = "zlib", ZLIB_CODEC

    def compress(self, data):
        return zlib.compress(data)

    def decompress(self, data):
        return zlib.decompress(data)


class GzipCodec(Codec):
    name, class_name = "gzip", GZIP_CODEC

    def compress(self, data):
        return gzip.compress(data)

    def decompress(self, data):
        return gzip.decompress(data)


class BZip2Codec(Codec):
    name, class_name = "bzip2", BZIP2_CODEC

    def compress(self, data):
        return bz2.compress(data)

    def decompress(self, data):
        return bz2.decompress(data)


class ZstdCodec(Codec):
    name, class_name = "zstd", ZSTD_CODEC

    def __init__(self, level: int = 3):
        self.cctx = zstd.ZstdCompressor(level=level)
        self.dctx = zstd.ZstdDecompressor()

    def compress(self, data):
        return self.cctx.compress(data)

    def decompress(self, data):
        # streamed frames from Hadoop may omit the content size
        return self.dctx.decompressobj().decompress(data)

# -------- Hadoop block-framed codecs --------------------------------------
#
#   int32 raw_length
#   ( int32 compressed_length, compressed chunk )+     until raw_length is reached
#
# Raw input is cut into chunks of ``buffer_size - overhead`` bytes, matching
# BlockCompressorStream with the default 256 KiB codec buffer.

def _read_int(view, pos: int) -> tuple[int, int]:
    if pos + 4 > len(view):
        raise CorruptFileError("truncated block-framed payload")
    return struct.unpack_from(INT_FMT, view, pos)[0], pos + 4


class BlockFramedCodec(Codec):
    buffer_size = 256 * 1024

    def overhead(self) -> int:
        raise NotImplementedError

    @property
    def max_input_size(self) -> int:
        return self.buffer_size - self.overhead()

    def compress_chunk(self, chunk: bytes) -> bytes:
        raise NotImplementedError

    def decompress_chunk(self, chunk: bytes, raw_size: int) -> bytes:
        raise NotImplementedError

    def compress(self, data):
        data = bytes(data)
        out = bytearray(struct.pack(INT_FMT, len(data)))
        step = self.max_input_size
        for start in range(0, len(data), step):
            chunk = self.compress_chunk(data[start:start + step])
            out += struct.pack(INT_FMT, len(chunk))
            out += chunk
        return bytes(out)

    def decompress(self, data):
        view = memoryview(data)
        out = bytearray()
        pos = 0
        while pos < len(view):
            raw_len, pos = _read_int(view, pos)
            produced = 0
            while produced < raw_len:
                comp_len, pos = _read_int(view, pos)
                if comp_len < 0 or pos + comp_len > len(view):
                    raise CorruptFileError("truncated compressed chunk")
                chunk = bytes(view[pos:pos + comp_len])
                pos += comp_len
                expected = min(self.max_input_size, raw_len - produced)
                plain = self.decompress_chunk(chunk, expected)
                produced += len(plain)
                out += plain
            if produced != raw_len:
                raise CorruptFileError(f"expected {raw_len} raw bytes, got {produced}")
        return bytes(out)


def _snappy_length(chunk: bytes) -> int:
    # raw snappy starts with the uncompressed length as a little-endian base-128 varint
    result = shift = 0
    for byte in chunk[:5]:
        result |= (byte & 0x7F) << shift
        if not byte & 0x80:
            return result
        shift += 7
    raise CorruptFileError("bad snappy length preamble")


class SnappyCodec(BlockFramedCodec):
    name, class_name = "snappy", SNAPPY_CODEC

    def __init__(self):
        if not pa.Codec.is_available("snappy"):
            raise CodecUnavailableError("pyarrow was built without snappy")
        self._codec = pa.Codec("snappy")

    def overhead(self):
        return self.buffer_size // 6 + 32

    def compress_chunk(self, chunk):
        return self._codec.compress(chunk, asbytes=True)

    def decompress_chunk(self, chunk, raw_size):
        size = _snappy_length(chunk)
        if size > raw_size:
            raise CorruptFileError(f"snappy chunk of {size} bytes overruns frame")
        return self._codec.decompress(chunk, decompressed_size=size, asbytes=True)


class Lz4Codec(BlockFramedCodec):
    name, class_name = "lz4", LZ4_CODEC

    def overhead(self):
        return self.buffer_size // 255 + 16

    def compress_chunk(self, chunk):
        return lz4.block.compress(chunk, store_size=False)

    def decompress_chunk(self, chunk, raw_size):
        try:
            return lz4.block.decompress(chunk, uncompressed_size=raw_size)
        except lz4.block.LZ4BlockError as exc:
            raise CorruptFileError(f"bad lz4 chunk: {exc}") from exc

# --------------------------------------------------------------------------

DECOMPRESS_ERRORS = (zlib.error, OSError, EOFError, ValueError,
                     zstd.ZstdError, lz4.block.LZ4BlockError, pa.ArrowException)

CODECS = {cls.name: cls for cls in
          (ZlibCodec, GzipCodec, BZip2Codec, SnappyCodec, Lz4Codec, ZstdCodec)}
_BY_CLASS_NAME = {cls.class_name: cls for cls in CODECS.values()}


def get_codec(codec) -> Codec:
    """Resolve a codec instance, short name (``"bzip2"``) or Hadoop class name."""
    if isinstance(codec, Codec):
        return codec
    cls = CODECS.get(codec) or _BY_CLASS_NAME.get(codec)
    if cls is None:
        raise CodecUnavailableError(f"unsupported compression codec: {codec}")
    return cls()
