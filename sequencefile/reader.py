# ==================================================
# sequencefile/reader.py
# ==================================================
from __future__ import annotations

import logging
import os
import struct
from collections import deque
from pathlib import Path
from typing import BinaryIO, Iterator, Optional, Union

from .compression import DECOMPRESS_ERRORS
from .const import INT_FMT, MAX_SYNC_READ, SYNC_ESCAPE, SYNC_SIZE
from .errors import CorruptFileError, SequenceFileError
from .header import Compression, Header
from .vint import decode_vint, read_vint
from .writable import deserializer

logger = logging.getLogger(__name__)

Source = Union[str, os.PathLike, BinaryIO]


class SequenceFileReader:
    """Sequential reader over one container.

    The header is parsed on construction. Records come back deserialized
    according to the header's key/value classes, or as their serialized
    bytes when ``raw`` is true.
    """

    def __init__(self, source: Source, raw: bool = False):
        self.path: Optional[Path] = None
        self._owns_file = False
        if hasattr(source, "read"):
            self.file = source
        else:
            self.path = Path(source)
            try:
                self.file = open(self.path, "rb")
            except OSError as exc:
                raise SequenceFileError(f"cannot open {self.path}: {exc}") from exc
            self._owns_file = True

        try:
            self.header = Header.read(self.file)
            self.raw = raw
            if not raw:
                self._read_key = deserializer(self.header.key_class)
                self._read_value = deserializer(self.header.value_class)
        except BaseException:
            self.close()
            raise
        self._pending = deque()
        self._synced = False

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()

    def __iter__(self) -> Iterator[tuple]:
        while True:
            record = self.read_record()
            if record is None:
                return
            yield record

    @property
    def compression(self) -> Compression:
        return self.header.compression

    # ------------------------------------------------------------------
    def _consume(self, n: int, what: str) -> bytes:
        data = self.file.read(n)
        if len(data) != n:
            raise CorruptFileError(f"unexpected end of file reading {what}")
        return data

    def _read_int_or_eof(self) -> Optional[int]:
        data = self.file.read(4)
        if not data:
            return None
        if len(data) != 4:
            raise CorruptFileError("unexpected end of file reading record length")
        return struct.unpack(INT_FMT, data)[0]

    def _check_sync(self):
        marker = self._consume(SYNC_SIZE, "sync marker")
        if marker != self.header.sync_marker:
            raise CorruptFileError("sync marker does not match header")

    def _decompress(self, data: bytes) -> bytes:
        codec = self.header.codec
        try:
            return codec.decompress(data)
        except SequenceFileError:
            raise
        except DECOMPRESS_ERRORS as exc:
            raise CorruptFileError(f"cannot decompress {codec.name} payload: {exc}") from exc

    def _decode(self, key: bytes, value: bytes) -> tuple:
        if self.raw:
            return key, value
        return self._read_key(key), self._read_value(value)

    # ------------------------------------------------------------------
    def read_record(self) -> Optional[tuple]:
        """Next ``(key, value)``, or ``None`` once the file is exhausted."""
        if self.compression is Compression.BLOCK:
            while not self._pending:
                if not self._start_block():
                    return None
            return self._decode(*self._pending.popleft())

        while True:
            length = self._read_int_or_eof()
            if length is None:
                return None
            if length != SYNC_ESCAPE:
                break
            self._check_sync()

        (key_len,) = struct.unpack(INT_FMT, self._consume(4, "key length"))
        if length < 0 or not 0 <= key_len <= length:
            raise CorruptFileError(f"bad record lengths: record={length} key={key_len}")
        payload = self._consume(length, "record")
        key, value = payload[:key_len], payload[key_len:]
        if self.compression is Compression.RECORD:
            value = self._decompress(value)
        return self._decode(key, value)

    # -------- block granularity ----------------------------------------
    def _section(self) -> bytes:
        size = read_vint(self.file)
        if size < 0:
            raise CorruptFileError(f"negative section length: {size}")
        return self._decompress(self._consume(size, "block section"))

    @staticmethod
    def _split(data: bytes, raw_lengths: bytes, count: int) -> list[bytes]:
        parts, off, pos = [], 0, 0
        for _ in range(count):
            length, pos = decode_vint(raw_lengths, pos)
            if length < 0:
                raise CorruptFileError(f"negative length in block: {length}")
            parts.append(data[off:off + length])
            off += length
        if pos != len(raw_lengths) or off != len(data):
            raise CorruptFileError("invalid lengths for block")
        return parts

    def _start_block(self) -> bool:
        if self._synced:
            self._synced = False
        else:
            marker = self._read_int_or_eof()
            if marker is None:
                return False
            if marker != SYNC_ESCAPE:
                raise CorruptFileError("missing sync marker before block")
            self._check_sync()

        count = read_vint(self.file)
        if count < 0:
            raise CorruptFileError(f"negative record count in block: {count}")
        key_lengths = self._section()
        keys = self._section()
        value_lengths = self._section()
        values = self._section()
        self._pending.extend(zip(self._split(keys, key_lengths, count),
                                 self._split(values, value_lengths, count)))
        return True

    # ------------------------------------------------------------------
    def reset(self):
        """Forget buffered block records, e.g. after seeking the underlying file."""
        self._pending.clear()
        self._synced = False

    def sync(self) -> bool:
        """Skip forward to just past the next sync marker.

        Returns False if the file ends first. In block files the marker must
        be the one framing a block, so the next read starts a fresh block.
        """
        self.reset()
        pattern = self.header.sync_marker
        if self.compression is Compression.BLOCK:
            pattern = struct.pack(INT_FMT, SYNC_ESCAPE) + pattern
        window = b""
        scanned = 0
        while scanned < MAX_SYNC_READ:
            byte = self.file.read(1)
            if not byte:
                return False
            scanned += 1
            window = (window + byte)[-len(pattern):]
            if window == pattern:
                self._synced = self.compression is Compression.BLOCK
                logger.debug("realigned after %d bytes", scanned)
                return True
        raise CorruptFileError(f"no sync marker within {MAX_SYNC_READ} bytes")

    def close(self):
        if self._owns_file:
            self.file.close()


def open_reader(path: Source, raw: bool = False) -> SequenceFileReader:
    return SequenceFileReader(path, raw=raw)
