# ==================================================
# sequencefile/writer.py
# ==================================================
from __future__ import annotations

import logging
import os
import struct
from pathlib import Path
from typing import BinaryIO, Optional, Union

from .compression import get_codec
from .const import (BYTES_WRITABLE, DEFAULT_BLOCK_SIZE, INT_FMT, SYNC_ESCAPE,
                    SYNC_INTERVAL)
from .errors import SequenceFileError, WriterStateError
from .header import Compression, Header
from .vint import encode_vint
from .writable import serializer

logger = logging.getLogger(__name__)

Target = Union[str, os.PathLike, BinaryIO]


class SequenceFileWriter:
    """Append-only writer for one container.

    Construction opens the target and writes the header; ``append`` adds
    records; ``close`` flushes any buffered block and releases the file.
    Paths are opened (and closed) by the writer, streams are left open.
    """

    UNOPENED, OPEN, CLOSED = "unopened", "open", "closed"

    def __init__(self, target: Target,
                 compression: Union[Compression, str] = Compression.NONE,
                 codec=None,
                 key_class: str = BYTES_WRITABLE,
                 value_class: str = BYTES_WRITABLE,
                 metadata: Optional[dict[str, str]] = None,
                 sync_marker: Optional[bytes] = None,
                 block_size: int = DEFAULT_BLOCK_SIZE):
        self.state = self.UNOPENED
        compression = Compression.parse(compression)
        if compression is Compression.NONE:
            codec = None
        elif codec is None:
            raise ValueError(f"{compression.name} compression needs a codec")
        else:
            codec = get_codec(codec)
        if block_size <= 0:
            raise ValueError("block_size must be positive")

        self.header = Header(key_class, value_class, compression, codec,
                             metadata, sync_marker)
        self.block_size = block_size
        self._write_key = serializer(key_class)
        self._write_value = serializer(value_class)

        self.path: Optional[Path] = None
        self._owns_file = False
        if hasattr(target, "write"):
            self.file = target
        else:
            self.path = Path(target)
            try:
                self.file = open(self.path, "wb")
            except OSError as exc:
                raise SequenceFileError(f"cannot create {self.path}: {exc}") from exc
            self._owns_file = True

        self._pos = 0
        self._last_sync = 0
        self._reset_block()
        self.state = self.OPEN
        try:
            self._write(self.header.to_bytes())
        except BaseException:
            self.abort()
            if self._owns_file:
                self.path.unlink(missing_ok=True)
            raise
        logger.debug("opened %s with %r", self.path or self.file, self.header)

    # ------------------------------------------------------------------
    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()

    @property
    def compression(self) -> Compression:
        return self.header.compression

    @property
    def codec(self):
        return self.header.codec

    # ------------------------------------------------------------------
    def _write(self, data: bytes):
        try:
            self.file.write(data)
        except OSError as exc:
            raise SequenceFileError(f"write failed: {exc}") from exc
        self._pos += len(data)

    def _sync(self):
        if self._pos == self._last_sync:
            return
        self._write(struct.pack(INT_FMT, SYNC_ESCAPE) + self.header.sync_marker)
        self._last_sync = self._pos
        logger.debug("sync marker at offset %d", self._pos)

    def _check_open(self):
        if self.state != self.OPEN:
            raise WriterStateError(f"writer is {self.state}")

    # ------------------------------------------------------------------
    def append(self, key, value):
        """Serialize ``key``/``value`` with the header's Writable classes and append."""
        self.append_raw(self._write_key(key), self._write_value(value))

    def append_raw(self, key: bytes, value: bytes):
        """Append an already-serialized key and value."""
        self._check_open()
        key, value = bytes(key), bytes(value)
        if self.compression is Compression.BLOCK:
            self._buffer(key, value)
            return

        if self._pos >= self._last_sync + SYNC_INTERVAL:
            self._sync()
        if self.compression is Compression.RECORD:
            value = self.codec.compress(value)
        self._write(struct.pack(">ii", len(key) + len(value), len(key)) + key + value)

    # -------- block granularity ----------------------------------------
    def _reset_block(self):
        self._keys = bytearray()
        self._key_lengths = bytearray()
        self._values = bytearray()
        self._value_lengths = bytearray()
        self._count = 0

    def _buffer(self, key: bytes, value: bytes):
        self._keys += key
        self._key_lengths += encode_vint(len(key))
        self._values += value
        self._value_lengths += encode_vint(len(value))
        self._count += 1
        if len(self._keys) + len(self._values) >= self.block_size:
            self._flush_block()

    def _section(self, raw: bytearray) -> bytes:
        packed = self.codec.compress(bytes(raw))
        return encode_vint(len(packed)) + packed

    def _flush_block(self):
        if not self._count:
            return
        self._sync()
        body = (encode_vint(self._count)
                + self._section(self._key_lengths)
                + self._section(self._keys)
                + self._section(self._value_lengths)
                + self._section(self._values))
        self._write(body)
        logger.debug("flushed block of %d records (%d bytes)", self._count, len(body))
        self._reset_block()

    # ------------------------------------------------------------------
    def flush(self):
        self._check_open()
        try:
            self.file.flush()
        except OSError as exc:
            raise SequenceFileError(f"flush failed: {exc}") from exc

    def close(self):
        if self.state == self.CLOSED:
            return
        try:
            if self.compression is Compression.BLOCK:
                self._flush_block()
            self.flush()
        finally:
            self.state = self.CLOSED
            if self._owns_file:
                self.file.close()
        logger.debug("closed %s after %d bytes", self.path or self.file, self._pos)

    def abort(self):
        """Drop buffered records and release the file without flushing a block."""
        self._reset_block()
        self.state = self.CLOSED
        if self._owns_file:
            self.file.close()


def open_writer(path: Target, **config) -> SequenceFileWriter:
    return SequenceFileWriter(path, **config)
