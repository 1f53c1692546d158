# ==================================================
# sequencefile/fixtures.py
# ==================================================
"""The two-record Alice/Bob fixture, written once per compression granularity."""
from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Union

from .compression import get_codec
from .const import DEFAULT_CODEC, FIXTURE_SUFFIX
from .header import Compression
from .writer import SequenceFileWriter

logger = logging.getLogger(__name__)

FIXTURE_RECORDS = (
    (b"Alice", b"Practice"),
    (b"Bob", b"Hope"),
)


def fixture_name(granularity, codec=DEFAULT_CODEC) -> str:
    granularity = Compression.parse(granularity)
    return f"{granularity.value}_compressed_{get_codec(codec).name}{FIXTURE_SUFFIX}"


def generate(output_path: Union[str, os.PathLike], granularity,
             codec=DEFAULT_CODEC) -> Path:
    """Write the fixture records to ``output_path``.

    Any failure is raised as a ``SequenceFileError``. If the file had already
    been created it is removed first, so a failed run never leaves a
    readable-looking partial container behind.
    """
    path = Path(output_path)
    granularity = Compression.parse(granularity)
    writer = SequenceFileWriter(path, compression=granularity, codec=codec)
    try:
        for key, value in FIXTURE_RECORDS:
            writer.append(key, value)
        writer.close()
    except BaseException:
        writer.abort()
        path.unlink(missing_ok=True)
        raise
    logger.info("wrote %s (%s, %s)", path, granularity.name, writer.codec.name)
    return path


def generate_all(out_dir: Union[str, os.PathLike] = ".",
                 codec=DEFAULT_CODEC) -> list[Path]:
    out_dir = Path(out_dir)
    return [generate(out_dir / fixture_name(granularity, codec), granularity, codec)
            for granularity in (Compression.RECORD, Compression.BLOCK)]
