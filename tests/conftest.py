"""Shared pytest fixtures and skip markers for sequencefile tests."""

from __future__ import annotations

import random

import pyarrow as pa
import pytest

from sequencefile import CODECS

# ---------------------------------------------------------------------------
# Skip markers
# ---------------------------------------------------------------------------

_HAS_SNAPPY = pa.Codec.is_available("snappy")

requires_snappy = pytest.mark.skipif(
    not _HAS_SNAPPY,
    reason="pyarrow was built without snappy",
)


def codec_params() -> list:
    """Every registered codec name, with snappy skipped when unavailable."""
    return [
        pytest.param(name, marks=requires_snappy) if name == "snappy" else name
        for name in sorted(CODECS)
    ]


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture()
def sync_marker() -> bytes:
    """A fixed 16-byte marker so expected file bytes are deterministic."""
    return bytes(range(16))


@pytest.fixture()
def many_records() -> list[tuple[bytes, bytes]]:
    """300 small pairs, enough to cross the sync interval several times."""
    return [(b"key-%04d" % i, b"value-%04d" % i) for i in range(300)]


@pytest.fixture()
def random_payload() -> bytes:
    """~600 KB of incompressible data, larger than one framed codec chunk."""
    return random.Random(42).randbytes(600 * 1024)
