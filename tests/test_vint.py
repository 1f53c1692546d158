"""Hadoop VInt/VLong encoding, checked against WritableUtils.writeVLong output."""

from __future__ import annotations

import io

import pytest

from sequencefile.errors import CorruptFileError
from sequencefile.vint import decode_vint, encode_vint, read_vint

VINTS = [
    (b"\x00", 0),
    (b"\x01", 1),
    (b"\xff", -1),
    (b"\x64", 100),
    (b"\x9c", -100),
    (b"\x8f\xc8", 200),
    (b"\x87\xc7", -200),
    (b"\x8e\x1f\xff", 8191),
    (b"\x86\x1f\xfe", -8191),
    (b"\x8c\x7f\xff\xff\xff", 2147483647),
    (b"\x84\x7f\xff\xff\xfe", -2147483647),
    (b"\x8c\x6d\x7f\x77\x58", 1837070168),
    (b"\x84\x6d\x7f\x77\x57", -1837070168),
    (b"\x8c\xff\xff\xff\xfe", 4294967294),
    (b"\x84\xff\xff\xff\xfd", -4294967294),
    (b"\x88\x08\x00\x00\x00\x00\x00\x00\x00", 576460752303423488),
    (b"\x80\x07\xff\xff\xff\xff\xff\xff\xff", -576460752303423488),
]


@pytest.mark.parametrize("encoded, number", VINTS)
def test_encode(encoded: bytes, number: int) -> None:
    assert encode_vint(number) == encoded


@pytest.mark.parametrize("encoded, number", VINTS)
def test_decode(encoded: bytes, number: int) -> None:
    assert decode_vint(encoded) == (number, len(encoded))
    assert read_vint(io.BytesIO(encoded)) == number


def test_decode_at_offset() -> None:
    buf = b"junk" + encode_vint(200) + encode_vint(-1)
    value, off = decode_vint(buf, 4)
    assert value == 200
    assert decode_vint(buf, off) == (-1, len(buf))


def test_boundaries_take_one_byte() -> None:
    assert len(encode_vint(-112)) == 1
    assert len(encode_vint(127)) == 1
    assert len(encode_vint(128)) == 2
    assert len(encode_vint(-113)) == 2


def test_truncated() -> None:
    with pytest.raises(CorruptFileError):
        decode_vint(b"\x8c\x7f\xff")
    with pytest.raises(CorruptFileError):
        decode_vint(b"")
    with pytest.raises(CorruptFileError):
        read_vint(io.BytesIO(b"\x8e\x1f"))
    with pytest.raises(CorruptFileError):
        read_vint(io.BytesIO(b""))
