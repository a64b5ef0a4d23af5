from __future__ import annotations

import pytest

from beaconscan.core import codec
from beaconscan.core.errors import InsufficientDataError, MalformedPayloadError


def test_integer_reads_respect_endianness_and_sign() -> None:
    buf = bytes.fromhex("0102fffe")
    assert codec.read_uint16(buf, 0) == 0x0102
    assert codec.read_uint16(buf, 0, little=True) == 0x0201
    assert codec.read_int8(buf, 2) == -1
    assert codec.read_int16(buf, 2) == -2
    assert codec.read_uint32(buf, 0) == 0x0102FFFE
    assert codec.read_int32(buf, 0, little=True) == -0x0100FDFF


def test_read_past_end_raises_insufficient_data() -> None:
    with pytest.raises(InsufficientDataError):
        codec.read_uint16(b"\x01", 0)
    with pytest.raises(InsufficientDataError):
        codec.read_uint32(bytes(4), 1)


def test_bit_span_joins_bits_across_bytes() -> None:
    # 4 low bits of byte 1 on top of all of byte 0
    assert codec.bit_span(bytes([0xAB, 0x3C]), ((1, 0, 4), (0, 0, 8))) == 0xCAB


def test_bit_span_reads_mid_byte_parts() -> None:
    buf = bytes([0b0100_0000, 0x00, 0b0000_0010])
    assert codec.bit_span(buf, ((2, 0, 2), (1, 0, 8), (0, 6, 2))) == 0x801


def test_twos_complement_12_bit() -> None:
    assert codec.twos_complement(0x7FF, 12) == 2047
    assert codec.twos_complement(0x800, 12) == -2048
    assert codec.twos_complement(0xFFF, 12) == -1


def test_all_ones_sentinel_maps_to_none() -> None:
    assert codec.unless_all_ones(0x3FFF, 14) is None
    assert codec.unless_all_ones(0x3FFE, 14) == 0x3FFE
    assert codec.unless_all_ones(0xFF, 8) is None


def test_hex_slice_case() -> None:
    buf = bytes.fromhex("00abcdef")
    assert codec.hex_slice(buf, 1, 3) == "abcd"
    assert codec.hex_slice(buf, 1, 4, upper=True) == "ABCDEF"
    with pytest.raises(InsufficientDataError):
        codec.hex_slice(buf, 2, 6)


def test_length_checks() -> None:
    codec.require_length(bytes(4), 4, context="frame")
    with pytest.raises(InsufficientDataError):
        codec.require_length(bytes(3), 4, context="frame")
    codec.require_exact_length(bytes(20), (18, 20), context="frame")
    with pytest.raises(MalformedPayloadError):
        codec.require_exact_length(bytes(17), (18, 20), context="frame")
