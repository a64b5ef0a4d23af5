"""Field-level primitives for reading beacon frames.

Every read checks the buffer length first and raises
:class:`InsufficientDataError` instead of returning a made-up value.
Bit-packed fields are described as ordered ``(offset, shift, width)`` parts,
most significant part first, so the dense Estimote layouts read like their
vendor bit diagrams.
"""

from __future__ import annotations

import struct
from collections.abc import Sequence

from beaconscan.core.errors import InsufficientDataError, MalformedPayloadError

BitPart = tuple[int, int, int]


def _check_range(buf: bytes, offset: int, size: int) -> None:
    if offset < 0 or offset + size > len(buf):
        raise InsufficientDataError(
            f"Read of {size} byte(s) at offset {offset} exceeds buffer length {len(buf)}"
        )


def _unpack(fmt: str, buf: bytes, offset: int) -> int:
    size = struct.calcsize(fmt)
    _check_range(buf, offset, size)
    return struct.unpack_from(fmt, buf, offset)[0]


def read_uint8(buf: bytes, offset: int) -> int:
    return _unpack("B", buf, offset)


def read_int8(buf: bytes, offset: int) -> int:
    return _unpack("b", buf, offset)


def read_uint16(buf: bytes, offset: int, *, little: bool = False) -> int:
    return _unpack("<H" if little else ">H", buf, offset)


def read_int16(buf: bytes, offset: int, *, little: bool = False) -> int:
    return _unpack("<h" if little else ">h", buf, offset)


def read_uint32(buf: bytes, offset: int, *, little: bool = False) -> int:
    return _unpack("<I" if little else ">I", buf, offset)


def read_int32(buf: bytes, offset: int, *, little: bool = False) -> int:
    return _unpack("<i" if little else ">i", buf, offset)


def require_length(buf: bytes, minimum: int, *, context: str) -> None:
    if len(buf) < minimum:
        raise InsufficientDataError(f"{context} needs at least {minimum} bytes, got {len(buf)}")


def require_exact_length(buf: bytes, allowed: int | Sequence[int], *, context: str) -> None:
    sizes = (allowed,) if isinstance(allowed, int) else tuple(allowed)
    if len(buf) not in sizes:
        expected = " or ".join(str(s) for s in sizes)
        raise MalformedPayloadError(f"{context} must be {expected} bytes long, got {len(buf)}")


def bits(value: int, start: int, width: int) -> int:
    """Return ``width`` bits of ``value`` starting at bit ``start`` (LSB = 0)."""
    return (value >> start) & ((1 << width) - 1)


def bit_span(buf: bytes, parts: Sequence[BitPart]) -> int:
    """Assemble one field from bit ranges spread over several bytes."""
    result = 0
    for offset, shift, width in parts:
        result = (result << width) | bits(read_uint8(buf, offset), shift, width)
    return result


def twos_complement(value: int, width: int) -> int:
    if value & (1 << (width - 1)):
        return value - (1 << width)
    return value


def fixed_point(raw: int, divisor: float) -> float:
    return raw / divisor


def all_ones(value: int, width: int) -> bool:
    return value == (1 << width) - 1


def unless_all_ones(value: int, width: int) -> int | None:
    """Map the all-ones "unknown" sentinel of a ``width``-bit field to ``None``."""
    if all_ones(value, width):
        return None
    return value


def hex_slice(buf: bytes, start: int, end: int, *, upper: bool = False) -> str:
    _check_range(buf, start, end - start)
    rendered = buf[start:end].hex()
    return rendered.upper() if upper else rendered
