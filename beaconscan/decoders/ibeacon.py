"""Apple iBeacon manufacturer-data decoder."""

from __future__ import annotations

from beaconscan.core.codec import hex_slice, read_int8, read_uint16, require_length
from beaconscan.core.model import IBeaconPayload
from beaconscan.decoders.base import guarded

_MIN_LENGTH = 25
_UUID_GROUPS = ((4, 8), (8, 10), (10, 12), (12, 14), (14, 20))


def format_uuid(data: bytes) -> str:
    """Render bytes 4-19 as an upper-case 8-4-4-4-12 UUID."""
    return "-".join(hex_slice(data, start, end, upper=True) for start, end in _UUID_GROUPS)


def _parse(data: bytes) -> IBeaconPayload:
    require_length(data, _MIN_LENGTH, context="iBeacon frame")
    return IBeaconPayload(
        uuid=format_uuid(data),
        major=read_uint16(data, 20),
        minor=read_uint16(data, 22),
        tx_power=read_int8(data, 24),
    )


def decode_ibeacon(data: bytes) -> IBeaconPayload | None:
    return guarded(_parse, data, frame="iBeacon")
