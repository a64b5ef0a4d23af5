"""Google Eddystone service-data decoders (UID, URL, TLM, EID).

Frame layouts follow https://github.com/google/eddystone/blob/master/protocol-specification.md.
"""

from __future__ import annotations

from beaconscan.core.codec import (
    fixed_point,
    hex_slice,
    read_int8,
    read_int16,
    read_uint8,
    read_uint16,
    read_uint32,
    require_exact_length,
    require_length,
)
from beaconscan.core.errors import MalformedPayloadError
from beaconscan.core.model import (
    EddystoneEidPayload,
    EddystoneTlmPayload,
    EddystoneUidPayload,
    EddystoneUrlPayload,
)
from beaconscan.decoders.base import guarded

URL_SCHEME_PREFIXES: dict[int, str] = {
    0x00: "http://www.",
    0x01: "https://www.",
    0x02: "http://",
    0x03: "https://",
}

URL_ENCODINGS: dict[int, str] = {
    0x00: ".com/",
    0x01: ".org/",
    0x02: ".edu/",
    0x03: ".net/",
    0x04: ".info/",
    0x05: ".biz/",
    0x06: ".gov/",
    0x07: ".com",
    0x08: ".org",
    0x09: ".edu",
    0x0A: ".net",
    0x0B: ".info",
    0x0C: ".biz",
    0x0D: ".gov",
}

TLM_VERSION = 0x00


def _parse_uid(data: bytes) -> EddystoneUidPayload:
    # 2 trailing RFU bytes are optional
    require_exact_length(data, (18, 20), context="Eddystone-UID frame")
    return EddystoneUidPayload(
        tx_power=read_int8(data, 1),
        namespace=hex_slice(data, 2, 12, upper=True),
        instance=hex_slice(data, 12, 18, upper=True),
    )


def expand_url(scheme: int, body: bytes) -> str:
    prefix = URL_SCHEME_PREFIXES.get(scheme)
    if prefix is None:
        raise MalformedPayloadError(f"Unknown Eddystone-URL scheme prefix 0x{scheme:02x}")
    parts = [prefix]
    for byte in body:
        expansion = URL_ENCODINGS.get(byte)
        if expansion is None:
            expansion = bytes((byte,)).decode("utf-8", errors="replace")
        parts.append(expansion)
    return "".join(parts)


def _parse_url(data: bytes) -> EddystoneUrlPayload:
    require_length(data, 4, context="Eddystone-URL frame")
    return EddystoneUrlPayload(
        tx_power=read_int8(data, 1),
        url=expand_url(read_uint8(data, 2), data[3:]),
    )


def _parse_tlm(data: bytes) -> EddystoneTlmPayload:
    require_exact_length(data, 14, context="Eddystone-TLM frame")
    version = read_uint8(data, 1)
    if version != TLM_VERSION:
        raise MalformedPayloadError(f"Unsupported Eddystone-TLM version {version}")
    return EddystoneTlmPayload(
        battery_voltage=read_uint16(data, 2),
        temperature=fixed_point(read_int16(data, 4), 256),
        adv_cnt=read_uint32(data, 6),
        sec_cnt=read_uint32(data, 10),
    )


def _parse_eid(data: bytes) -> EddystoneEidPayload:
    require_exact_length(data, 10, context="Eddystone-EID frame")
    return EddystoneEidPayload(
        tx_power=read_int8(data, 1),
        eid=hex_slice(data, 2, 10),
    )


def decode_uid(data: bytes) -> EddystoneUidPayload | None:
    return guarded(_parse_uid, data, frame="Eddystone-UID")


def decode_url(data: bytes) -> EddystoneUrlPayload | None:
    return guarded(_parse_url, data, frame="Eddystone-URL")


def decode_tlm(data: bytes) -> EddystoneTlmPayload | None:
    return guarded(_parse_tlm, data, frame="Eddystone-TLM")


def decode_eid(data: bytes) -> EddystoneEidPayload | None:
    return guarded(_parse_eid, data, frame="Eddystone-EID")
