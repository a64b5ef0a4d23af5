"""Estimote telemetry (service data ``fe9a``) and nearable (manufacturer data) decoders.

Layouts follow https://github.com/Estimote/estimote-specs (estimote-telemetry.js
and estimote-nearable.js). Telemetry byte 0 carries the protocol version in
the high nibble and the frame type in the low nibble; byte 9's low two bits
select sub-frame A (motion) or B (environment).
"""

from __future__ import annotations

from beaconscan.core.codec import (
    bit_span,
    bits,
    fixed_point,
    hex_slice,
    read_int8,
    read_uint8,
    read_uint16,
    read_uint32,
    require_length,
    twos_complement,
    unless_all_ones,
)
from beaconscan.core.errors import MalformedPayloadError
from beaconscan.core.model import (
    EstimoteNearablePayload,
    EstimoteTelemetryPayload,
    GpioPins,
    TelemetryErrors,
    TelemetrySubFrameA,
    TelemetrySubFrameB,
    Uptime,
    Vector3,
)
from beaconscan.decoders.base import guarded

TELEMETRY_FRAME_TYPE = 0b0010
MAX_PROTOCOL_VERSION = 2
SUB_FRAME_A = 0
SUB_FRAME_B = 1
NEARABLE_FRAME_VERSION = 0x01

UPTIME_UNITS = ("seconds", "minutes", "hours", "days")

_HEADER_LENGTH = 10
_SUB_FRAME_A_LENGTH = {0: 16, 1: 17, 2: 20}
_SUB_FRAME_B_LENGTH = 20
_NEARABLE_LENGTH = 19

_UPTIME_BITS = ((15, 0, 4), (14, 0, 8))
_TEMPERATURE_BITS = ((17, 0, 2), (16, 0, 8), (15, 6, 2))
_BATTERY_VOLTAGE_BITS = ((18, 0, 8), (17, 2, 6))
_BATTERY_VOLTAGE_WIDTH = 14


def _vector(data: bytes, offset: int, scale: float) -> Vector3:
    return Vector3(
        x=read_int8(data, offset) * scale,
        y=read_int8(data, offset + 1) * scale,
        z=read_int8(data, offset + 2) * scale,
    )


def _errors(flags: int, shift: int) -> TelemetryErrors:
    return TelemetryErrors(
        firmware=bool(bits(flags, shift, 1)),
        clock=bool(bits(flags, shift + 1, 1)),
    )


def _temperature_12bit(raw: int) -> float:
    return fixed_point(twos_complement(raw, 12), 16.0)


def _sub_frame_a(data: bytes, version: int) -> TelemetrySubFrameA:
    require_length(data, _SUB_FRAME_A_LENGTH[version], context=f"Estimote telemetry A v{version}")
    status = read_uint8(data, 15)
    errors = None
    pressure = None
    if version == 2:
        errors = _errors(status, 2)
        pressure = fixed_point(read_uint32(data, 16, little=True), 256.0)
    elif version == 1:
        # v1 moves the error flags to bits 0-1 of byte 16
        errors = _errors(read_uint8(data, 16), 0)
    return TelemetrySubFrameA(
        acceleration=_vector(data, 10, 2 / 127.0),
        moving=bits(status, 0, 2) != 0,
        gpio=GpioPins(
            pin0=bool(bits(status, 4, 1)),
            pin1=bool(bits(status, 5, 1)),
            pin2=bool(bits(status, 6, 1)),
            pin3=bool(bits(status, 7, 1)),
        ),
        errors=errors,
        pressure=pressure,
    )


def _sub_frame_b(data: bytes, version: int) -> TelemetrySubFrameB:
    require_length(data, _SUB_FRAME_B_LENGTH, context=f"Estimote telemetry B v{version}")
    light = read_uint8(data, 13)
    unit_code = bits(read_uint8(data, 15), 4, 2)
    errors = None
    battery_level = None
    if version == 0:
        errors = _errors(read_uint8(data, 19), 0)
    else:
        battery_level = unless_all_ones(read_uint8(data, 19), 8)
    return TelemetrySubFrameB(
        magnetic_field=_vector(data, 10, 2 / 128.0),
        light=(2 ** bits(light, 4, 4)) * bits(light, 0, 4) * 0.72,
        uptime=Uptime(
            unit_code=unit_code,
            unit=UPTIME_UNITS[unit_code],
            value=bit_span(data, _UPTIME_BITS),
        ),
        temperature=_temperature_12bit(bit_span(data, _TEMPERATURE_BITS)),
        battery_voltage=unless_all_ones(bit_span(data, _BATTERY_VOLTAGE_BITS), _BATTERY_VOLTAGE_WIDTH),
        errors=errors,
        battery_level=battery_level,
    )


def _parse_telemetry(data: bytes) -> EstimoteTelemetryPayload:
    require_length(data, _HEADER_LENGTH, context="Estimote telemetry header")
    header = read_uint8(data, 0)
    frame_type = bits(header, 0, 4)
    if frame_type != TELEMETRY_FRAME_TYPE:
        raise MalformedPayloadError(f"Not an Estimote telemetry frame (type {frame_type})")
    version = bits(header, 4, 4)
    if version > MAX_PROTOCOL_VERSION:
        raise MalformedPayloadError(f"Unsupported Estimote telemetry protocol version {version}")

    sub_frame_type = bits(read_uint8(data, 9), 0, 2)
    if sub_frame_type == SUB_FRAME_A:
        sub_frame = _sub_frame_a(data, version)
    elif sub_frame_type == SUB_FRAME_B:
        sub_frame = _sub_frame_b(data, version)
    else:
        raise MalformedPayloadError(f"Unknown Estimote telemetry sub-frame type {sub_frame_type}")

    return EstimoteTelemetryPayload(
        protocol_version=version,
        sub_frame_type=sub_frame_type,
        short_identifier=hex_slice(data, 1, 9),
        sub_frame=sub_frame,
    )


def _parse_nearable(data: bytes) -> EstimoteNearablePayload:
    require_length(data, _NEARABLE_LENGTH, context="Estimote nearable frame")
    version = read_uint8(data, 2)
    if version != NEARABLE_FRAME_VERSION:
        raise MalformedPayloadError(f"Unsupported Estimote nearable frame version 0x{version:02x}")
    return EstimoteNearablePayload(
        nearable_id=hex_slice(data, 3, 11),
        temperature=_temperature_12bit(read_uint16(data, 13, little=True) & 0x0FFF),
        moving=bool(bits(read_uint8(data, 15), 6, 1)),
        acceleration=_vector(data, 16, 15.625),
    )


def decode_telemetry(data: bytes) -> EstimoteTelemetryPayload | None:
    return guarded(_parse_telemetry, data, frame="Estimote telemetry")


def decode_nearable(data: bytes) -> EstimoteNearablePayload | None:
    return guarded(_parse_nearable, data, frame="Estimote nearable")
