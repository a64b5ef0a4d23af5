from __future__ import annotations

import pytest

from beaconscan.core.model import TelemetryErrors, TelemetrySubFrameA, TelemetrySubFrameB
from beaconscan.decoders.estimote import decode_nearable, decode_telemetry

SHORT_ID = "0011223344556677"


def _telemetry(version: int, sub_frame: str, body: str) -> bytes:
    return bytes.fromhex(f"{version:x}2" + SHORT_ID + sub_frame + body)


# accel x=127 y=-127 z=0, motion durations, gpio pins 0+3, firmware error, moving, pressure 1013 hPa
SUB_A_V2 = "7f8100" + "0000" + "95" + "00f50300"
# magnetic 64/-64/0, light 0x23, uptime 300 minutes, 22.5 C, 3000 mV, 85 %
SUB_B = "40c000" + "23" + "2c" + "11" + "5a" + "e0" + "2e"


def test_sub_frame_a_version_2() -> None:
    payload = decode_telemetry(_telemetry(2, "00", SUB_A_V2))
    assert payload is not None
    assert payload.protocol_version == 2
    assert payload.sub_frame_type == 0
    assert payload.short_identifier == SHORT_ID
    frame = payload.sub_frame
    assert isinstance(frame, TelemetrySubFrameA)
    assert frame.acceleration.x == pytest.approx(2.0)
    assert frame.acceleration.y == pytest.approx(-2.0)
    assert frame.acceleration.z == 0
    assert frame.moving is True
    assert (frame.gpio.pin0, frame.gpio.pin1, frame.gpio.pin2, frame.gpio.pin3) == (True, False, False, True)
    assert frame.errors == TelemetryErrors(firmware=True, clock=False)
    assert frame.pressure == 1013.0


def test_sub_frame_a_version_1_reads_errors_from_byte_16() -> None:
    payload = decode_telemetry(_telemetry(1, "00", "000000" + "0000" + "00" + "02"))
    assert payload is not None
    frame = payload.sub_frame
    assert isinstance(frame, TelemetrySubFrameA)
    assert frame.moving is False
    assert frame.errors == TelemetryErrors(firmware=False, clock=True)
    assert frame.pressure is None


def test_sub_frame_a_version_0_has_no_errors_or_pressure() -> None:
    payload = decode_telemetry(_telemetry(0, "00", "000000" + "0000" + "02"))
    assert payload is not None
    frame = payload.sub_frame
    assert isinstance(frame, TelemetrySubFrameA)
    assert frame.moving is True
    assert frame.errors is None
    assert frame.pressure is None


def test_sub_frame_a_version_2_needs_pressure_bytes() -> None:
    assert decode_telemetry(_telemetry(2, "00", SUB_A_V2[:-2])) is None


def test_sub_frame_b_version_1() -> None:
    payload = decode_telemetry(_telemetry(1, "01", SUB_B + "55"))
    assert payload is not None
    frame = payload.sub_frame
    assert isinstance(frame, TelemetrySubFrameB)
    assert (frame.magnetic_field.x, frame.magnetic_field.y, frame.magnetic_field.z) == (1.0, -1.0, 0.0)
    assert frame.light == pytest.approx(8.64)
    assert frame.uptime.value == 300
    assert frame.uptime.unit_code == 1
    assert frame.uptime.unit == "minutes"
    assert frame.temperature == 22.5
    assert frame.battery_voltage == 3000
    assert frame.battery_level == 85
    assert frame.errors is None


def test_sub_frame_b_negative_temperature_spans_three_bytes() -> None:
    body = "40c000" + "23" + "2c" + "51" + "00" + "e2" + "2e" + "55"
    payload = decode_telemetry(_telemetry(2, "01", body))
    assert payload is not None
    assert payload.sub_frame.temperature == -127.9375


def test_battery_level_sentinel_is_unknown() -> None:
    payload = decode_telemetry(_telemetry(1, "01", SUB_B + "ff"))
    assert payload is not None
    assert payload.sub_frame.battery_level is None


def test_battery_voltage_all_ones_is_unknown() -> None:
    body = "40c000" + "23" + "2c" + "11" + "5a" + "fc" + "ff" + "55"
    payload = decode_telemetry(_telemetry(1, "01", body))
    assert payload is not None
    assert payload.sub_frame.battery_voltage is None
    assert payload.sub_frame.battery_level == 85


def test_sub_frame_b_version_0_reports_errors_instead_of_level() -> None:
    payload = decode_telemetry(_telemetry(0, "01", SUB_B + "01"))
    assert payload is not None
    frame = payload.sub_frame
    assert frame.errors == TelemetryErrors(firmware=True, clock=False)
    assert frame.battery_level is None


@pytest.mark.parametrize(
    "frame",
    [
        bytes.fromhex("32" + SHORT_ID + "01" + SUB_B + "55"),
        bytes.fromhex("13" + SHORT_ID + "01" + SUB_B + "55"),
        bytes.fromhex("12" + SHORT_ID + "02" + SUB_B + "55"),
        bytes.fromhex("12" + SHORT_ID),
        bytes.fromhex("12" + SHORT_ID + "01" + SUB_B),
    ],
    ids=["version-3", "wrong-frame-type", "sub-frame-2", "header-only", "sub-frame-b-short"],
)
def test_telemetry_not_decodable(frame: bytes) -> None:
    assert decode_telemetry(frame) is None


NEARABLE = "5d01" + "01" + "d3a4b2c1e0f90817" + "0000" + "58a1" + "40" + "02fe40"


def test_nearable_fields() -> None:
    payload = decode_nearable(bytes.fromhex(NEARABLE))
    assert payload is not None
    assert payload.nearable_id == "d3a4b2c1e0f90817"
    assert payload.temperature == 21.5
    assert payload.moving is True
    assert (payload.acceleration.x, payload.acceleration.y, payload.acceleration.z) == (31.25, -31.25, 1000.0)


def test_nearable_negative_temperature_and_still() -> None:
    frame = NEARABLE[:26] + "f00f" + "00" + NEARABLE[32:]
    payload = decode_nearable(bytes.fromhex(frame))
    assert payload is not None
    assert payload.temperature == -1.0
    assert payload.moving is False


def test_nearable_rejects_other_versions_and_short_frames() -> None:
    assert decode_nearable(bytes.fromhex("5d0102" + NEARABLE[6:])) is None
    assert decode_nearable(bytes.fromhex(NEARABLE)[:18]) is None
