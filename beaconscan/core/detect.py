"""Beacon format classification from advertisement headers."""

from __future__ import annotations

from beaconscan.core.model import AdvertisementReport, BeaconType

IBEACON_PREFIX = bytes.fromhex("4c000215")
EDDYSTONE_SERVICE_UUID = "feaa"
ESTIMOTE_TELEMETRY_SERVICE_UUID = "fe9a"
ESTIMOTE_COMPANY_ID = 0x015D

EDDYSTONE_FRAME_TYPES: dict[int, BeaconType] = {
    0x0: BeaconType.EDDYSTONE_UID,
    0x1: BeaconType.EDDYSTONE_URL,
    0x2: BeaconType.EDDYSTONE_TLM,
    0x3: BeaconType.EDDYSTONE_EID,
}


def _is_ibeacon(manufacturer_data: bytes | None) -> bool:
    return bool(manufacturer_data) and manufacturer_data[:4] == IBEACON_PREFIX


def _is_estimote_nearable(manufacturer_data: bytes | None) -> bool:
    if not manufacturer_data or len(manufacturer_data) < 2:
        return False
    return int.from_bytes(manufacturer_data[:2], "little") == ESTIMOTE_COMPANY_ID


def detect_beacon_type(report: AdvertisementReport) -> BeaconType:
    """Classify a report. The first matching rule wins; nothing is decoded."""
    if _is_ibeacon(report.manufacturer_data):
        return BeaconType.IBEACON

    eddystone = report.service_data_for(EDDYSTONE_SERVICE_UUID)
    if eddystone and eddystone[0] >> 4 in EDDYSTONE_FRAME_TYPES:
        return EDDYSTONE_FRAME_TYPES[eddystone[0] >> 4]

    if report.service_data_for(ESTIMOTE_TELEMETRY_SERVICE_UUID):
        return BeaconType.ESTIMOTE_TELEMETRY

    if _is_estimote_nearable(report.manufacturer_data):
        return BeaconType.ESTIMOTE_NEARABLE

    return BeaconType.UNRECOGNIZED
