"""Decoding facade used by the API, CLI and scanner adapter."""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable

from beaconscan.core.detect import (
    EDDYSTONE_SERVICE_UUID,
    ESTIMOTE_TELEMETRY_SERVICE_UUID,
    detect_beacon_type,
)
from beaconscan.core.model import AdvertisementReport, BeaconPayload, BeaconRecord, BeaconType
from beaconscan.decoders import eddystone, estimote
from beaconscan.decoders.ibeacon import decode_ibeacon

LOGGER = logging.getLogger(__name__)

BufferSelector = Callable[[AdvertisementReport], bytes | None]
Decoder = Callable[[bytes], BeaconPayload | None]


def _manufacturer_data(report: AdvertisementReport) -> bytes | None:
    return report.manufacturer_data


def _eddystone_data(report: AdvertisementReport) -> bytes | None:
    return report.service_data_for(EDDYSTONE_SERVICE_UUID)


def _telemetry_data(report: AdvertisementReport) -> bytes | None:
    return report.service_data_for(ESTIMOTE_TELEMETRY_SERVICE_UUID)


DECODERS: dict[BeaconType, tuple[BufferSelector, Decoder]] = {
    BeaconType.IBEACON: (_manufacturer_data, decode_ibeacon),
    BeaconType.EDDYSTONE_UID: (_eddystone_data, eddystone.decode_uid),
    BeaconType.EDDYSTONE_URL: (_eddystone_data, eddystone.decode_url),
    BeaconType.EDDYSTONE_TLM: (_eddystone_data, eddystone.decode_tlm),
    BeaconType.EDDYSTONE_EID: (_eddystone_data, eddystone.decode_eid),
    BeaconType.ESTIMOTE_TELEMETRY: (_telemetry_data, estimote.decode_telemetry),
    BeaconType.ESTIMOTE_NEARABLE: (_manufacturer_data, estimote.decode_nearable),
}


class BeaconParser:
    """Turns advertisement reports into :class:`BeaconRecord` values.

    The parser holds no per-report state; ``beacon_types`` only narrows which
    recognized formats are returned.
    """

    def __init__(self, *, beacon_types: Iterable[BeaconType] | None = None) -> None:
        allowed = tuple(beacon_types) if beacon_types else BeaconType.recognized()
        self.beacon_types = frozenset(allowed)

    def detect(self, report: AdvertisementReport) -> BeaconType:
        return detect_beacon_type(report)

    def decode(self, report: AdvertisementReport) -> BeaconRecord | None:
        beacon_type = self.detect(report)
        if beacon_type is BeaconType.UNRECOGNIZED:
            return None
        if beacon_type not in self.beacon_types:
            LOGGER.debug("Skipping %s from %s (filtered)", beacon_type.value, report.address)
            return None

        select, decoder = DECODERS[beacon_type]
        data = select(report)
        if data is None:
            return None
        payload = decoder(data)
        if payload is None:
            LOGGER.debug("Detected %s from %s but frame did not decode", beacon_type.value, report.address)
            return None

        return BeaconRecord(
            identifier=report.identifier,
            address=report.address,
            local_name=report.local_name,
            tx_power_level=report.tx_power_level,
            rssi=report.rssi,
            beacon_type=beacon_type,
            payload=payload,
        )

    def decode_many(self, reports: Iterable[AdvertisementReport]) -> list[BeaconRecord]:
        records: list[BeaconRecord] = []
        for report in reports:
            record = self.decode(report)
            if record is not None:
                records.append(record)
        return records


_DEFAULT_PARSER = BeaconParser()


def decode(report: AdvertisementReport) -> BeaconRecord | None:
    return _DEFAULT_PARSER.decode(report)
