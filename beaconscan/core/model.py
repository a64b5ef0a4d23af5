"""Core data models shared by the detector, decoders, parser and CLI."""

from __future__ import annotations

import re
from dataclasses import asdict, dataclass
from enum import Enum
from typing import Any, Union

from beaconscan.core.errors import PayloadMismatchError

_BASE_UUID_RE = re.compile(r"^0000([0-9a-f]{4})-0000-1000-8000-00805f9b34fb$")
_CAMEL_RE = re.compile(r"_([a-z])")


def normalize_uuid(value: str) -> str:
    """Lower-case a service UUID and collapse Bluetooth base UUIDs to 16 bits."""
    normalized = value.strip().lower()
    match = _BASE_UUID_RE.match(normalized)
    if match:
        return match.group(1)
    return normalized


class BeaconType(str, Enum):
    IBEACON = "iBeacon"
    EDDYSTONE_UID = "eddystoneUid"
    EDDYSTONE_URL = "eddystoneUrl"
    EDDYSTONE_TLM = "eddystoneTlm"
    EDDYSTONE_EID = "eddystoneEid"
    ESTIMOTE_TELEMETRY = "estimoteTelemetry"
    ESTIMOTE_NEARABLE = "estimoteNearable"
    UNRECOGNIZED = ""

    @classmethod
    def recognized(cls) -> tuple[BeaconType, ...]:
        return tuple(t for t in cls if t is not cls.UNRECOGNIZED)


@dataclass(frozen=True)
class ServiceData:
    uuid: str
    data: bytes

    def __post_init__(self) -> None:
        object.__setattr__(self, "uuid", normalize_uuid(self.uuid))


@dataclass(frozen=True)
class AdvertisementReport:
    """One advertisement event as handed over by a BLE scanning stack."""

    identifier: str
    address: str
    rssi: int
    local_name: str | None = None
    tx_power_level: int | None = None
    manufacturer_data: bytes | None = None
    service_data: tuple[ServiceData, ...] = ()

    def service_data_for(self, uuid: str) -> bytes | None:
        wanted = normalize_uuid(uuid)
        for entry in self.service_data:
            if entry.uuid == wanted:
                return entry.data
        return None


@dataclass(frozen=True)
class Vector3:
    x: float
    y: float
    z: float


@dataclass(frozen=True)
class IBeaconPayload:
    uuid: str
    major: int
    minor: int
    tx_power: int


@dataclass(frozen=True)
class EddystoneUidPayload:
    tx_power: int
    namespace: str
    instance: str


@dataclass(frozen=True)
class EddystoneUrlPayload:
    tx_power: int
    url: str


@dataclass(frozen=True)
class EddystoneTlmPayload:
    battery_voltage: int
    temperature: float
    adv_cnt: int
    sec_cnt: int


@dataclass(frozen=True)
class EddystoneEidPayload:
    tx_power: int
    eid: str


@dataclass(frozen=True)
class GpioPins:
    pin0: bool
    pin1: bool
    pin2: bool
    pin3: bool


@dataclass(frozen=True)
class TelemetryErrors:
    firmware: bool
    clock: bool


@dataclass(frozen=True)
class Uptime:
    unit_code: int
    unit: str
    value: int


@dataclass(frozen=True)
class TelemetrySubFrameA:
    acceleration: Vector3
    moving: bool
    gpio: GpioPins
    errors: TelemetryErrors | None = None
    pressure: float | None = None


@dataclass(frozen=True)
class TelemetrySubFrameB:
    magnetic_field: Vector3
    light: float
    uptime: Uptime
    temperature: float
    battery_voltage: int | None
    errors: TelemetryErrors | None = None
    battery_level: int | None = None


@dataclass(frozen=True)
class EstimoteTelemetryPayload:
    protocol_version: int
    sub_frame_type: int
    short_identifier: str
    sub_frame: TelemetrySubFrameA | TelemetrySubFrameB


@dataclass(frozen=True)
class EstimoteNearablePayload:
    nearable_id: str
    temperature: float
    moving: bool
    acceleration: Vector3


BeaconPayload = Union[
    IBeaconPayload,
    EddystoneUidPayload,
    EddystoneUrlPayload,
    EddystoneTlmPayload,
    EddystoneEidPayload,
    EstimoteTelemetryPayload,
    EstimoteNearablePayload,
]

PAYLOAD_TYPES: dict[BeaconType, type] = {
    BeaconType.IBEACON: IBeaconPayload,
    BeaconType.EDDYSTONE_UID: EddystoneUidPayload,
    BeaconType.EDDYSTONE_URL: EddystoneUrlPayload,
    BeaconType.EDDYSTONE_TLM: EddystoneTlmPayload,
    BeaconType.EDDYSTONE_EID: EddystoneEidPayload,
    BeaconType.ESTIMOTE_TELEMETRY: EstimoteTelemetryPayload,
    BeaconType.ESTIMOTE_NEARABLE: EstimoteNearablePayload,
}


def _camel(key: str) -> str:
    return _CAMEL_RE.sub(lambda m: m.group(1).upper(), key)


def _camel_keys(value: Any) -> Any:
    if isinstance(value, dict):
        return {_camel(k): _camel_keys(v) for k, v in value.items()}
    return value


@dataclass(frozen=True)
class BeaconRecord:
    identifier: str
    address: str
    local_name: str | None
    tx_power_level: int | None
    rssi: int
    beacon_type: BeaconType
    payload: BeaconPayload

    def __post_init__(self) -> None:
        expected = PAYLOAD_TYPES.get(self.beacon_type)
        if expected is None:
            raise PayloadMismatchError(f"Cannot build a record for beacon type {self.beacon_type!r}")
        if not isinstance(self.payload, expected):
            raise PayloadMismatchError(
                f"Payload {type(self.payload).__name__} does not match beacon type "
                f"'{self.beacon_type.value}' (expected {expected.__name__})"
            )

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.identifier,
            "address": self.address,
            "localName": self.local_name,
            "txPowerLevel": self.tx_power_level,
            "rssi": self.rssi,
            "beaconType": self.beacon_type.value,
            self.beacon_type.value: _camel_keys(asdict(self.payload)),
        }


@dataclass(frozen=True)
class Settings:
    scan_timeout_s: float = 10.0
    adapter: str | None = None
    beacon_types: tuple[BeaconType, ...] = ()
    output_format: str = "text"
