"""Loading recorded advertisement reports from YAML capture files.

A capture file looks like::

    reports:
      - address: "c4:7c:8d:6a:3e:01"
        rssi: -61
        local_name: "Kontakt"
        manufacturer_data: "4c000215..."
        service_data:
          - uuid: feaa
            data: "20000bb8..."
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

from beaconscan.core.errors import CaptureLoadError, CaptureValidationError
from beaconscan.core.loader import normalize_hex, read_yaml, validate
from beaconscan.core.model import AdvertisementReport, ServiceData

_SCHEMA = "capture.schema.json"


def identifier_from_address(address: str) -> str:
    return address.replace(":", "").replace("-", "").lower()


def _hex(value: str, context: str) -> bytes:
    return normalize_hex(value, context=context, validation_error=CaptureValidationError)


def _build_report(entry: dict[str, Any], index: int) -> AdvertisementReport:
    context = f"reports[{index}]"
    manufacturer_data = None
    if "manufacturer_data" in entry:
        manufacturer_data = _hex(entry["manufacturer_data"], f"{context}.manufacturer_data")
    service_data = tuple(
        ServiceData(uuid=item["uuid"], data=_hex(item["data"], f"{context}.service_data[{i}]"))
        for i, item in enumerate(entry.get("service_data", []))
    )
    return AdvertisementReport(
        identifier=entry.get("id") or identifier_from_address(entry["address"]),
        address=entry["address"],
        rssi=int(entry["rssi"]),
        local_name=entry.get("local_name"),
        tx_power_level=entry.get("tx_power_level"),
        manufacturer_data=manufacturer_data,
        service_data=service_data,
    )


def load_capture(path: Path) -> list[AdvertisementReport]:
    if not path.is_file():
        raise CaptureLoadError(f"Capture file {path} does not exist")
    doc = read_yaml(path, load_error=CaptureLoadError, validation_error=CaptureValidationError)
    validate(doc, _SCHEMA, path, validation_error=CaptureValidationError)
    return [_build_report(entry, index) for index, entry in enumerate(doc["reports"])]
