"""bleak scanning adapter feeding advertisement reports to a :class:`BeaconParser`."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable
from contextlib import AbstractAsyncContextManager
from typing import Any

from beaconscan.core.capture import identifier_from_address
from beaconscan.core.detect import ESTIMOTE_COMPANY_ID
from beaconscan.core.errors import ScanError
from beaconscan.core.model import AdvertisementReport, BeaconRecord, ServiceData
from beaconscan.core.parser import BeaconParser
from beaconscan.transports.base import DetectionCallback, ScannerFactory

LOGGER = logging.getLogger(__name__)

APPLE_COMPANY_ID = 0x004C
BEACON_COMPANY_IDS = (APPLE_COMPANY_ID, ESTIMOTE_COMPANY_ID)


def bleak_scanner_factory(
    detection_callback: DetectionCallback,
    *,
    adapter: str | None = None,
) -> AbstractAsyncContextManager[Any]:
    try:
        from bleak import BleakScanner  # type: ignore
    except Exception as exc:  # pragma: no cover - import failure path
        raise ScanError("Scanning requires 'bleak'. Install dependency and retry.") from exc

    kwargs: dict[str, Any] = {"detection_callback": detection_callback}
    if adapter:
        kwargs["adapter"] = adapter
    return BleakScanner(**kwargs)


def report_from_bleak(device: Any, advertisement: Any) -> AdvertisementReport:
    """Build a report from bleak's ``BLEDevice`` and ``AdvertisementData``.

    bleak strips the company id from manufacturer data and keys the block by
    it; the raw little-endian prefix is restored so decoders see the bytes as
    they were on air. Only one block is kept: the first Apple or Estimote one
    when present, otherwise the first block bleak reports.
    """
    blocks = advertisement.manufacturer_data or {}
    company_id = next((cid for cid in blocks if cid in BEACON_COMPANY_IDS), next(iter(blocks), None))
    manufacturer_data = None
    if company_id is not None:
        manufacturer_data = company_id.to_bytes(2, "little") + bytes(blocks[company_id])

    service_data = tuple(
        ServiceData(uuid=uuid, data=bytes(data))
        for uuid, data in (advertisement.service_data or {}).items()
    )
    return AdvertisementReport(
        identifier=identifier_from_address(device.address),
        address=device.address,
        rssi=advertisement.rssi,
        local_name=advertisement.local_name,
        tx_power_level=advertisement.tx_power,
        manufacturer_data=manufacturer_data,
        service_data=service_data,
    )


class BeaconScanner:
    def __init__(
        self,
        parser: BeaconParser,
        scanner_factory: ScannerFactory,
        *,
        adapter: str | None = None,
    ) -> None:
        self.parser = parser
        self.scanner_factory = scanner_factory
        self.adapter = adapter

    async def scan(self, timeout_s: float, on_record: Callable[[BeaconRecord], None]) -> int:
        """Scan for ``timeout_s`` seconds, passing each decoded record to ``on_record``.

        Returns the number of records delivered.
        """
        delivered = 0

        def _on_detection(device: Any, advertisement: Any) -> None:
            nonlocal delivered
            record = self.parser.decode(report_from_bleak(device, advertisement))
            if record is None:
                return
            delivered += 1
            on_record(record)

        try:
            async with self.scanner_factory(_on_detection, adapter=self.adapter):
                await asyncio.sleep(timeout_s)
        except ScanError:
            raise
        except Exception as exc:
            raise ScanError(f"BLE scan failed: {exc}") from exc

        LOGGER.debug("Scan finished after %.1fs with %d record(s)", timeout_s, delivered)
        return delivered

    def run(self, timeout_s: float, on_record: Callable[[BeaconRecord], None]) -> int:
        return asyncio.run(self.scan(timeout_s, on_record))
