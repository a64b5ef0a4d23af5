"""Stable public API for building tooling on top of beaconscan.

This module is the supported integration surface for third-party callers.
Avoid importing from private/internal modules unless intentionally depending on
non-stable internals.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable
from pathlib import Path

from beaconscan.core.capture import load_capture
from beaconscan.core.config import LoadedSettings, load_settings
from beaconscan.core.errors import (
    BeaconscanError,
    CaptureLoadError,
    CaptureValidationError,
    ConfigLoadError,
    ConfigValidationError,
    PayloadMismatchError,
    ScanError,
)
from beaconscan.core.model import (
    AdvertisementReport,
    BeaconRecord,
    BeaconType,
    EddystoneEidPayload,
    EddystoneTlmPayload,
    EddystoneUidPayload,
    EddystoneUrlPayload,
    EstimoteNearablePayload,
    EstimoteTelemetryPayload,
    IBeaconPayload,
    ServiceData,
    Settings,
    TelemetrySubFrameA,
    TelemetrySubFrameB,
)
from beaconscan.core.parser import BeaconParser, decode
from beaconscan.transports.base import ScannerFactory
from beaconscan.transports.bleak_scanner import BeaconScanner, bleak_scanner_factory

__all__ = [
    "BeaconscanError",
    "CaptureLoadError",
    "CaptureValidationError",
    "ConfigLoadError",
    "ConfigValidationError",
    "PayloadMismatchError",
    "ScanError",
    "AdvertisementReport",
    "BeaconRecord",
    "BeaconType",
    "EddystoneEidPayload",
    "EddystoneTlmPayload",
    "EddystoneUidPayload",
    "EddystoneUrlPayload",
    "EstimoteNearablePayload",
    "EstimoteTelemetryPayload",
    "IBeaconPayload",
    "ServiceData",
    "Settings",
    "TelemetrySubFrameA",
    "TelemetrySubFrameB",
    "BeaconParser",
    "Client",
    "decode",
]


class Client:
    """Public client for decoding beacon advertisements.

    A `Client` wraps settings, the decoding facade, capture replay and the
    optional bleak scanner behind a stable API intended for third-party tools.
    The BLE transport is never created implicitly by the decoder; `scan`
    takes an explicit scanner factory and defaults to bleak only there.
    """

    def __init__(
        self,
        *,
        settings: Settings | None = None,
        parser: BeaconParser | None = None,
    ) -> None:
        self._warnings: tuple[str, ...] = ()
        if settings is None:
            loaded: LoadedSettings = load_settings()
            settings = loaded.settings
            self._warnings = loaded.warnings
        self.settings = settings
        self._parser = parser or BeaconParser(beacon_types=settings.beacon_types)

    @property
    def load_warnings(self) -> tuple[str, ...]:
        return self._warnings

    def detect(self, report: AdvertisementReport) -> BeaconType:
        return self._parser.detect(report)

    def decode(self, report: AdvertisementReport) -> BeaconRecord | None:
        return self._parser.decode(report)

    def decode_many(self, reports: Iterable[AdvertisementReport]) -> list[BeaconRecord]:
        return self._parser.decode_many(reports)

    def replay(self, path: Path) -> list[BeaconRecord]:
        return self._parser.decode_many(load_capture(path))

    def scan(
        self,
        on_record: Callable[[BeaconRecord], None],
        *,
        timeout_s: float | None = None,
        scanner_factory: ScannerFactory | None = None,
    ) -> int:
        scanner = BeaconScanner(
            self._parser,
            scanner_factory or bleak_scanner_factory,
            adapter=self.settings.adapter,
        )
        timeout = self.settings.scan_timeout_s if timeout_s is None else timeout_s
        return scanner.run(timeout, on_record)
