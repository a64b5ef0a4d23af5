from __future__ import annotations

from pathlib import Path

import pytest

from beaconscan.core.model import AdvertisementReport, ServiceData


@pytest.fixture(autouse=True)
def isolated_config(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> Path:
    config_home = tmp_path / "cfg"
    monkeypatch.setenv("XDG_CONFIG_HOME", str(config_home))
    return config_home


def make_report(
    *,
    manufacturer_data: str | None = None,
    service_data: dict[str, str] | None = None,
    local_name: str | None = None,
) -> AdvertisementReport:
    return AdvertisementReport(
        identifier="c47c8d6a3e01",
        address="c4:7c:8d:6a:3e:01",
        rssi=-61,
        local_name=local_name,
        tx_power_level=None,
        manufacturer_data=bytes.fromhex(manufacturer_data) if manufacturer_data is not None else None,
        service_data=tuple(
            ServiceData(uuid=uuid, data=bytes.fromhex(data)) for uuid, data in (service_data or {}).items()
        ),
    )
