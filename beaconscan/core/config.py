"""Settings loading: packaged defaults merged with an optional user file."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from importlib import resources
from pathlib import Path
from typing import Any

from beaconscan.core.errors import ConfigLoadError, ConfigValidationError
from beaconscan.core.loader import read_yaml, validate
from beaconscan.core.model import BeaconType, Settings

_SCHEMA = "config.schema.json"
LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True)
class LoadedSettings:
    settings: Settings
    warnings: tuple[str, ...]


def user_config_path() -> Path:
    xdg_config = Path(os.environ.get("XDG_CONFIG_HOME", Path.home() / ".config"))
    return xdg_config / "beaconscan/config.yaml"


def _read_settings_doc(path: Any) -> dict[str, Any]:
    doc = read_yaml(path, load_error=ConfigLoadError, validation_error=ConfigValidationError)
    validate(doc, _SCHEMA, path, validation_error=ConfigValidationError)
    return doc


def _merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    merged = {section: dict(values) for section, values in base.items()}
    for section, values in override.items():
        merged.setdefault(section, {}).update(values)
    return merged


def _build_settings(doc: dict[str, Any]) -> Settings:
    scan = doc.get("scan", {})
    return Settings(
        scan_timeout_s=float(scan.get("timeout_s", 10.0)),
        adapter=scan.get("adapter"),
        beacon_types=tuple(BeaconType(t) for t in doc.get("filter", {}).get("beacon_types", [])),
        output_format=doc.get("output", {}).get("format", "text"),
    )


def load_settings(path: Path | None = None) -> LoadedSettings:
    """Load packaged defaults, then apply ``path`` (or the XDG user file) on top."""
    warnings: list[str] = []
    packaged = resources.files("beaconscan.defaults").joinpath("settings.yaml")
    doc = _read_settings_doc(packaged)

    user_path = path or user_config_path()
    if path is not None and not path.is_file():
        raise ConfigLoadError(f"Settings file {path} does not exist")
    if user_path.is_file():
        doc = _merge(doc, _read_settings_doc(user_path))
        warning = f"Settings from {user_path} override packaged defaults"
        LOGGER.warning(warning)
        warnings.append(warning)

    return LoadedSettings(settings=_build_settings(doc), warnings=tuple(warnings))
