"""YAML reading and JSON-schema validation shared by settings and capture files."""

from __future__ import annotations

import json
import re
from functools import lru_cache
from importlib import resources
from importlib.resources.abc import Traversable
from pathlib import Path
from typing import Any

import yaml
from jsonschema import ValidationError, validators

from beaconscan.core.errors import BeaconscanError

_HEX_RE = re.compile(r"^[0-9a-f]*$")
_MAX_PAYLOAD_BYTES = 255


class UniqueKeyLoader(yaml.SafeLoader):
    """YAML loader that rejects duplicate mapping keys."""


UniqueKeyLoader.yaml_implicit_resolvers = {
    key: list(value) for key, value in yaml.SafeLoader.yaml_implicit_resolvers.items()
}

for first_char, mappings in list(UniqueKeyLoader.yaml_implicit_resolvers.items()):
    UniqueKeyLoader.yaml_implicit_resolvers[first_char] = [
        (tag, regexp)
        for tag, regexp in mappings
        if tag != "tag:yaml.org,2002:bool"
    ]


def _construct_mapping(loader: UniqueKeyLoader, node: yaml.Node, deep: bool = False) -> dict[str, Any]:
    mapping: dict[str, Any] = {}
    for key_node, value_node in node.value:
        key = loader.construct_object(key_node, deep=deep)
        if key in mapping:
            raise yaml.constructor.ConstructorError(
                None, None, f"Duplicate key '{key}' in YAML document", key_node.start_mark
            )
        mapping[key] = loader.construct_object(value_node, deep=deep)
    return mapping


UniqueKeyLoader.add_constructor(
    yaml.resolver.BaseResolver.DEFAULT_MAPPING_TAG,
    _construct_mapping,
)


@lru_cache(maxsize=None)
def schema_validator(name: str) -> Any:
    schema_text = resources.files("beaconscan.schemas").joinpath(name).read_text(encoding="utf-8")
    schema = json.loads(schema_text)
    validator_cls = validators.validator_for(schema)
    validator_cls.check_schema(schema)
    return validator_cls(schema)


def read_yaml(
    path: Path | Traversable,
    *,
    load_error: type[BeaconscanError],
    validation_error: type[BeaconscanError],
) -> dict[str, Any]:
    try:
        content = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise load_error(f"Could not read {path}: {exc}") from exc

    try:
        loaded = yaml.load(content, Loader=UniqueKeyLoader)
    except yaml.YAMLError as exc:
        raise validation_error(f"Invalid YAML in {path}: {exc}") from exc

    if loaded is None:
        return {}
    if not isinstance(loaded, dict):
        raise validation_error(f"{path} must contain a mapping at root")
    return loaded


def validate(
    doc: dict[str, Any],
    schema: str,
    source: Path | Traversable,
    *,
    validation_error: type[BeaconscanError],
) -> None:
    try:
        schema_validator(schema).validate(doc)
    except ValidationError as exc:
        path = ".".join(str(p) for p in exc.path)
        where = f" ({path})" if path else ""
        raise validation_error(f"Schema validation failed for {source}{where}: {exc.message}") from exc


def normalize_hex(
    value: str,
    *,
    context: str,
    validation_error: type[BeaconscanError],
) -> bytes:
    normalized = value.strip().lower().replace(" ", "").replace(":", "")
    if len(normalized) % 2 != 0:
        raise validation_error(f"{context} must have even-length hex")
    if not _HEX_RE.match(normalized):
        raise validation_error(f"{context} must contain only [0-9a-f]")
    payload = bytes.fromhex(normalized)
    if len(payload) > _MAX_PAYLOAD_BYTES:
        raise validation_error(f"{context} exceeds max payload size {_MAX_PAYLOAD_BYTES} bytes")
    return payload
