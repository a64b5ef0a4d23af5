"""Shared decoder boundary: frame errors become a ``None`` result."""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import TypeVar

from beaconscan.core.errors import DecodeError

LOGGER = logging.getLogger(__name__)

PayloadT = TypeVar("PayloadT")


def guarded(parse: Callable[[bytes], PayloadT], data: bytes, *, frame: str) -> PayloadT | None:
    try:
        return parse(data)
    except DecodeError as exc:
        LOGGER.debug("Rejected %s frame %s: %s", frame, data.hex(), exc)
        return None
