"""Transport interfaces."""

from __future__ import annotations

from collections.abc import Callable
from contextlib import AbstractAsyncContextManager
from typing import Any, Protocol

DetectionCallback = Callable[[Any, Any], None]


class ScannerFactory(Protocol):
    def __call__(
        self,
        detection_callback: DetectionCallback,
        *,
        adapter: str | None = None,
    ) -> AbstractAsyncContextManager[Any]:
        """Return a scanner that calls ``detection_callback(device, advertisement)`` while entered."""
