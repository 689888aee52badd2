"""Cooperative cancellation for one CLI/API invocation."""
from __future__ import annotations

import threading

from .errors import Cancelled


class CancelToken:
    """Checked before every remote call; once set, the run stops with Cancelled."""

    def __init__(self) -> None:
        self._event = threading.Event()

    def cancel(self) -> None:
        self._event.set()

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    def raise_if_cancelled(self, operation: str) -> None:
        if self._event.is_set():
            raise Cancelled(operation)
