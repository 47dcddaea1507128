"""Time source and delay abstraction used by the poller.

``SystemClock`` sleeps the calling thread only; other threads sharing a
``Client`` keep running. Tests substitute a fake that advances virtual
time instead of sleeping.
"""

from __future__ import annotations

import time
from typing import Protocol


class Clock(Protocol):
    """Millisecond time source with a blocking delay."""

    def now_ms(self) -> float:
        """Return a monotonic timestamp in milliseconds."""
        ...

    def sleep_ms(self, duration_ms: float) -> None:
        """Suspend the calling thread for *duration_ms* milliseconds."""
        ...


class SystemClock:
    """``Clock`` backed by ``time.monotonic`` and ``time.sleep``."""

    def now_ms(self) -> float:
        return time.monotonic() * 1000.0

    def sleep_ms(self, duration_ms: float) -> None:
        if duration_ms > 0:
            time.sleep(duration_ms / 1000.0)
