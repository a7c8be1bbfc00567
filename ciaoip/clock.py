"""Tick-based clock used for TCP retransmission timeouts."""

from __future__ import annotations

import time
from collections.abc import Callable

UINT16_MASK = 0xFFFF
UINT32_MASK = 0xFFFF_FFFF
UINT64_MASK = 0xFFFF_FFFF_FFFF_FFFF

DEFAULT_FREQUENCY = 1_000_000


class Clock:
    """A clock counting ticks at ``freq`` ticks per second."""

    def __init__(
        self,
        freq: int = DEFAULT_FREQUENCY,
        source: Callable[[], int] | None = None,
    ) -> None:
        if freq < 1000:
            raise ValueError("clock frequency must be at least 1000 ticks per second")
        self.freq = freq
        self._source = source if source is not None else self._monotonic_ticks

    def _monotonic_ticks(self) -> int:
        return time.monotonic_ns() * self.freq // 1_000_000_000

    @property
    def _ticks_per_ms(self) -> int:
        return self.freq // 1000

    def now(self) -> int:
        """Current tick count."""
        return self._source() & UINT64_MASK

    def ms_to_ticks(self, ms: int) -> int:
        """Convert milliseconds (a 32-bit value) into ticks."""
        return (self._ticks_per_ms * (ms & UINT32_MASK)) & UINT64_MASK

    def ticks_to_ms(self, ticks: int) -> int:
        """Convert ticks into milliseconds, truncated to 32 bits."""
        return ((ticks & UINT64_MASK) // self._ticks_per_ms) & UINT32_MASK