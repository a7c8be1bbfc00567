"""Record of sent TCP segments awaiting acknowledgement or release."""

from __future__ import annotations

from collections.abc import Iterator
from typing import Any

from .clock import UINT64_MASK, Clock


class TCPRecord:
    """A sent segment, its total length and its retransmission deadline in ticks."""

    __slots__ = ("segment", "length", "timeout", "clock")

    def __init__(self, segment: Any, length: int, clock: Clock) -> None:
        if length < 0:
            raise ValueError("length must not be negative")
        self.segment = segment
        self.length = length
        self.clock = clock
        self.timeout = 0

    def __repr__(self) -> str:
        return f"TCPRecord(length={self.length}, timeout={self.timeout})"

    def set_timeout(self, msec: int) -> None:
        """Arm the retransmission timer ``msec`` from now; 0 disables it."""
        if msec != 0:
            deadline = self.clock.now() + self.clock.ms_to_ticks(msec)
            self.timeout = deadline & UINT64_MASK
        else:
            self.timeout = 0

    def is_timed_out(self) -> bool:
        """True once an armed timer has passed its deadline."""
        if self.timeout == 0:
            return False
        return self.clock.now() > self.timeout

    def remaining_time(self) -> int:
        """Milliseconds left until the deadline, 0 if it has passed."""
        current = self.clock.now()
        if current > self.timeout:
            return 0
        return self.clock.ticks_to_ms(self.timeout - current)


class TCPHistory:
    """Holds the one segment that is in flight without a sliding send window."""

    MAX_RECORDS = 1

    def __init__(self, clock: Clock | None = None) -> None:
        self.clock = clock if clock is not None else Clock()
        self._head: TCPRecord | None = None

    def __len__(self) -> int:
        return 0 if self._head is None else 1

    def __iter__(self) -> Iterator[TCPRecord]:
        if self._head is not None:
            yield self._head

    def add(self, segment: Any, length: int, msec: int) -> TCPRecord:
        """Store a sent segment with a retransmission timeout of ``msec``."""
        if self.is_full():
            raise RuntimeError("TCP history is full")
        record = TCPRecord(segment, length, self.clock)
        record.set_timeout(msec)
        self._head = record
        return record

    def get(self) -> TCPRecord | None:
        """The oldest stored record, or None."""
        return self._head

    def remove(self, record: TCPRecord) -> None:
        """Drop a record that is stored here."""
        if record is not self._head:
            raise ValueError(f"{record!r} is not in the history")
        self._head = None

    def is_empty(self) -> bool:
        return self._head is None

    def is_full(self) -> bool:
        return not self.is_empty()

    def next_timeout(self) -> int:
        """Milliseconds until the next retransmission is due, 0 if none is pending."""
        if self._head is None:
            return 0
        return self._head.remaining_time()