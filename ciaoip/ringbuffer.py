"""Bounded FIFO of received packets."""

from __future__ import annotations

from collections import deque
from typing import Any

from .config import PACKET_LIMIT

MIN_SLOTS = 2
MAX_SLOTS = 255


class Ringbuffer:
    """A FIFO with ``size`` slots (clamped to 2..255), one of which stays empty."""

    def __init__(self, size: int = PACKET_LIMIT) -> None:
        self.slots = min(max(size, MIN_SLOTS), MAX_SLOTS)
        self._items: deque[Any] = deque()

    @property
    def capacity(self) -> int:
        """Number of items the buffer can hold at once."""
        return self.slots - 1

    def __len__(self) -> int:
        return len(self._items)

    def put(self, item: Any) -> bool:
        """Append an item; a full buffer drops it and returns False."""
        if item is None:
            raise ValueError("None cannot be stored in a ringbuffer")
        if self.is_full():
            return False
        self._items.append(item)
        return True

    def get(self) -> Any | None:
        """Take the oldest item, or None if the buffer is empty."""
        if not self._items:
            return None
        return self._items.popleft()

    def is_full(self) -> bool:
        return len(self._items) >= self.capacity