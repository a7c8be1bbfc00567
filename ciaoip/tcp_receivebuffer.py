"""In-order buffer of received TCP payload."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any

from .tcp import TCPFlag

_SEQ_MASK = 0xFFFF_FFFF


@dataclass
class RecvElement:
    """Unread payload of one segment, starting at sequence number ``seqnum``."""

    data: bytes
    seqnum: int
    segment: Any = field(default=None, repr=False)

    def __post_init__(self) -> None:
        self.data = bytes(self.data)
        self.seqnum &= _SEQ_MASK

    @property
    def length(self) -> int:
        return len(self.data)

    @property
    def next_seqnum(self) -> int:
        """Sequence number following the last unread byte."""
        return (self.seqnum + self.length) & _SEQ_MASK

    def increment(self, count: int) -> None:
        """Consume ``count`` bytes from the front."""
        if not 0 <= count <= self.length:
            raise ValueError(f"cannot consume {count} of {self.length} bytes")
        self.data = self.data[count:]
        self.seqnum = (self.seqnum + count) & _SEQ_MASK


class TCPReceiveBuffer:
    """Holds one in-order segment's payload until the application reads it."""

    def __init__(
        self,
        release: Callable[[Any], None] | None = None,
        first_seqnum: int = 0,
    ) -> None:
        self._release = release
        self.first_seqnum = first_seqnum & _SEQ_MASK
        self.head: RecvElement | None = None
        self._pushed = False

    @property
    def is_pushed(self) -> bool:
        """True if the buffered data carries a PSH flag."""
        return self._pushed

    @property
    def recv_bytes(self) -> int:
        """Number of unread bytes."""
        return 0 if self.head is None else self.head.length

    @property
    def ack_num(self) -> int:
        """Next sequence number expected from the peer."""
        if self.head is None:
            return self.first_seqnum
        return self.head.next_seqnum

    def insert(self, segment: Any, seqnum: int, length: int) -> bool:
        """Buffer ``length`` payload bytes of ``segment``; False if it cannot be taken."""
        if length < 0 or length > len(segment.data):
            raise ValueError(
                f"payload length {length} does not match a segment "
                f"carrying {len(segment.data)} bytes"
            )
        if (seqnum & _SEQ_MASK) != self.first_seqnum or self.head is not None:
            return False
        self.head = RecvElement(segment.data[:length], seqnum, segment)
        if TCPFlag.PSH in TCPFlag(segment.flags):
            self._pushed = True
        return True

    def copy_data(self, length: int) -> bytes:
        """Take ``length`` bytes from the front of the buffer."""
        if length < 0 or length > self.recv_bytes:
            raise ValueError(f"cannot read {length} of {self.recv_bytes} buffered bytes")
        head = self.head
        if head is None:
            return b""
        self.first_seqnum = (self.first_seqnum + length) & _SEQ_MASK
        if length == head.length:
            data = head.data
            self.head = None
            self._pushed = False
            if self._release is not None:
                self._release(head.segment)
            return data
        data = head.data[:length]
        head.increment(length)
        return data