"""UDP datagrams."""

from __future__ import annotations

import struct
from dataclasses import dataclass

UDP_HEADER_SIZE = 8
IPV4_TYPE_UDP = 17
UNUSED_PORT = 0

_HEADER = struct.Struct("!HHHH")


@dataclass
class UDPPacket:
    """A UDP datagram; ``length`` defaults to header plus data."""

    sport: int = UNUSED_PORT
    dport: int = UNUSED_PORT
    data: bytes = b""
    checksum: int = 0
    length: int | None = None

    def __post_init__(self) -> None:
        self.data = bytes(self.data)
        if self.length is None:
            self.length = UDP_HEADER_SIZE + len(self.data)
        for name in ("sport", "dport", "checksum", "length"):
            value = getattr(self, name)
            if not 0 <= value <= 0xFFFF:
                raise ValueError(f"{name} must fit in 16 bits, got {value}")

    def to_bytes(self) -> bytes:
        return (
            _HEADER.pack(self.sport, self.dport, self.length, self.checksum) + self.data
        )

    @classmethod
    def from_bytes(cls, data: bytes) -> UDPPacket:
        raw = bytes(data)
        if len(raw) < UDP_HEADER_SIZE:
            raise ValueError(f"datagram of {len(raw)} bytes is shorter than its header")
        sport, dport, length, checksum = _HEADER.unpack_from(raw)
        if length < UDP_HEADER_SIZE:
            raise ValueError(f"length field {length} is smaller than the header")
        if length > len(raw):
            raise ValueError(f"length field {length} exceeds the buffer")
        return cls(sport, dport, raw[UDP_HEADER_SIZE:length], checksum, length)