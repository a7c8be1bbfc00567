"""ICMP messages."""

from __future__ import annotations

import struct
from dataclasses import dataclass

ICMP_HEADER_SIZE = 8
ICMP_MAX_DATA_SIZE = 56
IPV4_TYPE_ICMP = 1
ICMP_TYPE_DESTINATION_UNREACHABLE = 3
ICMP_CODE_PROTOCOL_UNREACHABLE = 2
ICMP_CODE_PORT_UNREACHABLE = 3
ICMP_TYPE_ECHO_REQUEST = 8
ICMP_TYPE_ECHO_REPLY = 0
ICMP_CODE_ECHO = 0

_HEADER = struct.Struct("!BBHI")


@dataclass
class ICMPPacket:
    """An ICMP message: type, code, checksum, the 32-bit quench word and data."""

    type: int = ICMP_TYPE_ECHO_REQUEST
    code: int = ICMP_CODE_ECHO
    checksum: int = 0
    quench: int = 0
    data: bytes = b""

    def __post_init__(self) -> None:
        for name, bits in (("type", 8), ("code", 8), ("checksum", 16), ("quench", 32)):
            value = getattr(self, name)
            if not 0 <= value < (1 << bits):
                raise ValueError(f"{name} must fit in {bits} bits, got {value}")
        self.data = bytes(self.data)

    def to_bytes(self) -> bytes:
        return _HEADER.pack(self.type, self.code, self.checksum, self.quench) + self.data

    @classmethod
    def from_bytes(cls, data: bytes) -> ICMPPacket:
        raw = bytes(data)
        if len(raw) < ICMP_HEADER_SIZE:
            raise ValueError(f"ICMP message of {len(raw)} bytes is shorter than its header")
        icmp_type, code, checksum, quench = _HEADER.unpack_from(raw)
        return cls(icmp_type, code, checksum, quench, raw[ICMP_HEADER_SIZE:])