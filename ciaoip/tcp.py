"""TCP segments and sequence-number arithmetic."""

from __future__ import annotations

import enum
import struct
from dataclasses import dataclass

TCP_MIN_HEADER_SIZE = 20
TCP_MAX_OPTIONS_SIZE = 40
IPV4_TYPE_TCP = 0x6
UNUSED_PORT = 0
DEFAULT_MSS = 536

_HEADER = struct.Struct("!HHIIBBHHH")
_FLAG_MASK = 0x3F


class TCPFlag(enum.IntFlag):
    FIN = 1 << 0
    SYN = 1 << 1
    RST = 1 << 2
    PSH = 1 << 3
    ACK = 1 << 4
    URG = 1 << 5


def _signed32(value: int) -> int:
    value &= 0xFFFF_FFFF
    return value - (1 << 32) if value & 0x8000_0000 else value


def seq_lt(a: int, b: int) -> bool:
    return _signed32(a - b) < 0


def seq_leq(a: int, b: int) -> bool:
    return _signed32(a - b) <= 0


def seq_gt(a: int, b: int) -> bool:
    return _signed32(a - b) > 0


def seq_geq(a: int, b: int) -> bool:
    return _signed32(a - b) >= 0


@dataclass
class TCPSegment:
    """A TCP segment; the header length follows from the options."""

    sport: int = UNUSED_PORT
    dport: int = UNUSED_PORT
    seqnum: int = 0
    acknum: int = 0
    flags: TCPFlag = TCPFlag(0)
    window: int = 0
    checksum: int = 0
    urgent_ptr: int = 0
    options: bytes = b""
    data: bytes = b""

    def __post_init__(self) -> None:
        for name, bits in (
            ("sport", 16),
            ("dport", 16),
            ("seqnum", 32),
            ("acknum", 32),
            ("window", 16),
            ("checksum", 16),
            ("urgent_ptr", 16),
        ):
            value = getattr(self, name)
            if not 0 <= value < (1 << bits):
                raise ValueError(f"{name} must fit in {bits} bits, got {value}")
        if int(self.flags) & ~_FLAG_MASK:
            raise ValueError(f"unknown TCP flag bits in {int(self.flags):#x}")
        self.flags = TCPFlag(self.flags)
        self.options = bytes(self.options)
        self.data = bytes(self.data)
        if len(self.options) % 4 or len(self.options) > TCP_MAX_OPTIONS_SIZE:
            raise ValueError(
                f"options must be a multiple of 4 bytes, at most {TCP_MAX_OPTIONS_SIZE}"
            )

    @property
    def header_len(self) -> int:
        """Header length in 32-bit words."""
        return (TCP_MIN_HEADER_SIZE + len(self.options)) // 4

    @property
    def options_len(self) -> int:
        return len(self.options)

    def to_bytes(self) -> bytes:
        header = _HEADER.pack(
            self.sport,
            self.dport,
            self.seqnum,
            self.acknum,
            (self.header_len << 4) & 0xF0,
            int(self.flags) & _FLAG_MASK,
            self.window,
            self.checksum,
            self.urgent_ptr,
        )
        return header + self.options + self.data

    @classmethod
    def from_bytes(cls, data: bytes) -> TCPSegment:
        raw = bytes(data)
        if len(raw) < TCP_MIN_HEADER_SIZE:
            raise ValueError(f"segment of {len(raw)} bytes is shorter than its header")
        (
            sport,
            dport,
            seqnum,
            acknum,
            offset,
            flags,
            window,
            checksum,
            urgent_ptr,
        ) = _HEADER.unpack_from(raw)
        header_size = ((offset >> 4) & 0xF) * 4
        if header_size < TCP_MIN_HEADER_SIZE:
            raise ValueError(f"bad header length {header_size}")
        if header_size > len(raw):
            raise ValueError("header is longer than the segment")
        return cls(
            sport=sport,
            dport=dport,
            seqnum=seqnum,
            acknum=acknum,
            flags=TCPFlag(flags & _FLAG_MASK),
            window=window,
            checksum=checksum,
            urgent_ptr=urgent_ptr,
            options=raw[TCP_MIN_HEADER_SIZE:header_size],
            data=raw[header_size:],
        )