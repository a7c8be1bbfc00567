"""IPv4 packet header, header checksum and address helpers."""

from __future__ import annotations

import struct
from dataclasses import dataclass

ETH_TYPE_IPV4 = 0x0800
IPV4_VERSION = 4
IPV4_MIN_HEADER_SIZE = 20
IPV4_MAX_OPTIONS_SIZE = 40
IPV4_DF_FLAG = 0x02
IPV4_MF_FLAG = 0x01

IPV4_DEFAULT_TOS = 0
IPV4_DEFAULT_TTL = 64
IPV4_DEFAULT_FLAGS = 0
IPV4_NO_FRAGMENT_OFFSET = 0

IPV4_UNUSED_ADDR = 0

_HEADER = struct.Struct("!BBHHHBBHII")
_WORD = struct.Struct("!H")


def header_checksum(header: bytes) -> int:
    """One's-complement checksum of an IPv4 header; 0 means the header is intact."""
    data = bytes(header)
    if len(data) % 2:
        raise ValueError("an IPv4 header has an even number of bytes")
    total = sum(word for (word,) in _WORD.iter_unpack(data))
    total = (total >> 16) + (total & 0xFFFF)
    total += total >> 16
    return ~total & 0xFFFF


def valid_packet_length(data: bytes) -> int:
    """Return the packet's total length, or raise ValueError if the header is unusable."""
    packet_len = len(data)
    if packet_len < IPV4_MIN_HEADER_SIZE:
        raise ValueError(f"packet of {packet_len} bytes is too small")
    ihl = (data[0] & 0x0F) * 4
    if ihl < IPV4_MIN_HEADER_SIZE:
        raise ValueError(f"bad header length {ihl}")
    if ihl > packet_len:
        raise ValueError("header is longer than the packet")
    total_len = int.from_bytes(bytes(data[2:4]), "big")
    if total_len < ihl:
        raise ValueError("total length is smaller than the header")
    if total_len > packet_len:
        raise ValueError("total length exceeds the buffer")
    return total_len


def has_valid_checksum(data: bytes) -> bool:
    """Check the header checksum of a raw IPv4 packet."""
    if len(data) < IPV4_MIN_HEADER_SIZE:
        raise ValueError(f"packet of {len(data)} bytes is too small")
    ihl = (data[0] & 0x0F) * 4
    if ihl > len(data):
        raise ValueError("header is longer than the packet")
    return header_checksum(bytes(data[:ihl])) == 0


def convert_ipv4_addr(a: int, b: int, c: int, d: int) -> int:
    """The address a.b.c.d as a 32-bit integer, most significant octet first."""
    return ((a & 0xFF) << 24) | ((b & 0xFF) << 16) | ((c & 0xFF) << 8) | (d & 0xFF)


def _check_range(value: int, bits: int, name: str) -> None:
    if not 0 <= value < (1 << bits):
        raise ValueError(f"{name} must fit in {bits} bits, got {value}")


@dataclass
class IPv4Packet:
    """An IPv4 packet; header length and total length follow from options and payload."""

    src: int = IPV4_UNUSED_ADDR
    dst: int = IPV4_UNUSED_ADDR
    protocol: int = 0
    payload: bytes = b""
    tos: int = IPV4_DEFAULT_TOS
    ident: int = 0
    flags: int = IPV4_DEFAULT_FLAGS
    fragment_offset: int = IPV4_NO_FRAGMENT_OFFSET
    ttl: int = IPV4_DEFAULT_TTL
    checksum: int = 0
    options: bytes = b""
    version: int = IPV4_VERSION

    def __post_init__(self) -> None:
        self.payload = bytes(self.payload)
        self.options = bytes(self.options)
        if len(self.options) % 4 or len(self.options) > IPV4_MAX_OPTIONS_SIZE:
            raise ValueError(
                "options must be a multiple of 4 bytes, "
                f"at most {IPV4_MAX_OPTIONS_SIZE}"
            )
        _check_range(self.src, 32, "src")
        _check_range(self.dst, 32, "dst")
        _check_range(self.protocol, 8, "protocol")
        _check_range(self.tos, 8, "tos")
        _check_range(self.ident, 16, "ident")
        _check_range(self.flags, 3, "flags")
        _check_range(self.fragment_offset, 13, "fragment_offset")
        _check_range(self.ttl, 8, "ttl")
        _check_range(self.checksum, 16, "checksum")
        _check_range(self.version, 4, "version")

    @property
    def ihl(self) -> int:
        """Header length in 32-bit words."""
        return (IPV4_MIN_HEADER_SIZE + len(self.options)) // 4

    @property
    def header_length(self) -> int:
        return self.ihl * 4

    @property
    def total_len(self) -> int:
        return self.header_length + len(self.payload)

    def _header(self, checksum: int) -> bytes:
        if self.total_len > 0xFFFF:
            raise ValueError(f"packet of {self.total_len} bytes is too large")
        fixed = _HEADER.pack(
            (self.version << 4) | self.ihl,
            self.tos,
            self.total_len,
            self.ident,
            (self.flags << 13) | self.fragment_offset,
            self.ttl,
            self.protocol,
            checksum,
            self.src,
            self.dst,
        )
        return fixed + self.options

    def compute_checksum(self) -> int:
        """Fill in the header checksum and return it."""
        self.checksum = header_checksum(self._header(0))
        return self.checksum

    @property
    def checksum_is_valid(self) -> bool:
        return header_checksum(self._header(self.checksum)) == 0

    def to_bytes(self) -> bytes:
        return self._header(self.checksum) + self.payload

    @classmethod
    def from_bytes(cls, data: bytes) -> IPv4Packet:
        raw = bytes(data)
        total_len = valid_packet_length(raw)
        (
            version_ihl,
            tos,
            _total,
            ident,
            flags_fragment,
            ttl,
            protocol,
            checksum,
            src,
            dst,
        ) = _HEADER.unpack_from(raw)
        header_length = (version_ihl & 0x0F) * 4
        return cls(
            src=src,
            dst=dst,
            protocol=protocol,
            payload=raw[header_length:total_len],
            tos=tos,
            ident=ident,
            flags=(flags_fragment >> 13) & 0x7,
            fragment_offset=flags_fragment & 0x1FFF,
            ttl=ttl,
            checksum=checksum,
            options=raw[IPV4_MIN_HEADER_SIZE:header_length],
            version=version_ihl >> 4,
        )