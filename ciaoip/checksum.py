"""Internet checksum over an IPv4 payload, with or without the pseudo header."""

from __future__ import annotations

import struct

from .ipv4 import IPv4Packet

_WORD = struct.Struct("!H")


def _fold(total: int) -> int:
    while total >> 16:
        total = (total & 0xFFFF) + (total >> 16)
    return total


def pseudo_header_sum(src: int, dst: int, protocol: int, length: int) -> int:
    """Unfolded sum of the IPv4 pseudo header."""
    src &= 0xFFFF_FFFF
    dst &= 0xFFFF_FFFF
    return (
        (length & 0xFFFF)
        + (protocol & 0xFF)
        + (src >> 16)
        + (src & 0xFFFF)
        + (dst >> 16)
        + (dst & 0xFFFF)
    )


def payload_sum(payload: bytes) -> int:
    """Unfolded sum of 16-bit big-endian words; an odd last byte is zero-padded."""
    data = bytes(payload)
    total = 0
    if len(data) % 2:
        total += data[-1] << 8
        data = data[:-1]
    return total + sum(word for (word,) in _WORD.iter_unpack(data))


def compute(packet: IPv4Packet) -> int:
    """Checksum of a TCP or UDP payload including the pseudo header."""
    length = len(packet.payload)
    total = pseudo_header_sum(packet.src, packet.dst, packet.protocol, length)
    total += payload_sum(packet.payload)
    return ~_fold(total) & 0xFFFF


def compute_payload_checksum(packet: IPv4Packet) -> int:
    """Checksum of the payload alone, as used by ICMP."""
    return ~_fold(payload_sum(packet.payload)) & 0xFFFF


def is_valid(packet: IPv4Packet) -> bool:
    """True if the transport checksum inside the payload is correct."""
    return compute(packet) == 0