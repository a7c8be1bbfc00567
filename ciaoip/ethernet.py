"""Ethernet frames and ARP packets."""

from __future__ import annotations

import struct
from dataclasses import dataclass, field
from typing import Any

ETH_HEADER_SIZE = 14
MAX_FRAME_SIZE = 1518
MAX_PAYLOAD_SIZE = 1500
HWADDR_SIZE = 6
BROADCAST_HWADDR = b"\xff" * HWADDR_SIZE

ETH_TYPE_ARP = 0x0806
ARP_HW_TYPE_ETH = 0x0001
ARP_REQUEST = 0x0001
ARP_REPLY = 0x0002
ARP_HEADER_SIZE = 8
ARP_PROTOCOL_TYPE_IPV4 = 0x0800
ARP_HW_ADDR_SIZE_ETH = 6
ARP_PROTOCOL_ADDR_SIZE_IPV4 = 4
ARP_IPV4_PACKETSIZE = (
    ARP_HEADER_SIZE + 2 * ARP_HW_ADDR_SIZE_ETH + 2 * ARP_PROTOCOL_ADDR_SIZE_IPV4
)

ARP_IPV4_HEADER_SIZE = ETH_HEADER_SIZE + ARP_HEADER_SIZE
ARP_IPV4_FRAMESIZE = ETH_HEADER_SIZE + ARP_IPV4_PACKETSIZE

_ETH_HEADER = struct.Struct("!6s6sH")
_ARP_HEADER = struct.Struct("!HHBBH")
_ARP_IPV4_BODY = struct.Struct("!6sI6sI")


def _hwaddr(value: bytes, name: str) -> bytes:
    addr = bytes(value)
    if len(addr) != HWADDR_SIZE:
        raise ValueError(f"{name} must be {HWADDR_SIZE} bytes, got {len(addr)}")
    return addr


def _check_range(value: int, bits: int, name: str) -> int:
    if not 0 <= value < (1 << bits):
        raise ValueError(f"{name} must fit in {bits} bits, got {value}")
    return value


@dataclass
class EthernetFrame:
    """An Ethernet II frame: two hardware addresses, a type and the payload."""

    dst: bytes = bytes(HWADDR_SIZE)
    src: bytes = bytes(HWADDR_SIZE)
    ethertype: int = 0
    payload: bytes = b""

    def __post_init__(self) -> None:
        self.dst = _hwaddr(self.dst, "dst")
        self.src = _hwaddr(self.src, "src")
        _check_range(self.ethertype, 16, "ethertype")
        self.payload = bytes(self.payload)

    def set_dst_broadcast(self) -> None:
        """Address the frame to every station."""
        self.dst = BROADCAST_HWADDR

    @property
    def is_broadcast(self) -> bool:
        return self.dst == BROADCAST_HWADDR

    def to_bytes(self) -> bytes:
        if len(self.payload) > MAX_PAYLOAD_SIZE:
            raise ValueError(
                f"payload of {len(self.payload)} bytes exceeds {MAX_PAYLOAD_SIZE}"
            )
        header = _ETH_HEADER.pack(
            _hwaddr(self.dst, "dst"), _hwaddr(self.src, "src"), self.ethertype
        )
        return header + self.payload

    @classmethod
    def from_bytes(cls, data: bytes) -> EthernetFrame:
        raw = bytes(data)
        if len(raw) < ETH_HEADER_SIZE:
            raise ValueError(f"frame of {len(raw)} bytes is shorter than its header")
        dst, src, ethertype = _ETH_HEADER.unpack_from(raw)
        return cls(dst, src, ethertype, raw[ETH_HEADER_SIZE:])


@dataclass
class ArpPacket:
    """The fixed ARP header followed by its address payload."""

    hw_type: int = ARP_HW_TYPE_ETH
    protocol_type: int = ARP_PROTOCOL_TYPE_IPV4
    hw_addr_size: int = ARP_HW_ADDR_SIZE_ETH
    protocol_addr_size: int = ARP_PROTOCOL_ADDR_SIZE_IPV4
    opcode: int = ARP_REQUEST
    payload: bytes = b""

    def __post_init__(self) -> None:
        _check_range(self.hw_type, 16, "hw_type")
        _check_range(self.protocol_type, 16, "protocol_type")
        _check_range(self.hw_addr_size, 8, "hw_addr_size")
        _check_range(self.protocol_addr_size, 8, "protocol_addr_size")
        _check_range(self.opcode, 16, "opcode")
        self.payload = bytes(self.payload)

    def to_bytes(self) -> bytes:
        header = _ARP_HEADER.pack(
            self.hw_type,
            self.protocol_type,
            self.hw_addr_size,
            self.protocol_addr_size,
            self.opcode,
        )
        return header + self.payload

    @classmethod
    def from_bytes(cls, data: bytes) -> ArpPacket:
        raw = bytes(data)
        if len(raw) < ARP_HEADER_SIZE:
            raise ValueError(f"ARP packet of {len(raw)} bytes is shorter than its header")
        fields = _ARP_HEADER.unpack_from(raw)
        return cls(*fields, payload=raw[ARP_HEADER_SIZE:])


@dataclass
class EthArpIPv4Packet:
    """A complete ARP-over-Ethernet frame for IPv4 addresses."""

    eth_dst: bytes = BROADCAST_HWADDR
    eth_src: bytes = bytes(HWADDR_SIZE)
    opcode: int = ARP_REQUEST
    arp_src_hwaddr: bytes = bytes(HWADDR_SIZE)
    arp_src_ipv4_addr: int = 0
    arp_dst_hwaddr: bytes = bytes(HWADDR_SIZE)
    arp_dst_ipv4_addr: int = 0
    interface: Any = field(default=None, compare=False, repr=False)

    def __post_init__(self) -> None:
        self.eth_dst = _hwaddr(self.eth_dst, "eth_dst")
        self.eth_src = _hwaddr(self.eth_src, "eth_src")
        _check_range(self.opcode, 16, "opcode")
        self.arp_src_hwaddr = _hwaddr(self.arp_src_hwaddr, "arp_src_hwaddr")
        self.arp_dst_hwaddr = _hwaddr(self.arp_dst_hwaddr, "arp_dst_hwaddr")
        _check_range(self.arp_src_ipv4_addr, 32, "arp_src_ipv4_addr")
        _check_range(self.arp_dst_ipv4_addr, 32, "arp_dst_ipv4_addr")

    @property
    def arp_packet(self) -> ArpPacket:
        body = _ARP_IPV4_BODY.pack(
            _hwaddr(self.arp_src_hwaddr, "arp_src_hwaddr"),
            self.arp_src_ipv4_addr,
            _hwaddr(self.arp_dst_hwaddr, "arp_dst_hwaddr"),
            self.arp_dst_ipv4_addr,
        )
        return ArpPacket(opcode=self.opcode, payload=body)

    @property
    def ethernet_frame(self) -> EthernetFrame:
        return EthernetFrame(
            self.eth_dst, self.eth_src, ETH_TYPE_ARP, self.arp_packet.to_bytes()
        )

    @property
    def is_free(self) -> bool:
        """True when no interface still holds this frame for transmission."""
        return self.interface is None or bool(self.interface.has_been_sent(self))

    def to_bytes(self) -> bytes:
        return self.ethernet_frame.to_bytes()

    @classmethod
    def from_bytes(cls, data: bytes) -> EthArpIPv4Packet:
        raw = bytes(data)
        if len(raw) < ARP_IPV4_FRAMESIZE:
            raise ValueError(
                f"ARP frame of {len(raw)} bytes is shorter than {ARP_IPV4_FRAMESIZE}"
            )
        frame = EthernetFrame.from_bytes(raw)
        if frame.ethertype != ETH_TYPE_ARP:
            raise ValueError(f"ethertype 0x{frame.ethertype:04x} is not ARP")
        arp = ArpPacket.from_bytes(frame.payload)
        if (
            arp.hw_type != ARP_HW_TYPE_ETH
            or arp.protocol_type != ARP_PROTOCOL_TYPE_IPV4
            or arp.hw_addr_size != ARP_HW_ADDR_SIZE_ETH
            or arp.protocol_addr_size != ARP_PROTOCOL_ADDR_SIZE_IPV4
        ):
            raise ValueError("ARP packet does not map Ethernet to IPv4 addresses")
        src_hw, src_ip, dst_hw, dst_ip = _ARP_IPV4_BODY.unpack_from(arp.payload)
        return cls(
            eth_dst=frame.dst,
            eth_src=frame.src,
            opcode=arp.opcode,
            arp_src_hwaddr=src_hw,
            arp_src_ipv4_addr=src_ip,
            arp_dst_hwaddr=dst_hw,
            arp_dst_ipv4_addr=dst_ip,
        )