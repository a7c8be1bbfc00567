"""Sending and receiving IPv4 packets through a routed interface."""

from __future__ import annotations

import ipaddress
import time
from typing import Any

from .ipv4 import (
    IPV4_DEFAULT_FLAGS,
    IPV4_DEFAULT_TOS,
    IPV4_DEFAULT_TTL,
    IPV4_MIN_HEADER_SIZE,
    IPV4_NO_FRAGMENT_OFFSET,
    IPV4_UNUSED_ADDR,
    IPv4Packet,
)
from .ringbuffer import Ringbuffer
from .router import Interface, Router


class IPv4Socket:
    """The IPv4 layer of a socket: routing, header set-up and a receive queue."""

    def __init__(self, router: Router, packetbuffer: Ringbuffer | None = None) -> None:
        self.router = router
        self.packetbuffer = packetbuffer if packetbuffer is not None else Ringbuffer()
        self.dst = IPV4_UNUSED_ADDR
        self.interface: Interface | None = None
        self._ident = 0

    @property
    def src(self) -> int:
        """Address of the outgoing interface, or 0 without a route."""
        return self.interface.ipv4_addr if self.interface is not None else 0

    @property
    def has_valid_interface(self) -> bool:
        return self.interface is not None

    @property
    def mtu(self) -> int:
        """Payload space per packet on the outgoing interface, 0 without a route."""
        if self.interface is None:
            return 0
        return self.interface.mtu - IPV4_MIN_HEADER_SIZE

    def set_destination(self, addr: int | str) -> None:
        """Set the peer address and pick the interface, falling back to the gateway."""
        self.dst = int(ipaddress.IPv4Address(addr))
        interface = self.router.find_route(self.dst)
        if interface is None:
            interface = self.router.find_route(self.router.gateway_addr)
        self.interface = interface

    def _require_interface(self) -> Interface:
        if self.interface is None:
            raise ConnectionError("no route to the destination")
        return self.interface

    def build_packet(self, payload: bytes, protocol: int) -> IPv4Packet:
        """A checksummed IPv4 packet carrying ``payload`` to the destination."""
        interface = self._require_interface()
        packet = IPv4Packet(
            src=interface.ipv4_addr,
            dst=self.dst,
            protocol=protocol,
            payload=payload,
            tos=IPV4_DEFAULT_TOS,
            ident=self._ident,
            flags=IPV4_DEFAULT_FLAGS,
            fragment_offset=IPV4_NO_FRAGMENT_OFFSET,
            ttl=IPV4_DEFAULT_TTL,
        )
        self._ident = (self._ident + 1) & 0xFFFF
        packet.compute_checksum()
        return packet

    def send(self, payload: bytes, protocol: int) -> bytes:
        """Send ``payload`` and return the packet bytes handed to the interface."""
        interface = self._require_interface()
        frame = self.build_packet(payload, protocol).to_bytes()
        interface.send(frame)
        return frame

    def has_been_sent(self, packet: Any) -> bool:
        """True once the interface has released a packet returned by :meth:`send`."""
        return self._require_interface().has_been_sent(packet)

    def receive(self) -> Any:
        """Wait until a packet is queued and return it."""
        while (packet := self.packetbuffer.get()) is None:
            time.sleep(0)
        return packet

    def read(self) -> Any | None:
        """Return a queued packet, or None if none has arrived."""
        return self.packetbuffer.get()