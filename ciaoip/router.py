"""Network devices, the interfaces built on them and the router that holds them."""

from __future__ import annotations

import ipaddress
from abc import ABC, abstractmethod
from collections.abc import Iterator
from typing import Any

ETHERNET = 1
LOOPBACK = 2
SLIP = 3


def _ipv4(addr: int | str) -> int:
    return int(ipaddress.IPv4Address(addr))


class NetworkDevice(ABC):
    """A device driver the IP stack hands frames to."""

    has_transmitter_hardware_checksumming = False
    has_receiver_hardware_checksumming = False

    def __init__(
        self,
        name: str,
        mtu: int,
        type: int = ETHERNET,
        address: bytes | None = None,
    ) -> None:
        if mtu < 0:
            raise ValueError("mtu must not be negative")
        self.name = name
        self.mtu = mtu
        self.type = type
        self.address = address

    @abstractmethod
    def send(self, frame: Any) -> None:
        """Transmit one frame."""

    def has_been_sent(self, frame: Any) -> bool:
        """True once the device no longer needs ``frame``."""
        return True


class Interface:
    """An IPv4-configured view of a network device."""

    ETHERNET = ETHERNET
    LOOPBACK = LOOPBACK
    SLIP = SLIP

    def __init__(
        self,
        device: NetworkDevice,
        ipv4_addr: int | str = 0,
        ipv4_subnetmask: int | str = 0,
    ) -> None:
        self.device = device
        self.ipv4_addr = _ipv4(ipv4_addr)
        self.ipv4_subnetmask = _ipv4(ipv4_subnetmask)

    def __repr__(self) -> str:
        return (
            f"Interface({self.name!r}, {ipaddress.IPv4Address(self.ipv4_addr)}"
            f"/{ipaddress.IPv4Address(self.ipv4_subnetmask)})"
        )

    @property
    def name(self) -> str:
        return self.device.name

    @property
    def type(self) -> int:
        return self.device.type

    @property
    def address(self) -> bytes | None:
        return self.device.address

    @property
    def mtu(self) -> int:
        return self.device.mtu

    @property
    def has_transmitter_hardware_checksumming(self) -> bool:
        return bool(self.device.has_transmitter_hardware_checksumming)

    @property
    def has_receiver_hardware_checksumming(self) -> bool:
        return bool(self.device.has_receiver_hardware_checksumming)

    def send(self, frame: Any) -> None:
        self.device.send(frame)

    def has_been_sent(self, frame: Any) -> bool:
        return bool(self.device.has_been_sent(frame))

    def matches(self, addr: int | str) -> bool:
        """True if ``addr`` lies in this interface's subnet; unconfigured ones never match."""
        if self.ipv4_addr == 0:
            return False
        mask = self.ipv4_subnetmask
        return (_ipv4(addr) & mask) == (self.ipv4_addr & mask)


class Router:
    """The ordered set of interfaces and the default gateway."""

    def __init__(self, gateway_addr: int | str = 0) -> None:
        self._interfaces: list[Interface] = []
        self.gateway_addr = _ipv4(gateway_addr)

    def __len__(self) -> int:
        return len(self._interfaces)

    def __iter__(self) -> Iterator[Interface]:
        return iter(self._interfaces)

    def add_interface(self, interface: Interface) -> Interface:
        if any(existing is interface for existing in self._interfaces):
            raise ValueError(f"{interface!r} is already registered")
        self._interfaces.append(interface)
        return interface

    def get_interface(self, index: int) -> Interface | None:
        """The interface at ``index``, or None past the last one."""
        if index < 0:
            raise ValueError("interface index must not be negative")
        if index >= len(self._interfaces):
            return None
        return self._interfaces[index]

    def find_route(self, addr: int | str) -> Interface | None:
        """The first interface whose subnet holds ``addr``."""
        target = _ipv4(addr)
        return next((i for i in self._interfaces if i.matches(target)), None)