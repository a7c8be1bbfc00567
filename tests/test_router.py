import pytest

from ciaoip.ipv4 import convert_ipv4_addr
from ciaoip.router import ETHERNET, LOOPBACK, Interface, NetworkDevice, Router


class FakeDevice(NetworkDevice):
    def __init__(self, name="eth0", mtu=1500):
        super().__init__(name, mtu, ETHERNET, address=b"\x02\x00\x00\x00\x00\x01")
        self.sent = []
        self.done = True

    def send(self, frame):
        self.sent.append(frame)

    def has_been_sent(self, frame):
        return self.done


def make_iface(addr="192.168.1.10", mask="255.255.255.0", name="eth0"):
    return Interface(FakeDevice(name), addr, mask)


def test_interface_type_constants():
    assert (Interface.ETHERNET, Interface.LOOPBACK, Interface.SLIP) == (1, 2, 3)
    assert LOOPBACK == 2
    iface = Interface(FakeDevice(), "10.0.0.1")
    assert iface.type == Interface.ETHERNET


def test_network_device_is_abstract():
    with pytest.raises(TypeError):
        NetworkDevice("x", 1500)


def test_interface_delegates_to_device():
    iface = make_iface()
    assert iface.name == "eth0"
    assert iface.mtu == 1500
    assert iface.type == ETHERNET
    assert iface.address == b"\x02\x00\x00\x00\x00\x01"
    assert iface.has_transmitter_hardware_checksumming is False
    iface.send(b"frame")
    assert iface.device.sent == [b"frame"]
    iface.device.done = False
    assert iface.has_been_sent(b"frame") is False


def test_interface_accepts_string_and_int_addresses():
    iface = make_iface()
    assert iface.ipv4_addr == convert_ipv4_addr(192, 168, 1, 10)
    assert Interface(FakeDevice(), iface.ipv4_addr).ipv4_addr == iface.ipv4_addr


def test_interface_matches_subnet():
    iface = make_iface()
    assert iface.matches("192.168.1.200")
    assert not iface.matches("192.168.2.1")


def test_unconfigured_interface_never_matches():
    iface = Interface(FakeDevice())
    assert not iface.matches("0.0.0.0")


def test_bad_address_rejected():
    with pytest.raises(ValueError):
        Interface(FakeDevice(), "300.1.1.1")


def test_get_interface_by_index():
    router = Router()
    first = router.add_interface(make_iface(name="eth0"))
    second = router.add_interface(make_iface("10.0.0.1", name="eth1"))
    assert router.get_interface(0) is first
    assert router.get_interface(1) is second
    assert router.get_interface(2) is None
    assert list(router) == [first, second]
    assert len(router) == 2


def test_get_interface_negative_index():
    with pytest.raises(ValueError):
        Router().get_interface(-1)


def test_add_same_interface_twice():
    router = Router()
    iface = router.add_interface(make_iface())
    with pytest.raises(ValueError):
        router.add_interface(iface)


def test_find_route_picks_first_matching():
    router = Router()
    lan = router.add_interface(make_iface())
    wide = router.add_interface(make_iface("192.168.0.1", "255.255.0.0", "eth1"))
    assert router.find_route("192.168.1.5") is lan
    assert router.find_route("192.168.7.5") is wide
    assert router.find_route("10.1.1.1") is None


def test_gateway_address_stored_as_int():
    router = Router("192.168.1.1")
    assert router.gateway_addr == convert_ipv4_addr(192, 168, 1, 1)