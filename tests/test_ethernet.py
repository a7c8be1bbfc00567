import pytest

from ciaoip.ethernet import (
    ARP_HEADER_SIZE,
    ARP_IPV4_PACKETSIZE,
    ARP_REPLY,
    ETH_HEADER_SIZE,
    ETH_TYPE_ARP,
    MAX_PAYLOAD_SIZE,
    ArpPacket,
    EthArpIPv4Packet,
    EthernetFrame,
)

DST = bytes.fromhex("020000000001")
SRC = bytes.fromhex("020000000002")


def test_frame_round_trip():
    frame = EthernetFrame(DST, SRC, 0x0800, b"hello")
    raw = frame.to_bytes()
    assert len(raw) == ETH_HEADER_SIZE + 5
    assert EthernetFrame.from_bytes(raw) == frame


def test_frame_layout():
    raw = EthernetFrame(DST, SRC, ETH_TYPE_ARP, b"x").to_bytes()
    assert raw[:6] == DST
    assert raw[6:12] == SRC
    assert raw[12:14] == b"\x08\x06"
    assert raw[14:] == b"x"


def test_set_dst_broadcast():
    frame = EthernetFrame(DST, SRC)
    assert not frame.is_broadcast
    frame.set_dst_broadcast()
    assert frame.dst == b"\xff" * 6
    assert frame.is_broadcast


def test_short_frame_rejected():
    with pytest.raises(ValueError):
        EthernetFrame.from_bytes(bytes(ETH_HEADER_SIZE - 1))


def test_bad_hardware_address_rejected():
    with pytest.raises(ValueError):
        EthernetFrame(dst=b"\x00" * 5)


def test_oversized_payload_rejected():
    frame = EthernetFrame(DST, SRC, 0x0800, bytes(MAX_PAYLOAD_SIZE + 1))
    with pytest.raises(ValueError):
        frame.to_bytes()


def test_arp_packet_round_trip():
    packet = ArpPacket(opcode=ARP_REPLY, payload=b"abcd")
    raw = packet.to_bytes()
    assert len(raw) == ARP_HEADER_SIZE + 4
    assert ArpPacket.from_bytes(raw) == packet


def test_arp_packet_too_short():
    with pytest.raises(ValueError):
        ArpPacket.from_bytes(bytes(ARP_HEADER_SIZE - 1))


def _reply():
    return EthArpIPv4Packet(
        eth_dst=DST,
        eth_src=SRC,
        opcode=ARP_REPLY,
        arp_src_hwaddr=SRC,
        arp_src_ipv4_addr=0x0A000002,
        arp_dst_hwaddr=DST,
        arp_dst_ipv4_addr=0x0A000001,
    )


def test_eth_arp_round_trip():
    packet = _reply()
    raw = packet.to_bytes()
    assert len(raw) == ETH_HEADER_SIZE + ARP_IPV4_PACKETSIZE
    assert EthArpIPv4Packet.from_bytes(raw) == packet


def test_eth_arp_header_bytes():
    raw = _reply().to_bytes()
    assert raw[14:22] == bytes.fromhex("0001080006040002")
    assert raw[22:28] == SRC
    assert raw[32:38] == DST


def test_eth_arp_views():
    packet = _reply()
    assert packet.ethernet_frame.ethertype == ETH_TYPE_ARP
    assert packet.ethernet_frame.dst == DST
    assert packet.arp_packet.opcode == ARP_REPLY


def test_eth_arp_wrong_type_rejected():
    frame = EthernetFrame(DST, SRC, 0x0800, _reply().arp_packet.to_bytes())
    with pytest.raises(ValueError):
        EthArpIPv4Packet.from_bytes(frame.to_bytes())


def test_eth_arp_too_short():
    with pytest.raises(ValueError):
        EthArpIPv4Packet.from_bytes(_reply().to_bytes()[:-1])


class _Interface:
    def __init__(self, sent):
        self.sent = sent
        self.asked = []

    def has_been_sent(self, frame):
        self.asked.append(frame)
        return self.sent


def test_is_free_without_interface():
    assert _reply().is_free is True


def test_is_free_asks_interface():
    packet = _reply()
    busy = _Interface(False)
    packet.interface = busy
    assert packet.is_free is False
    assert busy.asked == [packet]
    packet.interface = _Interface(True)
    assert packet.is_free is True