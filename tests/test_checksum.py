from ciaoip.checksum import (
    compute,
    compute_payload_checksum,
    is_valid,
    payload_sum,
    pseudo_header_sum,
)
from ciaoip.icmp import IPV4_TYPE_ICMP, ICMPPacket
from ciaoip.ipv4 import IPv4Packet, convert_ipv4_addr
from ciaoip.tcp import IPV4_TYPE_TCP, TCPFlag, TCPSegment
from ciaoip.udp import IPV4_TYPE_UDP, UDPPacket

SRC = convert_ipv4_addr(10, 0, 0, 1)
DST = convert_ipv4_addr(10, 0, 0, 2)


def test_rfc1071_example():
    packet = IPv4Packet(payload=bytes.fromhex("0001f203f4f5f6f7"))
    assert compute_payload_checksum(packet) == 0x220D


def test_odd_length_is_zero_padded():
    assert payload_sum(b"\x01\x02\x03") == payload_sum(b"\x01\x02\x03\x00")


def test_pseudo_header_symmetric_in_addresses():
    assert pseudo_header_sum(SRC, DST, IPV4_TYPE_UDP, 12) == pseudo_header_sum(
        DST, SRC, IPV4_TYPE_UDP, 12
    )


def _with_udp_checksum(data):
    udp = UDPPacket(1234, 5678, data)
    packet = IPv4Packet(SRC, DST, IPV4_TYPE_UDP, udp.to_bytes())
    udp.checksum = compute(packet)
    return IPv4Packet(SRC, DST, IPV4_TYPE_UDP, udp.to_bytes())


def test_udp_checksum_validates():
    assert is_valid(_with_udp_checksum(b"hello world")) is True
    assert is_valid(_with_udp_checksum(b"odd")) is True


def test_udp_corruption_detected():
    packet = _with_udp_checksum(b"hello world")
    corrupted = bytearray(packet.payload)
    corrupted[-1] ^= 0x20
    assert is_valid(IPv4Packet(SRC, DST, IPV4_TYPE_UDP, bytes(corrupted))) is False


def test_pseudo_header_covers_protocol_and_addresses():
    packet = _with_udp_checksum(b"abc")
    assert is_valid(IPv4Packet(SRC, DST, IPV4_TYPE_TCP, packet.payload)) is False
    other = convert_ipv4_addr(10, 0, 0, 3)
    assert is_valid(IPv4Packet(SRC, other, IPV4_TYPE_UDP, packet.payload)) is False


def test_tcp_checksum_validates():
    segment = TCPSegment(1, 2, 100, 0, TCPFlag.SYN, 536)
    packet = IPv4Packet(SRC, DST, IPV4_TYPE_TCP, segment.to_bytes())
    segment.checksum = compute(packet)
    assert is_valid(IPv4Packet(SRC, DST, IPV4_TYPE_TCP, segment.to_bytes())) is True


def test_icmp_payload_checksum_validates():
    icmp = ICMPPacket(data=b"ping")
    icmp.checksum = compute_payload_checksum(
        IPv4Packet(SRC, DST, IPV4_TYPE_ICMP, icmp.to_bytes())
    )
    packet = IPv4Packet(SRC, DST, IPV4_TYPE_ICMP, icmp.to_bytes())
    assert compute_payload_checksum(packet) == 0