import pytest

from ciaoip.tcp import TCPFlag, TCPSegment
from ciaoip.tcp_receivebuffer import RecvElement, TCPReceiveBuffer


def make_segment(data, flags=TCPFlag.ACK):
    return TCPSegment(sport=1000, dport=80, flags=flags, data=data)


@pytest.fixture
def released():
    return []


@pytest.fixture
def buffer(released):
    return TCPReceiveBuffer(release=released.append, first_seqnum=1000)


def test_empty_buffer(buffer):
    assert buffer.recv_bytes == 0
    assert buffer.ack_num == 1000
    assert buffer.is_pushed is False


def test_in_order_insert_accepted(buffer):
    assert buffer.insert(make_segment(b"hello"), 1000, 5) is True
    assert buffer.recv_bytes == 5
    assert buffer.ack_num == 1005


def test_out_of_order_insert_rejected(buffer):
    assert buffer.insert(make_segment(b"hello"), 1001, 5) is False
    assert buffer.recv_bytes == 0
    assert buffer.ack_num == 1000


def test_second_insert_rejected_while_occupied(buffer):
    assert buffer.insert(make_segment(b"abc"), 1000, 3) is True
    assert buffer.insert(make_segment(b"abc"), 1000, 3) is False
    assert buffer.recv_bytes == 3


def test_partial_copy_keeps_rest(buffer, released):
    segment = make_segment(b"hello world")
    buffer.insert(segment, 1000, 11)
    assert buffer.copy_data(6) == b"hello "
    assert buffer.recv_bytes == 5
    assert buffer.first_seqnum == 1006
    assert buffer.ack_num == 1011
    assert released == []


def test_full_copy_releases_segment(buffer, released):
    segment = make_segment(b"data", flags=TCPFlag.ACK | TCPFlag.PSH)
    buffer.insert(segment, 1000, 4)
    assert buffer.is_pushed is True
    assert buffer.copy_data(4) == b"data"
    assert released == [segment]
    assert buffer.recv_bytes == 0
    assert buffer.is_pushed is False
    assert buffer.ack_num == 1004


def test_reading_in_pieces_returns_whole_payload(buffer):
    payload = b"abcdefghij"
    buffer.insert(make_segment(payload), 1000, len(payload))
    pieces = [buffer.copy_data(3), buffer.copy_data(3), buffer.copy_data(4)]
    assert b"".join(pieces) == payload
    assert buffer.recv_bytes == 0


def test_length_limits_buffered_payload(buffer):
    buffer.insert(make_segment(b"abcdef"), 1000, 4)
    assert buffer.recv_bytes == 4
    assert buffer.copy_data(4) == b"abcd"


def test_copy_more_than_buffered_raises(buffer):
    buffer.insert(make_segment(b"abc"), 1000, 3)
    with pytest.raises(ValueError):
        buffer.copy_data(4)


def test_insert_length_beyond_segment_raises(buffer):
    with pytest.raises(ValueError):
        buffer.insert(make_segment(b"abc"), 1000, 4)


def test_sequence_numbers_wrap():
    buffer = TCPReceiveBuffer(first_seqnum=0xFFFF_FFFE)
    assert buffer.insert(make_segment(b"wxyz"), 0xFFFF_FFFE, 4) is True
    assert buffer.ack_num == 2
    buffer.copy_data(4)
    assert buffer.first_seqnum == 2


def test_recv_element_increment():
    element = RecvElement(b"abcdef", 10)
    element.increment(2)
    assert element.data == b"cdef"
    assert element.seqnum == 12
    assert element.length == 4
    assert element.next_seqnum == 16


def test_recv_element_increment_too_far_raises():
    element = RecvElement(b"ab", 0)
    with pytest.raises(ValueError):
        element.increment(3)