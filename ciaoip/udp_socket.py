"""UDP over IPv4 with a socket-owned buffer pool."""

from __future__ import annotations

from .config import BLOCKSIZE_BIG, BLOCKSIZE_SMALL, COUNT_BIG, COUNT_SMALL
from .ipv4 import IPV4_MIN_HEADER_SIZE
from .ipv4_socket import IPv4Socket
from .mempool import Chunk, Mempool
from .ringbuffer import Ringbuffer
from .router import Router
from .udp import IPV4_TYPE_UDP, UDP_HEADER_SIZE, UNUSED_PORT, UDPPacket

_MIN_BLOCKSIZE_EXCLUSIVE = IPV4_MIN_HEADER_SIZE + UDP_HEADER_SIZE


class UDPSocket(IPv4Socket):
    """A UDP socket; outgoing packets occupy pool blocks until the device releases them."""

    def __init__(
        self,
        router: Router,
        blocksize_1: int = BLOCKSIZE_BIG,
        count_1: int = COUNT_BIG,
        blocksize_2: int = BLOCKSIZE_SMALL,
        count_2: int = COUNT_SMALL,
    ) -> None:
        pool = Mempool(blocksize_1, count_1, blocksize_2, count_2)
        if pool.count_big + pool.count_small == 0:
            raise ValueError("a UDP socket needs at least one buffer")
        for count, size in ((pool.count_big, pool.size_big), (pool.count_small, pool.size_small)):
            if count > 0 and size <= _MIN_BLOCKSIZE_EXCLUSIVE:
                raise ValueError(
                    f"UDP buffers must be larger than {_MIN_BLOCKSIZE_EXCLUSIVE} bytes"
                )
        super().__init__(router, Ringbuffer(count_1 + count_2))
        self.mempool = pool
        self.sport = UNUSED_PORT
        self.dport = UNUSED_PORT
        self.network_header_offset = IPV4_MIN_HEADER_SIZE
        self._pending: list[tuple[Chunk, bytes]] = []

    def create_packet(self, data: bytes) -> UDPPacket:
        """A datagram carrying ``data`` between the socket's ports."""
        payload = bytes(data)
        needed = len(payload) + UDP_HEADER_SIZE + self.network_header_offset
        if needed > self.mempool.size_big:
            raise ValueError(
                f"{len(payload)} bytes do not fit into a {self.mempool.size_big}-byte buffer"
            )
        return UDPPacket(sport=self.sport, dport=self.dport, data=payload, checksum=0)

    def _reclaim(self) -> None:
        still_pending = []
        for chunk, frame in self._pending:
            if self.has_been_sent(frame):
                self.mempool.free(chunk)
            else:
                still_pending.append((chunk, frame))
        self._pending = still_pending

    def send(self, data: bytes) -> bool:
        """Send ``data``; False if no buffer is free for it."""
        self._require_interface()
        packet = self.create_packet(data)
        self._reclaim()
        size = len(packet.data) + UDP_HEADER_SIZE + self.network_header_offset
        chunk = self.mempool.alloc(size)
        if chunk is None:
            return False
        frame = super().send(packet.to_bytes(), IPV4_TYPE_UDP)
        chunk.data[: len(frame)] = frame
        self._pending.append((chunk, frame))
        return True