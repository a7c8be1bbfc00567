# ciaoip

`ciaoip` is a small IPv4 protocol stack in plain Python. It uses only the
standard library. It suits size-bounded setups and simulations: buffers come
from fixed-size memory pools, and received packets wait in bounded FIFO queues.

## What is in the package

- **Configuration** (`ciaoip.config`)
  - `StackConfig` is a frozen dataclass. It holds:
    - the memory-pool block sizes and counts;
    - the per-connection packet limit;
    - the TCP retransmission limit, which must lie between 3 and 255.
  - `StackConfig.from_kconfig(values)` reads kconfig symbols such as
    `cfIPSTACK_BLOCKSIZE_BIG`, `cfIPSTACK_COUNT_BIG`,
    `cfIPSTACK_BLOCKSIZE_SMALL`, `cfIPSTACK_COUNT_SMALL`,
    `cfIPSTACK_MEMORY_GENERIC`, `cfIPSTACK_PACKET_LIMIT` and
    `cfTCP_MAX_RETRANSMISSIONS`.
- **Memory** (`ciaoip.mempool`)
  - `SingleMempool(blocksize, count)` hands out blocks (`Chunk` objects). The
    block freed last is handed out first.
  - `Mempool` has two block sizes. `alloc(size)` tries a small block first and
    then a big one. It returns `None` when no block fits.
- **Queues** (`ciaoip.ringbuffer`)
  - `Ringbuffer(size)` is a FIFO queue. `size` is clamped to the range 2..255,
    and one slot always stays empty.
- **Time** (`ciaoip.clock`)
  - `Clock(freq, source)` counts ticks. It converts with `ms_to_ticks` and
    `ticks_to_ms`.
- **Wire formats**: each class below has `to_bytes()` and `from_bytes()`.
  - `ciaoip.ethernet`: `EthernetFrame`, `ArpPacket` and `EthArpIPv4Packet`.
  - `ciaoip.ipv4`: `IPv4Packet`, plus `valid_packet_length`, `header_checksum`,
    `has_valid_checksum` and `convert_ipv4_addr`.
  - `ciaoip.icmp`: `ICMPPacket`.
  - `ciaoip.udp`: `UDPPacket`.
  - `ciaoip.tcp`: `TCPSegment` and `TCPFlag`. This module also has the
    wrap-around sequence comparisons `seq_lt`, `seq_leq`, `seq_gt` and `seq_geq`.
- **Checksums** (`ciaoip.checksum`)
  - `compute(packet)` and `is_valid(packet)` give the UDP/TCP checksum, pseudo
    header included, of an `IPv4Packet`'s payload.
  - `compute_payload_checksum(packet)` covers the payload only, as ICMP
    requires.
- **Routing** (`ciaoip.router`)
  - `NetworkDevice` is an abstract device. Subclasses implement `send`.
  - `Interface` gives a device an IPv4 address and a subnet mask.
  - `Router` keeps interfaces in order and has a default gateway.
    `find_route(addr)` returns the first interface whose subnet contains
    `addr`.
- **Sockets**
  - `ciaoip.ipv4_socket.IPv4Socket`:
    - picks an interface with `set_destination`, falling back to the gateway;
    - builds checksummed headers with sequential identifiers;
    - `send(payload, protocol)` returns the bytes it handed to the interface;
    - `read()` takes a queued packet without waiting, and `receive()` waits for
      one.
  - `ciaoip.udp_socket.UDPSocket` sends UDP datagrams:
    - every outgoing datagram takes a block from the socket's own `Mempool`;
    - the block goes back to the pool once the device reports the frame as sent;
    - `send` returns `False` when no block is free;
    - it raises `ValueError` when the data does not fit into a big block.
- **TCP bookkeeping**
  - `ciaoip.tcp_history.TCPHistory` stores the one sent segment that is in
    flight, as a `TCPRecord` with a retransmission deadline.
  - `ciaoip.tcp_receivebuffer.TCPReceiveBuffer` holds one in-order segment's
    payload until it is read with `copy_data`. Its `ack_num` tracks the next
    expected sequence number.

## What it does not do

There is no TCP connection handling. The package has no TCP state machine. It
has no socket that opens, carries data over or closes a TCP connection: no
handshake, no acknowledgement processing, no retransmission loop.
`TCPHistory` and `TCPReceiveBuffer` are building blocks you drive yourself.

There is no packet input path. Nothing demultiplexes incoming frames to sockets
and nothing answers ARP or ICMP. Received packets reach a socket only when
you `put` them into its `packetbuffer`. There is no command-line program.

## Installation

```
pip install .
```

To run the tests:

```
pip install ".[test]"
pytest
```

## Examples

Build, checksum and check an IPv4 packet:

```python
from ciaoip.ipv4 import IPv4Packet, convert_ipv4_addr, has_valid_checksum

src = convert_ipv4_addr(192, 168, 0, 1)   # 0xC0A80001, first octet most significant
dst = convert_ipv4_addr(192, 168, 0, 2)
packet = IPv4Packet(src=src, dst=dst, protocol=17, payload=b"hello")
packet.compute_checksum()
raw = packet.to_bytes()
has_valid_checksum(raw)                   # True
IPv4Packet.from_bytes(raw).payload        # b"hello"
```

Send a UDP datagram through a device of your own:

```python
from ciaoip.router import Interface, NetworkDevice, Router
from ciaoip.udp_socket import UDPSocket

class CaptureDevice(NetworkDevice):
    def __init__(self):
        super().__init__("cap0", mtu=1500)
        self.frames = []

    def send(self, frame):
        self.frames.append(frame)

device = CaptureDevice()
router = Router()
router.add_interface(Interface(device, "192.168.0.1", "255.255.255.0"))

sock = UDPSocket(router)
sock.sport, sock.dport = 4000, 7
sock.set_destination("192.168.0.2")
sock.send(b"hello")     # True; device.frames now holds the IPv4 packet
```

A bounded packet queue:

```python
from ciaoip.ringbuffer import Ringbuffer

queue = Ringbuffer(4)   # holds at most 3 items
queue.put(b"first")     # True
queue.get()             # b"first"
queue.get()             # None: the queue is empty
```

`put` returns `False` and drops the item when the queue is full. It raises
`ValueError` for `None`.