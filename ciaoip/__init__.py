"""A small IPv4 stack: packet formats, checksums, memory pools, routing, UDP sockets and TCP send/receive bookkeeping."""

__version__ = "0.1.0"