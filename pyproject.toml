[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "ciaoip"
version = "0.1.0"
description = "A small IPv4 stack: packet formats, checksums, memory pools, routing, UDP sockets and TCP send/receive bookkeeping"
requires-python = ">=3.10"
dependencies = []
keywords = ["ipv4", "udp", "tcp", "arp", "icmp", "network-stack", "checksum", "mempool", "embedded"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: System :: Networking",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["ciaoip"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
