"""Compile-time configuration of the IP stack: memory pools and packet limits."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

BLOCKSIZE_BIG = 1514
COUNT_BIG = 4
BLOCKSIZE_SMALL = 64
COUNT_SMALL = 4
PACKET_LIMIT = COUNT_BIG + COUNT_SMALL

TCP_MAX_RETRANSMISSIONS = 10
TCP_MIN_RETRANSMISSIONS_LIMIT = 3
TCP_MAX_RETRANSMISSIONS_LIMIT = 255

_KCONF_BLOCKSIZE_BIG = "cfIPSTACK_BLOCKSIZE_BIG"
_KCONF_COUNT_BIG = "cfIPSTACK_COUNT_BIG"
_KCONF_BLOCKSIZE_SMALL = "cfIPSTACK_BLOCKSIZE_SMALL"
_KCONF_COUNT_SMALL = "cfIPSTACK_COUNT_SMALL"
_KCONF_MEMORY_GENERIC = "cfIPSTACK_MEMORY_GENERIC"
_KCONF_PACKET_LIMIT = "cfIPSTACK_PACKET_LIMIT"
_KCONF_TCP_MAX_RETRANSMISSIONS = "cfTCP_MAX_RETRANSMISSIONS"


def _as_int(values: Mapping[str, Any], key: str) -> int:
    try:
        raw = values[key]
    except KeyError:
        raise ValueError(f"missing kconfig option {key}") from None
    if isinstance(raw, bool):
        raise ValueError(f"kconfig option {key} must be a number, got {raw!r}")
    if isinstance(raw, int):
        return raw
    try:
        return int(str(raw).strip().strip('"'), 0)
    except ValueError:
        raise ValueError(f"kconfig option {key} must be a number, got {raw!r}") from None


@dataclass(frozen=True)
class StackConfig:
    """Sizes of the memory pools and the per-connection packet limits."""

    blocksize_big: int = BLOCKSIZE_BIG
    count_big: int = COUNT_BIG
    blocksize_small: int = BLOCKSIZE_SMALL
    count_small: int = COUNT_SMALL
    memory_generic: bool = False
    packet_limit: int | None = None
    tcp_max_retransmissions: int = TCP_MAX_RETRANSMISSIONS

    def __post_init__(self) -> None:
        for name in ("blocksize_big", "count_big", "blocksize_small", "count_small"):
            if getattr(self, name) < 0:
                raise ValueError(f"{name} must not be negative")
        pool_total = self.count_big + self.count_small
        if self.packet_limit is None:
            object.__setattr__(self, "packet_limit", pool_total)
        elif not self.memory_generic and self.packet_limit != pool_total:
            raise ValueError(
                "packet_limit can only differ from the pool block count "
                "when memory_generic is enabled"
            )
        elif self.packet_limit < 0:
            raise ValueError("packet_limit must not be negative")
        if not (
            TCP_MIN_RETRANSMISSIONS_LIMIT
            <= self.tcp_max_retransmissions
            <= TCP_MAX_RETRANSMISSIONS_LIMIT
        ):
            raise ValueError(
                "tcp_max_retransmissions must lie between "
                f"{TCP_MIN_RETRANSMISSIONS_LIMIT} and {TCP_MAX_RETRANSMISSIONS_LIMIT}"
            )

    @property
    def tcp_receivebuffer_max_packets(self) -> int:
        """Packets the TCP receive buffer may hold per connection."""
        return self.packet_limit  # type: ignore[return-value]

    @property
    def tcp_history_max_packets(self) -> int:
        """Packets that may be in flight per TCP connection."""
        return self.packet_limit  # type: ignore[return-value]

    @classmethod
    def from_kconfig(cls, values: Mapping[str, Any]) -> StackConfig:
        """Build a configuration from kconfig symbols such as ``cfIPSTACK_COUNT_BIG``."""
        memory_generic = _KCONF_MEMORY_GENERIC in values
        kwargs: dict[str, Any] = {
            "blocksize_big": _as_int(values, _KCONF_BLOCKSIZE_BIG),
            "count_big": _as_int(values, _KCONF_COUNT_BIG),
            "blocksize_small": _as_int(values, _KCONF_BLOCKSIZE_SMALL),
            "count_small": _as_int(values, _KCONF_COUNT_SMALL),
            "memory_generic": memory_generic,
        }
        if memory_generic:
            kwargs["packet_limit"] = _as_int(values, _KCONF_PACKET_LIMIT)
        if _KCONF_TCP_MAX_RETRANSMISSIONS in values:
            kwargs["tcp_max_retransmissions"] = _as_int(
                values, _KCONF_TCP_MAX_RETRANSMISSIONS
            )
        return cls(**kwargs)


DEFAULT_CONFIG = StackConfig()