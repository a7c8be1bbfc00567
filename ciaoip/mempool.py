"""Fixed-size block memory pools for packet buffers."""

from __future__ import annotations

from dataclasses import dataclass, field

from .config import BLOCKSIZE_BIG, BLOCKSIZE_SMALL, COUNT_BIG, COUNT_SMALL


@dataclass(eq=False)
class Chunk:
    """A block handed out by a pool; ``data`` is the block's storage."""

    pool: SingleMempool = field(repr=False)
    index: int
    data: bytearray = field(repr=False)

    @property
    def size(self) -> int:
        return len(self.data)


class SingleMempool:
    """A pool of ``count`` blocks of ``blocksize`` bytes, handed out last-freed first."""

    def __init__(self, blocksize: int, count: int) -> None:
        if blocksize < 0 or count < 0:
            raise ValueError("blocksize and count must not be negative")
        self.blocksize = blocksize
        self.count = count
        self._blocks = [Chunk(self, i, bytearray(blocksize)) for i in range(count)]
        self._freelist: list[Chunk] = list(self._blocks)

    def __len__(self) -> int:
        """Number of free blocks."""
        return len(self._freelist)

    def alloc(self) -> Chunk | None:
        """Take a free block, or None if the pool is exhausted."""
        if not self._freelist:
            return None
        return self._freelist.pop()

    def free(self, chunk: Chunk) -> bool:
        """Return a block; False if it does not belong to this pool."""
        if chunk.pool is not self:
            return False
        if any(free is chunk for free in self._freelist):
            raise ValueError(f"block {chunk.index} is already free")
        self._freelist.append(chunk)
        return True


class Mempool:
    """Two block pools: requests use the small blocks first, then the big ones."""

    def __init__(
        self,
        blocksize_1: int = BLOCKSIZE_BIG,
        count_1: int = COUNT_BIG,
        blocksize_2: int = BLOCKSIZE_SMALL,
        count_2: int = COUNT_SMALL,
    ) -> None:
        if blocksize_1 >= blocksize_2:
            self.size_big, self.count_big = blocksize_1, count_1
            self.size_small, self.count_small = blocksize_2, count_2
        else:
            self.size_big, self.count_big = blocksize_2, count_2
            self.size_small, self.count_small = blocksize_1, count_1
        self._big = SingleMempool(self.size_big, self.count_big)
        self._small = SingleMempool(self.size_small, self.count_small)

    @property
    def free_big(self) -> int:
        return len(self._big)

    @property
    def free_small(self) -> int:
        return len(self._small)

    def alloc(self, size: int) -> Chunk | None:
        """Get a block of at least ``size`` bytes, or None if none is available."""
        if size <= self.size_small:
            chunk = self._small.alloc()
            if chunk is not None:
                return chunk
        if size <= self.size_big:
            return self._big.alloc()
        return None

    def free(self, chunk: Chunk) -> None:
        """Give a block back to whichever pool it came from."""
        if not self._small.free(chunk):
            self._big.free(chunk)