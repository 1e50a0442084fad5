"""Video data blocks and the bounded per-node block cache."""

from __future__ import annotations

from collections import deque
from collections.abc import Iterator
from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class DataBlock:
    """One unit of the video stream, numbered globally from 0."""

    seq_num: int
    gen_time: float


class Cache:
    """A first-in, first-out store of blocks holding at most ``capacity`` items.

    When full, adding a block evicts the oldest one.
    """

    def __init__(self, capacity: int) -> None:
        if capacity < 0:
            raise ValueError(f"cache capacity must not be negative, got {capacity}")
        self.capacity = capacity
        self._blocks: deque[DataBlock] = deque(maxlen=capacity)

    def add_block(self, block: DataBlock) -> None:
        """Append ``block``, dropping the oldest block if the cache is full."""
        self._blocks.append(block)

    def has_consecutives(self, start: int, count: int) -> bool:
        """Tell whether ``count`` blocks numbered from ``start`` appear in order.

        Blocks are scanned from oldest to newest; each one that carries the
        next expected number advances the match.
        """
        found = 0
        for block in self._blocks:
            if block.seq_num == start + found:
                found += 1
            if found == count:
                return True
        return False

    def clear(self) -> None:
        """Remove every block."""
        self._blocks.clear()

    def __len__(self) -> int:
        return len(self._blocks)

    def __iter__(self) -> Iterator[DataBlock]:
        return iter(self._blocks)

    def __repr__(self) -> str:
        seqs = [block.seq_num for block in self._blocks]
        return f"Cache(capacity={self.capacity}, seqs={seqs})"