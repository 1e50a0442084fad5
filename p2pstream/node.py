"""Peers of the streaming network: the single server and its clients."""

from __future__ import annotations

from .videodata import Cache, DataBlock

ALL_NEIGHBORS = -1
"""Passed to :meth:`Node.remove_neighbor` to drop every neighbour."""

FRAME_RATE = 30.0
PLAY_WINDOW = 5


class Node:
    """A peer at a fixed position with neighbours and a block cache."""

    def __init__(self, node_id: int, x: float, y: float, cache_size: int) -> None:
        self.node_id = node_id
        self.x = x
        self.y = y
        self._neighbors: list[int] = []
        self._buffer = Cache(cache_size)

    def restart(self) -> None:
        """Forget all cached blocks."""
        self._buffer.clear()

    def add_neighbor(self, node_id: int) -> None:
        self._neighbors.append(node_id)

    def remove_neighbor(self, node_id: int) -> None:
        """Remove ``node_id`` from the neighbours; ``ALL_NEIGHBORS`` removes all."""
        if node_id == ALL_NEIGHBORS:
            self._neighbors.clear()
        else:
            self._neighbors = [n for n in self._neighbors if n != node_id]

    def receive_block(self, block: DataBlock) -> None:
        self._buffer.add_block(block)

    @property
    def neighbors(self) -> tuple[int, ...]:
        return tuple(self._neighbors)

    @property
    def neighbor_count(self) -> int:
        return len(self._neighbors)

    @property
    def buffer_blocks(self) -> tuple[DataBlock, ...]:
        return tuple(self._buffer)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(id={self.node_id}, x={self.x}, y={self.y})"


class Server(Node):
    """The source of the stream; it only stores the blocks it produces."""


class Client(Node):
    """A viewer that fetches blocks in order and plays them back."""

    def __init__(self, node_id: int, x: float, y: float, cache_size: int) -> None:
        super().__init__(node_id, x, y, cache_size)
        self._next_play_seq = 0
        self._needed_seq = 0
        self._played_times: list[float] = []
        self._delay = 0.0

    def restart(self) -> None:
        """Clear the cache and all playback state."""
        super().restart()
        self._next_play_seq = 0
        self._needed_seq = 0
        self._played_times.clear()
        self._delay = 0.0

    def receive_block(self, block: DataBlock) -> None:
        """Store ``block`` and move on to requesting the next sequence number."""
        super().receive_block(block)
        self._needed_seq += 1

    def has_consecutive(self, start: int, count: int) -> bool:
        return self._buffer.has_consecutives(start, count)

    def try_play(self, cur_time: float) -> bool:
        """Play the next block if it and the following ones are buffered.

        Playback needs a window of consecutive blocks starting at the next
        block to play. Returns whether a block was played.
        """
        if not self._buffer.has_consecutives(self._next_play_seq, PLAY_WINDOW):
            return False
        self._played_times.append(cur_time)
        self._next_play_seq += 1
        self._delay = sum(
            played - index / FRAME_RATE
            for index, played in enumerate(self._played_times)
        ) / len(self._played_times)
        return True

    @property
    def needed_seq(self) -> int:
        return self._needed_seq

    @property
    def played_times(self) -> tuple[float, ...]:
        return tuple(self._played_times)

    @property
    def delay(self) -> float:
        """Mean lag of played blocks behind their scheduled play time."""
        return self._delay