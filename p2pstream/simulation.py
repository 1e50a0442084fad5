"""Time-stepped simulation of block production, requests and playback."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Protocol

from .network import Network
from .node import Client
from .videodata import DataBlock

TIME_STEP = 0.01
BLOCK_INTERVAL = 1.0 / 30.0


@dataclass(frozen=True, slots=True)
class InTransitPacket:
    """A block on its way from one node to another."""

    from_id: int
    to_id: int
    block: DataBlock
    delivery_time: float


class PacketSink(Protocol):
    """Anything that wants to hear about each transfer the simulation starts."""

    def add_packet(
        self,
        seq: int,
        from_id: int,
        to_id: int,
        start_time: float,
        delivery_time: float,
    ) -> None: ...


class Simulation:
    """Drives a :class:`Network`: the server emits 30 blocks a second,
    clients fetch the block they need from their fastest neighbour holding
    it, and play once enough consecutive blocks are buffered."""

    def __init__(self, network: Network, canvas: PacketSink | None = None) -> None:
        self.network = network
        self.canvas = canvas
        self.cur_time = 0.0
        self.total_time = 0.0
        self._block_seq = 0
        self._queue: list[InTransitPacket] = []
        self.requested_blocks: list[set[int]] = [set() for _ in network.nodes]

    @property
    def blocks_produced(self) -> int:
        return self._block_seq

    @property
    def transmission_queue(self) -> tuple[InTransitPacket, ...]:
        return tuple(self._queue)

    def run(self, total_time: float = 100.0) -> None:
        """Advance the simulation from time 0 until ``total_time``."""
        self.total_time = total_time
        self.cur_time = 0.0
        next_block_time = 0.0
        nodes = self.network.nodes

        while self.cur_time < self.total_time:
            if self.cur_time >= next_block_time:
                nodes[0].receive_block(DataBlock(self._block_seq, self.cur_time))
                self._block_seq += 1
                next_block_time += BLOCK_INTERVAL

            self._deliver()

            for node in nodes[1:]:
                if not isinstance(node, Client):
                    continue
                self._request(node)
                node.try_play(self.cur_time)

            self.cur_time += TIME_STEP

    def _deliver(self) -> None:
        pending: list[InTransitPacket] = []
        for packet in self._queue:
            if packet.delivery_time <= self.cur_time:
                self.network.nodes[packet.to_id].receive_block(packet.block)
                self.requested_blocks[packet.to_id].discard(packet.block.seq_num)
            else:
                pending.append(packet)
        self._queue = pending

    def _request(self, client: Client) -> None:
        cid = client.node_id
        needed = client.needed_seq
        if needed in self.requested_blocks[cid]:
            return

        best_neighbor = -1
        best_delay = math.inf
        target: DataBlock | None = None
        for nid in client.neighbors:
            for block in self.network.nodes[nid].buffer_blocks:
                if block.seq_num == needed:
                    delay = 1.0 / self.network.matrix[cid][nid]
                    if delay < best_delay:
                        best_neighbor, best_delay, target = nid, delay, block
                    break

        if target is None:
            return
        delivery = self.cur_time + best_delay
        self._queue.append(InTransitPacket(best_neighbor, cid, target, delivery))
        self.requested_blocks[cid].add(needed)
        if self.canvas is not None:
            self.canvas.add_packet(
                target.seq_num, best_neighbor, cid, self.cur_time, delivery
            )