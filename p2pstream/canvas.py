"""Display model of a running network: node layout, animated packets and view state.

This module does no drawing. It holds what the window needs to draw a
frame and to react to the user's commands.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

from .network import Network
from .node import Client
from .simulation import Simulation

FRAME_INTERVAL = 0.03
"""Wall-clock seconds between two animation frames."""

FRAME_RATE = 30.0
ZOOM_STEP = 1.1
MAX_SCALE = 5.0
MIN_SCALE = 0.2
DEFAULT_TOTAL_TIME = 100.0
DEFAULT_SLOW_FACTOR = 100


@dataclass(frozen=True, slots=True)
class GuiNode:
    """Where a node is drawn."""

    node_id: int
    x: float
    y: float


@dataclass(frozen=True, slots=True)
class AnimatedPacket:
    """A transfer to animate between two nodes over a span of simulated time."""

    seq: int
    from_id: int
    to_id: int
    start_time: float
    delivery_time: float


def average_delay(played_times: Sequence[float]) -> float | None:
    """Mean lag of played blocks behind the 30-per-second schedule.

    Returns ``None`` when nothing has been played.
    """
    if not played_times:
        return None
    total = sum(played - index / FRAME_RATE for index, played in enumerate(played_times))
    return total / len(played_times)


class NodeCanvas:
    """The state behind the network view.

    It receives the packets a :class:`Simulation` starts, replays them on
    an animation clock, and keeps the zoom and pan of the view.
    """

    def __init__(self) -> None:
        self.network: Network | None = None
        self.nodes: list[GuiNode] = []
        self.matrix: list[list[float]] = []
        self.packets: list[AnimatedPacket] = []
        self.cur_time = 0.0
        self.total_time = 0.0
        self.slow_factor = 1
        self.scale = 1.0
        self.pan_offset: tuple[float, float] = (0.0, 0.0)
        self._animating = False
        self._running = False

    @property
    def running(self) -> bool:
        """Whether the animation clock is currently moving."""
        return self._running

    def set_network(self, network: Network) -> None:
        """Take the node positions and links of ``network`` for display."""
        self.network = network
        self.nodes = [GuiNode(node.node_id, node.x, node.y) for node in network.nodes]
        self.matrix = [list(row) for row in network.matrix]

    def add_packet(
        self,
        seq: int,
        from_id: int,
        to_id: int,
        start_time: float,
        delivery_time: float,
    ) -> None:
        self.packets.append(AnimatedPacket(seq, from_id, to_id, start_time, delivery_time))

    def start_visualization(
        self,
        total_time: float = DEFAULT_TOTAL_TIME,
        slow_factor: int = DEFAULT_SLOW_FACTOR,
    ) -> None:
        """Rewind the animation clock and start it.

        Each frame moves the clock by ``FRAME_INTERVAL / slow_factor``
        simulated seconds; it stops once ``total_time`` is reached.
        """
        if slow_factor <= 0:
            raise ValueError(f"slow factor must be positive, got {slow_factor}")
        self.cur_time = 0.0
        self.total_time = total_time
        self.slow_factor = slow_factor
        self._animating = True
        self._running = True

    def advance(self) -> bool:
        """Move the clock one frame ahead; return whether it keeps running."""
        self.cur_time += FRAME_INTERVAL / self.slow_factor
        if self.cur_time >= self.total_time and self._animating:
            self._animating = False
            self._running = False
        return self._running

    def toggle_pause(self) -> None:
        """Pause or resume a started animation; does nothing once it has finished."""
        if not self._animating:
            return
        self._running = not self._running

    def zoom_in(self) -> None:
        if self.scale < MAX_SCALE:
            self.scale *= ZOOM_STEP

    def zoom_out(self) -> None:
        if self.scale > MIN_SCALE:
            self.scale /= ZOOM_STEP

    def pan(self, dx: float, dy: float) -> None:
        """Shift the view by ``dx``, ``dy`` in scene units."""
        x, y = self.pan_offset
        self.pan_offset = (x + dx, y + dy)

    def edges(self) -> list[tuple[GuiNode, GuiNode]]:
        """Endpoints of every link, each link listed once."""
        return [
            (self.nodes[i], self.nodes[j])
            for i, row in enumerate(self.matrix)
            for j, weight in enumerate(row)
            if i < j and weight != 0
        ]

    def packet_positions(self) -> list[tuple[float, float]]:
        """Current position of every packet in flight at the clock's time."""
        positions = []
        for packet in self.packets:
            if not packet.start_time <= self.cur_time <= packet.delivery_time:
                continue
            span = packet.delivery_time - packet.start_time
            progress = (self.cur_time - packet.start_time) / span if span > 0 else 1.0
            a = self.nodes[packet.from_id]
            b = self.nodes[packet.to_id]
            positions.append((a.x + (b.x - a.x) * progress, a.y + (b.y - a.y) * progress))
        return positions

    def _require_network(self) -> Network:
        if self.network is None:
            raise RuntimeError("no network has been set on this canvas")
        return self.network

    def _check_client_id(self, network: Network, cid: int) -> None:
        if not 1 <= cid < len(network.nodes):
            raise ValueError(f"client id must be between 1 and {len(network.nodes) - 1}, got {cid}")

    def client_delay(self, cid: int) -> float | None:
        """Average playback delay of client ``cid``, or ``None`` if it played nothing."""
        network = self._require_network()
        self._check_client_id(network, cid)
        client = network.nodes[cid]
        assert isinstance(client, Client)
        return average_delay(client.played_times)

    def exit_node(self, cid: int) -> None:
        """Remove client ``cid``, reset every node and run the simulation again."""
        network = self._require_network()
        self._check_client_id(network, cid)
        network.node_exit(cid)
        for node in network.nodes:
            node.restart()
        self.packets.clear()
        self.cur_time = 0.0
        Simulation(network, self).run()
        self.start_visualization()