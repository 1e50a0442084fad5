"""The peer graph: node placement, neighbour links and link rates."""

from __future__ import annotations

import math
import random

from .node import Client, Node, Server

MIN_RATE = 20.0
MAX_RATE = 100.0
COORDINATE_SPREAD = 10
"""Each client widens the square the nodes are placed in by this much."""


def distance(a: Node, b: Node) -> float:
    """Euclidean distance between two nodes."""
    return math.hypot(a.x - b.x, a.y - b.y)


def link_rate(d: float, num_clients: int) -> float:
    """Rate of a link of length ``d``: 100 for touching nodes, down to 20 at the far corner."""
    d_max = math.sqrt(2.0) * num_clients * COORDINATE_SPREAD
    return MIN_RATE + (MAX_RATE - MIN_RATE) * (1.0 - min(d, d_max) / d_max)


class Network:
    """One server (id 0) and its clients, linked as an undirected graph.

    ``matrix[a][b]`` holds the weight of the link between ``a`` and ``b``,
    or 0 where there is none.
    """

    def __init__(self) -> None:
        self.nodes: list[Node] = []
        self.matrix: list[list[float]] = []
        self.num_servers = 1
        self.num_clients = 0
        self.num_neighbors = 0

    def setup(
        self,
        num_clients: int,
        num_neighbors: int,
        cache_size: int,
        rng: random.Random | None = None,
    ) -> None:
        """Place the nodes at random distinct grid points and link them up.

        Each node is given up to ``num_neighbors`` random partners that still
        have room for another link; the search for a partner gives up after a
        bounded number of draws.
        """
        if num_clients < 1:
            raise ValueError(f"a network needs at least one client, got {num_clients}")
        if num_neighbors < 0:
            raise ValueError(f"neighbour count must not be negative, got {num_neighbors}")
        rng = rng if rng is not None else random.Random()

        self.num_clients = num_clients
        self.num_neighbors = num_neighbors
        bound = num_clients * COORDINATE_SPREAD

        taken: set[tuple[int, int]] = set()

        def free_point() -> tuple[float, float]:
            while True:
                point = (rng.randint(0, bound), rng.randint(0, bound))
                if point not in taken:
                    taken.add(point)
                    return float(point[0]), float(point[1])

        x, y = free_point()
        self.nodes = [Server(0, x, y, cache_size)]
        for cid in range(1, num_clients + 1):
            x, y = free_point()
            self.nodes.append(Client(cid, x, y, cache_size))

        size = num_clients + 1
        self.matrix = [[0.0] * size for _ in range(size)]

        for i, node in enumerate(self.nodes):
            chosen: set[int] = set()
            for _ in range(num_neighbors - node.neighbor_count):
                partner = self._draw_partner(i, chosen, rng)
                if partner is None:
                    break
                chosen.add(partner)
                self._link(i, partner)

    def _draw_partner(self, i: int, chosen: set[int], rng: random.Random) -> int | None:
        guard = self.num_clients * 100
        while True:
            candidate = rng.randint(0, self.num_clients)
            guard -= 1
            if guard == 0:
                return None
            if (
                candidate not in chosen
                and self.matrix[i][candidate] == 0
                and candidate != i
                and self.nodes[candidate].neighbor_count < self.num_neighbors
            ):
                return candidate

    def _link(self, a: int, b: int) -> None:
        self.nodes[a].add_neighbor(b)
        self.nodes[b].add_neighbor(a)
        rate = link_rate(distance(self.nodes[a], self.nodes[b]), self.num_clients)
        self.matrix[a][b] = rate
        self.matrix[b][a] = rate

    @property
    def server(self) -> Server:
        server = self.nodes[0]
        assert isinstance(server, Server)
        return server

    @property
    def clients(self) -> list[Client]:
        return [node for node in self.nodes[1:] if isinstance(node, Client)]

    def node_exit(self, cid: int) -> None:
        """Cut client ``cid`` off and relink its former neighbours.

        Each former neighbour is joined to its nearest clients that still
        have room, until it has a full set of neighbours or no candidate is
        left. New links carry their length as weight. Ids outside the client
        range are ignored.
        """
        if cid < 1 or cid >= len(self.nodes):
            return

        leaving = self.nodes[cid]
        old_neighbors = leaving.neighbors
        for nid in old_neighbors:
            self.nodes[nid].remove_neighbor(cid)
            self.matrix[cid][nid] = 0.0
            self.matrix[nid][cid] = 0.0
        leaving.remove_neighbor(-1)

        for nid in old_neighbors:
            node = self.nodes[nid]
            while node.neighbor_count < self.num_neighbors:
                best = self._nearest_free(nid)
                if best is None:
                    break
                node.add_neighbor(best)
                self.nodes[best].add_neighbor(nid)
                d = distance(node, self.nodes[best])
                self.matrix[nid][best] = d
                self.matrix[best][nid] = d

    def _nearest_free(self, nid: int) -> int | None:
        best: int | None = None
        best_dist = math.inf
        origin = self.nodes[nid]
        for i in range(1, len(self.nodes)):
            if (
                i == nid
                or self.matrix[nid][i] != 0
                or self.nodes[i].neighbor_count >= self.num_neighbors
            ):
                continue
            d = distance(origin, self.nodes[i])
            if d < best_dist:
                best, best_dist = i, d
        return best