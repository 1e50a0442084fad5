import random

import pytest

from p2pstream.network import Network, distance, link_rate
from p2pstream.node import Client, Server


def _check_consistent(net: Network) -> None:
    size = len(net.nodes)
    for a in range(size):
        assert net.matrix[a][a] == 0
        assert len(set(net.nodes[a].neighbors)) == net.nodes[a].neighbor_count
        for b in range(size):
            assert net.matrix[a][b] == net.matrix[b][a]
            assert (net.matrix[a][b] != 0) == (b in net.nodes[a].neighbors)


def _manual_network() -> Network:
    net = Network()
    net.nodes = [
        Server(0, 10.0, 1.0, 5),
        Client(1, 10.0, 0.0, 5),
        Client(2, 30.0, 0.0, 5),
        Client(3, 15.0, 0.0, 5),
    ]
    net.matrix = [[0.0] * 4 for _ in range(4)]
    net.num_clients = 3
    net.num_neighbors = 1
    net.nodes[1].add_neighbor(2)
    net.nodes[2].add_neighbor(1)
    net.matrix[1][2] = net.matrix[2][1] = 50.0
    return net


def test_distance_three_four_five():
    a = Server(0, 0.0, 0.0, 1)
    b = Client(1, 3.0, 4.0, 1)
    assert distance(a, b) == pytest.approx(5.0)
    assert distance(a, b) == distance(b, a)


def test_link_rate_bounds():
    assert link_rate(0.0, 100) == pytest.approx(100.0)
    assert link_rate(1e9, 100) == pytest.approx(20.0)


def test_link_rate_decreases_with_distance():
    rates = [link_rate(d, 50) for d in (0, 10, 100, 300, 700)]
    assert rates == sorted(rates, reverse=True)
    assert all(20.0 <= r <= 100.0 for r in rates)


def test_setup_builds_server_and_clients():
    net = Network()
    net.setup(30, 4, 10, random.Random(3))
    assert len(net.nodes) == 31
    assert net.server is net.nodes[0]
    assert isinstance(net.server, Server)
    assert len(net.clients) == 30
    assert [n.node_id for n in net.nodes] == list(range(31))


def test_setup_coordinates_distinct_and_bounded():
    net = Network()
    net.setup(25, 3, 10, random.Random(11))
    points = {(n.x, n.y) for n in net.nodes}
    assert len(points) == len(net.nodes)
    assert all(0 <= n.x <= 250 and 0 <= n.y <= 250 for n in net.nodes)


def test_setup_links_are_consistent():
    net = Network()
    net.setup(40, 5, 10, random.Random(7))
    _check_consistent(net)
    assert all(n.neighbor_count <= 5 for n in net.nodes)
    rates = [r for row in net.matrix for r in row if r != 0]
    assert rates
    assert all(20.0 <= r <= 100.0 for r in rates)


def test_setup_rates_match_link_lengths():
    net = Network()
    net.setup(20, 3, 10, random.Random(5))
    for a, node in enumerate(net.nodes):
        for b in node.neighbors:
            expected = link_rate(distance(node, net.nodes[b]), 20)
            assert net.matrix[a][b] == pytest.approx(expected)


def test_setup_is_reproducible_with_seed():
    first, second = Network(), Network()
    first.setup(15, 3, 10, random.Random(42))
    second.setup(15, 3, 10, random.Random(42))
    assert first.matrix == second.matrix
    assert [(n.x, n.y) for n in first.nodes] == [(n.x, n.y) for n in second.nodes]


def test_setup_rejects_empty_network():
    with pytest.raises(ValueError):
        Network().setup(0, 3, 10, random.Random(1))


def test_node_exit_relinks_to_nearest_client():
    net = _manual_network()
    net.node_exit(2)
    assert net.nodes[2].neighbors == ()
    assert net.matrix[1][2] == 0
    assert net.nodes[1].neighbors == (3,)
    assert net.nodes[3].neighbors == (1,)
    assert net.matrix[1][3] == pytest.approx(distance(net.nodes[1], net.nodes[3]))
    assert net.nodes[0].neighbors == ()
    _check_consistent(net)


@pytest.mark.parametrize("cid", [0, -1, 4, 99])
def test_node_exit_ignores_out_of_range(cid):
    net = _manual_network()
    before = [row[:] for row in net.matrix]
    net.node_exit(cid)
    assert net.matrix == before
    assert net.nodes[1].neighbors == (2,)


def test_node_exit_keeps_generated_network_consistent():
    net = Network()
    net.setup(30, 4, 10, random.Random(9))
    net.node_exit(5)
    _check_consistent(net)
    assert all(n.neighbor_count <= 4 for n in net.nodes)