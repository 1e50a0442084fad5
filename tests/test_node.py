import pytest

from p2pstream.node import ALL_NEIGHBORS, Client, Server
from p2pstream.videodata import DataBlock


def _feed(node, seqs):
    for seq in seqs:
        node.receive_block(DataBlock(seq, seq / 30.0))


def test_position_and_id_kept():
    node = Client(7, 12.0, 34.0, 10)
    assert (node.node_id, node.x, node.y) == (7, 12.0, 34.0)


def test_neighbors_added_in_order():
    node = Server(0, 0.0, 0.0, 10)
    node.add_neighbor(3)
    node.add_neighbor(1)
    assert node.neighbors == (3, 1)
    assert node.neighbor_count == 2


def test_remove_single_neighbor():
    node = Client(1, 0.0, 0.0, 10)
    for n in (2, 3, 4):
        node.add_neighbor(n)
    node.remove_neighbor(3)
    assert node.neighbors == (2, 4)


def test_remove_all_neighbors():
    node = Client(1, 0.0, 0.0, 10)
    for n in (2, 3):
        node.add_neighbor(n)
    node.remove_neighbor(ALL_NEIGHBORS)
    assert node.neighbors == ()
    assert node.neighbor_count == 0


def test_server_buffer_bounded_by_cache_size():
    server = Server(0, 0.0, 0.0, 3)
    _feed(server, range(6))
    assert [b.seq_num for b in server.buffer_blocks] == [3, 4, 5]


def test_client_receive_advances_needed_seq():
    client = Client(1, 0.0, 0.0, 10)
    assert client.needed_seq == 0
    _feed(client, range(3))
    assert client.needed_seq == 3
    assert [b.seq_num for b in client.buffer_blocks] == [0, 1, 2]


def test_try_play_needs_full_window():
    client = Client(1, 0.0, 0.0, 10)
    _feed(client, range(4))
    assert client.try_play(1.0) is False
    assert client.played_times == ()


def test_try_play_advances_playback():
    client = Client(1, 0.0, 0.0, 10)
    _feed(client, range(5))
    assert client.try_play(0.5) is True
    assert client.played_times == (0.5,)
    # next block needs blocks 1..5, block 5 is still missing
    assert client.try_play(0.6) is False
    _feed(client, [5])
    assert client.try_play(0.7) is True
    assert client.played_times == (0.5, 0.7)


def test_delay_of_single_play_is_its_time():
    client = Client(1, 0.0, 0.0, 10)
    _feed(client, range(5))
    client.try_play(0.5)
    assert client.delay == pytest.approx(0.5)


def test_delay_constant_when_played_on_schedule():
    client = Client(1, 0.0, 0.0, 10)
    _feed(client, range(6))
    start = 0.4
    client.try_play(start)
    client.try_play(start + 1 / 30.0)
    assert client.delay == pytest.approx(start)


def test_has_consecutive_reflects_buffer():
    client = Client(1, 0.0, 0.0, 10)
    _feed(client, [0, 1, 2])
    assert client.has_consecutive(0, 3) is True
    assert client.has_consecutive(1, 3) is False


def test_client_restart_resets_state():
    client = Client(1, 0.0, 0.0, 10)
    client.add_neighbor(2)
    _feed(client, range(5))
    client.try_play(0.5)
    client.restart()
    assert client.buffer_blocks == ()
    assert client.needed_seq == 0
    assert client.played_times == ()
    assert client.delay == 0.0
    assert client.neighbors == (2,)


def test_server_restart_clears_buffer():
    server = Server(0, 0.0, 0.0, 10)
    _feed(server, range(3))
    server.restart()
    assert server.buffer_blocks == ()