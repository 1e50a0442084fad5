# p2pstream

A small simulator of live video streaming over a peer-to-peer overlay.

One server (node 0) produces video blocks at 30 blocks per second. Clients are placed at
random, distinct grid points on a 2D plane and joined to a bounded number of random
neighbours. The rate of a link falls as the distance between its two nodes grows, from
100 for touching nodes to 20 at the far corner of the plane. On every 10 ms step, each
client asks for the next block it needs from the neighbour holding it that can deliver it
fastest. A client plays a block once it holds five blocks in a row starting from that
block. The time of every played block is recorded, and from those times the client's
average playback delay is worked out.

## Installing

```
pip install .
```

The viewer uses Tkinter, which ships with most Python builds. Nothing else is needed.

## Running the viewer

```
p2pstream
```

With no options, a setup window asks for three settings:

- the number of clients, from 1 to 1000 (default 100)
- the neighbours per node, from 1 to 10 (default 5)
- the cache size, from 1 to 500 (default 10)

The settings can also be given on the command line, in which case the setup window is
skipped and any that are left out take their defaults:

```
p2pstream --clients 200 --neighbors 4 --cache 20 --seed 7
```

`--seed` fixes the random placement and linking of the nodes. Run `p2pstream --help` for
the full list.

When you start, the whole simulation (100 simulated seconds) runs first, and then its
packet transfers are played back on the canvas, slowed down a hundredfold.

| Key | Action |
|-----|--------|
| Space | pause / resume |
| `+` / `=` / `-` | zoom in / out |
| Arrow keys | pan |
| `D` | show a client's average playback delay |
| `E` | remove a client, rewire its neighbours and rerun |

Removing a client joins each of its former neighbours to the nearest clients that still
have room for a link, resets every node and runs the simulation again from the start.

## Using it as a library

```python
import random

from p2pstream.network import Network
from p2pstream.simulation import Simulation
from p2pstream.canvas import NodeCanvas, average_delay

net = Network()
net.setup(num_clients=50, num_neighbors=4, cache_size=10, rng=random.Random(1))

canvas = NodeCanvas()
canvas.set_network(net)
Simulation(net, canvas).run(total_time=20.0)

for client in net.clients:
    print(client.node_id, average_delay(client.played_times))

net.node_exit(3)  # disconnect client 3 and reconnect its former neighbours
```

The modules:

- `p2pstream.videodata`: `DataBlock` and `Cache`, a bounded first-in, first-out block store.
- `p2pstream.node`: `Node`, `Server` and `Client`, with playback state such as
  `Client.needed_seq`, `Client.played_times` and `Client.delay`.
- `p2pstream.network`: `Network`, plus `distance` and `link_rate`.
- `p2pstream.simulation`: `Simulation`, which reports every transfer it starts to any
  object with an `add_packet` method (`PacketSink`).
- `p2pstream.canvas`: `NodeCanvas`, the playback state behind the view: `edges()`,
  `packet_positions()`, zoom, pan, `client_delay()` and `exit_node()`. It does no drawing
  itself, so it can be driven without a display.
- `p2pstream.app`: the Tk windows and the `p2pstream` command.

## What it does not do

The simulation runs to the end before anything is shown; the viewer replays recorded
transfers rather than simulating live. There is no way to save or load a network or the
results of a run, and no report beyond the per-client delay shown in the viewer or read
through the library.