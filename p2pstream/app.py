"""Desktop front end: a setup window and an animated view of the network."""

from __future__ import annotations

import argparse
import random
from collections.abc import Callable, Sequence
from typing import Any

from .canvas import NodeCanvas
from .network import Network
from .simulation import Simulation

try:
    import tkinter as tk
    from tkinter import simpledialog
except ImportError:  # pragma: no cover - depends on the interpreter build
    tk = None  # type: ignore[assignment]
    simpledialog = None  # type: ignore[assignment]

CLIENT_RANGE = (1, 1000)
NEIGHBOR_RANGE = (1, 10)
CACHE_RANGE = (1, 500)
DEFAULT_CLIENTS = 100
DEFAULT_NEIGHBORS = 5
DEFAULT_CACHE = 10

CANVAS_SIZE = 1000
TICK_MS = 30
PAN_STEP = 20
HELP_TEXT = "Space: Pause | + / -: Zoom | Arrows: Move D: Check client delay E: Node Exit"


def _require_tk() -> None:
    if tk is None:
        raise RuntimeError("tkinter is not available in this Python installation")


def _bounded(low: int, high: int) -> Callable[[str], int]:
    def integer(text: str) -> int:
        value = int(text)
        if not low <= value <= high:
            raise argparse.ArgumentTypeError(f"must be between {low} and {high}, got {value}")
        return value

    return integer


def _clamp(value: int, bounds: tuple[int, int]) -> int:
    low, high = bounds
    return min(max(value, low), high)


def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    """Read the command line.

    When any of the network sizes is given, the setup window is skipped.
    """
    parser = argparse.ArgumentParser(
        prog="p2pstream", description="Simulate and watch peer-to-peer video streaming."
    )
    parser.add_argument("--clients", type=_bounded(*CLIENT_RANGE), help="number of clients")
    parser.add_argument("--neighbors", type=_bounded(*NEIGHBOR_RANGE), help="neighbours per node")
    parser.add_argument("--cache", type=_bounded(*CACHE_RANGE), help="blocks each node caches")
    parser.add_argument("--seed", type=int, help="seed for node placement and linking")
    return parser.parse_args(argv)


def start_simulation(
    num_clients: int,
    num_neighbors: int,
    cache_size: int,
    rng: random.Random | None = None,
) -> NodeCanvas:
    """Build a network, simulate it and return a canvas ready to animate it."""
    network = Network()
    network.setup(num_clients, num_neighbors, cache_size, rng)
    canvas = NodeCanvas()
    canvas.set_network(network)
    Simulation(network, canvas).run()
    canvas.start_visualization()
    return canvas


def _to_screen(canvas: NodeCanvas, x: float, y: float, width: float, height: float) -> tuple[float, float]:
    """Map a scene point to the window: pan, then zoom about the window centre."""
    cx, cy = width / 2, height / 2
    px, py = canvas.pan_offset
    return (cx + canvas.scale * (x + px - cx), cy + canvas.scale * (y + py - cy))


def _delay_message(delay: float | None) -> str:
    if delay is None:
        return "No blocks played."
    return f"Average delay: {delay:.4f} s"


class SetupWindow:
    """Asks for the network sizes and hands them to ``on_start``."""

    def __init__(self, root: Any, on_start: Callable[[int, int, int], None]) -> None:
        _require_tk()
        self._root = root
        self._on_start = on_start
        self.window = tk.Toplevel(root)
        self.window.title("P2P Simulator Setup")
        self.window.protocol("WM_DELETE_WINDOW", root.destroy)

        self._spins = []
        for label, bounds, default in (
            ("Number of Clients:", CLIENT_RANGE, DEFAULT_CLIENTS),
            ("Neighbors per Node:", NEIGHBOR_RANGE, DEFAULT_NEIGHBORS),
            ("Cache Size:", CACHE_RANGE, DEFAULT_CACHE),
        ):
            tk.Label(self.window, text=label, anchor="w").pack(fill="x", padx=8)
            spin = tk.Spinbox(self.window, from_=bounds[0], to=bounds[1], width=8)
            spin.delete(0, "end")
            spin.insert(0, str(default))
            spin.pack(fill="x", padx=8, pady=(0, 4))
            self._spins.append((spin, bounds, default))

        tk.Button(self.window, text="Start Simulation", command=self._start).pack(padx=8, pady=8)

    def _start(self) -> None:
        values = []
        for spin, bounds, default in self._spins:
            try:
                value = int(spin.get())
            except ValueError:
                value = default
            values.append(_clamp(value, bounds))
        self.window.destroy()
        self._on_start(*values)


class CanvasWindow:
    """Draws a :class:`NodeCanvas` and routes key presses to it."""

    def __init__(self, root: Any, canvas: NodeCanvas) -> None:
        _require_tk()
        self.root = root
        self.canvas = canvas
        root.deiconify()
        root.title("P2P Simulator")
        self.view = tk.Canvas(root, width=CANVAS_SIZE, height=CANVAS_SIZE, background="white")
        self.view.pack(fill="both", expand=True)
        help_label = tk.Label(root, text=HELP_TEXT, background="white", padx=4, pady=4)
        help_label.place(x=10, y=100)
        root.bind("<Key>", self.on_key)
        self.view.focus_set()
        self.redraw()
        root.after(TICK_MS, self.tick)

    def _size(self) -> tuple[int, int]:
        width = self.view.winfo_width()
        height = self.view.winfo_height()
        if width <= 1 or height <= 1:
            return CANVAS_SIZE, CANVAS_SIZE
        return width, height

    def redraw(self) -> None:
        """Draw nodes, the server, links and packets in flight."""
        view = self.view
        view.delete("all")
        width, height = self._size()
        scale = self.canvas.scale

        def at(x: float, y: float) -> tuple[float, float]:
            return _to_screen(self.canvas, x, y, width, height)

        def circle(x: float, y: float, radius: float, fill: str) -> None:
            cx, cy = at(x, y)
            r = radius * scale
            view.create_oval(cx - r, cy - r, cx + r, cy + r, fill=fill, outline="black")

        nodes = self.canvas.nodes
        for node in nodes:
            circle(node.x, node.y, 6, "cyan")
            tx, ty = at(node.x + 10, node.y - 10)
            view.create_text(tx, ty, text=str(node.node_id), anchor="sw")
        if nodes:
            circle(nodes[0].x, nodes[0].y, 10, "magenta")

        for a, b in self.canvas.edges():
            view.create_line(*at(a.x, a.y), *at(b.x, b.y), fill="gray")

        for x, y in self.canvas.packet_positions():
            circle(x, y, 4, "red")

    def on_key(self, event: Any) -> None:
        key = event.keysym
        if key in ("plus", "equal", "KP_Add"):
            self.canvas.zoom_in()
        elif key in ("minus", "KP_Subtract"):
            self.canvas.zoom_out()
        elif key == "space":
            self.canvas.toggle_pause()
        elif key == "Left":
            self.canvas.pan(PAN_STEP, 0)
        elif key == "Right":
            self.canvas.pan(-PAN_STEP, 0)
        elif key == "Up":
            self.canvas.pan(0, PAN_STEP)
        elif key == "Down":
            self.canvas.pan(0, -PAN_STEP)
        elif key in ("d", "D"):
            self.show_delay_dialog()
        elif key in ("e", "E"):
            self.prompt_node_exit()
        else:
            return
        self.redraw()

    def tick(self) -> None:
        """Advance the animation by one frame and schedule the next one."""
        if self.canvas.running:
            self.canvas.advance()
            self.redraw()
        self.root.after(TICK_MS, self.tick)

    def show_delay_dialog(self) -> None:
        network = self.canvas.network
        if network is None:
            return
        last_id = len(network.nodes) - 1

        dialog = tk.Toplevel(self.root)
        dialog.title("Check Client Delay")
        tk.Label(dialog, text="Client ID:").pack(padx=8, anchor="w")
        spin = tk.Spinbox(dialog, from_=1, to=last_id, width=8)
        spin.pack(padx=8, fill="x")
        result = tk.Label(dialog, text="")

        def check() -> None:
            try:
                cid = int(spin.get())
            except ValueError:
                return
            cid = _clamp(cid, (1, last_id))
            result.config(text=_delay_message(self.canvas.client_delay(cid)))

        tk.Button(dialog, text="Check", command=check).pack(padx=8, pady=4)
        result.pack(padx=8, pady=(0, 8))
        dialog.transient(self.root)
        dialog.grab_set()
        self.root.wait_window(dialog)

    def prompt_node_exit(self) -> None:
        network = self.canvas.network
        if network is None:
            return
        cid = simpledialog.askinteger(
            "Remove Node",
            "Enter Client ID to remove:",
            parent=self.root,
            initialvalue=1,
            minvalue=1,
            maxvalue=len(network.nodes) - 1,
        )
        if cid is None:
            return
        self.canvas.exit_node(cid)
        self.redraw()


def main(argv: Sequence[str] | None = None) -> int:
    args = parse_args(argv)
    _require_tk()
    rng = random.Random(args.seed)
    root = tk.Tk()
    windows: list[CanvasWindow] = []

    def on_start(num_clients: int, num_neighbors: int, cache_size: int) -> None:
        canvas = start_simulation(num_clients, num_neighbors, cache_size, rng)
        windows.append(CanvasWindow(root, canvas))

    if args.clients is None and args.neighbors is None and args.cache is None:
        root.withdraw()
        SetupWindow(root, on_start)
    else:
        on_start(
            args.clients if args.clients is not None else DEFAULT_CLIENTS,
            args.neighbors if args.neighbors is not None else DEFAULT_NEIGHBORS,
            args.cache if args.cache is not None else DEFAULT_CACHE,
        )
    root.mainloop()
    return 0