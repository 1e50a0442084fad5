"""Peer-to-peer live streaming simulator with a Tk viewer."""

__version__ = "1.0.0"
__all__ = ["videodata", "node", "network", "simulation", "canvas", "app"]