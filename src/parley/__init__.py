"""Parley: a single-player intel negotiation minigame."""
