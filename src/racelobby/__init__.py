"""
RaceLobby - A server-authoritative real-time multiplayer racing simulator.

This package provides:
- Static circuit geometry with arc-length mapping and DRS zones
- Lobbies of human and AI cars with per-player control inputs
- A fixed-tick physics engine with DRS, ERS and slipstream effects
- Push broadcast of lobby state to live subscribers over server-sent events
"""

__version__ = "0.1.0"

from racelobby.track.track import Track
from racelobby.car.car import Car
from racelobby.session.registry import LobbyRegistry
from racelobby.simulation.physics import PhysicsEngine

__all__ = ["Track", "Car", "LobbyRegistry", "PhysicsEngine", "__version__"]
