"""
Simulation module - Fixed-tick race simulation.

This module contains:
- PhysicsEngine: Advances every car in a lobby by one time step
- TickScheduler: Global loop ticking, advancing and broadcasting lobbies
"""

from racelobby.simulation.physics import PhysicsEngine, PhysicsConfig
from racelobby.simulation.scheduler import TickScheduler, SchedulerConfig

__all__ = [
    "PhysicsEngine",
    "PhysicsConfig",
    "TickScheduler",
    "SchedulerConfig",
]
