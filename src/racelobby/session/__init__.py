"""
Session module - Lobbies and the registries that mutate them.

This module contains:
- Lobby: State of one race session
- LobbyRegistry: Lobby creation, join, add-AI, lookup and reaping
- InputRegistry: Latest control input per human player
- RetentionPolicy: Idle-timeout rule for dropping lobbies
"""

from racelobby.session.lobby import Lobby
from racelobby.session.registry import LobbyRegistry, RegistryConfig, clamp_ai_count
from racelobby.session.inputs import InputRegistry
from racelobby.session.retention import RetentionPolicy

__all__ = [
    "Lobby",
    "LobbyRegistry",
    "RegistryConfig",
    "clamp_ai_count",
    "InputRegistry",
    "RetentionPolicy",
]
