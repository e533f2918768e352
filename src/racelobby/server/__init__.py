"""
Server module - HTTP surface of the race lobby.

This module contains:
- create_app: FastAPI application factory wiring registry, engine, scheduler and broadcast
- ServerConfig: Dataclass configuration with environment overrides
- main: Command line entry point running uvicorn
"""

from racelobby.server.config import ServerConfig
from racelobby.server.app import create_app
from racelobby.server.cli import main

__all__ = [
    "ServerConfig",
    "create_app",
    "main",
]
