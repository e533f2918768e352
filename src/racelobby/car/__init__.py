"""
Car module - Lobby cars and their control.

This module contains:
- Car: Identity, track progress, speed and assist state
- CarInputs: Throttle, brake, DRS and ERS requests
- Electronics: DRS and ERS gating and the energy store
- DriverPolicy / AutopilotPolicy: Input providers for AI cars
"""

from racelobby.car.car import Car, CarInputs, CarType
from racelobby.car.electronics import Electronics, ElectronicsConfig, DRS, ERS
from racelobby.car.policy import DriverPolicy, AutopilotPolicy, AutopilotConfig

__all__ = [
    "Car",
    "CarInputs",
    "CarType",
    "Electronics",
    "ElectronicsConfig",
    "DRS",
    "ERS",
    "DriverPolicy",
    "AutopilotPolicy",
    "AutopilotConfig",
]
