"""
Driver policies - Input providers for computer controlled cars.

Provides:
- DriverPolicy: the interface the physics engine calls for AI cars
- AutopilotPolicy: flat-out driving with DRS/ERS used in the DRS zones
"""

from dataclasses import dataclass
from typing import Protocol

from racelobby.car.car import Car, CarInputs
from racelobby.track.track import Track


class DriverPolicy(Protocol):
    """Anything that can drive a car for one tick."""

    def decide(self, car: Car, track: Track) -> CarInputs:
        """Produce this tick's inputs for a car."""
        ...


@dataclass
class AutopilotConfig:
    """Autopilot behaviour."""
    throttle: float = 1.0

    # Energy kept back; ERS is only deployed above this level
    ers_reserve: float = 0.4


class AutopilotPolicy:
    """Default AI driver.

    Runs flat out without braking, opens DRS whenever the zone allows
    it and deploys ERS inside DRS zones while the energy store is above
    the reserve.
    """

    def __init__(self, config: AutopilotConfig | None = None):
        self.config = config or AutopilotConfig()

    def decide(self, car: Car, track: Track) -> CarInputs:
        zone_open = track.drs_available(car.progress)
        return CarInputs(
            throttle=self.config.throttle,
            brake=0.0,
            drs=zone_open,
            ers=zone_open and car.energy > self.config.ers_reserve,
        )
