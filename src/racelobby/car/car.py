"""
Car - Lobby participant driven along the track.

Integrates:
- Track progress and speed state
- Electronics (DRS, ERS)
- Identity and presentation (name, colour, human or AI)
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict

from racelobby.car.electronics import Electronics, ElectronicsConfig


class CarType(Enum):
    """Who controls the car."""
    HUMAN = "human"
    AI = "ai"


@dataclass
class CarInputs:
    """Driver control inputs for the car."""
    throttle: float = 0.0      # 0.0 to 1.0
    brake: float = 0.0         # 0.0 to 1.0
    drs: bool = False          # Request DRS
    ers: bool = False          # Request ERS deployment


class Car:
    """One car in a lobby.

    The car only holds state. The physics engine writes ``progress`` and
    ``velocity`` each tick and drives the electronics; ``drs_active`` and
    ``ers_active`` are read-only views of the electronics.

    Usage:
        car = Car("a1b2", "Host", CarType.HUMAN, "#00e3a9")
        car.progress, car.velocity, car.energy
    """

    def __init__(
        self,
        car_id: str,
        name: str,
        car_type: CarType = CarType.HUMAN,
        color: str = "#ffffff",
        progress: float = 0.0,
        electronics_config: ElectronicsConfig | None = None,
    ):
        """Initialize car at a grid position.

        Args:
            car_id: Unique identifier within the lobby
            name: Display name
            car_type: Human or AI control
            color: Display colour (CSS hex)
            progress: Starting distance along the track in meters
            electronics_config: Assist system configuration
        """
        self.car_id = car_id
        self.name = name
        self.car_type = car_type
        self.color = color

        self.progress: float = progress
        self.velocity: float = 0.0

        self.electronics = Electronics(electronics_config)

    @property
    def is_ai(self) -> bool:
        """Check if the car is computer controlled."""
        return self.car_type is CarType.AI

    @property
    def energy(self) -> float:
        """Stored ERS energy."""
        return self.electronics.ers.energy

    @property
    def drs_active(self) -> bool:
        """DRS open on the last tick."""
        return self.electronics.drs.is_active

    @property
    def ers_active(self) -> bool:
        """ERS deployed on the last tick."""
        return self.electronics.ers.is_active

    def get_state(self) -> Dict[str, Any]:
        """Get car state as sent to clients.

        Returns:
            Dictionary with identity, motion and assist flags
        """
        return {
            "id": self.car_id,
            "name": self.name,
            "type": self.car_type.value,
            "color": self.color,
            "progress": self.progress,
            "velocity": self.velocity,
            "energy": self.energy,
            "drsActive": self.drs_active,
            "ersActive": self.ers_active,
        }

    def __repr__(self) -> str:
        return (
            f"Car(id={self.car_id!r}, name={self.name!r}, type={self.car_type.value}, "
            f"progress={self.progress:.1f}, velocity={self.velocity:.1f})"
        )
