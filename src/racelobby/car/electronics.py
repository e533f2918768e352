"""
Electronics component - Driver assist systems.

Simulates:
- DRS (Drag Reduction System), gated by track zones
- ERS (Energy Recovery System), gated by the stored energy reserve
"""

from dataclasses import dataclass
import numpy as np


@dataclass
class DRSConfig:
    """Configuration for the drag reduction system."""
    # Acceleration multiplier while the flap is open
    accel_multiplier: float = 1.05

    # Additive top speed bonus (m/s)
    speed_cap_bonus: float = 7.0


class DRS:
    """Drag Reduction System.

    Opens only when the driver requests it and the car is inside a DRS
    zone. The active flag is recomputed every tick.
    """

    def __init__(self, config: DRSConfig | None = None):
        """Initialize DRS with optional custom configuration.

        Args:
            config: DRS configuration. Uses defaults if None.
        """
        self.config = config or DRSConfig()
        self._active: bool = False

    @property
    def is_active(self) -> bool:
        """Check if the flap is open this tick."""
        return self._active

    def process(self, requested: bool, zone_open: bool) -> bool:
        """Resolve DRS state for this tick.

        Args:
            requested: Driver asked for DRS
            zone_open: Car is inside a DRS zone

        Returns:
            True if DRS is active
        """
        self._active = bool(requested) and bool(zone_open)
        return self._active


@dataclass
class ERSConfig:
    """Configuration for the energy recovery system."""
    # Energy store (arbitrary units)
    capacity: float = 4.0

    # Minimum charge needed to deploy
    min_deploy_energy: float = 0.05

    # Deployment drain and harvesting rate (units per second)
    drain_rate: float = 0.35
    regen_rate: float = 0.08

    # Acceleration multiplier while deploying
    accel_multiplier: float = 1.12

    # Additive top speed bonus (m/s)
    speed_cap_bonus: float = 10.0


class ERS:
    """Energy Recovery System.

    Deploys stored energy on request while any charge is left, and
    harvests energy back whenever it is not deploying.
    """

    def __init__(self, config: ERSConfig | None = None):
        """Initialize ERS with a full energy store.

        Args:
            config: ERS configuration. Uses defaults if None.
        """
        self.config = config or ERSConfig()
        self._energy: float = self.config.capacity
        self._active: bool = False

    @property
    def energy(self) -> float:
        """Stored energy."""
        return self._energy

    @energy.setter
    def energy(self, value: float) -> None:
        """Set stored energy, clamped to the store capacity."""
        self._energy = float(np.clip(value, 0.0, self.config.capacity))

    @property
    def is_active(self) -> bool:
        """Check if ERS is deploying this tick."""
        return self._active

    def process(self, requested: bool) -> bool:
        """Resolve ERS state for this tick.

        Args:
            requested: Driver asked for ERS

        Returns:
            True if ERS is deploying
        """
        self._active = bool(requested) and self._energy > self.config.min_deploy_energy
        return self._active

    def update(self, dt: float) -> None:
        """Drain or harvest energy after the tick has been integrated.

        Args:
            dt: Time step in seconds
        """
        if self._active:
            self._energy = max(0.0, self._energy - self.config.drain_rate * dt)
        else:
            self._energy = min(self.config.capacity, self._energy + self.config.regen_rate * dt)


@dataclass
class ElectronicsConfig:
    """Configuration for all assist systems."""
    drs_config: DRSConfig | None = None
    ers_config: ERSConfig | None = None


class Electronics:
    """Combined assist systems for one car.

    Manages:
    - DRS
    - ERS
    """

    def __init__(self, config: ElectronicsConfig | None = None):
        """Initialize electronics with optional configuration.

        Args:
            config: Electronics configuration. Uses defaults if None.
        """
        self.config = config or ElectronicsConfig()

        self.drs = DRS(self.config.drs_config)
        self.ers = ERS(self.config.ers_config)

    def process(self, drs_requested: bool, ers_requested: bool, zone_open: bool) -> None:
        """Gate both systems for this tick.

        Args:
            drs_requested: Driver DRS intent
            ers_requested: Driver ERS intent
            zone_open: Car is inside a DRS zone
        """
        self.drs.process(drs_requested, zone_open)
        self.ers.process(ers_requested)

    def get_accel_multiplier(self) -> float:
        """Combined acceleration boost of active systems.

        The two boosts are applied independently, one after the other.
        """
        multiplier = 1.0
        if self.drs.is_active:
            multiplier *= self.drs.config.accel_multiplier
        if self.ers.is_active:
            multiplier *= self.ers.config.accel_multiplier
        return multiplier

    def get_speed_cap_bonus(self) -> float:
        """Additive top speed bonus of active systems (m/s)."""
        bonus = 0.0
        if self.drs.is_active:
            bonus += self.drs.config.speed_cap_bonus
        if self.ers.is_active:
            bonus += self.ers.config.speed_cap_bonus
        return bonus
