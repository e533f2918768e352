"""
Physics engine - Fixed-step longitudinal car model.

Provides:
- Input resolution (human inputs, AI policy)
- DRS/ERS gating through the car electronics
- Slipstream detection along the circular track
- Explicit Euler integration of velocity, progress and energy
"""

from dataclasses import dataclass
from typing import Sequence

from racelobby.car.car import Car, CarInputs
from racelobby.car.policy import AutopilotPolicy, DriverPolicy
from racelobby.session.inputs import InputRegistry
from racelobby.session.lobby import Lobby
from racelobby.track.track import Track


@dataclass
class PhysicsConfig:
    """Physics simulation configuration."""
    # Time step (10 Hz server tick)
    default_dt: float = 0.1

    # Longitudinal model
    base_accel: float = 14.0        # m/s^2 at full throttle
    brake_decel: float = 25.0       # m/s^2 while any brake is applied
    drag_coefficient: float = 0.18  # 1/s, velocity-proportional drag
    max_speed: float = 82.0         # m/s before DRS/ERS bonuses

    # Tow from a car just ahead
    slipstream_multiplier: float = 1.08


class PhysicsEngine:
    """Physics engine for lobby cars.

    Deterministic and free of error states: every input reaching
    ``advance`` has already been clamped by the input registry.

    Usage:
        engine = PhysicsEngine()
        engine.advance(lobby, dt=0.1)
    """

    def __init__(
        self,
        config: PhysicsConfig | None = None,
        policy: DriverPolicy | None = None,
    ):
        """Initialize physics engine.

        Args:
            config: Physics configuration. Uses defaults if None.
            policy: Driver for AI cars. Uses the autopilot if None.
        """
        self.config = config or PhysicsConfig()
        self.policy = policy or AutopilotPolicy()

    def resolve_inputs(self, lobby: Lobby, car: Car) -> CarInputs:
        """Get this tick's inputs for a car.

        Args:
            lobby: Lobby the car is in
            car: Car to drive

        Returns:
            Human car's latest input, or the AI policy's decision
        """
        if car.is_ai:
            return self.policy.decide(car, lobby.track)
        return InputRegistry.get_input(lobby, car.car_id)

    def calculate_slipstream(self, car: Car, cars: Sequence[Car], track: Track) -> float:
        """Get the tow multiplier for a car.

        Args:
            car: Following car
            cars: Every car in the lobby
            track: Circuit, for wrap-around distances

        Returns:
            Slipstream multiplier if any other car is just ahead, else 1.0
        """
        for other in cars:
            if other is car:
                continue
            gap = track.forward_distance(car.progress, other.progress)
            if 0 < gap < track.slipstream_range:
                return self.config.slipstream_multiplier
        return 1.0

    def calculate_acceleration(
        self,
        car: Car,
        inputs: CarInputs,
        slipstream: float,
    ) -> float:
        """Calculate longitudinal acceleration.

        Args:
            car: Car with electronics already gated for this tick
            inputs: Resolved inputs
            slipstream: Tow multiplier

        Returns:
            Acceleration in m/s^2
        """
        accel = self.config.base_accel * inputs.throttle * slipstream
        accel *= car.electronics.get_accel_multiplier()
        if inputs.brake > 0:
            accel -= self.config.brake_decel
        accel -= car.velocity * self.config.drag_coefficient
        return accel

    def get_speed_cap(self, car: Car) -> float:
        """Top speed including active DRS/ERS bonuses (m/s)."""
        return self.config.max_speed + car.electronics.get_speed_cap_bonus()

    def step_car(self, lobby: Lobby, car: Car, cars: Sequence[Car], dt: float) -> None:
        """Advance one car by one time step.

        Args:
            lobby: Lobby the car is in
            car: Car to advance
            cars: Every car in the lobby
            dt: Time step in seconds
        """
        track = lobby.track
        inputs = self.resolve_inputs(lobby, car)

        car.electronics.process(
            drs_requested=inputs.drs,
            ers_requested=inputs.ers,
            zone_open=track.drs_available(car.progress),
        )

        slipstream = self.calculate_slipstream(car, cars, track)
        accel = self.calculate_acceleration(car, inputs, slipstream)

        velocity = max(0.0, car.velocity + accel * dt)
        car.velocity = min(velocity, self.get_speed_cap(car))

        car.progress = track.normalize(car.progress + car.velocity * dt)

        car.electronics.ers.update(dt)

    def advance(self, lobby: Lobby, dt: float | None = None) -> None:
        """Advance every car in a lobby by one tick.

        Cars are stepped in order, humans first. Later cars see the
        already-moved positions of earlier ones when checking for a tow.

        Args:
            lobby: Lobby to advance
            dt: Time step (uses default_dt if None)
        """
        dt = self.config.default_dt if dt is None else dt
        cars = lobby.cars
        for car in cars:
            self.step_car(lobby, car, cars, dt)
