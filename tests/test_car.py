"""Basic tests for the RaceLobby car module."""

import pytest

from racelobby.car.car import Car, CarInputs, CarType
from racelobby.car.electronics import DRS, ERS, ERSConfig, Electronics
from racelobby.car.policy import AutopilotConfig, AutopilotPolicy
from racelobby.track.circuits import build_monza_track


class TestDRS:
    """Test drag reduction system."""

    def test_drs_needs_request_and_zone(self):
        """Test DRS only opens when requested inside a zone."""
        drs = DRS()

        assert drs.process(requested=True, zone_open=True)
        assert not drs.process(requested=True, zone_open=False)
        assert not drs.process(requested=False, zone_open=True)
        assert not drs.is_active


class TestERS:
    """Test energy recovery system."""

    def test_ers_starts_full(self):
        """Test energy store starts at capacity."""
        ers = ERS()
        assert ers.energy == 4.0

    def test_ers_needs_energy(self):
        """Test ERS cannot deploy from an empty store."""
        ers = ERS()
        ers.energy = 0.05

        assert not ers.process(requested=True)

        ers.energy = 0.06
        assert ers.process(requested=True)

    def test_ers_drain_and_regen(self):
        """Test deployment drains and idling harvests energy."""
        ers = ERS()

        ers.process(requested=True)
        ers.update(1.0)
        assert ers.energy == pytest.approx(4.0 - 0.35)

        ers.process(requested=False)
        ers.update(1.0)
        assert ers.energy == pytest.approx(4.0 - 0.35 + 0.08)

    def test_ers_energy_bounds(self):
        """Test energy never leaves [0, capacity]."""
        ers = ERS(ERSConfig(drain_rate=10.0))

        ers.process(requested=True)
        ers.update(1.0)
        assert ers.energy == 0.0

        ers.process(requested=False)
        for _ in range(200):
            ers.update(1.0)
        assert ers.energy == 4.0

        ers.energy = 12.0
        assert ers.energy == 4.0


class TestElectronics:
    """Test combined assist effects."""

    def test_boosts_are_independent(self):
        """Test acceleration boosts multiply and cap bonuses add."""
        electronics = Electronics()

        electronics.process(drs_requested=True, ers_requested=True, zone_open=True)
        assert electronics.get_accel_multiplier() == pytest.approx(1.05 * 1.12)
        assert electronics.get_speed_cap_bonus() == pytest.approx(17.0)

        electronics.process(drs_requested=True, ers_requested=False, zone_open=True)
        assert electronics.get_accel_multiplier() == pytest.approx(1.05)
        assert electronics.get_speed_cap_bonus() == pytest.approx(7.0)

        electronics.process(drs_requested=True, ers_requested=True, zone_open=False)
        assert electronics.get_accel_multiplier() == pytest.approx(1.12)
        assert electronics.get_speed_cap_bonus() == pytest.approx(10.0)

    def test_no_boost_without_request(self):
        """Test idle electronics leave the car untouched."""
        electronics = Electronics()

        electronics.process(drs_requested=False, ers_requested=False, zone_open=True)
        assert electronics.get_accel_multiplier() == 1.0
        assert electronics.get_speed_cap_bonus() == 0.0


class TestCar:
    """Test car state."""

    def test_car_initial_state(self):
        """Test a new car is at rest with a full store."""
        car = Car("c1", "Alice", CarType.HUMAN, "#00e3a9", progress=30.0)

        assert car.progress == 30.0
        assert car.velocity == 0.0
        assert car.energy == 4.0
        assert not car.drs_active
        assert not car.ers_active
        assert not car.is_ai

    def test_car_state_keys(self):
        """Test client-facing car state."""
        car = Car("c2", "AI-1", CarType.AI, "#ffd166")
        state = car.get_state()

        assert state == {
            "id": "c2",
            "name": "AI-1",
            "type": "ai",
            "color": "#ffd166",
            "progress": 0.0,
            "velocity": 0.0,
            "energy": 4.0,
            "drsActive": False,
            "ersActive": False,
        }

    def test_default_inputs(self):
        """Test inputs default to coasting."""
        inputs = CarInputs()
        assert (inputs.throttle, inputs.brake, inputs.drs, inputs.ers) == (0.0, 0.0, False, False)


class TestAutopilot:
    """Test default AI driver."""

    def test_flat_out_outside_zones(self):
        """Test full throttle and no assists outside DRS zones."""
        track = build_monza_track()
        car = Car("ai", "AI-1", CarType.AI, progress=0.0)

        inputs = AutopilotPolicy().decide(car, track)
        assert inputs == CarInputs(throttle=1.0, brake=0.0, drs=False, ers=False)

    def test_assists_inside_zone(self):
        """Test DRS and ERS are requested inside a zone."""
        track = build_monza_track()
        car = Car("ai", "AI-1", CarType.AI, progress=500.0)

        inputs = AutopilotPolicy().decide(car, track)
        assert inputs.drs
        assert inputs.ers

    def test_keeps_energy_reserve(self):
        """Test ERS is held back at or below the reserve."""
        track = build_monza_track()
        car = Car("ai", "AI-1", CarType.AI, progress=500.0)
        car.electronics.ers.energy = 0.4

        inputs = AutopilotPolicy().decide(car, track)
        assert inputs.drs
        assert not inputs.ers

    def test_configurable_throttle(self):
        """Test autopilot throttle can be tuned."""
        track = build_monza_track()
        car = Car("ai", "AI-1", CarType.AI)

        inputs = AutopilotPolicy(AutopilotConfig(throttle=0.88)).decide(car, track)
        assert inputs.throttle == 0.88
