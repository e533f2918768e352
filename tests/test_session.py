"""Tests for lobbies, the lobby registry and the input registry."""

import pytest

from racelobby.car.car import CarInputs, CarType
from racelobby.errors import LobbyNotFound, NotFound, PlayerNotFound
from racelobby.session.inputs import InputRegistry, clamp_unit
from racelobby.session.registry import LobbyRegistry, RegistryConfig, clamp_ai_count
from racelobby.session.retention import RetentionPolicy
from racelobby.broadcast.channel import BroadcastChannel
from racelobby.track.circuits import build_monza_track


class FakeClock:
    """Manually advanced monotonic clock."""

    def __init__(self, start: float = 0.0):
        self.now = start

    def __call__(self) -> float:
        return self.now


@pytest.fixture
def registry():
    return LobbyRegistry(build_monza_track(), RegistryConfig(seed=7))


class TestClampAiCount:
    """Test AI count coercion."""

    @pytest.mark.parametrize(
        "value, expected",
        [(0, 0), (3, 3), (6, 6), (10, 6), (-2, 0), (2.7, 3), (0.2, 1), (-0.5, 0), (10**30, 6),
         (float("nan"), 0), (float("inf"), 0), ("4", 0), (None, 0), (True, 0)],
    )
    def test_clamp(self, value, expected):
        """Test counts are clamped, not rejected."""
        assert clamp_ai_count(value, 6) == expected


class TestLobbyRegistry:
    """Test lobby creation and lookup."""

    def test_create_lobby_host_only(self, registry):
        """Test the host starts on pole at rest with a full store."""
        lobby, host_id = registry.create_lobby("Alice", ai_count=0)

        assert lobby.lobby_id in registry
        assert list(lobby.players) == [host_id]
        assert lobby.ai == []
        host = lobby.players[host_id]
        assert host.name == "Alice"
        assert host.car_type is CarType.HUMAN
        assert host.progress == 0.0
        assert host.velocity == 0.0
        assert host.energy == 4.0
        assert lobby.tick == 0

    def test_create_lobby_with_ai_grid(self, registry):
        """Test AI cars line up behind the host on the grid."""
        lobby, _ = registry.create_lobby("Alice", ai_count=3)

        assert [car.name for car in lobby.ai] == ["AI-1", "AI-2", "AI-3"]
        assert [car.progress for car in lobby.ai] == [30.0, 60.0, 90.0]
        assert all(car.is_ai for car in lobby.ai)

    def test_ai_count_clamped(self, registry):
        """Test oversized AI requests are clamped to the maximum."""
        lobby, _ = registry.create_lobby("Alice", ai_count=50)
        assert len(lobby.ai) == 6

    def test_default_host_name(self, registry):
        """Test a blank host name falls back to the default."""
        lobby, host_id = registry.create_lobby(None)
        assert lobby.players[host_id].name == "Host"

    def test_get_unknown_lobby(self, registry):
        """Test lookups of unknown lobbies fail."""
        with pytest.raises(LobbyNotFound):
            registry.get("missing")

    def test_lobbies_in_registration_order(self, registry):
        """Test lobbies are listed in creation order."""
        first, _ = registry.create_lobby("A")
        second, _ = registry.create_lobby("B")

        assert [l.lobby_id for l in registry.lobbies()] == [first.lobby_id, second.lobby_id]
        assert len(registry) == 2

    def test_join_places_car_last(self, registry):
        """Test joining drivers start behind every existing car."""
        lobby, _ = registry.create_lobby("Alice", ai_count=2)

        player_id = registry.join(lobby.lobby_id, "Bob")

        car = lobby.players[player_id]
        assert car.name == "Bob"
        assert car.car_type is CarType.HUMAN
        assert car.progress == 90.0
        assert lobby.car_count == 4

    def test_join_default_name(self, registry):
        """Test joiners without a name are called Driver."""
        lobby, _ = registry.create_lobby("Alice")
        player_id = registry.join(lobby.lobby_id)
        assert lobby.players[player_id].name == "Driver"

    def test_join_unknown_lobby(self, registry):
        """Test joining an unknown lobby is NotFound."""
        with pytest.raises(NotFound):
            registry.join("missing", "Bob")

    def test_add_ai(self, registry):
        """Test AI cars are appended with sequential names."""
        lobby, _ = registry.create_lobby("Alice", ai_count=1)

        ai_id = registry.add_ai(lobby.lobby_id)
        named_id = registry.add_ai(lobby.lobby_id, "Rival")

        assert lobby.get_car(ai_id).name == "AI-2"
        assert lobby.get_car(ai_id).progress == 60.0
        assert lobby.get_car(named_id).name == "Rival"
        assert [car.car_id for car in lobby.ai][-2:] == [ai_id, named_id]

    def test_add_ai_unknown_lobby(self, registry):
        """Test adding AI to an unknown lobby is NotFound."""
        with pytest.raises(LobbyNotFound):
            registry.add_ai("missing")

    def test_identities_are_unique(self, registry):
        """Test every car gets its own id."""
        lobby, _ = registry.create_lobby("Alice", ai_count=6)
        for i in range(20):
            registry.join(lobby.lobby_id, f"P{i}")
            registry.add_ai(lobby.lobby_id)

        ids = [car.car_id for car in lobby.cars]
        assert len(ids) == len(set(ids)) == 47

    def test_colors_from_palette(self, registry):
        """Test car colours come from the configured palette."""
        lobby, _ = registry.create_lobby("Alice", ai_count=6)
        assert all(car.color in registry.config.colors for car in lobby.cars)

    def test_lobby_age(self, registry):
        """Test lobbies know how long ago they were created."""
        lobby, _ = registry.create_lobby("Alice")
        assert 0.0 <= lobby.age_s < 60.0

    def test_grid_wraps_on_short_track(self):
        """Test grid slots past the line are wrapped into the lap."""
        from racelobby.track.track import Track, TrackConfig

        track = Track([(0, 0), (1, 0), (1, 1), (0, 0)], TrackConfig(length_m=50.0))
        registry = LobbyRegistry(track)
        lobby, _ = registry.create_lobby("Alice", ai_count=2)

        assert [car.progress for car in lobby.cars] == [0.0, 30.0, 10.0]


class TestRetention:
    """Test idle lobby reaping."""

    def test_idle_lobby_is_reaped(self):
        """Test lobbies idle past the timeout are dropped."""
        clock = FakeClock()
        registry = LobbyRegistry(
            build_monza_track(),
            RegistryConfig(retention=RetentionPolicy(idle_timeout_s=60.0)),
            clock=clock,
        )
        lobby, _ = registry.create_lobby("Alice")

        clock.now = 59.0
        assert registry.reap() == []

        clock.now = 61.0
        assert registry.reap() == [lobby.lobby_id]
        assert lobby.lobby_id not in registry

    def test_activity_postpones_reaping(self):
        """Test joins reset the idle timer."""
        clock = FakeClock()
        registry = LobbyRegistry(
            build_monza_track(),
            RegistryConfig(retention=RetentionPolicy(idle_timeout_s=60.0)),
            clock=clock,
        )
        lobby, _ = registry.create_lobby("Alice")

        clock.now = 50.0
        registry.join(lobby.lobby_id, "Bob")
        clock.now = 100.0
        assert registry.reap() == []
        clock.now = 111.0
        assert registry.reap() == [lobby.lobby_id]

    def test_watched_lobby_is_kept(self):
        """Test lobbies with subscribers are never reaped."""
        clock = FakeClock()
        registry = LobbyRegistry(
            build_monza_track(),
            RegistryConfig(retention=RetentionPolicy(idle_timeout_s=60.0)),
            clock=clock,
        )
        channel = BroadcastChannel(clock=clock)
        lobby, _ = registry.create_lobby("Alice")
        subscription = channel.subscribe(lobby)

        clock.now = 1000.0
        assert registry.reap() == []

        channel.unsubscribe(lobby, subscription.handle)
        clock.now = 1061.0
        assert registry.reap() == [lobby.lobby_id]

    def test_reaping_disabled(self):
        """Test a zero timeout keeps lobbies forever."""
        clock = FakeClock()
        registry = LobbyRegistry(
            build_monza_track(),
            RegistryConfig(retention=RetentionPolicy(idle_timeout_s=0.0)),
            clock=clock,
        )
        registry.create_lobby("Alice")

        clock.now = 1e9
        assert registry.reap() == []
        assert len(registry) == 1

    def test_remove_closes_subscriptions(self, registry):
        """Test removing a lobby closes its streams."""
        channel = BroadcastChannel()
        lobby, _ = registry.create_lobby("Alice")
        subscription = channel.subscribe(lobby)

        assert registry.remove(lobby.lobby_id)
        assert subscription.closed
        assert lobby.subscriber_count == 0
        assert not registry.remove(lobby.lobby_id)


class TestInputRegistry:
    """Test control input storage."""

    @pytest.mark.parametrize(
        "value, expected",
        [(0.5, 0.5), (-1, 0.0), (3, 1.0), (None, 0.0), ("x", 0.0),
         (float("nan"), 0.0), (float("inf"), 0.0), (True, 1.0)],
    )
    def test_clamp_unit(self, value, expected):
        """Test pedal values are clamped into [0, 1]."""
        assert clamp_unit(value) == expected

    def test_set_input_clamps(self, registry):
        """Test stored inputs are clamped and coerced."""
        inputs = InputRegistry(registry)
        lobby, host_id = registry.create_lobby("Alice")

        stored = inputs.set_input(lobby.lobby_id, host_id, throttle=1.7, brake=-0.2, drs=1, ers="")

        assert stored == CarInputs(throttle=1.0, brake=0.0, drs=True, ers=False)
        assert lobby.inputs[host_id] is stored

    def test_last_write_wins(self, registry):
        """Test later inputs overwrite earlier ones."""
        inputs = InputRegistry(registry)
        lobby, host_id = registry.create_lobby("Alice")

        inputs.set_input(lobby.lobby_id, host_id, throttle=1.0)
        inputs.set_input(lobby.lobby_id, host_id, throttle=0.25, brake=1.0)

        assert InputRegistry.get_input(lobby, host_id) == CarInputs(throttle=0.25, brake=1.0)

    def test_default_input(self, registry):
        """Test players without input coast."""
        lobby, host_id = registry.create_lobby("Alice")
        assert InputRegistry.get_input(lobby, host_id) == CarInputs()

    def test_unknown_lobby(self, registry):
        """Test inputs for unknown lobbies are NotFound."""
        inputs = InputRegistry(registry)
        with pytest.raises(LobbyNotFound):
            inputs.set_input("missing", "p1", throttle=1.0)

    def test_unknown_player_does_not_mutate(self, registry):
        """Test inputs for unknown players are rejected untouched."""
        inputs = InputRegistry(registry)
        lobby, _ = registry.create_lobby("Alice", ai_count=2)
        before = [car.get_state() for car in lobby.cars]

        with pytest.raises(PlayerNotFound):
            inputs.set_input(lobby.lobby_id, "nobody", throttle=1.0)
        with pytest.raises(PlayerNotFound):
            inputs.set_input(lobby.lobby_id, None, throttle=1.0)

        assert lobby.inputs == {}
        assert [car.get_state() for car in lobby.cars] == before

    def test_ai_cars_take_no_input(self, registry):
        """Test AI ids are not valid players."""
        inputs = InputRegistry(registry)
        lobby, _ = registry.create_lobby("Alice", ai_count=1)

        with pytest.raises(PlayerNotFound):
            inputs.set_input(lobby.lobby_id, lobby.ai[0].car_id, throttle=1.0)

    @pytest.mark.parametrize("player_id", [5, ["p"], {"id": "p"}])
    def test_non_string_player_id(self, registry, player_id):
        """Test player ids that are not strings name no player."""
        inputs = InputRegistry(registry)
        lobby, _ = registry.create_lobby("Alice")

        with pytest.raises(PlayerNotFound):
            inputs.set_input(lobby.lobby_id, player_id, throttle=1.0)
        assert lobby.inputs == {}
