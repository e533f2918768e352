"""
Lobby registry - Creation, lookup and lifecycle of race sessions.

Provides:
- Lobby creation with a host and AI field
- Joining humans and adding AI cars
- Grid placement and identity assignment
- Idle lobby reaping
"""

import logging
import math
import threading
import time
import uuid
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Tuple
import numpy as np

from racelobby.car.car import Car, CarType
from racelobby.car.electronics import ElectronicsConfig
from racelobby.errors import LobbyNotFound
from racelobby.session.lobby import Lobby
from racelobby.session.retention import RetentionPolicy
from racelobby.track.track import Track

logger = logging.getLogger(__name__)


CAR_COLORS = ("#00e3a9", "#f06292", "#ffd166", "#66ccff", "#ff8f00", "#a569bd", "#4db6ac")


@dataclass
class RegistryConfig:
    """Lobby registry configuration."""
    # Maximum AI cars requested at creation (larger requests are clamped)
    max_ai: int = 6

    # Distance between consecutive grid slots (meters)
    grid_spacing_m: float = 30.0

    default_host_name: str = "Host"
    default_driver_name: str = "Driver"

    colors: Tuple[str, ...] = CAR_COLORS

    # Seed for colour choice (None for random)
    seed: int | None = None

    electronics: ElectronicsConfig | None = None
    retention: RetentionPolicy = field(default_factory=RetentionPolicy)


def clamp_ai_count(value: Any, max_ai: int) -> int:
    """Coerce a requested AI count into ``[0, max_ai]``.

    Anything that is not a finite number counts as zero. Fractional
    counts are rounded up, so 2.5 asks for three cars.
    """
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return 0
    if isinstance(value, float):
        if not math.isfinite(value):
            return 0
        value = math.ceil(value)
    # Python ints can exceed int64, so clamp without numpy
    return max(0, min(value, max_ai))


class LobbyRegistry:
    """Process-wide registry of lobbies.

    Lobbies are kept in registration order, which is also the order
    the tick scheduler advances them in.

    Usage:
        registry = LobbyRegistry(build_monza_track())
        lobby, host_id = registry.create_lobby("Alice", ai_count=3)
        player_id = registry.join(lobby.lobby_id, "Bob")
    """

    def __init__(
        self,
        track: Track,
        config: RegistryConfig | None = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        """Initialize an empty registry.

        Args:
            track: Circuit every lobby races on
            config: Registry configuration. Uses defaults if None.
            clock: Monotonic clock used for idle tracking
        """
        self.track = track
        self.config = config or RegistryConfig()
        self._clock = clock

        self._lobbies: Dict[str, Lobby] = {}
        self._lock = threading.Lock()
        self._rng = np.random.default_rng(self.config.seed)

    @property
    def retention(self) -> RetentionPolicy:
        """Idle retention policy."""
        return self.config.retention

    def now(self) -> float:
        """Current monotonic time used for idle tracking."""
        return self._clock()

    def __len__(self) -> int:
        return len(self._lobbies)

    def __contains__(self, lobby_id: object) -> bool:
        return lobby_id in self._lobbies

    def lobbies(self) -> List[Lobby]:
        """Snapshot of all lobbies in registration order."""
        with self._lock:
            return list(self._lobbies.values())

    def get(self, lobby_id: str) -> Lobby:
        """Look up a lobby.

        Args:
            lobby_id: Lobby id

        Returns:
            The lobby

        Raises:
            LobbyNotFound: If no lobby has this id
        """
        lobby = self._lobbies.get(lobby_id)
        if lobby is None:
            raise LobbyNotFound(lobby_id)
        return lobby

    def create_lobby(self, host_name: str | None = None, ai_count: Any = 0) -> Tuple[Lobby, str]:
        """Create a lobby with a human host and an AI field.

        Args:
            host_name: Host display name
            ai_count: Requested AI cars, clamped to ``[0, max_ai]``

        Returns:
            Tuple of (lobby, host player id)
        """
        count = clamp_ai_count(ai_count, self.config.max_ai)

        lobby = Lobby(uuid.uuid4().hex, self.track, now=self.now())
        host_id = uuid.uuid4().hex
        lobby.add_player(
            self._build_car(host_id, host_name or self.config.default_host_name, CarType.HUMAN, 0)
        )
        for i in range(count):
            lobby.add_ai(self._build_car(uuid.uuid4().hex, f"AI-{i + 1}", CarType.AI, i + 1))

        with self._lock:
            self._lobbies[lobby.lobby_id] = lobby

        logger.info(f"Lobby {lobby.lobby_id} created by {lobby.players[host_id].name} with {count} AI")
        return lobby, host_id

    def join(self, lobby_id: str, name: str | None = None) -> str:
        """Add a human car behind everyone already on the grid.

        Args:
            lobby_id: Lobby to join
            name: Driver display name

        Returns:
            New player id

        Raises:
            LobbyNotFound: If no lobby has this id
        """
        lobby = self.get(lobby_id)
        player_id = uuid.uuid4().hex
        with lobby.lock:
            car = self._build_car(
                player_id, name or self.config.default_driver_name, CarType.HUMAN, lobby.car_count
            )
            lobby.add_player(car)
            lobby.touch(self.now())

        logger.info(f"{car.name} joined lobby {lobby_id}")
        return player_id

    def add_ai(self, lobby_id: str, name: str | None = None) -> str:
        """Append an AI car to a lobby.

        Args:
            lobby_id: Lobby id
            name: Display name, defaults to ``AI-<n>``

        Returns:
            New AI car id

        Raises:
            LobbyNotFound: If no lobby has this id
        """
        lobby = self.get(lobby_id)
        ai_id = uuid.uuid4().hex
        with lobby.lock:
            car = self._build_car(
                ai_id, name or f"AI-{len(lobby.ai) + 1}", CarType.AI, lobby.car_count
            )
            lobby.add_ai(car)
            lobby.touch(self.now())

        logger.info(f"{car.name} added to lobby {lobby_id}")
        return ai_id

    def remove(self, lobby_id: str) -> bool:
        """Drop a lobby and close its subscriptions.

        Args:
            lobby_id: Lobby id

        Returns:
            True if a lobby was removed
        """
        with self._lock:
            lobby = self._lobbies.pop(lobby_id, None)
        if lobby is None:
            return False
        with lobby.lock:
            lobby.close_subscriptions()
        return True

    def reap(self, now: float | None = None) -> List[str]:
        """Remove lobbies the retention policy considers expired.

        Args:
            now: Current monotonic time (reads the clock if None)

        Returns:
            Ids of removed lobbies
        """
        if not self.retention.enabled:
            return []

        now = self.now() if now is None else now
        expired = [lobby for lobby in self.lobbies() if self.retention.is_expired(lobby, now)]
        for lobby in expired:
            if self.remove(lobby.lobby_id):
                logger.info(
                    f"Lobby {lobby.lobby_id} reaped after {self.retention.idle_timeout_s:.0f}s idle "
                    f"({lobby.age_s:.0f}s old)"
                )
        return [lobby.lobby_id for lobby in expired]

    def _build_car(self, car_id: str, name: str, car_type: CarType, grid_slot: int) -> Car:
        """Create a car at a grid slot with a random colour."""
        return Car(
            car_id=car_id,
            name=name,
            car_type=car_type,
            color=str(self._rng.choice(self.config.colors)),
            progress=self.track.normalize(grid_slot * self.config.grid_spacing_m),
            electronics_config=self.config.electronics,
        )
