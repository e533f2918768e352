"""
Lobby - State of one race session.

Manages:
- Human cars keyed by player id, AI cars in join order
- Latest control inputs per human player
- Open broadcast subscriptions
- Tick counter and activity timestamps
"""

import threading
import time
from typing import TYPE_CHECKING, Dict, List, Optional

from racelobby.car.car import Car, CarInputs
from racelobby.track.track import Track

if TYPE_CHECKING:
    from racelobby.broadcast.subscription import Subscription


class Lobby:
    """State container for a single race session.

    A lobby is mutated by its tick and by request handlers. Both hold
    ``lock`` while they touch cars or inputs, so a lobby only ever has
    one writer at a time.
    """

    def __init__(self, lobby_id: str, track: Track, now: float | None = None):
        """Initialize an empty lobby.

        Args:
            lobby_id: Unique lobby id
            track: Circuit the lobby races on
            now: Monotonic timestamp of creation (for idle tracking)
        """
        self.lobby_id = lobby_id
        self.track = track
        self.created_at: float = time.time()
        self.last_activity: float = time.monotonic() if now is None else now

        self.players: Dict[str, Car] = {}
        self.ai: List[Car] = []
        self.inputs: Dict[str, CarInputs] = {}
        self.subscriptions: Dict[str, "Subscription"] = {}

        self.tick: int = 0
        self.lock = threading.RLock()

    @property
    def cars(self) -> List[Car]:
        """All cars, humans first then AI."""
        return list(self.players.values()) + list(self.ai)

    @property
    def car_count(self) -> int:
        """Number of cars in the lobby."""
        return len(self.players) + len(self.ai)

    @property
    def age_s(self) -> float:
        """Wall-clock seconds since the lobby was created."""
        return time.time() - self.created_at

    @property
    def subscriber_count(self) -> int:
        """Number of open subscriptions."""
        return len(self.subscriptions)

    def has_player(self, player_id: str) -> bool:
        """Check if a player id names a human car here."""
        return player_id in self.players

    def get_car(self, car_id: str) -> Optional[Car]:
        """Get car by id, human or AI.

        Args:
            car_id: Car id

        Returns:
            Car if found, None otherwise
        """
        car = self.players.get(car_id)
        if car is not None:
            return car
        for bot in self.ai:
            if bot.car_id == car_id:
                return bot
        return None

    def add_player(self, car: Car) -> None:
        """Add a human car."""
        self.players[car.car_id] = car

    def add_ai(self, car: Car) -> None:
        """Append an AI car."""
        self.ai.append(car)

    def touch(self, now: float | None = None) -> None:
        """Record activity for idle tracking."""
        self.last_activity = time.monotonic() if now is None else now

    def close_subscriptions(self) -> int:
        """Close and drop every subscription.

        Returns:
            Number of subscriptions closed
        """
        subscriptions = list(self.subscriptions.values())
        self.subscriptions.clear()
        for subscription in subscriptions:
            subscription.close()
        return len(subscriptions)

    def __repr__(self) -> str:
        return (
            f"Lobby(id={self.lobby_id!r}, players={len(self.players)}, "
            f"ai={len(self.ai)}, tick={self.tick})"
        )
