"""
Input registry - Latest control inputs of human players.

Inputs are clamped on the way in so the physics step never has to
validate them. AI cars never read from here.
"""

import logging
from typing import Any
import numpy as np

from racelobby.car.car import CarInputs
from racelobby.errors import PlayerNotFound
from racelobby.session.lobby import Lobby
from racelobby.session.registry import LobbyRegistry

logger = logging.getLogger(__name__)


def clamp_unit(value: Any) -> float:
    """Clamp a pedal value into ``[0, 1]``; non-numbers count as zero."""
    if isinstance(value, bool):
        return float(value)
    try:
        value = float(value)
    except (TypeError, ValueError):
        return 0.0
    if not np.isfinite(value):
        return 0.0
    return float(np.clip(value, 0.0, 1.0))


class InputRegistry:
    """Stores the last input each human player submitted.

    Last write wins. An input that lands after a tick has started is
    simply picked up on the next tick.
    """

    def __init__(self, registry: LobbyRegistry):
        """Initialize against a lobby registry.

        Args:
            registry: Registry used to resolve lobby ids
        """
        self.registry = registry

    def set_input(
        self,
        lobby_id: str,
        player_id: Any,
        throttle: Any = 0.0,
        brake: Any = 0.0,
        drs: Any = False,
        ers: Any = False,
    ) -> CarInputs:
        """Store a player's control input.

        Args:
            lobby_id: Lobby id
            player_id: Human player id
            throttle: Throttle, clamped to [0, 1]
            brake: Brake, clamped to [0, 1]
            drs: DRS intent, coerced to bool
            ers: ERS intent, coerced to bool

        Returns:
            The stored inputs

        Raises:
            LobbyNotFound: If no lobby has this id
            PlayerNotFound: If the id is not a human car in the lobby
        """
        lobby = self.registry.get(lobby_id)
        inputs = CarInputs(
            throttle=clamp_unit(throttle),
            brake=clamp_unit(brake),
            drs=bool(drs),
            ers=bool(ers),
        )
        with lobby.lock:
            if not isinstance(player_id, str) or not lobby.has_player(player_id):
                raise PlayerNotFound(player_id)
            lobby.inputs[player_id] = inputs
            lobby.touch(self.registry.now())

        logger.debug(f"Input for {player_id} in lobby {lobby_id}: {inputs}")
        return inputs

    @staticmethod
    def get_input(lobby: Lobby, player_id: str) -> CarInputs:
        """Get a player's latest input.

        Args:
            lobby: Lobby the player is in
            player_id: Player id

        Returns:
            Stored inputs, or all-zero inputs if none were submitted
        """
        return lobby.inputs.get(player_id) or CarInputs()
