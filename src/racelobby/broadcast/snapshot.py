"""
Snapshot - Wire format of lobby state.

A snapshot is the JSON object pushed on every tick and returned by
the one-shot lobby endpoint. Stream events wrap it in an SSE frame.
"""

import json
from typing import Any, Dict
import numpy as np

from racelobby.session.lobby import Lobby


class NumpyEncoder(json.JSONEncoder):
    """JSON encoder that handles numpy types."""

    def default(self, obj):
        if isinstance(obj, np.integer):
            return int(obj)
        if isinstance(obj, np.floating):
            return float(obj)
        if isinstance(obj, np.bool_):
            return bool(obj)
        if isinstance(obj, np.ndarray):
            return obj.tolist()
        return super().default(obj)


def serialize_lobby(lobby: Lobby) -> Dict[str, Any]:
    """Build the client-facing snapshot of a lobby.

    Args:
        lobby: Lobby to serialize

    Returns:
        Dictionary with lobby id, tick, track summary and all cars
    """
    return {
        "lobbyId": lobby.lobby_id,
        "tick": lobby.tick,
        "track": lobby.track.get_summary(),
        "cars": [car.get_state() for car in lobby.cars],
    }


def encode_json(payload: Any) -> str:
    """Encode a payload as compact JSON."""
    return json.dumps(payload, cls=NumpyEncoder, separators=(",", ":"))


def encode_event(snapshot: Dict[str, Any]) -> str:
    """Wrap a snapshot in a server-sent event frame."""
    return f"data: {encode_json(snapshot)}\n\n"
