"""
Broadcast module - Push delivery of lobby state.

This module contains:
- BroadcastChannel: Subscribe, unsubscribe and per-tick fan-out
- Subscription: Bounded non-blocking sink for one connection
- serialize_lobby / encode_event: Snapshot wire format
"""

from racelobby.broadcast.channel import BroadcastChannel
from racelobby.broadcast.subscription import Subscription
from racelobby.broadcast.snapshot import serialize_lobby, encode_event, encode_json

__all__ = [
    "BroadcastChannel",
    "Subscription",
    "serialize_lobby",
    "encode_event",
    "encode_json",
]
