"""
Track module - Static circuit geometry.

This module contains:
- Track: Immutable polyline with arc-length mapping and DRS zones
- TrackConfig: Circuit metadata (name, lap length, zones, slipstream range)
- DrsZone / TrackPoint: Zone intervals and interpolated positions
- build_monza_track: The default circuit
"""

from racelobby.track.track import Track, TrackConfig
from racelobby.track.features import DrsZone, TrackPoint
from racelobby.track.circuits import build_monza_track

__all__ = [
    "Track",
    "TrackConfig",
    "DrsZone",
    "TrackPoint",
    "build_monza_track",
]
