"""
Track features - DRS zones and track position records.

Defines:
- DrsZone: half-open interval along the track where DRS may be opened
- TrackPoint: interpolated position and heading on the circuit polyline
"""

from dataclasses import dataclass
from typing import NamedTuple


class TrackPoint(NamedTuple):
    """Position on the normalized polyline."""
    x: float
    y: float
    heading: float  # Radians, atan2 of the segment direction


@dataclass(frozen=True)
class DrsZone:
    """DRS activation zone.

    Distances are in meters along the logical track length, the same
    domain as car progress. The interval is half-open: ``[start, end)``.
    """
    start_m: float = 0.0
    end_m: float = 0.0

    @property
    def length(self) -> float:
        """Zone length in meters."""
        return self.end_m - self.start_m

    def contains(self, distance: float) -> bool:
        """Check whether a track distance lies inside the zone.

        Args:
            distance: Distance along the track in meters

        Returns:
            True if ``start <= distance < end``
        """
        return self.start_m <= distance < self.end_m

    def get_state(self) -> dict:
        """Get zone state for serialization."""
        return {"start": self.start_m, "end": self.end_m}
