"""
Track - Static circuit geometry.

Contains:
- Closed polyline of normalized points
- Arc-length table (per-segment lengths, total polyline length)
- DRS zones and slipstream range
- Distance-to-position mapping for renderers
"""

from dataclasses import dataclass
from typing import Sequence, Tuple
import numpy as np

from racelobby.track.features import DrsZone, TrackPoint


@dataclass(frozen=True)
class TrackConfig:
    """Track configuration and metadata."""
    name: str = "Unnamed Circuit"

    # Real-world race distance of one lap (meters)
    length_m: float = 5000.0

    # DRS zones as (start, end) fractions of length_m
    drs_zone_fractions: Tuple[Tuple[float, float], ...] = ()

    # Forward distance inside which a following car gets a tow
    slipstream_range_m: float = 35.0


class Track:
    """Immutable race track.

    The polyline lives in normalized coordinates while car progress is
    expressed in meters along ``length``. Progress is mapped onto the
    polyline proportionally, so the renderer only needs the point table.

    Usage:
        track = Track(points, TrackConfig(name="Monza", length_m=5793.0))
        x, y, heading = track.point_at_distance(1200.0)
        track.drs_available(300.0)
    """

    def __init__(
        self,
        points: Sequence[Sequence[float]],
        config: TrackConfig | None = None,
    ):
        """Build track and derive the arc-length table.

        Args:
            points: Ordered closed polyline of (x, y) points
            config: Track configuration. Uses defaults if None.

        Raises:
            ValueError: If the polyline or zones are degenerate
        """
        self.config = config or TrackConfig()

        coords = np.asarray(points, dtype=float)
        if coords.ndim != 2 or coords.shape[1] != 2:
            raise ValueError("Track points must be a sequence of (x, y) pairs")
        if len(coords) < 2:
            raise ValueError("Track needs at least two points")
        if not np.all(np.isfinite(coords)):
            raise ValueError("Track points must be finite")
        if not np.isfinite(self.config.length_m) or self.config.length_m <= 0:
            raise ValueError("Track length must be positive")
        if self.config.slipstream_range_m < 0:
            raise ValueError("Slipstream range cannot be negative")

        deltas = np.diff(coords, axis=0)
        seg_lengths = np.hypot(deltas[:, 0], deltas[:, 1])
        if np.any(seg_lengths <= 0):
            # Zero-length segments make the arc-length table non-monotonic
            raise ValueError("Track polyline contains zero-length segments")

        self._points: Tuple[Tuple[float, float], ...] = tuple(
            (float(x), float(y)) for x, y in coords
        )
        self._segment_lengths: Tuple[float, ...] = tuple(float(s) for s in seg_lengths)
        self._polyline_length: float = float(seg_lengths.sum())

        length = self.config.length_m
        zones = []
        for start_frac, end_frac in self.config.drs_zone_fractions:
            zone = DrsZone(start_m=length * start_frac, end_m=length * end_frac)
            if zone.start_m < 0 or zone.end_m > length or zone.start_m >= zone.end_m:
                raise ValueError(
                    f"DRS zone [{zone.start_m}, {zone.end_m}) does not fit track length {length}"
                )
            zones.append(zone)
        self._drs_zones: Tuple[DrsZone, ...] = tuple(zones)

    @property
    def name(self) -> str:
        """Track name."""
        return self.config.name

    @property
    def length(self) -> float:
        """Logical lap length in meters."""
        return self.config.length_m

    @property
    def points(self) -> Tuple[Tuple[float, float], ...]:
        """Polyline points (normalized coordinates)."""
        return self._points

    @property
    def segment_lengths(self) -> Tuple[float, ...]:
        """Euclidean length of each polyline segment."""
        return self._segment_lengths

    @property
    def polyline_length(self) -> float:
        """Total polyline length in normalized units."""
        return self._polyline_length

    @property
    def drs_zones(self) -> Tuple[DrsZone, ...]:
        """Configured DRS zones."""
        return self._drs_zones

    @property
    def slipstream_range(self) -> float:
        """Slipstream trigger range in meters."""
        return self.config.slipstream_range_m

    def normalize(self, distance: float) -> float:
        """Wrap a distance into ``[0, length)``.

        Args:
            distance: Any distance in meters, may be negative or past a lap

        Returns:
            Equivalent distance within one lap
        """
        wrapped = distance % self.length
        # Tiny negative inputs round up to exactly length
        if wrapped >= self.length:
            return 0.0
        return wrapped

    def forward_distance(self, from_m: float, to_m: float) -> float:
        """Distance driven forward from one position to reach another.

        Args:
            from_m: Start progress in meters
            to_m: Target progress in meters

        Returns:
            Circular forward distance in ``[0, length)``
        """
        return ((to_m - from_m) + self.length) % self.length

    def point_at_distance(self, progress: float) -> TrackPoint:
        """Get polyline position and heading at a track distance.

        Args:
            progress: Distance along the track in meters

        Returns:
            TrackPoint with normalized x, y and heading in radians
        """
        distance = self.normalize(progress)
        target = (distance / self.length) * self._polyline_length

        traversed = 0.0
        for i, seg_len in enumerate(self._segment_lengths):
            if traversed + seg_len >= target:
                ratio = (target - traversed) / seg_len
                x1, y1 = self._points[i]
                x2, y2 = self._points[i + 1]
                return TrackPoint(
                    x=x1 + (x2 - x1) * ratio,
                    y=y1 + (y2 - y1) * ratio,
                    heading=float(np.arctan2(y2 - y1, x2 - x1)),
                )
            traversed += seg_len

        # Float accumulation can leave target just past the last segment
        x, y = self._points[-1]
        return TrackPoint(x=x, y=y, heading=0.0)

    def drs_available(self, progress: float) -> bool:
        """Check whether DRS may be opened at a track distance.

        Args:
            progress: Distance along the track in meters

        Returns:
            True if progress is inside any DRS zone
        """
        return any(zone.contains(progress) for zone in self._drs_zones)

    def get_summary(self) -> dict:
        """Short track description embedded in every lobby snapshot."""
        return {"name": self.name, "length": self.length}

    def get_state(self) -> dict:
        """Get complete static track data for clients.

        Returns:
            Dictionary containing geometry, zones and ranges
        """
        return {
            "name": self.name,
            "length": self.length,
            "points": [list(p) for p in self._points],
            "segmentLengths": list(self._segment_lengths),
            "polylineLength": self._polyline_length,
            "drsZones": [zone.get_state() for zone in self._drs_zones],
            "slipstreamRange": self.slipstream_range,
        }
