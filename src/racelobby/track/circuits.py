"""
Circuits - Built-in circuit definitions.

Point tables are normalized to the unit square, ready for renderers to
scale onto a canvas. Lengths are real-world lap lengths in meters.
"""

from racelobby.track.track import Track, TrackConfig


MONZA_POINTS = [
    (0.52, 0.92),
    (0.55, 0.83),
    (0.57, 0.62),
    (0.56, 0.40),
    (0.47, 0.25),
    (0.40, 0.18),
    (0.28, 0.13),
    (0.15, 0.21),
    (0.11, 0.35),
    (0.15, 0.48),
    (0.30, 0.63),
    (0.48, 0.70),
    (0.75, 0.72),
    (0.90, 0.80),
    (0.88, 0.92),
    (0.70, 0.93),
    (0.52, 0.92),  # Closes the loop at the start/finish line
]

MONZA_CONFIG = TrackConfig(
    name="Monza",
    length_m=5793.0,
    drs_zone_fractions=((0.03, 0.20), (0.55, 0.77)),
    slipstream_range_m=35.0,
)


def build_monza_track() -> Track:
    """Build the Autodromo Nazionale Monza layout.

    Returns:
        Finalized Monza track
    """
    return Track(MONZA_POINTS, MONZA_CONFIG)
