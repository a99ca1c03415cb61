"""
Status Messages
===============

Classifies hull speed into the bands shown on the status line.
"""

from enum import Enum


class SpeedBand(Enum):
    """Speed bands, slowest first. Value is the displayed label."""
    STOPPED = "Stopped"
    NEARLY_STOPPED = "Nearly stopped"
    LOW_SPEED = "Moving forward at low speed"
    FORWARD = "Moving forward"
    HIGH_SPEED = "Moving forward at high speed"
    FULL_SPEED = "Full speed forward"


# Upper bound (exclusive) of each band, evaluated first-match
SPEED_BAND_LIMITS = (
    (1.0, SpeedBand.STOPPED),
    (10.0, SpeedBand.NEARLY_STOPPED),
    (50.0, SpeedBand.LOW_SPEED),
    (100.0, SpeedBand.FORWARD),
    (150.0, SpeedBand.HIGH_SPEED),
)


def classify_velocity(velocity: float) -> SpeedBand:
    """
    Return the speed band for a velocity.

    Each limit belongs to the faster band: 10.0 is LOW_SPEED.
    """
    for limit, band in SPEED_BAND_LIMITS:
        if velocity < limit:
            return band
    return SpeedBand.FULL_SPEED


def format_status(label: str, velocity: float) -> str:
    """Status line text, e.g. 'Moving forward. 62.5000'."""
    return f"{label}. {velocity:.4f}"
