"""Degree/radian conversion shared by the geometry modules."""

import math

from towcam.types import Degrees, Radians


def to_radians(deg: Degrees) -> Radians:
    """Convert an angle in degrees to radians."""
    return Radians(deg * math.pi / 180)


def to_degrees(rad: Radians) -> Degrees:
    """Convert an angle in radians to degrees."""
    return Degrees(rad * 180 / math.pi)
