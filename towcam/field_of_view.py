"""
In-water field of view.

A camera housed behind a flat port sees a narrower field of view underwater
than in air because light refracts at the port. The relationship used here
is Snell's law applied at the half angle:

    FOV_water = 2 * asin(sin(FOV_air / 2) / n)

where ``n`` is the refractive index of water. The default of 1.34 suits
shallow marine water; fresh shallow water is closer to 1.33 and cold, deep,
saline water can exceed 1.35.
"""

import numpy as np

from towcam.angles import to_degrees, to_radians
from towcam.config import DEFAULT_REFRACTIVE_INDEX
from towcam.types import Degrees, Radians, Unitless


def in_water_fov(fov_deg: Degrees, refractive_index: Unitless = DEFAULT_REFRACTIVE_INDEX) -> Degrees:
    """
    Convert an in-air field of view angle to its in-water equivalent.

    Args:
        fov_deg: In-air field of view in degrees
        refractive_index: Refractive index of the water

    Returns:
        In-water field of view in degrees. ``nan`` when
        ``sin(fov/2) / refractive_index`` falls outside [-1, 1].
    """
    half_angle = to_radians(Degrees(fov_deg / 2))
    with np.errstate(invalid="ignore", divide="ignore"):
        refracted = np.arcsin(np.sin(half_angle) / np.float64(refractive_index))
    return Degrees(float(to_degrees(Radians(refracted))) * 2)
