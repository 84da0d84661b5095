"""
Image width from parallel laser dots.

Two parallel lasers mounted a known distance apart project dots onto the
seabed. On a flat seabed, and with the dots on the same image row, the
image width at that row is the laser separation scaled by the fraction of
the image width the dots span.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

import numpy as np

from towcam.config import LASER_HORIZONTAL_TOLERANCE
from towcam.diagnostics import WarningCode
from towcam.pixel_point import PixelPoint
from towcam.types import Meters, Unitless

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LaserReference:
    """Laser-based image width at the height of the laser dots.

    Attributes:
        laser_p1: First laser dot (pixels, top-left origin)
        laser_p2: Second laser dot (pixels, top-left origin)
        laser_distance_m: Physical separation of the dots (m)
        pixel_dims: Image dimensions as a point (x = width, y = height)
        laser_height: Height of the dots as a fraction of image height
            (0 = bottom, 1 = top)
        laser_distance_x_pix: Horizontal separation of the dots (pixels)
        laser_distance_y_pct: Vertical separation of the dots as a fraction
            of image height
        image_width: Inferred seabed width of the image at the laser row (m)
        warnings: Advisory warning codes
    """

    laser_p1: PixelPoint
    laser_p2: PixelPoint
    laser_distance_m: Meters
    pixel_dims: PixelPoint
    laser_height: Unitless
    laser_distance_x_pix: float
    laser_distance_y_pct: Unitless
    image_width: Meters
    warnings: tuple[WarningCode, ...] = ()


def image_width_from_lasers(
    p1: PixelPoint,
    p2: PixelPoint,
    real_distance_m: Meters,
    pixel_dims: PixelPoint,
    horizontal_tolerance: Unitless = LASER_HORIZONTAL_TOLERANCE,
) -> LaserReference:
    """
    Estimate the image width from two laser dots.

    Args:
        p1: Pixel coordinates of the first laser dot
        p2: Pixel coordinates of the second laser dot
        real_distance_m: Distance between the laser dots in meters
        pixel_dims: Image width (x) and height (y) in pixels
        horizontal_tolerance: Largest acceptable vertical separation of the
            dots, as a fraction of image height

    Returns:
        LaserReference. Carries a LASERS_NOT_HORIZONTAL warning when the dots
        are too far from the same row for the width to be reliable.

    Example:
        >>> ref = image_width_from_lasers(PixelPoint(10, 10), PixelPoint(50, 10), 0.2, PixelPoint(2000, 1000))
        >>> ref.image_width
        10.0
    """
    laser_distance_x_pix = abs(p1.x - p2.x)

    with np.errstate(divide="ignore", invalid="ignore"):
        laser_height = float(1 - ((p1.y + p2.y) / 2) / np.float64(pixel_dims.y))
        image_width = float(np.float64(real_distance_m * pixel_dims.x) / laser_distance_x_pix)
        laser_distance_y_pct = float(abs(p1.y - p2.y) / np.float64(pixel_dims.y))

    warnings: tuple[WarningCode, ...] = ()
    if laser_distance_y_pct >= horizontal_tolerance:
        logger.warning(
            f"Lasers are not horizontal in the image ({laser_distance_y_pct:.1%} of image "
            f"height apart) - image width will not be a good estimate"
        )
        warnings = (WarningCode.LASERS_NOT_HORIZONTAL,)

    return LaserReference(
        laser_p1=p1,
        laser_p2=p2,
        laser_distance_m=real_distance_m,
        pixel_dims=pixel_dims,
        laser_height=Unitless(laser_height),
        laser_distance_x_pix=laser_distance_x_pix,
        laser_distance_y_pct=Unitless(laser_distance_y_pct),
        image_width=Meters(image_width),
        warnings=warnings,
    )
