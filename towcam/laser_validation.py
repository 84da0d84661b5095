"""
Cross-validation of trigonometric image width against laser dots.

The trigonometric width at the laser row depends on the camera height and
tilt, which are often only roughly known on a towed sled. Comparing it with
the laser-derived width shows how far off the assumed geometry is, and a
simple local search finds the tilt (at fixed height) or the height (at fixed
tilt) that would reconcile the two.

The search is a bidirectional hill climb: starting from the assumed value it
steps down until the width difference stops improving, then steps up from
the assumed value again. It finds the first local minimum in each direction,
not the global one.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Callable

from towcam.area_of_view import compute_area_of_view, compute_image_width_at_position
from towcam.config import SearchSettings
from towcam.diagnostics import WarningCode
from towcam.laser_scale import image_width_from_lasers
from towcam.pixel_point import PixelPoint
from towcam.types import Degrees, Meters, Unitless

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ValidationResult:
    """Comparison of trigonometric and laser-based image widths.

    Attributes:
        laser_height: Height of the laser dots (0 = bottom, 1 = top)
        laser_width: Laser-based image width at the laser row (m)
        trig_width: Trigonometric image width at the laser row (m)
        width_difference: Absolute difference of the two widths (m)
        best_angle: Tilt that best matches the laser width at fixed height
        best_angle_difference: Width difference at ``best_angle``
        best_height: Height that best matches the laser width at fixed tilt
        best_height_difference: Width difference at ``best_height``
        trig_area_orig: Full-frame area with the original parameters (m^2)
        trig_area_best_angle: Full-frame area using ``best_angle`` (m^2)
        trig_area_best_height: Full-frame area using ``best_height`` (m^2)
        warnings: Advisory warning codes from the laser reference
    """

    laser_p1: PixelPoint
    laser_p2: PixelPoint
    laser_distance_m: Meters
    pixel_dims: PixelPoint
    height: Meters
    angle: Degrees
    vfov_deg: Degrees
    hfov_deg: Degrees
    laser_height: Unitless
    laser_width: Meters
    trig_width: Meters
    width_difference: Meters
    best_angle: Degrees
    best_angle_difference: Meters
    best_height: Meters
    best_height_difference: Meters
    trig_area_orig: float
    trig_area_best_angle: float
    trig_area_best_height: float
    warnings: tuple[WarningCode, ...] = ()


def _hill_climb(
    start: float,
    start_difference: float,
    step: float,
    difference_at: Callable[[float], float],
    max_iterations: int,
) -> tuple[float, float]:
    """
    Step down then up from ``start`` while the difference keeps improving.

    Each direction restarts at ``start`` and is compared against the best
    difference found so far. A direction ends at the first step that is
    worse than the best (non-finite differences count as worse) or after
    ``max_iterations`` steps.

    Returns:
        Tuple of (best value, difference at best value)
    """
    best_value = start
    best_difference = start_difference

    for increment in (-step, step):
        value = start
        current = best_difference
        iterations = 0
        while current <= best_difference and iterations < max_iterations:
            value += increment
            iterations += 1
            current = difference_at(value)
            if current < best_difference:
                best_difference = current
                best_value = value
        if current <= best_difference:
            logger.warning(
                f"Search stopped after {max_iterations} steps of {increment:+g} "
                f"without leaving the improving region (best={best_value:g})"
            )

    return best_value, best_difference


def validate_with_lasers(
    laser_p1: PixelPoint,
    laser_p2: PixelPoint,
    real_distance_m: Meters,
    pixel_dims: PixelPoint,
    height: Meters,
    tilt_deg: Degrees,
    vfov_deg: Degrees,
    hfov_deg: Degrees,
    search: SearchSettings | None = None,
) -> ValidationResult:
    """
    Compare trigonometric image width with the width measured by lasers.

    Args:
        laser_p1: Pixel coordinates of the first laser dot
        laser_p2: Pixel coordinates of the second laser dot
        real_distance_m: Distance between the laser dots (m)
        pixel_dims: Image width (x) and height (y) in pixels
        height: Assumed camera height above the seabed (m)
        tilt_deg: Assumed camera tilt below horizontal (degrees)
        vfov_deg: Vertical field of view (degrees)
        hfov_deg: Horizontal field of view (degrees)
        search: Step sizes and iteration bound of the hill climb

    Returns:
        ValidationResult with widths, differences, best-fit parameters and
        the full-frame areas they imply

    Example:
        >>> validate_with_lasers(PixelPoint(400, 900), PixelPoint(700, 900), 0.2,
        ...                      PixelPoint(2000, 1000), 0.55, 28.8, 40.3, 66.4)
    """
    if search is None:
        search = SearchSettings()

    laser = image_width_from_lasers(laser_p1, laser_p2, real_distance_m, pixel_dims)
    position = laser.laser_height

    trig_width = compute_image_width_at_position(height, tilt_deg, vfov_deg, hfov_deg, position=position)
    width_difference = abs(laser.image_width - trig_width)

    def _difference(width: float) -> float:
        difference = abs(laser.image_width - width)
        return difference if math.isfinite(difference) else math.inf

    if math.isfinite(laser.image_width):
        # Tilt that matches the laser width, holding height fixed
        best_angle, best_angle_difference = _hill_climb(
            tilt_deg,
            _difference(trig_width),
            search.angle_step_deg,
            lambda angle: _difference(
                compute_image_width_at_position(height, angle, vfov_deg, hfov_deg, position=position)
            ),
            search.max_iterations,
        )

        # Height that matches the laser width, holding tilt fixed
        best_height, best_height_difference = _hill_climb(
            height,
            _difference(trig_width),
            search.height_step_m,
            lambda h: _difference(
                compute_image_width_at_position(h, tilt_deg, vfov_deg, hfov_deg, position=position)
            ),
            search.max_iterations,
        )
    else:
        logger.warning(
            f"Laser width is {laser.image_width} m (dots {laser_p1} and {laser_p2}); "
            f"skipping the tilt and height search"
        )
        best_angle, best_angle_difference = tilt_deg, width_difference
        best_height, best_height_difference = height, width_difference

    logger.debug(
        f"Laser width {laser.image_width:.3f} m vs trig width {trig_width:.3f} m; "
        f"best angle {best_angle:.1f} deg, best height {best_height:.2f} m"
    )

    trig_area_orig = compute_area_of_view(height, tilt_deg, vfov_deg, hfov_deg, proportion=1).area_s
    trig_area_best_angle = compute_area_of_view(height, best_angle, vfov_deg, hfov_deg, proportion=1).area_s
    trig_area_best_height = compute_area_of_view(best_height, tilt_deg, vfov_deg, hfov_deg, proportion=1).area_s

    return ValidationResult(
        laser_p1=laser_p1,
        laser_p2=laser_p2,
        laser_distance_m=real_distance_m,
        pixel_dims=pixel_dims,
        height=height,
        angle=tilt_deg,
        vfov_deg=vfov_deg,
        hfov_deg=hfov_deg,
        laser_height=position,
        laser_width=laser.image_width,
        trig_width=trig_width,
        width_difference=Meters(width_difference),
        best_angle=Degrees(best_angle),
        best_angle_difference=Meters(best_angle_difference),
        best_height=Meters(best_height),
        best_height_difference=Meters(best_height_difference),
        trig_area_orig=trig_area_orig,
        trig_area_best_angle=trig_area_best_angle,
        trig_area_best_height=trig_area_best_height,
        warnings=laser.warnings,
    )
