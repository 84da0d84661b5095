"""
Seafloor area visible in an oblique camera frame.

The footprint of a tilted camera on a flat seabed is a trapezoid. Using the
notation of Nakajima et al. (2014), "A new method for estimating the area of
the seafloor from oblique images taken by deep-sea submersible survey
platforms", JAMSTEC Report of Research and Development 19, 59-66 (as used in
Long et al. 2020, Frontiers in Marine Science 7:460):

    O    camera, at height OH above the seabed
    BD   near (bottom-of-frame) edge of the footprint
    AE   far (top-of-frame) edge of the footprint
    GF   depth of the footprint along the viewing direction

    delta = pi - (pi/2 + theta + alpha/2)          bottom-edge ray from vertical
    AE    = 2 tan(beta/2) OH / cos(delta + alpha p)
    BD    = 2 tan(beta/2) OH / cos(delta)
    GF    = OH (tan(delta + alpha p) - tan(delta))
    S     = (AE + BD) GF / 2

with theta the tilt below horizontal, alpha the vertical FOV, beta the
horizontal FOV and p the proportion of the frame height (from the bottom
edge) that is measured.

SIGN CONVENTION:
    proportion = 0 is the bottom row of the image, proportion = 1 the top row.
    Increasing proportion rotates the measured edge away from the camera and
    towards the horizon. When delta + alpha * p reaches pi/2 the edge ray is
    parallel to the seabed and the formulas diverge; the result is returned
    as computed (possibly huge, negative or non-finite) with a
    VIEW_ABOVE_HORIZON warning attached.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass

import numpy as np

from towcam.angles import to_radians
from towcam.config import DEFAULT_PROPORTION, DEFAULT_WIDTH_POSITION
from towcam.diagnostics import WarningCode
from towcam.types import Degrees, Meters, Radians, Unitless

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AreaOfViewResult:
    """Footprint of an oblique camera on a flat seabed.

    Attributes:
        height: Camera height above the seabed (m)
        tilt_deg: Camera tilt below horizontal (degrees)
        vfov_deg: Vertical field of view (degrees)
        hfov_deg: Horizontal field of view (degrees)
        proportion: Fraction of the frame height measured
        alpha: Vertical field of view (radians)
        beta: Horizontal field of view (radians)
        delta: Angle of the bottom-edge ray from vertical (radians)
        theta: Camera tilt (radians)
        length_ae: Width of the far edge of the footprint (m)
        length_bd: Width of the near edge of the footprint (m)
        length_gf: Depth of the footprint (m)
        area_s: Footprint area (m^2)
        warnings: Advisory warning codes
    """

    height: Meters
    tilt_deg: Degrees
    vfov_deg: Degrees
    hfov_deg: Degrees
    proportion: Unitless
    alpha: Radians
    beta: Radians
    delta: Radians
    theta: Radians
    length_ae: Meters
    length_bd: Meters
    length_gf: Meters
    area_s: float
    warnings: tuple[WarningCode, ...] = ()

    @property
    def is_finite(self) -> bool:
        """True when every derived length and the area are finite numbers."""
        return all(
            math.isfinite(value)
            for value in (self.length_ae, self.length_bd, self.length_gf, self.area_s)
        )


@dataclass(frozen=True)
class ObliqueCameraGeometry:
    """One camera pose and lens configuration at capture time.

    Attributes:
        height_m: Camera height above the seabed (m)
        tilt_deg: Tilt below horizontal (0 = horizontal, 90 = straight down)
        vfov_deg: Vertical field of view (degrees)
        hfov_deg: Horizontal field of view (degrees)
    """

    height_m: Meters
    tilt_deg: Degrees
    vfov_deg: Degrees
    hfov_deg: Degrees

    def validate(self, proportion: Unitless = DEFAULT_PROPORTION) -> None:
        """Check the parameters are physically meaningful.

        The compute functions never call this; callers that want to reject
        bad input before computing do.

        Args:
            proportion: Fraction of the frame height that will be measured;
                its top row must look below the horizon.

        Raises:
            ValueError: If any parameter is out of range, or the measured
                strip reaches the horizon.
        """
        if not self.height_m > 0:
            raise ValueError(f"Camera height must be positive, got {self.height_m}")
        if not 0 <= self.tilt_deg <= 90:
            raise ValueError(f"Tilt angle {self.tilt_deg} is out of valid range [0, 90] degrees")
        for name, fov in (("Vertical", self.vfov_deg), ("Horizontal", self.hfov_deg)):
            if not 0 < fov < 180:
                raise ValueError(f"{name} FOV {fov} is out of valid range (0, 180) degrees")
        # delta + alpha*p < pi/2 reduces to vfov*(p - 1/2) < tilt
        if not self.vfov_deg * (proportion - 0.5) < self.tilt_deg:
            raise ValueError(
                f"Measured strip reaches the horizon: tilt {self.tilt_deg} deg is too shallow "
                f"for vfov {self.vfov_deg} deg at proportion {proportion}"
            )

    def area_of_view(self, proportion: Unitless = DEFAULT_PROPORTION) -> AreaOfViewResult:
        """Footprint of this geometry; see :func:`compute_area_of_view`."""
        return compute_area_of_view(
            self.height_m, self.tilt_deg, self.vfov_deg, self.hfov_deg, proportion
        )

    def image_width_at(self, position: Unitless = DEFAULT_WIDTH_POSITION) -> Meters:
        """Seabed width at one image row; see :func:`compute_image_width_at_position`."""
        return compute_image_width_at_position(
            self.height_m, self.tilt_deg, self.vfov_deg, self.hfov_deg, position
        )


def compute_area_of_view(
    height: Meters,
    tilt_deg: Degrees,
    vfov_deg: Degrees,
    hfov_deg: Degrees,
    proportion: Unitless = DEFAULT_PROPORTION,
) -> AreaOfViewResult:
    """
    Estimate the seabed area seen by a tilted camera.

    Args:
        height: Camera height above the seabed (m)
        tilt_deg: Camera tilt below horizontal (degrees)
        vfov_deg: Vertical field of view (degrees)
        hfov_deg: Horizontal field of view (degrees)
        proportion: Fraction of the frame height, from the bottom edge, to
            include (1.0 = whole frame)

    Returns:
        AreaOfViewResult with every intermediate angle and length
    """
    theta = to_radians(tilt_deg)
    alpha = to_radians(vfov_deg)
    beta = to_radians(hfov_deg)

    with np.errstate(divide="ignore", invalid="ignore", over="ignore"):
        delta = np.pi - (np.pi / 2 + np.float64(theta) + np.float64(alpha) / 2)
        far_edge = delta + alpha * proportion

        warnings: tuple[WarningCode, ...] = ()
        if not far_edge < np.pi / 2:
            logger.warning(
                f"Measured strip reaches the horizon (tilt={tilt_deg} deg, vfov={vfov_deg} deg, "
                f"proportion={proportion}). Area of view is not meaningful."
            )
            warnings = (WarningCode.VIEW_ABOVE_HORIZON,)

        edge_scale = 2 * np.tan(np.float64(beta) / 2) * height

        # 2tan(beta/2) * OH / cos(delta + alpha*p)
        length_ae = edge_scale / np.cos(far_edge)

        # 2tan(beta/2) * OH / cos(delta)
        length_bd = edge_scale / np.cos(delta)

        # OH * (tan(delta + alpha*p) - tan(delta))
        length_gf = height * (np.tan(far_edge) - np.tan(delta))

        area_s = (length_ae + length_bd) * length_gf / 2

    return AreaOfViewResult(
        height=height,
        tilt_deg=tilt_deg,
        vfov_deg=vfov_deg,
        hfov_deg=hfov_deg,
        proportion=proportion,
        alpha=alpha,
        beta=beta,
        delta=Radians(float(delta)),
        theta=theta,
        length_ae=Meters(float(length_ae)),
        length_bd=Meters(float(length_bd)),
        length_gf=Meters(float(length_gf)),
        area_s=float(area_s),
        warnings=warnings,
    )


def compute_image_width_at_position(
    height: Meters,
    tilt_deg: Degrees,
    vfov_deg: Degrees,
    hfov_deg: Degrees,
    position: Unitless = DEFAULT_WIDTH_POSITION,
) -> Meters:
    """
    Seabed width spanned by one image row.

    Args:
        height: Camera height above the seabed (m)
        tilt_deg: Camera tilt below horizontal (degrees)
        vfov_deg: Vertical field of view (degrees)
        hfov_deg: Horizontal field of view (degrees)
        position: Row as a fraction of image height (0 = bottom, 1 = top)

    Returns:
        Width in meters (the far-edge width of the strip ending at that row)
    """
    return compute_area_of_view(height, tilt_deg, vfov_deg, hfov_deg, proportion=position).length_ae
