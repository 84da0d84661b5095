"""
Towed camera position by the layback method.

A towed sled trails behind the vessel. With the wire payed out and the water
depth known, the horizontal distance behind the vessel is the remaining side
of a right triangle:

    layback = sqrt(wire_length^2 - depth^2) + offset

where ``offset`` is the distance from the GPS receiver to the stern. The sled
is assumed to be directly behind the vessel, on the reverse of the course
from the start to the end of the tow.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

import numpy as np

from towcam.geodesy import GeoPoint, Geodesy, WGS84Geodesy
from towcam.types import Degrees, Meters

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LaybackResult:
    """Estimated camera positions at the start and end of a tow.

    Attributes:
        start: Vessel position at the start of the tow
        end: Vessel position at the end of the tow
        depth: Depth of the camera (m)
        wire_length: Wire payed out (m)
        offset: GPS receiver to stern distance (m)
        bearing_deg: Bearing from the vessel to the camera (reverse course)
        layback_distance: Horizontal camera distance behind the GPS (m)
        layback_start: Camera position at the start of the tow
        layback_end: Camera position at the end of the tow
        tow_length: Length of the vessel track, and so of the camera track (m)
    """

    start: GeoPoint
    end: GeoPoint
    depth: Meters
    wire_length: Meters
    offset: Meters
    bearing_deg: Degrees
    layback_distance: Meters
    layback_start: GeoPoint
    layback_end: GeoPoint
    tow_length: Meters


def layback_distance(depth: Meters, wire_length: Meters, offset: Meters = Meters(0.0)) -> Meters:
    """Horizontal distance of the camera behind the GPS receiver.

    NaN when the wire is shorter than the depth.
    """
    with np.errstate(invalid="ignore"):
        horizontal = np.sqrt(np.float64(wire_length) ** 2 - np.float64(depth) ** 2)
    return Meters(float(horizontal) + offset)


def estimate_layback(
    start: GeoPoint,
    end: GeoPoint,
    depth: Meters,
    wire_length: Meters,
    offset: Meters = Meters(0.0),
    geodesy: Geodesy | None = None,
) -> LaybackResult:
    """
    Estimate the position of a towed camera from the vessel track.

    Args:
        start: Vessel position at the start of the tow
        end: Vessel position at the end of the tow
        depth: Depth of the camera (m)
        wire_length: Length of wire payed out (m)
        offset: Distance from the GPS receiver to the stern (m)
        geodesy: Bearing, destination and distance service (default: WGS84 ellipsoid)

    Returns:
        LaybackResult with the camera positions at both ends of the tow

    Example:
        >>> estimate_layback(GeoPoint(0, 0), GeoPoint(1, 1), depth=100, wire_length=120)
    """
    if geodesy is None:
        geodesy = WGS84Geodesy()

    # Camera trails the vessel: bearing from the end of the tow back to its start
    bearing = geodesy.initial_bearing(end, start)

    distance = layback_distance(depth, wire_length, offset)
    if not np.isfinite(distance):
        logger.warning(
            f"Wire length {wire_length} m is shorter than depth {depth} m; "
            f"layback positions are undefined"
        )

    layback_start = geodesy.destination(start, bearing, distance)
    layback_end = geodesy.destination(end, bearing, distance)
    tow_length = geodesy.distance(start, end)
    logger.info(
        f"Tow of {tow_length:.1f} m; camera {distance:.1f} m behind the vessel on bearing {bearing:.1f} deg"
    )

    return LaybackResult(
        start=start,
        end=end,
        depth=depth,
        wire_length=wire_length,
        offset=offset,
        bearing_deg=bearing,
        layback_distance=distance,
        layback_start=layback_start,
        layback_end=layback_end,
        tow_length=tow_length,
    )
