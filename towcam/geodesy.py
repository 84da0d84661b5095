"""
Bearing and destination-point calculations on the Earth.

Two interchangeable implementations of the ``Geodesy`` protocol:

1. ``WGS84Geodesy``: geodesics on the WGS84 ellipsoid via ``pyproj.Geod``
   (accurate at all distances, the default)
2. ``SphericalGeodesy``: great-circle formulas on a sphere of mean Earth
   radius (closed form, no dependencies beyond ``math``)

Coordinate Convention:
    Points are (longitude, latitude) in decimal degrees, matching pyproj's
    always_xy ordering. Bearings are degrees clockwise from North in [0, 360).
"""

from __future__ import annotations

import math
import re
from dataclasses import dataclass
from typing import Protocol

from pyproj import Geod

from towcam.types import Degrees, Meters

# Earth's mean radius in meters (WGS84 spherical approximation)
EARTH_RADIUS_M = 6371000.0


@dataclass(frozen=True)
class GeoPoint:
    """Geographic position in decimal degrees.

    Attributes:
        lon: Longitude (negative = West)
        lat: Latitude (negative = South)
    """

    lon: Degrees
    lat: Degrees


class Geodesy(Protocol):
    """Bearing, destination-point and distance service."""

    def initial_bearing(self, origin: GeoPoint, target: GeoPoint) -> Degrees:
        """Initial bearing from ``origin`` towards ``target``."""
        ...

    def destination(self, origin: GeoPoint, bearing_deg: Degrees, distance_m: Meters) -> GeoPoint:
        """Point reached travelling ``distance_m`` from ``origin`` on ``bearing_deg``."""
        ...

    def distance(self, origin: GeoPoint, target: GeoPoint) -> Meters:
        """Shortest distance over the surface between two points."""
        ...


class WGS84Geodesy:
    """Geodesics on the WGS84 ellipsoid using pyproj."""

    def __init__(self, ellps: str = "WGS84"):
        """
        Args:
            ellps: Ellipsoid name understood by ``pyproj.Geod``
        """
        self.ellps = ellps
        self._geod = Geod(ellps=ellps)

    def initial_bearing(self, origin: GeoPoint, target: GeoPoint) -> Degrees:
        forward_az, _, _ = self._geod.inv(origin.lon, origin.lat, target.lon, target.lat)
        return Degrees(forward_az % 360)

    def destination(self, origin: GeoPoint, bearing_deg: Degrees, distance_m: Meters) -> GeoPoint:
        lon, lat, _ = self._geod.fwd(origin.lon, origin.lat, bearing_deg, distance_m)
        return GeoPoint(lon=Degrees(lon), lat=Degrees(lat))

    def distance(self, origin: GeoPoint, target: GeoPoint) -> Meters:
        _, _, dist = self._geod.inv(origin.lon, origin.lat, target.lon, target.lat)
        return Meters(dist)


class SphericalGeodesy:
    """Great-circle formulas on a sphere."""

    def __init__(self, radius_m: float = EARTH_RADIUS_M):
        self.radius_m = radius_m

    def initial_bearing(self, origin: GeoPoint, target: GeoPoint) -> Degrees:
        return Degrees(bearing_between_points(origin.lat, origin.lon, target.lat, target.lon))

    def destination(self, origin: GeoPoint, bearing_deg: Degrees, distance_m: Meters) -> GeoPoint:
        lat1 = math.radians(origin.lat)
        lon1 = math.radians(origin.lon)
        bearing = math.radians(bearing_deg)
        angular = distance_m / self.radius_m

        lat2 = math.asin(
            math.sin(lat1) * math.cos(angular)
            + math.cos(lat1) * math.sin(angular) * math.cos(bearing)
        )
        lon2 = lon1 + math.atan2(
            math.sin(bearing) * math.sin(angular) * math.cos(lat1),
            math.cos(angular) - math.sin(lat1) * math.sin(lat2),
        )

        # Normalize longitude to [-180, 180)
        lon2_deg = (math.degrees(lon2) + 540) % 360 - 180
        return GeoPoint(lon=Degrees(lon2_deg), lat=Degrees(math.degrees(lat2)))

    def distance(self, origin: GeoPoint, target: GeoPoint) -> Meters:
        return Meters(haversine_distance(origin.lat, origin.lon, target.lat, target.lon, self.radius_m))


def haversine_distance(
    lat1: float, lon1: float, lat2: float, lon2: float, radius_m: float = EARTH_RADIUS_M
) -> float:
    """Great-circle distance in meters between two points given in decimal degrees."""
    phi1, phi2 = math.radians(lat1), math.radians(lat2)
    half_dphi = math.radians(lat2 - lat1) / 2
    half_dlambda = math.radians(lon2 - lon1) / 2

    h = math.sin(half_dphi) ** 2 + math.cos(phi1) * math.cos(phi2) * math.sin(half_dlambda) ** 2
    # h can round just above 1 for antipodal points; NaN passes through min()
    return 2 * radius_m * math.asin(math.sqrt(min(h, 1.0)))


def bearing_between_points(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """
    Calculate bearing from point 1 to point 2.

    Returns:
        Bearing in degrees (0° = North, 90° = East, 180° = South, 270° = West)
    """
    lat1_rad = math.radians(lat1)
    lat2_rad = math.radians(lat2)
    delta_lon = math.radians(lon2 - lon1)

    x = math.sin(delta_lon) * math.cos(lat2_rad)
    y = math.cos(lat1_rad) * math.sin(lat2_rad) - \
        math.sin(lat1_rad) * math.cos(lat2_rad) * math.cos(delta_lon)

    bearing_deg = math.degrees(math.atan2(x, y))

    # Normalize to 0-360
    return (bearing_deg + 360) % 360


def get_cardinal_direction(bearing: float) -> str:
    """Convert bearing to cardinal direction."""
    directions = ["N", "NNE", "NE", "ENE", "E", "ESE", "SE", "SSE",
                  "S", "SSW", "SW", "WSW", "W", "WNW", "NW", "NNW"]
    index = round(bearing / 22.5) % 16
    return directions[index]


def parse_coordinate(value: str) -> float:
    """
    Parse a coordinate given as decimal degrees or a DMS string.

    Supports formats like:
    - "-0.2301"
    - "39°38'25.72\"N"
    - "0°13'48.63\"W"

    Returns:
        Decimal degrees (negative for S/W)

    Raises:
        ValueError: If the format is not recognised
    """
    try:
        return float(value)
    except ValueError:
        pass

    pattern = r"""(\d+)°(\d+)'([\d.]+)"?([NSEW])"""
    match = re.match(pattern, value.strip())
    if not match:
        raise ValueError(f"Invalid coordinate format: {value}")

    degrees = int(match.group(1))
    minutes = int(match.group(2))
    seconds = float(match.group(3))
    direction = match.group(4)

    dd = degrees + minutes / 60 + seconds / 3600

    if direction in ("S", "W"):
        dd = -dd

    return dd
