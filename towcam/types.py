"""
Unit type annotations for type-safe numeric parameters.

This module defines NewType aliases for the physical units used across the
towcam codebase. They cost nothing at runtime but make function signatures
state their units, so a static checker can catch degrees passed where radians
are expected.

Usage Example:
    >>> from towcam.types import Degrees, Meters
    >>>
    >>> def image_width(height: Meters, tilt: Degrees) -> Meters:
    ...     pass
    >>>
    >>> width = image_width(Meters(0.55), Degrees(28.8))
"""

from typing import NewType

# Angular units
Degrees = NewType('Degrees', float)
"""Angle in degrees (e.g., tilt, field of view, latitude, longitude, bearing)"""

Radians = NewType('Radians', float)
"""Angle in radians (e.g., intermediate trigonometric calculations)"""

# Distance units
Meters = NewType('Meters', float)
"""Distance in meters (e.g., camera height, wire length, laser separation)"""

Millimeters = NewType('Millimeters', float)
"""Physical dimensions in millimeters (e.g., sensor width, focal length)"""

# Image coordinate units
Pixels = NewType('Pixels', int)
"""Image dimensions in pixels (e.g., width, height)"""

PixelsFloat = NewType('PixelsFloat', float)
"""Floating-point image coordinates in pixels (e.g., nadir, principal point)"""

# Dimensionless quantities
Unitless = NewType('Unitless', float)
"""Dimensionless scalar (e.g., refractive index, frame proportion, ratios)"""
