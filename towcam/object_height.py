"""
Height of annotated objects in a low oblique image.

Implements the single-image relief displacement formula of S. Verykokou and
C. Ioannidis, "Metric exploitation of a single low oblique aerial image",
FIG Working Week 2015, Sofia, Bulgaria.

An annotation is a line from the base of an object (x1, y1) to its top
(x2, y2). Given the nadir, the principal point, the camera constant c and
the camera height H, the object height is

    h = H * (1 - (Eq1 / Eq2) / (Eq3 / Eq4))

where, with A..E the squared pixel distances

    A = |base - PP|^2     B = |nadir - PP|^2     C = |nadir - base|^2
    D = |top - PP|^2      E = |nadir - top|^2

    Eq1 = sqrt(4 (c^2 + A)(c^2 + B) - (2c^2 + A + B - C)^2)
    Eq2 = 2c^2 + A + B - C
    Eq3 = sqrt(4 (c^2 + D)(c^2 + B) - (2c^2 + D + B - E)^2)
    Eq4 = 2c^2 + D + B - E

Eq1/Eq2 and Eq3/Eq4 are the tangents of the angles between the nadir ray
and the rays through the base and the top.

Annotations inconsistent with the claimed camera geometry drive the square
root arguments negative. Those produce NaN, which is propagated so callers
can flag the annotation.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Iterable

import numpy as np

from towcam.camera_rig import CameraRig
from towcam.types import PixelsFloat, Radians


@dataclass(frozen=True)
class AnnotationSegment:
    """Annotation line from the base (x1, y1) to the top (x2, y2) of an object."""

    x1: PixelsFloat
    y1: PixelsFloat
    x2: PixelsFloat
    y2: PixelsFloat


@dataclass(frozen=True)
class ObjectHeightResult:
    """Object dimensions and every intermediate of the height formula.

    Heights, widths and lengths are in the unit of ``cam_height``.

    Attributes:
        obj_pix_x: Horizontal extent of the annotation (pixels)
        obj_pix_y: Vertical extent of the annotation (pixels)
        obj_pix_xy: Length of the annotation (pixels)
        obj_ang_r: Annotation angle (radians, 0 = horizontal); 0 for vertical
            annotations by convention
        a, b, c, d, e: Squared pixel distances of the formula
        eq1, eq2, eq3, eq4: Terms of the formula
        obj_height: Height of the object above the seabed
        obj_width: Horizontal extent of the object as seen in the image
        obj_length: Length of the object, assuming it is inclined in a plane
            perpendicular to the viewing direction
    """

    x1: PixelsFloat
    y1: PixelsFloat
    x2: PixelsFloat
    y2: PixelsFloat
    nadir_x: PixelsFloat
    nadir_y: PixelsFloat
    ppx: PixelsFloat
    ppy: PixelsFloat
    cam_constant_c: PixelsFloat
    cam_height: float
    obj_pix_x: float
    obj_pix_y: float
    obj_pix_xy: float
    obj_ang_r: Radians
    a: float
    b: float
    c: float
    d: float
    e: float
    eq1: float
    eq2: float
    eq3: float
    eq4: float
    obj_height: float
    obj_width: float
    obj_length: float

    @property
    def is_finite(self) -> bool:
        """True when the height, width and length are finite numbers."""
        return all(math.isfinite(v) for v in (self.obj_height, self.obj_width, self.obj_length))


def compute_object_height(
    x1: PixelsFloat,
    y1: PixelsFloat,
    x2: PixelsFloat,
    y2: PixelsFloat,
    nadir_x: PixelsFloat,
    nadir_y: PixelsFloat,
    ppx: PixelsFloat,
    ppy: PixelsFloat,
    cam_constant_c: PixelsFloat,
    cam_height: float,
) -> ObjectHeightResult:
    """
    Calculate the height of an annotated object.

    Args:
        x1, y1: Pixel coordinates of the base of the object
        x2, y2: Pixel coordinates of the top of the object
        nadir_x, nadir_y: Pixel coordinates of the point beneath the camera
        ppx, ppy: Principal point (pixels)
        cam_constant_c: Camera constant C (pixels)
        cam_height: Camera height above the seabed

    Returns:
        ObjectHeightResult. Values are NaN when the annotation is
        geometrically inconsistent with the camera parameters.

    Example:
        >>> compute_object_height(100, 100, 100, 50, 200, 200, 100, 100, 1, 1).obj_height
    """
    obj_pix_x = abs(x1 - x2)
    obj_pix_y = abs(y1 - y2)
    obj_pix_xy = math.hypot(obj_pix_x, obj_pix_y)

    # 0 = horizontal, pi/2 = vertical; vertical lines are fixed to 0 below
    if obj_pix_x == 0:
        obj_ang_r = 0.0
    else:
        obj_ang_r = math.atan(obj_pix_y / obj_pix_x)

    a = (x1 - ppx) ** 2 + (y1 - ppy) ** 2
    b = (nadir_x - ppx) ** 2 + (nadir_y - ppy) ** 2
    c = (nadir_x - x1) ** 2 + (nadir_y - y1) ** 2
    d = (x2 - ppx) ** 2 + (y2 - ppy) ** 2
    e = (nadir_x - x2) ** 2 + (nadir_y - y2) ** 2

    c2 = np.float64(cam_constant_c) ** 2

    with np.errstate(divide="ignore", invalid="ignore"):
        eq1 = np.sqrt(4 * (c2 + a) * (c2 + b) - (2 * c2 + a + b - c) ** 2)
        eq2 = 2 * c2 + a + b - c
        eq3 = np.sqrt(4 * (c2 + d) * (c2 + b) - (2 * c2 + d + b - e) ** 2)
        eq4 = 2 * c2 + d + b - e

        obj_height = cam_height * (1 - ((eq1 / eq2) / (eq3 / eq4)))

        if obj_ang_r == 0:
            obj_length = obj_height
            obj_width = np.float64(0.0)
        else:
            obj_length = obj_height / np.sin(obj_ang_r)
            obj_width = np.sqrt(obj_length ** 2 - obj_height ** 2)

    return ObjectHeightResult(
        x1=x1,
        y1=y1,
        x2=x2,
        y2=y2,
        nadir_x=nadir_x,
        nadir_y=nadir_y,
        ppx=ppx,
        ppy=ppy,
        cam_constant_c=cam_constant_c,
        cam_height=cam_height,
        obj_pix_x=obj_pix_x,
        obj_pix_y=obj_pix_y,
        obj_pix_xy=obj_pix_xy,
        obj_ang_r=Radians(obj_ang_r),
        a=a,
        b=b,
        c=c,
        d=d,
        e=e,
        eq1=float(eq1),
        eq2=float(eq2),
        eq3=float(eq3),
        eq4=float(eq4),
        obj_height=float(obj_height),
        obj_width=float(obj_width),
        obj_length=float(obj_length),
    )


def compute_object_height_for_rig(segment: AnnotationSegment, rig: CameraRig) -> ObjectHeightResult:
    """
    Calculate the height of an annotated object using a camera rig.

    Args:
        segment: Annotation from the base to the top of the object
        rig: Camera setup from :func:`towcam.camera_rig.build_camera_rig`

    Returns:
        ObjectHeightResult in the unit of ``rig.cam_height``

    Example:
        >>> rig = build_camera_rig(122.6, 94.4, 94.4, 55, 2704, 1520, 6.17, 4.65, 28.8, 550)
        >>> compute_object_height_for_rig(AnnotationSegment(100, 100, 100, 50), rig)
    """
    return compute_object_height(
        segment.x1,
        segment.y1,
        segment.x2,
        segment.y2,
        rig.nadir_x,
        rig.nadir_y,
        rig.ppx,
        rig.ppy,
        rig.cam_constant_c,
        rig.cam_height,
    )


def compute_object_heights(
    segments: Iterable[AnnotationSegment], rig: CameraRig
) -> list[ObjectHeightResult]:
    """Measure every annotation of one image against the same rig."""
    return [compute_object_height_for_rig(segment, rig) for segment in segments]
