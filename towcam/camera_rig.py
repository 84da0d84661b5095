"""
Camera intrinsics for single-image photogrammetry.

Derives the quantities the object-height formula needs from the camera's
sensor and field-of-view specification:

    - nadir: pixel location of the seabed point straight below the camera
    - camera constant C: focal length expressed in pixels
    - principal point: optical centre, assumed to be the image centre

Image coordinates have their origin at the top-left pixel, with x to the
right and y down. The camera is assumed to have zero roll, so the nadir
always lies on the vertical centre line of the image.
"""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np

from towcam.angles import to_radians
from towcam.config import CameraSpec
from towcam.types import Degrees, Millimeters, Pixels, PixelsFloat


def _sin_deg(deg: float) -> np.float64:
    return np.sin(np.float64(to_radians(Degrees(deg))))


@dataclass(frozen=True)
class NadirResult:
    """Nadir location and the triangle used to derive it.

    Points of the triangle (in the vertical plane through the optical axis):
    A is the camera, B the nadir, C the bottom edge of the image and D the
    image centre. Angles are in degrees; lengths are in pixels.
    """

    vfov_deg: Degrees
    tilt_deg: Degrees
    pix_w: Pixels
    pix_h: Pixels
    ang_cad: Degrees
    """Bottom of image (C) to camera (A) to image centre (D)"""
    ang_dca: Degrees
    """Image centre (D) to bottom of image (C) to camera (A)"""
    ang_bca: Degrees
    """Nadir (B) to bottom of image (C) to camera (A)"""
    ang_bac: Degrees
    """Nadir (B) to camera (A) to bottom of image (C)"""
    ang_bad: Degrees
    """Nadir (B) to camera (A) to image centre (D)"""
    len_ac: float
    """Camera to bottom of image, in pixels"""
    len_bc: float
    """Bottom of image to nadir, in pixels"""
    nadir_x: PixelsFloat
    nadir_y: PixelsFloat


@dataclass(frozen=True)
class CameraConstantResult:
    """Focal length and camera constant derived from sensor geometry.

    The lens-to-sensor triangle has the lens at A, the sensor centre at F and
    the sensor edge at C (full sensor) or E (used part of the sensor).
    Angles are in degrees, lengths in millimeters.
    """

    full_hfov_deg: Degrees
    full_vfov_deg: Degrees
    used_hfov_deg: Degrees
    used_vfov_deg: Degrees
    pix_w: Pixels
    pix_h: Pixels
    sensor_width_mm: Millimeters
    sensor_height_mm: Millimeters
    len_af: Millimeters
    """Half the full sensor width"""
    ang_acf: Degrees
    """Half the full horizontal FOV"""
    ang_caf: Degrees
    focal_length: Millimeters
    ang_ecf: Degrees
    """Half the used horizontal FOV"""
    ang_cef: Degrees
    len_ef: Millimeters
    """Half the used sensor width"""
    used_sensor_width: Millimeters
    pix_size: Millimeters
    cam_constant_c: PixelsFloat


@dataclass(frozen=True)
class CameraRig:
    """Camera setup needed to measure annotations in an image.

    Attributes:
        full_hfov_deg: Horizontal FOV using the full sensor
        full_vfov_deg: Vertical FOV using the full sensor
        used_hfov_deg: Horizontal FOV of the recording mode
        used_vfov_deg: Vertical FOV of the recording mode
        sensor_width_mm: Full sensor width
        sensor_height_mm: Full sensor height
        used_sensor_width: Width of the used part of the sensor (mm)
        cam_angle: Camera tilt below horizontal (degrees)
        cam_height: Camera height above the seabed; object heights are
            reported in the same unit
        focal_length: Focal length (mm)
        cam_constant_c: Camera constant C (pixels)
        pix_w: Image width (pixels)
        pix_h: Image height (pixels)
        ppx: Principal point x (pixels)
        ppy: Principal point y (pixels)
        nadir_x: Nadir x (pixels)
        nadir_y: Nadir y (pixels); may lie outside the image
    """

    full_hfov_deg: Degrees
    full_vfov_deg: Degrees
    used_hfov_deg: Degrees
    used_vfov_deg: Degrees
    sensor_width_mm: Millimeters
    sensor_height_mm: Millimeters
    used_sensor_width: Millimeters
    cam_angle: Degrees
    cam_height: float
    focal_length: Millimeters
    cam_constant_c: PixelsFloat
    pix_w: Pixels
    pix_h: Pixels
    ppx: PixelsFloat
    ppy: PixelsFloat
    nadir_x: PixelsFloat
    nadir_y: PixelsFloat

    @property
    def nadir_in_frame(self) -> bool:
        """True when the nadir falls inside the image."""
        return 0 <= self.nadir_x <= self.pix_w and 0 <= self.nadir_y <= self.pix_h

    @classmethod
    def from_spec(cls, spec: CameraSpec, cam_angle: Degrees, cam_height: float) -> CameraRig:
        """Build a rig from a configured camera specification."""
        return build_camera_rig(
            spec.full_hfov_deg,
            spec.full_vfov_deg,
            spec.used_hfov_deg,
            spec.used_vfov_deg,
            spec.pix_w,
            spec.pix_h,
            spec.sensor_width_mm,
            spec.sensor_height_mm,
            cam_angle,
            cam_height,
        )


def compute_nadir(vfov_deg: Degrees, tilt_deg: Degrees, pix_w: Pixels, pix_h: Pixels) -> NadirResult:
    """
    Locate the camera nadir in pixel coordinates.

    Args:
        vfov_deg: Vertical field of view (degrees)
        tilt_deg: Camera tilt below horizontal (0 = horizontal, 90 = down)
        pix_w: Image width (pixels)
        pix_h: Image height (pixels)

    Returns:
        NadirResult. ``nadir_y`` exceeds ``pix_h`` when the nadir is below
        the bottom of the frame, which is normal for shallow tilts.
    """
    ang_cad = vfov_deg / 2
    ang_dca = 180 - ang_cad - tilt_deg
    ang_bca = 180 - ang_dca
    ang_bac = 90 - ang_bca
    ang_bad = ang_bac + ang_cad

    # Law of sines in triangle ACD, with CD = half the image height
    with np.errstate(divide="ignore", invalid="ignore"):
        len_ac = float(_sin_deg(tilt_deg) / (_sin_deg(ang_cad) / (pix_h / 2)))
        len_bc = float(_sin_deg(ang_bac) / (1 / np.float64(len_ac)))

    return NadirResult(
        vfov_deg=vfov_deg,
        tilt_deg=tilt_deg,
        pix_w=pix_w,
        pix_h=pix_h,
        ang_cad=Degrees(ang_cad),
        ang_dca=Degrees(ang_dca),
        ang_bca=Degrees(ang_bca),
        ang_bac=Degrees(ang_bac),
        ang_bad=Degrees(ang_bad),
        len_ac=len_ac,
        len_bc=len_bc,
        nadir_x=PixelsFloat(pix_w / 2),
        nadir_y=PixelsFloat(len_bc + pix_h),
    )


def compute_camera_constant(
    full_hfov_deg: Degrees,
    full_vfov_deg: Degrees,
    used_hfov_deg: Degrees,
    used_vfov_deg: Degrees,
    pix_w: Pixels,
    pix_h: Pixels,
    sensor_width_mm: Millimeters,
    sensor_height_mm: Millimeters,
) -> CameraConstantResult:
    """
    Calculate the camera constant C = f / p.

    The focal length f comes from the triangle formed by the lens and half
    the full sensor width at half the full horizontal FOV. The width of the
    sensor actually used by the recording mode follows from the used FOV,
    and the pixel size p is that width divided by the image width.

    Args:
        full_hfov_deg: Horizontal FOV using the full sensor (e.g. 122.6 for a
            GoPro Hero5 in 4:3 Wide)
        full_vfov_deg: Vertical FOV using the full sensor
        used_hfov_deg: Horizontal FOV of the recording mode (e.g. 94.4 for
            16:9 Medium)
        used_vfov_deg: Vertical FOV of the recording mode
        pix_w: Image width (pixels)
        pix_h: Image height (pixels)
        sensor_width_mm: Full sensor width (mm)
        sensor_height_mm: Full sensor height (mm)

    Returns:
        CameraConstantResult with focal length (mm) and C (pixels)
    """
    len_af = sensor_width_mm / 2
    ang_acf = full_hfov_deg / 2
    ang_caf = 90 - ang_acf

    ang_ecf = used_hfov_deg / 2
    ang_cef = 90 - ang_ecf

    with np.errstate(divide="ignore", invalid="ignore"):
        focal_length = float(_sin_deg(ang_caf) * (len_af / _sin_deg(ang_acf)))
        len_ef = float(_sin_deg(ang_ecf) * (focal_length / _sin_deg(ang_cef)))
        used_sensor_width = 2 * len_ef
        pix_size = float(np.float64(used_sensor_width) / pix_w)
        cam_constant_c = float(np.float64(focal_length) / pix_size)

    return CameraConstantResult(
        full_hfov_deg=full_hfov_deg,
        full_vfov_deg=full_vfov_deg,
        used_hfov_deg=used_hfov_deg,
        used_vfov_deg=used_vfov_deg,
        pix_w=pix_w,
        pix_h=pix_h,
        sensor_width_mm=sensor_width_mm,
        sensor_height_mm=sensor_height_mm,
        len_af=Millimeters(len_af),
        ang_acf=Degrees(ang_acf),
        ang_caf=Degrees(ang_caf),
        focal_length=Millimeters(focal_length),
        ang_ecf=Degrees(ang_ecf),
        ang_cef=Degrees(ang_cef),
        len_ef=Millimeters(len_ef),
        used_sensor_width=Millimeters(used_sensor_width),
        pix_size=Millimeters(pix_size),
        cam_constant_c=PixelsFloat(cam_constant_c),
    )


def build_camera_rig(
    full_hfov_deg: Degrees,
    full_vfov_deg: Degrees,
    used_hfov_deg: Degrees,
    used_vfov_deg: Degrees,
    pix_w: Pixels,
    pix_h: Pixels,
    sensor_width_mm: Millimeters,
    sensor_height_mm: Millimeters,
    cam_angle: Degrees,
    cam_height: float,
) -> CameraRig:
    """
    Compute nadir and camera constant and package them as one rig.

    The nadir is derived from the *used* vertical FOV, since that is what
    the recorded image spans.

    Example:
        >>> rig = build_camera_rig(122.6, 94.4, 94.4, 55, 2704, 1520, 6.17, 4.65, 28.8, 550)
    """
    nadir = compute_nadir(used_vfov_deg, cam_angle, pix_w, pix_h)
    constant = compute_camera_constant(
        full_hfov_deg,
        full_vfov_deg,
        used_hfov_deg,
        used_vfov_deg,
        pix_w,
        pix_h,
        sensor_width_mm,
        sensor_height_mm,
    )

    return CameraRig(
        full_hfov_deg=full_hfov_deg,
        full_vfov_deg=full_vfov_deg,
        used_hfov_deg=used_hfov_deg,
        used_vfov_deg=used_vfov_deg,
        sensor_width_mm=sensor_width_mm,
        sensor_height_mm=sensor_height_mm,
        used_sensor_width=constant.used_sensor_width,
        cam_angle=cam_angle,
        cam_height=cam_height,
        focal_length=constant.focal_length,
        cam_constant_c=constant.cam_constant_c,
        pix_w=pix_w,
        pix_h=pix_h,
        ppx=PixelsFloat(pix_w / 2),
        ppy=PixelsFloat(pix_h / 2),
        nadir_x=nadir.nadir_x,
        nadir_y=nadir.nadir_y,
    )
