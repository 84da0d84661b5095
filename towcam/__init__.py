"""
Photogrammetry for towed and oblique underwater survey cameras.

This package interprets imagery from cameras towed over the seabed:

    - seabed area and width visible in an oblique frame
    - nadir, principal point and camera constant of a camera rig
    - real-world height of annotated objects from a single image
    - image width from parallel laser dots, and reconciliation of the
      assumed camera height/tilt against it
    - towed camera position behind the vessel (layback)
    - best-focus still extraction from survey video

Every geometry function is a pure computation returning a frozen result
record that carries all of its intermediate values.

Example Usage:
    >>> from towcam import build_camera_rig, compute_object_height_for_rig, AnnotationSegment
    >>>
    >>> rig = build_camera_rig(122.6, 94.4, 94.4, 55.0, 2704, 1520, 6.17, 4.65,
    ...                        cam_angle=28.8, cam_height=550)
    >>> result = compute_object_height_for_rig(AnnotationSegment(100, 100, 100, 50), rig)
    >>> print(f"Height: {result.obj_height:.1f} mm")

Available Classes:
    Geometry:
        - ObliqueCameraGeometry, AreaOfViewResult
        - CameraRig, NadirResult, CameraConstantResult
        - AnnotationSegment, ObjectHeightResult
        - LaserReference, ValidationResult
    Survey:
        - GeoPoint, WGS84Geodesy, SphericalGeodesy, LaybackResult
        - OpenCVVideoSource, StillRecord
    Configuration:
        - CameraSpec, SearchSettings, StillSettings, SurveyConfig
"""

# Geometry core
from towcam.angles import to_degrees, to_radians
from towcam.area_of_view import (
    AreaOfViewResult,
    ObliqueCameraGeometry,
    compute_area_of_view,
    compute_image_width_at_position,
)
from towcam.camera_rig import (
    CameraConstantResult,
    CameraRig,
    NadirResult,
    build_camera_rig,
    compute_camera_constant,
    compute_nadir,
)
from towcam.diagnostics import WarningCode
from towcam.field_of_view import in_water_fov
from towcam.laser_scale import LaserReference, image_width_from_lasers
from towcam.laser_validation import ValidationResult, validate_with_lasers
from towcam.object_height import (
    AnnotationSegment,
    ObjectHeightResult,
    compute_object_height,
    compute_object_height_for_rig,
    compute_object_heights,
)
from towcam.pixel_point import PixelPoint

# Survey adapters
from towcam.geodesy import GeoPoint, SphericalGeodesy, WGS84Geodesy
from towcam.layback import LaybackResult, estimate_layback
from towcam.stills import OpenCVVideoSource, StillRecord, extract_stills, fixed_interval_stills

# Configuration
from towcam.config import (
    CameraSpec,
    SearchSettings,
    StillSettings,
    SurveyConfig,
    get_default_config,
)

# Define public API
__all__ = [
    # Geometry core
    'to_degrees',
    'to_radians',
    'AreaOfViewResult',
    'ObliqueCameraGeometry',
    'compute_area_of_view',
    'compute_image_width_at_position',
    'CameraConstantResult',
    'CameraRig',
    'NadirResult',
    'build_camera_rig',
    'compute_camera_constant',
    'compute_nadir',
    'WarningCode',
    'in_water_fov',
    'LaserReference',
    'image_width_from_lasers',
    'ValidationResult',
    'validate_with_lasers',
    'AnnotationSegment',
    'ObjectHeightResult',
    'compute_object_height',
    'compute_object_height_for_rig',
    'compute_object_heights',
    'PixelPoint',

    # Survey adapters
    'GeoPoint',
    'SphericalGeodesy',
    'WGS84Geodesy',
    'LaybackResult',
    'estimate_layback',
    'OpenCVVideoSource',
    'StillRecord',
    'extract_stills',
    'fixed_interval_stills',

    # Configuration
    'CameraSpec',
    'SearchSettings',
    'StillSettings',
    'SurveyConfig',
    'get_default_config',
]

# Package metadata
__version__ = '0.1.0'
__description__ = 'Photogrammetry for towed and oblique underwater survey cameras'
