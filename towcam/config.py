"""
Configuration for towcam calculations.

Central location for default parameters, camera presets and the YAML survey
configuration used by the command-line tools. The geometry functions take
every parameter explicitly; the values here are only the documented defaults
of their signatures.

Example YAML file:

    towcam:
      camera: gopro5-2.7k-medium
      tilt_deg: 28.8
      height_m: 0.55
      in_water: false
      search:
        angle_step_deg: 0.1
        height_step_m: 0.01
      stills:
        interval: 30
        window: 0.5
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml

from towcam.types import Degrees, Meters, Millimeters, Pixels, Unitless

logger = logging.getLogger(__name__)

# Environment variable naming a default configuration file
CONFIG_ENV_VAR = "TOWCAM_CONFIG"

# =============================================================================
# GEOMETRY DEFAULTS
# =============================================================================

# Refractive index of shallow marine water. Varies with temperature, salinity
# and pressure: ~1.33 for shallow fresh water, >1.35 for deep cold saline water.
DEFAULT_REFRACTIVE_INDEX = 1.34

# Fraction of the frame (from the bottom edge) used for area estimates
DEFAULT_PROPORTION = 1.0

# Row fraction (0 = bottom, 1 = top) for single-row width queries
DEFAULT_WIDTH_POSITION = 0.5

# Maximum laser height difference, as a fraction of image height, before the
# flat-field assumption is reported as unreliable
LASER_HORIZONTAL_TOLERANCE = 0.05

# Hill-climb search used to reconcile trigonometric and laser widths
DEFAULT_ANGLE_STEP_DEG = 0.1
DEFAULT_HEIGHT_STEP_M = 0.01
DEFAULT_MAX_SEARCH_ITERATIONS = 10000

# =============================================================================
# STILL EXTRACTION DEFAULTS
# =============================================================================

DEFAULT_STILL_INTERVAL_S = 30.0
DEFAULT_STILL_WINDOW_S = 0.5
DEFAULT_DARK_MAX = 0.1
# Greyscale level (0-1) below which a pixel counts as dark
DARK_PIXEL_THRESHOLD = 0.0001
# Scale applied to greyscale values before the focus Laplacian
FOCUS_SCALE = 1e5

# =============================================================================
# CAMERA PRESETS (GoPro Hero5 Black)
# =============================================================================
# Source: GoPro field of view tables for the Hero5 Black
# - Sensor: 1/2.3" CMOS, 6.17 x 4.65 mm
# - 4:3 Wide mode uses the full sensor: 122.6 deg H x 94.4 deg V
# - 16:9 Medium at 2.7K crops the sensor to 94.4 deg H x 55.0 deg V
# - 16:9 Wide at 4K: 118.2 deg H x 69.5 deg V
# All FOVs are in-air; convert with CameraSpec.in_water() for housed cameras.
# =============================================================================

GOPRO5_SENSOR_WIDTH_MM = 6.17
GOPRO5_SENSOR_HEIGHT_MM = 4.65
GOPRO5_FULL_HFOV_DEG = 122.6
GOPRO5_FULL_VFOV_DEG = 94.4

CAMERA_PRESETS = [
    {
        "name": "gopro5-2.7k-medium",
        "full_hfov_deg": GOPRO5_FULL_HFOV_DEG,
        "full_vfov_deg": GOPRO5_FULL_VFOV_DEG,
        "used_hfov_deg": 94.4,
        "used_vfov_deg": 55.0,
        "pix_w": 2704,
        "pix_h": 1520,
        "sensor_width_mm": GOPRO5_SENSOR_WIDTH_MM,
        "sensor_height_mm": GOPRO5_SENSOR_HEIGHT_MM,
        "description": "GoPro Hero5 Black, 16:9 Medium, 2.7K",
    },
    {
        "name": "gopro5-4k-wide",
        "full_hfov_deg": GOPRO5_FULL_HFOV_DEG,
        "full_vfov_deg": GOPRO5_FULL_VFOV_DEG,
        "used_hfov_deg": 118.2,
        "used_vfov_deg": 69.5,
        "pix_w": 3840,
        "pix_h": 2160,
        "sensor_width_mm": GOPRO5_SENSOR_WIDTH_MM,
        "sensor_height_mm": GOPRO5_SENSOR_HEIGHT_MM,
        "description": "GoPro Hero5 Black, 16:9 Wide, 4K",
    },
    {
        "name": "gopro5-4x3-wide",
        "full_hfov_deg": GOPRO5_FULL_HFOV_DEG,
        "full_vfov_deg": GOPRO5_FULL_VFOV_DEG,
        "used_hfov_deg": GOPRO5_FULL_HFOV_DEG,
        "used_vfov_deg": GOPRO5_FULL_VFOV_DEG,
        "pix_w": 4000,
        "pix_h": 3000,
        "sensor_width_mm": GOPRO5_SENSOR_WIDTH_MM,
        "sensor_height_mm": GOPRO5_SENSOR_HEIGHT_MM,
        "description": "GoPro Hero5 Black, 4:3 Wide photo (full sensor)",
    },
]


def get_camera_presets() -> list:
    """
    Get list of all camera presets.

    Returns:
        List of camera preset dictionaries
    """
    return CAMERA_PRESETS


def get_camera_preset(name: str) -> Optional[dict]:
    """
    Get camera preset by name.

    Args:
        name: Preset name (e.g., "gopro5-2.7k-medium")

    Returns:
        Camera preset dictionary or None if not found
    """
    for preset in CAMERA_PRESETS:
        if preset["name"] == name:
            return preset
    return None


@dataclass(frozen=True)
class CameraSpec:
    """Sensor and lens specification of a survey camera.

    Attributes:
        full_hfov_deg: Horizontal FOV when the full sensor is used
        full_vfov_deg: Vertical FOV when the full sensor is used
        used_hfov_deg: Horizontal FOV of the recording mode
        used_vfov_deg: Vertical FOV of the recording mode
        pix_w: Image width in pixels
        pix_h: Image height in pixels
        sensor_width_mm: Full sensor width reported by the manufacturer
        sensor_height_mm: Full sensor height reported by the manufacturer
        name: Preset name, if any
        description: Free-form description
    """

    full_hfov_deg: Degrees
    full_vfov_deg: Degrees
    used_hfov_deg: Degrees
    used_vfov_deg: Degrees
    pix_w: Pixels
    pix_h: Pixels
    sensor_width_mm: Millimeters
    sensor_height_mm: Millimeters
    name: str = ""
    description: str = ""

    @classmethod
    def from_dict(cls, data: dict) -> CameraSpec:
        """Create a camera specification from a preset-style dictionary.

        Raises:
            ValueError: If a required key is missing or not numeric.
        """
        if not isinstance(data, dict):
            raise ValueError(f"Camera specification must be a dictionary, got {type(data)}")

        required = [f.name for f in fields(cls) if f.name not in ("name", "description")]
        missing = [key for key in required if key not in data]
        if missing:
            raise ValueError(f"Camera specification missing required keys: {', '.join(missing)}")

        try:
            return cls(
                full_hfov_deg=Degrees(float(data["full_hfov_deg"])),
                full_vfov_deg=Degrees(float(data["full_vfov_deg"])),
                used_hfov_deg=Degrees(float(data["used_hfov_deg"])),
                used_vfov_deg=Degrees(float(data["used_vfov_deg"])),
                pix_w=Pixels(int(data["pix_w"])),
                pix_h=Pixels(int(data["pix_h"])),
                sensor_width_mm=Millimeters(float(data["sensor_width_mm"])),
                sensor_height_mm=Millimeters(float(data["sensor_height_mm"])),
                name=str(data.get("name", "")),
                description=str(data.get("description", "")),
            )
        except (TypeError, ValueError) as e:
            raise ValueError(f"Invalid camera specification: {e}") from e

    @classmethod
    def from_preset(cls, name: str) -> CameraSpec:
        """Look up a preset by name.

        Raises:
            ValueError: If no preset has that name.
        """
        preset = get_camera_preset(name)
        if preset is None:
            available = [p["name"] for p in get_camera_presets()]
            raise ValueError(
                f"Camera preset '{name}' not found. Available presets: {', '.join(available)}"
            )
        return cls.from_dict(preset)

    def in_water(self, refractive_index: Unitless = DEFAULT_REFRACTIVE_INDEX) -> CameraSpec:
        """Return a copy with all four FOVs converted to in-water values."""
        from towcam.field_of_view import in_water_fov

        return CameraSpec(
            full_hfov_deg=in_water_fov(self.full_hfov_deg, refractive_index),
            full_vfov_deg=in_water_fov(self.full_vfov_deg, refractive_index),
            used_hfov_deg=in_water_fov(self.used_hfov_deg, refractive_index),
            used_vfov_deg=in_water_fov(self.used_vfov_deg, refractive_index),
            pix_w=self.pix_w,
            pix_h=self.pix_h,
            sensor_width_mm=self.sensor_width_mm,
            sensor_height_mm=self.sensor_height_mm,
            name=self.name,
            description=self.description,
        )


@dataclass(frozen=True)
class SearchSettings:
    """Step sizes and iteration bound for the laser reconciliation search.

    Attributes:
        angle_step_deg: Tilt increment per hill-climb step
        height_step_m: Height increment per hill-climb step
        max_iterations: Maximum steps taken in a single search direction
    """

    angle_step_deg: Degrees = DEFAULT_ANGLE_STEP_DEG  # type: ignore[assignment]
    height_step_m: Meters = DEFAULT_HEIGHT_STEP_M  # type: ignore[assignment]
    max_iterations: int = DEFAULT_MAX_SEARCH_ITERATIONS

    def __post_init__(self) -> None:
        """Validate search settings."""
        if self.angle_step_deg <= 0:
            raise ValueError(f"angle_step_deg must be positive, got {self.angle_step_deg}")
        if self.height_step_m <= 0:
            raise ValueError(f"height_step_m must be positive, got {self.height_step_m}")
        if self.max_iterations < 1:
            raise ValueError(f"max_iterations must be at least 1, got {self.max_iterations}")


@dataclass(frozen=True)
class StillSettings:
    """Parameters of fixed-interval still extraction.

    Attributes:
        interval: Seconds between stills
        window: Seconds after each time code searched for the sharpest frame
        dark_max: Maximum acceptable proportion of dark pixels
        time_offset: Start time in seconds
    """

    interval: float = DEFAULT_STILL_INTERVAL_S
    window: float = DEFAULT_STILL_WINDOW_S
    dark_max: float = DEFAULT_DARK_MAX
    time_offset: float = 0.0

    def __post_init__(self) -> None:
        """Validate still settings."""
        if self.interval <= 0:
            raise ValueError(f"interval must be positive, got {self.interval}")
        if self.window < 0:
            raise ValueError(f"window cannot be negative, got {self.window}")
        if not 0 < self.dark_max <= 1:
            raise ValueError(f"dark_max must be in (0, 1], got {self.dark_max}")


@dataclass
class SurveyConfig:
    """Survey-level configuration used by the command-line tools.

    Attributes:
        camera: Camera specification (None when not configured)
        tilt_deg: Camera tilt below horizontal
        height_m: Camera height above the seabed
        in_water: Convert camera FOVs to in-water values before use
        refractive_index: Refractive index used for in-water conversion
        laser_distance_m: Physical separation of the laser dots
        search: Laser reconciliation search settings
        stills: Still extraction settings
    """

    camera: Optional[CameraSpec] = None
    tilt_deg: Optional[Degrees] = None
    height_m: Optional[Meters] = None
    in_water: bool = False
    refractive_index: Unitless = DEFAULT_REFRACTIVE_INDEX  # type: ignore[assignment]
    laser_distance_m: Optional[Meters] = None
    search: SearchSettings = field(default_factory=SearchSettings)
    stills: StillSettings = field(default_factory=StillSettings)

    def effective_camera(self) -> Optional[CameraSpec]:
        """Camera specification with the in-water conversion applied if configured."""
        if self.camera is None or not self.in_water:
            return self.camera
        return self.camera.in_water(self.refractive_index)

    @classmethod
    def from_yaml(cls, path: str) -> SurveyConfig:
        """Load configuration from YAML file.

        Args:
            path: Path to YAML configuration file

        Returns:
            SurveyConfig instance loaded from file

        Raises:
            FileNotFoundError: If configuration file does not exist
            ValueError: If configuration file is malformed or contains invalid values
        """
        config_path = Path(path)

        if not config_path.exists():
            raise FileNotFoundError(
                f"Configuration file not found: {path}\n"
                f"Please create a configuration file or use get_default_config()"
            )

        try:
            with open(config_path, 'r') as f:
                data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ValueError(f"Failed to parse YAML configuration file: {e}") from e

        if not data:
            raise ValueError(
                f"Configuration file is empty: {path}\n"
                f"Expected a 'towcam' section"
            )

        if 'towcam' not in data:
            raise ValueError(
                f"Configuration file missing 'towcam' section: {path}\n"
                f"Expected structure: towcam:\n  camera: ...\n  ..."
            )

        logger.debug(f"Loaded configuration from {config_path}")
        return cls.from_dict(data['towcam'])

    @classmethod
    def from_dict(cls, config: dict) -> SurveyConfig:
        """Create configuration from dictionary.

        Args:
            config: Dictionary with optional keys 'camera' (preset name or
                specification mapping), 'tilt_deg', 'height_m', 'in_water',
                'refractive_index', 'laser_distance_m', 'search', 'stills'.

        Returns:
            SurveyConfig instance

        Raises:
            ValueError: If configuration is invalid
        """
        if not isinstance(config, dict):
            raise ValueError(f"Configuration must be a dictionary, got {type(config)}")

        camera = None
        if 'camera' in config and config['camera'] is not None:
            camera_value = config['camera']
            if isinstance(camera_value, str):
                camera = CameraSpec.from_preset(camera_value)
            else:
                camera = CameraSpec.from_dict(camera_value)

        search = SearchSettings(**_section(config, 'search', SearchSettings))
        stills = StillSettings(**_section(config, 'stills', StillSettings))

        return cls(
            camera=camera,
            tilt_deg=_optional_float(config, 'tilt_deg'),
            height_m=_optional_float(config, 'height_m'),
            in_water=bool(config.get('in_water', False)),
            refractive_index=float(config.get('refractive_index', DEFAULT_REFRACTIVE_INDEX)),
            laser_distance_m=_optional_float(config, 'laser_distance_m'),
            search=search,
            stills=stills,
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert configuration to a dictionary suitable for YAML output."""
        result: Dict[str, Any] = {
            'in_water': self.in_water,
            'refractive_index': self.refractive_index,
            'search': {
                'angle_step_deg': self.search.angle_step_deg,
                'height_step_m': self.search.height_step_m,
                'max_iterations': self.search.max_iterations,
            },
            'stills': {
                'interval': self.stills.interval,
                'window': self.stills.window,
                'dark_max': self.stills.dark_max,
                'time_offset': self.stills.time_offset,
            },
        }
        if self.camera is not None:
            result['camera'] = {f.name: getattr(self.camera, f.name) for f in fields(self.camera)}
        for key in ('tilt_deg', 'height_m', 'laser_distance_m'):
            value = getattr(self, key)
            if value is not None:
                result[key] = value
        return result


def _optional_float(config: dict, key: str) -> Optional[float]:
    """Read an optional numeric key."""
    if config.get(key) is None:
        return None
    try:
        return float(config[key])
    except (TypeError, ValueError):
        raise ValueError(f"'{key}' must be a number, got {config[key]!r}") from None


def _section(config: dict, key: str, settings_cls: type) -> Dict[str, Any]:
    """Extract a nested settings section, rejecting unknown keys."""
    section = config.get(key) or {}
    if not isinstance(section, dict):
        raise ValueError(f"'{key}' must be a mapping, got {type(section)}")

    known = {f.name for f in fields(settings_cls)}
    unknown: List[str] = sorted(set(section) - known)
    if unknown:
        raise ValueError(
            f"Unknown keys in '{key}' section: {', '.join(unknown)}. "
            f"Valid keys: {', '.join(sorted(known))}"
        )
    return dict(section)


def get_default_config() -> SurveyConfig:
    """Get the default configuration.

    Loads the file named by the ``TOWCAM_CONFIG`` environment variable when it
    is set, otherwise returns built-in defaults with no camera configured.

    Returns:
        SurveyConfig instance
    """
    path = os.getenv(CONFIG_ENV_VAR)
    if path:
        return SurveyConfig.from_yaml(path)
    return SurveyConfig()
