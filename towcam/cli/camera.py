"""Camera rig, nadir and object height CLI commands."""

from pathlib import Path

import typer

from towcam.camera_rig import CameraRig, compute_camera_constant, compute_nadir
from towcam.cli.common import (
    CONFIG_OPTION,
    FORMAT_OPTION,
    PRESET_OPTION,
    OutputFormat,
    emit,
    load_survey_config,
    require,
    resolve_camera,
)
from towcam.cli.main import camera_app
from towcam.config import DEFAULT_REFRACTIVE_INDEX, get_camera_presets
from towcam.object_height import AnnotationSegment, compute_object_heights
from towcam.types import Degrees, Pixels

IN_WATER_OPTION = typer.Option(False, "--in-water", help="Convert in-air FOVs to in-water")
REFRACTIVE_INDEX_OPTION = typer.Option(
    None, help=f"Refractive index for --in-water (default: {DEFAULT_REFRACTIVE_INDEX})"
)


def _build_rig(
    preset: str | None,
    config: Path | None,
    in_water: bool,
    refractive_index: float | None,
    tilt: float | None,
    cam_height: float | None,
) -> CameraRig:
    survey = load_survey_config(config)
    camera = resolve_camera(survey, preset, in_water, refractive_index)
    return CameraRig.from_spec(
        camera,
        cam_angle=Degrees(require(tilt, survey.tilt_deg, "--tilt")),
        cam_height=require(cam_height, survey.height_m, "--cam-height"),
    )


def _parse_segment(value: str) -> AnnotationSegment:
    try:
        x1, y1, x2, y2 = (float(v) for v in value.split(","))
    except ValueError:
        raise typer.BadParameter(
            f"expected 'x1,y1,x2,y2', got {value!r}", param_hint="--segment"
        ) from None
    return AnnotationSegment(x1, y1, x2, y2)


@camera_app.command("presets")
def presets_command(output_format: OutputFormat = FORMAT_OPTION) -> None:
    """
    List the built-in camera presets.

    Example:
        towcam camera presets
    """
    emit("Camera Presets", {"presets": get_camera_presets()}, output_format)


@camera_app.command("nadir")
def nadir_command(
    vfov: float = typer.Option(..., help="Vertical field of view (degrees)"),
    tilt: float = typer.Option(..., help="Camera tilt below horizontal (degrees)"),
    width: int = typer.Option(..., help="Image width in pixels"),
    height: int = typer.Option(..., help="Image height in pixels"),
    output_format: OutputFormat = FORMAT_OPTION,
) -> None:
    """
    Pixel position of the nadir (the point straight below the camera).

    Example:
        towcam camera nadir --vfov 55 --tilt 28.8 --width 2704 --height 1520
    """
    result = compute_nadir(vfov, tilt, Pixels(width), Pixels(height))
    emit("Nadir", {"nadir": result}, output_format)


@camera_app.command("constant")
def constant_command(
    preset: str | None = PRESET_OPTION,
    config: Path | None = CONFIG_OPTION,
    in_water: bool = IN_WATER_OPTION,
    refractive_index: float | None = REFRACTIVE_INDEX_OPTION,
    output_format: OutputFormat = FORMAT_OPTION,
) -> None:
    """
    Focal length and camera constant C of a camera.

    Example:
        towcam camera constant --preset gopro5-2.7k-medium
    """
    survey = load_survey_config(config)
    camera = resolve_camera(survey, preset, in_water, refractive_index)
    result = compute_camera_constant(
        camera.full_hfov_deg,
        camera.full_vfov_deg,
        camera.used_hfov_deg,
        camera.used_vfov_deg,
        camera.pix_w,
        camera.pix_h,
        camera.sensor_width_mm,
        camera.sensor_height_mm,
    )
    emit("Camera Constant", {"camera": camera.name or "custom", "constant": result}, output_format)


@camera_app.command("rig")
def rig_command(
    tilt: float | None = typer.Option(None, help="Camera tilt below horizontal (degrees)"),
    cam_height: float | None = typer.Option(
        None, help="Camera height above the seabed (object heights use the same unit)"
    ),
    preset: str | None = PRESET_OPTION,
    config: Path | None = CONFIG_OPTION,
    in_water: bool = IN_WATER_OPTION,
    refractive_index: float | None = REFRACTIVE_INDEX_OPTION,
    output_format: OutputFormat = FORMAT_OPTION,
) -> None:
    """
    Nadir, principal point and camera constant for a camera setup.

    Example:
        towcam camera rig --preset gopro5-2.7k-medium --tilt 28.8 --cam-height 550
    """
    rig = _build_rig(preset, config, in_water, refractive_index, tilt, cam_height)
    emit("Camera Rig", {"rig": rig, "nadir_in_frame": rig.nadir_in_frame}, output_format)


@camera_app.command("height")
def height_command(
    segment: list[str] = typer.Option(
        ...,
        "--segment",
        "-s",
        help="Annotation from object base to top as 'x1,y1,x2,y2' (repeatable)",
    ),
    tilt: float | None = typer.Option(None, help="Camera tilt below horizontal (degrees)"),
    cam_height: float | None = typer.Option(
        None, help="Camera height above the seabed (object heights use the same unit)"
    ),
    preset: str | None = PRESET_OPTION,
    config: Path | None = CONFIG_OPTION,
    in_water: bool = IN_WATER_OPTION,
    refractive_index: float | None = REFRACTIVE_INDEX_OPTION,
    output_format: OutputFormat = FORMAT_OPTION,
) -> None:
    """
    Real-world height of annotated objects in one image.

    Example:
        towcam camera height --preset gopro5-2.7k-medium --tilt 28.8 --cam-height 550 \\
            --segment 100,100,100,50 --segment 1200,1400,1300,1100
    """
    segments = [_parse_segment(value) for value in segment]
    rig = _build_rig(preset, config, in_water, refractive_index, tilt, cam_height)
    results = compute_object_heights(segments, rig)
    emit("Object Heights", {"objects": results}, output_format)
