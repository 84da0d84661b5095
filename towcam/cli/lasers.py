"""Laser dot scale and validation CLI commands."""

from dataclasses import replace
from pathlib import Path

import typer

from towcam.cli.common import (
    CONFIG_OPTION,
    FORMAT_OPTION,
    PRESET_OPTION,
    OutputFormat,
    emit,
    fail,
    load_survey_config,
    parse_point,
    require,
    resolve_camera,
    resolve_fovs,
)
from towcam.cli.main import lasers_app
from towcam.config import DEFAULT_REFRACTIVE_INDEX, SurveyConfig
from towcam.laser_scale import image_width_from_lasers
from towcam.laser_validation import validate_with_lasers
from towcam.pixel_point import PixelPoint

P1_OPTION = typer.Option(..., "--p1", help="First laser dot as 'x,y' (pixels)")
P2_OPTION = typer.Option(..., "--p2", help="Second laser dot as 'x,y' (pixels)")
DISTANCE_OPTION = typer.Option(None, help="Distance between the laser dots (m)")
IMAGE_SIZE_OPTION = typer.Option(
    None,
    "--image-size",
    help="Image size as 'width,height' in pixels (default: from the camera)",
)


def _image_size(value: str | None, survey: SurveyConfig, preset: str | None) -> PixelPoint:
    if value is not None:
        return parse_point(value, "--image-size")
    camera = resolve_camera(survey, preset, in_water=False, refractive_index=None)
    return PixelPoint(camera.pix_w, camera.pix_h)


@lasers_app.command("width")
def width_command(
    p1: str = P1_OPTION,
    p2: str = P2_OPTION,
    distance: float | None = DISTANCE_OPTION,
    image_size: str | None = IMAGE_SIZE_OPTION,
    preset: str | None = PRESET_OPTION,
    config: Path | None = CONFIG_OPTION,
    output_format: OutputFormat = FORMAT_OPTION,
) -> None:
    """
    Seabed width of the image at the row of two parallel laser dots.

    Example:
        towcam lasers width --p1 400,900 --p2 700,900 --distance 0.2 --image-size 2000,1000
    """
    survey = load_survey_config(config)
    point1 = parse_point(p1, "--p1")
    point2 = parse_point(p2, "--p2")
    dims = _image_size(image_size, survey, preset)

    reference = image_width_from_lasers(
        point1, point2, require(distance, survey.laser_distance_m, "--distance"), dims
    )
    emit("Laser Image Width", {"laser": reference}, output_format)


@lasers_app.command("validate")
def validate_command(
    p1: str = P1_OPTION,
    p2: str = P2_OPTION,
    distance: float | None = DISTANCE_OPTION,
    image_size: str | None = IMAGE_SIZE_OPTION,
    height: float | None = typer.Option(None, help="Assumed camera height above the seabed (m)"),
    tilt: float | None = typer.Option(None, help="Assumed camera tilt below horizontal (degrees)"),
    vfov: float | None = typer.Option(None, help="Vertical field of view (degrees)"),
    hfov: float | None = typer.Option(None, help="Horizontal field of view (degrees)"),
    angle_step: float | None = typer.Option(None, help="Tilt search step (degrees)"),
    height_step: float | None = typer.Option(None, help="Height search step (m)"),
    max_iterations: int | None = typer.Option(None, help="Maximum steps per search direction"),
    preset: str | None = PRESET_OPTION,
    config: Path | None = CONFIG_OPTION,
    in_water: bool = typer.Option(False, "--in-water", help="Convert in-air FOVs to in-water"),
    refractive_index: float | None = typer.Option(
        None, help=f"Refractive index for --in-water (default: {DEFAULT_REFRACTIVE_INDEX})"
    ),
    output_format: OutputFormat = FORMAT_OPTION,
) -> None:
    """
    Compare the trigonometric image width with the laser width.

    Reports how far the assumed height and tilt are from the laser
    measurement, and the tilt (at fixed height) and height (at fixed tilt)
    that would reconcile them.

    Example:
        towcam lasers validate --p1 400,900 --p2 700,900 --distance 0.2 \\
            --image-size 2000,1000 --height 0.55 --tilt 28.8 --vfov 40.3 --hfov 66.4
    """
    survey = load_survey_config(config)
    point1 = parse_point(p1, "--p1")
    point2 = parse_point(p2, "--p2")
    dims = _image_size(image_size, survey, preset)

    vfov, hfov = resolve_fovs(survey, vfov, hfov, preset, in_water, refractive_index)

    overrides = {
        key: value
        for key, value in (
            ("angle_step_deg", angle_step),
            ("height_step_m", height_step),
            ("max_iterations", max_iterations),
        )
        if value is not None
    }
    try:
        search = replace(survey.search, **overrides)
    except ValueError as e:
        fail(str(e))

    result = validate_with_lasers(
        point1,
        point2,
        require(distance, survey.laser_distance_m, "--distance"),
        dims,
        require(height, survey.height_m, "--height"),
        require(tilt, survey.tilt_deg, "--tilt"),
        vfov,
        hfov,
        search=search,
    )
    emit("Laser Validation", {"validation": result}, output_format)
