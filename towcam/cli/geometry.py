"""Seabed area and width CLI commands."""

from pathlib import Path

import typer

from towcam.area_of_view import ObliqueCameraGeometry
from towcam.cli.common import (
    CONFIG_OPTION,
    FORMAT_OPTION,
    PRESET_OPTION,
    OutputFormat,
    emit,
    fail,
    load_survey_config,
    require,
    resolve_fovs,
)
from towcam.cli.main import geometry_app
from towcam.config import DEFAULT_PROPORTION, DEFAULT_REFRACTIVE_INDEX, DEFAULT_WIDTH_POSITION
from towcam.field_of_view import in_water_fov


def _geometry(
    height: float | None,
    tilt: float | None,
    vfov: float | None,
    hfov: float | None,
    preset: str | None,
    config: Path | None,
    in_water: bool,
    refractive_index: float | None,
    strict: bool,
    proportion: float,
) -> ObliqueCameraGeometry:
    """
    Assemble the geometry from options, falling back to the configuration.

    With strict set, out-of-range parameters and strips reaching the horizon
    at the given proportion are rejected.
    """
    survey = load_survey_config(config)

    vfov, hfov = resolve_fovs(survey, vfov, hfov, preset, in_water, refractive_index)

    geometry = ObliqueCameraGeometry(
        height_m=require(height, survey.height_m, "--height"),
        tilt_deg=require(tilt, survey.tilt_deg, "--tilt"),
        vfov_deg=vfov,
        hfov_deg=hfov,
    )

    if strict:
        try:
            geometry.validate(proportion)
        except ValueError as e:
            fail(str(e))

    return geometry


@geometry_app.command("area")
def area_command(
    height: float | None = typer.Option(None, help="Camera height above the seabed (m)"),
    tilt: float | None = typer.Option(None, help="Camera tilt below horizontal (degrees)"),
    vfov: float | None = typer.Option(None, help="Vertical field of view (degrees)"),
    hfov: float | None = typer.Option(None, help="Horizontal field of view (degrees)"),
    proportion: float = typer.Option(
        DEFAULT_PROPORTION,
        help="Proportion of the image height measured from the bottom edge",
    ),
    preset: str | None = PRESET_OPTION,
    config: Path | None = CONFIG_OPTION,
    in_water: bool = typer.Option(False, "--in-water", help="Convert in-air FOVs to in-water"),
    refractive_index: float | None = typer.Option(
        None, help=f"Refractive index for --in-water (default: {DEFAULT_REFRACTIVE_INDEX})"
    ),
    strict: bool = typer.Option(
        False, "--strict", help="Reject out-of-range parameters and strips reaching the horizon"
    ),
    output_format: OutputFormat = FORMAT_OPTION,
) -> None:
    """
    Seabed area visible in an oblique image.

    The field of view comes from --vfov/--hfov or, when both are omitted,
    from the camera preset or configuration.

    Example:
        towcam geometry area --height 0.55 --tilt 28.8 --vfov 40.3 --hfov 66.4
        towcam geometry area --height 0.55 --tilt 28.8 --preset gopro5-2.7k-medium --in-water
    """
    geometry = _geometry(
        height, tilt, vfov, hfov, preset, config, in_water, refractive_index, strict, proportion
    )
    result = geometry.area_of_view(proportion)
    emit("Area of View", {"area_of_view": result}, output_format)


@geometry_app.command("width")
def width_command(
    height: float | None = typer.Option(None, help="Camera height above the seabed (m)"),
    tilt: float | None = typer.Option(None, help="Camera tilt below horizontal (degrees)"),
    vfov: float | None = typer.Option(None, help="Vertical field of view (degrees)"),
    hfov: float | None = typer.Option(None, help="Horizontal field of view (degrees)"),
    position: float = typer.Option(
        DEFAULT_WIDTH_POSITION,
        help="Row as a proportion of image height (0 = bottom, 1 = top)",
    ),
    preset: str | None = PRESET_OPTION,
    config: Path | None = CONFIG_OPTION,
    in_water: bool = typer.Option(False, "--in-water", help="Convert in-air FOVs to in-water"),
    refractive_index: float | None = typer.Option(
        None, help=f"Refractive index for --in-water (default: {DEFAULT_REFRACTIVE_INDEX})"
    ),
    strict: bool = typer.Option(
        False, "--strict", help="Reject out-of-range parameters and strips reaching the horizon"
    ),
    output_format: OutputFormat = FORMAT_OPTION,
) -> None:
    """
    Seabed width across the image at a given row.

    Example:
        towcam geometry width --height 0.55 --tilt 28.8 --vfov 40.3 --hfov 66.4 --position 0.25
    """
    geometry = _geometry(
        height, tilt, vfov, hfov, preset, config, in_water, refractive_index, strict, position
    )
    width = geometry.image_width_at(position)
    emit(
        "Image Width",
        {
            "height_m": geometry.height_m,
            "tilt_deg": geometry.tilt_deg,
            "vfov_deg": geometry.vfov_deg,
            "hfov_deg": geometry.hfov_deg,
            "position": position,
            "width_m": width,
        },
        output_format,
    )


@geometry_app.command("fov")
def fov_command(
    fov: float = typer.Argument(..., help="In-air field of view (degrees)"),
    refractive_index: float = typer.Option(DEFAULT_REFRACTIVE_INDEX, help="Refractive index of water"),
    output_format: OutputFormat = FORMAT_OPTION,
) -> None:
    """
    Convert an in-air field of view to its in-water equivalent.

    Example:
        towcam geometry fov 100
        towcam geometry fov 94.4 --refractive-index 1.33 --format json
    """
    emit(
        "In-water Field of View",
        {
            "fov_in_air_deg": fov,
            "refractive_index": refractive_index,
            "fov_in_water_deg": in_water_fov(fov, refractive_index),
        },
        output_format,
    )
