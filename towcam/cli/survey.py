"""Layback and still extraction CLI commands."""

from dataclasses import replace
from pathlib import Path

import typer

from towcam.cli.common import (
    CONFIG_OPTION,
    FORMAT_OPTION,
    OutputFormat,
    emit,
    fail,
    load_survey_config,
)
from towcam.cli.main import survey_app
from towcam.geodesy import (
    GeoPoint,
    SphericalGeodesy,
    WGS84Geodesy,
    get_cardinal_direction,
    parse_coordinate,
)
from towcam.layback import estimate_layback
from towcam.stills import extract_stills


def _coordinate(value: str, option: str) -> float:
    try:
        return parse_coordinate(value)
    except ValueError as e:
        raise typer.BadParameter(str(e), param_hint=option) from None


@survey_app.command("layback")
def layback_command(
    start_lon: str = typer.Option(..., help="Vessel longitude at the start of the tow"),
    start_lat: str = typer.Option(..., help="Vessel latitude at the start of the tow"),
    end_lon: str = typer.Option(..., help="Vessel longitude at the end of the tow"),
    end_lat: str = typer.Option(..., help="Vessel latitude at the end of the tow"),
    depth: float = typer.Option(..., help="Camera depth (m)"),
    wire: float = typer.Option(..., help="Wire payed out (m)"),
    offset: float = typer.Option(0.0, help="Distance from the GPS receiver to the stern (m)"),
    spherical: bool = typer.Option(
        False, "--spherical", help="Use great-circle formulas instead of the WGS84 ellipsoid"
    ),
    output_format: OutputFormat = FORMAT_OPTION,
) -> None:
    """
    Position of a towed camera behind the vessel.

    Coordinates are decimal degrees or DMS strings such as 39°38'25.72"N.

    Example:
        towcam survey layback --start-lon 151.20 --start-lat -33.85 \\
            --end-lon 151.21 --end-lat -33.85 --depth 100 --wire 120
    """
    start = GeoPoint(lon=_coordinate(start_lon, "--start-lon"), lat=_coordinate(start_lat, "--start-lat"))
    end = GeoPoint(lon=_coordinate(end_lon, "--end-lon"), lat=_coordinate(end_lat, "--end-lat"))

    geodesy = SphericalGeodesy() if spherical else WGS84Geodesy()
    result = estimate_layback(start, end, depth, wire, offset, geodesy=geodesy)

    emit(
        "Layback",
        {"layback": result, "direction": get_cardinal_direction(result.bearing_deg)},
        output_format,
    )


@survey_app.command("stills")
def stills_command(
    video: Path = typer.Argument(..., help="Path to the survey video"),
    outdir: Path | None = typer.Option(
        None,
        "--outdir",
        "-o",
        help="Directory for the PNG stills (default: the video's directory)",
    ),
    interval: float | None = typer.Option(None, help="Seconds between stills"),
    window: float | None = typer.Option(None, help="Seconds searched for the sharpest frame"),
    dark_max: float | None = typer.Option(None, help="Maximum proportion of dark pixels"),
    time_offset: float | None = typer.Option(None, "--offset", help="Start time (s)"),
    config: Path | None = CONFIG_OPTION,
    output_format: OutputFormat = FORMAT_OPTION,
) -> None:
    """
    Save the best-focus still at fixed intervals through a video.

    Example:
        towcam survey stills station12.mp4 --interval 30 --window 0.5
        towcam -v survey stills station12.mp4 --outdir stills/ --format json
    """
    if not video.exists():
        fail(f"Video not found: {video}")

    survey = load_survey_config(config)
    overrides = {
        key: value
        for key, value in (
            ("interval", interval),
            ("window", window),
            ("dark_max", dark_max),
            ("time_offset", time_offset),
        )
        if value is not None
    }
    try:
        settings = replace(survey.stills, **overrides)
    except ValueError as e:
        fail(str(e))

    if outdir is not None:
        outdir.mkdir(parents=True, exist_ok=True)

    try:
        records = extract_stills(str(video), str(outdir) if outdir is not None else None, settings)
    except RuntimeError as e:
        fail(str(e))

    emit("Fixed Interval Stills", {"video": str(video), "stills": records}, output_format)
