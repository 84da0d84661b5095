"""Shared option handling and output formatting for the CLI commands."""

import json
from dataclasses import fields, is_dataclass
from enum import Enum
from pathlib import Path
from typing import Any, NoReturn

import numpy as np
import typer
import yaml

from towcam.config import CameraSpec, SurveyConfig, get_default_config
from towcam.field_of_view import in_water_fov
from towcam.pixel_point import PixelPoint


class OutputFormat(str, Enum):
    """Output format options."""

    HUMAN = "human"
    JSON = "json"
    YAML = "yaml"


FORMAT_OPTION = typer.Option(
    OutputFormat.HUMAN,
    "--format",
    "-f",
    help="Output format",
)

PRESET_OPTION = typer.Option(
    None,
    "--preset",
    "-p",
    help="Camera preset name (e.g., 'gopro5-2.7k-medium')",
)

CONFIG_OPTION = typer.Option(
    None,
    "--config",
    "-c",
    help="Path to survey configuration YAML (default: $TOWCAM_CONFIG)",
)


def fail(message: str) -> NoReturn:
    """Print an error and exit with status 1."""
    typer.echo(f"Error: {message}", err=True)
    raise typer.Exit(1)


def load_survey_config(config_path: Path | None) -> SurveyConfig:
    """Load the survey configuration named on the command line or by the environment."""
    try:
        if config_path is not None:
            return SurveyConfig.from_yaml(str(config_path))
        return get_default_config()
    except FileNotFoundError as e:
        fail(str(e))
    except ValueError as e:
        fail(f"Invalid configuration: {e}")


def resolve_camera(
    survey: SurveyConfig,
    preset: str | None,
    in_water: bool,
    refractive_index: float | None,
) -> CameraSpec:
    """
    Pick the camera for a command.

    A preset given on the command line wins over the configured camera. The
    in-water conversion is applied when requested on the command line or in
    the configuration.
    """
    if preset is not None:
        try:
            camera = CameraSpec.from_preset(preset)
        except ValueError as e:
            fail(str(e))
    elif survey.camera is not None:
        camera = survey.camera
    else:
        fail("No camera configured. Use --preset NAME or --config PATH (or set TOWCAM_CONFIG)")

    if in_water or survey.in_water:
        ri = refractive_index if refractive_index is not None else survey.refractive_index
        camera = camera.in_water(ri)
    return camera


def resolve_fovs(
    survey: SurveyConfig,
    vfov: float | None,
    hfov: float | None,
    preset: str | None,
    in_water: bool,
    refractive_index: float | None,
) -> tuple[float, float]:
    """
    Return (vfov, hfov) in degrees.

    Explicit --vfov/--hfov are taken as in-air values and converted when an
    in-water conversion is requested. With neither given, the used FOVs of
    the resolved camera are returned.
    """
    if vfov is not None and hfov is not None:
        if in_water or survey.in_water:
            ri = refractive_index if refractive_index is not None else survey.refractive_index
            return in_water_fov(vfov, ri), in_water_fov(hfov, ri)
        return vfov, hfov
    if vfov is None and hfov is None:
        camera = resolve_camera(survey, preset, in_water, refractive_index)
        return camera.used_vfov_deg, camera.used_hfov_deg
    fail("--vfov and --hfov must be given together")


def require(value: float | None, fallback: float | None, option: str) -> float:
    """Return the command-line value, else the configured one, else exit."""
    if value is not None:
        return value
    if fallback is not None:
        return fallback
    fail(f"{option} is required (not given and not set in the configuration)")


def parse_point(value: str, option: str) -> PixelPoint:
    """Parse an 'x,y' pair."""
    try:
        return PixelPoint.from_sequence([float(v) for v in value.split(",")])
    except ValueError:
        raise typer.BadParameter(f"expected 'x,y', got {value!r}", param_hint=option) from None


def to_plain(value: Any) -> Any:
    """Convert result records into JSON/YAML-safe builtin types."""
    if is_dataclass(value) and not isinstance(value, type):
        return {f.name: to_plain(getattr(value, f.name)) for f in fields(value)}
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, dict):
        return {str(k): to_plain(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [to_plain(v) for v in value]
    if isinstance(value, np.generic):
        return value.item()
    return value


def _format_value(value: Any) -> str:
    if value is None:
        return "-"
    if isinstance(value, bool):
        return "yes" if value else "no"
    if isinstance(value, float):
        return f"{value:.6g}"
    if isinstance(value, list):
        return ", ".join(_format_value(v) for v in value) or "-"
    return str(value)


def _human_lines(data: dict, indent: int) -> list[str]:
    pad = "  " * indent
    lines = []
    for key, value in data.items():
        if isinstance(value, dict):
            lines.append(f"{pad}{key}:")
            lines.extend(_human_lines(value, indent + 1))
        elif isinstance(value, list) and value and isinstance(value[0], dict):
            lines.append(f"{pad}{key}:")
            for i, item in enumerate(value):
                lines.append(f"{pad}  [{i}]")
                lines.extend(_human_lines(item, indent + 2))
        else:
            lines.append(f"{pad}{key}: {_format_value(value)}")
    return lines


def _format_human_readable(title: str, data: dict) -> str:
    """Format result for human-readable output."""
    lines = ["=" * 60, title, "=" * 60, ""]
    lines.extend(_human_lines(data, 1))
    lines.extend(["", "=" * 60])
    return "\n".join(lines)


def _format_json(data: dict) -> str:
    """Format result as JSON (non-finite values are written as NaN/Infinity)."""
    return json.dumps(data, indent=2)


def _format_yaml(data: dict) -> str:
    """Format result as YAML."""
    return yaml.safe_dump(data, sort_keys=False, default_flow_style=False).rstrip("\n")


def emit(title: str, data: dict, output_format: OutputFormat) -> None:
    """Print a result mapping in the requested format."""
    data = to_plain(data)
    if output_format == OutputFormat.HUMAN:
        output = _format_human_readable(title, data)
    elif output_format == OutputFormat.JSON:
        output = _format_json(data)
    else:  # YAML
        output = _format_yaml(data)

    typer.echo(output)
