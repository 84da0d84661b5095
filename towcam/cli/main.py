"""Main Typer CLI application for towed camera photogrammetry."""

import logging

import typer

app = typer.Typer(
    help="Photogrammetry tools for towed and oblique underwater survey cameras",
    no_args_is_help=True,
)

# Subcommand groups
geometry_app = typer.Typer(help="Area and width of the seabed in view")
camera_app = typer.Typer(help="Camera rig, nadir and object height commands")
lasers_app = typer.Typer(help="Laser dot scale and validation commands")
survey_app = typer.Typer(help="Layback and still extraction commands")

app.add_typer(geometry_app, name="geometry")
app.add_typer(camera_app, name="camera")
app.add_typer(lasers_app, name="lasers")
app.add_typer(survey_app, name="survey")


@app.callback()
def main(
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Show progress and debug messages",
    ),
) -> None:
    """Configure logging for all subcommands."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s - %(name)s - %(message)s",
    )


def _register_commands() -> None:
    """
    Import command modules to register commands with their respective apps.

    Commands use decorators like @geometry_app.command() which register
    themselves when the module is imported.
    """
    from towcam.cli import camera, geometry, lasers, survey

    # Avoid "imported but unused" warnings by explicitly using the module
    _ = camera
    _ = geometry
    _ = lasers
    _ = survey


_register_commands()


if __name__ == "__main__":
    app()
