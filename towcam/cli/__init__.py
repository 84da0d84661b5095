"""CLI module for towed camera photogrammetry.

Provides a unified `towcam` command-line interface for image geometry,
camera rig, laser scale and survey tools.
"""

from towcam.cli.main import app

__all__ = ["app"]
