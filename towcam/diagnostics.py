"""Advisory warning codes attached to result records.

Results never raise for questionable inputs. Instead they carry a tuple of
``WarningCode`` values so callers can filter or report them, and the module
that detected the condition also logs it.
"""

from enum import Enum


class WarningCode(str, Enum):
    """Advisory conditions detected while computing a result."""

    LASERS_NOT_HORIZONTAL = "lasers_not_horizontal"
    """Laser dots differ in height by at least the horizontal tolerance."""

    VIEW_ABOVE_HORIZON = "view_above_horizon"
    """Top edge of the measured strip is at or above the horizon."""
