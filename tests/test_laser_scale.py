#!/usr/bin/env python3
"""
Tests for image width estimation from two parallel laser dots.

Run with: python -m pytest tests/test_laser_scale.py -v
"""

import logging
import math
import os
import sys

import pytest

sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from towcam.diagnostics import WarningCode
from towcam.laser_scale import image_width_from_lasers
from towcam.pixel_point import PixelPoint

DIMS = PixelPoint(2000, 1000)


class TestImageWidthFromLasers:
    def test_reference_example(self):
        ref = image_width_from_lasers(PixelPoint(10, 10), PixelPoint(50, 10), 0.2, DIMS)

        assert ref.laser_distance_x_pix == 40
        assert ref.image_width == pytest.approx(10.0)
        assert ref.laser_height == pytest.approx(0.99)
        assert ref.laser_distance_y_pct == 0
        assert ref.warnings == ()

    def test_echoes_inputs(self):
        p1, p2 = PixelPoint(400, 900), PixelPoint(700, 900)

        ref = image_width_from_lasers(p1, p2, 0.2, DIMS)

        assert ref.laser_p1 == p1
        assert ref.laser_p2 == p2
        assert ref.laser_distance_m == 0.2
        assert ref.pixel_dims == DIMS

    def test_dot_order_does_not_matter(self):
        a = image_width_from_lasers(PixelPoint(400, 880), PixelPoint(700, 900), 0.2, DIMS)
        b = image_width_from_lasers(PixelPoint(700, 900), PixelPoint(400, 880), 0.2, DIMS)

        assert a.image_width == b.image_width
        assert a.laser_height == b.laser_height

    def test_laser_height_is_mean_of_both_dots(self):
        ref = image_width_from_lasers(PixelPoint(400, 880), PixelPoint(700, 900), 0.2, DIMS)

        assert ref.laser_height == pytest.approx(1 - 890 / 1000)

    @pytest.mark.parametrize(
        "y2,warned",
        [(10, False), (50, False), (59, False), (60, True), (200, True)],
        ids=["level", "4pct", "4.9pct", "5pct", "19pct"],
    )
    def test_horizontal_tolerance(self, y2, warned):
        ref = image_width_from_lasers(PixelPoint(10, 10), PixelPoint(50, y2), 0.2, DIMS)

        assert (WarningCode.LASERS_NOT_HORIZONTAL in ref.warnings) is warned

    def test_tilted_lasers_log_warning(self, caplog):
        with caplog.at_level(logging.WARNING, logger="towcam.laser_scale"):
            image_width_from_lasers(PixelPoint(10, 10), PixelPoint(50, 200), 0.2, DIMS)

        assert "not horizontal" in caplog.text

    def test_custom_tolerance(self):
        ref = image_width_from_lasers(
            PixelPoint(10, 10), PixelPoint(50, 30), 0.2, DIMS, horizontal_tolerance=0.01
        )

        assert ref.warnings == (WarningCode.LASERS_NOT_HORIZONTAL,)

    def test_coincident_dots_give_infinite_width(self):
        ref = image_width_from_lasers(PixelPoint(500, 500), PixelPoint(500, 500), 0.2, DIMS)

        assert math.isinf(ref.image_width)

    def test_zero_image_height_propagates(self):
        ref = image_width_from_lasers(PixelPoint(10, 10), PixelPoint(50, 10), 0.2, PixelPoint(2000, 0))

        assert ref.image_width == pytest.approx(10.0)
        assert ref.laser_height == -math.inf
        assert math.isnan(ref.laser_distance_y_pct)
        assert ref.warnings == ()
