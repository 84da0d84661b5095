#!/usr/bin/env python3
"""
Tests for reconciling the trigonometric image width with laser dots.

Run with: python -m pytest tests/test_laser_validation.py -v
"""

import logging
import math
import os
import sys

import pytest

sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from towcam.area_of_view import compute_area_of_view, compute_image_width_at_position
from towcam.config import SearchSettings
from towcam.laser_validation import _hill_climb, validate_with_lasers
from towcam.pixel_point import PixelPoint

REFERENCE = (0.55, 28.8, 40.3, 66.4)


class TestHillClimb:
    def test_finds_minimum_below_start(self):
        best, difference = _hill_climb(5.0, 3.0, 1.0, lambda v: abs(v - 2), max_iterations=100)

        assert best == 2.0
        assert difference == 0.0

    def test_finds_minimum_above_start(self):
        best, difference = _hill_climb(5.0, 3.0, 1.0, lambda v: abs(v - 8), max_iterations=100)

        assert best == 8.0
        assert difference == 0.0

    def test_stays_put_at_minimum(self):
        calls = []

        def difference_at(value):
            calls.append(value)
            return abs(value)

        best, difference = _hill_climb(0.0, 0.0, 0.5, difference_at, max_iterations=100)

        assert best == 0.0
        assert difference == 0.0
        # One probe in each direction
        assert calls == [-0.5, 0.5]

    def test_stops_at_first_local_minimum(self):
        """Only the first dip in each direction is found."""
        table = {4.0: 2.0, 3.0: 5.0, 2.0: 0.0, 6.0: 9.0}

        best, difference = _hill_climb(5.0, 3.0, 1.0, lambda v: table.get(v, 99.0), max_iterations=100)

        assert best == 4.0
        assert difference == 2.0

    def test_iteration_bound(self, caplog):
        with caplog.at_level(logging.WARNING, logger="towcam.laser_validation"):
            best, difference = _hill_climb(0.0, 100.0, 1.0, lambda v: 100 - abs(v), max_iterations=3)

        assert best == -3.0
        assert difference == 97.0
        assert "Search stopped after 3 steps" in caplog.text

    def test_infinite_difference_ends_direction(self):
        best, difference = _hill_climb(
            1.0, 1.0, 1.0, lambda v: float("inf") if v < 1 else v, max_iterations=100
        )

        assert best == 1.0
        assert difference == 1.0


class TestValidateWithLasers:
    def test_already_matched(self):
        """Lasers spanning the image make the laser width equal the real distance."""
        dims = PixelPoint(2048, 1000)
        trig = compute_image_width_at_position(*REFERENCE, position=0.5)

        result = validate_with_lasers(
            PixelPoint(0, 500), PixelPoint(2048, 500), trig, dims, *REFERENCE
        )

        assert result.laser_height == 0.5
        assert result.laser_width == trig
        assert result.trig_width == trig
        assert result.width_difference == 0
        assert result.best_angle == 28.8
        assert result.best_height == 0.55
        assert result.best_angle_difference == 0
        assert result.best_height_difference == 0
        assert result.trig_area_best_angle == result.trig_area_orig

    def test_lasers_wider_than_trig_width(self):
        """A wider laser width means the camera is higher or less tilted than assumed."""
        result = validate_with_lasers(
            PixelPoint(400, 900), PixelPoint(700, 900), 0.2, PixelPoint(2000, 1000), *REFERENCE
        )

        assert result.laser_height == pytest.approx(0.1)
        assert result.laser_width == pytest.approx(0.2 * 2000 / 300)
        assert result.laser_width > result.trig_width

        assert result.best_height > 0.55
        assert result.best_height_difference < result.width_difference
        assert result.best_height_difference < 0.02

        assert result.best_angle < 28.8
        assert result.best_angle_difference < result.width_difference

    def test_areas_use_full_frame(self):
        result = validate_with_lasers(
            PixelPoint(400, 900), PixelPoint(700, 900), 0.2, PixelPoint(2000, 1000), *REFERENCE
        )

        assert result.trig_area_orig == compute_area_of_view(*REFERENCE, proportion=1).area_s
        assert result.trig_area_best_height == compute_area_of_view(
            result.best_height, 28.8, 40.3, 66.4, proportion=1
        ).area_s
        assert result.trig_area_best_angle == compute_area_of_view(
            0.55, result.best_angle, 40.3, 66.4, proportion=1
        ).area_s

    def test_search_settings_are_used(self):
        coarse = validate_with_lasers(
            PixelPoint(400, 900), PixelPoint(700, 900), 0.2, PixelPoint(2000, 1000), *REFERENCE,
            search=SearchSettings(angle_step_deg=1.0, height_step_m=0.1),
        )

        # Coarse height steps land on multiples of 0.1 from the start
        steps = (coarse.best_height - 0.55) / 0.1
        assert steps == pytest.approx(round(steps))

    def test_laser_warnings_are_carried(self):
        result = validate_with_lasers(
            PixelPoint(400, 700), PixelPoint(700, 900), 0.2, PixelPoint(2000, 1000), *REFERENCE
        )

        assert [w.value for w in result.warnings] == ["lasers_not_horizontal"]

    def test_coincident_dots_skip_search(self, caplog):
        with caplog.at_level(logging.WARNING):
            result = validate_with_lasers(
                PixelPoint(500, 900), PixelPoint(500, 900), 0.2, PixelPoint(2000, 1000), *REFERENCE
            )

        assert math.isinf(result.laser_width)
        assert result.best_angle == 28.8
        assert result.best_height == 0.55
        assert math.isinf(result.best_angle_difference)
        assert result.trig_area_best_angle == result.trig_area_orig
        # One warning for the skipped search, none from search steps
        assert len(caplog.records) == 1
        assert "skipping the tilt and height search" in caplog.text

    @pytest.mark.parametrize(
        "kwargs,match",
        [
            ({"angle_step_deg": 0}, "angle_step_deg"),
            ({"height_step_m": -0.01}, "height_step_m"),
            ({"max_iterations": 0}, "max_iterations"),
        ],
        ids=["zero-angle-step", "negative-height-step", "no-iterations"],
    )
    def test_invalid_search_settings(self, kwargs, match):
        with pytest.raises(ValueError, match=match):
            SearchSettings(**kwargs)
