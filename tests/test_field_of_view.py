#!/usr/bin/env python3
"""
Tests for the in-air to in-water field of view conversion.

A flat port housing refracts each ray by Snell's law, so the in-water FOV is
2 * asin(sin(FOV/2) / n). Out-of-domain arguments produce NaN.
"""

import math
import os
import sys

import pytest
from hypothesis import given, settings
from hypothesis import strategies as st

sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from towcam.config import DEFAULT_REFRACTIVE_INDEX, CameraSpec
from towcam.field_of_view import in_water_fov


class TestInWaterFov:
    def test_reference_value(self):
        assert in_water_fov(100) == pytest.approx(69.734216834969644, rel=1e-12)

    def test_default_refractive_index(self):
        assert DEFAULT_REFRACTIVE_INDEX == 1.34
        assert in_water_fov(94.4) == in_water_fov(94.4, 1.34)

    def test_zero_fov(self):
        assert in_water_fov(0, 1.5) == 0.0

    def test_unit_index_is_identity(self):
        assert in_water_fov(66.4, 1.0) == pytest.approx(66.4)

    def test_out_of_domain_is_nan(self):
        """An index below 1 can push the sine above 1; no clamping."""
        assert math.isnan(in_water_fov(170, 0.5))

    def test_returns_python_float(self):
        assert type(in_water_fov(100)) is float

    def test_camera_spec_conversion(self):
        spec = CameraSpec.from_preset("gopro5-2.7k-medium")
        wet = spec.in_water(1.34)

        assert wet.used_vfov_deg == in_water_fov(55.0, 1.34)
        assert wet.used_hfov_deg == in_water_fov(94.4, 1.34)
        assert wet.full_hfov_deg == in_water_fov(122.6, 1.34)
        assert wet.pix_w == spec.pix_w
        assert wet.sensor_width_mm == spec.sensor_width_mm


fov_strategy = st.floats(min_value=0.5, max_value=179.0, allow_nan=False, allow_infinity=False)
index_strategy = st.floats(min_value=1.0, max_value=2.5, allow_nan=False, allow_infinity=False)


class TestInWaterFovProperties:
    """Property-based tests for refraction at a flat port."""

    @given(fov_strategy, index_strategy, index_strategy)
    @settings(max_examples=200)
    def test_monotonically_decreasing_in_index(self, fov, ri_a, ri_b):
        """
        Property: a denser medium always narrows the field of view.

        sin(FOV/2)/n decreases as n grows and asin is increasing, so the
        in-water FOV is non-increasing in n.
        """
        low, high = sorted((ri_a, ri_b))

        assert in_water_fov(fov, high) <= in_water_fov(fov, low) + 1e-12

    @given(fov_strategy, index_strategy)
    @settings(max_examples=100)
    def test_never_wider_than_in_air(self, fov, ri):
        """Property: for n >= 1 the in-water FOV does not exceed the in-air FOV."""
        assert in_water_fov(fov, ri) <= fov + 1e-9
