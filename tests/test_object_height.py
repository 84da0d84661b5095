#!/usr/bin/env python3
"""
Unit and property-based tests for single-image object height estimation.

Reference rig: GoPro Hero5 16:9 Medium 2.7K, 28.8 deg tilt, camera 550 mm
above the seabed, so object dimensions are in millimetres.

Run with: python -m pytest tests/test_object_height.py -v
"""

import math
import os
import sys

import pytest
from hypothesis import given, settings
from hypothesis import strategies as st

sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from towcam.camera_rig import build_camera_rig
from towcam.object_height import (
    AnnotationSegment,
    compute_object_height,
    compute_object_height_for_rig,
    compute_object_heights,
)


@pytest.fixture
def rig():
    return build_camera_rig(122.6, 94.4, 94.4, 55.0, 2704, 1520, 6.17, 4.65, cam_angle=28.8, cam_height=550)


class TestReferenceAnnotations:
    def test_vertical_annotation(self, rig):
        result = compute_object_height_for_rig(AnnotationSegment(100, 100, 100, 50), rig)

        assert result.a == 2003104
        assert result.d == 2071604
        assert result.b == pytest.approx(1439882.2744501883, rel=1e-12)
        assert result.c == pytest.approx(5026921.5240743663, rel=1e-12)
        assert result.e == pytest.approx(5215416.6187428646, rel=1e-12)
        assert result.eq1 == pytest.approx(6367514.246907427, rel=1e-10)
        assert result.eq2 == pytest.approx(1550901.114412101, rel=1e-10)
        assert result.eq3 == pytest.approx(6459647.0676800599, rel=1e-10)
        assert result.eq4 == pytest.approx(1430906.0197436027, rel=1e-10)
        assert result.obj_height == pytest.approx(49.791776633992455, rel=1e-9)

    def test_inclined_annotation(self, rig):
        result = compute_object_height_for_rig(AnnotationSegment(1200, 1400, 1300, 1100), rig)

        assert result.obj_pix_x == 100
        assert result.obj_pix_y == 300
        assert result.obj_pix_xy == pytest.approx(math.sqrt(100000))
        assert result.obj_ang_r == pytest.approx(1.2490457723982544, rel=1e-12)
        assert result.obj_height == pytest.approx(227.49824277195918, rel=1e-9)
        assert result.obj_length == pytest.approx(239.80420361510969, rel=1e-9)
        assert result.obj_width == pytest.approx(75.832747590653071, rel=1e-9)

    def test_explicit_parameters(self):
        result = compute_object_height(100, 100, 100, 50, 200, 200, 100, 100, 1, 1)

        assert result.eq2 == 2
        assert result.eq4 == -9998
        assert result.obj_height == pytest.approx(142.30125598017858, rel=1e-10)

    def test_rig_overload_matches_explicit(self, rig):
        explicit = compute_object_height(
            1200, 1400, 1300, 1100,
            rig.nadir_x, rig.nadir_y, rig.ppx, rig.ppy, rig.cam_constant_c, rig.cam_height,
        )

        assert compute_object_height_for_rig(AnnotationSegment(1200, 1400, 1300, 1100), rig) == explicit

    def test_batch(self, rig):
        segments = [AnnotationSegment(100, 100, 100, 50), AnnotationSegment(1200, 1400, 1300, 1100)]

        results = compute_object_heights(segments, rig)

        assert [r.obj_height for r in results] == [
            compute_object_height_for_rig(s, rig).obj_height for s in segments
        ]


class TestDegenerateGeometry:
    """Zero-angle override and non-finite propagation."""

    def test_vertical_segment_has_no_width(self, rig):
        result = compute_object_height_for_rig(AnnotationSegment(100, 100, 100, 50), rig)

        assert result.obj_ang_r == 0
        assert result.obj_width == 0
        assert result.obj_length == result.obj_height

    def test_horizontal_segment_uses_same_override(self, rig):
        result = compute_object_height_for_rig(AnnotationSegment(800, 900, 900, 900), rig)

        assert result.obj_ang_r == 0
        assert result.obj_width == 0
        assert result.obj_length == result.obj_height

    def test_zero_length_segment_has_zero_height(self, rig):
        result = compute_object_height_for_rig(AnnotationSegment(500, 600, 500, 600), rig)

        assert result.obj_pix_xy == 0
        assert result.obj_height == 0
        assert result.obj_length == 0
        assert result.obj_width == 0

    def test_zero_denominator_gives_infinity(self):
        """Base ray perpendicular to the nadir ray with C = 0 makes Eq2 zero."""
        result = compute_object_height(100, 0, 100, -50, 0, 100, 0, 0, 0, 1)

        assert result.eq2 == 0
        assert math.isinf(result.obj_height)
        assert not result.is_finite

    def test_nan_input_propagates(self, rig):
        result = compute_object_height(
            1200, 1400, 1300, 1100,
            rig.nadir_x, rig.nadir_y, rig.ppx, rig.ppy, rig.cam_constant_c, float("nan"),
        )

        assert math.isnan(result.obj_height)
        assert math.isnan(result.obj_length)
        assert math.isnan(result.obj_width)
        assert not result.is_finite


pixel_x = st.floats(min_value=0.0, max_value=2704.0, allow_nan=False, allow_infinity=False)
pixel_y = st.floats(min_value=0.0, max_value=1520.0, allow_nan=False, allow_infinity=False)


class TestObjectHeightProperties:
    """Property-based tests for the relief displacement formula."""

    @given(pixel_x, pixel_y)
    @settings(max_examples=100)
    def test_zero_length_annotation_has_no_relief(self, x, y):
        """
        Property: an annotation whose base and top coincide has height 0.

        The base and top terms of the formula are computed from identical
        inputs, so (Eq1/Eq2)/(Eq3/Eq4) is exactly 1.
        """
        rig = build_camera_rig(122.6, 94.4, 94.4, 55.0, 2704, 1520, 6.17, 4.65, 28.8, 550)

        result = compute_object_height_for_rig(AnnotationSegment(x, y, x, y), rig)

        assert result.obj_height == 0

    @given(pixel_x, pixel_y, pixel_y)
    @settings(max_examples=100)
    def test_vertical_annotation_override(self, x, y1, y2):
        """
        Property: X1 == X2 always gives width 0 and length == height.

        Vertical annotations are treated as upright objects whatever their
        pixel extent.
        """
        rig = build_camera_rig(122.6, 94.4, 94.4, 55.0, 2704, 1520, 6.17, 4.65, 28.8, 550)

        result = compute_object_height_for_rig(AnnotationSegment(x, y1, x, y2), rig)

        assert result.obj_width == 0
        assert result.obj_length == result.obj_height or (
            math.isnan(result.obj_length) and math.isnan(result.obj_height)
        )
