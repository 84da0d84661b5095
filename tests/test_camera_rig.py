#!/usr/bin/env python3
"""
Unit tests for nadir location, camera constant and rig assembly.

Reference rig: GoPro Hero5 Black recording 16:9 Medium at 2.7K
(full sensor 122.6 x 94.4 deg, used 94.4 x 55.0 deg, 2704 x 1520 px,
6.17 x 4.65 mm sensor), tilted 28.8 deg below horizontal.

Run with: python -m pytest tests/test_camera_rig.py -v
"""

import math
import os
import sys

import pytest
from hypothesis import given, settings
from hypothesis import strategies as st

sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from towcam.camera_rig import CameraRig, build_camera_rig, compute_camera_constant, compute_nadir
from towcam.config import CameraSpec

GOPRO5_MEDIUM = (122.6, 94.4, 94.4, 55.0, 2704, 1520, 6.17, 4.65)


class TestComputeNadir:
    def test_reference_angles(self):
        result = compute_nadir(55.0, 28.8, 2704, 1520)

        assert result.ang_cad == pytest.approx(27.5)
        assert result.ang_dca == pytest.approx(123.7)
        assert result.ang_bca == pytest.approx(56.3)
        assert result.ang_bac == pytest.approx(33.7)
        assert result.ang_bad == pytest.approx(61.2)

    def test_reference_lengths(self):
        result = compute_nadir(55.0, 28.8, 2704, 1520)

        assert result.len_ac == pytest.approx(792.92667443472965, rel=1e-12)
        assert result.len_bc == pytest.approx(439.95094668498371, rel=1e-12)

    def test_reference_nadir(self):
        result = compute_nadir(55.0, 28.8, 2704, 1520)

        assert result.nadir_x == 1352
        assert result.nadir_y == pytest.approx(1959.9509466849836, rel=1e-12)

    def test_nadir_y_is_not_rounded(self):
        result = compute_nadir(100.0, 45.0, 2700, 1900)

        assert result.nadir_y == pytest.approx(1823.5723248092081, rel=1e-12)
        assert result.nadir_y != round(result.nadir_y)

    def test_steep_tilt_puts_nadir_inside_frame(self):
        """With the bottom of the frame past vertical the nadir is in view."""
        result = compute_nadir(100.0, 45.0, 2700, 1900)

        assert 0 <= result.nadir_y <= 1900

    def test_zero_fov_is_non_finite(self):
        result = compute_nadir(0.0, 28.8, 2704, 1520)

        assert not math.isfinite(result.len_ac)
        assert not math.isfinite(result.nadir_y)


class TestComputeCameraConstant:
    def test_reference_values(self):
        result = compute_camera_constant(*GOPRO5_MEDIUM)

        assert result.focal_length == pytest.approx(1.6889881651577228, rel=1e-12)
        assert result.used_sensor_width == pytest.approx(3.6478826052975633, rel=1e-12)
        assert result.pix_size == pytest.approx(0.0013490690108348977, rel=1e-12)
        assert result.cam_constant_c == pytest.approx(1251.9657271739268, rel=1e-12)

    def test_intermediate_angles(self):
        result = compute_camera_constant(*GOPRO5_MEDIUM)

        assert result.len_af == pytest.approx(3.085)
        assert result.ang_acf == pytest.approx(61.3)
        assert result.ang_caf == pytest.approx(28.7)
        assert result.ang_ecf == pytest.approx(47.2)
        assert result.ang_cef == pytest.approx(42.8)
        assert result.len_ef == pytest.approx(result.used_sensor_width / 2)

    def test_full_sensor_mode_uses_whole_sensor(self):
        result = compute_camera_constant(122.6, 94.4, 122.6, 94.4, 4000, 3000, 6.17, 4.65)

        assert result.used_sensor_width == pytest.approx(6.17)

    def test_zero_width_image_is_non_finite(self):
        result = compute_camera_constant(122.6, 94.4, 94.4, 55.0, 0, 1520, 6.17, 4.65)

        assert math.isinf(result.pix_size)


class TestCameraRig:
    def test_build_reference_rig(self):
        rig = build_camera_rig(*GOPRO5_MEDIUM, cam_angle=28.8, cam_height=550)

        assert rig.cam_constant_c == pytest.approx(1251.9657271739268, rel=1e-12)
        assert rig.nadir_x == 1352
        assert rig.nadir_y == pytest.approx(1959.9509466849836, rel=1e-12)
        assert rig.ppx == 1352
        assert rig.ppy == 760
        assert rig.cam_height == 550
        assert not rig.nadir_in_frame

    def test_nadir_uses_used_vfov(self):
        rig = build_camera_rig(*GOPRO5_MEDIUM, cam_angle=28.8, cam_height=550)

        assert rig.nadir_y == compute_nadir(55.0, 28.8, 2704, 1520).nadir_y
        assert rig.nadir_y != compute_nadir(94.4, 28.8, 2704, 1520).nadir_y

    def test_from_spec_matches_build(self):
        spec = CameraSpec.from_preset("gopro5-2.7k-medium")

        assert CameraRig.from_spec(spec, 28.8, 550) == build_camera_rig(
            *GOPRO5_MEDIUM, cam_angle=28.8, cam_height=550
        )

    def test_rig_is_immutable(self):
        rig = build_camera_rig(*GOPRO5_MEDIUM, cam_angle=28.8, cam_height=550)

        with pytest.raises(AttributeError):
            rig.cam_height = 100


class TestNadirProperties:
    """Property-based tests for the nadir construction."""

    @given(
        st.floats(min_value=10.0, max_value=120.0),
        st.floats(min_value=1.0, max_value=89.0),
    )
    @settings(max_examples=100)
    def test_nadir_below_principal_point(self, vfov, tilt):
        """
        Property: for a camera tilted below horizontal the nadir lies below
        the image centre.

        The nadir ray is vertical and the optical axis is tilted theta below
        horizontal, so the nadir is 90 - theta degrees further down the image
        than the principal point.
        """
        result = compute_nadir(vfov, tilt, 2000, 1000)

        assert result.nadir_y > 500
        assert result.nadir_x == 1000
