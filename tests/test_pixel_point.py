#!/usr/bin/env python3
"""Tests for the PixelPoint value type."""

import os
import sys

import pytest

sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from towcam.pixel_point import PixelPoint


class TestPixelPoint:
    def test_from_sequence(self):
        assert PixelPoint.from_sequence([2000, 1000]) == PixelPoint(2000.0, 1000.0)

    def test_from_sequence_wrong_length(self):
        with pytest.raises(ValueError, match="got 3 values"):
            PixelPoint.from_sequence((1, 2, 3))

    def test_to_pixel_rounds(self):
        assert PixelPoint(10.4, 10.6).to_pixel == (10, 11)

    def test_is_hashable_and_frozen(self):
        point = PixelPoint(1.0, 2.0)

        assert {point: "dot"}[PixelPoint(1.0, 2.0)] == "dot"
        with pytest.raises(AttributeError):
            point.x = 5.0
