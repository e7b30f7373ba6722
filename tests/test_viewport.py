"""Tests for map view helpers."""

import math

import pytest

from plangps.core.types import PixelPoint
from plangps.core.viewport import (
    center_translation, fuse_heading, marker_rotation, target_zoom_scale
)


class TestHeading:
    """Test heading selection and marker rotation."""

    def test_gps_heading_when_moving(self):
        assert fuse_heading(90.0, 180.0, speed=2.5) == 180.0

    def test_compass_when_slow(self):
        assert fuse_heading(90.0, 180.0, speed=1.0) == 90.0

    def test_compass_without_gps_course(self):
        assert fuse_heading(45.0, None, speed=10.0) == 45.0

    def test_marker_rotation(self):
        """Test a north-up plan with the device facing east."""
        assert marker_rotation(-math.pi / 2, 90.0) == pytest.approx(math.pi / 2)
        assert marker_rotation(0.0, 0.0) == pytest.approx(math.pi / 2)


class TestZoom:
    """Test zoom targeting from the plan scale."""

    def test_target_zoom(self):
        """Test fitting 200 m at 10 px/m on a doubled raster."""
        assert target_zoom_scale(10.0, 1080.0) == pytest.approx(0.27)

    def test_custom_visible_width(self):
        assert target_zoom_scale(10.0, 1000.0, visible_meters=50.0, content_scale=1.0) == pytest.approx(2.0)

    def test_clamped(self):
        assert target_zoom_scale(0.001, 1080.0) == 20.0
        assert target_zoom_scale(1e6, 1080.0) == 0.1

    def test_unavailable_scale(self):
        assert target_zoom_scale(None, 1080.0) is None
        assert target_zoom_scale(0.0, 1080.0) is None

    def test_center_translation(self):
        """Test the pan offset that centres a pixel."""
        assert center_translation(PixelPoint(100.0, 50.0), (1000.0, 800.0), 1.5) == pytest.approx((200.0, 250.0))
