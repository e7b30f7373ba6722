"""Tests for vectorised track projection."""

import numpy as np
import pytest

from plangps.core.calibration import TransformEngine
from plangps.core.coordinate_transform import project_coordinates, project_track


@pytest.fixture
def calibrated_engine():
    engine = TransformEngine()
    engine.set_calibration(
        ((0.0, 0.0), (0.0, 0.0)),
        ((1.0, 1.0), (100.0, 100.0)),
        ((0.0, 1.0), (0.0, 100.0)),
    )
    return engine


class TestProjectCoordinates:
    """Test projecting arrays of fixes with a fitted transform."""

    def test_matches_single_point_projection(self, calibrated_engine):
        """Test vectorised output agrees with world_to_pixel."""
        transform = calibrated_engine.solve().value
        lats = np.array([0.1, 0.25, 0.9])
        lngs = np.array([0.3, 0.5, 0.2])

        xs, ys = project_coordinates(lats, lngs, transform)

        for lat, lng, x, y in zip(lats, lngs, xs, ys):
            pixel = calibrated_engine.world_to_pixel(lat, lng)
            assert x == pytest.approx(pixel.x)
            assert y == pytest.approx(pixel.y)

    def test_nan_stays_nan(self, calibrated_engine):
        """Test missing fixes propagate as NaN."""
        transform = calibrated_engine.solve().value
        lats = np.array([0.5, np.nan, 0.5])
        lngs = np.array([0.5, 0.5, np.nan])

        xs, ys = project_coordinates(lats, lngs, transform)

        assert xs[0] == pytest.approx(50.0)
        assert ys[0] == pytest.approx(50.0)
        assert np.isnan(xs[1:]).all()
        assert np.isnan(ys[1:]).all()

    def test_all_nan(self, calibrated_engine):
        """Test an input with no valid fixes."""
        transform = calibrated_engine.solve().value

        xs, ys = project_coordinates(np.full(3, np.nan), np.full(3, np.nan), transform)

        assert np.isnan(xs).all() and np.isnan(ys).all()

    def test_shape_mismatch(self, calibrated_engine):
        """Test mismatched arrays are rejected."""
        transform = calibrated_engine.solve().value

        with pytest.raises(ValueError, match="differ in shape"):
            project_coordinates(np.zeros(3), np.zeros(2), transform)


class TestProjectTrack:
    """Test projecting with the engine's current calibration."""

    def test_uncalibrated_engine(self):
        """Test an uncalibrated engine yields NaN everywhere."""
        xs, ys = project_track(TransformEngine(), [0.1, 0.2], [0.3, 0.4])

        assert xs.shape == (2,)
        assert np.isnan(xs).all() and np.isnan(ys).all()

    def test_calibrated_engine(self, calibrated_engine):
        """Test a track on a calibrated plan."""
        xs, ys = project_track(calibrated_engine, [0.5, 1.0], [0.5, 0.0])

        np.testing.assert_allclose(xs, [50.0, 100.0], atol=1e-9)
        np.testing.assert_allclose(ys, [50.0, 0.0], atol=1e-9)
