"""Tests for calibration files and settings."""

from pathlib import Path

import pytest

from plangps.core.config_spec import (
    load_calibration_file, load_settings, validate_calibration_config
)
from plangps.core.exceptions import ConfigurationFileError, ConfigurationValidationError
from plangps.core.types import LatLng, PixelPoint

CALIBRATION_YAML = """
name: Office floor 2
file_path: /plans/floor2.pdf
points:
  - gps: {lat: 52.0, lng: 4.0}
    pixel: {x: 10, y: 20}
  - gps: [52.001, 4.002]
    pixel: [400, 80]
  - gps: {lat: 52.0005, lng: 4.003}
    pixel: {x: 250, y: 300}
"""


class TestCalibrationFile:
    """Test loading calibration files."""

    def test_load(self, tmp_path):
        """Test mapping and list forms of points."""
        path = tmp_path / "calibration.yaml"
        path.write_text(CALIBRATION_YAML)

        spec = load_calibration_file(path)
        calibration = spec.to_calibration()

        assert spec.name == "Office floor 2"
        assert spec.file_path == "/plans/floor2.pdf"
        assert calibration.p1.gps == LatLng(52.0, 4.0)
        assert calibration.p2.gps == LatLng(52.001, 4.002)
        assert calibration.p2.pixel == PixelPoint(400.0, 80.0)

    def test_missing_file(self, tmp_path):
        with pytest.raises(ConfigurationFileError, match="not found"):
            load_calibration_file(tmp_path / "missing.yaml")

    def test_wrong_point_count(self):
        """Test that two points are rejected."""
        config = {"points": [
            {"gps": [0, 0], "pixel": [0, 0]},
            {"gps": [1, 1], "pixel": [1, 1]},
        ]}

        with pytest.raises(ConfigurationValidationError, match="exactly 3"):
            validate_calibration_config(config)

    def test_latitude_out_of_range(self):
        config = {"points": [
            {"gps": [95, 0], "pixel": [0, 0]},
            {"gps": [1, 1], "pixel": [1, 1]},
            {"gps": [2, 1], "pixel": [2, 1]},
        ]}

        with pytest.raises(ConfigurationValidationError) as excinfo:
            validate_calibration_config(config, "calibration.yaml")

        assert "points -> 0 -> gps -> lat" in str(excinfo.value)
        assert excinfo.value.source == "calibration.yaml"

    def test_pair_with_wrong_length(self):
        config = {"points": [
            {"gps": [0, 0, 0], "pixel": [0, 0]},
            {"gps": [1, 1], "pixel": [1, 1]},
            {"gps": [2, 1], "pixel": [2, 1]},
        ]}

        with pytest.raises(ConfigurationValidationError, match="expected 2 values"):
            validate_calibration_config(config)


class TestSettings:
    """Test application settings."""

    def test_defaults(self):
        settings = load_settings()

        assert settings.log_level == "info"
        assert settings.visible_meters == 200.0
        assert settings.content_scale == 2.0
        assert settings.repository_path == Path.home() / ".plangps" / "maps.json"

    def test_file_and_overrides(self, tmp_path):
        path = tmp_path / "settings.yaml"
        path.write_text("log_level: WARNING\nrepository_path: ~/maps.json\nvisible_meters: 50\n")

        settings = load_settings(path, log_level="debug", content_scale=None)

        assert settings.log_level == "debug"
        assert settings.visible_meters == 50.0
        assert settings.content_scale == 2.0
        assert settings.repository_path == Path.home() / "maps.json"

    def test_invalid_log_level(self):
        with pytest.raises(ConfigurationValidationError, match="Invalid log level"):
            load_settings(log_level="chatty")
