"""Core components for PlanGPS."""

# Calibration engine
from .calibration import TransformEngine, TransformCalculator, PlanTransform

# Type definitions
from .types import LatLng, PixelPoint, CalibrationPoint, Calibration, TransformResult
from .enums import TransformMethod, TransformStatus

# Exceptions
from .exceptions import (
    PlanGpsError, CalibrationError, NotCalibratedError, ConfigurationError,
    ConfigurationFileError, ConfigurationValidationError,
    MapRepositoryError, MapNotFoundError
)

# Utilities
from .geodesy import geodesic_distance_m
from .coordinate_transform import project_coordinates, project_track
from .viewport import fuse_heading, marker_rotation, target_zoom_scale, center_translation
from .storage import SavedMap, MapRepository
from .config_spec import load_calibration_file, load_settings, Settings

__all__ = [
    # Calibration engine
    "TransformEngine",
    "TransformCalculator",
    "PlanTransform",

    # Types
    "LatLng",
    "PixelPoint",
    "CalibrationPoint",
    "Calibration",
    "TransformResult",
    "TransformMethod",
    "TransformStatus",

    # Exceptions
    "PlanGpsError",
    "CalibrationError",
    "NotCalibratedError",
    "ConfigurationError",
    "ConfigurationFileError",
    "ConfigurationValidationError",
    "MapRepositoryError",
    "MapNotFoundError",

    # Utilities
    "geodesic_distance_m",
    "project_coordinates",
    "project_track",
    "fuse_heading",
    "marker_rotation",
    "target_zoom_scale",
    "center_translation",
    "SavedMap",
    "MapRepository",
    "load_calibration_file",
    "load_settings",
    "Settings"
]
