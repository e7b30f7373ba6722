"""GPS-to-plan calibration for PlanGPS.

Fits a world-to-pixel transform to three reference pairs and keeps the
calibration of the loaded plan in a single engine instance.
"""

from .engine import TransformEngine
from .transform_calculator import (
    COINCIDENT_DIST_SQ_EPS,
    COLLINEAR_DET_EPS,
    PlanTransform,
    TransformCalculator,
)

__all__ = [
    "TransformEngine",
    "TransformCalculator",
    "PlanTransform",
    "COLLINEAR_DET_EPS",
    "COINCIDENT_DIST_SQ_EPS"
]
