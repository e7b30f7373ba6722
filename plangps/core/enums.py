"""Enumerations for PlanGPS."""

from enum import Enum


class TransformMethod(Enum):
    """How a plan transform was fitted to the calibration points."""
    AFFINE = "affine"
    SIMILARITY = "similarity"


class TransformStatus(Enum):
    """Outcome of deriving something from the current calibration."""
    OK = "ok"
    NOT_CALIBRATED = "not_calibrated"
    DEGENERATE = "degenerate"
