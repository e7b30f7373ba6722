"""Vectorised projection of GPS tracks onto a calibrated plan.

Used for recorded tracks and batches of fixes, where calling
``TransformEngine.world_to_pixel`` per point would refit the transform
every time.
"""

from typing import TYPE_CHECKING, Tuple

import numpy as np
from loguru import logger

from .calibration.transform_calculator import PlanTransform

if TYPE_CHECKING:
    from .calibration.engine import TransformEngine


def project_coordinates(
    latitudes: np.ndarray,
    longitudes: np.ndarray,
    transform: PlanTransform
) -> Tuple[np.ndarray, np.ndarray]:
    """Project GPS coordinates to plan pixels with a fitted transform.

    Args:
        latitudes: Array of latitudes in degrees
        longitudes: Array of longitudes in degrees, same shape as latitudes
        transform: Transform fitted to the plan's calibration

    Returns:
        Tuple of (pixel_x, pixel_y) arrays with the same shape as the input

    Note:
        NaN input coordinates remain NaN in the output.
    """
    latitudes = np.asarray(latitudes, dtype=float)
    longitudes = np.asarray(longitudes, dtype=float)
    if latitudes.shape != longitudes.shape:
        raise ValueError(
            f"Latitude and longitude arrays differ in shape: "
            f"{latitudes.shape} vs {longitudes.shape}"
        )

    valid_mask = ~(np.isnan(latitudes) | np.isnan(longitudes))
    pixel_x = np.full_like(latitudes, np.nan, dtype=float)
    pixel_y = np.full_like(latitudes, np.nan, dtype=float)

    if not np.any(valid_mask):
        return pixel_x, pixel_y

    # Homogeneous world points [lng, lat, 1]
    points = np.vstack([
        longitudes[valid_mask],
        latitudes[valid_mask],
        np.ones(np.count_nonzero(valid_mask)),
    ])
    projected = transform.as_matrix() @ points

    pixel_x[valid_mask] = projected[0, :]
    pixel_y[valid_mask] = projected[1, :]
    return pixel_x, pixel_y


def project_track(
    engine: "TransformEngine",
    latitudes: np.ndarray,
    longitudes: np.ndarray
) -> Tuple[np.ndarray, np.ndarray]:
    """Project a track with the engine's current calibration.

    The transform is fitted once for the whole track. When the engine cannot
    produce a transform every output coordinate is NaN.
    """
    result = engine.solve()
    if not result.ok:
        logger.debug(f"Cannot project track: {result.status.value}")
        shape = np.shape(latitudes)
        return np.full(shape, np.nan), np.full(shape, np.nan)
    return project_coordinates(latitudes, longitudes, result.value)
