"""World-to-plan transform calculation from three calibration pairs.

GPS coordinates are treated as planar (x, y) = (longitude, latitude). That is
only valid for areas small enough that Earth curvature can be ignored, which
holds for building and site plans.
"""

import math
from itertools import combinations
from typing import NamedTuple, Optional, Tuple

import numpy as np
from loguru import logger

from ..enums import TransformMethod
from ..types import Calibration, PixelPoint, TransformResult

# Below this the three world points are treated as collinear
COLLINEAR_DET_EPS = 1e-10
# Below this two world points are treated as the same point
COINCIDENT_DIST_SQ_EPS = 1e-20


class PlanTransform(NamedTuple):
    """A fitted world-to-pixel mapping.

    pixel_x = a * lng + b * lat + tx
    pixel_y = c * lng + d * lat + ty

    A similarity fit is stored in the same form with a == d and b == -c.
    """
    method: TransformMethod
    a: float
    b: float
    tx: float
    c: float
    d: float
    ty: float
    source_pair: Optional[Tuple[int, int]] = None

    def apply(self, latitude: float, longitude: float) -> PixelPoint:
        """Map a GPS coordinate to plan pixels."""
        return PixelPoint(
            self.a * longitude + self.b * latitude + self.tx,
            self.c * longitude + self.d * latitude + self.ty,
        )

    @property
    def north_angle(self) -> float:
        """Pixel-space angle of increasing latitude, 0 along +x, in radians."""
        return math.atan2(self.d, self.b)

    def as_matrix(self) -> np.ndarray:
        """Return the 3x3 homogeneous matrix acting on [lng, lat, 1]."""
        return np.array([
            [self.a, self.b, self.tx],
            [self.c, self.d, self.ty],
            [0.0, 0.0, 1.0],
        ])


class TransformCalculator:
    """Fit plan transforms to calibration points."""

    @staticmethod
    def calculate_transform(calibration: Calibration) -> TransformResult:
        """Fit the best transform the calibration geometry allows.

        A full affine fit is used when the three world points span a
        triangle. Collinear points fall back to a similarity fit through the
        best-separated pair. Coincident points cannot be fitted at all.

        Args:
            calibration: Three (GPS, pixel) reference pairs

        Returns:
            TransformResult carrying a PlanTransform, or a DEGENERATE status
        """
        transform = TransformCalculator._solve_affine(calibration)
        if transform is not None:
            return TransformResult.success(transform)

        logger.debug("Calibration points are collinear, using similarity fallback")
        transform = TransformCalculator._solve_similarity(calibration)
        if transform is not None:
            return TransformResult.success(transform)

        logger.warning("Calibration points coincide, no transform can be derived")
        return TransformResult.degenerate("Calibration points are effectively identical")

    @staticmethod
    def _solve_affine(calibration: Calibration) -> Optional[PlanTransform]:
        """Solve the six affine coefficients by Cramer's rule."""
        (x1, y1), (x2, y2), (x3, y3) = (p.gps.as_world_xy() for p in calibration)
        (u1, v1), (u2, v2), (u3, v3) = (p.pixel for p in calibration)

        det = x1 * (y2 - y3) - y1 * (x2 - x3) + (x2 * y3 - x3 * y2)
        if abs(det) < COLLINEAR_DET_EPS:
            return None

        a = (u1 * (y2 - y3) + u2 * (y3 - y1) + u3 * (y1 - y2)) / det
        b = (u1 * (x3 - x2) + u2 * (x1 - x3) + u3 * (x2 - x1)) / det
        tx = (u1 * (x2 * y3 - x3 * y2) + u2 * (x3 * y1 - x1 * y3) + u3 * (x1 * y2 - x2 * y1)) / det

        c = (v1 * (y2 - y3) + v2 * (y3 - y1) + v3 * (y1 - y2)) / det
        d = (v1 * (x3 - x2) + v2 * (x1 - x3) + v3 * (x2 - x1)) / det
        ty = (v1 * (x2 * y3 - x3 * y2) + v2 * (x3 * y1 - x1 * y3) + v3 * (x1 * y2 - x2 * y1)) / det

        return PlanTransform(TransformMethod.AFFINE, a, b, tx, c, d, ty)

    @staticmethod
    def _solve_similarity(calibration: Calibration) -> Optional[PlanTransform]:
        """Fit scale, rotation and translation through two points.

        (A, B) act as the real and imaginary parts of a complex factor
        taking world deltas to pixel deltas.
        """
        i, j = TransformCalculator.best_separated_pair(calibration)
        first, second = calibration.points[i], calibration.points[j]

        x_a, y_a = first.gps.as_world_xy()
        x_b, y_b = second.gps.as_world_xy()
        dx, dy = x_b - x_a, y_b - y_a
        du = second.pixel.x - first.pixel.x
        dv = second.pixel.y - first.pixel.y

        dist_sq = dx * dx + dy * dy
        if dist_sq < COINCIDENT_DIST_SQ_EPS:
            return None

        coef_a = (du * dx + dv * dy) / dist_sq
        coef_b = (dv * dx - du * dy) / dist_sq
        tx = first.pixel.x - (coef_a * x_a - coef_b * y_a)
        ty = first.pixel.y - (coef_b * x_a + coef_a * y_a)

        return PlanTransform(
            TransformMethod.SIMILARITY,
            coef_a, -coef_b, tx,
            coef_b, coef_a, ty,
            source_pair=(i, j),
        )

    @staticmethod
    def best_separated_pair(calibration: Calibration) -> Tuple[int, int]:
        """Indices of the two points furthest apart in world space.

        Ties resolve to the earliest pair in (0, 1), (0, 2), (1, 2) order.
        """
        worlds = [p.gps.as_world_xy() for p in calibration]
        best_pair = (0, 1)
        best_dist_sq = -1.0
        for i, j in combinations(range(3), 2):
            dx = worlds[j][0] - worlds[i][0]
            dy = worlds[j][1] - worlds[i][1]
            dist_sq = dx * dx + dy * dy
            if dist_sq > best_dist_sq:
                best_pair, best_dist_sq = (i, j), dist_sq
        return best_pair
