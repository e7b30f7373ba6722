"""Transform engine holding the calibration of the currently loaded plan.

One engine is created per application and handed to whoever needs it: the
calibration flow sets points, the location handler asks for pixels, the
map view asks for scale and north. The transform itself is never cached;
every query refits it from the current calibration so it cannot go stale.
"""

import math
import threading
from typing import Callable, List, Optional, Sequence, Tuple, Union

from loguru import logger

from ..geodesy import DistanceFunction, geodesic_distance_m
from ..types import (
    Calibration, CalibrationPoint, LatLng, PixelPoint, TransformResult
)
from .transform_calculator import TransformCalculator

PointPair = Union[CalibrationPoint, Tuple[Sequence[float], Sequence[float]]]
CalibrationListener = Callable[["TransformEngine"], None]


class TransformEngine:
    """Calibration state plus the derivations computed from it.

    All state access is serialized on a re-entrant lock. Listeners run on
    the mutating thread after the new state is committed, while the lock is
    still held, so they always observe the post-mutation calibration.
    """

    def __init__(self, distance_fn: Optional[DistanceFunction] = None):
        """Initialize an uncalibrated engine.

        Args:
            distance_fn: Geodesic distance in meters between two lat/lng
                pairs. Defaults to the WGS84 ellipsoid distance.
        """
        self._distance_fn = distance_fn or geodesic_distance_m
        self._calibration: Optional[Calibration] = None
        self._version = 0
        self._listeners: List[CalibrationListener] = []
        self._lock = threading.RLock()

    # ------------------------------------------------------------------
    # State
    # ------------------------------------------------------------------

    def is_calibrated(self) -> bool:
        """True iff all three reference pairs are set."""
        with self._lock:
            return self._calibration is not None

    @property
    def calibration(self) -> Optional[Calibration]:
        with self._lock:
            return self._calibration

    @property
    def version(self) -> int:
        """Counter bumped on every change of calibration."""
        with self._lock:
            return self._version

    def set_calibration(self, p1: PointPair, p2: PointPair, p3: PointPair) -> None:
        """Replace the calibration with three (GPS, pixel) pairs.

        No geometric validation happens here; degenerate points only show up
        when a transform is derived.
        """
        calibration = Calibration(*(self._as_point(p) for p in (p1, p2, p3)))
        self.apply_calibration(calibration)

    def apply_calibration(self, calibration: Calibration) -> None:
        """Replace the calibration with an already-built one."""
        with self._lock:
            self._calibration = calibration
            self._version += 1
            logger.info(
                "Calibration set: " + ", ".join(
                    f"({p.gps.lat:.6f}, {p.gps.lng:.6f}) -> ({p.pixel.x:.1f}, {p.pixel.y:.1f})"
                    for p in calibration
                )
            )
            self._notify()

    def clear_calibration(self) -> None:
        """Reset to the uncalibrated state. Clearing twice is a no-op."""
        with self._lock:
            if self._calibration is None:
                return
            self._calibration = None
            self._version += 1
            logger.info("Calibration cleared")
            self._notify()

    # Raw reference points, for persistence

    @property
    def gps_ref1(self) -> Optional[LatLng]:
        return self._gps(0)

    @property
    def gps_ref2(self) -> Optional[LatLng]:
        return self._gps(1)

    @property
    def gps_ref3(self) -> Optional[LatLng]:
        return self._gps(2)

    @property
    def pixel_ref1(self) -> Optional[PixelPoint]:
        return self._pixel(0)

    @property
    def pixel_ref2(self) -> Optional[PixelPoint]:
        return self._pixel(1)

    @property
    def pixel_ref3(self) -> Optional[PixelPoint]:
        return self._pixel(2)

    # ------------------------------------------------------------------
    # Change notification
    # ------------------------------------------------------------------

    def subscribe(self, listener: CalibrationListener) -> Callable[[], None]:
        """Register a listener called with the engine after each change.

        Returns:
            A function that removes the listener again
        """
        with self._lock:
            self._listeners.append(listener)

        def unsubscribe() -> None:
            with self._lock:
                if listener in self._listeners:
                    self._listeners.remove(listener)

        return unsubscribe

    def _notify(self) -> None:
        for listener in list(self._listeners):
            try:
                listener(self)
            except Exception:
                logger.exception(f"Calibration listener {listener!r} failed")

    # ------------------------------------------------------------------
    # Derivations
    # ------------------------------------------------------------------

    def solve(self) -> TransformResult:
        """Fit a transform to the current calibration."""
        calibration = self.calibration
        if calibration is None:
            return TransformResult.not_calibrated()
        return TransformCalculator.calculate_transform(calibration)

    def locate(self, latitude: float, longitude: float) -> TransformResult:
        """Map a GPS fix to plan pixels, with an explicit status."""
        result = self.solve()
        if not result.ok:
            return result
        return TransformResult.success(result.value.apply(latitude, longitude))

    def world_to_pixel(self, latitude: float, longitude: float) -> Optional[PixelPoint]:
        """Map a GPS fix to plan pixels, or None when that is impossible."""
        return self.locate(latitude, longitude).value

    def north_angle(self) -> float:
        """Pixel-space direction of geographic north in radians.

        0.0 points along +x. Also 0.0 when no transform can be derived, so
        use is_calibrated() to tell the two apart.
        """
        result = self.solve()
        if not result.ok:
            return 0.0
        return result.value.north_angle

    def scale(self) -> TransformResult:
        """Plan pixels per real-world meter, from reference points 1 and 2.

        Point 3 is not used, matching the established scale of saved
        calibrations.
        """
        calibration = self.calibration
        if calibration is None:
            return TransformResult.not_calibrated()

        first, second = calibration.p1, calibration.p2
        distance_m = self._distance_fn(
            first.gps.lat, first.gps.lng, second.gps.lat, second.gps.lng
        )
        if distance_m == 0:
            return TransformResult.degenerate("Reference points 1 and 2 are at the same GPS position")

        distance_px = math.hypot(second.pixel.x - first.pixel.x, second.pixel.y - first.pixel.y)
        if distance_px == 0:
            return TransformResult.degenerate("Reference points 1 and 2 are at the same pixel")

        return TransformResult.success(distance_px / distance_m)

    def pixels_per_meter(self) -> Optional[float]:
        """Plan pixels per meter, or None when unavailable."""
        return self.scale().value

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _gps(self, index: int) -> Optional[LatLng]:
        calibration = self.calibration
        return calibration.points[index].gps if calibration is not None else None

    def _pixel(self, index: int) -> Optional[PixelPoint]:
        calibration = self.calibration
        return calibration.points[index].pixel if calibration is not None else None

    @staticmethod
    def _as_point(pair: PointPair) -> CalibrationPoint:
        if isinstance(pair, CalibrationPoint):
            return pair
        gps, pixel = pair
        return CalibrationPoint.of(gps, pixel)
