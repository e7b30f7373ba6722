"""Type definitions for PlanGPS.

Coordinates on both sides of a calibration are plain floats. GPS positions
are (latitude, longitude) in decimal degrees, plan positions are (x, y) in
the plan's native raster pixels, before any display-time scaling.
"""

from dataclasses import dataclass
from typing import Iterator, NamedTuple, Sequence, Tuple

from .enums import TransformStatus


# =============================================================================
# BASIC TYPE ALIASES
# =============================================================================

Coordinate = Tuple[float, float]


# =============================================================================
# POINT TYPES
# =============================================================================

class LatLng(NamedTuple):
    """A real-world GPS coordinate in decimal degrees."""
    lat: float
    lng: float

    def as_world_xy(self) -> Coordinate:
        """Return the point as planar (x, y) = (longitude, latitude)."""
        return (self.lng, self.lat)


class PixelPoint(NamedTuple):
    """A position on the plan image in native raster pixels."""
    x: float
    y: float


class CalibrationPoint(NamedTuple):
    """One reference pair: a GPS coordinate and its pixel on the plan."""
    gps: LatLng
    pixel: PixelPoint

    @classmethod
    def of(cls, gps: Sequence[float], pixel: Sequence[float]) -> "CalibrationPoint":
        """Build a pair from any two-element sequences."""
        return cls(
            LatLng(float(gps[0]), float(gps[1])),
            PixelPoint(float(pixel[0]), float(pixel[1])),
        )


@dataclass(frozen=True)
class Calibration:
    """Three reference pairs aligning a plan image with the world.

    Instances are immutable, so replacing a calibration always swaps all
    six points together.
    """
    p1: CalibrationPoint
    p2: CalibrationPoint
    p3: CalibrationPoint

    @classmethod
    def from_pairs(
        cls,
        pairs: Sequence[Tuple[Sequence[float], Sequence[float]]]
    ) -> "Calibration":
        """Build a calibration from three ((lat, lng), (x, y)) pairs.

        Raises:
            ValueError: If the number of pairs is not exactly three
        """
        if len(pairs) != 3:
            raise ValueError(f"A calibration needs exactly 3 point pairs, got {len(pairs)}")
        return cls(*(CalibrationPoint.of(gps, pixel) for gps, pixel in pairs))

    @property
    def points(self) -> Tuple[CalibrationPoint, CalibrationPoint, CalibrationPoint]:
        return (self.p1, self.p2, self.p3)

    def __iter__(self) -> Iterator[CalibrationPoint]:
        return iter(self.points)


# =============================================================================
# RESULT TYPES
# =============================================================================

class TransformResult(NamedTuple):
    """Outcome of a derivation with an explicit status.

    ``value`` carries the payload only when ``status`` is ``OK``.
    """
    status: TransformStatus
    value: object = None
    message: str = ""

    @property
    def ok(self) -> bool:
        return self.status is TransformStatus.OK

    @classmethod
    def success(cls, value: object) -> "TransformResult":
        return cls(TransformStatus.OK, value)

    @classmethod
    def not_calibrated(cls) -> "TransformResult":
        return cls(TransformStatus.NOT_CALIBRATED, None, "No calibration is set")

    @classmethod
    def degenerate(cls, message: str) -> "TransformResult":
        return cls(TransformStatus.DEGENERATE, None, message)
