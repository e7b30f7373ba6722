"""Great-circle distance between GPS coordinates."""

from typing import Callable

from pyproj import Geod

# Geodesic on the WGS84 ellipsoid, the datum GPS receivers report in
_WGS84 = Geod(ellps="WGS84")

DistanceFunction = Callable[[float, float, float, float], float]


def geodesic_distance_m(lat1: float, lng1: float, lat2: float, lng2: float) -> float:
    """Distance in meters between two lat/lng pairs along the ellipsoid.

    Args:
        lat1: Latitude of the first point in degrees
        lng1: Longitude of the first point in degrees
        lat2: Latitude of the second point in degrees
        lng2: Longitude of the second point in degrees

    Returns:
        Non-negative distance in meters
    """
    _, _, distance = _WGS84.inv(lng1, lat1, lng2, lat2)
    return float(distance)
