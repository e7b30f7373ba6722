"""Numbers the map view derives from the engine's outputs.

The plan is shown inside a zoomable view whose content is the native raster
drawn ``content_scale`` times larger. These helpers turn engine outputs
(pixels, north angle, pixels per meter) into marker rotation, zoom level
and pan offset for that view.
"""

import math
from typing import Optional, Tuple

from .types import PixelPoint

# GPS course is noisy when standing still
MIN_GPS_HEADING_SPEED = 1.0  # m/s

DEFAULT_VISIBLE_METERS = 200.0
DEFAULT_CONTENT_SCALE = 2.0
MIN_ZOOM = 0.1
MAX_ZOOM = 20.0


def fuse_heading(
    magnetometer_heading: float,
    gps_heading: Optional[float],
    speed: float,
    min_gps_speed: float = MIN_GPS_HEADING_SPEED
) -> float:
    """Pick the device heading in degrees clockwise from north.

    The GPS course wins while moving faster than ``min_gps_speed``;
    otherwise the compass is used.
    """
    if gps_heading is not None and speed > min_gps_speed:
        return gps_heading
    return magnetometer_heading


def marker_rotation(north_angle: float, heading: float) -> float:
    """Rotation in radians for a marker whose artwork points up.

    Args:
        north_angle: Pixel angle of north from TransformEngine.north_angle()
        heading: Device heading in degrees clockwise from north
    """
    return north_angle + math.radians(heading) + math.pi / 2


def target_zoom_scale(
    pixels_per_meter: Optional[float],
    viewport_width: float,
    visible_meters: float = DEFAULT_VISIBLE_METERS,
    content_scale: float = DEFAULT_CONTENT_SCALE,
    min_scale: float = MIN_ZOOM,
    max_scale: float = MAX_ZOOM
) -> Optional[float]:
    """Zoom level that fits ``visible_meters`` across the viewport.

    Returns:
        Zoom clamped to [min_scale, max_scale], or None when the plan scale
        is unavailable
    """
    if pixels_per_meter is None:
        return None
    required_pixels = visible_meters * pixels_per_meter * content_scale
    if required_pixels <= 0:
        return None
    return min(max(viewport_width / required_pixels, min_scale), max_scale)


def center_translation(
    pixel: PixelPoint,
    viewport_size: Tuple[float, float],
    zoom: float,
    content_scale: float = DEFAULT_CONTENT_SCALE
) -> Tuple[float, float]:
    """Pan offset that puts ``pixel`` at the centre of the viewport.

    The view maps content points as screen = translate + zoom * content.
    """
    width, height = viewport_size
    content_x = pixel.x * content_scale
    content_y = pixel.y * content_scale
    return (width / 2 - content_x * zoom, height / 2 - content_y * zoom)
