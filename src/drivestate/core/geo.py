from __future__ import annotations
from dataclasses import dataclass
from math import asin, atan2, cos, degrees, isfinite, nan, radians, sin, sqrt

"""
Geospatial helpers.

A tiny spherical-Earth geometry layer: distance, bearing, cone membership and
forward projection. Everything here is pure arithmetic so the engine can call it
per candidate without pulling in heavier GIS dependencies.

Non-finite coordinates produce NaN instead of raising; NaN never satisfies a
`<=` comparison, so such points drop out of every range or cone test.
"""

EARTH_RADIUS_METERS = 6_371_000.0
# Fixed conversion used across the app (not the international exact 1609.344).
MILES_TO_METERS = 1609.34


@dataclass(frozen=True)
class Coordinate:
    """A latitude/longitude pair in decimal degrees."""

    lat: float
    lng: float


def _finite(*values: float) -> bool:
    return all(isfinite(v) for v in values)


def _clamp_unit(x: float) -> float:
    # Written with comparisons so NaN passes through unchanged.
    if x < 0.0:
        return 0.0
    if x > 1.0:
        return 1.0
    return x


def normalize_angle(angle: float) -> float:
    """Map any angle in degrees into [0, 360)."""
    normalized = angle % 360.0
    # Tiny negative inputs round up to exactly 360.0.
    if normalized >= 360.0:
        return 0.0
    return normalized


def angle_difference(angle1: float, angle2: float) -> float:
    """Minimal unsigned separation between two bearings, in [0, 180]."""
    diff = abs(normalize_angle(angle1) - normalize_angle(angle2))
    if diff > 180.0:
        diff = 360.0 - diff
    return diff


def haversine_distance(a: Coordinate, b: Coordinate) -> float:
    """Compute great-circle distance in meters between two points."""
    if not _finite(a.lat, a.lng, b.lat, b.lng):
        return nan
    lat1 = radians(a.lat)
    lat2 = radians(b.lat)
    dlat = radians(b.lat - a.lat)
    dlng = radians(b.lng - a.lng)

    h = sin(dlat / 2) ** 2 + cos(lat1) * cos(lat2) * sin(dlng / 2) ** 2
    # Rounding (or latitudes beyond +/-90) can push h slightly outside [0, 1].
    h = _clamp_unit(h)
    return EARTH_RADIUS_METERS * 2 * atan2(sqrt(h), sqrt(1 - h))


def distance_in_miles(a: Coordinate, b: Coordinate) -> float:
    return haversine_distance(a, b) / MILES_TO_METERS


def bearing_to(a: Coordinate, b: Coordinate) -> float:
    """Initial great-circle bearing from `a` to `b`, degrees clockwise from north in [0, 360)."""
    if not _finite(a.lat, a.lng, b.lat, b.lng):
        return nan
    lat1 = radians(a.lat)
    lat2 = radians(b.lat)
    dlng = radians(b.lng - a.lng)

    y = sin(dlng) * cos(lat2)
    x = cos(lat1) * sin(lat2) - sin(lat1) * cos(lat2) * cos(dlng)
    return normalize_angle(degrees(atan2(y, x)))


def relative_bearing(heading: float, absolute_bearing: float) -> float:
    """Signed angle from `heading` to `absolute_bearing` in (-180, 180]; positive is to the right."""
    relative = normalize_angle(absolute_bearing - heading)
    if relative > 180.0:
        relative -= 360.0
    return relative


def is_within_cone(
    origin: Coordinate,
    heading: float,
    target: Coordinate,
    max_distance_meters: float,
    cone_angle_degrees: float,
) -> bool:
    """True when `target` is within range and inside the forward cone of full width `cone_angle_degrees`."""
    distance = haversine_distance(origin, target)
    if not distance <= max_distance_meters:
        return False
    diff = angle_difference(bearing_to(origin, target), heading)
    return diff <= cone_angle_degrees / 2


def offset_position(origin: Coordinate, heading: float, distance_meters: float) -> Coordinate:
    """Project `origin` forward along `heading` for `distance_meters` (direct geodesic problem)."""
    if not _finite(origin.lat, origin.lng, heading, distance_meters):
        return Coordinate(lat=nan, lng=nan)
    angular = distance_meters / EARTH_RADIUS_METERS
    heading_rad = radians(heading)
    lat1 = radians(origin.lat)
    lng1 = radians(origin.lng)

    sin_lat2 = sin(lat1) * cos(angular) + cos(lat1) * sin(angular) * cos(heading_rad)
    lat2 = asin(max(-1.0, min(1.0, sin_lat2)))
    lng2 = lng1 + atan2(
        sin(heading_rad) * sin(angular) * cos(lat1),
        cos(angular) - sin(lat1) * sin(lat2),
    )

    lng = (degrees(lng2) + 540.0) % 360.0 - 180.0
    return Coordinate(lat=degrees(lat2), lng=lng)
