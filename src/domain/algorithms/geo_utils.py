from __future__ import annotations

import math

from src.domain.models import GeoPoint

EARTH_RADIUS_M = 6371000.0


def haversine_distance_m(a: GeoPoint, b: GeoPoint) -> float:
    """Great-circle distance in meters."""

    r = EARTH_RADIUS_M
    lat1 = math.radians(a.lat)
    lon1 = math.radians(a.lon)
    lat2 = math.radians(b.lat)
    lon2 = math.radians(b.lon)

    dlat = lat2 - lat1
    dlon = lon2 - lon1

    s = (
        math.sin(dlat / 2.0) ** 2
        + math.cos(lat1) * math.cos(lat2) * math.sin(dlon / 2.0) ** 2
    )
    # Rounding can push s a hair past 1 for antipodal points.
    return 2.0 * r * math.asin(math.sqrt(min(1.0, max(0.0, s))))


def to_local_xy_m(point: GeoPoint, ref_lat: float) -> tuple[float, float]:
    """Project onto a local tangent plane (meters) anchored at ``ref_lat``.

    Only valid over city-scale spans; wide latitude ranges and the
    antimeridian are not handled.
    """

    x = EARTH_RADIUS_M * math.radians(point.lon) * math.cos(math.radians(ref_lat))
    y = EARTH_RADIUS_M * math.radians(point.lat)
    return x, y


def cumulative_distances_m(points: tuple[GeoPoint, ...]) -> tuple[float, ...]:
    if len(points) < 2:
        return (0.0,)

    out: list[float] = [0.0]
    total = 0.0
    for i in range(1, len(points)):
        total += haversine_distance_m(points[i - 1], points[i])
        out.append(total)
    return tuple(out)


def lerp_point(a: GeoPoint, b: GeoPoint, t: float) -> GeoPoint:
    # Exact endpoints so window edges that land on a vertex compare equal.
    if t <= 0.0:
        return a
    if t >= 1.0:
        return b
    return GeoPoint(
        lat=a.lat + (b.lat - a.lat) * t,
        lon=a.lon + (b.lon - a.lon) * t,
    )
