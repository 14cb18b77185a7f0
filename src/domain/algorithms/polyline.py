from __future__ import annotations

import math

from src.domain.exceptions import DegeneratePolyline
from src.domain.models import GeoPoint, ProjectionResult

from .geo_utils import (
    cumulative_distances_m,
    haversine_distance_m,
    lerp_point,
    to_local_xy_m,
)


def _clamp01(value: float) -> float:
    return max(0.0, min(1.0, value))


def _segment_fraction(d: float, seg_start: float, seg_end: float) -> float:
    # Window edges at or past a vertex map to exactly 0 or 1.
    if d <= seg_start:
        return 0.0
    if d >= seg_end:
        return 1.0
    return (d - seg_start) / (seg_end - seg_start)


def _project_onto_segment(
    p: GeoPoint, a: GeoPoint, b: GeoPoint, ref_lat: float
) -> tuple[float, float]:
    """Return (t, perpendicular distance in meters) of ``p`` onto segment a-b."""

    px, py = to_local_xy_m(p, ref_lat)
    ax, ay = to_local_xy_m(a, ref_lat)
    bx, by = to_local_xy_m(b, ref_lat)

    vx = bx - ax
    vy = by - ay
    wx = px - ax
    wy = py - ay

    vv = vx * vx + vy * vy
    t = _clamp01((wx * vx + wy * vy) / vv) if vv > 0.0 else 0.0

    dx = px - (ax + t * vx)
    dy = py - (ay + t * vy)
    return t, math.hypot(dx, dy)


def project_point_onto_polyline(
    point: GeoPoint, polyline: tuple[GeoPoint, ...]
) -> ProjectionResult:
    """Snap ``point`` onto the closest segment of ``polyline``.

    Each query re-anchors the planar frame at the query point's latitude.
    Ties keep the lowest segment index.
    """

    if len(polyline) < 2:
        raise DegeneratePolyline(
            f"Polyline needs at least 2 points, got {len(polyline)}"
        )

    ref_lat = point.lat
    best_i = 0
    best_t = 0.0
    best_d = math.inf
    for i in range(len(polyline) - 1):
        t, d = _project_onto_segment(point, polyline[i], polyline[i + 1], ref_lat)
        if d < best_d:
            best_i, best_t, best_d = i, t, d

    a = polyline[best_i]
    b = polyline[best_i + 1]
    cumulative = cumulative_distances_m(polyline)
    route_distance_m = cumulative[best_i] + best_t * haversine_distance_m(a, b)

    return ProjectionResult(
        segment_index=best_i,
        t=best_t,
        distance_m=best_d,
        point=lerp_point(a, b, best_t),
        route_distance_m=route_distance_m,
    )


def extract_subpath(
    polyline: tuple[GeoPoint, ...], start_m: float, end_m: float
) -> tuple[GeoPoint, ...]:
    """Return the part of ``polyline`` between two route distances.

    The result always runs forward along the polyline; callers that travel
    against it reverse the result themselves.
    """

    if len(polyline) < 2:
        return ()

    cumulative = cumulative_distances_m(polyline)
    total_m = cumulative[-1]
    lo = max(0.0, min(float(start_m), total_m))
    hi = max(0.0, min(float(end_m), total_m))
    if lo > hi:
        lo, hi = hi, lo

    out: list[GeoPoint] = []
    for i in range(len(polyline) - 1):
        seg_start = cumulative[i]
        seg_end = cumulative[i + 1]
        if seg_end < lo:
            continue
        if seg_start > hi:
            break

        a = polyline[i]
        b = polyline[i + 1]
        t0 = _segment_fraction(lo, seg_start, seg_end)
        t1 = _segment_fraction(hi, seg_start, seg_end)

        if not out:
            out.append(lerp_point(a, b, t0))
        exit_point = lerp_point(a, b, t1)
        if exit_point != out[-1]:
            out.append(exit_point)

    return tuple(out)
