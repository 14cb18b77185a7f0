from __future__ import annotations

from dataclasses import dataclass

from .geo import GeoPoint


@dataclass(frozen=True, slots=True)
class ProjectionResult:
    """Closest point on a polyline to a query point."""

    segment_index: int
    t: float  # fraction along the segment, always within [0, 1]
    distance_m: float  # perpendicular distance in the local planar frame
    point: GeoPoint
    route_distance_m: float
