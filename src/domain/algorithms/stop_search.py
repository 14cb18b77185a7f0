from __future__ import annotations

import math
from collections.abc import Sequence

from src.domain.models import GeoPoint, Stop

from .geo_utils import haversine_distance_m


def straight_line_candidates(
    point: GeoPoint, stops: Sequence[Stop], k: int
) -> list[Stop]:
    """The ``k`` stops closest to ``point`` on raw degrees.

    Only used to bound how many stops get an external distance lookup.
    Equal distances keep list order.
    """

    if k <= 0:
        return []
    ranked = sorted(
        stops,
        key=lambda s: math.hypot(point.lat - s.location.lat, point.lon - s.location.lon),
    )
    return ranked[:k]


def nearest_stop_by_geodesic(
    point: GeoPoint, stops: Sequence[Stop]
) -> tuple[Stop, float] | None:
    """Globally nearest stop by great-circle distance, first one wins ties."""

    best: tuple[Stop, float] | None = None
    for stop in stops:
        d = haversine_distance_m(point, stop.location)
        if best is None or d < best[1]:
            best = (stop, d)
    return best
