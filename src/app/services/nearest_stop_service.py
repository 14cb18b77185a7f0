from __future__ import annotations

import asyncio
import logging
from collections.abc import Sequence
from dataclasses import dataclass, field

from src.app.ports.output import IWalkingRouter
from src.domain.algorithms.stop_search import (
    nearest_stop_by_geodesic,
    straight_line_candidates,
)
from src.domain.models import GeoPoint, Resolved, Stop

from .walking_distance_cache import WalkingDistanceCache

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class NearestStop:
    stop: Stop
    distance_m: float
    # False when the walking lookup failed and geodesic distance was used.
    walking: bool


@dataclass(slots=True)
class NearestStopService:
    """Picks the stop with the shortest walk from a point.

    Only the ``k`` stops closest on raw degrees get a walking lookup. When
    none of them resolves, the answer is the geodesic nearest stop over the
    whole stop set.
    """

    walking_router: IWalkingRouter
    cache: WalkingDistanceCache = field(default_factory=WalkingDistanceCache)

    async def resolve_nearest_stop_by_walking(
        self, point: GeoPoint, stops: Sequence[Stop], k: int = 5
    ) -> NearestStop | None:
        if not stops:
            return None

        candidates = straight_line_candidates(point, stops, k)
        distances = await asyncio.gather(
            *(self._walking_distance_m(point, stop) for stop in candidates)
        )

        best: NearestStop | None = None
        for stop, dist in zip(candidates, distances):
            if dist is None:
                continue
            if best is None or dist < best.distance_m:
                best = NearestStop(stop=stop, distance_m=dist, walking=True)
        if best is not None:
            return best

        logger.info(
            "Walking distances unavailable, using geodesic nearest stop",
            extra={"lat": point.lat, "lon": point.lon, "candidates": len(candidates)},
        )
        return self.nearest_stop_by_geodesic(point, stops)

    def nearest_stop_by_geodesic(
        self, point: GeoPoint, stops: Sequence[Stop]
    ) -> NearestStop | None:
        found = nearest_stop_by_geodesic(point, stops)
        if found is None:
            return None
        stop, dist = found
        return NearestStop(stop=stop, distance_m=dist, walking=False)

    async def _walking_distance_m(self, point: GeoPoint, stop: Stop) -> float | None:
        cached = self.cache.get(point, stop.index)
        if cached is not None:
            return cached

        result = await self.walking_router.resolve_walking_distance(
            point, stop.location
        )
        if isinstance(result, Resolved):
            self.cache.put(point, stop.index, result.value)
            return result.value
        return None
