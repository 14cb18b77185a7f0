from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field

from src.app.ports.output import INetworkRepository, IWalkingRouter
from src.domain.algorithms.polyline import extract_subpath, project_point_onto_polyline
from src.domain.exceptions import NoStopsAvailable
from src.domain.models import (
    GeoPoint,
    Itinerary,
    Resolved,
    RouteLeg,
    Stop,
    StopSelection,
    TravelMode,
)

from .nearest_stop_service import NearestStop, NearestStopService
from .walking_distance_cache import WalkingDistanceCache

logger = logging.getLogger(__name__)


def _leg_distance(nearest: NearestStop, selection: StopSelection) -> float | None:
    # A geodesic fallback is not a walking distance; report it as unavailable.
    if selection == StopSelection.WALKING and not nearest.walking:
        return None
    return float(nearest.distance_m)


@dataclass(slots=True)
class ItineraryService:
    """Walk + bus + walk along the single reference route.

    - Board/alight stops come from walking distance (or geodesic distance
      in straight mode).
    - Walking legs use routed paths, falling back to a straight line.
    - A walking distance that fell back to geodesic is reported as missing.
    - The bus leg is the route slice between both stops snapped onto it.
    """

    network_repository: INetworkRepository
    walking_router: IWalkingRouter
    cache: WalkingDistanceCache = field(default_factory=WalkingDistanceCache)

    # Tuning knobs
    candidate_stops: int = 6

    async def plan_itinerary(
        self,
        *,
        origin: GeoPoint,
        destination: GeoPoint,
        selection: StopSelection = StopSelection.WALKING,
        candidate_stops: int | None = None,
    ) -> Itinerary:
        # The first load reads files; keep it off the event loop.
        network = await asyncio.to_thread(self.network_repository.load_network)
        if not network.stops:
            raise NoStopsAvailable("No stops loaded for the reference route")

        k = self.candidate_stops if candidate_stops is None else candidate_stops
        board, alight = await self._pick_stops(
            origin, destination, network.stops, selection, k
        )

        access, egress = await asyncio.gather(
            self._walk_leg(origin, board.stop.location, _leg_distance(board, selection)),
            self._walk_leg(
                alight.stop.location, destination, _leg_distance(alight, selection)
            ),
        )

        return Itinerary(
            origin=origin,
            destination=destination,
            board_stop=board.stop,
            alight_stop=alight.stop,
            access=access,
            egress=egress,
            transit=self._transit_leg(network.route, board.stop, alight.stop),
        )

    def _nearest_stops(self) -> NearestStopService:
        return NearestStopService(walking_router=self.walking_router, cache=self.cache)

    async def _pick_stops(
        self,
        origin: GeoPoint,
        destination: GeoPoint,
        stops: tuple[Stop, ...],
        selection: StopSelection,
        k: int,
    ) -> tuple[NearestStop, NearestStop]:
        resolver = self._nearest_stops()
        if selection == StopSelection.WALKING:
            board, alight = await asyncio.gather(
                resolver.resolve_nearest_stop_by_walking(origin, stops, k),
                resolver.resolve_nearest_stop_by_walking(destination, stops, k),
            )
        else:
            board = resolver.nearest_stop_by_geodesic(origin, stops)
            alight = resolver.nearest_stop_by_geodesic(destination, stops)

        if board is None or alight is None:
            raise NoStopsAvailable("No stops loaded for the reference route")
        return board, alight

    async def _walk_leg(
        self, origin: GeoPoint, destination: GeoPoint, distance_m: float | None
    ) -> RouteLeg:
        result = await self.walking_router.resolve_walking_path(origin, destination)
        if isinstance(result, Resolved) and len(result.value) >= 2:
            return RouteLeg(
                mode=TravelMode.WALK,
                origin=origin,
                destination=destination,
                path=result.value,
                distance_m=distance_m,
            )

        return RouteLeg(
            mode=TravelMode.WALK,
            origin=origin,
            destination=destination,
            path=(origin, destination),
            distance_m=distance_m,
            approximate=True,
        )

    def _transit_leg(
        self, route: tuple[GeoPoint, ...], board: Stop, alight: Stop
    ) -> RouteLeg | None:
        if len(route) < 2:
            logger.info("Reference route is degenerate, no bus leg")
            return None

        a = project_point_onto_polyline(board.location, route)
        b = project_point_onto_polyline(alight.location, route)
        segment = extract_subpath(route, a.route_distance_m, b.route_distance_m)
        if len(segment) < 2:
            return None
        if b.route_distance_m < a.route_distance_m:
            segment = tuple(reversed(segment))

        return RouteLeg(
            mode=TravelMode.BUS,
            origin=segment[0],
            destination=segment[-1],
            path=segment,
            distance_m=abs(b.route_distance_m - a.route_distance_m),
        )
