from __future__ import annotations

import os
from functools import lru_cache

from src.adapters.persistence import GeoJsonNetworkRepository
from src.adapters.routing.osrm_walking_router import OsrmWalkingRouter
from src.app.ports.output import INetworkRepository
from src.app.services.itinerary_service import ItineraryService


@lru_cache(maxsize=1)
def get_network_repository() -> INetworkRepository:
    return GeoJsonNetworkRepository()


@lru_cache(maxsize=1)
def get_itinerary_service() -> ItineraryService:
    # One service per process: it owns the session's throttle and distance cache.
    service = ItineraryService(
        network_repository=get_network_repository(),
        walking_router=OsrmWalkingRouter(),
    )

    # Allow tuning via env without changing code.
    if os.getenv("CANDIDATE_STOPS"):
        service.candidate_stops = int(os.environ["CANDIDATE_STOPS"])

    return service
