from __future__ import annotations

from typing import Literal

from fastapi import APIRouter, Depends, HTTPException, Query

from src.adapters.api.dependencies import get_itinerary_service
from src.adapters.api.schemas.routes import (
    GeoPointSchema,
    ItineraryRequestSchema,
    ItinerarySchema,
    RouteLegSchema,
    StopSchema,
)
from src.app.services.itinerary_service import ItineraryService
from src.domain.exceptions import InvalidCoordinate, NoStopsAvailable
from src.domain.models import (
    GeoPoint,
    Itinerary,
    RouteLeg,
    Stop,
    StopSelection,
    parse_lat_lon,
)

router = APIRouter(tags=["itineraries"])


def _point_to_schema(p: GeoPoint) -> GeoPointSchema:
    return GeoPointSchema(lat=p.lat, lon=p.lon)


def _stop_to_schema(stop: Stop) -> StopSchema:
    return StopSchema(
        index=stop.index, name=stop.name, location=_point_to_schema(stop.location)
    )


def _leg_to_schema(leg: RouteLeg) -> RouteLegSchema:
    return RouteLegSchema(
        mode=leg.mode.value,
        origin=_point_to_schema(leg.origin),
        destination=_point_to_schema(leg.destination),
        distance_m=leg.distance_m,
        path=[_point_to_schema(p) for p in leg.path],
        approximate=leg.approximate,
    )


def _itinerary_to_schema(itinerary: Itinerary) -> ItinerarySchema:
    return ItinerarySchema(
        origin=_point_to_schema(itinerary.origin),
        destination=_point_to_schema(itinerary.destination),
        board_stop=_stop_to_schema(itinerary.board_stop),
        alight_stop=_stop_to_schema(itinerary.alight_stop),
        access=_leg_to_schema(itinerary.access),
        transit=(
            _leg_to_schema(itinerary.transit) if itinerary.transit is not None else None
        ),
        egress=_leg_to_schema(itinerary.egress),
        total_distance_m=itinerary.total_distance_m,
        summary=itinerary.summary,
    )


async def _plan(
    service: ItineraryService,
    *,
    origin: GeoPoint,
    destination: GeoPoint,
    mode: str,
    candidate_count: int | None,
) -> ItinerarySchema:
    try:
        itinerary = await service.plan_itinerary(
            origin=origin,
            destination=destination,
            selection=StopSelection(mode),
            candidate_stops=candidate_count,
        )
    except NoStopsAvailable as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    return _itinerary_to_schema(itinerary)


@router.post("/itineraries", response_model=ItinerarySchema)
async def plan_itinerary(
    req: ItineraryRequestSchema,
    service: ItineraryService = Depends(get_itinerary_service),
) -> ItinerarySchema:
    return await _plan(
        service,
        origin=GeoPoint(lat=req.origin.lat, lon=req.origin.lon),
        destination=GeoPoint(lat=req.destination.lat, lon=req.destination.lon),
        mode=req.mode,
        candidate_count=req.candidate_count,
    )


@router.get("/itineraries", response_model=ItinerarySchema)
async def plan_itinerary_from_text(
    from_: str = Query(..., alias="from", description="'lat, lon'"),
    to: str = Query(..., description="'lat, lon'"),
    mode: Literal["walking", "straight"] = "walking",
    service: ItineraryService = Depends(get_itinerary_service),
) -> ItinerarySchema:
    try:
        origin = parse_lat_lon(from_)
        destination = parse_lat_lon(to)
    except InvalidCoordinate as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc

    return await _plan(
        service,
        origin=origin,
        destination=destination,
        mode=mode,
        candidate_count=None,
    )
