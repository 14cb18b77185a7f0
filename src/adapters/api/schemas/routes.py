from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field


class GeoPointSchema(BaseModel):
    lat: float = Field(..., ge=-90.0, le=90.0, allow_inf_nan=False)
    lon: float = Field(..., ge=-180.0, le=180.0, allow_inf_nan=False)


class StopSchema(BaseModel):
    index: int
    name: str
    location: GeoPointSchema


class RouteLegSchema(BaseModel):
    mode: Literal["walk", "bus"]
    origin: GeoPointSchema
    destination: GeoPointSchema
    distance_m: float | None = None
    path: list[GeoPointSchema] = []
    approximate: bool = False


class ItinerarySchema(BaseModel):
    origin: GeoPointSchema
    destination: GeoPointSchema
    board_stop: StopSchema
    alight_stop: StopSchema
    access: RouteLegSchema
    transit: RouteLegSchema | None = None
    egress: RouteLegSchema

    total_distance_m: float | None = None
    summary: str


class ItineraryRequestSchema(BaseModel):
    origin: GeoPointSchema
    destination: GeoPointSchema
    mode: Literal["walking", "straight"] = "walking"
    candidate_count: int | None = Field(default=None, ge=0, le=50)


class NetworkSchema(BaseModel):
    stops: list[StopSchema]
    route: list[GeoPointSchema]
