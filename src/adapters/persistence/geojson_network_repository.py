from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from src.app.ports.output import INetworkRepository
from src.domain.exceptions import InvalidCoordinate
from src.domain.models import GeoPoint, Stop, TransitNetwork

logger = logging.getLogger(__name__)


def _point_from_lon_lat(raw: Any) -> GeoPoint | None:
    # GeoJSON positions are [lon, lat].
    if not isinstance(raw, (list, tuple)) or len(raw) < 2:
        return None
    try:
        return GeoPoint(lat=float(raw[1]), lon=float(raw[0]))
    except (TypeError, ValueError, InvalidCoordinate):
        return None


def _features(collection: Any) -> list[dict[str, Any]]:
    if not isinstance(collection, dict):
        return []
    features = collection.get("features")
    if not isinstance(features, list):
        return []
    return [f for f in features if isinstance(f, dict)]


def route_polyline_from_geojson(collection: Any) -> tuple[GeoPoint, ...]:
    """Concatenate every LineString / MultiLineString in feature order.

    Vertices that are not finite, in-range positions are dropped.
    """

    lines: list[list[Any]] = []
    for feature in _features(collection):
        geom = feature.get("geometry")
        if not isinstance(geom, dict) or not isinstance(geom.get("coordinates"), list):
            continue
        if geom.get("type") == "LineString":
            lines.append(geom["coordinates"])
        elif geom.get("type") == "MultiLineString":
            lines.extend(line for line in geom["coordinates"] if isinstance(line, list))

    points: list[GeoPoint] = []
    for line in lines:
        for raw in line:
            p = _point_from_lon_lat(raw)
            if p is not None:
                points.append(p)
    return tuple(points)


def stops_from_geojson(collection: Any) -> tuple[Stop, ...]:
    """Point features become stops, indexed in file order after filtering."""

    stops: list[Stop] = []
    for feature in _features(collection):
        geom = feature.get("geometry")
        if not isinstance(geom, dict) or geom.get("type") != "Point":
            continue
        location = _point_from_lon_lat(geom.get("coordinates"))
        if location is None:
            continue
        props = feature.get("properties") or {}
        name = props.get("name") if isinstance(props, dict) else None
        name = str(name).strip() if name is not None else ""
        stops.append(Stop(index=len(stops), name=name or "Stop", location=location))
    return tuple(stops)


@dataclass(slots=True)
class GeoJsonNetworkRepository(INetworkRepository):
    """Loads the reference route and stops from GeoJSON files.

    Env vars:
      - NETWORK_DATA_PATH: directory containing stops.geo.json and
        routes.geo.json (default: data)

    The network is read once and kept for the lifetime of the repository.
    """

    base_path: str | Path | None = None
    stops_file: str = "stops.geo.json"
    routes_file: str = "routes.geo.json"

    _network: TransitNetwork | None = field(default=None, init=False, repr=False)

    def _base(self) -> Path:
        value = self.base_path or os.getenv("NETWORK_DATA_PATH") or "data"
        return Path(value)

    def _read(self, name: str) -> Any:
        with (self._base() / name).open("r", encoding="utf-8") as fp:
            return json.load(fp)

    def load_network(self) -> TransitNetwork:
        if self._network is not None:
            return self._network

        stops = stops_from_geojson(self._read(self.stops_file))
        route = route_polyline_from_geojson(self._read(self.routes_file))
        logger.info(
            "Loaded transit network",
            extra={"stops": len(stops), "route_points": len(route)},
        )

        self._network = TransitNetwork(stops=stops, route=route)
        return self._network
