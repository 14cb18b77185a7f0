from __future__ import annotations

import asyncio
import logging
import math
import os
from dataclasses import dataclass, field
from typing import Any

import httpx

from src.app.ports.output import IWalkingRouter
from src.domain.exceptions import InvalidCoordinate
from src.domain.models import GeoPoint, LookupResult, Resolved, Unresolved

from .request_throttle import RequestThrottle

logger = logging.getLogger(__name__)

DEFAULT_OSRM_BASE_URL = "https://router.project-osrm.org"

PATH_PARAMS = {"overview": "full", "geometries": "geojson"}
DISTANCE_PARAMS = {"overview": "false", "alternatives": "false", "steps": "false"}


class MalformedResponse(Exception):
    """The routing service answered 2xx with a payload we cannot use."""


@dataclass(slots=True)
class OsrmWalkingRouter(IWalkingRouter):
    """Walking lookups against an OSRM ``/route/v1/foot`` endpoint.

    Env vars:
      - OSRM_BASE_URL: service root (default: the public OSRM demo server)
      - OSRM_TIMEOUT_S: per-attempt timeout (default 10)
      - OSRM_MAX_RETRIES: retries after the first attempt (default 2)
      - OSRM_MAX_IN_FLIGHT: concurrent requests allowed (default 2)
      - OSRM_RETRY_BACKOFF_S: linear backoff step between attempts (default 0.2)

    Notes:
      - All lookups share one throttle; retries stay inside the slot of the
        request that triggered them.
      - Geometry is never cached. Distance caching is the caller's business.
    """

    base_url: str | None = None
    timeout_s: float = 10.0
    max_retries: int = 2
    max_in_flight: int = 2
    retry_backoff_s: float = 0.2
    transport: httpx.AsyncBaseTransport | None = None

    throttle: RequestThrottle = field(init=False, repr=False)

    def __post_init__(self) -> None:
        if self.base_url is None:
            self.base_url = os.getenv("OSRM_BASE_URL") or DEFAULT_OSRM_BASE_URL
        if os.getenv("OSRM_TIMEOUT_S"):
            self.timeout_s = float(os.environ["OSRM_TIMEOUT_S"])
        if os.getenv("OSRM_MAX_RETRIES"):
            self.max_retries = int(os.environ["OSRM_MAX_RETRIES"])
        if os.getenv("OSRM_MAX_IN_FLIGHT"):
            self.max_in_flight = int(os.environ["OSRM_MAX_IN_FLIGHT"])
        if os.getenv("OSRM_RETRY_BACKOFF_S"):
            self.retry_backoff_s = float(os.environ["OSRM_RETRY_BACKOFF_S"])
        self.base_url = self.base_url.rstrip("/")
        self.throttle = RequestThrottle(limit=self.max_in_flight)

    def route_url(self, origin: GeoPoint, destination: GeoPoint) -> str:
        # OSRM wants lon,lat.
        return (
            f"{self.base_url}/route/v1/foot/"
            f"{origin.lon},{origin.lat};{destination.lon},{destination.lat}"
        )

    async def resolve_walking_path(
        self, origin: GeoPoint, destination: GeoPoint
    ) -> LookupResult[tuple[GeoPoint, ...]]:
        result = await self._fetch_route(origin, destination, PATH_PARAMS)
        if isinstance(result, Unresolved):
            return result
        try:
            return Resolved(_parse_geometry(result.value))
        except MalformedResponse as exc:
            return self._malformed(exc, origin, destination)

    async def resolve_walking_distance(
        self, origin: GeoPoint, destination: GeoPoint
    ) -> LookupResult[float]:
        result = await self._fetch_route(origin, destination, DISTANCE_PARAMS)
        if isinstance(result, Unresolved):
            return result
        try:
            return Resolved(_parse_distance(result.value))
        except MalformedResponse as exc:
            return self._malformed(exc, origin, destination)

    async def _fetch_route(
        self, origin: GeoPoint, destination: GeoPoint, params: dict[str, str]
    ) -> LookupResult[dict[str, Any]]:
        url = self.route_url(origin, destination)
        attempts = max(0, int(self.max_retries)) + 1
        last_error = "no attempt made"

        async with self.throttle.slot():
            async with httpx.AsyncClient(
                timeout=self.timeout_s, transport=self.transport
            ) as client:
                for attempt in range(1, attempts + 1):
                    if attempt > 1 and self.retry_backoff_s > 0:
                        await asyncio.sleep(self.retry_backoff_s * (attempt - 1))
                    try:
                        resp = await client.get(url, params=params)
                    except httpx.HTTPError as exc:
                        last_error = f"{type(exc).__name__}: {exc}"
                    else:
                        if resp.is_success:
                            return _decode_json(resp)
                        last_error = f"HTTP {resp.status_code}"

                    logger.warning(
                        "Routing request failed",
                        extra={"url": url, "attempt": attempt, "error": last_error},
                    )

        return Unresolved(f"{attempts} attempt(s) failed, last: {last_error}")

    def _malformed(
        self, exc: MalformedResponse, origin: GeoPoint, destination: GeoPoint
    ) -> Unresolved:
        logger.warning(
            "Unusable routing response",
            extra={"url": self.route_url(origin, destination), "error": str(exc)},
        )
        return Unresolved(f"malformed response: {exc}")


def _decode_json(resp: httpx.Response) -> LookupResult[dict[str, Any]]:
    try:
        data = resp.json()
    except ValueError:
        return Unresolved("malformed response: body is not JSON")
    if not isinstance(data, dict):
        return Unresolved("malformed response: top level is not an object")
    return Resolved(data)


def _first_route(data: dict[str, Any]) -> dict[str, Any]:
    code = data.get("code")
    if code is not None and code != "Ok":
        raise MalformedResponse(f"service code {code!r}: {data.get('message', '')}")
    routes = data.get("routes")
    if not isinstance(routes, list) or not routes:
        raise MalformedResponse("no routes")
    route = routes[0]
    if not isinstance(route, dict):
        raise MalformedResponse("route is not an object")
    return route


def _is_number(value: Any) -> bool:
    return (
        isinstance(value, (int, float))
        and not isinstance(value, bool)
        and math.isfinite(value)
    )


def _parse_distance(data: dict[str, Any]) -> float:
    meters = _first_route(data).get("distance")
    if not _is_number(meters) or meters < 0:
        raise MalformedResponse(f"bad distance: {meters!r}")
    return float(meters)


def _parse_geometry(data: dict[str, Any]) -> tuple[GeoPoint, ...]:
    geometry = _first_route(data).get("geometry")
    if not isinstance(geometry, dict):
        raise MalformedResponse("missing geometry")
    coords = geometry.get("coordinates")
    if not isinstance(coords, list):
        raise MalformedResponse("missing geometry.coordinates")

    points: list[GeoPoint] = []
    for pair in coords:
        if (
            not isinstance(pair, (list, tuple))
            or len(pair) < 2
            or not (_is_number(pair[0]) and _is_number(pair[1]))
        ):
            raise MalformedResponse(f"bad coordinate: {pair!r}")
        lon, lat = pair[0], pair[1]
        try:
            points.append(GeoPoint(lat=float(lat), lon=float(lon)))
        except InvalidCoordinate as exc:
            raise MalformedResponse(str(exc)) from exc
    return tuple(points)
