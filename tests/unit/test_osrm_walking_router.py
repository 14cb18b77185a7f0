from __future__ import annotations

import asyncio
import json

import httpx
import pytest

from src.adapters.routing.osrm_walking_router import OsrmWalkingRouter
from src.domain.models import GeoPoint, Resolved, Unresolved

ORIGIN = GeoPoint(lat=28.12, lon=-15.43)
DESTINATION = GeoPoint(lat=28.121, lon=-15.431)


@pytest.fixture(autouse=True)
def _clean_osrm_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in (
        "OSRM_BASE_URL",
        "OSRM_TIMEOUT_S",
        "OSRM_MAX_RETRIES",
        "OSRM_MAX_IN_FLIGHT",
        "OSRM_RETRY_BACKOFF_S",
    ):
        monkeypatch.delenv(name, raising=False)


def _router(handler, **kwargs) -> OsrmWalkingRouter:
    kwargs.setdefault("max_retries", 2)
    return OsrmWalkingRouter(
        base_url="http://osrm.test/",
        retry_backoff_s=0.0,
        transport=httpx.MockTransport(handler),
        **kwargs,
    )


def _ok(payload) -> httpx.Response:
    return httpx.Response(200, json=payload)


@pytest.mark.unit
@pytest.mark.anyio
async def test_distance_request_uses_lon_lat_order_and_distance_params() -> None:
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return _ok({"code": "Ok", "routes": [{"distance": 152.5}]})

    result = await _router(handler).resolve_walking_distance(ORIGIN, DESTINATION)

    assert result == Resolved(152.5)
    assert len(seen) == 1
    assert seen[0].url.host == "osrm.test"
    assert seen[0].url.path == "/route/v1/foot/-15.43,28.12;-15.431,28.121"
    assert seen[0].url.params["overview"] == "false"
    assert seen[0].url.params["alternatives"] == "false"
    assert seen[0].url.params["steps"] == "false"


@pytest.mark.unit
@pytest.mark.anyio
async def test_path_geometry_is_converted_to_lat_lon() -> None:
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return _ok(
            {
                "code": "Ok",
                "routes": [
                    {
                        "distance": 160.0,
                        "geometry": {
                            "type": "LineString",
                            "coordinates": [
                                [-15.43, 28.12],
                                [-15.4305, 28.1207],
                                [-15.431, 28.121],
                            ],
                        },
                    }
                ],
            }
        )

    result = await _router(handler).resolve_walking_path(ORIGIN, DESTINATION)

    assert isinstance(result, Resolved)
    assert result.value == (
        GeoPoint(lat=28.12, lon=-15.43),
        GeoPoint(lat=28.1207, lon=-15.4305),
        GeoPoint(lat=28.121, lon=-15.431),
    )
    assert seen[0].url.params["overview"] == "full"
    assert seen[0].url.params["geometries"] == "geojson"


@pytest.mark.unit
@pytest.mark.anyio
async def test_retries_failed_status_until_success() -> None:
    calls = 0

    def handler(request: httpx.Request) -> httpx.Response:
        nonlocal calls
        calls += 1
        if calls < 3:
            return httpx.Response(503)
        return _ok({"routes": [{"distance": 42}]})

    result = await _router(handler).resolve_walking_distance(ORIGIN, DESTINATION)

    assert result == Resolved(42.0)
    assert calls == 3


@pytest.mark.unit
@pytest.mark.anyio
async def test_gives_up_after_all_attempts_without_raising() -> None:
    calls = 0

    def handler(request: httpx.Request) -> httpx.Response:
        nonlocal calls
        calls += 1
        return httpx.Response(500)

    result = await _router(handler, max_retries=3).resolve_walking_distance(
        ORIGIN, DESTINATION
    )

    assert isinstance(result, Unresolved)
    assert "HTTP 500" in result.reason
    assert calls == 4


@pytest.mark.unit
@pytest.mark.anyio
async def test_transport_errors_count_as_failed_attempts() -> None:
    calls = 0

    def handler(request: httpx.Request) -> httpx.Response:
        nonlocal calls
        calls += 1
        if calls == 1:
            raise httpx.ConnectTimeout("timed out", request=request)
        raise httpx.ConnectError("connection refused", request=request)

    router = _router(handler)
    result = await router.resolve_walking_path(ORIGIN, DESTINATION)

    assert isinstance(result, Unresolved)
    assert calls == 3
    assert router.throttle.in_flight == 0


@pytest.mark.unit
@pytest.mark.anyio
@pytest.mark.parametrize(
    "body",
    [
        {"code": "NoRoute", "message": "Impossible route", "routes": []},
        {"code": "Ok", "routes": []},
        {"code": "Ok"},
        {"code": "Ok", "routes": ["nope"]},
        {"code": "Ok", "routes": [{"distance": "12"}]},
        {"code": "Ok", "routes": [{"distance": True}]},
        {"code": "Ok", "routes": [{"distance": -1.0}]},
        {"code": "Ok", "routes": [{}]},
        [1, 2, 3],
    ],
)
async def test_malformed_distance_payload_is_unresolved(body) -> None:
    calls = 0

    def handler(request: httpx.Request) -> httpx.Response:
        nonlocal calls
        calls += 1
        return _ok(body)

    result = await _router(handler).resolve_walking_distance(ORIGIN, DESTINATION)

    assert isinstance(result, Unresolved)
    assert calls == 1


@pytest.mark.unit
@pytest.mark.anyio
@pytest.mark.parametrize(
    "route",
    [
        {"distance": 10.0},
        {"distance": 10.0, "geometry": {"coordinates": None}},
        {"distance": 10.0, "geometry": {"coordinates": [[-15.43]]}},
        {"distance": 10.0, "geometry": {"coordinates": [["x", "y"]]}},
        # Swapped order would put latitude 200 out of range.
        {"distance": 10.0, "geometry": {"coordinates": [[28.12, 200.0]]}},
    ],
)
async def test_malformed_geometry_is_unresolved(route) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return _ok({"code": "Ok", "routes": [route]})

    result = await _router(handler).resolve_walking_path(ORIGIN, DESTINATION)

    assert isinstance(result, Unresolved)


@pytest.mark.unit
@pytest.mark.anyio
async def test_non_json_body_is_unresolved() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, content=b"<html>busy</html>")

    result = await _router(handler).resolve_walking_distance(ORIGIN, DESTINATION)

    assert isinstance(result, Unresolved)


@pytest.mark.unit
@pytest.mark.anyio
async def test_concurrent_lookups_respect_in_flight_limit() -> None:
    current = 0
    peak = 0

    async def handler(request: httpx.Request) -> httpx.Response:
        nonlocal current, peak
        current += 1
        peak = max(peak, current)
        await asyncio.sleep(0.005)
        current -= 1
        return httpx.Response(
            200, content=json.dumps({"routes": [{"distance": 1.0}]}).encode()
        )

    router = _router(handler, max_in_flight=2)
    results = await asyncio.gather(
        *(router.resolve_walking_distance(ORIGIN, DESTINATION) for _ in range(8))
    )

    assert all(r == Resolved(1.0) for r in results)
    assert peak == 2
    assert router.throttle.peak_in_flight == 2
    assert router.throttle.in_flight == 0


@pytest.mark.unit
def test_env_configures_router(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("OSRM_BASE_URL", "http://osrm.internal:5000/")
    monkeypatch.setenv("OSRM_MAX_RETRIES", "5")
    monkeypatch.setenv("OSRM_MAX_IN_FLIGHT", "4")

    router = OsrmWalkingRouter()

    assert router.base_url == "http://osrm.internal:5000"
    assert router.max_retries == 5
    assert router.throttle.limit == 4
    assert router.route_url(ORIGIN, DESTINATION) == (
        "http://osrm.internal:5000/route/v1/foot/-15.43,28.12;-15.431,28.121"
    )
