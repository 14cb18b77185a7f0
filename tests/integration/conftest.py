from __future__ import annotations

import os

import httpx
import pytest


def _osrm_healthy(base_url: str) -> bool:
    # Any HTTP answer means the server is up; OSRM has no health endpoint.
    url = base_url.rstrip("/") + "/route/v1/foot/0,0;0,0?overview=false"
    try:
        httpx.get(url, timeout=1.5)
    except httpx.HTTPError:
        return False
    return True


@pytest.fixture(scope="session")
def require_osrm() -> str:
    base_url = os.getenv("OSRM_BASE_URL", "http://localhost:5000")
    if not _osrm_healthy(base_url):
        msg = f"OSRM not reachable at {base_url}"

        # Opt-in hard failure for environments that are expected to run OSRM.
        if os.getenv("REQUIRE_OSRM"):
            pytest.fail(msg, pytrace=False)

        pytest.skip(f"{msg}; skipping integration tests")
    return base_url
