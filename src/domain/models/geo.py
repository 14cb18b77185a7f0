from __future__ import annotations

import math
from dataclasses import dataclass

from src.domain.exceptions import InvalidCoordinate


@dataclass(frozen=True, slots=True)
class GeoPoint:
    lat: float
    lon: float

    def __post_init__(self) -> None:
        if not (math.isfinite(self.lat) and -90.0 <= self.lat <= 90.0):
            raise InvalidCoordinate(f"Invalid latitude: {self.lat}")
        if not (math.isfinite(self.lon) and -180.0 <= self.lon <= 180.0):
            raise InvalidCoordinate(f"Invalid longitude: {self.lon}")


def parse_lat_lon(value: str) -> GeoPoint:
    """Parse a ``"lat, lon"`` text input into a GeoPoint.

    Raises InvalidCoordinate for anything that is not exactly two finite,
    in-range numbers.
    """

    parts = [p.strip() for p in (value or "").split(",")]
    if len(parts) != 2:
        raise InvalidCoordinate(f"Expected 'lat, lon', got: {value!r}")
    try:
        lat = float(parts[0])
        lon = float(parts[1])
    except ValueError as exc:
        raise InvalidCoordinate(f"Expected 'lat, lon', got: {value!r}") from exc
    return GeoPoint(lat=lat, lon=lon)
