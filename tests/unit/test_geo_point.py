import math

import pytest
from src.domain.exceptions import InvalidCoordinate
from src.domain.models.geo import GeoPoint, parse_lat_lon


def test_geo_point_accepts_valid_coordinates() -> None:
    p = GeoPoint(lat=28.1234, lon=-15.4321)
    assert p.lat == 28.1234
    assert p.lon == -15.4321


@pytest.mark.parametrize(
    ("lat", "lon"),
    [
        (-90.0001, 0.0),
        (90.0001, 0.0),
        (0.0, -180.0001),
        (0.0, 180.0001),
        (math.nan, 0.0),
        (0.0, math.inf),
    ],
)
def test_geo_point_rejects_invalid_coordinates(lat: float, lon: float) -> None:
    with pytest.raises(InvalidCoordinate):
        GeoPoint(lat=lat, lon=lon)


def test_invalid_coordinate_is_a_value_error() -> None:
    with pytest.raises(ValueError):
        GeoPoint(lat=91.0, lon=0.0)


def test_parse_lat_lon_reads_text_input() -> None:
    assert parse_lat_lon(" 28.12 , -15.43 ") == GeoPoint(lat=28.12, lon=-15.43)


@pytest.mark.parametrize("raw", ["", "28.12", "28.12, -15.43, 3", "a, b", "nan, 1", "95, 1"])
def test_parse_lat_lon_rejects_bad_text(raw: str) -> None:
    with pytest.raises(InvalidCoordinate):
        parse_lat_lon(raw)
