from .geojson_network_repository import GeoJsonNetworkRepository

__all__ = [
    "GeoJsonNetworkRepository",
]
