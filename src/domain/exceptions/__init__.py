from .routing import DegeneratePolyline, InvalidCoordinate, NoStopsAvailable, RoutingError

__all__ = [
    "DegeneratePolyline",
    "InvalidCoordinate",
    "NoStopsAvailable",
    "RoutingError",
]
