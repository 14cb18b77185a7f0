class RoutingError(Exception):
    """Base exception for route matching failures."""


class DegeneratePolyline(RoutingError):
    """Raised when a polyline has fewer than 2 points and has no direction."""


class NoStopsAvailable(RoutingError):
    """Raised when an itinerary is requested against an empty stop set."""


class InvalidCoordinate(ValueError):
    """Raised at the input boundary for non-finite or out-of-range lat/lon."""
