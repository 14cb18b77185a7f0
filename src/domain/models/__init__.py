from .geo import GeoPoint, parse_lat_lon
from .lookup import LookupResult, Resolved, Unresolved
from .network import TransitNetwork
from .projection import ProjectionResult
from .route import Itinerary, RouteLeg, StopSelection, TravelMode
from .stop import Stop

__all__ = [
    "GeoPoint",
    "Itinerary",
    "LookupResult",
    "ProjectionResult",
    "Resolved",
    "RouteLeg",
    "Stop",
    "StopSelection",
    "TransitNetwork",
    "TravelMode",
    "Unresolved",
    "parse_lat_lon",
]
