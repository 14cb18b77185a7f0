from __future__ import annotations

from abc import ABC, abstractmethod

from src.domain.models import GeoPoint, LookupResult


class IWalkingRouter(ABC):
    """Port for resolving walking paths/distances against a routing service.

    Failures are reported as ``Unresolved`` values, never raised.
    """

    @abstractmethod
    async def resolve_walking_path(
        self, origin: GeoPoint, destination: GeoPoint
    ) -> LookupResult[tuple[GeoPoint, ...]]:
        """Return the walked polyline in (lat, lon) order."""

    @abstractmethod
    async def resolve_walking_distance(
        self, origin: GeoPoint, destination: GeoPoint
    ) -> LookupResult[float]:
        """Return the walked distance in meters."""
