from __future__ import annotations

from dataclasses import dataclass

from .geo import GeoPoint
from .stop import Stop


@dataclass(frozen=True, slots=True)
class TransitNetwork:
    """The single reference route and the ordered stops along it."""

    stops: tuple[Stop, ...]
    route: tuple[GeoPoint, ...]
