from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from .geo import GeoPoint
from .stop import Stop


class TravelMode(str, Enum):
    WALK = "walk"
    BUS = "bus"


class StopSelection(str, Enum):
    """How board/alight stops are chosen."""

    WALKING = "walking"
    STRAIGHT = "straight"


@dataclass(frozen=True, slots=True)
class RouteLeg:
    mode: TravelMode
    origin: GeoPoint
    destination: GeoPoint
    path: tuple[GeoPoint, ...] = ()
    distance_m: float | None = None
    # True when the path is a straight stand-in for an unresolved walking path.
    approximate: bool = False


@dataclass(frozen=True, slots=True)
class Itinerary:
    origin: GeoPoint
    destination: GeoPoint
    board_stop: Stop
    alight_stop: Stop
    access: RouteLeg
    egress: RouteLeg
    # None when the stops could not be matched onto the route.
    transit: RouteLeg | None = None

    @property
    def legs(self) -> tuple[RouteLeg, ...]:
        if self.transit is None:
            return (self.access, self.egress)
        return (self.access, self.transit, self.egress)

    @property
    def total_distance_m(self) -> float | None:
        distances = [leg.distance_m for leg in self.legs]
        if any(d is None for d in distances):
            return None
        return float(sum(d for d in distances if d is not None))

    @property
    def summary(self) -> str:
        def km(value: float | None) -> str:
            return f"{value / 1000.0:.2f}" if value is not None else "—"

        head = f"Board at {self.board_stop.name} → Alight at {self.alight_stop.name}"
        if self.transit is None:
            return f"{head} • no route match"
        return (
            f"{head} • Walk ~{km(self.access.distance_m)} km"
            f" + Bus ~{km(self.transit.distance_m)} km"
            f" + Walk ~{km(self.egress.distance_m)} km"
        )
