from __future__ import annotations

from dataclasses import dataclass, field

from src.domain.models import GeoPoint

CacheKey = tuple[str, str, int]


@dataclass(slots=True)
class WalkingDistanceCache:
    """Walking meters from a query point to a stop, for one session.

    Keys round the query point to 5 decimals (~1.1 m) so GPS jitter hits
    the same entry. Entries are never evicted; the stop set is fixed for
    the session.
    """

    _entries: dict[CacheKey, float] = field(default_factory=dict, init=False)

    @staticmethod
    def key(point: GeoPoint, stop_index: int) -> CacheKey:
        # "+ 0.0" folds -0.0 into 0.0 so jitter around zero shares a key.
        lat = round(point.lat, 5) + 0.0
        lon = round(point.lon, 5) + 0.0
        return (f"{lat:.5f}", f"{lon:.5f}", int(stop_index))

    def get(self, point: GeoPoint, stop_index: int) -> float | None:
        return self._entries.get(self.key(point, stop_index))

    def put(self, point: GeoPoint, stop_index: int, meters: float) -> None:
        self._entries[self.key(point, stop_index)] = float(meters)

    def __len__(self) -> int:
        return len(self._entries)
