from __future__ import annotations

from dataclasses import dataclass

from .geo import GeoPoint


@dataclass(frozen=True, slots=True)
class Stop:
    """A stop on the reference route.

    Identity is ``index``: the position in the ordered stop list supplied
    for the session. Names are display-only and may repeat.
    """

    index: int
    name: str
    location: GeoPoint
