from __future__ import annotations

from dataclasses import dataclass
from typing import Generic, TypeVar, Union

T = TypeVar("T")


@dataclass(frozen=True, slots=True)
class Resolved(Generic[T]):
    value: T


@dataclass(frozen=True, slots=True)
class Unresolved:
    """An external lookup that failed every attempt or returned junk.

    Callers fall back to geometry; this is never an error.
    """

    reason: str


LookupResult = Union[Resolved[T], Unresolved]
