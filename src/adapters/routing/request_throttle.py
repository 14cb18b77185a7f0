from __future__ import annotations

import asyncio
from collections import deque
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from dataclasses import dataclass, field


@dataclass(slots=True)
class RequestThrottle:
    """Bounded number of in-flight requests with first-in-first-out admission.

    A released slot is handed straight to the oldest waiter, so a newcomer
    can never overtake the queue. Acquire/release never await between
    checking and updating state, which keeps them atomic on one event loop.
    """

    limit: int = 2

    _active: int = field(default=0, init=False)
    _peak: int = field(default=0, init=False)
    _waiters: deque[asyncio.Future[None]] = field(
        default_factory=deque, init=False, repr=False
    )

    def __post_init__(self) -> None:
        if self.limit < 1:
            raise ValueError(f"Throttle limit must be >= 1, got {self.limit}")

    @property
    def in_flight(self) -> int:
        return self._active

    @property
    def peak_in_flight(self) -> int:
        return self._peak

    @property
    def queued(self) -> int:
        return sum(1 for w in self._waiters if not w.done())

    async def acquire(self) -> None:
        if self._active < self.limit and not self.queued:
            self._take()
            return

        waiter: asyncio.Future[None] = asyncio.get_running_loop().create_future()
        self._waiters.append(waiter)
        try:
            await waiter
        except asyncio.CancelledError:
            if waiter.done() and not waiter.cancelled():
                # The slot was already handed over; pass it on.
                self.release()
            else:
                self._discard(waiter)
            raise

    def release(self) -> None:
        while self._waiters:
            waiter = self._waiters.popleft()
            if not waiter.done():
                # Slot ownership moves to the waiter; _active is unchanged.
                waiter.set_result(None)
                return
        if self._active <= 0:
            raise RuntimeError("release() called more times than acquire()")
        self._active -= 1

    @asynccontextmanager
    async def slot(self) -> AsyncIterator[None]:
        await self.acquire()
        try:
            yield
        finally:
            self.release()

    def _take(self) -> None:
        self._active += 1
        self._peak = max(self._peak, self._active)

    def _discard(self, waiter: asyncio.Future[None]) -> None:
        try:
            self._waiters.remove(waiter)
        except ValueError:
            pass
