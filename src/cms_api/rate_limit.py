"""Fixed-window rate limiting per principal.

The limiter only talks to a ``RateLimitStore``. The in-memory store lives on
``app.state`` for the lifetime of the process; a shared cache can implement
the same protocol when the API runs on several instances.
"""

import math
import time
from collections.abc import Callable
from dataclasses import dataclass
from typing import Protocol

from cms_api.exceptions import RateLimitedError


@dataclass(frozen=True)
class WindowHit:
    """Counter state after one request was recorded."""

    count: int
    resets_at: float


class RateLimitStore(Protocol):
    async def hit(self, key: str, window_seconds: int) -> WindowHit: ...

    async def reset(self, key: str) -> None: ...


class InMemoryRateLimitStore:
    """Counters kept in a dict.

    Read-modify-write happens without an await in between, so it is atomic
    on the event loop. Expired windows are replaced lazily on the next hit.
    """

    def __init__(self, clock: Callable[[], float] = time.monotonic) -> None:
        self._clock = clock
        self._windows: dict[str, WindowHit] = {}

    async def hit(self, key: str, window_seconds: int) -> WindowHit:
        now = self._clock()
        current = self._windows.get(key)
        if current is None or now >= current.resets_at:
            current = WindowHit(count=1, resets_at=now + window_seconds)
        else:
            current = WindowHit(count=current.count + 1, resets_at=current.resets_at)
        self._windows[key] = current
        return current

    async def reset(self, key: str) -> None:
        self._windows.pop(key, None)

    def __len__(self) -> int:
        return len(self._windows)


class RateLimiter:
    def __init__(
        self,
        store: RateLimitStore,
        *,
        max_requests: int,
        window_seconds: int,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.store = store
        self.max_requests = max_requests
        self.window_seconds = window_seconds
        self._clock = clock

    async def check(self, key: str) -> WindowHit:
        """Record one request for ``key``; raise once the ceiling is passed."""
        window = await self.store.hit(key, self.window_seconds)
        if window.count > self.max_requests:
            retry_after = max(math.ceil(window.resets_at - self._clock()), 1)
            raise RateLimitedError(retry_after)
        return window
