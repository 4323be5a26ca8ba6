"""
Process-wide cache for the Laravel backend access token.

One token is shared by every request handler. Reads and writes go through an
``asyncio.Lock`` and the token carries an expiry, so concurrent cache misses
trigger a single login and a stale token is never handed out.
"""

from __future__ import annotations

import asyncio
import time
from typing import Awaitable, Callable, Optional


class TokenCache:
    """A single token with an explicit time-to-live.

    Args:
        ttl_seconds: Default lifetime for tokens stored without an explicit ``ttl``.
        clock: Monotonic time source, in seconds.
    """

    def __init__(self, ttl_seconds: float = 3300, *, clock: Callable[[], float] = time.monotonic) -> None:
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._lock = asyncio.Lock()
        self._token: Optional[str] = None
        self._expires_at: float = 0.0

    def _current(self) -> Optional[str]:
        if self._token is not None and self._clock() < self._expires_at:
            return self._token
        return None

    def _store(self, token: str, ttl: Optional[float]) -> None:
        self._token = token
        self._expires_at = self._clock() + (self.ttl_seconds if ttl is None else ttl)

    async def get(self) -> Optional[str]:
        """Return the cached token, or ``None`` when empty or expired."""
        async with self._lock:
            return self._current()

    async def set(self, token: str, ttl: Optional[float] = None) -> None:
        async with self._lock:
            self._store(token, ttl)

    async def clear(self) -> None:
        async with self._lock:
            self._token = None
            self._expires_at = 0.0

    async def get_or_fetch(self, fetcher: Callable[[], Awaitable[str]]) -> str:
        """Return the cached token, calling ``fetcher`` once to refill it on a miss.

        The lock is held while fetching, so callers waiting on a miss reuse the
        freshly fetched token instead of logging in again. A failing fetcher
        leaves the cache empty and propagates its exception.
        """
        async with self._lock:
            token = self._current()
            if token is None:
                token = await fetcher()
                self._store(token, None)
            return token


backend_token_cache = TokenCache()
