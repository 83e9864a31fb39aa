"""In-process manual response cache."""

from __future__ import annotations

import asyncio
import time
from collections import OrderedDict
from dataclasses import dataclass
from logging import getLogger
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Callable

    from sturdy.core.http import HTTPResponse
    from sturdy.core.ports.cache import CacheKey

log = getLogger(__name__)

DEFAULT_MAX_ENTRIES = 256


@dataclass(frozen=True, slots=True)
class _Entry:
    response: HTTPResponse
    expiry: float


class MemoryResponseCache:
    """TTL cache capped by entry count.

    Expired entries are dropped when read and are not counted by ``len()``.
    Once the cap is exceeded, the oldest-inserted keys are evicted first;
    storing a key again moves it to the back of the queue.
    """

    def __init__(
        self,
        max_entries: int = DEFAULT_MAX_ENTRIES,
        *,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.max_entries = max(1, max_entries)
        self._clock = clock
        self._entries: OrderedDict[CacheKey, _Entry] = OrderedDict()
        self._lock = asyncio.Lock()

    def __len__(self) -> int:
        now = self._clock()
        return sum(1 for entry in self._entries.values() if now <= entry.expiry)

    async def get(self, key: CacheKey) -> HTTPResponse | None:
        async with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return None
            if self._clock() > entry.expiry:
                del self._entries[key]
                log.debug(f"Cache entry expired for {key.method} {key.url}")
                return None
            return entry.response

    async def set(self, response: HTTPResponse, key: CacheKey, ttl: float) -> None:
        async with self._lock:
            self._entries[key] = _Entry(response=response, expiry=self._clock() + ttl)
            self._entries.move_to_end(key)
            while len(self._entries) > self.max_entries:
                evicted, _ = self._entries.popitem(last=False)
                log.debug(f"Evicted cache entry for {evicted.method} {evicted.url}")

    async def remove(self, key: CacheKey) -> None:
        async with self._lock:
            self._entries.pop(key, None)

    async def remove_all(self) -> None:
        async with self._lock:
            self._entries.clear()


__all__ = ["DEFAULT_MAX_ENTRIES", "MemoryResponseCache"]
