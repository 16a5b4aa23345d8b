"""Per-entity asyncio locks shared by every service in one process.

Keys are namespaced strings ("listing:<id>", "balance:<user>", "unused:<user>").
Services that need two locks always take the listing lock first.
A lock exists only while some task holds or waits for it, so the registry
does not grow with the number of listings ever touched.
"""

import asyncio
from collections import defaultdict
from collections.abc import AsyncIterator
from contextlib import AbstractAsyncContextManager, asynccontextmanager


class KeyedLocks:
    def __init__(self) -> None:
        self._locks: dict[str, asyncio.Lock] = {}
        self._holders: dict[str, int] = defaultdict(int)

    @asynccontextmanager
    async def _hold(self, key: str) -> AsyncIterator[None]:
        lock = self._locks.setdefault(key, asyncio.Lock())
        self._holders[key] += 1
        try:
            async with lock:
                yield
        finally:
            self._holders[key] -= 1
            if self._holders[key] == 0:
                del self._holders[key]
                del self._locks[key]

    def get(self, key: str) -> AbstractAsyncContextManager[None]:
        return self._hold(key)

    def listing(self, listing_id: str) -> AbstractAsyncContextManager[None]:
        return self._hold(f"listing:{listing_id}")

    def balance(self, user_id: str) -> AbstractAsyncContextManager[None]:
        return self._hold(f"balance:{user_id}")

    def unused_views(self, user_id: str) -> AbstractAsyncContextManager[None]:
        return self._hold(f"unused:{user_id}")

    def is_locked(self, key: str) -> bool:
        lock = self._locks.get(key)
        return lock is not None and lock.locked()

    def __len__(self) -> int:
        return len(self._locks)
