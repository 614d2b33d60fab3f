import asyncio
from contextlib import asynccontextmanager
from typing import Dict, Hashable


class KeyedLock:
    """
    One asyncio.Lock per key, created on demand and dropped when nobody holds
    or waits for it. Used to make read-check-write on a stock row atomic with
    respect to other events handled by this process.
    """

    def __init__(self):
        self._locks: Dict[Hashable, asyncio.Lock] = {}
        self._users: Dict[Hashable, int] = {}

    @asynccontextmanager
    async def hold(self, key: Hashable):
        lock = self._locks.setdefault(key, asyncio.Lock())
        self._users[key] = self._users.get(key, 0) + 1
        try:
            async with lock:
                yield
        finally:
            self._users[key] -= 1
            if not self._users[key]:
                del self._users[key]
                del self._locks[key]

    def __len__(self):
        return len(self._locks)
