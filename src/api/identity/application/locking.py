"""Per-user write serialization.

Every mutating use case loads the whole User aggregate, changes it in
memory and saves it back. Two such use cases running concurrently for
the same user would otherwise race, and the later save would silently
discard the earlier one's changes. Holding a per-user lock around the
read-modify-write closes that window inside one process; it does not
coordinate separate processes.
"""

from __future__ import annotations

import asyncio
import weakref
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from functools import lru_cache

from identity.domain.value_objects import UserId
from infrastructure.settings import get_identity_settings


class UserLocks:
    """Registry of one asyncio.Lock per user id.

    Locks are held weakly, so an entry disappears as soon as no task is
    holding or waiting on it.
    """

    def __init__(self, enabled: bool = True) -> None:
        self._enabled = enabled
        self._locks: weakref.WeakValueDictionary[str, asyncio.Lock] = (
            weakref.WeakValueDictionary()
        )

    @property
    def enabled(self) -> bool:
        return self._enabled

    def _lock_for(self, user_id: UserId) -> asyncio.Lock:
        lock = self._locks.get(user_id.value)
        if lock is None:
            lock = asyncio.Lock()
            self._locks[user_id.value] = lock
        return lock

    @asynccontextmanager
    async def hold(self, user_id: UserId) -> AsyncIterator[None]:
        """Serialize the enclosed block with every other block for the same user."""
        if not self._enabled:
            yield
            return

        lock = self._lock_for(user_id)
        async with lock:
            yield

    def __len__(self) -> int:
        return len(self._locks)


@lru_cache
def get_user_locks() -> UserLocks:
    """Get the process-wide lock registry shared by all identity services.

    Uses lru_cache so every service built in this process serializes on
    the same registry.
    """
    return UserLocks(enabled=get_identity_settings().serialize_user_writes)
