"""
📋 ChannelRegistry - Ordered set of tracked broadcaster IDs

Grows only (no removal). Guarded by an asyncio reader/writer lock:
check cycles read concurrently, add() is exclusive. A check cycle holds
its read lock for the whole Helix query, rate-limit wait included, so
add() waits behind slow queries.
"""
import asyncio
import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator, List, Tuple

LOGGER = logging.getLogger(__name__)


class AsyncRWLock:
    """Reader/writer lock for coroutines (writers preferred)"""

    def __init__(self):
        self._cond = asyncio.Condition()
        self._readers = 0
        self._writer = False
        self._writers_waiting = 0

    @property
    def readers(self) -> int:
        return self._readers

    @property
    def writer_active(self) -> bool:
        return self._writer

    @asynccontextmanager
    async def read(self) -> AsyncIterator[None]:
        async with self._cond:
            # Pending writers block new readers
            await self._cond.wait_for(lambda: not self._writer and not self._writers_waiting)
            self._readers += 1
        try:
            yield
        finally:
            async with self._cond:
                self._readers -= 1
                if self._readers == 0:
                    self._cond.notify_all()

    @asynccontextmanager
    async def write(self) -> AsyncIterator[None]:
        async with self._cond:
            self._writers_waiting += 1
            try:
                await self._cond.wait_for(lambda: not self._writer and self._readers == 0)
            finally:
                self._writers_waiting -= 1
            self._writer = True
        try:
            yield
        finally:
            async with self._cond:
                self._writer = False
                self._cond.notify_all()


class ChannelRegistry:
    """Insertion-ordered, duplicate-free list of channel IDs"""

    def __init__(self):
        self._ids: List[str] = []
        self._lock = AsyncRWLock()

    async def add(self, *channel_ids: str) -> List[str]:
        """
        Append every ID not already tracked.

        Duplicates are ignored silently, both against the registry and
        within the same call.

        Returns:
            The IDs actually added, in order
        """
        added = []
        async with self._lock.write():
            for channel_id in channel_ids:
                if channel_id in self._ids:
                    LOGGER.debug(f"Channel {channel_id} already tracked")
                    continue
                self._ids.append(channel_id)
                added.append(channel_id)
        if added:
            LOGGER.info(f"📋 Tracking {len(added)} new channel(s): {', '.join(added)}")
        return added

    @asynccontextmanager
    async def snapshot(self) -> AsyncIterator[Tuple[str, ...]]:
        """
        Read-locked point-in-time view of the tracked IDs.

        The read lock is held until the `async with` block exits.
        """
        async with self._lock.read():
            yield tuple(self._ids)

    def ids(self) -> List[str]:
        """Unlocked copy, for inspection only"""
        return list(self._ids)

    def __len__(self) -> int:
        return len(self._ids)

    def __contains__(self, channel_id: object) -> bool:
        return channel_id in self._ids
