"""
RateLimitGovernor - Cooperative backoff on the Helix rate-limit budget

Helix returns Ratelimit-Remaining / Ratelimit-Reset on every response.
Before the next query is sent, the governor looks at the last values:
- budget left (or no response seen yet): go
- budget exhausted: sleep until the reset timestamp

The wait is inline: it suspends the calling coroutine (the check cycle),
so a throttled cycle lasts as long as the window needs.
"""
import asyncio
import logging
import time
from typing import Awaitable, Callable, Optional

LOGGER = logging.getLogger(__name__)


class RateLimitGovernor:
    """Blocks the query path until the rate-limit window resets."""

    def __init__(
        self,
        clock: Callable[[], float] = time.time,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep
    ):
        self._clock = clock
        self._sleep = sleep
        self.total_waits = 0

    def wait_seconds(self, remaining: Optional[int], reset: Optional[int]) -> int:
        """Seconds to wait before the next query (0 = go now)."""
        if remaining is None or remaining > 0:
            return 0
        if reset is None:
            return 0

        now = int(self._clock())
        if now >= reset:
            return 0
        return reset - now

    async def wait(self, remaining: Optional[int], reset: Optional[int]) -> int:
        """
        Suspend until the budget is available again. Never raises.

        Args:
            remaining: Ratelimit-Remaining of the last response (None if unknown)
            reset: Ratelimit-Reset of the last response (unix seconds)

        Returns:
            Seconds waited
        """
        delay = self.wait_seconds(remaining, reset)
        if delay <= 0:
            return 0

        LOGGER.warning(f"⏳ Waiting on rate limit to pass before sending next request ({delay} seconds)")
        self.total_waits += 1
        await self._sleep(delay)
        return delay
