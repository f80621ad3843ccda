#!/usr/bin/env python3
"""
📡 Stream Monitor - Polling-based stream status detection

Polls Twitch Helix /streams every N seconds for the tracked broadcaster IDs
and calls the online handler (with the Stream) or the offline handler
(with the ID) for every tracked channel, in registration order.

Control:
- start(): one immediate check, then one check per tick until stopped
- check_now(): one extra check without waiting for the next tick
- stop(): ask the loop to exit at its next wait point

stop and check_now requests each hold a single pending slot; a second
request made before the first is consumed waits for that slot.
"""
import asyncio
import enum
import logging
from typing import Dict, Optional, Sequence

from twitch_online.config import DEFAULT_HELIX_TIMEOUT, DEFAULT_INTERVAL, Params
from twitch_online.core.callbacks import CallbackDispatcher, OfflineHandler, OnlineHandler
from twitch_online.core.channel_registry import ChannelRegistry
from twitch_online.core.rate_limiter import RateLimitGovernor
from twitch_online.core.stream_types import Stream
from twitch_online.errors import ConfigError
from twitch_online.transports.helix_streams import MAX_USER_IDS, HelixStreamsClient, StreamQueryService

LOGGER = logging.getLogger(__name__)


class MonitorState(enum.Enum):
    IDLE = "idle"
    RUNNING = "running"
    STOPPED = "stopped"


class _Signal(enum.Enum):
    TICK = "tick"
    CHECK = "check"
    STOP = "stop"


def _chunks(items: Sequence[str], size: int):
    for i in range(0, len(items), size):
        yield items[i:i + size]


class StreamMonitor:
    """
    Monitors stream status via Helix API polling.

    All checks, rate-limit waits and handler calls run sequentially inside
    start(). Other coroutines may add channels, force a check or stop.
    """

    def __init__(
        self,
        params: Optional[Params],
        service: Optional[StreamQueryService] = None,
        interval: float = DEFAULT_INTERVAL,
        helix_timeout: float = DEFAULT_HELIX_TIMEOUT,
        governor: Optional[RateLimitGovernor] = None
    ):
        """
        Args:
            params: Client ID + OAuth token (required)
            service: Streams backend (default: HelixStreamsClient built from params)
            interval: Polling interval in seconds (default: 60s)
            helix_timeout: Request timeout for the default Helix client
            governor: Rate-limit governor (default: wall clock + asyncio.sleep)

        Raises:
            ConfigError: params is None
            ValueError: interval is not positive
        """
        if params is None:
            raise ConfigError("missing params")

        self._state = MonitorState.IDLE
        self.set_interval(interval)

        self.params = params
        self._owns_service = service is None
        self.service = service or HelixStreamsClient(
            params.client_id,
            params.oauth,
            helix_timeout=helix_timeout
        )
        self.governor = governor or RateLimitGovernor()
        self.registry = ChannelRegistry()
        self.callbacks = CallbackDispatcher()

        # Single-slot control signals
        self._stop_requests: asyncio.Queue = asyncio.Queue(maxsize=1)
        self._check_requests: asyncio.Queue = asyncio.Queue(maxsize=1)
        self._wakeup = asyncio.Event()

        self._stats: Dict[str, int] = {"cycles": 0, "failed_cycles": 0, "ticks": 0, "forced": 0}

        LOGGER.info(f"📡 StreamMonitor initialized - interval={interval}s")

    # ------------------------------------------------------------------
    # Configuration
    # ------------------------------------------------------------------

    async def add_streamer(self, *channel_ids: str):
        """Track one or more broadcaster IDs (duplicates ignored)"""
        return await self.registry.add(*channel_ids)

    def set_interval(self, seconds: float):
        """
        Set how often to check if streams are online.

        When set after start(), stop() and start() again for it to take effect.
        """
        if seconds <= 0:
            raise ValueError(f"interval must be positive, got {seconds}")
        self.interval = seconds
        if self.is_running:
            LOGGER.info(f"Interval set to {seconds}s, applies after restart")

    def on_online(self, handler: Optional[OnlineHandler]):
        """Set the handler called with the Stream of every live channel"""
        self.callbacks.set_online(handler)

    def on_offline(self, handler: Optional[OfflineHandler]):
        """Set the handler called with the ID of every offline channel"""
        self.callbacks.set_offline(handler)

    @property
    def state(self) -> MonitorState:
        return self._state

    @property
    def is_running(self) -> bool:
        return self._state is MonitorState.RUNNING

    # ------------------------------------------------------------------
    # Control
    # ------------------------------------------------------------------

    async def check_now(self):
        """Force an online check without waiting for the next tick"""
        await self._check_requests.put(_Signal.CHECK)
        self._wakeup.set()

    async def stop(self):
        """Ask the loop to stop (honoured at its next wait point)"""
        if not self.is_running:
            LOGGER.warning("⚠️ StreamMonitor not running, stop ignored")
            return
        LOGGER.info("🛑 Stopping StreamMonitor...")
        await self._stop_requests.put(_Signal.STOP)
        self._wakeup.set()

    async def start(self):
        """Run the monitoring loop until stop() is called"""
        if self.is_running:
            LOGGER.warning("⚠️ StreamMonitor already running")
            return

        # Drop a stop request left over from the previous run
        while not self._stop_requests.empty():
            self._stop_requests.get_nowait()

        interval = self.interval
        loop = asyncio.get_running_loop()
        self._state = MonitorState.RUNNING
        LOGGER.info(f"🔄 StreamMonitor loop started (interval={interval}s)")

        try:
            await self.check()
            next_tick = loop.time() + interval

            while True:
                signal = await self._next_signal(next_tick)

                if signal is _Signal.STOP:
                    break

                if signal is _Signal.TICK:
                    self._stats["ticks"] += 1
                    # Missed ticks are dropped, not replayed
                    now = loop.time()
                    while next_tick <= now:
                        next_tick += interval
                else:
                    self._stats["forced"] += 1
                    LOGGER.debug("Forced check")

                await self.check()
        finally:
            self._state = MonitorState.STOPPED
            LOGGER.info("✅ StreamMonitor stopped")

    async def _next_signal(self, deadline: float) -> _Signal:
        """Wait for a stop request, a check request or the tick deadline"""
        loop = asyncio.get_running_loop()
        while True:
            if not self._stop_requests.empty():
                return self._stop_requests.get_nowait()
            if not self._check_requests.empty():
                return self._check_requests.get_nowait()

            timeout = deadline - loop.time()
            if timeout <= 0:
                return _Signal.TICK

            self._wakeup.clear()
            try:
                await asyncio.wait_for(self._wakeup.wait(), timeout=timeout)
            except asyncio.TimeoutError:
                return _Signal.TICK

    # ------------------------------------------------------------------
    # Check cycle
    # ------------------------------------------------------------------

    async def check(self) -> bool:
        """
        Run one check cycle.

        The registry read lock covers the whole query, rate-limit waits
        included. A failed query abandons the cycle: no handler is called.

        Returns:
            True if handlers were dispatched, False if the cycle was abandoned
        """
        async with self.registry.snapshot() as channel_ids:
            if not channel_ids:
                LOGGER.debug("No channel tracked, nothing to check")
                return True
            live = await self._query_live(channel_ids)

        if live is None:
            self._stats["failed_cycles"] += 1
            return False

        self._stats["cycles"] += 1
        LOGGER.debug(f"📊 {len(live)}/{len(channel_ids)} channel(s) live")

        for channel_id in channel_ids:
            stream = live.get(channel_id)
            if stream is not None:
                await self.callbacks.online(stream)
            else:
                await self.callbacks.offline(channel_id)
        return True

    async def _query_live(self, channel_ids: Sequence[str]) -> Optional[Dict[str, Stream]]:
        """Live streams keyed by user_id, or None if any request failed"""
        live: Dict[str, Stream] = {}
        try:
            for chunk in _chunks(channel_ids, MAX_USER_IDS):
                await self.governor.wait(self.service.rate_limit_remaining, self.service.rate_limit_reset)
                streams = await self.service.get_streams(
                    first=MAX_USER_IDS,
                    stream_type="live",
                    user_ids=list(chunk)
                )
                for stream in streams:
                    live[stream.user_id] = stream
        except Exception as e:
            # Retried from scratch on the next tick
            LOGGER.debug(f"Check cycle abandoned: {type(e).__name__}: {e}")
            return None
        return live

    # ------------------------------------------------------------------

    def get_stats(self) -> Dict[str, int]:
        """Retourne les stats du monitor"""
        return {
            **self._stats,
            "channels": len(self.registry),
            "rate_limit_waits": self.governor.total_waits,
        }

    async def aclose(self):
        """Release the Helix client created by this monitor"""
        if self._owns_service and hasattr(self.service, "aclose"):
            await self.service.aclose()
