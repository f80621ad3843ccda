"""
Core building blocks of the stream monitor: channel registry,
rate-limit governor, callback slots and the Stream record.
"""

from twitch_online.core.callbacks import CallbackDispatcher
from twitch_online.core.channel_registry import AsyncRWLock, ChannelRegistry
from twitch_online.core.rate_limiter import RateLimitGovernor
from twitch_online.core.stream_types import Stream

__all__ = ["AsyncRWLock", "CallbackDispatcher", "ChannelRegistry", "RateLimitGovernor", "Stream"]
