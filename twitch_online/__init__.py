"""
twitch_online/
==============

Detects whether a set of Twitch channels is online by polling Helix.

Organisation:
- config.py : Params (credentials) + config.yaml loading
- core/ : channel registry, rate-limit governor, callback slots, Stream
- monitors/ : StreamMonitor (polling loop)
- transports/ : Helix /streams client

Usage:

    monitor = StreamMonitor(Params(client_id="...", oauth="..."))
    await monitor.add_streamer("71092938")
    monitor.on_online(lambda stream: print(f"{stream.user_name} is online"))
    monitor.on_offline(lambda channel_id: print(f"{channel_id} is offline"))
    monitor.set_interval(10)
    await monitor.start()
"""

from twitch_online.config import Params
from twitch_online.core.stream_types import Stream
from twitch_online.errors import ConfigError, StreamQueryError, TwitchOnlineError
from twitch_online.monitors.stream_monitor import MonitorState, StreamMonitor

__version__ = "1.0.0"

__all__ = [
    "ConfigError",
    "MonitorState",
    "Params",
    "Stream",
    "StreamMonitor",
    "StreamQueryError",
    "TwitchOnlineError",
]
