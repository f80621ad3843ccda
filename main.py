#!/usr/bin/env python3
"""
twitch-online - Log when Twitch channels go online / offline

Usage:
    python main.py --config config/config.yaml
    python main.py --channel 71092938 --interval 10
"""

import argparse
import asyncio
import logging
import signal
import sys

from twitch_online.config import (
    channels_from_config,
    helix_timeout_from_config,
    interval_from_config,
    load_config,
    params_from_config,
)
from twitch_online.core.stream_types import Stream
from twitch_online.errors import ConfigError
from twitch_online.monitors.stream_monitor import StreamMonitor

# Logger will be configured in setup_logging()
LOGGER = logging.getLogger(__name__)


def parse_args(argv=None):
    """Parse command-line arguments"""
    parser = argparse.ArgumentParser(description="twitch-online - Twitch stream online/offline monitor")
    parser.add_argument(
        '--config',
        type=str,
        default='config/config.yaml',
        help='Path to config file (default: config/config.yaml)'
    )
    parser.add_argument(
        '--channel',
        action='append',
        default=[],
        help='Broadcaster ID to monitor (repeatable, added to config channels)'
    )
    parser.add_argument(
        '--interval',
        type=float,
        help='Polling interval in seconds (overrides monitor.interval)'
    )
    parser.add_argument(
        '--debug',
        action='store_true',
        help='Enable DEBUG logging'
    )
    return parser.parse_args(argv)


def setup_logging(debug: bool = False):
    """Configure root logger (console only)"""
    logging.basicConfig(
        level=logging.DEBUG if debug else logging.INFO,
        format="%(asctime)s %(levelname)-8s %(name)s %(message)s",
        handlers=[logging.StreamHandler()],
        force=True
    )
    # httpx logs every request at INFO
    logging.getLogger("httpx").setLevel(logging.WARNING)


def log_online(stream: Stream):
    LOGGER.info(f"🔴 {stream.user_name} is online ({stream.game_name}, {stream.viewer_count} viewers)")


def log_offline(channel_id: str):
    LOGGER.info(f"💤 {channel_id} is offline")


def build_monitor(config: dict, args) -> StreamMonitor:
    """Create the StreamMonitor described by config + CLI overrides"""
    params = params_from_config(config)
    if args.interval is not None:
        interval = interval_from_config({"monitor": {"interval": args.interval}})
    else:
        interval = interval_from_config(config)

    monitor = StreamMonitor(
        params,
        interval=interval,
        helix_timeout=helix_timeout_from_config(config)
    )
    monitor.on_online(log_online)
    monitor.on_offline(log_offline)
    return monitor


async def main(argv=None) -> int:
    """Main entry point: load config, register channels, poll until SIGINT/SIGTERM"""
    args = parse_args(argv)
    setup_logging(args.debug)

    try:
        config = load_config(args.config)
        channels = channels_from_config(config) + args.channel
        monitor = build_monitor(config, args)
    except ConfigError as e:
        LOGGER.error(f"❌ {e}")
        return 1

    if not channels:
        LOGGER.error("❌ No channel to monitor (twitch.channels or --channel)")
        await monitor.aclose()
        return 1

    await monitor.add_streamer(*channels)

    loop = asyncio.get_running_loop()
    for sig in (signal.SIGINT, signal.SIGTERM):
        try:
            loop.add_signal_handler(sig, lambda: asyncio.ensure_future(monitor.stop()))
        except NotImplementedError:
            # Windows: KeyboardInterrupt cancels asyncio.run instead
            pass

    try:
        await monitor.start()
    finally:
        await monitor.aclose()
        LOGGER.info(f"📊 Stats: {monitor.get_stats()}")
    return 0


def run():
    """Console script entry point"""
    try:
        sys.exit(asyncio.run(main()))
    except KeyboardInterrupt:
        sys.exit(130)


if __name__ == "__main__":
    run()
