"""
twitch_online/transports/
=========================

Transports to the Twitch API.

Modules:
- helix_streams : Helix /streams client (live status + rate-limit headers)
"""

from twitch_online.transports.helix_streams import HelixStreamsClient, StreamQueryService

__all__ = ["HelixStreamsClient", "StreamQueryService"]
