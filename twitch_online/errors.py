"""
Exceptions raised by twitch_online.
"""


class TwitchOnlineError(Exception):
    """Base class for all twitch_online errors"""


class ConfigError(TwitchOnlineError):
    """Missing or invalid configuration (raised at construction/load time)"""


class StreamQueryError(TwitchOnlineError):
    """A Helix streams query failed (network, auth, platform error)"""

    def __init__(self, message: str, status_code=None):
        super().__init__(message)
        self.status_code = status_code
