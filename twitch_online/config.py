"""
⚙️ Configuration - Credentials and monitor settings

config.yaml layout:

    twitch:
      client_id: "xxxxxxxxxxxxxxx"
      oauth: "xxxxxxxxxxxxxxx"
      channels: ["71092938"]
    monitor:
      interval: 60
    timeouts:
      helix_request: 8.0

TWITCH_CLIENT_ID / TWITCH_OAUTH env vars override the file values.
"""
import logging
import os
import pathlib
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

import yaml

from twitch_online.errors import ConfigError

LOGGER = logging.getLogger(__name__)

DEFAULT_INTERVAL = 60.0
DEFAULT_HELIX_TIMEOUT = 8.0


@dataclass
class Params:
    """Credentials required to query Helix"""
    client_id: str
    oauth: str

    def __repr__(self) -> str:
        return f"Params(client_id={self.client_id!r}, oauth='***')"


def load_config(config_path: str = "config/config.yaml") -> Dict[str, Any]:
    """Charge config.yaml"""
    config_file = pathlib.Path(config_path)
    if not config_file.exists():
        raise ConfigError(f"Config file {config_path} not found")

    try:
        with open(config_file, "r", encoding="utf-8") as f:
            config = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {config_path}: {e}") from e

    if config is None:
        config = {}
    if not isinstance(config, dict):
        raise ConfigError(f"{config_path} must contain a mapping, got {type(config).__name__}")

    LOGGER.debug(f"Config loaded from {config_file}")
    return config


def params_from_config(config: Optional[Dict[str, Any]]) -> Params:
    """
    Build Params from the `twitch` section.

    Credentials are not validated here; bad ones only show up as query
    errors once the monitor runs.
    """
    if config is None:
        raise ConfigError("missing configuration")

    twitch_config = config.get("twitch")
    if not isinstance(twitch_config, dict):
        raise ConfigError("missing 'twitch' section")

    client_id = os.environ.get("TWITCH_CLIENT_ID") or twitch_config.get("client_id")
    oauth = os.environ.get("TWITCH_OAUTH") or twitch_config.get("oauth")

    if not client_id or not oauth:
        raise ConfigError("client_id ou oauth manquant")

    return Params(client_id=str(client_id), oauth=str(oauth))


def channels_from_config(config: Dict[str, Any]) -> List[str]:
    channels = (config.get("twitch") or {}).get("channels") or []
    if not isinstance(channels, list):
        raise ConfigError("'twitch.channels' must be a list")
    return [str(c) for c in channels]


def interval_from_config(config: Dict[str, Any]) -> float:
    interval = (config.get("monitor") or {}).get("interval", DEFAULT_INTERVAL)
    try:
        interval = float(interval)
    except (TypeError, ValueError) as e:
        raise ConfigError(f"'monitor.interval' must be a number, got {interval!r}") from e
    if interval <= 0:
        raise ConfigError(f"'monitor.interval' must be positive, got {interval}")
    return interval


def helix_timeout_from_config(config: Dict[str, Any]) -> float:
    timeouts = config.get("timeouts") or {}
    try:
        return float(timeouts.get("helix_request", DEFAULT_HELIX_TIMEOUT))
    except (TypeError, ValueError) as e:
        raise ConfigError(f"'timeouts.helix_request' must be a number: {e}") from e
