"""
📦 Stream Types - DTOs between the Helix transport and the monitor

A Stream is built fresh on every check cycle and never persisted.
"""
from dataclasses import dataclass, field
from typing import Any, Dict, List


@dataclass
class Stream:
    """A live stream as reported by Helix /streams"""
    id: str                         # Stream ID
    user_id: str                    # Broadcaster ID (registry key)
    user_login: str = ""            # Broadcaster login
    user_name: str = ""             # Display name
    game_id: str = ""
    game_name: str = ""
    type: str = "live"
    title: str = ""
    viewer_count: int = 0
    started_at: str = ""            # RFC3339 timestamp as sent by Twitch
    language: str = ""
    thumbnail_url: str = ""
    tags: List[str] = field(default_factory=list)
    is_mature: bool = False
    raw: Dict[str, Any] = field(default_factory=dict)  # Full Helix payload

    @classmethod
    def from_helix(cls, data: Dict[str, Any]) -> "Stream":
        """Build a Stream from one entry of a Helix `data` array"""
        return cls(
            id=str(data.get("id", "")),
            user_id=str(data.get("user_id", "")),
            user_login=data.get("user_login", "") or "",
            user_name=data.get("user_name", "") or "",
            game_id=str(data.get("game_id", "") or ""),
            game_name=data.get("game_name", "") or "",
            type=data.get("type", "live") or "live",
            title=data.get("title", "") or "",
            viewer_count=int(data.get("viewer_count", 0) or 0),
            started_at=data.get("started_at", "") or "",
            language=data.get("language", "") or "",
            thumbnail_url=data.get("thumbnail_url", "") or "",
            tags=list(data.get("tags") or []),
            is_mature=bool(data.get("is_mature", False)),
            raw=dict(data),
        )
