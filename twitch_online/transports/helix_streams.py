#!/usr/bin/env python3
"""Helix Streams Transport - GET /helix/streams with rate-limit tracking

Queries the live status of up to 100 broadcasters per request, using the
Client-Id + user access token supplied by the caller.

Every response (errors included) refreshes the rate-limit metadata
(Ratelimit-Limit / Ratelimit-Remaining / Ratelimit-Reset) exposed as
attributes, which the monitor feeds to its RateLimitGovernor before the
next request.
"""

import logging
from typing import List, Optional, Protocol, Sequence

import httpx

from twitch_online.core.stream_types import Stream
from twitch_online.errors import StreamQueryError

LOGGER = logging.getLogger(__name__)

HELIX_STREAMS_URL = "https://api.twitch.tv/helix/streams"
MAX_USER_IDS = 100


class StreamQueryService(Protocol):
    """What the monitor needs from a streams backend"""

    rate_limit_remaining: Optional[int]
    rate_limit_reset: Optional[int]

    async def get_streams(
        self,
        first: int,
        stream_type: str,
        user_ids: Sequence[str]
    ) -> List[Stream]:
        ...


def _header_int(headers: httpx.Headers, name: str) -> Optional[int]:
    value = headers.get(name)
    if value is None:
        return None
    try:
        return int(value)
    except ValueError:
        LOGGER.debug(f"Ignoring non-integer {name} header: {value!r}")
        return None


class HelixStreamsClient:
    """
    Minimal Helix client for /streams.

    Owns its httpx.AsyncClient unless one is passed in.
    """

    def __init__(
        self,
        client_id: str,
        oauth: str,
        http_client: Optional[httpx.AsyncClient] = None,
        helix_timeout: float = 8.0,
        base_url: str = HELIX_STREAMS_URL
    ):
        """
        Args:
            client_id: Twitch application Client ID
            oauth: User access token (with or without 'oauth:' prefix)
            http_client: Shared httpx client (optional)
            helix_timeout: Request timeout in seconds
            base_url: Streams endpoint
        """
        self.client_id = client_id
        self.oauth = oauth.replace("oauth:", "") if oauth else oauth
        self.helix_timeout = helix_timeout
        self.base_url = base_url

        self._owns_client = http_client is None
        self.http_client = http_client or httpx.AsyncClient(timeout=helix_timeout)

        self.rate_limit_limit: Optional[int] = None
        self.rate_limit_remaining: Optional[int] = None
        self.rate_limit_reset: Optional[int] = None

        LOGGER.debug(f"HelixStreamsClient init (timeout={helix_timeout}s)")

    @property
    def headers(self) -> dict:
        return {
            "Client-Id": self.client_id,
            "Authorization": f"Bearer {self.oauth}",
        }

    def _update_rate_limit(self, response: httpx.Response):
        limit = _header_int(response.headers, "Ratelimit-Limit")
        remaining = _header_int(response.headers, "Ratelimit-Remaining")
        reset = _header_int(response.headers, "Ratelimit-Reset")
        if limit is not None:
            self.rate_limit_limit = limit
        if remaining is not None:
            self.rate_limit_remaining = remaining
        if reset is not None:
            self.rate_limit_reset = reset

    async def get_streams(
        self,
        first: int = 100,
        stream_type: str = "live",
        user_ids: Sequence[str] = ()
    ) -> List[Stream]:
        """
        Fetch the live streams among user_ids.

        Args:
            first: Page size (max 100)
            stream_type: "live" or "all"
            user_ids: Broadcaster IDs (max 100)

        Returns:
            Stream records, one per live broadcaster

        Raises:
            StreamQueryError: transport failure, non-200 status or bad payload
        """
        if len(user_ids) > MAX_USER_IDS:
            raise StreamQueryError(f"Helix accepts at most {MAX_USER_IDS} user_id per request, got {len(user_ids)}")

        params = [("first", str(first)), ("type", stream_type)]
        params.extend(("user_id", uid) for uid in user_ids)

        LOGGER.debug(f"[HELIX] get_streams({len(user_ids)} ids, type={stream_type})")

        try:
            response = await self.http_client.get(
                self.base_url,
                params=params,
                headers=self.headers,
                timeout=self.helix_timeout
            )
        except httpx.TimeoutException as e:
            raise StreamQueryError(f"Timeout get_streams after {self.helix_timeout}s") from e
        except httpx.HTTPError as e:
            raise StreamQueryError(f"get_streams transport error: {e}") from e

        self._update_rate_limit(response)

        if response.status_code != 200:
            raise StreamQueryError(
                f"get_streams failed: HTTP {response.status_code}",
                status_code=response.status_code
            )

        try:
            payload = response.json()
            entries = payload["data"]
        except (ValueError, KeyError, TypeError) as e:
            raise StreamQueryError(f"get_streams returned an unexpected payload: {e}") from e

        streams = [Stream.from_helix(entry) for entry in entries]
        LOGGER.debug(
            f"[HELIX] {len(streams)}/{len(user_ids)} live "
            f"(ratelimit {self.rate_limit_remaining}/{self.rate_limit_limit})"
        )
        return streams

    async def aclose(self):
        """Close the underlying httpx client if we created it"""
        if self._owns_client:
            await self.http_client.aclose()
