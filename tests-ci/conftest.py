"""
Pytest configuration for CI tests
Provides common fixtures and test config (no real API keys, no network)
"""
import asyncio
from typing import List, Optional, Sequence

import pytest

from twitch_online.config import Params
from twitch_online.core.stream_types import Stream
from twitch_online.errors import StreamQueryError


def make_stream(user_id: str, **overrides) -> Stream:
    data = {
        "id": f"stream_{user_id}",
        "user_id": user_id,
        "user_login": f"login_{user_id}",
        "user_name": f"Name_{user_id}",
        "game_name": "Science & Technology",
        "title": "Test Stream Title",
        "viewer_count": 42,
        "started_at": "2025-11-01T00:00:00Z",
    }
    data.update(overrides)
    return Stream.from_helix(data)


class FakeStreamService:
    """
    In-memory stream query service.

    `live` is the set of IDs reported live. Queue exceptions in `errors`
    to make the next calls fail.
    """

    def __init__(self, live: Sequence[str] = ()):
        self.live = set(live)
        self.extra: List[Stream] = []
        self.errors: List[Exception] = []
        self.calls: List[dict] = []
        self.rate_limit_remaining: Optional[int] = None
        self.rate_limit_reset: Optional[int] = None

    async def get_streams(self, first, stream_type, user_ids):
        self.calls.append({"first": first, "stream_type": stream_type, "user_ids": list(user_ids)})
        if self.errors:
            raise self.errors.pop(0)
        streams = [make_stream(uid) for uid in user_ids if uid in self.live]
        return streams + self.extra


async def wait_until(predicate, timeout: float = 2.0):
    """Poll predicate until true (fails the test on timeout)"""
    async def _poll():
        while not predicate():
            await asyncio.sleep(0.005)
    await asyncio.wait_for(_poll(), timeout=timeout)


@pytest.fixture
def params():
    """Mock credentials"""
    return Params(client_id="test_client_id_mock", oauth="test_oauth_mock")


@pytest.fixture
def fake_service():
    return FakeStreamService()


@pytest.fixture
def failing_error():
    return StreamQueryError("get_streams failed: HTTP 401", status_code=401)


@pytest.fixture
def mock_config():
    """Mock configuration dict (same layout as config.yaml)"""
    return {
        'twitch': {
            'client_id': 'test_client_id_mock',
            'oauth': 'oauth:test_oauth_mock',
            'channels': ['71092938', '44456636'],
        },
        'monitor': {
            'interval': 10,
        },
        'timeouts': {
            'helix_request': 5.0,
        },
    }
