"""
Tests for HelixStreamsClient (httpx.MockTransport, no network)
"""
import httpx
import pytest

from twitch_online.core.stream_types import Stream
from twitch_online.errors import StreamQueryError
from twitch_online.transports.helix_streams import HELIX_STREAMS_URL, HelixStreamsClient

HELIX_STREAM = {
    "id": "40952121085",
    "user_id": "71092938",
    "user_login": "xqc",
    "user_name": "xQc",
    "game_id": "509658",
    "game_name": "Just Chatting",
    "type": "live",
    "title": "Test Stream Title",
    "viewer_count": 78365,
    "started_at": "2025-11-01T00:00:00Z",
    "language": "en",
    "thumbnail_url": "https://static-cdn.jtvnw.net/previews-ttv/live_user_xqc-{width}x{height}.jpg",
    "tags": ["English"],
    "is_mature": False,
}

RATE_HEADERS = {
    "Ratelimit-Limit": "800",
    "Ratelimit-Remaining": "0",
    "Ratelimit-Reset": "1700000042",
}


def make_client(handler) -> HelixStreamsClient:
    http_client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return HelixStreamsClient("test_client_id_mock", "oauth:test_oauth_mock", http_client=http_client)


@pytest.mark.unit
class TestHelixStreamsClient:

    @pytest.mark.asyncio
    async def test_request_shape(self):
        requests = []

        def handler(request):
            requests.append(request)
            return httpx.Response(200, json={"data": [], "pagination": {}})

        client = make_client(handler)
        await client.get_streams(first=100, stream_type="live", user_ids=["1", "2"])
        await client.http_client.aclose()

        request = requests[0]
        assert str(request.url).startswith(HELIX_STREAMS_URL)
        assert request.url.params.get_list("user_id") == ["1", "2"]
        assert request.url.params["first"] == "100"
        assert request.url.params["type"] == "live"
        assert request.headers["Client-Id"] == "test_client_id_mock"
        assert request.headers["Authorization"] == "Bearer test_oauth_mock"

    @pytest.mark.asyncio
    async def test_parses_streams_and_rate_limit(self):
        def handler(request):
            return httpx.Response(200, json={"data": [HELIX_STREAM]}, headers=RATE_HEADERS)

        client = make_client(handler)
        streams = await client.get_streams(user_ids=["71092938", "44456636"])
        await client.http_client.aclose()

        assert len(streams) == 1
        stream = streams[0]
        assert isinstance(stream, Stream)
        assert stream.user_id == "71092938"
        assert stream.user_name == "xQc"
        assert stream.viewer_count == 78365
        assert stream.tags == ["English"]
        assert stream.raw["game_id"] == "509658"

        assert client.rate_limit_limit == 800
        assert client.rate_limit_remaining == 0
        assert client.rate_limit_reset == 1700000042

    @pytest.mark.asyncio
    async def test_http_error_raises_and_keeps_rate_limit(self):
        def handler(request):
            return httpx.Response(429, json={"error": "Too Many Requests"}, headers=RATE_HEADERS)

        client = make_client(handler)
        with pytest.raises(StreamQueryError) as exc_info:
            await client.get_streams(user_ids=["1"])
        await client.http_client.aclose()

        assert exc_info.value.status_code == 429
        assert client.rate_limit_remaining == 0

    @pytest.mark.asyncio
    async def test_transport_error_raises(self):
        def handler(request):
            raise httpx.ConnectError("connection refused", request=request)

        client = make_client(handler)
        with pytest.raises(StreamQueryError):
            await client.get_streams(user_ids=["1"])
        await client.http_client.aclose()

    @pytest.mark.asyncio
    async def test_bad_payload_raises(self):
        def handler(request):
            return httpx.Response(200, json={"unexpected": True})

        client = make_client(handler)
        with pytest.raises(StreamQueryError):
            await client.get_streams(user_ids=["1"])
        await client.http_client.aclose()

    @pytest.mark.asyncio
    async def test_more_than_100_ids_rejected(self):
        client = make_client(lambda request: httpx.Response(200, json={"data": []}))
        with pytest.raises(StreamQueryError):
            await client.get_streams(user_ids=[str(i) for i in range(101)])
        await client.http_client.aclose()

    @pytest.mark.asyncio
    async def test_garbage_rate_limit_header_ignored(self):
        def handler(request):
            return httpx.Response(200, json={"data": []}, headers={"Ratelimit-Remaining": "lots"})

        client = make_client(handler)
        await client.get_streams(user_ids=["1"])
        await client.http_client.aclose()

        assert client.rate_limit_remaining is None

    @pytest.mark.asyncio
    async def test_aclose_leaves_shared_client_open(self):
        client = make_client(lambda request: httpx.Response(200, json={"data": []}))
        await client.aclose()
        assert not client.http_client.is_closed
        await client.http_client.aclose()

    @pytest.mark.asyncio
    async def test_aclose_closes_owned_client(self):
        client = HelixStreamsClient("id", "token")
        await client.aclose()
        assert client.http_client.is_closed


@pytest.mark.unit
class TestStreamFromHelix:

    def test_missing_fields_default(self):
        stream = Stream.from_helix({"id": "1", "user_id": "2"})
        assert stream.user_name == ""
        assert stream.viewer_count == 0
        assert stream.tags == []
        assert stream.type == "live"

    def test_null_tags(self):
        stream = Stream.from_helix({"id": "1", "user_id": "2", "tags": None, "game_id": None})
        assert stream.tags == []
        assert stream.game_id == ""
