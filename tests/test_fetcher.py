import json

import httpx
import pytest

from read_tools_server.api.models import ClientSettings
from read_tools_server.core.errors import ErrorCode
from read_tools_server.playback.errors import NetworkError, ServerError
from read_tools_server.playback.fetcher import TranscriptFetcher

CONFIG = ClientSettings(
    ajax_url="http://test/read-aloud/content",
    nonce="token-123",
    ajax_action="read_tools_get_content",
    error_text="Could not load the article.",
)


def fetcher_for(handler):
    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return TranscriptFetcher(CONFIG, client)


@pytest.mark.asyncio
async def test_posts_action_item_and_nonce():
    seen = {}

    def handler(request):
        seen["url"] = str(request.url)
        seen["body"] = json.loads(request.content)
        return httpx.Response(200, json={"success": True, "data": {"content": "Hello there"}})

    assert await fetcher_for(handler).fetch(42) == "Hello there"
    assert seen["url"] == CONFIG.ajax_url
    assert seen["body"] == {"action": "read_tools_get_content", "post_id": 42, "nonce": "token-123"}


@pytest.mark.asyncio
async def test_structured_error_becomes_server_error():
    def handler(request):
        return httpx.Response(
            429,
            json={"success": False, "data": {"code": "RateLimited", "message": "Slow down."}},
        )

    with pytest.raises(ServerError) as excinfo:
        await fetcher_for(handler).fetch(42)

    assert excinfo.value.code is ErrorCode.RATE_LIMITED
    assert excinfo.value.status_code == 429
    assert excinfo.value.message == "Slow down."


@pytest.mark.asyncio
async def test_unknown_error_code_maps_to_retrieval_error():
    def handler(request):
        return httpx.Response(500, json={"success": False, "data": {"code": "Boom"}})

    with pytest.raises(ServerError) as excinfo:
        await fetcher_for(handler).fetch(42)

    assert excinfo.value.code is ErrorCode.CONTENT_RETRIEVAL_ERROR
    assert excinfo.value.message == CONFIG.error_text


@pytest.mark.asyncio
async def test_transport_failure_is_network_error():
    def handler(request):
        raise httpx.ConnectError("connection refused", request=request)

    with pytest.raises(NetworkError) as excinfo:
        await fetcher_for(handler).fetch(42)
    assert excinfo.value.code is ErrorCode.NETWORK_ERROR
    assert excinfo.value.message == CONFIG.error_text


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "response",
    [
        httpx.Response(200, text="<html>maintenance</html>"),
        httpx.Response(200, json={"success": True}),
        httpx.Response(200, json={"success": True, "data": {"content": None}}),
        httpx.Response(200, json=["unexpected"]),
        httpx.Response(502, text="Bad gateway"),
    ],
)
async def test_malformed_payload_is_network_error(response):
    with pytest.raises(NetworkError):
        await fetcher_for(lambda request: response).fetch(42)
