"""
tests.test_slack_client

Slack delivery client request shape and error mapping.
"""

from __future__ import annotations

import json

import httpx
import pytest

from workflow_relay.clients.slack import FALLBACK_TEXT, SlackClient
from workflow_relay.domain.errors import DeliveryError


def _client(handler) -> SlackClient:
    http = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return SlackClient(http=http, token="xoxb-test", base_url="http://slack.test/api/")


@pytest.mark.asyncio
async def test_post_sends_threaded_mrkdwn_block() -> None:
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json={"ok": True, "ts": "172.2"})

    await _client(handler).post("C1", "171.1", "**x:** y\n")

    assert len(seen) == 1
    req = seen[0]
    assert str(req.url) == "http://slack.test/api/chat.postMessage"
    assert req.headers["Authorization"] == "Bearer xoxb-test"
    body = json.loads(req.content)
    assert body == {
        "channel": "C1",
        "thread_ts": "171.1",
        "text": FALLBACK_TEXT,
        "blocks": [{"type": "section", "text": {"type": "mrkdwn", "text": "**x:** y\n"}}],
    }


@pytest.mark.asyncio
async def test_not_ok_response_raises_with_code() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={"ok": False, "error": "channel_not_found"})

    with pytest.raises(DeliveryError) as exc:
        await _client(handler).post("C1", "171.1", "text")
    assert exc.value.code == "channel_not_found"
    assert "channel_not_found" in str(exc.value)


@pytest.mark.asyncio
async def test_http_error_status_raises() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(503)

    with pytest.raises(DeliveryError, match="HTTP 503"):
        await _client(handler).post("C1", "171.1", "text")


@pytest.mark.asyncio
async def test_transport_error_raises() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("unreachable", request=request)

    with pytest.raises(DeliveryError, match="unreachable"):
        await _client(handler).post("C1", "171.1", "text")
