"""
tests.test_api

HTTP API tests: the FastAPI app runs in-process (ASGITransport) while a single
`httpx.MockTransport` plays both the external services and the Slack Web API.

Responsibilities:
- Health probes and service listing.
- Workflow endpoints: validation, ordering of Slack posts, failure reporting.
- Slack events/commands, including request signature enforcement.
"""

from __future__ import annotations

import json
import time
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import httpx
import pytest

from workflow_relay.api.app import create_app
from workflow_relay.auth.slack_signature import compute_signature
from workflow_relay.settings import Settings

SERVICES = [
    {"name": "primary-api", "url": "http://svc.test/primary", "displayName": "Primary API"},
    {
        "name": "secondary-api",
        "url": "http://svc.test/secondary",
        "displayName": "Secondary API",
        "timeout": 3000,
        "retryAttempts": 0,
    },
    {"name": "broken-api", "url": "http://svc.test/broken", "retryAttempts": 0},
]


class FakeNetwork:
    def __init__(self) -> None:
        self.slack_posts: list[dict] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        if request.url.host == "slack.test":
            self.slack_posts.append(json.loads(request.content))
            return httpx.Response(200, json={"ok": True})
        if request.url.path == "/broken":
            return httpx.Response(500)
        return httpx.Response(200, json={"source": request.url.path.strip("/")})

    def texts(self) -> list[str]:
        return [p["blocks"][0]["text"]["text"] for p in self.slack_posts]


def _settings(**overrides) -> Settings:
    values = {
        "env": "test",
        "services": SERVICES,
        "slack_bot_token": "xoxb-test",
        "slack_api_base_url": "http://slack.test/api",
        "fetch_retry_delay_seconds": 0,
        **overrides,
    }
    return Settings(**values)


@asynccontextmanager
async def running_app(
    network: FakeNetwork, **overrides
) -> AsyncIterator[httpx.AsyncClient]:
    app = create_app(settings=_settings(**overrides), transport=httpx.MockTransport(network))
    # httpx ASGITransport does not drive the lifespan; run it explicitly.
    async with app.router.lifespan_context(app):
        transport = httpx.ASGITransport(app=app)
        async with httpx.AsyncClient(transport=transport, base_url="http://test") as client:
            yield client


@pytest.mark.asyncio
async def test_health_endpoints() -> None:
    async with running_app(FakeNetwork()) as client:
        r = await client.get("/healthz")
        assert r.status_code == 200
        assert r.json()["status"] == "ok"
        assert "x-request-id" in r.headers

        r = await client.get("/readyz")
        assert r.status_code == 200
        assert r.json() == {"status": "ready", "services": 3}


@pytest.mark.asyncio
async def test_list_services() -> None:
    async with running_app(FakeNetwork()) as client:
        r = await client.get("/api/workflow/services")

    assert r.status_code == 200
    body = r.json()
    assert body["totalServices"] == 3
    assert body["services"][1] == {
        "name": "secondary-api",
        "displayName": "Secondary API",
        "url": "http://svc.test/secondary",
        "timeout": 3000,
        "retryAttempts": 0,
    }
    assert body["services"][2]["displayName"] == "broken-api"


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "payload",
    [{}, {"channel": "C1"}, {"threadTs": "171.1"}, {"channel": " ", "threadTs": "171.1"}],
)
async def test_execute_requires_channel_and_thread(payload: dict) -> None:
    network = FakeNetwork()
    async with running_app(network) as client:
        r = await client.post("/api/workflow/execute", json=payload)

    assert r.status_code == 400
    assert r.json()["detail"] == "Missing required fields: channel and threadTs"
    assert network.slack_posts == []


@pytest.mark.asyncio
async def test_execute_posts_one_reply_per_service_in_order() -> None:
    network = FakeNetwork()
    async with running_app(network) as client:
        r = await client.post("/api/workflow/execute", json={"channel": "C1", "threadTs": "171.1"})

    assert r.status_code == 200
    body = r.json()
    assert body["message"] == "Workflow executed successfully"
    assert body["servicesProcessed"] == 3
    assert body["succeeded"] == 2
    assert [f["service"] for f in body["failures"]] == ["broken-api"]

    assert [(p["channel"], p["thread_ts"]) for p in network.slack_posts] == [("C1", "171.1")] * 3
    texts = network.texts()
    assert texts[0] == "**Primary API Response:**\n\n**source:** primary\n"
    assert texts[1] == "**Secondary API Response:**\n\n**source:** secondary\n"
    assert texts[2].startswith("**broken-api Response:**\n\n**error:** `true`\n")


@pytest.mark.asyncio
async def test_execute_subset_in_request_order() -> None:
    network = FakeNetwork()
    async with running_app(network) as client:
        r = await client.post(
            "/api/workflow/execute/services",
            json={
                "channel": "C1",
                "threadTs": "171.1",
                "serviceNames": ["secondary-api", "primary-api"],
            },
        )

    assert r.status_code == 200
    body = r.json()
    assert body["services"] == ["secondary-api", "primary-api"]
    assert body["servicesProcessed"] == 2
    assert body["failures"] == []
    assert [t.split("\n", 1)[0] for t in network.texts()] == [
        "**Secondary API Response:**",
        "**Primary API Response:**",
    ]


@pytest.mark.asyncio
async def test_execute_subset_requires_service_names() -> None:
    async with running_app(FakeNetwork()) as client:
        r = await client.post(
            "/api/workflow/execute/services",
            json={"channel": "C1", "threadTs": "171.1", "serviceNames": []},
        )
    assert r.status_code == 400
    assert "serviceNames" in r.json()["detail"]


@pytest.mark.asyncio
async def test_legacy_trigger_reports_partial_success() -> None:
    network = FakeNetwork()
    async with running_app(network) as client:
        r = await client.post("/api/workflow/trigger", json={"channel": "C1", "threadTs": "171.1"})

    assert r.status_code == 200
    assert r.json()["status"] == "partial"
    assert r.json()["message"] == "Response posted to Slack thread"
    assert len(network.slack_posts) == 3


@pytest.mark.asyncio
async def test_slack_url_verification_echoes_challenge() -> None:
    async with running_app(FakeNetwork()) as client:
        r = await client.post(
            "/slack/events", json={"type": "url_verification", "challenge": "abc123"}
        )
    assert r.status_code == 200
    assert r.text == "abc123"


@pytest.mark.asyncio
async def test_app_mention_replies_in_thread() -> None:
    network = FakeNetwork()
    event = {
        "type": "event_callback",
        "event": {"type": "app_mention", "channel": "C9", "ts": "180.5", "text": "<@U1> hi"},
    }
    async with running_app(network) as client:
        r = await client.post("/slack/events", json=event)

    assert r.status_code == 200
    assert r.text == "OK"
    assert len(network.slack_posts) == 1
    assert network.slack_posts[0]["channel"] == "C9"
    assert network.slack_posts[0]["thread_ts"] == "180.5"
    assert "POST /api/workflow/execute" in network.texts()[0]


@pytest.mark.asyncio
async def test_unparseable_event_is_still_acknowledged() -> None:
    async with running_app(FakeNetwork()) as client:
        r = await client.post("/slack/events", content=b"not json")
    assert r.status_code == 200
    assert r.text == "OK"


@pytest.mark.asyncio
async def test_slack_retry_is_acknowledged_with_caller_request_id() -> None:
    headers = {
        "x-request-id": "req-42",
        "x-slack-retry-num": "1",
        "x-slack-retry-reason": "http_timeout",
    }
    async with running_app(FakeNetwork()) as client:
        r = await client.post(
            "/slack/events", json={"type": "url_verification", "challenge": "c"}, headers=headers
        )
    assert r.status_code == 200
    assert r.text == "c"
    assert r.headers["x-request-id"] == "req-42"


@pytest.mark.asyncio
async def test_slash_commands() -> None:
    headers = {"content-type": "application/x-www-form-urlencoded"}
    async with running_app(FakeNetwork()) as client:
        ping = await client.post("/slack/commands", content=b"command=%2Fping", headers=headers)
        usage = await client.post("/slack/commands", content=b"command=%2Fworkflow", headers=headers)
        other = await client.post("/slack/commands", content=b"command=%2Fnope", headers=headers)

    assert ping.json()["response_type"] == "in_channel"
    assert "Pong" in ping.json()["text"]
    assert usage.json()["response_type"] == "ephemeral"
    assert "/api/workflow/execute" in usage.json()["text"]
    assert other.json()["text"].startswith("Unknown command")


@pytest.mark.asyncio
async def test_signed_requests_enforced_when_secret_configured() -> None:
    secret = "s3cret"
    body = json.dumps({"type": "url_verification", "challenge": "signed"}).encode()
    ts = str(int(time.time()))
    good = {
        "content-type": "application/json",
        "x-slack-request-timestamp": ts,
        "x-slack-signature": compute_signature(secret=secret, timestamp=ts, body=body),
    }
    bad = {**good, "x-slack-signature": "v0=" + "0" * 64}

    async with running_app(FakeNetwork(), slack_signing_secret=secret) as client:
        ok = await client.post("/slack/events", content=body, headers=good)
        rejected = await client.post("/slack/events", content=body, headers=bad)
        unsigned = await client.post("/slack/events", content=body)

    assert ok.status_code == 200
    assert ok.text == "signed"
    assert rejected.status_code == 401
    assert unsigned.status_code == 401


# --- Module Notes -----------------------------------------------------------
# The same MockTransport serves every outbound call, so Slack posts are observed exactly
# as the orchestrator emitted them.
