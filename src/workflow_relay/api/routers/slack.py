"""
workflow_relay.api.routers.slack

Slack Events API and slash-command endpoints.

Responsibilities:
- Answer the Events API URL verification handshake.
- Reply to app mentions with usage help in the mention's thread.
- Answer `/ping` and `/workflow` slash commands.

Every event is acknowledged with 200 so Slack does not redeliver it.
"""

from __future__ import annotations

import json
from typing import Any
from urllib.parse import parse_qs

from fastapi import APIRouter, Depends
from starlette.responses import PlainTextResponse

from workflow_relay.api.deps import destination_dep
from workflow_relay.auth.deps import verify_slack_request
from workflow_relay.clients.slack import MessageDestination
from workflow_relay.observability.logging import get_logger

log = get_logger(__name__)

router = APIRouter(prefix="/slack", tags=["slack"])

MENTION_HELP = (
    "👋 Hello! I'm your workflow bot.\n"
    "\n"
    "**Available endpoints:**\n"
    "• `POST /api/workflow/execute` - Run all configured services\n"
    "• `GET /api/workflow/services` - List available services\n"
    "• `POST /api/workflow/execute/services` - Run specific services"
)

WORKFLOW_USAGE = (
    "Use the REST API endpoints to trigger workflows:\n"
    "• `POST /api/workflow/execute` - Execute all services\n"
    "• `GET /api/workflow/services` - List services"
)


@router.post("/events")
async def slack_events(
    body: bytes = Depends(verify_slack_request),
    destination: MessageDestination = Depends(destination_dep),
) -> PlainTextResponse:
    try:
        event: Any = json.loads(body)
    except ValueError:
        log.warning("slack_event_unparseable")
        return PlainTextResponse("OK")
    if not isinstance(event, dict):
        return PlainTextResponse("OK")

    event_type = event.get("type")
    if event_type == "url_verification":
        return PlainTextResponse(str(event.get("challenge", "")))

    if event_type == "event_callback":
        inner = event.get("event") or {}
        if isinstance(inner, dict) and inner.get("type") == "app_mention":
            channel = inner.get("channel")
            # Mentions inside a thread answer in that thread; top-level mentions start one.
            thread_ts = inner.get("thread_ts") or inner.get("ts")
            if not channel or not thread_ts:
                log.warning("slack_mention_missing_thread")
                return PlainTextResponse("OK")
            try:
                await destination.post(str(channel), str(thread_ts), MENTION_HELP)
            except Exception:
                log.exception("slack_mention_reply_failed", channel=channel)

    return PlainTextResponse("OK")


@router.post("/commands")
async def slack_commands(body: bytes = Depends(verify_slack_request)) -> dict[str, str]:
    form = parse_qs(body.decode("utf-8", errors="replace"))
    command = (form.get("command") or [""])[0]

    if command == "/ping":
        return {
            "response_type": "in_channel",
            "text": "🏓 Pong! The workflow bot is running and ready to process external APIs.",
        }
    if command == "/workflow":
        return {"response_type": "ephemeral", "text": WORKFLOW_USAGE}
    return {
        "response_type": "ephemeral",
        "text": "Unknown command. Available commands: `/ping`, `/workflow`",
    }


# --- Module Notes -----------------------------------------------------------
# Both endpoints take the raw body from `verify_slack_request`; Slack signs the bytes,
# not the parsed payload.
