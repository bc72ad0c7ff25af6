"""
workflow_relay.clients.slack

Slack Web API client used to deliver rendered replies.

Responsibilities:
- Post mrkdwn section blocks as threaded replies (`chat.postMessage`).
- Turn transport errors, HTTP errors and `"ok": false` responses into `DeliveryError`.
"""

from __future__ import annotations

from typing import Any, Protocol

import httpx

from workflow_relay.domain.errors import DeliveryError
from workflow_relay.observability.logging import get_logger

log = get_logger(__name__)

# Shown by clients that cannot display blocks (notifications, screen readers).
FALLBACK_TEXT = "API Response"


class MessageDestination(Protocol):
    async def post(self, channel: str, thread_ts: str, text: str) -> None:
        """Deliver `text` to the thread; raise on failure."""

        ...


class SlackClient:
    def __init__(
        self,
        *,
        http: httpx.AsyncClient,
        token: str,
        base_url: str = "https://slack.com/api",
        timeout_seconds: float = 10.0,
    ) -> None:
        self._http = http
        self._token = token
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout_seconds

    def _authz(self) -> dict[str, str]:
        return {"Authorization": f"Bearer {self._token}"}

    async def post(self, channel: str, thread_ts: str, text: str) -> None:
        payload: dict[str, Any] = {
            "channel": channel,
            "thread_ts": thread_ts,
            "text": FALLBACK_TEXT,
            "blocks": [
                {"type": "section", "text": {"type": "mrkdwn", "text": text}},
            ],
        }
        try:
            r = await self._http.post(
                f"{self._base_url}/chat.postMessage",
                headers=self._authz(),
                json=payload,
                timeout=self._timeout,
            )
        except httpx.HTTPError as e:
            raise DeliveryError(f"Error posting to Slack thread: {e}") from e

        if r.is_error:
            raise DeliveryError(f"Error posting to Slack thread: HTTP {r.status_code}")

        try:
            body = r.json()
        except ValueError as e:
            raise DeliveryError("Error posting to Slack thread: invalid response body") from e

        if not isinstance(body, dict) or not body.get("ok"):
            code = body.get("error") if isinstance(body, dict) else None
            raise DeliveryError(f"Failed to post message to Slack: {code or 'unknown_error'}", code=code)

        log.info("slack_message_posted", channel=channel, thread_ts=thread_ts)


# --- Module Notes -----------------------------------------------------------
# The client shares the app-wide httpx.AsyncClient; only the bearer token is Slack-specific.
