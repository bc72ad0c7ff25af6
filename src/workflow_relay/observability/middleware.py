"""
workflow_relay.observability.middleware

Request-scoped logging context for the HTTP surface.

Responsibilities:
- Propagate or mint a request id and echo it on the response.
- Bind Slack delivery metadata (retry number and reason) so redelivered events
  can be told apart from first deliveries in the logs.
- Emit one completion record per request with status and latency.
"""

from __future__ import annotations

import time
import uuid
from collections.abc import Mapping

import structlog
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

from workflow_relay.observability.logging import get_logger

log = get_logger(__name__)

REQUEST_ID_HEADER = "x-request-id"


def slack_retry_context(headers: Mapping[str, str]) -> dict[str, int | str]:
    """Log fields for Slack's `X-Slack-Retry-*` headers; empty on a first delivery."""

    context: dict[str, int | str] = {}
    retry_num = headers.get("x-slack-retry-num")
    if retry_num:
        context["slack_retry_num"] = int(retry_num) if retry_num.isdigit() else retry_num
    retry_reason = headers.get("x-slack-retry-reason")
    if retry_reason:
        context["slack_retry_reason"] = retry_reason
    return context


class RequestContextMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next) -> Response:
        request_id = request.headers.get(REQUEST_ID_HEADER) or str(uuid.uuid4())
        structlog.contextvars.clear_contextvars()
        structlog.contextvars.bind_contextvars(
            request_id=request_id,
            path=request.url.path,
            method=request.method,
            **slack_retry_context(request.headers),
        )
        started = time.perf_counter()
        try:
            response: Response = await call_next(request)
            log.info(
                "http_request_completed",
                status_code=response.status_code,
                duration_ms=round((time.perf_counter() - started) * 1000, 1),
            )
        finally:
            structlog.contextvars.clear_contextvars()

        response.headers[REQUEST_ID_HEADER] = request_id
        return response
