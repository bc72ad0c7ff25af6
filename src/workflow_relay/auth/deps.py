"""
workflow_relay.auth.deps

FastAPI dependency functions for Slack request authentication.

Responsibilities:
- Read the raw body once and validate the Slack signature headers.
- Hand the verified raw body to the endpoint for its own parsing.
"""

from __future__ import annotations

from fastapi import Depends, HTTPException, Request
from starlette.status import HTTP_401_UNAUTHORIZED

from workflow_relay.api.deps import settings_dep
from workflow_relay.auth.slack_signature import SlackSigningConfig, verify_signature
from workflow_relay.domain.errors import SignatureVerificationError
from workflow_relay.observability.logging import get_logger
from workflow_relay.settings import Settings

log = get_logger(__name__)


async def verify_slack_request(
    request: Request,
    settings: Settings = Depends(settings_dep),
) -> bytes:
    body = await request.body()
    if not settings.slack_signing_secret:
        # Local/dev convenience: signature checks are off without a configured secret.
        return body

    try:
        verify_signature(
            cfg=SlackSigningConfig(secret=settings.slack_signing_secret),
            timestamp=request.headers.get("x-slack-request-timestamp"),
            signature=request.headers.get("x-slack-signature"),
            body=body,
        )
    except SignatureVerificationError as e:
        log.warning("slack_signature_rejected", reason=str(e))
        raise HTTPException(status_code=HTTP_401_UNAUTHORIZED, detail=str(e)) from e
    return body


# --- Module Notes -----------------------------------------------------------
# Endpoints depend on the returned bytes instead of re-reading the request, so the body
# that was verified is exactly the body that gets parsed.
