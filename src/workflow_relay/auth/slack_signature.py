"""
workflow_relay.auth.slack_signature

Slack request signing (v0) helpers.

Responsibilities:
- Compute the `X-Slack-Signature` value for a body/timestamp pair.
- Validate inbound signatures in constant time and reject stale timestamps (replay window).
"""

from __future__ import annotations

import hashlib
import hmac
import time
from dataclasses import dataclass

from workflow_relay.domain.errors import SignatureVerificationError

SIGNATURE_VERSION = "v0"
MAX_CLOCK_SKEW_SECONDS = 60 * 5


@dataclass(frozen=True, slots=True)
class SlackSigningConfig:
    secret: str
    max_skew_seconds: int = MAX_CLOCK_SKEW_SECONDS


def compute_signature(*, secret: str, timestamp: str, body: bytes) -> str:
    base = f"{SIGNATURE_VERSION}:{timestamp}:".encode() + body
    digest = hmac.new(secret.encode(), base, hashlib.sha256).hexdigest()
    return f"{SIGNATURE_VERSION}={digest}"


def verify_signature(
    *,
    cfg: SlackSigningConfig,
    timestamp: str | None,
    signature: str | None,
    body: bytes,
    now: float | None = None,
) -> None:
    if not timestamp or not signature:
        raise SignatureVerificationError("Missing Slack signature headers")

    try:
        ts = int(timestamp)
    except ValueError as e:
        raise SignatureVerificationError("Invalid Slack request timestamp") from e

    current = time.time() if now is None else now
    if abs(current - ts) > cfg.max_skew_seconds:
        raise SignatureVerificationError("Stale Slack request timestamp")

    expected = compute_signature(secret=cfg.secret, timestamp=timestamp, body=body)
    if not hmac.compare_digest(expected, signature):
        raise SignatureVerificationError("Slack signature mismatch")


# --- Module Notes -----------------------------------------------------------
# Slack signs the raw request body, so callers must verify before any form/JSON parsing.
