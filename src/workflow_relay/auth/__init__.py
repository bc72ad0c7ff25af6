"""
workflow_relay.auth

Inbound request authentication package.

Responsibilities:
- Slack request signature helpers and validation.
- FastAPI dependency that guards the Slack endpoints.
"""

# Package marker.


# --- Module Notes -----------------------------------------------------------
# This package is intentionally standalone so it can be reused across Slack-facing services.
