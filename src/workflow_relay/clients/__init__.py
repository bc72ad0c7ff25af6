"""
workflow_relay.clients

Outbound client package.

Responsibilities:
- Fetch JSON payloads from configured external services.
- Deliver rendered replies to Slack threads.
"""

# Package marker.


# --- Module Notes -----------------------------------------------------------
# The orchestrator should depend on this boundary (not on httpx or routers directly).
