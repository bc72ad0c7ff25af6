"""
workflow_relay.api.routers

HTTP routers (health, workflow, Slack).
"""

# Package marker.
