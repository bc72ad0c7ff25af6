"""
workflow_relay.rendering

Rendering package.

Responsibilities:
- Turn JSON tree values into Slack mrkdwn text.
"""

from workflow_relay.rendering.markdown import compose_reply, render

__all__ = ["compose_reply", "render"]


# --- Module Notes -----------------------------------------------------------
# Renderers are pure functions; keep I/O and logging out of this package.
