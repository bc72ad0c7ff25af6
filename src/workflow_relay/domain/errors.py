"""
workflow_relay.domain.errors

Domain-specific exceptions.

Responsibilities:
- Give each failure class a stable type the API layer can map to a status code.
"""

from __future__ import annotations


class RelayError(Exception):
    """Base class for all workflow relay errors."""


class ConfigurationError(RelayError):
    """Service definitions are invalid, duplicated, or could not be read."""


class DeliveryError(RelayError):
    """
    The destination rejected or failed to accept a message.
    `code` carries the destination's machine-readable error (e.g. Slack `channel_not_found`).
    """

    def __init__(self, message: str, *, code: str | None = None) -> None:
        super().__init__(message)
        self.code = code


class SignatureVerificationError(RelayError):
    """An inbound Slack request failed signature or timestamp validation."""


# --- Module Notes -----------------------------------------------------------
# Fetch failures are deliberately absent here: they are represented as data
# (see `domain.tree.error_result`), never raised.
