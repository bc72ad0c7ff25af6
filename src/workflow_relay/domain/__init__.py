"""
workflow_relay.domain

Domain package.

Responsibilities:
- Service definitions, workflow request/outcome types, and the JSON tree model.
- Domain exceptions shared across clients, orchestrator and API.
"""

# Package marker.


# --- Module Notes -----------------------------------------------------------
# Nothing in this package performs I/O; clients and the API layer depend on it, never the reverse.
