"""
workflow_relay.orchestrator

Workflow orchestration package.

Responsibilities:
- Resolve target services, fan out fetches, and deliver one reply per service in order.
"""

from workflow_relay.orchestrator.workflow import WorkflowOrchestrator

__all__ = ["WorkflowOrchestrator"]


# --- Module Notes -----------------------------------------------------------
# Public surface area should remain small and stable; the API layer only calls `run`.
