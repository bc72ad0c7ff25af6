"""
workflow_relay.api.deps

FastAPI dependency wiring for the API layer.

Responsibilities:
- Provide dependency functions for settings and the app-scoped workflow components.
- Encapsulate app.state access patterns.
"""

from __future__ import annotations

from fastapi import Request

from workflow_relay.clients.service_fetcher import ServiceFetcher
from workflow_relay.clients.slack import MessageDestination
from workflow_relay.orchestrator.workflow import WorkflowOrchestrator
from workflow_relay.settings import Settings


def settings_dep(request: Request) -> Settings:
    # Settings are passed to `create_app` explicitly so tests never depend on the env.
    return request.app.state.settings  # type: ignore[attr-defined]


def fetcher_dep(request: Request) -> ServiceFetcher:
    # Components below are created in the app lifespan (see `workflow_relay.api.app`).
    return request.app.state.fetcher  # type: ignore[attr-defined]


def destination_dep(request: Request) -> MessageDestination:
    return request.app.state.destination  # type: ignore[attr-defined]


def orchestrator_dep(request: Request) -> WorkflowOrchestrator:
    return request.app.state.orchestrator  # type: ignore[attr-defined]
