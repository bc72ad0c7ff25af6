"""
workflow_relay.api.app

FastAPI app factory for the Workflow Relay service.

Responsibilities:
- Build the FastAPI application and register routers/middleware.
- Load the service registry up front so bad configuration fails at startup.
- Own the shared httpx client and the components built on it for the app lifespan.
"""

from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import httpx
from fastapi import FastAPI

from workflow_relay import __version__
from workflow_relay.api.routers.health import router as health_router
from workflow_relay.api.routers.slack import router as slack_router
from workflow_relay.api.routers.workflow import router as workflow_router
from workflow_relay.clients.service_fetcher import ServiceFetcher
from workflow_relay.clients.slack import SlackClient
from workflow_relay.domain.registry import load_service_registry
from workflow_relay.observability.logging import configure_logging, get_logger
from workflow_relay.observability.middleware import RequestContextMiddleware
from workflow_relay.orchestrator.workflow import WorkflowOrchestrator
from workflow_relay.settings import Settings

log = get_logger(__name__)


def create_app(
    *,
    settings: Settings,
    transport: httpx.AsyncBaseTransport | None = None,
) -> FastAPI:
    """
    `transport` replaces the network for the shared client (tests pass an
    `httpx.MockTransport` that plays both the external services and Slack).
    """

    configure_logging(
        service_name=settings.service_name,
        level=settings.log_level,
        json_logs=settings.env != "dev",
    )
    registry = load_service_registry(settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        log.info("startup", env=settings.env, services=registry.names())
        # One long-lived client shared by every fetch and every Slack post.
        http = httpx.AsyncClient(transport=transport, follow_redirects=True)
        fetcher = ServiceFetcher(
            registry=registry,
            http=http,
            retry_delay_seconds=settings.fetch_retry_delay_seconds,
            max_concurrency=settings.fetch_max_concurrency,
        )
        slack = SlackClient(
            http=http,
            token=settings.slack_bot_token,
            base_url=settings.slack_api_base_url,
            timeout_seconds=settings.slack_timeout_seconds,
        )
        app.state.http = http
        app.state.fetcher = fetcher
        app.state.destination = slack
        app.state.orchestrator = WorkflowOrchestrator(fetcher=fetcher, destination=slack)
        try:
            yield
        finally:
            await http.aclose()
            log.info("shutdown")

    app = FastAPI(
        title="Workflow Relay",
        version=__version__,
        docs_url="/docs",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.registry = registry

    app.add_middleware(RequestContextMiddleware)
    app.include_router(health_router, tags=["health"])
    app.include_router(workflow_router)
    app.include_router(slack_router)
    return app


# --- Module Notes -----------------------------------------------------------
# This file is intentionally small: app composition stays here; workflow logic stays
# in the clients/orchestrator layers.
