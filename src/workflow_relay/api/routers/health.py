"""
workflow_relay.api.routers.health

Health and readiness endpoints.

Responsibilities:
- Provide liveness probe (`/healthz`).
- Provide readiness probe (`/readyz`) reporting the configured service count.
"""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Request

router = APIRouter()


@router.get("/healthz")
async def healthz() -> dict[str, str]:
    return {"status": "ok"}


@router.get("/readyz")
async def readyz(request: Request) -> dict[str, Any]:
    # Ready once the lifespan has built the workflow components.
    if getattr(request.app.state, "orchestrator", None) is None:
        return {"status": "starting", "services": 0}
    return {"status": "ready", "services": len(request.app.state.registry)}
