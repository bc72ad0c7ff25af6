from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, ConfigDict, Field
from starlette.status import HTTP_400_BAD_REQUEST, HTTP_500_INTERNAL_SERVER_ERROR

from workflow_relay.api.deps import fetcher_dep, orchestrator_dep
from workflow_relay.clients.service_fetcher import ServiceFetcher
from workflow_relay.domain.models import WorkflowOutcome, WorkflowRequest
from workflow_relay.observability.logging import get_logger
from workflow_relay.orchestrator.workflow import WorkflowOrchestrator

log = get_logger(__name__)

router = APIRouter(prefix="/api/workflow", tags=["workflow"])


class WorkflowBody(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    channel: str | None = None
    thread_ts: str | None = Field(default=None, alias="threadTs")


class WorkflowServicesBody(WorkflowBody):
    service_names: list[str] | None = Field(default=None, alias="serviceNames")


def _thread_request(body: WorkflowBody, detail: str) -> WorkflowRequest:
    channel = (body.channel or "").strip()
    thread_ts = (body.thread_ts or "").strip()
    if not channel or not thread_ts:
        raise HTTPException(status_code=HTTP_400_BAD_REQUEST, detail=detail)
    return WorkflowRequest(channel=channel, thread_ts=thread_ts)


async def _run(orchestrator: WorkflowOrchestrator, request: WorkflowRequest) -> WorkflowOutcome:
    try:
        return await orchestrator.run(request)
    except Exception as e:
        log.exception("workflow_failed")
        raise HTTPException(
            status_code=HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Internal server error: {e}",
        ) from e


@router.post("/trigger")
async def trigger_workflow(
    body: WorkflowBody,
    orchestrator: WorkflowOrchestrator = Depends(orchestrator_dep),
) -> dict[str, Any]:
    # Legacy single-call entry point; now runs every configured service.
    request = _thread_request(body, "Missing required fields: channel and threadTs")
    outcome = await _run(orchestrator, request)
    return {
        "status": "success" if outcome.ok else "partial",
        "message": "Response posted to Slack thread",
        "failures": [f.as_dict() for f in outcome.failures],
    }


@router.post("/execute")
async def execute_workflow(
    body: WorkflowBody,
    orchestrator: WorkflowOrchestrator = Depends(orchestrator_dep),
) -> dict[str, Any]:
    request = _thread_request(body, "Missing required fields: channel and threadTs")
    outcome = await _run(orchestrator, request)
    return {
        "message": "Workflow executed successfully",
        "servicesProcessed": outcome.attempted,
        "succeeded": outcome.succeeded,
        "failures": [f.as_dict() for f in outcome.failures],
    }


@router.post("/execute/services")
async def execute_workflow_for_services(
    body: WorkflowServicesBody,
    orchestrator: WorkflowOrchestrator = Depends(orchestrator_dep),
) -> dict[str, Any]:
    detail = "Missing required fields: channel, threadTs, and serviceNames"
    base = _thread_request(body, detail)
    names = [n.strip() for n in body.service_names or [] if n and n.strip()]
    if not names:
        raise HTTPException(status_code=HTTP_400_BAD_REQUEST, detail=detail)

    request = WorkflowRequest(
        channel=base.channel,
        thread_ts=base.thread_ts,
        service_names=tuple(names),
    )
    outcome = await _run(orchestrator, request)
    return {
        "message": "Workflow executed successfully for specified services",
        "servicesProcessed": outcome.attempted,
        "services": names,
        "succeeded": outcome.succeeded,
        "failures": [f.as_dict() for f in outcome.failures],
    }


@router.get("/services")
async def list_services(fetcher: ServiceFetcher = Depends(fetcher_dep)) -> dict[str, Any]:
    services = [d.summary() for d in fetcher.list_configured()]
    return {"services": services, "totalServices": len(services)}
