"""
workflow_relay.orchestrator.workflow

Fetch → render → deliver workflow.

Responsibilities:
- Resolve the target services (all configured, or a named subset in request order).
- Fetch every target concurrently; fetch failures arrive as error-shaped results.
- Deliver replies sequentially in resolved order, isolating each service's failure.
- Report an aggregate `WorkflowOutcome` instead of short-circuiting.
"""

from __future__ import annotations

import asyncio
from collections.abc import Callable
from dataclasses import dataclass

import structlog

from workflow_relay.clients.service_fetcher import ServiceFetcher
from workflow_relay.clients.slack import MessageDestination
from workflow_relay.domain.models import ServiceFailure, WorkflowOutcome, WorkflowRequest
from workflow_relay.domain.tree import FetchResult, TreeValue, error_message
from workflow_relay.observability.logging import get_logger
from workflow_relay.rendering.markdown import compose_reply

log = get_logger(__name__)


@dataclass(frozen=True, slots=True)
class _Target:
    name: str
    label: str


class WorkflowOrchestrator:
    def __init__(
        self,
        *,
        fetcher: ServiceFetcher,
        destination: MessageDestination,
        compose: Callable[[str, TreeValue], str] = compose_reply,
    ) -> None:
        self._fetcher = fetcher
        self._destination = destination
        self._compose = compose

    async def run(self, request: WorkflowRequest) -> WorkflowOutcome:
        targets = self._resolve_targets(request.service_names)
        outcome = WorkflowOutcome(attempted=len(targets))

        with structlog.contextvars.bound_contextvars(
            channel=request.channel, thread_ts=request.thread_ts
        ):
            log.info("workflow_started", services=[t.name for t in targets])

            # Fetches overlap; deliveries below stay in resolved order.
            results: list[FetchResult] = await asyncio.gather(
                *(self._fetcher.fetch_by_name(t.name) for t in targets)
            )

            for target, result in zip(targets, results):
                failure = await self._deliver(request, target, result)
                if failure is None:
                    outcome.succeeded += 1
                else:
                    outcome.failures.append(failure)

            log.info(
                "workflow_completed",
                attempted=outcome.attempted,
                succeeded=outcome.succeeded,
                failed=outcome.failed,
            )
        return outcome

    def _resolve_targets(self, service_names: tuple[str, ...] | None) -> list[_Target]:
        if not service_names:
            return [_Target(d.name, d.label) for d in self._fetcher.list_configured()]

        targets: list[_Target] = []
        for name in service_names:
            definition = self._fetcher.get_definition(name)
            # Unknown names still get a reply (the rendered "Service not found" error).
            targets.append(_Target(name, definition.label if definition else name))
        return targets

    async def _deliver(
        self,
        request: WorkflowRequest,
        target: _Target,
        result: FetchResult,
    ) -> ServiceFailure | None:
        fetch_error = error_message(result)
        try:
            text = self._compose(target.label, result)
            await self._destination.post(request.channel, request.thread_ts, text)
        except Exception as e:
            # One service's delivery failure must not stop the remaining services.
            log.error("service_delivery_failed", service=target.name, error=str(e))
            return ServiceFailure(service=target.name, message=str(e) or type(e).__name__)

        if fetch_error is not None:
            return ServiceFailure(service=target.name, message=fetch_error)
        log.info("service_delivered", service=target.name)
        return None


# --- Module Notes -----------------------------------------------------------
# A failed fetch is still delivered (its rendered error body), so the thread always gets
# exactly one reply per targeted service; the outcome records it as a failure.
