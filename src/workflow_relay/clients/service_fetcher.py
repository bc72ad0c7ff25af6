"""
workflow_relay.clients.service_fetcher

HTTP client boundary used by the orchestrator to call external JSON services.

Responsibilities:
- Issue one GET per attempt with the service's configured headers.
- Enforce a per-attempt deadline and a fixed-delay retry budget.
- Normalize every failure into an error-shaped result; `fetch` never raises.
"""

from __future__ import annotations

import asyncio
import warnings

import httpx

from workflow_relay.domain.models import ServiceDefinition
from workflow_relay.domain.registry import ServiceRegistry
from workflow_relay.domain.tree import FetchResult, error_result, parse_json
from workflow_relay.observability.logging import get_logger

log = get_logger(__name__)

# Service name used by the single-endpoint flow that predates service configuration.
LEGACY_PRIMARY_SERVICE = "primary-api"


class ServiceFetcher:
    """
    Stateless between calls apart from the shared HTTP client and a concurrency bound,
    so it is safe to fetch different services concurrently.
    """

    def __init__(
        self,
        *,
        registry: ServiceRegistry,
        http: httpx.AsyncClient,
        retry_delay_seconds: float = 1.0,
        max_concurrency: int = 8,
    ) -> None:
        self._registry = registry
        self._http = http
        self._retry_delay = retry_delay_seconds
        # Bounds in-flight attempts across every caller sharing this fetcher.
        self._limit = asyncio.Semaphore(max_concurrency)

    def list_configured(self) -> list[ServiceDefinition]:
        return self._registry.definitions()

    def get_definition(self, name: str) -> ServiceDefinition | None:
        return self._registry.get(name)

    async def fetch_by_name(self, name: str) -> FetchResult:
        definition = self._registry.get(name)
        if definition is None:
            # Unknown names never reach the network and are not retried.
            log.warning("service_not_found", service=name)
            return error_result(f"Service not found: {name}")
        return await self.fetch(definition)

    async def fetch(self, definition: ServiceDefinition) -> FetchResult:
        attempts = definition.retry_attempts + 1
        last_error = "no attempt made"

        for attempt in range(1, attempts + 1):
            try:
                async with self._limit:
                    return await self._attempt(definition)
            except Exception as e:
                last_error = _describe_failure(e, definition)
                log.warning(
                    "service_fetch_attempt_failed",
                    service=definition.name,
                    attempt=attempt,
                    attempts=attempts,
                    error=last_error,
                )
            if attempt < attempts and self._retry_delay > 0:
                await asyncio.sleep(self._retry_delay)

        log.error(
            "service_fetch_failed",
            service=definition.name,
            attempts=attempts,
            error=last_error,
        )
        return error_result(f"Failed to fetch from {definition.label}: {last_error}")

    async def fetch_data(self) -> FetchResult:
        """Deprecated single-endpoint fetch; use `fetch_by_name` or `fetch`."""

        warnings.warn(
            "fetch_data() is deprecated; configure services and use fetch_by_name()",
            DeprecationWarning,
            stacklevel=2,
        )
        return await self.fetch_by_name(LEGACY_PRIMARY_SERVICE)

    async def _attempt(self, definition: ServiceDefinition) -> FetchResult:
        # The deadline covers connect, request and body read; expiry cancels the request.
        async with asyncio.timeout(definition.timeout_seconds):
            r = await self._http.get(
                definition.url,
                headers=definition.headers,
                timeout=definition.timeout_seconds,
            )
            r.raise_for_status()
            return parse_json(r.content)


def _describe_failure(exc: Exception, definition: ServiceDefinition) -> str:
    if isinstance(exc, (TimeoutError, httpx.TimeoutException)):
        return f"timed out after {definition.timeout_millis}ms"
    if isinstance(exc, httpx.HTTPStatusError):
        return f"HTTP {exc.response.status_code} {exc.response.reason_phrase}".rstrip()
    if isinstance(exc, ValueError):
        return f"invalid JSON response: {exc}"
    detail = str(exc)
    return f"{type(exc).__name__}: {detail}" if detail else type(exc).__name__


# --- Module Notes -----------------------------------------------------------
# Retries cover transport errors, non-2xx statuses and malformed bodies alike; a
# parse failure consumes the attempt that produced it and nothing more.
