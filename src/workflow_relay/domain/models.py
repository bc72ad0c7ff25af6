"""
workflow_relay.domain.models

Domain models for the fetch/render/deliver workflow.

Responsibilities:
- `ServiceDefinition`: static per-endpoint configuration (validated with Pydantic).
- `WorkflowRequest`: destination thread plus an optional service subset.
- `WorkflowOutcome` / `ServiceFailure`: aggregate result reported back to callers.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from pydantic import AliasChoices, BaseModel, ConfigDict, Field


class ServiceDefinition(BaseModel):
    """
    One external JSON endpoint the workflow can call.

    Accepts both snake_case keys and the camelCase keys used by existing
    service configuration files (`displayName`, `timeout`, `retryAttempts`).
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    name: str = Field(min_length=1, max_length=128)
    url: str = Field(min_length=1)
    display_name: str | None = Field(
        default=None,
        validation_alias=AliasChoices("display_name", "displayName"),
    )
    timeout_millis: int = Field(
        default=5000,
        gt=0,
        validation_alias=AliasChoices("timeout_millis", "timeoutMillis", "timeout"),
    )
    retry_attempts: int = Field(
        default=1,
        ge=0,
        validation_alias=AliasChoices("retry_attempts", "retryAttempts"),
    )
    headers: dict[str, str] = Field(default_factory=dict)

    @property
    def label(self) -> str:
        # Human-facing name used in reply headers and error messages.
        return self.display_name or self.name

    @property
    def timeout_seconds(self) -> float:
        return self.timeout_millis / 1000.0

    def summary(self) -> dict[str, Any]:
        """Listing shape used by the services endpoint."""

        return {
            "name": self.name,
            "displayName": self.label,
            "url": self.url,
            "timeout": self.timeout_millis,
            "retryAttempts": self.retry_attempts,
        }


@dataclass(frozen=True, slots=True)
class WorkflowRequest:
    # Destination thread; validated non-empty by the API layer.
    channel: str
    thread_ts: str
    # None or empty means "every configured service, in configuration order".
    service_names: tuple[str, ...] | None = None


@dataclass(frozen=True, slots=True)
class ServiceFailure:
    service: str
    message: str

    def as_dict(self) -> dict[str, str]:
        return {"service": self.service, "message": self.message}


@dataclass(slots=True)
class WorkflowOutcome:
    """
    Aggregate result of one workflow run.

    `succeeded` counts services whose fetch returned data and whose reply was delivered.
    """

    attempted: int = 0
    succeeded: int = 0
    failures: list[ServiceFailure] = field(default_factory=list)

    @property
    def failed(self) -> int:
        return len(self.failures)

    @property
    def ok(self) -> bool:
        return not self.failures

    def as_dict(self) -> dict[str, Any]:
        return {
            "attempted": self.attempted,
            "succeeded": self.succeeded,
            "failures": [f.as_dict() for f in self.failures],
        }


# --- Module Notes -----------------------------------------------------------
# ServiceDefinition is a Pydantic model because it is parsed from env/JSON; the
# request/outcome types are plain dataclasses since they never cross a parse boundary.
