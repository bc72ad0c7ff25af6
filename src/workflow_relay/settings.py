"""
workflow_relay.settings

Central configuration model (Pydantic Settings).

Responsibilities:
- Provide strongly-typed, env-driven settings for all layers.
- Hide secrets from repr/logging (Slack bot token and signing secret).
- Carry the external service definitions the workflow fans out to.
- Offer a cached settings instance for dependency injection.
"""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from workflow_relay.domain.models import ServiceDefinition


class Settings(BaseSettings):
    """
    Enterprise pattern:
    - Strict env-driven configuration
    - Defaults safe for local dev
    - Single settings object injected across layers
    """

    model_config = SettingsConfigDict(env_prefix="RELAY_", case_sensitive=False)

    env: Literal["dev", "test", "prod"] = "dev"
    service_name: str = "workflow-relay"
    log_level: str = "INFO"

    api_host: str = "0.0.0.0"
    api_port: int = 8080

    # Slack
    slack_bot_token: str = Field(default="", repr=False)
    # Empty secret disables request signature checks (local dev only).
    slack_signing_secret: str = Field(default="", repr=False)
    slack_api_base_url: str = "https://slack.com/api"
    slack_timeout_seconds: float = Field(default=10.0, gt=0)

    # External services. `services` arrives as JSON in RELAY_SERVICES;
    # `services_file` entries are appended after it.
    services: list[ServiceDefinition] = Field(default_factory=list)
    services_file: Path | None = None

    # Fetch pipeline
    fetch_retry_delay_seconds: float = Field(default=1.0, ge=0)
    fetch_max_concurrency: int = Field(default=8, ge=1, le=256)


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    # Cache avoids re-parsing env vars for each request dependency.
    return Settings()


# --- Module Notes -----------------------------------------------------------
# Service definitions are validated here but indexed in `domain.registry`; the
# registry is the only place that enforces name uniqueness.
