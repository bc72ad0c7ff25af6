"""
workflow_relay.domain.registry

Ordered, name-indexed set of service definitions.

Responsibilities:
- Enforce unique service names.
- Provide O(1) lookup by name while preserving configuration order.
- Build the registry from settings (inline definitions plus an optional JSON file).
"""

from __future__ import annotations

import json
from collections.abc import Iterable, Iterator
from pathlib import Path
from typing import TYPE_CHECKING, Any

from pydantic import TypeAdapter, ValidationError

from workflow_relay.domain.errors import ConfigurationError
from workflow_relay.domain.models import ServiceDefinition

if TYPE_CHECKING:
    from workflow_relay.settings import Settings

_definitions_adapter = TypeAdapter(list[ServiceDefinition])


class ServiceRegistry:
    """Read-only after construction; safe to share across concurrent fetches."""

    def __init__(self, definitions: Iterable[ServiceDefinition] = ()) -> None:
        self._by_name: dict[str, ServiceDefinition] = {}
        for definition in definitions:
            if definition.name in self._by_name:
                raise ConfigurationError(f"Duplicate service name: {definition.name}")
            self._by_name[definition.name] = definition

    def get(self, name: str) -> ServiceDefinition | None:
        return self._by_name.get(name)

    def names(self) -> list[str]:
        return list(self._by_name)

    def definitions(self) -> list[ServiceDefinition]:
        # dict preserves insertion order == configuration order.
        return list(self._by_name.values())

    def __contains__(self, name: object) -> bool:
        return name in self._by_name

    def __iter__(self) -> Iterator[ServiceDefinition]:
        return iter(self._by_name.values())

    def __len__(self) -> int:
        return len(self._by_name)


def load_services_file(path: Path) -> list[ServiceDefinition]:
    """
    Read service definitions from JSON.

    Accepts either a bare list of definitions or an object with a `services` list.
    """

    try:
        raw: Any = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, ValueError) as e:
        raise ConfigurationError(f"Cannot read services file {path}: {e}") from e

    if isinstance(raw, dict):
        raw = raw.get("services", [])
    try:
        return _definitions_adapter.validate_python(raw)
    except ValidationError as e:
        raise ConfigurationError(f"Invalid service definitions in {path}: {e}") from e


def load_service_registry(settings: Settings) -> ServiceRegistry:
    definitions = list(settings.services)
    if settings.services_file is not None:
        definitions.extend(load_services_file(settings.services_file))
    return ServiceRegistry(definitions)


# --- Module Notes -----------------------------------------------------------
# The registry is built once per app lifespan; nothing mutates it afterwards.
