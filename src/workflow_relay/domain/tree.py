"""
workflow_relay.domain.tree

JSON tree model consumed by the renderer.

Responsibilities:
- Parse response bodies into plain dict/list/scalar trees, keeping number source text.
- Synthesize error-shaped results so failures flow through the normal render path.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any, TypeAlias, Union


@dataclass(frozen=True, slots=True)
class JsonNumber:
    """
    A JSON number kept as its exact source text.

    Rendering writes `text` back out, so `1E+400`, `0.10000000000000000001` or
    `12345678901234567890` survive unchanged instead of round-tripping through float.
    """

    text: str

    @property
    def value(self) -> int | float:
        try:
            return int(self.text)
        except ValueError:
            return float(self.text)

    def __str__(self) -> str:
        return self.text


TreeValue: TypeAlias = Union[
    dict[str, "TreeValue"], list["TreeValue"], str, JsonNumber, int, float, bool, None
]

# A fetch outcome: parsed payload on success, `error_result(...)` on failure.
FetchResult: TypeAlias = TreeValue


def _reject_constant(name: str) -> Any:
    # NaN/Infinity are not valid JSON; treat them as a malformed body.
    raise ValueError(f"invalid JSON constant: {name}")


def parse_json(body: str | bytes) -> TreeValue:
    """
    Parse a JSON document into a tree value.

    Raises `ValueError` (including `json.JSONDecodeError`) for malformed input.
    """

    return json.loads(
        body,
        parse_int=JsonNumber,
        parse_float=JsonNumber,
        parse_constant=_reject_constant,
    )


class ErrorResult(dict):
    """
    Marker type for synthesized failures.

    Renders like any other object; only its type tells it apart from a service
    payload that happens to carry the same keys.
    """


def error_result(message: str) -> ErrorResult:
    return ErrorResult(error=True, message=message)


def is_error(result: FetchResult) -> bool:
    return isinstance(result, ErrorResult)


def error_message(result: FetchResult) -> str | None:
    if not is_error(result):
        return None
    return str(result["message"])  # type: ignore[index]


# --- Module Notes -----------------------------------------------------------
# A service that answers 200 with {"error": true, "message": ...} renders exactly
# like a synthesized error but is still counted as a successful fetch.
